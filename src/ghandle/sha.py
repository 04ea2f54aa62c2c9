"""Content-hash identity type."""

from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


class Sha(str):
    """
    Opaque git object identifier.

    Equality, ordering and hashing are those of the underlying string, so a
    ``Sha`` can be used as a dict key, a set member or a URL segment. The
    value is not checked for length or hex charset.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Sha({str.__repr__(self)})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def as_sha(value: Any) -> Sha:
    """Coerce a string or any object carrying a ``sha`` attribute into a Sha."""
    if isinstance(value, Sha):
        return value
    if isinstance(value, str):
        return Sha(value)
    sha = getattr(value, "sha", None)
    if sha is None:
        raise TypeError(f"Cannot derive a sha from {type(value).__name__}")
    return Sha(sha)
