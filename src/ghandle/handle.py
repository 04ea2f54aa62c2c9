"""Endpoint and properties capability shared by every handle."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from .client import GitHubClient

logger = logging.getLogger(__name__)

T = TypeVar("T")
H = TypeVar("H", bound="GitHubHandle")


def dump_payload(payload: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Render a request payload as JSON-ready data."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(payload)


class GitHubHandle(ABC):
    """
    Lightweight reference to a remote resource.

    A handle derives its endpoint purely from its ownership chain, so every
    subclass only has to say who its parent is and where it lives. Handles are
    immutable; writes go to the server and return the same handle.
    """

    content_model: ClassVar[Any] = dict

    @abstractmethod
    def get_client(self) -> "GitHubClient":
        ...

    @abstractmethod
    def get_endpoint(self) -> str:
        ...

    @abstractmethod
    def get_parent(self) -> Any:
        ...

    def get_content(self) -> Any:
        """Fetch the canonical representation of this resource."""
        return self.get_properties(self.content_model)

    def get_properties(self, model: type[T]) -> T:
        """
        Fetch this resource and validate it into ``model``.

        Pick a narrow model to read only the fields you need; fields the model
        does not declare are ignored.
        """
        logger.debug("Fetching properties of %s as %s", self.get_endpoint(), model)
        return self.get_client().get(self.get_endpoint()).json(model)

    def set_properties(self: H, payload: BaseModel | Mapping[str, Any]) -> H:
        """PATCH ``payload`` onto this resource; the response body is not read back."""
        logger.debug("Updating properties of %s", self.get_endpoint())
        self.get_client().patch(self.get_endpoint(), json=dump_payload(payload))
        return self
