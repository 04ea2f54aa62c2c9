"""Git trees and tree entries."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from .client import GitHubClient
from .handle import GitHubHandle
from .sha import Sha, as_sha

if TYPE_CHECKING:
    from .commit import Commit
    from .repository import Repository

logger = logging.getLogger(__name__)

OCTAL_DIGITS = frozenset("01234567")


class TreeEntryMode(IntEnum):
    FILE = 0o100644
    EXECUTABLE = 0o100755
    DIRECTORY = 0o040000
    COMMIT = 0o160000
    LINK = 0o120000


def encode_mode(mode: int) -> str:
    """Render a file mode as git does: six octal digits, zero padded."""
    return format(int(mode), "06o")


def decode_mode(value: str) -> int:
    if not value or not set(value) <= OCTAL_DIGITS:
        raise ValueError(f"Invalid octal file mode: '{value}'")
    return int(value, 8)


def _coerce_mode(value: Any) -> Any:
    if isinstance(value, str):
        return decode_mode(value)
    if isinstance(value, IntEnum):
        return int(value)
    return value


Mode = Annotated[
    int,
    BeforeValidator(_coerce_mode),
    PlainSerializer(encode_mode, return_type=str),
]


class _TreeEntryBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    mode: Mode
    sha: Sha

    default_mode: ClassVar[TreeEntryMode] = TreeEntryMode.FILE

    @classmethod
    def of(cls, source: Any, path: str, mode: int | None = None):
        """Build an entry for ``source`` (anything with a sha) at ``path``."""
        return cls(path=path, mode=cls.default_mode if mode is None else mode, sha=as_sha(source))


class TreeEntryBlob(_TreeEntryBase):
    type: Literal["blob"] = "blob"


class TreeEntryTree(_TreeEntryBase):
    type: Literal["tree"] = "tree"

    default_mode: ClassVar[TreeEntryMode] = TreeEntryMode.DIRECTORY


class TreeEntryCommit(_TreeEntryBase):
    """Submodule pointer."""

    type: Literal["commit"] = "commit"

    default_mode: ClassVar[TreeEntryMode] = TreeEntryMode.COMMIT


TreeEntry = Annotated[
    Union[TreeEntryBlob, TreeEntryTree, TreeEntryCommit],
    Field(discriminator="type"),
]


class TreeInfo(BaseModel):
    sha: Sha
    tree: list[TreeEntry] = Field(default_factory=list)
    truncated: bool = False


def _dump_entries(entries: Sequence[TreeEntry]) -> list[dict[str, Any]]:
    return [entry.model_dump(mode="json") for entry in entries]


@dataclass(frozen=True)
class Tree(GitHubHandle):
    """A tree object and its entries, in server order."""

    repository: "Repository"
    sha: Sha
    entries: tuple[TreeEntry, ...]

    content_model: ClassVar[Any] = TreeInfo

    @classmethod
    def _from_info(cls, repository: "Repository", info: TreeInfo) -> "Tree":
        if info.truncated:
            logger.warning("Tree %s in %s was truncated by the server", info.sha, repository)
        return cls(repository, info.sha, tuple(info.tree))

    @classmethod
    def create(cls, repository: "Repository", entries: Sequence[TreeEntry]) -> "Tree":
        payload = {"tree": _dump_entries(entries)}
        info = repository.get_client().post(f"repos/{repository}/git/trees", json=payload).json(TreeInfo)
        logger.info("Created tree %s in %s (%d entries)", info.sha, repository, len(entries))
        return cls._from_info(repository, info)

    @classmethod
    def create_with_base(cls, repository: "Repository", base: "Commit", entries: Sequence[TreeEntry]) -> "Tree":
        """Create a tree layering ``entries`` over the tree of ``base``."""
        base_tree = base.get_tree(recursive=False)
        payload = {"base_tree": base_tree.sha, "tree": _dump_entries(entries)}
        info = repository.get_client().post(f"repos/{repository}/git/trees", json=payload).json(TreeInfo)
        logger.info("Created tree %s over %s in %s", info.sha, base_tree.sha, repository)
        return cls._from_info(repository, info)

    @classmethod
    def fetch(cls, repository: "Repository", sha: Any, recursive: bool = False) -> "Tree":
        params = {"recursive": "true"} if recursive else None
        info = repository.get_client().get(f"repos/{repository}/git/trees/{as_sha(sha)}", params=params).json(TreeInfo)
        return cls._from_info(repository, info)

    def get_client(self) -> GitHubClient:
        return self.repository.get_client()

    def get_parent(self) -> "Repository":
        return self.repository

    def get_endpoint(self) -> str:
        return f"repos/{self.repository}/git/trees/{self.sha}"

    def __iter__(self) -> Iterator[TreeEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> TreeEntry:
        return self.entries[index]

    def __str__(self) -> str:
        return str(self.sha)


__all__ = [
    "TreeEntryMode",
    "TreeEntryBlob",
    "TreeEntryTree",
    "TreeEntryCommit",
    "TreeEntry",
    "TreeInfo",
    "Tree",
    "encode_mode",
    "decode_mode",
]
