"""Commit handles and commit comparison."""

import io
import logging
import zipfile
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, Field

from .client import GitHubClient
from .errors import ArchiveError, CommitNotFoundError, NothingError
from .handle import GitHubHandle
from .models import CommitInfo, CompareFile
from .sha import Sha, as_sha
from .tree import Tree

if TYPE_CHECKING:
    from .repository import Repository

logger = logging.getLogger(__name__)


class _Dated(BaseModel):
    date: datetime


class _Stamped(BaseModel):
    sha: Sha
    author: _Dated


class _CompareFiles(BaseModel):
    files: list[CompareFile] = Field(default_factory=list)


@dataclass(frozen=True)
class Commit(GitHubHandle):
    """A commit in a repository, with its author timestamp."""

    repository: "Repository"
    sha: Sha
    date: datetime

    content_model: ClassVar[Any] = CommitInfo

    @classmethod
    def fetch(cls, repository: "Repository", sha: Any) -> "Commit":
        sha = as_sha(sha)
        try:
            stamp = repository.get_client().get(f"repos/{repository}/git/commits/{sha}").json(_Stamped)
        except NothingError as e:
            raise CommitNotFoundError(sha) from e
        return cls(repository, stamp.sha, stamp.author.date)

    @classmethod
    def create(
        cls,
        repository: "Repository",
        parents: Sequence["Commit"],
        tree: Tree,
        message: str,
    ) -> "Commit":
        payload = {
            "parents": [as_sha(parent) for parent in parents],
            "message": message,
            "tree": as_sha(tree),
        }
        stamp = repository.get_client().post(f"repos/{repository}/git/commits", json=payload).json(_Stamped)
        logger.info("Created commit %s in %s (%d parents)", stamp.sha, repository, len(parents))
        return cls(repository, stamp.sha, stamp.author.date)

    def get_client(self) -> GitHubClient:
        return self.repository.get_client()

    def get_parent(self) -> "Repository":
        return self.repository

    def get_endpoint(self) -> str:
        return f"repos/{self.repository}/git/commits/{self}"

    def get_date(self) -> datetime:
        return self.date

    def get_parents(self) -> list["Commit"]:
        """Fetch each parent commit; one request per parent."""
        info: CommitInfo = self.get_content()
        return [Commit.fetch(self.repository, sha) for sha in info.parent_shas]

    def get_tree(self, recursive: bool = False) -> Tree:
        info: CommitInfo = self.get_content()
        return Tree.fetch(self.repository, info.tree.sha, recursive)

    def compare(self, head: "Commit") -> "Compare":
        return Compare.fetch(self.repository, self, head)

    def download(self, path: str | PathLike) -> None:
        """Download the zipball of this commit and extract it under ``path``."""
        data = self.get_client().get(f"repos/{self.repository}/zipball/{self}").bytes()
        logger.info("Extracting %s@%s (%d bytes) to %s", self.repository, self.sha, len(data), path)
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                archive.extractall(path)
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveError(str(e)) from e

    def __str__(self) -> str:
        return str(self.sha)


@dataclass(frozen=True)
class Compare:
    """Files changed between two commits, in server order."""

    base: Commit
    head: Commit
    files: tuple[CompareFile, ...]

    @classmethod
    def fetch(cls, repository: "Repository", base: Commit, head: Commit) -> "Compare":
        response = repository.get_client().get(f"repos/{repository}/compare/{base}...{head}")
        files = response.json(_CompareFiles).files
        logger.debug("Compared %s...%s in %s: %d files", base, head, repository, len(files))
        return cls(base, head, tuple(files))

    def __iter__(self) -> Iterator[CompareFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __getitem__(self, index: int) -> CompareFile:
        return self.files[index]

    def __str__(self) -> str:
        return f"{self.base}..{self.head}"


__all__ = ["Commit", "Compare"]
