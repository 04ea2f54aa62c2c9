"""Git references: branches, tags and pull request heads."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from .client import GitHubClient
from .errors import (
    CircularReferenceError,
    InvalidReferenceError,
    NothingError,
    ReferenceNotFoundError,
)
from .handle import GitHubHandle
from .sha import Sha, as_sha

if TYPE_CHECKING:
    from .commit import Commit
    from .repository import Repository

logger = logging.getLogger(__name__)


class _RefName(BaseModel):
    ref: str


class _Target(BaseModel):
    type: Literal["commit", "tag"]
    sha: Sha


class _Pointer(BaseModel):
    target: _Target = Field(alias="object")


class Reference(GitHubHandle):
    """
    Base for the three reference kinds.

    ``str(reference)`` is the ref path without the ``refs/`` prefix
    (``heads/main``, ``tags/v1``, ``pull/7/head``), which is also what the
    ``git/refs`` endpoints expect.
    """

    repository: "Repository"

    @classmethod
    def parse(cls, repository: "Repository", reference: str) -> "Reference":
        """
        Recognize a ref string without touching the network.

        Raises:
            InvalidReferenceError: not a heads/tags/pull shape, a non-numeric
                pull number or an empty name
        """
        tokens = reference.split("/")
        if tokens[0] == "refs":
            tokens = tokens[1:]

        if len(tokens) >= 2 and tokens[0] == "heads":
            name = "/".join(tokens[1:])
            if name:
                return Branch(repository, name)
        elif len(tokens) >= 2 and tokens[0] == "tags":
            name = "/".join(tokens[1:])
            if name:
                return Tag(repository, name)
        elif len(tokens) >= 3 and tokens[0] == "pull":
            name = "/".join(tokens[2:])
            if tokens[1].isascii() and tokens[1].isdigit() and name:
                return PullRequest(repository, int(tokens[1]), name)

        raise InvalidReferenceError(reference)

    @classmethod
    def fetch(cls, repository: "Repository", reference: str) -> "Reference":
        """
        Resolve a ref that must exist remotely.

        The server name has to end with ``reference`` exactly; GitHub may
        answer a lookup for ``heads/foo`` with ``refs/heads/foobar``.
        """
        parsed = cls.parse(repository, reference)
        try:
            name = repository.get_client().get(f"repos/{repository}/git/ref/{parsed}").json(_RefName).ref
        except NothingError as e:
            raise ReferenceNotFoundError(reference) from e

        if not name.endswith(reference):
            logger.debug("Reference %s resolved to unrelated %s", reference, name)
            raise ReferenceNotFoundError(reference)
        return parsed

    @classmethod
    def create(cls, repository: "Repository", commit: Any, reference: str) -> "Reference":
        """Create ``reference`` pointing at ``commit`` (a Commit, Sha or str)."""
        parsed = cls.parse(repository, reference)
        payload = {"ref": f"refs/{parsed}", "sha": as_sha(commit)}
        logger.info("Creating reference %s in %s at %s", parsed, repository, payload["sha"])
        try:
            name = repository.get_client().post(f"repos/{repository}/git/refs", json=payload).json(_RefName).ref
        except NothingError as e:
            raise ReferenceNotFoundError(reference) from e

        if not name.endswith(reference):
            raise ReferenceNotFoundError(reference)
        return parsed

    def get_client(self) -> GitHubClient:
        return self.repository.get_client()

    def get_parent(self) -> "Repository":
        return self.repository

    def get_endpoint(self) -> str:
        return f"repos/{self.repository}/git/refs/{self}"

    def get_commit(self) -> "Commit":
        """Follow the ref, and any chain of annotated tags, down to a commit."""
        from .commit import Commit

        client = self.get_client()
        visited: set[Sha] = set()
        pointer = client.get(f"repos/{self.repository}/git/ref/{self}").json(_Pointer)

        while pointer.target.type == "tag":
            sha = pointer.target.sha
            if sha in visited:
                raise CircularReferenceError(str(self))
            visited.add(sha)
            pointer = client.get(f"repos/{self.repository}/git/tags/{sha}").json(_Pointer)

        return Commit.fetch(self.repository, pointer.target.sha)

    def set_commit(self, commit: Any, force: bool = False) -> "Reference":
        """
        Move the ref to ``commit``.

        Args:
            commit: Commit handle or sha
            force: Allow a move that is not a fast-forward

        Returns:
            This reference handle
        """
        payload = {"sha": as_sha(commit), "force": force}
        logger.info("Moving %s in %s to %s (force=%s)", self, self.repository, payload["sha"], force)
        self.get_client().patch(self.get_endpoint(), json=payload)
        return self

    def delete(self) -> None:
        logger.info("Deleting reference %s in %s", self, self.repository)
        self.get_client().delete(self.get_endpoint())

    def is_branch(self) -> bool:
        return isinstance(self, Branch)

    def is_tag(self) -> bool:
        return isinstance(self, Tag)

    def is_pull_request(self) -> bool:
        return isinstance(self, PullRequest)


@dataclass(frozen=True)
class Branch(Reference):
    repository: "Repository"
    branch: str

    def __str__(self) -> str:
        return f"heads/{self.branch}"


@dataclass(frozen=True)
class Tag(Reference):
    repository: "Repository"
    tag: str

    def __str__(self) -> str:
        return f"tags/{self.tag}"


@dataclass(frozen=True)
class PullRequest(Reference):
    repository: "Repository"
    issue: int
    branch: str

    def __str__(self) -> str:
        return f"pull/{self.issue}/{self.branch}"


__all__ = ["Reference", "Branch", "Tag", "PullRequest"]
