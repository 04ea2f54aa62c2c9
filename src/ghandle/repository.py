"""Repository handle: the aggregate every git object and issue hangs off."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from .account import Account
from .blob import Blob
from .client import GitHubClient
from .commit import Commit, Compare
from .errors import (
    CommitNotFoundError,
    DefaultBranchError,
    GitHubError,
    InvalidBranchError,
    InvalidReferenceError,
    InvalidTagError,
    ReferenceNotFoundError,
)
from .handle import GitHubHandle, dump_payload
from .issue import Issue
from .models import RepositoryInfo
from .reference import Branch, Reference, Tag
from .sha import Sha
from .tree import Tree, TreeEntry

logger = logging.getLogger(__name__)


class _Named(BaseModel):
    name: str


class _DefaultBranch(BaseModel):
    default_branch: str


class _WorkflowRuns(BaseModel):
    total_count: int


@dataclass(frozen=True)
class Repository(GitHubHandle):
    """A repository under its owning account. The name is stored lowercased."""

    owner: Account
    name: str

    content_model: ClassVar[Any] = RepositoryInfo

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.lower())

    @classmethod
    def fetch(cls, owner: Account, name: str) -> "Repository":
        """
        Verify a repository exists and return its handle.

        ``name`` may be ``repo``, ``owner/repo`` or ``owner/repo/more/path``
        (as copied from a URL); the owner segment is skipped when it matches.
        """
        segments = [segment for segment in name.split("/") if segment]
        if len(segments) > 1 and segments[0].lower() == owner.name:
            segments = segments[1:]
        if not segments:
            raise ValueError(f"Repository name is required, got: '{name}'")

        short = segments[0]
        logger.info("Fetching repository: %s/%s", owner, short)
        owner.get_client().get(f"repos/{owner}/{short}")
        return cls(owner, short)

    @classmethod
    def fetch_all(cls, owner: Account) -> list["Repository"]:
        capsules = owner.get_client().paginate(f"users/{owner}/repos", _Named)
        logger.debug("Found %d repositories for %s", len(capsules), owner)
        return [cls(owner, capsule.name) for capsule in capsules]

    def get_client(self) -> GitHubClient:
        return self.owner.get_client()

    def get_parent(self) -> Account:
        return self.owner

    def get_endpoint(self) -> str:
        return f"repos/{self}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    # ============ Repository-level operations ============

    def submit_dependency_snapshot(self, payload: BaseModel | dict[str, Any]) -> None:
        self.get_client().post(f"{self.get_endpoint()}/dependency-graph/snapshots", json=dump_payload(payload))

    def get_active_workflows(self) -> int:
        """Number of workflow runs currently in progress."""
        response = self.get_client().get(
            f"{self.get_endpoint()}/actions/runs",
            params={"status": "in_progress"},
        )
        return response.json(_WorkflowRuns).total_count

    # ============ Issues ============

    def get_issue(self, number: int) -> Issue:
        """Get a plain issue; pull request numbers raise ``NotAnIssueError``."""
        return Issue.fetch(self, number)

    def get_all_issues(self) -> list[Issue]:
        return Issue.fetch_all(self)

    def create_issue(self, title: str, body: str | None = None) -> Issue:
        """
        Open a new issue.

        Args:
            title: Issue title
            body: Optional issue body (markdown)

        Returns:
            Issue handle
        """
        return Issue.create(self, title, body)

    # ============ References ============

    def get_reference(self, reference: str) -> Reference:
        """
        Get a reference that must exist.

        Args:
            reference: Ref name, e.g. ``heads/main``, ``refs/tags/v1`` or ``pull/7/head``

        Returns:
            The matching Branch, Tag or PullRequest handle
        """
        return Reference.fetch(self, reference)

    def get_some_reference(self, reference: str) -> Reference | None:
        """Like ``get_reference``, but ``None`` when the ref does not exist."""
        try:
            return Reference.fetch(self, reference)
        except ReferenceNotFoundError:
            return None

    def has_reference(self, reference: str) -> bool:
        return self.get_some_reference(reference) is not None

    def create_reference(self, reference: str, commit: Commit | Sha | str) -> Reference:
        """
        Create a reference pointing at ``commit``.

        Args:
            reference: Ref name without the ``refs/`` prefix
            commit: Target commit handle or sha

        Returns:
            The created reference handle
        """
        return Reference.create(self, commit, reference)

    def delete_reference(self, reference: Reference) -> None:
        reference.delete()

    def _candidate(self, name: str, prefix: str) -> Reference:
        # "main" is not a ref shape on its own, "heads/main" is
        try:
            return Reference.parse(self, name)
        except InvalidReferenceError:
            return Reference.parse(self, f"{prefix}/{name}")

    def get_branch(self, branch: str) -> Branch:
        """
        Get a branch that must exist.

        Args:
            branch: Branch name (``main``) or ref form (``heads/main``)

        Returns:
            Branch handle

        Raises:
            ReferenceNotFoundError: The branch does not exist
            InvalidBranchError: The name resolves to another kind of ref
        """
        reference = self.get_reference(str(self._candidate(branch, "heads")))
        if not isinstance(reference, Branch):
            raise InvalidBranchError(branch)
        return reference

    def get_some_branch(self, branch: str) -> Branch | None:
        """Like ``get_branch``, but ``None`` when the branch does not exist."""
        reference = self.get_some_reference(str(self._candidate(branch, "heads")))
        if reference is None:
            return None
        if not isinstance(reference, Branch):
            raise InvalidBranchError(branch)
        return reference

    def has_branch(self, branch: str) -> bool:
        return self.get_some_branch(branch) is not None

    def create_branch(self, branch: str, commit: Commit | Sha | str) -> Branch:
        """
        Create branch ``branch`` at ``commit``.

        Args:
            branch: Branch name, without ``heads/``
            commit: Commit handle or sha the branch points at

        Returns:
            Branch handle
        """
        reference = Reference.create(self, commit, f"heads/{branch}")
        if not isinstance(reference, Branch):
            raise InvalidBranchError(branch)
        return reference

    def delete_branch(self, branch: Reference) -> None:
        if not isinstance(branch, Branch):
            raise InvalidBranchError(str(branch))
        branch.delete()

    def get_tag(self, tag: str) -> Tag:
        """
        Get a tag that must exist.

        Args:
            tag: Tag name (``v1``) or ref form (``tags/v1``)

        Returns:
            Tag handle

        Raises:
            ReferenceNotFoundError: The tag does not exist
            InvalidTagError: The name resolves to another kind of ref
        """
        reference = self.get_reference(str(self._candidate(tag, "tags")))
        if not isinstance(reference, Tag):
            raise InvalidTagError(tag)
        return reference

    def get_some_tag(self, tag: str) -> Tag | None:
        reference = self.get_some_reference(str(self._candidate(tag, "tags")))
        if reference is None:
            return None
        if not isinstance(reference, Tag):
            raise InvalidTagError(tag)
        return reference

    def has_tag(self, tag: str) -> bool:
        return self.get_some_tag(tag) is not None

    def create_tag(self, tag: str, commit: Commit | Sha | str) -> Tag:
        """
        Create lightweight tag ``tag`` at ``commit``.

        Args:
            tag: Tag name, without ``tags/``
            commit: Commit handle or sha the tag points at

        Returns:
            Tag handle
        """
        reference = Reference.create(self, commit, f"tags/{tag}")
        if not isinstance(reference, Tag):
            raise InvalidTagError(tag)
        return reference

    def delete_tag(self, tag: Reference) -> None:
        if not isinstance(tag, Tag):
            raise InvalidTagError(str(tag))
        tag.delete()

    def get_default_branch(self) -> Branch:
        """
        Resolve the repository's default branch.

        Raises:
            DefaultBranchError: The default branch could not be fetched
        """
        default_branch = self.get_properties(_DefaultBranch).default_branch
        try:
            return self.get_branch(default_branch)
        except GitHubError as e:
            raise DefaultBranchError(default_branch) from e

    # ============ Git objects ============

    def get_blob(self, sha: Sha | str) -> Blob:
        return Blob.fetch(self, sha)

    def create_text_blob(self, content: str) -> Blob:
        return Blob.create_text(self, content)

    def create_binary_blob(self, content: bytes) -> Blob:
        return Blob.create_binary(self, content)

    def get_tree(self, sha: Sha | str, recursive: bool = False) -> Tree:
        return Tree.fetch(self, sha, recursive)

    def create_tree(self, entries: Sequence[TreeEntry]) -> Tree:
        """
        Create a tree from scratch.

        Args:
            entries: Entries of the new tree; paths may contain slashes

        Returns:
            Tree handle with the entries as stored by the server
        """
        return Tree.create(self, entries)

    def create_tree_with_base(self, base: Commit, entries: Sequence[TreeEntry]) -> Tree:
        return Tree.create_with_base(self, base, entries)

    def get_commit(self, sha: Sha | str) -> Commit:
        return Commit.fetch(self, sha)

    def has_commit(self, sha: Sha | str) -> bool:
        try:
            Commit.fetch(self, sha)
        except CommitNotFoundError:
            return False
        return True

    def create_commit(self, parents: Sequence[Commit], tree: Tree, message: str) -> Commit:
        """
        Create a commit object. No ref is moved.

        Args:
            parents: Parent commits; empty for a root commit
            tree: Tree snapshot of the commit
            message: Commit message

        Returns:
            Commit handle
        """
        return Commit.create(self, parents, tree, message)

    def compare(self, base: Commit, head: Commit) -> Compare:
        return Compare.fetch(self, base, head)


__all__ = ["Repository"]
