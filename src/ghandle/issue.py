"""Issues and issue comments."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from .client import GitHubClient
from .errors import CommentNotFoundError, NotAnIssueError, NothingError
from .handle import GitHubHandle
from .models import AccountBase, CommentInfo, IssueInfo, IssueState

if TYPE_CHECKING:
    from .repository import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Issue(GitHubHandle):
    """
    A plain issue. Pull requests share the issue number space and endpoints,
    but are never returned as ``Issue`` handles.
    """

    repository: "Repository"
    number: int

    content_model: ClassVar[Any] = IssueInfo

    @classmethod
    def fetch(cls, repository: "Repository", number: int) -> "Issue":
        info = repository.get_client().get(f"repos/{repository}/issues/{number}").json(IssueInfo)
        if info.is_pull_request():
            raise NotAnIssueError(number)
        return cls(repository, info.number)

    @classmethod
    def fetch_all(cls, repository: "Repository") -> list["Issue"]:
        """Every issue of the repository, pull requests filtered out."""
        infos = repository.get_client().paginate(f"repos/{repository}/issues", IssueInfo)
        issues = [cls(repository, info.number) for info in infos if info.is_plain()]
        logger.debug("Found %d issues in %s (%d pull requests skipped)", len(issues), repository, len(infos) - len(issues))
        return issues

    @classmethod
    def create(cls, repository: "Repository", title: str, body: str | None = None) -> "Issue":
        payload = {"title": title}
        if body is not None:
            payload["body"] = body
        info = repository.get_client().post(f"repos/{repository}/issues", json=payload).json(IssueInfo)
        logger.info("Created issue #%d in %s", info.number, repository)
        return cls(repository, info.number)

    def get_client(self) -> GitHubClient:
        return self.repository.get_client()

    def get_parent(self) -> "Repository":
        return self.repository

    def get_endpoint(self) -> str:
        return f"repos/{self.repository}/issues/{self.number}"

    def __str__(self) -> str:
        return str(self.number)

    # ============ Lifecycle ============

    def close(self) -> "Issue":
        return self.set_properties({"state": IssueState.CLOSED.value})

    def reopen(self) -> "Issue":
        return self.set_properties({"state": IssueState.OPEN.value})

    def set_title(self, title: str) -> "Issue":
        return self.set_properties({"title": title})

    def set_body(self, body: str) -> "Issue":
        return self.set_properties({"body": body})

    # ============ Assignees ============

    def get_assignees(self) -> list[AccountBase]:
        info: IssueInfo = self.get_content()
        return list(info.assignees)

    def set_assignees(self, logins: Sequence[str]) -> "Issue":
        """
        Add assignees to the issue. Existing assignees are kept by the server.

        Args:
            logins: Account logins to assign

        Returns:
            This issue handle
        """
        self.get_client().post(f"{self.get_endpoint()}/assignees", json={"assignees": list(logins)})
        return self

    def remove_assignees(self, logins: Sequence[str]) -> "Issue":
        """Unassign ``logins``; logins that were not assigned are ignored by the server."""
        self.get_client().delete(f"{self.get_endpoint()}/assignees", json={"assignees": list(logins)})
        return self

    # ============ Comments ============

    def get_comment(self, number: int) -> "IssueComment":
        return IssueComment.fetch(self, number)

    def has_comment(self, number: int) -> bool:
        try:
            IssueComment.fetch(self, number)
        except CommentNotFoundError:
            return False
        return True

    def get_all_comments(self) -> list["IssueComment"]:
        return IssueComment.fetch_all(self)

    def has_comments(self) -> bool:
        return len(self.get_all_comments()) > 0

    def create_comment(self, body: str) -> "IssueComment":
        """
        Post a comment on the issue.

        Args:
            body: Comment text (markdown)

        Returns:
            Handle of the new comment
        """
        return IssueComment.create(self, body)

    def delete_comment(self, number: int) -> None:
        IssueComment(self, number).delete()


@dataclass(frozen=True)
class IssueComment(GitHubHandle):
    issue: Issue
    number: int

    content_model: ClassVar[Any] = CommentInfo

    @classmethod
    def fetch(cls, issue: Issue, number: int) -> "IssueComment":
        try:
            info = issue.get_client().get(f"repos/{issue.repository}/issues/comments/{number}").json(CommentInfo)
        except NothingError as e:
            raise CommentNotFoundError(number) from e
        return cls(issue, info.id)

    @classmethod
    def fetch_all(cls, issue: Issue) -> list["IssueComment"]:
        """Comments of ``issue``; a missing listing page ends the walk with what was collected."""
        infos = issue.get_client().paginate(f"{issue.get_endpoint()}/comments", CommentInfo, stop_on_missing=True)
        return [cls(issue, info.id) for info in infos]

    @classmethod
    def create(cls, issue: Issue, body: str) -> "IssueComment":
        info = issue.get_client().post(f"{issue.get_endpoint()}/comments", json={"body": body}).json(CommentInfo)
        logger.info("Created comment %d on issue #%s in %s", info.id, issue, issue.repository)
        return cls(issue, info.id)

    def get_client(self) -> GitHubClient:
        return self.issue.get_client()

    def get_parent(self) -> Issue:
        return self.issue

    def get_endpoint(self) -> str:
        return f"repos/{self.issue.repository}/issues/comments/{self.number}"

    def set_body(self, body: str) -> "IssueComment":
        return self.set_properties({"body": body})

    def delete(self) -> None:
        logger.info("Deleting comment %d on issue #%s in %s", self.number, self.issue, self.issue.repository)
        self.get_client().delete(self.get_endpoint())

    def __str__(self) -> str:
        return str(self.number)


__all__ = ["Issue", "IssueComment"]
