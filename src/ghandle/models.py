"""GitHub API data models."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .sha import Sha


# ============ Accounts ============

class AccountBase(BaseModel):
    """Fields shared by every account kind."""

    login: str
    id: int

    def is_organization(self) -> bool:
        return self.type == "Organization"

    def is_user(self) -> bool:
        return self.type == "User"

    def is_bot(self) -> bool:
        return self.type == "Bot"

    def is_mannequin(self) -> bool:
        return self.type == "Mannequin"

    def __str__(self) -> str:
        return self.login


class OrganizationInfo(AccountBase):
    type: Literal["Organization"] = "Organization"


class UserInfo(AccountBase):
    type: Literal["User"] = "User"


class BotInfo(AccountBase):
    type: Literal["Bot"] = "Bot"


class MannequinInfo(AccountBase):
    type: Literal["Mannequin"] = "Mannequin"


AccountInfo = Annotated[
    Union[OrganizationInfo, UserInfo, BotInfo, MannequinInfo],
    Field(discriminator="type"),
]


class TeamInfo(BaseModel):
    """Organization team."""

    id: int
    name: str
    slug: str
    description: str | None = None

    def __str__(self) -> str:
        return self.slug


# ============ Repositories ============

class RepositoryInfo(BaseModel):
    """Repository as returned by ``repos/{owner}/{name}``."""

    id: int
    name: str
    full_name: str
    owner: AccountInfo
    private: bool = False
    fork: bool = False
    archived: bool = False
    default_branch: str
    description: str | None = None
    html_url: str | None = None
    visibility: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pushed_at: datetime | None = None


# ============ Commits ============

class ShaRef(BaseModel):
    """Any ``{"sha": ...}`` object, e.g. a commit's tree or parents."""

    sha: Sha


class CommitAuthor(BaseModel):
    name: str
    email: str
    date: datetime


class CommitVerification(BaseModel):
    """Signature status; a verified commit always carries signature and payload."""

    verified: bool
    reason: str | None = None
    signature: str | None = None
    payload: str | None = None

    @model_validator(mode="after")
    def check_signed(self) -> "CommitVerification":
        if self.verified and (self.signature is None or self.payload is None):
            raise ValueError("verified commit without signature or payload")
        return self


class CommitInfo(BaseModel):
    """Git commit object from ``repos/{repo}/git/commits/{sha}``."""

    sha: Sha
    message: str
    author: CommitAuthor
    committer: CommitAuthor | None = None
    tree: ShaRef
    parents: list[ShaRef] = Field(default_factory=list)
    verification: CommitVerification | None = None

    @property
    def parent_shas(self) -> list[Sha]:
        return [parent.sha for parent in self.parents]


class CompareStatus(str, Enum):
    """Per-file status in a compare; the API defines exactly these seven."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class CompareFile(BaseModel):
    """Changed file between two commits."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path: str = Field(alias="filename")
    sha: Sha
    status: CompareStatus


# ============ Issues ============

class IssueState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class IssueKind(str, Enum):
    PLAIN = "plain"
    PULL_REQUEST = "pull_request"


class IssueInfo(BaseModel):
    """
    Issue or pull request from ``repos/{repo}/issues``.

    The API serves pull requests through the issues endpoints too. Any payload
    carrying a ``pull_request`` key is a pull request, whatever its value.
    """

    model_config = ConfigDict(populate_by_name=True)

    number: int
    title: str
    body: str | None = None
    state: IssueState
    author: AccountInfo = Field(alias="user")
    assignees: list[AccountInfo] = Field(default_factory=list)
    kind: IssueKind = IssueKind.PLAIN

    @model_validator(mode="before")
    @classmethod
    def detect_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and "kind" not in data:
            data = dict(data)
            data["kind"] = IssueKind.PULL_REQUEST if "pull_request" in data else IssueKind.PLAIN
        return data

    @field_validator("assignees", mode="before")
    @classmethod
    def null_assignees(cls, value: Any) -> Any:
        return [] if value is None else value

    def is_pull_request(self) -> bool:
        return self.kind is IssueKind.PULL_REQUEST

    def is_plain(self) -> bool:
        return self.kind is IssueKind.PLAIN

    def is_open(self) -> bool:
        return self.state is IssueState.OPEN

    def is_closed(self) -> bool:
        return self.state is IssueState.CLOSED


class CommentInfo(BaseModel):
    """Issue comment."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    body: str
    author: AccountInfo = Field(alias="user")


# ============ Organizations ============

class AllowedActions(BaseModel):
    """Selected-actions permissions of an organization."""

    verified_allowed: bool = False
    github_owned_allowed: bool = False
    patterns_allowed: list[str] = Field(default_factory=list)


__all__ = [
    "AccountBase",
    "AccountInfo",
    "OrganizationInfo",
    "UserInfo",
    "BotInfo",
    "MannequinInfo",
    "TeamInfo",
    "RepositoryInfo",
    "ShaRef",
    "CommitAuthor",
    "CommitVerification",
    "CommitInfo",
    "CompareStatus",
    "CompareFile",
    "IssueState",
    "IssueKind",
    "IssueInfo",
    "CommentInfo",
    "AllowedActions",
]
