"""Organization and user accounts."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Union

from pydantic import BaseModel

from .client import GitHubClient
from .errors import UnsupportedAccountError
from .handle import GitHubHandle
from .models import AccountBase, AccountInfo, AllowedActions, OrganizationInfo, TeamInfo, UserInfo

if TYPE_CHECKING:
    from .repository import Repository

logger = logging.getLogger(__name__)


class _Verified(BaseModel):
    is_verified: bool = False


class _AccountMixin:
    """Repository access common to organizations and users."""

    def get_repository(self, name: str) -> "Repository":
        from .repository import Repository

        return Repository.fetch(self, name)

    def get_all_repositories(self) -> list["Repository"]:
        from .repository import Repository

        return Repository.fetch_all(self)


@dataclass(frozen=True)
class Organization(_AccountMixin, GitHubHandle):
    """Organization account. The login is stored lowercased."""

    client: GitHubClient = field(repr=False, compare=False)
    name: str
    number: int

    content_model: ClassVar[Any] = OrganizationInfo

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.lower())

    def get_client(self) -> GitHubClient:
        return self.client

    def get_parent(self) -> GitHubClient:
        return self.client

    def get_endpoint(self) -> str:
        return f"orgs/{self}"

    def is_verified(self) -> bool:
        return self.get_properties(_Verified).is_verified

    def get_team(self, slug: str) -> "Team":
        return Team.fetch(self, slug)

    def get_all_teams(self) -> list["Team"]:
        return Team.fetch_all(self)

    def actions(self) -> "Actions":
        return Actions(self)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class User(_AccountMixin, GitHubHandle):
    """Personal account. The login is stored lowercased."""

    client: GitHubClient = field(repr=False, compare=False)
    name: str
    number: int

    content_model: ClassVar[Any] = UserInfo

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.lower())

    def get_client(self) -> GitHubClient:
        return self.client

    def get_parent(self) -> GitHubClient:
        return self.client

    def get_endpoint(self) -> str:
        return f"users/{self}"

    def __str__(self) -> str:
        return self.name


Account = Union[Organization, User]


def account_from_info(client: GitHubClient, info: AccountBase) -> Account:
    """Build the handle for a decoded account; bots and mannequins have none."""
    if info.is_organization():
        return Organization(client, info.login, info.id)
    if info.is_user():
        return User(client, info.login, info.id)
    raise UnsupportedAccountError(info)


def resolve_account(client: GitHubClient, name: str) -> Account:
    """
    Look up a login and return its organization or user handle.

    Raises:
        UnsupportedAccountError: the login is a bot or a mannequin
        NothingError: no such login
    """
    info = client.get_username(name)
    account = account_from_info(client, info)
    logger.info("Resolved account %s as %s", info.login, info.type.lower())
    return account


# ============ Teams ============

@dataclass(frozen=True)
class Team(GitHubHandle):
    organization: Organization
    number: int
    slug: str

    content_model: ClassVar[Any] = TeamInfo

    @classmethod
    def fetch(cls, organization: Organization, slug: str) -> "Team":
        info = organization.get_client().get(f"orgs/{organization}/teams/{slug}").json(TeamInfo)
        return cls(organization, info.id, info.slug)

    @classmethod
    def fetch_all(cls, organization: Organization) -> list["Team"]:
        infos = organization.get_client().paginate(f"orgs/{organization}/teams", TeamInfo)
        logger.debug("Found %d teams in %s", len(infos), organization)
        return [cls(organization, info.id, info.slug) for info in infos]

    def get_client(self) -> GitHubClient:
        return self.organization.get_client()

    def get_parent(self) -> Organization:
        return self.organization

    def get_endpoint(self) -> str:
        return f"orgs/{self.organization}/teams/{self}"

    def get_members(self, model: Any = AccountInfo) -> list:
        """List team members, validated into ``model``."""
        return self.get_client().paginate(f"{self.get_endpoint()}/members", model)

    def has_member(self, member: Any, model: Any = None) -> bool:
        """Check membership by equality against members decoded as ``model``."""
        members = self.get_members(model or type(member))
        return member in members

    def __str__(self) -> str:
        return self.slug


# ============ Actions permissions ============

@dataclass(frozen=True)
class Actions(GitHubHandle):
    """
    Selected-actions allow list of an organization.

    Every setter reads the current permissions, changes one field and PUTs
    the whole object back. Nothing guards against a concurrent writer; the
    last PUT wins.
    """

    organization: Organization

    content_model: ClassVar[Any] = AllowedActions

    def get_client(self) -> GitHubClient:
        return self.organization.get_client()

    def get_parent(self) -> Organization:
        return self.organization

    def get_endpoint(self) -> str:
        return f"orgs/{self.organization}/actions/permissions/selected-actions"

    def _store(self, allowed: AllowedActions) -> "Actions":
        allowed.patterns_allowed = sorted(set(allowed.patterns_allowed))
        logger.debug(
            "Storing allowed actions for %s: %d patterns",
            self.organization,
            len(allowed.patterns_allowed),
        )
        self.get_client().put(self.get_endpoint(), json=allowed.model_dump(mode="json"))
        return self

    def get_allow_list(self) -> list[str]:
        return self.get_content().patterns_allowed

    def set_allow_list(self, patterns: list[str]) -> "Actions":
        allowed = self.get_content()
        allowed.patterns_allowed = list(patterns)
        return self._store(allowed)

    def add_allow_list(self, patterns: list[str]) -> "Actions":
        allowed = self.get_content()
        allowed.patterns_allowed.extend(patterns)
        return self._store(allowed)

    def remove_allow_list(self, patterns: list[str]) -> "Actions":
        allowed = self.get_content()
        removed = set(patterns)
        allowed.patterns_allowed = [p for p in allowed.patterns_allowed if p not in removed]
        return self._store(allowed)

    def get_allow_native(self) -> bool:
        return self.get_content().github_owned_allowed

    def set_allow_native(self, native: bool) -> "Actions":
        allowed = self.get_content()
        allowed.github_owned_allowed = native
        return self._store(allowed)

    def get_allow_verified(self) -> bool:
        return self.get_content().verified_allowed

    def set_allow_verified(self, verified: bool) -> "Actions":
        allowed = self.get_content()
        allowed.verified_allowed = verified
        return self._store(allowed)


__all__ = [
    "Organization",
    "User",
    "Account",
    "Team",
    "Actions",
    "account_from_info",
    "resolve_account",
]
