"""Editable repository settings."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from .models import AccountInfo

if TYPE_CHECKING:
    from .repository import Repository


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class SecurityStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def of(cls, enabled: bool) -> "SecurityStatus":
        return cls.ENABLED if enabled else cls.DISABLED


class SecurityFeature(BaseModel):
    status: SecurityStatus = SecurityStatus.DISABLED


class SecurityProperties(BaseModel):
    """``security_and_analysis`` block; omitted features are left untouched on PATCH."""

    advanced_security: SecurityFeature | None = None
    secret_scanning: SecurityFeature | None = None
    secret_scanning_push_protection: SecurityFeature | None = None

    def with_advanced_security(self, enabled: bool) -> "SecurityProperties":
        return self.model_copy(update={"advanced_security": SecurityFeature(status=SecurityStatus.of(enabled))})

    def with_secret_scanning(self, enabled: bool) -> "SecurityProperties":
        return self.model_copy(update={"secret_scanning": SecurityFeature(status=SecurityStatus.of(enabled))})

    def with_secret_scanning_push_protection(self, enabled: bool) -> "SecurityProperties":
        return self.model_copy(
            update={"secret_scanning_push_protection": SecurityFeature(status=SecurityStatus.of(enabled))}
        )


class RepositoryProperties(BaseModel):
    """
    Repository settings that can be read and PATCHed back.

    Read-only fields (owner, timestamps) are excluded when the model is sent,
    and so is every field left as None.
    """

    name: str | None = None
    description: str | None = None
    homepage: str | None = None
    default_branch: str | None = None
    visibility: Visibility | None = None
    private: bool | None = None
    is_template: bool | None = None
    has_issues: bool | None = None
    has_projects: bool | None = None
    has_wiki: bool | None = None
    has_downloads: bool | None = None
    allow_forking: bool | None = None
    web_commit_signoff_required: bool | None = None
    archived: bool | None = None
    security_and_analysis: SecurityProperties | None = None

    owner: AccountInfo | None = Field(default=None, exclude=True)
    created_at: datetime | None = Field(default=None, exclude=True)
    updated_at: datetime | None = Field(default=None, exclude=True)
    pushed_at: datetime | None = Field(default=None, exclude=True)

    @classmethod
    def fetch(cls, repository: "Repository") -> "RepositoryProperties":
        return repository.get_properties(cls)


__all__ = [
    "Visibility",
    "SecurityStatus",
    "SecurityFeature",
    "SecurityProperties",
    "RepositoryProperties",
]
