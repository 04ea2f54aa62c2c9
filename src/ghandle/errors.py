"""
Exception hierarchy for ghandle.

Transport failures are raised as ``ClientError`` subclasses by
``GitHubClient``; resource modules raise the domain errors below and chain the
transport error as ``__cause__`` when one triggered them.
"""

from typing import Any


class GitHubError(Exception):
    """Base class for every error raised by this library."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ============ Transport ============

class ClientError(GitHubError):
    """Raised by the HTTP transport layer."""


class RequestError(ClientError):
    """The request could not be sent."""


class UnavailableError(RequestError):
    """The server could not be reached, even after retrying."""

    def __init__(self, message: str = "Server is unavailable"):
        super().__init__(message)


class RequestBuildError(RequestError):
    """The request (usually its JSON payload) could not be built."""

    def __init__(self, message: str = "Request could not be built"):
        super().__init__(message)


class ParseEndpointError(ClientError):
    """The endpoint does not form a valid URL against the API base."""

    def __init__(self, endpoint: str):
        super().__init__(f"Failed to parse endpoint: {endpoint}")
        self.endpoint = endpoint


class ResponseError(ClientError):
    """The server answered, but not with what was expected."""


class StatusError(ResponseError):
    """Non-success HTTP status."""

    label = "Unhandled error"

    def __init__(self, code: int, message: str | None = None):
        text = f"{self.label} (status={code})"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
        self.code = code
        self.server_message = message


class UnauthorizedError(StatusError):
    """HTTP 401 or 403."""

    label = "Unauthorized"


class NothingError(StatusError):
    """HTTP 404."""

    label = "Nothing was found"


class ValidationError(StatusError):
    """HTTP 422."""

    label = "Invalid user input"


class UnhandledError(StatusError):
    """Any other non-2xx status."""


class MalformedError(ResponseError):
    """The body did not match the expected JSON shape."""

    def __init__(self, reason: str):
        super().__init__(f"Malformed response, reason: '{reason}'")
        self.reason = reason


class EncodingError(ResponseError):
    """The body bytes could not be decoded."""

    def __init__(self, message: str = "Encoding error"):
        super().__init__(message)


# ============ Accounts ============

class AccountError(GitHubError):
    """Account resolution failed."""


class UnsupportedAccountError(AccountError):
    """The login belongs to an account kind that has no handle (bot, mannequin)."""

    def __init__(self, account: Any):
        super().__init__(f"Unsupported account kind: '{account.type.lower()}' ({account.login})")
        self.account = account


class NotAnOrganizationError(AccountError):
    def __init__(self, account: Any):
        super().__init__(f"Not an organization, got: '{account.type.lower()}' ({account.login})")
        self.account = account


class NotAUserError(AccountError):
    def __init__(self, account: Any):
        super().__init__(f"Not a user, got: '{account.type.lower()}' ({account.login})")
        self.account = account


# ============ Repositories ============

class RepositoryError(GitHubError):
    """Repository-level failure."""


class InvalidBranchError(RepositoryError):
    def __init__(self, name: str):
        super().__init__(f"Invalid branch: '{name}'")
        self.name = name


class InvalidTagError(RepositoryError):
    def __init__(self, name: str):
        super().__init__(f"Invalid tag: '{name}'")
        self.name = name


class DefaultBranchError(RepositoryError):
    def __init__(self, name: str):
        super().__init__(f"Failed to get default branch: '{name}'")
        self.name = name


class ArchiveError(RepositoryError):
    """A downloaded archive could not be extracted."""

    def __init__(self, reason: str):
        super().__init__(f"Extraction error: {reason}")
        self.reason = reason


# ============ References ============

class GitReferenceError(GitHubError):
    """Reference parsing or resolution failed."""

    def __init__(self, message: str, reference: str):
        super().__init__(message)
        self.reference = reference


class InvalidReferenceError(GitReferenceError):
    """The string is not a recognizable ref shape."""

    def __init__(self, reference: str):
        super().__init__(f"Invalid reference: '{reference}'", reference)


class ReferenceNotFoundError(GitReferenceError):
    """The ref is well-formed but does not exist remotely."""

    def __init__(self, reference: str):
        super().__init__(f"Reference not found: '{reference}'", reference)


class CircularReferenceError(GitReferenceError):
    """Annotated tags point back at each other."""

    def __init__(self, reference: str):
        super().__init__(f"Circular reference: '{reference}'", reference)


# ============ Git objects and issues ============

class CommitError(GitHubError):
    """Commit-level failure."""


class CommitNotFoundError(CommitError):
    def __init__(self, commit: str):
        super().__init__(f"Commit not found: '{commit}'")
        self.commit = commit


class IssueError(GitHubError):
    """Issue-level failure."""


class NotAnIssueError(IssueError):
    """The number belongs to a pull request."""

    def __init__(self, number: int):
        super().__init__(f"Not an issue: {number}")
        self.number = number


class CommentNotFoundError(IssueError):
    def __init__(self, number: int):
        super().__init__(f"Issue comment not found: {number}")
        self.number = number


__all__ = [
    "GitHubError",
    "ClientError",
    "RequestError",
    "UnavailableError",
    "RequestBuildError",
    "ParseEndpointError",
    "ResponseError",
    "StatusError",
    "UnauthorizedError",
    "NothingError",
    "ValidationError",
    "UnhandledError",
    "MalformedError",
    "EncodingError",
    "AccountError",
    "UnsupportedAccountError",
    "NotAnOrganizationError",
    "NotAUserError",
    "RepositoryError",
    "InvalidBranchError",
    "InvalidTagError",
    "DefaultBranchError",
    "ArchiveError",
    "GitReferenceError",
    "InvalidReferenceError",
    "ReferenceNotFoundError",
    "CircularReferenceError",
    "CommitError",
    "CommitNotFoundError",
    "IssueError",
    "NotAnIssueError",
    "CommentNotFoundError",
]
