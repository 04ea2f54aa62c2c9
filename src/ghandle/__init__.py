"""Typed handles over the GitHub REST API."""

from .account import Account, Actions, Organization, Team, User, resolve_account
from .blob import BinaryBlob, Blob, TextBlob, decode_content, encode_content
from .client import GitHubClient, GitHubResponse, RetryPolicy, get_token
from .commit import Commit, Compare
from .handle import GitHubHandle
from .issue import Issue, IssueComment
from .properties import RepositoryProperties, SecurityProperties, SecurityStatus, Visibility
from .reference import Branch, PullRequest, Reference, Tag
from .repository import Repository
from .sha import Sha, as_sha
from .tree import (
    Tree,
    TreeEntry,
    TreeEntryBlob,
    TreeEntryCommit,
    TreeEntryMode,
    TreeEntryTree,
    decode_mode,
    encode_mode,
)

__all__ = [
    "GitHubClient",
    "GitHubResponse",
    "RetryPolicy",
    "get_token",
    "GitHubHandle",
    "Sha",
    "as_sha",
    "Account",
    "Organization",
    "User",
    "Team",
    "Actions",
    "resolve_account",
    "Repository",
    "RepositoryProperties",
    "SecurityProperties",
    "SecurityStatus",
    "Visibility",
    "Reference",
    "Branch",
    "Tag",
    "PullRequest",
    "Commit",
    "Compare",
    "Tree",
    "TreeEntry",
    "TreeEntryBlob",
    "TreeEntryTree",
    "TreeEntryCommit",
    "TreeEntryMode",
    "encode_mode",
    "decode_mode",
    "Blob",
    "TextBlob",
    "BinaryBlob",
    "encode_content",
    "decode_content",
    "Issue",
    "IssueComment",
]
