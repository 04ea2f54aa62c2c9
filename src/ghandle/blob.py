"""Git blobs."""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from pydantic import BaseModel

from .client import GitHubClient
from .errors import MalformedError
from .handle import GitHubHandle
from .models import ShaRef
from .sha import Sha, as_sha

if TYPE_CHECKING:
    from .repository import Repository

logger = logging.getLogger(__name__)


def encode_content(data: bytes) -> str:
    """Standard base64, padded, without line breaks."""
    return base64.b64encode(data).decode("ascii")


def decode_content(value: str) -> bytes:
    """
    Decode base64 content as served by the API.

    The API wraps base64 at 60 columns, so any whitespace is dropped first.
    Anything else outside the standard alphabet, or bad padding, raises
    ``binascii.Error``.
    """
    return base64.b64decode("".join(value.split()), validate=True)


class BlobInfo(BaseModel):
    sha: Sha
    content: str
    encoding: Literal["base64", "utf-8"]
    size: int | None = None


class Blob(GitHubHandle):
    """Base for text and binary blobs."""

    repository: "Repository"
    sha: Sha

    content_model: ClassVar[Any] = BlobInfo

    @classmethod
    def fetch(cls, repository: "Repository", sha: Any) -> "Blob":
        info = repository.get_client().get(f"repos/{repository}/git/blobs/{as_sha(sha)}").json(BlobInfo)
        if info.encoding == "utf-8":
            return TextBlob(repository, info.sha, info.content)
        try:
            return BinaryBlob(repository, info.sha, decode_content(info.content))
        except binascii.Error as e:
            raise MalformedError(f"blob {info.sha}: {e}") from e

    @classmethod
    def create_text(cls, repository: "Repository", content: str) -> "TextBlob":
        payload = {"encoding": "utf-8", "content": content}
        sha = repository.get_client().post(f"repos/{repository}/git/blobs", json=payload).json(ShaRef).sha
        logger.debug("Created text blob %s in %s", sha, repository)
        return TextBlob(repository, sha, content)

    @classmethod
    def create_binary(cls, repository: "Repository", content: bytes) -> "BinaryBlob":
        payload = {"encoding": "base64", "content": encode_content(content)}
        sha = repository.get_client().post(f"repos/{repository}/git/blobs", json=payload).json(ShaRef).sha
        logger.debug("Created binary blob %s in %s (%d bytes)", sha, repository, len(content))
        return BinaryBlob(repository, sha, content)

    def get_client(self) -> GitHubClient:
        return self.repository.get_client()

    def get_parent(self) -> "Repository":
        return self.repository

    def get_endpoint(self) -> str:
        return f"repos/{self.repository}/git/blobs/{self.sha}"

    def is_text(self) -> bool:
        return isinstance(self, TextBlob)

    def is_binary(self) -> bool:
        return isinstance(self, BinaryBlob)

    def __str__(self) -> str:
        return str(self.sha)


@dataclass(frozen=True)
class TextBlob(Blob):
    repository: "Repository"
    sha: Sha
    content: str


@dataclass(frozen=True)
class BinaryBlob(Blob):
    repository: "Repository"
    sha: Sha
    content: bytes


__all__ = [
    "Blob",
    "TextBlob",
    "BinaryBlob",
    "BlobInfo",
    "encode_content",
    "decode_content",
]
