"""Tests for blobs and the base64 content codec."""

import binascii
import json

import pytest

from ghandle.blob import BinaryBlob, Blob, TextBlob, decode_content, encode_content
from ghandle.errors import MalformedError

API = "https://api.github.com"
REPO = f"{API}/repos/octocat/hello"


class TestContentCodec:
    def test_round_trip(self):
        data = bytes(range(256))

        assert decode_content(encode_content(data)) == data

    def test_encode_is_single_line(self):
        assert "\n" not in encode_content(b"x" * 200)

    def test_whitespace_is_ignored(self):
        """Test line-wrapped content as served by the API decodes."""
        assert decode_content("aGVs\nbG8g\r\nd29y bGQ=\n") == b"hello world"

    @pytest.mark.parametrize("text", ["aGVsbG8", "aGVs*G8=", "a"])
    def test_malformed(self, text):
        with pytest.raises(binascii.Error):
            decode_content(text)


class TestBlob:
    def test_fetch_binary(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/git/blobs/b1",
            json={"sha": "b1", "content": "aGVs\nbG8=\n", "encoding": "base64", "size": 5},
        )

        blob = repository.get_blob("b1")

        assert blob == BinaryBlob(repository, "b1", b"hello")
        assert blob.is_binary()

    def test_fetch_text(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/git/blobs/b2",
            json={"sha": "b2", "content": "plain", "encoding": "utf-8"},
        )

        blob = Blob.fetch(repository, "b2")

        assert isinstance(blob, TextBlob)
        assert blob.content == "plain"

    def test_fetch_corrupt_base64(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/git/blobs/b3",
            json={"sha": "b3", "content": "!!!", "encoding": "base64"},
        )

        with pytest.raises(MalformedError):
            repository.get_blob("b3")

    def test_create_binary(self, repository, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{REPO}/git/blobs", status_code=201, json={"sha": "b4"})

        blob = repository.create_binary_blob(b"\x00\xff")

        assert blob == BinaryBlob(repository, "b4", b"\x00\xff")
        assert json.loads(httpx_mock.get_request().content) == {"encoding": "base64", "content": "AP8="}

    def test_create_text(self, repository, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{REPO}/git/blobs", status_code=201, json={"sha": "b5"})

        blob = repository.create_text_blob("hi")

        assert blob.sha == "b5"
        assert blob.get_endpoint() == "repos/octocat/hello/git/blobs/b5"
        assert json.loads(httpx_mock.get_request().content) == {"encoding": "utf-8", "content": "hi"}
