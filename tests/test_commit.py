"""Tests for commits, compares and archive download."""

import io
import json
import zipfile
from datetime import datetime, timezone

import pytest

from ghandle.commit import Commit, Compare
from ghandle.errors import ArchiveError, CommitNotFoundError, MalformedError, UnauthorizedError
from ghandle.models import CompareFile, CompareStatus
from ghandle.tree import Tree

API = "https://api.github.com"
REPO = f"{API}/repos/octocat/hello"


def commit_body(sha: str, tree: str = "t1", parents: tuple[str, ...] = ()) -> dict:
    return {
        "sha": sha,
        "message": f"commit {sha}",
        "author": {"name": "Octo", "email": "octo@example.com", "date": "2024-05-06T07:08:09Z"},
        "committer": {"name": "Octo", "email": "octo@example.com", "date": "2024-05-06T07:08:09Z"},
        "tree": {"sha": tree},
        "parents": [{"sha": parent} for parent in parents],
        "verification": {"verified": False, "reason": "unsigned", "signature": None, "payload": None},
    }


class TestFetch:
    def test_fetch(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c1", json=commit_body("c1"))

        commit = repository.get_commit("c1")

        assert commit.sha == "c1"
        assert commit.get_date() == datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
        assert str(commit) == "c1"
        assert commit.get_endpoint() == "repos/octocat/hello/git/commits/c1"

    def test_missing(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/nope", status_code=404)

        with pytest.raises(CommitNotFoundError) as excinfo:
            Commit.fetch(repository, "nope")

        assert excinfo.value.commit == "nope"

    def test_has_commit(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c1", json=commit_body("c1"))
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/nope", status_code=404)

        assert repository.has_commit("c1") is True
        assert repository.has_commit("nope") is False

    def test_has_commit_propagates_other_errors(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c1", status_code=401)

        with pytest.raises(UnauthorizedError):
            repository.has_commit("c1")


class TestNavigation:
    def test_get_parents(self, repository, httpx_mock):
        """Test parents are fetched one by one in order."""
        commit = Commit(repository, "c3", None)
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c3", json=commit_body("c3", parents=("c1", "c2")))
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c1", json=commit_body("c1"))
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c2", json=commit_body("c2"))

        assert [parent.sha for parent in commit.get_parents()] == ["c1", "c2"]

    def test_get_tree(self, repository, httpx_mock):
        commit = Commit(repository, "c1", None)
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c1", json=commit_body("c1", tree="t7"))
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/trees/t7?recursive=true", json={"sha": "t7", "tree": []})

        tree = commit.get_tree(recursive=True)

        assert tree == Tree(repository, "t7", ())

    def test_get_content_verification(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/git/commits/c1", json=commit_body("c1"))

        info = Commit(repository, "c1", None).get_content()

        assert info.verification.verified is False
        assert info.parent_shas == []

    def test_create(self, repository, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{REPO}/git/commits", status_code=201, json=commit_body("c2"))
        parent = Commit(repository, "c1", None)
        tree = Tree(repository, "t1", ())

        commit = repository.create_commit([parent], tree, "second")

        assert commit.sha == "c2"
        assert json.loads(httpx_mock.get_request().content) == {
            "parents": ["c1"],
            "message": "second",
            "tree": "t1",
        }


class TestCompare:
    def test_files_in_server_order(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/compare/c1...c2",
            json={
                "status": "ahead",
                "files": [
                    {"filename": "b.txt", "sha": "s2", "status": "modified", "additions": 1},
                    {"filename": "a.txt", "sha": "s1", "status": "added"},
                    {"filename": "old.txt", "sha": "s3", "status": "removed"},
                ],
            },
        )
        base = Commit(repository, "c1", None)
        head = Commit(repository, "c2", None)

        compare = base.compare(head)

        assert isinstance(compare, Compare)
        assert [file.path for file in compare] == ["b.txt", "a.txt", "old.txt"]
        assert compare[1].status is CompareStatus.ADDED
        assert len(compare) == 3
        assert str(compare) == "c1..c2"

    def test_hashable(self, repository):
        base = Commit(repository, "c1", None)
        head = Commit(repository, "c2", None)
        files = (CompareFile(path="a.txt", sha="s1", status=CompareStatus.ADDED),)

        assert len({Compare(base, head, files), Compare(base, head, files)}) == 1

    def test_unknown_status_is_malformed(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/compare/c1...c2",
            json={"files": [{"filename": "x", "sha": "s", "status": "exploded"}]},
        )

        with pytest.raises(MalformedError):
            repository.compare(Commit(repository, "c1", None), Commit(repository, "c2", None))


class TestDownload:
    def test_extracts_zipball(self, repository, httpx_mock, tmp_path):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("octocat-hello-c1/README.md", "hello")
        httpx_mock.add_response(method="GET", url=f"{REPO}/zipball/c1", content=buffer.getvalue())

        Commit(repository, "c1", None).download(tmp_path)

        assert (tmp_path / "octocat-hello-c1" / "README.md").read_text() == "hello"

    def test_bad_archive(self, repository, httpx_mock, tmp_path):
        httpx_mock.add_response(method="GET", url=f"{REPO}/zipball/c1", content=b"not a zip")

        with pytest.raises(ArchiveError):
            Commit(repository, "c1", None).download(tmp_path)
