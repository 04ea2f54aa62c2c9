"""Tests for issues, assignees and comments."""

import json

import pytest

from ghandle.errors import CommentNotFoundError, NotAnIssueError, NothingError
from ghandle.issue import Issue, IssueComment
from ghandle.models import IssueInfo, IssueKind

API = "https://api.github.com"
REPO = f"{API}/repos/octocat/hello"
OCTOCAT = {"login": "octocat", "id": 1, "type": "User"}


def issue_body(number: int, **extra) -> dict:
    return {"number": number, "title": f"issue {number}", "state": "open", "user": OCTOCAT, **extra}


def comment_body(number: int, body: str = "hi") -> dict:
    return {"id": number, "body": body, "user": OCTOCAT}


class TestIssueInfo:
    def test_pull_request_key_with_null_value(self):
        """Test the presence of the key decides, not its value."""
        info = IssueInfo.model_validate(issue_body(7, pull_request=None))

        assert info.kind is IssueKind.PULL_REQUEST
        assert info.is_pull_request()

    def test_plain(self):
        info = IssueInfo.model_validate(issue_body(8, assignees=None))

        assert info.is_plain()
        assert info.is_open()
        assert info.assignees == []


class TestIssue:
    def test_fetch(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/8", json=issue_body(8))

        issue = repository.get_issue(8)

        assert issue == Issue(repository, 8)
        assert issue.get_endpoint() == "repos/octocat/hello/issues/8"

    def test_fetch_pull_request(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/7", json=issue_body(7, pull_request=None))

        with pytest.raises(NotAnIssueError) as excinfo:
            Issue.fetch(repository, 7)

        assert excinfo.value.number == 7

    def test_fetch_all_drops_pull_requests(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/issues?per_page=100&page=1",
            json=[issue_body(1), issue_body(2, pull_request={"url": "x"}), issue_body(3)],
        )

        assert [issue.number for issue in repository.get_all_issues()] == [1, 3]

    def test_create(self, repository, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{REPO}/issues", status_code=201, json=issue_body(9))

        issue = repository.create_issue("broken", "details")

        assert issue.number == 9
        assert json.loads(httpx_mock.get_request().content) == {"title": "broken", "body": "details"}

    @pytest.mark.parametrize(
        "call, payload",
        [
            (lambda issue: issue.close(), {"state": "closed"}),
            (lambda issue: issue.reopen(), {"state": "open"}),
            (lambda issue: issue.set_title("new"), {"title": "new"}),
            (lambda issue: issue.set_body("text"), {"body": "text"}),
        ],
    )
    def test_lifecycle(self, repository, httpx_mock, call, payload):
        httpx_mock.add_response(method="PATCH", url=f"{REPO}/issues/8", json=issue_body(8))
        issue = Issue(repository, 8)

        assert call(issue) is issue

        assert json.loads(httpx_mock.get_request().content) == payload


class TestAssignees:
    def test_set_assignees(self, repository, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{REPO}/issues/8/assignees", status_code=201, json=issue_body(8))

        Issue(repository, 8).set_assignees(["octocat", "hubot"])

        assert json.loads(httpx_mock.get_request().content) == {"assignees": ["octocat", "hubot"]}

    def test_remove_assignees(self, repository, httpx_mock):
        httpx_mock.add_response(method="DELETE", url=f"{REPO}/issues/8/assignees", json=issue_body(8))

        Issue(repository, 8).remove_assignees(["hubot"])

        request = httpx_mock.get_request()
        assert request.method == "DELETE"
        assert json.loads(request.content) == {"assignees": ["hubot"]}

    def test_get_assignees_reads_issue(self, repository, httpx_mock):
        """Test assignees come from a GET of the issue, never a POST."""
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/8", json=issue_body(8, assignees=[OCTOCAT]))

        assignees = Issue(repository, 8).get_assignees()

        assert [assignee.login for assignee in assignees] == ["octocat"]
        assert httpx_mock.get_request().method == "GET"


class TestComments:
    def test_get_comment(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/comments/55", json=comment_body(55))
        issue = Issue(repository, 8)

        comment = issue.get_comment(55)

        assert comment == IssueComment(issue, 55)
        assert comment.get_endpoint() == "repos/octocat/hello/issues/comments/55"
        assert comment.get_parent() is issue

    def test_missing_comment(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/comments/56", status_code=404)
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/comments/56", status_code=404)
        issue = Issue(repository, 8)

        with pytest.raises(CommentNotFoundError) as excinfo:
            issue.get_comment(56)

        assert excinfo.value.number == 56
        assert issue.has_comment(56) is False

    def test_get_all_comments(self, repository, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/issues/8/comments?per_page=100&page=1",
            json=[comment_body(1), comment_body(2)],
        )

        comments = Issue(repository, 8).get_all_comments()

        assert [comment.number for comment in comments] == [1, 2]

    def test_has_comments_on_missing_listing(self, repository, httpx_mock):
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/8/comments?per_page=100&page=1", status_code=404)

        assert Issue(repository, 8).has_comments() is False

    def test_missing_later_page_keeps_collected_comments(self, repository, httpx_mock):
        """Test a 404 on page two ends the listing without dropping page one."""
        httpx_mock.add_response(
            method="GET",
            url=f"{REPO}/issues/8/comments?per_page=100&page=1",
            json=[comment_body(number) for number in range(1, 101)],
        )
        httpx_mock.add_response(method="GET", url=f"{REPO}/issues/8/comments?per_page=100&page=2", status_code=404)

        comments = Issue(repository, 8).get_all_comments()

        assert len(comments) == 100
        assert comments[-1] == IssueComment(Issue(repository, 8), 100)

    def test_create_comment(self, repository, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{REPO}/issues/8/comments", status_code=201, json=comment_body(77, "thanks"))

        comment = Issue(repository, 8).create_comment("thanks")

        assert comment.number == 77
        assert json.loads(httpx_mock.get_request().content) == {"body": "thanks"}

    def test_delete_comment_without_fetch(self, repository, httpx_mock):
        httpx_mock.add_response(method="DELETE", url=f"{REPO}/issues/comments/77", status_code=204)

        Issue(repository, 8).delete_comment(77)

        assert len(httpx_mock.get_requests()) == 1

    def test_edit_comment(self, repository, httpx_mock):
        httpx_mock.add_response(method="PATCH", url=f"{REPO}/issues/comments/77", json=comment_body(77, "edited"))

        comment = IssueComment(Issue(repository, 8), 77)
        comment.set_body("edited")

        assert json.loads(httpx_mock.get_request().content) == {"body": "edited"}

    def test_delete_missing_comment(self, repository, httpx_mock):
        httpx_mock.add_response(method="DELETE", url=f"{REPO}/issues/comments/78", status_code=404)

        with pytest.raises(NothingError):
            IssueComment(Issue(repository, 8), 78).delete()
