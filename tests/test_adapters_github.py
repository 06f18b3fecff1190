"""Unit tests for GitHub adapter (mocked API)."""

from unittest.mock import Mock, patch

import pytest

from upsert_pr.adapters.base import GitPlatformError
from upsert_pr.adapters.github import GitHubAdapter
from upsert_pr.models import PullRequest, Review

PR_DATA = {
    "number": 12,
    "title": "Update dependencies",
    "body": None,
    "state": "open",
    "draft": False,
    "head": {"ref": "automation/deps"},
    "base": {"ref": "main"},
    "html_url": "https://github.com/acme/widgets/pull/12",
    "requested_reviewers": [{"login": "alice"}, {"login": "bob"}],
}


@pytest.fixture
def adapter() -> GitHubAdapter:
    return GitHubAdapter(token="test-token", api_url="https://api.github.com/")


def _resp(status: int, data=None) -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.json.return_value = data
    return resp


def test_session_headers(adapter: GitHubAdapter) -> None:
    assert adapter._session.headers["Authorization"] == "token test-token"
    assert adapter._session.headers["Accept"] == "application/vnd.github.v3+json"


def test_list_pull_requests(adapter: GitHubAdapter) -> None:
    """list_pull_requests filters by state, base and head."""
    with patch.object(adapter._session, "request", return_value=_resp(200, [PR_DATA])) as req:
        prs = adapter.list_pull_requests("acme", "widgets", base="main", head="acme:automation/deps")

    assert len(prs) == 1
    pr = prs[0]
    assert isinstance(pr, PullRequest)
    assert pr.number == 12
    assert pr.body is None
    assert pr.state == "open"
    assert pr.draft is False
    assert pr.head_branch == "automation/deps"
    assert pr.base_branch == "main"
    assert pr.requested_reviewers == ["alice", "bob"]
    args, kwargs = req.call_args
    assert args == ("GET", "https://api.github.com/repos/acme/widgets/pulls")
    assert kwargs["params"] == {"state": "open", "base": "main", "head": "acme:automation/deps"}


def test_list_pull_requests_empty(adapter: GitHubAdapter) -> None:
    with patch.object(adapter._session, "request", return_value=_resp(200, [])):
        assert adapter.list_pull_requests("acme", "widgets", base="main", head="acme:x") == []


def test_create_pull_request(adapter: GitHubAdapter) -> None:
    data = dict(PR_DATA, body="Body", draft=True, requested_reviewers=[])
    with patch.object(adapter._session, "request", return_value=_resp(201, data)) as req:
        pr = adapter.create_pull_request(
            "acme", "widgets", base="main", head="acme:automation/deps", title="T", body="Body", draft=True
        )
    assert pr.draft is True
    assert pr.requested_reviewers == []
    assert req.call_args[0][0] == "POST"
    assert req.call_args[1]["json"] == {
        "title": "T",
        "body": "Body",
        "head": "acme:automation/deps",
        "base": "main",
        "draft": True,
    }


def test_update_pull_request(adapter: GitHubAdapter) -> None:
    with patch.object(adapter._session, "request", return_value=_resp(200, PR_DATA)) as req:
        adapter.update_pull_request("acme", "widgets", 12, title="T", body="B")
    assert req.call_args[0] == ("PATCH", "https://api.github.com/repos/acme/widgets/pulls/12")
    assert req.call_args[1]["json"] == {"title": "T", "body": "B"}


def test_list_reviews(adapter: GitHubAdapter) -> None:
    data = [
        {"id": 1, "user": {"login": "carol"}, "state": "APPROVED"},
        {"id": 2, "user": None, "state": "COMMENTED"},
    ]
    with patch.object(adapter._session, "request", return_value=_resp(200, data)) as req:
        reviews = adapter.list_reviews("acme", "widgets", 12, page=2, per_page=50)
    assert reviews == [
        Review(id=1, author="carol", state="APPROVED"),
        Review(id=2, author="", state="COMMENTED"),
    ]
    assert "/repos/acme/widgets/pulls/12/reviews" in req.call_args[0][1]
    assert req.call_args[1]["params"] == {"page": 2, "per_page": 50}


def test_request_reviewers(adapter: GitHubAdapter) -> None:
    with patch.object(adapter._session, "request", return_value=_resp(201, PR_DATA)) as req:
        adapter.request_reviewers("acme", "widgets", 12, ["carol"])
    assert req.call_args[0] == ("POST", "https://api.github.com/repos/acme/widgets/pulls/12/requested_reviewers")
    assert req.call_args[1]["json"] == {"reviewers": ["carol"]}


def test_api_error_uses_json_message(adapter: GitHubAdapter) -> None:
    resp = _resp(422, {"message": "Reviews may only be requested from collaborators."})
    resp.text = "raw"
    with patch.object(adapter._session, "request", return_value=resp):
        with pytest.raises(GitPlatformError) as exc_info:
            adapter.request_reviewers("acme", "widgets", 12, ["stranger"])
    assert str(exc_info.value) == "422: Reviews may only be requested from collaborators."


def test_api_error_without_json_uses_text(adapter: GitHubAdapter) -> None:
    resp = Mock()
    resp.status_code = 502
    resp.text = "Bad Gateway"
    resp.json.side_effect = ValueError("no json")
    with patch.object(adapter._session, "request", return_value=resp):
        with pytest.raises(GitPlatformError) as exc_info:
            adapter.list_pull_requests("acme", "widgets", base="main", head="acme:x")
    assert str(exc_info.value) == "502: Bad Gateway"


def test_pr_state_draft_and_review_state_mapping(adapter: GitHubAdapter) -> None:
    """state and draft come from the PR payload, review state from each
    review."""
    closed_draft = dict(PR_DATA, state="closed", draft=True)
    with patch.object(adapter._session, "request", return_value=_resp(200, [closed_draft])):
        pr = adapter.list_pull_requests("acme", "widgets", base="main", head="acme:automation/deps", state="all")[0]
    assert pr.state == "closed"
    assert pr.draft is True

    reviews_data = [{"id": 3, "user": {"login": "dave"}, "state": "CHANGES_REQUESTED"}]
    with patch.object(adapter._session, "request", return_value=_resp(200, reviews_data)):
        review = adapter.list_reviews("acme", "widgets", 12)[0]
    assert review.state == "CHANGES_REQUESTED"
    assert review.author == "dave"


def test_missing_state_and_draft_use_defaults(adapter: GitHubAdapter) -> None:
    minimal = {"number": 1, "title": "T", "head": {"ref": "f"}, "base": {"ref": "main"}}
    with patch.object(adapter._session, "request", return_value=_resp(200, [minimal])):
        pr = adapter.list_pull_requests("acme", "widgets", base="main", head="acme:f")[0]
    assert pr.state == "open"
    assert pr.draft is False
    assert pr.requested_reviewers == []
