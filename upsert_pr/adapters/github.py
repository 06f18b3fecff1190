"""GitHub API adapter."""

from typing import Any, Dict, List

import requests

from upsert_pr.adapters.base import GitPlatformAdapter, GitPlatformError
from upsert_pr.models import PullRequest, Review


def _pr_from_api(data: Dict[str, Any]) -> PullRequest:
    head = data.get("head") or {}
    base = data.get("base") or {}
    reviewers = [
        r["login"] for r in (data.get("requested_reviewers") or []) if isinstance(r, dict) and "login" in r
    ]
    return PullRequest(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body"),
        head_branch=head.get("ref", ""),
        base_branch=base.get("ref", ""),
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
        draft=bool(data.get("draft", False)),
        requested_reviewers=reviewers,
    )


def _review_from_api(data: Dict[str, Any]) -> Review:
    # user is null for deleted accounts
    user = data.get("user") or {}
    return Review(
        id=data["id"],
        author=user.get("login", ""),
        state=data.get("state", ""),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        resp = self._session.request(method, url, params=params, json=json, timeout=30)
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}")
        return resp

    def list_pull_requests(
        self,
        owner: str,
        repo: str,
        base: str,
        head: str,
        state: str = "open",
    ) -> List[PullRequest]:
        resp = self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "base": base, "head": head},
        )
        data = resp.json() or []
        return [_pr_from_api(d) for d in data]

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        base: str,
        head: str,
        title: str,
        body: str,
        draft: bool = False,
    ) -> PullRequest:
        resp = self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "body": body, "head": head, "base": base, "draft": draft},
        )
        return _pr_from_api(resp.json())

    def update_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        title: str,
        body: str,
    ) -> None:
        self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/pulls/{number}",
            json={"title": title, "body": body},
        )

    def list_reviews(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int = 1,
        per_page: int = 100,
    ) -> List[Review]:
        resp = self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{number}/reviews",
            params={"page": page, "per_page": per_page},
        )
        data = resp.json() or []
        return [_review_from_api(d) for d in data]

    def request_reviewers(
        self,
        owner: str,
        repo: str,
        number: int,
        reviewers: List[str],
    ) -> None:
        self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{number}/requested_reviewers",
            json={"reviewers": reviewers},
        )
