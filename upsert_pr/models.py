"""Data models for pull requests and reviews (Pydantic)."""

from pydantic import BaseModel, Field


class PullRequest(BaseModel):
    """Pull request as returned by the hosting platform."""

    number: int
    title: str
    # None when the platform reports an empty body
    body: str | None = None
    head_branch: str
    base_branch: str
    state: str = "open"
    html_url: str | None = None
    draft: bool = False
    requested_reviewers: list[str] = Field(default_factory=list)


class Review(BaseModel):
    """Submitted review on a pull request."""

    id: int
    author: str = ""
    state: str = ""
