"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from upsert_pr.models import PullRequest, Review


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Pull request operations the upsert flow needs from a hosting
    platform."""

    @abstractmethod
    def list_pull_requests(
        self,
        owner: str,
        repo: str,
        base: str,
        head: str,
        state: str = "open",
    ) -> List[PullRequest]:
        """List pull requests with the given head (owner:branch) and base."""
        ...

    @abstractmethod
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
        """Create a pull request."""
        ...

    @abstractmethod
    def update_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        title: str,
        body: str,
    ) -> None:
        """Set title and body of an existing pull request."""
        ...

    @abstractmethod
    def list_reviews(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int = 1,
        per_page: int = 100,
    ) -> List[Review]:
        """Return one page of submitted reviews."""
        ...

    @abstractmethod
    def request_reviewers(
        self,
        owner: str,
        repo: str,
        number: int,
        reviewers: List[str],
    ) -> None:
        """Request reviews from the given logins."""
        ...
