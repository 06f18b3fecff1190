"""Requested reviewer reconciliation.

Reviewers listed for "add" are requested unless they are already
requested or have already submitted a review. Reviewers listed for
"re-add" are requested again after reviewing, unless already requested.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from upsert_pr.adapters.base import GitPlatformAdapter
from upsert_pr.models import PullRequest

LOG = logging.getLogger("upsert_pr.reviewers")

REVIEWS_PAGE_SIZE = 100


def parse_reviewers_csv(csv: str | None) -> List[str]:
    """Split a comma-separated login list.

    Each element is stripped; empty elements and repeats are dropped,
    first occurrence order is kept.
    """
    if not csv:
        return []
    logins = (part.strip() for part in csv.split(","))
    return list(dict.fromkeys(login for login in logins if login))


@dataclass(frozen=True)
class ReviewerPlan:
    """Reviewer sets of one reconciliation and the logins to request."""

    already_requested: frozenset[str]
    already_reviewed: frozenset[str]
    to_add: tuple[str, ...]
    to_readd: tuple[str, ...]
    to_request: List[str] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        added = set(self.to_add) - self.already_requested - self.already_reviewed
        readded = set(self.to_readd) - self.already_requested
        selected = added | readded
        ordered = dict.fromkeys(self.to_add + self.to_readd)
        object.__setattr__(self, "to_request", [login for login in ordered if login in selected])


def plan_reviewers(
    requested: Iterable[str],
    reviewed: Iterable[str],
    add_csv: str | None = "",
    readd_csv: str | None = "",
) -> ReviewerPlan:
    return ReviewerPlan(
        already_requested=frozenset(requested),
        already_reviewed=frozenset(reviewed),
        to_add=tuple(parse_reviewers_csv(add_csv)),
        to_readd=tuple(parse_reviewers_csv(readd_csv)),
    )


def reviewed_logins(
    adapter: GitPlatformAdapter,
    owner: str,
    repo: str,
    number: int,
    page_size: int = REVIEWS_PAGE_SIZE,
) -> frozenset[str]:
    """Logins that submitted at least one review, across all pages."""
    logins: set[str] = set()
    page = 1
    while True:
        reviews = adapter.list_reviews(owner, repo, number, page=page, per_page=page_size)
        logins.update(r.author for r in reviews if r.author)
        if len(reviews) < page_size:
            break
        page += 1
    return frozenset(logins)


def request_reviewers(
    adapter: GitPlatformAdapter,
    owner: str,
    repo: str,
    pr: PullRequest,
    add_csv: str | None = "",
    readd_csv: str | None = "",
    fetch_reviews: bool = True,
    log: logging.Logger | None = None,
) -> List[str]:
    """Request the missing reviewers on pr.

    Args:
        adapter: Platform adapter.
        owner: Repository owner.
        repo: Repository name.
        pr: Pull request with its currently requested reviewers.
        add_csv: Reviewers to add unless requested or already reviewed.
        readd_csv: Reviewers to add unless requested.
        fetch_reviews: Load review history; False for a PR created in this run.
        log: Logger.

    Returns:
        Logins that were requested (empty when no call was made).
    """
    logger = log or LOG
    if not parse_reviewers_csv(add_csv) and not parse_reviewers_csv(readd_csv):
        logger.info("No additional reviewers to add.")
        return []

    reviewed: frozenset[str] = frozenset()
    if fetch_reviews:
        reviewed = reviewed_logins(adapter, owner, repo, pr.number)

    plan = plan_reviewers(pr.requested_reviewers, reviewed, add_csv, readd_csv)
    if not plan.to_request:
        logger.info("No additional reviewers to add.")
        return []

    logger.info("Adding reviewers to PR #%s: %s", pr.number, ", ".join(plan.to_request))
    adapter.request_reviewers(owner, repo, pr.number, plan.to_request)
    return plan.to_request
