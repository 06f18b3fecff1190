"""
Create or update the pull request for a (head, base) branch pair.

Flow: resolve head spec -> find open PR -> create or update it -> request
reviewers -> emit outputs. Every remote call is made sequentially; a failure
propagates and earlier successful calls are not rolled back.
"""

import logging
from dataclasses import dataclass

from upsert_pr.adapters.base import GitPlatformAdapter
from upsert_pr.config import ActionInputs
from upsert_pr.models import PullRequest
from upsert_pr.outputs import ActionOutputs
from upsert_pr.reviewers import request_reviewers
from upsert_pr.template import build_body_from_template, read_template_file

LOG = logging.getLogger("upsert_pr.upsert")


@dataclass(frozen=True)
class UpsertResult:
    """Outcome of one invocation."""

    created: bool
    pr: PullRequest


def resolve_head(source_branch: str, owner: str) -> str:
    """Return the head spec owner:branch.

    A PR head may live in another user's fork ('other:branch'); a bare
    branch name is taken to belong to the current repository owner.
    """
    if ":" in source_branch:
        return source_branch
    return f"{owner}:{source_branch}"


def find_existing_pr(
    adapter: GitPlatformAdapter,
    owner: str,
    repo: str,
    head: str,
    base: str,
) -> PullRequest | None:
    """Return the open PR for head and base, or None.

    The platform allows at most one open PR per (head, base) pair.
    """
    prs = adapter.list_pull_requests(owner, repo, base=base, head=head)
    return prs[0] if prs else None


def create_pr(
    adapter: GitPlatformAdapter,
    inputs: ActionInputs,
    owner: str,
    repo: str,
    head: str,
    base: str,
    log: logging.Logger | None = None,
) -> UpsertResult:
    """Open a new PR from the create_pr_* inputs.

    The body is create_pr_body when set, otherwise the template file. The
    title is checked before anything is read or sent.
    """
    logger = log or LOG
    inputs.require("create_pr_title")
    template_vars = inputs.create_template_vars

    body = inputs.create_pr_body
    if not body:
        body = read_template_file(
            inputs.create_pr_template_file,
            required=inputs.template_file_overridden,
            log=logger,
        )
    body = build_body_from_template(body, template_vars, log=logger)

    logger.info("Creating PR from %s into %s.", head, base)
    pr = adapter.create_pull_request(
        owner,
        repo,
        base=base,
        head=head,
        title=inputs.create_pr_title,
        body=body,
        draft=inputs.create_pr_draft,
    )
    logger.info("Created PR #%s: %s", pr.number, pr.html_url)

    # A PR created in this run has no reviews yet
    request_reviewers(
        adapter,
        owner,
        repo,
        pr,
        add_csv=inputs.create_pr_reviewers,
        fetch_reviews=False,
        log=logger,
    )
    return UpsertResult(created=True, pr=pr)


def update_pr(
    adapter: GitPlatformAdapter,
    inputs: ActionInputs,
    owner: str,
    repo: str,
    existing: PullRequest,
    log: logging.Logger | None = None,
) -> UpsertResult:
    """Bring an existing PR in line with the update_pr_* inputs.

    Template variables are merged into update_pr_body or, when that is
    empty, into the PR's current body. The update call is skipped when
    neither title nor body would change.
    """
    logger = log or LOG
    template_vars = inputs.update_template_vars

    title = inputs.update_pr_title or existing.title
    body = inputs.update_pr_body or existing.body or ""
    body = build_body_from_template(body, template_vars, log=logger)

    # the platform reports an empty body as None
    if title != existing.title or body != (existing.body or ""):
        logger.info("Updating PR #%s.", existing.number)
        adapter.update_pull_request(owner, repo, existing.number, title=title, body=body)
        pr = existing.model_copy(update={"title": title, "body": body})
    else:
        logger.info("PR #%s is already up-to-date.", existing.number)
        pr = existing

    request_reviewers(
        adapter,
        owner,
        repo,
        pr,
        add_csv=inputs.update_pr_reviewers,
        readd_csv=inputs.update_pr_rerequest_reviewers,
        log=logger,
    )
    return UpsertResult(created=False, pr=pr)


def upsert_pr(
    adapter: GitPlatformAdapter,
    inputs: ActionInputs,
    owner: str,
    repo: str,
    outputs: ActionOutputs | None = None,
    log: logging.Logger | None = None,
) -> UpsertResult:
    """Create the PR for the configured branches, or update the open one.

    Args:
        adapter: Platform adapter (all remote calls go through it).
        inputs: Action inputs.
        owner: Owner of the current repository; prefixes bare head branches.
        repo: Current repository name.
        outputs: Receives pr_created, pr_url and pr_number when given.
        log: Logger.

    Returns:
        Whether a PR was created, and the created or updated PR.
    """
    logger = log or LOG
    inputs.require("pr_source_branch", "pr_destination_branch")

    head = resolve_head(inputs.pr_source_branch, owner)
    base = inputs.pr_destination_branch

    existing = find_existing_pr(adapter, owner, repo, head=head, base=base)
    if existing is None:
        result = create_pr(adapter, inputs, owner, repo, head=head, base=base, log=logger)
    else:
        logger.info("Found open PR #%s for %s into %s.", existing.number, head, base)
        result = update_pr(adapter, inputs, owner, repo, existing, log=logger)

    if outputs is not None:
        outputs.emit_result(result)
    return result
