"""Resolve the pull requests opened from a local branch."""

import logging

from git_clean.gateway.github.abc import GitHub
from git_clean.gateway.github.types import (
    MAX_PAGE_SIZE,
    ReviewRequestState,
    ReviewRequestSummary,
)

logger = logging.getLogger(__name__)


def resolve_pull_requests(
    github: GitHub,
    owner: str,
    repo: str,
    branch: str,
    *,
    per_page: int = MAX_PAGE_SIZE,
) -> list[ReviewRequestSummary]:
    """Collect every pull request whose head branch is exactly `branch`.

    Pages are fetched one at a time until the service reports no next page.
    A failure on any page fails the whole resolution; nothing is retried and
    no partial result is returned.

    Args:
        github: GitHub gateway
        owner: Repository owner
        repo: Repository name
        branch: Local branch name to match against each pull request's head ref
        per_page: Page size, at most MAX_PAGE_SIZE

    Returns:
        Summaries in the order the service returned them

    Raises:
        GitHubApiError: If any page request fails
    """
    summaries: list[ReviewRequestSummary] = []
    page = 1
    while True:
        result = github.list_pull_requests_page(owner, repo, branch, page=page, per_page=per_page)
        for record in result.items:
            if record.head_ref != branch:
                logger.debug(
                    "Ignoring PR #%d: head %r does not match branch %r",
                    record.number,
                    record.head_ref,
                    branch,
                )
                continue
            summaries.append(
                ReviewRequestSummary(
                    number=record.number,
                    state=ReviewRequestState.from_api(record.state),
                )
            )
        if not result.has_next_page:
            break
        page += 1

    logger.debug("Branch %r: %d pull request(s) over %d page(s)", branch, len(summaries), page)
    return summaries
