"""Production implementation of GitHub operations over the REST API."""

from typing import Any

from git_clean.core.errors import GitHubApiError
from git_clean.gateway.github.abc import GitHub
from git_clean.gateway.github.types import MAX_PAGE_SIZE, PullRequestPage, PullRequestRecord
from git_clean.gateway.http.abc import HttpClient, HttpClientError


class RealGitHub(GitHub):
    """Production implementation using direct REST calls through an HttpClient."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    def list_pull_requests_page(
        self,
        owner: str,
        repo: str,
        branch: str,
        *,
        page: int,
        per_page: int,
    ) -> PullRequestPage:
        """Fetch one page from `GET /repos/{owner}/{repo}/pulls`.

        Uses `state=all` so closed and merged pull requests are included, and
        `head={owner}:{branch}` to narrow the listing. Whether more pages exist
        is read from the `Link` header.
        """
        if per_page > MAX_PAGE_SIZE:
            msg = f"per_page must be at most {MAX_PAGE_SIZE}, got {per_page}"
            raise ValueError(msg)

        operation = f"list pull requests for branch '{branch}' (page {page})"
        try:
            response = self._http.get(
                f"repos/{owner}/{repo}/pulls",
                params={
                    "state": "all",
                    "head": f"{owner}:{branch}",
                    "per_page": per_page,
                    "page": page,
                },
            )
        except HttpClientError as e:
            raise GitHubApiError(operation) from e

        if not isinstance(response.data, list):
            raise GitHubApiError(operation) from ValueError(
                f"expected a JSON array, got {type(response.data).__name__}"
            )

        items = tuple(_parse_pull_request(item, operation) for item in response.data)
        return PullRequestPage(items=items, has_next_page="next" in response.links)

    def get_default_branch(self, owner: str, repo: str) -> str | None:
        operation = f"get default branch of {owner}/{repo}"
        try:
            response = self._http.get(f"repos/{owner}/{repo}")
        except HttpClientError as e:
            raise GitHubApiError(operation) from e

        if not isinstance(response.data, dict):
            return None
        default_branch = response.data.get("default_branch")
        if not isinstance(default_branch, str) or not default_branch:
            return None
        return default_branch


def _parse_pull_request(item: Any, operation: str) -> PullRequestRecord:
    if not isinstance(item, dict) or not isinstance(item.get("number"), int):
        raise GitHubApiError(operation) from ValueError(f"malformed pull request entry: {item!r}")

    head = item.get("head")
    head_ref = head.get("ref") if isinstance(head, dict) else None
    state = item.get("state")
    return PullRequestRecord(
        number=item["number"],
        state=state if isinstance(state, str) else None,
        head_ref=head_ref if isinstance(head_ref, str) else None,
    )
