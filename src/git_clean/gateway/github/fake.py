"""Fake GitHub operations for testing."""

import threading
from dataclasses import dataclass

from git_clean.core.errors import GitHubApiError
from git_clean.gateway.github.abc import GitHub
from git_clean.gateway.github.types import MAX_PAGE_SIZE, PullRequestPage, PullRequestRecord


@dataclass(frozen=True)
class PageRequest:
    owner: str
    repo: str
    branch: str
    page: int
    per_page: int


class FakeGitHub(GitHub):
    """In-memory fake implementation of GitHub operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.

    Pull requests are served in pages of the requested size, so pagination is
    exercised exactly as against the real service. Records are returned as
    configured, including ones whose head_ref differs from the requested
    branch, which mimics an imprecise service-side filter.
    """

    def __init__(
        self,
        *,
        pull_requests: dict[str, list[PullRequestRecord]] | None = None,
        default_branch: str | None = None,
        branch_errors: dict[str, Exception] | None = None,
        default_branch_error: Exception | None = None,
        failing_pages: dict[str, int] | None = None,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            pull_requests: Mapping of branch name -> pull requests served for it
            default_branch: Value returned by get_default_branch()
            branch_errors: Branch name -> exception raised on any page request
            default_branch_error: Exception raised by get_default_branch()
            failing_pages: Branch name -> page number that fails with GitHubApiError
        """
        self._pull_requests = pull_requests or {}
        self._default_branch = default_branch
        self._branch_errors = branch_errors or {}
        self._default_branch_error = default_branch_error
        self._failing_pages = failing_pages or {}

        self._page_requests: list[PageRequest] = []
        self._lock = threading.Lock()

    def list_pull_requests_page(
        self,
        owner: str,
        repo: str,
        branch: str,
        *,
        page: int,
        per_page: int,
    ) -> PullRequestPage:
        if per_page > MAX_PAGE_SIZE:
            msg = f"per_page must be at most {MAX_PAGE_SIZE}, got {per_page}"
            raise ValueError(msg)

        with self._lock:
            self._page_requests.append(
                PageRequest(owner=owner, repo=repo, branch=branch, page=page, per_page=per_page)
            )

        if branch in self._branch_errors:
            raise self._branch_errors[branch]
        if self._failing_pages.get(branch) == page:
            raise GitHubApiError(f"list pull requests for branch '{branch}' (page {page})")

        records = self._pull_requests.get(branch, [])
        start = (page - 1) * per_page
        end = start + per_page
        return PullRequestPage(items=tuple(records[start:end]), has_next_page=end < len(records))

    def get_default_branch(self, owner: str, repo: str) -> str | None:
        if self._default_branch_error is not None:
            raise self._default_branch_error
        return self._default_branch

    @property
    def page_requests(self) -> list[PageRequest]:
        """Every page request made, in call order."""
        with self._lock:
            return self._page_requests.copy()

    @property
    def requested_branches(self) -> set[str]:
        with self._lock:
            return {request.branch for request in self._page_requests}
