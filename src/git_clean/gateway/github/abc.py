"""Abstract base class for GitHub pull request operations."""

from abc import ABC, abstractmethod

from git_clean.gateway.github.types import PullRequestPage


class GitHub(ABC):
    """Abstract interface for the GitHub operations git-clean needs.

    All implementations (real and fake) must implement this interface.
    Implementations must be safe to call from several threads at once.
    """

    @abstractmethod
    def list_pull_requests_page(
        self,
        owner: str,
        repo: str,
        branch: str,
        *,
        page: int,
        per_page: int,
    ) -> PullRequestPage:
        """Fetch one page of pull requests (any state) opened from `branch`.

        The service-side head filter is not trusted to be exact: callers must
        still compare each record's head_ref against the branch name.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Source branch name
            page: 1-based page number
            per_page: Page size, at most MAX_PAGE_SIZE

        Returns:
            PullRequestPage with the page's records and whether more pages exist

        Raises:
            GitHubApiError: If the request fails
            ValueError: If per_page exceeds MAX_PAGE_SIZE
        """
        ...

    @abstractmethod
    def get_default_branch(self, owner: str, repo: str) -> str | None:
        """Get the repository's default branch name.

        Returns:
            Default branch name, or None if the service does not report one

        Raises:
            GitHubApiError: If the request fails
        """
        ...
