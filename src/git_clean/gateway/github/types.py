"""Type definitions for GitHub pull request lookups."""

from dataclasses import dataclass
from enum import Enum

# GitHub documents 100 as the maximum page size for list endpoints
MAX_PAGE_SIZE = 100


class ReviewRequestState(Enum):
    """Lifecycle state of a pull request as far as cleaning is concerned."""

    OPEN = "open"
    CLOSED = "closed"

    @staticmethod
    def from_api(state: str | None) -> "ReviewRequestState":
        """Map the API's state string.

        Only a case-insensitive "closed" counts as closed; anything else,
        including a missing value, is treated as open so that ambiguity
        retains the branch.
        """
        if state is not None and state.lower() == "closed":
            return ReviewRequestState.CLOSED
        return ReviewRequestState.OPEN


@dataclass(frozen=True)
class ReviewRequestSummary:
    """A pull request whose head branch matches a local branch."""

    number: int
    state: ReviewRequestState


@dataclass(frozen=True)
class PullRequestRecord:
    """A pull request as reported by one page of the list endpoint."""

    number: int
    state: str | None  # raw API value, normally "open" or "closed"
    head_ref: str | None  # source branch name


@dataclass(frozen=True)
class PullRequestPage:
    """One page of pull request results."""

    items: tuple[PullRequestRecord, ...]
    has_next_page: bool


@dataclass(frozen=True)
class RepositoryIdentity:
    """GitHub owner and repository name, e.g. ("dagster-io", "erk")."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"
