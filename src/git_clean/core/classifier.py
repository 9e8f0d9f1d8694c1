"""Decide whether a local branch should be kept or deleted.

For each local branch, it is in one of these states:

  1. Not pushed to the remote.
  2. Pushed to the remote but 0 PRs created.
  3. Pushed to the remote with at least 1 PR created, and at least 1 PR is not closed.
  4. Pushed to the remote with at least 1 PR created, and all PRs are closed.

States 1 and 2 look the same from here (no PRs found). In states 1 - 3 the
branch is retained: it is assumed to still be in development. In state 4 it
is deleted, whether or not the PRs were merged. The repository's default
branch is always retained.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from git_clean.gateway.github.types import ReviewRequestState, ReviewRequestSummary

REASON_DEFAULT_BRANCH = "default branch"
REASON_NO_REQUESTS = "no review requests; presumed local or not yet pushed"
REASON_OPEN_REQUEST = "open review request exists"
REASON_ALL_CLOSED = "all review requests closed"


class BranchLifecycleState(Enum):
    UNPUSHED_OR_NO_REQUESTS = "unpushed_or_no_requests"
    OPEN_REQUESTS_EXIST = "open_requests_exist"
    ALL_REQUESTS_CLOSED = "all_requests_closed"


class VerdictAction(Enum):
    RETAIN = "retain"
    DELETE = "delete"


@dataclass(frozen=True)
class Verdict:
    branch_name: str
    action: VerdictAction
    reason: str

    @property
    def should_delete(self) -> bool:
        return self.action is VerdictAction.DELETE


def lifecycle_state(requests: Sequence[ReviewRequestSummary]) -> BranchLifecycleState:
    if not requests:
        return BranchLifecycleState.UNPUSHED_OR_NO_REQUESTS
    if any(request.state is ReviewRequestState.OPEN for request in requests):
        return BranchLifecycleState.OPEN_REQUESTS_EXIST
    return BranchLifecycleState.ALL_REQUESTS_CLOSED


def classify(
    branch_name: str,
    requests: Sequence[ReviewRequestSummary],
    *,
    is_default_branch: bool,
) -> Verdict:
    """Classify a branch from its pull requests.

    Rules, first match wins:
      1. default branch -> retain
      2. no pull requests -> retain
      3. any open pull request -> retain
      4. otherwise (all closed) -> delete
    """
    if is_default_branch:
        return Verdict(branch_name, VerdictAction.RETAIN, REASON_DEFAULT_BRANCH)

    state = lifecycle_state(requests)
    if state is BranchLifecycleState.UNPUSHED_OR_NO_REQUESTS:
        return Verdict(branch_name, VerdictAction.RETAIN, REASON_NO_REQUESTS)
    if state is BranchLifecycleState.OPEN_REQUESTS_EXIST:
        return Verdict(branch_name, VerdictAction.RETAIN, REASON_OPEN_REQUEST)
    return Verdict(branch_name, VerdictAction.DELETE, REASON_ALL_CLOSED)
