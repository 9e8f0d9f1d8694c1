"""Evaluate every local branch against GitHub and delete the finished ones.

The work is split into three phases so the repository is never touched from
more than one thread:

1. Enumerate local branches once, on the calling thread, into plain values.
2. Evaluate each branch concurrently: resolve its pull requests and classify.
   Each evaluation's failure is captured as a value and never reaches its
   siblings.
3. After every evaluation has finished, re-resolve and delete the branches
   verdicted for deletion, one at a time, on the calling thread.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from git_clean.core.classifier import Verdict, classify
from git_clean.core.errors import (
    BranchNotFoundError,
    RemoteUrlNotRecognizedError,
    WrongRemoteCountError,
    flatten_error_chain,
    format_error_chain,
)
from git_clean.core.remote_url import parse_remote_url
from git_clean.core.resolver import resolve_pull_requests
from git_clean.gateway.git.abc import Git, LocalBranch
from git_clean.gateway.github.abc import GitHub
from git_clean.gateway.github.types import RepositoryIdentity

logger = logging.getLogger(__name__)

STAGE_EVALUATE = "evaluate"
STAGE_DELETE = "delete"


@dataclass(frozen=True)
class BranchFailure:
    """A branch that could not be evaluated or deleted.

    Attributes:
        branch_name: Branch name (undecodable bytes replaced)
        stage: STAGE_EVALUATE or STAGE_DELETE
        chain: Error messages from outermost to innermost cause
    """

    branch_name: str
    stage: str
    chain: tuple[str, ...]

    @property
    def message(self) -> str:
        return ": ".join(self.chain)


@dataclass(frozen=True)
class CleanReport:
    """Outcome of a cleaning run."""

    repository: RepositoryIdentity
    default_branch: str | None
    dry_run: bool
    verdicts: list[Verdict] = field(default_factory=list)
    evaluation_failures: list[BranchFailure] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    deletion_failures: list[BranchFailure] = field(default_factory=list)

    @property
    def branches_to_delete(self) -> list[str]:
        return [verdict.branch_name for verdict in self.verdicts if verdict.should_delete]

    @property
    def failures(self) -> list[BranchFailure]:
        return [*self.evaluation_failures, *self.deletion_failures]


def resolve_repository_identity(git: Git, repo_root: Path) -> RepositoryIdentity:
    """Derive the GitHub owner/name from the repository's only remote.

    Raises:
        WrongRemoteCountError: If there is not exactly one remote
        RemoteNameNotUtf8Error: If a remote name is not valid UTF-8
        RemoteUrlNotUtf8Error: If the remote URL is not valid UTF-8
        RemoteUrlNotRecognizedError: If the URL is not a recognized GitHub URL
    """
    remotes = git.list_remotes(repo_root)
    if len(remotes) != 1:
        raise WrongRemoteCountError(len(remotes))

    remote = remotes[0]
    url = git.get_remote_url(repo_root, remote)
    logger.debug("Got remote %r: %s", remote, url)

    parsed = parse_remote_url(url)
    if parsed is None:
        raise RemoteUrlNotRecognizedError(url)
    owner, name = parsed
    logger.debug("Parsed url: owner=%s repo=%s", owner, name)
    return RepositoryIdentity(owner=owner, name=name)


def fetch_default_branch(github: GitHub, identity: RepositoryIdentity) -> str | None:
    """Look up the default branch, returning None on any failure.

    Without it every branch is treated as non-default; the default branch is
    then protected only by the usual pull request rules.
    """
    try:
        return github.get_default_branch(identity.owner, identity.name)
    except Exception as e:
        logger.debug(
            "Could not determine default branch of %s: %s",
            identity.full_name,
            format_error_chain(e),
        )
        return None


def evaluate_branch(
    github: GitHub,
    identity: RepositoryIdentity,
    branch: LocalBranch,
    default_branch: str | None,
) -> Verdict:
    """Resolve and classify a single branch. Runs on a worker thread.

    Raises:
        BranchNameNotUtf8Error: If the branch name cannot be decoded
        GitHubApiError: If the pull request lookup fails
    """
    name = branch.name
    requests = resolve_pull_requests(github, identity.owner, identity.name, name)
    return classify(name, requests, is_default_branch=name == default_branch)


def _record_failure(branch_name: str, stage: str, error: BaseException) -> BranchFailure:
    failure = BranchFailure(
        branch_name=branch_name,
        stage=stage,
        chain=tuple(flatten_error_chain(error)),
    )
    logger.error("Failed to %s branch %r: %s", stage, branch_name, failure.message)
    return failure


def clean_branches(
    git: Git,
    github: GitHub,
    path: Path,
    *,
    dry_run: bool,
    max_workers: int | None = None,
) -> CleanReport:
    """Delete local branches whose pull requests are all closed.

    Args:
        git: Git gateway for the local repository
        github: GitHub gateway for pull request lookups
        path: Any path inside the repository
        dry_run: Compute and report verdicts without deleting anything
        max_workers: Optional cap on concurrent evaluations. None runs one
            evaluation per branch at once.

    Returns:
        CleanReport with verdicts, deletions and per-branch failures

    Raises:
        FatalCleanError: If the repository, its remote or its URL is unusable.
            Per-branch failures never raise.
    """
    repo_root = git.get_repository_root(path)
    identity = resolve_repository_identity(git, repo_root)
    default_branch = fetch_default_branch(github, identity)

    # Snapshot names up front; nothing below holds a reference into the repository.
    branches = git.list_local_branches(repo_root)
    logger.debug("Evaluating %d local branch(es) of %s", len(branches), identity.full_name)

    verdicts: list[Verdict] = []
    evaluation_failures: list[BranchFailure] = []
    if branches:
        workers = max_workers if max_workers is not None else len(branches)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="git-clean") as executor:
            futures: dict[Future[Verdict], LocalBranch] = {
                executor.submit(evaluate_branch, github, identity, branch, default_branch): branch
                for branch in branches
            }
            for future in as_completed(futures):
                branch = futures[future]
                try:
                    verdict = future.result()
                except Exception as e:
                    evaluation_failures.append(
                        _record_failure(branch.display_name, STAGE_EVALUATE, e)
                    )
                    continue
                if verdict.should_delete:
                    logger.info("Deleting branch %r: %s", verdict.branch_name, verdict.reason)
                else:
                    logger.debug("Retaining branch %r: %s", verdict.branch_name, verdict.reason)
                verdicts.append(verdict)

    verdicts.sort(key=lambda v: v.branch_name)
    evaluation_failures.sort(key=lambda f: f.branch_name)

    deleted: list[str] = []
    deletion_failures: list[BranchFailure] = []
    if not dry_run:
        for verdict in verdicts:
            if not verdict.should_delete:
                continue
            try:
                if not git.branch_exists(repo_root, verdict.branch_name):
                    raise BranchNotFoundError(verdict.branch_name)
                git.delete_branch(repo_root, verdict.branch_name, force=True)
            except Exception as e:
                deletion_failures.append(_record_failure(verdict.branch_name, STAGE_DELETE, e))
                continue
            deleted.append(verdict.branch_name)

    return CleanReport(
        repository=identity,
        default_branch=default_branch,
        dry_run=dry_run,
        verdicts=verdicts,
        evaluation_failures=evaluation_failures,
        deleted=deleted,
        deletion_failures=deletion_failures,
    )
