"""Tests for the clean_branches orchestration using fakes."""

import logging
from pathlib import Path

import pytest

from git_clean.core.errors import (
    GitHubApiError,
    RemoteNameNotUtf8Error,
    RemoteUrlNotRecognizedError,
    RemoteUrlNotUtf8Error,
    RepositoryNotFoundError,
    WrongRemoteCountError,
)
from git_clean.core.orchestrator import (
    STAGE_DELETE,
    STAGE_EVALUATE,
    clean_branches,
    fetch_default_branch,
    resolve_repository_identity,
)
from git_clean.gateway.git.fake import FakeGit
from git_clean.gateway.github.fake import FakeGitHub
from git_clean.gateway.github.types import PullRequestRecord, RepositoryIdentity
from git_clean.gateway.http.abc import HttpConnectionError

REPO = Path("/repo")
SSH_URL = "git@github.com:coriolinus/counter_rs.git"


def _git(branches: list[str | bytes], **kwargs) -> FakeGit:
    return FakeGit(
        repository_roots={REPO: REPO, REPO / "src": REPO},
        remote_urls={"origin": SSH_URL},
        branches=branches,
        **kwargs,
    )


def _pr(number: int, state: str, head_ref: str) -> PullRequestRecord:
    return PullRequestRecord(number=number, state=state, head_ref=head_ref)


def test_all_closed_branch_is_deleted_and_others_retained() -> None:
    git = _git(["main", "merged", "in-review", "local-only"])
    github = FakeGitHub(
        default_branch="main",
        pull_requests={
            "main": [_pr(1, "closed", "main")],
            "merged": [_pr(2, "closed", "merged"), _pr(3, "closed", "merged")],
            "in-review": [_pr(4, "closed", "in-review"), _pr(5, "open", "in-review")],
        },
    )

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.repository == RepositoryIdentity(owner="coriolinus", name="counter_rs")
    assert report.default_branch == "main"
    assert report.deleted == ["merged"]
    assert git.deleted_branches == ["merged"]
    assert git.branch_names == ["main", "in-review", "local-only"]
    assert [v.branch_name for v in report.verdicts] == ["in-review", "local-only", "main", "merged"]
    assert report.failures == []


def test_dry_run_deletes_nothing_and_is_repeatable() -> None:
    git = _git(["main", "merged"])
    github = FakeGitHub(
        default_branch="main",
        pull_requests={"merged": [_pr(2, "closed", "merged")]},
    )

    first = clean_branches(git, github, REPO, dry_run=True)
    second = clean_branches(git, github, REPO, dry_run=True)

    assert git.deleted_branches == []
    assert git.branch_names == ["main", "merged"]
    assert first.branches_to_delete == ["merged"]
    assert first.deleted == []
    assert first.verdicts == second.verdicts


def test_subdirectory_path_resolves_to_repository_root() -> None:
    git = _git(["merged"])
    github = FakeGitHub(pull_requests={"merged": [_pr(1, "closed", "merged")]})

    report = clean_branches(git, github, REPO / "src", dry_run=False)

    assert report.deleted == ["merged"]


def test_repository_without_branches_reports_nothing() -> None:
    github = FakeGitHub(default_branch="main")

    report = clean_branches(_git([]), github, REPO, dry_run=False)

    assert report.verdicts == []
    assert report.deleted == []
    assert github.page_requests == []


def test_evaluation_failure_is_isolated_to_its_branch(caplog: pytest.LogCaptureFixture) -> None:
    git = _git(["broken", "merged", "other-merged"])
    api_error = GitHubApiError("list pull requests for branch 'broken' (page 1)")
    api_error.__cause__ = HttpConnectionError("request to repos/coriolinus/counter_rs/pulls failed")
    github = FakeGitHub(
        pull_requests={
            "merged": [_pr(1, "closed", "merged")],
            "other-merged": [_pr(2, "closed", "other-merged")],
        },
        branch_errors={"broken": api_error},
    )

    with caplog.at_level(logging.ERROR, logger="git_clean.core.orchestrator"):
        report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == ["merged", "other-merged"]
    assert "broken" in git.branch_names
    assert len(report.evaluation_failures) == 1
    failure = report.evaluation_failures[0]
    assert failure.branch_name == "broken"
    assert failure.stage == STAGE_EVALUATE
    assert failure.chain == (
        "list pull requests for branch 'broken' (page 1)",
        "request to repos/coriolinus/counter_rs/pulls failed",
    )
    assert "Failed to evaluate branch 'broken'" in caplog.text


def test_failure_on_later_page_retains_branch() -> None:
    records = [_pr(n, "closed", "big") for n in range(1, 151)]
    git = _git(["big"])
    github = FakeGitHub(pull_requests={"big": records}, failing_pages={"big": 2})

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == []
    assert git.deleted_branches == []
    assert [f.branch_name for f in report.evaluation_failures] == ["big"]


def test_many_pages_of_closed_requests_delete_branch() -> None:
    records = [_pr(n, "closed", "big") for n in range(1, 251)]
    github = FakeGitHub(pull_requests={"big": records})

    report = clean_branches(_git(["big"]), github, REPO, dry_run=False)

    assert report.deleted == ["big"]
    assert [r.page for r in github.page_requests] == [1, 2, 3]


def test_undecodable_branch_name_fails_only_that_branch() -> None:
    git = _git([b"bad-\xff-name", "merged"])
    github = FakeGitHub(pull_requests={"merged": [_pr(1, "closed", "merged")]})

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == ["merged"]
    assert len(report.evaluation_failures) == 1
    failure = report.evaluation_failures[0]
    assert failure.branch_name == "bad-\ufffd-name"
    assert "not utf-8" in failure.message
    # The undecodable branch never reached the service
    assert github.requested_branches == {"merged"}


def test_branch_vanished_before_deletion_is_reported() -> None:
    git = _git(["merged", "gone"], vanished_branches={"gone"})
    github = FakeGitHub(
        pull_requests={
            "merged": [_pr(1, "closed", "merged")],
            "gone": [_pr(2, "closed", "gone")],
        }
    )

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == ["merged"]
    assert git.deleted_branches == ["merged"]
    assert len(report.deletion_failures) == 1
    failure = report.deletion_failures[0]
    assert failure.stage == STAGE_DELETE
    assert failure.message == "branch 'gone' no longer exists"


def test_deletion_failure_does_not_stop_other_deletions() -> None:
    git = _git(
        ["a-merged", "b-merged"],
        delete_branch_raises={
            "a-merged": RuntimeError("Failed to delete branch 'a-merged': checked out")
        },
    )
    github = FakeGitHub(
        pull_requests={
            "a-merged": [_pr(1, "closed", "a-merged")],
            "b-merged": [_pr(2, "closed", "b-merged")],
        }
    )

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == ["b-merged"]
    assert [f.branch_name for f in report.deletion_failures] == ["a-merged"]
    assert report.deletion_failures[0].message == "Failed to delete branch 'a-merged': checked out"


def test_default_branch_lookup_failure_is_not_fatal() -> None:
    git = _git(["main", "merged"])
    github = FakeGitHub(
        pull_requests={
            "main": [_pr(1, "open", "main")],
            "merged": [_pr(2, "closed", "merged")],
        },
        default_branch_error=GitHubApiError("get default branch of coriolinus/counter_rs"),
    )

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.default_branch is None
    assert report.deleted == ["merged"]
    assert "main" in git.branch_names


def test_default_branch_retained_even_when_all_requests_closed() -> None:
    git = _git(["main"])
    github = FakeGitHub(default_branch="main", pull_requests={"main": [_pr(1, "closed", "main")]})

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == []
    assert report.verdicts[0].reason == "default branch"


def test_max_workers_bounds_concurrency_without_changing_results() -> None:
    names = [f"branch_{n:02d}" for n in range(20)]
    git = _git(list(names))
    github = FakeGitHub(pull_requests={name: [_pr(1, "closed", name)] for name in names})

    report = clean_branches(git, github, REPO, dry_run=True, max_workers=2)

    assert report.branches_to_delete == names
    assert github.requested_branches == set(names)


def test_missing_repository_is_fatal() -> None:
    with pytest.raises(RepositoryNotFoundError):
        clean_branches(FakeGit(), FakeGitHub(), Path("/nowhere"), dry_run=False)


@pytest.mark.parametrize("remotes", [{}, {"origin": SSH_URL, "upstream": SSH_URL}])
def test_wrong_remote_count_is_fatal(remotes: dict[str, str | bytes]) -> None:
    git = FakeGit(repository_roots={REPO: REPO}, remote_urls=remotes, branches=["main"])

    with pytest.raises(WrongRemoteCountError, match=f"have {len(remotes)}"):
        clean_branches(git, FakeGitHub(), REPO, dry_run=False)

    assert git.deleted_branches == []


def test_unrecognized_remote_url_is_fatal() -> None:
    git = FakeGit(
        repository_roots={REPO: REPO},
        remote_urls={"origin": "https://github.com/my-org/my-repo.git"},
    )

    with pytest.raises(RemoteUrlNotRecognizedError):
        resolve_repository_identity(git, REPO)


def test_non_utf8_remote_url_is_fatal() -> None:
    git = FakeGit(repository_roots={REPO: REPO}, remote_urls={"origin": b"git@\xff:o/r.git"})

    with pytest.raises(RemoteUrlNotUtf8Error):
        resolve_repository_identity(git, REPO)


def test_fetch_default_branch_swallows_any_error() -> None:
    identity = RepositoryIdentity(owner="o", name="r")
    github = FakeGitHub(default_branch_error=ValueError("unexpected payload"))

    assert fetch_default_branch(github, identity) is None


def test_unexpected_deletion_error_does_not_stop_other_deletions() -> None:
    git = _git(
        ["a-merged", "b-merged"],
        delete_branch_raises={"a-merged": PermissionError("cannot lock ref")},
    )
    github = FakeGitHub(
        pull_requests={
            "a-merged": [_pr(1, "closed", "a-merged")],
            "b-merged": [_pr(2, "closed", "b-merged")],
        }
    )

    report = clean_branches(git, github, REPO, dry_run=False)

    assert report.deleted == ["b-merged"]
    assert len(report.deletion_failures) == 1
    failure = report.deletion_failures[0]
    assert failure.branch_name == "a-merged"
    assert failure.stage == STAGE_DELETE
    assert failure.message == "cannot lock ref"


def test_non_utf8_remote_name_is_fatal() -> None:
    git = FakeGit(repository_roots={REPO: REPO}, remote_urls={b"orig\xffin": SSH_URL})

    with pytest.raises(RemoteNameNotUtf8Error):
        clean_branches(git, FakeGitHub(), REPO, dry_run=False)
