"""Shared helpers for integration tests that run the real git binary."""

import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)


def init_git_repo(repo: Path, default_branch: str) -> None:
    """Initialize a repository with one commit on `default_branch`."""
    _git(repo, "init", "-b", default_branch)
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text("# test\n", encoding="utf-8")
    _git(repo, "add", "README.md")
    _git(repo, "commit", "-m", "Initial commit")


def create_branch(repo: Path, name: str) -> None:
    _git(repo, "branch", name)


def add_remote(repo: Path, name: str, url: str) -> None:
    _git(repo, "remote", "add", name, url)
