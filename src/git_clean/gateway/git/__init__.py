"""Git repository operations integration."""

from git_clean.gateway.git.abc import Git, LocalBranch
from git_clean.gateway.git.fake import FakeGit
from git_clean.gateway.git.real import RealGit

__all__ = [
    "Git",
    "LocalBranch",
    "FakeGit",
    "RealGit",
]
