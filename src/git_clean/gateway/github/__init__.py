"""GitHub pull request integration."""

from git_clean.gateway.github.abc import GitHub
from git_clean.gateway.github.fake import FakeGitHub
from git_clean.gateway.github.real import RealGitHub

__all__ = [
    "GitHub",
    "FakeGitHub",
    "RealGitHub",
]
