"""Application context with dependency injection."""

from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from git_clean.core.config_store import (
    ConfigStore,
    FakeConfigStore,
    GlobalConfig,
    RealConfigStore,
)
from git_clean.gateway.git.abc import Git
from git_clean.gateway.git.fake import FakeGit
from git_clean.gateway.git.real import RealGit
from git_clean.gateway.github.abc import GitHub
from git_clean.gateway.github.fake import FakeGitHub
from git_clean.gateway.github.real import RealGitHub
from git_clean.gateway.http.real import RealHttpClient


@dataclass(frozen=True)
class CleanContext:
    """Immutable context holding all dependencies for git-clean operations.

    Created at the CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    The GitHub gateway is built from global_config on demand, so a token
    supplied on the command line takes effect after with_token() without any
    shared mutable state.
    """

    git: Git
    github_factory: Callable[[GlobalConfig], GitHub]
    config_store: ConfigStore
    global_config: GlobalConfig
    cwd: Path

    def create_github(self) -> GitHub:
        return self.github_factory(self.global_config)

    def with_token(self, token: str) -> "CleanContext":
        """Cache a new personal access token and return a context that uses it."""
        config = self.global_config.with_token(token)
        self.config_store.save(config)
        return replace(self, global_config=config)

    @staticmethod
    def for_test(
        git: Git | None = None,
        github: GitHub | None = None,
        config_store: ConfigStore | None = None,
        global_config: GlobalConfig | None = None,
        cwd: Path | None = None,
    ) -> "CleanContext":
        """Create a context from fakes, overriding any of them.

        Args:
            git: Defaults to an empty FakeGit
            github: Returned by create_github() regardless of config.
                Defaults to an empty FakeGitHub
            config_store: Defaults to an empty FakeConfigStore
            global_config: Defaults to config_store.load()
            cwd: Defaults to Path("/test/default/cwd") so tests never touch the real cwd

        Example:
            >>> git = FakeGit(repository_roots={Path("/repo"): Path("/repo")})
            >>> ctx = CleanContext.for_test(git=git, cwd=Path("/repo"))
        """
        store = config_store if config_store is not None else FakeConfigStore()
        fake_github = github if github is not None else FakeGitHub()
        return CleanContext(
            git=git if git is not None else FakeGit(),
            github_factory=lambda _config: fake_github,
            config_store=store,
            global_config=global_config if global_config is not None else store.load(),
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
        )


def create_real_github(config: GlobalConfig) -> GitHub:
    return RealGitHub(RealHttpClient(token=config.personal_access_token, base_url=config.api_url))


def create_context() -> CleanContext:
    """Create production context with real implementations.

    Loads the cached configuration (defaults if none is saved yet).
    """
    config_store = RealConfigStore()
    return CleanContext(
        git=RealGit(),
        github_factory=create_real_github,
        config_store=config_store,
        global_config=config_store.load(),
        cwd=Path.cwd(),
    )
