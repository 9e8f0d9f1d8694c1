"""Abstract interface for the git operations git-clean needs."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from git_clean.core.errors import BranchNameNotUtf8Error


@dataclass(frozen=True)
class LocalBranch:
    """A local branch as enumerated from the repository.

    Holds a copy of the ref name bytes only, never a live handle, so it can be
    handed to worker threads freely. Decoding is deferred to `name` so that a
    single undecodable ref fails only its own evaluation.
    """

    raw_name: bytes

    @property
    def name(self) -> str:
        """Branch name as text.

        Raises:
            BranchNameNotUtf8Error: If the ref name is not valid UTF-8
        """
        try:
            return self.raw_name.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BranchNameNotUtf8Error(self.raw_name) from e

    @property
    def display_name(self) -> str:
        """Best-effort name for messages, never raises."""
        return self.raw_name.decode("utf-8", errors="replace")

    @staticmethod
    def named(name: str) -> "LocalBranch":
        return LocalBranch(raw_name=name.encode("utf-8"))


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def get_repository_root(self, path: Path) -> Path:
        """Resolve the work tree root containing `path`.

        Raises:
            RepositoryNotFoundError: If `path` is not inside a git repository
        """
        ...

    @abstractmethod
    def list_remotes(self, repo_root: Path) -> list[str]:
        """List configured remote names.

        Raises:
            RemoteNameNotUtf8Error: If a remote name is not valid UTF-8
        """
        ...

    @abstractmethod
    def get_remote_url(self, repo_root: Path, remote: str) -> str:
        """Get the fetch URL of a remote.

        Raises:
            RemoteUrlNotUtf8Error: If the configured URL is not valid UTF-8
            RuntimeError: If the remote has no URL
        """
        ...

    @abstractmethod
    def list_local_branches(self, repo_root: Path) -> list[LocalBranch]:
        """List all local branches (refs/heads)."""
        ...

    @abstractmethod
    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        ...

    @abstractmethod
    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch.

        Args:
            repo_root: Path to the repository root
            branch: Name of the branch to delete
            force: Use -D (force delete) instead of -d

        Raises:
            RuntimeError: If git refuses the deletion
        """
        ...
