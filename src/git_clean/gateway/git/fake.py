"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from git_clean.core.errors import (
    RemoteNameNotUtf8Error,
    RemoteUrlNotUtf8Error,
    RepositoryNotFoundError,
)
from git_clean.gateway.git.abc import Git, LocalBranch


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    - repository_roots: path -> repository root; paths not listed are not repositories
    - remote_urls: remote name -> URL (bytes simulate a name or URL that is not UTF-8)
    - branches: local branches; names given as bytes simulate undecodable refs

    Mutation Tracking:
    - deleted_branches: names passed to delete_branch(), in call order

    Examples:
        git = FakeGit(
            repository_roots={Path("/repo"): Path("/repo")},
            remote_urls={"origin": "git@github.com:owner/repo.git"},
            branches=["main", "feature"],
        )
        git.delete_branch(Path("/repo"), "feature", force=True)
        assert git.deleted_branches == ["feature"]
    """

    def __init__(
        self,
        *,
        repository_roots: dict[Path, Path] | None = None,
        remote_urls: dict[str | bytes, str | bytes] | None = None,
        branches: list[str | bytes] | None = None,
        delete_branch_raises: dict[str, Exception] | None = None,
        vanished_branches: set[str] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repository_roots: Mapping of path -> repository root
            remote_urls: Mapping of remote name -> URL, in `git remote` order
            branches: Local branch names
            delete_branch_raises: Branch name -> exception raised by delete_branch()
            vanished_branches: Branches that are listed but no longer exist by the
                time deletion re-resolves them
        """
        self._repository_roots = repository_roots or {}
        self._remote_urls = remote_urls or {}
        self._branches: list[bytes] = [
            b if isinstance(b, bytes) else b.encode("utf-8") for b in (branches or [])
        ]
        self._delete_branch_raises = delete_branch_raises or {}
        self._vanished_branches = vanished_branches or set()

        self._deleted_branches: list[str] = []

    def get_repository_root(self, path: Path) -> Path:
        if path not in self._repository_roots:
            raise RepositoryNotFoundError(str(path))
        return self._repository_roots[path]

    def list_remotes(self, repo_root: Path) -> list[str]:
        remotes: list[str] = []
        for name in self._remote_urls:
            if not isinstance(name, bytes):
                remotes.append(name)
                continue
            try:
                remotes.append(name.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise RemoteNameNotUtf8Error(name) from e
        return remotes

    def get_remote_url(self, repo_root: Path, remote: str) -> str:
        if remote not in self._remote_urls:
            msg = f"Remote '{remote}' not found"
            raise RuntimeError(msg)
        url = self._remote_urls[remote]
        if isinstance(url, bytes):
            try:
                return url.decode("utf-8")
            except UnicodeDecodeError as e:
                raise RemoteUrlNotUtf8Error(remote) from e
        return url

    def list_local_branches(self, repo_root: Path) -> list[LocalBranch]:
        return [LocalBranch(raw_name=raw) for raw in self._branches]

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        if branch in self._vanished_branches:
            return False
        return branch.encode("utf-8") in self._branches

    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        if branch in self._delete_branch_raises:
            raise self._delete_branch_raises[branch]
        raw = branch.encode("utf-8")
        if raw in self._branches:
            self._branches.remove(raw)
        self._deleted_branches.append(branch)

    @property
    def deleted_branches(self) -> list[str]:
        """Branches deleted via delete_branch(), in call order."""
        return self._deleted_branches.copy()

    @property
    def branch_names(self) -> list[str]:
        """Current local branch names (undecodable names replaced)."""
        return [raw.decode("utf-8", errors="replace") for raw in self._branches]
