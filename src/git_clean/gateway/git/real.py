"""Production Git implementation using subprocess."""

from pathlib import Path

from git_clean.core.errors import (
    RemoteNameNotUtf8Error,
    RemoteUrlNotUtf8Error,
    RepositoryNotFoundError,
)
from git_clean.gateway.git.abc import Git, LocalBranch
from git_clean.subprocess_utils import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using the git binary."""

    def get_repository_root(self, path: Path) -> Path:
        if not path.is_dir():
            raise RepositoryNotFoundError(str(path))
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-toplevel"],
            operation_context="find repository root",
            cwd=path,
            check=False,
        )
        if result.returncode != 0:
            raise RepositoryNotFoundError(str(path))
        return Path(result.stdout.strip())

    def list_remotes(self, repo_root: Path) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "remote"],
            operation_context="list remotes",
            cwd=repo_root,
            text=False,
        )
        remotes: list[str] = []
        for line in result.stdout.splitlines():
            raw_name = line.strip()
            if not raw_name:
                continue
            try:
                remotes.append(raw_name.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise RemoteNameNotUtf8Error(raw_name) from e
        return remotes

    def get_remote_url(self, repo_root: Path, remote: str) -> str:
        # Read raw bytes: a URL that is not UTF-8 is a distinct, fatal condition.
        result = run_subprocess_with_context(
            ["git", "remote", "get-url", remote],
            operation_context=f"get url of remote '{remote}'",
            cwd=repo_root,
            text=False,
        )
        raw_url = result.stdout.strip()
        try:
            url = raw_url.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RemoteUrlNotUtf8Error(remote) from e
        if not url:
            msg = f"Remote '{remote}' has no URL configured"
            raise RuntimeError(msg)
        return url

    def list_local_branches(self, repo_root: Path) -> list[LocalBranch]:
        result = run_subprocess_with_context(
            ["git", "for-each-ref", "--format=%(refname:lstrip=2)", "refs/heads/"],
            operation_context="list local branches",
            cwd=repo_root,
            text=False,
        )
        return [LocalBranch(raw_name=line) for line in result.stdout.splitlines() if line]

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        result = run_subprocess_with_context(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
            operation_context=f"check whether branch '{branch}' exists",
            cwd=repo_root,
            check=False,
        )
        return result.returncode == 0

    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            ["git", "branch", flag, branch],
            operation_context=f"delete branch '{branch}'",
            cwd=repo_root,
        )
