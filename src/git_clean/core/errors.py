"""Error taxonomy for branch cleaning.

Two families matter to the orchestrator:

- FatalCleanError: the run cannot proceed at all (no repository, wrong number
  of remotes, a remote that is not a recognizable GitHub URL). These propagate
  to the CLI and produce a non-zero exit.
- Everything else raised while evaluating or deleting a single branch is
  isolated to that branch, logged with its flattened cause chain, and the
  branch is retained.
"""


class CleanError(Exception):
    """Base class for errors raised by git-clean."""


class FatalCleanError(CleanError):
    """An error that makes the whole run meaningless."""


class RepositoryNotFoundError(FatalCleanError):
    def __init__(self, path: str) -> None:
        super().__init__(f"no git repository found at {path}")
        self.path = path


class WrongRemoteCountError(FatalCleanError):
    def __init__(self, count: int) -> None:
        super().__init__(f"wrong number of remotes: expected 1, have {count}")
        self.count = count


class RemoteNameNotUtf8Error(FatalCleanError):
    def __init__(self, raw_name: bytes) -> None:
        super().__init__(f"remote name is not utf-8: {raw_name!r}")
        self.raw_name = raw_name


class RemoteUrlNotUtf8Error(FatalCleanError):
    def __init__(self, remote: str) -> None:
        super().__init__(f"url of remote '{remote}' is not utf-8")
        self.remote = remote


class RemoteUrlNotRecognizedError(FatalCleanError):
    def __init__(self, url: str) -> None:
        super().__init__(f"remote url not recognized as github: {url}")
        self.url = url


class BranchNameNotUtf8Error(CleanError):
    def __init__(self, raw_name: bytes) -> None:
        super().__init__(f"branch name is not utf-8: {raw_name!r}")
        self.raw_name = raw_name


class BranchNotFoundError(CleanError):
    def __init__(self, name: str) -> None:
        super().__init__(f"branch '{name}' no longer exists")
        self.name = name


class GitHubApiError(CleanError):
    """A GitHub request failed. The transport error is chained as the cause."""

    def __init__(self, operation: str) -> None:
        super().__init__(operation)
        self.operation = operation


def flatten_error_chain(error: BaseException) -> list[str]:
    """Walk an exception's causes from outermost to innermost.

    Follows ``__cause__`` first, then ``__context__`` unless the context was
    suppressed with ``raise ... from None``. Each link contributes its
    ``str()``, or the exception class name when that is empty.

    Example:
        >>> try:
        ...     try:
        ...         raise ConnectionError("connection reset")
        ...     except ConnectionError as e:
        ...         raise GitHubApiError("list pull requests") from e
        ... except GitHubApiError as e:
        ...     flatten_error_chain(e)
        ['list pull requests', 'connection reset']
    """
    chain: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(str(current) or type(current).__name__)
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return chain


def format_error_chain(error: BaseException) -> str:
    """Render an exception and all of its causes as a single line."""
    return ": ".join(flatten_error_chain(error))
