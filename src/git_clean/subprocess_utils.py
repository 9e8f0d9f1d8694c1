"""Subprocess helpers that attach operation context to failures."""

import os
import subprocess
from collections.abc import Sequence
from pathlib import Path


def copied_env_for_git_subprocess() -> dict[str, str]:
    """Copy of the environment that stops git from prompting for credentials."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_subprocess_with_context(
    cmd: Sequence[str],
    *,
    operation_context: str,
    cwd: Path | None = None,
    text: bool = True,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run a command, raising RuntimeError with context when it fails.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of what the command does,
            used as the leading part of the error message
        cwd: Working directory for the command
        text: Decode stdout/stderr as text (False returns raw bytes)
        check: Raise on non-zero exit status

    Returns:
        The completed process

    Raises:
        RuntimeError: If the command exits non-zero (cause is the
            CalledProcessError), the executable cannot be found or cannot
            be started
    """
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=text,
            check=check,
            env=copied_env_for_git_subprocess(),
        )
    except subprocess.CalledProcessError as e:
        stderr = e.stderr
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        detail = (stderr or "").strip() or f"exit status {e.returncode}"
        msg = f"Failed to {operation_context}: `{' '.join(cmd)}`: {detail}"
        raise RuntimeError(msg) from e
    except FileNotFoundError as e:
        msg = f"Failed to {operation_context}: `{cmd[0]}` is not installed"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Failed to {operation_context}: `{' '.join(cmd)}`: {e}"
        raise RuntimeError(msg) from e
