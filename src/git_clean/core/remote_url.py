"""Parse GitHub owner and repository names from git remote URLs."""

import re

# git@github.com:owner/repo.git
_SSH_RE = re.compile(r"^git@[^:/\s]+:(?P<owner>\w+)/(?P<repo>\w+)\.git$")
# https://github.com/owner/repo.git
_HTTPS_RE = re.compile(r"^https://[^/\s]+/(?P<owner>\w+)/(?P<repo>\w+)\.git$")


def parse_remote_url(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from an SSH or HTTPS remote URL.

    Owner and repository must consist of word characters only, and the URL
    must end in ".git". Anything else yields None; the caller decides whether
    that is an error.

    Example:
        >>> parse_remote_url("git@github.com:coriolinus/counter_rs.git")
        ('coriolinus', 'counter_rs')
        >>> parse_remote_url("https://github.com/coriolinus/counter-rs.git") is None
        True
    """
    match = _SSH_RE.match(url) or _HTTPS_RE.match(url)
    if match is None:
        return None
    return match.group("owner"), match.group("repo")
