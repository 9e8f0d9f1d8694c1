"""Abstract HTTP client for direct GitHub REST API calls."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class HttpClientError(Exception):
    """Base class for HTTP client failures."""


class HttpStatusError(HttpClientError):
    """The server answered with a non-success status."""

    def __init__(self, *, status_code: int, message: str) -> None:
        super().__init__(f"GitHub API error ({status_code}): {message}")
        self.status_code = status_code


class HttpConnectionError(HttpClientError):
    """The request never produced a response (DNS, TLS, connection reset...)."""


class HttpDecodeError(HttpClientError):
    """The response body was not valid JSON."""


@dataclass(frozen=True)
class HttpResponse:
    """Decoded response of a GET request.

    Attributes:
        data: JSON-decoded body
        links: Relations parsed from the `Link` header, e.g. {"next": "https://..."}
    """

    data: Any
    links: Mapping[str, str] = field(default_factory=dict)


class HttpClient(ABC):
    """Abstract interface for HTTP GET requests against an API base URL.

    All implementations (real and fake) must implement this interface.
    Implementations must be safe to call from several threads at once.
    """

    @abstractmethod
    def get(self, endpoint: str, *, params: Mapping[str, str | int] | None = None) -> HttpResponse:
        """GET an endpoint relative to the base URL.

        Args:
            endpoint: Path relative to the base URL (e.g. "repos/owner/repo/pulls")
            params: Query string parameters

        Returns:
            HttpResponse with decoded body and link relations

        Raises:
            HttpStatusError: Non-2xx response
            HttpConnectionError: Transport failure
            HttpDecodeError: Body is not JSON
        """
        ...


def parse_link_header(header: str | None) -> dict[str, str]:
    """Parse an RFC 8288 `Link` header into a relation -> URL mapping.

    Example:
        >>> parse_link_header('<https://api.github.com/x?page=2>; rel="next"')
        {'next': 'https://api.github.com/x?page=2'}
    """
    if not header:
        return {}
    links: dict[str, str] = {}
    for part in header.split(","):
        segments = part.strip().split(";")
        url = segments[0].strip()
        if not (url.startswith("<") and url.endswith(">")):
            continue
        for param in segments[1:]:
            key, _, value = param.strip().partition("=")
            if key.strip() == "rel":
                for rel in value.strip().strip('"').split():
                    links[rel] = url[1:-1]
    return links
