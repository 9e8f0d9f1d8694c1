"""Production HttpClient using urllib."""

import json
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping

from git_clean.gateway.http.abc import (
    HttpClient,
    HttpConnectionError,
    HttpDecodeError,
    HttpResponse,
    HttpStatusError,
    parse_link_header,
)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "git-clean"


class RealHttpClient(HttpClient):
    """HTTP client for the GitHub REST API.

    Authenticates with a bearer token when one is given; anonymous requests
    are subject to GitHub's much lower unauthenticated rate limit.
    """

    def __init__(
        self,
        *,
        token: str | None,
        base_url: str = GITHUB_API_URL,
        timeout: float | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _build_url(self, endpoint: str, params: Mapping[str, str | int] | None) -> str:
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        if params:
            url += "?" + urllib.parse.urlencode({k: str(v) for k, v in params.items()})
        return url

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": USER_AGENT,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def get(self, endpoint: str, *, params: Mapping[str, str | int] | None = None) -> HttpResponse:
        request = urllib.request.Request(
            self._build_url(endpoint, params),
            headers=self._headers(),
            method="GET",
        )

        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                body = response.read().decode("utf-8")
                link_header = response.headers.get("Link")
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            raise HttpStatusError(
                status_code=e.code,
                message=_error_message(error_body) or str(e.reason),
            ) from e
        except urllib.error.URLError as e:
            raise HttpConnectionError(f"request to {endpoint} failed") from e
        except OSError as e:
            raise HttpConnectionError(f"request to {endpoint} failed") from e

        try:
            data = json.loads(body) if body else None
        except json.JSONDecodeError as e:
            raise HttpDecodeError(f"response from {endpoint} is not JSON") from e

        return HttpResponse(data=data, links=parse_link_header(link_header))


def _error_message(body: str) -> str:
    """Extract GitHub's `message` field from an error body, or the raw body."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return body.strip()
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return body.strip()
