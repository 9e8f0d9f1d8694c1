"""HTTP client integration for direct GitHub REST API calls."""

from git_clean.gateway.http.abc import (
    HttpClient,
    HttpClientError,
    HttpConnectionError,
    HttpDecodeError,
    HttpResponse,
    HttpStatusError,
)
from git_clean.gateway.http.fake import FakeHttpClient
from git_clean.gateway.http.real import RealHttpClient

__all__ = [
    "HttpClient",
    "HttpClientError",
    "HttpConnectionError",
    "HttpDecodeError",
    "HttpResponse",
    "HttpStatusError",
    "FakeHttpClient",
    "RealHttpClient",
]
