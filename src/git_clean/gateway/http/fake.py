"""Fake HttpClient for testing."""

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from git_clean.gateway.http.abc import HttpClient, HttpResponse


@dataclass(frozen=True)
class RecordedRequest:
    endpoint: str
    params: Mapping[str, str | int] = field(default_factory=dict)


class FakeHttpClient(HttpClient):
    """In-memory HttpClient serving pre-registered responses.

    Responses registered for the same endpoint are served in registration
    order; the last one repeats once the queue is drained. An endpoint with
    nothing registered raises KeyError, which makes missing test setup loud.

    Example:
        http = FakeHttpClient()
        http.set_response("repos/o/r/pulls", response=[{"number": 1}], links={"next": "..."})
        http.set_response("repos/o/r/pulls", response=[{"number": 2}])
        http.get("repos/o/r/pulls").data  # [{"number": 1}]
        http.get("repos/o/r/pulls").data  # [{"number": 2}]
    """

    def __init__(self) -> None:
        self._responses: dict[str, list[HttpResponse | Exception]] = {}
        self._requests: list[RecordedRequest] = []
        self._lock = threading.Lock()

    def set_response(
        self,
        endpoint: str,
        *,
        response: Any,
        links: Mapping[str, str] | None = None,
    ) -> None:
        self._responses.setdefault(endpoint, []).append(
            HttpResponse(data=response, links=dict(links or {}))
        )

    def set_error(self, endpoint: str, error: Exception) -> None:
        self._responses.setdefault(endpoint, []).append(error)

    def get(self, endpoint: str, *, params: Mapping[str, str | int] | None = None) -> HttpResponse:
        with self._lock:
            self._requests.append(RecordedRequest(endpoint=endpoint, params=dict(params or {})))
            queue = self._responses.get(endpoint)
            if not queue:
                msg = f"No response registered for endpoint '{endpoint}'"
                raise KeyError(msg)
            item = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(item, Exception):
            raise item
        return item

    @property
    def requests(self) -> list[RecordedRequest]:
        with self._lock:
            return self._requests.copy()
