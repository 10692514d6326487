# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import threading

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses are keyed by "METHOD url"; a list of responses is consumed in order
    and its last entry repeats.
    """

    def __init__(self, responses: dict[str, HttpResponse | list[HttpResponse]] | None = None):
        self._responses: dict[str, list[HttpResponse]] = {}
        self._lock = threading.Lock()
        self.requests: list[HttpRequest] = []
        self.closed = False
        for key, value in (responses or {}).items():
            method, _, url = key.partition(" ")
            self.add(method, url, value)

    def add(self, method: str, url: str, response: HttpResponse | list[HttpResponse]) -> None:
        queue = list(response) if isinstance(response, list) else [response]
        self._responses[f"{method.upper()} {url}"] = queue

    def request(self, request: HttpRequest) -> HttpResponse:
        key = f"{request.method.upper()} {request.url}"
        with self._lock:
            self.requests.append(request)
            queue = self._responses.get(key)
            if not queue:
                return HttpResponse(ok=False, status_code=None, error_message="No stubbed response configured")
            return queue.pop(0) if len(queue) > 1 else queue[0]

    def close(self) -> None:
        self.closed = True
