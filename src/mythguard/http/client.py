# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport seam beneath MythXClient."""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """
    Sends one MythX API request and returns the response.

    Implementations report connection failures through
    `HttpResponse.is_transport_error` instead of raising, so MythXClient can
    turn them into TransportError with the request attached.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - StubHttpClient holds nothing
        ...


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    """Build the httpx transport shared by every job in a batch."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings())
