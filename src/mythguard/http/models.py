# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the service client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | str | None = None
    timeout: float | None = None

    @classmethod
    def json_post(cls, url: str, payload: Any, *, headers: Headers | None = None) -> HttpRequest:
        merged = {"Content-Type": "application/json"}
        merged.update(headers or {})
        return cls(url=url, method="POST", headers=merged, body=json.dumps(payload))


@dataclass
class HttpResponse:
    """Normalized HTTP response; transport failures carry `ok=False` and no status code."""

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_transport_error(self) -> bool:
        return not self.ok and self.status_code is None

    def json(self) -> Any:
        """Decode the body as JSON; raises ValueError on malformed bodies."""
        return json.loads(self.text)

    @classmethod
    def from_json(cls, payload: Any, *, status_code: int = 200, url: str | None = None) -> HttpResponse:
        """Helper for building canned JSON responses (stubs, fixtures)."""
        return cls(
            ok=200 <= status_code < 400,
            status_code=status_code,
            headers={"content-type": "application/json"},
            text=json.dumps(payload),
            url=url,
        )


__all__ = ["Headers", "HttpRequest", "HttpResponse"]
