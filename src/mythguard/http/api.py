# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
MythX API client.

The orchestration engine depends only on the `AnalysisClient` protocol; this
module provides the HTTP-backed implementation. Every remote failure surfaces as
one of the MythGuard exceptions so callers can categorize it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..config import AnalysisSettings, load_analysis_settings
from ..errors import AuthorizationError, ServiceError, TransportError
from ..models.job import JobStatus
from .client import HttpClient, create_default_http_client
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


@dataclass
class Submission:
    """The service's answer to an analysis submission."""

    handle: str | None
    status: JobStatus
    status_payload: dict[str, Any] = field(default_factory=dict)
    issues: Any = None


class AnalysisClient(Protocol):
    """Remote capabilities consumed by the orchestration engine."""

    def submit_analysis(self, request: dict[str, Any]) -> Submission: ...

    def get_status(self, handle: str) -> dict[str, Any]: ...

    def get_issues(self, handle: str) -> Any: ...

    def get_user_info(self) -> dict[str, Any]: ...


class MythXClient(AnalysisClient):
    """HTTP client for the MythX analysis API."""

    def __init__(self, http_client: HttpClient | None = None, settings: AnalysisSettings | None = None):
        self.settings = settings or load_analysis_settings()
        self.http_client = http_client or create_default_http_client()
        self.eth_address, self._password = self.settings.credentials()
        self._access_token: str | None = None
        self._login_lock = threading.Lock()

    def _url(self, path: str) -> str:
        return f"{self.settings.api_url.rstrip('/')}{path}"

    def login(self) -> str:
        """Authenticate once; concurrent jobs share the resulting token."""
        with self._login_lock:
            if self._access_token is None:
                request = HttpRequest.json_post(
                    self._url("/v1/auth/login"),
                    {"ethAddress": self.eth_address, "password": self._password},
                )
                data = self._decode(self._send(request))
                tokens = data.get("jwtTokens") if isinstance(data, dict) else None
                access = tokens.get("access") if isinstance(tokens, dict) else None
                if not access:
                    raise AuthorizationError("Login response did not contain an access token", payload=data)
                logger.debug("Logged in to %s as %s", self.settings.api_url, self.eth_address)
                self._access_token = str(access)
            return self._access_token

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.login()}"}

    def _send(self, request: HttpRequest) -> HttpResponse:
        response = self.http_client.request(request)
        if response.is_transport_error:
            raise TransportError(f"{request.method} {request.url} failed: {response.error_message}")
        if response.status_code in (401, 403):
            raise AuthorizationError(
                f"{request.method} {request.url} was rejected ({response.status_code})",
                status_code=response.status_code,
                payload=response.text,
            )
        if not response.ok:
            raise ServiceError(
                f"{request.method} {request.url} returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                payload=response.text,
            )
        return response

    @staticmethod
    def _decode(response: HttpResponse) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ServiceError(f"Malformed JSON from {response.url}: {exc}", status_code=response.status_code) from exc

    def _get(self, path: str) -> Any:
        request = HttpRequest(url=self._url(path), headers=self._auth_headers())
        return self._decode(self._send(request))

    def submit_analysis(self, request: dict[str, Any]) -> Submission:
        http_request = HttpRequest.json_post(self._url("/v1/analyses"), request, headers=self._auth_headers())
        data = self._decode(self._send(http_request))
        if not isinstance(data, dict):
            raise ServiceError("Submission response should be an object", payload=data)
        return Submission(
            handle=data.get("uuid"),
            status=JobStatus.from_service(data.get("status")),
            status_payload=data,
            issues=data.get("issues"),
        )

    def get_status(self, handle: str) -> dict[str, Any]:
        data = self._get(f"/v1/analyses/{handle}")
        if not isinstance(data, dict):
            raise ServiceError("Status response should be an object", payload=data)
        return data

    def get_issues(self, handle: str) -> Any:
        return self._get(f"/v1/analyses/{handle}/issues")

    def get_user_info(self) -> dict[str, Any]:
        data = self._get("/v1/users")
        if not isinstance(data, dict):
            raise AuthorizationError("User lookup response should be an object", payload=data)
        return data

    def get_version(self) -> dict[str, Any]:
        """Component versions reported by the service; needs no login."""
        data = self._decode(self._send(HttpRequest(url=self._url("/v1/version"))))
        if not isinstance(data, dict):
            raise ServiceError("Version response should be an object", payload=data)
        return data

    def close(self) -> None:
        if hasattr(self.http_client, "close"):
            self.http_client.close()


__all__ = ["AnalysisClient", "MythXClient", "Submission"]
