# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .models import Headers, HttpRequest, HttpResponse
from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .httpx_client import HttpxClient
from .api import AnalysisClient, MythXClient, Submission

__all__ = [
    "AnalysisClient",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "MythXClient",
    "StubHttpClient",
    "Submission",
    "create_default_http_client",
]
