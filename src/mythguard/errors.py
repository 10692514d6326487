# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum

import httpx


class MythGuardError(Exception):
    """Base class for MythGuard errors."""


class ConfigurationError(MythGuardError):
    """Invalid configuration; fatal to the whole invocation."""


class TransportError(MythGuardError):
    """A call to the analysis service failed before a usable response arrived."""


class ServiceError(MythGuardError):
    """The analysis service answered with an error."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: object = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class AnalysisTimeoutError(MythGuardError):
    """A job exhausted its polling budget."""


class AuthorizationError(ServiceError):
    """Credentials were rejected or no usable identity was returned."""


class ErrorCategory(str, Enum):
    TRANSPORT = "TRANSPORT"
    SERVICE = "SERVICE"
    TIMEOUT = "TIMEOUT"
    MALFORMED = "MALFORMED"
    UNKNOWN = "UNKNOWN"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map MythGuard/httpx/socket exceptions to ErrorCategory.
    """
    if isinstance(exc, AnalysisTimeoutError):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, ServiceError):
        return ErrorCategory.SERVICE

    if isinstance(exc, TransportError):
        return ErrorCategory.TRANSPORT

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TRANSPORT

    if isinstance(exc, (httpx.TransportError, ssl.SSLError, socket.gaierror, ConnectionError)):
        return ErrorCategory.TRANSPORT

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return ErrorCategory.MALFORMED

    return ErrorCategory.UNKNOWN


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TRANSPORT: "Could not reach the analysis service",
        ErrorCategory.SERVICE: "The analysis service reported an error",
        ErrorCategory.TIMEOUT: "Timed out waiting for the analysis to finish",
        ErrorCategory.MALFORMED: "The analysis service returned a malformed response",
        ErrorCategory.UNKNOWN: "Analysis failed",
        None: "",
    }
    return mapping.get(category, "Analysis failed")


__all__ = [
    "AnalysisTimeoutError",
    "AuthorizationError",
    "ConfigurationError",
    "ErrorCategory",
    "MythGuardError",
    "ServiceError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
