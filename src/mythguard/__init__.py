# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
MythGuard package entrypoint.

This package submits compiled smart-contract artifacts to the MythX analysis
service, keeps a bounded number of analyses in flight, polls each one to a
terminal status and aggregates findings and failures into one result. The
service is abstracted behind an injectable client interface, and domain
objects are modeled with typed dataclasses for clarity.
"""

from .analysis import AccessPolicyGate, Dispatcher, JobPoller, RateLimiter, ResultAggregator, Role, sanitize
from .artifacts import load_contract_records
from .config import AnalysisSettings, HttpSettings, load_analysis_settings, load_http_settings, validate_limit
from .errors import (
    AnalysisTimeoutError,
    AuthorizationError,
    ConfigurationError,
    MythGuardError,
    ServiceError,
    TransportError,
)
from .http import AnalysisClient, HttpClient, HttpxClient, MythXClient, create_default_http_client
from .log import setup_logging
from .models import AggregatedResult, AnalysisRun, ContractRecord, Failure, Finding, ReportStatus, Success
from .runtime import MythGuard
from .scan import AnalysisEngine
from .version import __version__

__all__ = [
    "AccessPolicyGate",
    "AggregatedResult",
    "AnalysisClient",
    "AnalysisEngine",
    "AnalysisRun",
    "AnalysisSettings",
    "AnalysisTimeoutError",
    "AuthorizationError",
    "ConfigurationError",
    "ContractRecord",
    "Dispatcher",
    "Failure",
    "Finding",
    "HttpClient",
    "HttpSettings",
    "HttpxClient",
    "JobPoller",
    "MythGuard",
    "MythGuardError",
    "MythXClient",
    "RateLimiter",
    "ReportStatus",
    "ResultAggregator",
    "Role",
    "ServiceError",
    "Success",
    "TransportError",
    "create_default_http_client",
    "load_analysis_settings",
    "load_contract_records",
    "load_http_settings",
    "sanitize",
    "setup_logging",
    "validate_limit",
    "__version__",
]
