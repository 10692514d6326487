# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Analysis orchestration: sanitize, dispatch, poll and aggregate."""

from .access import AccessPolicyGate, Role
from .aggregate import ResultAggregator, fold
from .dispatcher import Dispatcher, dispatch
from .events import AnalysisEvent, EventKind, log_event
from .limiter import RateLimiter
from .payload import build_analysis_request, to_analysis_data
from .poller import JobPoller
from .sanitize import EMPTY_BYTECODE, sanitize

__all__ = [
    "AccessPolicyGate",
    "AnalysisEvent",
    "Dispatcher",
    "EMPTY_BYTECODE",
    "EventKind",
    "JobPoller",
    "RateLimiter",
    "ResultAggregator",
    "Role",
    "build_analysis_request",
    "dispatch",
    "fold",
    "log_event",
    "sanitize",
    "to_analysis_data",
]
