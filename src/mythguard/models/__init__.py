# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for MythGuard."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .contract import ANALYZED_FIELDS, ContractRecord
from .job import AnalysisJob, JobStatus
from .outcome import AnalysisOutcome, Failure, Finding, Location, LogLine, Success, parse_issue_groups
from .report import AggregatedResult, AnalysisRun, ReferenceResult, ReportStatus, report_status

__all__ = [
    "ANALYZED_FIELDS",
    "AggregatedResult",
    "AnalysisJob",
    "AnalysisOutcome",
    "AnalysisRun",
    "ContractRecord",
    "Failure",
    "Finding",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "JobStatus",
    "Location",
    "LogLine",
    "ReferenceResult",
    "ReportStatus",
    "Success",
    "parse_issue_groups",
    "report_status",
]
