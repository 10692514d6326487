# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for aggregated analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .outcome import Failure, Finding, LogLine, Success


class ReportStatus(str, Enum):
    CLEAN = "CLEAN"
    INCONCLUSIVE = "INCONCLUSIVE"
    FINDINGS = "FINDINGS"

    @property
    def exit_code(self) -> int:
        return 0 if self is ReportStatus.CLEAN else 1


def report_status(finding_count: int, error_count: int) -> ReportStatus:
    # Findings are always reported; errors without findings are never a clean bill.
    if finding_count > 0:
        return ReportStatus.FINDINGS
    if error_count > 0:
        return ReportStatus.INCONCLUSIVE
    return ReportStatus.CLEAN


@dataclass
class AggregatedResult:
    """Successful analyses and failed attempts, each in completion order."""

    successes: list[Success] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)

    @property
    def findings(self) -> list[Finding]:
        return [finding for success in self.successes for finding in success.findings]

    @property
    def logs(self) -> list[tuple[str, LogLine]]:
        return [(success.contract, log) for success in self.successes for log in success.logs]

    @property
    def finding_count(self) -> int:
        return sum(len(success.findings) for success in self.successes)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def status(self) -> ReportStatus:
        return report_status(self.finding_count, self.error_count)

    def __len__(self) -> int:
        return len(self.successes) + len(self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "successes": [s.to_dict() for s in self.successes],
            "failures": [f.to_dict() for f in self.failures],
        }


@dataclass
class ReferenceResult:
    """Findings of a previously run analysis, retrieved by its job reference."""

    job_reference: str
    issue_groups: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


@dataclass
class AnalysisRun:
    """What one engine invocation produced: a fresh aggregate or a retrieved reference."""

    result: AggregatedResult | None = None
    reference: ReferenceResult | None = None

    @property
    def is_reference(self) -> bool:
        return self.reference is not None


__all__ = ["AggregatedResult", "AnalysisRun", "ReferenceResult", "ReportStatus", "report_status"]
