# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reporting helpers for aggregated analysis results."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import yaml

from ..config import DEFAULT_SEVERITY_LEVEL
from ..errors import error_category_to_reason
from ..models import AggregatedResult, Failure, Finding, LogLine, ReferenceResult, ReportStatus, report_status

SEVERITY_RANKS = {"high": 2, "medium": 1}


def severity_rank(severity: str) -> int:
    return SEVERITY_RANKS.get((severity or "").strip().lower(), 1)


def is_reportable(finding: Finding, severity_threshold: int = DEFAULT_SEVERITY_LEVEL, swc_blacklist: Iterable[str] = ()) -> bool:
    if finding.swc_id and finding.swc_id in set(swc_blacklist):
        return False
    return severity_rank(finding.severity) >= severity_threshold


def filter_findings(
    findings: Iterable[Finding],
    severity_threshold: int = DEFAULT_SEVERITY_LEVEL,
    swc_blacklist: Iterable[str] = (),
) -> list[Finding]:
    blacklist = set(swc_blacklist)
    return [f for f in findings if is_reportable(f, severity_threshold, blacklist)]


@dataclass
class ReportSummary:
    """Filtered, report-ready view of an AggregatedResult."""

    findings: list[tuple[str, Finding]] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    logs: list[tuple[str, LogLine]] = field(default_factory=list)

    @property
    def status(self) -> ReportStatus:
        return report_status(len(self.findings), len(self.failures))

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "issues": [dict(finding.to_dict(), contract=contract) for contract, finding in self.findings],
            "errors": [failure.to_dict() for failure in self.failures],
            "logs": [dict(log.to_dict(), contract=contract) for contract, log in self.logs],
        }


def summarize(
    result: AggregatedResult,
    severity_threshold: int = DEFAULT_SEVERITY_LEVEL,
    swc_blacklist: Iterable[str] = (),
) -> ReportSummary:
    blacklist = set(swc_blacklist)
    findings = [
        (success.contract, finding)
        for success in result.successes
        for finding in filter_findings(success.findings, severity_threshold, blacklist)
    ]
    return ReportSummary(findings=findings, failures=list(result.failures), logs=result.logs)


def _location(finding: Finding) -> str:
    return ", ".join(loc.source_map for loc in finding.locations if loc.source_map) or "-"


def render_text(summary: ReportSummary, *, debug: bool = False) -> str:
    lines = [f"[MythGuard] Status: {summary.status.value}"]

    if debug and summary.logs:
        lines.append("MythX Logs:")
        lines.extend(f"  {contract}: [{log.level}] {log.msg}" for contract, log in summary.logs)

    if summary.failures:
        lines.append("Internal MythX errors encountered:")
        lines.extend(f"  {failure.reason} [{error_category_to_reason(failure.category)}]" for failure in summary.failures)

    if summary.findings:
        lines.append(f"Issues ({len(summary.findings)}):")
        for contract, finding in summary.findings:
            lines.append(f"- {finding.swc_id or 'SWC-?'} [{finding.severity}] {contract}: {finding.head}")
            if finding.tail:
                lines.append(f"    {finding.tail}")
            lines.append(f"    at {_location(finding)}")
    elif summary.status is ReportStatus.INCONCLUSIVE:
        lines.append("No issues reported, but some analyses failed; results are inconclusive.")
    else:
        lines.append("No issues found")
    return "\n".join(lines)


def render_json(summary: ReportSummary) -> str:
    return json.dumps(summary.to_dict(), indent=2, sort_keys=True)


def render_yaml(summary: ReportSummary) -> str:
    return yaml.safe_dump(summary.to_dict(), sort_keys=False)


def render_legacy_report(reference: ReferenceResult) -> tuple[str, int]:
    """Plain report for results retrieved by job reference; returns (text, exit_code)."""
    if reference.error:
        return reference.error, 1

    lines: list[str] = []
    issue_count = 0
    for group in reference.issue_groups:
        issues = (group.get("issues") or []) if isinstance(group, dict) else []
        if not issues:
            continue
        lines.append(", ".join(str(s) for s in group.get("sourceList") or []))
        for issue in issues:
            issue_count += 1
            lines.append(yaml.safe_dump(issue, sort_keys=False))
    if issue_count == 0:
        return "No issues found", 0
    return "\n".join(lines), 1


def render_version(versions: dict[str, Any]) -> str:
    """One line of `component: version` pairs, sorted by component."""
    return ", ".join(f"{name}: {versions[name]}" for name in sorted(versions))


__all__ = [
    "ReportStatus",
    "ReportSummary",
    "filter_findings",
    "is_reportable",
    "render_json",
    "render_legacy_report",
    "render_text",
    "render_version",
    "render_yaml",
    "severity_rank",
    "summarize",
]
