# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Findings and per-job analysis outcomes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from ..errors import ErrorCategory


@dataclass(frozen=True)
class Location:
    source_map: str

    def to_dict(self) -> dict[str, Any]:
        return {"sourceMap": self.source_map}


@dataclass(frozen=True)
class Finding:
    """One issue reported by the analysis service."""

    head: str
    tail: str = ""
    severity: str = ""
    swc_id: str = ""
    swc_title: str = ""
    locations: tuple[Location, ...] = ()
    source_list: tuple[str, ...] = ()
    source_format: str = ""

    @classmethod
    def from_mapping(cls, issue: Mapping[str, Any], group: Mapping[str, Any] | None = None) -> Finding:
        description = issue.get("description") or {}
        if not isinstance(description, Mapping):
            description = {"head": str(description)}
        locations = tuple(
            Location(source_map=str(loc.get("sourceMap") or ""))
            for loc in issue.get("locations") or []
            if isinstance(loc, Mapping)
        )
        group = group or {}
        return cls(
            head=str(description.get("head") or ""),
            tail=str(description.get("tail") or ""),
            severity=str(issue.get("severity") or ""),
            swc_id=str(issue.get("swcID") or ""),
            swc_title=str(issue.get("swcTitle") or ""),
            locations=locations,
            source_list=tuple(str(s) for s in group.get("sourceList") or []),
            source_format=str(group.get("sourceFormat") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": {"head": self.head, "tail": self.tail},
            "severity": self.severity,
            "swcID": self.swc_id,
            "swcTitle": self.swc_title,
            "locations": [loc.to_dict() for loc in self.locations],
        }


@dataclass(frozen=True)
class LogLine:
    level: str
    msg: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LogLine:
        return cls(level=str(data.get("level") or "info"), msg=str(data.get("msg") or ""))

    def to_dict(self) -> dict[str, str]:
        return {"level": self.level, "msg": self.msg}


@dataclass(frozen=True)
class Success:
    contract: str
    findings: tuple[Finding, ...] = ()
    logs: tuple[LogLine, ...] = ()
    handle: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "contract": self.contract,
            "uuid": self.handle,
            "issues": [f.to_dict() for f in self.findings],
            "logs": [log.to_dict() for log in self.logs],
        }


@dataclass(frozen=True)
class Failure:
    contract: str
    reason: str
    category: ErrorCategory = ErrorCategory.UNKNOWN
    handle: str | None = None
    status: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contract": self.contract,
            "uuid": self.handle,
            "category": self.category.value,
            "reason": self.reason,
        }


AnalysisOutcome = Union[Success, Failure]


def parse_issue_groups(payload: Any) -> tuple[list[Finding], list[LogLine]]:
    """
    Flatten the service's issue groups into findings and log lines.

    The payload must be a list of groups; anything else raises ValueError so the
    caller can record it as a malformed response.
    """
    if not isinstance(payload, list):
        raise ValueError(f"issues payload should be a list; got {type(payload).__name__}")
    findings: list[Finding] = []
    logs: list[LogLine] = []
    for group in payload:
        if not isinstance(group, Mapping):
            raise ValueError(f"issue group should be a mapping; got {type(group).__name__}")
        for issue in group.get("issues") or []:
            if isinstance(issue, Mapping):
                findings.append(Finding.from_mapping(issue, group))
        meta = group.get("meta") or {}
        if isinstance(meta, Mapping):
            for entry in meta.get("logs") or []:
                if isinstance(entry, Mapping):
                    logs.append(LogLine.from_mapping(entry))
    return findings, logs


__all__ = [
    "AnalysisOutcome",
    "Failure",
    "Finding",
    "Location",
    "LogLine",
    "Success",
    "parse_issue_groups",
]
