# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Analysis job lifecycle models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .contract import ContractRecord


class JobStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    PENDING = "PENDING"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    TIMED_OUT = "TIMED_OUT"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @classmethod
    def from_service(cls, value: Any) -> JobStatus:
        """Map a status string reported by the analysis service."""
        raw = str(value or "").strip().lower()
        if raw == "finished":
            return cls.FINISHED
        if raw == "error":
            return cls.ERROR
        # "Queued", "In progress", "Running" and anything new are still in flight.
        return cls.PENDING


_TERMINAL = frozenset({JobStatus.FINISHED, JobStatus.ERROR, JobStatus.TIMED_OUT})


@dataclass
class AnalysisJob:
    """One in-flight remote analysis; owned and mutated by a single JobPoller."""

    record: ContractRecord
    index: int = 0
    handle: str | None = None
    status: JobStatus = JobStatus.SUBMITTED
    elapsed: float = 0.0
    polls: int = 0
    last_status: dict[str, Any] = field(default_factory=dict)

    @property
    def contract(self) -> str:
        return self.record.name

    def advance(self, seconds: float) -> None:
        if seconds > 0:
            self.elapsed += seconds


__all__ = ["AnalysisJob", "JobStatus"]
