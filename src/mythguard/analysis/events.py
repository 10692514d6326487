# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Structured progress events emitted while analyses run."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger("mythguard.analysis")


class EventKind(str, Enum):
    FIELD_STRIPPED = "field_stripped"
    JOB_STARTED = "job_started"
    JOB_SUBMITTED = "job_submitted"
    JOB_POLLED = "job_polled"
    JOB_FINISHED = "job_finished"
    JOB_FAILED = "job_failed"
    JOB_ABANDONED = "job_abandoned"


@dataclass(frozen=True)
class AnalysisEvent:
    kind: EventKind
    contract: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)
    message: str = ""


EventObserver = Callable[[AnalysisEvent], None]


def log_event(event: AnalysisEvent) -> None:
    """Default observer: log every event at DEBUG."""
    if event.message:
        logger.debug("[%s] %s", event.kind.value, event.message)
    else:
        logger.debug("[%s] %s %s", event.kind.value, event.contract or "-", event.detail)


__all__ = ["AnalysisEvent", "EventKind", "EventObserver", "log_event"]
