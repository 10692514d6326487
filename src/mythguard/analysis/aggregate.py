# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fold per-job outcomes into successes and failures."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from ..models.outcome import AnalysisOutcome, Failure, Success
from ..models.report import AggregatedResult


def fold(outcomes: Iterable[AnalysisOutcome]) -> AggregatedResult:
    """Partition outcomes, keeping arrival order within each bucket."""
    result = AggregatedResult()
    for outcome in outcomes:
        if isinstance(outcome, Success):
            result.successes.append(outcome)
        elif isinstance(outcome, Failure):
            result.failures.append(outcome)
        else:
            raise TypeError(f"Not an analysis outcome: {outcome!r}")
    return result


class ResultAggregator:
    """Thread-safe collector; outcomes are recorded in the order jobs complete."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcomes: list[AnalysisOutcome] = []

    def add(self, outcome: AnalysisOutcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)

    @property
    def outcomes(self) -> list[AnalysisOutcome]:
        with self._lock:
            return list(self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def fold(self) -> AggregatedResult:
        return fold(self.outcomes)


__all__ = ["ResultAggregator", "fold"]
