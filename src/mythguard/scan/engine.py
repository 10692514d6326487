# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Analysis engine: access check, then dispatch and aggregation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..analysis.access import AccessPolicyGate
from ..analysis.aggregate import fold
from ..analysis.dispatcher import Dispatcher
from ..analysis.events import EventObserver
from ..config import AnalysisSettings, load_analysis_settings, validate_limit
from ..http.api import AnalysisClient
from ..models import AnalysisRun, ContractRecord, ReferenceResult

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """Turns contract records into an AggregatedResult, or retrieves one by reference."""

    def __init__(
        self,
        client: AnalysisClient,
        settings: AnalysisSettings | None = None,
        *,
        on_event: EventObserver | None = None,
        sleep: Callable[[float], Any] | None = None,
    ):
        self.client = client
        self.settings = settings or load_analysis_settings()
        self.gate = AccessPolicyGate(client, self.settings.privileged_roles)
        self.dispatcher = Dispatcher(client, self.settings, on_event=on_event, sleep=sleep)

    def run(
        self,
        records: Sequence[ContractRecord],
        *,
        limit: Any = None,
        job_reference: str | None = None,
    ) -> AnalysisRun:
        ceiling = validate_limit(limit, self.settings.max_limit, self.settings.default_limit)

        if job_reference:
            if self.gate.may_retrieve_by_reference():
                return AnalysisRun(reference=self.retrieve(job_reference))
            if not records:
                # Nothing to fall back to; an empty dispatch would read as a clean run.
                return AnalysisRun(
                    reference=ReferenceResult(
                        job_reference=job_reference,
                        error=f"{job_reference}: results could not be retrieved and no contracts were given to analyze instead",
                    )
                )

        outcomes = self.dispatcher.dispatch(records, ceiling)
        return AnalysisRun(result=fold(outcomes))

    def retrieve(self, job_reference: str) -> ReferenceResult:
        try:
            issues = self.client.get_issues(job_reference)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Retrieving %s failed", job_reference, exc_info=True)
            return ReferenceResult(job_reference=job_reference, error=f"{job_reference}: {exc}")
        if not isinstance(issues, list):
            return ReferenceResult(job_reference=job_reference, error=f"{job_reference}: malformed issues payload")
        return ReferenceResult(job_reference=job_reference, issue_groups=issues)

    def cancel(self) -> None:
        self.dispatcher.cancel()
