# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fan contract records out to concurrent analysis jobs under a ceiling."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from ..config import AnalysisSettings, load_analysis_settings, validate_limit
from ..errors import ErrorCategory
from ..http.api import AnalysisClient
from ..models.contract import ContractRecord
from ..models.job import AnalysisJob
from ..models.outcome import AnalysisOutcome, Failure
from .aggregate import ResultAggregator
from .events import AnalysisEvent, EventKind, EventObserver, log_event
from .limiter import RateLimiter
from .payload import build_analysis_request
from .poller import JobPoller
from .sanitize import sanitize

logger = logging.getLogger(__name__)

_WAIT_SLICE = 0.1


class Dispatcher:
    """
    Launches one JobPoller per record, in input order, never exceeding `limit`
    jobs in flight. A slot is freed as soon as a job reaches a terminal status,
    and the next queued record starts immediately.
    """

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
        self.on_event = on_event or log_event
        self._sleep = sleep
        self._cancel_event = threading.Event()
        self.limiter: RateLimiter | None = None
        self.aggregator = ResultAggregator()

    def cancel(self) -> None:
        """Stop launching records and abandon jobs that are still polling."""
        self._cancel_event.set()
        if self.limiter is not None:
            self.limiter.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def dispatch(self, records: Sequence[ContractRecord], limit: Any = None) -> list[AnalysisOutcome]:
        """
        Analyze every record and return outcomes in completion order.

        Raises ConfigurationError for an invalid `limit` before any remote call.
        """
        ceiling = validate_limit(limit, self.settings.max_limit, self.settings.default_limit)
        self.limiter = RateLimiter(ceiling)
        self.aggregator = ResultAggregator()
        self._cancel_event.clear()
        poller = JobPoller(
            self.client,
            self.settings,
            sleep=self._sleep,
            cancel_event=self._cancel_event,
            on_event=self.on_event,
        )

        executor = ThreadPoolExecutor(max_workers=ceiling, thread_name_prefix="mythguard-job")
        futures: list[Future[None]] = []
        try:
            for index, record in enumerate(records):
                if not self.limiter.acquire():
                    break
                job = AnalysisJob(record=record, index=index)
                self.on_event(AnalysisEvent(kind=EventKind.JOB_STARTED, contract=record.name, detail={"index": index}))
                futures.append(executor.submit(self._run_job, poller, job))
            # Timed waits keep the main thread responsive to KeyboardInterrupt.
            pending = set(futures)
            while pending:
                _, pending = wait(pending, timeout=_WAIT_SLICE)
        except BaseException:
            self.cancel()
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)
        for future in futures:
            future.result()
        return self.aggregator.outcomes

    def _run_job(self, poller: JobPoller, job: AnalysisJob) -> None:
        limiter = self.limiter
        assert limiter is not None
        outcome: AnalysisOutcome | None
        try:
            try:
                cleaned, _ = sanitize(job.record, self.settings.debug, self._stripped_logger(job.record))
                outcome = poller.run(job, build_analysis_request(cleaned, self.settings))
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected failure analyzing %s", job.contract)
                outcome = Failure(contract=job.contract, reason=f"{job.contract}: {exc}", category=ErrorCategory.UNKNOWN)
            # Recorded before the slot is freed so aggregate order is completion order.
            if outcome is not None:
                self.aggregator.add(outcome)
        finally:
            limiter.release()

    def _stripped_logger(self, record: ContractRecord) -> Callable[[str], None]:
        def emit(message: str) -> None:
            self.on_event(AnalysisEvent(kind=EventKind.FIELD_STRIPPED, contract=record.name, message=message))

        return emit


def dispatch(
    client: AnalysisClient,
    settings: AnalysisSettings | None,
    records: Sequence[ContractRecord],
    limit: Any = None,
    *,
    on_event: EventObserver | None = None,
) -> list[AnalysisOutcome]:
    """Functional entry point: analyze `records` with a fresh Dispatcher."""
    return Dispatcher(client, settings, on_event=on_event).dispatch(records, limit)


__all__ = ["Dispatcher", "dispatch"]
