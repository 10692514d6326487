# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Drive a single analysis job from submission to a terminal status.

Submitted -> Pending -> Finished | Error | TimedOut. A job whose submission
already reports a terminal status is never polled. Every remote failure is
converted into a Failure outcome so sibling jobs are unaffected.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from ..config import AnalysisSettings, load_analysis_settings
from ..errors import AnalysisTimeoutError, ErrorCategory, categorize_exception
from ..http.api import AnalysisClient
from ..models.job import AnalysisJob, JobStatus
from ..models.outcome import AnalysisOutcome, Failure, Success, parse_issue_groups
from .events import AnalysisEvent, EventKind, EventObserver, log_event


class JobPoller:
    """Submits one job and polls it at a fixed interval until it is terminal."""

    def __init__(
        self,
        client: AnalysisClient,
        settings: AnalysisSettings | None = None,
        *,
        sleep: Callable[[float], Any] | None = None,
        cancel_event: threading.Event | None = None,
        on_event: EventObserver | None = None,
    ):
        self.client = client
        self.settings = settings or load_analysis_settings()
        # None waits on cancel_event, so cancellation interrupts a poll interval.
        self._sleep = sleep
        self.cancel_event = cancel_event or threading.Event()
        self.on_event = on_event or log_event

    def _emit(self, kind: EventKind, job: AnalysisJob, **detail: Any) -> None:
        self.on_event(AnalysisEvent(kind=kind, contract=job.contract, detail=detail))

    def _wait(self, seconds: float) -> bool:
        """Wait between polls; False means the batch was cancelled."""
        if self.cancel_event.is_set():
            return False
        if seconds > 0:
            if self._sleep is None:
                return not self.cancel_event.wait(seconds)
            self._sleep(seconds)
        return not self.cancel_event.is_set()

    def run(self, job: AnalysisJob, request: dict[str, Any]) -> AnalysisOutcome | None:
        """
        Submit `request` for `job` and return its outcome.

        Returns None only when the batch is cancelled before the job reaches a
        terminal status; the job is then abandoned.
        """
        try:
            submission = self.client.submit_analysis(request)
        except Exception as exc:  # noqa: BLE001
            return self._failed(job, exc)

        job.handle = submission.handle
        job.last_status = dict(submission.status_payload or {})
        job.status = submission.status
        self._emit(EventKind.JOB_SUBMITTED, job, uuid=job.handle, status=job.status.value)

        polled = False
        if not job.status.is_terminal:
            job.status = JobStatus.PENDING
            polled = True
            try:
                self._poll(job)
            except _Abandoned:
                self._emit(EventKind.JOB_ABANDONED, job, uuid=job.handle)
                return None
            except Exception as exc:  # noqa: BLE001
                return self._failed(job, exc)

        issues = submission.issues
        if job.status is JobStatus.FINISHED and job.handle and (polled or issues is None):
            try:
                issues = self.client.get_issues(job.handle)
            except Exception as exc:  # noqa: BLE001
                return self._failed(job, exc)
        return self._conclude(job, issues)

    def _poll(self, job: AnalysisJob) -> None:
        interval = self.settings.poll_interval
        if self.settings.initial_delay > 0 and not self._wait(self.settings.initial_delay):
            raise _Abandoned()

        # The elapsed budget starts with the first poll and counts poll spacing only.
        while not job.status.is_terminal:
            if job.elapsed >= self.settings.max_wait:
                job.status = JobStatus.TIMED_OUT
                return
            if not self._wait(interval):
                raise _Abandoned()
            job.advance(interval)
            payload = self.client.get_status(job.handle) if job.handle else {}
            job.polls += 1
            job.last_status = dict(payload)
            job.status = JobStatus.from_service(payload.get("status"))
            self._emit(EventKind.JOB_POLLED, job, uuid=job.handle, status=job.status.value, elapsed=job.elapsed)

    def _conclude(self, job: AnalysisJob, issues: Any) -> AnalysisOutcome:
        if job.status is JobStatus.FINISHED:
            try:
                findings, logs = parse_issue_groups(issues)
            except ValueError as exc:
                job.status = JobStatus.ERROR
                return self._failure(job, f"{job.contract}: {exc}", ErrorCategory.MALFORMED)
            self._emit(EventKind.JOB_FINISHED, job, uuid=job.handle, findings=len(findings))
            return Success(contract=job.contract, findings=tuple(findings), logs=tuple(logs), handle=job.handle)

        if job.status is JobStatus.TIMED_OUT:
            exc = AnalysisTimeoutError(
                f"{job.contract}: Timeout reached after {job.elapsed:g} sec(s); last status {job.last_status}"
            )
            return self._failed(job, exc)

        return self._failure(job, f"{job.contract}: {job.last_status}", ErrorCategory.SERVICE)

    def _failed(self, job: AnalysisJob, exc: BaseException) -> Failure:
        if not job.status.is_terminal:
            job.status = JobStatus.TIMED_OUT if isinstance(exc, AnalysisTimeoutError) else JobStatus.ERROR
        reason = str(exc) or type(exc).__name__
        if not reason.startswith(f"{job.contract}:"):
            reason = f"{job.contract}: {reason}"
        return self._failure(job, reason, categorize_exception(exc))

    def _failure(self, job: AnalysisJob, reason: str, category: ErrorCategory) -> Failure:
        self._emit(EventKind.JOB_FAILED, job, uuid=job.handle, category=category.value, reason=reason)
        return Failure(
            contract=job.contract,
            reason=reason,
            category=category,
            handle=job.handle,
            status=dict(job.last_status),
        )


class _Abandoned(Exception):
    pass


__all__ = ["JobPoller"]
