# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level MythGuard facade for analysis workflows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from contextlib import suppress
from typing import Any

from .analysis.events import EventObserver
from .artifacts import load_contract_records
from .config import AnalysisSettings, load_analysis_settings
from .errors import ConfigurationError
from .http.api import AnalysisClient, MythXClient
from .http.client import HttpClient, create_default_http_client
from .models import AnalysisRun, ContractRecord
from .scan.engine import AnalysisEngine


class MythGuard:
    """
    Convenience wrapper that wires one service client across every analysis job.

    The HTTP transport and the login token are shared by all concurrent jobs.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        analysis_client: AnalysisClient | None = None,
        settings: AnalysisSettings | None = None,
        on_event: EventObserver | None = None,
    ):
        self.settings = settings or load_analysis_settings()
        self.http_client = http_client or create_default_http_client()
        self.client = analysis_client or MythXClient(self.http_client, self.settings)
        self.engine = AnalysisEngine(self.client, self.settings, on_event=on_event)

    def analyze_records(
        self,
        records: Sequence[ContractRecord],
        *,
        limit: Any = None,
        job_reference: str | None = None,
    ) -> AnalysisRun:
        return self.engine.run(records, limit=limit, job_reference=job_reference)

    def analyze(
        self,
        build_dir: str | None,
        *,
        contract_names: Iterable[str] | None = None,
        limit: Any = None,
        job_reference: str | None = None,
    ) -> AnalysisRun:
        # Artifacts are loaded even with a job reference so a fallback to fresh
        # analysis has input.
        records = load_contract_records(build_dir, contract_names) if build_dir else []
        return self.analyze_records(records, limit=limit, job_reference=job_reference)

    def service_version(self) -> dict[str, Any]:
        """Component versions of the analysis service; raises on any remote failure."""
        if not isinstance(self.client, MythXClient):
            raise ConfigurationError("The configured analysis client cannot report a service version")
        return self.client.get_version()

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> MythGuard:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
