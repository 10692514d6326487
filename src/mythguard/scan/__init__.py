# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Analysis orchestration entry point and reporting."""

from .engine import AnalysisEngine
from .report import ReportSummary, render_legacy_report, summarize

__all__ = ["AnalysisEngine", "ReportSummary", "render_legacy_report", "summarize"]
