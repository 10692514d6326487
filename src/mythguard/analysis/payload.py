# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Translate contract records into the analysis service's request schema."""

from __future__ import annotations

import posixpath
import re
from typing import Any

from ..config import AnalysisSettings
from ..models.contract import ContractRecord

ANALYSIS_MODE = "quick"

# Unlinked library references are 40-character placeholders starting with "__".
_LINK_PLACEHOLDER_RE = re.compile(r"__.{38}")


def replace_linked_libraries(bytecode: str) -> str:
    return _LINK_PLACEHOLDER_RE.sub("0" * 40, bytecode)


def to_analysis_data(record: ContractRecord) -> dict[str, Any]:
    """Build the `data` section of an analysis request; absent fields are omitted."""
    main_source = posixpath.basename(record.source_path.replace("\\", "/")) if record.source_path else ""
    data: dict[str, Any] = {"contractName": record.name}

    for key in ("bytecode", "deployedBytecode"):
        if record.has_field(key):
            data[key] = replace_linked_libraries(str(record.artifact[key]))
    for key in ("sourceMap", "deployedSourceMap"):
        if record.has_field(key):
            data[key] = record.artifact[key]

    if main_source:
        data["mainSource"] = main_source
        data["sources"] = {
            main_source: {
                key: value
                for key, value in (("source", record.source), ("ast", record.ast), ("legacyAST", record.legacy_ast))
                if value is not None
            }
        }
        data["sourceList"] = [record.source_path]
    if record.compiler_version:
        data["version"] = record.compiler_version

    data["analysisMode"] = ANALYSIS_MODE
    return data


def build_analysis_request(record: ContractRecord, settings: AnalysisSettings) -> dict[str, Any]:
    return {
        "clientToolName": settings.client_tool_name,
        "noCacheLookup": False,
        "data": to_analysis_data(record),
    }


__all__ = ["ANALYSIS_MODE", "build_analysis_request", "replace_linked_libraries", "to_analysis_data"]
