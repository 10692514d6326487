# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Load compiled-contract artifacts from a build directory."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable

from .models.contract import ContractRecord

logger = logging.getLogger(__name__)


def load_contract_records(build_dir: str, contract_names: Iterable[str] | None = None) -> list[ContractRecord]:
    """
    Read every `*.json` artifact in `build_dir` (file-name order).

    Files that fail to parse or lack a `contractName` are skipped. When a name
    appears twice the first record wins, keeping names unique per batch.
    """
    if not os.path.isdir(build_dir):
        raise FileNotFoundError(f"Build directory not found: {build_dir}")

    wanted = set(contract_names or ())
    records: list[ContractRecord] = []
    seen: set[str] = set()
    for filename in sorted(os.listdir(build_dir)):
        if not filename.endswith(".json"):
            continue
        path = os.path.join(build_dir, filename)
        try:
            with open(path, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        if not isinstance(data, dict) or not data.get("contractName"):
            logger.debug("Skipping %s: not a compiled contract artifact", path)
            continue
        record = ContractRecord.from_artifact(data)
        if wanted and record.name not in wanted:
            continue
        if record.name in seen:
            logger.warning("Duplicate contract %s in %s; keeping the first", record.name, path)
            continue
        seen.add(record.name)
        records.append(record)
    return records


__all__ = ["load_contract_records"]
