# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Strip empty or placeholder fields from compiled contracts before submission."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..models.contract import ANALYZED_FIELDS, BYTECODE_FIELDS, ContractRecord

# What the compiler emits for a contract with no code (interfaces, abstract contracts).
EMPTY_BYTECODE = "0x"


def is_empty_field(key: str, value: Any) -> bool:
    if value is None or value == "":
        return True
    return key in BYTECODE_FIELDS and value == EMPTY_BYTECODE


def sanitize(
    record: ContractRecord,
    diagnostics_enabled: bool = False,
    log_fn: Callable[[str], Any] | None = None,
) -> tuple[ContractRecord, frozenset[str]]:
    """
    Return a copy of `record` without empty analyzed fields, plus the names removed.

    Fields that are absent are left alone, so sanitizing a sanitized record is a
    no-op. `log_fn` is called once per stripped field, and only when
    `diagnostics_enabled` is true.
    """
    stripped = [
        key
        for key in ANALYZED_FIELDS
        if record.has_field(key) and is_empty_field(key, record.artifact[key])
    ]
    if not stripped:
        return record, frozenset()

    if diagnostics_enabled and log_fn is not None:
        for key in stripped:
            log_fn(f"{record.name}: {key} is empty ({record.artifact[key]!r}); omitting it from the analysis request.")

    return record.without(*stripped), frozenset(stripped)


__all__ = ["EMPTY_BYTECODE", "is_empty_field", "sanitize"]
