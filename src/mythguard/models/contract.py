# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Compiled contract records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

BYTECODE_FIELDS = ("bytecode", "deployedBytecode")
SOURCE_MAP_FIELDS = ("sourceMap", "deployedSourceMap")
ANALYZED_FIELDS = BYTECODE_FIELDS + SOURCE_MAP_FIELDS


@dataclass(frozen=True)
class ContractRecord:
    """
    One compiled contract as produced by the build.

    `artifact` keeps the raw compiled-contract mapping. A key that is absent means
    the build did not produce that field; a key that is present with a `None` or
    empty value is considered malformed and is removed by sanitization.
    """

    name: str
    source_path: str = ""
    artifact: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "artifact", MappingProxyType(dict(self.artifact)))

    @classmethod
    def from_artifact(cls, data: Mapping[str, Any]) -> ContractRecord:
        return cls(
            name=str(data.get("contractName") or ""),
            source_path=str(data.get("sourcePath") or ""),
            artifact=data,
        )

    @property
    def bytecode(self) -> str | None:
        return self.artifact.get("bytecode")

    @property
    def deployed_bytecode(self) -> str | None:
        return self.artifact.get("deployedBytecode")

    @property
    def source_map(self) -> str | None:
        return self.artifact.get("sourceMap")

    @property
    def deployed_source_map(self) -> str | None:
        return self.artifact.get("deployedSourceMap")

    @property
    def source(self) -> str | None:
        return self.artifact.get("source")

    @property
    def ast(self) -> Any:
        return self.artifact.get("ast")

    @property
    def legacy_ast(self) -> Any:
        return self.artifact.get("legacyAST")

    @property
    def compiler_version(self) -> str | None:
        compiler = self.artifact.get("compiler")
        if isinstance(compiler, Mapping):
            return compiler.get("version")
        return None

    def has_field(self, key: str) -> bool:
        return key in self.artifact

    def without(self, *keys: str) -> ContractRecord:
        """Return a copy of this record with `keys` removed from the artifact."""
        return ContractRecord(
            name=self.name,
            source_path=self.source_path,
            artifact={k: v for k, v in self.artifact.items() if k not in keys},
        )


__all__ = ["ANALYZED_FIELDS", "BYTECODE_FIELDS", "ContractRecord", "SOURCE_MAP_FIELDS"]
