# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from mythguard.artifacts import load_contract_records
from mythguard.models import ContractRecord


def _write(path, name, **extra):
    path.write_text(json.dumps({"contractName": name, "bytecode": "0x60", "sourcePath": f"/c/{name}.sol", **extra}))


def test_loads_artifacts_in_file_name_order(tmp_path):
    _write(tmp_path / "b.json", "Beta")
    _write(tmp_path / "a.json", "Alpha")
    (tmp_path / "notes.txt").write_text("ignored")
    records = load_contract_records(str(tmp_path))
    assert [r.name for r in records] == ["Alpha", "Beta"]
    assert records[0].bytecode == "0x60"
    assert records[0].source_path == "/c/Alpha.sol"


def test_skips_unparseable_and_nameless_files(tmp_path):
    (tmp_path / "broken.json").write_text("{not json")
    (tmp_path / "list.json").write_text("[]")
    (tmp_path / "nameless.json").write_text(json.dumps({"bytecode": "0x60"}))
    _write(tmp_path / "ok.json", "Ok")
    assert [r.name for r in load_contract_records(str(tmp_path))] == ["Ok"]


def test_filters_by_contract_name_and_keeps_first_duplicate(tmp_path):
    _write(tmp_path / "1.json", "Token", bytecode="0x01")
    _write(tmp_path / "2.json", "Token", bytecode="0x02")
    _write(tmp_path / "3.json", "Crowdsale")
    records = load_contract_records(str(tmp_path), ["Token"])
    assert len(records) == 1
    assert records[0].bytecode == "0x01"


def test_missing_build_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_contract_records(str(tmp_path / "missing"))


def test_contract_record_is_read_only():
    record = ContractRecord.from_artifact({"contractName": "A", "bytecode": "0x60"})
    with pytest.raises(TypeError):
        record.artifact["bytecode"] = "0x"
    trimmed = record.without("bytecode", "absent")
    assert not trimmed.has_field("bytecode")
    assert record.has_field("bytecode")
