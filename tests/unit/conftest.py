# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading
import time

import pytest

from mythguard.config import AnalysisSettings
from mythguard.http.api import Submission
from mythguard.models import ContractRecord, JobStatus

ONE_ISSUE_GROUP = {
    "sourceFormat": "evm-byzantium-bytecode",
    "sourceList": ["contracts/simple_dao.sol"],
    "sourceType": "raw-bytecode",
    "issues": [
        {
            "description": {"head": "Head message", "tail": "Tail message"},
            "locations": [{"sourceMap": "444:1:0"}],
            "severity": "High",
            "swcID": "SWC-000",
            "swcTitle": "Test Title",
        }
    ],
    "meta": {"selected_compiler": "0.5.0", "error": [], "warning": [], "logs": [{"level": "info", "msg": "message1"}]},
}


class FakeAnalysisClient:
    """
    Scriptable AnalysisClient.

    `submissions` is consumed in call order; entries may be Submission objects,
    exceptions (raised), or callables taking the request. `statuses` maps a handle
    to the payloads returned by successive polls (last one repeats).
    """

    def __init__(self, submissions=None, statuses=None, issues=None, user_info=None, call_delay=0.0):
        self._submissions = list(submissions or [])
        self._statuses = {k: list(v) for k, v in (statuses or {}).items()}
        self.issues = dict(issues or {})
        self.user_info = user_info if user_info is not None else {"total": 1, "users": [{"id": "1", "roles": ["regular_user"]}]}
        self.call_delay = call_delay
        self.submit_calls = []
        self.status_calls = []
        self.issue_calls = []
        self.user_calls = 0
        self._lock = threading.Lock()
        self._active = 0
        self.peak_active = 0

    def _enter(self):
        with self._lock:
            self._active += 1
            self.peak_active = max(self.peak_active, self._active)

    def _exit(self):
        with self._lock:
            self._active -= 1

    def submit_analysis(self, request):
        self._enter()
        try:
            with self._lock:
                self.submit_calls.append(request)
                entry = self._submissions.pop(0) if self._submissions else None
            if self.call_delay:
                time.sleep(self.call_delay)
            if callable(entry) and not isinstance(entry, Submission):
                entry = entry(request)
            if isinstance(entry, BaseException):
                raise entry
            if entry is None:
                return Submission(handle=None, status=JobStatus.FINISHED, status_payload={"status": "Finished"}, issues=[])
            return entry
        finally:
            self._exit()

    def get_status(self, handle):
        self._enter()
        try:
            with self._lock:
                self.status_calls.append(handle)
                queue = self._statuses.get(handle) or [{"status": "Finished"}]
                payload = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(payload, BaseException):
                raise payload
            return payload
        finally:
            self._exit()

    def get_issues(self, handle):
        with self._lock:
            self.issue_calls.append(handle)
        payload = self.issues.get(handle, [])
        if isinstance(payload, BaseException):
            raise payload
        return payload

    def get_user_info(self):
        self.user_calls += 1
        if isinstance(self.user_info, BaseException):
            raise self.user_info
        return self.user_info


def submission(status, issues=None, handle="uuid-1"):
    return Submission(handle=handle, status=JobStatus.from_service(status), status_payload={"uuid": handle, "status": status}, issues=issues)


def make_record(name="SimpleDAO", **fields):
    artifact = {
        "contractName": name,
        "bytecode": "0x6080604052",
        "deployedBytecode": "0x6080604052348015",
        "sourceMap": "25:1:0:-;;;",
        "deployedSourceMap": "25:1:0:-;;;8:9:-1",
        "sourcePath": f"/project/contracts/{name}.sol",
        "source": "pragma solidity ^0.5.0;",
        "ast": {"nodeType": "SourceUnit"},
        "legacyAST": {"name": "SourceUnit"},
        "compiler": {"name": "solc", "version": "0.5.0+commit.1d4f565a"},
    }
    artifact.update(fields)
    return ContractRecord.from_artifact(artifact)


@pytest.fixture
def settings():
    return AnalysisSettings(poll_interval=3.0, max_wait=30.0, initial_delay=0.0)


@pytest.fixture
def no_sleep():
    calls = []

    def _sleep(seconds):
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def client_factory():
    return FakeAnalysisClient


@pytest.fixture
def submission_factory():
    return submission


@pytest.fixture
def issue_group():
    return ONE_ISSUE_GROUP
