# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from mythguard.analysis.access import AccessPolicyGate, Role, roles_from_user_info
from mythguard.errors import AuthorizationError, ConfigurationError, TransportError
from mythguard.models import ReportStatus
from mythguard.scan.engine import AnalysisEngine
from mythguard.scan.report import render_legacy_report

PRIVILEGED_USER = {"total": 1, "users": [{"id": "000000000000000000000002", "roles": ["regular_user", "privileged_user"]}]}
REGULAR_USER = {"total": 1, "users": [{"id": "000000000000000000000001", "roles": ["regular_user"]}]}


def test_roles_from_user_info():
    assert roles_from_user_info(PRIVILEGED_USER) == {"regular_user", "privileged_user"}
    with pytest.raises(AuthorizationError):
        roles_from_user_info({"total": 0, "users": []})
    with pytest.raises(AuthorizationError):
        roles_from_user_info(["not", "a", "mapping"])


def test_roles_given_as_a_string_are_not_split():
    assert roles_from_user_info({"users": [{"roles": "privileged_user"}]}) == {"privileged_user"}
    assert roles_from_user_info({"users": [{"roles": "ab"}, {"roles": None}, {"roles": 7}]}) == {"ab"}


def test_gate_resolves_roles(client_factory):
    assert AccessPolicyGate(client_factory(user_info=PRIVILEGED_USER)).authorize() is Role.PRIVILEGED
    assert AccessPolicyGate(client_factory(user_info=REGULAR_USER)).authorize() is Role.REGULAR
    custom = AccessPolicyGate(client_factory(user_info=REGULAR_USER), privileged_roles={"regular_user"})
    assert custom.authorize() is Role.PRIVILEGED


def test_gate_wraps_lookup_failures(client_factory):
    gate = AccessPolicyGate(client_factory(user_info=TransportError("down")))
    with pytest.raises(AuthorizationError, match="Account lookup failed"):
        gate.authorize()
    assert gate.may_retrieve_by_reference() is False


def test_privileged_reference_is_retrieved_without_submission(client_factory, record_factory, settings, issue_group):
    client = client_factory(user_info=PRIVILEGED_USER, issues={"job-1": [issue_group]})
    run = AnalysisEngine(client, settings).run([record_factory()], job_reference="job-1")

    assert run.is_reference
    assert run.result is None
    assert run.reference.job_reference == "job-1"
    assert run.reference.issue_groups == [issue_group]
    assert client.submit_calls == []
    assert client.issue_calls == ["job-1"]


def test_regular_user_with_reference_falls_back_to_dispatch(client_factory, record_factory, settings):
    client = client_factory(user_info=REGULAR_USER)
    run = AnalysisEngine(client, settings).run([record_factory()], job_reference="job-1")
    assert not run.is_reference
    assert len(run.result.successes) == 1
    assert len(client.submit_calls) == 1
    assert client.issue_calls == []


def test_failed_lookup_with_reference_falls_back_to_dispatch(client_factory, record_factory, settings):
    client = client_factory(user_info=AuthorizationError("denied"))
    run = AnalysisEngine(client, settings).run([record_factory()], job_reference="job-1")
    assert run.result is not None
    assert len(client.submit_calls) == 1


def test_retrieval_failure_is_reported_not_raised(client_factory, settings):
    client = client_factory(user_info=PRIVILEGED_USER, issues={"job-1": TransportError("Error")})
    run = AnalysisEngine(client, settings).run([], job_reference="job-1")
    assert run.reference.error == "job-1: Error"


def test_malformed_retrieval_is_reported(client_factory, settings):
    client = client_factory(user_info=PRIVILEGED_USER, issues={"job-1": {}})
    run = AnalysisEngine(client, settings).run([], job_reference="job-1")
    assert "malformed" in run.reference.error


def test_no_reference_skips_account_lookup(client_factory, record_factory, settings):
    client = client_factory()
    run = AnalysisEngine(client, settings).run([record_factory()])
    assert client.user_calls == 0
    assert run.result.status is ReportStatus.CLEAN


def test_invalid_limit_is_rejected_before_lookup_or_dispatch(client_factory, record_factory, settings):
    client = client_factory(user_info=PRIVILEGED_USER)
    engine = AnalysisEngine(client, settings)
    with pytest.raises(ConfigurationError):
        engine.run([record_factory()], limit="test", job_reference="job-1")
    assert client.user_calls == 0
    assert client.submit_calls == []
    assert client.issue_calls == []


@pytest.mark.parametrize("user_info", [REGULAR_USER, AuthorizationError("denied")])
def test_refused_reference_without_records_is_not_a_clean_run(client_factory, settings, user_info):
    client = client_factory(user_info=user_info)
    run = AnalysisEngine(client, settings).run([], job_reference="job-1")

    assert run.is_reference
    assert run.result is None
    assert run.reference.error.startswith("job-1: results could not be retrieved")
    assert render_legacy_report(run.reference)[1] == 1
    assert client.submit_calls == []
    assert client.issue_calls == []
