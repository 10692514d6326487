# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket

import httpx
import pytest

from mythguard import __version__, config
from mythguard.config import (
    DEFAULT_ANALYZE_RATE_LIMIT,
    DEFAULT_USER_AGENT,
    MAX_ANALYZE_RATE_LIMIT,
    TRIAL_ETH_ADDRESS,
    TRIAL_PASSWORD,
    AnalysisSettings,
    severity_threshold,
    swc_blacklist,
    validate_limit,
)
from mythguard.errors import (
    AnalysisTimeoutError,
    AuthorizationError,
    ConfigurationError,
    ErrorCategory,
    ServiceError,
    TransportError,
    categorize_exception,
    error_category_to_reason,
)


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("MYTHGUARD_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("MYTHGUARD_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("MYTHGUARD_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("MYTHGUARD_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("MYTHGUARD_HTTP_MAX_BODY_BYTES", "-1")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes


def test_analysis_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("MYTHGUARD_API_URL", "https://mythx.example/")
    monkeypatch.setenv("MYTHX_ETH_ADDRESS", "0xabc")
    monkeypatch.setenv("MYTHX_PASSWORD", "secret")
    monkeypatch.setenv("MYTHGUARD_LIMIT", "2")
    monkeypatch.setenv("MYTHGUARD_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("MYTHGUARD_MAX_WAIT", "60")
    monkeypatch.setenv("MYTHGUARD_DEBUG", "yes")

    settings = config.load_analysis_settings()

    assert settings.api_url == "https://mythx.example"
    assert settings.credentials() == ("0xabc", "secret")
    assert settings.default_limit == 2
    assert settings.poll_interval == 0.5
    assert settings.max_wait == 60
    assert settings.debug is True


def test_analysis_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("MYTHGUARD_POLL_INTERVAL", "soon")
    monkeypatch.setenv("MYTHGUARD_MAX_WAIT", "-5")
    monkeypatch.setenv("MYTHGUARD_LIMIT", "ten")

    settings = config.load_analysis_settings()

    assert settings.poll_interval == AnalysisSettings.poll_interval
    assert settings.max_wait == AnalysisSettings.max_wait
    assert settings.default_limit == DEFAULT_ANALYZE_RATE_LIMIT
    assert DEFAULT_USER_AGENT == f"mythguard/{__version__}"


def test_load_analysis_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("MYTHGUARD_MAX_WAIT", "7.7")
    assert config.load_analysis_settings().max_wait == 7.7
    monkeypatch.setenv("MYTHGUARD_MAX_WAIT", "8.8")
    assert config.load_analysis_settings().max_wait == 8.8


def test_credentials_default_to_trial_account():
    assert AnalysisSettings().credentials() == (TRIAL_ETH_ADDRESS, TRIAL_PASSWORD)


def test_credentials_require_both_parts():
    with pytest.raises(ConfigurationError):
        AnalysisSettings(eth_address="0x123456789012345678901234").credentials()
    with pytest.raises(ConfigurationError):
        AnalysisSettings(password="password").credentials()


def test_default_upper_bound_is_ten_times_default():
    assert DEFAULT_ANALYZE_RATE_LIMIT == 4
    assert MAX_ANALYZE_RATE_LIMIT == 40


def test_validate_limit_rejects_non_numbers():
    with pytest.raises(ConfigurationError) as excinfo:
        validate_limit("test")
    assert str(excinfo.value) == "limit parameter should be a number; got test."

    for bad in (float("nan"), float("inf"), True, [3]):
        with pytest.raises(ConfigurationError):
            validate_limit(bad)


def test_validate_limit_rejects_out_of_range():
    with pytest.raises(ConfigurationError) as excinfo:
        validate_limit(MAX_ANALYZE_RATE_LIMIT + 5)
    assert str(excinfo.value) == f"limit should be between 0 and {MAX_ANALYZE_RATE_LIMIT}; got {MAX_ANALYZE_RATE_LIMIT + 5}."

    with pytest.raises(ConfigurationError):
        validate_limit(-1)


def test_validate_limit_accepts_numbers_and_defaults():
    assert validate_limit(None) == DEFAULT_ANALYZE_RATE_LIMIT
    assert validate_limit(0) == DEFAULT_ANALYZE_RATE_LIMIT
    assert validate_limit("7") == 7
    assert validate_limit(2.0) == 2
    assert validate_limit(3, maximum=3) == 3


@pytest.mark.parametrize("default", [0, -2, MAX_ANALYZE_RATE_LIMIT + 60])
def test_validate_limit_rejects_out_of_range_default(default):
    for value in (None, 0):
        with pytest.raises(ConfigurationError, match="default limit should be between 1 and"):
            validate_limit(value, MAX_ANALYZE_RATE_LIMIT, default)
    assert validate_limit(5, MAX_ANALYZE_RATE_LIMIT, default) == 5


@pytest.mark.parametrize("env_limit", ["0", "100"])
def test_env_default_limit_is_validated_before_dispatch(monkeypatch, env_limit):
    monkeypatch.setenv("MYTHGUARD_LIMIT", env_limit)
    settings = config.load_analysis_settings()
    with pytest.raises(ConfigurationError):
        validate_limit(None, settings.max_limit, settings.default_limit)


def test_severity_threshold_mapping():
    assert severity_threshold("error") == 2
    assert severity_threshold("warning") == 1
    assert severity_threshold() == 1
    assert severity_threshold("bogus") == 1


def test_swc_blacklist_formats_codes():
    assert swc_blacklist("103,111") == ["SWC-103", "SWC-111"]
    assert swc_blacklist("103") == ["SWC-103"]
    assert swc_blacklist("103, 111") == ["SWC-103", "SWC-111"]
    assert swc_blacklist("cat") == ["SWC-cat"]
    assert swc_blacklist(None) == []


def test_categorize_exception():
    assert categorize_exception(AnalysisTimeoutError("slow")) == ErrorCategory.TIMEOUT
    assert categorize_exception(ServiceError("boom")) == ErrorCategory.SERVICE
    assert categorize_exception(AuthorizationError("denied")) == ErrorCategory.SERVICE
    assert categorize_exception(TransportError("down")) == ErrorCategory.TRANSPORT
    assert categorize_exception(httpx.ConnectError("refused")) == ErrorCategory.TRANSPORT
    assert categorize_exception(httpx.ReadTimeout("slow")) == ErrorCategory.TRANSPORT
    assert categorize_exception(socket.gaierror("dns")) == ErrorCategory.TRANSPORT
    assert categorize_exception(ValueError("bad json")) == ErrorCategory.MALFORMED
    assert categorize_exception(RuntimeError("?")) == ErrorCategory.UNKNOWN


def test_error_category_to_reason():
    assert "timed out" in error_category_to_reason(ErrorCategory.TIMEOUT).lower()
    assert error_category_to_reason(None) == ""
