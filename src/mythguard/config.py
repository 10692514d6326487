# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for MythGuard."""

import math
import os
import re
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError
from .version import __version__

DEFAULT_USER_AGENT = f"mythguard/{__version__}"
DEFAULT_API_URL = "https://api.mythx.io"
DEFAULT_CLIENT_TOOL_NAME = "truffle"

# Shared trial account accepted by the service when no credentials are configured.
TRIAL_ETH_ADDRESS = "0x0000000000000000000000000000000000000000"
TRIAL_PASSWORD = "trial"

DEFAULT_ANALYZE_RATE_LIMIT = 4
MAX_ANALYZE_RATE_LIMIT = 10 * DEFAULT_ANALYZE_RATE_LIMIT

PRIVILEGED_ROLES = frozenset({"privileged_user"})

SEVERITY_LEVELS = {"warning": 1, "error": 2}
DEFAULT_SEVERITY_LEVEL = SEVERITY_LEVELS["warning"]


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


@dataclass
class HttpSettings:
    """HTTP transport defaults."""

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 64 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("MYTHGUARD_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("MYTHGUARD_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("MYTHGUARD_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("MYTHGUARD_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("MYTHGUARD_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class AnalysisSettings:
    """
    Analysis service and orchestration defaults.

    `poll_interval` and `max_wait` are in seconds. `max_wait` is the per-job
    budget of elapsed polling; it starts counting at the first status poll.
    """

    api_url: str = DEFAULT_API_URL
    eth_address: str | None = None
    password: str | None = None
    client_tool_name: str = DEFAULT_CLIENT_TOOL_NAME
    default_limit: int = DEFAULT_ANALYZE_RATE_LIMIT
    max_limit: int = MAX_ANALYZE_RATE_LIMIT
    poll_interval: float = 3.0
    max_wait: float = 300.0
    initial_delay: float = 0.0
    debug: bool = False
    privileged_roles: frozenset[str] = field(default_factory=lambda: PRIVILEGED_ROLES)

    @classmethod
    def from_env(cls) -> "AnalysisSettings":
        """Create settings from environment variables (evaluated at call time)."""
        poll_interval = _float_env("MYTHGUARD_POLL_INTERVAL", cls.poll_interval)
        if poll_interval <= 0:
            poll_interval = cls.poll_interval
        max_wait = _float_env("MYTHGUARD_MAX_WAIT", cls.max_wait)
        if max_wait <= 0:
            max_wait = cls.max_wait
        return cls(
            api_url=os.getenv("MYTHGUARD_API_URL", cls.api_url).rstrip("/"),
            eth_address=_first_env("MYTHGUARD_ETH_ADDRESS", "MYTHX_ETH_ADDRESS"),
            password=_first_env("MYTHGUARD_PASSWORD", "MYTHX_PASSWORD"),
            client_tool_name=os.getenv("MYTHGUARD_CLIENT_TOOL_NAME", cls.client_tool_name),
            default_limit=_int_env("MYTHGUARD_LIMIT", cls.default_limit),
            max_limit=_int_env("MYTHGUARD_MAX_LIMIT", cls.max_limit),
            poll_interval=poll_interval,
            max_wait=max_wait,
            initial_delay=max(0.0, _float_env("MYTHGUARD_INITIAL_DELAY", cls.initial_delay)),
            debug=_bool_env("MYTHGUARD_DEBUG", cls.debug),
        )

    def credentials(self) -> tuple[str, str]:
        """Return (eth_address, password), falling back to the trial account."""
        if not self.eth_address and not self.password:
            return TRIAL_ETH_ADDRESS, TRIAL_PASSWORD
        if not self.eth_address:
            raise ConfigurationError("A password was supplied without an Ethereum address.")
        if not self.password:
            raise ConfigurationError("An Ethereum address was supplied without a password.")
        return self.eth_address, self.password


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_analysis_settings() -> AnalysisSettings:
    """Load analysis settings from environment with sensible defaults."""
    return AnalysisSettings.from_env()


def _check_default_limit(default: int, maximum: int) -> int:
    if isinstance(default, bool) or not isinstance(default, int) or not 1 <= default <= maximum:
        raise ConfigurationError(f"default limit should be between 1 and {maximum}; got {default}.")
    return default


def validate_limit(value: Any, maximum: int = MAX_ANALYZE_RATE_LIMIT, default: int = DEFAULT_ANALYZE_RATE_LIMIT) -> int:
    """
    Validate a concurrency ceiling and return it as an int.

    `None` and zero select `default`, which must itself lie in 1..`maximum`.
    Numeric strings are accepted, anything else that is not a finite number
    raises ConfigurationError naming the value.
    """
    if value is None:
        return _check_default_limit(default, maximum)
    if isinstance(value, bool):
        raise ConfigurationError(f"limit parameter should be a number; got {value}.")
    number: float
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            raise ConfigurationError(f"limit parameter should be a number; got {value}.") from None
    if not math.isfinite(number):
        raise ConfigurationError(f"limit parameter should be a number; got {value}.")
    if number < 0 or number > maximum:
        raise ConfigurationError(f"limit should be between 0 and {maximum}; got {value}.")
    limit = int(number)
    return limit if limit > 0 else _check_default_limit(default, maximum)


def severity_threshold(name: str | None = None) -> int:
    """Map a severity name to its numeric threshold; unknown names mean "warning"."""
    if not name:
        return DEFAULT_SEVERITY_LEVEL
    return SEVERITY_LEVELS.get(name.strip().lower(), DEFAULT_SEVERITY_LEVEL)


def swc_blacklist(text: str | None = None) -> list[str]:
    """Turn "103, 111" into ["SWC-103", "SWC-111"]."""
    if not text:
        return []
    return [f"SWC-{code}" for code in re.split(r"\s*,\s*", text.strip()) if code]


__all__ = [
    "AnalysisSettings",
    "DEFAULT_ANALYZE_RATE_LIMIT",
    "DEFAULT_USER_AGENT",
    "HttpSettings",
    "MAX_ANALYZE_RATE_LIMIT",
    "PRIVILEGED_ROLES",
    "TRIAL_ETH_ADDRESS",
    "TRIAL_PASSWORD",
    "load_analysis_settings",
    "load_http_settings",
    "severity_threshold",
    "swc_blacklist",
    "validate_limit",
]
