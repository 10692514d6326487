# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Decide whether a caller may retrieve earlier results by job reference."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from ..config import PRIVILEGED_ROLES
from ..errors import AuthorizationError
from ..http.api import AnalysisClient

logger = logging.getLogger(__name__)


class Role(str, Enum):
    REGULAR = "regular"
    PRIVILEGED = "privileged"


def roles_from_user_info(user_info: Any) -> set[str]:
    """Collect role names from a `{"users": [{"roles": [...]}, ...]}` payload."""
    if not isinstance(user_info, dict):
        raise AuthorizationError("Account lookup returned no usable identity", payload=user_info)
    users = user_info.get("users")
    if not isinstance(users, list) or not users:
        raise AuthorizationError("Account lookup returned no users", payload=user_info)
    roles: set[str] = set()
    for user in users:
        if not isinstance(user, dict):
            continue
        user_roles = user.get("roles")
        if isinstance(user_roles, str):
            roles.add(user_roles)
        elif isinstance(user_roles, (list, tuple)):
            roles.update(str(role) for role in user_roles)
    return roles


class AccessPolicyGate:
    """Pre-flight role check; never interleaves with a running dispatch."""

    def __init__(self, client: AnalysisClient, privileged_roles: Iterable[str] = PRIVILEGED_ROLES):
        self.client = client
        self.privileged_roles = frozenset(privileged_roles)

    def authorize(self) -> Role:
        """Resolve the caller's Role; raises AuthorizationError when lookup fails."""
        try:
            user_info = self.client.get_user_info()
        except AuthorizationError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise AuthorizationError(f"Account lookup failed: {exc}") from exc
        roles = roles_from_user_info(user_info)
        return Role.PRIVILEGED if roles & self.privileged_roles else Role.REGULAR

    def may_retrieve_by_reference(self) -> bool:
        """True only when lookup succeeds and the caller is privileged."""
        try:
            role = self.authorize()
        except AuthorizationError as exc:
            logger.warning("Could not resolve account role (%s); running a fresh analysis instead.", exc)
            return False
        if role is not Role.PRIVILEGED:
            logger.warning("Retrieving results by reference requires a privileged account; running a fresh analysis instead.")
            return False
        return True


__all__ = ["AccessPolicyGate", "Role", "roles_from_user_info"]
