"""
Role-based authorization.

Roles are flat: admin is not a superset of owner or driver. An endpoint that
admits admins lists the admin role explicitly.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)


class Role(str, Enum):
    DRIVER = "driver"
    OWNER = "owner"
    ADMIN = "admin"


class _AnyAuthenticated:
    def __repr__(self):
        return "ANY_AUTHENTICATED"


# Requirement that admits every resolved principal regardless of role
ANY_AUTHENTICATED = _AnyAuthenticated()

SELF_SERVICE_ROLES = frozenset({Role.DRIVER, Role.OWNER})

Requirement = Union[Role, Iterable[Role], _AnyAuthenticated]


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    reason: Optional[str] = None  # "unauthenticated" | "forbidden"

    @property
    def status_code(self) -> int:
        if self.allowed:
            return 200
        return 401 if self.reason == "unauthenticated" else 403


ALLOW = AuthDecision(True)
DENY_UNAUTHENTICATED = AuthDecision(False, "unauthenticated")
DENY_FORBIDDEN = AuthDecision(False, "forbidden")


def parse_role(value) -> Optional[Role]:
    """Map a stored role string to a Role. Unknown values map to None."""
    try:
        return Role(value)
    except ValueError:
        return None


def authorize(principal, required: Requirement) -> AuthDecision:
    """
    Decide whether principal satisfies required.

    Args:
        principal: Resolved user, or None for an anonymous caller
        required: A Role, a collection of Roles, or ANY_AUTHENTICATED

    Returns:
        ALLOW, DENY_UNAUTHENTICATED (no principal) or DENY_FORBIDDEN (wrong role)
    """
    if principal is None:
        return DENY_UNAUTHENTICATED

    if required is ANY_AUTHENTICATED:
        return ALLOW

    allowed_roles = {required} if isinstance(required, Role) else set(required)
    role = parse_role(principal.role)
    if role is not None and role in allowed_roles:
        return ALLOW

    logger.warning(
        f"Role check denied: user_id={principal.id}, role={principal.role}, "
        f"required={sorted(r.value for r in allowed_roles)}"
    )
    return DENY_FORBIDDEN
