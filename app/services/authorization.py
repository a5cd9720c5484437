"""Role-based access decisions over verified token claims."""

import logging
from enum import Enum

from app.schemas.auth import Role, TokenClaims

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class Policy(Enum):
    """Named access policies. Value is the set of roles that satisfy the policy."""

    ADMIN_ONLY = frozenset({Role.ADMIN})
    USER_OR_ADMIN = frozenset({Role.USER, Role.ADMIN})

    @property
    def roles(self) -> frozenset[Role]:
        return self.value


# Roles that may act on resources owned by other accounts.
OWNERSHIP_OVERRIDE_ROLES = frozenset({Role.ADMIN})

POLICY_NAMES = {
    "AdminOnly": Policy.ADMIN_ONLY,
    "UserOrAdmin": Policy.USER_OR_ADMIN,
}


def get_policy(name: str) -> Policy:
    """Look up a policy by its public name (e.g. "AdminOnly"). Raises KeyError for unknown names."""
    return POLICY_NAMES[name]


def authorize(
    claims: TokenClaims,
    policy: Policy,
    resource_owner_id: int | None = None,
) -> Decision:
    """
    Decide whether the token holder may perform an operation guarded by policy.

    The role claim must satisfy the policy. When resource_owner_id is given the
    caller must also own the resource, unless their role overrides ownership.
    """
    if claims.role not in policy.roles:
        logger.warning(
            "Access denied: user %s with role %s does not satisfy %s",
            claims.sub,
            claims.role.value,
            policy.name,
        )
        return Decision.DENY

    if resource_owner_id is not None:
        if claims.sub != resource_owner_id and claims.role not in OWNERSHIP_OVERRIDE_ROLES:
            logger.warning(
                "Unauthorized access attempt by user %s to resource owned by %s",
                claims.sub,
                resource_owner_id,
            )
            return Decision.DENY

    return Decision.ALLOW
