"""
The role hierarchy and the permission checks derived from it.

``ROLE_HIERARCHY`` is the one ordered list of roles, most privileged first.
``DOWNSTREAM_ROLES`` is computed from it once. Every gated operation (profile
edit, status change, transfer) asks these functions instead of keeping its own
copy of the ordering.
"""

from enum import Enum as PyEnum

from rolewallet.exceptions.http import UnknownRoleError


class Role(str, PyEnum):
    MOTHER_ADMIN = "Mother Admin"
    SUB_ADMIN = "Sub Admin"
    MASTER = "Master"
    AGENT = "Agent"
    SUB_AGENT = "Sub Agent"
    USER = "User"


ROLE_HIERARCHY: tuple[Role, ...] = (
    Role.MOTHER_ADMIN,
    Role.SUB_ADMIN,
    Role.MASTER,
    Role.AGENT,
    Role.SUB_AGENT,
    Role.USER,
)

_RANKS: dict[Role, int] = {role: index for index, role in enumerate(ROLE_HIERARCHY)}

DOWNSTREAM_ROLES: dict[Role, frozenset[Role]] = {
    role: frozenset(ROLE_HIERARCHY[index + 1 :]) for role, index in _RANKS.items()
}


def parse_role(role: str | Role) -> Role:
    """Coerces a stored role string into ``Role``; raises ``UnknownRoleError``."""
    try:
        return Role(role)
    except ValueError:
        raise UnknownRoleError(role) from None


def rank(role: str | Role) -> int:
    """Position of ``role`` in the hierarchy; 0 is Mother Admin."""
    return _RANKS[parse_role(role)]


def downstream(role: str | Role) -> frozenset[Role]:
    """Roles strictly below ``role``."""
    return DOWNSTREAM_ROLES[parse_role(role)]


def is_mother_admin(role: str | Role) -> bool:
    return parse_role(role) is Role.MOTHER_ADMIN


def can_modify(editor_role: str | Role, target_role: str | Role) -> bool:
    """True iff the editor is strictly senior to the target."""
    return rank(editor_role) < rank(target_role)


def can_transfer_to(actor_role: str | Role, target_role: str | Role) -> bool:
    """
    True iff the actor may send funds to an account holding ``target_role``.

    Mother Admin is an explicit override and may send to any defined role,
    including other Mother Admins. Everyone else may only send downstream.
    """
    actor = parse_role(actor_role)
    target = parse_role(target_role)
    if actor is Role.MOTHER_ADMIN:
        return True
    return target in DOWNSTREAM_ROLES[actor]
