# backend/utils/permissions.py
"""
Role-based authorization decisions.

The role -> action table is plain data, checked against the ``Action`` enum
when this module is imported, so a misspelled action name stops the
application from starting instead of silently denying access.

Every function here is a pure decision over an already-resolved account.
``authorize`` turns a negative decision into the matching error; turning
that error into an HTTP response is left to the request boundary.
"""
import enum
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from models.users import AccountStatus, Role
from utils.errors import AccountSuspended, AuthError, PermissionDenied

WILDCARD = "*"


class Action(str, enum.Enum):
    # Base capabilities of every registered account
    BOOK_RIDE = "book_ride"
    DONATE = "donate"
    JOIN_EVENT = "join_event"
    USE_EXCHANGE = "use_exchange"
    FORUM_POST = "forum_post"
    VIEW_DASHBOARD = "view_dashboard"
    EDIT_PROFILE = "edit_profile"

    # Business capabilities
    LIST_WASTE = "list_waste"
    OFFER_ENERGY = "offer_energy"
    FLEET_MANAGEMENT = "fleet_management"
    B2B_MATCHING = "b2b_matching"
    BUSINESS_ANALYTICS = "business_analytics"

    # Community capabilities
    CREATE_CAMPAIGN = "create_campaign"
    ORGANIZE_EVENT = "organize_event"
    MANAGE_VOLUNTEERS = "manage_volunteers"
    COMMUNITY_ANALYTICS = "community_analytics"


_INDIVIDUAL_BASE = (
    "book_ride", "donate", "join_event", "use_exchange", "forum_post",
    "view_dashboard", "edit_profile",
)

PERMISSION_TABLE: Dict[str, tuple] = {
    Role.INDIVIDUAL.value: _INDIVIDUAL_BASE,
    Role.BUSINESS.value: _INDIVIDUAL_BASE + (
        "list_waste", "offer_energy", "fleet_management", "b2b_matching",
        "business_analytics",
    ),
    Role.COMMUNITY.value: _INDIVIDUAL_BASE + (
        "create_campaign", "organize_event", "manage_volunteers",
        "community_analytics",
    ),
    Role.ADMIN.value: (WILDCARD,),
}


def build_permission_map(table: Mapping[str, Iterable[str]]) -> Dict[str, FrozenSet[str]]:
    """Validate a role -> actions table and freeze it.

    Raises ``ValueError`` for an unknown role, an unknown action name, or a
    role of the ``Role`` enum missing from the table.
    """
    known_roles = {r.value for r in Role}
    known_actions = {a.value for a in Action}

    unknown_roles = set(table) - known_roles
    if unknown_roles:
        raise ValueError(f"Unknown roles in permission table: {sorted(unknown_roles)}")
    missing_roles = known_roles - set(table)
    if missing_roles:
        raise ValueError(f"Roles missing from permission table: {sorted(missing_roles)}")

    result = {}
    for role, actions in table.items():
        actions = frozenset(actions)
        unknown = actions - known_actions - {WILDCARD}
        if unknown:
            raise ValueError(f"Unknown actions for role '{role}': {sorted(unknown)}")
        result[role] = actions
    return result


ROLE_PERMISSIONS = build_permission_map(PERMISSION_TABLE)
_ACTION_VALUES = frozenset(a.value for a in Action)


def is_known_action(action) -> bool:
    value = action.value if isinstance(action, Action) else action
    return value in _ACTION_VALUES


def permissions_for(role: str) -> FrozenSet[str]:
    """Effective permission set of a role, wildcard expanded."""
    granted = ROLE_PERMISSIONS.get(role, frozenset())
    if WILDCARD in granted:
        return _ACTION_VALUES
    return granted


def has_permission(role: str, action) -> bool:
    # Unknown roles and unknown actions are denied
    value = action.value if isinstance(action, Action) else action
    if not is_known_action(value):
        return False
    granted = ROLE_PERMISSIONS.get(role, frozenset())
    return WILDCARD in granted or value in granted


def is_authenticated(account) -> bool:
    return account is not None and account.status != AccountStatus.SUSPENDED.value


def has_role(account, *roles) -> bool:
    if account is None:
        return False
    wanted = {r.value if isinstance(r, Role) else r for r in roles}
    return account.role in wanted


def authorize(account, *, roles: Iterable = (), action: Optional[Action] = None):
    """Raise the error matching the first failed check, or return the account."""
    if account is None:
        raise AuthError("Authentication required")
    if account.status == AccountStatus.SUSPENDED.value:
        raise AccountSuspended()

    roles = tuple(roles)
    if roles and not has_role(account, *roles):
        names = " or ".join(r.value if isinstance(r, Role) else r for r in roles)
        raise PermissionDenied(f"Access denied. Required role: {names}")

    if action is not None and not has_permission(account.role, action):
        value = action.value if isinstance(action, Action) else action
        raise PermissionDenied(f"Permission denied: {value}")

    return account
