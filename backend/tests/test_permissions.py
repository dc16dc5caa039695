from types import SimpleNamespace

import pytest

from utils.errors import AccountSuspended, AuthError, PermissionDenied
from utils.permissions import (
    PERMISSION_TABLE,
    Action,
    authorize,
    build_permission_map,
    has_permission,
    has_role,
    is_authenticated,
    permissions_for,
)
from utils.tokenJWT import permission_required


def account(role="individual", status="active"):
    return SimpleNamespace(id=1, role=role, status=status)


@pytest.mark.parametrize("role, allowed", [
    ("individual", False),
    ("community", False),
    ("business", True),
    ("admin", True),
])
def test_list_waste_permission(role, allowed):
    assert has_permission(role, "list_waste") is allowed
    assert has_permission(role, Action.LIST_WASTE) is allowed


def test_business_and_community_include_individual_base():
    base = permissions_for("individual")
    assert base <= permissions_for("business")
    assert base <= permissions_for("community")
    assert "create_campaign" in permissions_for("community")
    assert "create_campaign" not in permissions_for("business")


def test_admin_wildcard_expands_to_every_action():
    assert permissions_for("admin") == {a.value for a in Action}


def test_unknown_action_and_role_are_denied():
    assert has_permission("admin", "launch_rockets") is False
    assert has_permission("individual", "launch_rockets") is False
    assert has_permission("superuser", "book_ride") is False
    assert permissions_for("superuser") == frozenset()


def test_table_with_misspelled_action_fails_fast():
    table = dict(PERMISSION_TABLE)
    table["business"] = table["business"] + ("list_wast",)
    with pytest.raises(ValueError, match="list_wast"):
        build_permission_map(table)


def test_table_missing_a_role_fails_fast():
    table = dict(PERMISSION_TABLE)
    del table["community"]
    with pytest.raises(ValueError, match="community"):
        build_permission_map(table)


def test_permission_required_rejects_unknown_action_at_declaration():
    with pytest.raises(ValueError):
        permission_required("list_wast")


def test_is_authenticated_and_has_role():
    assert is_authenticated(account()) is True
    assert is_authenticated(account(status="suspended")) is False
    assert is_authenticated(None) is False

    assert has_role(account("business"), "business", "admin") is True
    assert has_role(account("individual"), "business", "admin") is False
    assert has_role(None, "admin") is False


def test_authorize_raises_matching_errors():
    with pytest.raises(AuthError):
        authorize(None)

    with pytest.raises(AccountSuspended):
        authorize(account("admin", status="suspended"), roles=("admin",))

    with pytest.raises(PermissionDenied):
        authorize(account("individual"), roles=("admin",))

    with pytest.raises(PermissionDenied):
        authorize(account("individual"), action=Action.LIST_WASTE)

    acct = account("business")
    assert authorize(acct, action=Action.LIST_WASTE) is acct
