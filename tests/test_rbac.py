from typing import get_args

import pytest

from core.rbac import PERMISSIONS, Permission, has_permission
from models.user import UserRole


@pytest.mark.parametrize(
    "role, permission, expected",
    [
        (UserRole.ADMIN, "admin:settings", True),
        (UserRole.ADMIN, "delete:users", True),
        (UserRole.ADMIN, "moderate:comments", True),
        (UserRole.DEVELOPER, "write:posts", True),
        (UserRole.DEVELOPER, "delete:posts", True),
        (UserRole.DEVELOPER, "read:analytics", True),
        (UserRole.DEVELOPER, "delete:users", False),
        (UserRole.DEVELOPER, "write:users", False),
        (UserRole.DEVELOPER, "admin:settings", False),
        (UserRole.DEVELOPER, "delete:goals", False),
        (UserRole.SUBSCRIBER, "read:posts", True),
        (UserRole.SUBSCRIBER, "write:comments", True),
        (UserRole.SUBSCRIBER, "write:donations", True),
        (UserRole.SUBSCRIBER, "write:posts", False),
        (UserRole.SUBSCRIBER, "read:users", False),
        (UserRole.SUBSCRIBER, "admin:settings", False),
    ],
)
def test_permission_matrix(role, permission, expected):
    assert has_permission(role, permission) is expected


def test_subscriber_permissions_are_exact():
    assert PERMISSIONS[UserRole.SUBSCRIBER] == {
        "read:posts",
        "write:comments",
        "read:goals",
        "write:donations",
    }


def test_admin_holds_every_developer_permission():
    assert PERMISSIONS[UserRole.DEVELOPER] <= PERMISSIONS[UserRole.ADMIN]


def test_roles_given_as_strings():
    assert has_permission("ADMIN", "admin:settings") is True
    assert has_permission("SUBSCRIBER", "admin:settings") is False


def test_unknown_role_or_permission():
    assert has_permission(None, "read:posts") is False
    assert has_permission("OWNER", "read:posts") is False
    assert has_permission(UserRole.ADMIN, "launch:rockets") is False


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PERMISSIONS[UserRole.SUBSCRIBER] = frozenset({"admin:settings"})


def test_admin_holds_every_permission():
    """Admin routes may add permission checks on top of the role gate."""
    assert PERMISSIONS[UserRole.ADMIN] == set(get_args(Permission))
