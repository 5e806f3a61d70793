from types import MappingProxyType
from typing import Literal

from models.user import UserRole

Permission = Literal[
    "read:posts",
    "write:posts",
    "delete:posts",
    "read:users",
    "write:users",
    "delete:users",
    "read:comments",
    "write:comments",
    "delete:comments",
    "moderate:comments",
    "read:goals",
    "write:goals",
    "delete:goals",
    "read:donations",
    "write:donations",
    "read:analytics",
    "admin:settings",
]

# Each role is enumerated in full; roles do not inherit from one another.
PERMISSIONS = MappingProxyType(
    {
        UserRole.ADMIN: frozenset(
            {
                "read:posts",
                "write:posts",
                "delete:posts",
                "read:users",
                "write:users",
                "delete:users",
                "read:comments",
                "write:comments",
                "delete:comments",
                "moderate:comments",
                "read:goals",
                "write:goals",
                "delete:goals",
                "read:donations",
                "write:donations",
                "read:analytics",
                "admin:settings",
            }
        ),
        UserRole.DEVELOPER: frozenset(
            {
                "read:posts",
                "write:posts",
                "delete:posts",
                "read:users",
                "read:comments",
                "write:comments",
                "moderate:comments",
                "read:goals",
                "write:goals",
                "read:donations",
                "read:analytics",
            }
        ),
        UserRole.SUBSCRIBER: frozenset(
            {
                "read:posts",
                "write:comments",
                "read:goals",
                "write:donations",
            }
        ),
    }
)


def has_permission(role: UserRole | str | None, permission: str) -> bool:
    if role is None:
        return False
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return permission in PERMISSIONS[role]
