from __future__ import annotations

import json


ROLE_PERMISSIONS: dict[str, list[str]] = {
    "admin": [
        "products:view",
        "products:write",
        "locations:view",
        "locations:write",
        "stocks:view",
        "stocks:write",
        "transactions:view",
        "transactions:write",
    ],
    "staff": [
        "products:view",
        "products:write",
        "locations:view",
        "stocks:view",
        "stocks:write",
        "transactions:view",
        "transactions:write",
    ],
}


def serialize_permissions(role_name: str) -> str:
    permissions = ROLE_PERMISSIONS.get(role_name, [])
    return json.dumps(permissions)


def parse_permissions(permissions_raw: str) -> list[str]:
    try:
        permissions = json.loads(permissions_raw)
    except json.JSONDecodeError:
        return []
    return permissions if isinstance(permissions, list) else []


def has_permission(permissions_raw: str, permission: str) -> bool:
    return permission in parse_permissions(permissions_raw)
