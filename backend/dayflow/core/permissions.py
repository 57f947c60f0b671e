"""Role permissions.

``FIELD_PERMISSIONS`` lists, per role, the dotted field paths that role may
write. A trailing ``.*`` grants every field below that prefix.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, List, Mapping

from dayflow.core.errors import PermissionDeniedError

ELEVATED_ROLES = ("hr", "admin")
ADMIN_ROLES = ("admin",)

_STAFF_FIELDS = frozenset(
    {
        "personal_details.*",
        "job_details.*",
        "status",
        "salary_info.*",
    }
)

FIELD_PERMISSIONS: Dict[str, FrozenSet[str]] = {
    "employee": frozenset({"personal_details.phone", "personal_details.address"}),
    "hr": _STAFF_FIELDS,
    "admin": _STAFF_FIELDS,
}


def field_allowed(role: str, path: str) -> bool:
    for granted in FIELD_PERMISSIONS.get(role, frozenset()):
        if granted == path:
            return True
        if granted.endswith(".*") and path.startswith(granted[:-1]):
            return True
    return False


def authorize_fields(role: str, paths: Iterable[str]) -> None:
    denied = sorted({path for path in paths if not field_allowed(role, path)})
    if denied:
        raise PermissionDeniedError(f"Role '{role}' may not update: {', '.join(denied)}")


def field_paths(payload: Mapping[str, Any], prefix: str = "", depth: int = 2) -> List[str]:
    """Flatten a nested update payload into dotted paths, ``depth`` levels deep."""
    paths: List[str] = []
    for key, value in payload.items():
        path = f"{prefix}{key}"
        if isinstance(value, Mapping) and depth > 1:
            paths.extend(field_paths(value, prefix=f"{path}.", depth=depth - 1))
        else:
            paths.append(path)
    return paths
