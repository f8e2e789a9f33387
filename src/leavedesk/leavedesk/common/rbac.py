from __future__ import annotations

from ..core.enums import Role

_ADMIN_HR = {Role.ADMIN.value, Role.HR.value}
_ADMIN_MANAGER = {Role.ADMIN.value, Role.MANAGER.value}


def check_authorization(path: str, role: str) -> bool:
    """Return True when ``role`` may access ``path``.

    API and page paths are treated the same way: ``/api/admin/users`` is
    checked as ``/admin/users``.
    """

    role = (role or "").lower()
    path = path[len("/api"):] if path.startswith("/api") else path

    if path.startswith("/admin"):
        # Policies, reports, the department list and the attendance register are shared with HR.
        if path.startswith(("/admin/policies", "/admin/reports", "/admin/departments", "/admin/attendance")):
            return role in _ADMIN_HR
        return role == Role.ADMIN.value

    if path.startswith("/hr"):
        return role in _ADMIN_HR

    if path.startswith("/manager"):
        return role in _ADMIN_MANAGER

    return True
