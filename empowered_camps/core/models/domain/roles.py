"""Role grouping helpers."""

from __future__ import annotations

from typing import Iterable, Union

from .enums import UserRole

ADMIN_ROLES = (UserRole.hq_admin, UserRole.licensee_owner, UserRole.director)


def role_in(role: Union[UserRole, str], allowed: Iterable[Union[UserRole, str]]) -> bool:
    values = {UserRole(r).value for r in allowed}
    try:
        return UserRole(role).value in values
    except ValueError:
        return False
