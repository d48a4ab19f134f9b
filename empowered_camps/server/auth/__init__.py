"""Authentication (Cognito JWT) and role-based authorization."""

from .dependencies import (
    AdminUser,
    CurrentUser,
    HQAdminUser,
    OptionalUser,
    decode_token,
    ensure_tenant_access,
    get_current_user,
    get_optional_user,
    require_roles,
    scoped_tenant_id,
)
from .models import AuthUser

__all__ = [
    "AdminUser",
    "AuthUser",
    "CurrentUser",
    "HQAdminUser",
    "OptionalUser",
    "decode_token",
    "ensure_tenant_access",
    "get_current_user",
    "get_optional_user",
    "require_roles",
    "scoped_tenant_id",
]
