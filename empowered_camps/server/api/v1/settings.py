"""
Platform Settings Endpoints.

HQ administration of global settings and per-licensee overrides. Every write
is recorded in the settings audit log.
"""

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Query

from empowered_camps.core.errors import BadRequestError
from empowered_camps.core.models.io.settings import SettingsUpdateRequest, SettingsUpdateResult
from empowered_camps.server.auth import HQAdminUser
from empowered_camps.server.services.deps import SettingsDep
from empowered_camps.server.services.platform_settings import categories_description, schema_description

router = APIRouter()


@router.get(
    "",
    summary="Get Settings",
    description=(
        "``global`` returns stored global rows, ``tenant`` the overrides of ``tenant_id`` and "
        "``effective`` every key resolved from default, global and tenant values. The schema, "
        "category names and recent audit entries can be included."
    ),
    response_description="Settings for the requested scope.",
    responses={400: {"description": "tenant_id missing for tenant scope"}, 404: {"description": "Licensee not found"}},
)
async def get_settings(
    user: HQAdminUser,
    service: SettingsDep,
    scope: Literal["global", "tenant", "effective"] = "global",
    tenant_id: Optional[str] = None,
    include_schema: bool = False,
    include_categories: bool = False,
    include_audit: bool = False,
    audit_limit: int = Query(default=50, ge=1, le=500),
) -> Dict[str, Any]:
    """Read settings at one scope, optionally with schema, categories and audit log."""
    if scope == "tenant":
        if not tenant_id:
            raise BadRequestError("tenant_id is required for tenant scope")
        body: Dict[str, Any] = {"scope": scope, "settings": await service.tenant_settings(tenant_id)}
    elif scope == "effective":
        body = {"scope": scope, "settings": await service.effective_settings(tenant_id)}
    else:
        body = {"scope": scope, "settings": await service.global_settings()}

    if include_schema:
        body["schema"] = schema_description()
    if include_categories:
        body["categories"] = categories_description()
    if include_audit:
        body["audit_log"] = await service.audit_log(tenant_id, limit=audit_limit)
    return body


@router.put(
    "",
    response_model=SettingsUpdateResult,
    summary="Update Settings",
    description=(
        "Upsert settings globally, or as overrides of ``tenant_id``. Unknown keys, invalid values "
        "and keys licensees cannot override are skipped."
    ),
    response_description="Number of settings written and the skipped keys.",
    responses={404: {"description": "Licensee not found"}},
)
async def update_settings(
    request: SettingsUpdateRequest, user: HQAdminUser, service: SettingsDep
) -> SettingsUpdateResult:
    return await service.update(request.updates, request.tenant_id, user.id, request.source)


@router.delete(
    "/tenant/{tenant_id}/{key}",
    summary="Reset Tenant Override",
    description="Remove a licensee's override so the global value applies again.",
    response_description="Whether an override existed.",
)
async def reset_tenant_setting(tenant_id: str, key: str, user: HQAdminUser, service: SettingsDep) -> Dict[str, bool]:
    return {"reset": await service.reset_tenant_setting(tenant_id, key, user.id)}
