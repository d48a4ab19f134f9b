"""
Email Template Endpoints.

Licensee owners and directors customise the templates of their own tenant;
HQ admins also edit the global templates every tenant falls back to.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter

from empowered_camps.core.models.domain.enums import EmailType
from empowered_camps.core.models.io.settings import EmailTemplatePreviewRequest, EmailTemplateUpsert
from empowered_camps.server.auth import AdminUser, scoped_tenant_id
from empowered_camps.server.services.deps import EmailTemplateDep
from empowered_camps.server.services.email_templates import describe_template

router = APIRouter()


@router.get(
    "",
    summary="List Email Templates",
    description=(
        "Every email type with the template that applies: the tenant's own, else the global one, "
        "else the built-in default."
    ),
    response_description="One entry per email type.",
)
async def list_templates(
    user: AdminUser, service: EmailTemplateDep, tenant_id: Optional[str] = None
) -> Dict[str, List[Dict[str, Any]]]:
    return {"templates": await service.list_templates(scoped_tenant_id(user, tenant_id))}


@router.put(
    "",
    summary="Save Email Template",
    description="Create or replace a stored template. Without ``tenant_id`` (HQ only) the global template is saved.",
    responses={400: {"description": "Missing required fields"}, 404: {"description": "Licensee not found"}},
)
async def upsert_template(
    payload: EmailTemplateUpsert, user: AdminUser, service: EmailTemplateDep
) -> Dict[str, Any]:
    payload.tenant_id = scoped_tenant_id(user, payload.tenant_id)
    template = await service.upsert(payload, user.id)
    return {"template": describe_template(template.email_type, template, {})}


@router.delete(
    "/{email_type}",
    summary="Reset Email Template",
    description="Delete the stored template so the next level (global or default) applies again.",
    response_description="Whether a stored template was removed.",
)
async def reset_template(
    email_type: EmailType, user: AdminUser, service: EmailTemplateDep, tenant_id: Optional[str] = None
) -> Dict[str, bool]:
    return {"reset": await service.reset(email_type, scoped_tenant_id(user, tenant_id))}


@router.post(
    "/preview",
    summary="Preview Email Template",
    description="Render the applicable template with sample variables; unknown placeholders are left as written.",
)
async def preview_template(
    request: EmailTemplatePreviewRequest, user: AdminUser, service: EmailTemplateDep
) -> Dict[str, str]:
    return await service.preview(request.email_type, request.variables, scoped_tenant_id(user, request.tenant_id))
