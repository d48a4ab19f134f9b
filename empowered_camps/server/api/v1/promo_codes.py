"""
Promo Code Endpoints.

Licensee owners and directors manage the codes of their own tenant; HQ admins
may manage any tenant's codes.
"""

from typing import Optional

from fastapi import APIRouter, Query

from empowered_camps.core.models.io.promo_codes import (
    PromoCodeCreate,
    PromoCodeDeleteResult,
    PromoCodeList,
    PromoCodeRead,
    PromoCodeUpdate,
)
from empowered_camps.server.auth import AdminUser, scoped_tenant_id
from empowered_camps.server.services.deps import PromoCodeDep

router = APIRouter()


@router.get(
    "",
    response_model=PromoCodeList,
    summary="List Promo Codes",
    description="Promo codes newest first, each with the number of registrations that used it.",
)
async def list_promo_codes(
    user: AdminUser,
    service: PromoCodeDep,
    tenant_id: Optional[str] = None,
    active_only: bool = False,
) -> PromoCodeList:
    return PromoCodeList(promo_codes=await service.list(scoped_tenant_id(user, tenant_id), active_only))


@router.post(
    "",
    response_model=PromoCodeRead,
    status_code=201,
    summary="Create Promo Code",
    description="Create a promo code. Codes are stored uppercased and are unique per tenant.",
    responses={400: {"description": "Missing fields or duplicate code"}},
)
async def create_promo_code(payload: PromoCodeCreate, user: AdminUser, service: PromoCodeDep) -> PromoCodeRead:
    payload.tenant_id = scoped_tenant_id(user, payload.tenant_id)
    return await service.create(payload)


@router.put(
    "",
    response_model=PromoCodeRead,
    summary="Update Promo Code",
    description="Partially update the promo code named by ``promo_code_id``.",
    responses={404: {"description": "Promo code not found"}},
)
async def update_promo_code(payload: PromoCodeUpdate, user: AdminUser, service: PromoCodeDep) -> PromoCodeRead:
    return await service.update(payload, scoped_tenant_id(user, None))


@router.delete(
    "",
    response_model=PromoCodeDeleteResult,
    summary="Delete Promo Code",
    description="Delete an unused promo code; a code that has been used is deactivated instead.",
    responses={404: {"description": "Promo code not found"}},
)
async def delete_promo_code(
    user: AdminUser,
    service: PromoCodeDep,
    promo_code_id: str = Query(..., description="Id of the promo code to delete"),
) -> PromoCodeDeleteResult:
    return await service.delete(promo_code_id, scoped_tenant_id(user, None))
