"""
Royalty Administration Endpoints.

HQ-only management of licensee royalty invoices. Both endpoints dispatch on
an ``action``: a query parameter for reads and a body field for writes.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Query

from empowered_camps.core.errors import BadRequestError
from empowered_camps.core.models.domain.enums import RoyaltyInvoiceStatus
from empowered_camps.core.models.io.royalties import RoyaltyActionRequest
from empowered_camps.server.auth import HQAdminUser
from empowered_camps.server.services.deps import RoyaltyDep

router = APIRouter()

ReadAction = Literal["list", "summary", "licensees", "camps-without-invoices", "detail"]
SortField = Literal["due_date", "generated_at", "gross_revenue", "royalty_amount", "status"]


@router.get(
    "",
    summary="Query Royalty Invoices",
    description=(
        "``list`` pages through invoices with filters and sorting, ``summary`` returns totals, "
        "``licensees`` per-licensee totals, ``camps-without-invoices`` completed camps still to "
        "invoice, and ``detail`` one invoice with its line items."
    ),
    response_description="Result of the requested action.",
    responses={400: {"description": "Missing invoice_id for detail"}, 404: {"description": "Invoice not found"}},
)
async def query_royalties(
    user: HQAdminUser,
    service: RoyaltyDep,
    action: ReadAction = "list",
    status: Optional[RoyaltyInvoiceStatus] = None,
    tenant_id: Optional[str] = None,
    due_from: Optional[datetime] = Query(default=None, alias="from"),
    due_to: Optional[datetime] = Query(default=None, alias="to"),
    search: Optional[str] = None,
    sort_by: SortField = "due_date",
    sort_order: Literal["asc", "desc"] = "desc",
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    invoice_id: Optional[str] = None,
) -> Dict[str, Any]:
    if action == "summary":
        return {"summary": await service.summary(tenant_id)}
    if action == "licensees":
        return {"licensees": await service.licensee_summary()}
    if action == "camps-without-invoices":
        return {"camps": await service.camps_without_invoices()}
    if action == "detail":
        if not invoice_id:
            raise BadRequestError("invoice_id is required")
        return {"invoice": (await service.get_invoice(invoice_id)).model_dump(mode="json")}
    return await service.list_invoices(
        status, tenant_id, due_from, due_to, search, sort_by, sort_order, limit, offset
    )


@router.post(
    "",
    summary="Royalty Invoice Action",
    description=(
        "``generate`` builds the invoice of one camp, ``bulk-generate`` of several, "
        "``update-status`` moves an invoice through its lifecycle, ``adjust`` adds a signed amount "
        "to an open invoice and ``mark-overdue`` flags invoiced invoices past their due date."
    ),
    response_description="Result of the action under ``data``.",
    responses={
        400: {"description": "Missing fields, invalid transition or invoice already settled"},
        404: {"description": "Camp or invoice not found"},
    },
)
async def royalty_action(request: RoyaltyActionRequest, user: HQAdminUser, service: RoyaltyDep) -> Dict[str, Any]:
    if request.action == "generate":
        if not request.camp_id:
            raise BadRequestError("camp_id is required")
        invoice = await service.generate_invoice_for_camp(request.camp_id, request.due_in_days, user.id)
        return {"data": (await service.get_invoice(invoice.id)).model_dump(mode="json")}

    if request.action == "bulk-generate":
        if not request.camp_ids:
            raise BadRequestError("camp_ids array is required")
        return {"data": await service.bulk_generate(request.camp_ids, request.due_in_days, user.id)}

    if request.action == "update-status":
        if not request.invoice_id or request.status is None:
            raise BadRequestError("invoice_id and status are required")
        invoice = await service.update_status(
            request.invoice_id,
            request.status,
            user_id=user.id,
            notes=request.notes,
            paid_amount_cents=request.paid_amount_cents,
            payment_method=request.payment_method,
            payment_reference=request.payment_reference,
        )
        return {"data": (await service.get_invoice(invoice.id)).model_dump(mode="json")}

    if request.action == "adjust":
        if not request.invoice_id or request.adjustment_cents is None or not request.notes:
            raise BadRequestError("invoice_id, adjustment_cents and notes are required")
        invoice = await service.add_adjustment(request.invoice_id, request.adjustment_cents, request.notes, user.id)
        return {"data": (await service.get_invoice(invoice.id)).model_dump(mode="json")}

    return {"data": {"count": await service.mark_overdue()}}
