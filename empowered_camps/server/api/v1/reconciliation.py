"""
Stripe Reconciliation Endpoints.

HQ tooling that compares completed Stripe checkout sessions with the stored
registration totals and repairs drift.
"""

from typing import Any, Dict

from fastapi import APIRouter

from empowered_camps.server.auth import HQAdminUser
from empowered_camps.server.services.deps import ReconciliationDep

router = APIRouter()


@router.get(
    "",
    summary="Reconciliation Report",
    description=(
        "Compare every registration checkout in Stripe with the database. A charge is a "
        "discrepancy when the totals differ by more than one cent."
    ),
    response_description="Summary figures and per-charge comparison.",
    responses={400: {"description": "Stripe is not configured"}},
)
async def reconciliation_report(user: HQAdminUser, service: ReconciliationDep) -> Dict[str, Any]:
    return await service.report()


@router.post(
    "",
    summary="Fix Registrations",
    description=(
        "Backfill missing Stripe ids, correct add-on totals from the add-on rows and "
        "recompute registration totals."
    ),
    response_description="Number of registrations changed and the changes made.",
    responses={400: {"description": "Stripe is not configured"}},
)
async def reconciliation_fix(user: HQAdminUser, service: ReconciliationDep) -> Dict[str, Any]:
    return await service.fix()
