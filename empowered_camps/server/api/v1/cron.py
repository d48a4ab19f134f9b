"""
Scheduled Job Endpoints.

Called by an external scheduler with ``Authorization: Bearer <CRON_SECRET>``.
"""

import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Header

from empowered_camps.core.database.base import utc_now
from empowered_camps.core.errors import UnauthorizedError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.server.core.config import settings
from empowered_camps.server.services.deps import RoyaltyDep, WaitlistDep

logger = get_logger(__name__)

router = APIRouter()


def verify_cron_secret(authorization: Optional[str]) -> None:
    """401 unless the header carries the configured secret; without a secret every call is refused."""
    if not settings.cron_secret:
        logger.warning("CRON_SECRET is not configured; refusing scheduled job call")
        raise UnauthorizedError()
    if not authorization or not secrets.compare_digest(authorization, f"Bearer {settings.cron_secret}"):
        raise UnauthorizedError()


@router.api_route(
    "/royalties",
    methods=["GET", "POST"],
    summary="Run Royalty Automation",
    description=(
        "Generate invoices for completed camps without one, mark overdue invoices and count "
        "invoices due within the reminder window."
    ),
    response_description="Job results and the time the job ran.",
    responses={401: {"description": "Missing or wrong cron secret"}},
)
async def run_royalty_job(
    service: RoyaltyDep,
    authorization: Optional[str] = Header(default=None),
) -> Dict[str, Any]:
    verify_cron_secret(authorization)
    logger.info("Starting royalty automation job")
    results = await service.run_scheduled()
    return {"success": True, "results": results, "timestamp": utc_now().isoformat()}


@router.api_route(
    "/waitlist-offers",
    methods=["GET", "POST"],
    summary="Expire Waitlist Offers",
    description=(
        "Move waitlisted registrations whose spot offer ran out to the end of their line and offer "
        "the spot to the next athlete."
    ),
    response_description="Number of expired offers and of new offers sent.",
    responses={401: {"description": "Missing or wrong cron secret"}},
)
async def run_waitlist_job(
    service: WaitlistDep,
    authorization: Optional[str] = Header(default=None),
) -> Dict[str, Any]:
    verify_cron_secret(authorization)
    results = await service.expire_stale_offers()
    return {"success": True, "results": results, "timestamp": utc_now().isoformat()}
