"""
HQ Analytics Endpoints.

System-wide revenue, royalty and enrollment figures. Every endpoint takes an
optional ``from``/``to`` range that defaults to the last 90 days.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Query

from empowered_camps.server.auth import HQAdminUser
from empowered_camps.server.services.analytics import Granularity
from empowered_camps.server.services.deps import AnalyticsDep

router = APIRouter()

FromParam = Annotated[Optional[datetime], Query(alias="from", description="Start of the range (inclusive)")]
ToParam = Annotated[Optional[datetime], Query(alias="to", description="End of the range (inclusive)")]


@router.get(
    "/overview",
    summary="Analytics Overview",
    description="Headline revenue, royalty, enrollment and licensee figures for the range.",
    response_description="Overview metrics; amounts in dollars.",
    responses={400: {"description": "'from' is after 'to'"}},
)
async def overview(
    user: HQAdminUser,
    service: AnalyticsDep,
    start: FromParam = None,
    end: ToParam = None,
) -> Dict[str, Any]:
    return await service.overview(start, end)


@router.get(
    "/licensees",
    summary="Licensee Breakdown",
    description="Per active licensee revenue, enrollment and royalty compliance, highest revenue first.",
    responses={400: {"description": "'from' is after 'to'"}},
)
async def licensee_breakdown(
    user: HQAdminUser,
    service: AnalyticsDep,
    start: FromParam = None,
    end: ToParam = None,
) -> Dict[str, Any]:
    return {"licensees": await service.licensee_breakdown(start, end)}


@router.get(
    "/revenue-trends",
    summary="Revenue Trends",
    description="Gross revenue, campers and royalty income bucketed by day, week (starting Sunday) or month.",
    responses={400: {"description": "Invalid range or granularity"}},
)
async def revenue_trends(
    user: HQAdminUser,
    service: AnalyticsDep,
    start: FromParam = None,
    end: ToParam = None,
    granularity: Granularity = "month",
) -> Dict[str, Any]:
    return {"granularity": granularity, "points": await service.revenue_trends(start, end, granularity)}
