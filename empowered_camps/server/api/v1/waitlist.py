"""
Camp Waitlist Endpoints.

Parents join the waitlist of a full camp and answer spot offers through the
token they receive. Admins review a camp's line, remove entries and offer a
spot to a specific athlete.
"""

from fastapi import APIRouter

from empowered_camps.core.models.io.waitlist import (
    WaitlistEntriesResponse,
    WaitlistJoinRequest,
    WaitlistJoinResponse,
    WaitlistJoinResult,
    WaitlistOfferAccepted,
    WaitlistOfferResponse,
    WaitlistPosition,
)
from empowered_camps.server.auth import AdminUser, CurrentUser, OptionalUser, scoped_tenant_id
from empowered_camps.server.services.deps import CheckoutDep, WaitlistDep

router = APIRouter()


@router.post(
    "/join",
    response_model=WaitlistJoinResponse,
    summary="Join Camp Waitlist",
    description=(
        "Put campers on the waitlist of a full camp. Authentication is optional; guests are matched "
        "to a parent profile by email."
    ),
    response_description="Waitlisted registration ids and the first camper's place in line.",
    responses={
        400: {"description": "Missing fields, camp has room, or camper already listed"},
        403: {"description": "Waitlist turned off for the camp"},
        404: {"description": "Camp not found"},
    },
)
async def join_waitlist(request: WaitlistJoinRequest, user: OptionalUser, service: CheckoutDep) -> WaitlistJoinResponse:
    result = await service.join_waitlist(request, user)
    return WaitlistJoinResponse(data=WaitlistJoinResult(**result))


@router.get(
    "/position",
    response_model=WaitlistPosition,
    summary="Get Waitlist Position",
    description="Place of the caller's first waitlisted athlete in the camp's line.",
    responses={404: {"description": "Not on the waitlist"}},
)
async def get_position(camp_id: str, user: CurrentUser, service: WaitlistDep) -> WaitlistPosition:
    return await service.position(camp_id, user.id)


@router.post(
    "/offers/{token}/accept",
    response_model=WaitlistOfferAccepted,
    summary="Accept Waitlist Offer",
    description="Start payment for the offered spot. The offer token authorizes the call.",
    responses={
        400: {"description": "Offer expired or spot taken"},
        404: {"description": "Unknown offer token"},
    },
)
async def accept_offer(token: str, service: CheckoutDep) -> WaitlistOfferAccepted:
    return WaitlistOfferAccepted(**await service.accept_waitlist_offer(token))


@router.post(
    "/offers/{token}/decline",
    status_code=204,
    summary="Decline Waitlist Offer",
    description="Give up the offered spot; the next athlete in line receives an offer.",
    responses={404: {"description": "Unknown offer token"}},
)
async def decline_offer(token: str, service: WaitlistDep) -> None:
    await service.decline_offer(token)


@router.get(
    "/camps/{camp_id}",
    response_model=WaitlistEntriesResponse,
    summary="List Camp Waitlist",
    description="Waitlisted registrations of a camp in line order with their offer status.",
    responses={404: {"description": "Camp not found"}},
)
async def list_waitlist(camp_id: str, user: AdminUser, service: WaitlistDep) -> WaitlistEntriesResponse:
    entries = await service.list_for_camp(camp_id, scoped_tenant_id(user, None))
    return WaitlistEntriesResponse(data=entries, total=len(entries))


@router.delete(
    "/camps/{camp_id}/{registration_id}",
    status_code=204,
    summary="Remove From Waitlist",
    description="Cancel a waitlisted registration and close the gap in the line.",
    responses={404: {"description": "Registration not waitlisted for the camp"}},
)
async def remove_from_waitlist(camp_id: str, registration_id: str, user: AdminUser, service: WaitlistDep) -> None:
    await service.remove(camp_id, registration_id, scoped_tenant_id(user, None))


@router.post(
    "/camps/{camp_id}/{registration_id}/offer",
    response_model=WaitlistOfferResponse,
    summary="Send Waitlist Offer",
    description="Offer a spot to a waitlisted registration regardless of its place in line.",
    responses={404: {"description": "Registration not waitlisted for the camp"}},
)
async def send_offer(
    camp_id: str, registration_id: str, user: AdminUser, service: WaitlistDep
) -> WaitlistOfferResponse:
    registration = await service.send_offer(camp_id, registration_id, scoped_tenant_id(user, None))
    return WaitlistOfferResponse(
        registration_id=registration.id, offer_expires_at=registration.waitlist_offer_expires_at
    )
