"""
Unit tests for waitlist positions and spot offers.
"""

from datetime import date, timedelta

import pytest
import pytest_asyncio

from empowered_camps.core.database.base import utc_now
from empowered_camps.core.database.entities import Athlete, Registration
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.models.domain.enums import PaymentStatus, RegistrationStatus
from empowered_camps.server.services.waitlist import OFFER_WINDOW, WaitlistService


@pytest_asyncio.fixture
async def athletes(session, parent):
    rows = [
        Athlete(parent_id=parent.id, first_name=name, last_name="Parent", date_of_birth=date(2015, 1, 1))
        for name in ("Ava", "Ben", "Cal", "Dee")
    ]
    session.add_all(rows)
    await session.commit()
    return rows


@pytest_asyncio.fixture
async def small_camp(session, camp):
    camp.capacity = 2
    session.add(camp)
    await session.commit()
    return camp


async def _add(session, camp, athlete, status=RegistrationStatus.waitlisted, **fields):
    values = {
        "tenant_id": camp.tenant_id,
        "camp_id": camp.id,
        "athlete_id": athlete.id,
        "parent_id": athlete.parent_id,
        "status": status,
        "payment_status": PaymentStatus.paid if status == RegistrationStatus.confirmed else PaymentStatus.pending,
        "base_price_cents": 30000,
        "total_price_cents": 30000,
    }
    values.update(fields)
    registration = Registration(**values)
    session.add(registration)
    await session.commit()
    return registration


def _offer_fields(hours_left):
    now = utc_now()
    return {
        "waitlist_offer_token": f"tok-{hours_left}",
        "waitlist_offer_sent_at": now - timedelta(hours=1),
        "waitlist_offer_expires_at": now + timedelta(hours=hours_left),
    }


@pytest.mark.asyncio
class TestPositions:
    async def test_enqueue_appends_to_line(self, session, camp, athletes):
        service = WaitlistService(session)
        await _add(session, camp, athletes[0], waitlist_position=4)

        registration = await service.enqueue(
            Registration(tenant_id=camp.tenant_id, camp_id=camp.id, athlete_id=athletes[1].id, parent_id="parent-1")
        )

        assert registration.status == RegistrationStatus.waitlisted
        assert registration.waitlist_position == 5
        assert registration.waitlist_joined_at is not None

    async def test_enqueue_rejects_listed_athlete(self, session, camp, athletes):
        service = WaitlistService(session)
        await _add(session, camp, athletes[0], waitlist_position=1)
        await _add(session, camp, athletes[1], RegistrationStatus.confirmed)

        with pytest.raises(BadRequestError, match="already on the waitlist"):
            await service.enqueue(
                Registration(tenant_id=camp.tenant_id, camp_id=camp.id, athlete_id=athletes[0].id, parent_id="parent-1")
            )
        with pytest.raises(BadRequestError, match="already registered"):
            await service.enqueue(
                Registration(tenant_id=camp.tenant_id, camp_id=camp.id, athlete_id=athletes[1].id, parent_id="parent-1")
            )

    async def test_reorder_closes_gaps_in_order(self, session, camp, athletes):
        rows = [
            await _add(session, camp, athlete, waitlist_position=position)
            for athlete, position in zip(athletes, (7, 2, 5))
        ]

        await WaitlistService(session).reorder(camp.id)

        assert [row.waitlist_position for row in rows] == [3, 1, 2]

    async def test_position_for_parent(self, session, camp, athletes):
        await _add(session, camp, athletes[0], waitlist_position=1, parent_id="someone-else")
        mine = await _add(session, camp, athletes[1], waitlist_position=2)

        position = await WaitlistService(session).position(camp.id, "parent-1")

        assert position.registration_id == mine.id
        assert position.position == 2
        assert position.total_waitlisted == 2

    async def test_position_when_not_listed(self, session, camp, parent):
        with pytest.raises(NotFoundError):
            await WaitlistService(session).position(camp.id, parent.id)


@pytest.mark.asyncio
class TestOffers:
    async def test_full_camp_sends_no_offer(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], RegistrationStatus.confirmed)
        await _add(session, small_camp, athletes[1], RegistrationStatus.pending)
        waiting = await _add(session, small_camp, athletes[2], waitlist_position=1)

        assert await WaitlistService(session).on_spot_opened(small_camp.id) is None
        assert waiting.waitlist_offer_token is None

    async def test_free_spot_goes_to_first_in_line(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], RegistrationStatus.confirmed)
        second = await _add(session, small_camp, athletes[1], waitlist_position=2)
        first = await _add(session, small_camp, athletes[2], waitlist_position=1)

        offered = await WaitlistService(session).on_spot_opened(small_camp.id)

        assert offered.id == first.id
        assert first.waitlist_offer_token
        expires_in = first.waitlist_offer_expires_at - first.waitlist_offer_sent_at
        assert expires_in == OFFER_WINDOW
        assert second.waitlist_offer_token is None

    async def test_open_offer_holds_its_spot(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], RegistrationStatus.confirmed)
        await _add(session, small_camp, athletes[1], waitlist_position=1, **_offer_fields(10))
        next_in_line = await _add(session, small_camp, athletes[2], waitlist_position=2)

        service = WaitlistService(session)

        assert await service.spots_taken(small_camp.id) == 2
        assert await service.on_spot_opened(small_camp.id) is None
        assert next_in_line.waitlist_offer_sent_at is None

    async def test_expired_offers_move_to_end_and_offer_onward(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], RegistrationStatus.confirmed)
        stale = await _add(session, small_camp, athletes[1], waitlist_position=1, **_offer_fields(-1))
        waiting = await _add(session, small_camp, athletes[2], waitlist_position=2)

        result = await WaitlistService(session).expire_stale_offers()

        assert result == {"expired": 1, "new_offers": 1}
        assert stale.waitlist_position == 2
        assert stale.waitlist_offer_token is None
        assert stale.waitlist_offer_sent_at is None
        assert waiting.waitlist_position == 1
        assert waiting.waitlist_offer_token is not None

    async def test_nothing_to_expire(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], waitlist_position=1, **_offer_fields(5))

        assert await WaitlistService(session).expire_stale_offers() == {"expired": 0, "new_offers": 0}

    async def test_decline_cancels_and_offers_next(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], RegistrationStatus.confirmed)
        declining = await _add(session, small_camp, athletes[1], waitlist_position=1, **_offer_fields(10))
        waiting = await _add(session, small_camp, athletes[2], waitlist_position=2)

        await WaitlistService(session).decline_offer("tok-10")

        assert declining.status == RegistrationStatus.cancelled
        assert declining.cancellation_reason == "Waitlist offer declined"
        assert declining.waitlist_position is None
        assert waiting.waitlist_position == 1
        assert waiting.waitlist_offer_token is not None

    async def test_decline_unknown_token(self, session):
        with pytest.raises(NotFoundError, match="Invalid offer token"):
            await WaitlistService(session).decline_offer("missing")


@pytest.mark.asyncio
class TestClaimOffer:
    async def test_open_offer_is_claimed(self, session, small_camp, athletes):
        offered = await _add(session, small_camp, athletes[0], waitlist_position=1, **_offer_fields(10))

        assert (await WaitlistService(session).claim_offer("tok-10")).id == offered.id

    async def test_unknown_token(self, session):
        with pytest.raises(NotFoundError, match="Invalid or expired offer token"):
            await WaitlistService(session).claim_offer("missing")

    async def test_expired_offer(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], waitlist_position=1, **_offer_fields(-2))

        with pytest.raises(BadRequestError, match="This offer has expired"):
            await WaitlistService(session).claim_offer("tok--2")

    async def test_spot_taken_meanwhile(self, session, small_camp, athletes):
        await _add(session, small_camp, athletes[0], RegistrationStatus.confirmed)
        await _add(session, small_camp, athletes[1], RegistrationStatus.confirmed)
        await _add(session, small_camp, athletes[2], waitlist_position=1, **_offer_fields(10))

        with pytest.raises(BadRequestError, match="no longer available"):
            await WaitlistService(session).claim_offer("tok-10")


@pytest.mark.asyncio
class TestAdminActions:
    async def test_list_reports_offer_status(self, session, camp, parent, athletes):
        await _add(session, camp, athletes[0], waitlist_position=1, **_offer_fields(10))
        await _add(session, camp, athletes[1], waitlist_position=2, **_offer_fields(-1))
        await _add(session, camp, athletes[2], waitlist_position=3)

        entries = await WaitlistService(session).list_for_camp(camp.id)

        assert [entry.offer_status for entry in entries] == ["offer_sent", "offer_expired", "waiting"]
        assert entries[0].athlete_name == "Ava Parent"
        assert entries[0].parent_email == parent.email

    async def test_list_hides_other_tenants_camp(self, session, camp):
        with pytest.raises(NotFoundError, match="Camp not found"):
            await WaitlistService(session).list_for_camp(camp.id, tenant_id="other-tenant")

    async def test_remove_reorders(self, session, camp, athletes):
        removed = await _add(session, camp, athletes[0], waitlist_position=1)
        remaining = await _add(session, camp, athletes[1], waitlist_position=2)

        await WaitlistService(session).remove(camp.id, removed.id)

        assert removed.status == RegistrationStatus.cancelled
        assert removed.cancellation_reason == "Removed from waitlist by admin"
        assert remaining.waitlist_position == 1

    async def test_remove_requires_waitlisted_registration(self, session, camp, athletes):
        confirmed = await _add(session, camp, athletes[0], RegistrationStatus.confirmed)

        with pytest.raises(NotFoundError, match="not in waitlisted state"):
            await WaitlistService(session).remove(camp.id, confirmed.id)

    async def test_send_offer_out_of_order(self, session, camp, athletes):
        await _add(session, camp, athletes[0], waitlist_position=1)
        chosen = await _add(session, camp, athletes[1], waitlist_position=2)

        registration = await WaitlistService(session).send_offer(camp.id, chosen.id)

        assert registration.waitlist_offer_token
        assert registration.waitlist_offer_expires_at is not None
