"""Unit tests for camp and registration repository queries."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from empowered_camps.core.database.entities import PromoCode, Registration, RegistrationAddon, RoyaltyInvoice
from empowered_camps.core.database.repositories.camps import CampRepository
from empowered_camps.core.database.repositories.registrations import RegistrationRepository
from empowered_camps.core.models.domain.enums import CampStatus, DiscountType, RegistrationStatus


def _registration(camp, athlete, status=RegistrationStatus.confirmed, **fields):
    return Registration(
        tenant_id=camp.tenant_id,
        camp_id=camp.id,
        athlete_id=athlete.id,
        parent_id=athlete.parent_id,
        status=status,
        **fields,
    )


class TestCampRepository:
    @pytest.mark.asyncio
    async def test_list_public(self, in_memory_session, sample_tenant, make_camp):
        open_camp = make_camp(sample_tenant, CampStatus.registration_open, 10, "Open")
        draft = make_camp(sample_tenant, CampStatus.draft, 10, "Draft")
        ended = make_camp(sample_tenant, CampStatus.published, -20, "Ended")
        in_memory_session.add_all([open_camp, draft, ended])
        await in_memory_session.commit()

        camps = await CampRepository(in_memory_session).list_public(today=date.today())

        assert [camp.name for camp in camps] == ["Open"]

    @pytest.mark.asyncio
    async def test_count_active_registrations(self, in_memory_session, sample_tenant, sample_athlete, make_camp):
        camp = make_camp(sample_tenant, CampStatus.registration_open, 10)
        in_memory_session.add(camp)
        await in_memory_session.flush()
        in_memory_session.add_all(
            [
                _registration(camp, sample_athlete),
                _registration(camp, sample_athlete, RegistrationStatus.pending),
                _registration(camp, sample_athlete, RegistrationStatus.cancelled),
                _registration(camp, sample_athlete, RegistrationStatus.waitlisted, waitlist_position=1),
                _registration(camp, sample_athlete, RegistrationStatus.refunded),
            ]
        )
        await in_memory_session.commit()

        assert await CampRepository(in_memory_session).count_active_registrations(camp.id) == 2

    @pytest.mark.asyncio
    async def test_completed_without_invoice(self, in_memory_session, sample_tenant, make_camp):
        invoiced = make_camp(sample_tenant, CampStatus.completed, -30, "Invoiced")
        pending = make_camp(sample_tenant, CampStatus.completed, -20, "Pending")
        in_memory_session.add_all([invoiced, pending])
        await in_memory_session.flush()
        in_memory_session.add(
            RoyaltyInvoice(
                tenant_id=sample_tenant.id,
                camp_id=invoiced.id,
                invoice_number="ROY-TEST-0001",
                period_start=invoiced.start_date,
                period_end=invoiced.end_date,
                due_date=datetime.now(timezone.utc) + timedelta(days=30),
            )
        )
        await in_memory_session.commit()

        camps = await CampRepository(in_memory_session).completed_without_invoice()

        assert [camp.name for camp in camps] == ["Pending"]

    @pytest.mark.asyncio
    async def test_held_between(self, in_memory_session, sample_tenant, make_camp):
        held = make_camp(sample_tenant, CampStatus.completed, -10, "Held")
        cancelled = make_camp(sample_tenant, CampStatus.cancelled, -10, "Cancelled")
        in_memory_session.add_all([held, cancelled])
        await in_memory_session.commit()

        start = date.today() - timedelta(days=30)
        camps = await CampRepository(in_memory_session).held_between(start, date.today())

        assert [camp.name for camp in camps] == ["Held"]


class TestRegistrationRepository:
    @pytest.mark.asyncio
    async def test_actual_addon_totals(self, in_memory_session, sample_tenant, sample_athlete, make_camp):
        camp = make_camp(sample_tenant, CampStatus.registration_open, 10)
        in_memory_session.add(camp)
        await in_memory_session.flush()
        with_addons = _registration(camp, sample_athlete)
        without = _registration(camp, sample_athlete)
        in_memory_session.add_all([with_addons, without])
        await in_memory_session.flush()
        in_memory_session.add_all(
            [
                RegistrationAddon(registration_id=with_addons.id, addon_id="addon-1", quantity=1, price_cents=1500),
                RegistrationAddon(registration_id=with_addons.id, addon_id="addon-2", quantity=2, price_cents=3000),
            ]
        )
        await in_memory_session.commit()

        totals = await RegistrationRepository(in_memory_session).actual_addon_totals([with_addons.id, without.id])

        assert totals == {with_addons.id: 4500, without.id: 0}

    @pytest.mark.asyncio
    async def test_usage_counts(self, in_memory_session, sample_tenant, sample_athlete, make_camp):
        camp = make_camp(sample_tenant, CampStatus.registration_open, 10)
        promo = PromoCode(tenant_id=sample_tenant.id, code="EARLY", discount_type=DiscountType.fixed, discount_value=10)
        in_memory_session.add_all([camp, promo])
        await in_memory_session.flush()
        in_memory_session.add_all(
            [_registration(camp, sample_athlete, promo_code_id=promo.id) for _ in range(2)]
        )
        await in_memory_session.commit()

        repository = RegistrationRepository(in_memory_session)

        assert await repository.usage_counts([promo.id]) == {promo.id: 2}
        assert await repository.usage_counts([]) == {}
