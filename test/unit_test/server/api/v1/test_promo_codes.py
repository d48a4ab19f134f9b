from datetime import date

import pytest
import pytest_asyncio
from httpx import AsyncClient

from empowered_camps.core.database.entities import Athlete, PromoCode, Registration, Tenant
from empowered_camps.core.models.domain.enums import DiscountType, UserRole

pytestmark = pytest.mark.asyncio

URL = "/api/v1/promo-codes"


@pytest_asyncio.fixture
async def promo(session, tenant) -> PromoCode:
    promo = PromoCode(tenant_id=tenant.id, code="SPRING10", discount_type=DiscountType.percentage, discount_value=10)
    session.add(promo)
    await session.commit()
    return promo


@pytest_asyncio.fixture
async def other_tenant(session) -> Tenant:
    other = Tenant(name="Empowered Austin", slug="austin", territory_name="Austin")
    session.add(other)
    await session.commit()
    return other


async def test_anonymous_is_unauthorized(client: AsyncClient, auth):
    auth.logout()

    assert (await client.get(URL)).status_code == 401


async def test_parent_is_forbidden(client: AsyncClient, auth):
    auth.login(role=UserRole.parent)

    assert (await client.get(URL)).status_code == 403


async def test_create_uppercases_code(client: AsyncClient, tenant):
    response = await client.post(
        URL,
        json={"tenant_id": tenant.id, "code": " summer25 ", "discount_type": "fixed", "discount_value": 2500},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "SUMMER25"
    assert body["applies_to"] == "both"
    assert body["usage_count"] == 0


async def test_create_requires_fields(client: AsyncClient, tenant):
    response = await client.post(URL, json={"tenant_id": tenant.id, "code": "X"})

    assert response.status_code == 400
    assert response.json()["error"] == "tenant_id, code, discount_type, and discount_value are required"


async def test_duplicate_code_is_rejected(client: AsyncClient, tenant, promo):
    response = await client.post(
        URL,
        json={"tenant_id": tenant.id, "code": "spring10", "discount_type": "percentage", "discount_value": 5},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "A promo code with this code already exists"


async def test_director_is_pinned_to_own_tenant(client: AsyncClient, auth, tenant, other_tenant, promo):
    auth.login(role=UserRole.director, tenant_id=tenant.id)

    response = await client.post(
        URL,
        json={"tenant_id": other_tenant.id, "code": "LOCAL", "discount_type": "fixed", "discount_value": 500},
    )

    assert response.json()["tenant_id"] == tenant.id
    codes = (await client.get(URL, params={"tenant_id": other_tenant.id})).json()["promo_codes"]
    assert sorted(code["code"] for code in codes) == ["LOCAL", "SPRING10"]


async def test_list_includes_usage_count(client: AsyncClient, session, promo, camp, parent):
    athlete = Athlete(parent_id=parent.id, first_name="Ava", last_name="Parent", date_of_birth=date(2015, 1, 1))
    session.add(athlete)
    await session.flush()
    session.add(
        Registration(
            tenant_id=camp.tenant_id,
            camp_id=camp.id,
            athlete_id=athlete.id,
            parent_id=parent.id,
            promo_code_id=promo.id,
            base_price_cents=30000,
            total_price_cents=27000,
        )
    )
    await session.commit()

    codes = (await client.get(URL)).json()["promo_codes"]

    assert codes[0]["usage_count"] == 1


async def test_update_changes_given_fields(client: AsyncClient, promo):
    response = await client.put(URL, json={"promo_code_id": promo.id, "is_active": False})

    body = response.json()
    assert body["is_active"] is False
    assert body["discount_value"] == 10


async def test_percentage_above_100_is_rejected(client: AsyncClient, tenant):
    response = await client.post(
        URL,
        json={"tenant_id": tenant.id, "code": "FREE150", "discount_type": "percentage", "discount_value": 150},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Percentage discounts cannot exceed 100"


async def test_fixed_discount_may_exceed_100(client: AsyncClient, tenant):
    response = await client.post(
        URL,
        json={"tenant_id": tenant.id, "code": "TAKE150", "discount_type": "fixed", "discount_value": 15000},
    )

    assert response.status_code == 201


async def test_update_checks_percentage_against_stored_type(client: AsyncClient, promo):
    too_high = await client.put(URL, json={"promo_code_id": promo.id, "discount_value": 101})
    switched = await client.put(
        URL, json={"promo_code_id": promo.id, "discount_type": "fixed", "discount_value": 2500}
    )

    assert too_high.status_code == 400
    assert too_high.json()["error"] == "Percentage discounts cannot exceed 100"
    assert switched.status_code == 200
    assert switched.json()["discount_value"] == 2500


async def test_explicit_null_leaves_required_fields_alone(client: AsyncClient, promo):
    response = await client.put(
        URL, json={"promo_code_id": promo.id, "discount_value": None, "discount_type": None, "is_active": None}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["discount_value"] == 10
    assert body["discount_type"] == "percentage"
    assert body["is_active"] is True


async def test_update_other_tenants_code_is_not_found(client: AsyncClient, auth, other_tenant, promo):
    auth.login(role=UserRole.licensee_owner, tenant_id=other_tenant.id)

    response = await client.put(URL, json={"promo_code_id": promo.id, "discount_value": 50})

    assert response.status_code == 404


async def test_delete_unused_code(client: AsyncClient, promo):
    response = await client.delete(URL, params={"promo_code_id": promo.id})

    assert response.json() == {"success": True, "message": "Promo code deleted"}
    assert (await client.get(URL)).json()["promo_codes"] == []


async def test_delete_used_code_deactivates(client: AsyncClient, session, promo, camp, parent):
    athlete = Athlete(parent_id=parent.id, first_name="Ava", last_name="Parent", date_of_birth=date(2015, 1, 1))
    session.add(athlete)
    await session.flush()
    session.add(
        Registration(
            tenant_id=camp.tenant_id,
            camp_id=camp.id,
            athlete_id=athlete.id,
            parent_id=parent.id,
            promo_code_id=promo.id,
            base_price_cents=30000,
            total_price_cents=27000,
        )
    )
    await session.commit()

    response = await client.delete(URL, params={"promo_code_id": promo.id})

    assert response.json()["message"] == "Promo code deactivated (has been used)"
    codes = (await client.get(URL, params={"active_only": True})).json()["promo_codes"]
    assert codes == []
