"""
Registration pricing.

Pure arithmetic over integer cents, shared by checkout and its tests:

- sibling discount: 10% of the camp price for every camper after the first
- promo code: first camper only; percentage codes take a rounded share of
  the camp price, fixed codes never exceed it
- add-ons: ``unit price * quantity`` per line
- tax: tenant rate applied to taxable add-ons only
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from empowered_camps.core.database.entities.promo_codes import PromoCode
from empowered_camps.core.money import percent_of

SIBLING_DISCOUNT_PERCENT = 10


class AddonLine(BaseModel):
    """Priced add-on selection."""

    addon_id: str
    variant_id: Optional[str] = None
    name: str
    unit_price_cents: int
    quantity: int = 1
    is_taxable: bool = False

    @property
    def total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


class CamperQuote(BaseModel):
    """Price breakdown of one camper's registration."""

    camper_index: int
    base_price_cents: int
    discount_cents: int = 0
    promo_discount_cents: int = 0
    addons: List[AddonLine] = Field(default_factory=list)
    addons_total_cents: int = 0
    tax_cents: int = 0

    @property
    def total_cents(self) -> int:
        return (
            self.base_price_cents
            - self.discount_cents
            - self.promo_discount_cents
            + self.addons_total_cents
            + self.tax_cents
        )


def sibling_discount(camper_index: int, base_price_cents: int) -> int:
    if camper_index == 0:
        return 0
    return percent_of(base_price_cents, SIBLING_DISCOUNT_PERCENT)


def quote_camper(
    camper_index: int,
    base_price_cents: int,
    addons: Sequence[AddonLine] = (),
    promo: Optional[PromoCode] = None,
    tax_rate_percent: Optional[float] = None,
) -> CamperQuote:
    discount = sibling_discount(camper_index, base_price_cents)
    promo_discount = promo.discount_for(base_price_cents) if promo is not None and camper_index == 0 else 0
    addons_total = sum(line.total_cents for line in addons)
    taxable = sum(line.total_cents for line in addons if line.is_taxable)
    tax = percent_of(taxable, tax_rate_percent) if tax_rate_percent else 0
    return CamperQuote(
        camper_index=camper_index,
        base_price_cents=base_price_cents,
        discount_cents=discount,
        promo_discount_cents=promo_discount,
        addons=list(addons),
        addons_total_cents=addons_total,
        tax_cents=tax,
    )


def quote_registration(
    base_price_cents: int,
    addons_per_camper: Sequence[Sequence[AddonLine]],
    promo: Optional[PromoCode] = None,
    tax_rate_percent: Optional[float] = None,
) -> List[CamperQuote]:
    """Quote every camper of one checkout; ``addons_per_camper[i]`` are camper i's add-ons."""
    return [
        quote_camper(index, base_price_cents, addons, promo, tax_rate_percent)
        for index, addons in enumerate(addons_per_camper)
    ]
