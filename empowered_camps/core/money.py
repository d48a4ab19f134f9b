"""Integer-cent arithmetic helpers."""

from __future__ import annotations

import math
from typing import Iterable, List


def round_cents(value: float) -> int:
    """Round half up, so 0.5 always goes to the next cent (``round`` would use banker's rounding)."""
    return int(math.floor(value + 0.5))


def percent_of(amount_cents: int, percent: float) -> int:
    return round_cents(amount_cents * percent / 100)


def bps_of(amount_cents: int, bps: int) -> int:
    return round_cents(amount_cents * bps / 10000)


def format_dollars(cents: int) -> str:
    """Format cents as ``$x.xx``; negative amounts keep their sign in front (``-$1.50``)."""
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:.2f}"


def allocate_proportionally(total: int, weights: Iterable[int]) -> List[int]:
    """
    Split ``total`` across ``weights`` proportionally.

    Every share but the last is rounded; the last takes the remainder so the
    shares always sum to ``total``.
    """
    weights = list(weights)
    weight_sum = sum(weights)
    if not weights:
        return []
    if weight_sum <= 0:
        return [0] * (len(weights) - 1) + [total]
    shares: List[int] = []
    remaining = total
    for index, weight in enumerate(weights):
        if index == len(weights) - 1:
            shares.append(remaining)
        else:
            share = round_cents(total * weight / weight_sum)
            shares.append(share)
            remaining -= share
    return shares
