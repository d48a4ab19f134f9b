"""
Unit tests for integer-cent helpers.
"""

import pytest

from empowered_camps.core.money import (
    allocate_proportionally,
    bps_of,
    format_dollars,
    percent_of,
    round_cents,
)


class TestRounding:
    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (-0.5, 0), (0, 0)],
    )
    def test_round_half_up(self, value, expected):
        assert round_cents(value) == expected

    def test_percent_of_rounds_to_nearest_cent(self):
        assert percent_of(30000, 10) == 3000
        assert percent_of(1999, 15) == 300  # 299.85

    def test_bps_of(self):
        assert bps_of(100000, 1000) == 10000
        assert bps_of(12345, 850) == 1049  # 1049.325


class TestFormatDollars:
    def test_positive(self):
        assert format_dollars(123456) == "$1234.56"

    def test_negative_keeps_sign_in_front(self):
        assert format_dollars(-150) == "-$1.50"

    def test_zero(self):
        assert format_dollars(0) == "$0.00"


class TestAllocateProportionally:
    def test_shares_sum_to_total(self):
        shares = allocate_proportionally(1000, [1, 1, 1])
        assert shares == [333, 333, 334]
        assert sum(shares) == 1000

    def test_proportional_to_weights(self):
        assert allocate_proportionally(900, [2000, 1000]) == [600, 300]

    def test_empty_weights(self):
        assert allocate_proportionally(500, []) == []

    def test_zero_weights_put_everything_on_last(self):
        assert allocate_proportionally(500, [0, 0]) == [0, 500]
