import pytest

from empowered_camps.server.services.reconciliation import charge_status


@pytest.mark.parametrize(
    "difference, expected",
    [(0, "match"), (1, "ok"), (-1, "ok"), (2, "discrepancy"), (-4000, "discrepancy")],
)
def test_charge_status(difference, expected):
    assert charge_status(difference) == expected
