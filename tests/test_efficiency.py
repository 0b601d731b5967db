from dataclasses import replace

import pytest

from costmodel.cogs import derive_cogs
from costmodel.efficiency import compute_efficiency, waste_cost_curve, yield_band
from costmodel.state import empty_state


def test_default_efficiency(base_state):
    eff = compute_efficiency(base_state, derive_cogs(base_state))
    assert eff.yield_rate == pytest.approx(0.96)
    assert eff.effective_units == 48
    assert eff.max_waste == 49
    assert eff.cost_increase_factor == pytest.approx(1 / 0.96)
    assert not eff.is_unprofitable


def test_empty_batch():
    state = empty_state()
    eff = compute_efficiency(state, derive_cogs(state))
    assert (eff.yield_rate, eff.max_waste, eff.cost_increase_factor) == (0.0, 0, 0.0)


def test_unprofitable_when_cost_above_price(base_state):
    state = replace(base_state, public_price=10.0)
    eff = compute_efficiency(state, derive_cogs(state))
    assert eff.is_unprofitable
    assert yield_band(eff.yield_rate, eff.is_unprofitable) == "critical"


@pytest.mark.parametrize("rate, band", [(0.96, "healthy"), (0.8, "healthy"), (0.79, "warning")])
def test_yield_band(rate, band):
    assert yield_band(rate) == band


def test_waste_curve(base_state):
    curve = waste_cost_curve(50, 450.0, 9.7, 85.0)
    assert list(curve["waste"]) == list(range(50))
    assert curve["cost"].iloc[0] == pytest.approx(18.7)
    assert curve["cost"].iloc[2] == pytest.approx(19.075, abs=0.01)
    assert curve["cost"].is_monotonic_increasing
    assert (curve["price"] == 85.0).all()


def test_waste_curve_empty_batch():
    assert waste_cost_curve(0, 450.0, 9.7, 85.0).empty
