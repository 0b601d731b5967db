from dataclasses import replace

import pytest

from costmodel.cogs import derive_cogs
from costmodel.state import CostItem, MaterialItem, empty_state


def test_default_example(base_state):
    c = derive_cogs(base_state)
    assert c.total_dev_cost == 9700.0
    assert c.amort_per_unit == pytest.approx(9.7)
    assert c.total_batch_material_cost == 450.0
    assert c.effective_units == 48
    assert c.material_cost_per_unit == pytest.approx(9.375)
    assert c.cogs == pytest.approx(19.075)


@pytest.mark.parametrize("batch, waste", [(1, 0), (10, 3), (50, 49), (1000, 17)])
def test_material_per_unit_times_units_is_batch_total(base_state, batch, waste):
    c = derive_cogs(replace(base_state, batch_size=batch, waste_count=waste))
    assert c.effective_units == batch - waste
    assert c.material_cost_per_unit * c.effective_units == pytest.approx(c.total_batch_material_cost)


def test_zero_amortization_qty(base_state):
    c = derive_cogs(replace(base_state, amortization_qty=0))
    assert c.amort_per_unit == 0.0
    assert c.cogs == pytest.approx(9.375)


def test_waste_equal_to_batch_zeroes_material_cost(base_state):
    c = derive_cogs(replace(base_state, waste_count=50))
    assert c.effective_units == 0
    assert c.material_cost_per_unit == 0.0


def test_waste_above_batch_clamps_units(base_state):
    assert derive_cogs(replace(base_state, waste_count=80)).effective_units == 0


def test_empty_state_is_all_zero():
    c = derive_cogs(empty_state())
    assert (c.total_dev_cost, c.amort_per_unit, c.material_cost_per_unit, c.cogs) == (0, 0, 0, 0)


def test_uses_cost_whatever_the_mode():
    state = replace(
        empty_state(),
        batch_size=10,
        dev_costs=(CostItem("1", "Design", 100.0),),
        amortization_qty=10,
        materials=(
            MaterialItem("1", "Lump", 30.0),
            MaterialItem("2", "Calc", 70.0, qty_per_unit=1.0, unit_cost=7.0),
        ),
    )
    c = derive_cogs(state)
    assert c.material_cost_per_unit == pytest.approx(10.0)
    assert c.cogs == pytest.approx(20.0)
