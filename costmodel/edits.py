from __future__ import annotations

from dataclasses import replace
from typing import Any, Sequence

from costmodel.materials import recalculate_on_batch_change, set_manual_cost
from costmodel.parsing import parse_int_or_zero, parse_number_or_zero, percent_to_fraction
from costmodel.state import CostItem, FinancialState, MaterialItem, next_id

# Every edit returns a new FinancialState; nothing here mutates its input.


def set_batch_size(state: FinancialState, value: Any) -> FinancialState:
    size = max(0, parse_int_or_zero(value))
    return replace(
        state,
        batch_size=size,
        materials=recalculate_on_batch_change(state.materials, size),
    )


def set_waste_count(state: FinancialState, value: Any) -> FinancialState:
    # No upper bound: waste == batch simply zeroes the per-unit figures.
    return replace(state, waste_count=max(0, parse_int_or_zero(value)))


def set_amortization_qty(state: FinancialState, value: Any) -> FinancialState:
    return replace(state, amortization_qty=max(0, parse_int_or_zero(value)))


def set_public_price(state: FinancialState, value: Any) -> FinancialState:
    return replace(state, public_price=parse_number_or_zero(value))


def set_fixed_monthly_expenses(state: FinancialState, value: Any) -> FinancialState:
    return replace(state, fixed_monthly_expenses=parse_number_or_zero(value))


def set_royalty_percent(state: FinancialState, percent: Any) -> FinancialState:
    return replace(state, designer_royalty_percent=percent_to_fraction(percent))


def add_dev_cost(state: FinancialState, name: str = "New Expense", amount: Any = 0) -> FinancialState:
    item = CostItem(next_id(c.id for c in state.dev_costs), name, parse_number_or_zero(amount))
    return replace(state, dev_costs=state.dev_costs + (item,))


def remove_dev_cost(state: FinancialState, item_id: str) -> FinancialState:
    return replace(state, dev_costs=tuple(c for c in state.dev_costs if c.id != item_id))


def update_dev_cost(state: FinancialState, item_id: str, name: Any = None, amount: Any = None) -> FinancialState:
    out = []
    for c in state.dev_costs:
        if c.id == item_id:
            if name is not None:
                c = replace(c, name=str(name))
            if amount is not None:
                c = replace(c, amount=parse_number_or_zero(amount))
        out.append(c)
    return replace(state, dev_costs=tuple(out))


def set_material_cost(state: FinancialState, item_id: str, amount: Any) -> FinancialState:
    return replace(state, materials=set_manual_cost(state.materials, item_id, amount))


def replace_materials(state: FinancialState, materials: Sequence[MaterialItem]) -> FinancialState:
    """Install the detailed editor's rows as-is (its own batch size already applied)."""
    return replace(state, materials=tuple(materials))
