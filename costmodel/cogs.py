from __future__ import annotations

from dataclasses import dataclass

from costmodel.materials import total_batch_material_cost
from costmodel.state import FinancialState


@dataclass(frozen=True)
class CogsBreakdown:
    total_dev_cost: float
    amort_per_unit: float

    total_batch_material_cost: float
    effective_units: int
    material_cost_per_unit: float

    cogs: float


def derive_cogs(state: FinancialState) -> CogsBreakdown:
    total_dev = float(sum(c.amount for c in state.dev_costs))

    # Zero amortization volume means no amortized cost, not an infinite one.
    amort = total_dev / state.amortization_qty if state.amortization_qty > 0 else 0.0

    batch_materials = total_batch_material_cost(state.materials)
    effective = state.effective_units
    material_per_unit = batch_materials / effective if effective > 0 else 0.0

    return CogsBreakdown(
        total_dev_cost=total_dev,
        amort_per_unit=amort,
        total_batch_material_cost=batch_materials,
        effective_units=effective,
        material_cost_per_unit=material_per_unit,
        cogs=material_per_unit + amort,
    )
