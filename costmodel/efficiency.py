from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from costmodel.cogs import CogsBreakdown
from costmodel.state import FinancialState


@dataclass(frozen=True)
class EfficiencyOutputs:
    yield_rate: float               # 0..1
    effective_units: int
    max_waste: int                  # upper bound offered by the waste slider
    unit_cost: float
    cost_increase_factor: float     # 1 / yield, 0 when nothing is sellable
    is_unprofitable: bool


def yield_band(yield_rate: float, is_unprofitable: bool = False) -> str:
    if is_unprofitable:
        return "critical"
    if yield_rate < 0.8:
        return "warning"
    return "healthy"


def compute_efficiency(state: FinancialState, cogs: CogsBreakdown) -> EfficiencyOutputs:
    batch = int(state.batch_size)
    yield_rate = (batch - state.waste_count) / batch if batch > 0 else 0.0

    return EfficiencyOutputs(
        yield_rate=yield_rate,
        effective_units=cogs.effective_units,
        max_waste=max(0, batch - 1),
        unit_cost=cogs.cogs,
        cost_increase_factor=(1.0 / yield_rate) if yield_rate > 0 else 0.0,
        is_unprofitable=cogs.cogs > state.public_price,
    )


def waste_cost_curve(
    batch_size: int,
    total_batch_material_cost: float,
    amort_per_unit: float,
    public_price: float,
) -> pd.DataFrame:
    """Unit cost at every waste level from 0 to batch_size - 1."""
    if batch_size <= 0:
        return pd.DataFrame({"waste": [], "cost": [], "price": []})

    waste = np.arange(0, int(batch_size))
    effective = batch_size - waste
    cost = np.round(total_batch_material_cost / effective + amort_per_unit, 2)

    return pd.DataFrame(
        {
            "waste": waste,
            "cost": cost,
            "price": np.full(len(waste), float(public_price)),
        }
    )
