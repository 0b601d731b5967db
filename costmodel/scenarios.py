from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import total_ordering
from math import ceil
from typing import Any, Optional, Sequence, Tuple, Union

import pandas as pd

from costmodel.cogs import CogsBreakdown, derive_cogs
from costmodel.parsing import percent_to_fraction
from costmodel.state import DEFAULT_SCENARIOS, FinancialState, SalesScenario, ScenarioConfig

logger = logging.getLogger(__name__)

UNREACHABLE = "unreachable"


@total_ordering
@dataclass(frozen=True)
class BreakEven:
    """
    Monthly units needed to cover fixed expenses.

    units is None when the channel never breaks even (margin <= 0). Unreachable
    compares greater than every finite count.
    """

    units: Optional[int] = None

    @classmethod
    def reached(cls, units: int) -> "BreakEven":
        return cls(units=int(units))

    @classmethod
    def unreachable(cls) -> "BreakEven":
        return cls(units=None)

    @property
    def is_reachable(self) -> bool:
        return self.units is not None

    def to_value(self) -> Union[int, str]:
        return UNREACHABLE if self.units is None else self.units

    def label(self, unreachable_text: str = "FAIL") -> str:
        return unreachable_text if self.units is None else f"{self.units:,}"

    def _key(self) -> Tuple[int, int]:
        return (1, 0) if self.units is None else (0, self.units)

    def __lt__(self, other: "BreakEven") -> bool:
        if not isinstance(other, BreakEven):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return self.label()


@dataclass(frozen=True)
class ScenarioResult:
    id: str
    name: str
    discount_percent: float         # effective (override or default)
    commission_percent: float
    description: str

    net_revenue: float
    royalty_amount: float
    commission_amount: float
    gross_margin: float
    profit: float                   # per unit; equals gross_margin
    break_even_units: BreakEven
    is_profitable: bool
    roi: float                      # percent


def effective_discount(scenario: SalesScenario, overrides: Sequence[ScenarioConfig]) -> float:
    for o in overrides:
        if o.id == scenario.id:
            return o.discount_percent
    return scenario.discount_percent


def evaluate_scenario(
    scenario: SalesScenario,
    discount: float,
    cogs: float,
    public_price: float,
    royalty_percent: float,
    fixed_monthly_expenses: float,
) -> ScenarioResult:
    net_revenue = public_price * (1.0 - discount)
    royalty = net_revenue * royalty_percent
    commission = net_revenue * scenario.commission_percent

    gross_margin = net_revenue - cogs - royalty - commission
    profit = gross_margin

    # Partial units round up: 0.3 of a unit cannot be sold.
    if gross_margin > 0:
        break_even = BreakEven.reached(ceil(fixed_monthly_expenses / gross_margin))
    else:
        break_even = BreakEven.unreachable()

    roi = (profit / cogs) * 100.0 if cogs > 0 else 0.0

    return ScenarioResult(
        id=scenario.id,
        name=scenario.name,
        discount_percent=discount,
        commission_percent=scenario.commission_percent,
        description=scenario.description,
        net_revenue=net_revenue,
        royalty_amount=royalty,
        commission_amount=commission,
        gross_margin=gross_margin,
        profit=profit,
        break_even_units=break_even,
        is_profitable=profit > 0,
        roi=roi,
    )


def derive_scenarios(
    state: FinancialState, cogs: Union[CogsBreakdown, float, None] = None
) -> Tuple[ScenarioResult, ...]:
    """Evaluate every channel, in declaration order, against the current COGS."""
    if cogs is None:
        cogs = derive_cogs(state)
    unit_cost = cogs.cogs if isinstance(cogs, CogsBreakdown) else float(cogs)

    return tuple(
        evaluate_scenario(
            s,
            effective_discount(s, state.custom_scenarios),
            unit_cost,
            state.public_price,
            state.designer_royalty_percent,
            state.fixed_monthly_expenses,
        )
        for s in DEFAULT_SCENARIOS
    )


def set_scenario_discount(state: FinancialState, scenario_id: str, percent_text: Any) -> FinancialState:
    """
    Store a channel discount typed in percent units.

    Text that does not parse is a 0% discount, not a rejected edit.
    """
    if not any(s.id == scenario_id for s in DEFAULT_SCENARIOS):
        logger.warning("Ignoring discount for unknown scenario %r", scenario_id)
        return state

    fraction = percent_to_fraction(percent_text)
    overrides = state.custom_scenarios or tuple(
        ScenarioConfig(s.id, s.discount_percent) for s in DEFAULT_SCENARIOS
    )
    if not any(o.id == scenario_id for o in overrides):
        overrides = tuple(overrides) + (ScenarioConfig(scenario_id, fraction),)

    updated = tuple(
        ScenarioConfig(o.id, fraction) if o.id == scenario_id else o for o in overrides
    )
    return replace(state, custom_scenarios=updated)


def scenario_by_id(results: Sequence[ScenarioResult], scenario_id: str) -> Optional[ScenarioResult]:
    return next((r for r in results if r.id == scenario_id), None)


def direct_roi(results: Sequence[ScenarioResult]) -> float:
    r = scenario_by_id(results, "direct")
    return r.roi if r is not None else 0.0


def scenario_frame(results: Sequence[ScenarioResult]) -> pd.DataFrame:
    rows = []
    for r in results:
        rows.append(
            {
                "id": r.id,
                "Channel": r.name,
                "Description": r.description,
                "Discount (%)": r.discount_percent * 100.0,
                "Commission (%)": r.commission_percent * 100.0,
                "Net revenue": r.net_revenue,
                "Royalty": r.royalty_amount,
                "Commission": r.commission_amount,
                "Profit / unit": r.profit,
                "Break-even units": r.break_even_units.to_value(),
                "ROI (%)": r.roi,
                "Profitable": r.is_profitable,
            }
        )
    return pd.DataFrame(rows)
