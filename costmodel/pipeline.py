from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from costmodel.cogs import CogsBreakdown, derive_cogs
from costmodel.efficiency import EfficiencyOutputs, compute_efficiency
from costmodel.scenarios import ScenarioResult, derive_scenarios
from costmodel.state import FinancialState


@dataclass(frozen=True)
class ModelSnapshot:
    state: FinancialState
    cogs: CogsBreakdown
    scenarios: Tuple[ScenarioResult, ...]
    efficiency: EfficiencyOutputs


def compute_snapshot(state: FinancialState) -> ModelSnapshot:
    """Run the whole pipeline for one state; called after every edit."""
    cogs = derive_cogs(state)
    return ModelSnapshot(
        state=state,
        cogs=cogs,
        scenarios=derive_scenarios(state, cogs),
        efficiency=compute_efficiency(state, cogs),
    )
