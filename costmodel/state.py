from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True)
class CostItem:
    id: str
    name: str
    amount: float = 0.0


@dataclass(frozen=True)
class MaterialItem:
    id: str
    name: str
    cost: float = 0.0               # total batch cost; derived when qty/unit_cost are set

    qty_per_unit: float = 0.0       # material per finished product
    buffer_units: float = 0.0       # extra material per batch (safety/offcuts)
    unit_cost: float = 0.0          # price per unit of material
    notes: str = ""


@dataclass(frozen=True)
class SalesScenario:
    id: str
    name: str
    discount_percent: float         # 0..1
    commission_percent: float       # 0..1
    description: str = ""


@dataclass(frozen=True)
class ScenarioConfig:
    id: str
    discount_percent: float


@dataclass(frozen=True)
class FinancialState:
    # Development
    dev_costs: Tuple[CostItem, ...] = ()
    amortization_qty: int = 0

    # Production
    batch_size: int = 0
    waste_count: int = 0
    materials: Tuple[MaterialItem, ...] = ()

    # Commercialisation
    public_price: float = 0.0
    fixed_monthly_expenses: float = 0.0
    designer_royalty_percent: float = 0.0

    custom_scenarios: Tuple[ScenarioConfig, ...] = ()

    @property
    def effective_units(self) -> int:
        return max(0, int(self.batch_size) - int(self.waste_count))


DEFAULT_SCENARIOS: Tuple[SalesScenario, ...] = (
    SalesScenario("direct", "Direct Sale", 0.0, 0.0, "Direct to consumer (Website)"),
    SalesScenario("card", "Card Sale", 0.035, 0.0, "Processing fees included"),
    SalesScenario("specifier", "Architect/Specifier", 0.15, 0.0, "Trade discount"),
    SalesScenario("retail", "Retail Store", 0.50, 0.0, "Standard wholesale"),
    SalesScenario("distributor", "Distributor", 0.60, 0.0, "Volume partner"),
    SalesScenario("agent", "Sales Agent", 0.50, 0.025, "Wholesale + Commission"),
)


def default_overrides() -> Tuple[ScenarioConfig, ...]:
    return tuple(ScenarioConfig(s.id, s.discount_percent) for s in DEFAULT_SCENARIOS)


def default_state() -> FinancialState:
    """Example product shipped on first load and restored by "reset"."""
    return FinancialState(
        dev_costs=(
            CostItem("1", "Industrial Design", 5000.0),
            CostItem("2", "Prototyping", 1200.0),
            CostItem("3", "Tooling", 3500.0),
        ),
        amortization_qty=1000,
        batch_size=50,
        waste_count=2,
        # qty/unit_cost left at zero: these start as manual lump sums
        materials=(
            MaterialItem("1", "Aluminum 6061", 250.0, notes="Manual entry"),
            MaterialItem("2", "Packaging", 50.0, notes="Manual entry"),
            MaterialItem("3", "Powder Coating", 150.0, notes="Manual entry"),
        ),
        public_price=85.0,
        fixed_monthly_expenses=2500.0,
        designer_royalty_percent=0.05,
        custom_scenarios=default_overrides(),
    )


def empty_state() -> FinancialState:
    """Zeroed snapshot installed by "clear"; every channel override drops to 0%."""
    return FinancialState(
        custom_scenarios=tuple(ScenarioConfig(s.id, 0.0) for s in DEFAULT_SCENARIOS),
    )


def next_id(existing: Iterable[str]) -> str:
    taken = set(existing)
    n = len(taken) + 1
    while str(n) in taken:
        n += 1
    return str(n)
