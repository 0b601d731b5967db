"""
Shared fixtures for the cost model tests.
"""

import pytest

from costmodel.state import FinancialState, MaterialItem, default_state


@pytest.fixture
def base_state() -> FinancialState:
    return default_state()


@pytest.fixture
def mixed_materials():
    """One manual lump sum, one calculated line, one manual line with a buffer."""
    return (
        MaterialItem("1", "Aluminum 6061", 250.0, notes="Manual entry"),
        MaterialItem("2", "Screws", 0.0, qty_per_unit=2.0, buffer_units=10.0, unit_cost=5.0),
        MaterialItem("3", "Offcuts", 40.0, buffer_units=3.0),
    )
