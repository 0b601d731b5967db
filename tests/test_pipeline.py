import pytest

from costmodel.edits import set_batch_size
from costmodel.pipeline import compute_snapshot
from costmodel.scenarios import BreakEven, scenario_by_id


def test_snapshot_exposes_every_output(base_state):
    snap = compute_snapshot(base_state)
    assert snap.state is base_state
    assert snap.cogs.cogs == pytest.approx(19.075)
    assert len(snap.scenarios) == 6
    assert scenario_by_id(snap.scenarios, "retail").break_even_units == BreakEven.reached(118)
    assert snap.efficiency.effective_units == 48


def test_recomputes_after_edit(base_state):
    snap = compute_snapshot(set_batch_size(base_state, 100))
    assert snap.cogs.material_cost_per_unit == pytest.approx(450.0 / 98)
