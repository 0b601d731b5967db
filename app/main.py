import sys
from pathlib import Path

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

# Ensure project root is on sys.path when running via `streamlit run app/main.py`.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from costmodel.config import get_settings
from costmodel.edits import (
    add_dev_cost,
    remove_dev_cost,
    replace_materials,
    set_amortization_qty,
    set_batch_size,
    set_fixed_monthly_expenses,
    set_material_cost,
    set_public_price,
    set_royalty_percent,
    set_waste_count,
    update_dev_cost,
)
from costmodel.efficiency import waste_cost_curve, yield_band
from costmodel.logging_setup import configure_logging
from costmodel.materials import (
    add_material,
    apply_editor_rows,
    is_calculated,
    material_mode,
    remove_material,
    rename_material,
    total_batch_material_cost,
)
from costmodel.parsing import fraction_to_percent
from costmodel.pipeline import compute_snapshot
from costmodel.scenarios import direct_roi, scenario_by_id, scenario_frame, set_scenario_discount
from costmodel.state import default_state, empty_state

SETTINGS = get_settings()
logger = configure_logging(SETTINGS.log_level)

BAND_COLOURS = {"healthy": "#10b981", "warning": "#f97316", "critical": "#ef4444"}
EDITOR_COLUMNS = ["id", "name", "qty_per_unit", "buffer_units", "unit_cost", "cost", "mode", "notes"]


def fmt_money(value: float, decimals: int = 2) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{SETTINGS.currency_symbol}{abs(value):,.{decimals}f}"


def fmt_pct(value: float) -> str:
    return f"{value:.1f}%"


def commit(new_state) -> None:
    st.session_state["fin_state"] = new_state


def reload_form(new_state) -> None:
    """Replace the whole state and re-seed every widget from it."""
    commit(new_state)
    st.session_state["form_version"] = st.session_state.get("form_version", 0) + 1
    st.rerun()


def materials_editor_frame(materials) -> pd.DataFrame:
    rows = [
        {
            "id": m.id,
            "name": m.name,
            "qty_per_unit": m.qty_per_unit,
            "buffer_units": m.buffer_units,
            "unit_cost": m.unit_cost,
            "cost": m.cost,
            "mode": material_mode(m).value,
            "notes": m.notes,
        }
        for m in materials
    ]
    return pd.DataFrame(rows, columns=EDITOR_COLUMNS)


@st.dialog("Detailed Material Calculator", width="large")
def material_manager(state) -> None:
    editor_batch = st.number_input(
        "Calculating for batch size (units)", min_value=0, value=int(state.batch_size), step=1
    )
    st.caption(
        "Total = (Qty/product × batch + buffer) × unit cost. Rows with zero quantity and zero "
        "unit cost keep their manual lump-sum cost."
    )

    edited = st.data_editor(
        materials_editor_frame(state.materials),
        num_rows="dynamic",
        hide_index=True,
        use_container_width=True,
        key=f"material_editor_{st.session_state.get('form_version', 0)}",
        column_config={
            "id": None,
            "name": st.column_config.TextColumn("Material name"),
            "qty_per_unit": st.column_config.NumberColumn("Qty/product", min_value=0.0, format="%.3f"),
            "buffer_units": st.column_config.NumberColumn("Buffer", min_value=0.0),
            "unit_cost": st.column_config.NumberColumn("Unit cost", min_value=0.0, format="%.2f"),
            "cost": st.column_config.NumberColumn(
                "Manual total", min_value=0.0, format="%.2f",
                help="Used only for manual rows; calculated rows ignore this cell.",
            ),
            "mode": st.column_config.TextColumn("Mode", disabled=True),
            "notes": st.column_config.TextColumn("Notes"),
        },
    )

    preview = apply_editor_rows(state.materials, edited.to_dict("records"), int(editor_batch))
    st.dataframe(
        pd.DataFrame(
            {
                "Material": [m.name for m in preview],
                "Mode": [material_mode(m).value for m in preview],
                "Total cost": [fmt_money(m.cost) for m in preview],
            }
        ),
        hide_index=True,
        use_container_width=True,
    )
    st.metric("Total batch cost", fmt_money(total_batch_material_cost(preview)))

    c_save, c_cancel = st.columns(2)
    if c_save.button("Save materials", type="primary", use_container_width=True):
        logger.info("Saved %d materials from detailed editor (batch %s)", len(preview), editor_batch)
        reload_form(replace_materials(state, preview))
    if c_cancel.button("Cancel", use_container_width=True):
        st.rerun()


# --- Page Config ---
st.set_page_config(page_title=SETTINGS.page_title, layout="wide")

if "fin_state" not in st.session_state:
    st.session_state["fin_state"] = default_state()
    st.session_state["form_version"] = 0

state = st.session_state["fin_state"]
v = st.session_state["form_version"]

st.title(f"{SETTINGS.page_title}: Product Unit Economics")

# --- Sidebar Inputs ---
with st.sidebar:
    st.title("Inputs")

    with st.expander("Development (sunk costs)", expanded=True):
        for item in state.dev_costs:
            c_name, c_amount, c_del = st.columns([5, 4, 1])
            name = c_name.text_input("Item", value=item.name, key=f"dev_name_{item.id}_{v}", label_visibility="collapsed")
            amount = c_amount.number_input(
                "Amount", min_value=0.0, value=float(item.amount), step=100.0,
                key=f"dev_amount_{item.id}_{v}", label_visibility="collapsed",
            )
            if name != item.name or amount != item.amount:
                state = update_dev_cost(state, item.id, name=name, amount=amount)
            if c_del.button("✕", key=f"dev_del_{item.id}_{v}"):
                commit(remove_dev_cost(state, item.id))
                st.rerun()

        if st.button("Add expense", key=f"dev_add_{v}"):
            commit(add_dev_cost(state))
            st.rerun()

        amort_qty = st.number_input(
            "Amortize over (units)", min_value=0, value=int(state.amortization_qty), step=50, key=f"amort_{v}"
        )
        if amort_qty != state.amortization_qty:
            state = set_amortization_qty(state, amort_qty)

    with st.expander("Production", expanded=True):
        batch = st.number_input("Batch size (units)", min_value=0, value=int(state.batch_size), step=1, key=f"batch_{v}")
        if batch != state.batch_size:
            state = set_batch_size(state, batch)

        st.caption(f"Waste: {state.waste_count} units (adjust in the efficiency panel)")

        for item in state.materials:
            c_name, c_cost, c_del = st.columns([5, 4, 1])
            calculated = is_calculated(item)
            name = c_name.text_input("Material", value=item.name, key=f"mat_name_{item.id}_{v}", label_visibility="collapsed")
            cost = c_cost.number_input(
                "Batch cost", min_value=0.0, value=float(item.cost), step=10.0,
                key=f"mat_cost_{item.id}_{v}_{item.cost}" if calculated else f"mat_cost_{item.id}_{v}",
                disabled=calculated,
                help="Calculated from details. Use 'Detailed input' to edit." if calculated else "Manual entry",
                label_visibility="collapsed",
            )
            if name != item.name:
                state = replace_materials(state, rename_material(state.materials, item.id, name))
            if not calculated and cost != item.cost:
                state = set_material_cost(state, item.id, cost)
            if c_del.button("✕", key=f"mat_del_{item.id}_{v}"):
                commit(replace_materials(state, remove_material(state.materials, item.id)))
                st.rerun()

        c_add, c_detail = st.columns(2)
        if c_add.button("Add material", key=f"mat_add_{v}"):
            commit(replace_materials(state, add_material(state.materials)))
            st.rerun()
        if c_detail.button("Detailed input", key=f"mat_detail_{v}"):
            commit(state)
            material_manager(state)

    with st.expander("Financials", expanded=True):
        price = st.number_input("Public price", min_value=0.0, value=float(state.public_price), step=1.0, key=f"price_{v}")
        if price != state.public_price:
            state = set_public_price(state, price)

        fixed = st.number_input(
            "Fixed monthly expenses", min_value=0.0, value=float(state.fixed_monthly_expenses), step=100.0, key=f"fixed_{v}"
        )
        if fixed != state.fixed_monthly_expenses:
            state = set_fixed_monthly_expenses(state, fixed)

        royalty_pct = st.number_input(
            "Designer royalty (%)", min_value=0.0, max_value=100.0,
            value=fraction_to_percent(state.designer_royalty_percent), step=0.5, key=f"royalty_{v}",
        )
        if royalty_pct != fraction_to_percent(state.designer_royalty_percent):
            state = set_royalty_percent(state, royalty_pct)

    c_clear, c_reset = st.columns(2)
    if c_clear.button("Clear all", use_container_width=True):
        logger.info("State cleared")
        reload_form(empty_state())
    if c_reset.button("Reset defaults", use_container_width=True):
        logger.info("State reset to defaults")
        reload_form(default_state())

commit(state)

# --- Computations ---
snap = compute_snapshot(state)
cogs = snap.cogs
eff = snap.efficiency
results = snap.scenarios
retail = scenario_by_id(results, "retail")

# --- Top cards ---
k1, k2, k3, k4 = st.columns(4)
k1.metric("Total development cost", fmt_money(cogs.total_dev_cost, 0))
k1.caption(f"Amortized over {state.amortization_qty:,} units: {fmt_money(cogs.amort_per_unit)} / unit")

k2.metric("True unit cost (COGS)", fmt_money(cogs.cogs))
k2.caption(f"Mat: {fmt_money(cogs.material_cost_per_unit)} · Amort: {fmt_money(cogs.amort_per_unit)}")
ratio = cogs.cogs / state.public_price if state.public_price > 0 else 0.0
k2.progress(min(1.0, max(0.0, ratio)))

k3.metric(
    "Retail break-even",
    "∞" if retail is None else retail.break_even_units.label("∞"),
)
k3.caption("Units/month to survive")

k4.metric("Direct ROI", fmt_pct(direct_roi(results)))
k4.caption("Return on production investment")

if eff.is_unprofitable:
    st.error(
        f"Unit cost {fmt_money(cogs.cogs)} is above the public price {fmt_money(state.public_price)}."
    )

col_eff, col_scen = st.columns([1, 2])

# --- Production efficiency ---
with col_eff:
    st.subheader("Production efficiency")
    band = yield_band(eff.yield_rate, eff.is_unprofitable)

    if eff.max_waste > 0:
        waste = st.slider(
            "Defective units in batch", 0, eff.max_waste, min(int(state.waste_count), eff.max_waste), key=f"waste_{v}"
        )
        if waste != state.waste_count:
            state = set_waste_count(state, waste)
            commit(state)
            st.rerun()
    else:
        st.caption("Batch too small to model waste.")

    e1, e2 = st.columns(2)
    e1.metric("Yield", fmt_pct(eff.yield_rate * 100.0))
    e2.metric("Sellable units", f"{eff.effective_units:,}")
    e1.metric("Cost multiplier", f"{eff.cost_increase_factor:.2f}×")
    e2.metric("Unit cost", fmt_money(eff.unit_cost))

    curve = waste_cost_curve(
        state.batch_size, cogs.total_batch_material_cost, cogs.amort_per_unit, state.public_price
    )
    if not curve.empty:
        fig_waste = go.Figure()
        fig_waste.add_trace(
            go.Scatter(
                x=curve["waste"], y=curve["cost"], mode="lines", fill="tozeroy",
                name="Unit cost", line={"color": BAND_COLOURS[band]},
            )
        )
        fig_waste.add_hline(y=state.public_price, line_dash="dash", annotation_text="Price")
        fig_waste.add_vline(x=state.waste_count, line_dash="dot")
        fig_waste.update_layout(height=280, xaxis_title="Waste (units)", yaxis_title="Unit cost")
        st.plotly_chart(fig_waste, use_container_width=True)

# --- Scenario analysis ---
with col_scen:
    st.subheader("Profitability by channel")
    df = scenario_frame(results)

    fig_profit = px.bar(
        df, x="Profit / unit", y="Channel", orientation="h", text_auto=".2f",
        color=df["Profitable"].map({True: "Profitable", False: "Loss"}),
        color_discrete_map={"Profitable": "#10b981", "Loss": "#ef4444"},
    )
    fig_profit.add_vline(x=0, line_color="#cbd5e1")
    fig_profit.update_layout(height=320, showlegend=False, yaxis_title="", yaxis={"autorange": "reversed"})
    st.plotly_chart(fig_profit, use_container_width=True)

    st.subheader("Survival table")
    table = pd.DataFrame(
        {
            "id": df["id"],
            "Channel": df["Channel"],
            "Description": df["Description"],
            "Discount (%)": [f"{fraction_to_percent(r.discount_percent):g}" for r in results],
            "Profit / unit": [fmt_money(r.profit) for r in results],
            "Break-even units": [r.break_even_units.label("FAIL") for r in results],
        }
    )
    edited = st.data_editor(
        table,
        hide_index=True,
        use_container_width=True,
        disabled=["Channel", "Description", "Profit / unit", "Break-even units"],
        column_config={"id": None, "Discount (%)": st.column_config.TextColumn("Discount (%)")},
        key=f"scenario_table_{v}",
    )

    changed = False
    for row, before in zip(edited.to_dict("records"), table.to_dict("records")):
        if row["Discount (%)"] != before["Discount (%)"]:
            state = set_scenario_discount(state, row["id"], row["Discount (%)"])
            changed = True
    if changed:
        reload_form(state)

    with st.expander("Detailed metrics"):
        details = df.drop(columns=["id"]).astype({"Break-even units": str})
        st.dataframe(details, use_container_width=True, hide_index=True)
