from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Sequence, Tuple

from costmodel.parsing import parse_number_or_zero
from costmodel.state import MaterialItem, next_id

logger = logging.getLogger(__name__)

DETAIL_FIELDS = ("qty_per_unit", "buffer_units", "unit_cost")
TEXT_FIELDS = ("name", "notes")


class MaterialMode(str, Enum):
    MANUAL = "manual"
    CALCULATED = "calculated"


def material_mode(item: MaterialItem) -> MaterialMode:
    """
    An item is CALCULATED once it has a quantity or a unit cost.

    qty_per_unit == 0 and unit_cost == 0 is MANUAL even when buffer_units > 0;
    every mutation path goes through here, so the mode changes only when
    qty_per_unit or unit_cost do.
    """
    if item.unit_cost > 0 or item.qty_per_unit > 0:
        return MaterialMode.CALCULATED
    return MaterialMode.MANUAL


def is_calculated(item: MaterialItem) -> bool:
    return material_mode(item) is MaterialMode.CALCULATED


def calculated_cost(item: MaterialItem, batch_size: float) -> float:
    return (item.qty_per_unit * batch_size + item.buffer_units) * item.unit_cost


def recalculate_on_batch_change(
    materials: Sequence[MaterialItem], new_batch_size: int
) -> Tuple[MaterialItem, ...]:
    out = []
    for m in materials:
        if is_calculated(m):
            m = replace(m, cost=calculated_cost(m, new_batch_size))
        out.append(m)
    logger.debug("Recalculated %d materials for batch size %s", len(out), new_batch_size)
    return tuple(out)


def update_detail_field(
    materials: Sequence[MaterialItem],
    item_id: str,
    field: str,
    value: Any,
    batch_size: int,
) -> Tuple[MaterialItem, ...]:
    """
    Edit one field of one item as the detailed editor does.

    batch_size is the editor's own parameter, not necessarily the live one.
    """
    if field not in DETAIL_FIELDS and field not in TEXT_FIELDS:
        raise ValueError(f"unknown material field: {field}")

    out = []
    for m in materials:
        if m.id == item_id:
            if field in DETAIL_FIELDS:
                was_calculated = is_calculated(m)
                m = replace(m, **{field: parse_number_or_zero(value)})
                # a manual lump sum survives buffer edits; leaving calculated mode zeroes it
                if was_calculated or is_calculated(m):
                    m = replace(m, cost=calculated_cost(m, batch_size))
            else:
                m = replace(m, **{field: "" if value is None else str(value)})
        out.append(m)
    return tuple(out)


def set_manual_cost(
    materials: Sequence[MaterialItem], item_id: str, amount: Any
) -> Tuple[MaterialItem, ...]:
    out = []
    for m in materials:
        if m.id == item_id:
            if is_calculated(m):
                logger.info("Ignoring direct cost edit on calculated material %r", m.name)
            else:
                m = replace(m, cost=parse_number_or_zero(amount))
        out.append(m)
    return tuple(out)


def add_material(materials: Sequence[MaterialItem], name: str = "New Material") -> Tuple[MaterialItem, ...]:
    new_item = MaterialItem(id=next_id(m.id for m in materials), name=name)
    return tuple(materials) + (new_item,)


def remove_material(materials: Sequence[MaterialItem], item_id: str) -> Tuple[MaterialItem, ...]:
    return tuple(m for m in materials if m.id != item_id)


def rename_material(materials: Sequence[MaterialItem], item_id: str, name: str) -> Tuple[MaterialItem, ...]:
    return tuple(replace(m, name=name) if m.id == item_id else m for m in materials)


def total_batch_material_cost(materials: Sequence[MaterialItem]) -> float:
    return float(sum(m.cost for m in materials))


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and value != value):
        return ""
    return str(value)


def apply_editor_rows(
    materials: Sequence[MaterialItem],
    rows: Sequence[dict],
    batch_size: int,
) -> Tuple[MaterialItem, ...]:
    """
    Fold the detailed editor's table back into a material sequence.

    Rows without a known id become new items; items missing from rows are
    dropped. Field changes go through update_detail_field / set_manual_cost so
    the mode policy is applied exactly as for single-field edits.
    """
    current = tuple(materials)
    order = []

    for row in rows:
        item_id = _text(row.get("id")).strip()
        if not item_id or all(m.id != item_id for m in current):
            item_id = next_id([m.id for m in current] + order)
            current = current + (MaterialItem(id=item_id, name=""),)

        item = next(m for m in current if m.id == item_id)
        for field in TEXT_FIELDS:
            if field in row and _text(row[field]) != getattr(item, field):
                current = update_detail_field(current, item_id, field, _text(row[field]), batch_size)
        for field in DETAIL_FIELDS:
            if field in row and parse_number_or_zero(row[field]) != getattr(item, field):
                current = update_detail_field(current, item_id, field, row[field], batch_size)
        # the cost cell only counts as a lump-sum edit on a row that was and stays manual
        edited = next(m for m in current if m.id == item_id)
        if (
            "cost" in row
            and not is_calculated(item)
            and not is_calculated(edited)
            and parse_number_or_zero(row["cost"]) != item.cost
        ):
            current = set_manual_cost(current, item_id, row["cost"])
        order.append(item_id)

    by_id = {m.id: m for m in current}
    return tuple(by_id[i] for i in order)
