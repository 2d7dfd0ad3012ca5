"""Ordering of content sections. Positions are always rewritten as 0..n-1."""
from __future__ import annotations

from typing import Any, Sequence, TypeVar

from careerpage.services.gateway import TableGateway

T = TypeVar("T")

DIRECTIONS = ("up", "down")


def move_item(items: Sequence[T], index: int, direction: str) -> list[T]:
    """Swap items[index] with its neighbour; moving past either end is a no-op."""
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS}")
    reordered = list(items)
    target = index - 1 if direction == "up" else index + 1
    if not (0 <= index < len(reordered)) or not (0 <= target < len(reordered)):
        return reordered
    reordered[index], reordered[target] = reordered[target], reordered[index]
    return reordered


def dense_positions(sections: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{**section, "position": idx} for idx, section in enumerate(sections)]


def load_sections(table: TableGateway, company_id: str) -> list[dict[str, Any]]:
    return table.select("*").filter("company_id", company_id).order("position").execute().unwrap()


def write_positions(table: TableGateway, sections: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Persist a dense ordering, touching only rows whose position changed."""
    ordered = dense_positions(sections)
    for before, after in zip(sections, ordered):
        if before.get("position") != after["position"]:
            table.update(after["id"], {"position": after["position"]}).unwrap()
    return ordered


def move_section(table: TableGateway, company_id: str, section_id: str, direction: str) -> list[dict[str, Any]]:
    sections = load_sections(table, company_id)
    index = next((i for i, s in enumerate(sections) if s["id"] == section_id), None)
    if index is None:
        raise LookupError(section_id)
    return write_positions(table, move_item(sections, index, direction))
