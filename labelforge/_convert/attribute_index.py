"""Lookup tables from attribute names and values to config indices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from labelforge.constants import TOOL_LIST, TOOL_LONG_LIST

if TYPE_CHECKING:
    from labelforge.models import Attribute


@dataclass
class AttributeIndex:
    """Name and value lookups built once per project.

    ``value_map`` is keyed by attribute index first, so two attributes that
    share a value string (e.g. ``"NA"``) resolve independently.

    ``flat_value_map`` is kept only to document how the old single-level
    map behaved: every ``list`` attribute wrote its value positions into the
    same dict, so a later attribute overwrote an earlier one on a shared
    value string.  No import or export code reads it; lookups go through
    ``lookup`` and ``value_index``.
    """

    name_map: dict[str, tuple[int, Attribute]] = field(default_factory=dict)
    value_map: dict[int, dict[str, int]] = field(default_factory=dict)
    flat_value_map: dict[str, int] = field(default_factory=dict)

    def lookup(self, name: str) -> tuple[int, Attribute] | None:
        """Return ``(index, attribute)`` for *name*, or None if undefined."""
        return self.name_map.get(name)

    def value_index(self, attribute_index: int, value: str) -> int | None:
        """Return the position of *value* within one attribute's values."""
        return self.value_map.get(attribute_index, {}).get(value)


def build_attribute_index(attributes: list[Attribute]) -> AttributeIndex:
    """Build name and value lookups for the config attribute list."""
    index = AttributeIndex()
    for attr_ind, attribute in enumerate(attributes):
        index.name_map[attribute.name] = (attr_ind, attribute)
        if attribute.tool_type in (TOOL_LIST, TOOL_LONG_LIST):
            index.value_map[attr_ind] = {
                value: value_ind for value_ind, value in enumerate(attribute.values)
            }
        if attribute.tool_type == TOOL_LIST:
            for value_ind, value in enumerate(attribute.values):
                index.flat_value_map[value] = value_ind
    logger.debug(
        f"Attribute index: {len(index.name_map)} names, "
        f"{len(index.value_map)} value lists"
    )
    return index
