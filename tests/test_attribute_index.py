"""Tests for attribute name/value lookup tables."""

from __future__ import annotations

from labelforge._convert.attribute_index import build_attribute_index
from labelforge._convert.importer import resolve_label_attributes
from labelforge.models import Attribute
from tests.conftest import sample_attributes


def test_name_map_points_to_config_position() -> None:
    """Each attribute name maps to its index and definition."""
    attributes = sample_attributes()
    index = build_attribute_index(attributes)

    assert index.lookup("Occluded") == (0, attributes[0])
    assert index.lookup("Weather") == (2, attributes[2])
    assert index.lookup("Nope") is None


def test_switch_attributes_have_no_value_map() -> None:
    """Only list-like attributes get value lookups."""
    index = build_attribute_index(sample_attributes())

    assert 0 not in index.value_map
    assert set(index.value_map) == {1, 2}


def test_shared_value_resolves_per_attribute() -> None:
    """A value shared by two attributes resolves to each one's own position."""
    index = build_attribute_index(sample_attributes())

    assert index.value_index(1, "NA") == 0
    assert index.value_index(2, "NA") == 1
    assert index.value_index(1, "sunny") is None


def test_flat_value_map_last_writer_wins() -> None:
    """The single-level map keeps only the last list attribute's position."""
    index = build_attribute_index(sample_attributes())

    assert index.flat_value_map["NA"] == 1
    assert index.flat_value_map["G"] == 1
    assert index.flat_value_map["sunny"] == 0


def test_resolution_ignores_flat_value_map() -> None:
    """Shared values resolve per attribute even if the flat map disagrees."""
    index = build_attribute_index(sample_attributes())
    index.flat_value_map.clear()

    resolved = resolve_label_attributes(
        {"Traffic Light Color": ["NA"], "Weather": ["NA"]}, index
    )

    assert resolved == {1: [0], 2: [1]}


def test_long_list_values_resolve() -> None:
    """longList attributes resolve through the nested map only."""
    attributes = [Attribute(tool_type="longList", name="Make", values=["bmw", "vw"])]
    index = build_attribute_index(attributes)

    assert index.value_index(0, "vw") == 1
    assert index.flat_value_map == {}


def test_empty_attribute_list() -> None:
    """No attributes, empty tables."""
    index = build_attribute_index([])

    assert index.name_map == {}
    assert index.value_map == {}
