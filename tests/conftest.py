"""Shared pytest fixtures and helpers for labelforge tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import yaml

from labelforge.constants import (
    FIELD_DEMO_MODE,
    FIELD_INSTRUCTIONS_URL,
    FIELD_ITEM_TYPE,
    FIELD_LABEL_TYPE,
    FIELD_PAGE_TITLE,
    FIELD_PROJECT_NAME,
    FIELD_TASK_SIZE,
    FILE_ATTRIBUTES,
    FILE_CATEGORIES,
    FILE_ITEMS,
    ITEM_IMAGE,
    LABEL_BOX_2D,
)
from labelforge.models import Attribute, Category, ItemExport, LabelExport, Rect
from tests.fixtures.fake_storage import FakeStorage

if TYPE_CHECKING:
    from pathlib import Path


_LABELFORGE_ENV_VARS = (
    "LABELFORGE_STORAGE_DIR",
    "LABELFORGE_LOG_LEVEL",
    "LABELFORGE_CONFIG",
    "LABELFORGE_NO_INTERACTIVE",
)


@pytest.fixture(autouse=True)
def _clean_labelforge_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of every test."""
    for var in _LABELFORGE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def storage() -> FakeStorage:
    """Empty in-memory storage."""
    return FakeStorage()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def sample_attributes() -> list[Attribute]:
    """Switch attribute plus two list attributes that share the value "NA"."""
    return [
        Attribute(tool_type="switch", name="Occluded", tag_text="o"),
        Attribute(
            tool_type="list",
            name="Traffic Light Color",
            values=["NA", "G", "Y", "R"],
            tag_prefix="t",
            tag_suffixes=["", "g", "y", "r"],
            button_colors=["white", "green", "yellow", "red"],
        ),
        Attribute(tool_type="list", name="Weather", values=["sunny", "NA"]),
    ]


def sample_categories() -> list[Category]:
    """Two-level category tree."""
    return [
        Category(name="person"),
        Category(
            name="vehicle",
            subcategories=[
                Category(name="car"),
                Category(
                    name="truck",
                    subcategories=[Category(name="pickup"), Category(name="van")],
                ),
            ],
        ),
    ]


def make_box_label(label_id: int, **overrides: object) -> LabelExport:
    """Create a box2d LabelExport with sensible defaults."""
    defaults: dict[str, object] = {
        "id": label_id,
        "category": ["vehicle", "car"],
        "attributes": {"Occluded": True, "Traffic Light Color": ["G"]},
        "box2d": Rect(x1=10.0, y1=20.0, x2=110.0, y2=220.0),
    }
    defaults.update(overrides)
    return LabelExport(**defaults)  # type: ignore[arg-type]


def sample_items(count: int = 10) -> list[ItemExport]:
    """Items in video ``a`` (first three) and ``b`` (the rest), interleaved.

    Frames are listed ``b, a, b, a, b, a, b, ...`` so sorting by video name
    has to move items.  Every item carries one box label whose id is unique
    across the whole list.
    """
    video_names = ["b", "a"] * 3 + ["b"] * (count - 6)
    return [
        ItemExport(
            name=f"frame-{i:03d}.jpg",
            url=f"https://example.com/frame-{i:03d}.jpg",
            video_name=video_names[i],
            timestamp=i,
            labels=[make_box_label(100 + i)],
        )
        for i in range(count)
    ]


def make_fields(**overrides: str) -> dict[str, str]:
    """Creation form fields for a valid image/box2d project."""
    fields = {
        FIELD_PROJECT_NAME: "street scenes",
        FIELD_ITEM_TYPE: ITEM_IMAGE,
        FIELD_LABEL_TYPE: LABEL_BOX_2D,
        FIELD_TASK_SIZE: "5",
        FIELD_PAGE_TITLE: "Street scenes",
        FIELD_INSTRUCTIONS_URL: "https://example.com/instructions",
        FIELD_DEMO_MODE: "false",
    }
    fields.update(overrides)
    return fields


def write_items_file(path: Path, items: list[ItemExport]) -> Path:
    """Write *items* as an items YAML file and return *path*."""
    data = [item.to_wire() for item in items]
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def write_test_config(
    path: Path,
    *,
    storage_dir: str | None = None,
    log_level: str | None = None,
) -> None:
    """Write a minimal config YAML for testing."""
    section: dict[str, str] = {}
    if storage_dir is not None:
        section["storage_dir"] = storage_dir
    if log_level is not None:
        section["log_level"] = log_level
    path.write_text(yaml.safe_dump({"labelforge": section}), encoding="utf-8")


def write_upload(
    directory: Path,
    items: list[ItemExport] | None = None,
) -> dict[str, Path | None]:
    """Write items, attributes and categories files; return the upload map."""
    attributes = directory / "attributes.yaml"
    attributes.write_text(
        yaml.safe_dump([a.to_wire() for a in sample_attributes()], sort_keys=False),
        encoding="utf-8",
    )
    categories = directory / "categories.yaml"
    categories.write_text(
        yaml.safe_dump([c.to_wire() for c in sample_categories()], sort_keys=False),
        encoding="utf-8",
    )
    return {
        FILE_ITEMS: write_items_file(
            directory / "items.yaml",
            sample_items() if items is None else items,
        ),
        FILE_ATTRIBUTES: attributes,
        FILE_CATEGORIES: categories,
    }
