"""Pydantic models for projects, tasks and the internal label graph.

Every model serializes with camelCase keys (``videoName``, ``maxLabelId``)
so persisted documents keep the wire format consumed by the labeling
frontend.  Python code uses the snake_case attribute names; both spellings
are accepted on input.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from labelforge.constants import AttributeToolType  # noqa: TC001


class WireModel(BaseModel):
    """Base model with camelCase aliases for (de)serialization."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        """Dump as a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Serialize as the indented JSON document stored by the backend."""
        return self.model_dump_json(by_alias=True, indent=2)


def _scalar_to_str(v: object) -> object:
    """Return the text of a YAML bool or number; other values unchanged."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (int, float)):
        return str(v)
    return v


def _text_fields(v: object) -> object:
    """Coerce a scalar, or every entry of a list, to text."""
    if isinstance(v, list):
        return [_scalar_to_str(entry) for entry in v]
    return _scalar_to_str(v)


def _attribute_value_lists(v: object) -> object:
    """Coerce list entries of ``{name: values}`` to text; switch bools stay."""
    if not isinstance(v, dict):
        return v
    return {
        str(name): [_scalar_to_str(e) for e in value]
        if isinstance(value, list)
        else value
        for name, value in v.items()
    }


# ------------------------------------------------------------------
# Project configuration
# ------------------------------------------------------------------


class Attribute(WireModel):
    """Label attribute definition; identified by its position in the config."""

    model_config = ConfigDict(frozen=True)

    tool_type: AttributeToolType
    name: str
    values: list[str] = []
    tag_text: str = ""
    tag_prefix: str = ""
    tag_suffixes: list[str] = []
    button_colors: list[str] = []

    validate_text = field_validator(
        "name",
        "values",
        "tag_text",
        "tag_prefix",
        "tag_suffixes",
        "button_colors",
        mode="before",
    )(_text_fields)


class Category(WireModel):
    """Node of the category tree."""

    model_config = ConfigDict(frozen=True)

    name: str
    subcategories: list[Category] = []

    validate_name = field_validator("name", mode="before")(_text_fields)


class ProjectConfig(WireModel):
    """Settings shared by a project and snapshotted into each of its tasks."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    item_type: str
    label_types: list[str]
    policy_types: list[str] = []
    task_size: int
    tracking: bool = False
    handler_url: str
    page_title: str = ""
    instruction_page: str = ""
    bundle_file: str
    categories: list[Category] = []
    attributes: list[Attribute] = []
    task_id: str = ""
    submit_time: int = -1
    demo_mode: bool = False
    submitted: bool = False
    autosave: bool = True


# ------------------------------------------------------------------
# Geometry payloads (shared by internal shapes and the export schema)
# ------------------------------------------------------------------


class Rect(WireModel):
    """Axis-aligned box by its upper-left and lower-right corners."""

    x1: float
    y1: float
    x2: float
    y2: float


class PathPoint2D(WireModel):
    """Polygon control point; ``type`` is ``vertex`` or ``bezier``."""

    x: float
    y: float
    type: str = "vertex"


class Polygon(WireModel):
    """Ordered list of control points."""

    points: list[PathPoint2D]


class Vector3(WireModel):
    x: float
    y: float
    z: float


class Cube(WireModel):
    """3D cuboid."""

    center: Vector3
    size: Vector3
    orientation: Vector3
    anchor_index: int = 0
    surface_id: int = -1


# ------------------------------------------------------------------
# Export schema
# ------------------------------------------------------------------


class LabelExport(WireModel):
    """Portable label: names instead of indices, at most one shape."""

    id: int
    category: list[str] = []
    attributes: dict[str, list[str] | bool] = {}
    manual_shape: bool = True
    box2d: Rect | None = None
    poly2d: Polygon | None = None
    box3d: Cube | None = None

    validate_category = field_validator("category", mode="before")(_text_fields)
    validate_attributes = field_validator("attributes", mode="before")(
        _attribute_value_lists
    )

    @model_validator(mode="after")
    def _check_single_shape(self) -> LabelExport:
        populated = [
            name
            for name, value in (
                ("box2d", self.box2d),
                ("poly2d", self.poly2d),
                ("box3d", self.box3d),
            )
            if value is not None
        ]
        if len(populated) > 1:
            msg = f"label {self.id} has more than one shape: {', '.join(populated)}"
            raise ValueError(msg)
        return self


class ItemExport(WireModel):
    """Portable item record as found in item files and dataset exports."""

    name: str = ""
    url: str = ""
    video_name: str = ""
    attributes: dict[str, list[str]] = {}
    timestamp: int | float = -1
    index: int = -1
    labels: list[LabelExport] = []

    validate_text = field_validator("name", "url", "video_name", mode="before")(
        _text_fields
    )
    validate_attributes = field_validator("attributes", mode="before")(
        _attribute_value_lists
    )


# ------------------------------------------------------------------
# Internal shapes
# ------------------------------------------------------------------


class _IndexedShapeBase(WireModel):
    id: int
    label: list[int]


class IndexedRect(_IndexedShapeBase):
    """Rectangle shape stored on an item."""

    type: Literal["rect"] = "rect"
    shape: Rect


class IndexedPolygon(_IndexedShapeBase):
    """Polygon shape stored on an item."""

    type: Literal["polygon2d"] = "polygon2d"
    shape: Polygon


class IndexedCube(_IndexedShapeBase):
    """Cuboid shape stored on an item."""

    type: Literal["cube"] = "cube"
    shape: Cube


IndexedShape = Annotated[
    IndexedRect | IndexedPolygon | IndexedCube,
    Discriminator("type"),
]
"""Discriminated union over shape kinds, keyed by ``type``."""


# ------------------------------------------------------------------
# Labels, items, tasks
# ------------------------------------------------------------------


class Label(WireModel):
    """A label on an item, referencing its shapes by id."""

    id: int
    item: int
    type: str
    category: list[int] = []
    attributes: dict[int, list[int]] = {}
    parent: int = -1
    children: list[int] = []
    shapes: list[int] = []
    track: int = -1
    order: int = 0
    manual: bool = True


class Item(WireModel):
    """An image or frame within a task."""

    id: int
    index: int
    url: str
    labels: dict[int, Label] = {}
    shapes: dict[int, IndexedShape] = {}
    timestamp: int | float | None = None
    video_name: str = ""


class Track(WireModel):
    """Labels of one object across items: ``{item index: label id}``."""

    id: int
    labels: dict[int, int] = {}


class TaskStatus(WireModel):
    """High-water marks used to allocate new ids without collision."""

    max_label_id: int = -1
    max_shape_id: int = -1
    max_order: int = 0
    max_track_id: int = -1


class Task(WireModel):
    """Unit of annotation work: config snapshot, counters and items."""

    config: ProjectConfig
    status: TaskStatus = Field(default_factory=TaskStatus)
    items: list[Item] = []
    tracks: dict[int, Track] = {}


class Project(WireModel):
    """Unpartitioned project: shared config plus every imported item."""

    config: ProjectConfig
    items: list[ItemExport]


# ------------------------------------------------------------------
# Creation input
# ------------------------------------------------------------------


class CreationForm(WireModel):
    """Validated project creation form."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    item_type: str
    label_type: str
    page_title: str = ""
    task_size: int
    instructions: str = ""
    demo_mode: bool = False


class FormFileData(WireModel):
    """Parsed contents of the uploaded (or defaulted) definition files."""

    items: list[ItemExport]
    attributes: list[Attribute]
    categories: list[Category]
