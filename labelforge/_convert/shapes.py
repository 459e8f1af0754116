"""Mapping between label types, internal shapes and export shape fields.

Each supported label type owns exactly one shape kind and one export
field.  Both conversion directions go through ``_SHAPE_KINDS`` so a label
type without an entry is rejected instead of silently exported without its
shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from labelforge.constants import (
    LABEL_BOX_2D,
    LABEL_BOX_3D,
    LABEL_EMPTY,
    LABEL_POLYGON_2D,
    LABEL_TAG,
    SHAPE_CUBE,
    SHAPE_POLYGON_2D,
    SHAPE_RECT,
    ShapeTypeName,
)
from labelforge.exceptions import UnsupportedLabelTypeError
from labelforge.models import IndexedCube, IndexedPolygon, IndexedRect

if TYPE_CHECKING:
    from labelforge.models import Cube, IndexedShape, LabelExport, Polygon, Rect

# Label types that never carry a shape.
SHAPELESS_LABEL_TYPES = frozenset({LABEL_TAG, LABEL_EMPTY})


@dataclass(frozen=True, slots=True)
class ShapeKind:
    """One row of the label type <-> shape <-> export field table."""

    label_type: str
    shape_type: ShapeTypeName
    export_field: str
    indexed_cls: type[IndexedRect] | type[IndexedPolygon] | type[IndexedCube]


_SHAPE_KINDS: tuple[ShapeKind, ...] = (
    ShapeKind(LABEL_BOX_2D, SHAPE_RECT, "box2d", IndexedRect),
    ShapeKind(LABEL_POLYGON_2D, SHAPE_POLYGON_2D, "poly2d", IndexedPolygon),
    ShapeKind(LABEL_BOX_3D, SHAPE_CUBE, "box3d", IndexedCube),
)

_BY_LABEL_TYPE = {kind.label_type: kind for kind in _SHAPE_KINDS}


def kind_for_label_type(label_type: str) -> ShapeKind:
    """Return the shape kind of *label_type*.

    Raises
    ------
    UnsupportedLabelTypeError
        When *label_type* has no shape mapping.

    """
    kind = _BY_LABEL_TYPE.get(label_type)
    if kind is None:
        supported = ", ".join(sorted(_BY_LABEL_TYPE))
        raise UnsupportedLabelTypeError(
            f"Label type {label_type!r} has no export shape "
            f"(supported: {supported})."
        )
    return kind


def shape_from_export(
    label_export: LabelExport,
    shape_id: int,
) -> tuple[str, IndexedShape | None]:
    """Return ``(label_type, indexed_shape)`` for an exported label.

    The populated export field selects the label type; a label without any
    shape becomes a tag label and gets no shape.
    """
    payloads = {
        "box2d": label_export.box2d,
        "poly2d": label_export.poly2d,
        "box3d": label_export.box3d,
    }
    for kind in _SHAPE_KINDS:
        payload = payloads[kind.export_field]
        if payload is not None:
            indexed = kind.indexed_cls(
                id=shape_id,
                label=[label_export.id],
                shape=payload,
            )
            return kind.label_type, indexed
    return LABEL_TAG, None


def shape_to_export(
    label_type: str,
    indexed: IndexedShape,
) -> tuple[str, Rect | Polygon | Cube]:
    """Return ``(export_field, payload)`` for a label's stored shape.

    Raises
    ------
    UnsupportedLabelTypeError
        When the label type is unknown or disagrees with the stored shape.

    """
    kind = kind_for_label_type(label_type)
    if indexed.type != kind.shape_type:
        raise UnsupportedLabelTypeError(
            f"Label type {label_type!r} expects a {kind.shape_type!r} shape, "
            f"got {indexed.type!r} (shape id {indexed.id})."
        )
    return kind.export_field, indexed.shape
