"""Conversion of exported item records into the internal label graph."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from labelforge._convert.shapes import shape_from_export
from labelforge.constants import TOOL_LIST, TOOL_LONG_LIST, TOOL_SWITCH
from labelforge.exceptions import (
    CategoryNotFoundError,
    ImportConversionError,
    ImproperFormattingError,
    UnknownAttributeError,
)
from labelforge.models import Item, ItemExport, Label, TaskStatus

if TYPE_CHECKING:
    from labelforge._convert.attribute_index import AttributeIndex
    from labelforge.models import Category, IndexedShape


def fill_item_defaults(raw: Mapping[str, object]) -> ItemExport:
    """Complete a raw item record from an items file.

    Absent and ``null`` fields take the ``ItemExport`` defaults: empty
    ``name``/``url``/``videoName``, no attributes or labels, ``timestamp``
    and ``index`` of -1.
    """
    present = {key: value for key, value in raw.items() if value is not None}
    try:
        return ItemExport.model_validate(present)
    except ValidationError as e:
        logger.debug(f"Invalid item record {raw!r}: {e}")
        raise ImproperFormattingError("Improper formatting for items file") from e


def get_max(values: Iterable[str | int], old_max: int) -> int:
    """Return the max of numeric *values* (ids stored as keys) and *old_max*."""
    numeric = [int(value) for value in values]
    current = max(numeric) if numeric else -1
    return max(current, old_max)


def resolve_category_path(names: list[str], categories: list[Category]) -> list[int]:
    """Convert a category name path into an index path through the tree.

    Raises
    ------
    CategoryNotFoundError
        When a name is not among the children at its depth.

    """
    path: list[int] = []
    level = categories
    for depth, name in enumerate(names):
        for index, category in enumerate(level):
            if category.name == name:
                path.append(index)
                level = category.subcategories
                break
        else:
            raise CategoryNotFoundError(names, name, depth)
    return path


def resolve_label_attributes(
    attributes: Mapping[str, list[str] | bool],
    attribute_index: AttributeIndex,
) -> dict[int, list[int]]:
    """Convert ``{attribute name: values | bool}`` to ``{index: value indices}``."""
    result: dict[int, list[int]] = {}
    for name, value in attributes.items():
        found = attribute_index.lookup(name)
        if found is None:
            raise UnknownAttributeError(name, list(attribute_index.name_map))
        attr_ind, attribute = found
        if attribute.tool_type == TOOL_SWITCH:
            result[attr_ind] = [1] if value is True else []
        elif attribute.tool_type in (TOOL_LIST, TOOL_LONG_LIST):
            indices: list[int] = []
            for item in value if isinstance(value, list) else []:
                value_ind = attribute_index.value_index(attr_ind, item)
                if value_ind is None:
                    logger.warning(
                        f"Skipping unknown value {item!r} of attribute {name!r}"
                    )
                    continue
                indices.append(value_ind)
            result[attr_ind] = indices
        else:
            logger.trace(f"Attribute {name!r} has no tool type; ignored")
    return result


def convert_item_to_import(
    item_export: ItemExport,
    item_index: int,
    item_id: int,
    attribute_index: AttributeIndex,
    categories: list[Category],
    order_start: int = 0,
) -> Item:
    """Build an internal ``Item`` from its export record.

    Parameters
    ----------
    item_index:
        Position of the item inside its task.
    item_id:
        Project-wide id (task start index + *item_index*).
    order_start:
        Number of labels already created in the task; label ``order``
        continues from it.

    Each shape gets the id of the label that owns it.

    """
    labels: dict[int, Label] = {}
    shapes: dict[int, IndexedShape] = {}
    for position, label_export in enumerate(item_export.labels):
        if label_export.id in labels:
            raise ImportConversionError(
                f"Duplicate label id {label_export.id} in item {item_export.url!r}"
            )
        label_type, indexed = shape_from_export(label_export, label_export.id)
        label_shapes: list[int] = []
        if indexed is not None:
            shapes[indexed.id] = indexed
            label_shapes.append(indexed.id)
        labels[label_export.id] = Label(
            id=label_export.id,
            item=item_index,
            type=label_type,
            category=resolve_category_path(label_export.category, categories),
            attributes=resolve_label_attributes(
                label_export.attributes, attribute_index
            ),
            shapes=label_shapes,
            manual=label_export.manual_shape,
            order=order_start + position,
        )
    return Item(
        id=item_id,
        index=item_index,
        url=item_export.url,
        labels=labels,
        shapes=shapes,
        timestamp=item_export.timestamp,
        video_name=item_export.video_name,
    )


def build_task_status(
    items: list[Item],
    track_ids: Iterable[int] = (),
    previous: TaskStatus | None = None,
) -> TaskStatus:
    """Fold label/shape/track ids of *items* into the task counters.

    Every counter is combined with *previous* by a plain maximum, so none
    of them ever decreases.  ``max_order`` is the number of labels in
    *items*.
    """
    status = previous or TaskStatus()
    max_label_id = status.max_label_id
    max_shape_id = status.max_shape_id
    label_count = 0
    for item in items:
        max_label_id = get_max(item.labels.keys(), max_label_id)
        max_shape_id = get_max(item.shapes.keys(), max_shape_id)
        label_count += len(item.labels)
    return TaskStatus(
        max_label_id=max_label_id,
        max_shape_id=max_shape_id,
        max_order=max(label_count, status.max_order),
        max_track_id=get_max(track_ids, status.max_track_id),
    )
