"""Conversion of internal items into the portable export schema."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from labelforge._convert.shapes import SHAPELESS_LABEL_TYPES, shape_to_export
from labelforge.constants import TOOL_LIST, TOOL_LONG_LIST, TOOL_SWITCH
from labelforge.exceptions import ExportConversionError
from labelforge.models import ItemExport, LabelExport

if TYPE_CHECKING:
    from labelforge.models import (
        Attribute,
        Category,
        Item,
        Label,
        ProjectConfig,
        Task,
    )


def category_names(category_ids: list[int], categories: list[Category]) -> list[str]:
    """Convert a category index path back to the names at each depth.

    Raises
    ------
    ExportConversionError
        If an index is outside the categories available at its depth.

    """
    names: list[str] = []
    level = categories
    for depth, category_id in enumerate(category_ids):
        if not 0 <= category_id < len(level):
            raise ExportConversionError(
                f"category index {category_id} at depth {depth} is out of range "
                f"({len(level)} categories)"
            )
        names.append(level[category_id].name)
        level = level[category_id].subcategories
    return names


def export_label_attributes(
    label_attributes: dict[int, list[int]],
    attributes: list[Attribute],
) -> dict[str, list[str] | bool]:
    """Convert ``{index: value indices}`` to ``{name: values | bool}``.

    List attributes keep only indices present in the value list; switch
    attributes are true iff the first value index is 1.  An attribute index
    outside the config raises ``ExportConversionError``.
    """
    exported: dict[str, list[str] | bool] = {}
    for attr_ind, value_indices in label_attributes.items():
        if not 0 <= attr_ind < len(attributes):
            raise ExportConversionError(
                f"attribute index {attr_ind} is out of range "
                f"({len(attributes)} attributes)"
            )
        attribute = attributes[attr_ind]
        if attribute.tool_type in (TOOL_LIST, TOOL_LONG_LIST):
            exported[attribute.name] = [
                attribute.values[value_ind]
                for value_ind in value_indices
                if 0 <= value_ind < len(attribute.values)
            ]
        elif attribute.tool_type == TOOL_SWITCH:
            exported[attribute.name] = bool(value_indices) and value_indices[0] == 1
    return exported


def convert_label_to_export(
    config: ProjectConfig,
    item: Item,
    label: Label,
) -> LabelExport:
    """Convert one label; only its first shape is exported.

    Raises
    ------
    ExportConversionError
        When a category, attribute or shape reference of the label does not
        resolve.  The message names the label and its item.

    """
    try:
        label_export = LabelExport(
            id=label.id,
            category=category_names(label.category, config.categories),
            attributes=export_label_attributes(label.attributes, config.attributes),
            manual_shape=label.manual,
        )
    except ExportConversionError as e:
        raise ExportConversionError(
            f"Label {label.id} of item {item.url!r}: {e}"
        ) from e
    if not label.shapes or label.type in SHAPELESS_LABEL_TYPES:
        return label_export
    if len(label.shapes) > 1:
        logger.debug(
            f"Label {label.id} has {len(label.shapes)} shapes; "
            f"exporting shape {label.shapes[0]} only"
        )
    shape = item.shapes.get(label.shapes[0])
    if shape is None:
        raise ExportConversionError(
            f"Label {label.id} of item {item.url!r}: "
            f"shape {label.shapes[0]} is not stored on the item"
        )
    export_field, payload = shape_to_export(label.type, shape)
    return label_export.model_copy(update={export_field: payload})


def convert_item_to_export(config: ProjectConfig, item: Item) -> ItemExport:
    """Convert an internal item to its export record.

    ``index`` is the project-wide item id, not the task-relative index.
    """
    return ItemExport(
        name=item.url,
        url=item.url,
        video_name=item.video_name,
        timestamp=item.timestamp if item.timestamp is not None else -1,
        index=item.id,
        labels=[
            convert_label_to_export(config, item, label)
            for label in item.labels.values()
        ],
    )


def convert_task_to_export(task: Task) -> list[ItemExport]:
    """Convert every item of *task*, in task order."""
    return [convert_item_to_export(task.config, item) for item in task.items]
