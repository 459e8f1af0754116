"""Internal helpers for converting between export records and task items."""

from labelforge._convert.attribute_index import AttributeIndex, build_attribute_index
from labelforge._convert.exporter import (
    category_names,
    convert_item_to_export,
    convert_label_to_export,
    convert_task_to_export,
    export_label_attributes,
)
from labelforge._convert.importer import (
    build_task_status,
    convert_item_to_import,
    fill_item_defaults,
    get_max,
    resolve_category_path,
    resolve_label_attributes,
)
from labelforge._convert.shapes import kind_for_label_type

__all__ = [
    "AttributeIndex",
    "build_attribute_index",
    "build_task_status",
    "category_names",
    "convert_item_to_export",
    "convert_item_to_import",
    "convert_label_to_export",
    "convert_task_to_export",
    "export_label_attributes",
    "fill_item_defaults",
    "get_max",
    "kind_for_label_type",
    "resolve_category_path",
    "resolve_label_attributes",
]
