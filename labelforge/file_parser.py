"""Parsing of uploaded item, attribute and category files.

Attribute and category files are optional: when absent, label-type specific
defaults from the bundled presets are used.  The items file is mandatory.
"""

from __future__ import annotations

import asyncio
import importlib.resources
import re
from typing import TYPE_CHECKING, TypeVar

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

from labelforge._convert.importer import fill_item_defaults
from labelforge.constants import (
    FILE_ATTRIBUTES,
    FILE_CATEGORIES,
    FILE_ITEMS,
    LABEL_BOX_2D,
    LABEL_BOX_3D,
    LABEL_POLYLINE_2D,
)
from labelforge.exceptions import ImproperFormattingError, MissingItemsFileError
from labelforge.models import Attribute, Category, FormFileData, ItemExport

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

_M = TypeVar("_M", bound=BaseModel)

_DEFAULT_CATEGORY_PRESETS: dict[str, str] = {
    LABEL_BOX_2D: "box_categories.yaml",
    LABEL_BOX_3D: "box_categories.yaml",
    LABEL_POLYLINE_2D: "polyline2d_categories.yaml",
}
_DEFAULT_ATTRIBUTE_PRESETS: dict[str, str] = {
    LABEL_BOX_2D: "box2d_attributes.yaml",
}
_FALLBACK_ATTRIBUTE_PRESET = "dummy_attributes.yaml"


_BOOL_TAG = "tag:yaml.org,2002:bool"
_INT_TAG = "tag:yaml.org,2002:int"


class _UploadLoader(yaml.SafeLoader):
    """SafeLoader where only true/false are booleans and 0-padded numbers are text.

    Annotators write category and value names such as ``on``, ``no`` or
    ``0001`` unquoted; YAML 1.1 would turn them into bools and ints.
    """


_UploadLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag not in (_BOOL_TAG, _INT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_UploadLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
_UploadLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$"),
    list("-+0123456789"),
)


def upload_exists(path: Path) -> bool:
    """Return True when *path* points to a non-empty file."""
    return path.is_file() and path.stat().st_size > 0


def _load_preset(name: str) -> object:
    ref = importlib.resources.files("labelforge.presets").joinpath(name)
    text = ref.read_text(encoding="utf-8")
    return yaml.load(text, Loader=_UploadLoader)  # noqa: S506


def _parse_model_list(data: object, model: type[_M], what: str) -> list[_M]:
    """Validate a YAML list of mappings into *model* instances."""
    if not isinstance(data, list):
        raise ImproperFormattingError(f"Improper formatting for {what} file")
    try:
        return [model.model_validate(entry) for entry in data]
    except ValidationError as e:
        logger.debug(f"Invalid {what} file content: {e}")
        raise ImproperFormattingError(f"Improper formatting for {what} file") from e


def _load_yaml(text: str, what: str) -> object:
    try:
        return yaml.load(text, Loader=_UploadLoader)  # noqa: S506
    except yaml.YAMLError as e:
        logger.debug(f"YAML error in {what} file: {e}")
        raise ImproperFormattingError(f"Improper formatting for {what} file") from e


async def _read_text(path: Path) -> str:
    return await asyncio.to_thread(path.read_text, encoding="utf-8")


def default_categories(label_type: str) -> list[Category]:
    """Return the default category tree for *label_type* (may be empty)."""
    preset = _DEFAULT_CATEGORY_PRESETS.get(label_type)
    if preset is None:
        return []
    return _parse_model_list(_load_preset(preset), Category, "categories")


def default_attributes(label_type: str) -> list[Attribute]:
    """Return the default attributes for *label_type*."""
    preset = _DEFAULT_ATTRIBUTE_PRESETS.get(label_type, _FALLBACK_ATTRIBUTE_PRESET)
    return _parse_model_list(_load_preset(preset), Attribute, "attributes")


def parse_items_text(text: str) -> list[ItemExport]:
    """Parse the items file content into complete export records."""
    data = _load_yaml(text, "items")
    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        raise ImproperFormattingError("Improper formatting for items file")
    return [fill_item_defaults(record) for record in data]


async def parse_items(files: Mapping[str, Path | None]) -> list[ItemExport]:
    """Load the mandatory items file."""
    path = files.get(FILE_ITEMS)
    if path is None or not upload_exists(path):
        raise MissingItemsFileError("No item file.")
    items = parse_items_text(await _read_text(path))
    logger.debug(f"Loaded {len(items)} items from {path}")
    return items


async def parse_attributes(
    files: Mapping[str, Path | None],
    label_type: str,
) -> list[Attribute]:
    """Load the attributes file, or the defaults for *label_type*."""
    path = files.get(FILE_ATTRIBUTES)
    if path is None or not upload_exists(path):
        return default_attributes(label_type)
    data = _load_yaml(await _read_text(path), "attributes")
    return _parse_model_list(data, Attribute, "attributes")


async def parse_categories(
    files: Mapping[str, Path | None],
    label_type: str,
) -> list[Category]:
    """Load the categories file, or the defaults for *label_type*."""
    path = files.get(FILE_CATEGORIES)
    if path is None or not upload_exists(path):
        return default_categories(label_type)
    data = _load_yaml(await _read_text(path), "categories")
    return _parse_model_list(data, Category, "categories")


async def parse_files(
    label_type: str,
    files: Mapping[str, Path | None],
) -> FormFileData:
    """Read items, attributes and categories concurrently."""
    items, attributes, categories = await asyncio.gather(
        parse_items(files),
        parse_attributes(files, label_type),
        parse_categories(files, label_type),
    )
    return FormFileData(items=items, attributes=attributes, categories=categories)
