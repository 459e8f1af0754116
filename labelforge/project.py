"""Assembly of projects and tasks from validated creation input.

Only the storage calls are coroutines; building the config, partitioning
and item conversion are plain synchronous functions.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from labelforge._convert.attribute_index import build_attribute_index
from labelforge._convert.exporter import convert_task_to_export
from labelforge._convert.importer import build_task_status, convert_item_to_import
from labelforge.constants import (
    BUNDLE_V1,
    BUNDLE_V2,
    HANDLER_INVALID,
    HANDLER_LABEL,
    ITEM_IMAGE,
    ITEM_POINT_CLOUD,
    ITEM_POINT_CLOUD_TRACKING,
    ITEM_VIDEO,
    LABEL_BOX_2D,
    LABEL_BOX_3D,
    LABEL_TAG,
)
from labelforge.exceptions import ImportConversionError, ImproperFormattingError
from labelforge.file_parser import parse_files
from labelforge.form import parse_form
from labelforge.keys import project_key, task_key, tasks_prefix
from labelforge.models import Project, ProjectConfig, Task
from labelforge.task_partition import partition_items, sort_by_video_name

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from labelforge._convert.attribute_index import AttributeIndex
    from labelforge.models import (
        CreationForm,
        FormFileData,
        Item,
        ItemExport,
        TaskStatus,
    )
    from labelforge.storage import StoragePort
    from labelforge.task_partition import TaskSlice

_M = TypeVar("_M", bound=BaseModel)


# ------------------------------------------------------------------
# Config derivation
# ------------------------------------------------------------------


def get_tracking(item_type: str) -> tuple[str, bool]:
    """Return ``(stored item type, tracking)`` for a form item type.

    Videos are labeled frame by frame as images with tracking enabled.
    """
    if item_type == ITEM_VIDEO:
        return ITEM_IMAGE, True
    if item_type == ITEM_POINT_CLOUD_TRACKING:
        return ITEM_POINT_CLOUD, True
    return item_type, False


def get_handler_url(item_type: str, label_type: str) -> str:
    """Return the frontend handler for an item/label type combination."""
    if label_type == LABEL_BOX_2D and item_type in (ITEM_IMAGE, ITEM_VIDEO):
        return HANDLER_LABEL
    if label_type == LABEL_TAG and item_type == ITEM_IMAGE:
        return HANDLER_LABEL
    if label_type == LABEL_BOX_3D and item_type in (
        ITEM_POINT_CLOUD,
        ITEM_POINT_CLOUD_TRACKING,
    ):
        return HANDLER_LABEL
    return HANDLER_INVALID


def get_bundle_file(label_type: str) -> str:
    """Return the frontend bundle serving *label_type*."""
    if label_type in (LABEL_TAG, LABEL_BOX_2D):
        return BUNDLE_V2
    return BUNDLE_V1


# ------------------------------------------------------------------
# Project and tasks
# ------------------------------------------------------------------


def create_project(form: CreationForm, file_data: FormFileData) -> Project:
    """Build the project config and item list.

    ``task_id`` and ``submit_time`` keep placeholder values until tasks are
    created.  With tracking, items are stable-sorted by video name so each
    video is contiguous.
    """
    item_type, tracking = get_tracking(form.item_type)
    config = ProjectConfig(
        project_name=form.project_name,
        item_type=item_type,
        label_types=[form.label_type],
        task_size=form.task_size,
        tracking=tracking,
        handler_url=get_handler_url(form.item_type, form.label_type),
        page_title=form.page_title,
        instruction_page=form.instructions,
        bundle_file=get_bundle_file(form.label_type),
        categories=file_data.categories,
        attributes=file_data.attributes,
        demo_mode=form.demo_mode,
    )
    items: list[ItemExport] = file_data.items
    if tracking:
        items = sort_by_video_name(items)
    logger.info(
        f"Project {form.project_name!r}: {len(items)} items, "
        f"item type {item_type!r}, tracking={tracking}"
    )
    return Project(config=config, items=items)


def _convert_slice(
    project: Project,
    task_slice: TaskSlice,
    index: AttributeIndex,
) -> list[Item]:
    """Convert the items of one slice, checking label ids are task-unique."""
    items: list[Item] = []
    seen_label_ids: set[int] = set()
    order = 0
    for item_ind, item_export in enumerate(task_slice.items):
        item = convert_item_to_import(
            item_export,
            item_ind,
            task_slice.start + item_ind,
            index,
            project.config.categories,
            order_start=order,
        )
        duplicates = seen_label_ids.intersection(item.labels)
        if duplicates:
            raise ImportConversionError(
                f"Label ids {sorted(duplicates)} are repeated in task "
                f"{task_slice.task_id} (item {item_export.url!r})"
            )
        seen_label_ids.update(item.labels)
        order += len(item.labels)
        items.append(item)
    return items


def create_tasks(
    project: Project,
    previous_status: TaskStatus | None = None,
) -> list[Task]:
    """Split *project* into tasks and convert their items.

    Each task gets a copy of the project config with ``task_size`` set to
    its actual item count and ``task_id`` to its zero-padded index.  Item
    ids continue across tasks; item indices restart at 0 in every task.
    *previous_status* is a floor for every counter of every task.
    """
    index = build_attribute_index(project.config.attributes)
    slices = partition_items(
        project.items,
        project.config.task_size,
        tracking=project.config.tracking,
    )
    tasks: list[Task] = []
    for task_slice in slices:
        config = project.config.model_copy(
            update={"task_size": len(task_slice), "task_id": task_slice.task_id},
        )
        items = _convert_slice(project, task_slice, index)
        status = build_task_status(items, previous=previous_status)
        logger.trace(f"Task {task_slice.task_id} status: {status}")
        tasks.append(Task(config=config, status=status, items=items))
    logger.info(f"Created {len(tasks)} tasks for {project.config.project_name!r}")
    return tasks


# ------------------------------------------------------------------
# Storage
# ------------------------------------------------------------------


async def save_project(project: Project, storage: StoragePort) -> None:
    """Store the project document."""
    key = project_key(project.config.project_name)
    await storage.save(key, project.to_json())
    logger.info(f"Project saved to {key}")


async def save_tasks(tasks: list[Task], storage: StoragePort) -> None:
    """Store every task concurrently.

    All writes are attempted.  Writes that succeed are kept even if
    others fail; the first failure is re-raised afterwards.
    """
    keys = [task_key(t.config.project_name, t.config.task_id) for t in tasks]
    results = await asyncio.gather(
        *(storage.save(key, task.to_json()) for key, task in zip(keys, tasks)),
        return_exceptions=True,
    )
    failures = [
        (key, result)
        for key, result in zip(keys, results)
        if isinstance(result, BaseException)
    ]
    if failures:
        for key, error in failures:
            logger.error(f"Failed to save task {key}: {error!r}")
        logger.warning(
            f"{len(keys) - len(failures)} of {len(keys)} tasks saved; "
            f"saved tasks are not rolled back"
        )
        raise failures[0][1]
    logger.info(f"Saved {len(keys)} tasks")


def _parse_stored(model: type[_M], key: str, document: str) -> _M:
    """Validate a stored JSON document; bad content is a formatting error."""
    try:
        return model.model_validate_json(document)
    except ValidationError as e:
        logger.debug(f"Invalid stored document {key}: {e}")
        raise ImproperFormattingError(
            f"Improper formatting for stored document {key}"
        ) from e


async def load_project(project_name: str, storage: StoragePort) -> Project:
    """Read a stored project document."""
    key = project_key(project_name)
    return _parse_stored(Project, key, await storage.load(key))


async def load_tasks(project_name: str, storage: StoragePort) -> list[Task]:
    """Read every stored task of *project_name*, ordered by task id.

    A document that no longer matches the task schema raises
    ``ImproperFormattingError`` naming its key.
    """
    keys = await storage.list_keys(tasks_prefix(project_name))
    documents = await asyncio.gather(*(storage.load(key) for key in keys))
    logger.debug(f"Loaded {len(documents)} tasks of {project_name!r}")
    return [
        _parse_stored(Task, key, doc) for key, doc in zip(keys, documents, strict=True)
    ]


async def export_project(project_name: str, storage: StoragePort) -> list[ItemExport]:
    """Export the items of every stored task of *project_name*."""
    tasks = await load_tasks(project_name, storage)
    exported: list[ItemExport] = []
    for task in tasks:
        exported.extend(convert_task_to_export(task))
    return exported


async def create_project_from_upload(
    fields: Mapping[str, str],
    files: Mapping[str, Path | None],
    storage: StoragePort,
) -> tuple[Project, list[Task]]:
    """Validate, parse, assemble, partition and store a new project."""
    form = await parse_form(fields, storage)
    file_data = await parse_files(form.label_type, files)
    project = create_project(form, file_data)
    tasks = create_tasks(project)
    await save_project(project, storage)
    await save_tasks(tasks, storage)
    return project, tasks
