"""Validation of the project creation form."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from labelforge.constants import (
    FIELD_DEMO_MODE,
    FIELD_INSTRUCTIONS_URL,
    FIELD_ITEM_TYPE,
    FIELD_LABEL_TYPE,
    FIELD_PAGE_TITLE,
    FIELD_PROJECT_NAME,
    FIELD_TASK_SIZE,
    ITEM_VIDEO,
)
from labelforge.exceptions import FormValidationError, ProjectExistsError
from labelforge.keys import project_key
from labelforge.models import CreationForm

if TYPE_CHECKING:
    from collections.abc import Mapping

    from labelforge.storage import StoragePort


def _field(fields: Mapping[str, str], name: str) -> str:
    return (fields.get(name) or "").strip()


def _parse_task_size(fields: Mapping[str, str], item_type: str) -> int:
    """Return the task size; videos are always split per video, so 1."""
    if item_type == ITEM_VIDEO:
        return 1
    raw = _field(fields, FIELD_TASK_SIZE)
    if not raw:
        raise FormValidationError("Please specify a task size")
    try:
        task_size = int(raw)
    except ValueError:
        raise FormValidationError("Task size must be a positive integer") from None
    if task_size < 1:
        raise FormValidationError("Task size must be a positive integer")
    return task_size


def validate_form_fields(fields: Mapping[str, str]) -> CreationForm:
    """Check required fields and build a ``CreationForm``.

    Spaces in the project name are replaced by underscores.  Does not check
    name uniqueness (see ``parse_form``).

    Raises
    ------
    FormValidationError
        On the first missing or invalid required field.

    """
    project_name = _field(fields, FIELD_PROJECT_NAME)
    if not project_name:
        raise FormValidationError("Please create a project name")
    project_name = project_name.replace(" ", "_")

    item_type = _field(fields, FIELD_ITEM_TYPE)
    if not item_type:
        raise FormValidationError("Please choose an item type")

    label_type = _field(fields, FIELD_LABEL_TYPE)
    if not label_type:
        raise FormValidationError("Please choose a label type")

    return CreationForm(
        project_name=project_name,
        item_type=item_type,
        label_type=label_type,
        page_title=_field(fields, FIELD_PAGE_TITLE),
        task_size=_parse_task_size(fields, item_type),
        instructions=_field(fields, FIELD_INSTRUCTIONS_URL),
        demo_mode=_field(fields, FIELD_DEMO_MODE).lower() == "true",
    )


async def parse_form(fields: Mapping[str, str], storage: StoragePort) -> CreationForm:
    """Validate *fields* and make sure the project name is still free.

    Raises
    ------
    FormValidationError
        On a missing or invalid required field.
    ProjectExistsError
        When a project with the same name is already stored.

    """
    form = validate_form_fields(fields)
    if await storage.exists(project_key(form.project_name)):
        raise ProjectExistsError(form.project_name)
    logger.debug(f"Creation form validated for project {form.project_name!r}")
    return form
