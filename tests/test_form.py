"""Tests for creation form validation."""

from __future__ import annotations

import asyncio

import pytest

from labelforge.constants import (
    FIELD_DEMO_MODE,
    FIELD_ITEM_TYPE,
    FIELD_LABEL_TYPE,
    FIELD_PROJECT_NAME,
    FIELD_TASK_SIZE,
    ITEM_VIDEO,
)
from labelforge.exceptions import FormValidationError, ProjectExistsError
from labelforge.form import parse_form, validate_form_fields
from tests.conftest import make_fields
from tests.fixtures.fake_storage import FakeStorage


def test_valid_form() -> None:
    """All fields are trimmed and typed."""
    form = validate_form_fields(make_fields(**{FIELD_TASK_SIZE: " 5 "}))

    assert form.project_name == "street_scenes"
    assert form.item_type == "image"
    assert form.label_type == "box2d"
    assert form.task_size == 5
    assert form.page_title == "Street scenes"
    assert form.instructions == "https://example.com/instructions"
    assert form.demo_mode is False


def test_every_space_in_name_is_replaced() -> None:
    """Spaces anywhere in the name become underscores."""
    form = validate_form_fields(make_fields(**{FIELD_PROJECT_NAME: "a b  c"}))

    assert form.project_name == "a_b__c"


@pytest.mark.parametrize(
    ("field", "message"),
    [
        (FIELD_PROJECT_NAME, "Please create a project name"),
        (FIELD_ITEM_TYPE, "Please choose an item type"),
        (FIELD_LABEL_TYPE, "Please choose a label type"),
        (FIELD_TASK_SIZE, "Please specify a task size"),
    ],
)
def test_missing_required_field(field: str, message: str) -> None:
    """Each missing required field has its own message."""
    with pytest.raises(FormValidationError, match=message):
        validate_form_fields(make_fields(**{field: ""}))


def test_first_missing_field_wins() -> None:
    """Fields are checked in order: name before item type."""
    fields = make_fields(**{FIELD_PROJECT_NAME: "", FIELD_ITEM_TYPE: ""})

    with pytest.raises(FormValidationError, match="project name"):
        validate_form_fields(fields)


@pytest.mark.parametrize("task_size", ["0", "-3", "five", "2.5"])
def test_invalid_task_size(task_size: str) -> None:
    """Task size must parse as a positive integer."""
    with pytest.raises(FormValidationError, match="positive integer"):
        validate_form_fields(make_fields(**{FIELD_TASK_SIZE: task_size}))


def test_video_task_size_is_one() -> None:
    """Video projects ignore the task size field."""
    form = validate_form_fields(
        make_fields(**{FIELD_ITEM_TYPE: ITEM_VIDEO, FIELD_TASK_SIZE: ""})
    )

    assert form.task_size == 1


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("TRUE", True), ("", False), ("yes", False)],
)
def test_demo_mode(raw: str, expected: bool) -> None:
    """Demo mode is on only for the string "true"."""
    form = validate_form_fields(make_fields(**{FIELD_DEMO_MODE: raw}))

    assert form.demo_mode is expected


def test_parse_form_rejects_existing_project(storage: FakeStorage) -> None:
    """A stored project with the same name blocks creation."""
    storage.documents["street_scenes/project"] = "{}"

    with pytest.raises(ProjectExistsError, match="Project name already exists."):
        asyncio.run(parse_form(make_fields(), storage))


def test_parse_form_free_name(storage: FakeStorage) -> None:
    """A free name passes; nothing is written."""
    form = asyncio.run(parse_form(make_fields(), storage))

    assert form.project_name == "street_scenes"
    assert storage.documents == {}
