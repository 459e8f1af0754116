"""Tests for the directory-backed storage."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from labelforge.keys import project_key, task_key, tasks_prefix
from labelforge.storage import FileStorage

if TYPE_CHECKING:
    from pathlib import Path


def test_keys() -> None:
    """Project and task documents live under the project name."""
    assert project_key("demo") == "demo/project"
    assert tasks_prefix("demo") == "demo/tasks/"
    assert task_key("demo", "000003") == "demo/tasks/000003"


def test_save_load_exists(tmp_path: Path) -> None:
    """Saved documents are JSON files under the root."""
    storage = FileStorage(tmp_path / "root")

    assert not asyncio.run(storage.exists("demo/project"))
    asyncio.run(storage.save("demo/project", '{"a": 1}'))

    assert (tmp_path / "root" / "demo" / "project.json").is_file()
    assert asyncio.run(storage.exists("demo/project"))
    assert asyncio.run(storage.load("demo/project")) == '{"a": 1}'


def test_save_overwrites(tmp_path: Path) -> None:
    """A second save replaces the document."""
    storage = FileStorage(tmp_path)
    asyncio.run(storage.save("k", "old"))
    asyncio.run(storage.save("k", "new"))

    assert asyncio.run(storage.load("k")) == "new"


def test_list_keys_by_prefix(tmp_path: Path) -> None:
    """Only keys under the prefix are listed, sorted."""
    storage = FileStorage(tmp_path)
    keys = ("demo/tasks/000001", "demo/tasks/000000", "demo/project", "x/tasks/0")
    for key in keys:
        asyncio.run(storage.save(key, "{}"))

    assert asyncio.run(storage.list_keys("demo/tasks/")) == [
        "demo/tasks/000000",
        "demo/tasks/000001",
    ]


def test_list_keys_missing_root(tmp_path: Path) -> None:
    """A root that was never written lists nothing."""
    assert asyncio.run(FileStorage(tmp_path / "none").list_keys("")) == []


def test_load_missing_key_raises_os_error(tmp_path: Path) -> None:
    """I/O errors reach the caller unwrapped."""
    with pytest.raises(FileNotFoundError):
        asyncio.run(FileStorage(tmp_path).load("missing"))
