"""Partition a project's item sequence into per-task slices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from labelforge.constants import TASK_ID_WIDTH

if TYPE_CHECKING:
    from labelforge.models import ItemExport


@dataclass
class TaskSlice:
    """Contiguous ``[start, end)`` range of the item sequence for one task."""

    index: int
    start: int
    end: int
    items: list[ItemExport] = field(default_factory=list)

    @property
    def task_id(self) -> str:
        """Zero-padded task id, e.g. ``"000001"``."""
        return index_to_str(self.index)

    def __len__(self) -> int:
        return self.end - self.start


def index_to_str(index: int) -> str:
    """Format a task index as a fixed-width id."""
    return str(index).zfill(TASK_ID_WIDTH)


def sort_by_video_name(items: list[ItemExport]) -> list[ItemExport]:
    """Return *items* ordered by ``video_name``; ties keep their input order."""
    return sorted(items, key=lambda item: item.video_name)


def task_boundaries(
    items: list[ItemExport],
    task_size: int,
    *,
    tracking: bool,
) -> list[int]:
    """Return task start indices followed by ``len(items)``.

    Without tracking, a boundary is placed at every multiple of
    *task_size*.  With tracking, *items* must already be sorted by video
    name and a boundary is placed wherever the video name changes.
    """
    boundaries: list[int] = []
    if tracking:
        prev_video_name: str | None = None
        for index, item in enumerate(items):
            if index == 0 or item.video_name != prev_video_name:
                boundaries.append(index)
                prev_video_name = item.video_name
    else:
        if task_size < 1:
            msg = f"task_size must be at least 1, got {task_size}"
            raise ValueError(msg)
        boundaries.extend(range(0, len(items), task_size))
    boundaries.append(len(items))
    return boundaries


def partition_items(
    items: list[ItemExport],
    task_size: int,
    *,
    tracking: bool,
) -> list[TaskSlice]:
    """Split *items* into task slices.

    Algorithm
    ---------
    1. With tracking, stable-sort by video name so each video forms one
       contiguous run (frames of a video keep their relative order).
    2. Compute boundaries (see ``task_boundaries``).
    3. Emit one ``TaskSlice`` per consecutive boundary pair, numbered from 0.

    Concatenating the slices in order reproduces the (sorted) input exactly.
    """
    ordered = sort_by_video_name(items) if tracking else list(items)
    boundaries = task_boundaries(ordered, task_size, tracking=tracking)
    slices = [
        TaskSlice(index=i, start=start, end=end, items=ordered[start:end])
        for i, (start, end) in enumerate(zip(boundaries, boundaries[1:]))
    ]
    logger.debug(
        f"Partitioned {len(items)} items into {len(slices)} tasks "
        f"(tracking={tracking}, sizes={[len(s) for s in slices]})"
    )
    return slices
