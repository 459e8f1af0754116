"""Storage boundary for project and task documents.

``StoragePort`` is the single seam between the pipeline and the persistence
backend.  ``FileStorage`` satisfies it with one JSON file per key under a
root directory; tests use an in-memory fake.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from loguru import logger

_SUFFIX = ".json"


class StoragePort(Protocol):
    """Minimal key/value interface used by the project assembler."""

    async def exists(self, key: str) -> bool:
        """Return True when a document is stored under *key*."""
        ...

    async def save(self, key: str, data: str) -> None:
        """Store serialized *data* under *key*, replacing any previous value."""
        ...

    async def load(self, key: str) -> str:
        """Return the document stored under *key*."""
        ...

    async def list_keys(self, prefix: str) -> list[str]:
        """Return stored keys starting with *prefix*, sorted."""
        ...


class FileStorage:
    """``StoragePort`` backed by a local directory.

    Key ``"proj/tasks/000000"`` maps to ``<root>/proj/tasks/000000.json``.
    File system calls run in worker threads; ``OSError`` propagates as is.
    """

    def __init__(self, root: Path) -> None:
        """Use *root* as the base directory (created lazily on save)."""
        self.root = root

    def _path(self, key: str) -> Path:
        return self.root / f"{key}{_SUFFIX}"

    async def exists(self, key: str) -> bool:
        """Return True when a document is stored under *key*."""
        return await asyncio.to_thread(self._path(key).is_file)

    async def save(self, key: str, data: str) -> None:
        """Write *data* to the file for *key*, creating directories."""
        path = self._path(key)
        await asyncio.to_thread(self._write, path, data)
        logger.trace(f"Saved {key} to {path} ({len(data)} chars)")

    async def load(self, key: str) -> str:
        """Read the document stored under *key*."""
        return await asyncio.to_thread(self._path(key).read_text, encoding="utf-8")

    async def list_keys(self, prefix: str) -> list[str]:
        """Return stored keys starting with *prefix*, sorted."""
        return await asyncio.to_thread(self._list_keys, prefix)

    @staticmethod
    def _write(path: Path, data: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data, encoding="utf-8")

    def _list_keys(self, prefix: str) -> list[str]:
        if not self.root.is_dir():
            return []
        keys = [
            path.relative_to(self.root).as_posix()[: -len(_SUFFIX)]
            for path in self.root.rglob(f"*{_SUFFIX}")
        ]
        return sorted(key for key in keys if key.startswith(prefix))
