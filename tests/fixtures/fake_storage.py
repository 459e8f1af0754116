"""In-memory ``StoragePort`` implementation for tests."""

from __future__ import annotations


class FakeStorage:
    """``StoragePort`` backed by a dict.

    Satisfies the ``StoragePort`` protocol structurally (duck-typing).
    Keys listed in *fail_keys* raise ``OSError`` on save.
    """

    def __init__(
        self,
        documents: dict[str, str] | None = None,
        fail_keys: set[str] | None = None,
    ) -> None:
        """Start with optional pre-stored *documents*."""
        self.documents: dict[str, str] = dict(documents or {})
        self.fail_keys = fail_keys or set()
        self.save_calls: list[str] = []

    async def exists(self, key: str) -> bool:
        """Return True when *key* is stored."""
        return key in self.documents

    async def save(self, key: str, data: str) -> None:
        """Store *data*, or fail for keys in ``fail_keys``."""
        self.save_calls.append(key)
        if key in self.fail_keys:
            raise OSError(f"disk full while writing {key}")
        self.documents[key] = data

    async def load(self, key: str) -> str:
        """Return the stored document."""
        try:
            return self.documents[key]
        except KeyError:
            raise FileNotFoundError(key) from None

    async def list_keys(self, prefix: str) -> list[str]:
        """Return stored keys with *prefix*, sorted."""
        return sorted(k for k in self.documents if k.startswith(prefix))
