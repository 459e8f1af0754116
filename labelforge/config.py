"""Configuration loading with priority: env > config file > preset > defaults."""

from __future__ import annotations

import importlib.resources
import os
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel

from labelforge.exceptions import InteractiveModeRequiredError

CONFIG_DIR = Path.home() / ".config" / "labelforge"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

_SECTION = "labelforge"


def is_interactive_disabled() -> bool:
    """Return True when LABELFORGE_NO_INTERACTIVE is 'true' (case-insensitive)."""
    return os.environ.get("LABELFORGE_NO_INTERACTIVE", "").lower() == "true"


def require_interactive(hint: str) -> None:
    """Raise if interactive prompts are disabled.

    Parameters
    ----------
    hint:
        Human-readable explanation of which CLI flag the caller should use
        instead of an interactive prompt.

    """
    if is_interactive_disabled():
        raise InteractiveModeRequiredError(
            f"Interactive prompt required but LABELFORGE_NO_INTERACTIVE=true. {hint}"
        )


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise LABELFORGE_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("LABELFORGE_CONFIG")
    return Path(path) if path else CONFIG_PATH


def _parse_document(text: str, source: object) -> dict[str, object]:
    """Return the top-level mapping of a YAML document; anything else is ``{}``."""
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {source}; expected mapping.")
        return {}
    return data


def _read_document(path: Path) -> dict[str, object]:
    """Read the whole config file at *path* (``{}`` when it does not exist)."""
    if not path.is_file():
        return {}
    logger.trace(f"Loading config from {path}")
    return _parse_document(path.read_text(encoding="utf-8"), path)


def _section(document: dict[str, object], source: object) -> dict[str, object]:
    """Return the ``labelforge`` mapping of *document*, or ``{}``."""
    section = document.get(_SECTION)
    if section is None:
        return {}
    if not isinstance(section, dict):
        logger.warning(f"Ignoring '{_SECTION}' in {source}; expected mapping.")
        return {}
    return section


def _preset_section() -> dict[str, object]:
    ref = importlib.resources.files("labelforge.presets").joinpath("default.yaml")
    return _section(_parse_document(ref.read_text(encoding="utf-8"), ref), ref)


def _write_section(path: Path, section: dict[str, str]) -> None:
    """Replace the ``labelforge`` section of *path*, keeping every other key."""
    document = _read_document(path)
    document[_SECTION] = section
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(document, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )


class LabelforgeConfig(BaseModel):
    """Settings for storage location and logging."""

    storage_dir: Path | None = None
    log_level: str | None = None

    @classmethod
    def from_section(cls, section: dict[str, object]) -> LabelforgeConfig:
        """Build from the ``labelforge`` mapping; unknown keys are ignored."""
        return cls.model_validate(
            {k: v for k, v in section.items() if k in cls.model_fields}
        )

    def to_section(self) -> dict[str, str]:
        """Return the set values as the ``labelforge`` mapping to store."""
        return {
            key: str(value)
            for key, value in self.model_dump(exclude_none=True).items()
            if value
        }

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> LabelforgeConfig:
        """Load config from a YAML file.  Returns empty config if file is missing."""
        return cls.from_section(_section(_read_document(path), path))

    @classmethod
    def from_env(cls) -> LabelforgeConfig:
        """Build config from environment variables."""
        storage_dir = os.environ.get("LABELFORGE_STORAGE_DIR")
        return cls(
            storage_dir=Path(storage_dir) if storage_dir else None,
            log_level=os.environ.get("LABELFORGE_LOG_LEVEL") or None,
        )

    def merge(self, override: LabelforgeConfig) -> LabelforgeConfig:
        """Return a new config where non-empty *override* values take priority."""
        return LabelforgeConfig(
            storage_dir=override.storage_dir or self.storage_dir,
            log_level=override.log_level or self.log_level,
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> LabelforgeConfig:
        """Merge preset, file, and env: preset < file < env."""
        preset_cfg = cls.from_section(_preset_section())
        file_cfg = cls.from_file(get_config_path(config_path))
        return preset_cfg.merge(file_cfg).merge(cls.from_env())

    def save_to_file(self, path: Path = CONFIG_PATH) -> Path:
        """Write config to a YAML file, preserving other top-level sections."""
        _write_section(path, self.to_section())
        logger.info(f"Config saved to {path}")
        return path
