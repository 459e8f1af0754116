"""CLI entry point for labelforge."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import questionary
import yaml
from loguru import logger

from labelforge.config import (
    LabelforgeConfig,
    get_config_path,
    require_interactive,
)
from labelforge.constants import (
    FIELD_DEMO_MODE,
    FIELD_INSTRUCTIONS_URL,
    FIELD_ITEM_TYPE,
    FIELD_LABEL_TYPE,
    FIELD_PAGE_TITLE,
    FIELD_PROJECT_NAME,
    FIELD_TASK_SIZE,
    FILE_ATTRIBUTES,
    FILE_CATEGORIES,
    FILE_ITEMS,
    ITEM_IMAGE,
    ITEM_POINT_CLOUD,
    ITEM_POINT_CLOUD_TRACKING,
    ITEM_VIDEO,
    LABEL_BOX_2D,
    LABEL_BOX_3D,
    LABEL_POLYGON_2D,
    LABEL_POLYLINE_2D,
    LABEL_TAG,
)
from labelforge.exceptions import LabelforgeError
from labelforge.project import create_project_from_upload, export_project
from labelforge.storage import FileStorage

_ITEM_TYPES = (ITEM_IMAGE, ITEM_VIDEO, ITEM_POINT_CLOUD, ITEM_POINT_CLOUD_TRACKING)
_LABEL_TYPES = (
    LABEL_TAG,
    LABEL_BOX_2D,
    LABEL_POLYGON_2D,
    LABEL_POLYLINE_2D,
    LABEL_BOX_3D,
)
_DEFAULT_STORAGE_DIR = Path("data")


class CliApp:
    """Command-line interface for labelforge."""

    def __init__(self) -> None:
        """Initialize parser and command definitions."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Create labeling projects and export their labels.",
        )
        parser.add_argument(
            "--config",
            default=None,
            help=(
                "Path to YAML config (default: ~/.config/labelforge/config.yaml "
                "or LABELFORGE_CONFIG)."
            ),
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        self._add_create_parser(subparsers)
        self._add_export_parser(subparsers)
        self._add_setup_parser(subparsers)

        return parser

    def _add_create_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``create`` command parser."""
        parser = subparsers.add_parser(
            "create",
            help="Create a project and split its items into tasks.",
        )
        parser.add_argument("--name", "-n", default="", help="Project name.")
        parser.add_argument(
            "--item-type",
            default=None,
            choices=_ITEM_TYPES,
            help="Item type. If omitted, an interactive choice is shown.",
        )
        parser.add_argument(
            "--label-type",
            default=None,
            choices=_LABEL_TYPES,
            help="Label type. If omitted, an interactive choice is shown.",
        )
        parser.add_argument(
            "--task-size",
            default="",
            help="Items per task (ignored for video projects).",
        )
        parser.add_argument(
            "--items",
            required=True,
            help="YAML file with the item list.",
        )
        parser.add_argument(
            "--attributes",
            default=None,
            help="YAML file with attribute definitions.",
        )
        parser.add_argument(
            "--categories",
            default=None,
            help="YAML file with the category tree.",
        )
        parser.add_argument("--page-title", default="", help="Page title.")
        parser.add_argument("--instructions", default="", help="Instructions URL.")
        parser.add_argument(
            "--demo",
            action="store_true",
            help="Create the project in demo mode.",
        )

    def _add_export_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``export`` command parser."""
        parser = subparsers.add_parser(
            "export",
            help="Export labels of every task of a project.",
        )
        parser.add_argument("--project", "-p", required=True, help="Project name.")
        parser.add_argument(
            "--output",
            "-o",
            required=True,
            help="Output file (.json for JSON, anything else for YAML).",
        )

    def _add_setup_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``setup`` command parser."""
        parser = subparsers.add_parser(
            "setup",
            help="Write storage and logging settings to the config file.",
        )
        parser.add_argument("--storage-dir", default=None, help="Storage directory.")
        parser.add_argument("--log-level", default=None, help="Log level.")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _configure_logging(cfg: LabelforgeConfig) -> None:
        logger.remove()
        logger.add(sys.stderr, level=(cfg.log_level or "INFO").upper())

    @staticmethod
    def _storage(cfg: LabelforgeConfig) -> FileStorage:
        return FileStorage(cfg.storage_dir or _DEFAULT_STORAGE_DIR)

    @staticmethod
    def _select(value: str | None, message: str, choices: tuple[str, ...]) -> str:
        """Return *value*, or ask the user to pick one of *choices*."""
        if value:
            return value
        require_interactive(f"Pass the value explicitly ({message})")
        answer = questionary.select(message, choices=list(choices)).ask()
        if answer is None:
            sys.exit("Cancelled.")
        return str(answer)

    @staticmethod
    def _write_export(items: list[dict[str, object]], path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".json":
            content = json.dumps(items, indent=2, ensure_ascii=False) + "\n"
        else:
            content = yaml.safe_dump(
                items, default_flow_style=False, sort_keys=False, allow_unicode=True
            )
        path.write_text(content, encoding="utf-8")
        logger.info(f"Exported {len(items)} items to {path}")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _run_create(self, args: argparse.Namespace, cfg: LabelforgeConfig) -> None:
        fields = {
            FIELD_PROJECT_NAME: args.name,
            FIELD_ITEM_TYPE: self._select(
                args.item_type, "Choose an item type:", _ITEM_TYPES
            ),
            FIELD_LABEL_TYPE: self._select(
                args.label_type, "Choose a label type:", _LABEL_TYPES
            ),
            FIELD_TASK_SIZE: args.task_size,
            FIELD_PAGE_TITLE: args.page_title,
            FIELD_INSTRUCTIONS_URL: args.instructions,
            FIELD_DEMO_MODE: "true" if args.demo else "false",
        }
        files = {
            FILE_ITEMS: Path(args.items),
            FILE_ATTRIBUTES: Path(args.attributes) if args.attributes else None,
            FILE_CATEGORIES: Path(args.categories) if args.categories else None,
        }
        project, tasks = asyncio.run(
            create_project_from_upload(fields, files, self._storage(cfg))
        )
        logger.info(
            f"Project {project.config.project_name!r} created: "
            f"{len(project.items)} items in {len(tasks)} tasks"
        )

    def _run_export(self, args: argparse.Namespace, cfg: LabelforgeConfig) -> None:
        items = asyncio.run(export_project(args.project, self._storage(cfg)))
        if not items:
            sys.exit(f"No tasks found for project {args.project!r}.")
        self._write_export([item.to_wire() for item in items], Path(args.output))

    def _run_setup(self, args: argparse.Namespace, config_path: Path) -> None:
        current = LabelforgeConfig.from_file(config_path)
        update = LabelforgeConfig(
            storage_dir=Path(args.storage_dir) if args.storage_dir else None,
            log_level=args.log_level,
        )
        saved_path = current.merge(update).save_to_file(config_path)
        logger.info(f"Done. Configuration saved to {saved_path}")

    def _run_command(self, args: argparse.Namespace) -> None:
        """Dispatch parsed args to the target command implementation."""
        config_path = get_config_path(Path(args.config) if args.config else None)
        cfg = LabelforgeConfig.load(config_path)
        self._configure_logging(cfg)
        try:
            if args.command == "create":
                self._run_create(args, cfg)
                return
            if args.command == "export":
                self._run_export(args, cfg)
                return
            if args.command == "setup":
                self._run_setup(args, config_path)
                return
        except (LabelforgeError, OSError) as e:
            sys.exit(f"Error: {e}")
        sys.exit(f"Unknown command: {args.command}")

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        self._run_command(args)


def main(argv: list[str] | None = None) -> None:
    """Compatibility entry point for setuptools/CLI wrappers."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
