"""Storage keys derived from project names and task ids."""

from __future__ import annotations


def project_key(project_name: str) -> str:
    """Key of the project document."""
    return f"{project_name}/project"


def tasks_prefix(project_name: str) -> str:
    """Common prefix of every task key of a project."""
    return f"{project_name}/tasks/"


def task_key(project_name: str, task_id: str) -> str:
    """Key of one task document; *task_id* is the zero-padded index."""
    return f"{tasks_prefix(project_name)}{task_id}"
