"""Local JSON task list: path resolution and read-modify-write store."""

from agent_task_tools.tasks.paths import TaskPaths, resolve_task_paths
from agent_task_tools.tasks.store import VALID_STATUSES, TaskDocument, TaskStore

__all__ = ["VALID_STATUSES", "TaskDocument", "TaskPaths", "TaskStore", "resolve_task_paths"]
