"""JSON-file backed task list with an append-only log.

Every mutating operation is a full read -> modify -> write cycle against the
task file, followed by one appended log line. There is no file locking: the
store assumes a single writer, and concurrent callers against the same file
must serialize access themselves.

Task records are plain dicts. Only `id`, `status`, `summary`, `updatedAt` and
`retries` are interpreted; any other keys are carried through unchanged.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from agent_task_tools.errors import InvalidStatusError, TaskNotFoundError

logger = logging.getLogger(__name__)

VALID_STATUSES: tuple[str, ...] = ("todo", "doing", "done", "blocked", "failed")

TaskRecord = dict[str, Any]

_UNREADABLE = object()


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2025-01-01T00:00:00.000Z."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class TaskDocument(BaseModel):
    """On-disk shape of a task file."""

    version: int = Field(default=1, description="Task file schema version")
    statuses: list[str] = Field(default_factory=lambda: list(VALID_STATUSES))
    tasks: list[Any] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _default_version(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        return 1

    @field_validator("statuses", mode="before")
    @classmethod
    def _default_statuses(cls, value: object) -> object:
        if isinstance(value, list) and value and all(isinstance(s, str) for s in value):
            return value
        return list(VALID_STATUSES)

    def find_index(self, task_id: str) -> int:
        for idx, task in enumerate(self.tasks):
            if isinstance(task, dict) and task.get("id") == task_id:
                return idx
        return -1


class TaskStore:
    """Task file + log file pair for one task list."""

    def __init__(self, task_file: Path, log_file: Path) -> None:
        self._task_file = task_file
        self._log_file = log_file

    @property
    def task_file(self) -> Path:
        return self._task_file

    @property
    def log_file(self) -> Path:
        return self._log_file

    def _read_raw(self) -> Any:
        try:
            raw = self._task_file.read_text(encoding="utf-8")
            return json.loads(raw or "{}")
        except (OSError, ValueError) as e:
            logger.warning(
                "Task file is unreadable or not valid JSON; treating as empty",
                extra={"path": str(self._task_file), "error": str(e)},
            )
            return _UNREADABLE

    def ensure(self) -> None:
        """Create an empty task file if it is missing or has no task list.

        A file whose content cannot be parsed at all is left in place; reads of
        it degrade to an empty list.
        """

        if not self._task_file.exists():
            logger.info("Initializing task file", extra={"path": str(self._task_file)})
            self.save(TaskDocument())
            return

        raw = self._read_raw()
        if raw is _UNREADABLE:
            return
        if not isinstance(raw, dict) or not isinstance(raw.get("tasks"), list):
            logger.warning(
                "Task file has no task list; reinitializing",
                extra={"path": str(self._task_file)},
            )
            self.save(TaskDocument())

    def load(self) -> TaskDocument:
        raw = self._read_raw()
        if raw is _UNREADABLE or raw is None:
            return TaskDocument()
        if not isinstance(raw, dict) or not isinstance(raw.get("tasks"), list):
            logger.warning(
                "Task file has unexpected shape; treating as empty",
                extra={"path": str(self._task_file)},
            )
            return TaskDocument()
        return TaskDocument.model_validate(
            {
                "version": raw.get("version"),
                "statuses": raw.get("statuses"),
                "tasks": raw["tasks"],
            }
        )

    def save(self, document: TaskDocument) -> None:
        self._task_file.parent.mkdir(parents=True, exist_ok=True)
        payload = document.model_dump(mode="json")
        self._task_file.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        logger.debug(
            "Task file written",
            extra={"path": str(self._task_file), "tasks": len(document.tasks)},
        )

    def append_log(self, message: str) -> None:
        self._log_file.parent.mkdir(parents=True, exist_ok=True)
        with self._log_file.open("a", encoding="utf-8") as f:
            f.write(f"[{utc_timestamp()}] {message}\n")

    def get_next_task(self) -> TaskRecord | None:
        """Return the first task (in file order) whose status is 'todo'."""

        self.ensure()
        for task in self.load().tasks:
            if isinstance(task, dict) and task.get("status") == "todo":
                return task
        return None

    def update_task_status(self, task_id: str, status: str, summary: str = "") -> TaskRecord:
        """Set a task's status, optionally replacing its summary.

        Raises:
            InvalidStatusError: if status is not one of VALID_STATUSES.
            TaskNotFoundError: if no task has the given id.
        """

        if status not in VALID_STATUSES:
            raise InvalidStatusError(status=status, allowed=VALID_STATUSES)

        self.ensure()
        document = self.load()
        idx = document.find_index(task_id)
        if idx == -1:
            raise TaskNotFoundError(task_id=task_id, task_file=self._task_file)

        now = utc_timestamp()
        existing: TaskRecord = document.tasks[idx]
        retries = existing.get("retries")
        updated: TaskRecord = {
            **existing,
            "status": status,
            "summary": summary or existing.get("summary") or "",
            "updatedAt": now,
            "retries": retries if _is_number(retries) else 0,
        }
        document.tasks[idx] = updated
        self.save(document)

        self.append_log(f"{task_id} -> {status} :: {updated['summary'] or 'no summary'} [{now}]")
        logger.info("Task status updated", extra={"task_id": task_id, "status": status})
        return updated

    def increment_retries(self, task_id: str) -> int:
        """Bump a task's retry counter and return the new value.

        Raises:
            TaskNotFoundError: if no task has the given id.
        """

        self.ensure()
        document = self.load()
        idx = document.find_index(task_id)
        if idx == -1:
            raise TaskNotFoundError(task_id=task_id, task_file=self._task_file)

        existing: TaskRecord = document.tasks[idx]
        current = existing.get("retries")
        retries = (current if _is_number(current) else 0) + 1
        document.tasks[idx] = {**existing, "retries": retries}
        self.save(document)

        self.append_log(f"{task_id} retries={retries}")
        logger.info("Task retries incremented", extra={"task_id": task_id, "retries": retries})
        return retries
