from __future__ import annotations

import contextlib
from collections.abc import Iterator
from pathlib import Path

import pytest

from agent_task_tools.errors import (
    InputError,
    InvalidStatusError,
    NotFoundError,
    TaskNotFoundError,
    ToolError,
)
from agent_task_tools.tasks.store import VALID_STATUSES, TaskStore


@contextlib.contextmanager
def _working_on(task_id: str) -> Iterator[str]:
    yield task_id


def test_task_errors_keep_their_fields() -> None:
    not_found = TaskNotFoundError(task_id="T9", task_file=Path("/lists/demo/tasks.json"))
    invalid = InvalidStatusError(status="archived", allowed=VALID_STATUSES)

    assert isinstance(not_found, NotFoundError)
    assert not_found.task_id == "T9"
    assert str(not_found) == "Task with id 'T9' not found in /lists/demo/tasks.json"

    assert isinstance(invalid, InputError)
    assert invalid.allowed == VALID_STATUSES
    assert str(invalid) == "Invalid status: archived. Allowed: todo, doing, done, blocked, failed"


def test_task_not_found_propagates_through_context_manager(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.json", tmp_path / "task.log")

    with pytest.raises(TaskNotFoundError, match="nope"):
        with _working_on("nope") as task_id:
            store.increment_retries(task_id)


def test_invalid_status_propagates_through_context_manager(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.json", tmp_path / "task.log")

    with pytest.raises(InvalidStatusError, match="archived"):
        with _working_on("T1") as task_id:
            store.update_task_status(task_id, "archived")


@pytest.mark.parametrize(
    "error",
    [
        TaskNotFoundError(task_id="T1", task_file=Path("tasks.json")),
        InvalidStatusError(status="archived", allowed=VALID_STATUSES),
    ],
)
def test_callers_can_annotate_task_errors(error: ToolError) -> None:
    try:
        raise error
    except ToolError as exc:
        exc.add_note("while working the task loop")
        caught = exc

    assert caught.__notes__ == ["while working the task loop"]
    assert caught.__traceback__ is not None
