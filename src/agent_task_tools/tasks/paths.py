"""Resolve the task-file, log-file and PRD paths for a task list.

Precedence, per path kind (first match wins):

1. explicit path argument
2. explicit base_dir / slug argument (paths derived under that directory)
3. environment default path (TASK_FILE_PATH, TASK_LOG_FILE_PATH, TASK_PRD_FILE_PATH)
4. TASK_BASE_DIR (or `<cwd>/.panie-areczku`) joined with TASK_SLUG

Resolution never touches the filesystem.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from agent_task_tools.config import ToolSettings

HIDDEN_DIR_NAME = ".panie-areczku"
TASK_FILE_NAME = "tasks.json"
LOG_FILE_NAME = "task.log"
PRD_FILE_NAME = "prd.md"


@dataclass(frozen=True, slots=True)
class TaskPaths:
    task_file: Path
    log_file: Path
    prd_file: Path


def _absolute(path: str | Path, cwd: Path) -> Path:
    # Like os.path.abspath, but relative to an explicit working directory.
    return Path(os.path.normpath(cwd / Path(path).expanduser()))


def resolve_task_paths(
    settings: ToolSettings,
    *,
    task_file_path: str | None = None,
    log_file_path: str | None = None,
    prd_file_path: str | None = None,
    base_dir: str | None = None,
    slug: str | None = None,
    cwd: Path | None = None,
) -> TaskPaths:
    cwd = cwd or Path.cwd()

    if base_dir or slug:
        directory = Path(base_dir) if base_dir else cwd / HIDDEN_DIR_NAME
        directory = directory / (slug or "")
        env_task_file = env_log_file = env_prd_file = ""
    else:
        directory = (
            Path(settings.task_base_dir) if settings.task_base_dir else cwd / HIDDEN_DIR_NAME
        )
        directory = directory / settings.task_slug
        env_task_file = settings.task_file_path
        env_log_file = settings.task_log_file_path
        env_prd_file = settings.task_prd_file_path

    task_file = task_file_path or env_task_file or directory / TASK_FILE_NAME
    log_file = log_file_path or env_log_file or directory / LOG_FILE_NAME
    prd_file = prd_file_path or env_prd_file or directory / PRD_FILE_NAME

    return TaskPaths(
        task_file=_absolute(task_file, cwd),
        log_file=_absolute(log_file, cwd),
        prd_file=_absolute(prd_file, cwd),
    )
