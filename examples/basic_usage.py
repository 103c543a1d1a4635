#!/usr/bin/env python3
"""Programmatic task-loop example.

This demonstrates using the task store and issue fetcher directly:

* load settings from `.env`
* pick the next todo task of a task list
* optionally print the linked Jira issue (a task's `issueUrl` field)
* mark the task as done, or count a retry and mark it failed

The task list is selected with `--slug` (and optionally `--base-dir`).
"""

from __future__ import annotations

import argparse
from typing import Sequence

from agent_task_tools.config import ToolSettings
from agent_task_tools.errors import ToolError
from agent_task_tools.jira.client import JiraClient
from agent_task_tools.jira.formatting import format_summary
from agent_task_tools.logging import configure_logging
from agent_task_tools.tasks.paths import resolve_task_paths
from agent_task_tools.tasks.store import TaskStore


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Work one task from a task list.")
    parser.add_argument("--slug", default=None, help="Task list slug")
    parser.add_argument("--base-dir", default=None, help="Directory holding the task list")
    parser.add_argument("--fail", action="store_true", help="Record a failed attempt instead")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ToolSettings()
    configure_logging(settings)

    paths = resolve_task_paths(settings, base_dir=args.base_dir, slug=args.slug)
    store = TaskStore(paths.task_file, paths.log_file)

    task = store.get_next_task()
    if task is None:
        print(f"No todo tasks in {paths.task_file}")
        return 0

    issue_url = task.get("issueUrl")
    if isinstance(issue_url, str) and issue_url:
        client = JiraClient(settings)
        try:
            print(format_summary(client.get_issue_summary(issue_url), "text"))
        except ToolError as exc:
            print(f"Could not fetch {issue_url}: {exc}")
        finally:
            client.close()

    if args.fail:
        retries = store.increment_retries(task["id"])
        store.update_task_status(task["id"], "failed", f"attempt {retries} failed")
    else:
        store.update_task_status(task["id"], "done")

    print(f"Updated {task['id']}; log: {paths.log_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
