"""CLI entrypoint for the agent task tools.

Each subcommand maps onto one tool in :mod:`agent_task_tools.tools`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError

from agent_task_tools import __version__
from agent_task_tools.config import ToolSettings
from agent_task_tools.errors import ConfigurationError, NotFoundError, ToolError
from agent_task_tools.logging import configure_logging
from agent_task_tools.tasks.store import VALID_STATUSES
from agent_task_tools.tools import run_tool

logger = logging.getLogger(__name__)

_COMMAND_TOOLS = {
    "fetch-issue": "fetch-issue-summary",
    "next-task": "get-next-task",
    "update-status": "update-task-status",
    "increment-retries": "increment-retries",
    "task-file": "get-task-file-path",
    "log-file": "get-log-file-path",
    "prd-file": "get-prd-file-path",
}


def _add_path_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--task-file", dest="task_file_path", default=None, help="Path to tasks.json")
    parser.add_argument("--log-file", dest="log_file_path", default=None, help="Path to log file")
    parser.add_argument(
        "--prd-file", dest="prd_file_path", default=None, help="Path to the PRD document"
    )
    parser.add_argument(
        "--base-dir",
        default=None,
        help="Directory holding the task list (overrides TASK_FILE_PATH / TASK_LOG_FILE_PATH)",
    )
    parser.add_argument("--slug", default=None, help="Task list slug")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-task-tools",
        description="Jira issue summaries and a local JSON task list for automation agents",
    )
    parser.add_argument("--version", action="version", version=f"agent-task-tools {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_issue = subparsers.add_parser("fetch-issue", help="Fetch a JIRA issue summary from its URL")
    fetch_issue.add_argument("issue_url", help="e.g. https://company.atlassian.net/browse/KEY-123")
    fetch_issue.add_argument(
        "--fields", default=None, help="Comma-separated fields to include; defaults plus provided"
    )
    fetch_issue.add_argument(
        "--format", choices=["table", "json", "text"], default="table", help="Output format"
    )
    fetch_issue.add_argument(
        "--timeout-ms", type=int, default=None, help="Request timeout in milliseconds (default 15000)"
    )
    fetch_issue.add_argument(
        "--comments-limit", type=int, default=None, help="Max comments to include (default 20)"
    )
    fetch_issue.add_argument(
        "--debug", action="store_true", help="Log the outgoing JIRA API request URL"
    )

    next_task = subparsers.add_parser("next-task", help="Print the next todo task")
    _add_path_arguments(next_task)

    update_status = subparsers.add_parser("update-status", help="Update a task status")
    update_status.add_argument("id", help="Task id")
    update_status.add_argument("status", choices=list(VALID_STATUSES), help="New status")
    update_status.add_argument("--summary", default=None, help="Optional summary")
    _add_path_arguments(update_status)

    increment = subparsers.add_parser("increment-retries", help="Increment a task's retry counter")
    increment.add_argument("id", help="Task id")
    _add_path_arguments(increment)

    for command, help_text in (
        ("task-file", "Print the tasks.json path"),
        ("log-file", "Print the task log path"),
        ("prd-file", "Print the PRD document path"),
    ):
        _add_path_arguments(subparsers.add_parser(command, help=help_text))

    return parser


def _tool_arguments(args: argparse.Namespace) -> dict[str, Any]:
    # Unset options fall through to the tool defaults.
    return {k: v for k, v in vars(args).items() if k != "command" and v is not None}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ToolSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings, debug=getattr(args, "debug", False))

    try:
        print(run_tool(_COMMAND_TOOLS[args.command], _tool_arguments(args), settings=settings))
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except NotFoundError as e:
        print(str(e), file=sys.stderr)
        return 3

    except ToolError as e:
        logger.warning(str(e), extra={"error": type(e).__name__})
        print(str(e), file=sys.stderr)
        return 4

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
