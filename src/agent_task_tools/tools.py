"""Tool registry: the operations a host can invoke.

Each tool declares a pydantic argument model (its parameter schema), a
human-readable description and a handler. Hosts send camelCase argument
names; snake_case is accepted as well.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from agent_task_tools.config import ToolSettings
from agent_task_tools.errors import InputError, NotFoundError
from agent_task_tools.jira.client import JiraClient
from agent_task_tools.jira.formatting import format_summary
from agent_task_tools.tasks.paths import TaskPaths, resolve_task_paths
from agent_task_tools.tasks.store import TaskStore

logger = logging.getLogger(__name__)


class ToolArgs(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class FetchIssueSummaryArgs(ToolArgs):
    issue_url: str = Field(
        description="Full JIRA issue URL, e.g. https://company.atlassian.net/browse/KEY-123"
    )
    fields: str | None = Field(
        default=None, description="Comma-separated fields to include; defaults plus provided"
    )
    format: Literal["table", "json", "text"] = Field(
        default="table", description="Output format: table (default), json, or text"
    )
    timeout_ms: int | None = Field(
        default=None, gt=0, description="Request timeout in milliseconds (default 15000)"
    )
    comments_limit: int | None = Field(
        default=None, gt=0, le=100, description="Max comments to include (default 20)"
    )
    debug: bool = Field(default=False, description="Log the outgoing JIRA API request details")


class TaskPathArgs(ToolArgs):
    task_file_path: str | None = Field(default=None, description="Path to tasks.json")
    log_file_path: str | None = Field(default=None, description="Path to log file")
    prd_file_path: str | None = Field(default=None, description="Path to the PRD document")
    base_dir: str | None = Field(
        default=None, description="Directory holding the task list (slug is appended)"
    )
    slug: str | None = Field(default=None, description="Task list slug")

    def resolve(self, settings: ToolSettings) -> TaskPaths:
        return resolve_task_paths(
            settings,
            task_file_path=self.task_file_path,
            log_file_path=self.log_file_path,
            prd_file_path=self.prd_file_path,
            base_dir=self.base_dir,
            slug=self.slug,
        )

    def store(self, settings: ToolSettings) -> TaskStore:
        paths = self.resolve(settings)
        return TaskStore(paths.task_file, paths.log_file)


class UpdateTaskStatusArgs(TaskPathArgs):
    id: str = Field(description="Task id")
    status: Literal["todo", "doing", "done", "blocked", "failed"] = Field(
        description="New status"
    )
    summary: str | None = Field(default=None, description="Optional summary")


class IncrementRetriesArgs(TaskPathArgs):
    id: str = Field(description="Task id")


@dataclass(frozen=True, slots=True)
class ToolContext:
    settings: ToolSettings
    session: requests.Session | None = None


@dataclass(frozen=True, slots=True)
class Tool:
    name: str
    description: str
    args_model: type[ToolArgs]
    handler: Callable[[Any, ToolContext], str]

    def parameters_schema(self) -> dict[str, Any]:
        return self.args_model.model_json_schema(by_alias=True)

    def parse_args(self, arguments: dict[str, Any]) -> ToolArgs:
        try:
            return self.args_model.model_validate(arguments)
        except ValidationError as e:
            raise InputError(f"Invalid arguments for {self.name}: {e}") from e


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _fetch_issue_summary(args: FetchIssueSummaryArgs, ctx: ToolContext) -> str:
    client = JiraClient(ctx.settings, session=ctx.session)
    try:
        summary = client.get_issue_summary(
            args.issue_url,
            fields=args.fields,
            timeout_ms=args.timeout_ms,
            comments_limit=args.comments_limit,
            debug=args.debug,
        )
    finally:
        client.close()
    rendered = format_summary(summary, args.format)
    return rendered if isinstance(rendered, str) else _to_json(rendered)


def _get_next_task(args: TaskPathArgs, ctx: ToolContext) -> str:
    return _to_json(args.store(ctx.settings).get_next_task())


def _update_task_status(args: UpdateTaskStatusArgs, ctx: ToolContext) -> str:
    updated = args.store(ctx.settings).update_task_status(
        args.id, args.status, args.summary or ""
    )
    return _to_json(updated)


def _increment_retries(args: IncrementRetriesArgs, ctx: ToolContext) -> str:
    retries = args.store(ctx.settings).increment_retries(args.id)
    return _to_json({"id": args.id, "retries": retries})


def _get_task_file_path(args: TaskPathArgs, ctx: ToolContext) -> str:
    return str(args.resolve(ctx.settings).task_file)


def _get_log_file_path(args: TaskPathArgs, ctx: ToolContext) -> str:
    return str(args.resolve(ctx.settings).log_file)


def _get_prd_file_path(args: TaskPathArgs, ctx: ToolContext) -> str:
    return str(args.resolve(ctx.settings).prd_file)


TOOLS: dict[str, Tool] = {
    tool.name: tool
    for tool in (
        Tool(
            name="fetch-issue-summary",
            description="Fetch a JIRA issue summary from its URL",
            args_model=FetchIssueSummaryArgs,
            handler=_fetch_issue_summary,
        ),
        Tool(
            name="get-next-task",
            description="Get the next todo task from a tasks list.",
            args_model=TaskPathArgs,
            handler=_get_next_task,
        ),
        Tool(
            name="update-task-status",
            description="Update a task status in a tasks list.",
            args_model=UpdateTaskStatusArgs,
            handler=_update_task_status,
        ),
        Tool(
            name="increment-retries",
            description="Increment retries counter for a task.",
            args_model=IncrementRetriesArgs,
            handler=_increment_retries,
        ),
        Tool(
            name="get-task-file-path",
            description="Return the tasks.json path.",
            args_model=TaskPathArgs,
            handler=_get_task_file_path,
        ),
        Tool(
            name="get-log-file-path",
            description="Return the task manager log path.",
            args_model=TaskPathArgs,
            handler=_get_log_file_path,
        ),
        Tool(
            name="get-prd-file-path",
            description="Return the PRD document path for a tasks list.",
            args_model=TaskPathArgs,
            handler=_get_prd_file_path,
        ),
    )
}


def get_tool(name: str) -> Tool:
    tool = TOOLS.get(name)
    if tool is None:
        raise NotFoundError(f"Unknown tool: {name}. Available: {', '.join(TOOLS)}")
    return tool


def run_tool(
    name: str,
    arguments: dict[str, Any] | None = None,
    *,
    settings: ToolSettings | None = None,
    session: requests.Session | None = None,
) -> str:
    """Validate arguments and run a tool, returning its serialized result."""

    tool = get_tool(name)
    args = tool.parse_args(arguments or {})
    ctx = ToolContext(settings=settings or ToolSettings(), session=session)
    logger.debug("Running tool", extra={"tool": name})
    return tool.handler(args, ctx)
