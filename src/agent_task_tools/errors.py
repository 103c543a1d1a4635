"""Error taxonomy shared by the issue fetcher, the task store and the adapters.

Library code raises these; only the CLI and the REST server translate them
(exit codes / HTTP responses).
"""

from __future__ import annotations

from pathlib import Path


class ToolError(Exception):
    """Base class for all errors surfaced by a tool operation."""

    http_status: int = 500


class ConfigurationError(ToolError):
    """A required setting is missing or invalid (e.g. JIRA_BASE_URL)."""

    http_status = 500


class InputError(ToolError):
    """The caller supplied an invalid argument."""

    http_status = 422


class NotFoundError(ToolError):
    http_status = 404


class AuthError(ToolError):
    """The issue tracker rejected the credentials (401/403)."""

    http_status = 502


class RateLimitError(ToolError):
    http_status = 429


class UpstreamError(ToolError):
    """The issue tracker answered with an unexpected status or was unreachable."""

    http_status = 502


class RequestTimeoutError(ToolError, TimeoutError):
    http_status = 504


class InvalidStatusError(InputError):
    """Raised when a task status is not one of the allowed values."""

    def __init__(self, status: str, allowed: tuple[str, ...]) -> None:
        self.status = status
        self.allowed = tuple(allowed)
        super().__init__(f"Invalid status: {status}. Allowed: {', '.join(self.allowed)}")


class TaskNotFoundError(NotFoundError):
    """Raised when no task with the given id exists in the task file."""

    def __init__(self, task_id: str, task_file: Path) -> None:
        self.task_id = task_id
        self.task_file = task_file
        super().__init__(f"Task with id '{task_id}' not found in {task_file}")


class IssueNotFoundError(NotFoundError):
    def __init__(self, issue_key: str, detail: str = "") -> None:
        self.issue_key = issue_key
        super().__init__(f"Issue not found: {issue_key}{detail}")
