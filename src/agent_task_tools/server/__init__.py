"""FastAPI server adapter for agent-task-tools.

This module exposes a REST API over the tool registry.

Design intent:
- Keep business logic in `agent_task_tools.jira` and `agent_task_tools.tasks`
- Keep server-specific concerns (routing, error translation) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from agent_task_tools.server.app import create_app
