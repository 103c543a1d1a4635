"""Test configuration and fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from agent_task_tools.config import ToolSettings

_ENV_VARS = (
    "JIRA_BASE_URL",
    "JIRA_API_TOKEN",
    "JIRA_EMAIL",
    "TASK_FILE_PATH",
    "TASK_LOG_FILE_PATH",
    "TASK_PRD_FILE_PATH",
    "TASK_BASE_DIR",
    "TASK_SLUG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in an empty working directory without tool env vars."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def settings() -> ToolSettings:
    """Provide settings with nothing configured."""
    return ToolSettings(_env_file=None)


@pytest.fixture
def jira_settings() -> ToolSettings:
    """Provide settings for a Jira Cloud site using Basic auth."""
    return ToolSettings(
        _env_file=None,
        JIRA_BASE_URL="https://example.atlassian.net",
        JIRA_API_TOKEN="secret-token",
        JIRA_EMAIL="bot@example.com",
    )


@pytest.fixture
def make_response() -> Callable[..., Mock]:
    """Build a stub streamed `requests.Response` (body served by `iter_content`)."""

    def _make(
        status_code: int = 200,
        json_data: Any = None,
        text: str | None = None,
        headers: dict[str, str] | None = None,
        chunks: list[bytes] | None = None,
    ) -> Mock:
        resp = Mock(spec=requests.Response)
        resp.status_code = status_code
        resp.headers = headers or {}
        if chunks is None:
            body = text if text is not None else json.dumps(json_data or {})
            chunks = [body.encode("utf-8")] if body else []
        resp.iter_content.return_value = chunks
        return resp

    return _make


@pytest.fixture
def issue_payload() -> dict[str, Any]:
    """A trimmed Jira REST v3 issue response with rendered fields."""
    return {
        "key": "PROJ-123",
        "fields": {
            "summary": "Login button does nothing",
            "status": {"name": "In Progress"},
            "assignee": {"displayName": "Ada Lovelace"},
            "reporter": {"displayName": "Grace Hopper"},
            "priority": {"name": "High"},
            "created": "2025-01-01T10:00:00.000+0000",
            "updated": "2025-01-02T11:30:00.000+0000",
            "comment": {
                "comments": [
                    {
                        "author": {"displayName": "Ada Lovelace"},
                        "created": "2025-01-01T12:00:00.000+0000",
                        "body": {"type": "doc", "content": []},
                    }
                ]
            },
        },
        "renderedFields": {
            "comment": {
                "comments": [
                    {
                        "author": {"displayName": "Ada Lovelace"},
                        "created": "2025-01-01T12:00:00.000+0000",
                        "renderedBody": "<p>Reproduced on   staging.</p>",
                        "body": "Reproduced on staging.",
                    }
                ]
            }
        },
    }


@pytest.fixture
def write_tasks() -> Callable[[Path, list[Any]], None]:
    """Write a task file with the given task records."""

    def _write(path: Path, tasks: list[Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": 1,
            "statuses": ["todo", "doing", "done", "blocked", "failed"],
            "tasks": tasks,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    return _write
