"""Render an IssueSummary as a table, plain text or JSON."""

from __future__ import annotations

import re
from typing import Any, Literal

from agent_task_tools.errors import InputError
from agent_task_tools.jira.client import IssueSummary

OutputFormat = Literal["table", "json", "text"]

OUTPUT_FORMATS: tuple[str, ...] = ("table", "json", "text")

COMMENT_BODY_LIMIT = 400

_WHITESPACE_RE = re.compile(r"\s+")


def format_comment_body(body: str) -> str:
    normalized = _WHITESPACE_RE.sub(" ", body).strip()
    if len(normalized) <= COMMENT_BODY_LIMIT:
        return normalized
    return f"{normalized[: COMMENT_BODY_LIMIT - 1]}…"


def _rows(summary: IssueSummary) -> list[tuple[str, str]]:
    return [
        ("Key", summary.key),
        ("Summary", summary.summary),
        ("Status", summary.status),
        ("Assignee", summary.assignee),
        ("Reporter", summary.reporter),
        ("Priority", summary.priority),
        ("Created", summary.created),
        ("Updated", summary.updated),
        ("URL", summary.url),
    ]


def format_summary(summary: IssueSummary, output_format: str = "table") -> str | dict[str, Any]:
    """Render a summary.

    `json` returns the structured summary untouched (comment bodies are not
    truncated); `text` and `table` return a string.
    """

    if output_format not in OUTPUT_FORMATS:
        raise InputError(
            f"Invalid format: {output_format}. Allowed: {', '.join(OUTPUT_FORMATS)}"
        )
    if output_format == "json":
        return summary.to_dict()

    comment_lines = [
        f"- [{c.author} @ {c.created}] {format_comment_body(c.body)}" for c in summary.comments
    ]
    rows = _rows(summary)

    if output_format == "text":
        lines = [f"{label}: {value}" for label, value in rows]
        return "\n".join([*lines, "Comments:", *comment_lines])

    label_width = max(len(label) for label, _ in rows)
    table = "\n".join(f"{label.ljust(label_width)} : {value or '-'}" for label, value in rows)
    if comment_lines:
        return table + "\nComments:\n" + "\n".join(comment_lines)
    return table + "\nComments: none"
