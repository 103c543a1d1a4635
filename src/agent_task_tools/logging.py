"""Process logging for the command-line entrypoint.

Every record is written to stderr as one JSON object per line; stdout carries
tool results only. The level comes from ``LOG_LEVEL``. ``--debug`` on
``fetch-issue`` opens the Jira logger so the ``[jira-summary] GET ...`` request
line is shown whatever the process level is.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from agent_task_tools.config import ToolSettings

JIRA_LOGGER = "agent_task_tools.jira"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}


def _record_time(record: logging.LogRecord) -> str:
    created = datetime.fromtimestamp(record.created, tz=UTC)
    return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: dict[str, Any] = {
            "timestamp": _record_time(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if context:
            payload["extra"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level(name: str) -> int | None:
    """Map a ``LOG_LEVEL`` value to a logging level; empty means INFO, unknown gives None."""

    return logging.getLevelNamesMapping().get(name.strip().upper() or "INFO")


def configure_logging(settings: ToolSettings, *, debug: bool = False) -> None:
    """Send JSON records to stderr at ``settings.log_level``.

    Calling it again replaces the handler installed by the previous call.
    With ``debug`` the Jira logger emits down to DEBUG regardless of the root level.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    level = resolve_level(settings.log_level)
    unknown = level is None
    if level is None:
        level = logging.INFO
    root.setLevel(level)
    logging.getLogger(JIRA_LOGGER).setLevel(logging.DEBUG if debug else logging.NOTSET)

    # requests' connection pool logs every request at DEBUG.
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

    if unknown:
        logging.getLogger(__name__).warning(
            "Unknown LOG_LEVEL, using INFO", extra={"log_level": settings.log_level}
        )
