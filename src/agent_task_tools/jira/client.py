"""Jira REST client used by the fetch-issue-summary tool.

This wraps a `requests.Session` so the HTTP call stays out of the tool layer
and tests can inject a stub session.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any
from urllib.parse import quote, urlencode, urljoin, urlparse, urlunparse

import requests

from agent_task_tools.config import ToolSettings
from agent_task_tools.errors import (
    AuthError,
    ConfigurationError,
    InputError,
    IssueNotFoundError,
    RateLimitError,
    RequestTimeoutError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

DEFAULT_FIELDS: tuple[str, ...] = (
    "summary",
    "status",
    "assignee",
    "reporter",
    "priority",
    "created",
    "updated",
    "comment",
)

DEFAULT_TIMEOUT_MS = 15000
DEFAULT_COMMENTS_LIMIT = 20
MAX_COMMENTS_LIMIT = 100
_CHUNK_SIZE = 8192

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class JiraAuth:
    token: str
    email: str | None = None


@dataclass(frozen=True, slots=True)
class JiraBase:
    """Validated Jira site URL (path always ends with '/')."""

    base_url: str
    origin: str


@dataclass(frozen=True, slots=True)
class IssueComment:
    author: str
    created: str
    body: str


@dataclass(frozen=True, slots=True)
class IssueSummary:
    """Summary of a single Jira issue, built fresh for every fetch."""

    key: str
    summary: str
    status: str
    assignee: str
    reporter: str
    priority: str
    created: str
    updated: str
    url: str
    comments: list[IssueComment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _origin(scheme: str, hostname: str | None, port: int | None) -> str:
    scheme = scheme.lower()
    host = (hostname or "").lower()
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


def parse_issue_url(issue_url: str) -> tuple[str, str]:
    """Return (origin, issue_key) for a Jira browse URL.

    Raises:
        InputError: if the URL is not absolute or lacks a /browse/{KEY} segment.
    """

    parsed = urlparse(issue_url.strip())
    try:
        port = parsed.port
    except ValueError as e:
        raise InputError(f"Invalid issue URL: {issue_url}") from e
    if not parsed.scheme or not parsed.hostname:
        raise InputError(f"Issue URL must be an absolute URL: {issue_url}")

    parts = [p for p in parsed.path.split("/") if p]
    browse_idx = next((i for i, p in enumerate(parts) if p.lower() == "browse"), -1)
    if browse_idx == -1 or browse_idx + 1 >= len(parts):
        raise InputError("URL must contain /browse/{ISSUE-KEY}")

    return _origin(parsed.scheme, parsed.hostname, port), parts[browse_idx + 1]


def resolve_base_url(settings: ToolSettings) -> JiraBase:
    raw = settings.jira_base_url.strip()
    if not raw:
        raise ConfigurationError(
            "Set JIRA_BASE_URL env var, e.g. https://company.atlassian.net"
        )

    parsed = urlparse(raw)
    try:
        port = parsed.port
    except ValueError as e:
        raise ConfigurationError("JIRA_BASE_URL must be a valid absolute URL") from e
    if not parsed.scheme or not parsed.hostname:
        raise ConfigurationError("JIRA_BASE_URL must be a valid absolute URL")

    if parsed.username or parsed.password:
        raise ConfigurationError("JIRA_BASE_URL must not include credentials")
    if parsed.scheme.lower() != "https":
        raise ConfigurationError("JIRA_BASE_URL must use https")
    if parsed.query or parsed.fragment:
        raise ConfigurationError("JIRA_BASE_URL must not include query params or hash")

    path = parsed.path if parsed.path.endswith("/") else f"{parsed.path}/"
    base_url = urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), path, "", "", ""))
    return JiraBase(base_url=base_url, origin=_origin(parsed.scheme, parsed.hostname, port))


def resolve_auth(settings: ToolSettings) -> JiraAuth:
    token = settings.jira_api_token.strip()
    if not token:
        raise ConfigurationError("Set JIRA_API_TOKEN env var with your API token")
    email = settings.jira_email.strip()
    return JiraAuth(token=token, email=email or None)


def build_auth_header(auth: JiraAuth) -> str:
    if auth.email:
        encoded = base64.b64encode(f"{auth.email}:{auth.token}".encode()).decode("ascii")
        return f"Basic {encoded}"
    return f"Bearer {auth.token}"


def build_fields_param(fields: str | None) -> str:
    """Merge caller-supplied field names with the default set.

    Caller fields come first; defaults follow, and no field appears twice.
    """

    if not fields or not fields.strip():
        return ",".join(DEFAULT_FIELDS)
    cleaned = [f.strip() for f in fields.split(",") if f.strip()]
    return ",".join(dict.fromkeys([*cleaned, *DEFAULT_FIELDS]))


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _pick_comment_body(comment: dict[str, Any]) -> str:
    if isinstance(comment.get("renderedBody"), str):
        return comment["renderedBody"]
    return _text(comment.get("body"))


def _parse_comments(data: dict[str, Any], limit: int) -> list[IssueComment]:
    raw = _dig(data, "renderedFields", "comment", "comments")
    if raw is None:
        raw = _dig(data, "fields", "comment", "comments")
    if not isinstance(raw, list):
        return []

    comments: list[IssueComment] = []
    for item in raw[:limit]:
        if not isinstance(item, dict):
            item = {}
        comments.append(
            IssueComment(
                author=_text(_dig(item, "author", "displayName")),
                created=_text(item.get("created")),
                body=_pick_comment_body(item),
            )
        )
    return comments


def parse_issue_summary(
    data: dict[str, Any], *, origin: str, issue_key: str, comments_limit: int
) -> IssueSummary:
    fields = data.get("fields") if isinstance(data.get("fields"), dict) else {}
    key = _text(data.get("key")) or issue_key
    return IssueSummary(
        key=key,
        summary=_text(fields.get("summary")),
        status=_text(_dig(fields, "status", "name")),
        assignee=_text(_dig(fields, "assignee", "displayName")),
        reporter=_text(_dig(fields, "reporter", "displayName")),
        priority=_text(_dig(fields, "priority", "name")),
        created=_text(fields.get("created")),
        updated=_text(fields.get("updated")),
        url=f"{origin}/browse/{key}",
        comments=_parse_comments(data, comments_limit),
    )


def _raise_for_status(resp: requests.Response, body: str, *, issue_key: str) -> None:
    status = resp.status_code
    if 200 <= status < 300:
        return

    detail = f": {body}" if body else ""
    logger.warning(
        "Jira request failed", extra={"status_code": status, "issue_key": issue_key}
    )

    if status in (401, 403):
        raise AuthError(f"Auth failed (status {status}){detail}")
    if status == 404:
        raise IssueNotFoundError(issue_key, detail)
    if status == 429:
        raise RateLimitError(f"Rate limited by JIRA (429){detail}")
    if 300 <= status < 400:
        location = resp.headers.get("Location", "")
        raise UpstreamError(
            f"JIRA responded with a redirect (status {status}) to {location or 'unknown'}; "
            "redirects are not followed"
        )
    raise UpstreamError(f"JIRA request failed with status {status}{detail}")


def _read_body(resp: requests.Response, *, deadline: float) -> bytes | None:
    """Read a streamed body; None once `deadline` (a `time.monotonic()` value) has passed."""

    chunks: list[bytes] = []
    for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
        if time.monotonic() > deadline:
            return None
        chunks.append(chunk)
    if time.monotonic() > deadline:
        return None
    return b"".join(chunks)


class JiraClient:
    """Small wrapper around `requests` for the single call the fetch tool needs."""

    def __init__(
        self,
        settings: ToolSettings,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._owns_session = session is None

    def build_issue_url(self, base: JiraBase, *, issue_key: str, fields: str | None) -> str:
        path = f"rest/api/3/issue/{quote(issue_key, safe='')}"
        query = urlencode({"fields": build_fields_param(fields), "expand": "renderedFields"})
        return f"{urljoin(base.base_url, path)}?{query}"

    def get_issue_summary(
        self,
        issue_url: str,
        *,
        fields: str | None = None,
        timeout_ms: int | None = None,
        comments_limit: int | None = None,
        debug: bool = False,
    ) -> IssueSummary:
        """Fetch an issue by its browse URL.

        All configuration and input validation happens before the request is sent;
        the auth token never leaves for a host other than JIRA_BASE_URL.

        `timeout_ms` bounds the whole call, body included: a response that is
        still arriving when it runs out raises RequestTimeoutError.
        """

        issue_origin, issue_key = parse_issue_url(issue_url)
        base = resolve_base_url(self._settings)
        auth = resolve_auth(self._settings)

        if issue_origin != base.origin:
            raise InputError(
                f"Issue URL host ({issue_origin}) does not match JIRA_BASE_URL ({base.origin})"
            )

        timeout = timeout_ms if timeout_ms is not None and timeout_ms > 0 else DEFAULT_TIMEOUT_MS
        limit = (
            comments_limit
            if comments_limit is not None and comments_limit > 0
            else DEFAULT_COMMENTS_LIMIT
        )
        limit = min(limit, MAX_COMMENTS_LIMIT)

        api_url = self.build_issue_url(base, issue_key=issue_key, fields=fields)
        logger.log(
            logging.INFO if debug else logging.DEBUG,
            f"[jira-summary] GET {api_url}",
            extra={"issue_key": issue_key},
        )

        timed_out = f"JIRA request timed out after {timeout} ms: {issue_key}"
        deadline = time.monotonic() + timeout / 1000
        try:
            resp = self._session.get(
                api_url,
                headers={
                    "Authorization": build_auth_header(auth),
                    "Accept": "application/json",
                },
                allow_redirects=False,
                timeout=timeout / 1000,
                stream=True,
            )
            try:
                body = _read_body(resp, deadline=deadline)
            finally:
                resp.close()
        except requests.Timeout as e:
            raise RequestTimeoutError(timed_out) from e
        except requests.RequestException as e:
            if time.monotonic() > deadline:
                raise RequestTimeoutError(timed_out) from e
            raise UpstreamError(f"JIRA request failed: {e}") from e

        if body is None:
            raise RequestTimeoutError(timed_out)

        _raise_for_status(resp, body.decode("utf-8", errors="replace"), issue_key=issue_key)

        try:
            data = json.loads(body)
        except ValueError as e:
            raise UpstreamError(f"JIRA returned a non-JSON response for {issue_key}") from e
        if not isinstance(data, dict):
            raise UpstreamError(f"JIRA returned an unexpected payload for {issue_key}")

        return parse_issue_summary(
            data, origin=base.origin, issue_key=issue_key, comments_limit=limit
        )

    def close(self) -> None:
        if self._owns_session:
            self._session.close()
