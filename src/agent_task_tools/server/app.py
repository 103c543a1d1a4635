"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the tool registry.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse

from agent_task_tools import __version__
from agent_task_tools.config import ToolSettings
from agent_task_tools.errors import ToolError
from agent_task_tools.server.models import ApiTool, HealthResponse, ToolErrorResponse, ToolResult
from agent_task_tools.tools import TOOLS, run_tool

logger = logging.getLogger(__name__)


def create_app(
    settings: ToolSettings | None = None,
    *,
    session: requests.Session | None = None,
) -> FastAPI:
    settings = settings or ToolSettings()

    app = FastAPI(
        title="Agent Task Tools",
        version=__version__,
        description="REST API over the Jira issue fetcher and the local task store.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings for request handlers that want to read it.
    app.state.settings = settings

    @app.exception_handler(ToolError)
    def handle_tool_error(_request: Request, exc: ToolError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.warning("Tool failed", extra={"error": type(exc).__name__})
        body = ToolErrorResponse(detail=str(exc), error=type(exc).__name__)
        return JSONResponse(status_code=exc.http_status, content=body.model_dump())

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(version=__version__)

    @app.get("/api/tools", response_model=list[ApiTool])
    def list_tools() -> list[ApiTool]:
        return [
            ApiTool(
                name=tool.name,
                description=tool.description,
                parameters=tool.parameters_schema(),
            )
            for tool in TOOLS.values()
        ]

    @app.post("/api/tools/{name}", response_model=ToolResult)
    def invoke_tool(name: str, arguments: dict[str, Any] | None = Body(default=None)) -> ToolResult:
        result = run_tool(name, arguments or {}, settings=app.state.settings, session=session)
        return ToolResult(tool=name, result=result)

    return app
