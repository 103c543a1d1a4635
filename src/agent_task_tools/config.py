"""Configuration for the agent task tools.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Nothing here is required at load time. The issue fetcher validates the Jira
settings when it is invoked, so task-store operations keep working on hosts
that never configure Jira.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ToolSettings(BaseSettings):
    """Settings for the issue fetcher and the task store.

    Environment variables:
    - JIRA_BASE_URL       (required by fetch-issue-summary)
    - JIRA_API_TOKEN      (required by fetch-issue-summary)
    - JIRA_EMAIL          (optional; selects Basic auth)
    - TASK_FILE_PATH      (optional)
    - TASK_LOG_FILE_PATH  (optional)
    - TASK_PRD_FILE_PATH  (optional)
    - TASK_BASE_DIR       (optional)
    - TASK_SLUG           (optional)
    - LOG_LEVEL           (optional)

    Notes:
        An empty value is treated the same as an unset one.
        Tests can skip the `.env` file via `ToolSettings(_env_file=None)`.
    """

    jira_base_url: str = Field(
        default="",
        validation_alias="JIRA_BASE_URL",
        description="Jira site URL, e.g. https://company.atlassian.net",
    )
    jira_api_token: str = Field(
        default="",
        validation_alias="JIRA_API_TOKEN",
        description="Jira API token (or personal access token)",
    )
    jira_email: str = Field(
        default="",
        validation_alias="JIRA_EMAIL",
        description="Account email; when set the token is sent with Basic auth",
    )

    task_file_path: str = Field(
        default="",
        validation_alias="TASK_FILE_PATH",
        description="Default path of the tasks.json file",
    )
    task_log_file_path: str = Field(
        default="",
        validation_alias="TASK_LOG_FILE_PATH",
        description="Default path of the task log file",
    )
    task_prd_file_path: str = Field(
        default="",
        validation_alias="TASK_PRD_FILE_PATH",
        description="Default path of the PRD document tracked alongside the task list",
    )
    task_base_dir: str = Field(
        default="",
        validation_alias="TASK_BASE_DIR",
        description="Directory under which per-slug task directories live",
    )
    task_slug: str = Field(
        default="",
        validation_alias="TASK_SLUG",
        description="Default task-list slug",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )
