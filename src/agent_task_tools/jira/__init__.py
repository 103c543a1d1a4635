"""Jira issue fetching and rendering."""

from agent_task_tools.jira.client import IssueComment, IssueSummary, JiraClient
from agent_task_tools.jira.formatting import format_summary

__all__ = ["IssueComment", "IssueSummary", "JiraClient", "format_summary"]
