"""Agent Task Tools.

Two small integrations for an automation-agent host:
- fetch a structured Jira issue summary
- a local JSON task list with status transitions and a retry counter
"""

__version__ = "0.1.0"

from agent_task_tools.config import ToolSettings
from agent_task_tools.tools import TOOLS, run_tool

__all__ = ["__version__", "TOOLS", "ToolSettings", "run_tool"]
