from __future__ import annotations

import importlib
import pkgutil
import re
from pathlib import Path

import agent_task_tools

INDEX = Path(__file__).resolve().parents[2] / "docs" / "index.rst"


def _documented_modules() -> list[str]:
    return re.findall(r"^\.\. automodule:: (\S+)$", INDEX.read_text(encoding="utf-8"), re.MULTILINE)


def test_documented_modules_import() -> None:
    modules = _documented_modules()

    assert modules
    for name in modules:
        importlib.import_module(name)


def test_every_public_module_is_documented() -> None:
    package_modules = {
        info.name
        for info in pkgutil.walk_packages(agent_task_tools.__path__, "agent_task_tools.")
        if not info.ispkg
    }

    assert package_modules <= set(_documented_modules())
