"""Interactive prompts built on :mod:`rich.prompt`."""

from __future__ import annotations

import re
from typing import Callable

from rich.prompt import InvalidResponse, Prompt

from create_init import utils

PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9-]+")
PROJECT_NAME_HINT = "Use lowercase letters, numbers, and hyphens only"

# (message, default) -> answer
AskFunc = Callable[[str, str], str]


def is_valid_project_name(name: str) -> bool:
    return bool(PROJECT_NAME_PATTERN.fullmatch(name))


class ProjectNamePrompt(Prompt):
    """Text prompt that re-asks until the answer is a valid directory name."""

    def process_response(self, value: str) -> str:
        value = value.strip()
        if not is_valid_project_name(value):
            raise InvalidResponse(f"[prompt.invalid]{PROJECT_NAME_HINT}")
        return value


def ask_project_name(default: str) -> str:
    return ProjectNamePrompt.ask(
        "What's the name of your project?", default=default, console=utils.console
    )


def ask_value(message: str, default: str) -> str:
    """Ask for a free-form value, offering *default*; empty answers are accepted."""
    return Prompt.ask(
        message,
        default=default,
        show_default=bool(default),
        console=utils.console,
    )
