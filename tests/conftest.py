"""Shared pytest fixtures for the create-init test suite.

Provides reusable fixtures for:
- A sample setup descriptor (as a dict and as a file on disk)
- Scripted prompt answers that record every question asked
- A captured Rich console for asserting on printed output
- Mock subprocess helpers
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from create_init import utils


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_debug():
    """Every test starts with debug output off."""
    utils.set_debug(False)
    yield
    utils.set_debug(False)


@pytest.fixture
def captured_console(monkeypatch: pytest.MonkeyPatch) -> Callable[[], str]:
    """Route all console output into a buffer; call the fixture value to read it.

    Usage:
        def test_output(captured_console):
            print_info("hello")
            assert "hello" in captured_console()
    """
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None, force_terminal=False)
    monkeypatch.setattr(utils, "console", console)
    return buffer.getvalue


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

class ScriptedPrompt:
    """Stand-in for the interactive prompt.

    Answers are consumed in order; ``None`` accepts the offered default.
    Every ``(message, default)`` pair is recorded in ``calls``.
    """

    def __init__(self, answers: list[str | None] | None = None) -> None:
        self.answers = list(answers or [])
        self.calls: list[tuple[str, str]] = []

    def __call__(self, message: str, default: str) -> str:
        self.calls.append((message, default))
        answer = self.answers.pop(0) if self.answers else None
        return default if answer is None else answer


@pytest.fixture
def scripted_prompt() -> Callable[..., ScriptedPrompt]:
    """Factory for ``ScriptedPrompt`` instances."""
    def factory(answers: list[str | None] | None = None) -> ScriptedPrompt:
        return ScriptedPrompt(answers)
    return factory


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_descriptor_data() -> dict[str, Any]:
    """A descriptor shaped like the starter kit's ``setup-config.json``."""
    return {
        "introMessage": "Let's configure your project.",
        "steps": [
            {
                "title": "Convex",
                "description": "Connect the web app to your deployment",
                "instructions": [
                    "Your deployment lives at {{convexUrl}}",
                    "HTTP actions are served from {{convexSiteUrl}}",
                ],
                "variables": [
                    {
                        "name": "NEXT_PUBLIC_CONVEX_URL",
                        "projects": ["web"],
                        "template": "{{convexUrl}}",
                        "isBackendUrl": True,
                        "info": ["Web app will talk to {{NEXT_PUBLIC_CONVEX_URL}}"],
                    }
                ],
            },
            {
                "title": "Auth",
                "description": "Configure GitHub OAuth",
                "instructions": "Set the callback URL to {{convexSiteUrl}}/api/auth/callback/github",
                "variables": [
                    {"name": "AUTH_GITHUB_ID", "projects": ["convex"], "required": False},
                    {
                        "name": "SITE_URL",
                        "projects": ["convex", "web"],
                        "defaultValue": "http://localhost:3000",
                    },
                ],
                "additionalInstructions": ["Callback: {{convexSiteUrl}}/api/auth/callback/github"],
                "required": False,
                "requiredMessage": "GitHub login stays disabled until this is configured.",
            },
        ],
        "projects": [
            {"id": "convex"},
            {"id": "web", "envFile": "apps/web/.env.local"},
        ],
    }


@pytest.fixture
def descriptor_file(tmp_path: Path, sample_descriptor_data: dict[str, Any]) -> Path:
    """``sample_descriptor_data`` written to ``tmp_path/setup-config.json``."""
    path = tmp_path / "setup-config.json"
    path.write_text(json.dumps(sample_descriptor_data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
