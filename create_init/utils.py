"""Shared utility functions for create-init.

Provides async command execution, JSON and text file I/O, and the Rich-based
console helpers that every other module prints through.  Operator-supplied
text is escaped before it reaches the console so that values such as
``[redacted]`` are shown literally instead of being parsed as markup.
"""

from __future__ import annotations

import asyncio
import json
import os
import traceback
from pathlib import Path
from typing import Any, Mapping, Sequence

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()

_debug_enabled = False


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


class CommandError(Exception):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


def format_command(cmd: Sequence[str]) -> str:
    """Join an argument list for display."""
    return " ".join(cmd)


async def run_command(
    cmd: Sequence[str],
    cwd: str | Path | None = None,
    capture: bool = True,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """Run an external program asynchronously.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        capture: Whether to capture stdout/stderr.  When ``False`` the child
            inherits the terminal, which interactive CLIs require.
        env: Optional extra environment variables merged on top of ``os.environ``.
        timeout: Optional wall-clock limit in seconds.  ``None`` waits for as
            long as the process runs.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        CommandError: If the program cannot be started at all.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    pipe = asyncio.subprocess.PIPE if capture else None
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=pipe,
            stderr=pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError as exc:
        raise CommandError(
            f"Command not found: {cmd[0]}", command=format_command(cmd)
        ) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {format_command(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: Sequence[str],
    cwd: str | Path | None = None,
    capture: bool = True,
) -> str:
    """Run a command and return its stdout, raising ``CommandError`` on failure."""
    cmd_str = format_command(cmd)
    print_debug(f"$ {cmd_str}" + (f"  (cwd={cwd})" if cwd else ""))
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, capture=capture)
    if returncode != 0:
        detail = f"\n{stderr}" if stderr else ""
        raise CommandError(
            f"Command failed (exit {returncode}): {cmd_str}{detail}",
            command=cmd_str,
            returncode=returncode,
            stderr=stderr,
        )
    return stdout


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    return json.loads(Path(path).read_text(encoding="utf-8"))


async def write_text_file(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories first.

    The write runs in a worker thread so the event loop is never blocked.
    """
    file_path = Path(path)

    def _write() -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")

    await asyncio.to_thread(_write)
    return file_path


# ---------------------------------------------------------------------------
# Debug toggle
# ---------------------------------------------------------------------------


def set_debug(enabled: bool) -> None:
    """Turn ``[Debug]`` output and failure tracebacks on or off."""
    global _debug_enabled
    _debug_enabled = enabled


def is_debug() -> bool:
    return _debug_enabled


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_info(message: str = "") -> None:
    """Print a plain line, verbatim."""
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def print_step_header(number: int, name: str) -> None:
    """Print a full-width rule announcing a pipeline step."""
    console.print()
    console.print(Rule(f"[bold bright_cyan] Step {number}: {escape(name)} [/bold bright_cyan]", style="bright_cyan"))


def print_dry_run(message: str) -> None:
    """Print what a mutating action would have done."""
    console.print(f"[yellow]\\[Dry Run][/yellow] {escape(message)}", highlight=False, soft_wrap=True)


def print_debug(message: str) -> None:
    """Print a diagnostic line when debug mode is on."""
    if _debug_enabled:
        console.print(f"[dim]\\[Debug] {escape(message)}[/dim]", highlight=False, soft_wrap=True)


def print_traceback() -> None:
    """Print the active exception's traceback when debug mode is on."""
    if _debug_enabled:
        console.print("\nStack trace:", style="dim")
        console.print(traceback.format_exc(), style="dim", markup=False, highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", soft_wrap=True)


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]", soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", soft_wrap=True)


def print_summary_table(data: Mapping[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()
