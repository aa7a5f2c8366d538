"""Convex CLI invocations for the scaffolded project's backend package.

Every call runs ``npx convex ...`` (or the auth helper) inside the backend
package directory.  Interactive commands inherit the terminal; ``env get`` is
captured so its output can be used as the deployment URL.
"""

from __future__ import annotations

from pathlib import Path

from create_init import utils
from create_init.utils import CommandError, format_command


class BackendError(Exception):
    """Raised when a Convex CLI invocation fails."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class ConvexBackend:
    """Thin wrapper around the Convex CLI.

    In dry-run mode the mutating operations print the command they would run
    and return without spawning anything.
    """

    CLI = ("npx", "convex")
    AUTH_SETUP = ("npx", "@convex-dev/auth")

    def __init__(self, backend_dir: str | Path, dry_run: bool = False) -> None:
        self.backend_dir = Path(backend_dir)
        self.dry_run = dry_run

    async def _run(self, *args: str, base: tuple[str, ...] = CLI, capture: bool = False) -> str:
        cmd = [*base, *args]
        if self.dry_run:
            utils.print_dry_run(f"Would run: {format_command(cmd)} (cwd={self.backend_dir})")
            return ""
        try:
            return await utils.run_checked(cmd, cwd=self.backend_dir, capture=capture)
        except CommandError as exc:
            raise BackendError(str(exc), command=exc.command, stderr=exc.stderr) from exc

    async def configure_new(self) -> None:
        """Create and configure a new deployment (interactive login/project selection)."""
        await self._run("dev", "--once", "--configure=new")

    async def get_env(self, name: str) -> str:
        """Read a deployment environment variable."""
        value = (await self._run("env", "get", name, capture=True)).strip()
        utils.print_debug(f"Got {name}: {value}")
        return value

    async def set_env(self, name: str, value: str) -> None:
        await self._run("env", "set", name, value)

    async def validate(self) -> None:
        """Push once against the configured deployment to check it accepts the config."""
        await self._run("dev", "--once")

    async def setup_auth(self) -> None:
        await self._run(base=self.AUTH_SETUP)
