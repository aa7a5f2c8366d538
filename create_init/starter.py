"""Starter kit checkout and dependency installation."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from create_init import utils
from create_init.utils import CommandError


class StarterError(Exception):
    """Raised when cloning or installing the starter kit fails."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class StarterKit:
    """Clones the starter kit repository and installs its dependencies.

    The clone is detached from the upstream history by deleting its ``.git``
    directory, so the new project starts without the template's commits.
    """

    def __init__(self, repo_url: str, package_manager: str = "pnpm", dry_run: bool = False) -> None:
        self.repo_url = repo_url
        self.package_manager = package_manager
        self.dry_run = dry_run

    async def clone(self, target_dir: str | Path) -> Path:
        """Clone into *target_dir*, which must not exist or be empty.

        Raises:
            StarterError: If the directory is occupied or ``git clone`` fails.
        """
        target = Path(target_dir)
        if self.dry_run:
            utils.print_dry_run(f"Would clone {self.repo_url} into {target}")
            return target

        if target.exists() and any(target.iterdir()):
            raise StarterError(f"Target directory already exists and is not empty: {target}")

        try:
            await utils.run_checked(["git", "clone", self.repo_url, str(target)])
        except CommandError as exc:
            raise StarterError(str(exc), command=exc.command, stderr=exc.stderr) from exc

        git_dir = target / ".git"
        if git_dir.exists():
            await asyncio.to_thread(shutil.rmtree, git_dir)
            utils.print_debug(f"Removed {git_dir}")
        return target

    async def install(self, target_dir: str | Path) -> None:
        """Install the project's dependencies with the configured package manager."""
        cmd = [self.package_manager, "install"]
        if self.dry_run:
            utils.print_dry_run(f"Would run: {utils.format_command(cmd)}")
            return
        try:
            await utils.run_checked(cmd, cwd=target_dir, capture=False)
        except CommandError as exc:
            raise StarterError(str(exc), command=exc.command, stderr=exc.stderr) from exc
