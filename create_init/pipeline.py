"""create-init setup pipeline.

Drives the fixed, strictly sequential setup of a new starter-kit project:

1. project name  -- ask for (or validate) the directory name.
2. clone         -- clone the starter kit and drop its git history.
3. install       -- install dependencies with the package manager.
4. provision     -- create a new Convex deployment.
5. fetch URL     -- read the deployment's ``CONVEX_URL``.
6. configuration -- walk ``setup-config.json`` and write env files / remote vars.
7. validation    -- push once to check the deployment accepts the config.
8. auth setup    -- run the Convex auth helper.

Any failure stops the run; nothing already done is rolled back.

Usage::

    create-init
    create-init --dry-run --descriptor ./setup-config.json
    python -m create_init --name my-app --debug
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from rich.panel import Panel

from create_init import utils
from create_init.backend import BackendError, ConvexBackend
from create_init.config import Config
from create_init.descriptor import DescriptorError, DescriptorNotFoundError, load_descriptor
from create_init.prompts import PROJECT_NAME_HINT, AskFunc, ask_project_name, ask_value, is_valid_project_name
from create_init.resolver import ConfigurationResolver, EnvironmentWriter, setup_environment
from create_init.starter import StarterKit

# ---------------------------------------------------------------------------
# Exceptions & state
# ---------------------------------------------------------------------------


class SetupError(Exception):
    """Raised when a setup step fails irrecoverably."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        self.message = message
        super().__init__(f"Error during {step}: {message}")


@dataclass
class SetupState:
    """Everything a run has produced so far."""

    project_name: str = ""
    target_dir: Optional[Path] = None
    convex_url: str = ""
    completed: list[str] = field(default_factory=list)
    env: dict[str, dict[str, str]] = field(default_factory=dict)
    written: dict[str, str] = field(default_factory=dict)
    write_failures: dict[str, str] = field(default_factory=dict)
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failed_step is None


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class SetupPipeline:
    """Runs the setup steps in order against one configuration.

    Attributes:
        config: Run configuration (repo, paths, dry-run flag).
        state: Accumulated results, returned from :meth:`run`.
    """

    # (label used in error messages, header text, method)
    _STEPS: tuple[tuple[str, str, str], ...] = (
        ("project name", "Project name", "step_project_name"),
        ("clone", "Cloning the starter kit", "step_clone"),
        ("install", "Installing dependencies", "step_install"),
        ("provision", "Initializing Convex", "step_provision"),
        ("fetch URL", "Fetching the deployment URL", "step_fetch_url"),
        ("configuration", "Setting up configuration", "step_configure"),
        ("validation", "Validating configuration", "step_validate"),
        ("auth setup", "Setting up Convex authentication", "step_auth_setup"),
    )

    def __init__(
        self,
        config: Config,
        project_name: str | None = None,
        ask_name: Callable[[str], str] = ask_project_name,
        ask: AskFunc = ask_value,
        starter: StarterKit | None = None,
        backend: ConvexBackend | None = None,
    ) -> None:
        self.config = config
        self.preset_name = project_name
        self.ask_name = ask_name
        self.ask = ask
        self.starter = starter or StarterKit(
            config.repo_url, package_manager=config.package_manager, dry_run=config.dry_run
        )
        self._backend = backend
        self.state = SetupState()

    @property
    def backend(self) -> ConvexBackend:
        if self._backend is None:
            self._backend = ConvexBackend(
                self.config.backend_path(self.state.project_name), dry_run=self.config.dry_run
            )
        return self._backend

    @property
    def target_dir(self) -> Path:
        return self.config.target_dir(self.state.project_name)

    async def run(self) -> SetupState:
        """Execute every step; stops at the first failure.

        Returns:
            The final ``SetupState``; ``success`` is ``False`` if a step failed.
        """
        utils.console.print(
            Panel(
                "[bold bright_cyan]Welcome to the Convex TCN Starter Kit Setup![/bold bright_cyan]",
                border_style="bright_cyan",
            )
        )
        if self.config.dry_run:
            utils.print_warning("Running in dry-run mode: no changes will be made.")

        for number, (label, title, method_name) in enumerate(self._STEPS, start=1):
            utils.print_step_header(number, title)
            try:
                await getattr(self, method_name)()
            except SetupError as exc:
                self._record_failure(exc)
                break
            except Exception as exc:
                self._record_failure(SetupError(label, str(exc)))
                break
            self.state.completed.append(label)

        if self.state.success:
            self._print_final_summary()
        return self.state

    def _record_failure(self, exc: SetupError) -> None:
        self.state.failed_step = exc.step
        self.state.error = exc.message
        utils.print_error(str(exc))
        utils.print_traceback()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def step_project_name(self) -> None:
        if self.preset_name is not None:
            if not is_valid_project_name(self.preset_name):
                raise SetupError("project name", f"'{self.preset_name}': {PROJECT_NAME_HINT}")
            name = self.preset_name
        else:
            name = self.ask_name(self.config.default_project_name)
        self.state.project_name = name
        self.state.target_dir = self.target_dir
        utils.print_debug(f"Target directory: {self.target_dir}")

    async def step_clone(self) -> None:
        await self.starter.clone(self.target_dir)

    async def step_install(self) -> None:
        await self.starter.install(self.target_dir)

    async def step_provision(self) -> None:
        if self.config.dry_run:
            utils.print_dry_run("Would initialize Convex and fetch URL")
            return
        await self.backend.configure_new()

    async def step_fetch_url(self) -> None:
        if self.config.dry_run:
            self.state.convex_url = self.config.dry_run_url
            return
        try:
            url = await self.backend.get_env("CONVEX_URL")
        except BackendError as exc:
            raise SetupError("getting Convex URL", str(exc)) from exc
        if not url:
            raise SetupError("getting Convex URL", "the deployment returned an empty CONVEX_URL")
        self.state.convex_url = url

    async def step_configure(self) -> None:
        descriptor_path = self.config.descriptor_file(self.state.project_name)
        try:
            descriptor = load_descriptor(descriptor_path)
        except DescriptorNotFoundError as exc:
            message = str(exc)
            if self.config.dry_run and self.config.descriptor_path is None:
                message += " (nothing is cloned in dry-run mode; pass --descriptor)"
            raise SetupError("configuration", message) from exc
        except DescriptorError as exc:
            raise SetupError("configuration", str(exc)) from exc
        utils.print_debug(f"Loaded config from: {descriptor_path}")

        resolver = ConfigurationResolver(
            ask=self.ask,
            cloud_domain=self.config.cloud_domain,
            site_domain=self.config.site_domain,
            backend_url_variable=self.config.backend_url_variable,
        )
        writer = EnvironmentWriter(
            self.target_dir,
            backend=self.backend,
            backend_project_id=self.config.backend_project_id,
            dry_run=self.config.dry_run,
        )
        result, report = await setup_environment(descriptor, self.state.convex_url, resolver, writer)
        self.state.env = result.collected.as_dict()
        self.state.written = report.written
        self.state.write_failures = report.failed

    async def step_validate(self) -> None:
        await self.backend.validate()

    async def step_auth_setup(self) -> None:
        await self.backend.setup_auth()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _print_final_summary(self) -> None:
        utils.console.print()
        rows = {
            "Project": self.state.project_name,
            "Directory": str(self.target_dir),
            "Convex URL": self.state.convex_url,
        }
        for target, destination in self.state.written.items():
            rows[f"Target: {target}"] = destination
        for target, error in self.state.write_failures.items():
            rows[f"Target: {target}"] = f"FAILED ({error})"
        utils.print_summary_table(rows, title="Setup Summary")
        utils.print_success(
            f"Setup complete! Run `cd {self.state.project_name} && "
            f"{self.config.package_manager} run dev` to start."
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-init",
        description="Scaffold a new Turbo + Convex starter kit project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-init\n"
            "  create-init --name my-app\n"
            "  create-init --dry-run --descriptor ./setup-config.json\n"
        ),
    )
    parser.add_argument("--dry-run", action="store_true", help="Print actions instead of performing them")
    parser.add_argument("--debug", action="store_true", help="Verbose output and full stack traces")
    parser.add_argument("--name", default=None, help="Project name (skips the prompt)")
    parser.add_argument("--repo", default=None, help="Starter kit repository to clone")
    parser.add_argument(
        "--descriptor",
        type=Path,
        default=None,
        help="Use this setup-config.json instead of the one in the cloned kit",
    )
    parser.add_argument(
        "--directory", "-C",
        type=Path,
        default=None,
        help="Parent directory for the new project (default: current directory)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-init`` and ``python -m create_init``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env(
        repo_url=args.repo,
        descriptor_path=args.descriptor,
        parent_dir=args.directory,
        dry_run=args.dry_run,
        debug=args.debug or None,
    )
    utils.set_debug(config.debug)

    pipeline = SetupPipeline(config, project_name=args.name)
    try:
        state = asyncio.run(pipeline.run())
    except KeyboardInterrupt:
        utils.print_warning("\nSetup cancelled.")
        sys.exit(130)

    if not state.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
