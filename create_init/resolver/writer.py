"""Persist collected values to their output targets.

A target with an ``envFile`` gets a ``KEY=VALUE`` file (one line per value,
in resolution order).  The backend target without a file gets one remote
``env set`` per value.  A failure on one target is reported and recorded, and
the remaining targets are still written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from create_init import utils
from create_init.descriptor import Descriptor, Project
from create_init.resolver.collector import CollectedEnvironment, ConfigurationResolver, ResolutionResult


class RemoteEnvStore(Protocol):
    async def set_env(self, name: str, value: str) -> None: ...


def format_env(entries: Mapping[str, str]) -> str:
    """Serialise *entries* as newline-joined ``KEY=VALUE`` pairs."""
    return "\n".join(f"{key}={value}" for key, value in entries.items())


@dataclass
class WriteReport:
    """Outcome per target id: what was written, skipped, or failed."""

    written: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class EnvironmentWriter:
    """Writes each target's collected values to its destination.

    Args:
        project_root: Directory env-file paths are relative to.
        backend: Remote env store for the backend target.
        backend_project_id: Target id routed to *backend*.
        dry_run: Print the intended writes instead of performing them.
    """

    def __init__(
        self,
        project_root: str | Path,
        backend: RemoteEnvStore | None = None,
        backend_project_id: str = "convex",
        dry_run: bool = False,
    ) -> None:
        self.project_root = Path(project_root)
        self.backend = backend
        self.backend_project_id = backend_project_id
        self.dry_run = dry_run

    async def write_all(
        self, projects: Sequence[Project], collected: CollectedEnvironment
    ) -> WriteReport:
        report = WriteReport()
        for project in projects:
            try:
                destination = await self.write_project(project, collected.entries(project.id))
            except Exception as exc:
                utils.print_error(f"Error writing env for {project.id}: {exc}")
                utils.print_traceback()
                report.failed[project.id] = str(exc)
                continue

            if destination is None:
                report.skipped.append(project.id)
            else:
                report.written[project.id] = destination
        return report

    async def write_project(self, project: Project, entries: Mapping[str, str]) -> str | None:
        """Write one target; returns a description of the destination, or ``None`` if skipped."""
        if project.env_file:
            return await self._write_env_file(self.project_root / project.env_file, entries)
        if project.id == self.backend_project_id:
            return await self._set_remote(entries)

        utils.print_debug(f"No destination for project '{project.id}', skipping")
        return None

    async def _write_env_file(self, path: Path, entries: Mapping[str, str]) -> str:
        content = format_env(entries)
        if self.dry_run:
            utils.print_dry_run(f"Would write to {path}:")
            utils.print_info(content)
        else:
            await utils.write_text_file(path, content)
            utils.print_success(f"Wrote {path}")
            utils.print_debug(f"Wrote env file: {path}")
        return str(path)

    async def _set_remote(self, entries: Mapping[str, str]) -> str:
        for name, value in entries.items():
            if self.dry_run:
                utils.print_dry_run(f"Would set Convex env {name}={value}")
                continue
            if self.backend is None:
                raise RuntimeError("no backend available to store environment variables")
            await self.backend.set_env(name, value)
            utils.print_debug(f"Set Convex env: {name}")
        return f"{len(entries)} remote variable(s)"


async def setup_environment(
    descriptor: Descriptor,
    backend_url: str,
    resolver: ConfigurationResolver,
    writer: EnvironmentWriter,
) -> tuple[ResolutionResult, WriteReport]:
    """Collect every descriptor value, then persist it to the declared targets."""
    result = resolver.resolve(descriptor, backend_url)
    report = await writer.write_all(descriptor.projects, result.collected)
    return result, report
