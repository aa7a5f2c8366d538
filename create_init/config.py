"""create-init configuration.

Centralised, typed configuration for a scaffolding run. All settings use
Pydantic v2 models so they are validated at construction time and can be
overridden from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_REPO_URL = "https://github.com/asadkomidev/turbo-convex-starter.git"
DEFAULT_PROJECT_NAME = "my-tcn-app"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global create-init configuration.

    Instances are created once by the CLI entry point and passed to the
    ``SetupPipeline``, which hands the relevant pieces to its collaborators.
    """

    repo_url: str = Field(default=DEFAULT_REPO_URL, description="Starter kit git repository")
    default_project_name: str = Field(default=DEFAULT_PROJECT_NAME)
    parent_dir: Path = Field(
        default_factory=Path.cwd, description="Directory the project is cloned into"
    )
    package_manager: str = Field(default="pnpm")
    backend_dir: str = Field(
        default="packages/backend", description="Backend package, relative to the project root"
    )
    backend_project_id: str = Field(
        default="convex", description="Output target whose values go to the remote env store"
    )
    descriptor_name: str = Field(default="setup-config.json")
    descriptor_path: Optional[Path] = Field(
        default=None, description="Explicit descriptor file; overrides the cloned one"
    )

    cloud_domain: str = Field(default=".convex.cloud")
    site_domain: str = Field(default=".convex.site")
    backend_url_variable: str = Field(
        default="NEXT_PUBLIC_CONVEX_URL",
        description="Variable whose answer replaces the backend URL for later steps",
    )
    dry_run_url: str = Field(default="https://dry-run-example.convex.cloud")

    dry_run: bool = Field(default=False)
    debug: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def target_dir(self, project_name: str) -> Path:
        """Root of the scaffolded project."""
        return self.parent_dir / project_name

    def backend_path(self, project_name: str) -> Path:
        """Working directory for every backend CLI invocation."""
        return self.target_dir(project_name) / self.backend_dir

    def descriptor_file(self, project_name: str) -> Path:
        """The descriptor to load: the explicit one, or the one shipped in the clone."""
        if self.descriptor_path is not None:
            return self.descriptor_path
        return self.target_dir(project_name) / self.descriptor_name

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: object) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CREATE_INIT_REPO, CREATE_INIT_PACKAGE_MANAGER,
            CREATE_INIT_BACKEND_DIR, CREATE_INIT_DEBUG.

        Keyword *overrides* (typically parsed CLI flags) win over the
        environment. ``None`` values are ignored.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("CREATE_INIT_REPO"):
            kwargs["repo_url"] = os.environ["CREATE_INIT_REPO"]
        if os.environ.get("CREATE_INIT_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["CREATE_INIT_PACKAGE_MANAGER"]
        if os.environ.get("CREATE_INIT_BACKEND_DIR"):
            kwargs["backend_dir"] = os.environ["CREATE_INIT_BACKEND_DIR"]
        if os.environ.get("CREATE_INIT_DEBUG", "").strip().lower() in _TRUTHY:
            kwargs["debug"] = True

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
