"""create-init -- scaffold a Turbo + Convex starter kit project.

Clones the starter kit, installs its dependencies, provisions a Convex
deployment and walks the kit's ``setup-config.json`` to collect environment
values interactively.

Quick usage::

    from create_init import Config, SetupPipeline

    state = await SetupPipeline(Config(dry_run=True)).run()
"""

from create_init.config import Config
from create_init.pipeline import SetupError, SetupPipeline, SetupState, main

__all__ = [
    "Config",
    "SetupError",
    "SetupPipeline",
    "SetupState",
    "main",
]
