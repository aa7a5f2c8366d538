"""Configuration resolver -- turns a setup descriptor into env files and remote variables.

Quick usage::

    from create_init.resolver import ConfigurationResolver, EnvironmentWriter, setup_environment

    resolver = ConfigurationResolver()
    writer = EnvironmentWriter(project_root, backend=backend)
    result, report = await setup_environment(descriptor, convex_url, resolver, writer)
"""

from create_init.resolver.collector import (
    CollectedEnvironment,
    ConfigurationResolver,
    ResolutionResult,
)
from create_init.resolver.context import TemplateContext, derive_site_url
from create_init.resolver.templating import render_lines, render_template
from create_init.resolver.writer import (
    EnvironmentWriter,
    WriteReport,
    format_env,
    setup_environment,
)

__all__ = [
    "CollectedEnvironment",
    "ConfigurationResolver",
    "EnvironmentWriter",
    "ResolutionResult",
    "TemplateContext",
    "WriteReport",
    "derive_site_url",
    "format_env",
    "render_lines",
    "render_template",
    "setup_environment",
]
