"""Configuration resolution: walk the descriptor and collect values.

For each step the resolver shows the (rendered) instructions, asks for every
variable with a pre-filled default, and records the answer under each of the
variable's output targets.  The ``TemplateContext`` is passed into and
returned from every step; a variable marked ``isBackendUrl``, or named
``NEXT_PUBLIC_CONVEX_URL``, produces a new context that later steps and
variables render against.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from create_init import utils
from create_init.descriptor import Descriptor, Step, Variable
from create_init.prompts import AskFunc, ask_value
from create_init.resolver.context import CONVEX_CLOUD_DOMAIN, CONVEX_SITE_DOMAIN, TemplateContext
from create_init.resolver.templating import render_lines, render_template

BACKEND_URL_VARIABLE = "NEXT_PUBLIC_CONVEX_URL"


@dataclass
class CollectedEnvironment:
    """Resolved values grouped by output target, in resolution order."""

    targets: dict[str, dict[str, str]] = field(default_factory=dict)

    def record(self, target: str, name: str, value: str) -> None:
        self.targets.setdefault(target, {})[name] = value

    def entries(self, target: str) -> dict[str, str]:
        return dict(self.targets.get(target, {}))

    def as_dict(self) -> dict[str, dict[str, str]]:
        return {target: dict(values) for target, values in self.targets.items()}

    def __len__(self) -> int:
        return sum(len(values) for values in self.targets.values())


@dataclass
class ResolutionResult:
    collected: CollectedEnvironment
    context: TemplateContext


class ConfigurationResolver:
    """Interactively resolves every variable of a descriptor.

    Args:
        ask: Prompt callable ``(message, default) -> answer``.  Defaults to a
            Rich text prompt; tests pass a scripted callable.
        cloud_domain: Domain suffix of deployment URLs.
        site_domain: Domain suffix substituted to derive the site URL.
        backend_url_variable: Variable name that carries the backend URL even
            without an ``isBackendUrl`` marker.
    """

    def __init__(
        self,
        ask: AskFunc = ask_value,
        cloud_domain: str = CONVEX_CLOUD_DOMAIN,
        site_domain: str = CONVEX_SITE_DOMAIN,
        backend_url_variable: str = BACKEND_URL_VARIABLE,
    ) -> None:
        self.ask = ask
        self.cloud_domain = cloud_domain
        self.site_domain = site_domain
        self.backend_url_variable = backend_url_variable

    def resolve(self, descriptor: Descriptor, backend_url: str) -> ResolutionResult:
        """Walk all steps in order and return the collected values."""
        if descriptor.intro_message:
            utils.print_info(descriptor.intro_message)

        context = TemplateContext.from_backend_url(
            backend_url, self.cloud_domain, self.site_domain
        )
        collected = CollectedEnvironment()
        for step in descriptor.steps:
            context = self.resolve_step(step, context, collected)

        utils.print_debug(f"Collected {len(collected)} value(s) for {len(collected.targets)} target(s)")
        return ResolutionResult(collected=collected, context=context)

    def resolve_step(
        self,
        step: Step,
        context: TemplateContext,
        collected: CollectedEnvironment,
    ) -> TemplateContext:
        """Resolve one step, recording into *collected*; returns the updated context."""
        utils.print_info()
        utils.print_info(f"{step.title}: {step.description}")
        for line in render_lines(step.instructions, context.values()):
            utils.print_info(line)

        for variable in step.variables:
            context = self.resolve_variable(variable, context, collected)

        for instruction in step.additional_instructions:
            utils.print_info(f"Note: {render_template(instruction, context.values())}")

        if not step.required and step.required_message:
            utils.print_info(f"Note: {step.required_message}")

        return context

    def resolve_variable(
        self,
        variable: Variable,
        context: TemplateContext,
        collected: CollectedEnvironment,
    ) -> TemplateContext:
        if variable.details:
            utils.print_info(render_template(variable.details, context.values()))

        initial = variable.default_value
        if variable.template:
            initial = render_template(variable.template, context.values())

        value = self.ask(f"Enter {variable.name}", initial)

        if variable.is_backend_url or variable.name == self.backend_url_variable:
            context = context.with_backend_url(value)
            utils.print_debug(f"Updated template values with new backend URL: {value}")

        for target in variable.projects:
            collected.record(target, variable.name, value)

        for line in variable.info:
            utils.print_info(f"Info: {render_template(line, context.extended(variable.name, value))}")

        return context
