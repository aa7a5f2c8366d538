"""Pydantic v2 models for the starter kit's ``setup-config.json`` descriptor.

The descriptor is an ordered list of steps, each describing one phase of
configuration collection, plus the list of output targets ("projects") the
collected variables are routed to.  It is validated once at load time so that
a malformed file fails fast with a message naming the offending field instead
of surfacing as a missing-key error halfway through the prompts.

JSON keys are camelCase; the models expose snake_case attributes and accept
either spelling.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from create_init.utils import load_json


class DescriptorError(Exception):
    """Raised when the descriptor cannot be read or does not match the schema."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class DescriptorNotFoundError(DescriptorError):
    """Raised when the descriptor file does not exist."""


class _DescriptorModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Variable(_DescriptorModel):
    """One configuration value to collect and route to one or more targets."""

    name: str = Field(..., min_length=1, description="Environment variable name")
    projects: list[str] = Field(default_factory=list, description="Target ids receiving the value")
    default_value: str = Field(default="", description="Initial prompt value")
    required: bool = Field(default=True, description="Informational only; never enforced")
    template: Optional[str] = Field(
        default=None, description="Initial value rendered from known template values"
    )
    info: list[str] = Field(default_factory=list, description="Lines shown after collection")
    details: Optional[str] = Field(default=None, description="Help text shown before the prompt")
    is_backend_url: bool = Field(
        default=False, description="Collected value replaces the backend URL for later steps"
    )

    @field_validator("default_value", mode="before")
    @classmethod
    def _scalar_default_to_str(cls, value: object) -> object:
        # null, false and 0 all mean "no default"
        if value is None or value is False or (isinstance(value, (int, float)) and value == 0):
            return ""
        if value is True:
            return "true"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class Step(_DescriptorModel):
    """A titled phase of configuration collection."""

    title: str
    description: str = ""
    instructions: list[str] = Field(default_factory=list)
    variables: list[Variable] = Field(default_factory=list)
    additional_instructions: list[str] = Field(default_factory=list)
    required: bool = True
    required_message: Optional[str] = None

    @field_validator("instructions", "additional_instructions", mode="before")
    @classmethod
    def _single_string_to_list(cls, value: Union[str, list[str], None]) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class Project(_DescriptorModel):
    """An output target: an env file, or the backend's remote env store."""

    id: str = Field(..., min_length=1)
    env_file: Optional[str] = Field(default=None, description="Path relative to the project root")


class Descriptor(_DescriptorModel):
    """The whole setup descriptor."""

    intro_message: Optional[str] = None
    steps: list[Step] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_targets(self) -> "Descriptor":
        seen: set[str] = set()
        for project in self.projects:
            if project.id in seen:
                raise ValueError(f"duplicate project id '{project.id}'")
            seen.add(project.id)

        for step in self.steps:
            for variable in step.variables:
                unknown = [target for target in variable.projects if target not in seen]
                if unknown:
                    raise ValueError(
                        f"variable '{variable.name}' in step '{step.title}' is routed to "
                        f"unknown project(s): {', '.join(unknown)}"
                    )
        return self

    def project_ids(self) -> list[str]:
        return [project.id for project in self.projects]


def load_descriptor(path: str | Path) -> Descriptor:
    """Load and validate a descriptor file.

    Raises:
        DescriptorNotFoundError: If *path* does not exist.
        DescriptorError: If the file is not valid JSON or violates the schema.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DescriptorNotFoundError(f"{file_path.name} not found at {file_path}", path=file_path)

    try:
        raw = load_json(file_path)
    except json.JSONDecodeError as exc:
        raise DescriptorError(
            f"{file_path} is not valid JSON (line {exc.lineno}, column {exc.colno}): {exc.msg}",
            path=file_path,
        ) from exc

    try:
        return Descriptor.model_validate(raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in exc.errors()
        )
        raise DescriptorError(f"{file_path} does not match the descriptor schema: {problems}", path=file_path) from exc
