"""``{{name}}`` placeholder substitution for descriptor text."""

from __future__ import annotations

import re
from typing import Iterable, Mapping

_PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def render_template(text: str, values: Mapping[str, str]) -> str:
    """Replace every ``{{key}}`` in *text* whose key is present in *values*.

    Placeholders naming an unknown key are left untouched, byte for byte.
    Substituted values are not scanned again.
    """

    def replacement(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    if "{{" not in text:
        return text
    return _PLACEHOLDER_PATTERN.sub(replacement, text)


def render_lines(lines: Iterable[str], values: Mapping[str, str]) -> list[str]:
    return [render_template(line, values) for line in lines]
