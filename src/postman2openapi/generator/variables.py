"""Variable resolver for `{{name}}` templates.

Substitution runs in rounds bounded by a credit limit, so a self-referential
table (`a = "{{a}}"`) still terminates.
"""

import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, NamedTuple

from postman2openapi.parser.base import Variable

logger = logging.getLogger(__name__)

DEFAULT_CREDITS = 20


class Placeholder(NamedTuple):
    name: str
    start: int
    end: int


def scan_placeholders(text: str, open_: str = "{{", close: str = "}}") -> list[Placeholder]:
    """Find `open_ name close` spans whose name contains no braces."""
    found = []
    pos = 0
    while True:
        start = text.find(open_, pos)
        if start < 0:
            return found
        name_start = start + len(open_)
        end = text.find(close, name_start)
        if end < 0:
            return found
        name = text[name_start:end]
        if "{" in name or "}" in name:
            # Retry from the innermost brace, e.g. "{{{a}}" holds "{{a}}".
            pos = start + 1
            continue
        found.append(Placeholder(name, start, end + len(close)))
        pos = end + len(close)


def to_path_template(text: str) -> str:
    """Rewrite every `{{name}}` into the OpenAPI path form `{name}`."""
    parts = []
    pos = 0
    for p in scan_placeholders(text):
        parts.append(text[pos:p.start])
        parts.append("{" + p.name + "}")
        pos = p.end
    parts.append(text[pos:])
    return "".join(parts)


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


class Variables:
    """An immutable name -> value table with bounded template resolution."""

    def __init__(self, values: dict[str, Any] | None = None, credits: int = DEFAULT_CREDITS):
        self._values = dict(values or {})
        self.credits = credits

    @classmethod
    def from_collection(cls, variables: Iterable[Variable], credits: int = DEFAULT_CREDITS) -> "Variables":
        """Build the table from collection variables, dropping empty values."""
        values = {}
        for v in variables:
            if v.key is None or v.value is None or v.value == "":
                continue
            values[v.key] = v.value
        return cls(values, credits)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str) -> Any:
        return self._values.get(name)

    def resolve(self, template: str, transform: Callable[[str], str] | None = None) -> str:
        """Substitute known placeholders until nothing changes or credits run out.

        Unknown placeholders pass through untouched. `transform`, when given,
        runs once on the final string.
        """
        text = template
        for _ in range(self.credits):
            substituted = self._substitute(text)
            if substituted == text:
                break
            text = substituted
        else:
            if scan_placeholders(text) and self._substitute(text) != text:
                logger.debug("Variable credits exhausted resolving %r", template)
        return transform(text) if transform else text

    def _substitute(self, text: str) -> str:
        parts = []
        pos = 0
        for p in scan_placeholders(text):
            value = _as_text(self._values.get(p.name))
            if value is None:
                continue
            parts.append(text[pos:p.start])
            parts.append(value)
            pos = p.end
        parts.append(text[pos:])
        return "".join(parts)
