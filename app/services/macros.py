"""Template variable and time-range macro substitution."""

import json
import re
from collections.abc import Callable
from typing import Any, Protocol

from app.models.query import TimeRange
from json_api_client.urls import encode_component

VariableValue = str | int | float | list[str]

# $name, [[name]], [[name:format]], ${name}, ${name.path}, ${name:format}
VARIABLE_PATTERN = re.compile(r"\$(\w+)|\[\[(\w+?)(?::(\w+))?\]\]|\$\{(\w+)(?:\.([^:^}]+))?(?::([^}]+))?\}")


class TemplateVariables(Protocol):
    """Source of dashboard template variables."""

    def replace(self, text: str, scoped_vars: dict[str, Any] | None = None) -> str: ...

    def names(self) -> list[str]: ...

    def values(self, name: str) -> list[str]: ...


def _quote(value: str, quote: str) -> str:
    return quote + value.replace(quote, "\\" + quote) + quote


LIST_FORMATS: dict[str, Callable[[str, list[str]], str]] = {
    "csv": lambda _, vs: ",".join(vs),
    "raw": lambda _, vs: ",".join(vs),
    "json": lambda _, vs: json.dumps(vs),
    "pipe": lambda _, vs: "|".join(vs),
    "text": lambda _, vs: " + ".join(vs),
    "singlequote": lambda _, vs: ",".join(_quote(v, "'") for v in vs),
    "doublequote": lambda _, vs: ",".join(_quote(v, '"') for v in vs),
    "queryparam": lambda name, vs: "&".join(f"var-{encode_component(name)}={encode_component(v)}" for v in vs),
}


def format_value(name: str, value: VariableValue, fmt: str | None) -> str:
    """Render a variable value with a format; lists default to glob."""
    if not isinstance(value, list):
        value = str(value)
        if fmt == "json":
            return json.dumps(value)
        if fmt == "singlequote":
            return _quote(value, "'")
        if fmt == "doublequote":
            return _quote(value, '"')
        if fmt == "queryparam":
            return f"var-{encode_component(name)}={encode_component(value)}"
        if fmt == "percentencode":
            return encode_component(value)
        return value

    values = [str(v) for v in value]
    if fmt in LIST_FORMATS:
        return LIST_FORMATS[fmt](name, values)
    if fmt == "percentencode":
        return encode_component(format_value(name, values, "glob"))
    return values[0] if len(values) == 1 else "{" + ",".join(values) + "}"


def _scoped_value(entry: Any) -> VariableValue:
    if isinstance(entry, dict) and "value" in entry:
        return entry["value"]
    return entry


class VariableStore:
    """In-process template variables.

    Values are strings or lists of strings (multi-value variables).
    Unknown variables are left as written.
    """

    def __init__(self, variables: dict[str, VariableValue] | None = None):
        self._variables: dict[str, VariableValue] = dict(variables or {})

    def set(self, name: str, value: VariableValue) -> None:
        self._variables[name] = value

    def names(self) -> list[str]:
        return list(self._variables)

    def values(self, name: str) -> list[str]:
        """All values a variable holds, [] for unknown names."""
        value = self._variables.get(name)
        if value is None:
            return []
        if isinstance(value, list):
            return [str(v) for v in value]
        return [str(value)]

    def replace(self, text: str, scoped_vars: dict[str, Any] | None = None) -> str:
        if not text:
            return text
        scoped_vars = scoped_vars or {}

        def substitute(match: re.Match) -> str:
            name = match.group(1) or match.group(2) or match.group(4)
            fmt = match.group(3) or match.group(6)
            if name in scoped_vars:
                value = _scoped_value(scoped_vars[name])
            elif name in self._variables:
                value = self._variables[name]
            else:
                return match.group(0)
            return format_value(name, value, fmt)

        return VARIABLE_PATTERN.sub(substitute, text)


def replace_macros(text: str, time_range: TimeRange | None = None) -> str:
    """Substitute time-range macros; without a range the text is unchanged."""
    if time_range is None or not text:
        return text
    return (
        text.replace("$__unixEpochFrom()", str(time_range.from_unix))
        .replace("$__unixEpochTo()", str(time_range.to_unix))
        .replace("$__isoFrom()", time_range.from_iso)
        .replace("$__isoTo()", time_range.to_iso)
    )


def interpolate(
    text: str,
    variables: TemplateVariables,
    scoped_vars: dict[str, Any] | None = None,
    time_range: TimeRange | None = None,
) -> str:
    """Template variables first, then time macros."""
    return replace_macros(variables.replace(text, scoped_vars), time_range)


def make_interpolator(
    variables: TemplateVariables,
    scoped_vars: dict[str, Any] | None = None,
    time_range: TimeRange | None = None,
) -> Callable[[str], str]:
    """Bind variables and range into a one-argument interpolate function."""

    def _interpolate(text: str) -> str:
        return interpolate(text, variables, scoped_vars, time_range)

    return _interpolate
