"""Field extraction - JSONPath and JSONata expressions over a JSON document."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import jsonata
from jsonpath_ng.ext import parse as parse_jsonpath
from loguru import logger

from app.errors import ExtractionFailedError
from app.models.query import JsonField, QueryLanguage, TimeRange
from app.services.macros import TemplateVariables

# Grafana built-ins bound for JSONata, alongside the dashboard's own variables.
GLOBAL_VARIABLES = [
    "__dashboard",
    "__from",
    "__to",
    "__interval",
    "__interval_ms",
    "__name",
    "__org",
    "__user",
    "__range",
    "__rate_interval",
    "timeFilter",
    "__timeFilter",
]

# .name | ['name'] | ["name"] | [0] | [*] | [?(@.x)]
_SEGMENT = re.compile(r"""\[\s*'([^']*)'\s*\]|\[\s*"([^"]*)"\s*\]|\[([^\]]*)\]|\.{1,2}([^.\[\]]+)|^([^.\[\]]+)""")


def path_segments(path: str) -> list[str]:
    """Split a JSONPath into its segments, root included."""
    return [next(g for g in m.groups() if g is not None) for m in _SEGMENT.finditer(path.strip())]


@dataclass(frozen=True)
class PathExpression:
    """JSONPath expression."""

    path: str

    def evaluate(self, document: Any) -> list[Any]:
        matches = [m.value for m in parse_jsonpath(self.path).find(document)]
        # A single array match is the column itself
        if len(matches) == 1 and isinstance(matches[0], list):
            return list(matches[0])
        return matches

    def last_segment(self) -> str:
        segments = path_segments(self.path)
        return segments[-1] if segments else self.path


@dataclass(frozen=True)
class FunctionalExpression:
    """JSONata expression evaluated with bound variables."""

    expression: str
    bindings: dict[str, Any] = field(default_factory=dict)

    def evaluate(self, document: Any) -> list[Any]:
        expr = jsonata.Jsonata(self.expression)
        for name, value in self.bindings.items():
            expr.assign(name, value)
        result = expr.evaluate(document)
        # Scalars become one-element columns
        return list(result) if isinstance(result, list) else [result]


Expression = PathExpression | FunctionalExpression


def _scoped_values(value: Any) -> list[str]:
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def functional_bindings(
    variables: TemplateVariables,
    time_range: TimeRange | None = None,
    scoped_vars: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Every dashboard and global variable bound to its list of values, plus range bindings.

    All variables are resolved, including ones the expression never references.
    Globals come from the scoped variables first (``__from``/``__to`` live there).
    """
    scoped = scoped_vars or {}
    bindings: dict[str, Any] = {name: variables.values(name) for name in variables.names()}
    for name in GLOBAL_VARIABLES:
        if name in scoped:
            bindings[name] = _scoped_values(scoped[name])
        else:
            bindings[name] = variables.values(name)

    if time_range is not None:
        bindings["__unixEpochFrom"] = time_range.from_ms
        bindings["__unixEpochTo"] = time_range.to_ms
        bindings["__isoFrom"] = time_range.from_iso
        bindings["__isoTo"] = time_range.to_iso
    return bindings


def expression_for(
    spec: JsonField,
    interpolate: Callable[[str], str],
    bindings: dict[str, Any] | None = None,
) -> Expression:
    """Pick the expression variant for a field.

    JSONPath text is interpolated first; JSONata reads variables from its bindings.
    """
    if spec.language == QueryLanguage.JSONATA:
        return FunctionalExpression(spec.json_path, bindings or {})
    return PathExpression(interpolate(spec.json_path))


def extract(expression: Expression, document: Any, field_name: str) -> list[Any]:
    """Evaluate an expression, wrapping any failure in ExtractionFailedError."""
    try:
        values = expression.evaluate(document)
    except Exception as e:
        raise ExtractionFailedError(field_name, str(e) or e.__class__.__name__) from e
    logger.debug("Extracted {} values for field {}", len(values), field_name)
    return values
