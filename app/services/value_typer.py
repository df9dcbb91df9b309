"""Column type detection and value coercion."""

import json
import re
from datetime import datetime, timezone
from typing import Any

from app.models.query import FieldType

# 2024-01-31, 2024-01-31T10:00, 2024-01-31 10:00:00.123Z, 2024-01-31T10:00:00+02:00
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def detect_field_type(values: list[Any]) -> FieldType:
    """Type of a column, decided by its first non-null value."""
    sample = next((v for v in values if v is not None), None)
    if sample is None:
        return FieldType.STRING
    if isinstance(sample, bool):
        return FieldType.BOOLEAN
    if _is_number(sample):
        return FieldType.NUMBER
    if isinstance(sample, str) and ISO_DATE.match(sample):
        return FieldType.TIME
    return FieldType.STRING


def parse_time(value: Any) -> datetime | None:
    """ISO-8601 text or epoch milliseconds to a UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif _is_number(value):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and ISO_DATE.match(value.strip()):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_number(value: Any) -> int | float | None:
    if _is_number(value):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def parse_string(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list, bool)):
        return json.dumps(value)
    return str(value)


def parse_boolean(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return value != 0
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


PARSERS = {
    FieldType.NUMBER: parse_number,
    FieldType.STRING: parse_string,
    FieldType.BOOLEAN: parse_boolean,
    FieldType.TIME: parse_time,
}


def parse_values(values: list[Any], field_type: FieldType) -> list[Any]:
    """Coerce every value to the column type; unparseable values become None."""
    parse = PARSERS[field_type]
    return [None if v is None else parse(v) for v in values]
