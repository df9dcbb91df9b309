"""Base entity for result types handed to callers."""

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from app.models.query import format_iso


def to_plain(value: Any) -> Any:
    """JSON-ready copy: enums by value, datetimes as ISO-8601 UTC."""
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return format_iso(value)
    return value


@dataclass
class BaseEntity:
    """Dataclass entity with JSON-ready serialization."""

    def to_dict(self) -> dict[str, Any]:
        return to_plain(asdict(self))
