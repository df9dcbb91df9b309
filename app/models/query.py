"""Query schemas - what the caller asks for in one execution."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from settings import DEFAULT_CACHE_DURATION


class QueryLanguage(StrEnum):
    """Expression dialect of a field."""

    JSONPATH = "jsonpath"
    JSONATA = "jsonata"


class FieldType(StrEnum):
    """Scalar type of an output column."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    TIME = "time"


class JsonField(BaseModel):
    """One output column: name, expression and dialect."""

    name: str | None = None
    json_path: str = Field(alias="jsonPath", default="")
    language: QueryLanguage = QueryLanguage.JSONPATH
    type: FieldType | None = None

    class Config:
        populate_by_name = True
        frozen = True


class Query(BaseModel):
    """Declarative data query."""

    ref_id: str = Field(alias="refId", default="A")
    api_id: str | None = Field(alias="apiId", default=None)
    request_type: str | None = Field(alias="requestType", default=None)
    method: str = "GET"
    url_path: str = Field(alias="urlPath", default="")
    params: list[tuple[str, str]] = []
    headers: list[tuple[str, str]] = []
    body: str = ""
    custom_body: dict[str, Any] | None = Field(alias="customBody", default=None)
    cache_duration_seconds: int = Field(alias="cacheDurationSeconds", default=DEFAULT_CACHE_DURATION, ge=0)
    fields: list[JsonField] = []
    hide: bool = False

    group_by_field: str | None = Field(alias="experimentalGroupByField", default=None)
    metric_field: str | None = Field(alias="experimentalMetricField", default=None)
    variable_text_field: str | None = Field(alias="experimentalVariableTextField", default=None)
    variable_value_field: str | None = Field(alias="experimentalVariableValueField", default=None)

    class Config:
        populate_by_name = True
        frozen = True


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso(value: datetime) -> str:
    """UTC ISO-8601 with milliseconds, e.g. 2024-01-01T00:00:00.000Z."""
    value = _utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class TimeRange:
    """Dashboard time range, always in UTC."""

    from_: datetime
    to: datetime

    def __post_init__(self):
        object.__setattr__(self, "from_", _utc(self.from_))
        object.__setattr__(self, "to", _utc(self.to))

    @classmethod
    def from_epoch(cls, start: float, end: float) -> "TimeRange":
        """Build from epoch seconds."""
        return cls(
            datetime.fromtimestamp(start, tz=timezone.utc),
            datetime.fromtimestamp(end, tz=timezone.utc),
        )

    @property
    def from_unix(self) -> int:
        return int(self.from_.timestamp())

    @property
    def to_unix(self) -> int:
        return int(self.to.timestamp())

    @property
    def from_ms(self) -> int:
        return self.from_unix * 1000 + self.from_.microsecond // 1000

    @property
    def to_ms(self) -> int:
        return self.to_unix * 1000 + self.to.microsecond // 1000

    @property
    def from_iso(self) -> str:
        return format_iso(self.from_)

    @property
    def to_iso(self) -> str:
        return format_iso(self.to)
