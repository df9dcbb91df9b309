"""Frame entities - typed columnar results handed to the visualization layer."""

from dataclasses import dataclass, field
from typing import Any

import polars as pl

from app.models.common import BaseEntity
from app.models.query import FieldType

POLARS_DTYPES = {
    FieldType.NUMBER: pl.Float64,
    FieldType.STRING: pl.String,
    FieldType.BOOLEAN: pl.Boolean,
    FieldType.TIME: pl.Datetime("us", "UTC"),
}


@dataclass
class DataField(BaseEntity):
    """One named, typed column."""

    name: str
    type: FieldType
    values: list[Any]
    config: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class Frame(BaseEntity):
    """Named table of equal-length columns."""

    name: str
    fields: list[DataField]
    ref_id: str | None = None

    @property
    def length(self) -> int:
        return len(self.fields[0]) if self.fields else 0

    def get_field(self, name: str) -> DataField | None:
        """Find a field by name."""
        return next((f for f in self.fields if f.name == name), None)

    def to_polars(self) -> pl.DataFrame:
        """Render as a polars DataFrame."""
        return pl.DataFrame(
            [pl.Series(f.name, f.values, dtype=POLARS_DTYPES[f.type], strict=False) for f in self.fields]
        )


@dataclass
class MetricFindValue(BaseEntity):
    """Template variable option."""

    text: Any
    value: Any


@dataclass
class ApiHealth(BaseEntity):
    """Health check result for one API."""

    api_id: str
    api_name: str
    status: str
    message: str


@dataclass
class HealthResult(BaseEntity):
    """Aggregated health check result."""

    status: str
    message: str
    details: list[ApiHealth] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "success"
