"""Models package - query, configuration and frame types."""

from app.models.api import ApiConfiguration, DataSourceSettings, HttpMethod, RequestType
from app.models.common import BaseEntity
from app.models.frame import ApiHealth, DataField, Frame, HealthResult, MetricFindValue
from app.models.query import FieldType, JsonField, Query, QueryLanguage, TimeRange

__all__ = [
    # Common
    "BaseEntity",
    # Configuration
    "ApiConfiguration",
    "DataSourceSettings",
    "HttpMethod",
    "RequestType",
    # Query
    "FieldType",
    "JsonField",
    "Query",
    "QueryLanguage",
    "TimeRange",
    # Results
    "ApiHealth",
    "DataField",
    "Frame",
    "HealthResult",
    "MetricFindValue",
]
