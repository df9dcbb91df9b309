"""Data source configuration loading."""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.errors import ConfigError
from app.models.api import ApiConfiguration, DataSourceSettings
from app.models.query import Query


def parse_settings(data: dict[str, Any]) -> DataSourceSettings:
    """Validate raw data source settings."""
    try:
        return DataSourceSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid data source settings: {e}") from e


def load_settings(path: str | Path) -> DataSourceSettings:
    """Read and validate a data source settings JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read data source settings {path}: {e}") from e

    settings = parse_settings(data)
    logger.info("Loaded {} APIs from {}", len(settings.apis), path)
    return settings


def parse_apis(apis: list[ApiConfiguration | dict[str, Any]]) -> list[ApiConfiguration]:
    """Validate a list of API configurations, rejecting duplicate ids."""
    try:
        parsed = [a if isinstance(a, ApiConfiguration) else ApiConfiguration.model_validate(a) for a in apis]
    except ValidationError as e:
        raise ConfigError(f"Invalid API configuration: {e}") from e

    ids = [a.id for a in parsed]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate API id: {', '.join(duplicates)}")
    return parsed


def parse_query(data: Query | dict[str, Any]) -> Query:
    """Validate one query."""
    if isinstance(data, Query):
        return data
    try:
        return Query.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid query: {e}") from e
