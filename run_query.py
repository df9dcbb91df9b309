#!/usr/bin/env python3
"""
Run a JSON API query against a data source configuration.

Usage:
    python run_query.py query.json                    # Uses $JSONAPI_DATASOURCE (datasource.json)
    python run_query.py datasource.json query.json    # Explicit data source settings
    python run_query.py datasource.json --health      # Check every configured API
    python run_query.py ... --debug                   # Debug logging
    python run_query.py ... --json                    # Print results as JSON

The query file holds one query object or a list of them, or an object with
"queries", optional "range" ({"from": ISO, "to": ISO}) and "variables".
"""

import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

from app.container import Container
from app.errors import JsonApiError
from app.models.query import TimeRange
from app.services.macros import VariableStore
from settings import DATASOURCE_PATH
from settings.datasource import load_settings, parse_query
from settings.logging import setup_logging


def read_request(path: Path) -> tuple[list, TimeRange | None, dict]:
    """Queries, time range and variables from a query file."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return [parse_query(q) for q in data], None, {}
    if "queries" not in data:
        return [parse_query(data)], None, {}

    time_range = None
    if data.get("range"):
        time_range = TimeRange(
            datetime.fromisoformat(data["range"]["from"].replace("Z", "+00:00")),
            datetime.fromisoformat(data["range"]["to"].replace("Z", "+00:00")),
        )
    return [parse_query(q) for q in data["queries"]], time_range, data.get("variables", {})


async def run(settings_path: str, query_path: str | None, health: bool, as_json: bool = False) -> int:
    settings = load_settings(settings_path)

    if health:
        async with Container(settings) as container:
            result = await container.datasource.test_datasource()
        if as_json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(f"{'✅' if result.ok else '❌'} {result.message}")
        return 0 if result.ok else 1

    queries, time_range, variables = read_request(Path(query_path))
    async with Container(settings, variables=VariableStore(variables)) as container:
        frames = await container.datasource.query(queries, time_range)

    if as_json:
        print(json.dumps([frame.to_dict() for frame in frames], indent=2))
        return 0

    for frame in frames:
        print(f"\n{frame.name} ({frame.length} rows)")
        print(frame.to_polars())
    return 0


def main():
    args = sys.argv[1:]
    logger = setup_logging(level="DEBUG" if "--debug" in args else None)

    health = "--health" in args
    as_json = "--json" in args
    args = [a for a in args if a not in ("--health", "--debug", "--json")]

    if health and len(args) <= 1:
        settings_path, query_path = (args[0] if args else DATASOURCE_PATH), None
    elif len(args) == 1:
        settings_path, query_path = DATASOURCE_PATH, args[0]
    elif len(args) == 2:
        settings_path, query_path = args
    else:
        print(__doc__)
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(settings_path, query_path, health, as_json)))
    except JsonApiError as e:
        logger.error("{}", e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
