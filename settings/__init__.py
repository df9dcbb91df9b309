"""Application settings."""

import os
from pathlib import Path

# Logging
LOG_DIR = Path(os.getenv("JSONAPI_LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("JSONAPI_LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("JSONAPI_LOG_TO_FILE", "0") == "1"
LOG_RETENTION = os.getenv("JSONAPI_LOG_RETENTION", "7 days")

# HTTP
API_TIMEOUT = float(os.getenv("JSONAPI_TIMEOUT", "30"))
MAX_CONCURRENT = int(os.getenv("JSONAPI_MAX_CONCURRENT", "20"))
API_MAX_ATTEMPTS = int(os.getenv("JSONAPI_MAX_ATTEMPTS", "1"))

# Queries
DEFAULT_CACHE_DURATION = 300
SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

# Data source configuration file used by run_query.py
DATASOURCE_PATH = os.getenv("JSONAPI_DATASOURCE", "datasource.json")
