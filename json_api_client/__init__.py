"""JSON API HTTP client package."""

from json_api_client.base import BaseClient
from json_api_client.dispatcher import RequestDispatcher, validate_method
from json_api_client.urls import (
    build_url,
    encode_params,
    is_safe_url,
    merge_headers,
    merge_params,
)

__all__ = [
    # Base
    "BaseClient",
    # Dispatch
    "RequestDispatcher",
    "validate_method",
    # URLs
    "build_url",
    "encode_params",
    "is_safe_url",
    "merge_headers",
    "merge_params",
]
