"""Repositories package - shared process-lifetime state."""

from app.repositories.api_registry import ApiRegistry
from app.repositories.request_cache import RequestCache, cache_key

__all__ = [
    "ApiRegistry",
    "RequestCache",
    "cache_key",
]
