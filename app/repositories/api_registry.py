"""API registry - id to connection configuration."""

import threading

from loguru import logger

from app.errors import UnknownApiError
from app.models.api import ApiConfiguration


class ApiRegistry:
    """Holds API configurations; replaced wholesale, never patched."""

    def __init__(self, apis: list[ApiConfiguration] | None = None):
        self._lock = threading.Lock()
        self._apis: dict[str, ApiConfiguration] = {}
        if apis:
            self.register(apis)

    def register(self, apis: list[ApiConfiguration]) -> None:
        """Replace the registry contents.

        The new mapping is built before the swap, so readers see either the old
        or the new set of APIs.
        """
        apis_by_id = {api.id: api for api in apis}
        with self._lock:
            self._apis = apis_by_id
        logger.info("API registry updated: {}", ", ".join(apis_by_id) or "<empty>")

    def get(self, api_id: str | None) -> ApiConfiguration | None:
        """API configuration or None."""
        if api_id is None:
            return None
        return self._apis.get(api_id)

    def lookup(self, api_id: str | None) -> ApiConfiguration:
        """API configuration, raising UnknownApiError if absent."""
        api = self.get(api_id)
        if api is None:
            raise UnknownApiError(api_id)
        return api

    def list(self) -> list[ApiConfiguration]:
        """All configurations in registration order."""
        return list(self._apis.values())

    def __len__(self) -> int:
        return len(self._apis)

    def __contains__(self, api_id: object) -> bool:
        return api_id in self._apis
