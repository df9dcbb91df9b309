"""Dependency container - one per service instance."""

import httpx
from loguru import logger

from app.models.api import ApiConfiguration, DataSourceSettings, RequestType
from app.repositories import ApiRegistry, RequestCache
from app.services.datasource import JsonDataSource
from app.services.macros import TemplateVariables
from json_api_client.dispatcher import RequestDispatcher
from settings import API_MAX_ATTEMPTS, API_TIMEOUT, MAX_CONCURRENT

LEGACY_API_ID = "default"


class Container:
    """Owns the registry, cache, HTTP client and data source of one service instance."""

    def __init__(
        self,
        settings: DataSourceSettings,
        variables: TemplateVariables | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = API_TIMEOUT,
        max_attempts: int = API_MAX_ATTEMPTS,
        max_concurrent: int = MAX_CONCURRENT,
    ):
        self.settings = settings
        self._variables = variables
        self._client_options = {
            "transport": transport,
            "timeout": timeout,
            "max_attempts": max_attempts,
            "max_concurrent": max_concurrent,
        }
        self._initialized = False

    def init(self) -> None:
        """Initialize all dependencies. Call once before use."""
        if self._initialized:
            return

        legacy_api = None
        if self.settings.url:
            legacy_api = ApiConfiguration(
                id=LEGACY_API_ID,
                name="Default",
                url=self.settings.url,
                query_params=self.settings.query_params,
            )

        self.registry = ApiRegistry(self.settings.apis)
        self.dispatcher = RequestDispatcher(self.registry, **self._client_options)
        self.cache = RequestCache(self.registry, self.dispatcher)

        self.datasource = JsonDataSource(
            registry=self.registry,
            cache=self.cache,
            dispatcher=self.dispatcher,
            variables=self._variables,
            request_types=self._request_types(),
            legacy_api=legacy_api,
        )

        self._initialized = True
        logger.debug("Container initialized")

    def _request_types(self) -> list[RequestType]:
        """Top-level request types, then the ones declared on each API (bound to it)."""
        per_api = [
            rt if rt.api_id else rt.model_copy(update={"api_id": api.id})
            for api in self.settings.apis
            for rt in api.request_types
        ]
        return [*self.settings.request_types, *per_api]

    async def __aenter__(self) -> "Container":
        self.init()
        await self.dispatcher.__aenter__()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.dispatcher.__aexit__(*exc)
