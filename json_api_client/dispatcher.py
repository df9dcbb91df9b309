"""Request dispatcher - issues calls against registered APIs."""

from typing import Any

import httpx
from loguru import logger

from app.errors import InvalidMethodError, RequestFailedError, UnsafeUrlError
from app.models.api import ApiConfiguration
from app.repositories.api_registry import ApiRegistry
from json_api_client.base import BaseClient
from json_api_client.urls import Pair, build_url, is_safe_url, merge_headers, merge_params
from settings import SUPPORTED_METHODS


def validate_method(method: str) -> str:
    """Return the method if supported, else raise InvalidMethodError."""
    if method not in SUPPORTED_METHODS:
        raise InvalidMethodError(method, SUPPORTED_METHODS)
    return method


def _decode(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class RequestDispatcher(BaseClient):
    """Builds and sends HTTP calls for APIs held in the registry."""

    def __init__(self, registry: ApiRegistry, **kwargs):
        super().__init__(**kwargs)
        self._registry = registry

    @property
    def registry(self) -> ApiRegistry:
        return self._registry

    async def execute(
        self,
        api_id: str,
        method: str,
        path: str,
        params: list[Pair] | None = None,
        headers: list[Pair] | None = None,
        body: str | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Call a registered API and return its parsed JSON body."""
        validate_method(method)
        api = self._registry.lookup(api_id)
        return await self.execute_api(api, method, path, params, headers, body, timeout)

    async def execute_api(
        self,
        api: ApiConfiguration,
        method: str,
        path: str,
        params: list[Pair] | None = None,
        headers: list[Pair] | None = None,
        body: str | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Call an API given its configuration, merging its default params and headers."""
        validate_method(method)
        return await self.request(
            api,
            method,
            path,
            merge_params(api.query_params, params),
            merge_headers(api.headers, headers),
            body,
            timeout,
        )

    async def test(self, api_id: str) -> int:
        """Baseline GET with only the API defaults, returns the HTTP status."""
        return await self.test_api(self._registry.lookup(api_id))

    async def test_api(self, api: ApiConfiguration) -> int:
        url = build_url(api.url, "", merge_params(api.query_params, None))
        if not is_safe_url(url):
            raise UnsafeUrlError(url)
        try:
            resp = await self._send("GET", url, merge_headers(api.headers, None))
        except httpx.HTTPStatusError as e:
            return e.response.status_code
        except httpx.TimeoutException as e:
            raise RequestFailedError("timeout", api_id=api.id, timeout=True) from e
        except httpx.HTTPError as e:
            raise RequestFailedError(str(e) or e.__class__.__name__, api_id=api.id) from e
        return resp.status_code

    async def request(
        self,
        api: ApiConfiguration,
        method: str,
        path: str,
        params: list[Pair],
        headers: list[Pair],
        body: str | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Send a request with already-merged params and headers."""
        url = build_url(api.url, path, params)
        if not is_safe_url(url):
            raise UnsafeUrlError(url)

        content = body if method != "GET" and body else None
        logger.debug("{} {}", method, url)
        try:
            resp = await self._send(method, url, headers, content, timeout)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = e.response.reason_phrase or "Request failed"
            raise RequestFailedError(message, status=status, api_id=api.id, path=path) from e
        except httpx.TimeoutException as e:
            raise RequestFailedError("timeout", api_id=api.id, path=path, timeout=True) from e
        except httpx.HTTPError as e:
            raise RequestFailedError(str(e) or e.__class__.__name__, api_id=api.id, path=path) from e
        return _decode(resp)
