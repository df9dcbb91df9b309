"""Base HTTP client with timeout and retry handling."""

import asyncio

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from settings import API_MAX_ATTEMPTS, API_TIMEOUT, MAX_CONCURRENT


def _is_retryable_error(exc: BaseException) -> bool:
    """Check if exception is retryable (network errors + 5xx server errors)."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class BaseClient:
    """Base async HTTP client with a concurrency limit and optional exponential backoff."""

    def __init__(
        self,
        max_concurrent: int = MAX_CONCURRENT,
        timeout: float = API_TIMEOUT,
        max_attempts: int = API_MAX_ATTEMPTS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client: httpx.AsyncClient | None = None
        self._sem = asyncio.Semaphore(max_concurrent)
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._transport = transport
        self._request_count = 0
        logger.info(
            "{}: max_concurrent={}, timeout={}s, max_attempts={}",
            self.__class__.__name__,
            max_concurrent,
            timeout,
            self._max_attempts,
        )

    @property
    def request_count(self) -> int:
        return self._request_count

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        await self.aclose()

    async def aclose(self) -> None:
        logger.info("Total API requests: {}", self._request_count)
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _send(
        self,
        method: str,
        url: str,
        headers: list[tuple[str, str]],
        content: str | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send one request, retrying retryable failures up to max_attempts.

        Non-2xx responses raise httpx.HTTPStatusError after the last attempt.
        """
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} is not open, use 'async with'")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=30),
            retry=retry_if_exception(_is_retryable_error),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                async with self._sem:
                    self._request_count += 1
                    resp = await self._client.request(
                        method,
                        url,
                        headers=headers,
                        content=content,
                        timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
                    )
                    resp.raise_for_status()
        return resp
