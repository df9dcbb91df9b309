"""Tests for the request dispatcher against a mock transport."""

import asyncio

import httpx
import pytest

from app.errors import InvalidMethodError, RequestFailedError, UnknownApiError, UnsafeUrlError
from app.models.api import ApiConfiguration
from app.repositories import ApiRegistry
from json_api_client.dispatcher import RequestDispatcher
from tests.fakes import FakeBackend

API = ApiConfiguration(
    id="svc",
    url="http://svc.local/api/",
    query_params="token=abc",
    headers=[("X-Key", "k1")],
)


def run(backend: FakeBackend, call, max_attempts: int = 1):
    async def _run():
        async with RequestDispatcher(
            ApiRegistry([API]), transport=backend.transport, max_attempts=max_attempts
        ) as dispatcher:
            return await call(dispatcher)

    return asyncio.run(_run())


class TestExecute:
    def test_url_params_and_json(self):
        backend = FakeBackend({"/api/items": {"a": 1}})
        result = run(backend, lambda d: d.execute("svc", "GET", "/items", [("id", "1"), ("id", "2")]))
        assert result == {"a": 1}
        assert str(backend.requests[0].url) == "http://svc.local/api/items?token=abc&id=1&id=2"

    def test_headers_keep_order_and_duplicates(self):
        backend = FakeBackend()
        run(backend, lambda d: d.execute("svc", "GET", "/x", headers=[("X-Key", "k2")]))
        assert backend.requests[0].headers.get_list("X-Key") == ["k1", "k2"]
        assert backend.requests[0].headers["Content-Type"] == "application/json"

    def test_get_drops_body(self):
        backend = FakeBackend()
        run(backend, lambda d: d.execute("svc", "GET", "/x", body='{"q": 1}'))
        assert backend.requests[0].content == b""

    def test_post_sends_body(self):
        backend = FakeBackend()
        run(backend, lambda d: d.execute("svc", "POST", "/x", body='{"q": 1}'))
        assert backend.requests[0].method == "POST"
        assert backend.requests[0].content == b'{"q": 1}'

    def test_non_json_body_returned_as_text(self):
        backend = FakeBackend({"/api/text": httpx.Response(200, text="plain")})
        assert run(backend, lambda d: d.execute("svc", "GET", "/text")) == "plain"

    def test_unknown_api(self):
        with pytest.raises(UnknownApiError):
            run(FakeBackend(), lambda d: d.execute("other", "GET", "/x"))

    def test_invalid_method(self):
        with pytest.raises(InvalidMethodError):
            run(FakeBackend(), lambda d: d.execute("svc", "TRACE", "/x"))

    def test_unsafe_url_not_sent(self):
        backend = FakeBackend()
        with pytest.raises(UnsafeUrlError):
            run(backend, lambda d: d.execute("svc", "GET", "/../admin"))
        assert backend.requests == []


class TestFailures:
    def test_non_2xx(self):
        backend = FakeBackend(status=404)
        with pytest.raises(RequestFailedError) as exc:
            run(backend, lambda d: d.execute("svc", "GET", "/x"))
        assert exc.value.status == 404
        assert exc.value.api_id == "svc"
        assert exc.value.reason == "Not Found"

    def test_timeout(self):
        backend = FakeBackend({"/api/slow": httpx.ReadTimeout("slow")})
        with pytest.raises(RequestFailedError) as exc:
            run(backend, lambda d: d.execute("svc", "GET", "/slow"))
        assert exc.value.timeout
        assert exc.value.status is None

    def test_no_retry_by_default(self):
        backend = FakeBackend(status=503)
        with pytest.raises(RequestFailedError):
            run(backend, lambda d: d.execute("svc", "GET", "/x"))
        assert len(backend.requests) == 1


class TestHealth:
    def test_status_returned(self):
        backend = FakeBackend(status=401)
        assert run(backend, lambda d: d.test("svc")) == 401
        assert str(backend.requests[0].url) == "http://svc.local/api/?token=abc"
