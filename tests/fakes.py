"""Fake HTTP backend for httpx.MockTransport."""

import json

import httpx


class FakeBackend:
    """Records requests and serves canned JSON by path."""

    def __init__(self, routes: dict[str, object] | None = None, status: int = 200):
        self.routes = routes or {}
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = self.routes.get(request.url.path, {"ok": True})
        if isinstance(payload, httpx.Response):
            return payload
        if isinstance(payload, Exception):
            raise payload
        return httpx.Response(self.status, content=json.dumps(payload), headers={"Content-Type": "application/json"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
