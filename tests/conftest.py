"""Shared fixtures: a GitHub adapter wired to an in-process fake of the API."""

from __future__ import annotations

import json

import httpx
import pytest

from showcase_api.config import UpstreamConfig
from showcase_api.datasources.github_adapter import GitHubAdapter
from showcase_api.services.cache import ResponseCache


class FakeGitHub:
    """Answers requests from a ``{path: (status, body)}`` table and counts calls."""

    def __init__(self, routes: dict | None = None):
        self.routes = routes or {}
        self.calls: list[httpx.Request] = []

    def add(self, path: str, body, status: int = 200):
        text = body if isinstance(body, str) else json.dumps(body)
        self.routes[path] = (status, text)

    def count(self, path: str) -> int:
        return sum(1 for request in self.calls if request.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        status, text = self.routes.get(request.url.path, (404, '{"message": "Not Found"}'))
        return httpx.Response(status, text=text)


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def upstream_config():
    return UpstreamConfig(client_id="id", client_secret="secret")


@pytest.fixture
def make_adapter(upstream_config):
    def _make(handler, cache: ResponseCache | None = None) -> GitHubAdapter:
        return GitHubAdapter(
            upstream_config,
            cache or ResponseCache(max_bytes=1024 * 1024, ttl_seconds=60),
            transport=httpx.MockTransport(handler),
        )

    return _make
