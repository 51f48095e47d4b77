"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from core.config import AppSettings


class RecordingBackend:
    """Fake Strapi over `httpx.MockTransport` that records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, method: str, path: str, *, status: int = 200, json_body: Any = None) -> None:
        def _respond(_request: httpx.Request) -> httpx.Response:
            if json_body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json_body)

        self._routes[(method.upper(), path)] = _respond

    def route_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._routes[(method.upper(), path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"data": None, "error": {"status": 404, "message": "Not Found"}})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings(monkeypatch) -> AppSettings:
    for name in ("STRAPI_URL", "STRAPI_API_TOKEN", "STRAPI_DEV_MODE"):
        monkeypatch.delenv(name, raising=False)
    return AppSettings(
        _env_file=None,
        url="http://strapi.test",
        api_token="test-token",
    )


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


CONTENT_TYPES_PAYLOAD = {
    "data": [
        {
            "uid": "api::article.article",
            "collectionName": "articles",
            "info": {"displayName": "Article", "description": "Blog posts"},
        },
        {
            "uid": "api::category.category",
            "collectionName": "categories",
            "info": {"displayName": "Category", "description": ""},
        },
        {
            "uid": "admin::user",
            "collectionName": "admin_users",
            "info": {"displayName": "User", "description": ""},
        },
        {
            "uid": "plugin::upload.file",
            "collectionName": "files",
            "info": {"displayName": "File", "description": ""},
        },
    ]
}


@pytest.fixture
def content_types_payload() -> dict[str, Any]:
    return json.loads(json.dumps(CONTENT_TYPES_PAYLOAD))
