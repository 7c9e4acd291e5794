"""Shared pytest fixtures for fastapi-param-converter tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
from starlette.requests import Request

from fastapi_param_converter.context import RequestContext


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with an optional body."""

    def _make(
        body: bytes = b"",
        content_type: str | None = None,
        method: str = "POST",
        path: str = "/",
        headers: dict[str, str] | None = None,
    ) -> Request:
        all_headers = dict(headers or {})
        if content_type is not None:
            all_headers["content-type"] = content_type
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in all_headers.items()
            ],
            "root_path": "",
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_context(make_request: Any) -> Any:
    """Factory for RequestContext objects carrying a pre-read body."""

    def _make(body: bytes = b"", content_type: str | None = None) -> RequestContext:
        request = make_request(body=body, content_type=content_type)
        return RequestContext(request=request, body=body)

    return _make


@pytest.fixture
def serializer() -> Mock:
    """Serializer double exposing only ``deserialize``."""
    return Mock(spec_set=["deserialize"])


@pytest.fixture
def validator() -> Mock:
    """Validator double exposing only ``validate``."""
    return Mock(spec_set=["validate"])


@pytest.fixture
def post_body() -> bytes:
    return b'{"name": "Post 1", "body": "This is a blog post"}'
