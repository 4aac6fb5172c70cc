"""Shared pytest fixtures for fastapi-request-binding tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.requests import Request

from fastapi_request_binding.picker import Picker


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects from a raw ASGI scope."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
        path_params: dict[str, Any] | None = None,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "path_params": path_params or {},
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def picker() -> Picker:
    """Fresh picker with the JSON decoder registered."""
    return Picker.default()
