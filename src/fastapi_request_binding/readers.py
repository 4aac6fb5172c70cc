"""Value readers — look up a raw string for a source kind and key."""

from __future__ import annotations

from enum import Enum

from starlette.requests import Request

from fastapi_request_binding._types import ValueReader

# Methods whose form body takes precedence over the query string
_FORM_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class SourceKind(Enum):
    """Request locations a field can be read from."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM = "form"


async def read_path(request: Request, key: str) -> str:
    value = request.path_params.get(key)
    return "" if value is None else str(value)


async def read_query(request: Request, key: str) -> str:
    values = request.query_params.getlist(key)
    return values[0] if values else ""


async def read_header(request: Request, key: str) -> str:
    return request.headers.get(key, "")


async def read_form(request: Request, key: str) -> str:
    """First form value, falling back to the query string.

    Only POST, PUT and PATCH bodies are parsed; uploaded files are never
    treated as a value.
    """
    if request.method in _FORM_BODY_METHODS:
        form = await request.form()
        for value in form.getlist(key):
            if isinstance(value, str):
                return value
    return await read_query(request, key)


VALUE_READERS: dict[SourceKind, ValueReader] = {
    SourceKind.PATH: read_path,
    SourceKind.QUERY: read_query,
    SourceKind.HEADER: read_header,
    SourceKind.FORM: read_form,
}


async def read_value(request: Request, kind: SourceKind, key: str) -> str:
    return await VALUE_READERS[kind](request, key)
