"""pick_dependency() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import HTTPException
from starlette.requests import Request

from fastapi_request_binding.exceptions import PickError
from fastapi_request_binding.picker import Picker
from fastapi_request_binding.trace import PickTrace

T = TypeVar("T")


def pick_dependency(
    cls: type[T],
    *,
    picker: Picker | None = None,
    debug: bool = False,
) -> Callable[..., Awaitable[T]]:
    """Return a FastAPI dependency that builds ``cls()`` and binds the request.

    The binding descriptor is built immediately, so misdeclared destination
    types fail when routes are declared rather than on the first request.
    """
    active = picker if picker is not None else Picker.default()
    descriptor = active.prepare(cls)

    if debug:
        dep = _make_debug_dependency(cls, active)
    else:
        dep = _make_dependency(cls, active)

    dep._pick_descriptor = descriptor  # type: ignore[attr-defined]
    return dep


def _make_dependency(cls: type[T], picker: Picker) -> Callable[..., Awaitable[T]]:
    async def dependency(request: Request) -> Any:
        dst = cls()
        try:
            await picker.pick(dst, request)
        except PickError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
        return dst

    return dependency


def _make_debug_dependency(
    cls: type[T], picker: Picker
) -> Callable[..., Awaitable[T]]:
    async def dependency(request: Request) -> Any:
        dst = cls()
        trace = PickTrace()
        request.state.pick_trace = trace
        try:
            await picker.pick(dst, request, trace=trace)
        except PickError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
        return dst

    return dependency
