"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from starlette.requests import Request


@runtime_checkable
class Decoder(Protocol):
    """Decodes a buffered request body into a destination object."""

    def decode(self, dst: Any) -> None: ...


# Callback types used by the registries and readers
DecoderFactory = Callable[[bytes], Decoder]
SetterCallback = Callable[[str], Any]
ValueReader = Callable[[Request, str], Awaitable[str]]
