"""Picker — binds an HTTP request into a destination object."""

from __future__ import annotations

import logging
import time
from typing import Any

from starlette.requests import Request

from fastapi_request_binding._types import DecoderFactory, SetterCallback
from fastapi_request_binding.coercion import coerce
from fastapi_request_binding.decoders import DecoderRegistry
from fastapi_request_binding.descriptor import (
    BindingDescriptor,
    FieldDescriptor,
    build_descriptor,
)
from fastapi_request_binding.exceptions import BindingConfigurationError, PickError
from fastapi_request_binding.readers import read_value
from fastapi_request_binding.setters import SetterRegistry
from fastapi_request_binding.trace import PickTrace, TraceEntry

logger = logging.getLogger(__name__)

# Methods that never carry a body worth decoding
NO_BODY_METHODS = frozenset({"GET", "HEAD", "DELETE"})

_IMMUTABLE_TYPES = (bool, int, float, complex, str, bytes, tuple, frozenset, type(None))


def _record_type(dst: Any) -> type:
    if isinstance(dst, type):
        raise BindingConfigurationError(
            f"pick(dst, request): dst must be an instance, got class {dst.__name__}"
        )
    cls = type(dst)
    if isinstance(dst, _IMMUTABLE_TYPES) or not (
        hasattr(dst, "__dict__") or hasattr(cls, "__slots__")
    ):
        raise BindingConfigurationError(
            f"pick(dst, request): dst must be a mutable object, got {cls.__name__}"
        )
    return cls


def _raise_returned_error(result: Any) -> None:
    """Companion setters may report failure by returning an exception last."""
    if isinstance(result, tuple) and result:
        result = result[-1]
    if isinstance(result, BaseException):
        raise result


class Picker:
    """Binding engine carrying its own decoder and setter registries."""

    def __init__(
        self,
        *,
        decoders: DecoderRegistry | None = None,
        setters: SetterRegistry | None = None,
    ) -> None:
        self._decoders = decoders if decoders is not None else DecoderRegistry()
        self._setters = setters if setters is not None else SetterRegistry()
        self._descriptors: dict[type, BindingDescriptor] = {}
        self._revision = self._setters.revision

    @classmethod
    def default(cls) -> Picker:
        """New picker with the JSON body decoder registered."""
        return cls(decoders=DecoderRegistry.default())

    @property
    def decoders(self) -> DecoderRegistry:
        return self._decoders

    @property
    def setters(self) -> SetterRegistry:
        return self._setters

    def register(self, content_type: str, factory: DecoderFactory) -> Picker:
        self._decoders.register(content_type, factory)
        return self

    def use_setter(self, typ: type | str, fn: SetterCallback) -> Picker:
        self._setters.use(typ, fn)
        return self

    def prepare(self, cls: type) -> BindingDescriptor:
        """Build (or fetch) the binding descriptor of *cls*.

        Call at startup to surface configuration errors before traffic.
        """
        if self._revision != self._setters.revision:
            self._descriptors.clear()
            self._revision = self._setters.revision

        descriptor = self._descriptors.get(cls)
        if descriptor is None:
            descriptor = build_descriptor(cls, self._setters)
            self._descriptors[cls] = descriptor
        return descriptor

    async def pick(
        self, dst: Any, request: Request, *, trace: PickTrace | None = None
    ) -> None:
        """Bind *request* into *dst* in place.

        Raises PickError on the first failing field; fields bound before the
        failure keep their new values.
        """
        descriptor = self.prepare(_record_type(dst))
        started = time.perf_counter()

        try:
            await self._decode_body(dst, request, descriptor, trace)
            for field in descriptor.bindable:
                await self._bind_field(dst, request, descriptor, field, trace)
        except PickError as exc:
            logger.debug("Bind failed for %s from %s", exc.dest, exc.source)
            if trace is not None:
                trace.total_duration_ms = (time.perf_counter() - started) * 1000
                trace.outcome = "FAILED"
                trace.error = exc
            raise

        if trace is not None:
            trace.total_duration_ms = (time.perf_counter() - started) * 1000
            trace.outcome = "OK"

    async def _decode_body(
        self,
        dst: Any,
        request: Request,
        descriptor: BindingDescriptor,
        trace: PickTrace | None,
    ) -> None:
        if request.method in NO_BODY_METHODS:
            logger.debug("Skipping body decoding for %s request", request.method)
            return

        content_type = request.headers.get("content-type", "")
        if not self._decoders.has(content_type):
            return

        started = time.perf_counter()
        try:
            body = await request.body()
            self._decoders.resolve(content_type, body).decode(dst)
        except Exception as exc:
            error = PickError(descriptor.type_name, "body", exc)
            if trace is not None:
                trace.entries.append(
                    TraceEntry(
                        field_name="body",
                        source=content_type,
                        duration_ms=(time.perf_counter() - started) * 1000,
                        outcome="FAILED",
                        reason=str(exc),
                    )
                )
            raise error from exc

        if trace is not None:
            trace.entries.append(
                TraceEntry(
                    field_name="body",
                    source=content_type,
                    duration_ms=(time.perf_counter() - started) * 1000,
                    outcome="OK",
                )
            )

    async def _bind_field(
        self,
        dst: Any,
        request: Request,
        descriptor: BindingDescriptor,
        field: FieldDescriptor,
        trace: PickTrace | None,
    ) -> None:
        source = field.source
        if source is None:
            return
        started = time.perf_counter()
        locator = source.locator

        try:
            raw = await read_value(request, source.kind, source.key)
            if raw == "":
                if trace is not None:
                    trace.entries.append(
                        TraceEntry(field.name, locator, 0.0, outcome="SKIPPED")
                    )
                return
            self._assign(dst, field, raw)
            value = getattr(dst, field.name, None)
            for rule in field.rules:
                rule.check(raw, value)
        except BindingConfigurationError:
            raise
        except Exception as exc:
            if trace is not None:
                trace.entries.append(
                    TraceEntry(
                        field_name=field.name,
                        source=locator,
                        duration_ms=(time.perf_counter() - started) * 1000,
                        outcome="FAILED",
                        reason=str(exc),
                    )
                )
            raise PickError(descriptor.dest(field), locator, exc) from exc

        if trace is not None:
            trace.entries.append(
                TraceEntry(
                    field_name=field.name,
                    source=locator,
                    duration_ms=(time.perf_counter() - started) * 1000,
                    outcome="OK",
                )
            )

    @staticmethod
    def _assign(dst: Any, field: FieldDescriptor, raw: str) -> None:
        if field.companion is not None:
            _raise_returned_error(getattr(dst, field.companion)(raw))
        elif field.override is not None:
            setattr(dst, field.name, field.override(raw))
        elif field.kind is not None:
            setattr(dst, field.name, coerce(field.kind, raw))
        else:
            raise TypeError(f"set {field.spec.type_name}: unsupported")


def default_picker() -> Picker:
    """Return a new picker with ``application/json`` pre-registered."""
    return Picker.default()
