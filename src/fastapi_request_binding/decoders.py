"""Body decoders and the content-type keyed DecoderRegistry."""

from __future__ import annotations

import functools
import json
import logging
from typing import Any
from xml.etree import ElementTree

from pydantic import TypeAdapter

from fastapi_request_binding._types import Decoder, DecoderFactory
from fastapi_request_binding.coercion import coerce, narrow
from fastapi_request_binding.descriptor import FieldSpec, body_fields
from fastapi_request_binding.kinds import Kind

logger = logging.getLogger(__name__)


class NoopDecoder:
    """Reports success without touching the destination."""

    def decode(self, dst: Any) -> None:
        return None


NOOP_DECODER = NoopDecoder()


def _lookup(fields: dict[str, FieldSpec], key: str) -> FieldSpec | None:
    return fields.get(key) or fields.get(key.lower())


@functools.lru_cache(maxsize=256)
def _type_adapter(annotation: Any) -> TypeAdapter[Any]:
    return TypeAdapter(annotation)


def _is_strict(kind: Kind | None) -> bool:
    return kind is not None and not kind.is_complex


class JSONDecoder:
    """Decodes a JSON object body onto the public fields of the destination.

    Keys match a field's ``Alias``, its name, or its name case-insensitively;
    unknown keys are ignored. Values are validated with pydantic against the
    field's declared type; ``null`` is assigned only to Optional fields.
    """

    def __init__(self, body: bytes) -> None:
        self._body = body

    def decode(self, dst: Any) -> None:
        data = json.loads(self._body)
        if not isinstance(data, dict):
            raise ValueError(
                f"cannot decode JSON {type(data).__name__} into {type(dst).__name__}"
            )

        fields = body_fields(type(dst))
        for key, value in data.items():
            spec = _lookup(fields, key)
            if spec is None:
                continue
            # null leaves non-nullable fields untouched
            if value is None and not spec.nullable:
                continue
            adapter = _type_adapter(spec.declared)
            parsed = adapter.validate_python(value, strict=_is_strict(spec.kind))
            setattr(dst, spec.name, narrow(spec.kind, parsed))


class XMLDecoder:
    """Decodes the direct children of the root element by tag name.

    Element text goes through the coercion table, so only primitive-kind
    fields can be filled from XML.
    """

    def __init__(self, body: bytes) -> None:
        self._body = body

    def decode(self, dst: Any) -> None:
        root = ElementTree.fromstring(self._body)
        fields = body_fields(type(dst))
        for child in root:
            spec = _lookup(fields, child.tag)
            if spec is None or not child.text:
                continue
            if spec.kind is None:
                raise TypeError(
                    f"cannot decode <{child.tag}> into {spec.type_name}: unsupported"
                )
            setattr(dst, spec.name, coerce(spec.kind, child.text))


class DecoderRegistry:
    """Maps an exact content-type string to a decoder factory."""

    def __init__(self) -> None:
        self._factories: dict[str, DecoderFactory] = {}

    @classmethod
    def default(cls) -> DecoderRegistry:
        """New registry with ``application/json`` pre-registered."""
        return cls().register("application/json", JSONDecoder)

    def register(self, content_type: str, factory: DecoderFactory) -> DecoderRegistry:
        self._factories[content_type] = factory
        logger.debug("Registered body decoder for %r", content_type)
        return self

    def has(self, content_type: str) -> bool:
        return content_type in self._factories

    def content_types(self) -> list[str]:
        return list(self._factories)

    def resolve(self, content_type: str, body: bytes) -> Decoder:
        """Return a decoder for *content_type*, or the no-op decoder.

        Matching is exact: ``"application/json; charset=utf-8"`` does not
        match ``"application/json"``.
        """
        factory = self._factories.get(content_type)
        if factory is None:
            return NOOP_DECODER
        return factory(body)
