"""Binding descriptors — immutable, pre-computed per-type binding plans."""

from __future__ import annotations

import dataclasses
import functools
import logging
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin

from fastapi_request_binding._types import SetterCallback
from fastapi_request_binding.coercion import (
    ValidationRule,
    parse_length_bound,
    parse_numeric_bound,
)
from fastapi_request_binding.exceptions import BindingConfigurationError
from fastapi_request_binding.kinds import Kind, kind_of
from fastapi_request_binding.markers import Alias, SourceMarker, ValidationMarker
from fastapi_request_binding.setters import SetterRegistry, qualified_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of a single annotated attribute, independent of any picker."""

    name: str
    annotation: Any
    kind: Kind | None
    sources: tuple[SourceMarker, ...] = ()
    validators: tuple[ValidationMarker, ...] = ()
    alias: str | None = None
    # Declared type with markers removed but Optional kept; used for body values
    declared: Any = None

    @property
    def restricted(self) -> bool:
        return self.name.startswith("_")

    @property
    def nullable(self) -> bool:
        declared = self.declared
        if declared is None or declared is type(None) or declared is Any:
            return True
        if get_origin(declared) in (Union, types.UnionType):
            return type(None) in get_args(declared)
        return False

    @property
    def type_name(self) -> str:
        return qualified_name(self.annotation)


@dataclass(frozen=True)
class FieldDescriptor:
    """Resolved binding plan for one field."""

    spec: FieldSpec
    source: SourceMarker | None
    rules: tuple[ValidationRule, ...] = ()
    companion: str | None = None
    override: SetterCallback | None = None

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def kind(self) -> Kind | None:
        return self.spec.kind

    @property
    def has_setter(self) -> bool:
        return self.companion is not None or self.override is not None


@dataclass(frozen=True)
class BindingDescriptor:
    """Immutable field-ordered binding plan for a destination type."""

    type_name: str
    fields: tuple[FieldDescriptor, ...]

    @property
    def bindable(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.source is not None)

    def dest(self, field: FieldDescriptor) -> str:
        return f"{self.type_name}.{field.name}"


def _unwrap(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Strip ``Annotated`` and ``Optional`` layers, collecting metadata."""
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        inner, inner_meta = _unwrap(base)
        return inner, inner_meta + tuple(metadata)

    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return _unwrap(args[0])

    return hint, ()


@functools.cache
def inspect_fields(cls: type) -> tuple[FieldSpec, ...]:
    """Read annotated attributes of *cls* in declaration order."""
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
        declared = typing.get_type_hints(cls)
    except Exception as exc:
        raise BindingConfigurationError(
            f"cannot resolve annotations of {cls.__name__}: {exc}"
        ) from exc

    specs: list[FieldSpec] = []
    for name, hint in hints.items():
        if get_origin(hint) is ClassVar or hint is ClassVar:
            continue
        annotation, metadata = _unwrap(hint)
        aliases = [m.name for m in metadata if isinstance(m, Alias)]
        specs.append(
            FieldSpec(
                name=name,
                annotation=annotation,
                kind=kind_of(annotation, metadata),
                sources=tuple(m for m in metadata if isinstance(m, SourceMarker)),
                validators=tuple(
                    m for m in metadata if isinstance(m, ValidationMarker)
                ),
                alias=aliases[-1] if aliases else None,
                declared=declared[name],
            )
        )
    return tuple(specs)


@functools.cache
def body_fields(cls: type) -> dict[str, FieldSpec]:
    """Map body keys (alias, name, lower-cased name) to public fields."""
    keys: dict[str, FieldSpec] = {}
    for spec in inspect_fields(cls):
        if spec.restricted:
            continue
        keys.setdefault(spec.name.lower(), spec)
    for spec in inspect_fields(cls):
        if spec.restricted:
            continue
        keys[spec.name] = spec
        if spec.alias is not None:
            keys[spec.alias] = spec
    return keys


def companion_name(field_name: str) -> str:
    return "set_" + field_name.lstrip("_")


def _parse_rules(
    cls: type, spec: FieldSpec, has_setter: bool
) -> tuple[ValidationRule, ...]:
    rules: list[ValidationRule] = []
    for marker in spec.validators:
        try:
            if marker.rule in ("minLength", "maxLength"):
                bound = float(parse_length_bound(marker.bound))
            else:
                bound = parse_numeric_bound(marker.bound)
        except ValueError as exc:
            raise BindingConfigurationError(
                f"{cls.__name__}.{spec.name}: {marker.rule} bound {marker.bound!r}: {exc}"
            ) from exc
        rule = ValidationRule(name=marker.rule, bound=bound)

        if not has_setter:
            if rule.is_length and spec.kind is not Kind.STRING:
                raise BindingConfigurationError(
                    f"{cls.__name__}.{spec.name}: {rule.name} applies to strings only"
                )
            if not rule.is_length and (spec.kind is None or not spec.kind.is_numeric):
                raise BindingConfigurationError(
                    f"{cls.__name__}.{spec.name}: {rule.name} applies to numbers only"
                )
        rules.append(rule)
    return tuple(rules)


def build_descriptor(cls: type, setters: SetterRegistry) -> BindingDescriptor:
    """Build the binding plan of *cls*.

    Setter capability resolution order is fixed: companion method
    ``set_<name>`` first, registry override by declared type second,
    coercion table last.
    """
    if dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise BindingConfigurationError(
            f"{cls.__name__} is a frozen dataclass and cannot be bound in place"
        )

    fields: list[FieldDescriptor] = []
    for spec in inspect_fields(cls):
        if len(spec.sources) > 1:
            locators = ", ".join(s.locator for s in spec.sources)
            raise BindingConfigurationError(
                f"{cls.__name__}.{spec.name}: multiple sources declared ({locators})"
            )
        source = spec.sources[0] if spec.sources else None

        companion = companion_name(spec.name)
        if not callable(getattr(cls, companion, None)):
            companion = None
        override = setters.lookup(spec.annotation) if companion is None else None

        if source is not None and spec.restricted and companion is None and override is None:
            raise BindingConfigurationError(
                f"private field {spec.name}, missing {companion_name(spec.name)}"
            )

        has_setter = companion is not None or override is not None
        fields.append(
            FieldDescriptor(
                spec=spec,
                source=source,
                rules=_parse_rules(cls, spec, has_setter),
                companion=companion,
                override=override,
            )
        )

    descriptor = BindingDescriptor(type_name=cls.__name__, fields=tuple(fields))
    logger.debug(
        "Built binding descriptor for %s (%d bindable fields)",
        descriptor.type_name,
        len(descriptor.bindable),
    )
    return descriptor
