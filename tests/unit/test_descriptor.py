"""Tests for binding descriptor construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, ClassVar, Optional

import pytest

from fastapi_request_binding.descriptor import (
    body_fields,
    build_descriptor,
    companion_name,
    inspect_fields,
)
from fastapi_request_binding.exceptions import BindingConfigurationError
from fastapi_request_binding.kinds import Int8, Kind, UInt16
from fastapi_request_binding.markers import (
    Alias,
    FromHeader,
    FromPath,
    FromQuery,
    MaxLength,
    Maximum,
    MinLength,
    Minimum,
)
from fastapi_request_binding.setters import SetterRegistry


class Shade:
    def __init__(self, name: str) -> None:
        self.name = name


@dataclass
class Person:
    id: Annotated[str, FromPath("id")] = ""
    name: Annotated[str, Alias("full_name"), MaxLength(20)] = ""
    age: Annotated[Int8, FromHeader("age"), Minimum("0"), Maximum(130)] = 0
    port: Optional[Annotated[UInt16, FromQuery("port")]] = None
    notes: str = ""
    registry: ClassVar[dict[str, str]] = {}


@dataclass
class WithToken:
    _token: Annotated[str, FromHeader("authorization")] = ""

    def set_token(self, value: str) -> None:
        self._token = value.removeprefix("Bearer ")


@dataclass
class MissingSetter:
    _token: Annotated[str, FromHeader("authorization")] = ""


@dataclass
class PrivateWithoutSource:
    _cache: str = ""


@dataclass
class TwoSources:
    value: Annotated[str, FromHeader("x"), FromQuery("x")] = ""


@dataclass
class BadLengthBound:
    alias: Annotated[str, FromHeader("alias"), MaxLength("jibberish")] = ""


@dataclass
class LengthOnInt:
    count: Annotated[int, FromQuery("count"), MinLength(1)] = 0


@dataclass
class MinimumOnString:
    name: Annotated[str, FromQuery("name"), Minimum(1)] = ""


@dataclass
class WithShade:
    shade: Annotated[Shade | None, FromHeader("shade"), Minimum(0)] = None


@dataclass(frozen=True)
class Frozen:
    value: Annotated[str, FromQuery("v")] = ""


class TestInspectFields:
    def test_declaration_order_without_classvars(self) -> None:
        names = [spec.name for spec in inspect_fields(Person)]
        assert names == ["id", "name", "age", "port", "notes"]

    def test_kinds(self) -> None:
        kinds = {spec.name: spec.kind for spec in inspect_fields(Person)}
        assert kinds == {
            "id": Kind.STRING,
            "name": Kind.STRING,
            "age": Kind.INT8,
            "port": Kind.UINT16,
            "notes": Kind.STRING,
        }

    def test_optional_unwrapped(self) -> None:
        port = next(s for s in inspect_fields(Person) if s.name == "port")
        assert port.annotation is int
        assert port.sources == (FromQuery("port"),)

    def test_alias(self) -> None:
        name = next(s for s in inspect_fields(Person) if s.name == "name")
        assert name.alias == "full_name"

    def test_restricted(self) -> None:
        (spec,) = inspect_fields(WithToken)
        assert spec.restricted

    def test_declared_type_keeps_optional(self) -> None:
        port = next(s for s in inspect_fields(Person) if s.name == "port")
        assert port.declared == Optional[int]
        assert port.nullable

    def test_declared_type_without_markers(self) -> None:
        age = next(s for s in inspect_fields(Person) if s.name == "age")
        assert age.declared is int
        assert not age.nullable


class TestBodyFields:
    def test_keys(self) -> None:
        keys = body_fields(Person)
        assert keys["full_name"].name == "name"
        assert keys["name"].name == "name"
        assert keys["age"].name == "age"

    def test_restricted_fields_excluded(self) -> None:
        assert body_fields(WithToken) == {}

    def test_cached_per_type(self) -> None:
        assert body_fields(Person) is body_fields(Person)


class TestBuildDescriptor:
    def test_type_name_and_dest(self) -> None:
        descriptor = build_descriptor(Person, SetterRegistry())
        assert descriptor.type_name == "Person"
        age = next(f for f in descriptor.fields if f.name == "age")
        assert descriptor.dest(age) == "Person.age"

    def test_bindable_fields(self) -> None:
        descriptor = build_descriptor(Person, SetterRegistry())
        assert [f.name for f in descriptor.bindable] == ["id", "age", "port"]

    def test_rules_are_parsed(self) -> None:
        descriptor = build_descriptor(Person, SetterRegistry())
        age = next(f for f in descriptor.fields if f.name == "age")
        assert [(r.name, r.bound) for r in age.rules] == [
            ("minimum", 0.0),
            ("maximum", 130.0),
        ]

    def test_companion_method(self) -> None:
        descriptor = build_descriptor(WithToken, SetterRegistry())
        (field,) = descriptor.fields
        assert field.companion == "set_token"
        assert field.has_setter

    def test_restricted_without_setter(self) -> None:
        with pytest.raises(
            BindingConfigurationError, match="private field _token, missing set_token"
        ):
            build_descriptor(MissingSetter, SetterRegistry())

    def test_restricted_with_registry_override(self) -> None:
        registry = SetterRegistry().use(str, lambda raw: raw.upper())
        descriptor = build_descriptor(MissingSetter, registry)
        (field,) = descriptor.fields
        assert field.override is not None
        assert field.companion is None

    def test_restricted_without_source_is_ignored(self) -> None:
        descriptor = build_descriptor(PrivateWithoutSource, SetterRegistry())
        assert descriptor.bindable == ()

    def test_companion_takes_precedence_over_override(self) -> None:
        registry = SetterRegistry().use(str, lambda raw: raw.upper())
        descriptor = build_descriptor(WithToken, registry)
        (field,) = descriptor.fields
        assert field.companion == "set_token"
        assert field.override is None

    def test_multiple_sources(self) -> None:
        with pytest.raises(BindingConfigurationError, match="multiple sources"):
            build_descriptor(TwoSources, SetterRegistry())

    def test_malformed_bound(self) -> None:
        with pytest.raises(BindingConfigurationError, match="maxLength bound"):
            build_descriptor(BadLengthBound, SetterRegistry())

    def test_length_rule_on_non_string(self) -> None:
        with pytest.raises(BindingConfigurationError, match="strings only"):
            build_descriptor(LengthOnInt, SetterRegistry())

    def test_numeric_rule_on_string(self) -> None:
        with pytest.raises(BindingConfigurationError, match="numbers only"):
            build_descriptor(MinimumOnString, SetterRegistry())

    def test_numeric_rule_allowed_with_setter(self) -> None:
        registry = SetterRegistry().use(Shade, Shade)
        descriptor = build_descriptor(WithShade, registry)
        (field,) = descriptor.fields
        assert field.override is Shade
        assert field.rules[0].name == "minimum"

    def test_frozen_dataclass(self) -> None:
        with pytest.raises(BindingConfigurationError, match="frozen"):
            build_descriptor(Frozen, SetterRegistry())


class TestCompanionName:
    def test_public(self) -> None:
        assert companion_name("color") == "set_color"

    def test_restricted(self) -> None:
        assert companion_name("_token") == "set_token"
