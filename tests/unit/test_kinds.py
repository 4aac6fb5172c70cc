"""Tests for the Kind enum and width aliases."""

from __future__ import annotations

from typing import get_args

import pytest

from fastapi_request_binding.kinds import (
    Complex64,
    Float32,
    Int8,
    Kind,
    UInt64,
    kind_of,
)


class TestKind:
    def test_has_sixteen_members(self) -> None:
        assert len(list(Kind)) == 16

    @pytest.mark.parametrize(
        ("kind", "bits"),
        [
            (Kind.INT, 64),
            (Kind.INT8, 8),
            (Kind.UINT16, 16),
            (Kind.FLOAT32, 32),
            (Kind.COMPLEX64, 64),
            (Kind.COMPLEX128, 128),
            (Kind.BOOL, 0),
            (Kind.STRING, 0),
        ],
    )
    def test_bits(self, kind: Kind, bits: int) -> None:
        assert kind.bits == bits

    def test_families(self) -> None:
        assert Kind.INT.is_signed and not Kind.INT.is_unsigned
        assert Kind.UINT8.is_unsigned and not Kind.UINT8.is_signed
        assert Kind.FLOAT64.is_float
        assert Kind.COMPLEX128.is_complex

    def test_numeric(self) -> None:
        numeric = {k for k in Kind if k.is_numeric}
        assert Kind.BOOL not in numeric
        assert Kind.STRING not in numeric
        assert Kind.COMPLEX64 not in numeric
        assert len(numeric) == 12


class TestAliases:
    def test_alias_metadata(self) -> None:
        assert get_args(Int8) == (int, Kind.INT8)
        assert get_args(UInt64) == (int, Kind.UINT64)
        assert get_args(Float32) == (float, Kind.FLOAT32)
        assert get_args(Complex64) == (complex, Kind.COMPLEX64)


class TestKindOf:
    @pytest.mark.parametrize(
        ("annotation", "kind"),
        [
            (bool, Kind.BOOL),
            (int, Kind.INT),
            (float, Kind.FLOAT64),
            (complex, Kind.COMPLEX128),
            (str, Kind.STRING),
        ],
    )
    def test_builtins(self, annotation: type, kind: Kind) -> None:
        assert kind_of(annotation) is kind

    def test_metadata_wins(self) -> None:
        assert kind_of(int, (Kind.INT8,)) is Kind.INT8

    def test_unknown(self) -> None:
        assert kind_of(list) is None
        assert kind_of(list[int]) is None
