"""Type coercion table and post-assignment validation rules.

Raw request values are always strings. Each :class:`Kind` has one parse
rule with exact bit-width range checking; anything the table does not know
is left to setters. Validation rules run after a value has been assigned.
"""

from __future__ import annotations

import math
import numbers
import re
import struct
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi_request_binding.kinds import Kind

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _syntax_error(kind: Kind, raw: str) -> ValueError:
    return ValueError(f"parse {kind.value} {raw!r}: invalid syntax")


def _range_error(kind: Kind, raw: str) -> ValueError:
    return ValueError(f"parse {kind.value} {raw!r}: value out of range")


def parse_bool(raw: str) -> bool:
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise _syntax_error(Kind.BOOL, raw)


def _check_int(kind: Kind, value: int, raw: str) -> int:
    if kind.is_unsigned:
        low, high = 0, (1 << kind.bits) - 1
    else:
        low, high = -(1 << (kind.bits - 1)), (1 << (kind.bits - 1)) - 1
    if not low <= value <= high:
        raise _range_error(kind, raw)
    return value


def _parse_int(kind: Kind, raw: str) -> int:
    pattern = _UINT_RE if kind.is_unsigned else _INT_RE
    if not pattern.fullmatch(raw):
        raise _syntax_error(kind, raw)
    return _check_int(kind, int(raw), raw)


def _is_inf_literal(raw: str) -> bool:
    return raw.lstrip("+-").lower() in ("inf", "infinity")


def _narrow_float(kind: Kind, value: float, raw: str, bits: int) -> float:
    if math.isinf(value) and not _is_inf_literal(raw):
        raise _range_error(kind, raw)
    if bits == 32 and math.isfinite(value):
        try:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            raise _range_error(kind, raw) from None
    return value


def _parse_float_bits(kind: Kind, raw: str, bits: int) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise _syntax_error(kind, raw)
    return _narrow_float(kind, float(raw), raw, bits)


def _parse_float(kind: Kind, raw: str) -> float:
    return _parse_float_bits(kind, raw, kind.bits)


def _split_complex(body: str) -> tuple[str, str]:
    """Split ``a+bi`` into its real and imaginary literals."""
    if body[-1:] not in ("i", "j"):
        return body, ""
    imag = body[:-1]
    for idx in range(len(imag) - 1, 0, -1):
        if imag[idx] in "+-" and imag[idx - 1] not in "eE":
            return imag[:idx], imag[idx:]
    return "", imag


def _parse_complex(kind: Kind, raw: str) -> complex:
    body = raw
    if body.startswith("(") and body.endswith(")"):
        body = body[1:-1]
    if not body:
        raise _syntax_error(kind, raw)
    real_text, imag_text = _split_complex(body)
    if not real_text and not imag_text:
        raise _syntax_error(kind, raw)
    part_bits = kind.bits // 2
    try:
        real = _parse_float_bits(kind, real_text, part_bits) if real_text else 0.0
        imag = _parse_float_bits(kind, imag_text, part_bits) if imag_text else 0.0
    except ValueError as exc:
        if "out of range" in str(exc):
            raise _range_error(kind, raw) from None
        raise _syntax_error(kind, raw) from None
    return complex(real, imag)


def _parse_string(raw: str) -> str:
    return raw


_COERCERS: dict[Kind, Callable[[str], Any]] = {
    Kind.BOOL: parse_bool,
    Kind.STRING: _parse_string,
}
for _kind in Kind:
    if _kind.is_signed or _kind.is_unsigned:
        _COERCERS[_kind] = lambda raw, k=_kind: _parse_int(k, raw)
    elif _kind.is_float:
        _COERCERS[_kind] = lambda raw, k=_kind: _parse_float(k, raw)
    elif _kind.is_complex:
        _COERCERS[_kind] = lambda raw, k=_kind: _parse_complex(k, raw)


def coerce(kind: Kind, raw: str) -> Any:
    """Parse *raw* with the canonical rule of *kind*."""
    return _COERCERS[kind](raw)


def narrow(kind: Kind | None, value: Any) -> Any:
    """Range-check an already typed value (e.g. from a JSON body) for *kind*."""
    if kind is None or isinstance(value, bool):
        return value
    if (kind.is_signed or kind.is_unsigned) and isinstance(value, int):
        return _check_int(kind, value, str(value))
    if kind.is_float and isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise _range_error(kind, str(value)) from None
        # JSON has no infinity literal; inf here means the literal overflowed
        if math.isinf(number):
            raise _range_error(kind, repr(number))
        return _narrow_float(kind, number, repr(number), kind.bits)
    return value


# -- Validation rules --


def parse_length_bound(bound: int | str) -> int:
    if isinstance(bound, int) and not isinstance(bound, bool):
        return bound
    return _parse_int(Kind.INT64, str(bound))


def parse_numeric_bound(bound: float | int | str) -> float:
    if isinstance(bound, (int, float)) and not isinstance(bound, bool):
        return float(bound)
    return _parse_float(Kind.FLOAT64, str(bound))


def _as_float(rule: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{rule}: {type(value).__name__} value is not numeric")
    return float(value)


@dataclass(frozen=True)
class ValidationRule:
    """A parsed bound check applied after a field has been assigned."""

    name: str
    bound: float

    @property
    def is_length(self) -> bool:
        return self.name in ("minLength", "maxLength")

    def check(self, raw: str, value: Any) -> None:
        if self.name == "minLength":
            failed = len(raw) < self.bound
        elif self.name == "maxLength":
            failed = len(raw) > self.bound
        elif self.name == "minimum":
            failed = _as_float(self.name, value) < self.bound
        else:
            failed = _as_float(self.name, value) > self.bound
        if failed:
            raise ValueError(f"{self.name} exceeded")
