"""Kind enum and fixed-width annotation aliases for bindable fields."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any


class Kind(Enum):
    """Primitive kinds the coercion table knows how to parse."""

    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    STRING = "string"

    @property
    def bits(self) -> int:
        _BITS = {
            "int": 64,
            "int8": 8,
            "int16": 16,
            "int32": 32,
            "int64": 64,
            "uint": 64,
            "uint8": 8,
            "uint16": 16,
            "uint32": 32,
            "uint64": 64,
            "float32": 32,
            "float64": 64,
            "complex64": 64,
            "complex128": 128,
        }
        return _BITS.get(self.value, 0)

    @property
    def is_signed(self) -> bool:
        return self.value.startswith("int")

    @property
    def is_unsigned(self) -> bool:
        return self.value.startswith("uint")

    @property
    def is_float(self) -> bool:
        return self.value.startswith("float")

    @property
    def is_complex(self) -> bool:
        return self.value.startswith("complex")

    @property
    def is_numeric(self) -> bool:
        """Orderable numbers; bounds checks only apply to these."""
        return self.is_signed or self.is_unsigned or self.is_float


Int8 = Annotated[int, Kind.INT8]
Int16 = Annotated[int, Kind.INT16]
Int32 = Annotated[int, Kind.INT32]
Int64 = Annotated[int, Kind.INT64]
UInt = Annotated[int, Kind.UINT]
UInt8 = Annotated[int, Kind.UINT8]
UInt16 = Annotated[int, Kind.UINT16]
UInt32 = Annotated[int, Kind.UINT32]
UInt64 = Annotated[int, Kind.UINT64]
Float32 = Annotated[float, Kind.FLOAT32]
Float64 = Annotated[float, Kind.FLOAT64]
Complex64 = Annotated[complex, Kind.COMPLEX64]
Complex128 = Annotated[complex, Kind.COMPLEX128]

_BUILTIN_KINDS: dict[type, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT64,
    complex: Kind.COMPLEX128,
    str: Kind.STRING,
}


def kind_of(annotation: Any, metadata: tuple[Any, ...] = ()) -> Kind | None:
    """Return the kind declared by *metadata*, else the builtin kind of *annotation*."""
    declared = [m for m in metadata if isinstance(m, Kind)]
    if declared:
        return declared[-1]
    if isinstance(annotation, type):
        return _BUILTIN_KINDS.get(annotation)
    return None
