"""Field markers used inside ``typing.Annotated`` declarations.

A destination class declares where each field comes from and how it is
checked::

    @dataclass
    class Search:
        term: Annotated[str, FromQuery("q"), MinLength(2)] = ""
        age: Annotated[int, FromHeader("age"), Minimum(0), Maximum(130)] = 0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from fastapi_request_binding.readers import SourceKind


@dataclass(frozen=True)
class SourceMarker:
    """Base for the four source markers. A field carries at most one."""

    key: str
    kind: ClassVar[SourceKind]

    @property
    def locator(self) -> str:
        return f"{self.kind.value}[{self.key}]"


class FromPath(SourceMarker):
    kind = SourceKind.PATH


class FromQuery(SourceMarker):
    kind = SourceKind.QUERY


class FromHeader(SourceMarker):
    kind = SourceKind.HEADER


class FromForm(SourceMarker):
    kind = SourceKind.FORM


@dataclass(frozen=True)
class ValidationMarker:
    """Base for bound markers; the bound may be given as text."""

    bound: int | float | str
    rule: ClassVar[str]


class MinLength(ValidationMarker):
    rule = "minLength"


class MaxLength(ValidationMarker):
    rule = "maxLength"


class Minimum(ValidationMarker):
    rule = "minimum"


class Maximum(ValidationMarker):
    rule = "maximum"


@dataclass(frozen=True)
class Alias:
    """Key used for this field by body decoders instead of its name."""

    name: str
