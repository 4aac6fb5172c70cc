"""SetterRegistry — per-type value setters that take priority over coercion."""

from __future__ import annotations

import logging
from typing import Any

from fastapi_request_binding._types import SetterCallback
from fastapi_request_binding.exceptions import BindingConfigurationError

logger = logging.getLogger(__name__)


def qualified_name(typ: Any) -> str:
    """Return ``"<module>.<qualname>"`` for a type, ``repr`` for anything else."""
    if isinstance(typ, type):
        return f"{typ.__module__}.{typ.__qualname__}"
    return repr(typ)


class SetterRegistry:
    """Maps a fully-qualified type name to a parse callback.

    The callback receives the raw string and returns the value to assign;
    raising marks the field as failed.
    """

    def __init__(self) -> None:
        self._setters: dict[str, SetterCallback] = {}
        self._revision = 0

    @property
    def revision(self) -> int:
        return self._revision

    def use(self, typ: type | str, fn: SetterCallback) -> SetterRegistry:
        name = typ if isinstance(typ, str) else qualified_name(typ)
        if name in self._setters:
            raise BindingConfigurationError(f"use_setter({name!r}): already exists")
        self._setters[name] = fn
        self._revision += 1
        logger.debug("Registered setter for %s", name)
        return self

    def lookup(self, typ: Any) -> SetterCallback | None:
        name = typ if isinstance(typ, str) else qualified_name(typ)
        return self._setters.get(name)

    def __contains__(self, typ: object) -> bool:
        return self.lookup(typ) is not None

    def __len__(self) -> int:
        return len(self._setters)
