"""PickException hierarchy for bind failures and binding misconfiguration."""

from __future__ import annotations


class PickException(Exception):
    """Base for all binding exceptions."""


class PickError(PickException):
    """Request data could not be bound into the destination (400)."""

    def __init__(
        self,
        dest: str,
        source: str,
        cause: BaseException,
        *,
        status_code: int = 400,
    ) -> None:
        self.dest = dest
        self.source = source
        self.cause = cause
        self.status_code = status_code
        self.detail = f"pick {dest} from {source}: {cause}"
        super().__init__(self.detail)


class BindingConfigurationError(PickException):
    """The destination type or a registry was declared incorrectly.

    Never caused by request data; raised once, ideally at startup.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail
