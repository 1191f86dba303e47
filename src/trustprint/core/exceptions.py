# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Exception hierarchy for Trustprint.

Pure computation stages raise ``InsufficientDataError`` and
``InvalidSignalError`` themselves. ``AdapterError`` is only raised by the
concrete adapters in ``trustprint.adapters`` and wraps whatever the
underlying transport raised.

Every exception carries a stable ``kind`` string; reports and the CLI key
on it rather than on class names.
"""

from __future__ import annotations

from typing import Any


class TrustprintException(Exception):  # noqa: N818
    """Base exception for all Trustprint errors."""

    kind = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        """Serializable record used in report ``errors`` and JSON output."""
        return {
            "error": type(self).__name__,
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }


class _FieldError(TrustprintException):
    """An error about one named input field and its offending value."""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InsufficientDataError(TrustprintException):
    """Raised when a commitment is requested for too few messages.

    A cross-party verifiable hash needs at least one response, which means
    at least two messages. Callers must never treat this as "zero rhythm".
    """

    kind = "insufficient_data"

    def __init__(self, message_count: int, required: int = 2):
        super().__init__(
            f"At least {required} messages are required, got {message_count}",
            {"message_count": message_count, "required": required},
        )
        self.message_count = message_count
        self.required = required


class InvalidSignalError(_FieldError):
    """A trust signal stake is negative, infinite, NaN or not a number."""

    kind = "invalid_signal"


class AdapterError(TrustprintException):
    """Opaque failure from an external adapter (network, timeout, I/O).

    The underlying exception is chained as ``__cause__``; it is wrapped, not
    interpreted.
    """

    kind = "adapter_failure"

    def __init__(self, adapter: str, message: str):
        super().__init__(f"{adapter}: {message}", {"adapter": adapter})
        self.adapter = adapter


class ValidationException(_FieldError):
    """Malformed caller input that is not a trust signal.

    Covers participant pairs that are not two distinct ids, thresholds out
    of range, non-hex hash strings and unparsable CLI arguments.
    """

    kind = "validation"


class ConfigException(TrustprintException):
    """A pipeline ran without its adapter, or the CLI config file is invalid."""

    kind = "config"

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message, {"missing": missing} if missing else None)
        self.missing = list(missing or [])
