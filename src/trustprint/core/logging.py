# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Logging setup for Trustprint.

Every line logged while a pipeline run is in progress carries that run's
correlation id, so the exchange and trust pipelines of one ``report`` can be
told apart in interleaved output. Terminals get a compact coloured format;
everything else (pipes, files, log shippers) gets one JSON object per line.

Adapter calls go through ``adapter_logger``, which scrubs credentials and
private-key-shaped values before anything is written.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar("trustprint_correlation_id", default=None)

# 32 bytes of hex, optionally 0x-prefixed
_HEX32_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_MAX_LOGGED_STRING = 500
_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set (or with None, clear) the correlation id of the current context."""
    _correlation_id.set(correlation_id)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id to a block, restoring the previous one after.

    A fresh id is generated when none is given. Threads started with
    ``asyncio.to_thread`` inside the block inherit it.
    """
    token = _correlation_id.set(correlation_id or generate_correlation_id())
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for non-interactive output and log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if cid := get_correlation_id():
            entry["correlation_id"] = cid
        if record.levelno >= logging.WARNING:
            entry["source"] = {"file": record.pathname, "line": record.lineno, "function": record.funcName}
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        extra = getattr(record, "extra_data", None)
        if extra is not None:
            entry["extra"] = extra
        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """Single-line human format: time, level, logger, [run] message."""

    LEVEL_COLORS = {
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "35",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")
        self.use_colors = use_colors and sys.stderr.isatty()

    def _paint(self, text: str, code: str) -> str:
        return f"\033[{code}m{text}\033[0m" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy; other handlers must see the record unchanged
        shown = logging.makeLogRecord(record.__dict__)
        if cid := get_correlation_id():
            shown.msg = self._paint(f"[{cid[:8]}]", "90") + f" {record.msg}"
        shown.levelname = self._paint(record.levelname, self.LEVEL_COLORS.get(record.levelno, "0"))
        return super().format(shown)


def _resolve_level(level: str | int | None, default: str) -> int:
    value = default if level is None else level
    if isinstance(value, int):
        return value
    return logging.getLevelNamesMapping().get(value.upper(), logging.INFO)


def _wants_json(json_format: bool | None, configured: str) -> bool:
    if json_format is not None:
        return json_format
    configured = configured.lower()
    if configured in ("json", "text"):
        return configured == "json"
    return not sys.stderr.isatty()


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install Trustprint's handlers on the root logger.

    Unset arguments fall back to ``TRUSTPRINT_LOG_LEVEL``,
    ``TRUSTPRINT_LOG_FORMAT`` (``json``, ``text``, or empty to pick JSON
    whenever stderr is not a terminal) and ``TRUSTPRINT_LOG_FILE``. Pass
    ``log_file=""`` to disable the file handler regardless of config. The
    file handler always writes JSON.
    """
    from .config import get_config

    config = get_config()
    log_file = config.log_file if log_file is None else log_file

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if _wants_json(json_format, config.log_format) else StandardFormatter())
    handlers: list[logging.Handler] = [console]
    if log_file:
        to_file = logging.FileHandler(log_file)
        to_file.setFormatter(JSONFormatter())
        handlers.append(to_file)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(_resolve_level(level, config.log_level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class AdapterCallLogger:
    """Records adapter calls and their outcome with scrubbed arguments."""

    SENSITIVE_PARAMS = frozenset({"password", "secret", "token", "api_key", "apikey", "private", "credential"})
    REDACTED = "[REDACTED]"

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("trustprint.adapters")

    def log_call(self, adapter: str, operation: str, arguments: dict[str, Any], level: int = logging.DEBUG) -> None:
        self.logger.log(
            level,
            f"Adapter call: {adapter}.{operation}",
            extra={"extra_data": {"adapter": adapter, "operation": operation, "arguments": self._sanitize(arguments)}},
        )

    def log_result(
        self,
        adapter: str,
        operation: str,
        success: bool,
        duration_ms: float | None = None,
        level: int = logging.DEBUG,
    ) -> None:
        outcome = "success" if success else "failure"
        timing = f" ({duration_ms:.1f}ms)" if duration_ms is not None else ""
        self.logger.log(
            level,
            f"Adapter result: {adapter}.{operation} -> {outcome}{timing}",
            extra={
                "extra_data": {"adapter": adapter, "operation": operation, "success": success, "duration_ms": duration_ms}
            },
        )

    def _is_sensitive(self, key: Any) -> bool:
        lowered = str(key).lower()
        return any(marker in lowered for marker in self.SENSITIVE_PARAMS)

    def _sanitize(self, data: Any) -> Any:
        """Redact sensitive keys and bare 64-hex strings, recursively.

        ``0x``-prefixed 64-hex strings are protocol term ids and are kept.
        """
        if isinstance(data, dict):
            return {k: self.REDACTED if self._is_sensitive(k) else self._sanitize(v) for k, v in data.items()}
        if isinstance(data, list | tuple):
            return [self._sanitize(item) for item in data]
        if isinstance(data, str):
            if _HEX32_RE.match(data) and not data.startswith("0x"):
                return self.REDACTED
            if len(data) > _MAX_LOGGED_STRING:
                return data[:_MAX_LOGGED_STRING] + "..."
        return data


adapter_logger = AdapterCallLogger()
