"""Loguru setup with per-request context (correlation id, authenticated user)."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> "
    "<yellow>user={extra[user_id]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_UNSET = "-"

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default=_UNSET)
_USER_ID: ContextVar[str] = ContextVar("user_id", default=_UNSET)

_logger.configure(extra={"correlation_id": _UNSET, "user_id": _UNSET})


def _context() -> dict[str, Any]:
    return {"correlation_id": _CORRELATION_ID.get(), "user_id": _USER_ID.get()}


class _InterceptHandler(logging.Handler):
    """Route stdlib records (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(**_context()).log(
            level, record.getMessage()
        )


class ContextualLogger:
    """Loguru proxy; every call is bound to the current request context."""

    def __getattr__(self, name: str) -> Any:
        return getattr(_logger.bind(**_context()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or _UNSET)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def set_request_user(user_id: str | None) -> None:
    _USER_ID.set(user_id or _UNSET)


def clear_correlation_id() -> None:
    _CORRELATION_ID.set(_UNSET)
    _USER_ID.set(_UNSET)


def _add_sink(sink: Any, level: str, **options: Any) -> None:
    _logger.add(
        sink,
        level=level,
        format=_FMT,
        backtrace=False,
        diagnose=False,
        filter=sanitize_record,
        **options,
    )


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()

    _logger.remove()
    _add_sink(sys.stderr, level, colorize=True)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        _add_sink(log_file, level, colorize=False, enqueue=True, encoding="utf-8")

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "set_request_user",
    "clear_correlation_id",
    "get_correlation_id",
]
