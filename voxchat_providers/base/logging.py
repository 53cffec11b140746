"""Structured logging for the gateway.

All package loggers are children of ``voxchat``, which owns the only
handlers: a stderr handler (JSON by default) and, on request, a rotating
file handler. Modules call :func:`get_logger` with a dotted child name and
emit events through :func:`log_event` / :func:`normalized_log_event`; they
never attach handlers themselves.

Every gateway event carries ``phase``, ``emitted`` and, on failure,
``error_code``, so start, state, error and end records of any dialect can be
filtered the same way.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext


BASE_LOGGER_NAME = "voxchat"
LOG_LEVEL_ENV = "VOXCHAT_LOG_LEVEL"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Marker attributes set on the handlers this module manages.
_CONSOLE = "_voxchat_console"
_ROTATING = "_voxchat_rotating"

_FILE_MAX_BYTES = 5 * 1024 * 1024
_FILE_BACKUPS = 3


def _level_from(value: str | None, default: int = logging.INFO) -> int:
    """Level constant for a case-insensitive name, ``default`` if unknown."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _console_handler(logger: logging.Logger) -> Optional[logging.StreamHandler]:
    for handler in logger.handlers:
        if getattr(handler, _CONSOLE, False):
            return handler  # type: ignore[return-value]
    return None


def _root_logger(json_mode: bool, level: int) -> logging.Logger:
    """Return ``voxchat`` with its console handler attached and current.

    The level is re-read from ``VOXCHAT_LOG_LEVEL`` on every call, and the
    console handler follows ``sys.stderr`` when it was swapped (pytest
    capture does this between tests).
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    wanted = _level_from(os.getenv(LOG_LEVEL_ENV), default=level)
    console = _console_handler(logger)
    stream = getattr(console, "stream", None)
    if console is not None and (stream is None or getattr(stream, "closed", False)):
        # setStream() would flush the closed stream and fail; start over.
        logger.removeHandler(console)
        with contextlib.suppress(Exception):
            console.close()
        console = None
    if console is None:
        console = logging.StreamHandler(sys.stderr)
        setattr(console, _CONSOLE, True)
        logger.handlers[:] = [h for h in logger.handlers if getattr(h, _ROTATING, False)] + [console]
        logger.propagate = False
    elif console.stream is not sys.stderr:
        with contextlib.suppress(ValueError):
            console.setStream(sys.stderr)
    console.setFormatter(_formatter(json_mode))
    console.setLevel(wanted)
    logger.setLevel(wanted)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``voxchat`` itself or a propagating child such as ``voxchat.gateway``."""
    root = _root_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return root
    child = logging.getLogger(name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level, numeric or by name; ``None`` leaves it unchanged.
    file_path: Optional[str]
        Path of a rotating log file (5 MB, 3 backups). ``None`` detaches a
        file handler installed by an earlier call.
    json_mode: bool
        JSON lines when True, plain text otherwise.

    Returns
    -------
    logging.Logger
        The ``voxchat`` logger.
    """
    logger = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)
    if level is not None:
        numeric = _level_from(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)

    current = next((h for h in logger.handlers if getattr(h, _ROTATING, False)), None)
    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    if current is not None and getattr(current, "baseFilename", None) == target:
        current.setFormatter(_formatter(json_mode))
        current.setLevel(logger.level)
        return logger
    if current is not None:
        logger.removeHandler(current)
        current.close()
    if target is None:
        return logger

    os.makedirs(os.path.dirname(target), exist_ok=True)
    rotating = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
    setattr(rotating, _ROTATING, True)
    rotating.setLevel(logger.level)
    rotating.setFormatter(_formatter(json_mode))
    logger.addHandler(rotating)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as one JSON object (context first, then ``fields``).

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event, **(ctx.to_dict() if ctx else {})}
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("phase", "emitted", "error_code")


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    emitted: bool | int | None = None,
    error_code: str | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log a gateway event with the normalized keys.

    ``phase`` and ``emitted`` are always present (``emitted`` may be null);
    ``error_code`` only on failures. Extra fields with a ``None`` value or a
    reserved name are ignored.
    """
    fields: Dict[str, Any] = {"phase": phase, "emitted": emitted}
    if error_code is not None:
        fields["error_code"] = error_code
    fields.update(
        {k: v for k, v in extra_fields.items() if v is not None and k not in REQUIRED_NORMALIZED_KEYS}
    )
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
    "BASE_LOGGER_NAME",
]
