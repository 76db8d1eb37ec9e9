"""Leveled logging that attaches caller context to every record."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any

NOTICE = 25
SUCCESS = 26
logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(SUCCESS, "SUCCESS")


class LogType(str, Enum):
    """Kinds of log message understood by :func:`log`."""

    NOTICE = "notice"
    INFO = "info"
    DEBUG = "debug"
    ERROR = "error"
    WARN = "warn"
    FATAL = "fatal"
    PANIC = "panic"
    SUCCESS = "success"


_LEVELS = {
    LogType.INFO: logging.INFO,
    LogType.DEBUG: logging.DEBUG,
    LogType.ERROR: logging.ERROR,
    LogType.WARN: logging.WARNING,
    LogType.NOTICE: NOTICE,
    LogType.SUCCESS: SUCCESS,
    LogType.FATAL: logging.CRITICAL,
    LogType.PANIC: logging.CRITICAL,
}

# Types whose context data is always shown, whatever the debug flag says.
_ALWAYS_SHOW = {LogType.ERROR, LogType.FATAL, LogType.PANIC, LogType.DEBUG}

_logger = logging.getLogger("gobe")
_debug = False


def set_debug(enabled: bool) -> None:
    """Turn the display of context data for every message on or off."""
    global _debug
    _debug = bool(enabled)


def _type_text(log_type: Any) -> str:
    if isinstance(log_type, LogType):
        return log_type.value
    return str(log_type or "").lower()


def _caller_context(depth: int) -> dict[str, Any] | None:
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return None
    code = frame.f_code
    module = Path(code.co_filename).stem
    return {
        "context": f"{module}.{code.co_name}",
        "file": code.co_filename,
        "line": frame.f_lineno,
        "func": code.co_name,
    }


def _dispatch(
    lgr: logging.Logger,
    level: int,
    message: str,
    extra: dict[str, Any],
    context: dict[str, Any] | None = None,
) -> logging.LogRecord:
    """Build a record, hand it to the logger's handlers if enabled, return it."""
    if context is None:
        path, line, func = "(unknown file)", 0, None
    else:
        path, line, func = context["file"], context["line"], context["func"]
    fields = dict(extra)
    if context is not None:
        fields.update(
            context=context["context"], file=context["file"], line=context["line"]
        )
    record = lgr.makeRecord(
        lgr.name, level, path, line, message, (), None, func=func, extra=fields
    )
    if lgr.isEnabledFor(level):
        lgr.handle(record)
    return record


def _emit(
    lgr: logging.Logger,
    log_type: Any,
    message: str,
    context: dict[str, Any],
) -> logging.LogRecord:
    text = _type_text(log_type)
    try:
        kind: LogType | None = LogType(text)
    except ValueError:
        kind = None
    show = (_debug or kind in _ALWAYS_SHOW) if text else _debug
    extra = {"log_type": text, "show_data": show}
    return _dispatch(lgr, _LEVELS.get(kind, logging.INFO), message, extra, context)


def log(log_type: LogType | str, *args: Any) -> logging.LogRecord:
    """Log the space-joined arguments at the level named by ``log_type``."""
    context = _caller_context(1)
    if context is None:
        return _dispatch(
            _logger, logging.ERROR, "Log: unable to get caller information", {}
        )
    message = " ".join(str(arg) for arg in args)
    return _emit(_logger, log_type, message, context)


def log_obj_logger(obj: Any, log_type: LogType | str, *args: Any) -> logging.LogRecord:
    """Log through the ``logger`` attribute of ``obj`` when it has one."""
    type_name = type(obj).__name__
    failure = {"context": "Log", "log_type": _type_text(log_type), "show_data": True}
    if obj is None:
        return _dispatch(_logger, logging.ERROR, "log object is nil", failure)
    if callable(getattr(obj, "get_logger", None)):
        lgr = _logger
    elif hasattr(obj, "logger"):
        lgr = obj.logger or _logger
    else:
        return _dispatch(
            _logger,
            logging.ERROR,
            f"log object ({type_name}) does not have a logger field",
            failure,
        )
    context = _caller_context(1)
    if context is None:
        return _dispatch(lgr, logging.ERROR, "Log: unable to get caller information", {})
    message = " ".join(str(arg) for arg in args)
    return _emit(lgr, log_type, message, context)