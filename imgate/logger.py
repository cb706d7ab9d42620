"""Package-wide logging: structured fields, level parsing and daily rolling files."""

from __future__ import annotations

import contextlib
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Mapping

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_FIELDS_ATTR = "log_fields"
_RESERVED_KEYS = ("time", "level", "msg")
_SAFE_VALUE = re.compile(r"^[A-Za-z0-9\-._/@^+]*$")

_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_LEVEL_NAMES = {
    logging.CRITICAL: "fatal",
    logging.ERROR: "error",
    logging.WARNING: "warning",
    logging.INFO: "info",
    logging.DEBUG: "debug",
    TRACE: "trace",
}

_std = logging.getLogger("imgate")
_std.setLevel(logging.INFO)


def _parse_level(level: str) -> int:
    try:
        return _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {level!r}") from None


def _level_name(levelno: int) -> str:
    return _LEVEL_NAMES.get(levelno, logging.getLevelName(levelno).lower())


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    fields = dict(getattr(record, _FIELDS_ATTR, {}) or {})
    for key in _RESERVED_KEYS:
        if key in fields:
            fields[f"fields.{key}"] = fields.pop(key)
    return fields


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")


def _quote(text: str) -> str:
    if _SAFE_VALUE.match(text):
        return text
    return json.dumps(text, ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    """Formats records as ``key=value`` pairs, fields sorted by key."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"time={_quote(_timestamp(record))}",
            f"level={_level_name(record.levelno)}",
            f"msg={_quote(record.getMessage())}",
        ]
        fields = _record_fields(record)
        parts.extend(f"{key}={_quote(str(fields[key]))}" for key in sorted(fields))
        return " ".join(parts)


class _JsonFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data = _record_fields(record)
        data.update(
            level=_level_name(record.levelno),
            msg=record.getMessage(),
            time=_timestamp(record),
        )
        return json.dumps(data, default=str, ensure_ascii=False, sort_keys=True)


class _Entry(logging.LoggerAdapter):
    """A logger carrying a set of fields attached to every record it emits."""

    def __init__(self, logger: logging.Logger, fields: Mapping[str, Any]) -> None:
        super().__init__(logger, dict(fields))

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self.extra)

    def with_field(self, key: str, value: Any) -> _Entry:
        return _Entry(self.logger, {**self.extra, key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> _Entry:
        return _Entry(self.logger, {**self.extra, **fields})

    def with_error(self, err: BaseException) -> _Entry:
        return self.with_field("error", err)

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        extra[_FIELDS_ATTR] = {**self.extra, **extra.get(_FIELDS_ATTR, {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(TRACE, msg, *args, **kwargs)


def with_field(key: str, value: Any) -> _Entry:
    """Return a logger that adds one field to every record."""
    return _Entry(_std, {key: value})


def with_fields(fields: Mapping[str, Any]) -> _Entry:
    """Return a logger that adds these fields to every record."""
    return _Entry(_std, fields)


def with_error(err: BaseException) -> _Entry:
    """Return a logger that records this error under the ``error`` key."""
    return _Entry(_std, {"error": err})


def set_level(level: str) -> None:
    """Set the package log level by name; raise ValueError for an unknown name."""
    _std.setLevel(_parse_level(level))


def _rolling_handler(
    filename: str, fmt: str, backup_count: int, level: int
) -> TimedRotatingFileHandler:
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        str(path), when="midnight", backupCount=backup_count, encoding="utf-8"
    )
    handler.suffix = "%Y%m%d"
    handler.extMatch = re.compile(r"\d{8}", re.ASCII)
    handler.setLevel(level)
    handler.setFormatter(_JsonFormatter() if fmt == "json" else _TextFormatter())
    return handler


def init_daily_rolling(
    file_dir: str,
    file_name: str,
    format: str = "text",
    rotation_count: int = 7,
    level: str = "debug",
) -> TimedRotatingFileHandler:
    """Log info and above to a file rolled daily, keeping ``rotation_count`` old files."""
    handler = _rolling_handler(
        str(Path(file_dir) / file_name), format, rotation_count, logging.INFO
    )
    with contextlib.suppress(ValueError):
        set_level(level)
    _std.addHandler(handler)
    _std.info("***********logging started*************")
    return handler


@dataclass
class Settings:
    """Logging settings: target file, level name, files kept and format."""

    filename: str = ""
    level: str = ""
    rolling_days: int = 0
    format: str = ""


def init(settings: Settings) -> TimedRotatingFileHandler | None:
    """Apply settings; with a filename, log debug to error into a daily rolling file."""
    try:
        set_level(settings.level or "debug")
    except ValueError:
        _std.error("Invalid log level")

    if not settings.filename:
        return None

    handler = _rolling_handler(
        settings.filename, settings.format, settings.rolling_days or 7, logging.DEBUG
    )
    handler.addFilter(lambda record: record.levelno <= logging.ERROR)
    _std.addHandler(handler)
    return handler