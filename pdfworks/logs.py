"""Logger construction: level parsing, colors, GCP severities and formatters."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, TextIO

ERROR_LEVEL = "error"
WARN_LEVEL = "warn"
INFO_LEVEL = "info"
DEBUG_LEVEL = "debug"

AUTO_FORMAT = "auto"
JSON_FORMAT = "json"
TEXT_FORMAT = "text"

LevelEncoder = Callable[[int], str]
TimeEncoder = Callable[[float], Any]


class Color(IntEnum):
    """ANSI foreground colors."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37

    def add(self, text: str) -> str:
        """Wrap ``text`` in this color's escape sequences."""
        return f"\x1b[{int(self)}m{text}\x1b[0m"


_LEVEL_COLORS = {
    logging.DEBUG: Color.CYAN,
    logging.INFO: Color.BLUE,
    logging.WARNING: Color.YELLOW,
}

_GCP_SEVERITIES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARNING",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}

_PARSED_LEVELS = {
    "": logging.INFO,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "dpanic": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}


def level_to_color(level: int) -> Color:
    """Return the color used to display a logging level."""
    return _LEVEL_COLORS.get(level, Color.RED)


def gcp_severity(level: int) -> str:
    """Return the Google Cloud severity name of a logging level."""
    return _GCP_SEVERITIES.get(level, "DEFAULT")


def parse_log_level(level: str) -> int:
    """Turn a level name such as ``debug`` into a :mod:`logging` level."""
    if level in (level.lower(), level.upper()) and level.lower() in _PARSED_LEVELS:
        return _PARSED_LEVELS[level.lower()]
    raise ValueError(f'"{level}" is not a recognized log level')


def _level_name(level: int) -> str:
    return _LEVEL_NAMES.get(level, logging.getLevelName(level).lower())


def _capital_color_level(level: int) -> str:
    return level_to_color(level).add(_level_name(level).upper())


def _gcp_color_level(level: int) -> str:
    return level_to_color(level).add(gcp_severity(level))


def _epoch_time(timestamp: float) -> float:
    return timestamp


def _milliseconds(moment: datetime) -> str:
    return f"{moment.microsecond // 1000:03d}"


def _terminal_time(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp)
    return moment.strftime("%Y/%m/%d %H:%M:%S.") + _milliseconds(moment)


def _iso8601_time(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp).astimezone()
    zone = "Z" if not moment.utcoffset() else moment.strftime("%z")
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + _milliseconds(moment) + zone


class _EntryFormatter(logging.Formatter):
    def __init__(
        self,
        level_encoder: LevelEncoder = _level_name,
        time_encoder: TimeEncoder = _epoch_time,
        fields_prefix: str = "",
        *,
        time_key: str = "ts",
        level_key: str = "level",
        name_key: str = "logger",
        message_key: str = "msg",
    ) -> None:
        super().__init__()
        self.level_encoder = level_encoder
        self.time_encoder = time_encoder
        self.fields_prefix = fields_prefix
        self.time_key = time_key
        self.level_key = level_key
        self.name_key = name_key
        self.message_key = message_key

    def _fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields = getattr(record, "fields", None) or {}
        if not self.fields_prefix:
            return dict(fields)
        return {f"{self.fields_prefix}_{key}": value for key, value in fields.items()}

    @staticmethod
    def _name(record: logging.LogRecord) -> str:
        return "" if record.name == "root" else record.name


class JsonFormatter(_EntryFormatter):
    """Render each record as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            self.level_key: self.level_encoder(record.levelno),
            self.time_key: self.time_encoder(record.created),
        }
        name = self._name(record)
        if name:
            entry[self.name_key] = name
        entry[self.message_key] = record.getMessage()
        entry.update(self._fields(record))
        if record.exc_info:
            entry["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(_EntryFormatter):
    """Render each record as tab-separated console text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [str(self.time_encoder(record.created)), self.level_encoder(record.levelno)]
        name = self._name(record)
        if name:
            parts.append(name)
        parts.append(record.getMessage())
        fields = self._fields(record)
        if fields:
            parts.append(json.dumps(fields, default=str, ensure_ascii=False))
        line = "\t".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def new_formatter(
    log_format: str, gcp_fields: bool, is_terminal: bool, fields_prefix: str
) -> JsonFormatter | TextFormatter:
    """Build the formatter for a log format, adapted to the output device."""
    if log_format == AUTO_FORMAT:
        log_format = TEXT_FORMAT if is_terminal else JSON_FORMAT

    level_encoder: LevelEncoder = _level_name
    time_encoder: TimeEncoder = _terminal_time if is_terminal else _epoch_time
    keys: dict[str, str] = {}

    if log_format == TEXT_FORMAT and is_terminal:
        level_encoder = _gcp_color_level if gcp_fields else _capital_color_level

    if gcp_fields and log_format != TEXT_FORMAT:
        level_encoder = gcp_severity
        time_encoder = _iso8601_time
        keys = {"time_key": "time", "level_key": "severity", "message_key": "message"}

    if log_format == TEXT_FORMAT:
        return TextFormatter(level_encoder, time_encoder, fields_prefix, **keys)
    if log_format == JSON_FORMAT:
        return JsonFormatter(level_encoder, time_encoder, fields_prefix, **keys)
    raise ValueError(f"{log_format} is not a recognized log format")


@dataclass
class LoggingSettings:
    """Logging configuration shared by every component."""

    level: str = INFO_LEVEL
    format: str = AUTO_FORMAT
    fields_prefix: str = ""
    enable_gcp_fields: bool = False
    stream: TextIO | None = None
    is_terminal: bool | None = None
    _handler: logging.Handler | None = field(default=None, init=False, repr=False, compare=False)

    def validate(self) -> None:
        """Raise ValueError if the level or the format is unknown."""
        errors = []
        if self.level not in (ERROR_LEVEL, WARN_LEVEL, INFO_LEVEL, DEBUG_LEVEL):
            errors.append(
                f"log level must be either {ERROR_LEVEL}, {WARN_LEVEL}, {INFO_LEVEL} or {DEBUG_LEVEL}"
            )
        if self.format not in (AUTO_FORMAT, JSON_FORMAT, TEXT_FORMAT):
            errors.append(
                f"log format must be either {AUTO_FORMAT}, {JSON_FORMAT} or {TEXT_FORMAT}"
            )
        if errors:
            raise ValueError("; ".join(errors))

    def _shared_handler(self) -> logging.Handler:
        if self._handler is None:
            try:
                level = parse_log_level(self.level)
            except ValueError as error:
                raise ValueError(f"get log level: {error}") from error
            terminal = self.is_terminal if self.is_terminal is not None else sys.stdout.isatty()
            try:
                formatter = new_formatter(
                    self.format, self.enable_gcp_fields, terminal, self.fields_prefix
                )
            except ValueError as error:
                raise ValueError(f"get log encoder: {error}") from error
            handler = logging.StreamHandler(self.stream if self.stream is not None else sys.stderr)
            handler.setFormatter(formatter)
            handler.setLevel(level)
            self._handler = handler
        return self._handler

    def logger(self, name: str) -> logging.Logger:
        """Return a logger named ``name`` writing through the shared handler."""
        handler = self._shared_handler()
        logger = logging.getLogger(name)
        if handler not in logger.handlers:
            logger.addHandler(handler)
        logger.setLevel(handler.level)
        logger.propagate = False
        return logger