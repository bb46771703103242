"""Leveled diagnostic logger for the sitemap diff tool.

Wraps a :mod:`logging` logger with the tool's own level vocabulary::

    debug < info < log < warn < error

``verbose`` is accepted as an alias of ``debug`` and ``quiet`` as an alias of
``log``. Error messages are emitted whatever the current level is.

The logger is passed explicitly to the fetcher, parser and comparer; the
``default_logger`` instance at the bottom of the module is what the CLI uses.
A level can be overridden for the duration of one operation::

    with logger.temporary_level("debug"):
        ...

Nested temporary overrides are not supported: the inner override replaces
the saved level of the outer one.
"""

from __future__ import annotations

import itertools
import logging
import sys
from contextlib import contextmanager
from typing import IO, Iterator, Optional

# "log" sits between INFO and WARNING
LOG = 25
logging.addLevelName(LOG, "LOG")

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "log": LOG,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

ALIASES = {
    "verbose": "debug",
    "quiet": "log",
}

_LOGGER_NAME = "sitemap_diff"

_instance_ids = itertools.count(1)


class _ConsoleFormatter(logging.Formatter):
    """Prefix records with ``[LEVEL]``, except plain ``log`` messages."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno == LOG:
            return message
        name = "WARN" if record.levelno == logging.WARNING else record.levelname
        return f"[{name}] {message}"


class _ConsoleHandler(logging.StreamHandler):
    """Stream handler writing to whatever ``sys.stderr`` is at emit time."""

    def emit(self, record: logging.LogRecord) -> None:
        # emit() runs under the handler lock
        self.stream = sys.stderr
        super().emit(record)


def configure(
    name: str = _LOGGER_NAME, stream: Optional[IO[str]] = None
) -> logging.Logger:
    """(Re)configure the named :mod:`logging` logger used for output.

    Existing handlers are replaced. Records are filtered by
    :class:`DiagnosticLogger`, so the underlying logger passes everything.
    """
    lg = logging.getLogger(name)
    lg.setLevel(logging.DEBUG)
    lg.handlers.clear()

    handler = logging.StreamHandler(stream) if stream is not None else _ConsoleHandler()
    handler.setFormatter(_ConsoleFormatter())
    lg.addHandler(handler)

    lg.propagate = False
    return lg


class DiagnosticLogger:
    """Leveled logger with a temporary level override."""

    def __init__(
        self,
        level: str = "info",
        *,
        name: Optional[str] = None,
        stream: Optional[IO[str]] = None,
    ):
        """Create a logger starting at *level*.

        Each instance writes through its own :mod:`logging` logger, a child
        of ``sitemap_diff`` unless *name* is given, so configuring one
        instance never redirects another. Output goes to *stream*, or to the
        current ``sys.stderr`` when omitted.
        """
        normal = self.translate_level(level)
        if not self.is_valid_level(normal):
            raise ValueError(f"Invalid log level: {level}")
        self._level = normal
        self._original_level: Optional[str] = None
        if name is None:
            name = f"{_LOGGER_NAME}.{next(_instance_ids)}"
        self._logger = configure(name, stream)

    @staticmethod
    def translate_level(level: str) -> str:
        """Map an alias such as ``verbose`` onto its canonical level name."""
        return ALIASES.get(level, level)

    @staticmethod
    def is_valid_level(level: str) -> bool:
        return level in LEVELS

    def get_level(self) -> str:
        return self._level

    def set_level(self, level: str) -> None:
        """Set the active level; unknown names raise :class:`ValueError`."""
        if not isinstance(level, str):
            raise ValueError("Log level must be a string")
        normal = self.translate_level(level)
        if not self.is_valid_level(normal):
            raise ValueError(f"set_level: Invalid log level: {level}")
        self._level = normal

    def set_temporary_level(self, level: Optional[str]) -> bool:
        """Switch to *level* until :meth:`reset_level` is called.

        Returns True if the active level actually changed.
        """
        if not level:
            return False
        normal = self.translate_level(level)
        if not self.is_valid_level(normal):
            raise ValueError(f"set_temporary_level: Invalid log level: {level}")
        if normal == self._level:
            return False
        self._original_level = self._level
        self._level = normal
        return True

    def reset_level(self) -> None:
        """Restore the level saved by :meth:`set_temporary_level`, if any."""
        if self._original_level is not None:
            self._level = self._original_level
            self._original_level = None

    @contextmanager
    def temporary_level(self, level: Optional[str]) -> Iterator["DiagnosticLogger"]:
        """Apply *level* for the body of a ``with`` block.

        The previous level is restored on every exit path. With a falsy
        *level* this is a no-op.
        """
        if not level:
            yield self
            return
        self.set_temporary_level(level)
        try:
            yield self
        finally:
            self.reset_level()

    def set_debug(self, is_debug: bool) -> None:
        if is_debug:
            self.set_level("debug")
            self.debug("Debug mode is enabled")
        else:
            self.debug("Debug mode is disabled")
            self.set_level("info")

    def should_log(self, level: str) -> bool:
        if level == "error":
            return True
        return LEVELS[level] >= LEVELS[self._level]

    def _log(self, level: str, msg: str, *args) -> None:
        if self.should_log(level):
            self._logger.log(LEVELS[level], msg, *args)

    def debug(self, msg: str, *args) -> None:
        self._log("debug", msg, *args)

    def info(self, msg: str, *args) -> None:
        self._log("info", msg, *args)

    def log(self, msg: str, *args) -> None:
        self._log("log", msg, *args)

    def warn(self, msg: str, *args) -> None:
        self._log("warn", msg, *args)

    def error(self, msg: str, *args) -> None:
        self._log("error", msg, *args)


default_logger = DiagnosticLogger(name=_LOGGER_NAME)

__all__ = ["DiagnosticLogger", "default_logger", "configure", "LEVELS", "ALIASES"]
