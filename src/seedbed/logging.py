"""Logging helpers used by the SEEDBED harness.

This module provides a per-run "log sink": a logger whose records are
buffered in memory (with secrets redacted) and rendered with Rich when the
run is torn down. It also provides console handler configuration for test
sessions, a filter that annotates third-party records with a short prefix,
and startup diagnostics.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from importlib.metadata import PackageNotFoundError, version
from logging.handlers import BufferingHandler
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from seedbed.interfaces.redactor import Redactor

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "seedbed"
SINK_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOGS_BANNER = "LOGS"


class ThirdPartyPrefixFilter(logging.Filter):
    """Annotate third-party log records with a short prefix.

    For records whose logger name does not start with the project prefix,
    sets `record.prefix` to a short bracketed token like "[urllib3]". For
    project loggers the prefix is set to an empty string. The filter always
    returns True to allow the record to be processed.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            # e.g. "urllib3.connectionpool" -> "[urllib3]"
            record.prefix = f"[{record.name.split('.')[0]}]"
        else:
            record.prefix = ""
        return True


class RedactingFilter(logging.Filter):
    """Replace secrets in a record's rendered message before it is stored."""

    def __init__(self, redactor: Redactor) -> None:
        super().__init__()
        self._redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._redactor.sanitize(record.getMessage())
        record.args = None
        return True


class CaptureHandler(BufferingHandler):
    """Keep every record in memory until explicitly cleared."""

    def __init__(self) -> None:
        super().__init__(capacity=0)

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return False

    def flush(self) -> None:
        """Records are kept; they are rendered by `LogSink.dump`."""


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode the handler is set to DEBUG
    and includes source file/line information; otherwise a short third-party
    prefix is applied.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting (show_path, timestamps).
        color: Enable color output when True.

    Returns:
        RichHandler: Configured handler suitable to attach to the root logger.
    """
    ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = (
        "%(prefix)s %(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))

    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


class LogSink:
    """A per-run diagnostic logger backed by an in-memory buffer.

    Records logged through `logger` are redacted (when a redactor is given),
    kept in memory, and rendered between ``LOGS`` rules by `dump`. The logger
    has no parent and does not propagate, so concurrent runs never interleave
    their records.

    Args:
        name: Run name; the logger is ``seedbed.run.<name>``.
        redactor: Optional redactor applied to every record.
        level: Minimum level captured.
        console: Rich console used by `dump` (stderr by default).
    """

    def __init__(
        self,
        name: str,
        *,
        redactor: Redactor | None = None,
        level: int = logging.DEBUG,
        console: Console | None = None,
    ) -> None:
        # Kept out of logging's registry, which never drops a logger.
        self.logger = logging.Logger(f"{PROJECT_PREFIX}.run.{name}")
        self.logger.setLevel(level)
        self.logger.propagate = False
        # Records logged after close() are dropped.
        self.logger.addHandler(logging.NullHandler())
        self.console = console or Console(stderr=True)

        self._handler = CaptureHandler()
        self._handler.setFormatter(logging.Formatter(SINK_FORMAT))
        if redactor is not None:
            self._handler.addFilter(RedactingFilter(redactor))
        self.logger.addHandler(self._handler)

    @property
    def records(self) -> list[logging.LogRecord]:
        """Records captured so far."""
        return list(self._handler.buffer)

    def lines(self) -> list[str]:
        """Return the captured records, formatted."""
        return [self._handler.format(record) for record in self._handler.buffer]

    def text(self) -> str:
        """Return the captured records as one newline-joined string."""
        return "\n".join(self.lines())

    def dump(self) -> None:
        """Print the captured records between ``LOGS`` rules."""
        self.console.rule(LOGS_BANNER)
        for line in self.lines():
            self.console.print(line, markup=False, highlight=False)
        self.console.rule(LOGS_BANNER)

    def close(self) -> None:
        """Detach the capture handler. Captured records are kept."""
        self.logger.removeHandler(self._handler)


def _dist_version(name: str) -> str:
    try:
        return version(name)
    except PackageNotFoundError:
        return "unknown"


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    endpoint: str,
    database: str,
    image: str | None,
    redactor: Redactor | None = None,
) -> None:
    """Log a one-line summary of a harness run plus DEBUG diagnostics.

    Emits an informational line naming the endpoint and logical database.
    Additional DEBUG-level diagnostics include Python and platform versions,
    process id, current working directory, and the versions of the database
    driver and token library.

    Args:
        logger: Logger used to emit startup messages.
        app_version: SEEDBED version string to display.
        endpoint: Server endpoint (redacted before logging).
        database: Logical database being provisioned.
        image: Container image, or None when attached to an existing server.
        redactor: Optional redactor applied to the endpoint.
    """
    shown = redactor.sanitize(endpoint) if redactor is not None else endpoint
    logger.info(
        "SEEDBED %s: database=%s endpoint=%s instance=%s",
        app_version,
        database,
        shown,
        image or "attached",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", os.getcwd())
    logger.debug("python-arango: %s", _dist_version("python-arango"))
    logger.debug("PyJWT: %s", _dist_version("PyJWT"))
