"""Logging set up by the skinnyspec CLI.

Library modules only ever call ``logging.getLogger(__name__)``. The CLI
attaches two handlers to the root logger:

- a Rich console handler whose records carry a short source prefix, either
  the library that logged them (``[werkzeug]``) or the request the harness
  was processing (``[POST foos.create]``);
- a :class:`FlightRecorder` that keeps recent DEBUG records in memory and
  writes them out once something goes wrong.

When the examples run under pytest, pytest's own log capture takes over and
none of this is installed.
"""

from __future__ import annotations

import logging
import platform
import sys
from importlib import metadata
from logging.handlers import MemoryHandler
from typing import TYPE_CHECKING, Literal

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from skinnyspec.config import Settings

PROJECT_PREFIX = "skinnyspec"
PLUGIN_GROUP = "pytest11"

# Distributions whose versions matter when an example misbehaves.
STACK = ("flask", "werkzeug", "sqlalchemy", "pytest")

RECORDER_FORMAT = "[%(asctime)s] %(levelname)s %(name)s:%(lineno)d: %(prefix)s%(message)s"


class SourcePrefixFilter(logging.Filter):
    """Set ``record.prefix`` to where a record came from.

    Library records get their top-level package name, project records the
    ``request`` extra the harness attaches while processing a request, and
    anything else an empty prefix. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            source = record.name.partition(".")[0]
        else:
            source = getattr(record, "request", "")
        record.prefix = f"[{source}] " if source else ""
        return True


class FlightRecorder(MemoryHandler):
    """Buffer records in memory and write them to ``path`` on demand.

    The buffer is written when a record at ``flush_level`` or above arrives,
    when it fills up, or on close if ``flush_on_close`` is set. The file is
    truncated on first write so it only ever holds the latest run.
    """

    def __init__(
        self,
        path: Path,
        capacity: int = 2000,
        flush_level: int = logging.WARNING,
        flush_on_close: bool = False,
    ) -> None:
        target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
        target.setLevel(logging.DEBUG)
        target.setFormatter(logging.Formatter(RECORDER_FORMAT))
        target.addFilter(SourcePrefixFilter())
        super().__init__(
            capacity, flushLevel=flush_level, target=target, flushOnClose=flush_on_close
        )
        self.path = path

    def describe(self) -> str:
        return (
            f"path={self.path}, capacity={self.capacity}, "
            f"flush_on_close={self.flushOnClose}"
        )


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    Args:
        level: Minimum level shown (DEBUG when ``debug_mode`` is on).
        debug_mode: Add timestamps, logger names and source locations.
        color: Passed through from click-extra's ``--color/--no-color``.

    Returns:
        RichHandler: Handler ready to attach to the root logger.
    """
    color_system: Literal["auto"] | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(prefix)s%(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s%(message)s"))
    handler.addFilter(SourcePrefixFilter())
    return handler


def installed_version(distribution: str) -> str:
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return "<not installed>"


def plugin_entry_point() -> str | None:
    """Return the module registered as the skinnyspec pytest plugin, if any."""
    for entry_point in metadata.entry_points(group=PLUGIN_GROUP):
        if entry_point.name == PROJECT_PREFIX:
            return entry_point.value
    return None


def log_startup(
    logger: logging.Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    logger_levels: dict[str, int],
    settings: Settings | None,
) -> None:
    """Log a one-line summary at INFO and the run's context at DEBUG.

    The DEBUG lines cover what decides how examples behave: the settings
    the harness will use, whether pytest picks up the plugin, the web and
    database stack versions and the logging set up itself.

    Args:
        logger: Logger to write to.
        app_version: skinnyspec version.
        level: Console level.
        handlers: Handlers attached to the root logger.
        logger_levels: Per-logger level overrides.
        settings: Settings read from the environment, or None if they are
            invalid (the commands that need them report why).
    """
    recorder = next((h for h in handlers if isinstance(h, FlightRecorder)), None)
    plugin = plugin_entry_point()

    logger.info(
        "SKINNYSPEC %s: console=%s, flight-recorder=%s, pytest plugin=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if recorder else "OFF",
        "registered" if plugin else "missing",
    )

    if settings is None:
        logger.debug("Settings: <invalid>")
    else:
        logger.debug(
            "Settings: login_path=%s, host=%s, member_id=%s, referer=%s",
            settings.login_path,
            settings.host,
            settings.member_id,
            settings.referer,
        )
        logger.debug("Database: %s", settings.db_url)
    logger.debug("Plugin: %s", plugin or "<not registered under pytest11>")
    logger.debug("Python: %s on %s", sys.version.split()[0], platform.system())
    logger.debug(
        "Stack: %s", ", ".join(f"{name} {installed_version(name)}" for name in STACK)
    )
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if recorder:
        logger.debug("Flight recorder: %s", recorder.describe())
    logger.debug(
        "Logger levels: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()} or "<none>",
    )
