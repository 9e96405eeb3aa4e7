"""skinnyspec CLI entry point.

Defines the top-level ``skinnyspec`` command (via Click-Extra) and registers
its subcommands.

Currently available commands
- ``skinnyspec routes``: preview the requests ``with_restful_actions`` issues.
- ``skinnyspec describe``: list the examples a spec module generates.

Notes
- The CLI version is sourced from `skinnyspec.__version__` and displayed
  automatically by Click-Extra (``--version``).
- Running the generated examples is pytest's job; the plugin registered under
  the ``pytest11`` entry point collects them.

Examples
    $ skinnyspec --version
    $ skinnyspec routes show edit --member preview=post
    $ skinnyspec -v describe tests/functional/test_foos_controller.py
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from skinnyspec import __version__
from skinnyspec.config import InvalidSettingError, load_settings
from skinnyspec.logging import FlightRecorder, config_console_handler, log_startup

from .describe import describe as describe_command
from .helpers import parse_log_level
from .routes import routes as routes_command

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """SKINNYSPEC command-line interface.

    SKINNYSPEC is a behavioral-testing DSL for MVC controllers. One-line
    declarations such as it_should_find("foo") or it_should_redirect_to(...)
    expand into pytest examples that mock the model layer, issue a request and
    check what the controller did with it.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (source paths and timestamps in console logs).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path the flight recorder writes to.",
    default=Path(user_log_dir("skinnyspec", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="SKINNYSPEC_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="SKINNYSPEC_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records in memory at DEBUG granularity and write "
        "them to --log-path when a WARNING/ERROR occurs, or on exit with "
        "--force-flush. Console verbosity is unchanged."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit even without warnings.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO) or via "
        "SKINNYSPEC_LOGGER_LEVELS (comma/space list)."
    ),
    default=("sqlalchemy=WARNING", "werkzeug=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def skinnyspec(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """SKINNYSPEC command-line interface."""

    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = [
        config_console_handler(level=level, debug_mode=debug, color=ctx.color is not False)
    ]
    if flight_recorder:
        handlers.append(
            FlightRecorder(
                log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # root captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    try:
        settings = load_settings()
    except InvalidSettingError:
        settings = None

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        logger_levels=logger_levels,
        settings=settings,
    )

    ctx.call_on_close(logging.shutdown)


skinnyspec.add_command(routes_command)
skinnyspec.add_command(describe_command)
