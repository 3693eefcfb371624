"""DATASTASH CLI entry point.

Defines the top-level ``datastash`` command (via Click-Extra), configures
logging for every subcommand, and registers the artifact commands.

Commands
- ``datastash publish PATH GROUP NAME VERSION``: publish a file or directory.
- ``datastash fetch GROUP NAME VERSION [-d]``: print the local path.
- ``datastash ls [GROUP]``: list published artifacts.
- ``datastash wipe [--force]``: empty the local cache.

Examples
    $ datastash --version
    $ datastash --remote s3://bucket/artifacts ls models
    $ DATASTASH_REMOTE=file:///srv/stash datastash fetch models encoder 3
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from datastash import __version__
from datastash.config import CACHE_DIR_ENV, REMOTE_ENV
from datastash.logging import config_console_handler, config_flight_recorder, log_startup

from .artifacts import COMMANDS, CliState
from .helpers.log_level_parser import parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """DATASTASH command-line interface.

    DATASTASH publishes versioned files and directory trees to a shared remote
    store and resolves them into a local cache. Every artifact is addressed by
    group, name and version; a cached artifact is downloaded once per machine,
    no matter how many processes ask for it at the same time.
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
    "--remote",
    "remote_url",
    metavar="URL",
    help="Remote store URL: s3://bucket[/prefix], file:///path or memory://.",
    envvar=REMOTE_ENV,
    show_envvar=True,
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local cache root (defaults to the per-user cache directory).",
    envvar=CACHE_DIR_ENV,
    show_envvar=True,
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
    help="Enable debug mode (logger names, timestamps and source locations).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("datastash", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="DATASTASH_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="DATASTASH_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "at DEBUG granularity (unaffected by -v/-q) and writes them to "
        "--log-path when a WARNING/ERROR occurs, or on exit if --force-flush "
        "is set. Use --no-flight-recorder to disable."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Force-flush the flight recorder buffer to --log-path on program exit. "
        "Normally the buffer only dumps on WARNING/ERROR."
    ),
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
        "console and flight recorder. Repeatable (e.g. -L botocore=INFO "
        "-L datastash.adapters=DEBUG) or via DATASTASH_LOGGER_LEVEL "
        "(comma/space list). boto3, botocore, s3transfer and urllib3 default "
        "to WARNING."
    ),
    show_envvar=True,
)
@clickx.pass_context
def datastash(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    remote_url: str | None,
    cache_dir: Path | None,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """DATASTASH command-line interface."""

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = []

    # 1) console handler
    use_color = ctx.color is not False  # None or True => allow color
    handlers.append(
        config_console_handler(level=level, debug_mode=debug, color=use_color)
    )

    # 2) flight recorder
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # 3) root logger captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 4) per-logger levels (third-party libraries)
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.obj = CliState(remote_url=remote_url, cache_dir=cache_dir)
    ctx.call_on_close(logging.shutdown)


for command in COMMANDS:
    datastash.add_command(command)
