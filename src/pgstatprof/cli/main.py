"""
Command-line interface for the pgstatprof query profiler.

This module parses the command line, layers it over the optional TOML
configuration file, connects to PostgreSQL and runs the sampling loop until
it is interrupted.

Usage:
    pgstatprof [-h HOST] [-u USER] [--database DB] [--top N] [--last N]
               [-i SECONDS] [--delay N] [--diff] [--no-normalize]

Example:
    pgstatprof -h db1 --database app -i 0.1 --delay 30 --top 20
"""

import argparse
import dataclasses
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from ..collectors import PgActivitySource
from ..config import get_config, set_config_overrides, set_config_path
from ..models.config import AppConfig
from ..orchestration import QueryProfiler, SignalHandler
from ..summarizers import create_summarizer
from ..system import get_current_username
from ..validation import (
    DataSourceConnectionError,
    DataSourceError,
    ValidationError,
    handle_cli_error,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Numeric options are kept as strings here and validated by the
    configuration layer, so that every bad value is reported the same way.
    `-h` selects the host, so help is only available as `--help`.
    """
    parser = argparse.ArgumentParser(
        prog="pgstatprof",
        description="Sample pg_stat_activity and report the most frequent queries.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")

    conn = parser.add_argument_group("connection")
    conn.add_argument("-h", "--host", metavar="HOSTNAME", help="postgresql hostname (default: localhost)")
    conn.add_argument("-u", "--user", metavar="USER", help="postgresql user (default: current OS user)")
    conn.add_argument("-p", "--password", metavar="PASSWORD", help="postgresql password")
    conn.add_argument("--port", metavar="PORT", help="postgresql port (default: 5432)")
    conn.add_argument("--database", metavar="DATABASENAME", help="database name")

    prof = parser.add_argument_group("profiler")
    prof.add_argument("--top", metavar="N", help="print top N query (default: 10)")
    prof.add_argument(
        "--last",
        metavar="N",
        help="last N samples are summarized. 0 means summarize all samples",
    )
    prof.add_argument("-i", "--interval", metavar="N.M", help="(float) Sampling interval")
    prof.add_argument(
        "--delay",
        metavar="N",
        help="(int) Show summary for each `delay` samples. "
        "-i 0.1 --delay 30 shows summary for every 3sec",
    )
    prof.add_argument(
        "--diff",
        action="store_true",
        default=None,
        help="only output when existing new query (default: false)",
    )
    prof.add_argument(
        "--no-normalize",
        dest="normalize",
        action="store_false",
        default=None,
        help="do not normalize queries (default: normalize)",
    )

    misc = parser.add_argument_group("misc")
    misc.add_argument("-c", "--config", type=Path, metavar="FILE", help="TOML file with default settings")
    misc.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="diagnostic log level (default: WARNING); logs go to stderr",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """Map parsed options onto configuration sections; absent options are None."""
    return {
        "connection": {
            "host": args.host,
            "port": args.port,
            "user": args.user,
            "password": args.password,
            "database": args.database,
        },
        "profiler": {
            "interval_seconds": args.interval,
            "delay": args.delay,
            "top": args.top,
            "diff": args.diff,
            "normalize": args.normalize,
            "window_size": args.last,
        },
    }


def resolve_user(app_config: AppConfig) -> AppConfig:
    """Fill in the current OS user when no database user was configured."""
    if app_config.connection.user:
        return app_config
    connection = dataclasses.replace(app_config.connection, user=get_current_username())
    return dataclasses.replace(app_config, connection=connection)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for pgstatprof.

    Exits with status 1 on invalid options, a missing or malformed
    configuration file, or any database failure. An interrupt stops the loop
    and returns normally.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    set_config_path(args.config)
    set_config_overrides(overrides_from_args(args))
    try:
        app_config = resolve_user(get_config())
    except ValidationError as e:
        parser.print_help()
        handle_cli_error(error=e, context="option validation", exit_code=1, logger=logger)
    except (FileNotFoundError, KeyError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)
    except psutil.Error as e:
        handle_cli_error(error=e, context="current user lookup", exit_code=1, logger=logger)

    profiler_config = app_config.profiler
    summarizer = create_summarizer(profiler_config.window_size)
    source = PgActivitySource(app_config.connection)

    try:
        source.connect()
    except DataSourceConnectionError as e:
        handle_cli_error(error=e, context="database connection", exit_code=1, logger=logger)

    profiler = QueryProfiler(source, summarizer, profiler_config)
    try:
        with SignalHandler(profiler):
            profiler.run()
    except DataSourceError as e:
        handle_cli_error(error=e, context="polling pg_stat_activity", exit_code=1, logger=logger)
    finally:
        source.close()


if __name__ == "__main__":
    main_cli()
