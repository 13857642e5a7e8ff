"""
Command-line entry point.

    csvanalyzer -a AKID -l LOCALE -f FILE [-c CONFIG] [--db-host HOST] ...

Prints one JSON document (success or error) on stdout. Database settings
come from the PG* environment variables, then the [PGGLOBAL] section of
the config file, then the --db-* flags, each layer overriding the last.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .core.config import DbSettings, Settings, get_settings, load_db_settings_from_file
from .core.errors import ConfigurationError, SampleError
from .models.responses import ErrorResponse
from .services.analyzer import CsvAnalyzer
from .services.properties import PostgresPropertySource

logger = logging.getLogger("csvanalyzer.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csvanalyzer",
        description="Detect the format and column types of a contact CSV file.",
    )
    parser.add_argument("-a", "--akid", type=int, default=None, help="account id used to look up contact properties")
    parser.add_argument("-l", "--locale", default=None, help="locale echoed in the result")
    parser.add_argument("-f", "--filename", required=True, help="CSV file to analyze")
    parser.add_argument("-c", "--config", default=None, help="INI file with a [PGGLOBAL] section")
    parser.add_argument("--db-host")
    parser.add_argument("--db-port", type=int)
    parser.add_argument("--db-name")
    parser.add_argument("--db-user")
    parser.add_argument("--db-password")
    parser.add_argument("--scan-lines", type=int, help="maximum sample lines to scan")
    parser.add_argument("--return-lines", type=int, help="maximum data rows to return")
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    return parser


def resolve_settings(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    base = base or get_settings()
    updates = {}
    if args.scan_lines is not None:
        updates["MAX_SCAN_LINES"] = args.scan_lines
    if args.return_lines is not None:
        updates["MAX_RETURN_LINES"] = args.return_lines
    return base.model_copy(update=updates) if updates else base


def resolve_db_settings(args: argparse.Namespace, settings: Settings) -> Optional[DbSettings]:
    db = settings.db_settings()

    config_path = args.config or settings.CONFIG_FILE
    if args.config or (db is None and os.path.exists(config_path)):
        try:
            db = load_db_settings_from_file(config_path)
        except ConfigurationError as e:
            logger.warning("Ignoring config file %s: %s", config_path, e)

    overrides = {
        "host": args.db_host,
        "port": args.db_port,
        "database": args.db_name,
        "user": args.db_user,
        "password": args.db_password,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if not overrides:
        return db
    if db is not None:
        return db.model_copy(update=overrides)
    if {"host", "database", "user"} <= overrides.keys():
        return DbSettings(**overrides)

    logger.warning("Incomplete --db-* options, analyzing without contact properties")
    return None


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = resolve_settings(args)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    locale = args.locale or settings.DEFAULT_LOCALE

    if not os.path.isfile(args.filename):
        error = SampleError(f"File not found: {args.filename}")
        print(ErrorResponse.from_error(error, locale, charset="").to_json())
        return 1

    db = resolve_db_settings(args, settings)
    source = PostgresPropertySource(db, timeout=settings.DB_CONNECT_TIMEOUT) if db else None

    result = CsvAnalyzer(settings, source).analyze(args.filename, locale, args.akid)
    print(result.to_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
