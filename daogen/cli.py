# File: daogen/cli.py
"""
daogen - Command-Line Interface
================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Settings from a properties file shared with the generated DAOs
    python -m daogen -c database.properties -o ./generated

    # Everything on the command line
    python -m daogen --url "mysql+pymysql://localhost/shop" --user app \\
        --password secret --model-package com.shop.model --dao-package com.shop.dao

    # Only two tables, preview without writing
    python -m daogen -c daogen.yaml --table customer orders --dry-run -v

    # Show version
    python -m daogen --version

Exit codes:
    0 — success
    1 — configuration error
    2 — generation error (at least one table failed)
    3 — metadata / connection error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

from daogen.errors import ConfigurationError, MetadataError, OutputWriteError

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_CONFIG_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_METADATA_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root daogen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    formatter: logging.Formatter = logging.Formatter(fmt, datefmt=datefmt)
    handler.setFormatter(formatter)

    root_logger: logging.Logger = logging.getLogger("daogen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from daogen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="daogen",
        description=(
            "daogen — JDBC data-access code generator.\n\n"
            "Reads the tables, columns, primary keys and indexes of a live "
            "database and writes one data class per table, per primary key "
            "and per index, plus one DAO class per table."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -c database.properties -o ./generated\n"
            "  %(prog)s --url sqlite:///shop.db --model-package com.shop.model\n"
            "  %(prog)s -c daogen.yaml --table customer --dry-run -v\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"daogen v{__version__}",
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Settings file (.properties, YAML or JSON).",
    )

    # --- Connection ---
    connection_group = parser.add_argument_group("connection")
    connection_group.add_argument(
        "--url",
        type=str,
        default=None,
        metavar="URL",
        help="SQLAlchemy database URL (overrides db.url).",
    )
    connection_group.add_argument(
        "--user",
        type=str,
        default=None,
        metavar="USER",
        help="Database user name (overrides db.username).",
    )
    connection_group.add_argument(
        "--password",
        type=str,
        default=None,
        metavar="PW",
        help="Database password (overrides db.password).",
    )

    # --- Output ---
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Root directory for generated sources (default: generated).",
    )
    output_group.add_argument(
        "-t", "--templates",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory with custom .template files (default: bundled).",
    )
    output_group.add_argument(
        "--model-package",
        type=str,
        default=None,
        metavar="PKG",
        help="Java package of the data classes.",
    )
    output_group.add_argument(
        "--dao-package",
        type=str,
        default=None,
        metavar="PKG",
        help="Java package of the DAO classes.",
    )

    # --- Selection & SQL ---
    selection_group = parser.add_argument_group("table selection")
    selection_group.add_argument(
        "--table",
        dest="tables",
        nargs="+",
        default=None,
        metavar="NAME",
        help="Only generate these tables.",
    )
    selection_group.add_argument(
        "--exclude",
        dest="exclude_tables",
        nargs="+",
        default=None,
        metavar="NAME",
        help="Skip these tables.",
    )
    selection_group.add_argument(
        "--quote",
        type=str,
        default=None,
        choices=["`", '"'],
        help="Identifier quote character used in generated SQL (default: `).",
    )

    # --- Behaviour flags ---
    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--allow-missing-placeholders",
        action="store_true",
        default=False,
        help="Render unknown ${placeholders} as empty text instead of failing.",
    )
    behaviour_group.add_argument(
        "--clean",
        action="store_true",
        default=False,
        help="Empty the generated package directories before writing.",
    )
    behaviour_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render everything but write nothing.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except the final summary.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Map CLI arguments onto ``GeneratorConfig`` fields; unset flags are left out."""
    overrides: Dict[str, object] = {}

    if args.url is not None:
        overrides["database_url"] = args.url
    if args.user is not None:
        overrides["username"] = args.user
    if args.password is not None:
        overrides["password"] = args.password
    if args.output is not None:
        overrides["output_dir"] = args.output
    if args.templates is not None:
        overrides["template_dir"] = args.templates
    if args.model_package is not None:
        overrides["model_package"] = args.model_package
    if args.dao_package is not None:
        overrides["dao_package"] = args.dao_package
    if args.tables is not None:
        overrides["tables"] = args.tables
    if args.exclude_tables is not None:
        overrides["exclude_tables"] = args.exclude_tables
    if args.quote is not None:
        overrides["identifier_quote"] = args.quote

    if args.allow_missing_placeholders:
        overrides["strict_placeholders"] = False
    if args.clean:
        overrides["clean_output"] = True
    if args.dry_run:
        overrides["dry_run"] = True

    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def run(args: argparse.Namespace) -> int:
    """
    Load the configuration, run the generator and print the report.

    Returns the appropriate exit code.
    """
    from daogen.config import load_config
    from daogen.generator import DaoGenerator, GenerationReport

    config_path: Optional[Path] = None
    if args.config is not None:
        config_path = Path(args.config).resolve()
        if not config_path.is_file():
            logger.error("Configuration file not found: %s", config_path)
            return EXIT_INPUT_ERROR

    try:
        config = load_config(config_path, _build_config_overrides(args))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    logger.info("Output:         %s", Path(config.output_dir).resolve())
    logger.info("Model package:  %s", config.model_package)
    logger.info("DAO package:    %s", config.dao_package)
    if config.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    try:
        report: GenerationReport = DaoGenerator(config).run()
    except MetadataError as exc:
        logger.error("Cannot read database metadata: %s", exc)
        return EXIT_METADATA_ERROR
    except OutputWriteError as exc:
        logger.error("Cannot prepare output directory: %s", exc)
        return EXIT_GENERATION_ERROR

    print(report.summary())

    return EXIT_SUCCESS if report.success else EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.config is None and args.url is None:
        logger.error("Either -c/--config or --url is required.")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    # --- Verbosity ---
    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    exit_code: int = run(args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "run",
    "EXIT_SUCCESS",
    "EXIT_CONFIG_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_METADATA_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("daogen.cli loaded.")
