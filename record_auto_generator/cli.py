import argparse
import logging
import sys
from typing import List, Optional

from record_auto_generator.colored_logging import setup_colored_logging
from record_auto_generator.config import load_settings
from record_auto_generator.constants import DefaultConfig
from record_auto_generator.exceptions import RecordGeneratorError
from record_auto_generator.generation import run


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db-to-records",
        description="Generate one immutable record class per database table from the live schema.",
    )
    parser.add_argument(
        "-p",
        "--package-name",
        dest="package_name",
        required=True,
        help="Package of the generated records (e.g. com.example.records).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        help=f"Root directory for generated sources (default: {DefaultConfig.OUTPUT_DIR}).",
    )
    parser.add_argument(
        "-e",
        "--env",
        dest="env_path",
        help=f"YAML file with DB_URL, DB_USER, DB_PASSWORD, DB_SCHEMA (default: {DefaultConfig.ENV_PATH}).",
    )
    parser.add_argument(
        "-m",
        "--mappings",
        dest="mappings_path",
        help="YAML file with table filters and name overrides.",
    )
    parser.add_argument(
        "-t",
        "--templates",
        dest="templates_path",
        help="Directory containing a custom table-record.j2 template.",
    )
    parser.add_argument(
        "--offset-date-time",
        dest="use_offset_date_time",
        action="store_true",
        help="Map timezone-aware timestamps to OffsetDateTime instead of Instant.",
    )
    parser.add_argument(
        "--extension",
        dest="file_extension",
        help=f"Extension of generated files (default: {DefaultConfig.FILE_EXTENSION}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_colored_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        use_colors=not args.no_color,
    )
    if args.verbose:
        logger.debug("Verbose mode enabled. DEBUG level logging activated.")

    try:
        settings = load_settings(args)
        run(settings)
    except RecordGeneratorError as e:
        logger.error(f"Generation failed: {e}", exc_info=args.verbose)
        return 1
    except Exception as e:
        logger.error(f"An unexpected error occurred during generation: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
