"""refcheck - check referential integrity of an OSM file.

Exit status is 0 when every reference resolves, 1 when at least one
reference is missing and 2 when the check could not run.
"""

import argparse
import sys
from typing import TextIO

import structlog
from pydantic import ValidationError

from refcheck import __version__
from refcheck.config.settings import CheckSettings, get_settings
from refcheck.graph.integrity.reference_validator import ReferenceValidator
from refcheck.graph.integrity.report import RefCheckReport
from refcheck.graph.stream import StreamOrderError, apply_stream, iter_missing_references
from refcheck.io.osm_reader import STDIN, InputError, read_entities
from refcheck.observability.logging import LogContext, configure_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_MISSING_REFERENCES = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refcheck",
        description="Check referential integrity of an OSM file",
    )
    parser.add_argument(
        "input_filename",
        nargs="?",
        default=STDIN,
        help='Input file ("-" or omitted reads STDIN, needs --input-format)',
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Set verbose mode")
    parser.add_argument(
        "-i", "--show-ids", action="store_true", default=None,
        help="Show IDs of missing objects",
    )
    parser.add_argument("-F", "--input-format", help="Format of input files")
    parser.add_argument(
        "-r", "--check-relations", action="store_true", default=None,
        help="Also check relations",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_options(args: argparse.Namespace, defaults: CheckSettings) -> CheckSettings:
    """Overlay command line flags on the configured settings."""
    overrides = {
        "show_ids": args.show_ids,
        "check_relations": args.check_relations,
        "input_format": args.input_format,
    }
    return defaults.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )


def run_check(
    source: str,
    options: CheckSettings,
    out: TextIO | None = None,
) -> RefCheckReport:
    """
    Check one input file.

    Args:
        source: File path or "-" for STDIN
        options: Effective check options
        out: Sink for missing reference lines when show_ids is set
            (defaults to STDOUT)

    Returns:
        RefCheckReport of the finished scan
    """
    validator = ReferenceValidator(
        check_relations=options.check_relations,
        chunk_bits=options.presence_chunk_bits,
    )
    entities = read_entities(source, options.input_format)

    if not options.show_ids:
        return apply_stream(entities, validator)

    out = out or sys.stdout

    for missing in iter_missing_references(entities, validator):
        print(missing, file=out)
    return validator.report()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Error in configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    configure_logging(
        level="INFO" if args.verbose else settings.log_level,
        format=settings.observability.log_format,
    )
    options = resolve_options(args, settings.check)

    logger.info(
        "Started refcheck",
        input_filename=args.input_filename,
        input_format=options.input_format,
        show_ids=options.show_ids,
        check_relations=options.check_relations,
    )

    with LogContext(input_file=args.input_filename):
        try:
            report = run_check(args.input_filename, options)
        except (InputError, StreamOrderError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        except RuntimeError as e:
            # pyosmium reports decoding failures as RuntimeError
            print(f"Error reading input: {e}", file=sys.stderr)
            return EXIT_ERROR

    for line in report.summary_lines():
        print(line, file=sys.stderr)

    logger.info("Done")

    return EXIT_MISSING_REFERENCES if report.has_errors else EXIT_OK
