# -*- coding:utf-8 -*-

#  ************************** Copyrights and license ***************************
#
# This file is part of covmerge 1.1+main, a merging and reporting tool for
# Cobertura line coverage reports.
#
# _____________________________________________________________________________
#
# Copyright (c) 2024-2026 the covmerge authors
#
# This software is distributed under the 3-clause BSD License.
# For more information, see the README.rst file.
#
# ****************************************************************************

import logging
import sys
import traceback
from argparse import ArgumentError, ArgumentParser
from typing import Optional

from . import formats
from .data_model.coverage import CoverageReport
from .data_model.stats import report_stat
from .exceptions import EmptyInputError, ParseError
from .logging import configure_logging, update_logging
from .options import (
    Options,
    OutputOrDefault,
    check_percentage,
    check_positive_int,
    default_timestamp,
    timestamp,
)
from .version import __version__

LOGGER = logging.getLogger("covmerge")

COPYRIGHT = "Copyright (c) 2024-2026 the covmerge authors\n"

# The exit codes are bits, a failed threshold can be combined with others.
EXIT_SUCCESS = 0
EXIT_CMDLINE_ERROR = 1
EXIT_LINE_NOK = 2
EXIT_READ_ERROR = 64
EXIT_WRITE_ERROR = 128


def create_argument_parser() -> ArgumentParser:
    """Build the command line of covmerge."""
    parser = ArgumentParser(
        prog="covmerge",
        usage="covmerge [options] [reports...]",
        description=(
            "Merge Cobertura coverage reports into one report "
            "and summarize the merged line coverage."
        ),
        add_help=False,
        exit_on_error=False,
    )

    general = parser.add_argument_group("Options")
    general.add_argument(
        "-h", "--help", action="help", help="Show this help message, then exit."
    )
    general.add_argument(
        "--version",
        action="store_true",
        help="Print the version number, then exit.",
    )
    general.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print progress messages. Use this to find out why a report is skipped.",
    )
    general.add_argument(
        "--no-color",
        action="store_true",
        help="Turn off colored logging.",
    )
    general.add_argument(
        "--force-color",
        action="store_true",
        help="Color the log messages even when stderr is not a terminal.",
    )
    general.add_argument(
        "-j",
        "--jobs",
        type=check_positive_int,
        metavar="N",
        default=1,
        help="Parse the reports with N threads. Defaults to %(default)s.",
    )
    general.add_argument(
        "--fail-under-line",
        type=check_percentage,
        metavar="MIN",
        default=0.0,
        help=(
            "Exit with a status of 2 if the line coverage "
            "of the merged report is less than MIN."
        ),
    )
    parser.add_argument(
        "reports",
        nargs="*",
        metavar="REPORT",
        help=(
            "Cobertura XML reports or glob patterns. The first report is "
            "the base of the merge, the others are merged into it in order."
        ),
    )

    outputs = parser.add_argument_group("Output Options")
    outputs.add_argument(
        "-o",
        "--output",
        type=OutputOrDefault,
        default=None,
        help=(
            "Write the output to this file. Defaults to stdout. "
            "An output format given with its own file name ignores it."
        ),
    )
    formats.add_arguments(outputs)
    outputs.add_argument(
        "--timestamp",
        type=timestamp,
        default=None,
        help=(
            "Time stored in the Cobertura report, as epoch or "
            "`YYYY-MM-DD hh:mm:ss`. Defaults to the environment variable "
            "SOURCE_DATE_EPOCH or the current time."
        ),
    )

    return parser


def get_exit_code(report: CoverageReport, threshold_line: float) -> int:
    """Compare the merged line coverage with --fail-under-line."""
    if threshold_line <= 0.0:
        return EXIT_SUCCESS

    # A report without any line counts as uncovered.
    stat = report_stat(report)
    if stat.ratio * 100.0 < threshold_line:
        LOGGER.error(
            f"failed minimum line coverage (got {stat.percent}%, minimum {threshold_line}%)"
        )
        return EXIT_LINE_NOK

    return EXIT_SUCCESS


def main(args: Optional[list[str]] = None) -> int:  # pylint: disable=too-many-return-statements
    """Run covmerge and return the exit code."""
    configure_logging()
    try:
        namespace = create_argument_parser().parse_args(args=args)
    except SystemExit as e:
        # Only --help leaves through here, errors raise ArgumentError.
        if e.code != 0:
            raise
        return EXIT_SUCCESS
    except ArgumentError as e:
        sys.stderr.write(f"covmerge: error: {e}\n")
        return EXIT_CMDLINE_ERROR

    if namespace.version:
        sys.stdout.write(f"covmerge {__version__}\n\n{COPYRIGHT}")
        return EXIT_SUCCESS

    options = Options(**vars(namespace))
    if options.timestamp is None:
        options.timestamp = default_timestamp()
    update_logging(options)

    if not options.reports:
        LOGGER.error("No coverage report given, at least one report is needed.")
        return EXIT_CMDLINE_ERROR

    LOGGER.info("Reading coverage reports...")
    try:
        report = formats.read_reports(options)
    except (EmptyInputError, ParseError) as e:
        LOGGER.error(str(e))
        return EXIT_READ_ERROR
    except Exception:  # pylint: disable=broad-exception-caught
        LOGGER.error(f"Error occurred while reading reports:\n{traceback.format_exc()}")
        return EXIT_READ_ERROR

    LOGGER.info("Writing coverage report...")
    try:
        formats.write_reports(report, options)
    except Exception:  # pylint: disable=broad-exception-caught
        LOGGER.error(f"Error occurred while printing reports:\n{traceback.format_exc()}")
        return EXIT_WRITE_ERROR

    return get_exit_code(report, options.fail_under_line)


if __name__ == "__main__":
    sys.exit(main())
