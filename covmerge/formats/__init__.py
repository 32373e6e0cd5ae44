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
from argparse import _ArgumentGroup
from typing import Callable, Optional

from ..data_model.coverage import CoverageReport
from ..options import Options, OutputOrDefault

# the handler
from .cobertura import CoberturaHandler
from .markdown import MarkdownHandler

LOGGER = logging.getLogger("covmerge")

Writer = Callable[[CoverageReport, str], None]


def add_arguments(group: _ArgumentGroup) -> None:
    """Declare the options of all formats."""
    CoberturaHandler.add_arguments(group)
    MarkdownHandler.add_arguments(group)


def read_reports(options: Options) -> CoverageReport:
    """Read the reports from the given locations and merge them."""
    return CoberturaHandler(options).read_report()


def _requested_writers(
    options: Options,
) -> list[tuple[str, Optional[OutputOrDefault], Writer]]:
    writers = list[tuple[str, Optional[OutputOrDefault], Writer]]()
    if options.cobertura is not None or options.cobertura_pretty:
        writers.append(
            ("--cobertura", options.cobertura, CoberturaHandler(options).write_report)
        )
    # The summary is written if nothing else is requested.
    if options.markdown_summary is not None or not writers:
        writers.append(
            (
                "--markdown-summary",
                options.markdown_summary,
                MarkdownHandler(options).write_report,
            )
        )
    return writers


def write_reports(report: CoverageReport, options: Options) -> None:
    """
    Write every requested output.

    An output without its own file name goes to ``--output``, or to stdout.
    Only one output can take this place, the others are skipped.
    """
    fallback: Optional[OutputOrDefault] = options.output
    fallback_taken = False
    errors = list[str]()

    for flag, requested, writer in _requested_writers(options):
        if requested is not None and requested.is_set:
            target = requested.abspath
        elif not fallback_taken:
            fallback_taken = True
            target = "-" if fallback is None else fallback.abspath
        else:
            LOGGER.warning(
                f"Output of {flag} skipped because the default output is "
                f"already used, give a file name with `{flag}=OUTPUT`."
            )
            continue

        try:
            writer(report, target)
        except (RuntimeError, OSError) as exc:
            errors.append(str(exc))

    if fallback is not None and not fallback_taken:
        LOGGER.warning(f"--output={fallback.value!r} option was provided but not used.")

    if errors:
        raise RuntimeError(
            "Not all output files were written successfully:\n" + "\n".join(errors)
        )
