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

from argparse import _ArgumentGroup

from ...data_model.coverage import CoverageReport
from ...formats.base import BaseHandler
from ...options import OutputOrDefault


class MarkdownHandler(BaseHandler):
    """Write the summary table of the merged report."""

    @classmethod
    def add_arguments(cls, group: _ArgumentGroup) -> None:
        group.add_argument(
            "--markdown-summary",
            dest="markdown_summary",
            metavar="OUTPUT",
            nargs="?",
            type=OutputOrDefault,
            const=OutputOrDefault(None),
            default=None,
            help=(
                "Write a summary with one collapsible table per package. "
                "This is the default if no other report is requested. "
                "OUTPUT is optional and defaults to --output. "
                "On stdout the summary is appended to the file named by "
                "GITHUB_STEP_SUMMARY instead, if that variable is set."
            ),
        )

    def write_report(self, report: CoverageReport, output_file: str) -> None:
        from .write import write_summary_report  # pylint: disable=import-outside-toplevel # Lazy loading is intended here

        write_summary_report(report, output_file, self.options)
