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


class CoberturaHandler(BaseHandler):
    """Read the input reports and write the merged Cobertura XML."""

    @classmethod
    def add_arguments(cls, group: _ArgumentGroup) -> None:
        group.add_argument(
            "-x",
            "--cobertura",
            "--xml",
            dest="cobertura",
            metavar="OUTPUT",
            nargs="?",
            type=OutputOrDefault,
            const=OutputOrDefault(None),
            default=None,
            help=(
                "Write the merged Cobertura XML report. "
                "OUTPUT is optional and defaults to --output."
            ),
        )
        group.add_argument(
            "--cobertura-pretty",
            "--xml-pretty",
            dest="cobertura_pretty",
            action="store_true",
            help="Indent the Cobertura XML report. Implies --cobertura.",
        )

    def read_report(self) -> CoverageReport:
        from .read import read_report  # pylint: disable=import-outside-toplevel # Lazy loading is intended here

        return read_report(self.options)

    def write_report(self, report: CoverageReport, output_file: str) -> None:
        from .write import write_report  # pylint: disable=import-outside-toplevel # Lazy loading is intended here

        write_report(report, output_file, self.options)
