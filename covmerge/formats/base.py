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

from ..data_model.coverage import CoverageReport
from ..options import Options


class BaseHandler:
    """A report format: its command line options, reader and writers."""

    @classmethod
    def add_arguments(cls, group: _ArgumentGroup) -> None:
        """Declare the options of the format in the output group."""

    def __init__(self, options: Options) -> None:
        self.options = options

    def read_report(self) -> CoverageReport:
        """Read a report in the format of the handler"""
        raise AssertionError("Function 'read_report' not implemented.")

    def write_report(self, report: CoverageReport, output_file: str) -> None:
        """Write a report in the format of the handler"""
        raise AssertionError("Function 'write_report' not implemented.")
