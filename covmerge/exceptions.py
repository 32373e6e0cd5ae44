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

"""Exceptions used in covmerge."""

from typing import Optional


class CovmergeDataAssertionError(AssertionError):
    """Exception for invalid coverage data."""


class ParseError(RuntimeError):
    """A coverage report could not be parsed.

    Fatal to the ingestion of this one report only.
    """

    def __init__(self, location: str, cause: object) -> None:
        super().__init__(f"Failed to parse coverage report {location}: {cause}")
        self.location = location
        self.cause = cause


class MergeInconsistency(AssertionError):
    """Two classes with the same identity report a different set of lines."""

    def __init__(self, filename: str, source: Optional[str] = None) -> None:
        msg = f"Inconsistent set of lines reported for file {filename}"
        if source is not None:
            msg += f" in report {source}"
        super().__init__(msg)
        self.filename = filename
        self.source = source


class EmptyInputError(RuntimeError):
    """No coverage report was given to merge."""

    def __init__(self) -> None:
        super().__init__("No coverage report to merge.")
