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

from __future__ import annotations
import logging
from dataclasses import dataclass

from .coverage import ClassCoverage, CoverageReport, PackageCoverage

LOGGER = logging.getLogger("covmerge")


@dataclass
class CoverageStat:
    """The line coverage metric of a class, a package or a report."""

    covered: int
    """How many lines were covered."""

    total: int
    """How many lines there were in total."""

    @staticmethod
    def new_empty() -> CoverageStat:
        """Create a empty coverage statistic."""
        return CoverageStat(0, 0)

    @property
    def ratio(self) -> float:
        """Ratio of covered lines.

        >>> CoverageStat(1, 4).ratio
        0.25

        If there are no lines the ratio is zero:
        >>> CoverageStat(0, 0).ratio
        0.0
        """
        if not self.total:
            return 0.0
        return self.covered / self.total

    @property
    def percent(self) -> int:
        """Percentage of covered lines, truncated to an integer.

        The truncation uses integer arithmetic. Flooring the float product
        `Math.floor(rate * 100)`, as the TypeScript coverage merge action
        does, is one lower for some ratios because `0.29 * 100` is
        `28.999999999999996`. For 29 of 100 lines that gives 28%, here it
        gives 29%.

        >>> CoverageStat(2, 3).percent
        66
        >>> CoverageStat(3, 3).percent
        100
        >>> CoverageStat(29, 100).percent
        29
        """
        if not self.total:
            return 0
        return self.covered * 100 // self.total

    def __iadd__(self, other: CoverageStat) -> CoverageStat:
        self.covered += other.covered
        self.total += other.total
        return self


def class_stat(classcov: ClassCoverage) -> CoverageStat:
    """Get the statistic of a class from its lines."""
    return CoverageStat(
        covered=sum(1 for linecov in classcov.lines if linecov.is_covered),
        total=len(classcov.lines),
    )


def package_stat(packagecov: PackageCoverage) -> CoverageStat:
    """Get the statistic of a package from the stored class counters."""
    stat = CoverageStat.new_empty()
    for classcov in packagecov.classes.values():
        stat += CoverageStat(classcov.covered_lines, len(classcov.lines))
    return stat


def report_stat(report: CoverageReport) -> CoverageStat:
    """Get the statistic of a report from the stored class counters."""
    stat = CoverageStat.new_empty()
    for packagecov in report.packages.values():
        stat += package_stat(packagecov)
    return stat


def recompute(report: CoverageReport) -> None:
    """Refresh every count and rate of the tree, bottom-up.

    This must run once after all the merges are done. It is the only
    place where rates are computed, all rates read from the report
    files are replaced.
    """
    for packagecov in report.packages.values():
        for classcov in packagecov.classes.values():
            stat = class_stat(classcov)
            classcov.covered_lines = stat.covered
            classcov.line_rate = stat.ratio
        packagecov.line_rate = package_stat(packagecov).ratio

    stat = report_stat(report)
    report.lines_covered = stat.covered
    report.lines_valid = stat.total
    report.line_rate = stat.ratio
    LOGGER.debug(
        f"Recomputed coverage of {report.source}: {stat.covered}/{stat.total} lines."
    )
