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

"""
Merge coverage data.

The first report of a sequence is the *base*. All following reports are
folded into it in the given order, the base is updated in place::

    merge(base, incoming) -> base

Packages are matched by name and classes by their ``class_id``.
Entries only known by the incoming report are adopted as they are.
Matching classes are only merged if they describe the same lines,
see :func:`merge_class`. Otherwise the contribution of the incoming
report to this class is dropped and a warning is logged, the rest of
the report is merged anyway.

Hits always add up, so merging a report with itself doubles the hits.
Apart from the ``version`` attribute, which is always the one of the base,
the result does not depend on the order of the reports.

The rates stored in the tree are not updated while merging.
:func:`merge_reports` recomputes them once at the end.
"""

import logging
from typing import Iterable, Optional

from .data_model.coverage import ClassCoverage, CoverageReport, PackageCoverage
from .data_model.stats import recompute
from .exceptions import EmptyInputError, MergeInconsistency

LOGGER = logging.getLogger("covmerge")


def merge_class(
    base: ClassCoverage, incoming: ClassCoverage, source: Optional[str] = None
) -> None:
    """
    Add the hits of the incoming class to the base class.

    Both classes must report the same lines: after sorting by line number
    the sequence of ``(lineno, line_hash)`` must be identical.
    The hits are not part of the comparison.

    Raises MergeInconsistency and leaves the base untouched otherwise.

    >>> from covmerge.data_model.coverage import LineCoverage
    >>> base = ClassCoverage("Foo", "foo.c")
    >>> _ = base.insert_line_coverage(LineCoverage(1, "h1", 1))
    >>> incoming = ClassCoverage("Foo", "foo.c")
    >>> _ = incoming.insert_line_coverage(LineCoverage(1, "h1", 2))
    >>> merge_class(base, incoming)
    >>> base.lines
    [LineCoverage(1, 'h1', 3)]
    """
    base_lines = sorted(base.lines, key=lambda linecov: linecov.lineno)
    incoming_lines = sorted(incoming.lines, key=lambda linecov: linecov.lineno)

    if len(base_lines) != len(incoming_lines) or any(
        left.key != right.key for left, right in zip(base_lines, incoming_lines)
    ):
        raise MergeInconsistency(base.filename, source)

    for left, right in zip(base_lines, incoming_lines):
        left.hits += right.hits
    base.lines = base_lines


def merge_package(
    base: PackageCoverage, incoming: PackageCoverage, source: Optional[str] = None
) -> list[MergeInconsistency]:
    """
    Merge the classes of the incoming package into the base package.

    Return the inconsistencies which were skipped.
    """
    inconsistencies = list[MergeInconsistency]()
    for class_id, classcov in incoming.classes.items():
        if class_id not in base.classes:
            base.classes[class_id] = classcov
            continue

        try:
            merge_class(base.classes[class_id], classcov, source)
        except MergeInconsistency as exc:
            LOGGER.warning(f"Coverage data was not merged due to: {exc}")
            inconsistencies.append(exc)

    return inconsistencies


def insert_package_coverage(
    target: CoverageReport,
    packagecov: PackageCoverage,
    source: Optional[str] = None,
) -> list[MergeInconsistency]:
    """
    Insert a single package into a report.

    If the report already has a package with this name
    the classes are merged into the existing one.
    """
    if packagecov.name not in target.packages:
        target.packages[packagecov.name] = packagecov
        return []

    return merge_package(target.packages[packagecov.name], packagecov, source)


def merge(base: CoverageReport, incoming: CoverageReport) -> CoverageReport:
    """
    Merge the incoming report into the base report.

    Do not use the 'incoming' object afterwards, the base
    takes ownership of the packages and classes it adopts.
    """
    for packagecov in incoming.packages.values():
        insert_package_coverage(base, packagecov, incoming.source)

    return base


def merge_reports(reports: Iterable[CoverageReport]) -> CoverageReport:
    """
    Fold the reports into the first one and recompute the statistics.

    The reports are merged strictly in the given order.
    """
    base = None
    count = 0
    for report in reports:
        count += 1
        if base is None:
            LOGGER.info(f"Using coverage report {report.source} as base report.")
            base = report
        else:
            LOGGER.info(f"Merging coverage report {report.source}.")
            merge(base, report)

    if base is None:
        raise EmptyInputError()

    recompute(base)
    LOGGER.debug(f"Merged {count} coverage report(s).")

    return base
