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
Read Cobertura coverage reports.

The reports are parsed in a single pass with the event interface of
:func:`lxml.etree.iterparse`. A :class:`ReportBuilder` receives the
``start`` and ``end`` events in document order and accumulates the
coverage tree. Finished elements are removed from the document,
so the size of a report doesn't matter.
"""

import logging
import os
from glob import glob
from typing import IO, Any, Iterator, Optional, Union

from lxml import etree  # nosec # We parse the files given by the user without resolving entities

from ...data_model.coverage import (
    ClassCoverage,
    CoverageReport,
    LineCoverage,
    PackageCoverage,
)
from ...exceptions import (
    CovmergeDataAssertionError,
    MergeInconsistency,
    ParseError,
)
from ...merging import insert_package_coverage, merge_class, merge_reports
from ...options import Options
from ...utils import escape_package_name
from ...workers import Workers

LOGGER = logging.getLogger("covmerge")

ReportSource = Union[str, "os.PathLike[str]", IO[bytes]]

# parser states, they follow the nesting of the document
AWAITING_COVERAGE = "awaiting-coverage"
IN_COVERAGE = "in-coverage"
IN_PACKAGE = "in-package"
IN_CLASS = "in-class"
IN_LINE = "in-line"


def _get_float(element: etree._Element, name: str) -> float:
    value = element.get(name)
    if value is None:
        return 0.0
    try:
        return float(value)
    except ValueError:
        raise CovmergeDataAssertionError(
            f"Attribute {name!r} of element {element.tag!r} must be a number, got {value!r}."
        ) from None


def _get_int(
    element: etree._Element, name: str, default: Optional[int] = None
) -> int:
    value = element.get(name)
    if value is None:
        if default is None:
            raise CovmergeDataAssertionError(
                f"Attribute {name!r} of element {element.tag!r} is required."
            )
        return default
    try:
        return int(value)
    except ValueError:
        raise CovmergeDataAssertionError(
            f"Attribute {name!r} of element {element.tag!r} must be an integer, got {value!r}."
        ) from None


class ReportBuilder:
    """Accumulate the coverage tree from the parse events of one report."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.state = AWAITING_COVERAGE
        self.method_depth = 0
        self.report: Optional[CoverageReport] = None
        self.packagecov: Optional[PackageCoverage] = None
        self.classcov: Optional[ClassCoverage] = None

    def start(self, element: etree._Element) -> None:
        """Handle an opening tag."""
        tag = element.tag
        if self.state == AWAITING_COVERAGE:
            if tag != "coverage":
                raise CovmergeDataAssertionError(
                    f"Root element must be 'coverage', got {tag!r}."
                )
            self.report = CoverageReport(
                self.source,
                line_rate=_get_float(element, "line-rate"),
                lines_covered=_get_int(element, "lines-covered", 0),
                lines_valid=_get_int(element, "lines-valid", 0),
                version=element.get("version", ""),
            )
            self.state = IN_COVERAGE
        elif tag == "package":
            if self.state != IN_COVERAGE:
                raise CovmergeDataAssertionError(
                    f"Unexpected element 'package' at line {element.sourceline}."
                )
            self.packagecov = PackageCoverage(
                escape_package_name(element.get("name", "")),
                line_rate=_get_float(element, "line-rate"),
            )
            self.state = IN_PACKAGE
        elif tag == "class":
            if self.state != IN_PACKAGE:
                raise CovmergeDataAssertionError(
                    f"Unexpected element 'class' at line {element.sourceline}."
                )
            self.classcov = ClassCoverage(
                element.get("name", ""),
                element.get("filename", ""),
                line_rate=_get_float(element, "line-rate"),
            )
            self.state = IN_CLASS
        elif tag == "method":
            self.method_depth += 1
        elif tag == "line" and self.method_depth == 0:
            # The lines of the methods repeat the lines of the class.
            if self.state != IN_CLASS or self.classcov is None:
                raise CovmergeDataAssertionError(
                    f"Unexpected element 'line' at line {element.sourceline}."
                )
            self.classcov.insert_line_coverage(
                LineCoverage(
                    _get_int(element, "number"),
                    element.get("hash", ""),
                    _get_int(element, "hits"),
                )
            )
            self.state = IN_LINE
        elif tag == "coverage":
            raise CovmergeDataAssertionError(
                f"Nested element 'coverage' at line {element.sourceline}."
            )

    def end(self, element: etree._Element) -> None:
        """Handle a closing tag."""
        tag = element.tag
        if tag == "method":
            self.method_depth -= 1
        elif tag == "line" and self.state == IN_LINE:
            self.state = IN_CLASS
            element.clear()
        elif tag == "class" and self.state == IN_CLASS:
            self._insert_class()
            self.state = IN_PACKAGE
            _drop_element(element)
        elif tag == "package" and self.state == IN_PACKAGE:
            if self.report is None or self.packagecov is None:
                raise AssertionError("Sanity check: Package without report.")
            insert_package_coverage(self.report, self.packagecov, self.source)
            self.packagecov = None
            self.state = IN_COVERAGE
        elif tag == "coverage":
            self.state = AWAITING_COVERAGE

    def _insert_class(self) -> None:
        if self.packagecov is None or self.classcov is None:
            raise AssertionError("Sanity check: Class without package.")
        classcov = self.classcov
        self.classcov = None
        existing = self.packagecov.classes.get(classcov.class_id)
        if existing is None:
            self.packagecov.insert_class_coverage(classcov)
            return

        LOGGER.debug(
            f"Class {classcov.name!r} of {classcov.filename} is listed twice in {self.source}."
        )
        try:
            merge_class(existing, classcov, self.source)
        except MergeInconsistency as exc:
            LOGGER.warning(f"Coverage data was not merged due to: {exc}")

    def close(self) -> CoverageReport:
        """Get the report after the last event."""
        if self.report is None:
            raise CovmergeDataAssertionError("No 'coverage' element found.")
        return self.report


def _drop_element(element: etree._Element) -> None:
    """Free the memory of a finished element and of its previous siblings."""
    element.clear()
    parent = element.getparent()
    if parent is not None:
        while element.getprevious() is not None:
            del parent[0]


def _source_name(source: ReportSource) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return str(getattr(source, "name", "<stream>"))


def parse_report(source: ReportSource, name: Optional[str] = None) -> CoverageReport:
    """
    Parse one Cobertura report.

    The source can be a file name or a binary file object.
    Raises ParseError if the report is malformed, no partial
    tree is returned in this case.
    """
    location = _source_name(source) if name is None else name
    if isinstance(source, os.PathLike):
        source = os.fspath(source)
    LOGGER.debug(f"Processing XML file: {location}")

    builder = ReportBuilder(location)
    try:
        for event, element in etree.iterparse(  # nosec # We parse the file given by the user
            source,
            events=("start", "end"),
            resolve_entities=False,
            no_network=True,
        ):
            if event == "start":
                builder.start(element)
            else:
                builder.end(element)
        return builder.close()
    except (etree.LxmlError, OSError, CovmergeDataAssertionError) as exc:
        raise ParseError(location, exc) from exc


def looks_like_coverage_report(filename: str) -> bool:
    """
    Check if the root element of the file is a coverage element.

    Only the beginning of the file is read. If this isn't possible
    the file is accepted and the parser reports the problem.
    """
    try:
        with open(filename, "rb") as fh:
            for _, element in etree.iterparse(  # nosec # We parse the file given by the user
                fh,
                events=("start",),
                resolve_entities=False,
                no_network=True,
            ):
                return bool(element.tag == "coverage")
    except (etree.LxmlError, OSError) as exc:
        LOGGER.debug(f"Can't check the root element of {filename}: {exc}")

    return True


def find_reports(patterns: list[str]) -> list[str]:
    """
    Get the coverage reports matching the patterns.

    The order of the patterns is kept, the matches of each
    pattern are sorted.
    """
    datafiles = dict[str, None]()
    for pattern in patterns:
        LOGGER.debug(f"Finding coverage reports matching {pattern!r}")
        trace_files = sorted(glob(pattern, recursive=True))
        if not trace_files:
            LOGGER.warning(f"Coverage report not found for pattern {pattern!r}.")
            continue

        for trace_file in trace_files:
            if os.path.isdir(trace_file):
                continue
            trace_file = os.path.normpath(trace_file)
            if trace_file in datafiles:
                continue
            if not looks_like_coverage_report(trace_file):
                LOGGER.warning(f"Skipping unrecognized report file {trace_file}.")
                continue
            LOGGER.debug(f"Found matching file {trace_file}")
            datafiles[trace_file] = None

    return list(datafiles)


def _parse_into(
    index: int, filename: str, parsed: dict[int, Union[CoverageReport, ParseError]]
) -> None:
    try:
        parsed[index] = parse_report(filename)
    except ParseError as exc:
        parsed[index] = exc


def parse_reports(
    filenames: list[str], jobs: int = 1
) -> list[Union[CoverageReport, ParseError]]:
    """
    Parse the reports, possibly in parallel.

    The result has the same order as the given file names,
    a report which can't be parsed is replaced by the error.
    """
    contexts: list[dict[str, Any]]
    with Workers(
        min(jobs, max(len(filenames), 1)),
        lambda: {"parsed": dict[int, Union[CoverageReport, ParseError]]()},
    ) as pool:
        LOGGER.debug(f"Pool started with {pool.size()} threads")
        for index, filename in enumerate(filenames):
            pool.add(_parse_into, index, filename)
        contexts = pool.wait()

    parsed = dict[int, Union[CoverageReport, ParseError]]()
    for context in contexts:
        parsed.update(context["parsed"])

    return [parsed[index] for index in range(len(filenames))]


def read_report(options: Options) -> CoverageReport:
    """Merge the coverage of all the reports given by the options."""

    datafiles = find_reports(options.reports)
    LOGGER.info(f"Found {len(datafiles)} coverage report(s).")

    def valid_reports() -> Iterator[CoverageReport]:
        for index, result in enumerate(parse_reports(datafiles, options.jobs)):
            if isinstance(result, ParseError):
                if index == 0:
                    raise result
                LOGGER.error(f"{result}\nThe report is skipped.")
                continue
            yield result

    return merge_reports(valid_reports())
