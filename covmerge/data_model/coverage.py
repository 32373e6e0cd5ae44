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
The covmerge coverage data model.

This module represents the core data structures
and should not have dependencies on any other covmerge module.

The tree mirrors the Cobertura XML structure::

    CoverageReport -> PackageCoverage -> ClassCoverage -> LineCoverage

A tree is created for every parsed report. During merging the first
("base") tree absorbs the data of the following ones in place.
The rates stored in the tree are the ones read from the report
until :func:`covmerge.data_model.stats.recompute` refreshes them.
"""

from __future__ import annotations
import logging
from typing import NoReturn, Optional

from ..exceptions import CovmergeDataAssertionError

LOGGER = logging.getLogger("covmerge")

# NUL can't be part of an XML attribute value, so the key can't collide.
CLASS_ID_SEPARATOR = "\0"


def make_class_id(name: str, filename: str) -> str:
    """Get the identity of a class.

    >>> make_class_id("Foo", "src/foo.c") == "Foo\\0src/foo.c"
    True
    """
    return f"{name}{CLASS_ID_SEPARATOR}{filename}"


class CoverageBase:
    """Base class for coverage information."""

    __slots__ = ("line_rate",)

    def __init__(self, line_rate: float) -> None:
        self.line_rate = line_rate

    def raise_data_error(self, msg: str) -> NoReturn:
        """Raise the exception with message extended with context."""
        location = self.location
        raise CovmergeDataAssertionError(
            msg if location is None else f"{location}: {msg}"
        )

    @property
    def location(self) -> Optional[str]:
        """Get the source location of the coverage data."""
        return None


class LineCoverage:
    r"""Represent coverage information about a line.

    Args:
        lineno (int):
            The 1-based line number.
        line_hash (str):
            Fingerprint of the source line, only used to compare
            the structure of two classes.
        hits (int):
            How often this line was executed.
    """

    __slots__ = ("lineno", "line_hash", "hits")

    def __init__(self, lineno: int, line_hash: str, hits: int) -> None:
        if lineno <= 0:
            raise CovmergeDataAssertionError(
                f"Line number must be a positive value, got {lineno}."
            )
        if hits < 0:
            raise CovmergeDataAssertionError(
                f"line {lineno}: hits must not be a negative value, got {hits}."
            )
        self.lineno = lineno
        self.line_hash = line_hash
        self.hits = hits

    def __repr__(self) -> str:
        return f"LineCoverage({self.lineno!r}, {self.line_hash!r}, {self.hits!r})"

    @property
    def key(self) -> tuple[int, str]:
        """The identity of the line, the hits are not part of it."""
        return (self.lineno, self.line_hash)

    @property
    def is_covered(self) -> bool:
        """Return True if the line was executed at least once."""
        return self.hits > 0


class ClassCoverage(CoverageBase):
    r"""Represent coverage information about a class of one source file.

    Args:
        name (str):
            The class name as reported.
        filename (str):
            The file the class belongs to.
        line_rate (float, optional):
            The rate as given by the report.
    """

    __slots__ = ("name", "filename", "covered_lines", "lines")

    def __init__(self, name: str, filename: str, line_rate: float = 0.0) -> None:
        super().__init__(line_rate)
        self.name = name
        self.filename = filename
        self.covered_lines = 0
        self.lines = list[LineCoverage]()

    def __repr__(self) -> str:
        return f"ClassCoverage({self.name!r}, {self.filename!r})"

    @property
    def class_id(self) -> str:
        """The identity of the class within a package."""
        return make_class_id(self.name, self.filename)

    @property
    def location(self) -> Optional[str]:
        return self.filename

    def insert_line_coverage(self, linecov: LineCoverage) -> LineCoverage:
        """Append a line and count it if it is covered."""
        self.lines.append(linecov)
        if linecov.is_covered:
            self.covered_lines += 1
        return linecov


class PackageCoverage(CoverageBase):
    r"""Represent coverage information about a package.

    Args:
        name (str):
            The unique name of the package, with ``<`` and ``>`` escaped.
        line_rate (float, optional):
            The rate as given by the report.
    """

    __slots__ = ("name", "classes")

    def __init__(self, name: str, line_rate: float = 0.0) -> None:
        super().__init__(line_rate)
        self.name = name
        self.classes = dict[str, ClassCoverage]()

    def __repr__(self) -> str:
        return f"PackageCoverage({self.name!r})"

    @property
    def location(self) -> Optional[str]:
        return f"package {self.name}"

    def insert_class_coverage(self, classcov: ClassCoverage) -> ClassCoverage:
        """Insert a class which isn't already part of the package."""
        class_id = classcov.class_id
        if class_id in self.classes:
            self.raise_data_error(
                f"Class {classcov.name!r} of file {classcov.filename} is already defined."
            )
        self.classes[class_id] = classcov
        return classcov


class CoverageReport(CoverageBase):
    r"""Represent the coverage data of a whole report.

    Args:
        source (str):
            Identifier of the report, normally the file name.
        line_rate (float, optional):
            The rate as given by the report.
        lines_covered (int, optional):
            The covered lines as given by the report.
        lines_valid (int, optional):
            The total lines as given by the report.
        version (str, optional):
            Version of the tool which produced the report.
    """

    __slots__ = ("source", "lines_covered", "lines_valid", "version", "packages")

    def __init__(
        self,
        source: str,
        *,
        line_rate: float = 0.0,
        lines_covered: int = 0,
        lines_valid: int = 0,
        version: str = "",
    ) -> None:
        super().__init__(line_rate)
        self.source = source
        self.lines_covered = lines_covered
        self.lines_valid = lines_valid
        self.version = version
        self.packages = dict[str, PackageCoverage]()

    def __repr__(self) -> str:
        return f"CoverageReport({self.source!r})"

    @property
    def location(self) -> Optional[str]:
        return self.source

    def classes(self) -> list[ClassCoverage]:
        """Get all the classes of all packages."""
        return [
            classcov
            for packagecov in self.packages.values()
            for classcov in packagecov.classes.values()
        ]
