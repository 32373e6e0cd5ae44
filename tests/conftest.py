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
from pathlib import Path
from typing import Callable, Iterator, Optional
from xml.sax.saxutils import quoteattr

import pytest


class CoberturaXml:
    """Build small Cobertura documents for the tests."""

    @staticmethod
    def line(number: int, hits: int, line_hash: Optional[str] = None) -> str:
        hash_attr = "" if line_hash is None else f" hash={quoteattr(line_hash)}"
        return f'<line number="{number}" hits="{hits}"{hash_attr}/>'

    @staticmethod
    def klass(name: str, filename: str, *lines: str, line_rate: str = "0.0") -> str:
        return (
            f"<class name={quoteattr(name)} filename={quoteattr(filename)}"
            f' line-rate="{line_rate}"><methods/><lines>{"".join(lines)}</lines></class>'
        )

    @staticmethod
    def package(name: str, *classes: str, line_rate: str = "0.0") -> str:
        return (
            f'<package name={quoteattr(name)} line-rate="{line_rate}">'
            f"<classes>{''.join(classes)}</classes></package>"
        )

    @staticmethod
    def report(*packages: str, version: str = "1.0", line_rate: str = "0.0") -> str:
        return (
            '<?xml version="1.0" ?>\n'
            "<!DOCTYPE coverage SYSTEM 'http://cobertura.sourceforge.net/xml/coverage-04.dtd'>\n"
            f'<coverage line-rate="{line_rate}" lines-covered="0" lines-valid="0"'
            f' timestamp="0" version={quoteattr(version)}>'
            "<sources><source>.</source></sources>"
            f"<packages>{''.join(packages)}</packages></coverage>"
        )

    @classmethod
    def single(cls, *lines: tuple[int, int, str], version: str = "1.0") -> str:
        """A report with the package "pkg" holding the class "Foo" of foo.c."""
        return cls.report(
            cls.package(
                "pkg",
                cls.klass("Foo", "foo.c", *[cls.line(n, h, s) for n, h, s in lines]),
            ),
            version=version,
        )


@pytest.fixture
def cobertura() -> type[CoberturaXml]:
    return CoberturaXml


@pytest.fixture
def write_xml(tmp_path: Path) -> Callable[[str, str], str]:
    """Write a file below the temporary directory and return the path."""

    def write(name: str, content: str) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture(autouse=True)
def restore_log_level() -> Iterator[None]:
    """A verbose run changes the level of the logger, undo it."""
    logger = logging.getLogger("covmerge")
    level = logger.level
    yield
    logger.setLevel(level)
