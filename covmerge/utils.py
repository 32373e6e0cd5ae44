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

import os
import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional


@contextmanager
def open_for_writing(
    filename: str, default_name: str, mode: str = "w", encoding: Optional[str] = None
) -> Iterator[IO[Any]]:
    """
    Open an output file, or use stdout for "-".

    A name ending with a path separator is a directory, the file is
    `default_name` inside. With "b" in `mode` the binary stdout is used.
    """
    if filename == "-":
        yield sys.stdout.buffer if "b" in mode else sys.stdout
        return

    if filename.endswith(os.sep):
        filename = os.path.join(filename, default_name)
    with open(filename, mode, encoding=encoding) as fh:  # pylint: disable=unspecified-encoding
        yield fh


def escape_package_name(name: str) -> str:
    """Escape the angle brackets of a package name.

    >>> escape_package_name("vector<int>")
    'vector&lt;int&gt;'
    """
    return name.replace("<", "&lt;").replace(">", "&gt;")


def unescape_package_name(name: str) -> str:
    """Undo the escaping of the angle brackets done while reading.

    >>> unescape_package_name("vector&lt;int&gt;")
    'vector<int>'
    """
    return name.replace("&lt;", "<").replace("&gt;", ">")
