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
Value types and converters for the command line options.

The converters are given to argparse as ``type``. They raise
:class:`argparse.ArgumentTypeError`, which argparse turns into
an error message naming the option.
"""

from argparse import ArgumentTypeError
import datetime
import logging
import os
from typing import Any, Optional

LOGGER = logging.getLogger("covmerge")


def check_percentage(value: str) -> float:
    r"""
    Convert a percentage between 0 and 100, a trailing ``%`` is allowed.

    >>> check_percentage("80%")
    80.0
    >>> check_percentage("101")
    Traceback (most recent call last):
      ...
    argparse.ArgumentTypeError: 101 not in range [0.0, 100.0]
    """
    number = value[:-1] if value.endswith("%") else value
    try:
        percent = float(number)
    except ValueError:
        percent = -1.0
    if not 0.0 <= percent <= 100.0:
        raise ArgumentTypeError(f"{number} not in range [0.0, 100.0]")
    return percent


def check_positive_int(value: str) -> int:
    r"""
    Convert a count which must be at least one.

    >>> check_positive_int("4")
    4
    >>> check_positive_int("0")
    Traceback (most recent call last):
      ...
    argparse.ArgumentTypeError: Should be a positive integer, got '0'.
    """
    if not value.isdigit() or int(value) < 1:
        raise ArgumentTypeError(f"Should be a positive integer, got {value!r}.")
    return int(value)


def timestamp(value: str) -> datetime.datetime:
    r"""
    Convert ``--timestamp``, given as epoch (optionally with a leading ``@``)
    or in ISO notation.

    >>> timestamp("@1640606727").isoformat()
    '2021-12-27T12:05:27+00:00'
    >>> timestamp("2021-12-27 13:05:27").isoformat()
    '2021-12-27T13:05:27'
    >>> timestamp("yesterday")
    Traceback (most recent call last):
      ...
    argparse.ArgumentTypeError: unknown timestamp format: 'yesterday'
    """
    seconds = value.removeprefix("@")
    if seconds.isdigit():
        return datetime.datetime.fromtimestamp(int(seconds), datetime.timezone.utc)

    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError:
        raise ArgumentTypeError(f"unknown timestamp format: {value!r}") from None


def default_timestamp() -> datetime.datetime:
    """
    Get the time written to the reports if ``--timestamp`` is missing.

    SOURCE_DATE_EPOCH is used for reproducible builds, see
    <https://reproducible-builds.org/docs/source-date-epoch/>.

    >>> monkeypatch = getfixture("monkeypatch")
    >>> monkeypatch.setenv("SOURCE_DATE_EPOCH", "1677067226")
    >>> print(default_timestamp())
    2023-02-22 12:00:26+00:00
    """
    epoch = os.environ.get("SOURCE_DATE_EPOCH", "")
    if epoch.isdigit():
        return datetime.datetime.fromtimestamp(int(epoch), datetime.timezone.utc)
    if epoch:
        LOGGER.warning(f"Ignoring invalid environment variable SOURCE_DATE_EPOCH={epoch!r}")

    return datetime.datetime.now()


class OutputOrDefault:
    """The value of an output option.

    ``OutputOrDefault(None)`` is stored if the option is given without a
    file name, the writer then uses ``--output`` or stdout. The file name
    ``-`` is stdout. Other files are checked for being writable while the
    command line is parsed, so a typo fails before any report is read.
    """

    def __init__(self, value: Optional[str]) -> None:
        self.value = value
        if value is None or value == "-":
            self.abspath = "-"
            return

        self.abspath = os.path.abspath(value)
        if os.path.isdir(self.abspath):
            raise ArgumentTypeError(
                f"Could not create output file {value!r}: Is a directory"
            )
        created = not os.path.exists(self.abspath)
        try:
            with open(self.abspath, "a", encoding="utf-8"):
                pass
        except OSError as exc:
            raise ArgumentTypeError(
                f"Could not create output file {value!r}: {exc.strerror}"
            ) from None
        if created:
            os.unlink(self.abspath)

    def __repr__(self) -> str:
        return f"OutputOrDefault({self.value!r})"

    @property
    def is_set(self) -> bool:
        """True if a file name (or ``-``) was given.

        >>> OutputOrDefault(None).is_set, OutputOrDefault("-").is_set
        (False, True)
        """
        return self.value is not None


class Options:
    """The parsed options, handed to the readers and writers."""

    def __init__(self, **kwargs: Any) -> None:
        self.__dict__.update(kwargs)

    def get(self, name: str) -> Any:
        """Get an option, None if it doesn't exist."""
        return self.__dict__.get(name)
