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
import os
import sys
from types import TracebackType
from typing import Optional

from colorlog import ColoredFormatter

from .options import Options

LOGGER = logging.getLogger("covmerge")
DEFAULT_LOGGING_HANDLER = logging.StreamHandler(sys.stderr)

LOG_FORMAT = "(%(levelname)s) %(message)s"
LOG_FORMAT_THREADS = "(%(levelname)s) - %(threadName)s - %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# Annotations understood by the CI systems, keyed by the environment
# variable which identifies the system.
CI_PREFIXES = {
    "TF_BUILD": {
        logging.WARNING: "##vso[task.logissue type=warning]",
        logging.ERROR: "##vso[task.logissue type=error]",
    },
    "GITHUB_ACTIONS": {
        logging.WARNING: "::warning::",
        logging.ERROR: "::error::",
    },
}


class CiAnnotationHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Repeat warnings and errors with the annotation prefix of the CI."""

    def __init__(self, prefixes: dict[int, str]) -> None:
        super().__init__(sys.stderr)
        self.prefixes = prefixes
        self.setFormatter(logging.Formatter(LOG_FORMAT))

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in self.prefixes and bool(super().filter(record))

    def format(self, record: logging.LogRecord) -> str:
        return self.prefixes[record.levelno] + super().format(record)


def _colored_formatter(
    threads: bool = False, force_color: bool = False, no_color: bool = False
) -> ColoredFormatter:
    return ColoredFormatter(
        "%(log_color)s" + (LOG_FORMAT_THREADS if threads else LOG_FORMAT),
        log_colors=LOG_COLORS,
        force_color=force_color,
        no_color=no_color,
        stream=sys.stderr,
    )


def _log_uncaught_exception(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: Optional[TracebackType],
) -> None:
    LOGGER.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def configure_logging() -> None:
    """Log INFO and above to stderr, before the options are known."""
    DEFAULT_LOGGING_HANDLER.setFormatter(_colored_formatter())
    logging.basicConfig(level=logging.INFO, handlers=[DEFAULT_LOGGING_HANDLER])

    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, CiAnnotationHandler)]:
        root.removeHandler(handler)
    for variable, prefixes in CI_PREFIXES.items():
        if variable in os.environ:
            root.addHandler(CiAnnotationHandler(prefixes))
            break

    sys.excepthook = _log_uncaught_exception


def update_logging(options: Options) -> None:
    """Apply --verbose, --jobs and the color options."""
    if options.verbose:
        LOGGER.setLevel(logging.DEBUG)

    DEFAULT_LOGGING_HANDLER.setFormatter(
        _colored_formatter(
            threads=options.jobs > 1,
            force_color=bool(options.force_color),
            no_color=bool(options.no_color),
        )
    )
