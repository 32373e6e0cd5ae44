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
A small thread pool for parsing reports.

Every thread owns a context dictionary which is given to each job as
keyword arguments, the jobs store their results there. The contexts
are returned by :meth:`Workers.wait`, so no locking is needed.
"""

import logging
from queue import SimpleQueue
from threading import Event, Thread
from traceback import format_exc
from typing import Any, Callable, Optional

LOGGER = logging.getLogger("covmerge")

Job = Optional[tuple[Callable[..., None], tuple[Any, ...]]]


class Workers:
    """Run the added jobs on a fixed number of threads."""

    def __init__(self, number: int, context: Callable[[], dict[str, Any]]) -> None:
        if number < 1:
            raise AssertionError("At least one thread is needed.")
        self.jobs: "SimpleQueue[Job]" = SimpleQueue()
        self.failed = Event()
        self.errors = list[str]()
        self.contexts = [context() for _ in range(number)]
        self.threads = [
            Thread(target=self._run, args=(ctx,), name=f"Parser-{index}")
            for index, ctx in enumerate(self.contexts)
        ]
        for thread in self.threads:
            thread.start()

    def _run(self, context: dict[str, Any]) -> None:
        while (job := self.jobs.get()) is not None:
            if self.failed.is_set():
                continue
            work, args = job
            try:
                work(*args, **context)
            except Exception:  # pylint: disable=broad-exception-caught
                self.errors.append(format_exc())
                self.failed.set()

    def size(self) -> int:
        """The number of running threads."""
        return len(self.threads)

    def add(self, work: Callable[..., None], *args: Any) -> None:
        """Queue ``work(*args, **context)``."""
        self.jobs.put((work, args))

    def _stop(self) -> None:
        for _ in self.threads:
            self.jobs.put(None)
        for thread in self.threads:
            thread.join()
        self.threads = []

    def wait(self) -> list[dict[str, Any]]:
        """Finish the queued jobs, stop the threads and get the contexts."""
        self._stop()

        if self.failed.is_set():
            for error in self.errors:
                LOGGER.error(error)
            raise RuntimeError("A worker thread failed, the remaining jobs were dropped.")
        return self.contexts

    def __enter__(self) -> "Workers":
        return self

    def __exit__(self, exc_type: Any, *_: Any) -> None:
        if not self.threads:
            return
        # Left early, the queued jobs are dropped.
        self.failed.set()
        self._stop()
        if exc_type is None:
            raise AssertionError("Workers.wait() must be called inside the with block.")
