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
from pathlib import Path
import shutil

import nox


DEFAULT_TEST_DIRECTORIES = ["covmerge", "tests"]
DEFAULT_LINT_ARGUMENTS = ["noxfile.py", "setup.py"] + DEFAULT_TEST_DIRECTORIES

nox.options.sessions = ["qa"]


@nox.session(python=False)
def qa(session: nox.Session) -> None:
    """Run the quality tests."""
    for session_id in ["lint", "tests"]:
        session.log(f"Notify session {session_id}")
        session.notify(session_id, [])


@nox.session(python=False)
def lint(session: nox.Session) -> None:
    """Run the linters."""
    session.notify("ruff_check")
    session.notify("ruff_format")
    session.notify("bandit")
    session.notify("pylint")
    session.notify("mypy")


@nox.session
def ruff_check(session: nox.Session) -> None:
    """Run ruff check command."""
    session.install("ruff")
    if session.posargs:
        args = session.posargs
    else:
        args = ["."]
    session.run("ruff", "check", *args)


@nox.session
def ruff_format(session: nox.Session) -> None:
    """Run ruff format command."""
    session.install("ruff")
    if session.posargs:
        args = session.posargs
    else:
        args = ["--diff", "."]
    session.run("ruff", "format", *args)


@nox.session
def bandit(session: nox.Session) -> None:
    """Run bandit, a security linter."""
    session.install("bandit[toml]")
    if session.posargs:
        args = session.posargs
    else:
        args = ["-r", *DEFAULT_LINT_ARGUMENTS]
    session.run("bandit", "-c", "pyproject.toml", *args)


@nox.session
def pylint(session: nox.Session) -> None:
    """Run pylint command."""
    session.install("-e", ".[dev]")
    if session.posargs:
        args = session.posargs
    else:
        args = DEFAULT_LINT_ARGUMENTS
    session.run("pylint", *args)


@nox.session
def mypy(session: nox.Session) -> None:
    """Run mypy command."""
    session.install("-e", ".[dev]")
    if session.posargs:
        args = session.posargs
    else:
        args = ["covmerge"]
    session.run("mypy", *args)


@nox.session
def tests(session: nox.Session) -> None:
    """Run the tests."""
    use_coverage = os.environ.get("USE_COVERAGE") == "true"
    session.install("-e", ".[test]")
    if use_coverage:
        session.install("coverage", "pytest-cov")

    args = ["-m", "pytest"]
    if use_coverage:
        args += ["--cov=covmerge", "--cov-branch", "--cov-report=xml"]
    args += session.posargs
    if "--" not in args:
        args += ["--"] + DEFAULT_TEST_DIRECTORIES

    session.run("python", *args)


@nox.session
def build_distribution(session: nox.Session) -> None:
    """Build a wheel."""
    session.install("build")
    # Remove old dist if present
    dist_dir = Path("dist")
    if dist_dir.exists():
        shutil.rmtree(dist_dir)
    session.run("python", "-m", "build")
    session.notify(("check_distribution"))


@nox.session
def check_distribution(session: nox.Session) -> None:
    """Check the wheel and do a smoke test, should not be used directly."""
    session.install("wheel", "twine")
    with session.chdir("dist"):
        session.run("twine", "check", "*", external=True)
        session.run("pip", "uninstall", "--yes", "covmerge")
        session.install(str(list(Path().glob("*.whl"))[0]))
    session.run("python", "-m", "covmerge", "--help", external=True)
    session.run("covmerge", "--help", external=True)
    session.run("covmerge", "--version", external=True)
