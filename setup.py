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
Script to generate the installer for covmerge.
"""

import os
import time

from runpy import run_path
from setuptools import setup, find_packages


version = run_path("./covmerge/version.py")["__version__"]
if version.endswith("+main"):
    # Add a default if environment is not set
    os.environ["TIMESTAMP"] = os.environ.get("TIMESTAMP", str(int(time.time())))
    # ...and use this timestamp.
    version = version.replace("+main", f".dev{os.environ['TIMESTAMP']}+main")
# read the contents of your README file
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, "README.rst"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="covmerge",
    version=version,
    description="Merge Cobertura line coverage reports and summarize them.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="BSD-3-Clause",
    platforms=["any"],
    python_requires=">=3.9",
    packages=find_packages(include=["covmerge*"]),
    install_requires=[
        "jinja2",
        "lxml",
        "colorlog",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
        "dev": [
            "bandit[toml]",
            "mypy",
            "nox",
            "pylint",
            "pytest",
            "pytest-cov",
            "ruff",
            "lxml-stubs",
        ],
    },
    package_data={
        "covmerge": [
            "formats/markdown/default/*.j2",
        ],
    },
    entry_points={
        "console_scripts": [
            "covmerge=covmerge.__main__:main",
        ],
    },
)
