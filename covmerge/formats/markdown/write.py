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
from typing import Any

from jinja2 import (
    Environment,
    PackageLoader,
)

from ...data_model.coverage import CoverageReport
from ...data_model.stats import CoverageStat, package_stat, report_stat
from ...options import Options
from ...utils import open_for_writing, unescape_package_name

LOGGER = logging.getLogger("covmerge")


def templates() -> Environment:
    """Get the template environment."""
    loader: PackageLoader = PackageLoader(
        "covmerge.formats.markdown",
        package_path="default",
    )

    return Environment(
        loader=loader,
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def format_coverage(stat: CoverageStat) -> str:
    """Format a statistic as "covered/total - percentage".

    >>> format_coverage(CoverageStat(85, 100))
    '85/100 - 85%'
    """
    return f"{stat.covered}/{stat.total} - {stat.percent}%"


def render_summary(report: CoverageReport) -> str:
    """Render the summary of a merged report."""
    packages = list[dict[str, Any]]()
    for packagecov in report.packages.values():
        packages.append(
            {
                "name": unescape_package_name(packagecov.name),
                "coverage": format_coverage(package_stat(packagecov)),
                "classes": [
                    {
                        "name": classcov.name,
                        "coverage": format_coverage(
                            CoverageStat(classcov.covered_lines, len(classcov.lines))
                        ),
                    }
                    for classcov in packagecov.classes.values()
                ],
            }
        )

    return templates().get_template("summary_template.html.j2").render(
        total=format_coverage(report_stat(report)),
        packages=packages,
    )


def write_summary_report(
    report: CoverageReport, output_file: str, _options: Options
) -> None:
    """Produce the summary of the merged report, e.g. for a CI job summary."""
    mode = "w"
    if output_file == "-" and (
        step_summary := os.environ.get("GITHUB_STEP_SUMMARY")
    ):
        LOGGER.debug(f"Appending the summary to the job summary {step_summary}")
        output_file = step_summary
        mode = "a"

    with open_for_writing(output_file, "coverage.md", mode, encoding="UTF-8") as fh:
        fh.write(render_summary(report))
