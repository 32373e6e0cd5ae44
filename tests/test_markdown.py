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

from pathlib import Path

import pytest

from covmerge.data_model.coverage import (
    ClassCoverage,
    CoverageReport,
    LineCoverage,
    PackageCoverage,
)
from covmerge.data_model.stats import recompute
from covmerge.formats.markdown.write import render_summary, write_summary_report
from covmerge.options import Options


def summary_report() -> CoverageReport:
    report = CoverageReport("a.xml")
    for package_name, classes in [
        ("app", [("main_c", [1, 1, 0]), ("util_c", [0])]),
        ("vector&lt;int&gt;", [("Vector<int>", [2, 2])]),
    ]:
        packagecov = PackageCoverage(package_name)
        for name, hits in classes:
            classcov = ClassCoverage(name, f"{name}.c")
            for lineno, count in enumerate(hits, 1):
                classcov.insert_line_coverage(LineCoverage(lineno, "", count))
            packagecov.insert_class_coverage(classcov)
        report.packages[package_name] = packagecov
    recompute(report)
    return report


def test_render_summary() -> None:
    summary = render_summary(summary_report())

    assert summary.startswith("<table>\n")
    assert (
        "<tr><th>Coverage&emsp;(covered/total - percentage)</th></tr>" in summary
    )
    assert "<tr><td><b>Total coverage&emsp;(4/6 - 66%)</b></td></tr>" in summary
    assert "<summary>app&emsp;(2/4 - 50%)</summary>" in summary
    assert "<tr><td>&emsp;main_c&emsp;(2/3 - 66%)</td></tr>" in summary
    assert "<tr><td>&emsp;util_c&emsp;(0/1 - 0%)</td></tr>" in summary
    assert summary.count("<details>") == 2
    assert summary.index("main_c") < summary.index("util_c") < summary.index("Vector")


def test_names_are_escaped() -> None:
    summary = render_summary(summary_report())

    assert "<summary>vector&lt;int&gt;&emsp;(2/2 - 100%)</summary>" in summary
    assert "&emsp;Vector&lt;int&gt;&emsp;(2/2 - 100%)" in summary
    assert "<int>" not in summary


def test_empty_report() -> None:
    summary = render_summary(CoverageReport("empty.xml"))

    assert "Total coverage&emsp;(0/0 - 0%)" in summary
    assert "<details>" not in summary


def test_write_to_file(tmp_path: Path) -> None:
    output = tmp_path / "summary.md"
    write_summary_report(summary_report(), str(output), Options())

    assert output.read_text(encoding="utf-8") == render_summary(summary_report())


def test_write_to_stdout(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)
    write_summary_report(summary_report(), "-", Options())

    out, err = capsys.readouterr()
    assert out == render_summary(summary_report())
    assert err == ""


def test_append_to_job_summary(
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    step_summary = tmp_path / "step_summary.md"
    step_summary.write_text("# Tests\n", encoding="utf-8")
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(step_summary))

    write_summary_report(summary_report(), "-", Options())

    out, _ = capsys.readouterr()
    assert out == ""
    assert step_summary.read_text(encoding="utf-8") == "# Tests\n" + render_summary(
        summary_report()
    )


def test_explicit_file_ignores_job_summary(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    step_summary = tmp_path / "step_summary.md"
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(step_summary))

    write_summary_report(summary_report(), str(tmp_path / "summary.md"), Options())

    assert not step_summary.exists()
    assert (tmp_path / "summary.md").exists()
