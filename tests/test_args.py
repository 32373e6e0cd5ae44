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

import pytest
from lxml import etree

from covmerge.__main__ import main
from covmerge.version import __version__


# The CaptureObject class holds the capture method result
class CaptureObject:
    def __init__(self, out: str, err: str, exitcode: int) -> None:
        self.out = out
        self.err = err
        self.exitcode = exitcode


def capture(capsys: pytest.CaptureFixture[str], args: list[str]) -> CaptureObject:
    """The capture method calls the main method and captures its output/error
    streams and exit code."""
    e = main(args)
    out, err = capsys.readouterr()
    return CaptureObject(out, err, e)


# The LogCaptureObject class holds the capture method result
class LogCaptureObject:
    def __init__(
        self, record_tuples: list[tuple[str, int, str]], exitcode: int
    ) -> None:
        self.record_tuples = record_tuples
        self.exitcode = exitcode

    @property
    def errors(self) -> list[str]:
        return [m for _, level, m in self.record_tuples if level == logging.ERROR]


def log_capture(caplog: pytest.LogCaptureFixture, args: list[str]) -> LogCaptureObject:
    """The capture method calls the main method and captures its log
    records and exit code."""
    e = main(args)
    return LogCaptureObject(caplog.record_tuples, e)


@pytest.fixture(autouse=True)
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory without a job summary."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)
    return tmp_path


@pytest.fixture
def reports(cobertura, write_xml) -> list[str]:
    return [
        write_xml("a.xml", cobertura.single((1, 1, "h1"), (2, 0, "h2"), version="A")),
        write_xml("b.xml", cobertura.single((1, 2, "h1"), (2, 0, "h2"), version="B")),
    ]


def merged_hits(filename: str) -> list[tuple[str, str]]:
    root = etree.parse(filename).getroot()  # nosec # Written by the test
    return [
        (line.get("number"), line.get("hits"))
        for line in root.iterfind("packages/package/classes/class/lines/line")
    ]


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    c = capture(capsys, ["--version"])
    assert c.err == ""
    assert c.out.startswith(f"covmerge {__version__}")
    assert c.exitcode == 0


def test_help(capsys: pytest.CaptureFixture[str]) -> None:
    c = capture(capsys, ["-h"])
    assert c.err == ""
    assert c.out.startswith("usage: covmerge [options] [reports...]")
    assert "--markdown-summary" in c.out
    assert c.exitcode == 0


def test_no_reports(caplog: pytest.LogCaptureFixture) -> None:
    c = log_capture(caplog, [])
    assert c.errors == ["No coverage report given, at least one report is needed."]
    assert c.exitcode == 1


def test_jobs_zero(capsys: pytest.CaptureFixture[str]) -> None:
    c = capture(capsys, ["--jobs", "0", "a.xml"])
    assert c.out == ""
    assert "argument -j/--jobs: Should be a positive integer, got '0'." in c.err
    assert c.exitcode == 1


def test_fail_under_line_out_of_range(capsys: pytest.CaptureFixture[str]) -> None:
    c = capture(capsys, ["--fail-under-line", "101", "a.xml"])
    assert "argument --fail-under-line: 101 not in range [0.0, 100.0]" in c.err
    assert c.exitcode == 1


def test_output_is_a_directory(
    capsys: pytest.CaptureFixture[str], workdir: Path
) -> None:
    (workdir / "out").mkdir()
    c = capture(capsys, ["--cobertura", "out", "a.xml"])
    assert "Could not create output file 'out': Is a directory" in c.err
    assert c.exitcode == 1


def test_merge(reports: list[str], workdir: Path) -> None:
    assert main(["--cobertura", "merged.xml", *reports]) == 0

    assert merged_hits(str(workdir / "merged.xml")) == [("1", "3"), ("2", "0")]
    root = etree.parse(str(workdir / "merged.xml")).getroot()  # nosec # Written by the test
    assert root.get("version") == "A"
    assert root.get("line-rate") == "0.5"


def test_merge_with_glob_and_jobs(cobertura, write_xml, workdir: Path) -> None:
    for index in range(4):
        write_xml(
            f"reports/r{index}.xml", cobertura.single((1, 1, "h1"), version=str(index))
        )

    assert main(["-v", "-j", "3", "-x", "merged.xml", "reports/*.xml"]) == 0

    assert merged_hits(str(workdir / "merged.xml")) == [("1", "4")]
    root = etree.parse(str(workdir / "merged.xml")).getroot()  # nosec # Written by the test
    assert root.get("version") == "0"


def test_timestamp(reports: list[str], workdir: Path) -> None:
    assert main(["--timestamp", "@1640606727", "-x", "merged.xml", *reports]) == 0

    root = etree.parse(str(workdir / "merged.xml")).getroot()  # nosec # Written by the test
    assert root.get("timestamp") == "1640606727"


def test_summary_is_default(
    capsys: pytest.CaptureFixture[str], reports: list[str]
) -> None:
    c = capture(capsys, reports)
    assert "<b>Total coverage&emsp;(1/2 - 50%)</b>" in c.out
    assert c.exitcode == 0


def test_summary_to_output(reports: list[str], workdir: Path) -> None:
    assert main(["-o", "summary.md", *reports]) == 0

    assert "(1/2 - 50%)" in (workdir / "summary.md").read_text(encoding="utf-8")


def test_summary_and_cobertura(
    capsys: pytest.CaptureFixture[str], reports: list[str], workdir: Path
) -> None:
    c = capture(
        capsys, ["--markdown-summary", "--cobertura", "merged.xml", *reports]
    )
    assert "Total coverage" in c.out
    assert (workdir / "merged.xml").exists()
    assert c.exitcode == 0


def test_output_not_used(caplog: pytest.LogCaptureFixture, reports: list[str]) -> None:
    c = log_capture(
        caplog,
        ["-o", "unused.md", "-x", "merged.xml", "--markdown-summary", "s.md", *reports],
    )
    assert (
        "covmerge",
        logging.WARNING,
        "--output='unused.md' option was provided but not used.",
    ) in c.record_tuples
    assert c.exitcode == 0


def test_fail_under_line(caplog: pytest.LogCaptureFixture, reports: list[str]) -> None:
    c = log_capture(caplog, ["--fail-under-line", "80", *reports])
    assert c.errors == ["failed minimum line coverage (got 50%, minimum 80.0%)"]
    assert c.exitcode == 2


def test_fail_under_line_reached(reports: list[str]) -> None:
    assert main(["--fail-under-line", "50%", *reports]) == 0


def test_inconsistent_report_is_skipped(
    caplog: pytest.LogCaptureFixture, cobertura, write_xml, workdir: Path
) -> None:
    a = write_xml("a.xml", cobertura.single((1, 1, "h1")))
    b = write_xml("b.xml", cobertura.single((1, 1, "changed")))

    c = log_capture(caplog, ["-x", "merged.xml", a, b])

    assert (
        "covmerge",
        logging.WARNING,
        "Coverage data was not merged due to: "
        f"Inconsistent set of lines reported for file foo.c in report {b}",
    ) in c.record_tuples
    assert merged_hits(str(workdir / "merged.xml")) == [("1", "1")]
    assert c.exitcode == 0


def test_broken_base_report(
    caplog: pytest.LogCaptureFixture, reports: list[str], write_xml
) -> None:
    broken = write_xml("broken.xml", "<coverage><packages>")
    c = log_capture(caplog, [broken, *reports])
    assert len(c.errors) == 1
    assert c.errors[0].startswith(f"Failed to parse coverage report {broken}: ")
    assert c.exitcode == 64


def test_broken_report_is_skipped(
    caplog: pytest.LogCaptureFixture, reports: list[str], write_xml, workdir: Path
) -> None:
    broken = write_xml("broken.xml", "<coverage><packages>")
    c = log_capture(caplog, ["-x", "merged.xml", reports[0], broken, reports[1]])
    assert len(c.errors) == 1
    assert c.errors[0].endswith("\nThe report is skipped.")
    assert merged_hits(str(workdir / "merged.xml")) == [("1", "3"), ("2", "0")]
    assert c.exitcode == 0


def test_no_report_found(caplog: pytest.LogCaptureFixture) -> None:
    c = log_capture(caplog, ["missing/*.xml"])
    assert (
        "covmerge",
        logging.WARNING,
        "Coverage report not found for pattern 'missing/*.xml'.",
    ) in c.record_tuples
    assert c.errors == ["No coverage report to merge."]
    assert c.exitcode == 64


def test_write_error(
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
    reports: list[str],
) -> None:
    def write_report(*_args: object) -> None:
        raise OSError("No space left on device")

    monkeypatch.setattr("covmerge.formats.cobertura.write.write_report", write_report)
    c = log_capture(caplog, ["-x", "merged.xml", *reports])
    assert len(c.errors) == 1
    assert "Not all output files were written successfully:" in c.errors[0]
    assert "No space left on device" in c.errors[0]
    assert c.exitcode == 128


def test_second_default_output_is_skipped(
    capsys: pytest.CaptureFixture[str],
    caplog: pytest.LogCaptureFixture,
    reports: list[str],
) -> None:
    c = log_capture(caplog, ["-x", "--markdown-summary", *reports])
    out, _ = capsys.readouterr()
    assert out.startswith("<?xml")
    assert "Total coverage" not in out
    assert (
        "covmerge",
        logging.WARNING,
        "Output of --markdown-summary skipped because the default output is "
        "already used, give a file name with `--markdown-summary=OUTPUT`.",
    ) in c.record_tuples
    assert c.exitcode == 0


def test_percent_is_truncated_without_float_rounding(
    capsys: pytest.CaptureFixture[str], cobertura, write_xml
) -> None:
    lines = [(n, 1 if n <= 29 else 0, f"h{n}") for n in range(1, 101)]
    report = write_xml("a.xml", cobertura.single(*lines))
    c = capture(capsys, [report])
    assert "(29/100 - 29%)" in c.out
    assert c.exitcode == 0
