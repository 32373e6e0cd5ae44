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

from lxml import etree  # nosec # We only write XML files

from ...data_model.coverage import ClassCoverage, CoverageReport, PackageCoverage
from ...options import Options
from ...utils import open_for_writing, unescape_package_name


def write_report(report: CoverageReport, output_file: str, options: Options) -> None:
    """produce the merged report in the Cobertura format"""

    root_elem = etree.Element("coverage")
    root_elem.set("line-rate", str(report.line_rate))
    root_elem.set("lines-covered", str(report.lines_covered))
    root_elem.set("lines-valid", str(report.lines_valid))
    root_elem.set("timestamp", str(int(options.timestamp.timestamp())))
    root_elem.set("version", report.version)

    packages_elem = etree.SubElement(root_elem, "packages")
    for packagecov in report.packages.values():
        packages_elem.append(_package_element(packagecov))

    with open_for_writing(output_file, "cobertura.xml", "wb") as fh:
        fh.write(
            etree.tostring(
                root_elem,
                pretty_print=options.cobertura_pretty,
                encoding="UTF-8",
                xml_declaration=True,
                doctype="<!DOCTYPE coverage SYSTEM 'http://cobertura.sourceforge.net/xml/coverage-04.dtd'>",
            )
        )


def _package_element(packagecov: PackageCoverage) -> etree._Element:
    elem = etree.Element("package")
    elem.set("name", unescape_package_name(packagecov.name))
    elem.set("line-rate", str(packagecov.line_rate))
    classes_elem = etree.SubElement(elem, "classes")
    for classcov in packagecov.classes.values():
        classes_elem.append(_class_element(classcov))
    return elem


def _class_element(classcov: ClassCoverage) -> etree._Element:
    elem = etree.Element("class")
    elem.set("name", classcov.name)
    elem.set("filename", classcov.filename)
    elem.set("line-rate", str(classcov.line_rate))
    lines_elem = etree.SubElement(elem, "lines")
    for linecov in sorted(classcov.lines, key=lambda linecov: linecov.lineno):
        line_elem = etree.SubElement(lines_elem, "line")
        line_elem.set("number", str(linecov.lineno))
        line_elem.set("hits", str(linecov.hits))
        if linecov.line_hash:
            line_elem.set("hash", linecov.line_hash)
    return elem
