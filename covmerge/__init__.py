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
