# Copyright (C) 2018 Jaedyn K. Draper
#
# Permission is hereby granted, free of charge, to any person obtaining
# a copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
.. module:: run_unit_tests
	:synopsis: Import this file and call RunTests() to run slngen's unit and functional tests.
		Ensure cwd is one directory above the slngen package. Do not execute directly, it will fail.
"""

import fnmatch
import importlib.util
import os
import sys
import unittest

from .._utils import log, shared_globals, terminfo
from . import testcase


def _loadModuleFromPath(moduleName, modulePath):
	spec = importlib.util.spec_from_file_location(moduleName, modulePath)
	module = importlib.util.module_from_spec(spec)
	sys.modules[moduleName] = module
	spec.loader.exec_module(module)
	return module


def _iterTests(suite):
	for test in suite:
		if isinstance(test, unittest.TestSuite):
			for subTest in _iterTests(test):
				yield subTest
		else:
			yield test


def _testMatches(test, include, exclude):
	baseId = test.__class__.__name__
	simpleTestId = "{}.{}".format(baseId, getattr(test, "_testMethodName", ""))

	if include and not any(fnmatch.fnmatch(simpleTestId, inc) for inc in include):
		log.Test("Excluding test {} due to no include match", simpleTestId)
		return False

	for exc in exclude:
		if fnmatch.fnmatch(simpleTestId, exc):
			log.Test("Excluding test {} due to exclude match", simpleTestId)
			return False

	return True


def RunTests(include=None, exclude=None, xmlfile="result.xml"):
	"""
	Run all unit tests, then the functional tests found under ./functional_tests.
	Must be executed with current working directory being a directory that contains the slngen package.

	:param include: Filters (fnmatch patterns of Suite.testName) selecting the only tests to run
	:type include: list[str] or None
	:param exclude: Filters selecting tests to skip
	:type exclude: list[str] or None
	:param xmlfile: File to store the result xml data in
	:type xmlfile: str
	:return: 0 if successful, 1 if not
	:rtype: int
	"""
	include = include or []
	exclude = exclude or []

	shared_globals.colorSupported = terminfo.TermInfo.SupportsColor()
	discovered = unittest.defaultTestLoader.discover("slngen", "*.py", ".")

	if os.path.isdir("functional_tests"):
		for testdir in sorted(os.listdir("functional_tests")):
			modulepath = os.path.join("functional_tests", testdir, "tests.py")
			if os.path.exists(modulepath):
				log.Test("Loading functional tests from {}", modulepath)
				module = _loadModuleFromPath("{}_tests".format(testdir), modulepath)
				discovered.addTest(unittest.defaultTestLoader.loadTestsFromModule(module))

	tests = unittest.TestSuite()
	for test in _iterTests(discovered):
		if _testMatches(test, include, exclude):
			tests.addTest(test)

	testRunner = testcase.TestRunner(xmlfile=xmlfile, stream=sys.stdout, verbosity=0)
	result = testRunner.run(tests)
	return 0 if result.wasSuccessful() else 1
