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
.. module:: testcase
	:synopsis: Thin wrapper around python unittest that logs test progress and records results as xml

.. moduleauthor:: Jaedyn K. Draper
"""

import unittest
import sys
import time

from xml.etree import ElementTree
from xml.dom import minidom

from .._utils import log

_separator = "----------------------------------------------------------------------"


def _plural(count):
	return "s" if count != 1 else ""


def _isImportFailure(test):
	return test.__class__.__name__ == "_FailedTest"


class TestCase(unittest.TestCase):
	"""
	Thin wrapper around python unittest to provide more details on test progress
	"""
	_runTestCases = set()
	_currentTestCase = None
	_totalSuccess = 0
	_totalFail = 0

	def __init__(self, methodName="runTest"):
		super(TestCase, self).__init__(methodName)
		self.success = True

	def run(self, result=None):
		"""
		Runs the test, logging the suite name the first time one of its tests is run.

		:param result: optional test result
		:type result: unittest.TestResult
		"""
		suiteName = self.__class__.__name__
		if suiteName not in TestCase._runTestCases:
			TestCase.PrintSingleResult()
			TestCase._runTestCases.add(suiteName)
			TestCase._currentTestCase = [suiteName, 0, 0]
			log.Test("RUNNING TEST SUITE: <&CYAN>{}</&>", suiteName)

		log.Test("   Running test:	 {}.<&CYAN>{}</&> ...", suiteName, self._testMethodName)
		ret = unittest.TestCase.run(self, result)
		if self.success:
			log.Test("	  ... <&DGREEN>[</&><&GREEN>Success!</&><&DGREEN>]")
			TestCase._currentTestCase[1] += 1
			TestCase._totalSuccess += 1
		else:
			log.Test("	  ... <&DRED>[</&><&RED>Failed!</&><&DRED>]")
			TestCase._currentTestCase[2] += 1
			TestCase._totalFail += 1
		return ret

	def TestName(self):
		"""Get the test method name for this test"""
		return self._testMethodName

	def TestDoc(self):
		"""Get the docstring attached to this test"""
		return self._testMethodDoc

	@staticmethod
	def PrintSingleResult():
		"""
		Print the result of the last test suite, if any have been run
		"""
		if TestCase._currentTestCase is None:
			return
		suiteName, succeeded, failed = TestCase._currentTestCase
		txt = "{} <&GREEN>{}</&> test{} succeeded".format(suiteName, succeeded, _plural(succeeded))
		if failed > 0:
			txt += ", <&RED>{}</&> failed".format(failed)
		else:
			txt += "!"
		log.Test("{}\n{}", txt, _separator)

	@staticmethod
	def PrintOverallResult():
		"""
		Print the overall result of the entire unit test run
		"""
		txt = "Unit test results: <&GREEN>{}</&> test{} succeeded".format(TestCase._totalSuccess, _plural(TestCase._totalSuccess))
		if TestCase._totalFail > 0:
			txt += ", <&RED>{}</&> failed".format(TestCase._totalFail)
		else:
			txt += "!"
		log.Test(txt)


def _writeXmlResults(xmlfile, testTimes, failures, errors, skipped):
	root = ElementTree.Element("testsuites")
	add = ElementTree.SubElement

	suites = {}
	for test, testTime in testTimes.items():
		suites.setdefault(test.__class__.__name__, {})[test] = testTime

	for suiteName, tests in suites.items():
		suite = add(
			root,
			"testsuite",
			name=suiteName,
			tests=str(len(tests)),
			errors=str(len([test for test in tests if test in errors])),
			failures=str(len([test for test in tests if test in failures])),
			skipped=str(len([test for test in tests if test in skipped])),
			time="{:.3f}".format(sum(tests.values()))
		)

		for test, testTime in tests.items():
			case = add(suite, "testcase", classname="{}.{}".format(suiteName, test.TestName()), name=str(test.TestDoc()), time="{:.3f}".format(testTime))
			if test in failures:
				add(case, "failure").text = failures[test]
			if test in errors:
				add(case, "error").text = errors[test]
			if test in skipped:
				add(case, "skipped").text = skipped[test]

	with open(xmlfile, "w") as f:
		f.write(minidom.parseString(ElementTree.tostring(root)).toprettyxml("\t", "\n"))


class TestResult(unittest.TextTestResult):
	"""
	Thin wrapper of unittest.TextTestResult to print out a little more info at the start and end of a test run

	:param xmlfile: File to store the result xml data in
	:type xmlfile: str
	For the other parameters, see unittest.TextTestResult
	"""
	def __init__(self, stream, descriptions, verbosity, xmlfile=None):
		super(TestResult, self).__init__(stream, descriptions, verbosity)
		self.testList = {}
		self.timer = 0
		self.xmlfile = xmlfile

	def startTestRun(self):
		"""
		Start running the test suite
		"""
		sys.stdout.write("{}\n".format(_separator))

	def stopTestRun(self):
		"""
		Stop running the test suite
		"""
		TestCase.PrintSingleResult()
		TestCase.PrintOverallResult()
		if self.xmlfile:
			_writeXmlResults(self.xmlfile, self.testList, dict(self.failures), dict(self.errors), dict(self.skipped))

	def startTest(self, test):
		"""
		Start a single test

		:param test: The test to start
		:type test: TestCase
		"""
		super(TestResult, self).startTest(test)
		self.timer = time.time()

	def stopTest(self, test):
		"""
		Stop a single test

		:param test: The test to stop
		:type test: TestCase
		"""
		super(TestResult, self).stopTest(test)
		if not _isImportFailure(test) and isinstance(test, TestCase):
			self.testList[test] = time.time() - self.timer

	def addError(self, test, err):
		super(TestResult, self).addError(test, err)
		log.Error(self.errors[-1][1])
		if isinstance(test, TestCase):
			test.success = False

	def addFailure(self, test, err):
		super(TestResult, self).addFailure(test, err)
		log.Error(self.failures[-1][1])
		if isinstance(test, TestCase):
			test.success = False

	def printErrors(self):
		"""
		Print errors. (Or in this case, don't. We did it earlier.)
		"""
		pass


class TestRunner(unittest.TextTestRunner):
	"""
	Thin wrapper around TextTestRunner to allow passing an xml file to the result

	:param xmlfile: File to store the result xml data in
	:type xmlfile: str
	For the other parameters, see unittest.TextTestRunner
	"""
	resultclass = TestResult

	def __init__(self, xmlfile="result.xml", *args, **kwargs):
		super(TestRunner, self).__init__(*args, **kwargs)
		self.xmlfile = xmlfile

	def _makeResult(self):
		return self.resultclass(self.stream, self.descriptions, self.verbosity, self.xmlfile)
