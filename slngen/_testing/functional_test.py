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
.. module:: functional_test
	:synopsis: A base class for functional tests, which run slngen as a separate process

.. moduleauthor:: Jaedyn K. Draper
"""

import io
import os
import re
import shutil
import subprocess
import sys

from .testcase import TestCase
from .._utils import PlatformString


class FunctionalTest(TestCase):
	"""
	Base class for running functional tests that invoke slngen from the directory containing the test module.
	"""
	def setUp(self, outDir="out"): #pylint: disable=arguments-differ
		self._prevdir = os.getcwd()
		module = sys.modules[self.__class__.__module__]
		os.chdir(os.path.dirname(os.path.abspath(module.__file__)))

		self.outDir = outDir

		# Make sure we start in a good state
		if os.access(outDir, os.F_OK):
			shutil.rmtree(outDir)

	def tearDown(self):
		try:
			if os.access(self.outDir, os.F_OK):
				shutil.rmtree(self.outDir)
		finally:
			os.chdir(self._prevdir)

	def RunSlnGen(self, *args):
		"""
		Run slngen in a child process with the given args.

		:param args: Arguments to pass
		:type args: str
		:return: Tuple of returncode, stdout and stderr output from the process
		:rtype: tuple[int, str, str]
		"""
		env = dict(os.environ)
		env[PlatformString("PYTHONPATH")] = os.pathsep.join(sys.path)

		cmd = [sys.executable, "-m", "slngen"]
		cmd.extend(args)
		cmd.append("--force-color=off")

		proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, env=env)
		output, errors = proc.communicate()

		ansiEscape = re.compile(r'\x1b[^m]*m')
		output = ansiEscape.sub("", PlatformString(output))
		errors = ansiEscape.sub("", PlatformString(errors))
		return proc.returncode, output, errors

	# pylint: disable=invalid-name
	def assertSlnGenSucceeds(self, *args):
		"""
		Assert that running slngen succeeds
		:param args: Arguments to pass
		:type args: str
		:return: Tuple of returncode, stdout and stderr output from the process
		:rtype: tuple[int, str, str]
		"""
		returncode, output, errors = self.RunSlnGen(*args)
		self.assertEqual(0, returncode, "slngen failed:\n{}\n{}".format(output, errors))
		return returncode, output, errors

	def assertSlnGenFails(self, error, *args):
		"""
		Assert that running slngen fails with the given error
		:param error: Error regular expression to search for in the output
		:type error: str
		:param args: Arguments to pass
		:type args: str
		:return: Tuple of returncode, stdout and stderr output from the process
		:rtype: tuple[int, str, str]
		"""
		returncode, output, errors = self.RunSlnGen(*args)
		self.assertNotEqual(0, returncode)
		error = re.compile(error)
		self.assertTrue(error.search(output) is not None or error.search(errors) is not None)
		return returncode, output, errors

	def assertFileExists(self, filename):
		"""
		Assert that an expected file exists
		:param filename: file to check
		:type filename: str
		"""
		self.assertTrue(os.access(filename, os.F_OK), "No such file: "+filename)

	def ReadSolutionLines(self, filename):
		"""
		Read a solution file, checking that it is stored with a byte order marker and CRLF line endings.
		:param filename: Solution file to read
		:type filename: str
		:return: The lines of the file
		:rtype: list[str]
		"""
		self.assertFileExists(filename)
		with io.open(filename, "rb") as f:
			data = f.read()
		self.assertTrue(data.startswith(b"\xef\xbb\xbf"), "{} has no byte order marker".format(filename))
		self.assertTrue(data.endswith(b"\r\n"))
		return data[3:].decode("utf-8").split("\r\n")[:-1]
