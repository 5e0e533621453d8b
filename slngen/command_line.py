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
.. module:: command_line
	:synopsis: Command line front end that generates a solution from a list of project files

.. moduleauthor:: Jaedyn K. Draper
"""

import argparse
import contextlib
import io
import os
import shutil
import tempfile
import uuid

from . import __version__
from ._utils import log, shared_globals, terminfo
from ._utils.guids import GuidGenerator
from ._utils.shared_globals import Verbosity
from ._testing import testcase
from .project import SlnProject
from .solution import SlnFile, DEFAULT_CONFIGURATIONS, DEFAULT_PLATFORMS, DEFAULT_FILE_FORMAT_VERSION

_epilog = """Projects are placed in solution folders that mirror the directories they live in, relative to --root.
For example, <root>/Src/App/App.csproj is listed as App inside the Src folder."""


def _createParser():
	parser = argparse.ArgumentParser(
		prog = "slngen",
		description = "Generate a Visual Studio solution file from a list of project files.",
		epilog = _epilog,
		formatter_class = argparse.RawDescriptionHelpFormatter
	)

	parser.add_argument("projects", nargs = "*", metavar = "PROJECT", help = "Project file(s) to add to the solution, in order.")

	parser.add_argument('--version', action = "store_true", help = "Print version information and exit")

	parser.add_argument("-o", "--output", action = "store", default = "",
		help = "Path of the solution file to write (default is <root>/<first project name>.sln)")
	parser.add_argument("--root", action = "store", default = ".",
		help = "Directory that solution folders are relative to (default is the current directory)")

	parser.add_argument("-c", "--configuration", action = "append", default = [],
		help = "Solution configuration. (May be specified multiple times, default is {}.)".format(", ".join(DEFAULT_CONFIGURATIONS)))
	parser.add_argument("-p", "--platform", action = "append", default = [],
		help = "Solution platform. (May be specified multiple times, default is {}.)".format(", ".join(DEFAULT_PLATFORMS)))
	parser.add_argument("-s", "--solution-item", action = "append", default = [],
		help = "File to list under the Solution Items folder. (May be specified multiple times.)")
	parser.add_argument("--format-version", action = "store", default = DEFAULT_FILE_FORMAT_VERSION,
		help = "Solution file format version (default is {})".format(DEFAULT_FILE_FORMAT_VERSION))

	group = parser.add_mutually_exclusive_group()
	group.add_argument('-v', '--verbose', action = "store_const", const = Verbosity.Verbose, dest = "verbosity",
		help = "Verbose. Enables additional INFO-level logging.", default = Verbosity.Normal)
	group.add_argument('-q', '--quiet', action = "store_const", const = Verbosity.Quiet, dest = "verbosity",
		help = "Quiet. Disables all logging except for WARN and ERROR.", default = Verbosity.Normal)
	group.add_argument('-qq', '--very-quiet', action = "store_const", const = Verbosity.Mute, dest = "verbosity",
		help = "Very quiet. Disables all logging.", default = Verbosity.Normal)

	parser.add_argument('--force-color', help = "Force color on or off.",
		action = "store", choices = ["on", "off"], default = None, const = "on", nargs = "?")
	parser.add_argument("--log-file", action = "store", default = "", help = "Also write log output to this file")

	return parser


def _warnDuplicateGuids(projects):
	seen = {}
	for project in projects:
		if project.guid in seen:
			log.Warn("Projects {} and {} share the GUID {}", seen[project.guid].fullPath, project.fullPath, project.guid)
		else:
			seen[project.guid] = project


def _generate(args):
	rootPath = os.path.abspath(args.root)

	projects = []
	projectGuids = GuidGenerator(uuid.NAMESPACE_URL)
	for projectPath in args.projects:
		if not os.path.isfile(projectPath):
			log.Warn("Project file {} does not exist", projectPath)
		projects.append(SlnProject.FromFile(projectPath, rootPath, projectGuids))

	_warnDuplicateGuids(projects)

	solution = SlnFile(
		projects,
		args.configuration or DEFAULT_CONFIGURATIONS,
		args.platform or DEFAULT_PLATFORMS,
		args.format_version
	)
	solution.AddSolutionItems([os.path.abspath(item) for item in args.solution_item])

	outputPath = os.path.abspath(args.output or os.path.join(rootPath, "{}.sln".format(projects[0].name)))
	outputDirPath = os.path.dirname(outputPath)

	if not os.access(outputDirPath, os.F_OK):
		os.makedirs(outputDirPath)

	solution.Save(outputPath)
	return outputPath


def Main(argv=None):
	"""
	Parse the command line and write the solution file.

	:param argv: Command line arguments, excluding the program name. Defaults to sys.argv[1:].
	:type argv: list[str] or None

	:return: Process exit code; 0 on success, 1 on failure.
	:rtype: int
	"""
	parser = _createParser()
	args = parser.parse_args(argv)

	if args.version:
		print("slngen version {}".format(__version__))
		return 0

	if not args.projects:
		parser.error("at least one project file is required")

	shared_globals.verbosity = args.verbosity

	if args.force_color == "on":
		shared_globals.colorSupported = True
	elif args.force_color == "off":
		shared_globals.colorSupported = False
	else:
		shared_globals.colorSupported = terminfo.TermInfo.SupportsColor()

	try:
		try:
			if args.log_file:
				shared_globals.logFile = io.open(args.log_file, "w", encoding="utf-8")

			outputPath = _generate(args)
		except (IOError, OSError, UnicodeError) as e:
			log.Error("Unable to generate solution: {}", e)
			return 1

		log.Build("Generated solution {}", outputPath)
		return 0

	finally:
		if shared_globals.logFile:
			shared_globals.logFile.close()
			shared_globals.logFile = None


class TestCommandLine(testcase.TestCase):
	"""Test the command line front end"""

	# pylint: disable=invalid-name
	def setUp(self):
		self.tempDir = tempfile.mkdtemp(prefix="slngen_cli_")
		self._oldVerbosity = shared_globals.verbosity
		self._oldColor = shared_globals.colorSupported

	def tearDown(self):
		shared_globals.verbosity = self._oldVerbosity
		shared_globals.colorSupported = self._oldColor
		shutil.rmtree(self.tempDir)

	def _writeProject(self, *segments):
		fullPath = os.path.join(self.tempDir, *segments)
		if not os.access(os.path.dirname(fullPath), os.F_OK):
			os.makedirs(os.path.dirname(fullPath))
		with open(fullPath, "w") as f:
			f.write("<Project></Project>")
		return fullPath

	def _read(self, filePath):
		with io.open(filePath, "r", encoding="utf-8-sig", newline="") as f:
			return f.read()

	def testGeneratesSolution(self):
		"""Test that a solution is written with folders, items and the requested matrix"""
		app = self._writeProject("Src", "App", "App.csproj")
		core = self._writeProject("Src", "Lib", "Core", "Core.vcxproj")
		readme = os.path.join(self.tempDir, "README.md")
		outputPath = os.path.join(self.tempDir, "out", "Test.sln")

		ret = Main([
			app, core,
			"--root", self.tempDir,
			"-o", outputPath,
			"-c", "Debug", "-c", "Release",
			"-p", "x64",
			"-s", readme,
			"-qq", "--force-color", "off",
		])
		self.assertEqual(0, ret)

		contents = self._read(outputPath)
		lines = contents.split("\r\n")
		self.assertEqual("Microsoft Visual Studio Solution File, Format Version 12.00", lines[0])
		self.assertIn("\"Src\", \"Src\"", contents)
		self.assertIn("\"Lib\", \"Src\\Lib\"", contents)
		self.assertIn("\t\t{0} = {0}\r\n".format(os.path.abspath(readme)), contents)
		self.assertIn("\t\tRelease|x64 = Release|x64\r\n", contents)
		self.assertNotIn("Any CPU", contents)
		self.assertIn("\tGlobalSection(NestedProjects) = preSolution\r\n", contents)

	def testDefaultOutputPath(self):
		"""Test that the solution is named after the first project by default"""
		tool = self._writeProject("Tool.csproj")
		ret = Main([tool, "--root", self.tempDir, "-qq"])
		self.assertEqual(0, ret)
		contents = self._read(os.path.join(self.tempDir, "Tool.sln"))
		self.assertIn("\t\tDebug|Any CPU = Debug|Any CPU\r\n", contents)
		self.assertIn("\t\tRelease|Any CPU = Release|Any CPU\r\n", contents)

	def testFormatVersion(self):
		"""Test that the format version option is written to the header"""
		tool = self._writeProject("Tool.csproj")
		outputPath = os.path.join(self.tempDir, "Versioned.sln")
		self.assertEqual(0, Main([tool, "-o", outputPath, "--format-version", "11.00", "-qq"]))
		self.assertTrue(self._read(outputPath).startswith("Microsoft Visual Studio Solution File, Format Version 11.00\r\n"))

	def testUnwritableOutput(self):
		"""Test that failing to write the solution is reported as an error"""
		tool = self._writeProject("Tool.csproj")
		blocker = os.path.join(self.tempDir, "blocker")
		with open(blocker, "w") as f:
			f.write("not a directory")

		errorCount = len(shared_globals.errors)
		ret = Main([tool, "-o", os.path.join(blocker, "Test.sln"), "-qq"])
		self.assertEqual(1, ret)
		self.assertEqual(errorCount + 1, len(shared_globals.errors))

	def testDuplicateGuidsWarn(self):
		"""Test that listing the same project twice warns about the duplicate GUID"""
		tool = self._writeProject("Tool.csproj")
		warningCount = len(shared_globals.warnings)
		self.assertEqual(0, Main([tool, tool, "-o", os.path.join(self.tempDir, "Dup.sln"), "-qq"]))
		self.assertEqual(warningCount + 1, len(shared_globals.warnings))

	def testLogFile(self):
		"""Test that log output is mirrored to the log file without color markup"""
		tool = self._writeProject("Tool.csproj")
		logPath = os.path.join(self.tempDir, "slngen.log")
		with contextlib.redirect_stdout(io.StringIO()):
			self.assertEqual(0, Main([tool, "--root", self.tempDir, "--log-file", logPath, "--force-color", "off"]))
		self.assertIsNone(shared_globals.logFile)

		with io.open(logPath, "r", encoding="utf-8") as f:
			logContents = f.read()
		self.assertIn("BUILD: Generated solution {}".format(os.path.join(self.tempDir, "Tool.sln")), logContents)

	def testNoProjects(self):
		"""Test that running without any projects is a usage error"""
		with contextlib.redirect_stderr(io.StringIO()):
			with self.assertRaises(SystemExit) as cm:
				Main(["-qq"])
		self.assertEqual(2, cm.exception.code)

	def testVersion(self):
		"""Test that --version prints the version and exits cleanly"""
		stdout = io.StringIO()
		with contextlib.redirect_stdout(stdout):
			self.assertEqual(0, Main(["--version"]))
		self.assertIn(__version__, stdout.getvalue())
		self.assertEqual(self._oldVerbosity, shared_globals.verbosity)

	def testForceColorOn(self):
		"""Test that forcing color on writes escape sequences around log output"""
		tool = self._writeProject("Tool.csproj")
		stdout = io.StringIO()
		with contextlib.redirect_stdout(stdout):
			self.assertEqual(0, Main([tool, "--root", self.tempDir, "--force-color", "on"]))
		self.assertIn("\033[{}mBUILD: \033[0m".format(terminfo.TermColor.MAGENTA), stdout.getvalue())

	def testUnencodableSolutionItemKeepsExistingSolution(self):
		"""Test that a solution that can't be encoded fails without touching the previous solution"""
		tool = self._writeProject("Tool.csproj")
		outputPath = os.path.join(self.tempDir, "Tool.sln")
		self.assertEqual(0, Main([tool, "-o", outputPath, "-qq"]))
		with open(outputPath, "rb") as f:
			original = f.read()

		self.assertEqual(1, Main([tool, "-o", outputPath, "-s", "bad\udc80.txt", "-qq"]))
		with open(outputPath, "rb") as f:
			self.assertEqual(original, f.read())
		self.assertEqual(["Tool.csproj", "Tool.sln"], sorted(os.listdir(self.tempDir)))
