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
.. module:: solution
	:synopsis: Writes Visual Studio solution files.

.. moduleauthor:: Brandon Bare
"""

import contextlib
import io
import os
import re
import shutil
import tempfile
import uuid

from ._utils import log
from ._utils.guids import FormatGuid, NewGuid
from ._testing import testcase
from .hierarchy import SlnFolder, SlnHierarchy
from .project import SlnProject

DEFAULT_CONFIGURATIONS = ("Debug", "Release")
DEFAULT_PLATFORMS = ("Any CPU",)
DEFAULT_FILE_FORMAT_VERSION = "12.00"

SOLUTION_ITEMS_NAME = "Solution Items"

_header = "Microsoft Visual Studio Solution File, Format Version {}"

# Configuration sections are closed with a single space rather than a tab.
_configSectionEndPrefix = " "


class _SolutionWriter(object):
	def __init__(self, fileHandle):
		self.fileHandle = fileHandle
		self.indentation = 0

	def Line(self, text):
		self.fileHandle.write("{}{}\r\n".format("\t" * self.indentation, text))

	@contextlib.contextmanager
	def Section(self, sectionName, headerSuffix, endPrefix=None):
		self.Line("{}{}".format(sectionName, headerSuffix))

		self.indentation += 1

		try:
			yield

		finally:
			self.indentation -= 1

		# Skipped when the section body raised.
		if endPrefix is None:
			self.Line("End{}".format(sectionName))
		else:
			self.fileHandle.write("{}End{}\r\n".format(endPrefix, sectionName))


def _projectHeader(typeGuid, name, path, guid):
	return "(\"{}\") = \"{}\", \"{}\", \"{}\"".format(typeGuid, name, path, guid)


class SlnFile(object):
	"""
	Visual Studio solution file contents.

	:param projects: Projects to list in the solution, in the order they should be written.
	:type projects: collections.Iterable[slngen.project.SlnProject]

	:param configurations: Solution configurations. Every project is built in every configuration.
	:type configurations: collections.Iterable[str]

	:param platforms: Solution platforms. Every project is built for every platform.
	:type platforms: collections.Iterable[str]

	:param fileFormatVersion: File format version written in the solution header.
	:type fileFormatVersion: str

	:param solutionItemsGuid: GUID of the "Solution Items" folder. If not given, a new GUID is created every time the
		solution is written.
	:type solutionItemsGuid: uuid.UUID or str or None
	"""
	def __init__(self, projects, configurations=DEFAULT_CONFIGURATIONS, platforms=DEFAULT_PLATFORMS, fileFormatVersion=DEFAULT_FILE_FORMAT_VERSION, solutionItemsGuid=None):
		self.projects = tuple(projects)
		self.configurations = tuple(configurations)
		self.platforms = tuple(platforms)
		self.fileFormatVersion = fileFormatVersion
		self.solutionItemsGuid = FormatGuid(solutionItemsGuid) if solutionItemsGuid is not None else None
		self._solutionItems = []

	@property
	def solutionItems(self):
		"""
		:return: Absolute paths of the files listed under the "Solution Items" folder.
		:rtype: tuple[str]
		"""
		return tuple(self._solutionItems)

	def AddSolutionItems(self, items):
		"""
		Add files to the "Solution Items" folder.

		:param items: Absolute paths of the files to add.
		:type items: collections.Iterable[str]
		"""
		self._solutionItems.extend(items)

	def Save(self, filePath):
		"""
		Write the solution to a file, replacing the file if it already exists.
		The solution is written to a temporary file beside the destination and moved into place once complete, so a
		failed write leaves any existing solution untouched.

		:param filePath: Path of the solution file.
		:type filePath: str
		"""
		outDirPath, fileName = os.path.split(os.path.abspath(filePath))
		tempFilePath = os.path.join(outDirPath, ".{}.{}.tmp".format(fileName, uuid.uuid4().hex))

		try:
			# Visual Studio uses the byte order marker when picking which version to open the solution with.
			with io.open(tempFilePath, "x", encoding="utf-8-sig", newline="") as f:
				self.Write(f)

			os.replace(tempFilePath, filePath)

		finally:
			if os.access(tempFilePath, os.F_OK):
				os.remove(tempFilePath)

		log.Build("[WRITING] {}", filePath)

	def Write(self, fileHandle):
		"""
		Write the solution to an open text stream.

		:param fileHandle: Stream to write to. Only its write() method is used.
		:type fileHandle: io.TextIOBase
		"""
		writer = _SolutionWriter(fileHandle)

		writer.Line(_header.format(self.fileFormatVersion))

		for project in self.projects:
			with writer.Section("Project", _projectHeader(project.typeGuid, project.name, project.fullPath, project.guid)):
				pass

		if self._solutionItems:
			itemsGuid = self.solutionItemsGuid or NewGuid()

			# The trailing space on the header is part of the format.
			header = "{} ".format(_projectHeader(SlnFolder.typeGuid, SOLUTION_ITEMS_NAME, SOLUTION_ITEMS_NAME, itemsGuid))

			with writer.Section("Project", header):
				with writer.Section("ProjectSection", "(SolutionItems) = preProject"):
					for solutionItem in self._solutionItems:
						writer.Line("{0} = {0}".format(solutionItem))

		hierarchy = SlnHierarchy.FromProjects(self.projects)

		for folder in hierarchy.folders:
			with writer.Section("Project", _projectHeader(folder.typeGuid, folder.name, folder.fullPath, folder.guid)):
				pass

		with writer.Section("Global", ""):

			with writer.Section("GlobalSection", "(SolutionConfigurationPlatforms) = preSolution", _configSectionEndPrefix):
				for configuration in self.configurations:
					for platform in self.platforms:
						writer.Line("{0}|{1} = {0}|{1}".format(configuration, platform))

			with writer.Section("GlobalSection", "(ProjectConfigurationPlatforms) = preSolution", _configSectionEndPrefix):
				for project in self.projects:
					for configuration in self.configurations:
						for platform in self.platforms:
							writer.Line("{0}.{1}|{2}.ActiveCfg = {1}|{2}".format(project.guid, configuration, platform))
							writer.Line("{0}.{1}|{2}.Build.0 = {1}|{2}".format(project.guid, configuration, platform))

			# Nesting is only written for solutions with more than one project.
			if len(self.projects) > 1:
				with writer.Section("GlobalSection", "(NestedProjects) = preSolution"):
					for child, parent in hierarchy.hierarchy.items():
						writer.Line("{} = {}".format(child, parent))

		log.Info(
			"Wrote solution with {} project(s), {} folder(s) and {} solution item(s)",
			len(self.projects),
			len(hierarchy.folders),
			len(self._solutionItems)
		)


def WriteSolution(solution, fileHandle):
	"""
	Write a solution to an open text stream.

	:param solution: Solution to write.
	:type solution: SlnFile

	:param fileHandle: Stream to write to.
	:type fileHandle: io.TextIOBase
	"""
	solution.Write(fileHandle)


_guid1 = "{11111111-1111-1111-1111-111111111111}"
_guid2 = "{22222222-2222-2222-2222-222222222222}"
_guid3 = "{33333333-3333-3333-3333-333333333333}"
_itemsGuid = "{44444444-4444-4444-4444-444444444444}"


class _BrokenStream(object):
	def __init__(self, failAfter):
		self.failAfter = failAfter
		self.lines = []
		self.attempts = 0

	def write(self, text):
		self.attempts += 1
		if len(self.lines) >= self.failAfter:
			raise IOError("disk full")
		self.lines.append(text)


class TestSlnFile(testcase.TestCase):
	"""Test writing solution files"""

	# pylint: disable=invalid-name
	@staticmethod
	def _write(solution):
		stream = io.StringIO()
		solution.Write(stream)
		return stream.getvalue()

	@staticmethod
	def _lines(solution):
		return TestSlnFile._write(solution).split("\r\n")[:-1]

	def testSingleProjectInFolder(self):
		"""Test a single project nested under one folder"""
		app = SlnProject("App", "C:\\code\\Src\\App\\App.csproj", _guid1, "Src/App")
		solution = SlnFile([app], ["Debug"], ["Any CPU"])
		folderGuid = SlnHierarchy.FromProjects([app]).folders[0].guid

		expected = [
			"Microsoft Visual Studio Solution File, Format Version 12.00",
			"Project(\"{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}\") = \"App\", \"C:\\code\\Src\\App\\App.csproj\", \"" + _guid1 + "\"",
			"EndProject",
			"Project(\"{2150E333-8FDC-42A3-9474-1A3956D46DE8}\") = \"Src\", \"Src\", \"" + folderGuid + "\"",
			"EndProject",
			"Global",
			"\tGlobalSection(SolutionConfigurationPlatforms) = preSolution",
			"\t\tDebug|Any CPU = Debug|Any CPU",
			" EndGlobalSection",
			"\tGlobalSection(ProjectConfigurationPlatforms) = preSolution",
			"\t\t" + _guid1 + ".Debug|Any CPU.ActiveCfg = Debug|Any CPU",
			"\t\t" + _guid1 + ".Debug|Any CPU.Build.0 = Debug|Any CPU",
			" EndGlobalSection",
			"EndGlobal",
		]
		self.assertEqual(expected, self._lines(solution))

	def testFullDocument(self):
		"""Test the exact layout of a solution with items, folders and nesting"""
		app = SlnProject("App", "App.vcxproj", _guid1, "Src/App")
		lib = SlnProject("Lib", "Lib.csproj", _guid2, "Src/Libs/Lib")
		tool = SlnProject("Tool", "Tool.csproj", _guid3, "Tool")
		solution = SlnFile([app, lib, tool], ["Debug"], ["x64"], "11.00", solutionItemsGuid=_itemsGuid)
		solution.AddSolutionItems(["C:\\code\\README.md"])

		src, libs = SlnHierarchy.FromProjects([app, lib, tool]).folders

		expected = "\r\n".join([
			"Microsoft Visual Studio Solution File, Format Version 11.00",
			"Project(\"{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}\") = \"App\", \"App.vcxproj\", \"" + _guid1 + "\"",
			"EndProject",
			"Project(\"{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}\") = \"Lib\", \"Lib.csproj\", \"" + _guid2 + "\"",
			"EndProject",
			"Project(\"{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}\") = \"Tool\", \"Tool.csproj\", \"" + _guid3 + "\"",
			"EndProject",
			"Project(\"{2150E333-8FDC-42A3-9474-1A3956D46DE8}\") = \"Solution Items\", \"Solution Items\", \"" + _itemsGuid + "\" ",
			"\tProjectSection(SolutionItems) = preProject",
			"\t\tC:\\code\\README.md = C:\\code\\README.md",
			"\tEndProjectSection",
			"EndProject",
			"Project(\"{2150E333-8FDC-42A3-9474-1A3956D46DE8}\") = \"Src\", \"Src\", \"" + src.guid + "\"",
			"EndProject",
			"Project(\"{2150E333-8FDC-42A3-9474-1A3956D46DE8}\") = \"Libs\", \"Src\\Libs\", \"" + libs.guid + "\"",
			"EndProject",
			"Global",
			"\tGlobalSection(SolutionConfigurationPlatforms) = preSolution",
			"\t\tDebug|x64 = Debug|x64",
			" EndGlobalSection",
			"\tGlobalSection(ProjectConfigurationPlatforms) = preSolution",
			"\t\t" + _guid1 + ".Debug|x64.ActiveCfg = Debug|x64",
			"\t\t" + _guid1 + ".Debug|x64.Build.0 = Debug|x64",
			"\t\t" + _guid2 + ".Debug|x64.ActiveCfg = Debug|x64",
			"\t\t" + _guid2 + ".Debug|x64.Build.0 = Debug|x64",
			"\t\t" + _guid3 + ".Debug|x64.ActiveCfg = Debug|x64",
			"\t\t" + _guid3 + ".Debug|x64.Build.0 = Debug|x64",
			" EndGlobalSection",
			"\tGlobalSection(NestedProjects) = preSolution",
			"\t\t" + libs.guid + " = " + src.guid,
			"\t\t" + _guid1 + " = " + src.guid,
			"\t\t" + _guid2 + " = " + libs.guid,
			"\tEndGlobalSection",
			"EndGlobal",
			"",
		])
		self.assertEqual(expected, self._write(solution))

	def testDefaults(self):
		"""Test the default configurations, platforms and format version"""
		solution = SlnFile([SlnProject("App", "App.csproj", _guid1)])
		lines = self._lines(solution)
		self.assertEqual("Microsoft Visual Studio Solution File, Format Version 12.00", lines[0])
		self.assertIn("\t\tDebug|Any CPU = Debug|Any CPU", lines)
		self.assertIn("\t\tRelease|Any CPU = Release|Any CPU", lines)

	def testMatrixCounts(self):
		"""Test the number of configuration lines for several configurations and platforms"""
		projects = [SlnProject("P{}".format(i), "P{}.csproj".format(i), uuid.uuid4(), "Group/P{}".format(i)) for i in range(3)]
		configurations = ["Debug", "Release", "Profile"]
		platforms = ["x86", "x64"]
		lines = self._lines(SlnFile(projects, configurations, platforms))

		declarations = [line for line in lines if re.match(r"^\t\t[^{].*\|.* = ", line)]
		activeCfg = [line for line in lines if ".ActiveCfg = " in line]
		build = [line for line in lines if ".Build.0 = " in line]
		self.assertEqual(len(configurations) * len(platforms), len(declarations))
		self.assertEqual(2 * len(projects) * len(configurations) * len(platforms), len(activeCfg) + len(build))

	def testMatrixOrder(self):
		"""Test that configurations are the outer loop and caller order is kept"""
		solution = SlnFile([SlnProject("App", "App.csproj", _guid1)], ["Release", "Debug"], ["x64", "Win32"])
		declarations = [line.strip() for line in self._lines(solution) if line.startswith("\t\t") and "{" not in line]
		self.assertEqual(
			[
				"Release|x64 = Release|x64",
				"Release|Win32 = Release|Win32",
				"Debug|x64 = Debug|x64",
				"Debug|Win32 = Debug|Win32",
			],
			declarations
		)

	def testProjectBlockCount(self):
		"""Test that there is one header line and one block per project"""
		projects = [SlnProject("P{}".format(i), "P{}.csproj".format(i), uuid.uuid4()) for i in range(4)]
		lines = self._lines(SlnFile(projects))
		self.assertEqual(1, len([line for line in lines if line.startswith("Microsoft Visual Studio Solution File")]))
		self.assertEqual(len(projects), len([line for line in lines if line.startswith("Project(")]))
		self.assertEqual(len(projects), lines.count("EndProject"))

	def testNestingOnlyWithMultipleProjects(self):
		"""Test that the nesting section only appears when there is more than one project"""
		single = SlnFile([SlnProject("A", "A.csproj", uuid.uuid4(), "G/A")])
		self.assertNotIn("NestedProjects", self._write(single))

		multiple = SlnFile([SlnProject("A", "A.csproj", uuid.uuid4()), SlnProject("B", "B.csproj", uuid.uuid4())])
		self.assertEqual(1, self._write(multiple).count("\tGlobalSection(NestedProjects) = preSolution\r\n"))

	def testNoSolutionItemsBlockWhenEmpty(self):
		"""Test that the Solution Items folder is only written when there are solution items"""
		solution = SlnFile([SlnProject("A", "A.csproj", uuid.uuid4())])
		self.assertNotIn(SOLUTION_ITEMS_NAME, self._write(solution))

	def testSolutionItemsGuidChangesPerWrite(self):
		"""Test that the Solution Items GUID is regenerated on every write unless pinned"""
		solution = SlnFile([SlnProject("A", "A.csproj", uuid.uuid4())])
		solution.AddSolutionItems(["C:\\a.txt", "C:\\b.txt"])

		def _itemsLine(text):
			return [line for line in text.split("\r\n") if SOLUTION_ITEMS_NAME in line][0]

		self.assertNotEqual(_itemsLine(self._write(solution)), _itemsLine(self._write(solution)))
		self.assertIn("\t\tC:\\b.txt = C:\\b.txt\r\n", self._write(solution))

		pinned = SlnFile([SlnProject("A", "A.csproj", uuid.uuid4())], solutionItemsGuid=_itemsGuid)
		pinned.AddSolutionItems(["C:\\a.txt"])
		self.assertEqual(self._write(pinned), self._write(pinned))

	def testNoForwardReferences(self):
		"""Test that every GUID in the nesting section was declared before it"""
		projects = [
			SlnProject("A", "A.csproj", uuid.uuid4(), "X/Y/A"),
			SlnProject("B", "B.csproj", uuid.uuid4(), "X/B"),
			SlnProject("C", "C.csproj", uuid.uuid4(), "C"),
		]
		lines = self._lines(SlnFile(projects))
		nestingStart = lines.index("\tGlobalSection(NestedProjects) = preSolution")
		declared = set()
		for line in lines[:nestingStart]:
			if line.startswith("Project("):
				declared.add(line.rsplit(", ", 1)[1].strip().strip("\""))

		nestingEnd = lines.index("\tEndGlobalSection", nestingStart)
		entries = lines[nestingStart + 1:nestingEnd]
		self.assertEqual(3, len(entries))
		for entry in entries:
			child, parent = entry.strip().split(" = ")
			self.assertIn(child, declared)
			self.assertIn(parent, declared)

	def testCallerListsAreCopied(self):
		"""Test that changing the caller's lists after construction has no effect"""
		projects = [SlnProject("A", "A.csproj", _guid1)]
		configurations = ["Debug"]
		solution = SlnFile(projects, configurations)
		projects.append(SlnProject("B", "B.csproj", _guid2))
		configurations.append("Release")
		text = self._write(solution)
		self.assertNotIn(_guid2, text)
		self.assertNotIn("Release", text)

	def testWriteSolutionFunction(self):
		"""Test the module-level write helper"""
		solution = SlnFile([SlnProject("A", "A.csproj", _guid1)])
		stream = io.StringIO()
		WriteSolution(solution, stream)
		self.assertEqual(self._write(solution), stream.getvalue())

	def testStreamErrorsPropagate(self):
		"""Test that errors from the output stream are raised to the caller"""
		solution = SlnFile([SlnProject("A", "A.csproj", _guid1)])
		with self.assertRaises(IOError):
			solution.Write(_BrokenStream(3))

	def testSave(self):
		"""Test saving to disk writes a byte order marker and CRLF line endings"""
		tempDir = tempfile.mkdtemp(prefix="slngen_solution_")
		try:
			filePath = os.path.join(tempDir, "Test.sln")
			solution = SlnFile([SlnProject("A", "A.csproj", _guid1)])
			solution.Save(filePath)

			with open(filePath, "rb") as f:
				data = f.read()

			self.assertTrue(data.startswith(b"\xef\xbb\xbfMicrosoft Visual Studio Solution File, Format Version 12.00\r\n"))
			self.assertEqual(self._write(solution).encode("utf-8"), data[3:])
			self.assertEqual(["Test.sln"], os.listdir(tempDir))
		finally:
			shutil.rmtree(tempDir)

	def testSaveToMissingDirectoryRaises(self):
		"""Test that an unwritable destination raises instead of silently failing"""
		tempDir = tempfile.mkdtemp(prefix="slngen_solution_")
		try:
			solution = SlnFile([SlnProject("A", "A.csproj", _guid1)])
			with self.assertRaises(IOError):
				solution.Save(os.path.join(tempDir, "missing", "Test.sln"))
		finally:
			shutil.rmtree(tempDir)

	def testFailedSectionIsNotClosed(self):
		"""Test that nothing more is written once a write inside a section fails"""
		solution = SlnFile([SlnProject("A", "A.csproj", _guid1)], ["Debug"], ["Any CPU"])
		# The sixth write is the first configuration line inside Global.
		stream = _BrokenStream(5)
		with self.assertRaises(IOError):
			solution.Write(stream)
		self.assertEqual(6, stream.attempts)
		self.assertEqual("\tGlobalSection(SolutionConfigurationPlatforms) = preSolution\r\n", stream.lines[-1])

	def testFailedSaveKeepsExistingFile(self):
		"""Test that a save that fails partway through leaves the previous solution in place"""
		tempDir = tempfile.mkdtemp(prefix="slngen_solution_")
		try:
			filePath = os.path.join(tempDir, "Test.sln")
			SlnFile([SlnProject("A", "A.csproj", _guid1)]).Save(filePath)
			with open(filePath, "rb") as f:
				original = f.read()

			# A lone surrogate can't be encoded, so the write fails after the first project block.
			broken = SlnFile([SlnProject("A", "A.csproj", _guid1), SlnProject("B\ud800", "B.csproj", _guid2)])
			with self.assertRaises(UnicodeEncodeError):
				broken.Save(filePath)

			with open(filePath, "rb") as f:
				self.assertEqual(original, f.read())
			self.assertEqual(["Test.sln"], os.listdir(tempDir))
		finally:
			shutil.rmtree(tempDir)
