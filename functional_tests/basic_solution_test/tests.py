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
.. module:: tests
	:synopsis: Generates a solution for a small tree of project files and checks the result

.. moduleauthor:: Jaedyn K. Draper
"""

import os

from slngen._testing.functional_test import FunctionalTest

_appPath = os.path.join("Src", "App", "App.csproj")
_corePath = os.path.join("Src", "Lib", "Core", "Core.vcxproj")
_packagerPath = os.path.join("Tools", "Packager", "Packager.pyproj")
_solutionPath = os.path.join("out", "Test.sln")

_folderTypeGuid = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"


def _declarationGuids(lines, typeGuid=None):
	guids = []
	for line in lines:
		if line.startswith("Project(") and (typeGuid is None or line.startswith("Project(\"{}\")".format(typeGuid))):
			guids.append(line.strip().rsplit(", ", 1)[1].strip("\""))
	return guids


def _sectionLines(lines, header):
	start = lines.index(header)
	end = start + 1
	while "EndGlobalSection" not in lines[end]:
		end += 1
	return lines[start + 1:end]


class BasicSolutionTest(FunctionalTest):
	"""Basic solution generation test"""

	# pylint: disable=invalid-name
	def testSolutionGeneration(self):
		"""Generate a solution for several nested projects and a solution item"""
		self.assertSlnGenSucceeds(
			_appPath, _corePath, _packagerPath,
			"--root", ".",
			"-o", _solutionPath,
			"-s", "README.md",
			"-c", "Debug", "-c", "Release",
			"-p", "x64",
		)

		lines = self.ReadSolutionLines(_solutionPath)
		self.assertEqual("Microsoft Visual Studio Solution File, Format Version 12.00", lines[0])

		projectLines = [line for line in lines if line.startswith("Project(") and _folderTypeGuid not in line]
		self.assertEqual(
			[
				"Project(\"{{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}}\") = \"App\", \"{}\", \"{{A8F4D3C2-1111-4222-8333-944455556666}}\"".format(os.path.abspath(_appPath)),
				"Project(\"{{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}}\") = \"Core\", \"{}\", ".format(os.path.abspath(_corePath)),
				"Project(\"{{888888A0-9F3D-457C-B088-3A5042F75D52}}\") = \"Packager\", \"{}\", \"{{B0B8A2D4-5E1F-4C3A-9D7E-0123456789AB}}\"".format(os.path.abspath(_packagerPath)),
			],
			[projectLines[0], projectLines[1].rsplit("\"{", 1)[0], projectLines[2]]
		)

		readmePath = os.path.abspath("README.md")
		itemsIndex = lines.index("\tProjectSection(SolutionItems) = preProject")
		self.assertTrue(lines[itemsIndex - 1].startswith("Project(\"{}\") = \"Solution Items\", \"Solution Items\", ".format(_folderTypeGuid)))
		self.assertEqual("\t\t{0} = {0}".format(readmePath), lines[itemsIndex + 1])
		self.assertEqual("\tEndProjectSection", lines[itemsIndex + 2])

		folderLines = [line for line in lines if line.startswith("Project(\"{}\")".format(_folderTypeGuid)) and "Solution Items" not in line]
		self.assertEqual(
			["\"Src\", \"Src\"", "\"Lib\", \"Src\\Lib\"", "\"Tools\", \"Tools\""],
			[line.split(" = ", 1)[1].rsplit(", ", 1)[0] for line in folderLines]
		)

		self.assertEqual(
			["Debug|x64 = Debug|x64", "Release|x64 = Release|x64"],
			[line.strip() for line in _sectionLines(lines, "\tGlobalSection(SolutionConfigurationPlatforms) = preSolution")]
		)
		self.assertEqual(12, len(_sectionLines(lines, "\tGlobalSection(ProjectConfigurationPlatforms) = preSolution")))

		projectGuids = _declarationGuids(projectLines)
		srcGuid, libGuid, toolsGuid = _declarationGuids(folderLines)
		nesting = [line.strip() for line in _sectionLines(lines, "\tGlobalSection(NestedProjects) = preSolution")]
		self.assertEqual(
			[
				"{} = {}".format(libGuid, srcGuid),
				"{} = {}".format(projectGuids[0], srcGuid),
				"{} = {}".format(projectGuids[1], libGuid),
				"{} = {}".format(projectGuids[2], toolsGuid),
			],
			nesting
		)
		self.assertEqual("EndGlobal", lines[-1])

	def testSingleProject(self):
		"""A single project still gets its folder but no nesting section"""
		self.assertSlnGenSucceeds(_appPath, "--root", ".", "-o", _solutionPath)

		lines = self.ReadSolutionLines(_solutionPath)
		self.assertEqual(1, len([line for line in lines if line.startswith("Project(\"{}\") = \"Src\"".format(_folderTypeGuid))]))
		self.assertNotIn("\tGlobalSection(NestedProjects) = preSolution", lines)
		self.assertEqual(
			["Debug|Any CPU = Debug|Any CPU", "Release|Any CPU = Release|Any CPU"],
			[line.strip() for line in _sectionLines(lines, "\tGlobalSection(SolutionConfigurationPlatforms) = preSolution")]
		)

	def testNoProjectsFails(self):
		"""Running without projects is a usage error"""
		self.assertSlnGenFails("at least one project file is required", "-o", _solutionPath)
