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
.. module:: project
	:synopsis: Project descriptors for projects listed in a solution file.

.. moduleauthor:: Brandon Bare
"""

import collections
import ntpath
import os
import shutil
import tempfile
import uuid

from unittest import mock
from xml.etree import ElementTree as ET

from ._utils import log
from ._utils.guids import FormatGuid, GuidGenerator
from ._testing import testcase


class ProjectType(object):
	"""
	Enum values representing project type tags. Each tag is the project file extension without its leading dot.
	"""
	CSharp = "csproj"
	VisualBasic = "vbproj"
	FSharp = "fsproj"
	Cpp = "vcxproj"
	Cloud = "ccproj"
	NuGet = "nuproj"
	Sql = "sqlproj"
	Wix = "wixproj"
	NodeJs = "njsproj"
	Python = "pyproj"
	ServiceFabric = "sfproj"


PROJECT_TYPE_GUIDS = {
	ProjectType.CSharp: "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}",
	ProjectType.VisualBasic: "{F184B08F-C81C-45F6-A57F-5ABD9991F28F}",
	ProjectType.FSharp: "{F2A71F9B-5D33-465A-A702-920D77279786}",
	ProjectType.Cpp: "{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}",
	ProjectType.Cloud: "{CC5FD16D-436D-48AD-A40C-5A424C6E3E79}",
	ProjectType.NuGet: "{FF286327-C783-4F7A-AB73-9BCBAD0D4460}",
	ProjectType.Sql: "{00D1A9C2-B5F0-4AF3-8072-F6C62B433612}",
	ProjectType.Wix: "{930C7802-8A8C-48F9-8165-68863BCCD9DD}",
	ProjectType.NodeJs: "{9092AA53-FB77-4645-B42D-1CCCA6BD08BD}",
	ProjectType.Python: "{888888A0-9F3D-457C-B088-3A5042F75D52}",
	ProjectType.ServiceFabric: "{A07B5EB6-E848-4116-A8D0-A826331D98C6}",
}

DEFAULT_PROJECT_TYPE_GUID = PROJECT_TYPE_GUIDS[ProjectType.CSharp]

def NormalizeTypeTag(typeTag):
	"""
	Normalize a project type tag so it can be looked up in PROJECT_TYPE_GUIDS.

	:param typeTag: Type tag or file extension (e.g., ".VcxProj").
	:type typeTag: str or None

	:return: Lower case tag without a leading dot.
	:rtype: str
	"""
	if not typeTag:
		return ""
	return typeTag.lower().lstrip(".")


def GetProjectTypeGuid(typeTag):
	"""
	Get the project type GUID for a type tag, falling back to the C# project type for unknown tags.

	:param typeTag: Type tag.
	:type typeTag: str

	:return: Formatted project type GUID.
	:rtype: str
	"""
	return PROJECT_TYPE_GUIDS.get(NormalizeTypeTag(typeTag), DEFAULT_PROJECT_TYPE_GUID)


def _readProjectGuid(fullPath):
	try:
		root = ET.parse(fullPath).getroot()
	except ET.ParseError as e:
		log.Warn("Unable to read project GUID from {}: {}", fullPath, e)
		return None

	# MSBuild project files may or may not carry the MSBuild xml namespace.
	for element in root.iter():
		if element.tag.rsplit("}", 1)[-1] == "ProjectGuid" and element.text and element.text.strip():
			try:
				return FormatGuid(element.text.strip())
			except ValueError:
				log.Warn("Ignoring malformed ProjectGuid '{}' in {}", element.text.strip(), fullPath)
				return None
	return None


def _getLogicalPath(name, projectDirPath, rootPath):
	try:
		relDirPath = os.path.relpath(projectDirPath, rootPath)
	except ValueError:
		# On Windows, paths on different drives have no relative path.
		return name

	if relDirPath == os.curdir or relDirPath == os.pardir or relDirPath.startswith(os.pardir + os.sep):
		# Projects in the root directory or outside of it are listed at the top level of the solution.
		return name

	parentPath = os.path.dirname(relDirPath)
	if not parentPath:
		return name
	return "{}/{}".format(parentPath.replace(os.sep, "/"), name)


class SlnProject(collections.namedtuple("SlnProject", ["name", "fullPath", "guid", "path", "typeTag"])):
	"""
	Immutable descriptor of a project listed in a solution.

	:ivar name: Display name of the project.
	:type name: str

	:ivar fullPath: Path to the project file written into the solution.
	:type fullPath: str

	:ivar guid: Formatted project GUID.
	:type guid: str

	:ivar path: Logical path of the project in the solution. Directory separators in it denote the chain of
		solution folders the project is nested under; the last segment is the project itself.
	:type path: str

	:ivar typeTag: Normalized project type tag.
	:type typeTag: str
	"""
	__slots__ = ()

	def __new__(cls, name, fullPath, guid, path=None, typeTag=None):
		if path is None:
			path = name
		if typeTag is None:
			typeTag = os.path.splitext(fullPath)[1]
		return super(SlnProject, cls).__new__(cls, name, fullPath, FormatGuid(guid), path, NormalizeTypeTag(typeTag))

	@property
	def typeGuid(self):
		"""
		:return: Project type GUID for this project's type tag.
		:rtype: str
		"""
		return GetProjectTypeGuid(self.typeTag)

	@staticmethod
	def FromFile(fullPath, rootPath, guidGenerator=None):
		"""
		Create a descriptor for a project file on disk.

		:param fullPath: Path to the project file.
		:type fullPath: str

		:param rootPath: Directory the solution's folder hierarchy is relative to.
		:type rootPath: str

		:param guidGenerator: Generator for GUIDs of projects that don't declare one. Projects sharing a generator never
			share a generated GUID. A new generator is used if not given.
		:type guidGenerator: slngen._utils.guids.GuidGenerator or None

		:return: New project descriptor.
		:rtype: SlnProject
		"""
		fullPath = os.path.abspath(fullPath)
		name = os.path.splitext(os.path.basename(fullPath))[0]
		logicalPath = _getLogicalPath(name, os.path.dirname(fullPath), os.path.abspath(rootPath))

		guid = None
		if os.path.isfile(fullPath):
			guid = _readProjectGuid(fullPath)
		if guid is None:
			# Undeclared project GUIDs are derived from the absolute path of the project file.
			if guidGenerator is None:
				guidGenerator = GuidGenerator(uuid.NAMESPACE_URL)
			guid = guidGenerator.Generate(os.path.normcase(fullPath))

		typeTag = NormalizeTypeTag(os.path.splitext(fullPath)[1])
		if typeTag not in PROJECT_TYPE_GUIDS:
			log.Warn("Unknown project type '{}' for {}, listing it as a C# project", typeTag, fullPath)

		log.Info("Found project {} ({}) at {}", name, guid, logicalPath)
		return SlnProject(name, fullPath, guid, logicalPath, typeTag)


class TestSlnProject(testcase.TestCase):
	"""Test project descriptors"""

	# pylint: disable=invalid-name
	def setUp(self):
		self.tempDir = tempfile.mkdtemp(prefix="slngen_project_")

	def tearDown(self):
		shutil.rmtree(self.tempDir)

	def _writeProject(self, relPath, contents):
		fullPath = os.path.join(self.tempDir, relPath)
		if not os.access(os.path.dirname(fullPath), os.F_OK):
			os.makedirs(os.path.dirname(fullPath))
		with open(fullPath, "w") as f:
			f.write(contents)
		return fullPath

	def testDefaults(self):
		"""Test that the logical path defaults to the name and the type tag to the file extension"""
		project = SlnProject("App", "C:\\code\\App\\App.VCXPROJ", "1b4e28ba-2fa1-11d2-883f-0016d3cca427")
		self.assertEqual("App", project.path)
		self.assertEqual("vcxproj", project.typeTag)
		self.assertEqual("{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}", project.typeGuid)
		self.assertEqual("{1B4E28BA-2FA1-11D2-883F-0016D3CCA427}", project.guid)

	def testExplicitTypeTag(self):
		"""Test that explicit type tags are normalized"""
		project = SlnProject("Lib", "Lib.proj", uuid.uuid4(), "Src/Lib", ".FsProj")
		self.assertEqual(ProjectType.FSharp, project.typeTag)
		self.assertEqual("{F2A71F9B-5D33-465A-A702-920D77279786}", project.typeGuid)

	def testUnknownTypeTagFallsBack(self):
		"""Test that unknown type tags use the C# project type"""
		project = SlnProject("Thing", "Thing.unknownproj", uuid.uuid4())
		self.assertEqual(DEFAULT_PROJECT_TYPE_GUID, project.typeGuid)

	def testImmutable(self):
		"""Test that descriptors can't be modified after construction"""
		project = SlnProject("App", "App.csproj", uuid.uuid4())
		with self.assertRaises(AttributeError):
			project.name = "Other"

	def testBadGuid(self):
		"""Test that malformed GUIDs are rejected at construction"""
		with self.assertRaises(ValueError):
			SlnProject("App", "App.csproj", "abc")

	def testFromFileReadsGuid(self):
		"""Test that ProjectGuid is read from the project file"""
		fullPath = self._writeProject(
			os.path.join("Src", "App", "App.csproj"),
			"<Project xmlns=\"http://schemas.microsoft.com/developer/msbuild/2003\"><PropertyGroup>"
			"<ProjectGuid>{a8f4d3c2-1111-4222-8333-944455556666}</ProjectGuid>"
			"</PropertyGroup></Project>"
		)
		project = SlnProject.FromFile(fullPath, self.tempDir)
		self.assertEqual("App", project.name)
		self.assertEqual("{A8F4D3C2-1111-4222-8333-944455556666}", project.guid)
		self.assertEqual("Src/App", project.path)
		self.assertEqual(ProjectType.CSharp, project.typeTag)
		self.assertEqual(os.path.abspath(fullPath), project.fullPath)

	def testFromFileGeneratesGuid(self):
		"""Test that projects without a ProjectGuid get a stable generated one"""
		fullPath = self._writeProject(os.path.join("Src", "Lib", "Core", "Core.vcxproj"), "<Project></Project>")
		first = SlnProject.FromFile(fullPath, self.tempDir)
		second = SlnProject.FromFile(fullPath, self.tempDir)
		self.assertEqual(first.guid, second.guid)
		self.assertEqual("Src/Lib/Core", first.path)

	def testFromFileAtRoot(self):
		"""Test that projects in or above the root directory are not nested"""
		fullPath = self._writeProject("Root.csproj", "<Project></Project>")
		self.assertEqual("Root", SlnProject.FromFile(fullPath, self.tempDir).path)

		nestedRoot = os.path.join(self.tempDir, "Sub")
		os.makedirs(nestedRoot)
		self.assertEqual("Root", SlnProject.FromFile(fullPath, nestedRoot).path)

	def testFromFileDirectChild(self):
		"""Test that a project in its own directory directly under the root is not nested"""
		fullPath = self._writeProject(os.path.join("Tool", "Tool.pyproj"), "<Project></Project>")
		project = SlnProject.FromFile(fullPath, self.tempDir)
		self.assertEqual("Tool", project.path)
		self.assertEqual(ProjectType.Python, project.typeTag)

	def testFromFileUnparseable(self):
		"""Test that a project that isn't valid xml still gets a descriptor"""
		fullPath = self._writeProject(os.path.join("Src", "Broken", "Broken.csproj"), "not xml at all")
		project = SlnProject.FromFile(fullPath, self.tempDir)
		self.assertEqual("Broken", project.name)
		self.assertEqual("Src/Broken", project.path)

	def testLogicalPathAcrossDrives(self):
		"""Test that a project on a different drive than the root is not nested"""
		with mock.patch.object(os.path, "relpath", ntpath.relpath):
			self.assertEqual("App", _getLogicalPath("App", "D:\\code\\Src\\App", "C:\\root"))

	def testFromFileAcrossDrives(self):
		"""Test that descriptors can be created when the root has no relative path to the project"""
		fullPath = self._writeProject(os.path.join("Src", "App", "App.csproj"), "<Project></Project>")
		with mock.patch.object(os.path, "relpath", side_effect=ValueError("path is on mount 'D:', start on mount 'C:'")):
			project = SlnProject.FromFile(fullPath, self.tempDir)
		self.assertEqual("App", project.path)

	def testFromFileSharedGenerator(self):
		"""Test that a shared generator hands out the same GUID a fresh one would"""
		fullPath = self._writeProject(os.path.join("Src", "Core", "Core.vcxproj"), "<Project></Project>")
		guids = GuidGenerator(uuid.NAMESPACE_URL)
		first = SlnProject.FromFile(fullPath, self.tempDir, guids)
		second = SlnProject.FromFile(fullPath, self.tempDir, guids)
		self.assertEqual(first.guid, second.guid)
		self.assertEqual(SlnProject.FromFile(fullPath, self.tempDir).guid, first.guid)
