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
.. module:: hierarchy
	:synopsis: Builds the solution folder hierarchy from the logical paths of projects.

.. moduleauthor:: Brandon Bare
"""

import collections
import uuid

from ._utils import SplitPathSegments
from ._utils.guids import GuidGenerator
from ._testing import testcase
from .project import SlnProject

# Solution folders are joined with backslashes, matching what Visual Studio writes itself.
FOLDER_PATH_SEPARATOR = "\\"


class SlnFolder(collections.namedtuple("SlnFolder", ["name", "fullPath", "guid"])):
	"""
	Virtual solution folder. Folders aren't backed by anything on disk; they only exist to group projects in the IDE.

	:ivar name: Display name (the last segment of the folder path).
	:type name: str

	:ivar fullPath: Folder segments joined from the root.
	:type fullPath: str

	:ivar guid: Formatted folder GUID.
	:type guid: str
	"""
	__slots__ = ()

	typeGuid = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"


class SlnHierarchy(object):
	"""
	Folder hierarchy of a solution.

	:ivar folders: Every folder needed to hold the projects, in the order they were first encountered.
	:type folders: tuple[SlnFolder]

	:ivar hierarchy: Mapping of child GUID to parent GUID. Folder-to-folder entries come first, followed by
		project-to-folder entries.
	:type hierarchy: collections.OrderedDict[str, str]
	"""
	def __init__(self, folders, hierarchy):
		self.folders = tuple(folders)
		self.hierarchy = hierarchy

	@staticmethod
	def FromProjects(projects):
		"""
		Build the folder hierarchy for a list of projects.

		:param projects: Projects to place in folders.
		:type projects: collections.Sequence[slngen.project.SlnProject]

		:return: The hierarchy.
		:rtype: SlnHierarchy
		"""
		guids = GuidGenerator()
		folderMap = collections.OrderedDict()
		folderNesting = collections.OrderedDict()
		projectNesting = collections.OrderedDict()

		for project in projects:
			folderSegments = SplitPathSegments(project.path)[:-1]
			parentFolder = None

			for depth in range(1, len(folderSegments) + 1):
				folderPath = FOLDER_PATH_SEPARATOR.join(folderSegments[:depth])
				folder = folderMap.get(folderPath, None)

				if folder is None:
					folder = SlnFolder(folderSegments[depth - 1], folderPath, guids.Generate(folderPath))
					folderMap[folderPath] = folder

					# Top-level folders have no parent entry; the solution root is never listed.
					if parentFolder is not None:
						folderNesting[folder.guid] = parentFolder.guid

				parentFolder = folder

			if parentFolder is not None:
				projectNesting[project.guid] = parentFolder.guid

		hierarchy = collections.OrderedDict(folderNesting)
		hierarchy.update(projectNesting)

		return SlnHierarchy(folderMap.values(), hierarchy)


def BuildHierarchy(projects):
	"""
	Compute the folders and nesting map for a list of projects.

	:param projects: Projects to place in folders.
	:type projects: collections.Sequence[slngen.project.SlnProject]

	:return: Tuple of the folders and the mapping of child GUID to parent GUID.
	:rtype: tuple[tuple[SlnFolder], collections.OrderedDict[str, str]]
	"""
	hierarchy = SlnHierarchy.FromProjects(projects)
	return hierarchy.folders, hierarchy.hierarchy


def _project(name, path):
	return SlnProject(name, "{}.csproj".format(name), uuid.uuid4(), path)


class TestSlnHierarchy(testcase.TestCase):
	"""Test building the solution folder hierarchy"""

	# pylint: disable=invalid-name
	def testNoSeparators(self):
		"""Test that projects without folders produce no folders or nesting"""
		folders, nesting = BuildHierarchy([_project("A", "A"), _project("B", "B")])
		self.assertEqual((), folders)
		self.assertEqual(0, len(nesting))

	def testEmptyPath(self):
		"""Test that an empty path is treated as having no folders"""
		folders, nesting = BuildHierarchy([_project("A", "")])
		self.assertEqual((), folders)
		self.assertEqual(0, len(nesting))

	def testEmptyProjectList(self):
		"""Test that no projects means no folders"""
		folders, nesting = BuildHierarchy([])
		self.assertEqual((), folders)
		self.assertEqual(0, len(nesting))

	def testSharedPrefix(self):
		"""Test that projects with the same directory share one folder chain"""
		proj1 = _project("Proj1", "A/B/Proj1")
		proj2 = _project("Proj2", "A/B/Proj2")
		folders, nesting = BuildHierarchy([proj1, proj2])

		self.assertEqual(["A", "A\\B"], [folder.fullPath for folder in folders])
		self.assertEqual(["A", "B"], [folder.name for folder in folders])
		folderA, folderB = folders

		self.assertEqual(
			[(folderB.guid, folderA.guid), (proj1.guid, folderB.guid), (proj2.guid, folderB.guid)],
			list(nesting.items())
		)
		self.assertNotIn(folderA.guid, nesting)

	def testFolderEntriesBeforeProjectEntries(self):
		"""Test that folder nesting entries are listed before any project entries"""
		proj1 = _project("Proj1", "A/Proj1")
		proj2 = _project("Proj2", "B/C/Proj2")
		folders, nesting = BuildHierarchy([proj1, proj2])

		self.assertEqual(["A", "B", "B\\C"], [folder.fullPath for folder in folders])
		folderA, folderB, folderC = folders
		self.assertEqual(
			[(folderC.guid, folderB.guid), (proj1.guid, folderA.guid), (proj2.guid, folderC.guid)],
			list(nesting.items())
		)

	def testMixedSeparators(self):
		"""Test that forward and back slashes are both treated as separators"""
		proj1 = _project("Proj1", "A\\B/Proj1")
		proj2 = _project("Proj2", "A/B\\Proj2")
		folders, nesting = BuildHierarchy([proj1, proj2])
		self.assertEqual(["A", "A\\B"], [folder.fullPath for folder in folders])
		self.assertEqual(nesting[proj1.guid], nesting[proj2.guid])

	def testSameLeafNameDifferentFolders(self):
		"""Test that folders are keyed by full path rather than by name"""
		folders, _ = BuildHierarchy([_project("P1", "X/Common/P1"), _project("P2", "Y/Common/P2")])
		self.assertEqual(["X", "X\\Common", "Y", "Y\\Common"], [folder.fullPath for folder in folders])
		self.assertEqual(4, len({folder.guid for folder in folders}))

	def testUngroupedProjectsAreNotNested(self):
		"""Test that projects at the top level get no nesting entry"""
		top = _project("Top", "Top")
		nested = _project("Nested", "Group/Nested")
		_, nesting = BuildHierarchy([top, nested])
		self.assertNotIn(top.guid, nesting)
		self.assertIn(nested.guid, nesting)

	def testFolderCountIsBoundedByPrefixes(self):
		"""Test that there is never more than one folder per distinct prefix"""
		projects = [
			_project("P1", "A/B/C/P1"),
			_project("P2", "A/B/P2"),
			_project("P3", "A/D/P3"),
			_project("P4", "A/B/C/P4"),
		]
		folders, nesting = BuildHierarchy(projects)
		self.assertEqual(["A", "A\\B", "A\\B\\C", "A\\D"], [folder.fullPath for folder in folders])
		self.assertEqual(len(folders) - 1 + len(projects), len(nesting))

	def testRebuildIsStable(self):
		"""Test that building twice produces the same folders and nesting"""
		projects = [_project("P1", "A/B/P1"), _project("P2", "C/P2")]
		firstFolders, firstNesting = BuildHierarchy(projects)
		secondFolders, secondNesting = BuildHierarchy(projects)
		self.assertEqual(firstFolders, secondFolders)
		self.assertEqual(list(firstNesting.items()), list(secondNesting.items()))

	def testNestingReferencesKnownNodes(self):
		"""Test that every nesting entry refers to a known folder or project"""
		projects = [_project("P1", "A/B/P1"), _project("P2", "A/P2"), _project("P3", "P3")]
		folders, nesting = BuildHierarchy(projects)
		known = {folder.guid for folder in folders} | {project.guid for project in projects}
		folderGuids = {folder.guid for folder in folders}
		for child, parent in nesting.items():
			self.assertIn(child, known)
			self.assertIn(parent, folderGuids)
