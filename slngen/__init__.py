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
.. package:: slngen
	:synopsis: Visual Studio solution file generator

.. moduleauthor:: Jaedyn K. Draper, Brandon M. Bare

Typical use::

	from slngen import SlnFile, SlnProject

	projects = [SlnProject.FromFile(path, rootPath) for path in projectPaths]
	solution = SlnFile(projects, ["Debug", "Release"], ["x64"])
	solution.AddSolutionItems(["C:/code/README.md"])
	solution.Save("C:/code/Everything.sln")
"""

import os

__author__ = "Jaedyn K. Draper, Brandon M. Bare"
__copyright__ = 'Copyright (C) 2018 Jaedyn K. Draper'
__license__ = 'MIT'

__maintainer__ = "Jaedyn K. Draper"
__status__ = "Development"

try:
	with open(os.path.join(os.path.dirname(__file__), "version"), "r") as versionFile:
		__version__ = versionFile.read().strip()
except IOError:
	__version__ = "ERR_VERSION_FILE_MISSING"

from .project import SlnProject, ProjectType, PROJECT_TYPE_GUIDS
from .hierarchy import SlnFolder, SlnHierarchy, BuildHierarchy
from .solution import SlnFile, WriteSolution, DEFAULT_CONFIGURATIONS, DEFAULT_PLATFORMS, DEFAULT_FILE_FORMAT_VERSION
