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
.. package:: _utils
	:synopsis: misc internal utility modules

.. moduleauthor:: Jaedyn K. Draper
"""

import re


# Both separators are accepted so logical paths written on any platform split the same way.
_pathSeparators = re.compile(r"[\\/]")


def PlatformString(inputStr):
	"""
	Get a str object regardless of whether the input was str or bytes.
	:return: str representation of inputStr
	:rtype: str
	"""
	if isinstance(inputStr, str):
		return inputStr
	return inputStr.decode("UTF-8")


def SplitPathSegments(path):
	"""
	Split a logical path into its non-empty segments, treating both forward and back slashes as separators.

	:param path: Path to split
	:type path: str
	:return: List of segments, empty if the path was empty
	:rtype: list[str]
	"""
	if not path:
		return []
	return [segment for segment in _pathSeparators.split(path) if segment]
