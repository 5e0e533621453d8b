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
.. module:: guids
	:synopsis: Helpers for creating and formatting GUIDs the way solution files expect them

.. moduleauthor:: Brandon Bare
"""

import re
import uuid

from . import PlatformString
from .._testing import testcase


def FormatGuid(value):
	"""
	Format a GUID as an upper case, brace-wrapped string (e.g., "{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}").

	:param value: GUID to format. Strings may be given with or without braces and in any case.
	:type value: uuid.UUID or str

	:raises ValueError: If a string value is not a valid GUID.

	:return: Formatted GUID string.
	:rtype: str
	"""
	if not isinstance(value, uuid.UUID):
		value = uuid.UUID(PlatformString(value))
	return "{{{}}}".format(str(value)).upper()


def NewGuid():
	"""
	Create a new random GUID.

	:return: Formatted GUID string.
	:rtype: str
	"""
	return FormatGuid(uuid.uuid4())


class GuidGenerator(object):
	"""
	Creates deterministic GUIDs from names. Every name maps to the same GUID each time it is requested, and no two names
	requested from the same generator will ever share a GUID.
	"""
	def __init__(self, namespace=uuid.NAMESPACE_OID):
		self.namespace = namespace
		self._tracker = {}

	def Generate(self, name):
		"""
		Get the GUID for a name.

		:param name: Name to hash.
		:type name: str

		:return: Formatted GUID string.
		:rtype: str
		"""
		if not name:
			return FormatGuid(uuid.UUID(int=0))

		name = PlatformString(name)
		nameIndex = 0
		nameToHash = name

		# On a collision, modify the name in a predictable way and hash again.
		while True:
			newUuid = uuid.uuid5(self.namespace, nameToHash)
			mappedName = self._tracker.get(newUuid, None)

			if mappedName is None:
				self._tracker[newUuid] = name
				return FormatGuid(newUuid)

			if mappedName == name:
				return FormatGuid(newUuid)

			nameToHash = "{}{}".format(name, nameIndex)
			nameIndex += 1


class TestGuids(testcase.TestCase):
	"""Test GUID formatting and generation"""

	# pylint: disable=invalid-name
	def testFormatUuidObject(self):
		"""Test that UUID objects are formatted upper case with braces"""
		value = uuid.UUID("8bc9ceb8-8b4a-11d0-8d11-00a0c91bc942")
		self.assertEqual("{8BC9CEB8-8B4A-11D0-8D11-00A0C91BC942}", FormatGuid(value))

	def testFormatString(self):
		"""Test that strings with or without braces normalize to the same output"""
		expected = "{2150E333-8FDC-42A3-9474-1A3956D46DE8}"
		self.assertEqual(expected, FormatGuid("2150e333-8fdc-42a3-9474-1a3956d46de8"))
		self.assertEqual(expected, FormatGuid("{2150E333-8FDC-42A3-9474-1A3956D46DE8}"))
		self.assertEqual(expected, FormatGuid("2150E3338FDC42A394741A3956D46DE8"))

	def testFormatRejectsGarbage(self):
		"""Test that non-GUID strings are rejected"""
		with self.assertRaises(ValueError):
			FormatGuid("not-a-guid")

	def testNewGuidShape(self):
		"""Test that new GUIDs are random and use the 8-4-4-4-12 layout"""
		first = NewGuid()
		second = NewGuid()
		pattern = re.compile(r"^\{[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}\}$")
		self.assertRegex(first, pattern)
		self.assertRegex(second, pattern)
		self.assertNotEqual(first, second)

	def testGeneratorIsDeterministic(self):
		"""Test that the same name produces the same GUID across generators"""
		self.assertEqual(GuidGenerator().Generate("Src\\Lib"), GuidGenerator().Generate("Src\\Lib"))
		self.assertEqual(FormatGuid(uuid.uuid5(uuid.NAMESPACE_OID, "Src")), GuidGenerator().Generate("Src"))

	def testGeneratorRepeatsForSameName(self):
		"""Test that asking twice for one name returns the same GUID"""
		generator = GuidGenerator()
		self.assertEqual(generator.Generate("Tools"), generator.Generate("Tools"))

	def testGeneratorDistinctNames(self):
		"""Test that different names produce different GUIDs"""
		generator = GuidGenerator()
		self.assertNotEqual(generator.Generate("Src"), generator.Generate("Tests"))

	def testGeneratorEmptyName(self):
		"""Test that an empty name maps to the nil GUID"""
		self.assertEqual("{00000000-0000-0000-0000-000000000000}", GuidGenerator().Generate(""))

	def testGeneratorRehashesOnCollision(self):
		"""Test that a colliding hash is re-derived from a suffixed name"""
		generator = GuidGenerator()
		# Claim the hash of "Src" for a different name to force a collision.
		generator._tracker[uuid.uuid5(uuid.NAMESPACE_OID, "Src")] = "Other" # pylint: disable=protected-access
		self.assertEqual(FormatGuid(uuid.uuid5(uuid.NAMESPACE_OID, "Src0")), generator.Generate("Src"))
