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
.. module:: terminfo
	:synopsis: Terminal info - detects color support and provides the escape codes used for colored log output

.. moduleauthor:: Jaedyn K. Draper
"""

import io
import platform
import sys

if platform.system() == "Windows":
	import ctypes
else:
	import curses

# Lets a Windows 10+ console interpret ANSI escape sequences.
_ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
_STD_OUTPUT_HANDLE = -11


class TermColor(object):
	"""
	SGR parameters for the colors used in log markup.
	"""
	# pylint: disable=invalid-name
	DGREY = "1;30"
	RED = "1;31"
	GREEN = "1;32"
	YELLOW = "1;33"
	BLUE = "1;34"
	MAGENTA = "1;35"
	CYAN = "1;36"
	WHITE = "1;37"
	DRED = "22;31"
	DGREEN = "22;32"
	RESET = "0"


def _enableWindowsVirtualTerminal():
	kernel32 = ctypes.windll.kernel32
	handle = kernel32.GetStdHandle(_STD_OUTPUT_HANDLE)
	mode = ctypes.c_uint32()

	if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
		return False
	if mode.value & _ENABLE_VIRTUAL_TERMINAL_PROCESSING:
		return True
	return bool(kernel32.SetConsoleMode(handle, mode.value | _ENABLE_VIRTUAL_TERMINAL_PROCESSING))


def _cursesColorCount():
	try:
		curses.setupterm(fd=sys.stdout.fileno())
	except (curses.error, io.UnsupportedOperation):
		return 0
	return curses.tigetnum("colors")


class TermInfo(object):
	"""
	Color support detection and escape codes for the active terminal.
	"""

	@staticmethod
	def Escape(color):
		"""
		Get the escape sequence that switches the terminal to a color.

		:param color: The desired color
		:type color: TermColor value
		:return: ANSI escape sequence
		:rtype: str
		"""
		return "\033[{}m".format(color)

	@staticmethod
	def SupportsColor():
		"""
		Check whether stdout is a terminal that can display colors. On Windows this also switches the console into
		virtual terminal mode so it understands escape sequences.

		:return: Whether or not color is supported
		:rtype: bool
		"""
		if not sys.stdout.isatty():
			return False
		if platform.system() == "Windows":
			return _enableWindowsVirtualTerminal()
		return _cursesColorCount() >= 8
