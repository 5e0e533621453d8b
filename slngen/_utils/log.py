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
.. module:: log
	:synopsis: Console logging system with color markup

.. moduleauthor:: Jaedyn K. Draper
"""

import sys
import re

from . import terminfo, shared_globals

Color = terminfo.TermColor
_reset = terminfo.TermInfo.Escape(Color.RESET)

_markupSplit = re.compile(R"(<&\w*>)(.*?)(</&>|$)")
_markupOpen = re.compile(R"<&(\w*)>")


def _colorize(msg):
	pieces = []
	for piece in _markupSplit.split(msg):
		match = _markupOpen.match(piece)
		if match:
			pieces.append(terminfo.TermInfo.Escape(getattr(Color, match.group(1))))
		elif piece == "</&>":
			pieces.append(_reset)
		else:
			pieces.append(piece)
	return "".join(pieces)


def _writeLog(color, level, msg):
	if shared_globals.colorSupported:
		line = "{}{}: {}{}{}\n".format(terminfo.TermInfo.Escape(color), level, _reset, _colorize(msg), _reset)
	else:
		line = "{}: {}\n".format(level, StripMarkup(msg))

	sys.stdout.write(line)
	sys.stdout.flush()

	if shared_globals.logFile:
		shared_globals.logFile.write("{0}: {1}\n".format(level, StripMarkup(msg)))


def _logMsg(color, level, msg, quietThreshold):
	"""Print a message to stdout"""
	if shared_globals.verbosity < quietThreshold:
		if isinstance(msg, bytes):
			msg = msg.decode("UTF-8")
		_writeLog(color, level, msg)


def _formatMsg(msg, *args, **kwargs):
	if not isinstance(msg, bytes) and not isinstance(msg, str):
		return repr(msg)
	elif args or kwargs:
		return msg.format(*args, **kwargs)
	return msg


def StripMarkup(msg):
	"""
	Remove color markup tags from a log message.

	:param msg: Message text
	:type msg: str
	:return: The message without any <&COLOR> or </&> tags
	:rtype: str
	"""
	return "".join(piece for piece in _markupSplit.split(msg) if not _markupOpen.match(piece) and piece != "</&>")


def Error(msg, *args, **kwargs):
	"""
	Log an error message

	:param msg: Text to log
	:type msg: bytes or str
	:param args: Args to str.format
	:type args: any
	:param kwargs: args to str.format
	:type kwargs: any
	"""
	msg = _formatMsg(msg, *args, **kwargs)
	_logMsg(Color.RED, "ERROR", msg, 3)
	shared_globals.errors.append(msg)


def Warn(msg, *args, **kwargs):
	"""
	Log a warning

	:param msg: Text to log
	:type msg: bytes or str
	:param args: Args to str.format
	:type args: any
	:param kwargs: args to str.format
	:type kwargs: any
	"""
	msg = _formatMsg(msg, *args, **kwargs)
	_logMsg(Color.YELLOW, "WARN", msg, 3)
	shared_globals.warnings.append(msg)


def Info(msg, *args, **kwargs):
	"""
	Log general info. This info only appears with -v specified.

	:param msg: Text to log
	:type msg: str
	:param args: Args to str.format
	:type args: any
	:param kwargs: args to str.format
	:type kwargs: any
	"""
	msg = _formatMsg(msg, *args, **kwargs)
	_logMsg(Color.CYAN, "INFO", msg, 1)


def Build(msg, *args, **kwargs):
	"""
	Log info related to generating solution output

	:param msg: Text to log
	:type msg: str
	:param args: Args to str.format
	:type args: any
	:param kwargs: args to str.format
	:type kwargs: any
	"""
	msg = _formatMsg(msg, *args, **kwargs)
	_logMsg(Color.MAGENTA, "BUILD", msg, 2)


def Test(msg, *args, **kwargs):
	"""
	Log info related to testing - used by the unit test framework

	:param msg: Text to log
	:type msg: str
	:param args: Args to str.format
	:type args: any
	:param kwargs: args to str.format
	:type kwargs: any
	"""
	msg = _formatMsg(msg, *args, **kwargs)
	_logMsg(Color.MAGENTA, "TEST", msg, 2)
