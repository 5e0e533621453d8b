# Copyright (C) 2016 Jaedyn K. Draper
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
.. module:: setup
	:synopsis: Setup script for slngen.

.. moduleauthor:: Zoe Bare
"""

from setuptools import setup

with open("slngen/version", "r") as f:
	slngenVersion = f.read().strip()

setup(
	name = "slngen",
	version = slngenVersion,
	packages = ["slngen", "slngen._utils", "slngen._testing"],
	package_data = {"slngen": ["version"]},
	python_requires = ">=3.6",
	entry_points = {
		"console_scripts": ["slngen = slngen.command_line:Main"],
	},
	author = "Jaedyn K. Draper",
	author_email = "jaedyn.pypi@jaedyn.co",
	url = "https://github.com/SleepingCatGames/csbuild2",
	description = "Visual Studio solution file generator",
	long_description = """slngen writes a Visual Studio .sln file for a list of project files, grouping the projects into solution folders that mirror the directories they live in.""",
	classifiers = [
		"Development Status :: 4 - Beta",
		"Environment :: Console",
		"Intended Audience :: Developers",
		"License :: OSI Approved :: MIT License",
		"Natural Language :: English",
		"Operating System :: Microsoft :: Windows",
		"Operating System :: MacOS :: MacOS X",
		"Operating System :: POSIX :: Linux",
		"Programming Language :: Python :: 3",
		"Topic :: Software Development :: Build Tools"
	]
)
