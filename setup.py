#!/usr/bin/env python3
#
# sofa: typed documents for a lightweight Couch
# Copyright (C) 2011-2016 Novacut Inc
#
# This file is part of `sofa`.
#
# `sofa` is free software: you can redistribute it and/or modify it under
# the terms of the GNU Lesser General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option) any
# later version.
#
# `sofa` is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE.  See the GNU Lesser General Public License for more
# details.
#
# You should have received a copy of the GNU Lesser General Public License along
# with `sofa`.  If not, see <http://www.gnu.org/licenses/>.
#
# Authors:
#   Jason Gerard DeRose <jderose@novacut.com>
#

"""
Install `sofa`.
"""

import sys
if sys.version_info < (3, 8):
    sys.exit('Sofa requires Python 3.8 or newer')

from setuptools import setup, Command
import re
from os import path
import unittest


def get_version():
    tree = path.dirname(path.abspath(__file__))
    with open(path.join(tree, 'sofa', '__init__.py')) as fp:
        match = re.search(r"^__version__ = '([^']+)'", fp.read(), re.M)
    return match.group(1)


class Test(Command):
    description = 'run unit tests'

    user_options = [
        ('skip-all', None, 'skip all tests'),
    ]

    def initialize_options(self):
        self.skip_all = 0

    def finalize_options(self):
        pass

    def run(self):
        if self.skip_all:
            sys.exit(0)
        tree = path.dirname(path.abspath(__file__))
        suite = unittest.defaultTestLoader.discover(
            path.join(tree, 'sofa', 'tests'), top_level_dir=tree
        )
        result = unittest.TextTestRunner(verbosity=2).run(suite)
        if not result.wasSuccessful():
            raise SystemExit('2')


setup(
    name='sofa',
    description='typed documents for a lightweight Couch',
    version=get_version(),
    author='Jason Gerard DeRose',
    author_email='jderose@novacut.com',
    license='LGPLv3+',
    packages=['sofa', 'sofa.tests'],
    python_requires='>=3.8',
    install_requires=['httpx'],
    cmdclass={'test': Test},
)
