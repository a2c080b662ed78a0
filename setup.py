#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import find_packages, setup


# Load the __version__ variable
exec(open('autovalidate/__version__.py').read())


with open('README.rst') as readme_file:
    long_description = readme_file.read()


setup_kwargs = {
    'name': "autovalidate",
    'version': __version__,  # noqa
    'description': "Promises with deferred callbacks, and a self-refreshing "
                   "API cache built on them",
    'long_description': long_description,
    'long_description_content_type': 'text/x-rst',
    'license': "GPLv3",
    'classifiers': [
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries"
    ],
    'keywords': "promise deferred future cache",
    'packages': find_packages(exclude=['tests', 'tests.*']),
    'python_requires': '>=3.6',
    'install_requires': [
        'appdirs>=1.4',
        'requests>=2.27.0',
    ],
    'extras_require': {
        'test': ['pytest', 'tox'],
    },
    'entry_points': {
        "console_scripts": [
            "autovalidate=autovalidate:main"
        ]
    },
    'zip_safe': False,
}


setup(**setup_kwargs)
