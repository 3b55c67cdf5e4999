#!/usr/bin/env python

from setuptools import setup

NAME = 'depot'
VERSION = '0.1.0'
DESC = "declarative schema migrations for sqlite timetable databases"
LONG_DESC = """\
depot is a simple SQLite database migrations library. Schema changes are
plain, reversible descriptors, and it ships the stations table of a
transit timetable database as its first migration.
"""
LICENSE = 'Public Domain'

setup( name = NAME
     , version = VERSION
     , description = DESC
     , long_description = LONG_DESC
     , license = LICENSE
     , platforms = 'any'
     , packages=['depot', 'depot.migrations']
     , python_requires='>=3.10'
     , install_requires=["pydantic-settings>=2.0"]
     , extras_require={'test': ["pytest>=7.0"]}
     , entry_points={'console_scripts': ['depot = depot.cli:main']}
     , classifiers=\
         [ 'Development Status :: 4 - Beta'
         , 'Intended Audience :: Developers'
         , 'License :: Public Domain'
         , 'Topic :: Database'
         , 'Topic :: Software Development :: Version Control'
         , 'Programming Language :: Python :: 3'
         ]
     )
