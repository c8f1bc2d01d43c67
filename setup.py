#!/usr/bin/env python3
"""
Setup script for Query Engine package.
"""

import re

from setuptools import setup, find_packages

# Read package metadata without importing the package
metadata = {}
with open("query_engine/__init__.py") as f:
    for key, value in re.findall(r'^__(\w+)__ = "([^"]*)"', f.read(), re.MULTILINE):
        metadata[key] = value

# Read requirements
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="query-engine",
    version=metadata["version"],
    author=metadata["author"],
    description="Execute structured database requests against a pooled PostgreSQL connection",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "query-engine=query_engine.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="database postgresql connection pool transaction query",
)
