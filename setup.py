#!/usr/bin/env python3
"""Setup script for pcio-tools package."""

from setuptools import setup, find_packages

setup(
    name="pcio-tools",
    version="0.1.0",
    description="playingcards.io asset bundle builder",
    author="pcio-tools Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.0.0",
        "Pillow>=10.1.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
        "markdown>=3.4",
        "jsonschema>=4.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pcio=pcio.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
