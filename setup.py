#!/usr/bin/env python3
"""Setup script for ssoconfig package."""

from setuptools import setup, find_packages

version = "0.1.0"

setup(
    name="ssoconfig",
    version=version,
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1",
        "rich>=13.0",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ssoconfig=ssoconfig.cli.main:cli",
        ],
    },
)
