#!/usr/bin/env python
"""Setup for skeptic Python package."""

from setuptools import find_packages, setup

setup(
    name="pyskeptic",
    version="0.1.0",
    description="Turn the code samples of markdown documents into tests",
    packages=find_packages(include=["skeptic", "skeptic.*"]),
    python_requires=">=3.11",
    install_requires=[
        "cattrs",
        "pandas",
        "pydantic>=2",
        "pydantic-settings>=2",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["skeptic=skeptic.cli:main"],
    },
)
