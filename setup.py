"""
Setup script for MOLDPLAN - Injection Molding Production Planner

This file provides backwards compatibility for older pip versions.
For modern installations, pyproject.toml is preferred.
"""

from setuptools import setup, find_packages

setup(
    name="moldplan",
    packages=find_packages(include=["moldplan", "moldplan.*"]),
    include_package_data=True,
)
