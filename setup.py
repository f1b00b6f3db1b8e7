"""Build the wadtools package."""
from setuptools import setup


# All metadata is in pyproject.toml.
setup()
