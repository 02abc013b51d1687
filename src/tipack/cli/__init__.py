"""
tipack Command-Line Interface
=============================

This package provides the command-line tool:

- **tipack**: Pack raw data into a TI calculator variable file

The tool is a Click application with help text and uniform error
reporting (see ``tipack.cli.errors``).
"""

__all__ = ["tipack"]
