"""
Kaleidoscope Command-Line Interface
===================================

This package provides the command-line tools of the toolkit:

- **kparse**: parse Kaleidoscope programs and report each top-level
  construct

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["kparse"]
