"""
CLI layer for donut-spine.

Terminal transport only: argument parsing, coloured output and tables.
The work itself lives in ``donut.attributes`` and ``donut.publisher``.

Entry point::

    donut --help
"""

from donut.cli.app import app

__all__ = ["app"]
