#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/utils/__init__.py
"""Utility modules for the htmldown package."""

from htmldown.utils.text import collapse_whitespace, escape_markdown, longest_run, process_text

__all__ = [
    "collapse_whitespace",
    "escape_markdown",
    "longest_run",
    "process_text",
]
