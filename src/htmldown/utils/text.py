#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/utils/text.py
r"""Whitespace collapsing and Markdown escaping for text content.

Both transforms share one forward scan, :func:`process_text`. Conversion
runs them in two stages: the converter collapses the raw text of each DOM
text node with :func:`collapse_whitespace`, so the Markdown AST holds
unescaped text, and the renderer escapes each text node with
:func:`escape_markdown` as it writes it out. Calling :func:`process_text`
with both flags applies the two stages at once to text that never passes
through a tree.

Characters that are always significant in Markdown are looked up in a
fixed table indexed by ASCII code point; characters that only matter at the
start of a line are checked when the scan sits at a line start (the start of
the string or the position after a newline).

Functions
---------
process_text : Collapse whitespace and escape in one pass
escape_markdown : Escape without collapsing whitespace
collapse_whitespace : Collapse without escaping
longest_run : Length of the longest run of a character

Examples
--------
    >>> process_text("  *hello*\n\n  world ")
    ' \\*hello\\* world '
    >>> escape_markdown("1. item")
    '1\\. item'
    >>> escape_markdown("# Title")
    '\\# Title'

"""

from __future__ import annotations

import re

# Characters escaped wherever they appear
_ALWAYS_ESCAPED_CHARS = "\\*_`[]"
_ESCAPE_TABLE: tuple[bool, ...] = tuple(chr(code) in _ALWAYS_ESCAPED_CHARS for code in range(128))

# Sequences escaped only at a line start. When collapsing, any whitespace
# character will become the required space.
_LINE_START_PATTERN = re.compile(r"#{1,6} |>|-|\+ |=+|~~~|\d+\. ")
_LINE_START_PATTERN_COLLAPSED = re.compile(r"#{1,6}\s|>|-|\+\s|=+|~~~|\d+\.\s")


def process_text(text: str, *, collapse: bool = True, escape: bool = True) -> str:
    r"""Collapse whitespace and escape Markdown characters in one pass.

    Parameters
    ----------
    text : str
        Raw, unescaped character data
    collapse : bool, default True
        Replace each run of Unicode whitespace with a single space. Newlines
        are whitespace, so a collapsed string has a single line start.
    escape : bool, default True
        Backslash-escape ``\ * _ ` [ ]`` everywhere, plus heading hashes,
        ``>``, ``-``, ``+ ``, ``=`` runs, ``~~~`` and ``N.`` sequences at
        line starts.

    Returns
    -------
    str
        Processed text

    """
    if not text or not (collapse or escape):
        return text

    pattern = _LINE_START_PATTERN_COLLAPSED if collapse else _LINE_START_PATTERN
    out: list[str] = []
    at_line_start = True
    in_whitespace = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]

        if collapse and ch.isspace():
            if not in_whitespace:
                out.append(" ")
                in_whitespace = True
            at_line_start = False
            i += 1
            continue
        in_whitespace = False

        if escape and at_line_start:
            match = pattern.match(text, i)
            if match is not None:
                token = match.group()
                if token[0].isdigit():
                    digits = token[:-2]
                    out.append(digits)
                    out.append("\\.")
                    i += len(digits) + 1
                    at_line_start = False
                    continue
                out.append("\\")
        at_line_start = False

        code = ord(ch)
        if ch == "\n":
            out.append(ch)
            at_line_start = True
        elif escape and code < 128 and _ESCAPE_TABLE[code]:
            out.append("\\")
            out.append(ch)
        else:
            out.append(ch)
        i += 1

    return "".join(out)


def escape_markdown(text: str) -> str:
    r"""Escape Markdown-significant characters without touching whitespace.

    Parameters
    ----------
    text : str
        Raw text

    Returns
    -------
    str
        Escaped text

    Examples
    --------
        >>> escape_markdown("a_b [c]")
        'a\\_b \\[c\\]'

    """
    return process_text(text, collapse=False, escape=True)


def collapse_whitespace(text: str) -> str:
    """Collapse every run of Unicode whitespace to a single space."""
    return process_text(text, collapse=True, escape=False)


def longest_run(text: str, char: str) -> int:
    """Return the length of the longest run of ``char`` in ``text``.

    Parameters
    ----------
    text : str
        Text to scan
    char : str
        Single character to count

    Returns
    -------
    int
        Longest consecutive run, 0 if ``char`` does not occur

    """
    longest = 0
    current = 0
    for ch in text:
        if ch == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest
