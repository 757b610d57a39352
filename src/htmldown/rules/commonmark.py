#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/rules/commonmark.py
"""Built-in CommonMark conversion table.

Maps tag names to the name of the :class:`~htmldown.converter.DomToAstConverter`
method that converts them. The tag sets of the entries are disjoint, so at
most one built-in handler applies to any element. Elements with no entry fall
through to the converter's generic block or inline handling.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from htmldown.constants import HEADING_TAGS, SKIPPED_ELEMENTS

_RULES: dict[str, str] = {
    "p": "_convert_paragraph",
    "blockquote": "_convert_blockquote",
    "ul": "_convert_list",
    "ol": "_convert_list",
    "li": "_convert_list_item",
    "pre": "_convert_code_block",
    "hr": "_convert_thematic_break",
    "table": "_convert_table",
    "br": "_convert_line_break",
    "code": "_convert_inline_code",
    "a": "_convert_link",
    "img": "_convert_image",
    "strong": "_convert_strong",
    "b": "_convert_strong",
    "em": "_convert_emphasis",
    "i": "_convert_emphasis",
}
_RULES.update({tag: "_convert_heading" for tag in HEADING_TAGS})
_RULES.update({tag: "_skip" for tag in SKIPPED_ELEMENTS})

COMMONMARK_RULES: Mapping[str, str] = MappingProxyType(_RULES)


def builtin_handler(tag_name: str) -> Optional[str]:
    """Return the converter method name for ``tag_name``, or None."""
    return COMMONMARK_RULES.get(tag_name.lower())
