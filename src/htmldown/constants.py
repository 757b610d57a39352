#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the htmldown library.

This module centralizes the option vocabularies, default values and element
classification tables used by the converter and the renderer.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Default Option Values - turndown-compatible defaults
3. Element Classification - block, void and special-purpose tag tables
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

HeadingStyle = Literal["setext", "atx"]
BulletListMarker = Literal["*", "-", "+"]
CodeBlockStyle = Literal["indented", "fenced"]
FenceToken = Literal["```", "~~~"]
EmDelimiter = Literal["_", "*"]
StrongDelimiter = Literal["**", "__"]
LinkStyle = Literal["inlined", "referenced"]
LinkReferenceStyle = Literal["full", "collapsed", "shortcut"]
HtmlParserName = Literal["html.parser", "lxml", "html5lib"]

HEADING_STYLES: tuple[str, ...] = ("setext", "atx")
BULLET_LIST_MARKERS: tuple[str, ...] = ("*", "-", "+")
CODE_BLOCK_STYLES: tuple[str, ...] = ("indented", "fenced")
FENCE_TOKENS: tuple[str, ...] = ("```", "~~~")
EM_DELIMITERS: tuple[str, ...] = ("_", "*")
STRONG_DELIMITERS: tuple[str, ...] = ("**", "__")
LINK_STYLES: tuple[str, ...] = ("inlined", "referenced")
LINK_REFERENCE_STYLES: tuple[str, ...] = ("full", "collapsed", "shortcut")
HTML_PARSERS: tuple[str, ...] = ("html.parser", "lxml", "html5lib")

# =============================================================================
# Default Option Values
# =============================================================================

DEFAULT_HEADING_STYLE: HeadingStyle = "setext"
DEFAULT_HR = "* * *"
DEFAULT_BULLET_LIST_MARKER: BulletListMarker = "*"
DEFAULT_CODE_BLOCK_STYLE: CodeBlockStyle = "indented"
DEFAULT_FENCE: FenceToken = "```"
DEFAULT_EM_DELIMITER: EmDelimiter = "_"
DEFAULT_STRONG_DELIMITER: StrongDelimiter = "**"
DEFAULT_LINK_STYLE: LinkStyle = "inlined"
DEFAULT_LINK_REFERENCE_STYLE: LinkReferenceStyle = "full"
DEFAULT_HTML_PARSER: HtmlParserName = "html.parser"

# Indentation used by indented code blocks
CODE_BLOCK_INDENT = "    "

# Separator row cell for Markdown tables (alignment markers are not emitted)
TABLE_SEPARATOR_CELL = "---"

# Mapping of turndown option names (camelCase) to TurndownOptions fields
CAMEL_CASE_OPTION_NAMES: dict[str, str] = {
    "headingStyle": "heading_style",
    "hr": "hr",
    "bulletListMarker": "bullet_list_marker",
    "codeBlockStyle": "code_block_style",
    "fence": "fence",
    "emDelimiter": "em_delimiter",
    "strongDelimiter": "strong_delimiter",
    "linkStyle": "link_style",
    "linkReferenceStyle": "link_reference_style",
    "htmlParser": "html_parser",
}

# =============================================================================
# Element Classification
# =============================================================================

# Block-level HTML elements; everything else is treated as inline
BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "audio",
        "blockquote",
        "body",
        "canvas",
        "center",
        "dd",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "html",
        "isindex",
        "li",
        "main",
        "menu",
        "nav",
        "noframes",
        "noscript",
        "ol",
        "output",
        "p",
        "pre",
        "section",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

# Void elements never have children or a closing tag
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose content is never converted
SKIPPED_ELEMENTS = frozenset({"head", "script", "style", "template", "noscript"})

# Elements whose raw text is preserved
PREFORMATTED_ELEMENTS = frozenset({"pre"})

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
LIST_TAGS = frozenset({"ul", "ol"})
TABLE_SECTION_TAGS = frozenset({"thead", "tbody", "tfoot"})
TABLE_CELL_TAGS = frozenset({"th", "td"})

# Class prefix carrying the language of a code block
CODE_LANGUAGE_CLASS_PREFIX = "language-"
