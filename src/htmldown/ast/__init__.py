#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/ast/__init__.py
"""Markdown AST built by the converter and consumed by the renderer.

Examples
--------
    >>> from htmldown.ast import Document, Heading, Paragraph, Text
    >>> from htmldown.renderer import MarkdownRenderer
    >>>
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")]),
    ...     Paragraph(content=[Text(content="Hello world")])
    ... ])
    >>> MarkdownRenderer().render_to_string(doc)
    'Title\\n=====\\n\\nHello world'

"""

from __future__ import annotations

from htmldown.ast.nodes import (
    Block,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    Inline,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Strong,
    Table,
    Text,
    ThematicBreak,
    is_blank,
)
from htmldown.ast.visitors import NodeVisitor

__all__ = [
    "Block",
    "BlockQuote",
    "Code",
    "CodeBlock",
    "Document",
    "Emphasis",
    "Heading",
    "HTMLBlock",
    "HTMLInline",
    "Image",
    "Inline",
    "LineBreak",
    "Link",
    "List",
    "ListItem",
    "Node",
    "NodeVisitor",
    "Paragraph",
    "Strong",
    "Table",
    "Text",
    "ThematicBreak",
    "is_blank",
]
