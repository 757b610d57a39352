#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/ast/nodes.py
"""AST node classes for the Markdown produced from HTML.

The converter builds these nodes from the input DOM and the renderer
serializes them. Nodes carry no source information; every node is a plain
mutable dataclass owned by exactly one parent.

Node Hierarchy
--------------
Block-level nodes:
    - Document, Paragraph, Heading, BlockQuote
    - List, ListItem, CodeBlock, ThematicBreak
    - Table, HTMLBlock

Inline nodes:
    - Text, Strong, Emphasis, Code
    - Link, Image, LineBreak, HTMLInline

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union


class Node(ABC):
    """Base class for all AST nodes.

    All nodes support the visitor pattern through :meth:`accept`.
    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing the converted blocks.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in document order

    """

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_document(self)``."""
        return visitor.visit_document(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes representing paragraph content

    """

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_paragraph(self)``."""
        return visitor.visit_paragraph(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level; values outside 1-6 are clamped into range
    content : list of Node, default = empty list
        Inline nodes representing heading text

    """

    level: int
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Clamp the heading level into the 1-6 range."""
        self.level = min(max(self.level, 1), 6)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_heading(self)``."""
        return visitor.visit_heading(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing nested blocks.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes inside the quote

    """

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_block_quote(self)``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for bulleted lists
    start : int, default = 1
        Number of the first item; only meaningful when ``ordered`` is true
    items : list of Node, default = empty list
        List items in document order. An item replaced by a custom rule or
        kept as HTML is an :class:`HTMLBlock` rendered without a marker.

    """

    ordered: bool
    start: int = 1
    items: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_list(self)``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item node containing block content.

    An item whose source held only inline content carries a single
    :class:`Paragraph`. Nested lists appear as further children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item

    """

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_list_item(self)``."""
        return visitor.visit_list_item(self)


@dataclass
class CodeBlock(Node):
    """Code block node with optional language.

    Parameters
    ----------
    code : str
        Raw code text, never escaped
    language : str or None, default = None
        Language taken from a ``language-*`` class
    fenced : bool, default = False
        Render with fences even when the renderer defaults to indented blocks

    """

    code: str
    language: Optional[str] = None
    fenced: bool = False

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_code_block(self)``."""
        return visitor.visit_code_block(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule) node."""

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_thematic_break(self)``."""
        return visitor.visit_thematic_break(self)


@dataclass
class Table(Node):
    """Table node.

    Every row has exactly as many cells as the header; the converter pads and
    truncates rows to that width.

    Parameters
    ----------
    headers : list of list of Node, default = empty list
        Header cells, each a list of inline nodes
    rows : list, default = empty list
        Body rows, each a list of cells. A row replaced by a custom rule or
        kept as HTML is an :class:`HTMLBlock` emitted as its own line.

    """

    headers: list[list[Node]] = field(default_factory=list)
    rows: list[Union[list[list[Node]], HTMLBlock]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_table(self)``."""
        return visitor.visit_table(self)


@dataclass
class HTMLBlock(Node):
    """Verbatim block content.

    Holds either the outer HTML of a kept element or the output of a custom
    rule attached to a block element. The renderer emits it unchanged.

    Parameters
    ----------
    content : str
        Content emitted as-is

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_html_block(self)``."""
        return visitor.visit_html_block(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node.

    Parameters
    ----------
    content : str
        Text with whitespace already collapsed; escaping happens at render time

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_text(self)``."""
        return visitor.visit_text(self)


@dataclass
class Strong(Node):
    """Strong emphasis node."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_strong(self)``."""
        return visitor.visit_strong(self)


@dataclass
class Emphasis(Node):
    """Emphasis node."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_emphasis(self)``."""
        return visitor.visit_emphasis(self)


@dataclass
class Code(Node):
    """Inline code node.

    Parameters
    ----------
    content : str
        Code text, never escaped

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_code(self)``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink node.

    Parameters
    ----------
    content : list of Node
        Inline nodes representing link text
    url : str
        Link destination as found in ``href`` (trimmed)
    title : str or None, default = None
        Optional link title

    """

    content: list[Node]
    url: str
    title: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_link(self)``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image node.

    Parameters
    ----------
    url : str
        Image source
    alt_text : str, default = ''
        Alternative text
    title : str or None, default = None
        Optional image title

    """

    url: str
    alt_text: str = ""
    title: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_image(self)``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break node."""

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_line_break(self)``."""
        return visitor.visit_line_break(self)


@dataclass
class HTMLInline(Node):
    """Verbatim inline content.

    Inline counterpart of :class:`HTMLBlock`.

    Parameters
    ----------
    content : str
        Content emitted as-is

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Return ``visitor.visit_html_inline(self)``."""
        return visitor.visit_html_inline(self)


Block = Union[Document, Paragraph, Heading, BlockQuote, List, ListItem, CodeBlock, ThematicBreak, Table, HTMLBlock]
Inline = Union[Text, Strong, Emphasis, Code, Link, Image, LineBreak, HTMLInline]


def is_blank(node: Node) -> bool:
    """Return True if the node would serialize to nothing.

    Thematic breaks, images, line breaks and links are never blank. Containers
    are blank when all of their children are blank.

    Parameters
    ----------
    node : Node
        Node to inspect

    Returns
    -------
    bool
        Whether the node renders to an empty or whitespace-only string

    """
    if isinstance(node, (ThematicBreak, Image, LineBreak, Link)):
        return False
    if isinstance(node, Table):
        return not node.headers
    if isinstance(node, (Text, HTMLBlock, HTMLInline)):
        return not node.content.strip()
    if isinstance(node, CodeBlock):
        return not node.code.strip()
    if isinstance(node, Code):
        return not node.content
    if isinstance(node, (Paragraph, Heading, Strong, Emphasis)):
        return all(is_blank(child) for child in node.content)
    if isinstance(node, (Document, BlockQuote, ListItem)):
        return all(is_blank(child) for child in node.children)
    if isinstance(node, List):
        return not node.items
    return False
