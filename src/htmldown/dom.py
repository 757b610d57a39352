#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/dom.py
"""Input node model for the converter.

The converter walks a small, parser-independent tree made of
:class:`ElementNode`, :class:`TextNode`, :class:`CommentNode` and
:class:`DocumentNode`. HTML strings are parsed with BeautifulSoup and
adapted into this shape by :func:`parse_html`; an existing BeautifulSoup
tree is adapted with :func:`from_soup`.

Tag and attribute names are normalized to lower case; text nodes carry raw,
unescaped character data (entities already decoded by the parser).
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from htmldown.constants import BLOCK_ELEMENTS, VOID_ELEMENTS
from htmldown.exceptions import DependencyError, ParsingError

logger = logging.getLogger(__name__)

# Elements whose text children are serialized without entity escaping
_RAW_TEXT_ELEMENTS = frozenset({"script", "style", "xmp", "iframe", "noembed", "noframes", "plaintext"})


@dataclass
class TextNode:
    """Character data.

    Parameters
    ----------
    data : str
        Raw text with entities decoded

    """

    data: str


@dataclass
class CommentNode:
    """HTML comment; ignored by the converter but kept for ``outer_html``."""

    data: str


@dataclass
class ElementNode:
    """HTML element.

    Parameters
    ----------
    tag_name : str
        Element name; normalized to lower case
    attributes : dict[str, str], default = empty dict
        Attribute names (lower case) to values, in source order
    children : list of DomNode, default = empty list
        Child nodes in document order

    """

    tag_name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[DomNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Normalize tag and attribute names to lower case."""
        self.tag_name = self.tag_name.lower()
        if any(name != name.lower() for name in self.attributes):
            self.attributes = {name.lower(): value for name, value in self.attributes.items()}

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of attribute ``name`` (case-insensitive) or ``default``."""
        return self.attributes.get(name.lower(), default)

    @property
    def is_block(self) -> bool:
        """Whether the element is classified as block-level."""
        return self.tag_name in BLOCK_ELEMENTS

    @property
    def is_void(self) -> bool:
        """Whether the element is a void element."""
        return self.tag_name in VOID_ELEMENTS

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        return "".join(_iter_text(self))

    def element_children(self) -> list[ElementNode]:
        """Return the child elements, skipping text and comments."""
        return [child for child in self.children if isinstance(child, ElementNode)]

    def outer_html(self) -> str:
        """Serialize the element and its subtree back to HTML.

        Attribute values are quoted with double quotes; text is entity-escaped
        except inside raw text elements such as ``script`` and ``style``.

        Returns
        -------
        str
            HTML markup for this element

        """
        parts: list[str] = []
        _serialize(self, parts)
        return "".join(parts)

    def inner_html(self) -> str:
        """Serialize the children of the element back to HTML."""
        parts: list[str] = []
        for child in self.children:
            _serialize(child, parts, raw_text=self.tag_name in _RAW_TEXT_ELEMENTS)
        return "".join(parts)


@dataclass
class DocumentNode:
    """Root container produced by the parser."""

    children: list[DomNode] = field(default_factory=list)

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        return "".join(_iter_text(self))

    def element_children(self) -> list[ElementNode]:
        """Return the child elements, skipping text and comments."""
        return [child for child in self.children if isinstance(child, ElementNode)]


DomNode = Union[ElementNode, TextNode, CommentNode, DocumentNode]


def _iter_text(node: DomNode) -> Iterator[str]:
    if isinstance(node, TextNode):
        yield node.data
    elif isinstance(node, (ElementNode, DocumentNode)):
        for child in node.children:
            yield from _iter_text(child)


def _escape_text(text: str) -> str:
    return html.escape(text, quote=False).replace("\xa0", "&nbsp;")


def _escape_attribute(value: str) -> str:
    return html.escape(value).replace("\xa0", "&nbsp;")


def _serialize(node: DomNode, parts: list[str], raw_text: bool = False) -> None:
    if isinstance(node, TextNode):
        parts.append(node.data if raw_text else _escape_text(node.data))
    elif isinstance(node, CommentNode):
        parts.append(f"<!--{node.data}-->")
    elif isinstance(node, DocumentNode):
        for child in node.children:
            _serialize(child, parts)
    else:
        parts.append(f"<{node.tag_name}")
        for name, value in node.attributes.items():
            parts.append(f' {name}="{_escape_attribute(value)}"')
        parts.append(">")
        if node.is_void:
            return
        child_raw = node.tag_name in _RAW_TEXT_ELEMENTS
        for child in node.children:
            _serialize(child, parts, raw_text=child_raw)
        parts.append(f"</{node.tag_name}>")


def _attribute_value(value: Any) -> str:
    # BeautifulSoup returns multi-valued attributes such as class as lists
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return "" if value is None else str(value)


def from_soup(node: Any) -> DomNode:
    """Adapt a BeautifulSoup node into the converter's node model.

    Parameters
    ----------
    node : bs4.BeautifulSoup, bs4.element.Tag or bs4.element.NavigableString
        Node to adapt; a ``BeautifulSoup`` object becomes a
        :class:`DocumentNode`

    Returns
    -------
    DomNode
        Adapted node; the BeautifulSoup tree is not modified

    Raises
    ------
    ParsingError
        If ``node`` is not a BeautifulSoup node.

    """
    from bs4 import BeautifulSoup
    from bs4.element import CData, Comment, NavigableString, PreformattedString, Tag

    if isinstance(node, BeautifulSoup):
        return DocumentNode(children=_adapt_children(node))
    if isinstance(node, Tag):
        return _adapt_tag(node)
    if isinstance(node, Comment):
        return CommentNode(data=str(node))
    if isinstance(node, CData) or (
        isinstance(node, NavigableString) and not isinstance(node, PreformattedString)
    ):
        return TextNode(data=str(node))
    raise ParsingError(f"Cannot adapt {type(node).__name__} into a DOM node", parsing_stage="adapt")


def _adapt_tag(tag: Any) -> ElementNode:
    attributes = {str(name).lower(): _attribute_value(value) for name, value in tag.attrs.items()}
    return ElementNode(tag_name=tag.name, attributes=attributes, children=_adapt_children(tag))


def _adapt_children(parent: Any) -> list[DomNode]:
    from bs4.element import CData, Comment, NavigableString, PreformattedString, Tag

    children: list[DomNode] = []
    for child in parent.children:
        if isinstance(child, Tag):
            children.append(_adapt_tag(child))
        elif isinstance(child, Comment):
            children.append(CommentNode(data=str(child)))
        elif isinstance(child, CData):
            children.append(TextNode(data=str(child)))
        elif isinstance(child, PreformattedString):
            # Doctype, declarations and processing instructions carry no content
            continue
        elif isinstance(child, NavigableString):
            children.append(TextNode(data=str(child)))
    return children


def parse_html(html: str, parser: str = "html.parser") -> DocumentNode:
    """Parse an HTML string with BeautifulSoup into a :class:`DocumentNode`.

    Parameters
    ----------
    html : str
        HTML markup; fragments and full documents are both accepted
    parser : str, default "html.parser"
        BeautifulSoup parser backend

    Returns
    -------
    DocumentNode
        Root of the adapted tree

    Raises
    ------
    DependencyError
        If the requested parser backend is not installed.

    """
    from bs4 import BeautifulSoup
    from bs4.exceptions import FeatureNotFound

    try:
        soup = BeautifulSoup(html, parser)
    except FeatureNotFound as e:
        missing_packages = [(parser, "")] if parser in ("lxml", "html5lib") else []
        raise DependencyError(
            "html_parser",
            missing_packages,
            message=f"Selected html_parser not found: {parser!r}. {e}",
            original_import_error=e,
        ) from e

    logger.debug("Parsed %d characters of HTML with %s", len(html), parser)
    return DocumentNode(children=_adapt_children(soup))
