#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/converter.py
"""DOM to Markdown AST conversion.

The converter walks the input tree in document order. For every element it
asks the :class:`~htmldown.rules.registry.RuleRegistry` how to proceed and
either drops the element, emits it verbatim, applies a custom rule, calls one
of its built-in ``_convert_*`` handlers, or passes the children through.

Whitespace follows the reference converter: text is collapsed to single
spaces, a space is dropped at the start of a block and after another space
or a line break, and trailing whitespace is trimmed at the end of a block.
Text inside ``pre`` is taken verbatim.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Union

from htmldown.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
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
from htmldown.constants import (
    CODE_LANGUAGE_CLASS_PREFIX,
    LIST_TAGS,
    TABLE_CELL_TAGS,
    TABLE_SECTION_TAGS,
)
from htmldown.dom import DocumentNode, DomNode, ElementNode, TextNode
from htmldown.exceptions import RuleExecutionError
from htmldown.options import TurndownOptions
from htmldown.rules.registry import RuleMatch, RuleRegistry
from htmldown.utils.text import collapse_whitespace

logger = logging.getLogger(__name__)

RenderFragment = Callable[[Document], str]

_BLOCK_TYPES = (Document, Paragraph, Heading, BlockQuote, List, ListItem, CodeBlock, ThematicBreak, Table, HTMLBlock)
_MERGEABLE_TYPES = (Strong, Emphasis)


class DomToAstConverter:
    """Convert a DOM tree into a Markdown :class:`~htmldown.ast.Document`.

    One converter instance handles one conversion; its whitespace state is
    reset by :meth:`convert`.

    Parameters
    ----------
    registry : RuleRegistry
        Rule lookup for elements; never modified by the converter
    options : TurndownOptions
        Active options, passed to custom rules and used for code block style
    render_fragment : callable
        Renders the converted children of a custom-rule element to Markdown

    Examples
    --------
        >>> converter = DomToAstConverter(RuleRegistry(), TurndownOptions(), renderer.render_fragment)
        >>> converter.convert(parse_html("<p>Hello</p>"))
        Document(children=[Paragraph(content=[Text(content='Hello')])])

    """

    def __init__(self, registry: RuleRegistry, options: TurndownOptions, render_fragment: RenderFragment) -> None:
        """Initialize the converter."""
        self._registry = registry
        self._options = options
        self._render_fragment = render_fragment
        # True when a following space would be redundant
        self._trailing_space = True
        self._last_text: Optional[Text] = None
        # Set while inside a bare ``pre``
        self._preformatted = False

    def convert(self, tree: DomNode) -> Document:
        """Convert a DOM tree to a Markdown AST.

        Parameters
        ----------
        tree : DomNode
            Document, element or text node to convert

        Returns
        -------
        Document
            Root of the Markdown AST

        """
        self._start_block()
        if isinstance(tree, DocumentNode):
            children = tree.children
        else:
            children = [tree]

        blocks = self._convert_blocks(children)
        logger.debug("Converted DOM tree into %d top-level blocks", len(blocks))
        return Document(children=blocks)

    # ------------------------------------------------------------------
    # Whitespace state
    # ------------------------------------------------------------------

    def _start_block(self) -> None:
        self._trailing_space = True
        self._last_text = None

    def _mark_inline(self) -> None:
        """Record that a non-text inline was emitted."""
        self._trailing_space = False
        self._last_text = None

    def _convert_text(self, data: str) -> list[Node]:
        if self._preformatted:
            return self._convert_raw_text(data)
        text = collapse_whitespace(data)
        if self._trailing_space:
            text = text.lstrip(" ")
        if not text:
            return []
        node = Text(content=text)
        self._trailing_space = text.endswith(" ")
        self._last_text = node
        return [node]

    def _convert_raw_text(self, data: str) -> list[Node]:
        if not data:
            return []
        node = Text(content=data)
        self._trailing_space = data[-1].isspace()
        self._last_text = node
        return [node]

    def _separator(self) -> list[Node]:
        """Return a single space unless the preceding content already ends with one."""
        if self._trailing_space:
            return []
        return self._convert_text(" ")

    # ------------------------------------------------------------------
    # Block and inline walkers
    # ------------------------------------------------------------------

    def _convert_blocks(self, children: Sequence[DomNode]) -> list[Node]:
        """Convert children in block context.

        Runs of inline content between block children become paragraphs;
        nested containers are flattened into sibling blocks.

        Parameters
        ----------
        children : sequence of DomNode
            Nodes to convert

        Returns
        -------
        list of Node
            Block nodes in document order

        """
        blocks: list[Node] = []
        buffer: list[Node] = []
        self._start_block()
        self._walk_blocks(children, blocks, buffer)
        self._flush(buffer, blocks)
        return blocks

    def _walk_blocks(self, children: Sequence[DomNode], blocks: list[Node], buffer: list[Node]) -> None:
        for child in children:
            if isinstance(child, TextNode):
                _extend_inlines(buffer, self._convert_text(child.data))
                continue
            if isinstance(child, DocumentNode):
                self._flush(buffer, blocks)
                self._walk_blocks(child.children, blocks, buffer)
                self._flush(buffer, blocks)
                continue
            if not isinstance(child, ElementNode):
                continue

            match = self._registry.for_node(child)
            if match.kind == "remove":
                continue

            if match.kind == "fallback":
                if child.is_block:
                    self._flush(buffer, blocks)
                    self._walk_blocks(child.children, blocks, buffer)
                    self._flush(buffer, blocks)
                else:
                    self._walk_blocks(child.children, blocks, buffer)
                continue

            if child.is_block:
                self._flush(buffer, blocks)
                for node in self._convert_element(child, match):
                    if isinstance(node, _BLOCK_TYPES):
                        blocks.append(node)
                    else:
                        blocks.append(Paragraph(content=[node]))
                self._start_block()
            else:
                _extend_inlines(buffer, self._convert_element(child, match))

    def _convert_inlines(self, children: Sequence[DomNode]) -> list[Node]:
        """Convert children in inline context.

        Block descendants (malformed nesting such as a ``div`` inside an
        ``a``) are flattened into inline content separated by spaces.

        Parameters
        ----------
        children : sequence of DomNode
            Nodes to convert

        Returns
        -------
        list of Node
            Inline nodes

        """
        inlines: list[Node] = []
        for child in children:
            if isinstance(child, TextNode):
                _extend_inlines(inlines, self._convert_text(child.data))
                continue
            if isinstance(child, DocumentNode):
                _extend_inlines(inlines, self._convert_inlines(child.children))
                continue
            if not isinstance(child, ElementNode):
                continue

            match = self._registry.for_node(child)
            if match.kind == "remove":
                continue

            if match.kind == "fallback":
                if child.is_block:
                    _extend_inlines(inlines, self._separator())
                    _extend_inlines(inlines, self._convert_inlines(child.children))
                    _extend_inlines(inlines, self._separator())
                else:
                    _extend_inlines(inlines, self._convert_inlines(child.children))
                continue

            converted = self._convert_element(child, match)
            if child.is_block:
                self._append_flattened(inlines, _flatten_blocks(converted))
            else:
                _extend_inlines(inlines, converted)
        return inlines

    def _append_flattened(self, inlines: list[Node], parts: list[Node]) -> None:
        """Append flattened block content, separated from its neighbours by spaces."""
        if not parts:
            return
        if inlines and not _ends_with_space(inlines):
            inlines.append(Text(content=" "))
        _extend_inlines(inlines, parts)
        # A following text node drops its leading space against this one
        separator = Text(content=" ")
        inlines.append(separator)
        self._trailing_space = True
        self._last_text = separator

    def _flush(self, buffer: list[Node], blocks: list[Node]) -> None:
        """Close the current run of inline content as a paragraph."""
        _trim_trailing(buffer)
        if buffer and not all(is_blank(node) for node in buffer):
            blocks.append(Paragraph(content=list(buffer)))
        buffer.clear()
        self._start_block()

    # ------------------------------------------------------------------
    # Element dispatch
    # ------------------------------------------------------------------

    def _convert_element(self, node: ElementNode, match: RuleMatch) -> list[Node]:
        if match.kind == "keep":
            logger.debug("Keeping <%s> as HTML", node.tag_name)
            return self._verbatim(node, node.outer_html())
        if match.kind == "custom":
            return self._apply_custom_rule(node, match)
        if match.handler is not None:
            handler = getattr(self, match.handler)
            return handler(node)
        return self._convert_inlines(node.children)

    def _verbatim(self, node: ElementNode, content: str) -> list[Node]:
        if node.is_block:
            return [HTMLBlock(content=content)] if content else []
        if not content:
            return []
        self._mark_inline()
        return [HTMLInline(content=content)]

    def _apply_custom_rule(self, node: ElementNode, match: RuleMatch) -> list[Node]:
        """Run a custom rule's replacement and insert its output verbatim.

        Parameters
        ----------
        node : ElementNode
            Element matched by the rule
        match : RuleMatch
            Registry match carrying the rule and its name

        Returns
        -------
        list of Node
            A single HTMLBlock or HTMLInline, or nothing for empty output

        Raises
        ------
        RuleExecutionError
            If the replacement function raises or returns a non-string.

        """
        rule = match.rule
        rule_name = match.rule_name or "<anonymous>"
        if rule is None:
            return self._convert_inlines(node.children)

        if node.is_block:
            fragment = Document(children=self._convert_blocks(node.children))
        else:
            inlines = self._convert_inlines(node.children)
            fragment = Document(children=[Paragraph(content=inlines)] if inlines else [])
        content = self._render_fragment(fragment)

        try:
            result = rule.replace(content, node, self._options)
        except Exception as e:
            raise RuleExecutionError(
                f"Rule '{rule_name}' failed on <{node.tag_name}>: {e}",
                rule_name=rule_name,
                original_error=e,
            ) from e

        if not isinstance(result, str):
            raise RuleExecutionError(
                f"Rule '{rule_name}' returned {type(result).__name__}, expected str",
                rule_name=rule_name,
            )

        logger.debug("Applied rule '%s' to <%s>", rule_name, node.tag_name)
        return self._verbatim(node, result.strip("\n"))

    # ------------------------------------------------------------------
    # Built-in handlers (see htmldown.rules.commonmark)
    # ------------------------------------------------------------------

    def _skip(self, node: ElementNode) -> list[Node]:
        return []

    def _convert_paragraph(self, node: ElementNode) -> list[Node]:
        """Convert ``p``; block children split it into sibling blocks."""
        return self._convert_blocks(node.children)

    def _convert_heading(self, node: ElementNode) -> list[Node]:
        """Convert ``h1``-``h6`` into a Heading with inline content.

        Parameters
        ----------
        node : ElementNode
            Heading element

        Returns
        -------
        list of Node
            The heading, or nothing when it has no visible content

        """
        level = int(node.tag_name[1])
        self._start_block()
        content = self._convert_inlines(node.children)
        _trim_trailing(content)
        self._start_block()
        if all(is_blank(child) for child in content):
            return []
        return [Heading(level=level, content=content)]

    def _convert_blockquote(self, node: ElementNode) -> list[Node]:
        children = self._convert_blocks(node.children)
        if not children:
            return []
        return [BlockQuote(children=children)]

    def _convert_list(self, node: ElementNode) -> list[Node]:
        """Convert ``ul``/``ol`` into a List.

        ``li`` children become items. An ``li`` matched by a custom rule or a
        keep filter becomes an unmarked entry holding the verbatim output. A
        nested list placed directly inside the list (instead of inside an
        ``li``) and any other stray content attach to the previous item.

        Parameters
        ----------
        node : ElementNode
            List element

        Returns
        -------
        list of Node
            The list, or nothing when it has no items

        """
        ordered = node.tag_name == "ol"
        start = _parse_start(node.get("start")) if ordered else 1
        items: list[Node] = []

        for child in node.children:
            if isinstance(child, ElementNode):
                match = self._registry.for_node(child)
                if match.kind == "remove":
                    continue
                if child.tag_name == "li" and match.kind == "builtin":
                    items.append(self._build_list_item(child))
                    continue
                if child.tag_name == "li" and match.kind in ("keep", "custom"):
                    self._start_block()
                    items.extend(self._convert_element(child, match))
                    self._start_block()
                    continue
                if child.tag_name in LIST_TAGS and match.kind == "builtin":
                    stray = self._convert_list(child)
                else:
                    stray = self._convert_blocks([child])
            elif isinstance(child, TextNode) and child.data.strip():
                stray = self._convert_blocks([child])
            else:
                continue

            if not stray:
                continue
            if items and isinstance(items[-1], ListItem):
                items[-1].children.extend(stray)
            else:
                items.append(ListItem(children=stray))

        self._start_block()
        if not items:
            return []
        return [List(ordered=ordered, start=start, items=items)]

    def _build_list_item(self, node: ElementNode) -> ListItem:
        children = [child for child in self._convert_blocks(node.children) if not is_blank(child)]
        return ListItem(children=children)

    def _convert_list_item(self, node: ElementNode) -> list[Node]:
        """Convert an ``li`` found outside a list as a one-item bulleted list."""
        return [List(ordered=False, items=[self._build_list_item(node)])]

    def _convert_code_block(self, node: ElementNode) -> list[Node]:
        """Convert ``pre`` holding a ``code`` element into a CodeBlock.

        The raw text of the ``code`` element is used. The language comes
        from a ``language-*`` class on ``code``, or on ``pre`` itself. One
        trailing newline is removed. A ``pre`` without ``code`` is
        preformatted text, not code.

        Parameters
        ----------
        node : ElementNode
            ``pre`` element

        Returns
        -------
        list of Node
            The code block, or nothing when the text is blank

        """
        code_element = next((child for child in node.element_children() if child.tag_name == "code"), None)
        if code_element is None:
            return self._convert_preformatted(node)

        language = _code_language(code_element)
        if language is None:
            language = _code_language(node)

        code = code_element.text_content
        if code.endswith("\n"):
            code = code[:-1]
        if not code.strip():
            return []
        return [CodeBlock(code=code, language=language, fenced=self._options.code_block_style == "fenced")]

    def _convert_preformatted(self, node: ElementNode) -> list[Node]:
        """Convert a bare ``pre`` into a paragraph whose whitespace is kept.

        Text is escaped like any other text but never collapsed. Newlines
        at the edges are dropped.
        """
        self._start_block()
        self._preformatted = True
        try:
            content = self._convert_inlines(node.children)
        finally:
            self._preformatted = False
        self._start_block()

        if content and isinstance(content[0], Text):
            content[0].content = content[0].content.lstrip("\n")
        if content and isinstance(content[-1], Text):
            content[-1].content = content[-1].content.rstrip("\n")
        content = [child for child in content if not (isinstance(child, Text) and not child.content)]
        if all(is_blank(child) for child in content):
            return []
        return [Paragraph(content=content)]

    def _convert_thematic_break(self, node: ElementNode) -> list[Node]:
        return [ThematicBreak()]

    def _convert_line_break(self, node: ElementNode) -> list[Node]:
        if self._last_text is not None:
            self._last_text.content = self._last_text.content.rstrip(" ")
        self._trailing_space = True
        self._last_text = None
        return [LineBreak()]

    def _convert_inline_code(self, node: ElementNode) -> list[Node]:
        """Convert inline ``code``; whitespace is collapsed and nothing is escaped."""
        text = collapse_whitespace(node.text_content)
        if self._trailing_space:
            text = text.lstrip(" ")
        if not text:
            return []
        self._mark_inline()
        return [Code(content=text)]

    def _convert_link(self, node: ElementNode) -> list[Node]:
        href = node.get("href")
        if href is None:
            return self._convert_inlines(node.children)
        content = self._convert_inlines(node.children)
        link = Link(content=content, url=href.strip(), title=_clean_attribute(node.get("title")))
        if not content:
            self._mark_inline()
        return [link]

    def _convert_image(self, node: ElementNode) -> list[Node]:
        src = _clean_attribute(node.get("src"))
        if src is None:
            return []
        self._mark_inline()
        return [
            Image(
                url=src,
                alt_text=_clean_attribute(node.get("alt")) or "",
                title=_clean_attribute(node.get("title")),
            )
        ]

    def _convert_strong(self, node: ElementNode) -> list[Node]:
        content = self._convert_inlines(node.children)
        if all(is_blank(child) for child in content):
            return content
        return [Strong(content=content)]

    def _convert_emphasis(self, node: ElementNode) -> list[Node]:
        content = self._convert_inlines(node.children)
        if all(is_blank(child) for child in content):
            return content
        return [Emphasis(content=content)]

    def _convert_table(self, node: ElementNode) -> list[Node]:
        """Convert ``table`` into an optional caption paragraph and a Table.

        The header is the first row holding a ``th`` cell, or the first row
        when there is none. Every row is padded with empty cells or truncated
        to the header width. Rows, sections and cells go through the rule
        registry like any other element: removed ones are dropped, and a row
        or section matched by a custom rule or keep filter becomes a verbatim
        line of the table.

        Parameters
        ----------
        node : ElementNode
            Table element

        Returns
        -------
        list of Node
            Caption paragraph (if any) followed by the table

        """
        result: list[Node] = []
        entries: list[Union[ElementNode, Node]] = []

        for child in node.element_children():
            match = self._registry.for_node(child)
            if match.kind == "remove":
                continue
            if match.kind in ("keep", "custom"):
                converted = self._convert_verbatim_part(child, match)
                if child.tag_name == "caption":
                    result.extend(converted)
                else:
                    entries.extend(converted)
            elif child.tag_name == "caption":
                caption = self._convert_cell(child)
                if caption:
                    result.append(Paragraph(content=caption))
            elif child.tag_name == "tr":
                entries.append(child)
            elif child.tag_name in TABLE_SECTION_TAGS:
                entries.extend(self._section_rows(child))

        element_rows = [entry for entry in entries if isinstance(entry, ElementNode)]
        if not element_rows:
            result.extend(entry for entry in entries if isinstance(entry, Node))
            self._start_block()
            return result

        header_row = next(
            (row for row in element_rows if any(cell.tag_name == "th" for cell in row.element_children())),
            element_rows[0],
        )
        del entries[next(i for i, entry in enumerate(entries) if entry is header_row)]
        headers = self._convert_row(header_row)
        width = len(headers)

        body: list[Union[list[list[Node]], HTMLBlock]] = []
        for entry in entries:
            if isinstance(entry, ElementNode):
                cells = self._convert_row(entry)[:width]
                cells.extend([] for _ in range(width - len(cells)))
                body.append(cells)
            elif isinstance(entry, (HTMLBlock, HTMLInline)):
                body.append(HTMLBlock(content=entry.content))

        result.append(Table(headers=headers, rows=body))
        self._start_block()
        return result

    def _section_rows(self, section: ElementNode) -> list[Union[ElementNode, Node]]:
        """Return the rows of ``thead``/``tbody``/``tfoot`` with rules applied."""
        rows: list[Union[ElementNode, Node]] = []
        for row in section.element_children():
            if row.tag_name != "tr":
                continue
            match = self._registry.for_node(row)
            if match.kind == "remove":
                continue
            if match.kind in ("keep", "custom"):
                rows.extend(self._convert_verbatim_part(row, match))
            else:
                rows.append(row)
        return rows

    def _convert_verbatim_part(self, node: ElementNode, match: RuleMatch) -> list[Node]:
        self._start_block()
        converted = self._convert_element(node, match)
        self._start_block()
        return converted

    def _convert_row(self, row: ElementNode) -> list[list[Node]]:
        cells: list[list[Node]] = []
        for cell in row.element_children():
            if cell.tag_name not in TABLE_CELL_TAGS:
                continue
            match = self._registry.for_node(cell)
            if match.kind == "remove":
                continue
            if match.kind in ("keep", "custom"):
                # Verbatim output stays inside the cell
                converted = self._convert_verbatim_part(cell, match)
                cells.append([HTMLInline(content=part.content) for part in converted if isinstance(part, HTMLBlock)])
            else:
                cells.append(self._convert_cell(cell))
        return cells

    def _convert_cell(self, cell: ElementNode) -> list[Node]:
        self._start_block()
        content = self._convert_inlines(cell.children)
        _trim_trailing(content)
        self._start_block()
        return content


def _extend_inlines(target: list[Node], nodes: list[Node]) -> None:
    """Append inline nodes, merging adjacent Strong or Emphasis siblings."""
    for node in nodes:
        if target and isinstance(node, _MERGEABLE_TYPES) and type(target[-1]) is type(node):
            target[-1].content.extend(node.content)  # type: ignore[attr-defined]
        else:
            target.append(node)


def _flatten_blocks(nodes: Sequence[Node]) -> list[Node]:
    """Turn block nodes into inline content joined by single spaces."""
    result: list[Node] = []
    for node in nodes:
        parts: list[Node]
        if isinstance(node, (Paragraph, Heading)):
            parts = list(node.content)
        elif isinstance(node, (Document, BlockQuote, ListItem)):
            parts = _flatten_blocks(node.children)
        elif isinstance(node, List):
            parts = _flatten_blocks(node.items)
        elif isinstance(node, Table):
            parts = []
            for row in [node.headers, *node.rows]:
                if isinstance(row, HTMLBlock):
                    parts.extend([HTMLInline(content=row.content), Text(content=" ")])
                    continue
                for cell in row:
                    if cell:
                        parts.extend(cell)
                        parts.append(Text(content=" "))
        elif isinstance(node, CodeBlock):
            parts = [Code(content=collapse_whitespace(node.code).strip())]
        elif isinstance(node, HTMLBlock):
            parts = [HTMLInline(content=node.content)]
        elif isinstance(node, ThematicBreak):
            parts = []
        else:
            parts = [node]

        if not parts:
            continue
        if result and not _ends_with_space(result):
            result.append(Text(content=" "))
        _extend_inlines(result, parts)
    _trim_trailing(result)
    return result


def _ends_with_space(nodes: list[Node]) -> bool:
    last = nodes[-1]
    if isinstance(last, Text):
        return last.content.endswith(" ")
    return isinstance(last, LineBreak)


def _trim_trailing(nodes: list[Node]) -> None:
    """Remove trailing spaces and line breaks at the end of a block, in place."""
    while nodes:
        last = nodes[-1]
        if isinstance(last, LineBreak):
            nodes.pop()
        elif isinstance(last, Text):
            last.content = last.content.rstrip(" ")
            if last.content:
                return
            nodes.pop()
        elif isinstance(last, (Strong, Emphasis)):
            _trim_trailing(last.content)
            if last.content:
                return
            nodes.pop()
        elif isinstance(last, Link):
            _trim_trailing(last.content)
            return
        else:
            return


def _parse_start(value: Optional[str]) -> int:
    """Parse an ``ol`` start attribute; unparsable values give 1, negative ones 0."""
    if value is None:
        return 1
    try:
        start = int(value.strip())
    except ValueError:
        return 1
    return max(start, 0)


def _code_language(node: ElementNode) -> Optional[str]:
    for token in (node.get("class") or "").split():
        if token.startswith(CODE_LANGUAGE_CLASS_PREFIX) and len(token) > len(CODE_LANGUAGE_CLASS_PREFIX):
            return token[len(CODE_LANGUAGE_CLASS_PREFIX) :]
    return None


def _clean_attribute(value: Optional[str]) -> Optional[str]:
    """Trim an attribute value; empty values become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
