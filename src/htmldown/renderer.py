#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/renderer.py
"""Markdown rendering from AST.

This module provides the MarkdownRenderer class which serializes the
Markdown AST produced by the converter, applying the style choices held in
:class:`~htmldown.options.TurndownOptions`.

The renderer writes into a single output list. Block quotes and list items
render their children into a temporary list first so that every line can be
prefixed; inline containers do the same so that delimiters can be placed
around trimmed content.

"""

from __future__ import annotations

import re
from typing import Optional

from htmldown.ast.nodes import (
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
from htmldown.ast.visitors import NodeVisitor
from htmldown.constants import CODE_BLOCK_INDENT, TABLE_SEPARATOR_CELL
from htmldown.options import TurndownOptions
from htmldown.utils.text import escape_markdown, longest_run


class MarkdownRenderer(NodeVisitor):
    """Render AST nodes to Markdown text.

    Parameters
    ----------
    options : TurndownOptions or None, default = None
        Style options; defaults to turndown's defaults

    Examples
    --------
    Basic usage:

        >>> from htmldown.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=2, content=[Text(content="Intro")])])
        >>> MarkdownRenderer(TurndownOptions(heading_style="atx")).render_to_string(doc)
        '## Intro'

    """

    def __init__(self, options: TurndownOptions | None = None):
        """Initialize the Markdown renderer with options."""
        self.options: TurndownOptions = options or TurndownOptions()
        self._output: list[str] = []
        self._list_marker_stack: list[str] = []
        self._link_references: dict[tuple[str, Optional[str]], int] = {}  # (url, title) -> ref_id
        self._next_ref_id: int = 1
        self._reference_definitions: list[str] = []

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to a Markdown string.

        Reference-style link definitions collected while rendering (including
        those collected by earlier :meth:`render_fragment` calls) are appended
        after the body and then cleared.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text

        """
        self._output = []
        self._list_marker_stack = []

        document.accept(self)

        if self._reference_definitions:
            self._output.append("\n\n")
            self._output.append("\n".join(self._reference_definitions))

        result = "".join(self._output)

        # Clear state so the renderer can be reused
        self._output.clear()
        self._link_references.clear()
        self._reference_definitions.clear()
        self._next_ref_id = 1

        return self._cleanup_output(result)

    def render_fragment(self, document: Document) -> str:
        """Render a document AST without emitting link definitions.

        Used for the content handed to custom rules. Links rendered here
        register their definitions with this renderer, so they appear at the
        end of the final :meth:`render_to_string` output.

        Parameters
        ----------
        document : Document
            Fragment to render

        Returns
        -------
        str
            Markdown text

        """
        saved_output = self._output
        saved_markers = self._list_marker_stack
        self._output = []
        self._list_marker_stack = []

        document.accept(self)

        result = "".join(self._output)
        self._output = saved_output
        self._list_marker_stack = saved_markers
        return self._cleanup_output(result)

    def _cleanup_output(self, text: str) -> str:
        """Clean up the final output.

        Parameters
        ----------
        text : str
            Raw markdown text

        Returns
        -------
        str
            Cleaned markdown text

        """
        # Normalize line endings first (CRLF/CR -> LF)
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = re.sub(r"\n{3,}", "\n\n", text)
        # Leading spaces are significant for indented code blocks
        return text.lstrip("\t\n").rstrip()

    def _render_inline_content(self, nodes: list[Node]) -> str:
        saved_output = self._output
        self._output = []
        for node in nodes:
            node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, nodes: list[Node]) -> None:
        """Render blocks separated by one blank line, skipping blank ones."""
        first = True
        for child in nodes:
            if is_blank(child):
                continue
            if not first:
                self._output.append("\n\n")
            child.accept(self)
            first = False

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node.

        Parameters
        ----------
        node : Document
            Document to render

        """
        self._render_blocks(node.children)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self._output.append(self._render_inline_content(node.content))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node.

        Setext headings underline levels 1 and 2 with ``=`` and ``-`` as long
        as the rendered content; every other heading uses ``#`` prefixes.

        Parameters
        ----------
        node : Heading
            Heading to render

        """
        content = self._render_inline_content(node.content)

        if self.options.heading_style == "setext" and node.level <= 2:
            underline_char = "=" if node.level == 1 else "-"
            width = max(len(line) for line in content.split("\n"))
            self._output.append(f"{content}\n{underline_char * width}")
        else:
            self._output.append(f"{'#' * node.level} {content}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node.

        Parameters
        ----------
        node : BlockQuote
            Block quote to render

        """
        saved_output = self._output
        self._output = []

        self._render_blocks(node.children)

        quoted = "".join(self._output).strip("\n")
        lines = quoted.split("\n")
        quoted_lines = ["> " + line if line else ">" for line in lines]

        self._output = saved_output
        self._output.append("\n".join(quoted_lines))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Parameters
        ----------
        node : List
            List to render

        """
        for i, item in enumerate(node.items):
            if node.ordered:
                marker = f"{node.start + i}. "
            else:
                marker = f"{self.options.bullet_list_marker} "

            if i > 0:
                self._output.append("\n")

            if not isinstance(item, ListItem):
                item.accept(self)
                continue

            self._list_marker_stack.append(marker)
            item.accept(self)
            self._list_marker_stack.pop()

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node.

        The first block follows the marker; continuation lines are indented
        by the marker width. A nested list directly after a paragraph starts
        on the next line, other blocks are separated by a blank line.

        Parameters
        ----------
        node : ListItem
            List item to render

        """
        marker = self._list_marker_stack[-1] if self._list_marker_stack else f"{self.options.bullet_list_marker} "
        indent = " " * len(marker)

        saved_output = self._output
        saved_markers = self._list_marker_stack
        self._output = []
        self._list_marker_stack = []

        previous: Node | None = None
        for child in node.children:
            if is_blank(child):
                continue
            if previous is not None:
                tight = isinstance(child, List) and isinstance(previous, Paragraph)
                self._output.append("\n" if tight else "\n\n")
            child.accept(self)
            previous = child

        body = "".join(self._output).strip("\n")
        self._output = saved_output
        self._list_marker_stack = saved_markers

        if not body:
            self._output.append(marker.rstrip())
            return

        lines = body.split("\n")
        rendered = [marker + lines[0]]
        rendered.extend(indent + line if line else "" for line in lines[1:])
        self._output.append("\n".join(rendered))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node.

        Parameters
        ----------
        node : CodeBlock
            Code block to render

        """
        if node.fenced or self.options.code_block_style == "fenced":
            fence = self.options.fence
            fence_char = fence[0]
            # Lengthen the fence past any run of the fence character in the code
            run = longest_run(node.code, fence_char)
            if run >= len(fence):
                fence = fence_char * (run + 1)
            lang = node.language or ""
            self._output.append(f"{fence}{lang}\n{node.code}\n{fence}")
        else:
            lines = node.code.split("\n")
            self._output.append("\n".join(CODE_BLOCK_INDENT + line for line in lines))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append(self.options.hr)

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a pipe table.

        Parameters
        ----------
        node : Table
            Table to render

        """
        if not node.headers:
            return

        lines = [self._render_table_row(node.headers)]
        lines.append("| " + " | ".join(TABLE_SEPARATOR_CELL for _ in node.headers) + " |")
        for row in node.rows:
            if isinstance(row, HTMLBlock):
                lines.append(row.content)
            else:
                lines.append(self._render_table_row(row))
        self._output.append("\n".join(lines))

    def _render_table_row(self, cells: list[list[Node]]) -> str:
        rendered = []
        for cell in cells:
            text = self._render_inline_content(cell).replace("\n", " ").strip()
            rendered.append(text.replace("|", "\\|"))
        return "| " + " | ".join(rendered) + " |"

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node verbatim."""
        self._output.append(node.content)

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node.

        Parameters
        ----------
        node : Text
            Text to render

        """
        self._output.append(escape_markdown(node.content))

    def _render_delimited(self, nodes: list[Node], delimiter: str) -> None:
        content = self._render_inline_content(nodes)
        core = content.strip()
        if not core:
            self._output.append(content)
            return
        # Whitespace at the edges moves outside the delimiters
        leading = content[: len(content) - len(content.lstrip())]
        trailing = content[len(content.rstrip()) :]
        self._output.append(f"{leading}{delimiter}{core}{delimiter}{trailing}")

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._render_delimited(node.content, self.options.em_delimiter)

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._render_delimited(node.content, self.options.strong_delimiter)

    def visit_code(self, node: Code) -> None:
        """Render a Code node.

        Uses the shortest backtick run that does not occur in the content,
        with padding when the content touches a backtick or is surrounded by
        spaces.

        Parameters
        ----------
        node : Code
            Code to render

        """
        code = node.content
        if not code:
            return

        runs = {len(run) for run in re.findall(r"`+", code)}
        ticks = 1
        while ticks in runs:
            ticks += 1
        fence = "`" * ticks

        pad = " " if re.search(r"^`|^ .*?[^ ].* $|`$", code) else ""
        self._output.append(f"{fence}{pad}{code}{pad}{fence}")

    def visit_link(self, node: Link) -> None:
        """Render a Link node.

        Parameters
        ----------
        node : Link
            Link to render

        """
        content = self._render_inline_content(node.content)
        title_part = f' "{_escape_title(node.title)}"' if node.title else ""

        if self.options.link_style == "inlined":
            url = re.sub(r"([()])", r"\\\1", node.url)
            self._output.append(f"[{content}]({url}{title_part})")
            return

        reference_style = self.options.link_reference_style
        if reference_style == "full":
            key = (node.url, node.title)
            ref_id = self._link_references.get(key)
            if ref_id is None:
                ref_id = self._next_ref_id
                self._next_ref_id += 1
                self._link_references[key] = ref_id
                self._reference_definitions.append(f"[{ref_id}]: {node.url}{title_part}")
            self._output.append(f"[{content}][{ref_id}]")
        elif reference_style == "collapsed":
            self._reference_definitions.append(f"[{content}]: {node.url}{title_part}")
            self._output.append(f"[{content}][]")
        else:
            self._reference_definitions.append(f"[{content}]: {node.url}{title_part}")
            self._output.append(f"[{content}]")

    def visit_image(self, node: Image) -> None:
        """Render an Image node; images are always inline."""
        title_part = f' "{node.title}"' if node.title else ""
        self._output.append(f"![{node.alt_text}]({node.url}{title_part})")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node as a hard break."""
        self._output.append("  \n")

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node verbatim."""
        self._output.append(node.content)


def _escape_title(title: str) -> str:
    return title.replace('"', '\\"')
