"""htmldown - HTML to Markdown conversion with turndown parity.

htmldown converts HTML documents into Markdown. It walks a DOM tree built by
BeautifulSoup, matches every element against an ordered rule registry, builds
a Markdown AST and renders that AST under configurable style options. Output
follows the turndown reference converter.

Key Features
------------
- CommonMark output for headings, lists, block quotes, code, links, images
  and tables
- setext or atx headings, indented or fenced code, inlined or referenced links
- Custom rules, keep filters and remove filters with a fixed lookup order
- Options from JSON, TOML, YAML or ``[tool.htmldown]`` in pyproject.toml
- Markdown escaping of text content

Requirements
------------
- Python 3.10+
- beautifulsoup4 (``lxml`` and ``html5lib`` parser backends are optional)

Examples
--------
Basic conversion:

    >>> from htmldown import TurndownService
    >>> TurndownService().turndown("<ul><li>One</li><li>Two</li></ul>")
    '* One\\n* Two'

Options and rules:

    >>> service = TurndownService(heading_style="atx", code_block_style="fenced")
    >>> _ = service.remove(["nav", "footer"])
    >>> markdown = service.turndown(html)

See Also
--------
htmldown.options : conversion options
htmldown.rules : filters, rules and the rule registry

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "htmldown requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from htmldown.config import load_config_file, load_options
from htmldown.dom import CommentNode, DocumentNode, DomNode, ElementNode, TextNode, from_soup, parse_html
from htmldown.exceptions import (
    ConfigurationError,
    DependencyError,
    HtmldownError,
    ParsingError,
    RuleExecutionError,
    ValidationError,
)
from htmldown.options import TurndownOptions
from htmldown.rules import Predicate, Rule, RuleRegistry, TagName, TagNames
from htmldown.service import TurndownService
from htmldown.utils.text import escape_markdown

__all__ = [
    "CommentNode",
    "ConfigurationError",
    "DependencyError",
    "DocumentNode",
    "DomNode",
    "ElementNode",
    "HtmldownError",
    "ParsingError",
    "Predicate",
    "Rule",
    "RuleExecutionError",
    "RuleRegistry",
    "TagName",
    "TagNames",
    "TextNode",
    "TurndownOptions",
    "TurndownService",
    "ValidationError",
    "__version__",
    "escape_markdown",
    "from_soup",
    "load_config_file",
    "load_options",
    "parse_html",
]
