#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/service.py
"""High level HTML to Markdown service.

:class:`TurndownService` bundles an immutable :class:`TurndownOptions`
snapshot with a :class:`RuleRegistry`. A service is configured first (rules,
keep and remove filters, plugins) and then used for any number of
conversions. Every call to :meth:`TurndownService.turndown` builds its own
converter and renderer, so conversions never share mutable state.

Examples
--------
Basic conversion:

    >>> service = TurndownService()
    >>> service.turndown("<h1>Title</h1><p>Hello <strong>World</strong></p>")
    'Title\\n=====\\n\\nHello **World**'

Custom rule, camelCase options and chaining:

    >>> service = TurndownService(headingStyle="atx")
    >>> _ = service.add_rule("strike", ["del", "s"], lambda content, node, options: f"~~{content}~~").keep("iframe")
    >>> service.turndown("<h2>Done <del>soon</del></h2>")
    '## Done ~~soon~~'

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from htmldown.ast import Document
from htmldown.config import load_options
from htmldown.converter import DomToAstConverter
from htmldown.dom import CommentNode, DocumentNode, DomNode, ElementNode, TextNode, from_soup, parse_html
from htmldown.exceptions import ValidationError
from htmldown.options import TurndownOptions, normalize_option_names
from htmldown.renderer import MarkdownRenderer
from htmldown.rules.filters import FilterLike
from htmldown.rules.registry import RuleRegistry
from htmldown.rules.rule import ReplacementFn, Rule
from htmldown.utils.text import escape_markdown

logger = logging.getLogger(__name__)

Plugin = Callable[["TurndownService"], Any]

_DOM_NODE_TYPES = (ElementNode, TextNode, CommentNode, DocumentNode)


class TurndownService:
    """Convert HTML into Markdown.

    Parameters
    ----------
    options : TurndownOptions, optional
        Base options; defaults to :class:`TurndownOptions` defaults
    **overrides
        Individual option values applied on top of ``options``. Both
        snake_case field names and turndown camelCase names are accepted.

    Raises
    ------
    ConfigurationError
        If an override names an unknown option or holds an invalid value.

    """

    def __init__(self, options: Optional[TurndownOptions] = None, **overrides: Any):
        """Initialize the service with options and an empty rule registry."""
        if options is None:
            options = TurndownOptions()
        if overrides:
            options = options.create_updated(**normalize_option_names(overrides))
        self._options = options
        self._registry = RuleRegistry()

    @classmethod
    def from_config(cls, config_path: Optional[Path | str] = None, **overrides: Any) -> TurndownService:
        """Create a service from a JSON, TOML, YAML or pyproject.toml file.

        Parameters
        ----------
        config_path : Path or str, optional
            Configuration file, see :func:`htmldown.config.load_config_file`.
            When omitted, the file is located as described in
            :func:`htmldown.config.load_options`; with no file the defaults
            apply.
        **overrides
            Option values taking priority over the file contents

        Returns
        -------
        TurndownService
            Configured service

        Raises
        ------
        ConfigurationError
            If the file cannot be loaded or holds invalid options.

        """
        return cls(load_options(config_path, **overrides))

    @property
    def options(self) -> TurndownOptions:
        """Options snapshot used for every conversion."""
        return self._options

    @property
    def rules(self) -> RuleRegistry:
        """Registry of custom rules, keep filters and remove filters."""
        return self._registry

    def turndown(self, html: Union[str, DomNode, Any]) -> str:
        """Convert HTML to Markdown.

        Parameters
        ----------
        html : str, DomNode, or bs4 Tag
            An HTML string, an already built node tree, or a BeautifulSoup
            ``BeautifulSoup``/``Tag`` object. The input is never modified.

        Returns
        -------
        str
            Markdown text without leading or trailing blank lines

        Raises
        ------
        ValidationError
            If ``html`` is not one of the accepted input types.
        DependencyError
            If the configured HTML parser backend is not installed.
        RuleExecutionError
            If a custom rule's replacement function raises.

        """
        tree = self._to_tree(html)

        renderer = MarkdownRenderer(self._options)
        converter = DomToAstConverter(self._registry, self._options, renderer.render_fragment)
        document: Document = converter.convert(tree)
        return renderer.render_to_string(document)

    def _to_tree(self, html: Any) -> DomNode:
        if isinstance(html, str):
            return parse_html(html, self._options.html_parser)
        if isinstance(html, _DOM_NODE_TYPES):
            return html

        # BeautifulSoup objects are adapted without re-parsing
        from bs4.element import Tag

        if isinstance(html, Tag):
            return from_soup(html)

        raise ValidationError(
            f"{type(html).__name__} is not a valid input for turndown; expected a string, DOM node or BeautifulSoup Tag",
            parameter_name="html",
            parameter_value=html,
        )

    def add_rule(
        self, name: str, rule: Rule | FilterLike, replacement: Optional[ReplacementFn] = None
    ) -> TurndownService:
        """Register a custom rule.

        Custom rules are consulted in registration order, after keep and
        remove filters and before the built-in rules. The replacement
        receives the Markdown of the element's children, the element and the
        active options; its return value is inserted verbatim.

        Parameters
        ----------
        name : str
            Rule name; re-using a name replaces that rule in place
        rule : Rule or filter specification
            A :class:`Rule`, or a tag name, list of tag names or predicate
        replacement : callable, optional
            ``replacement(content, node, options) -> str``; required unless
            ``rule`` is a :class:`Rule`

        Returns
        -------
        TurndownService
            This service, for chaining

        """
        self._registry.add(name, rule, replacement)
        return self

    def keep(self, filter: FilterLike) -> TurndownService:
        """Emit elements matching ``filter`` as HTML instead of converting them."""
        self._registry.keep(filter)
        return self

    def remove(self, filter: FilterLike) -> TurndownService:
        """Drop elements matching ``filter`` together with their content."""
        self._registry.remove(filter)
        return self

    def use_plugin(self, plugin: Union[Plugin, Iterable[Plugin]]) -> TurndownService:
        """Apply a plugin, or a list of plugins, to this service.

        A plugin is a callable receiving the service; it typically adds
        rules or filters.

        Parameters
        ----------
        plugin : callable or iterable of callables
            Plugin(s) to apply, in order

        Returns
        -------
        TurndownService
            This service, for chaining

        Raises
        ------
        ValidationError
            If a plugin is not callable.

        """
        if callable(plugin):
            plugins = [plugin]
        elif isinstance(plugin, Iterable):
            plugins = list(plugin)
        else:
            plugins = [plugin]
        for p in plugins:
            if not callable(p):
                raise ValidationError(
                    f"Plugin must be callable, got {type(p).__name__}",
                    parameter_name="plugin",
                    parameter_value=p,
                )
            logger.debug(f"Applying plugin: {getattr(p, '__name__', repr(p))}")
            p(self)
        return self

    use = use_plugin

    def escape(self, text: str) -> str:
        """Escape Markdown syntax in ``text``.

        Parameters
        ----------
        text : str
            Plain text

        Returns
        -------
        str
            Text that renders literally when read as Markdown

        """
        return escape_markdown(text)
