#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/rules/rule.py
"""Custom conversion rules.

A :class:`Rule` pairs a filter with a replacement function. When the filter
matches an element, the element's children are converted and rendered to
Markdown, and the replacement receives that text together with the element
and the active options. Its return value is inserted into the output as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from htmldown.rules.filters import Filter, FilterLike, as_filter

if TYPE_CHECKING:
    from htmldown.dom import DomNode
    from htmldown.options import TurndownOptions

ReplacementFn = Callable[[str, "DomNode", "TurndownOptions"], str]


@dataclass(frozen=True)
class Rule:
    """Filter plus replacement function.

    Parameters
    ----------
    filter : Filter
        Decides which elements the rule applies to
    replacement : Callable[[str, DomNode, TurndownOptions], str]
        Called as ``replacement(content, node, options)``; ``content`` is the
        rendered Markdown of the element's children

    Examples
    --------
        >>> strike = Rule.create(["del", "s"], lambda content, node, options: f"~~{content}~~")
        >>> service.add_rule("strikethrough", strike)

    """

    filter: Filter
    replacement: ReplacementFn

    @classmethod
    def create(cls, filter: FilterLike, replacement: ReplacementFn) -> Rule:
        """Build a rule, coercing ``filter`` with :func:`as_filter`."""
        return cls(filter=as_filter(filter), replacement=replacement)

    def matches(self, node: DomNode) -> bool:
        """Return True if the rule's filter matches ``node``."""
        return self.filter.matches(node)

    def replace(self, content: str, node: DomNode, options: TurndownOptions) -> str:
        """Call the replacement function."""
        return self.replacement(content, node, options)
