#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/rules/registry.py
"""Rule registry deciding how each DOM element is converted.

Lookup order for an element is fixed:

1. remove filters (the element and its subtree are dropped)
2. keep filters (the element's outer HTML is emitted verbatim)
3. custom rules in insertion order; the first match wins
4. the built-in CommonMark table
5. generic fallback (children pass through as block or inline content)

The registry is mutated only while a service is being configured. Lookups
never modify it, so one registry can serve any number of conversions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Literal, Optional

from htmldown.exceptions import ValidationError
from htmldown.rules.commonmark import builtin_handler
from htmldown.rules.filters import Filter, FilterLike, as_filter
from htmldown.rules.rule import ReplacementFn, Rule

if TYPE_CHECKING:
    from htmldown.dom import DomNode

logger = logging.getLogger(__name__)

MatchKind = Literal["remove", "keep", "custom", "builtin", "fallback"]


@dataclass(frozen=True)
class RuleMatch:
    """Result of a registry lookup.

    Parameters
    ----------
    kind : {"remove", "keep", "custom", "builtin", "fallback"}
        Which stage of the lookup matched
    rule : Rule or None
        The matching custom rule, for ``kind == "custom"``
    rule_name : str or None
        Name the custom rule was registered under
    handler : str or None
        Converter method name, for ``kind == "builtin"``

    """

    kind: MatchKind
    rule: Optional[Rule] = None
    rule_name: Optional[str] = None
    handler: Optional[str] = None


_REMOVE = RuleMatch(kind="remove")
_KEEP = RuleMatch(kind="keep")
_FALLBACK = RuleMatch(kind="fallback")


class RuleRegistry:
    """Ordered collection of custom rules, keep filters and remove filters.

    Examples
    --------
        >>> registry = RuleRegistry()
        >>> registry.add("strike", Rule.create("del", lambda c, n, o: f"~~{c}~~"))
        >>> registry.keep(["iframe"])
        >>> registry.remove("aside")
        >>> registry.for_node(ElementNode("del")).kind
        'custom'

    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._custom_rules: dict[str, Rule] = {}
        self._keep_filters: list[Filter] = []
        self._remove_filters: list[Filter] = []

    def add(self, name: str, rule: Rule | FilterLike, replacement: Optional[ReplacementFn] = None) -> None:
        """Register a custom rule under ``name``.

        Re-registering a name replaces the rule but keeps its original
        position in the lookup order.

        Parameters
        ----------
        name : str
            Rule name, reported in :class:`~htmldown.exceptions.RuleExecutionError`
        rule : Rule or filter specification
            A :class:`Rule`, or a filter specification combined with ``replacement``
        replacement : callable, optional
            Replacement function; required when ``rule`` is not a :class:`Rule`

        Raises
        ------
        ValidationError
            If a filter specification is given without a callable replacement.

        """
        if not isinstance(rule, Rule):
            if replacement is None or not callable(replacement):
                raise ValidationError(
                    f"Rule {name!r} needs a callable replacement",
                    parameter_name="replacement",
                    parameter_value=replacement,
                )
            rule = Rule.create(rule, replacement)

        if name in self._custom_rules:
            logger.debug(f"Rule '{name}' already registered, overwriting")
        self._custom_rules[name] = rule
        logger.debug(f"Registered rule: {name}")

    def keep(self, filter: FilterLike) -> None:
        """Add a filter whose matching elements are emitted as HTML."""
        self._keep_filters.append(as_filter(filter))

    def remove(self, filter: FilterLike) -> None:
        """Add a filter whose matching elements are dropped with their subtree."""
        self._remove_filters.append(as_filter(filter))

    def get(self, name: str) -> Optional[Rule]:
        """Return the custom rule registered under ``name``, or None."""
        return self._custom_rules.get(name)

    def names(self) -> list[str]:
        """Return custom rule names in lookup order."""
        return list(self._custom_rules)

    def __contains__(self, name: object) -> bool:
        """Return True if a custom rule named ``name`` is registered."""
        return name in self._custom_rules

    def __iter__(self) -> Iterator[tuple[str, Rule]]:
        """Iterate over ``(name, rule)`` pairs in lookup order."""
        return iter(list(self._custom_rules.items()))

    def __len__(self) -> int:
        """Return the number of custom rules."""
        return len(self._custom_rules)

    def __bool__(self) -> bool:
        """Return True if any custom rule, keep filter or remove filter is registered."""
        return bool(self._custom_rules or self._keep_filters or self._remove_filters)

    def for_node(self, node: DomNode) -> RuleMatch:
        """Find how ``node`` should be converted.

        Parameters
        ----------
        node : DomNode
            Element to look up

        Returns
        -------
        RuleMatch
            The first matching stage of the lookup order

        """
        if any(f.matches(node) for f in self._remove_filters):
            return _REMOVE
        if any(f.matches(node) for f in self._keep_filters):
            return _KEEP

        for name, rule in self._custom_rules.items():
            if rule.matches(node):
                return RuleMatch(kind="custom", rule=rule, rule_name=name)

        tag_name = getattr(node, "tag_name", None)
        if tag_name is not None:
            handler = builtin_handler(tag_name)
            if handler is not None:
                return RuleMatch(kind="builtin", handler=handler)

        return _FALLBACK
