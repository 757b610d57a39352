#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/rules/filters.py
"""Filters deciding which DOM nodes a rule, keep or remove entry applies to.

Three variants are supported:

- :class:`TagName` matches a single tag name
- :class:`TagNames` matches any tag in a set
- :class:`Predicate` calls a user function with the node

Tag comparison is case-insensitive. Filters only ever match elements; text
and comment nodes never match a tag filter.

Examples
--------
    >>> as_filter("del")
    TagName(name='del')
    >>> as_filter(["del", "s"])
    >>> note_filter = as_filter(lambda node: node.get("class") == "note")

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Union

from htmldown.exceptions import ValidationError

if TYPE_CHECKING:
    from htmldown.dom import DomNode


@dataclass(frozen=True)
class TagName:
    """Match elements with the given tag name."""

    name: str

    def __post_init__(self) -> None:
        """Normalize the tag name to lower case."""
        object.__setattr__(self, "name", self.name.lower())

    def matches(self, node: DomNode) -> bool:
        """Return True if ``node`` is an element named ``name``."""
        return getattr(node, "tag_name", None) == self.name


@dataclass(frozen=True)
class TagNames:
    """Match elements whose tag name is one of ``names``."""

    names: frozenset[str]

    def __post_init__(self) -> None:
        """Normalize the tag names to a lower-case frozenset."""
        object.__setattr__(self, "names", frozenset(name.lower() for name in self.names))

    def matches(self, node: DomNode) -> bool:
        """Return True if ``node`` is an element named in ``names``."""
        return getattr(node, "tag_name", None) in self.names


@dataclass(frozen=True)
class Predicate:
    """Match nodes for which ``fn(node)`` returns a truthy value.

    Parameters
    ----------
    fn : Callable[[DomNode], bool]
        Pure function of the node; it must not modify the tree

    """

    fn: Callable[[Any], bool]

    def matches(self, node: DomNode) -> bool:
        """Return ``bool(fn(node))``."""
        return bool(self.fn(node))


Filter = Union[TagName, TagNames, Predicate]
FilterLike = Union[Filter, str, Iterable[str], Callable[[Any], bool]]


def as_filter(value: FilterLike) -> Filter:
    """Coerce a tag name, tag names, callable or filter into a :data:`Filter`.

    Parameters
    ----------
    value : Filter, str, iterable of str or callable
        Filter specification

    Returns
    -------
    Filter
        Filter instance

    Raises
    ------
    ValidationError
        If ``value`` cannot be interpreted as a filter.

    """
    if isinstance(value, (TagName, TagNames, Predicate)):
        return value
    if isinstance(value, str):
        return TagName(value)
    if callable(value):
        return Predicate(value)
    if isinstance(value, Iterable):
        names = list(value)
        if all(isinstance(name, str) for name in names):
            return TagNames(frozenset(names))

    raise ValidationError(
        f"Cannot build a filter from {type(value).__name__}; expected a tag name, "
        "a list of tag names or a callable",
        parameter_name="filter",
        parameter_value=value,
    )
