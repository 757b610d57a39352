#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/htmldown/rules/__init__.py
"""Filters, rules and the rule registry."""

from htmldown.rules.commonmark import COMMONMARK_RULES, builtin_handler
from htmldown.rules.filters import Filter, FilterLike, Predicate, TagName, TagNames, as_filter
from htmldown.rules.registry import RuleMatch, RuleRegistry
from htmldown.rules.rule import ReplacementFn, Rule

__all__ = [
    "COMMONMARK_RULES",
    "Filter",
    "FilterLike",
    "Predicate",
    "ReplacementFn",
    "Rule",
    "RuleMatch",
    "RuleRegistry",
    "TagName",
    "TagNames",
    "as_filter",
    "builtin_handler",
]
