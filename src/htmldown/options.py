#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for HTML to Markdown conversion.

This module defines the immutable options snapshot held by a
:class:`~htmldown.service.TurndownService` for its lifetime. The option names
and defaults follow the turndown reference converter.
"""
# src/htmldown/options.py

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from htmldown.constants import (
    BULLET_LIST_MARKERS,
    CAMEL_CASE_OPTION_NAMES,
    CODE_BLOCK_STYLES,
    DEFAULT_BULLET_LIST_MARKER,
    DEFAULT_CODE_BLOCK_STYLE,
    DEFAULT_EM_DELIMITER,
    DEFAULT_FENCE,
    DEFAULT_HEADING_STYLE,
    DEFAULT_HR,
    DEFAULT_HTML_PARSER,
    DEFAULT_LINK_REFERENCE_STYLE,
    DEFAULT_LINK_STYLE,
    DEFAULT_STRONG_DELIMITER,
    EM_DELIMITERS,
    FENCE_TOKENS,
    HEADING_STYLES,
    HTML_PARSERS,
    LINK_REFERENCE_STYLES,
    LINK_STYLES,
    STRONG_DELIMITERS,
    BulletListMarker,
    CodeBlockStyle,
    EmDelimiter,
    FenceToken,
    HeadingStyle,
    HtmlParserName,
    LinkReferenceStyle,
    LinkStyle,
    StrongDelimiter,
)
from htmldown.exceptions import ConfigurationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TurndownOptions(CloneFrozenMixin):
    r"""Markdown style options for HTML to Markdown conversion.

    Parameters
    ----------
    heading_style : {"setext", "atx"}, default "setext"
        ``setext`` underlines level 1 and 2 headings with ``=``/``-`` and
        falls back to ``#`` prefixes for levels 3-6; ``atx`` always uses
        ``#`` prefixes.
    hr : str, default "* * *"
        Token emitted for thematic breaks (``<hr>``).
    bullet_list_marker : {"\*", "-", "+"}, default "\*"
        Marker used for unordered list items.
    code_block_style : {"indented", "fenced"}, default "indented"
        How ``<pre>`` blocks are emitted. The language is dropped in
        indented style.
    fence : {"\`\`\`", "~~~"}, default "\`\`\`"
        Fence token for fenced code blocks.
    em_delimiter : {"\_", "\*"}, default "\_"
        Delimiter wrapped around emphasis.
    strong_delimiter : {"\*\*", "\_\_"}, default "\*\*"
        Delimiter wrapped around strong emphasis.
    link_style : {"inlined", "referenced"}, default "inlined"
        Inline links ``[text](url)`` or reference links with definitions
        collected at the end of the document.
    link_reference_style : {"full", "collapsed", "shortcut"}, default "full"
        Reference form used when ``link_style`` is ``referenced``.
    html_parser : {"html.parser", "lxml", "html5lib"}, default "html.parser"
        BeautifulSoup parser used when converting HTML strings.

    Raises
    ------
    ConfigurationError
        If any field holds an unrecognized value.

    """

    heading_style: HeadingStyle = field(
        default=DEFAULT_HEADING_STYLE,
        metadata={"help": "Heading style: setext underlines or atx # prefixes", "choices": HEADING_STYLES},
    )
    hr: str = field(
        default=DEFAULT_HR,
        metadata={"help": "Token used for thematic breaks"},
    )
    bullet_list_marker: BulletListMarker = field(
        default=DEFAULT_BULLET_LIST_MARKER,
        metadata={"help": "Marker used for unordered list items", "choices": BULLET_LIST_MARKERS},
    )
    code_block_style: CodeBlockStyle = field(
        default=DEFAULT_CODE_BLOCK_STYLE,
        metadata={"help": "Code block style: indented or fenced", "choices": CODE_BLOCK_STYLES},
    )
    fence: FenceToken = field(
        default=DEFAULT_FENCE,
        metadata={"help": "Fence token for fenced code blocks", "choices": FENCE_TOKENS},
    )
    em_delimiter: EmDelimiter = field(
        default=DEFAULT_EM_DELIMITER,
        metadata={"help": "Delimiter used for emphasis", "choices": EM_DELIMITERS},
    )
    strong_delimiter: StrongDelimiter = field(
        default=DEFAULT_STRONG_DELIMITER,
        metadata={"help": "Delimiter used for strong emphasis", "choices": STRONG_DELIMITERS},
    )
    link_style: LinkStyle = field(
        default=DEFAULT_LINK_STYLE,
        metadata={"help": "Link style: inlined [text](url) or referenced [text][ref]", "choices": LINK_STYLES},
    )
    link_reference_style: LinkReferenceStyle = field(
        default=DEFAULT_LINK_REFERENCE_STYLE,
        metadata={
            "help": "Reference form for referenced links: full, collapsed or shortcut",
            "choices": LINK_REFERENCE_STYLES,
        },
    )
    html_parser: HtmlParserName = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup parser used for HTML strings", "choices": HTML_PARSERS},
    )

    def __post_init__(self) -> None:
        """Validate every enumerated field and the thematic break token.

        Raises
        ------
        ConfigurationError
            If any field value is not one of its allowed choices.

        """
        for f in fields(self):
            choices = f.metadata.get("choices")
            value = getattr(self, f.name)
            if choices is not None and value not in choices:
                raise ConfigurationError(
                    f"Invalid value for {f.name}: {value!r}. Expected one of: {', '.join(map(repr, choices))}",
                    parameter_name=f.name,
                    parameter_value=value,
                )

        if not isinstance(self.hr, str) or not self.hr.strip():
            raise ConfigurationError("hr must be a non-empty string", parameter_name="hr", parameter_value=self.hr)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TurndownOptions:
        """Build options from a mapping of option names to values.

        Keys may use the snake_case field names or the camelCase names of the
        turndown reference converter (``headingStyle``, ``bulletListMarker``).

        Parameters
        ----------
        data : Mapping[str, Any]
            Option names and values

        Returns
        -------
        TurndownOptions
            Validated options instance

        Raises
        ------
        ConfigurationError
            If a key is not a known option or a value is invalid.

        """
        return cls(**normalize_option_names(data))


def normalize_option_names(data: Mapping[str, Any]) -> dict[str, Any]:
    """Translate camelCase option names to field names and reject unknown keys.

    Parameters
    ----------
    data : Mapping[str, Any]
        Option names and values

    Returns
    -------
    dict[str, Any]
        Mapping keyed by :class:`TurndownOptions` field names

    Raises
    ------
    ConfigurationError
        If a key matches no option, or two keys name the same option.

    """
    known = {f.name for f in fields(TurndownOptions)}
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = CAMEL_CASE_OPTION_NAMES.get(key, key)
        if name not in known:
            raise ConfigurationError(f"Unknown option: {key!r}", parameter_name=key, parameter_value=value)
        if name in normalized:
            raise ConfigurationError(
                f"Option {name!r} given more than once (as {key!r} and another spelling)",
                parameter_name=name,
                parameter_value=value,
            )
        normalized[name] = value
    return normalized
