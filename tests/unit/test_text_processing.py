#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for whitespace collapsing and Markdown escaping."""
import pytest

from htmldown.utils.text import collapse_whitespace, escape_markdown, longest_run, process_text


@pytest.mark.unit
class TestEscapeMarkdown:
    """Test escaping of Markdown-significant characters."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a*b", "a\\*b"),
            ("snake_case", "snake\\_case"),
            ("back\\slash", "back\\\\slash"),
            ("`tick`", "\\`tick\\`"),
            ("[link]", "\\[link\\]"),
        ],
    )
    def test_always_escaped_characters(self, text, expected):
        """Test characters escaped wherever they appear."""
        assert escape_markdown(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("# Title", "\\# Title"),
            ("###### Deep", "\\###### Deep"),
            ("> quote", "\\> quote"),
            ("- item", "\\- item"),
            ("+ item", "\\+ item"),
            ("===", "\\==="),
            ("~~~ fence", "\\~~~ fence"),
            ("1. item", "1\\. item"),
            ("2020. A year", "2020\\. A year"),
        ],
    )
    def test_line_start_sequences(self, text, expected):
        """Test sequences that are only escaped at the start of a line."""
        assert escape_markdown(text) == expected

    def test_line_start_sequences_mid_line_untouched(self):
        """Test that line-start sequences are left alone mid-line."""
        assert escape_markdown("a # b > c - d + e 1. f") == "a # b > c - d + e 1. f"

    def test_hash_without_space_not_escaped(self):
        """Test that a hash not followed by a space is not a heading."""
        assert escape_markdown("#hashtag") == "#hashtag"

    def test_seven_hashes_not_escaped(self):
        """Test that only runs of one to six hashes are escaped."""
        assert escape_markdown("####### x") == "####### x"

    def test_plus_without_space_not_escaped(self):
        """Test that a plus sign needs a following space."""
        assert escape_markdown("+1") == "+1"

    def test_number_without_space_not_escaped(self):
        """Test that a number with a dot but no space is not escaped."""
        assert escape_markdown("3.14") == "3.14"

    def test_line_start_after_newline(self):
        """Test that a newline starts a new line for escaping."""
        assert escape_markdown("a\n- b\n# c") == "a\n\\- b\n\\# c"

    def test_plain_text_unchanged(self):
        """Test that text without special characters is unchanged."""
        assert escape_markdown("Hello, world!") == "Hello, world!"

    def test_empty_string(self):
        """Test escaping an empty string."""
        assert escape_markdown("") == ""

    def test_non_ascii_unchanged(self):
        """Test that non-ASCII characters pass through."""
        assert escape_markdown("naïve café ✓") == "naïve café ✓"


@pytest.mark.unit
class TestCollapseWhitespace:
    """Test whitespace collapsing."""

    def test_runs_collapse_to_single_space(self):
        """Test that mixed whitespace runs become one space."""
        assert collapse_whitespace("a \t\n  b") == "a b"

    def test_edges_are_collapsed_not_removed(self):
        """Test that leading and trailing runs are kept as one space."""
        assert collapse_whitespace("\n\n  hello  \n") == " hello "

    def test_unicode_whitespace(self):
        """Test that non-breaking and other Unicode spaces collapse."""
        assert collapse_whitespace("a\xa0\u2003b") == "a b"

    def test_no_escaping(self):
        """Test that collapsing leaves Markdown characters alone."""
        assert collapse_whitespace("*a*  _b_") == "*a* _b_"


@pytest.mark.unit
class TestProcessText:
    """Test the combined single-pass processor."""

    def test_collapse_and_escape(self):
        """Test collapsing and escaping together."""
        assert process_text("  *hello*\n\n  world ") == " \\*hello\\* world "

    def test_line_start_only_at_string_start_when_collapsing(self):
        """Test that collapsed newlines do not create new line starts."""
        assert process_text("a\n- b") == "a - b"

    def test_collapsed_whitespace_after_heading_hash(self):
        """Test that a tab after a hash counts as the required space."""
        assert process_text("#\tTitle") == "\\# Title"

    def test_neither_transform(self):
        """Test that disabling both transforms returns the input."""
        assert process_text(" *a* ", collapse=False, escape=False) == " *a* "


@pytest.mark.unit
class TestLongestRun:
    """Test the run length helper."""

    @pytest.mark.parametrize(
        "text,char,expected",
        [
            ("", "`", 0),
            ("abc", "`", 0),
            ("a`b``c", "`", 2),
            ("~~~~ x ~~", "~", 4),
        ],
    )
    def test_longest_run(self, text, char, expected):
        """Test the longest run of a character."""
        assert longest_run(text, char) == expected
