#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the DOM node model and the BeautifulSoup adapter."""
import pytest
from bs4 import BeautifulSoup

from htmldown.dom import CommentNode, DocumentNode, ElementNode, TextNode, from_soup, parse_html
from htmldown.exceptions import DependencyError, ParsingError


@pytest.mark.unit
class TestElementNode:
    """Test element helpers."""

    def test_names_lowercased(self):
        """Test that tag and attribute names are normalized."""
        node = ElementNode("DIV", {"Class": "x", "ID": "main"})
        assert node.tag_name == "div"
        assert node.attributes == {"class": "x", "id": "main"}

    def test_get_is_case_insensitive(self):
        """Test attribute lookup."""
        node = ElementNode("a", {"href": "/x"})
        assert node.get("HREF") == "/x"
        assert node.get("title") is None
        assert node.get("title", "") == ""

    def test_block_classification(self):
        """Test block and inline classification."""
        assert ElementNode("p").is_block
        assert ElementNode("section").is_block
        assert not ElementNode("span").is_block
        assert not ElementNode("a").is_block

    def test_text_content(self):
        """Test that text is concatenated in document order."""
        node = ElementNode("p", children=[TextNode("a"), ElementNode("b", children=[TextNode("b")]), CommentNode("x")])
        assert node.text_content == "ab"

    def test_element_children(self):
        """Test that only elements are returned."""
        child = ElementNode("span")
        node = ElementNode("p", children=[TextNode("a"), child, CommentNode("c")])
        assert node.element_children() == [child]


@pytest.mark.unit
class TestOuterHtml:
    """Test serialization back to HTML."""

    def test_attributes_and_children(self):
        """Test a simple element with attributes."""
        node = ElementNode(
            "iframe", {"src": "https://example.com/embed", "width": "300"}, [TextNode("fallback")]
        )
        assert node.outer_html() == '<iframe src="https://example.com/embed" width="300">fallback</iframe>'

    def test_text_escaped(self):
        """Test that text is entity escaped."""
        node = ElementNode("span", children=[TextNode("a < b & c\xa0d")])
        assert node.outer_html() == "<span>a &lt; b &amp; c&nbsp;d</span>"

    def test_attribute_quotes_escaped(self):
        """Test that attribute values are quoted safely."""
        node = ElementNode("abbr", {"title": 'say "hi" & bye'})
        assert node.outer_html() == '<abbr title="say &quot;hi&quot; &amp; bye"></abbr>'

    def test_attribute_apostrophe_and_brackets_escaped(self):
        """Test that attribute values use standard HTML entity escaping."""
        node = ElementNode("img", {"alt": "it's <b>", "title": "a\xa0b"})
        assert node.outer_html() == '<img alt="it&#x27;s &lt;b&gt;" title="a&nbsp;b">'

    def test_quotes_in_text_not_escaped(self):
        """Test that quotes in text content are left alone."""
        node = ElementNode("q", children=[TextNode('"hi" it\'s')])
        assert node.outer_html() == '<q>"hi" it\'s</q>'

    def test_void_element(self):
        """Test that void elements have no closing tag."""
        assert ElementNode("img", {"src": "a.png"}).outer_html() == '<img src="a.png">'

    def test_raw_text_element(self):
        """Test that script text is not escaped."""
        node = ElementNode("script", children=[TextNode("if (a < b) {}")])
        assert node.outer_html() == "<script>if (a < b) {}</script>"

    def test_comment(self):
        """Test that comments are preserved."""
        node = ElementNode("div", children=[CommentNode(" note "), TextNode("x")])
        assert node.outer_html() == "<div><!-- note -->x</div>"

    def test_inner_html(self):
        """Test serialization of the children only."""
        node = ElementNode("p", children=[TextNode("a "), ElementNode("em", children=[TextNode("b")])])
        assert node.inner_html() == "a <em>b</em>"


@pytest.mark.unit
class TestParseHtml:
    """Test parsing HTML strings."""

    def test_fragment(self):
        """Test parsing a fragment."""
        tree = parse_html("<p>Hello <b>World</b></p>")
        assert isinstance(tree, DocumentNode)
        [paragraph] = tree.children
        assert paragraph.tag_name == "p"
        assert paragraph.children[0] == TextNode("Hello ")
        assert paragraph.children[1].tag_name == "b"

    def test_entities_decoded(self):
        """Test that text nodes carry decoded characters."""
        tree = parse_html("<p>&lt;tag&gt; &amp; &copy;</p>")
        assert tree.children[0].text_content == "<tag> & ©"

    def test_doctype_dropped(self):
        """Test that the doctype does not become a node."""
        tree = parse_html("<!DOCTYPE html><p>x</p>")
        assert [type(child) for child in tree.children] == [ElementNode]

    def test_comments_kept(self):
        """Test that comments become comment nodes."""
        tree = parse_html("<p><!-- c -->x</p>")
        assert tree.children[0].children[0] == CommentNode(" c ")

    def test_class_attribute_joined(self):
        """Test that multi-valued attributes are joined with spaces."""
        tree = parse_html('<code class="language-python highlight">x</code>')
        assert tree.children[0].get("class") == "language-python highlight"

    def test_missing_parser(self, monkeypatch):
        """Test that an unavailable parser backend is reported."""
        from bs4.exceptions import FeatureNotFound

        def fail(*args, **kwargs):
            raise FeatureNotFound("Couldn't find a tree builder with the features you requested: lxml.")

        monkeypatch.setattr("bs4.BeautifulSoup.__init__", fail)
        with pytest.raises(DependencyError) as exc_info:
            parse_html("<p>x</p>", parser="lxml")
        assert exc_info.value.missing_packages == [("lxml", "")]
        assert isinstance(exc_info.value.__cause__, FeatureNotFound)

    def test_unknown_parser_name(self):
        """Test that an unknown parser name names no installable package."""
        with pytest.raises(DependencyError) as exc_info:
            parse_html("<p>x</p>", parser="no-such-parser")
        assert exc_info.value.missing_packages == []


@pytest.mark.unit
class TestFromSoup:
    """Test adapting existing BeautifulSoup trees."""

    def test_document(self):
        """Test adapting a BeautifulSoup object."""
        soup = BeautifulSoup("<h1>Title</h1>", "html.parser")
        tree = from_soup(soup)
        assert isinstance(tree, DocumentNode)
        assert tree.children[0].tag_name == "h1"

    def test_tag(self):
        """Test adapting a single tag."""
        soup = BeautifulSoup('<div><a href="/x">link</a></div>', "html.parser")
        node = from_soup(soup.a)
        assert node == ElementNode("a", {"href": "/x"}, [TextNode("link")])

    def test_source_tree_unchanged(self):
        """Test that adaptation does not modify the soup."""
        soup = BeautifulSoup("<p>a <b>b</b></p>", "html.parser")
        before = str(soup)
        from_soup(soup)
        assert str(soup) == before

    def test_rejects_other_objects(self):
        """Test that non-soup objects are rejected."""
        with pytest.raises(ParsingError):
            from_soup(42)
