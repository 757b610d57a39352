#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the TurndownService facade."""
import logging

import pytest
from bs4 import BeautifulSoup

from htmldown import TurndownService
from htmldown.dom import ElementNode, TextNode, parse_html
from htmldown.exceptions import ConfigurationError, RuleExecutionError, ValidationError
from htmldown.options import TurndownOptions
from htmldown.rules import Rule


@pytest.mark.unit
class TestConstruction:
    """Test building services with options."""

    def test_default_options(self, service):
        """Test that a bare service uses the defaults."""
        assert service.options == TurndownOptions()

    def test_snake_case_overrides(self):
        """Test keyword overrides with field names."""
        assert TurndownService(heading_style="atx").options.heading_style == "atx"

    def test_camel_case_overrides(self):
        """Test keyword overrides with turndown names."""
        service = TurndownService(codeBlockStyle="fenced", bulletListMarker="-")
        assert service.options.code_block_style == "fenced"
        assert service.options.bullet_list_marker == "-"

    def test_overrides_applied_on_top_of_options(self):
        """Test that overrides update a given options object."""
        base = TurndownOptions(heading_style="atx", fence="~~~")
        service = TurndownService(base, fence="```")
        assert service.options.heading_style == "atx"
        assert service.options.fence == "```"

    def test_invalid_value(self):
        """Test that invalid values are rejected at construction."""
        with pytest.raises(ConfigurationError):
            TurndownService(headingStyle="fancy")

    def test_unknown_option(self):
        """Test that unknown option names are rejected."""
        with pytest.raises(ConfigurationError):
            TurndownService(linkStyl="referenced")

    def test_same_option_spelled_twice(self):
        """Test that camelCase and snake_case spellings of one option conflict."""
        with pytest.raises(ConfigurationError) as exc_info:
            TurndownService(headingStyle="atx", heading_style="setext")
        assert exc_info.value.parameter_name == "heading_style"


@pytest.mark.unit
class TestTurndownInputs:
    """Test accepted and rejected input types."""

    def test_string(self, service):
        """Test an HTML string."""
        assert service.turndown("<p>Hello</p>") == "Hello"

    def test_dom_node(self, service):
        """Test an already built node tree."""
        tree = ElementNode("p", children=[TextNode("Hi "), ElementNode("em", children=[TextNode("there")])])
        assert service.turndown(tree) == "Hi _there_"

    def test_parsed_document(self, service):
        """Test the result of parse_html."""
        assert service.turndown(parse_html("<h2>Sub</h2>")) == "Sub\n---"

    def test_beautifulsoup(self, service):
        """Test a BeautifulSoup document."""
        soup = BeautifulSoup("<ul><li>One</li></ul>", "html.parser")
        assert service.turndown(soup) == "* One"

    def test_beautifulsoup_tag(self, service):
        """Test a single BeautifulSoup tag."""
        soup = BeautifulSoup("<div><p>skip</p><blockquote>quote</blockquote></div>", "html.parser")
        assert service.turndown(soup.blockquote) == "> quote"

    @pytest.mark.parametrize("value", [None, 42, b"<p>x</p>", ["<p>x</p>"]])
    def test_invalid_input(self, service, value):
        """Test that other types are rejected."""
        with pytest.raises(ValidationError):
            service.turndown(value)

    def test_empty_string(self, service):
        """Test that empty input gives empty output."""
        assert service.turndown("") == ""


@pytest.mark.unit
class TestReferenceExamples:
    """Test the reference conversions of the turndown defaults."""

    def test_heading_and_strong(self, service):
        """Test a setext heading followed by a paragraph."""
        html = "<h1>Title</h1><p>Hello <strong>World</strong></p>"
        assert service.turndown(html) == "Title\n=====\n\nHello **World**"

    def test_unordered_list(self, service):
        """Test a bulleted list."""
        assert service.turndown("<ul><li>One</li><li>Two</li></ul>") == "* One\n* Two"

    def test_ordered_list_start(self, service):
        """Test an ordered list with a start attribute."""
        assert service.turndown('<ol start="3"><li>A</li><li>B</li></ol>') == "3. A\n4. B"

    def test_nested_list_indentation(self, service):
        """Test that nested lists are indented by the parent marker width."""
        html = "<ol><li>A<ul><li>B<ul><li>C</li></ul></li></ul></li></ol>"
        assert service.turndown(html) == "1. A\n   * B\n     * C"

    def test_fenced_code(self):
        """Test a fenced code block."""
        service = TurndownService(code_block_style="fenced")
        assert service.turndown("<pre><code>a()</code></pre>") == "```\na()\n```"

    def test_fenced_code_language(self):
        """Test that the language is written after the fence."""
        service = TurndownService(code_block_style="fenced")
        html = '<pre><code class="language-js">let x = 1;\n</code></pre>'
        assert service.turndown(html) == "```js\nlet x = 1;\n```"

    def test_indented_code(self, service):
        """Test an indented code block between paragraphs."""
        html = "<p>Before</p><pre><code>a()\nb()</code></pre><p>After</p>"
        assert service.turndown(html) == "Before\n\n    a()\n    b()\n\nAfter"

    def test_paragraphs_and_escaping(self, service):
        """Test that text-only paragraphs are separated and escaped."""
        html = "<p>1. first *star*</p><p># not a heading</p><p>under_score</p>"
        assert service.turndown(html) == "1\\. first \\*star\\*\n\n\\# not a heading\n\nunder\\_score"

    def test_full_reference_links(self):
        """Test that identical links share one definition."""
        service = TurndownService(linkStyle="referenced")
        html = '<p><a href="/a" title="T">one</a> and <a href="/a" title="T">two</a></p>'
        assert service.turndown(html) == '[one][1] and [two][1]\n\n[1]: /a "T"'

    def test_blockquote_with_list(self, service):
        """Test a list inside a quote."""
        html = "<blockquote><p>Intro</p><ul><li>x</li></ul></blockquote>"
        assert service.turndown(html) == "> Intro\n>\n> * x"

    def test_line_break(self, service):
        """Test a hard line break."""
        assert service.turndown("<p>one<br>two</p>") == "one  \ntwo"

    def test_horizontal_rule(self, service):
        """Test the default thematic break."""
        assert service.turndown("<p>a</p><hr><p>b</p>") == "a\n\n* * *\n\nb"

    def test_image(self, service):
        """Test an image."""
        assert service.turndown('<img src="/i.png" alt="Logo" title="Our logo">') == '![Logo](/i.png "Our logo")'

    def test_table(self, service):
        """Test a simple table."""
        html = "<table><tr><th>Name</th><th>Qty</th></tr><tr><td>Apple</td><td>3</td></tr></table>"
        assert service.turndown(html) == "| Name | Qty |\n| --- | --- |\n| Apple | 3 |"

    def test_full_document(self, service, sample_html):
        """Test a complete document with head and scripts."""
        result = service.turndown(sample_html)
        assert result.startswith("Sample Document\n===============\n\n")
        assert "This is a **sample document** with _italic text_ and some `inline code`." in result
        assert "* Item 1\n* Item 2" in result
        assert "3. Third item\n4. Fourth item" in result
        assert '    def hello_world():\n        print("Hello, World!")' in result
        assert "> Quoted text" in result
        assert '[docs](https://example.com "Example")' in result
        assert "| Header 1 | Header 2 |\n| --- | --- |\n| Row 1 | Data 1 |" in result
        assert "alert" not in result
        assert "color" not in result
        assert "Sample\n" not in result.split("===============")[1]


@pytest.mark.unit
class TestRuleConfiguration:
    """Test rules, keep, remove and plugins through the service."""

    def test_add_rule_chaining(self):
        """Test that configuration methods return the service."""
        service = TurndownService()
        result = (
            service.add_rule("strike", ["del", "s"], lambda content, node, options: f"~~{content}~~")
            .keep("iframe")
            .remove("aside")
        )
        assert result is service

    def test_custom_rule(self):
        """Test a strikethrough rule."""
        service = TurndownService().add_rule("strike", ["del", "s"], lambda content, node, options: f"~~{content}~~")
        assert service.turndown("<p>Now <del>old</del> new</p>") == "Now ~~old~~ new"

    def test_rule_object(self):
        """Test registering a prebuilt Rule."""
        rule = Rule.create("kbd", lambda content, node, options: f"<kbd>{content}</kbd>")
        service = TurndownService().add_rule("kbd", rule)
        assert service.turndown("<p>Press <kbd>Enter</kbd></p>") == "Press <kbd>Enter</kbd>"
        assert service.rules.get("kbd") is rule

    def test_custom_rule_overrides_builtin(self):
        """Test that custom rules take precedence over built-in ones."""
        service = TurndownService().add_rule("bold", "strong", lambda content, node, options: f"<b>{content}</b>")
        assert service.turndown("<p><strong>x</strong></p>") == "<b>x</b>"

    def test_block_rule_output_separated(self):
        """Test that block rule output is a block of its own."""
        service = TurndownService().add_rule(
            "figure", "figure", lambda content, node, options: f"\n\n[figure: {content}]\n\n"
        )
        html = "<p>a</p><figure><figcaption>cap</figcaption></figure><p>b</p>"
        assert service.turndown(html) == "a\n\n[figure: cap]\n\nb"

    def test_keep(self):
        """Test that kept elements are emitted as HTML."""
        service = TurndownService().keep(["iframe"])
        html = '<p>See</p><iframe src="https://example.com/embed"></iframe>'
        assert service.turndown(html) == 'See\n\n<iframe src="https://example.com/embed"></iframe>'

    def test_keep_inline(self):
        """Test keeping an inline element."""
        service = TurndownService().keep("sup")
        assert service.turndown("<p>x<sup>2</sup></p>") == "x<sup>2</sup>"

    def test_remove(self):
        """Test that removed elements vanish."""
        service = TurndownService().remove(lambda node: node.get("class") == "ad")
        html = '<p>keep</p><div class="ad"><p>buy</p></div>'
        assert service.turndown(html) == "keep"

    def test_failing_rule_leaves_service_usable(self):
        """Test recovery after a rule error."""

        def explode(content, node, options):
            raise ValueError("bad node")

        service = TurndownService().add_rule("explode", "span", explode)
        with pytest.raises(RuleExecutionError) as exc_info:
            service.turndown("<p><span>x</span></p>")
        assert exc_info.value.rule_name == "explode"
        assert service.turndown("<p>fine</p>") == "fine"

    def test_use_plugin(self):
        """Test applying a single plugin."""

        def strikethrough(service):
            service.add_rule("strike", "del", lambda content, node, options: f"~{content}~")

        service = TurndownService().use_plugin(strikethrough)
        assert service.turndown("<p><del>x</del></p>") == "~x~"

    def test_use_plugin_list(self):
        """Test applying several plugins in order."""
        applied = []
        plugins = [lambda s: applied.append("a"), lambda s: applied.append("b")]
        service = TurndownService()
        assert service.use(plugins) is service
        assert applied == ["a", "b"]

    def test_non_callable_plugin(self):
        """Test that plugins must be callable."""
        with pytest.raises(ValidationError):
            TurndownService().use_plugin([42])

    def test_escape(self, service):
        """Test the escape helper."""
        assert service.escape("*not emphasis*") == "\\*not emphasis\\*"

    def test_debug_records_emitted(self, caplog):
        """Test that conversions log decision points at debug level."""
        with caplog.at_level(logging.DEBUG, logger="htmldown"):
            TurndownService().keep("kbd").turndown("<p><kbd>x</kbd></p>")
        assert any("Keeping <kbd>" in record.getMessage() for record in caplog.records)


@pytest.mark.unit
class TestRulesInsideStructures:
    """Test keep, remove and custom rules on list and table descendants."""

    TABLE = "<table><thead><tr><th>H</th></tr></thead><tbody><tr><td>a</td></tr></tbody></table>"

    def test_task_list_rule(self):
        """Test a rule that replaces every list item with its own marker."""
        service = TurndownService().add_rule("task", "li", lambda content, node, options: f"- [ ] {content}")
        assert service.turndown("<ul><li>a</li><li>b</li></ul>") == "- [ ] a\n- [ ] b"

    def test_kept_item_between_builtin_items(self):
        """Test that a kept item sits on its own line between marked items."""
        service = TurndownService().keep(lambda node: node.get("class") == "raw")
        html = '<ul><li>a</li><li class="raw">b</li><li>c</li></ul>'
        assert service.turndown(html) == '* a\n<li class="raw">b</li>\n* c'

    def test_remove_rows(self):
        """Test that removing tr drops every row of the table."""
        assert TurndownService().remove("tr").turndown(self.TABLE) == ""

    def test_custom_cell_rule(self):
        """Test that a rule on td replaces the cell content."""
        service = TurndownService().add_rule("cell", "td", lambda content, node, options: "X")
        assert service.turndown(self.TABLE) == "| H |\n| --- |\n| X |"

    def test_custom_section_rule(self):
        """Test that a rule on tbody becomes a verbatim line of the table."""
        service = TurndownService().add_rule("body", "tbody", lambda content, node, options: "(body)")
        assert service.turndown(self.TABLE) == "| H |\n| --- |\n(body)"

    def test_removed_cell(self):
        """Test that a removed cell is padded like a short row."""
        service = TurndownService().remove(lambda node: node.get("class") == "skip")
        html = '<table><tr><th>A</th><th>B</th></tr><tr><td class="skip">1</td><td>2</td></tr></table>'
        assert service.turndown(html) == "| A | B |\n| --- | --- |\n| 2 |  |"


@pytest.mark.unit
class TestPreformattedText:
    """Test pre elements without a code child."""

    def test_escaped_not_code(self, service):
        """Test that a bare pre is escaped text rather than a code block."""
        assert service.turndown("<pre>plain *text*</pre>") == "plain \\*text\\*"

    def test_whitespace_kept(self, service):
        """Test that line breaks and indentation survive."""
        assert service.turndown("<pre>a  b\n  c</pre>") == "a  b\n  c"

    def test_pre_with_code_is_code(self, service):
        """Test that pre > code still becomes a code block."""
        assert service.turndown("<pre><code>plain *text*</code></pre>") == "    plain *text*"
