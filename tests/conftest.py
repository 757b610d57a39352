"""Pytest configuration and shared fixtures for the htmldown test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from htmldown import TurndownService

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def service() -> TurndownService:
    """Provide a service with default options.

    Returns
    -------
    TurndownService
        Fresh service with turndown defaults and no custom rules.

    """
    return TurndownService()


@pytest.fixture
def sample_html() -> str:
    """Provide a small article exercising most built-in rules.

    Returns
    -------
    str
        HTML document used across integration tests.

    """
    return """<!DOCTYPE html>
<html>
<head><title>Sample</title><style>p { color: red; }</style></head>
<body>
<h1>Sample Document</h1>
<p>This is a <strong>sample document</strong> with <em>italic text</em> and some <code>inline code</code>.</p>
<h2>Section 2</h2>
<p>Here is a list:</p>
<ul>
  <li>Item 1</li>
  <li>Item 2</li>
</ul>
<ol start="3">
  <li>Third item</li>
  <li>Fourth item</li>
</ol>
<h3>Code Block</h3>
<pre><code class="language-python">def hello_world():
    print("Hello, World!")
</code></pre>
<blockquote><p>Quoted text</p></blockquote>
<p>Read the <a href="https://example.com" title="Example">docs</a>.</p>
<hr>
<table>
  <thead><tr><th>Header 1</th><th>Header 2</th></tr></thead>
  <tbody><tr><td>Row 1</td><td>Data 1</td></tr></tbody>
</table>
<script>alert("ignored");</script>
</body>
</html>
"""
