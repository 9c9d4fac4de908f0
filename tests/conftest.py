"""Pytest configuration and shared fixtures for the web2md test suite."""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from web2md import ConversionOptions, RuleRegistry, html_to_markdown

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "property: Property-based tests driven by Hypothesis")


@pytest.fixture
def registry() -> RuleRegistry:
    """Provide a fresh registry with the built-in rules, isolated from the default one."""
    return RuleRegistry()


@pytest.fixture
def md():
    """Convert an HTML string with optional option overrides.

    Returns
    -------
    callable
        ``md(html, **options) -> str``

    """

    def _convert(html: str, **options) -> str:
        return html_to_markdown(html, ConversionOptions(**options))

    return _convert


@pytest.fixture
def sample_page(tmp_path: Path) -> Path:
    """Write a small but complete HTML page to disk.

    Returns
    -------
    Path
        Path of the written page

    """
    page = tmp_path / "page.html"
    page.write_text(
        """<!DOCTYPE html>
<html>
  <head>
    <title>Release Notes: v2?</title>
    <style>body { color: red; }</style>
  </head>
  <body>
    <nav><a href="/">Home</a></nav>
    <main>
      <h1>Release Notes</h1>
      <p>Version <code>2.0</code> is <em>out</em>.</p>
      <ul>
        <li>Faster</li>
        <li>Smaller</li>
      </ul>
    </main>
    <script>track();</script>
  </body>
</html>
""",
        encoding="utf-8",
    )
    return page
