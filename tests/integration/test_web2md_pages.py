#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_web2md_pages.py
"""Integration tests converting whole pages through parsing, extraction and rendering.

These cover the documented end-to-end scenarios plus realistic, indented
markup as it arrives from a browser.
"""

import threading

import pytest

from web2md import Rule, RuleRegistry, TagMatcher, convert, html_to_markdown
from web2md.nodes import h
from web2md.soup import from_soup, parse_html

ARTICLE = """<!DOCTYPE html>
<html>
<head><title>Guide</title><link rel="stylesheet" href="site.css"></head>
<body>
<nav><a href="/">Home</a> | <a href="/blog">Blog</a></nav>
<main>
<article>
  <h1>Getting started</h1>
  <p>Install with <code>pip install web2md</code>, then read the
     <a href="https://example.com/docs" title="Docs">documentation</a>.</p>
  <pre><code class="language-bash">web2md page.html --mode main
</code></pre>
  <blockquote><p>Markdown is <em>just text</em>.</p></blockquote>
  <ol>
    <li>Parse</li>
    <li>Convert</li>
  </ol>
  <table>
    <thead><tr><th>Option</th><th>Default</th></tr></thead>
    <tbody><tr><td>heading_style</td><td>atx</td></tr></tbody>
  </table>
  <hr>
  <p><img src="logo.png" alt="Logo"></p>
</article>
</main>
<script>analytics();</script>
</body>
</html>
"""

ARTICLE_MARKDOWN = (
    "# Getting started\n"
    "\n"
    'Install with `pip install web2md`, then read the [documentation](https://example.com/docs "Docs").\n'
    "\n"
    "```bash\n"
    "web2md page.html --mode main\n"
    "```\n"
    "\n"
    "> Markdown is _just text_.\n"
    "\n"
    "1. Parse\n"
    "2. Convert\n"
    "\n"
    "| Option | Default |\n"
    "| --- | --- |\n"
    "| heading\\_style | atx |\n"
    "\n"
    "---\n"
    "\n"
    "![Logo](logo.png)\n"
)


@pytest.mark.integration
class TestScenarios:
    """The reference conversions."""

    def test_heading_and_strong(self):
        html = "<h1>Title</h1><p>Hello <strong>world</strong></p>"
        assert html_to_markdown(html) == "# Title\n\nHello **world**\n"

    def test_nested_list(self):
        html = "<ul><li>A</li><li>B<ul><li>C</li></ul></li></ul>"
        assert html_to_markdown(html) == "- A\n- B\n  - C\n"

    def test_script_dropped(self):
        assert html_to_markdown("<script>evil()</script><p>Safe</p>") == "Safe\n"

    def test_script_dropped_without_sanitizing(self):
        """The ignore rule drops script even in a hand-built tree."""
        tree = h("div", h("script", "evil()"), h("p", "Safe"))
        assert convert(tree).markdown == "Safe\n"

    def test_table_with_pipe(self):
        markdown = html_to_markdown("<table><tr><th>H</th></tr><tr><td>a|b</td></tr></table>")
        assert "a\\|b" in markdown
        assert "| --- |" in markdown
        assert markdown == "| H |\n| --- |\n| a\\|b |\n"


@pytest.mark.integration
class TestPages:
    """Conversions of realistic markup."""

    def test_article_main_region(self):
        assert html_to_markdown(ARTICLE, mode="main") == ARTICLE_MARKDOWN

    def test_article_body_includes_navigation(self):
        markdown = html_to_markdown(ARTICLE)
        assert markdown.startswith("[Home](/) | [Blog](/blog)\n\n# Getting started\n")
        assert "analytics" not in markdown

    def test_article_with_title(self):
        markdown = html_to_markdown(ARTICLE, {"extract_title": True}, mode="main")
        assert markdown == "# Guide\n\n" + ARTICLE_MARKDOWN

    def test_article_selection(self):
        markdown = html_to_markdown(ARTICLE, mode="selection", selector="blockquote")
        assert markdown == "> Markdown is _just text_.\n"

    def test_three_level_list_indentation(self):
        html = """
        <ul>
          <li>one
            <ul>
              <li>two
                <ul>
                  <li>three</li>
                </ul>
              </li>
            </ul>
          </li>
        </ul>
        """
        lines = html_to_markdown(html).splitlines()
        assert lines == ["- one", "  - two", "    - three"]
        assert [len(line) - len(line.lstrip(" ")) for line in lines] == [0, 2, 4]

    def test_block_content_in_list_item(self):
        html = """
        <ul>
          <li>
            <p>Run:</p>
            <pre>make test</pre>
          </li>
          <li>Done</li>
        </ul>
        """
        assert html_to_markdown(html) == "- Run:\n\n  ```\n  make test\n  ```\n- Done\n"

    def test_list_in_blockquote(self):
        html = "<blockquote><ul><li>a</li><li>b</li></ul></blockquote>"
        assert html_to_markdown(html) == "> - a\n> - b\n"

    def test_inline_whitespace_across_tags(self):
        assert html_to_markdown("<p>Hello<b> bold </b>world</p>") == "Hello **bold** world\n"

    def test_definition_list(self):
        html = "<dl>\n  <dt>web2md</dt>\n  <dd>HTML to Markdown</dd>\n</dl>"
        assert html_to_markdown(html) == "**web2md**\n: HTML to Markdown\n"

    def test_code_with_backticks_inside_prose(self):
        html = "<p>Write <code>``x``</code> for code.</p>"
        assert html_to_markdown(html) == "Write ``` ``x`` ``` for code.\n"

    def test_nested_table_keeps_outer_columns(self):
        html = (
            "<table><tr><th>A</th><th>B</th></tr>"
            "<tr><td><table><tr><td>x</td><td>y</td></tr></table></td><td>z</td></tr></table>"
        )
        assert html_to_markdown(html) == "| A | B |\n| --- | --- |\n| x y | z |\n"

    def test_line_breaks_in_preformatted_markup(self):
        assert html_to_markdown("<pre>line1<br>line2</pre>") == "```\nline1\nline2\n```\n"

    def test_comments_and_doctype_ignored(self):
        html = "<!DOCTYPE html><!-- header --><p>a<!-- inline -->b</p>"
        assert html_to_markdown(html) == "ab\n"

    def test_empty_page(self):
        assert html_to_markdown("") == ""
        assert html_to_markdown("<html><head><title>T</title></head><body>  </body></html>") == ""


@pytest.mark.integration
class TestConcurrency:
    """Conversions running while the registry changes."""

    def test_registration_during_conversions(self):
        registry = RuleRegistry()
        tree = from_soup(parse_html(ARTICLE))
        expected = convert(tree, registry=registry).markdown
        results = []
        errors = []

        def convert_many():
            for _ in range(10):
                result = convert(tree, registry=registry)
                if not result.success:
                    errors.append(result.error)
                results.append(result.markdown)

        def register_many():
            for n in range(50):
                registry.register(Rule(f"widget-{n}", TagMatcher.of("x-widget"), lambda node, children, ctx: ""))

        threads = [threading.Thread(target=convert_many) for _ in range(3)]
        threads.append(threading.Thread(target=register_many))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert not errors
        assert set(results) == {expected}
