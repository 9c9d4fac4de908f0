#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_rules.py
"""Unit tests for the built-in conversion rules.

Each test converts a small hand-built tree with a private registry, so the
process-wide default registry is never touched.
"""

import re

import pytest

from web2md import ConversionOptions, RuleRegistry, convert
from web2md.nodes import Comment, h
from web2md.rules import code_language, table_rows


def md(tree, **options):
    return convert(tree, ConversionOptions(**options), RuleRegistry()).unwrap()


@pytest.mark.unit
class TestHeadings:
    """Tests for h1-h6."""

    @pytest.mark.parametrize("level", range(1, 7))
    def test_atx_levels(self, level):
        assert md(h(f"h{level}", "Title")) == "#" * level + " Title\n"

    def test_setext_levels_one_and_two(self):
        """Setext underlines match the heading text length."""
        tree = h("div", h("h1", "Title"), h("h2", "Sub"))
        assert md(tree, heading_style="setext") == "Title\n=====\n\nSub\n---\n"

    def test_setext_falls_back_to_atx_for_deeper_levels(self):
        assert md(h("h3", "Deep"), heading_style="setext") == "### Deep\n"

    def test_line_breaks_flattened(self):
        """Headings are single-line."""
        assert md(h("h2", "a", h("br"), "b")) == "## a b\n"

    def test_empty_heading_dropped(self):
        assert md(h("div", h("h1"), h("p", "x"))) == "x\n"

    def test_trailing_hash_escaped(self):
        """A trailing ' #' would otherwise be read as a closing sequence."""
        assert md(h("h2", "C #")) == "## C \\#\n"


@pytest.mark.unit
class TestBlocks:
    """Tests for paragraphs, rules, breaks and blockquotes."""

    def test_paragraphs_separated_by_blank_line(self):
        assert md(h("div", h("p", "a"), h("p", "b"))) == "a\n\nb\n"

    def test_hard_break_spaces(self):
        assert md(h("p", "a", h("br"), "b")) == "a  \nb\n"

    def test_hard_break_backslash(self):
        assert md(h("p", "a", h("br"), "b"), line_break_style="backslash") == "a\\\nb\n"

    def test_break_at_paragraph_edge_dropped(self):
        assert md(h("p", h("br"), "a", h("br"))) == "a\n"

    def test_horizontal_rule(self):
        tree = h("div", h("p", "a"), h("hr"), h("p", "b"))
        assert md(tree) == "a\n\n---\n\nb\n"
        assert md(tree, horizontal_rule="* * *") == "a\n\n* * *\n\nb\n"

    def test_blockquote(self):
        tree = h("blockquote", h("p", "a"), h("p", "b"))
        assert md(tree) == "> a\n>\n> b\n"

    def test_nested_blockquote(self):
        tree = h("blockquote", h("p", "a"), h("blockquote", h("p", "b")))
        assert md(tree) == "> a\n>\n> > b\n"

    def test_definition_list(self):
        tree = h("dl", h("dt", "Term"), h("dd", "First"), h("dt", "Other"), h("dd", "Second"))
        assert md(tree) == "**Term**\n: First\n**Other**\n: Second\n"


@pytest.mark.unit
class TestCodeBlocks:
    """Tests for <pre> rendering."""

    def test_fenced_with_language_class_on_code(self):
        tree = h("pre", h("code", 'print("hi")\n', class_="language-python"))
        assert md(tree) == '```python\nprint("hi")\n```\n'

    def test_fenced_with_tilde_and_data_lang(self):
        tree = h("pre", "a = 1", data_lang="rust")
        assert md(tree, fence_char="~") == "~~~rust\na = 1\n~~~\n"

    def test_fence_longer_than_content_fence(self):
        tree = h("pre", "```\nnested\n```")
        assert md(tree) == "````\n```\nnested\n```\n````\n"

    def test_highlighting_markup_ignored(self):
        """Only the text of highlighted code is kept."""
        tree = h("pre", h("code", h("span", "x", class_="n"), " = ", h("span", "1")), class_="lang-py")
        assert md(tree) == "```py\nx = 1\n```\n"

    def test_whitespace_and_specials_preserved(self):
        tree = h("pre", "def f():\n    return a*b  # _x_\n")
        assert md(tree) == "```\ndef f():\n    return a*b  # _x_\n```\n"

    def test_blank_lines_inside_fence_preserved(self):
        tree = h("pre", "a\n\n\n\nb")
        assert md(tree) == "```\na\n\n\n\nb\n```\n"

    def test_indented_style(self):
        tree = h("pre", "x = 1\n\ny = 2")
        assert md(tree, code_block_style="indented") == "    x = 1\n\n    y = 2\n"

    def test_line_breaks_inside_pre(self):
        """<br> inside <pre> is a newline of the code."""
        assert md(h("pre", "line1", h("br"), "line2")) == "```\nline1\nline2\n```\n"

    def test_line_breaks_inside_highlighted_code(self):
        tree = h("pre", h("code", h("span", "a"), h("br"), h("span", "b")))
        assert md(tree, code_block_style="indented") == "    a\n    b\n"

    def test_script_inside_pre_ignored(self):
        assert md(h("pre", "x", h("script", "track()"), "y")) == "```\nxy\n```\n"

    @pytest.mark.parametrize(
        "tree,expected",
        [
            (h("pre", class_="language-go"), "go"),
            (h("pre", h("code", class_="hljs lang-js")), "js"),
            (h("pre", data_lang="ruby extra"), "ruby"),
            (h("pre", h("code", class_="highlight")), ""),
        ],
    )
    def test_code_language(self, tree, expected):
        assert code_language(tree) == expected


@pytest.mark.unit
class TestLists:
    """Tests for ordered and unordered lists."""

    def test_unordered(self):
        assert md(h("ul", h("li", "a"), h("li", "b"))) == "- a\n- b\n"

    def test_ordered_with_start(self):
        assert md(h("ol", h("li", "x"), h("li", "y"), start="3")) == "3. x\n4. y\n"

    @pytest.mark.parametrize("start,first", [("abc", "1."), ("-5", "0."), ("0", "0.")])
    def test_ordered_start_edge_cases(self, start, first):
        assert md(h("ol", h("li", "x"), start=start)) == f"{first} x\n"

    def test_bullets_cycle_by_depth(self):
        tree = h("ul", h("li", "a", h("ul", h("li", "b", h("ul", h("li", "c"))))))
        assert md(tree, bullet_symbols="-*+") == "- a\n  * b\n    + c\n"

    def test_ordered_inside_unordered(self):
        tree = h("ul", h("li", "A", h("ol", h("li", "x"), h("li", "y"))))
        assert md(tree) == "- A\n  1. x\n  2. y\n"

    def test_continuation_lines_aligned_under_marker(self):
        tree = h("ol", h("li", "a", h("br"), "b"))
        assert md(tree) == "1. a  \n   b\n"

    def test_block_content_in_item(self):
        tree = h("ul", h("li", h("p", "Step"), h("pre", "run")))
        assert md(tree) == "- Step\n\n  ```\n  run\n  ```\n"

    def test_empty_item(self):
        assert md(h("ul", h("li"), h("li", "b"))) == "-\n- b\n"

    def test_comment_between_items(self):
        """Comments between items do not affect numbering."""
        tree = h("ol", h("li", "a"), Comment(value="gap"), h("li", "b"))
        assert md(tree) == "1. a\n2. b\n"


@pytest.mark.unit
class TestTables:
    """Tests for pipe tables."""

    def test_header_and_separator(self):
        tree = h("table", h("tr", h("th", "H1"), h("th", "H2")), h("tr", h("td", "a"), h("td", "b")))
        assert md(tree) == "| H1 | H2 |\n| --- | --- |\n| a | b |\n"

    def test_row_groups(self):
        tree = h(
            "table",
            h("thead", h("tr", h("th", "H"))),
            h("tbody", h("tr", h("td", "1")), h("tr", h("td", "2"))),
        )
        assert md(tree) == "| H |\n| --- |\n| 1 |\n| 2 |\n"

    def test_short_rows_padded(self):
        tree = h("table", h("tr", h("th", "A"), h("th", "B")), h("tr", h("td", "x")))
        assert md(tree) == "| A | B |\n| --- | --- |\n| x |  |\n"

    def test_colspan_fills_columns(self):
        tree = h("table", h("tr", h("th", "A"), h("th", "B")), h("tr", h("td", "x", colspan="2")))
        assert md(tree) == "| A | B |\n| --- | --- |\n| x |  |\n"

    def test_cells_are_single_line_and_escape_pipes(self):
        tree = h("table", h("tr", h("th", "H")), h("tr", h("td", "a|b", h("br"), "c")))
        assert md(tree) == "| H |\n| --- |\n| a\\|b c |\n"

    def test_pipe_in_inline_code_cell(self):
        tree = h("table", h("tr", h("th", "H")), h("tr", h("td", h("code", "a|b"))))
        assert md(tree).endswith("| `a\\|b` |\n")

    def test_caption(self):
        tree = h("table", h("caption", "Cap"), h("tr", h("td", "x")))
        assert md(tree) == "_Cap_\n\n| x |\n| --- |\n"

    def test_nested_table_flattened_into_cell(self):
        """A table inside a cell becomes that cell's text; the row keeps its width."""
        inner = h("table", h("tr", h("td", "x"), h("td", "y")))
        tree = h("table", h("tr", h("th", "A"), h("th", "B")), h("tr", h("td", inner), h("td", "z")))
        markdown = md(tree)
        assert markdown == "| A | B |\n| --- | --- |\n| x y | z |\n"
        body = markdown.splitlines()[2]
        assert len(re.split(r"(?<!\\)\|", body)[1:-1]) == 2
        assert markdown.count("---") == 2

    def test_nested_table_rows_joined(self):
        inner = h("table", h("tr", h("th", "k"), h("th", "v")), h("tr", h("td", "a|b"), h("td", "")))
        tree = h("table", h("tr", h("td", inner)))
        assert md(tree) == "| k v a\\|b |\n| --- |\n"

    def test_link_title_pipe_escaped_in_cell(self):
        tree = h("table", h("tr", h("td", h("a", "t", href="/x", title="a|b"))))
        assert md(tree) == '| [t](/x "a\\|b") |\n| --- |\n'

    def test_image_title_pipe_escaped_in_cell(self):
        tree = h("table", h("tr", h("td", h("img", src="i.png", alt="I", title="x|y"))))
        assert md(tree) == '| ![I](i.png "x\\|y") |\n| --- |\n'

    def test_link_title_pipe_kept_outside_cells(self):
        assert md(h("p", h("a", "t", href="/x", title="a|b"))) == '[t](/x "a|b")\n'

    def test_table_rows_excludes_nested_tables(self):
        inner = h("table", h("tr", h("td", "in")))
        outer = h("table", h("tr", h("td", inner)))
        assert len(table_rows(outer)) == 1
        assert len(table_rows(inner)) == 1


@pytest.mark.unit
class TestInline:
    """Tests for inline formatting, links, images and code."""

    def test_strong_and_emphasis(self):
        assert md(h("p", h("strong", "a"), " ", h("em", "b"))) == "**a** _b_\n"

    def test_alternate_delimiters(self):
        tree = h("p", h("b", "a"), " ", h("i", "b"))
        assert md(tree, strong_symbol="__", emphasis_symbol="*") == "__a__ *b*\n"

    def test_strikethrough(self):
        assert md(h("p", h("del", "old"), " ", h("s", "gone"))) == "~~old~~ ~~gone~~\n"

    def test_delimiters_hug_content(self):
        """Whitespace inside formatting moves outside the delimiters."""
        assert md(h("p", "a", h("strong", " b "), "c")) == "a **b** c\n"

    def test_intraword_emphasis_uses_asterisks(self):
        """Underscores inside a word are literal, so asterisks are used there."""
        assert md(h("p", "foo", h("em", "bar"), "baz")) == "foo*bar*baz\n"
        assert md(h("p", "un", h("i", "believ"), " able")) == "un*believ* able\n"

    def test_intraword_strong_with_underscores(self):
        assert md(h("p", h("b", "bold"), "ly"), strong_symbol="__") == "**bold**ly\n"

    def test_underscore_kept_at_word_boundaries(self):
        assert md(h("p", "a ", h("em", "b"), ", c")) == "a _b_, c\n"
        assert md(h("p", "(", h("em", "b"), ")")) == "(_b_)\n"

    def test_empty_formatting_dropped(self):
        assert md(h("p", "a", h("strong"), "b")) == "ab\n"

    def test_link_with_title(self):
        tree = h("p", h("a", "X", href="https://x.com", title="T"))
        assert md(tree) == '[X](https://x.com "T")\n'

    def test_link_without_href_is_text(self):
        assert md(h("p", h("a", "anchor", name="top"))) == "anchor\n"

    def test_link_text_falls_back_to_href(self):
        assert md(h("p", h("a", href="https://x.y"))) == "[https://x.y](https://x.y)\n"

    def test_link_spacing(self):
        tree = h("p", "see", h("a", " here ", href="/h"), "now")
        assert md(tree) == "see [here](/h) now\n"

    def test_link_destination_escaped(self):
        tree = h("p", h("a", "doc", href="/a b(1).html"))
        assert md(tree) == "[doc](/a%20b\\(1\\).html)\n"

    def test_image(self):
        assert md(h("p", h("img", src="a.png", alt="A", title="T"))) == '![A](a.png "T")\n'

    def test_image_without_src_dropped(self):
        assert md(h("p", "x", h("img", alt="A"))) == "x\n"

    def test_image_alt_brackets_escaped(self):
        tree = h("p", h("img", src="a.png", alt="[x]"))
        assert md(tree) == "![\\[x\\]](a.png)\n"
        assert md(tree, escape_special=False) == "![\\[x\\]](a.png)\n"

    def test_image_inside_link(self):
        tree = h("p", h("a", h("img", src="i.png", alt="I"), href="/"))
        assert md(tree) == "[![I](i.png)](/)\n"

    def test_inline_code_is_not_escaped(self):
        assert md(h("p", "Use ", h("code", "a_b*c"), " now")) == "Use `a_b*c` now\n"

    def test_inline_code_widens_delimiter(self):
        assert md(h("p", h("code", "a``b"))) == "```a``b```\n"

    def test_formatting_inside_code_is_literal(self):
        assert md(h("p", h("code", "a", h("em", "*b*")))) == "`a*b*`\n"

    def test_line_break_inside_code(self):
        assert md(h("p", h("code", "a", h("br"), "b"))) == "`a b`\n"

    @pytest.mark.parametrize("tag", ["kbd", "samp", "tt"])
    def test_monospace_tags(self, tag):
        assert md(h("p", h(tag, "Ctrl"))) == "`Ctrl`\n"


@pytest.mark.unit
class TestTextRules:
    """Tests for text, comments, ignored and unknown elements."""

    def test_text_escaped(self):
        assert md(h("p", "*not emphasis*")) == "\\*not emphasis\\*\n"

    def test_tildes_escaped(self):
        """Literal tildes never turn into strikethrough."""
        assert md(h("p", "~~not struck~~")) == "\\~\\~not struck\\~\\~\n"

    def test_escaping_disabled(self):
        assert md(h("p", "*raw*"), escape_special=False) == "*raw*\n"

    def test_comments_render_nothing(self):
        assert md(h("p", "a", Comment(value="hidden"), "b")) == "ab\n"

    @pytest.mark.parametrize("tag", ["script", "style", "noscript", "template", "title"])
    def test_ignored_elements(self, tag):
        assert md(h("div", h(tag, "hidden()"), h("p", "Safe"))) == "Safe\n"

    def test_unknown_element_passes_children_through(self):
        assert md(h("p", h("x-foo", "hi"))) == "hi\n"
