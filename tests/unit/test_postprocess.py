#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_postprocess.py
"""Unit tests for the Markdown post-processor."""

import pytest

from web2md.options import ConversionOptions
from web2md.postprocess import postprocess


@pytest.mark.unit
class TestBlankLines:
    """Tests for blank-line normalization."""

    def test_runs_collapse_to_one_blank_line(self):
        assert postprocess("a\n\n\n\nb") == "a\n\nb\n"

    def test_whitespace_only_lines_count_as_blank(self):
        assert postprocess("a\n  \n\t\n\nb") == "a\n\nb\n"

    def test_leading_and_trailing_blank_lines_removed(self):
        assert postprocess("\n\n\na\n\n\n") == "a\n"

    def test_blank_lines_inside_fence_kept(self):
        text = "```\na\n\n\n\nb\n```\n\n\n\nafter"
        assert postprocess(text) == "```\na\n\n\n\nb\n```\n\nafter\n"

    def test_tilde_fence_not_closed_by_backticks(self):
        text = "~~~\na\n```\n\n\nb\n~~~"
        assert postprocess(text) == "~~~\na\n```\n\n\nb\n~~~\n"

    def test_indented_fence_in_list_item(self):
        text = "- step\n\n  ```\n  a\n\n\n  b\n  ```"
        assert postprocess(text) == "- step\n\n  ```\n  a\n\n\n  b\n  ```\n"

    def test_inline_backticks_do_not_open_fence(self):
        """A line like ```a``` is a code span, not a fence."""
        assert postprocess("```a``` x\n\n\n\ny") == "```a``` x\n\ny\n"


@pytest.mark.unit
class TestTrailingWhitespace:
    """Tests for trailing whitespace and hard breaks."""

    def test_trailing_spaces_stripped(self):
        assert postprocess("a \t\nb   ") == "a\nb\n"

    def test_hard_break_kept_before_content(self):
        assert postprocess("a   \nb") == "a  \nb\n"

    def test_hard_break_dropped_before_blank_line(self):
        assert postprocess("a  \n\nb") == "a\n\nb\n"

    def test_hard_break_dropped_at_end(self):
        assert postprocess("a  ") == "a\n"

    def test_backslash_style_strips_all_trailing_spaces(self):
        options = ConversionOptions(line_break_style="backslash")
        assert postprocess("a  \nb", options) == "a\nb\n"


@pytest.mark.unit
class TestEdges:
    """Tests for line endings and empty output."""

    @pytest.mark.parametrize("text", ["", "\n", "\n\n  \n"])
    def test_empty_output_stays_empty(self, text):
        assert postprocess(text) == ""

    def test_line_endings_normalized(self):
        assert postprocess("a\r\nb\rc") == "a\nb\nc\n"

    def test_single_trailing_newline(self):
        assert postprocess("a\n\n\n").endswith("a\n")
        assert postprocess("a") == "a\n"

    def test_idempotent(self):
        once = postprocess("# T\n\n\n\npara  \nnext   \n\n```\nx\n\n\n```\n")
        assert postprocess(once) == once
