#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/escape.py
"""Escaping of literal text and sizing of code delimiters.

Text taken from the document must read back as the same visible text once the
Markdown is rendered again. Characters that open inline syntax, tildes
included, are escaped everywhere; characters that only matter at the start of
a line (headings, list markers, Setext underlines) are escaped there. Inside
code spans and code blocks nothing is escaped; the delimiter is widened instead
so that it never collides with the content.
"""

from __future__ import annotations

import re

from web2md.constants import MARKDOWN_INLINE_SPECIAL_CHARS, MARKDOWN_LINE_START_PATTERNS, MIN_CODE_FENCE_LENGTH

_INLINE_SPECIAL = re.compile("([" + re.escape(MARKDOWN_INLINE_SPECIAL_CHARS) + "])")
_LINE_START = tuple((re.compile(pattern, re.MULTILINE), replacement) for pattern, replacement in MARKDOWN_LINE_START_PATTERNS)


def escape_markdown(text: str, in_table_cell: bool = False) -> str:
    """Escape Markdown-significant characters in prose.

    Parameters
    ----------
    text : str
        Literal text content
    in_table_cell : bool, default False
        Also escape ``|``, which would otherwise end the cell

    Returns
    -------
    str
        Text that a Markdown renderer displays as ``text``

    Examples
    --------
        >>> escape_markdown("2 * 3 = 6")
        '2 \\\\* 3 = 6'
        >>> escape_markdown("# not a heading")
        '\\\\# not a heading'

    """
    if not text:
        return text
    escaped = _INLINE_SPECIAL.sub(r"\\\1", text)
    for pattern, replacement in _LINE_START:
        escaped = pattern.sub(replacement, escaped)
    if in_table_cell:
        escaped = escape_pipes(escaped)
    return escaped


def escape_pipes(text: str) -> str:
    """Escape ``|`` so it stays inside a table cell."""
    return text.replace("|", "\\|")


def longest_run(text: str, char: str) -> int:
    """Length of the longest run of ``char`` in ``text``."""
    longest = 0
    current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def code_span(content: str) -> str:
    """Wrap ``content`` in a backtick code span that it cannot terminate.

    The delimiter is one backtick longer than the longest backtick run in the
    content. Content that starts or ends with a backtick is padded with a
    space, which renderers strip again.

    Examples
    --------
        >>> code_span("a``b")
        '```a``b```'
        >>> code_span("`tick")
        '`` `tick ``'

    """
    if not content:
        return ""
    delimiter = "`" * (longest_run(content, "`") + 1)
    padding = " " if content.startswith("`") or content.endswith("`") else ""
    return f"{delimiter}{padding}{content}{padding}{delimiter}"


def code_fence(content: str, char: str = "`") -> str:
    """Return a fence of ``char`` longer than any run of it in ``content``."""
    return char * max(MIN_CODE_FENCE_LENGTH, longest_run(content, char) + 1)


def escape_link_destination(url: str) -> str:
    """Escape characters that would end an inline link destination early."""
    return url.replace("(", "\\(").replace(")", "\\)").replace(" ", "%20")


def escape_link_title(title: str) -> str:
    """Escape double quotes inside a link title."""
    return title.replace('"', '\\"')


def escape_brackets(text: str) -> str:
    """Escape square brackets in image alt text."""
    return text.replace("[", "\\[").replace("]", "\\]")


__all__ = [
    "escape_markdown",
    "escape_pipes",
    "longest_run",
    "code_span",
    "code_fence",
    "escape_link_destination",
    "escape_link_title",
    "escape_brackets",
]
