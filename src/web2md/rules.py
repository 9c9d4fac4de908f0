#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/rules.py
"""Conversion rules and the built-in rule set.

A rule pairs a predicate over nodes with a pure render function::

    render(node, children_markdown, context) -> str

``children_markdown`` is the already-rendered, already-joined Markdown of the
node's children (empty when the rule does not descend). A rule may also
provide ``enter(node, context) -> context`` to derive the context its children
and its own render call see, e.g. pushing a list frame or switching escaping
off inside code.

Render functions return the node's Markdown without surrounding blank lines;
the tree walker decides how siblings are separated.

Examples
--------
Render ``<mark>`` as ``==text==``:

    >>> from web2md.rules import Rule, TagMatcher
    >>> highlight = Rule(
    ...     name="highlight",
    ...     match=TagMatcher.of("mark"),
    ...     render=lambda node, children, ctx: f"=={children}==" if children else "",
    ... )

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from web2md.constants import (
    CELL_ELEMENTS,
    CODE_LANGUAGE_CLASS_PATTERNS,
    HEADING_ELEMENTS,
    IGNORED_ELEMENTS,
    INDENTED_CODE_PREFIX,
    LIST_ELEMENTS,
    MAX_COLSPAN,
    MONOSPACE_INLINE_ELEMENTS,
    SETEXT_UNDERLINES,
)
from web2md.context import RenderContext
from web2md.escape import (
    code_fence,
    code_span,
    escape_brackets,
    escape_link_destination,
    escape_link_title,
    escape_markdown,
    escape_pipes,
)
from web2md.nodes import Comment, Element, Node, Text

MatchFn = Callable[[Node], bool]
RenderFn = Callable[[Node, str, RenderContext], str]
EnterFn = Callable[[Node, RenderContext], RenderContext]

_LANGUAGE_PATTERNS = tuple(re.compile(pattern) for pattern in CODE_LANGUAGE_CLASS_PATTERNS)


@dataclass(frozen=True)
class Rule:
    """A predicate/render pair governing how one class of node is converted.

    Parameters
    ----------
    name : str
        Identifier used by ``RuleRegistry.unregister`` and in log records
    match : callable
        ``match(node) -> bool``
    render : callable
        ``render(node, children_markdown, context) -> str``
    enter : callable, optional
        ``enter(node, context) -> context`` for the node's children and its
        own render call
    descend : bool, default True
        Whether the walker renders the node's children first. Rules that
        emit nothing, void elements and code blocks set this to False.

    """

    name: str
    match: MatchFn
    render: RenderFn
    enter: Optional[EnterFn] = None
    descend: bool = True


@dataclass(frozen=True)
class TagMatcher:
    """Predicate matching elements by tag name."""

    tags: frozenset[str]

    @classmethod
    def of(cls, *tags: str) -> TagMatcher:
        return cls(frozenset(tag.lower() for tag in tags))

    def __call__(self, node: Node) -> bool:
        return isinstance(node, Element) and node.tag in self.tags


def render_children(node: Node, children: str, ctx: RenderContext) -> str:
    """Emit the children only, dropping the wrapping element."""
    return children


def render_nothing(node: Node, children: str, ctx: RenderContext) -> str:
    return ""


def render_outer_html(node: Node, children: str, ctx: RenderContext) -> str:
    return node.outer_html


PASSTHROUGH_RULE = Rule(name="passthrough", match=lambda node: True, render=render_children)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _single_line(text: str, line_break: str) -> str:
    return " ".join(text.replace(line_break, " ").split())


def _chomp(text: str, line_break: str) -> tuple[str, str, str]:
    """Split ``text`` into leading whitespace, content and trailing whitespace.

    Hard-break markup at either edge counts as whitespace so that delimiters
    can be placed tight against the content.
    """
    leading = ""
    while True:
        if line_break and text.startswith(line_break):
            leading += line_break
            text = text[len(line_break) :]
            continue
        stripped = text.lstrip()
        if stripped == text:
            break
        leading += text[: len(text) - len(stripped)]
        text = stripped

    trailing = ""
    while True:
        if line_break and text.endswith(line_break):
            trailing = line_break + trailing
            text = text[: -len(line_break)]
            continue
        stripped = text.rstrip()
        if stripped == text:
            break
        trailing = text[len(stripped) :] + trailing
        text = stripped
    return leading, text, trailing


def _adjacent_text(node: Node, step: int) -> str:
    """Text of the sibling touching ``node`` on one side, if it is a text node."""
    if node.parent is None:
        return ""
    siblings = node.parent.children
    position = node.index + step
    if 0 <= position < len(siblings) and isinstance(siblings[position], Text):
        return siblings[position].value
    return ""


def _wrap(node: Node, children: str, delimiter: str, ctx: RenderContext) -> str:
    if ctx.escaping_suppressed:
        return children
    leading, content, trailing = _chomp(children, ctx.options.line_break)
    if not content:
        return children
    if "_" in delimiter:
        # Underscores cannot open or close emphasis inside a word
        before = "" if leading else _adjacent_text(node, -1)[-1:]
        after = "" if trailing else _adjacent_text(node, 1)[:1]
        if before.isalnum() or after.isalnum():
            delimiter = delimiter.replace("_", "*")
    return f"{leading}{delimiter}{content}{delimiter}{trailing}"


def _indent_continuation(text: str, indent: str) -> str:
    first, *rest = text.split("\n")
    return "\n".join([first] + [indent + line if line else "" for line in rest])


def _escape_literal(text: str, ctx: RenderContext) -> str:
    if ctx.options.escape_special:
        return escape_markdown(text, in_table_cell=ctx.in_table_cell)
    return escape_pipes(text) if ctx.in_table_cell else text


def code_language(node: Element) -> str:
    """Language hint from ``language-*``/``lang-*`` classes or ``data-lang``.

    The ``<pre>`` itself is checked first, then a ``<code>`` child.
    """
    candidates = [node] + [child for child in node.element_children if child.tag == "code"]
    for element in candidates:
        for cls in element.classes:
            for pattern in _LANGUAGE_PATTERNS:
                if match := pattern.match(cls):
                    return match.group(1)
    for element in candidates:
        hint = (element.get("data-lang") or "").split()
        if hint:
            return hint[0].replace("`", "").replace("~", "")
    return ""


# ---------------------------------------------------------------------------
# Text and comments
# ---------------------------------------------------------------------------


def _is_text(node: Node) -> bool:
    return isinstance(node, Text)


def _is_comment(node: Node) -> bool:
    return isinstance(node, Comment)


def render_text(node: Node, children: str, ctx: RenderContext) -> str:
    value = node.text_content
    if ctx.escaping_suppressed:
        return escape_pipes(value) if ctx.in_table_cell else value
    return _escape_literal(value, ctx)


# ---------------------------------------------------------------------------
# Block rules
# ---------------------------------------------------------------------------


def render_heading(node: Element, children: str, ctx: RenderContext) -> str:
    level = int(node.tag[1])
    text = _single_line(children, ctx.options.line_break)
    if not text:
        return ""
    if ctx.options.heading_style == "setext" and level in SETEXT_UNDERLINES:
        return f"{text}\n{SETEXT_UNDERLINES[level] * len(text)}"
    # A space followed by '#' at the end would read as a closing sequence
    if text.endswith(" #") or text == "#":
        text = text[:-1] + "\\#"
    return f"{'#' * level} {text}"


def render_paragraph(node: Element, children: str, ctx: RenderContext) -> str:
    return children.strip("\n")


def render_line_break(node: Element, children: str, ctx: RenderContext) -> str:
    if ctx.in_preformatted:
        return "\n"
    if ctx.in_code:
        return " "
    return ctx.options.line_break


def render_horizontal_rule(node: Element, children: str, ctx: RenderContext) -> str:
    return ctx.options.horizontal_rule


def render_blockquote(node: Element, children: str, ctx: RenderContext) -> str:
    content = children.strip("\n")
    if not content:
        return ""
    return "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))


def enter_blockquote(node: Element, ctx: RenderContext) -> RenderContext:
    return ctx.with_blockquote()


def enter_preformatted(node: Element, ctx: RenderContext) -> RenderContext:
    return ctx.with_flags(in_preformatted=True)


def _preformatted_text(node: Node) -> str:
    """Raw text of a ``<pre>`` subtree with ``<br>`` read as a newline."""
    if isinstance(node, Text):
        return node.value
    if not isinstance(node, Element) or node.tag in IGNORED_ELEMENTS:
        return ""
    if node.tag == "br":
        return "\n"
    return "".join(_preformatted_text(child) for child in node.children)


def render_code_block(node: Element, children: str, ctx: RenderContext) -> str:
    """Render ``<pre>`` from its raw text; nested highlighting markup is ignored."""
    code = _preformatted_text(node)
    if code.startswith("\n"):
        code = code[1:]
    if code.endswith("\n"):
        code = code[:-1]

    if ctx.options.code_block_style == "indented":
        if not code.strip():
            return ""
        return "\n".join(INDENTED_CODE_PREFIX + line if line else "" for line in code.split("\n"))

    fence = code_fence(code, ctx.options.fence_char)
    return f"{fence}{code_language(node)}\n{code}\n{fence}"


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


def _list_start(node: Element) -> int:
    try:
        return max(0, int(node.get("start", "1")))
    except ValueError:
        return 1


def enter_list(node: Element, ctx: RenderContext) -> RenderContext:
    ordered = node.tag == "ol"
    return ctx.with_list(ordered=ordered, start=_list_start(node) if ordered else 1)


def enter_list_item(node: Element, ctx: RenderContext) -> RenderContext:
    frame = ctx.current_list
    start = frame.start if frame is not None else 1
    preceding = 0
    if node.parent is not None:
        for sibling in node.parent.children:
            if sibling is node:
                break
            if isinstance(sibling, Element) and sibling.tag == "li":
                preceding += 1
    return ctx.with_item(start + preceding)


def render_list_item(node: Element, children: str, ctx: RenderContext) -> str:
    frame = ctx.current_list
    if frame is not None and frame.ordered:
        marker = f"{ctx.item_number}. "
    else:
        marker = f"{ctx.options.bullet_for_depth(max(ctx.list_depth, 1))} "
    content = children.strip("\n")
    if not content:
        return marker.rstrip()
    return marker + _indent_continuation(content, " " * len(marker))


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _colspan(cell: Element) -> int:
    try:
        return min(max(1, int(cell.get("colspan", "1"))), MAX_COLSPAN)
    except ValueError:
        return 1


def _row_width(row: Element) -> int:
    return sum(_colspan(cell) for cell in row.element_children if cell.tag in CELL_ELEMENTS)


def table_rows(table: Element) -> list[Element]:
    """Rows belonging to ``table`` itself, excluding rows of nested tables."""
    return [row for row in table.find_all("tr") if row.closest("table") is table]


def enter_table(node: Element, ctx: RenderContext) -> RenderContext:
    if ctx.in_table_cell:
        # Pipe rows cannot nest; the inner table becomes plain cell text
        return ctx.with_flags(in_nested_table=True)
    rows = table_rows(node)
    columns = max((_row_width(row) for row in rows), default=0)
    return ctx.with_table(columns=columns, header=rows[0] if rows else None)


def render_table_row(node: Element, children: str, ctx: RenderContext) -> str:
    if ctx.in_nested_table:
        return children.strip()
    frame = ctx.table
    if frame is None or frame.columns == 0:
        return children
    row = children + "|  " * (frame.columns - _row_width(node)) + "|"
    if node is frame.header:
        row += "\n" + "| --- " * frame.columns + "|"
    return row


def enter_table_cell(node: Element, ctx: RenderContext) -> RenderContext:
    return ctx.with_flags(in_table_cell=True)


def render_table_cell(node: Element, children: str, ctx: RenderContext) -> str:
    content = _single_line(children, ctx.options.line_break)
    if ctx.in_nested_table:
        return f"{content} " if content else ""
    return f"| {content} " + "|  " * (_colspan(node) - 1)


def render_caption(node: Element, children: str, ctx: RenderContext) -> str:
    text = _single_line(children, ctx.options.line_break)
    symbol = ctx.options.emphasis_symbol
    return f"{symbol}{text}{symbol}" if text else ""


# ---------------------------------------------------------------------------
# Definition lists
# ---------------------------------------------------------------------------


def render_definition_term(node: Element, children: str, ctx: RenderContext) -> str:
    text = _single_line(children, ctx.options.line_break)
    symbol = ctx.options.strong_symbol
    return f"{symbol}{text}{symbol}" if text else ""


def render_definition(node: Element, children: str, ctx: RenderContext) -> str:
    content = children.strip("\n")
    return ": " + _indent_continuation(content, "  ") if content else ""


# ---------------------------------------------------------------------------
# Inline rules
# ---------------------------------------------------------------------------


def render_strong(node: Element, children: str, ctx: RenderContext) -> str:
    return _wrap(node, children, ctx.options.strong_symbol, ctx)


def render_emphasis(node: Element, children: str, ctx: RenderContext) -> str:
    return _wrap(node, children, ctx.options.emphasis_symbol, ctx)


def render_strikethrough(node: Element, children: str, ctx: RenderContext) -> str:
    return _wrap(node, children, "~~", ctx)


def _link_target(url: str, title: Optional[str], ctx: RenderContext) -> str:
    """Destination and optional quoted title of an inline link or image."""
    target = escape_link_destination(url)
    title = " ".join((title or "").split())
    if title:
        target += f' "{escape_link_title(title)}"'
    # Table cells split on every pipe before inline parsing
    return escape_pipes(target) if ctx.in_table_cell else target


def render_link(node: Element, children: str, ctx: RenderContext) -> str:
    href = (node.get("href") or "").strip()
    if not href or ctx.escaping_suppressed:
        return children

    leading, text, trailing = _chomp(children, ctx.options.line_break)
    if not text:
        text = _escape_literal(href, ctx)
    target = _link_target(href, node.get("title"), ctx)
    return f"{leading}[{text}]({target}){trailing}"


def render_image(node: Element, children: str, ctx: RenderContext) -> str:
    src = (node.get("src") or "").strip()
    if not src:
        return ""
    alt = " ".join((node.get("alt") or "").split())
    if ctx.escaping_suppressed:
        return alt
    alt = _escape_literal(alt, ctx)
    if not ctx.options.escape_special:
        alt = escape_brackets(alt)
    target = _link_target(src, node.get("title"), ctx)
    return f"![{alt}]({target})"


def _is_inline_code(node: Node) -> bool:
    if not isinstance(node, Element) or node.tag not in MONOSPACE_INLINE_ELEMENTS:
        return False
    return not node.has_ancestor("pre", *MONOSPACE_INLINE_ELEMENTS)


def enter_inline_code(node: Element, ctx: RenderContext) -> RenderContext:
    return ctx.with_flags(in_code=True)


def render_inline_code(node: Element, children: str, ctx: RenderContext) -> str:
    if ctx.in_preformatted:
        return children
    return code_span(children)


# ---------------------------------------------------------------------------
# Built-in rule set
# ---------------------------------------------------------------------------


def ignore_rule(name: str, *tags: str) -> Rule:
    """Rule that renders ``tags`` to nothing without descending."""
    return Rule(name=name, match=TagMatcher.of(*tags), render=render_nothing, descend=False)


def keep_rule(name: str, *tags: str) -> Rule:
    """Rule that emits the element as raw HTML."""
    return Rule(name=name, match=TagMatcher.of(*tags), render=render_outer_html, descend=False)


BUILTIN_RULES: tuple[Rule, ...] = (
    Rule("text", _is_text, render_text, descend=False),
    Rule("comment", _is_comment, render_nothing, descend=False),
    Rule("heading", TagMatcher(HEADING_ELEMENTS), render_heading),
    Rule("paragraph", TagMatcher.of("p"), render_paragraph),
    Rule("line-break", TagMatcher.of("br"), render_line_break, descend=False),
    Rule("horizontal-rule", TagMatcher.of("hr"), render_horizontal_rule, descend=False),
    Rule("strong", TagMatcher.of("strong", "b"), render_strong),
    Rule("emphasis", TagMatcher.of("em", "i"), render_emphasis),
    Rule("strikethrough", TagMatcher.of("del", "s", "strike"), render_strikethrough),
    Rule("link", TagMatcher.of("a"), render_link),
    Rule("image", TagMatcher.of("img"), render_image, descend=False),
    Rule("inline-code", _is_inline_code, render_inline_code, enter=enter_inline_code),
    Rule("code-block", TagMatcher.of("pre"), render_code_block, enter=enter_preformatted, descend=False),
    Rule("list", TagMatcher(LIST_ELEMENTS), render_children, enter=enter_list),
    Rule("list-item", TagMatcher.of("li"), render_list_item, enter=enter_list_item),
    Rule("blockquote", TagMatcher.of("blockquote"), render_blockquote, enter=enter_blockquote),
    Rule("table", TagMatcher.of("table"), render_children, enter=enter_table),
    Rule("table-row", TagMatcher.of("tr"), render_table_row),
    Rule("table-cell", TagMatcher(CELL_ELEMENTS), render_table_cell, enter=enter_table_cell),
    Rule("caption", TagMatcher.of("caption"), render_caption),
    Rule("definition-term", TagMatcher.of("dt"), render_definition_term),
    Rule("definition", TagMatcher.of("dd"), render_definition),
    ignore_rule("ignored", *IGNORED_ELEMENTS),
)


__all__ = [
    "Rule",
    "TagMatcher",
    "MatchFn",
    "RenderFn",
    "EnterFn",
    "PASSTHROUGH_RULE",
    "BUILTIN_RULES",
    "ignore_rule",
    "keep_rule",
    "render_children",
    "render_nothing",
    "render_outer_html",
    "code_language",
    "table_rows",
]
