#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/whitespace.py
"""Whitespace normalization ahead of rule application.

HTML collapses runs of whitespace in ordinary prose and drops whitespace at
the edges of block boxes. Markdown does neither reliably, so the normalizer
applies those CSS-like rules to the tree before it is rendered:

- Text inside a preformatted element is significant and left untouched.
- Elsewhere, runs of spaces, tabs and newlines collapse to a single space.
- A space is dropped at the start of a text run that follows a block boundary
  or a text already ending in a space, and trimmed before a block boundary.
- Text nodes left empty are removed, which removes whitespace-only nodes
  sitting between block elements.

Whether an element is a block, inline or preformatted box is decided by a
``DisplayTable``; unknown tags are inline. The normalizer returns a new tree
and never touches its input.

"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Optional

from web2md.constants import BLOCK_ELEMENTS, PREFORMATTED_ELEMENTS, DisplayKind
from web2md.exceptions import StructuralError
from web2md.nodes import Comment, Element, Node, Text

logger = logging.getLogger(__name__)

_COLLAPSIBLE_WHITESPACE = re.compile(r"[ \t\r\n\f]+")
_DISPLAY_KINDS = ("block", "inline", "preformatted")


class DisplayTable:
    """Classification of tag names into display kinds.

    Parameters
    ----------
    overrides : Mapping[str, DisplayKind], optional
        Tag-specific kinds taking precedence over the built-in table

    Examples
    --------
        >>> table = DisplayTable().with_override("custom-card", "block")
        >>> table.kind("custom-card")
        'block'
        >>> table.kind("blink")
        'inline'

    """

    def __init__(self, overrides: Optional[Mapping[str, DisplayKind]] = None):
        """Initialize the table with optional per-tag overrides."""
        checked: dict[str, DisplayKind] = {}
        for tag, kind in (overrides or {}).items():
            if kind not in _DISPLAY_KINDS:
                raise ValueError(f"Unknown display kind {kind!r} for <{tag}>; expected one of {_DISPLAY_KINDS}")
            checked[tag.lower()] = kind
        self._overrides = MappingProxyType(checked)

    def kind(self, tag: str) -> DisplayKind:
        """Return the display kind of a tag name."""
        if tag in self._overrides:
            return self._overrides[tag]
        if tag in PREFORMATTED_ELEMENTS:
            return "preformatted"
        if tag in BLOCK_ELEMENTS:
            return "block"
        return "inline"

    def is_block(self, node: Node) -> bool:
        """True for elements that start a new block (preformatted included)."""
        return isinstance(node, Element) and self.kind(node.tag) != "inline"

    def is_preformatted(self, node: Node) -> bool:
        """True for elements whose text must be kept verbatim."""
        return isinstance(node, Element) and self.kind(node.tag) == "preformatted"

    def with_override(self, tag: str, kind: DisplayKind) -> DisplayTable:
        """Return a new table with ``tag`` classified as ``kind``."""
        return DisplayTable({**self._overrides, tag.lower(): kind})

    @property
    def overrides(self) -> Mapping[str, DisplayKind]:
        return self._overrides


class _Collapser:
    """Single document-order pass deciding the collapsed value of each text node."""

    def __init__(self, display: DisplayTable, max_depth: int):
        self.display = display
        self.max_depth = max_depth
        self.texts: dict[Text, str] = {}
        self.prev_text: Optional[Text] = None
        self.keep_leading_space = False

    def _close_block_boundary(self) -> None:
        if self.prev_text is not None:
            self.texts[self.prev_text] = self.texts[self.prev_text].rstrip(" ")
        self.prev_text = None
        self.keep_leading_space = False

    def visit(self, node: Node, depth: int) -> None:
        if depth > self.max_depth:
            raise StructuralError(
                f"Tree nesting exceeds the maximum depth of {self.max_depth}",
                depth=depth,
                tag=getattr(node, "tag", None),
            )

        if isinstance(node, Text):
            text = _COLLAPSIBLE_WHITESPACE.sub(" ", node.value)
            previous = self.texts[self.prev_text] if self.prev_text is not None else None
            if (previous is None or previous.endswith(" ")) and not self.keep_leading_space and text.startswith(" "):
                text = text[1:]
            self.texts[node] = text
            if text:
                self.prev_text = node
            return

        if not isinstance(node, Element):
            return

        if self.display.is_block(node) or node.tag == "br":
            self._close_block_boundary()
        elif node.is_void:
            self.prev_text = None
            self.keep_leading_space = True
        elif self.prev_text is not None:
            self.keep_leading_space = False

        if self.display.is_preformatted(node):
            return

        for child in node.children:
            if child.parent is not node:
                raise StructuralError(
                    f"{child.describe()} is listed under <{node.tag}> but linked to another parent",
                    depth=depth,
                    tag=node.tag,
                )
            self.visit(child, depth + 1)

        if self.display.is_block(node):
            self._close_block_boundary()
        elif self.prev_text is not None:
            self.keep_leading_space = False

    def finish(self) -> None:
        if self.prev_text is not None:
            self.texts[self.prev_text] = self.texts[self.prev_text].rstrip(" ")


def _rebuild(node: Node, texts: Mapping[Text, str], depth: int, max_depth: int) -> Optional[Node]:
    if depth > max_depth:
        raise StructuralError(f"Tree nesting exceeds the maximum depth of {max_depth}", depth=depth)
    if isinstance(node, Text):
        value = texts.get(node, node.value)
        return Text(value=value) if value else None
    if isinstance(node, Comment):
        return Comment(value=node.value)
    if isinstance(node, Element):
        children = [rebuilt for child in node.children if (rebuilt := _rebuild(child, texts, depth + 1, max_depth))]
        return Element(tag=node.tag, attributes=node.attributes, children=children)
    raise StructuralError(f"Unsupported node type {type(node).__name__}")


def normalize_whitespace(root: Node, display: DisplayTable, max_depth: int) -> Optional[Node]:
    """Return a copy of ``root`` with collapsible whitespace normalized.

    Parameters
    ----------
    root : Node
        Tree to normalize; left untouched
    display : DisplayTable
        Block/inline/preformatted classification
    max_depth : int
        Deepest nesting accepted before raising

    Returns
    -------
    Node or None
        The normalized copy, or None when nothing visible remains of a bare
        text root

    Raises
    ------
    StructuralError
        If the tree is deeper than ``max_depth`` or its parent links are
        inconsistent

    """
    collapser = _Collapser(display, max_depth)
    collapser.visit(root, 0)
    collapser.finish()
    logger.debug("Normalized whitespace in %d text nodes", len(collapser.texts))
    return _rebuild(root, collapser.texts, 0, max_depth)


__all__ = ["DisplayTable", "normalize_whitespace"]
