#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/walker.py
"""Depth-first rendering of a normalized node tree.

For every node the walker resolves a rule, derives the context for the node's
children with the rule's ``enter`` hook, renders and joins the children, and
hands the joined Markdown to the rule's ``render`` function.

Children are joined according to their display kind:

- each block child is its own segment, separated from its neighbours by a
  blank line
- consecutive inline children form one run and are concatenated
- table cells are concatenated into their row
- list items, table rows, row groups and definition parts are separated by a
  single newline
- a list nested directly in a list item follows the item text on the next line

Segments that render to nothing are skipped, so removed elements never leave
stray blank lines.
"""

from __future__ import annotations

import logging
from typing import Optional

from web2md.constants import CELL_ELEMENTS, LIST_ELEMENTS, TIGHT_ELEMENTS
from web2md.context import RenderContext
from web2md.exceptions import RuleError, StructuralError, Web2MdError
from web2md.nodes import Element, Node
from web2md.options import ConversionOptions
from web2md.registry import RegistrySnapshot

logger = logging.getLogger(__name__)


def _trim_run(text: str, line_break: str) -> str:
    """Strip whitespace and hard-break markup from the edges of an inline run."""
    while True:
        if text.endswith(line_break):
            text = text[: -len(line_break)]
        elif text.startswith(line_break):
            text = text[len(line_break) :]
        else:
            stripped = text.strip(" \n")
            if stripped == text:
                return text
            text = stripped


def _rule_failure(rule_name: str, node: Node, hook: str, error: Exception) -> RuleError:
    return RuleError(
        f"Rule '{rule_name}' failed in {hook} for {node.describe()}: {error}",
        rule_name=rule_name,
        tag=getattr(node, "tag", None),
        original_error=error,
    )


def _separator(parent: Element, previous: Optional[Node], current: Optional[Node]) -> str:
    if isinstance(previous, Element) and isinstance(current, Element):
        if previous.tag in CELL_ELEMENTS and current.tag in CELL_ELEMENTS:
            return ""
        if previous.tag in TIGHT_ELEMENTS and current.tag in TIGHT_ELEMENTS:
            return "\n"
    if isinstance(current, Element) and current.tag in LIST_ELEMENTS and parent.tag in LIST_ELEMENTS | {"li"}:
        return "\n"
    return "\n\n"


class TreeWalker:
    """Render a node tree with the rules of one registry snapshot.

    Parameters
    ----------
    snapshot : RegistrySnapshot
        Rules and display table, fixed for the whole walk
    options : ConversionOptions
        Options for the conversion call

    """

    def __init__(self, snapshot: RegistrySnapshot, options: ConversionOptions):
        """Initialize the walker."""
        self.snapshot = snapshot
        self.options = options

    def render(self, node: Node) -> str:
        """Render ``node`` as the root of a document.

        Raises
        ------
        StructuralError
            If the tree is nested deeper than ``options.max_depth``
        RuleError
            If a rule callback raises, or a render callback returns a non-string

        """
        try:
            return self._render_node(node, RenderContext(options=self.options), is_root=True)
        except RecursionError as e:
            raise StructuralError(
                "Tree is nested too deeply to render", depth=self.options.max_depth, original_error=e
            ) from e

    def _render_node(self, node: Node, ctx: RenderContext, is_root: bool = False) -> str:
        if ctx.depth > self.options.max_depth:
            raise StructuralError(
                f"Tree nesting exceeds the maximum depth of {self.options.max_depth}",
                depth=ctx.depth,
                tag=getattr(node, "tag", None),
            )

        rule = self.snapshot.resolve(node)
        own_ctx = ctx
        if rule.enter is not None:
            try:
                own_ctx = rule.enter(node, ctx)
            except (Web2MdError, RecursionError):
                raise
            except Exception as e:
                raise _rule_failure(rule.name, node, "enter", e) from e
            if not isinstance(own_ctx, RenderContext):
                raise RuleError(
                    f"Rule '{rule.name}' returned {type(own_ctx).__name__} from enter instead of a RenderContext",
                    rule_name=rule.name,
                    tag=getattr(node, "tag", None),
                )

        children = ""
        if rule.descend and isinstance(node, Element) and node.children:
            children = self._render_children(node, own_ctx, is_root)

        try:
            markdown = rule.render(node, children, own_ctx)
        except (Web2MdError, RecursionError):
            raise
        except Exception as e:
            raise _rule_failure(rule.name, node, "render", e) from e
        if not isinstance(markdown, str):
            raise RuleError(
                f"Rule '{rule.name}' rendered {type(markdown).__name__} instead of str for {node.describe()}",
                rule_name=rule.name,
                tag=getattr(node, "tag", None),
            )
        return markdown

    def _render_children(self, node: Element, ctx: RenderContext, is_root: bool) -> str:
        child_ctx = ctx.descend()
        display = self.snapshot.display
        segments: list[tuple[Optional[Node], str]] = []
        run: list[str] = []
        has_block = False

        for child in node.children:
            if display.is_block(child):
                has_block = True
                if run:
                    segments.append((None, "".join(run)))
                    run = []
                segments.append((child, self._render_node(child, child_ctx)))
            else:
                run.append(self._render_node(child, child_ctx))
        if run:
            segments.append((None, "".join(run)))

        if not has_block and not is_root and not display.is_block(node):
            # Purely inline content of an inline element: whitespace at the
            # edges belongs to the surrounding text.
            return "".join(text for _, text in segments)

        parts: list[str] = []
        previous: Optional[Node] = None
        for source, text in segments:
            if source is None:
                text = _trim_run(text, self.options.line_break)
            if not text.strip():
                continue
            if parts:
                parts.append(_separator(node, previous, source))
            parts.append(text)
            previous = source
        return "".join(parts)


__all__ = ["TreeWalker"]
