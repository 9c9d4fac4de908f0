#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/context.py
"""Immutable render state threaded through the tree walk."""

from __future__ import annotations

from dataclasses import dataclass, replace

from web2md.nodes import Element
from web2md.options import ConversionOptions


@dataclass(frozen=True)
class ListFrame:
    """One enclosing list.

    Parameters
    ----------
    ordered : bool
        True for ``<ol>``
    start : int, default 1
        Number of the first item of an ordered list

    """

    ordered: bool
    start: int = 1


@dataclass(frozen=True)
class TableFrame:
    """The table whose rows are being rendered.

    Parameters
    ----------
    columns : int
        Widest row of the table, counting ``colspan``
    header : Element or None
        The row rendered as the header, followed by the separator row

    """

    columns: int
    header: Element | None = None


@dataclass(frozen=True)
class RenderContext:
    """State seen by a rule while it renders one node.

    A rule's ``enter`` hook derives the context for the node's children with
    the ``with_*`` helpers below; siblings never observe each other's changes
    because each derived context is a new value.

    Parameters
    ----------
    options : ConversionOptions
        Options for the whole conversion call
    depth : int, default 0
        Nesting depth of the node being rendered
    lists : tuple of ListFrame, default ()
        Enclosing lists, outermost first
    item_number : int or None, default None
        Number of the enclosing list item within its ordered list
    blockquote_depth : int, default 0
        Number of enclosing blockquotes
    in_preformatted : bool, default False
        Inside a ``<pre>`` block
    in_code : bool, default False
        Inside an inline code span
    in_table_cell : bool, default False
        Inside a ``<td>`` or ``<th>``
    in_nested_table : bool, default False
        Inside a table that sits in another table's cell; its rows and cells
        are flattened into the outer cell's text
    table : TableFrame or None, default None
        Innermost enclosing table

    """

    options: ConversionOptions
    depth: int = 0
    lists: tuple[ListFrame, ...] = ()
    item_number: int | None = None
    blockquote_depth: int = 0
    in_preformatted: bool = False
    in_code: bool = False
    in_table_cell: bool = False
    in_nested_table: bool = False
    table: TableFrame | None = None

    @property
    def list_depth(self) -> int:
        return len(self.lists)

    @property
    def current_list(self) -> ListFrame | None:
        return self.lists[-1] if self.lists else None

    @property
    def escaping_suppressed(self) -> bool:
        """True where text is emitted verbatim."""
        return self.in_preformatted or self.in_code

    def descend(self) -> RenderContext:
        return replace(self, depth=self.depth + 1)

    def with_list(self, ordered: bool, start: int = 1) -> RenderContext:
        return replace(self, lists=self.lists + (ListFrame(ordered=ordered, start=start),), item_number=None)

    def with_item(self, number: int) -> RenderContext:
        return replace(self, item_number=number)

    def with_blockquote(self) -> RenderContext:
        return replace(self, blockquote_depth=self.blockquote_depth + 1)

    def with_table(self, columns: int, header: Element | None) -> RenderContext:
        return replace(self, table=TableFrame(columns=columns, header=header), in_table_cell=False)

    def with_flags(self, **flags: bool) -> RenderContext:
        """Return a copy with any of the boolean mode flags changed."""
        return replace(self, **flags)


__all__ = ["ListFrame", "TableFrame", "RenderContext"]
