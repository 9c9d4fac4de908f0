#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/nodes.py
"""Node classes for the markup tree consumed by the converter.

The tree is a read-only view over a document that an external parser already
produced (see ``web2md.soup`` for the BeautifulSoup adapter). It is a tagged
union of three node kinds:

    - Element: tag name, attributes, ordered children
    - Text: literal character data
    - Comment: markup comment, never rendered

Each node has at most one parent. The parent link is set when the parent
Element is constructed and cannot change afterwards, so a tree built from
these classes is always acyclic. Nodes expose no mutation operations; the
converter builds new trees when it needs different content.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from html import escape as _html_escape
from types import MappingProxyType
from typing import Optional, Union

from web2md.constants import VOID_ELEMENTS
from web2md.exceptions import StructuralError


@dataclass(frozen=True, eq=False)
class Node:
    """Base class for all tree nodes.

    Attributes
    ----------
    parent : Element or None
        The element holding this node, or None for a root

    """

    parent: Optional[Element] = field(default=None, init=False, repr=False, compare=False)

    def _attach(self, parent: Element) -> None:
        if self.parent is not None:
            raise StructuralError(
                f"{self.describe()} already belongs to <{self.parent.tag}>; a node can have only one parent",
                tag=parent.tag,
            )
        object.__setattr__(self, "parent", parent)

    @property
    def text_content(self) -> str:
        """Concatenation of all descendant text, in document order."""
        return ""

    def ancestors(self) -> Iterator[Element]:
        """Yield enclosing elements from the parent up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def closest(self, *tags: str) -> Optional[Element]:
        """Return the nearest ancestor whose tag is one of ``tags``."""
        for ancestor in self.ancestors():
            if ancestor.tag in tags:
                return ancestor
        return None

    def has_ancestor(self, *tags: str) -> bool:
        """Check whether any ancestor has one of the given tags."""
        return self.closest(*tags) is not None

    @property
    def index(self) -> int:
        """Position of this node among its parent's children (0 for a root)."""
        if self.parent is None:
            return 0
        for position, sibling in enumerate(self.parent.children):
            if sibling is self:
                return position
        raise StructuralError(f"{self.describe()} is not among the children of its parent <{self.parent.tag}>")

    @property
    def outer_html(self) -> str:
        """Serialize the node back to HTML."""
        return ""

    def describe(self) -> str:
        """Short label for log and error messages."""
        return type(self).__name__.lower()


@dataclass(frozen=True, eq=False)
class Text(Node):
    """Character data.

    Parameters
    ----------
    value : str
        The text, with entities already decoded by the parser

    """

    value: str = ""

    @property
    def text_content(self) -> str:
        return self.value

    @property
    def outer_html(self) -> str:
        return _html_escape(self.value, quote=False)


@dataclass(frozen=True, eq=False)
class Comment(Node):
    """A markup comment. Comments never contribute visible text."""

    value: str = ""

    @property
    def outer_html(self) -> str:
        return f"<!--{self.value}-->"


@dataclass(frozen=True, eq=False)
class Element(Node):
    """An element with a tag name, attributes and ordered children.

    Parameters
    ----------
    tag : str
        Tag name; stored lower-cased
    attributes : Mapping[str, str], default empty
        Attribute values by name; names are stored lower-cased
    children : Sequence[Node], default empty
        Child nodes in document order. Each child must not already have a
        parent. Void elements (``br``, ``img``, ...) accept no children.

    Raises
    ------
    StructuralError
        If a child already has a parent, or a void element is given children

    """

    tag: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: Sequence[Node] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", self.tag.lower())
        object.__setattr__(
            self,
            "attributes",
            MappingProxyType({str(name).lower(): str(value) for name, value in dict(self.attributes).items()}),
        )
        children = tuple(self.children)
        if children and self.is_void:
            raise StructuralError(f"Void element <{self.tag}> cannot have children", tag=self.tag)
        for child in children:
            if child is self:
                raise StructuralError(f"<{self.tag}> cannot contain itself", tag=self.tag)
            child._attach(self)
        object.__setattr__(self, "children", children)

    def describe(self) -> str:
        return f"<{self.tag}>"

    @property
    def is_void(self) -> bool:
        """True for elements that never have content (``br``, ``img``, ...)."""
        return self.tag in VOID_ELEMENTS

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up an attribute value by (case-insensitive) name."""
        return self.attributes.get(name.lower(), default)

    @property
    def classes(self) -> list[str]:
        """Whitespace-separated tokens of the ``class`` attribute."""
        return (self.get("class") or "").split()

    @property
    def element_children(self) -> list[Element]:
        """Child nodes that are elements."""
        return [child for child in self.children if isinstance(child, Element)]

    def iter_descendants(self) -> Iterator[Node]:
        """Yield every descendant in document (pre-)order, excluding self."""
        stack: list[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Element):
                stack.extend(reversed(node.children))

    def find(self, tag: str) -> Optional[Element]:
        """Return the first descendant element with the given tag."""
        for node in self.iter_descendants():
            if isinstance(node, Element) and node.tag == tag:
                return node
        return None

    def find_all(self, tag: str) -> list[Element]:
        """Return all descendant elements with the given tag."""
        return [node for node in self.iter_descendants() if isinstance(node, Element) and node.tag == tag]

    @property
    def text_content(self) -> str:
        return "".join(node.value for node in self.iter_descendants() if isinstance(node, Text))

    @property
    def outer_html(self) -> str:
        attrs = "".join(f' {name}="{_html_escape(value)}"' for name, value in self.attributes.items())
        if self.is_void:
            return f"<{self.tag}{attrs}>"
        inner = "".join(child.outer_html for child in self.children)
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


NodeLike = Union[Node, str]


def h(tag: str, *children: NodeLike, **attributes: str) -> Element:
    """Build an element tersely; strings become Text nodes.

    A trailing underscore is dropped from attribute names so that reserved
    words can be passed (``h("pre", class_="language-py")``).

    Examples
    --------
        >>> tree = h("p", "Hello ", h("strong", "world"))
        >>> tree.text_content
        'Hello world'

    """
    nodes = [Text(value=child) if isinstance(child, str) else child for child in children]
    attrs = {name.rstrip("_").replace("_", "-"): value for name, value in attributes.items()}
    return Element(tag=tag, attributes=attrs, children=nodes)


__all__ = ["Node", "Text", "Comment", "Element", "NodeLike", "h"]
