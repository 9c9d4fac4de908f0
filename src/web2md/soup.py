#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/soup.py
"""BeautifulSoup adapter: parse HTML and build the node tree.

The conversion engine never parses markup itself. This module is the
boundary where raw HTML becomes a ``web2md.nodes`` tree:

1. ``parse_html`` parses the document with BeautifulSoup's ``html.parser``.
2. ``extract_region`` picks the part of the page to convert: the whole body,
   the ``<main>`` region, or a CSS-selected fragment standing in for a live
   selection. Body and main extraction strip ``script``, ``style`` and
   ``noscript`` subtrees.
3. ``from_soup`` copies the chosen BeautifulSoup tag into Node objects.

The soup passed in is never modified; extraction works on a copy.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import CData, Comment as SoupComment, NavigableString, PageElement, PreformattedString, Tag

from web2md.constants import SANITIZED_ELEMENTS, VOID_ELEMENTS, ExtractionMode
from web2md.exceptions import ParsingError, ValidationError
from web2md.nodes import Comment, Element, Node, Text

logger = logging.getLogger(__name__)

EXTRACTION_MODES = ("body", "main", "selection")

# NUL and zero-width characters that browsers ignore but would survive into Markdown
_INVISIBLE_CHARACTERS = re.compile("[\x00\ufeff\u200b\u200c\u200d\u2060]")


def sanitize_invisible_characters(html: str) -> str:
    """Remove NUL bytes and zero-width characters from markup."""
    return _INVISIBLE_CHARACTERS.sub("", html)


def parse_html(html: Union[str, bytes]) -> BeautifulSoup:
    """Parse an HTML document.

    Parameters
    ----------
    html : str or bytes
        Markup; bytes are decoded by BeautifulSoup's encoding detection

    Returns
    -------
    BeautifulSoup
        The parsed document

    Raises
    ------
    ParsingError
        If the markup cannot be parsed

    """
    if isinstance(html, str):
        html = sanitize_invisible_characters(html)
    elif not isinstance(html, bytes):
        raise ValidationError(
            f"HTML must be str or bytes, got {type(html).__name__}", parameter_name="html", parameter_value=html
        )

    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ParsingError(f"Failed to parse HTML: {e}", parsing_stage="html_parsing", original_error=e) from e

    logger.debug("Parsed HTML document")
    return soup


def document_title(soup: BeautifulSoup) -> Optional[str]:
    """Return the whitespace-normalized ``<title>`` text, or None without one."""
    title = soup.find("title")
    if title is None:
        return None
    return " ".join(title.get_text().split())


def _sanitized_copy(region: Tag) -> Tag:
    region = copy.copy(region)
    for tag in region.find_all(list(SANITIZED_ELEMENTS)):
        tag.decompose()
    return region


def extract_region(soup: BeautifulSoup, mode: ExtractionMode = "body", selector: Optional[str] = None) -> Tag:
    """Select the part of the document to convert.

    Parameters
    ----------
    soup : BeautifulSoup
        Parsed document; left unmodified
    mode : {"body", "main", "selection"}, default "body"
        - "body": the ``<body>``, or the whole document when there is none
        - "main": ``<main>`` (or ``role="main"``), falling back to the body
        - "selection": the first element matching ``selector``
    selector : str, optional
        CSS selector, required for "selection"

    Returns
    -------
    Tag
        A copy of the selected region; body and main have ``script``,
        ``style`` and ``noscript`` removed

    Raises
    ------
    ValidationError
        If the mode is unknown or "selection" has no selector
    ParsingError
        If the selector is invalid or matches nothing

    """
    if mode not in EXTRACTION_MODES:
        raise ValidationError(
            f"Unknown extraction mode {mode!r}; expected one of {', '.join(EXTRACTION_MODES)}",
            parameter_name="mode",
            parameter_value=mode,
        )

    if mode == "selection":
        if not selector:
            raise ValidationError("The 'selection' mode requires a CSS selector", parameter_name="selector")
        try:
            selected = soup.select_one(selector)
        except Exception as e:
            raise ParsingError(
                f"Invalid CSS selector {selector!r}: {e}", parsing_stage="selection", original_error=e
            ) from e
        if selected is None:
            raise ParsingError(f"Selector {selector!r} matched nothing", parsing_stage="selection")
        logger.debug(f"Extracted selection <{selected.name}> for selector {selector!r}")
        return copy.copy(selected)

    region: Tag = soup.body or soup
    if mode == "main":
        main = soup.find("main") or soup.find(attrs={"role": "main"})
        if main is None:
            logger.debug("No <main> region found; falling back to the body")
        else:
            region = main

    logger.debug(f"Extracted {mode} region <{region.name}>")
    return _sanitized_copy(region)


def _convert_string(string: PageElement) -> Optional[Node]:
    if isinstance(string, SoupComment):
        return Comment(value=str(string))
    if isinstance(string, CData):
        return Text(value=str(string))
    # Doctype, Declaration, ProcessingInstruction
    if isinstance(string, PreformattedString):
        return None
    if isinstance(string, NavigableString):
        return Text(value=str(string))
    return None


def _attributes(tag: Tag) -> dict[str, str]:
    # Multi-valued attributes such as class arrive as lists
    return {
        name: " ".join(value) if isinstance(value, (list, tuple)) else str(value) for name, value in tag.attrs.items()
    }


def from_soup(tag: Union[Tag, NavigableString]) -> Node:
    """Build a node tree from a BeautifulSoup tag.

    The walk is iterative, so arbitrarily deep markup does not exhaust the
    interpreter stack here; the converter's depth limit applies later.
    Comments are kept; doctypes, declarations and processing instructions
    are dropped. Content the parser placed inside a void element is moved
    after it.

    Parameters
    ----------
    tag : Tag or NavigableString
        Root of the fragment; a BeautifulSoup object converts as an element
        named ``[document]``

    Returns
    -------
    Node
        Root of the new tree

    Raises
    ------
    ParsingError
        If ``tag`` is a string type with no node counterpart

    """
    if not isinstance(tag, Tag):
        node = _convert_string(tag)
        if node is None:
            raise ParsingError(f"Cannot convert {type(tag).__name__} to a node", parsing_stage="tree_building")
        return node

    # Pending children are stored reversed so pop() yields document order
    stack: list[tuple[Tag, list[PageElement], list[Node]]] = [(tag, list(reversed(tag.contents)), [])]
    while True:
        current, pending, built = stack[-1]
        if pending:
            child = pending.pop()
            if isinstance(child, Tag):
                stack.append((child, list(reversed(child.contents)), []))
            else:
                node = _convert_string(child)
                if node is not None:
                    built.append(node)
            continue

        stack.pop()
        name = current.name.lower()
        if name in VOID_ELEMENTS and built:
            nodes: list[Node] = [Element(tag=name, attributes=_attributes(current)), *built]
        else:
            nodes = [Element(tag=name, attributes=_attributes(current), children=built)]
        if not stack:
            if len(nodes) == 1:
                return nodes[0]
            return Element(tag="[document]", children=nodes)
        stack[-1][2].extend(nodes)


__all__ = [
    "EXTRACTION_MODES",
    "sanitize_invisible_characters",
    "parse_html",
    "document_title",
    "extract_region",
    "from_soup",
]
