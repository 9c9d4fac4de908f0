#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/converter.py
"""Public conversion entry points.

``convert`` runs the whole pipeline on a node tree::

    Node tree -> whitespace normalizer -> tree walker -> post-processor

and reports failures as a value: it returns a ``ConversionResult`` and never
raises. ``html_to_markdown`` is the raising convenience wrapper that parses an
HTML string with BeautifulSoup first.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from web2md.constants import ExtractionMode
from web2md.exceptions import StructuralError, ValidationError, Web2MdError
from web2md.nodes import Element, Node, h
from web2md.options import ConversionOptions
from web2md.postprocess import postprocess
from web2md.registry import RuleRegistry, get_default_registry
from web2md.walker import TreeWalker
from web2md.whitespace import normalize_whitespace

logger = logging.getLogger(__name__)

OptionsLike = Union[ConversionOptions, Mapping[str, Any], None]


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of one ``convert`` call.

    Parameters
    ----------
    success : bool
        True when ``markdown`` holds the complete output
    markdown : str
        The Markdown text; always "" on failure, never a partial result
    error : Web2MdError or None
        The failure, when ``success`` is False

    """

    success: bool
    markdown: str = ""
    error: Optional[Web2MdError] = None

    def unwrap(self) -> str:
        """Return the Markdown, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.markdown


def resolve_options(options: OptionsLike) -> ConversionOptions:
    """Accept options as a ``ConversionOptions``, a mapping, or None.

    Raises
    ------
    OptionValidationError
        If a mapping holds unknown keys or invalid values
    ValidationError
        If ``options`` has an unsupported type

    """
    if options is None:
        return ConversionOptions()
    if isinstance(options, ConversionOptions):
        return options
    if isinstance(options, Mapping):
        return ConversionOptions.from_mapping(options)
    raise ValidationError(
        f"options must be ConversionOptions or a mapping, got {type(options).__name__}",
        parameter_name="options",
        parameter_value=options,
    )


def _document_title(root: Node) -> str:
    if not isinstance(root, Element):
        return ""
    title = root if root.tag == "title" else root.find("title")
    return " ".join(title.text_content.split()) if title is not None else ""


def _convert(root: Node, options: ConversionOptions, registry: RuleRegistry, title: Optional[str]) -> str:
    if not isinstance(root, Node):
        raise ValidationError(
            f"Expected a Node tree, got {type(root).__name__}", parameter_name="root", parameter_value=root
        )

    snapshot = registry.snapshot()
    walker = TreeWalker(snapshot, options)

    normalized = normalize_whitespace(root, snapshot.display, options.max_depth)
    body = walker.render(normalized) if normalized is not None else ""

    if options.extract_title:
        heading_text = " ".join(title.split()) if title is not None else _document_title(root)
        if heading_text:
            body = walker.render(h("h1", heading_text)) + "\n\n" + body

    return postprocess(body, options)


def convert(
    root: Node,
    options: OptionsLike = None,
    registry: Optional[RuleRegistry] = None,
    *,
    title: Optional[str] = None,
) -> ConversionResult:
    """Convert a node tree to Markdown.

    Parameters
    ----------
    root : Node
        Root of the tree; not modified
    options : ConversionOptions or mapping, optional
        Output options; defaults apply when omitted
    registry : RuleRegistry, optional
        Rules to apply; the process-wide default registry when omitted. A
        snapshot is taken on entry.
    title : str, optional
        Heading used with ``extract_title`` instead of the tree's ``<title>``

    Returns
    -------
    ConversionResult
        ``success`` with the Markdown, or the error that stopped the
        conversion. Nothing is raised.

    Examples
    --------
        >>> from web2md.nodes import h
        >>> convert(h("p", "Hello ", h("em", "world"))).markdown
        'Hello _world_\\n'

    """
    try:
        resolved = resolve_options(options)
        markdown = _convert(root, resolved, get_default_registry(registry), title)
    except Web2MdError as e:
        logger.debug(f"Conversion failed: {e.message}")
        return ConversionResult(success=False, error=e)
    except RecursionError as e:
        logger.debug("Conversion failed: recursion limit reached")
        return ConversionResult(
            success=False, error=StructuralError("Tree is nested too deeply to convert", original_error=e)
        )

    logger.debug(f"Converted tree to {len(markdown)} characters of Markdown")
    return ConversionResult(success=True, markdown=markdown)


def html_to_markdown(
    html: Union[str, bytes],
    options: OptionsLike = None,
    *,
    mode: ExtractionMode = "body",
    selector: Optional[str] = None,
    registry: Optional[RuleRegistry] = None,
) -> str:
    """Parse an HTML document and convert the extracted region to Markdown.

    Parameters
    ----------
    html : str or bytes
        HTML markup
    options : ConversionOptions or mapping, optional
        Output options
    mode : {"body", "main", "selection"}, default "body"
        Region of the document to convert; see ``web2md.soup.extract_region``
    selector : str, optional
        CSS selector for the "selection" mode
    registry : RuleRegistry, optional
        Rules to apply

    Returns
    -------
    str
        The Markdown text

    Raises
    ------
    Web2MdError
        If parsing, extraction or conversion fails

    Examples
    --------
        >>> html_to_markdown("<h1>Title</h1><p>Hello <strong>world</strong></p>")
        '# Title\\n\\nHello **world**\\n'

    """
    from web2md.soup import document_title, extract_region, from_soup, parse_html

    soup = parse_html(html)
    region = extract_region(soup, mode=mode, selector=selector)
    tree = from_soup(region)
    return convert(tree, options, registry, title=document_title(soup)).unwrap()


__all__ = ["ConversionResult", "OptionsLike", "resolve_options", "convert", "html_to_markdown"]
