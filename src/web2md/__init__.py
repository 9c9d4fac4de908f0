"""web2md - HTML-to-Markdown conversion for captured web pages.

web2md turns a parsed HTML document, or any part of one, into deterministic
Markdown. The conversion engine works on an explicit node tree and an ordered
registry of rules, so its output can be tuned per tag without touching the
walker.

Pipeline
--------
1. A node tree is built from BeautifulSoup (``web2md.soup``) or by hand
   (``web2md.nodes.h``).
2. Whitespace is collapsed following block/inline display rules.
3. The tree walker renders each node with the last registered matching rule.
4. The post-processor normalizes blank lines and trailing whitespace.

Requirements
------------
- Python 3.10+
- beautifulsoup4 for parsing HTML; rich and PyYAML for the command line

Examples
--------
Convert an HTML string:

    >>> from web2md import html_to_markdown
    >>> html_to_markdown("<h1>Title</h1><p>Hello <strong>world</strong></p>")
    '# Title\\n\\nHello **world**\\n'

Convert a hand-built tree without raising on failure:

    >>> from web2md import convert, h
    >>> result = convert(h("ul", h("li", "A"), h("li", "B")))
    >>> result.success, result.markdown
    (True, '- A\\n- B\\n')

Override a rule for every later conversion:

    >>> from web2md import Rule, TagMatcher, default_registry
    >>> default_registry.register(
    ...     Rule("mark", TagMatcher.of("mark"), lambda node, children, ctx: f"=={children}==")
    ... )

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "web2md requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from web2md.context import ListFrame, RenderContext, TableFrame  # noqa: E402
from web2md.converter import ConversionResult, convert, html_to_markdown  # noqa: E402
from web2md.exceptions import (  # noqa: E402
    FileError,
    OptionValidationError,
    ParsingError,
    RuleError,
    StructuralError,
    ValidationError,
    Web2MdError,
)
from web2md.nodes import Comment, Element, Node, Text, h  # noqa: E402
from web2md.options import ConversionOptions  # noqa: E402
from web2md.postprocess import postprocess  # noqa: E402
from web2md.registry import RegistrySnapshot, RuleRegistry, default_registry  # noqa: E402
from web2md.rules import Rule, TagMatcher  # noqa: E402
from web2md.whitespace import DisplayTable, normalize_whitespace  # noqa: E402

__all__ = [
    "__version__",
    # Conversion
    "convert",
    "html_to_markdown",
    "ConversionResult",
    "ConversionOptions",
    # Node model
    "Node",
    "Element",
    "Text",
    "Comment",
    "h",
    # Rules
    "Rule",
    "TagMatcher",
    "RuleRegistry",
    "RegistrySnapshot",
    "default_registry",
    "RenderContext",
    "ListFrame",
    "TableFrame",
    # Pipeline stages
    "DisplayTable",
    "normalize_whitespace",
    "postprocess",
    # Exceptions
    "Web2MdError",
    "StructuralError",
    "RuleError",
    "ValidationError",
    "OptionValidationError",
    "ParsingError",
    "FileError",
]
