#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the web2md library.

This module centralizes the hardcoded values used across web2md so that the
options layer, the whitespace normalizer and the built-in rules agree on them.

Constants are organized by category:
1. Type Definitions - All Literal types and type aliases
2. Markdown Formatting - Defaults for ConversionOptions
3. Element Classification - Display kinds used for whitespace and joining
4. Escaping - Characters and patterns with Markdown meaning
5. CLI and Configuration - Exit codes, config file names, environment prefix
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

HeadingStyle = Literal["atx", "setext"]
CodeBlockStyle = Literal["fenced", "indented"]
CodeFenceChar = Literal["`", "~"]
EmphasisSymbol = Literal["*", "_"]
StrongSymbol = Literal["**", "__"]
LineBreakStyle = Literal["spaces", "backslash"]
DisplayKind = Literal["block", "inline", "preformatted"]
ExtractionMode = Literal["body", "main", "selection"]

# =============================================================================
# Markdown Formatting Constants
# =============================================================================

DEFAULT_HEADING_STYLE: HeadingStyle = "atx"
DEFAULT_CODE_BLOCK_STYLE: CodeBlockStyle = "fenced"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "_"
DEFAULT_STRONG_SYMBOL: StrongSymbol = "**"
DEFAULT_BULLET_SYMBOLS = "-"
DEFAULT_LINE_BREAK_STYLE: LineBreakStyle = "spaces"
DEFAULT_HORIZONTAL_RULE = "---"
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_EXTRACT_TITLE = False

# Recursion guard; each tree level costs a few interpreter frames
DEFAULT_MAX_DEPTH = 200
MAX_ALLOWED_DEPTH = 300

MIN_CODE_FENCE_LENGTH = 3
INDENTED_CODE_PREFIX = "    "

VALID_BULLET_SYMBOLS = "-*+"
LINE_BREAK_MARKUP = {"spaces": "  \n", "backslash": "\\\n"}
SETEXT_UNDERLINES = {1: "=", 2: "-"}
HORIZONTAL_RULE_PATTERN = r"^(?:\*[ ]*){3,}$|^(?:-[ ]*){3,}$|^(?:_[ ]*){3,}$"

# =============================================================================
# Element Classification
# =============================================================================

BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "audio",
        "blockquote",
        "body",
        "canvas",
        "caption",
        "center",
        "dd",
        "details",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "html",
        "legend",
        "li",
        "main",
        "menu",
        "nav",
        "noframes",
        "noscript",
        "ol",
        "output",
        "p",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

PREFORMATTED_ELEMENTS = frozenset({"pre"})

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose subtree never reaches the output
IGNORED_ELEMENTS = ("script", "style", "head", "meta", "title", "noscript", "template", "link")

# Subtrees removed by body/main extraction before the tree is built
SANITIZED_ELEMENTS = ("script", "style", "noscript")

# Siblings joined by a single newline instead of a blank line
TIGHT_ELEMENTS = frozenset({"li", "tr", "thead", "tbody", "tfoot", "dt", "dd"})

# Block for whitespace purposes but concatenated into their row
CELL_ELEMENTS = frozenset({"td", "th"})

LIST_ELEMENTS = frozenset({"ul", "ol"})
HEADING_ELEMENTS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
MONOSPACE_INLINE_ELEMENTS = frozenset({"code", "kbd", "samp", "tt"})

# HTML caps colspan at 1000
MAX_COLSPAN = 1000

# =============================================================================
# Escaping
# =============================================================================

# Escaped wherever they appear in prose; tildes open strikethrough and fences
MARKDOWN_INLINE_SPECIAL_CHARS = "\\`*_[]<>~"

# Escaped only where a line begins (after optional indentation)
MARKDOWN_LINE_START_PATTERNS = (
    (r"^(\s*)(#)", r"\1\\\2"),
    (r"^(\s*)([-+=])", r"\1\\\2"),
    (r"^(\s*\d+)([.)])(?=\s|$)", r"\1\\\2"),
)

CODE_LANGUAGE_CLASS_PATTERNS = (r"^language-([\w+#.-]+)$", r"^lang-([\w+#.-]+)$")

# =============================================================================
# CLI and Configuration
# =============================================================================

EXIT_SUCCESS = 0
EXIT_CONVERSION_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 3

ENV_PREFIX = "WEB2MD_"
CONFIG_FILENAMES = (".web2md.toml", ".web2md.yaml", ".web2md.yml", ".web2md.json")
PYPROJECT_SECTION = "web2md"

DEFAULT_FILENAME = "page"
MAX_FILENAME_LENGTH = 120
