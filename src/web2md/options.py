#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/options.py
"""Configuration options for HTML-to-Markdown conversion.

A ``ConversionOptions`` value is chosen once per conversion call and never
changes while the tree is walked. Field metadata (``help``, ``choices``) is
read by the CLI to build its flags.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from web2md.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_BLOCK_STYLE,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_EXTRACT_TITLE,
    DEFAULT_HEADING_STYLE,
    DEFAULT_HORIZONTAL_RULE,
    DEFAULT_LINE_BREAK_STYLE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_STRONG_SYMBOL,
    HORIZONTAL_RULE_PATTERN,
    LINE_BREAK_MARKUP,
    MAX_ALLOWED_DEPTH,
    VALID_BULLET_SYMBOLS,
    CodeBlockStyle,
    CodeFenceChar,
    EmphasisSymbol,
    HeadingStyle,
    LineBreakStyle,
    StrongSymbol,
)
from web2md.exceptions import OptionValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    r"""Markdown output options for one conversion call.

    Parameters
    ----------
    heading_style : {"atx", "setext"}, default "atx"
        "atx" renders ``# Heading``. "setext" underlines levels 1 and 2 with
        ``=``/``-``; levels 3-6 have no Setext form and stay ATX.
    code_block_style : {"fenced", "indented"}, default "fenced"
        Fenced blocks carry the language hint; indented blocks cannot.
    fence_char : {"`", "~"}, default "`"
        Character repeated to build code fences.
    emphasis_symbol : {"_", "\*"}, default "_"
        Delimiter for ``<em>``/``<i>``.
    strong_symbol : {"\*\*", "__"}, default "\*\*"
        Delimiter for ``<strong>``/``<b>``.
    bullet_symbols : str, default "-"
        Markers for unordered items, cycled by nesting depth.
    line_break_style : {"spaces", "backslash"}, default "spaces"
        Markup emitted for ``<br>``.
    horizontal_rule : str, default "---"
        Line emitted for ``<hr>``; must be a valid thematic break.
    escape_special : bool, default True
        Escape Markdown-significant characters in literal text.
    extract_title : bool, default False
        Emit the document ``<title>`` as a level-1 heading before the body.
    max_depth : int, default 200
        Deepest element nesting walked before a StructuralError aborts.

    """

    heading_style: HeadingStyle = field(
        default=DEFAULT_HEADING_STYLE,
        metadata={"help": "Heading syntax", "choices": ["atx", "setext"]},
    )
    code_block_style: CodeBlockStyle = field(
        default=DEFAULT_CODE_BLOCK_STYLE,
        metadata={"help": "Code block syntax", "choices": ["fenced", "indented"]},
    )
    fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Character used for code fences", "choices": ["`", "~"]},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Delimiter for emphasis", "choices": ["_", "*"]},
    )
    strong_symbol: StrongSymbol = field(
        default=DEFAULT_STRONG_SYMBOL,
        metadata={"help": "Delimiter for strong emphasis", "choices": ["**", "__"]},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Bullet markers cycled by list depth (any of '-*+')"},
    )
    line_break_style: LineBreakStyle = field(
        default=DEFAULT_LINE_BREAK_STYLE,
        metadata={"help": "Markup for <br>", "choices": ["spaces", "backslash"]},
    )
    horizontal_rule: str = field(
        default=DEFAULT_HORIZONTAL_RULE,
        metadata={"help": "Line used for <hr>"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape Markdown characters in text", "cli_name": "no-escape"},
    )
    extract_title: bool = field(
        default=DEFAULT_EXTRACT_TITLE,
        metadata={"help": "Use the document <title> as a level-1 heading"},
    )
    max_depth: int = field(
        default=DEFAULT_MAX_DEPTH,
        metadata={"help": "Maximum element nesting depth", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate option values and their combinations.

        Raises
        ------
        OptionValidationError
            If any field holds a value outside its accepted set.

        """
        for spec in fields(self):
            choices = spec.metadata.get("choices")
            value = getattr(self, spec.name)
            if choices and value not in choices:
                raise OptionValidationError(spec.name, value, choices=choices)

        for flag in ("escape_special", "extract_title"):
            if not isinstance(getattr(self, flag), bool):
                raise OptionValidationError(flag, getattr(self, flag), message=f"Option '{flag}' must be a boolean")

        if not self.bullet_symbols or any(symbol not in VALID_BULLET_SYMBOLS for symbol in self.bullet_symbols):
            raise OptionValidationError(
                "bullet_symbols",
                self.bullet_symbols,
                message=f"bullet_symbols must be a non-empty string of {VALID_BULLET_SYMBOLS!r} characters",
            )

        if not isinstance(self.horizontal_rule, str) or not re.match(HORIZONTAL_RULE_PATTERN, self.horizontal_rule):
            raise OptionValidationError(
                "horizontal_rule",
                self.horizontal_rule,
                message=f"horizontal_rule {self.horizontal_rule!r} is not a Markdown thematic break",
            )

        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise OptionValidationError("max_depth", self.max_depth, message="max_depth must be an integer")
        if not 1 <= self.max_depth <= MAX_ALLOWED_DEPTH:
            raise OptionValidationError(
                "max_depth", self.max_depth, message=f"max_depth must be between 1 and {MAX_ALLOWED_DEPTH}"
            )

    @property
    def line_break(self) -> str:
        """Markup emitted for a hard line break."""
        return LINE_BREAK_MARKUP[self.line_break_style]

    def bullet_for_depth(self, depth: int) -> str:
        """Return the bullet marker for a 1-based list nesting depth."""
        return self.bullet_symbols[(depth - 1) % len(self.bullet_symbols)]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ConversionOptions:
        """Build options from a plain mapping, rejecting unknown keys.

        Parameters
        ----------
        data : Mapping[str, Any]
            Option names (hyphens or underscores) mapped to values

        Returns
        -------
        ConversionOptions
            Validated options

        Raises
        ------
        OptionValidationError
            If a key is not an option name or a value is invalid

        """
        known = {spec.name for spec in fields(cls)}
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise OptionValidationError(name, value, message=f"Unknown option '{key}'")
            normalized[name] = value
        return cls(**normalized)


__all__ = ["CloneFrozenMixin", "ConversionOptions"]
