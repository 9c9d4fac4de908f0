#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/postprocess.py
"""Final cleanup of the rendered Markdown.

Runs once on the complete output of the tree walker.
"""

from __future__ import annotations

import re
from typing import Optional

from web2md.options import ConversionOptions

# Opening or closing code fence, possibly inside list indentation or a blockquote
_FENCE = re.compile(r"^(?:[ \t]*>)*[ \t]*(`{3,}|~{3,})(.*)$")


def postprocess(markdown: str, options: Optional[ConversionOptions] = None) -> str:
    """Normalize blank lines and trailing whitespace.

    - Line endings are normalized to ``\\n``.
    - Trailing whitespace is stripped from every line. With the "spaces" line
      break style, a two-space hard break is kept when the next line has
      content.
    - Outside fenced code, runs of blank lines collapse to a single blank line.
    - Leading and trailing blank lines are removed and non-empty output ends
      with exactly one newline.

    Parameters
    ----------
    markdown : str
        Output of the tree walker
    options : ConversionOptions, optional
        Options of the conversion; defaults apply when omitted

    Returns
    -------
    str
        Cleaned Markdown, or "" when nothing visible remains

    """
    options = options or ConversionOptions()
    keep_hard_breaks = options.line_break_style == "spaces"
    lines = markdown.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    output: list[str] = []
    fence: Optional[tuple[str, int]] = None
    previous_blank = False

    for index, line in enumerate(lines):
        in_code = fence is not None
        match = _FENCE.match(line)
        if match:
            marker, rest = match.group(1), match.group(2)
            if fence is None:
                # Backtick fences cannot carry backticks in their info string
                if not (marker[0] == "`" and "`" in rest):
                    fence = (marker[0], len(marker))
            elif marker[0] == fence[0] and len(marker) >= fence[1] and not rest.strip():
                fence = None

        cleaned = line.rstrip()
        if (
            keep_hard_breaks
            and not in_code
            and cleaned
            and line.endswith("  ")
            and index + 1 < len(lines)
            and lines[index + 1].strip()
        ):
            cleaned += "  "

        if not cleaned and not in_code:
            if previous_blank:
                continue
            previous_blank = True
        else:
            previous_blank = False
        output.append(cleaned)

    text = "\n".join(output).strip("\n")
    return f"{text}\n" if text else ""


__all__ = ["postprocess"]
