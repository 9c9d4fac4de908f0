#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/utils.py
"""Helpers for saving converted pages."""

from __future__ import annotations

import re
import unicodedata
from typing import Optional

from web2md.constants import DEFAULT_FILENAME, MAX_FILENAME_LENGTH

# Characters rejected by common filesystems, plus control characters
_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')

_WINDOWS_RESERVED_NAMES = frozenset(
    {"con", "prn", "aux", "nul"} | {f"com{n}" for n in range(1, 10)} | {f"lpt{n}" for n in range(1, 10)}
)


def safe_filename(title: Optional[str], extension: str = ".md") -> str:
    """Derive a download file name from a page title.

    Parameters
    ----------
    title : str or None
        Page title; may contain anything
    extension : str, default ".md"
        Suffix appended to the name

    Returns
    -------
    str
        A name legal on Windows, macOS and Linux, never empty

    Examples
    --------
        >>> safe_filename("Intro: What's new? <2025>")
        "Intro What's new 2025.md"
        >>> safe_filename("   ")
        'page.md'

    """
    name = unicodedata.normalize("NFKC", title or "")
    # Tabs and newlines become spaces before control characters are dropped
    name = _ILLEGAL_FILENAME_CHARS.sub("", " ".join(name.split()))
    name = " ".join(name.split()).strip(" .")
    name = name[:MAX_FILENAME_LENGTH].rstrip(" .")
    if not name:
        name = DEFAULT_FILENAME
    if name.split(".")[0].lower() in _WINDOWS_RESERVED_NAMES:
        name = f"_{name}"
    return f"{name}{extension}"


__all__ = ["safe_filename"]
