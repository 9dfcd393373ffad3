"""
Slide-file parsing utilities.

Pure functions used by the scanner to infer a deck title from the raw text of
its content file. Only the first title-bearing line matters; the rest of the
document is never parsed.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LINE_SPLIT_RE = re.compile(r"\r?\n")
TITLE_PREFIX = "title:"
HEADING_PREFIX = "# "


# ---------------------------------------------------------------------------
# Utility functions
# ---------------------------------------------------------------------------

def split_lines(text: str) -> list:
    """Split on LF or CRLF."""
    return LINE_SPLIT_RE.split(text)


def infer_title_from_lines(lines: Iterable[str]) -> Optional[str]:
    """
    Return the title carried by the first title-bearing line, if any.

    Lines are stripped and blank lines skipped. The first line starting with
    ``title:`` (front-matter style) or ``# `` (level-1 heading) ends the
    scan; its remainder, stripped, is the title. An empty remainder yields
    None without looking further.
    """
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue

        if trimmed.startswith(TITLE_PREFIX):
            return trimmed[len(TITLE_PREFIX):].strip() or None

        if trimmed.startswith(HEADING_PREFIX):
            return trimmed[len(HEADING_PREFIX):].strip() or None

    return None


def infer_title(text: str) -> Optional[str]:
    """Infer a deck title from slide-file text."""
    return infer_title_from_lines(split_lines(text))
