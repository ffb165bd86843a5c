from __future__ import annotations
import re
from typing import List

# /* ~~~ keep only lowercase ascii letters, digits and the plain space ~~~ */
_DROP = re.compile(r"[^a-z0-9 ]")

def normalize(text: str) -> str:
    """
    Canonical form used for both dataset titles and user queries:
      * lowercase
      * keep only a-z, 0-9 and ' '; everything else is dropped, not replaced
        ("don't" -> "dont", "sci-fi" -> "scifi", "café" -> "caf")
    Spaces are neither trimmed nor collapsed, so token boundaries typed by the
    user survive (a trailing space yields a trailing empty token).
    """
    return _DROP.sub("", text.lower())

def tokenize(normalized: str) -> List[str]:
    """Split on single spaces. The empty string yields one empty token."""
    return normalized.split(" ")
