from __future__ import annotations
import bisect
from typing import List, Mapping, Optional, Protocol, Tuple

import Levenshtein

# Penalty tables by 1-based position (edits near the start of a word cost more)
_REPLACE = {1: 5, 2: 4, 3: 3, 4: 2}
_INSERT_DEL = {1: 10, 2: 8, 3: 6, 4: 4}


class SpellingOracle(Protocol):
    def suggest(self, token: str, frequencies: Mapping[str, int]) -> str: ...


def _hamming_one(q: str, t: str) -> Optional[int]:
    """Returns the 1-based position of the differing character, or None if not exactly one."""
    assert len(q) == len(t)
    diff_pos = 0
    for i, (a, b) in enumerate(zip(q, t), start=1):
        if a != b:
            if diff_pos != 0:
                return None
            diff_pos = i
    return diff_pos or None

def _one_added_in_query(q: str, t: str) -> Optional[int]:
    """Returns the 1-based position in query where an extra letter was added, or None if not exactly one."""
    assert len(q) == len(t) + 1
    i = j = 0
    extra_pos: Optional[int] = None
    while i < len(q) and j < len(t):
        if q[i] == t[j]:
            i += 1
            j += 1
        else:
            if extra_pos is not None:
                return None
            extra_pos = i + 1
            i += 1
    if extra_pos is None:
        extra_pos = len(q)
    return extra_pos

def _one_missing_in_query(q: str, t: str) -> Optional[int]:
    """Returns the 1-based position in query where a letter is missing, or None if not exactly one."""
    assert len(q) + 1 == len(t)
    i = j = 0
    gap_pos: Optional[int] = None
    while i < len(q) and j < len(t):
        if q[i] == t[j]:
            i += 1
            j += 1
        else:
            if gap_pos is not None:
                return None
            gap_pos = i + 1
            j += 1
    if gap_pos is None:
        gap_pos = len(q) + 1
    return gap_pos

def within_1_edit(a: str, b: str) -> Tuple[bool, int]:
    """
    Return (ok, penalty) where ok=True iff a and b are within ONE edit
    (substitution OR single added/missing letter). Penalty is <= 0.
    """
    if a == b:
        return True, 0
    if abs(len(a) - len(b)) > 1:
        return False, 0
    if len(a) == len(b):
        pos = _hamming_one(a, b)
        return (True, -_REPLACE.get(pos, 1)) if pos is not None else (False, 0)
    if len(a) == len(b) + 1:
        pos = _one_added_in_query(a, b)   # a has the extra char
        return (True, -_INSERT_DEL.get(pos, 2)) if pos is not None else (False, 0)
    pos = _one_missing_in_query(a, b)     # a is missing a char
    return (True, -_INSERT_DEL.get(pos, 2)) if pos is not None else (False, 0)


class EditDistanceOracle:
    """
    Corrects a token by at most ONE edit (substitute OR single add/miss),
    choosing from the words of the frequency map.

    Preference:
      1) higher word frequency
      2) less severe penalty (closer to 0)
      3) lexicographic
    Words containing digits are never proposed for a token with letters.
    When no word is one edit away, the most frequent word at Levenshtein
    distance 2 is used (max_distance=1 disables this).
    Unknown tokens with no viable correction are returned unchanged.
    """

    # Only words whose sorted position is within `band` of the token are scanned first
    def __init__(self, band: int = 3000, max_distance: int = 2) -> None:
        self.band = band
        self.max_distance = max_distance
        # (frequency map, its sorted words), always replaced as one unit
        self._cache: Optional[Tuple[Mapping[str, int], List[str]]] = None

    def _lexicon(self, frequencies: Mapping[str, int]) -> List[str]:
        # the frequency map is immutable after indexing: sort once per map
        cache = self._cache
        if cache is None or cache[0] is not frequencies:
            cache = (frequencies, sorted(w for w in frequencies if w))
            self._cache = cache
        return cache[1]

    def suggest(self, token: str, frequencies: Mapping[str, int]) -> str:
        if not token or token in frequencies:
            return token

        L = self._lexicon(frequencies)
        i = bisect.bisect_left(L, token)
        lo = max(0, i - self.band); hi = min(len(L), i + self.band)
        tok_has_alpha = any('a' <= c <= 'z' for c in token)
        tok_len = len(token)

        def choose_range(terms: List[str]) -> Optional[str]:
            best_term: Optional[str] = None
            best_tf = -1
            best_pen = -10_000
            for term in terms:
                tl = len(term)
                if tl < tok_len - 1 or tl > tok_len + 1:
                    continue
                if tok_has_alpha and any(ch.isdigit() for ch in term):
                    continue  # ban numeric/alnum if token has letters
                ok, pen = within_1_edit(token, term)
                if not ok:
                    continue
                tf = frequencies.get(term, 0)
                if (best_term is None or
                    tf > best_tf or
                    (tf == best_tf and pen > best_pen) or
                    (tf == best_tf and pen == best_pen and term < best_term)):
                    best_term, best_tf, best_pen = term, tf, pen
            return best_term

        # 1) Local band (fast)
        best = choose_range(L[lo:hi])

        # 2) Fallback: global scan (the band misses edits at the first letter of long lexicons)
        if best is None and len(L) > hi - lo:
            best = choose_range(L)

        # 3) Two edits: most frequent word at Levenshtein distance 2
        if best is None and self.max_distance >= 2:
            best = self._two_edits(token, L, frequencies, tok_has_alpha)

        return best if best is not None else token

    def _two_edits(self, token: str, lexicon: List[str], frequencies: Mapping[str, int],
                   tok_has_alpha: bool) -> Optional[str]:
        best_term: Optional[str] = None
        best_tf = -1
        n = len(token)
        for term in lexicon:
            if abs(len(term) - n) > 2:
                continue
            if tok_has_alpha and any(ch.isdigit() for ch in term):
                continue
            if Levenshtein.distance(token, term) > 2:
                continue
            tf = frequencies.get(term, 0)
            if best_term is None or tf > best_tf or (tf == best_tf and term < best_term):
                best_term, best_tf = term, tf
        return best_term
