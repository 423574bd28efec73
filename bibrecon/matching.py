from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from rapidfuzz.distance import Levenshtein

from .formatting import surnames
from .logging_setup import get_logger, with_extras
from .records import Record
from .runtime_config import RUNTIME_CONFIG, MatchingConfig

logger = get_logger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def _debug(msg: str, **extras):
    if logger.isEnabledFor(logging.DEBUG):
        with_extras(logger, **extras).debug(msg)


# -----------------------
# Utilities
# -----------------------

def _year_number(value: str) -> Optional[float]:
    """Leading numeric part of a year field ("2019a" -> 2019.0), else None."""
    m = _LEADING_NUMBER_RE.match(value or "")
    if not m:
        return None
    return float(m.group(1))


def _years_similar(a: Record, b: Record, window: int) -> bool:
    if not a.year or not b.year:
        return False
    ya = _year_number(a.year)
    yb = _year_number(b.year)
    if ya is None or yb is None:
        return False
    return abs(ya - yb) <= window


def _byte_key(text: str, max_bytes: int) -> str:
    """
    Lower-case (ASCII only) and cut to max_bytes of UTF-8. The result is
    decoded as latin-1 so that one character stands for one byte and the
    edit distance and lengths below are counted in bytes. Undecodable
    source bytes carried as surrogates are restored, never rejected.
    """
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        # lone surrogates outside the escape range
        raw = text.encode("utf-8", "surrogatepass")
    return raw.lower()[:max_bytes].decode("latin-1")


def _edit_stats(a: str, b: str, max_bytes: int) -> Tuple[int, int]:
    """(levenshtein distance, shorter length), both in bytes."""
    ka = _byte_key(a, max_bytes)
    kb = _byte_key(b, max_bytes)
    return Levenshtein.distance(ka, kb), min(len(ka), len(kb))


def titles_similarity(a: Record, b: Record, config: Optional[MatchingConfig] = None) -> Tuple[bool, bool]:
    """(titles_similar, titles_very_similar); both False if a title is missing."""
    cfg = config or RUNTIME_CONFIG.matching
    if not a.title or not b.title:
        return False, False
    lev, lmin = _edit_stats(a.title, b.title, cfg.max_compare_bytes)
    similar = lev <= cfg.title_similar_ratio * lmin or lev <= cfg.title_similar_max_edits
    very_similar = lev <= cfg.title_very_similar_ratio * lmin
    return similar, very_similar


def authors_similarity(a: Record, b: Record, config: Optional[MatchingConfig] = None) -> Tuple[bool, bool]:
    """(authors_similar, authors_very_similar) over the joined surname lists."""
    cfg = config or RUNTIME_CONFIG.matching
    sa = surnames(a)
    sb = surnames(b)
    if not sa or not sb:
        return False, False
    lev, lmin = _edit_stats(sa, sb, cfg.max_compare_bytes)
    similar = lev <= cfg.author_similar_ratio * lmin or lev <= cfg.author_similar_max_edits
    very_similar = lev <= cfg.author_very_similar_ratio * lmin
    return similar, very_similar


# -----------------------
# Public entry
# -----------------------

def match(a: Record, b: Record, config: Optional[MatchingConfig] = None) -> bool:
    """
    Decide whether two records describe the same work.

    The first applicable tier decides:
    1. both have an eprint: eprints must be equal;
    2. both have a doi: dois must be equal;
    3. heuristics: years within the window, similar titles and similar
       author/editor surnames, with at least one of the two very similar.
    """
    cfg = config or RUNTIME_CONFIG.matching

    if a.eprint and b.eprint:
        result = a.eprint == b.eprint
        _debug("Eprint tier decided", eprint_a=a.eprint, eprint_b=b.eprint, match=result)
        return result

    if a.doi and b.doi:
        result = a.doi == b.doi
        _debug("DOI tier decided", doi_a=a.doi, doi_b=b.doi, match=result)
        return result

    if not _years_similar(a, b, cfg.year_window):
        _debug("Years not similar", year_a=a.year, year_b=b.year)
        return False

    titles_similar, titles_very_similar = titles_similarity(a, b, cfg)
    if not titles_similar:
        _debug("Titles not similar", title_a=a.title[:160], title_b=b.title[:160])
        return False

    authors_similar, authors_very_similar = authors_similarity(a, b, cfg)
    result = authors_similar and (titles_very_similar or authors_very_similar)
    _debug(
        "Heuristic tier decided",
        title_a=a.title[:160],
        titles_very_similar=titles_very_similar,
        authors_similar=authors_similar,
        authors_very_similar=authors_very_similar,
        match=result,
    )
    return result
