"""
Bibliographic record reconciliation.

Turns noisy field maps from scrapers, reference-list parsers and manual
edits into Records, folds records describing the same work into one, and
renders the result as citation text.
"""

from .dedup import dedup, union_merge
from .diagnostics import Diagnostic, ReconciliationReport, Severity, reconcile
from .formatting import cite_as_text, formatted_authors, formatted_html, oxford_comma_join, surnames
from .matching import match
from .merging import merge
from .records import RECORD_FIELDS, Person, Record

__version__ = "0.1.0"

__all__ = [
    "RECORD_FIELDS",
    "Diagnostic",
    "Person",
    "Record",
    "ReconciliationReport",
    "Severity",
    "cite_as_text",
    "dedup",
    "formatted_authors",
    "formatted_html",
    "match",
    "merge",
    "oxford_comma_join",
    "reconcile",
    "surnames",
    "union_merge",
]
