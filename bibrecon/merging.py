from __future__ import annotations

from .records import RECORD_FIELDS, Record


def merge(primary: Record, secondary: Record) -> Record:
    """
    Field-wise merge: each field comes whole from ``primary`` when it is
    non-empty there, otherwise from ``secondary``.
    """
    merged = {}
    for name in RECORD_FIELDS:
        value = getattr(primary, name)
        merged[name] = value if value else getattr(secondary, name)
    return Record(**merged)
