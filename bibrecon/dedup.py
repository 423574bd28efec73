"""
Collection-level reconciliation built on match() and merge().

Both entry points take a sequence (returning a new list) or a mapping
(returning a new dict with surviving keys in their original order). The
caller's collection and records are never modified.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from .logging_setup import get_logger, with_extras
from .matching import match
from .merging import merge as merge_records
from .records import Record
from .runtime_config import RUNTIME_CONFIG, MatchingConfig

logger = get_logger(__name__)

Collection = Union[Sequence[Record], Mapping[Hashable, Record]]


def _info(msg: str, **extras):
    if extras:
        with_extras(logger, **extras).info(msg)
    else:
        logger.info(msg)


def _items(collection: Collection) -> List[Tuple[Hashable, Record]]:
    if isinstance(collection, Mapping):
        return list(collection.items())
    return list(enumerate(collection))


def _rebuild(items: List[Tuple[Hashable, Record]], like: Collection) -> Any:
    if isinstance(like, Mapping):
        return dict(items)
    return [record for _, record in items]


def _next_int_key(keys) -> int:
    ints = [k for k in keys if isinstance(k, int) and not isinstance(k, bool)]
    return max(ints) + 1 if ints else 0


def dedup(collection: Collection, merge: bool = True, config: Optional[MatchingConfig] = None) -> Any:
    """
    Remove duplicates in a single left-to-right absorption pass.

    Each slot ``i`` is compared with every later slot ``j`` using its
    current content, so a merge found at an earlier ``j`` already counts
    for the comparisons that follow. Matched slots ``j`` are dropped once
    the pass is over; with ``merge`` they are first folded into ``i``.
    This is a single pass, not a transitive closure: two entries that
    would only match through an intermediate merge happening later in the
    scan stay apart.
    """
    cfg = config or RUNTIME_CONFIG.matching
    items = _items(collection)
    current = [record for _, record in items]
    to_remove: Set[int] = set()

    for i in range(len(current)):
        for j in range(i + 1, len(current)):
            if match(current[i], current[j], cfg):
                if merge:
                    current[i] = merge_records(current[i], current[j])
                to_remove.add(j)

    survivors = [(items[k][0], current[k]) for k in range(len(current)) if k not in to_remove]
    if to_remove:
        _info("Duplicates removed", entries_in=len(current), entries_out=len(survivors), merged=merge)
    return _rebuild(survivors, collection)


def union_merge(
    collection_a: Collection,
    collection_b: Collection,
    remove_duplicates: bool = True,
    config: Optional[MatchingConfig] = None,
) -> Any:
    """
    Merge ``collection_b`` into ``collection_a``.

    Every entry of ``collection_b`` is compared with every original entry
    of ``collection_a``; each matching slot absorbs it (``collection_a``
    content wins per field). Entries that matched nothing are appended.
    With ``remove_duplicates`` the combined result is deduplicated with
    merging. If either side is empty the other side is returned,
    deduplicated when requested. Entries appended to a mapping get the next
    free integer key.
    """
    cfg = config or RUNTIME_CONFIG.matching

    if not collection_a and not collection_b:
        return {} if isinstance(collection_a, Mapping) else []
    if not collection_a or not collection_b:
        other = collection_b if not collection_a else collection_a
        if remove_duplicates:
            return dedup(other, merge=True, config=cfg)
        return _rebuild(_items(other), other)

    originals = _items(collection_a)
    slots: Dict[Hashable, Record] = dict(originals)
    appended: List[Tuple[Hashable, Record]] = []
    absorbed = 0

    for key_b, entry in _items(collection_b):
        merged_at_least_once = False
        for key_a, original in originals:
            if match(original, entry, cfg):
                slots[key_a] = merge_records(slots[key_a], entry)
                merged_at_least_once = True
        if merged_at_least_once:
            absorbed += 1
        else:
            appended.append((key_b, entry))

    combined: List[Tuple[Hashable, Record]] = list(slots.items())
    if isinstance(collection_a, Mapping):
        taken = set(slots)
        for _, entry in appended:
            key = _next_int_key(taken)
            taken.add(key)
            combined.append((key, entry))
    else:
        combined.extend(appended)

    _info(
        "Collections merged",
        entries_a=len(originals),
        entries_b=len(collection_b),
        absorbed=absorbed,
        appended=len(appended),
    )
    result = _rebuild(combined, collection_a)
    if remove_duplicates:
        result = dedup(result, merge=True, config=cfg)
    return result
