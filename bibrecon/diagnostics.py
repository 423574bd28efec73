from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from thefuzz import fuzz

from .dedup import Collection, _items, dedup, union_merge
from .logging_setup import get_logger, with_extras
from .matching import match
from .runtime_config import RUNTIME_CONFIG, RuntimeConfig

logger = get_logger(__name__)


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    REVIEW = "REVIEW"
    INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


@dataclass
class ReconciliationReport:
    records: Any
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def has(self, severity: Severity) -> bool:
        return any(d.severity == severity for d in self.diagnostics)

    def render(self) -> str:
        return "\n".join(str(d) for d in self.diagnostics)


def find_possible_duplicates(collection: Collection, config: Optional[RuntimeConfig] = None) -> List[Diagnostic]:
    """
    Pairs that match() keeps apart although their titles look alike.

    The editor decides; nothing is merged here.
    """
    cfg = config or RUNTIME_CONFIG
    min_ratio = cfg.diagnostics.possible_duplicate_min_ratio
    items = _items(collection)
    found: List[Diagnostic] = []
    for i, (key_i, rec_i) in enumerate(items):
        if not rec_i.title:
            continue
        for key_j, rec_j in items[i + 1:]:
            if not rec_j.title:
                continue
            ratio = fuzz.token_set_ratio(rec_i.title.lower(), rec_j.title.lower())
            if ratio < min_ratio or match(rec_i, rec_j, cfg.matching):
                continue
            found.append(
                Diagnostic(
                    Severity.REVIEW,
                    f"Entries {key_i} and {key_j} have similar titles but were not merged (duplicate possibly missed).",
                    {"keys": [key_i, key_j], "title_ratio": ratio},
                )
            )
    return found


def find_unmatchable(collection: Collection) -> List[Diagnostic]:
    found: List[Diagnostic] = []
    for key, record in _items(collection):
        if not record.eprint and not record.doi and not record.title:
            found.append(
                Diagnostic(
                    Severity.WARNING,
                    f"Entry {key} has no eprint, DOI, or title and cannot be reconciled.",
                    {"key": key},
                )
            )
    return found


def reconcile(
    existing: Collection,
    incoming: Collection,
    remove_duplicates: bool = True,
    config: Optional[RuntimeConfig] = None,
) -> ReconciliationReport:
    """
    Merge freshly gathered entries into an existing bibliography and
    describe what happened, for display in the editorial workflow.
    """
    cfg = config or RUNTIME_CONFIG
    combined = union_merge(existing, incoming, remove_duplicates=False, config=cfg.matching)
    appended = len(combined) - len(existing)
    absorbed = len(incoming) - appended
    records = dedup(combined, merge=True, config=cfg.matching) if remove_duplicates else combined
    removed = len(combined) - len(records)

    diagnostics: List[Diagnostic] = [
        Diagnostic(
            Severity.INFO,
            f"{absorbed} incoming entries merged into existing ones, {appended} appended.",
            {"absorbed": absorbed, "appended": appended},
        )
    ]
    if removed:
        diagnostics.append(
            Diagnostic(Severity.INFO, f"{removed} duplicate entries absorbed.", {"removed": removed})
        )
    if _items(records) != _items(existing):
        diagnostics.append(Diagnostic(Severity.REVIEW, "Bibliographic information updated."))
    diagnostics.extend(find_unmatchable(records))
    diagnostics.extend(find_possible_duplicates(records, cfg))

    with_extras(
        logger,
        existing=len(existing),
        incoming=len(incoming),
        result=len(records),
        diagnostics=len(diagnostics),
    ).info("Bibliography reconciled")
    return ReconciliationReport(records=records, diagnostics=diagnostics)
