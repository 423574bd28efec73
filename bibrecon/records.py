"""Bibliographic records as reconciled by the engine.

A Record carries exactly the enumerated bibliographic fields. Scrapers, the
reference-list parser and manual edits hand in plain field maps; anything
outside the enumerated set is dropped on construction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Tuple

from .logging_setup import get_logger, with_extras

logger = get_logger(__name__)

PERSON_FIELDS = ("authors", "editors")

_LAST_WHITESPACE_RE = re.compile(r"\s+(?=\S+$)")


def _warn(msg: str, **extras):
    if extras:
        with_extras(logger, **extras).warning(msg)
    else:
        logger.warning(msg)


@dataclass(frozen=True)
class Person:
    given_name: str = ""
    surname: str = ""

    @property
    def name(self) -> str:
        return " ".join(p for p in (self.given_name, self.surname) if p)

    @classmethod
    def from_full_name(cls, text: str) -> "Person":
        """
        Split a display name on its last run of whitespace:
        "Anna Maria Schmidt" -> given "Anna Maria", surname "Schmidt".
        A single token is taken as the surname.
        """
        parts = _LAST_WHITESPACE_RE.split((text or "").strip(), maxsplit=1)
        if len(parts) == 2:
            return cls(given_name=parts[0], surname=parts[1])
        return cls(surname=parts[0])

    @classmethod
    def from_value(cls, value: Any) -> "Person":
        if isinstance(value, Person):
            return value
        if isinstance(value, Mapping):
            given = value.get("given_name", value.get("given")) or ""
            surname = value.get("surname", value.get("family")) or ""
            return cls(given_name=str(given), surname=str(surname))
        if isinstance(value, (tuple, list)) and len(value) == 2:
            given, surname = value
            return cls(given_name=str(given or ""), surname=str(surname or ""))
        return cls.from_full_name(str(value or ""))

    def to_dict(self) -> Dict[str, str]:
        return {"given_name": self.given_name, "surname": self.surname}


@dataclass(frozen=True)
class Record:
    authors: Tuple[Person, ...] = ()
    chapter: str = ""
    collectiontitle: str = ""
    day: str = ""
    doi: str = ""
    editors: Tuple[Person, ...] = ()
    eprint: str = ""
    howpublished: str = ""
    institution: str = ""
    isbn: str = ""
    issn: str = ""
    issue: str = ""
    month: str = ""
    page: str = ""
    publisher: str = ""
    ref: str = ""
    title: str = ""
    type: str = ""
    url: str = ""
    venue: str = ""
    volume: str = ""
    year: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Record":
        """
        Build a record from an arbitrary field map.

        Only enumerated field names are read. Person lists are kept in
        order, every other value is coerced to ``str``. Absent or ``None``
        values fall back to the empty default, and so do values of the
        wrong shape (logged, never raised).
        """
        values: Dict[str, Any] = {}
        for name in RECORD_FIELDS:
            raw = data.get(name) if data else None
            if raw is None:
                continue
            if name in PERSON_FIELDS:
                if isinstance(raw, (list, tuple)):
                    values[name] = tuple(Person.from_value(p) for p in raw)
                else:
                    _warn("Ignoring non-list person field", field=name, value_type=type(raw).__name__)
            elif isinstance(raw, (list, tuple, dict, set)):
                _warn("Ignoring list-valued scalar field", field=name, value_type=type(raw).__name__)
            else:
                values[name] = str(raw)
        return cls(**values)

    def get(self, name: str) -> Any:
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for name in RECORD_FIELDS:
            value = getattr(self, name)
            if name in PERSON_FIELDS:
                out[name] = [p.to_dict() for p in value]
            else:
                out[name] = value
        return out


RECORD_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(Record))
