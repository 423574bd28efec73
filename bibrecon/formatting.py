"""Human-readable renderings of a Record: author lists, citation text, HTML."""

from __future__ import annotations

from typing import List, Optional, Sequence

import jinja2
from markupsafe import escape

from .records import Person, Record
from .runtime_config import RUNTIME_CONFIG

_env = jinja2.Environment(autoescape=True)
_LINK_TEMPLATE = _env.from_string('<a href="{{ href }}">{{ label }}</a>')


def oxford_comma_join(items: Sequence[str]) -> str:
    """
    "" / "A" / "A and B" / "A, B, and C"
    """
    items = list(items)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return ", ".join(items[:-1]) + ", and " + items[-1]


def _names(people: Sequence[Person]) -> List[str]:
    return [p.name for p in people]


def surnames(record: Record) -> str:
    """Author surnames followed by editor surnames."""
    return oxford_comma_join([p.surname for p in (*record.authors, *record.editors)])


def formatted_authors(record: Record) -> str:
    author_names = _names(record.authors)
    result = oxford_comma_join(author_names)
    if record.editors:
        editor_names = _names(record.editors)
        if author_names:
            result += ", "
        result += "Editor: " if len(editor_names) == 1 else "Editors: "
        result += oxford_comma_join(editor_names)
    return result.strip()


def _is_book(record: Record) -> bool:
    return record.type.lower() == "book"


def cite_as_text(record: Record) -> str:
    r = record
    text = ""
    if r.type and not _is_book(r):
        text += r.type[:1].upper() + r.type[1:] + " "
    if r.venue:
        text += r.venue + " "
    if r.collectiontitle:
        text += r.collectiontitle + " "
    if r.publisher and _is_book(r):
        text += r.publisher + " "
    if r.institution:
        text += r.institution + " "
    if r.howpublished:
        text += "(" + r.howpublished + ") "
    if r.volume:
        text += r.volume
    if r.volume and r.issue:
        text += " "
    if r.issue:
        text += r.issue
    if (r.volume or r.issue) and r.page:
        text += ", "
    if r.page:
        text += r.page + " "
    if r.year:
        text += "(" + r.year + ")"
    if r.isbn:
        text += " ISBN:" + r.isbn
    return text.strip()


def _link(href: str, label: str) -> str:
    return _LINK_TEMPLATE.render(href=href, label=label)


def formatted_html(
    record: Record,
    doi_url_prefix: Optional[str] = None,
    arxiv_url_abs_prefix: Optional[str] = None,
) -> str:
    """
    HTML fragment for a bibliography listing. Text is escaped; arXiv and
    DOI links are built from the given prefixes (configured defaults when
    omitted). Always ends in exactly one period.
    """
    if doi_url_prefix is None:
        doi_url_prefix = RUNTIME_CONFIG.formatting.doi_url_prefix
    if arxiv_url_abs_prefix is None:
        arxiv_url_abs_prefix = RUNTIME_CONFIG.formatting.arxiv_url_abs_prefix

    out = str(escape(formatted_authors(record)))
    if out:
        out += ", "
    if record.title:
        out += '"' + str(escape(record.title)) + '", '
    if record.eprint:
        out += _link(arxiv_url_abs_prefix + record.eprint, "arXiv:" + record.eprint)
    if record.doi and record.eprint:
        out += ", "
    if record.doi:
        out += _link(doi_url_prefix + record.doi, cite_as_text(record))
    if not record.doi and not record.eprint:
        out += str(escape(cite_as_text(record)))

    return out.strip(" ,").rstrip(" ,.") + "."
