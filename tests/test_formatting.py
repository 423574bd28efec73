import unittest

from bibrecon.formatting import (
    cite_as_text,
    formatted_authors,
    formatted_html,
    oxford_comma_join,
    surnames,
)
from bibrecon.records import Person, Record

ALICE = Person("Alice", "Smith")
BOB = Person("Bob", "Jones")
CAROL = Person("Carol", "White")
DAN = Person("Dan", "Brown")


class OxfordCommaTests(unittest.TestCase):
    def test_list_rendering(self) -> None:
        self.assertEqual(oxford_comma_join([]), "")
        self.assertEqual(oxford_comma_join(["Smith"]), "Smith")
        self.assertEqual(oxford_comma_join(["A", "B"]), "A and B")
        self.assertEqual(oxford_comma_join(["A", "B", "C"]), "A, B, and C")
        self.assertEqual(oxford_comma_join(["A", "B", "C", "D"]), "A, B, C, and D")


class AuthorFormattingTests(unittest.TestCase):
    def test_surnames_authors_before_editors(self) -> None:
        rec = Record(authors=(ALICE, BOB), editors=(CAROL,))
        self.assertEqual(surnames(rec), "Smith, Jones, and White")

    def test_surnames_empty(self) -> None:
        self.assertEqual(surnames(Record()), "")

    def test_single_editor(self) -> None:
        rec = Record(authors=(ALICE, BOB), editors=(CAROL,))
        self.assertEqual(formatted_authors(rec), "Alice Smith and Bob Jones, Editor: Carol White")

    def test_editors_without_authors(self) -> None:
        rec = Record(editors=(CAROL, DAN))
        self.assertEqual(formatted_authors(rec), "Editors: Carol White and Dan Brown")

    def test_authors_only(self) -> None:
        self.assertEqual(formatted_authors(Record(authors=(ALICE,))), "Alice Smith")


class CiteAsTextTests(unittest.TestCase):
    def test_book_type_omitted_and_publisher_shown(self) -> None:
        rec = Record.from_mapping({"type": "Book", "publisher": "Pub", "year": "2020"})
        self.assertEqual(cite_as_text(rec), "Pub (2020)")

    def test_publisher_skipped_for_non_books(self) -> None:
        self.assertEqual(cite_as_text(Record(publisher="Pub", year="2001")), "(2001)")

    def test_journal_article(self) -> None:
        rec = Record(venue="Quantum", volume="3", issue="2", page="129", year="2019")
        self.assertEqual(cite_as_text(rec), "Quantum 3 2, 129 (2019)")

    def test_type_capitalized(self) -> None:
        rec = Record(type="phD thesis", institution="MIT", year="2018")
        self.assertEqual(cite_as_text(rec), "PhD thesis MIT (2018)")

    def test_issue_without_volume_still_gets_page_separator(self) -> None:
        self.assertEqual(cite_as_text(Record(issue="4", page="10")), "4, 10")

    def test_howpublished_and_isbn(self) -> None:
        rec = Record(howpublished="online", type="book", publisher="Pub", year="2001", isbn="978-3")
        self.assertEqual(cite_as_text(rec), "Pub (online) (2001) ISBN:978-3")

    def test_collection_title(self) -> None:
        rec = Record(type="inproceedings", collectiontitle="Proc. TQC", page="1-12", year="2013")
        self.assertEqual(cite_as_text(rec), "Inproceedings Proc. TQC 1-12 (2013)")

    def test_empty_record(self) -> None:
        self.assertEqual(cite_as_text(Record()), "")


class FormattedHtmlTests(unittest.TestCase):
    def test_eprint_and_doi_links(self) -> None:
        rec = Record(
            authors=(ALICE,),
            title="A & B",
            eprint="1301.0001",
            doi="10.1/x",
            venue="Quantum",
            volume="3",
            page="129",
            year="2019",
        )
        html = formatted_html(rec, "https://doi.org/", "https://arxiv.org/abs/")
        self.assertEqual(
            html,
            'Alice Smith, "A &amp; B", '
            '<a href="https://arxiv.org/abs/1301.0001">arXiv:1301.0001</a>, '
            '<a href="https://doi.org/10.1/x">Quantum 3, 129 (2019)</a>.',
        )

    def test_plain_citation_without_identifiers(self) -> None:
        rec = Record(title="T", venue="V", year="2000")
        self.assertEqual(formatted_html(rec, "d/", "a/"), '"T", V (2000).')

    def test_text_is_escaped(self) -> None:
        rec = Record(authors=(Person("Bob", "<b>Jones</b>"),), venue="X & Y")
        self.assertEqual(formatted_html(rec, "d/", "a/"), "Bob &lt;b&gt;Jones&lt;/b&gt;, X &amp; Y.")

    def test_single_trailing_period(self) -> None:
        self.assertEqual(formatted_html(Record(venue="Phys. Rev."), "d/", "a/"), "Phys. Rev.")
        self.assertEqual(formatted_html(Record(title="T"), "d/", "a/"), '"T".')

    def test_default_prefixes(self) -> None:
        html = formatted_html(Record(eprint="2101.00001"))
        self.assertEqual(html, '<a href="https://arxiv.org/abs/2101.00001">arXiv:2101.00001</a>.')


if __name__ == "__main__":
    unittest.main()
