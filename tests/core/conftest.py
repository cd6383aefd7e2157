"""Shared fixtures for core module tests."""

import pytest

from bibcite.core.fields import Dialect
from bibcite.core.models import Record, RecordCollection


@pytest.fixture
def sample_record() -> Record:
    """Journal article with the usual fields."""
    return Record.create(
        "article",
        "knuth1984",
        author="Donald E. Knuth",
        title="Literate Programming",
        journal="The Computer Journal",
        year="1984",
        volume="27",
        number="2",
        pages="97--111",
        doi="10.1093/comjnl/27.2.97",
    )


@pytest.fixture
def crossref_records() -> list[Record]:
    """A proceedings volume and two papers inheriting from it."""
    return [
        Record.create(
            "inproceedings",
            "paper1",
            author="Ada Lovelace",
            title="Notes on the Analytical Engine",
            crossref="proc2024",
        ),
        Record.create(
            "inproceedings",
            "paper2",
            author="Charles Babbage",
            title="On the Difference Engine",
            publisher="Own Press",
            crossref="proc2024",
        ),
        Record.create(
            "proceedings",
            "proc2024",
            title="Proceedings of Computing",
            booktitle="Proceedings of Computing",
            publisher="ACM",
            address="New York",
            year="2024",
            crossref="series2024",
        ),
        Record.create(
            "book",
            "series2024",
            title="Series Volume",
            series="Lecture Notes",
            edition="Second",
        ),
    ]


@pytest.fixture
def crossref_collection(crossref_records) -> RecordCollection:
    """Collection used as link resolver."""
    return RecordCollection.of(crossref_records, Dialect.EXTENDED)


@pytest.fixture
def sample_bibtex() -> str:
    """BibLaTeX file content with a dialect marker."""
    return r"""% Encoding: UTF-8

@String{acm = {Association for Computing Machinery}}

@Article{doe2024,
  author       = {Doe, John and Smith, Jane},
  title        = {Quantum Computing {Advances}},
  journaltitle = {Nature Quantum},
  date         = {2024-03},
  volume       = 12,
  number       = {3},
  pages        = {1--10},
  doi          = {10.1038/s41567-024-0001},
}

@InProceedings{smith2023,
  author    = "Smith, Jane",
  title     = "Machine Learning for Climate",
  booktitle = {NeurIPS 2023},
  publisher = acm,
  year      = {2023},
  note      = {50\% faster},
}

@Comment{jabref-meta: databaseType:biblatex;}
"""
