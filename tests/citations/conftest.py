"""Shared fixtures for citation tests."""

import pytest

from bibcite.citations.processor import RenderResult
from bibcite.citations.styles import StyleCatalog
from bibcite.core.fields import Dialect
from bibcite.core.models import Record, RecordCollection


@pytest.fixture
def sample_records() -> dict[str, Record]:
    """Provide diverse sample records for testing."""
    return {
        "simple_article": Record.create(
            "article",
            "smith2024",
            author="Smith, John",
            title="Quantum Computing Advances",
            journal="Nature",
            volume="123",
            pages="45--67",
            year="2024",
            doi="10.1038/nature.2024.123",
        ),
        "biblatex_article": Record.create(
            "article",
            "foo2020",
            author="Foo, Bar",
            title="Volume, issue and number",
            journaltitle="Bib(La)TeX Journal",
            volume="1",
            issue="9",
            number="3number",
            pages="45--67",
        ),
        "book": Record.create(
            "book",
            "knuth1997",
            author="Knuth, Donald E.",
            title="The Art of Computer Programming",
            publisher="Addison-Wesley",
            address="Boston",
            edition="3",
            year="1997",
            isbn="978-0-201-89683-1",
        ),
        "minimal": Record.create(title="Title of the test entry"),
    }


@pytest.fixture
def linked_collection() -> RecordCollection:
    """Child record missing publisher, address and year; parent has them."""
    return RecordCollection.of(
        [
            Record.create(
                "incollection",
                "child",
                author="Doe, Jane",
                title="A Chapter",
                crossref="parent",
            ),
            Record.create(
                "collection",
                "parent",
                title="The Collected Volume",
                booktitle="The Collected Volume",
                publisher="Springer",
                address="Berlin",
                year="2021",
            ),
        ],
        Dialect.EXTENDED,
    )


@pytest.fixture(scope="session")
def default_style_source() -> str:
    """Source of the bundled numeric default style."""
    return StyleCatalog().default().source


@pytest.fixture
def fake_processor():
    """Style processor that echoes each record's title."""

    class FakeProcessor:
        def __init__(self):
            self.calls = []
            self.result = None

        def render(self, variable_maps, style_source, mode):
            self.calls.append((variable_maps, style_source, mode))
            if self.result is not None:
                return self.result
            titles = [m.get("title", "") for m in variable_maps]
            if mode.value == "citation":
                return RenderResult.ok(["<span>" + "; ".join(titles) + "</span>"])
            return RenderResult.ok(
                [f'<div class="csl-entry">  {title}\n</div>' for title in titles]
            )

    return FakeProcessor()


SORTED_STYLE = """<?xml version="1.0" encoding="utf-8"?>
<style xmlns="http://purl.org/net/xbiblio/csl" class="in-text" version="1.0">
  <info>
    <title>Sorted by author</title>
    <id>sorted-by-author</id>
    <updated>2024-01-01T00:00:00+00:00</updated>
  </info>
  <citation>
    <layout prefix="[" suffix="]" delimiter=", ">
      <text variable="citation-number"/>
    </layout>
  </citation>
  <bibliography>
    <sort><key variable="author"/></sort>
    <layout>
      <text variable="citation-number" prefix="[" suffix="] "/>
      <names variable="author"><name/></names>
    </layout>
  </bibliography>
</style>
"""

UPPERCASE_STYLE = """<?xml version="1.0" encoding="utf-8"?>
<style xmlns="http://purl.org/net/xbiblio/csl" class="in-text" version="1.0">
  <info>
    <title>Uppercase titles</title>
    <id>uppercase-titles</id>
    <updated>2024-01-01T00:00:00+00:00</updated>
  </info>
  <citation>
    <layout><text variable="citation-number"/></layout>
  </citation>
  <bibliography>
    <layout suffix=".">
      <text variable="title" text-case="uppercase"/>
    </layout>
  </bibliography>
</style>
"""


@pytest.fixture
def sorted_style_source() -> str:
    """Style whose bibliography sorts entries by author."""
    return SORTED_STYLE


@pytest.fixture
def uppercase_style_source() -> str:
    """Style printing nothing but the uppercased title."""
    return UPPERCASE_STYLE
