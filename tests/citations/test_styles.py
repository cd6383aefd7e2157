"""Tests for the citation style catalog."""

import logging

import pytest

from bibcite.citations.exceptions import StyleNotFoundError, StyleParseError
from bibcite.citations.styles import DEFAULT_STYLE, CitationStyle, StyleCatalog

MINIMAL_CSL = """<?xml version="1.0" encoding="utf-8"?>
<style xmlns="http://purl.org/net/xbiblio/csl" class="in-text" version="1.0">
  <info>
    <title>{title}</title>
    <id>{name}</id>
    <category citation-format="author-date"/>
  </info>
  <citation><layout><text variable="title"/></layout></citation>
</style>
"""


@pytest.fixture
def styles_dir(tmp_path):
    """Directory with two valid styles and one broken file."""
    directory = tmp_path / "styles"
    directory.mkdir()
    (directory / "apa.csl").write_text(
        MINIMAL_CSL.format(title="APA", name="apa"), encoding="utf-8"
    )
    (directory / "Chicago.csl").write_text(
        MINIMAL_CSL.format(title="Chicago", name="chicago"), encoding="utf-8"
    )
    (directory / "broken.csl").write_text("<style", encoding="utf-8")
    (directory / "notes.txt").write_text("ignored", encoding="utf-8")
    return directory


class TestCitationStyle:
    """Test reading style metadata."""

    def test_from_source(self):
        style = CitationStyle.from_source(
            "apa", MINIMAL_CSL.format(title="APA 7th", name="apa")
        )

        assert style.name == "apa"
        assert style.title == "APA 7th"
        assert not style.numeric
        assert style.path is None

    def test_missing_title_uses_name(self):
        source = '<style xmlns="http://purl.org/net/xbiblio/csl" version="1.0"/>'

        assert CitationStyle.from_source("bare", source).title == "bare"

    def test_invalid_xml(self):
        with pytest.raises(StyleParseError):
            CitationStyle.from_source("broken", "<style")

    def test_not_a_csl_document(self):
        with pytest.raises(StyleParseError, match="not a CSL style"):
            CitationStyle.from_source("html", "<html><body/></html>")

    def test_from_file(self, styles_dir):
        style = CitationStyle.from_file(styles_dir / "Chicago.csl")

        assert style.name == "chicago"
        assert style.path == str(styles_dir / "Chicago.csl")


class TestStyleCatalog:
    """Test style registration and lookup."""

    def test_bundled_default(self):
        style = StyleCatalog().default()

        assert style.name == DEFAULT_STYLE
        assert style.numeric
        assert style.title == "IEEE (numeric)"
        assert "citation-number" in style.source

    def test_lookup_ignores_case(self):
        catalog = StyleCatalog()

        assert "IEEE" in catalog
        assert catalog.get("IEEE").name == "ieee"

    def test_unknown_style(self):
        catalog = StyleCatalog()

        with pytest.raises(StyleNotFoundError, match="not found: nope"):
            catalog.get("nope")
        with pytest.raises(KeyError):
            catalog.get("nope")

    def test_without_bundled_styles(self):
        catalog = StyleCatalog(include_bundled=False)

        assert len(catalog) == 0
        with pytest.raises(StyleNotFoundError):
            catalog.default()

    def test_register_replaces(self):
        catalog = StyleCatalog()
        custom = CitationStyle.from_source(
            "ieee", MINIMAL_CSL.format(title="My IEEE", name="ieee")
        )

        catalog.register(custom)

        assert catalog.default() is custom

    def test_load_directory(self, styles_dir, caplog):
        catalog = StyleCatalog()

        with caplog.at_level(logging.WARNING):
            loaded = catalog.load_directory(styles_dir)

        assert sorted(loaded) == ["apa", "chicago"]
        assert [s.name for s in catalog.list_styles()] == ["apa", "chicago", "ieee"]
        assert "broken.csl" in caplog.text

    def test_clear(self):
        catalog = StyleCatalog()

        catalog.clear()

        assert catalog.list_styles() == []
        assert "ieee" not in catalog
