"""Tests for core record models."""

import msgspec
import pytest

from bibcite.core.fields import Dialect
from bibcite.core.models import Encoding, Record, RecordCollection, RenderMode


class TestRecord:
    """Test Record construction and field access."""

    def test_create_lowercases_field_names(self):
        record = Record.from_dict({"type": "Article", "key": "a", "Title": "T"})

        assert record.type == "article"
        assert record.fields == {"title": "T"}

    def test_from_dict_drops_none_values(self):
        record = Record.from_dict({"title": "T", "year": None})

        assert "year" not in record.fields

    def test_from_dict_accepts_nested_fields(self):
        record = Record.from_dict(
            {"type": "book", "key": "b", "fields": {"Publisher": "MIT Press"}}
        )

        assert record.get("publisher") == "MIT Press"

    def test_values_are_stringified(self):
        record = Record.from_dict({"year": 2024})

        assert record.get("year") == "2024"

    def test_get_is_case_insensitive(self, sample_record):
        assert sample_record.get("TITLE") == "Literate Programming"
        assert sample_record.get("Missing") is None
        assert sample_record.get("missing", "x") == "x"

    def test_has_ignores_blank_values(self):
        record = Record.create(title="   ", year="2024")

        assert not record.has("title")
        assert record.has("year")
        assert not record.has("author")

    def test_crossref_property(self):
        assert Record.create(crossref=" parent ").crossref == "parent"
        assert Record.create(crossref="  ").crossref is None
        assert Record.create().crossref is None

    def test_with_fields_returns_copy(self, sample_record):
        updated = sample_record.with_fields(Publisher="ACM")

        assert updated.get("publisher") == "ACM"
        assert sample_record.get("publisher") is None
        assert updated.key == sample_record.key

    def test_records_are_frozen(self, sample_record):
        with pytest.raises(AttributeError):
            sample_record.key = "other"

    def test_to_dict_roundtrip(self, sample_record):
        data = sample_record.to_dict()

        assert data["type"] == "article"
        assert data["key"] == "knuth1984"
        assert Record.from_dict(data) == sample_record

    def test_msgspec_encoding(self, sample_record):
        encoded = msgspec.json.encode(sample_record)
        decoded = msgspec.json.decode(encoded, type=Record)

        assert decoded == sample_record


class TestRecordCollection:
    """Test RecordCollection lookup and dialect handling."""

    def test_default_dialect_is_extended(self):
        assert RecordCollection.of([]).dialect is Dialect.EXTENDED

    def test_resolve_by_key(self, crossref_collection):
        record = crossref_collection.resolve("proc2024")

        assert record is not None
        assert record.get("publisher") == "ACM"

    def test_resolve_unknown_key(self, crossref_collection):
        assert crossref_collection.resolve("nope") is None
        assert crossref_collection.resolve("") is None

    def test_first_match_wins(self):
        first = Record.create(key="dup", title="First")
        second = Record.create(key="dup", title="Second")

        collection = RecordCollection.of([first, second])

        assert collection.resolve("dup") is first

    def test_iteration_and_length(self, crossref_records):
        collection = RecordCollection.of(crossref_records)

        assert len(collection) == 4
        assert list(collection) == crossref_records

    def test_with_dialect(self, crossref_collection):
        legacy = crossref_collection.with_dialect(Dialect.LEGACY)

        assert legacy.dialect is Dialect.LEGACY
        assert legacy.records == crossref_collection.records
        assert crossref_collection.dialect is Dialect.EXTENDED


class TestEnums:
    """Test parsing of the small closed enumerations."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("html", Encoding.RICH),
            ("RICH", Encoding.RICH),
            ("text", Encoding.PLAIN),
            ("plain", Encoding.PLAIN),
            (Encoding.PLAIN, Encoding.PLAIN),
        ],
    )
    def test_encoding_parse(self, value, expected):
        assert Encoding.parse(value) is expected

    def test_encoding_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown output encoding"):
            Encoding.parse("rtf")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("bibtex", Dialect.LEGACY),
            ("legacy", Dialect.LEGACY),
            ("BibLaTeX", Dialect.EXTENDED),
            ("extended", Dialect.EXTENDED),
        ],
    )
    def test_dialect_parse(self, value, expected):
        assert Dialect.parse(value) is expected

    def test_dialect_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown dialect"):
            Dialect.parse("ris")

    def test_render_modes(self):
        assert {mode.value for mode in RenderMode} == {"citation", "bibliography"}
