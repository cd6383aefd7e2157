"""Core data models for citation generation.

This module defines the structures handed to the generation pipeline.
A Record is a raw bibliographic entry as found in a BibTeX or BibLaTeX
file; a RecordCollection groups records under one dialect and doubles as
the lookup used to follow inheritance links.

Key components:
- Record: Immutable entry with case-insensitive field access
- RecordCollection: Records plus the dialect they follow
- Encoding: Target output encoding (rich markup or plain text)
- RenderMode: In-text citation or bibliography list
"""

import enum
from collections.abc import Iterator
from typing import Any, Protocol

import msgspec

from .fields import Dialect


class Encoding(enum.Enum):
    """Output encodings supported by the generator."""

    RICH = "html"
    PLAIN = "text"

    @classmethod
    def parse(cls, value: "str | Encoding") -> "Encoding":
        """Accept enum members, values or member names."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for encoding in cls:
            if text in (encoding.value, encoding.name.lower()):
                return encoding
        raise ValueError(f"Unknown output encoding: {value}")


class RenderMode(enum.Enum):
    """What the style processor is asked to render."""

    CITATION = "citation"
    BIBLIOGRAPHY = "bibliography"


class Record(msgspec.Struct, frozen=True, kw_only=True):
    """Immutable bibliographic record.

    Field names are stored in lower case so that ``Author`` and ``author``
    address the same field. Values are kept exactly as written in the
    source file, LaTeX escapes included; decoding happens later in the
    pipeline for a specific output encoding.
    """

    key: str | None = None
    type: str | None = None
    fields: dict[str, str] = msgspec.field(default_factory=dict)

    @classmethod
    def create(
        cls, type: str | None = None, key: str | None = None, **fields: str
    ) -> "Record":
        """Build a record from keyword fields."""
        return cls.from_dict({"type": type, "key": key, **fields})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Create a Record from a flat dictionary.

        ``type`` and ``key`` are taken as the entry type and citation key,
        every other item becomes a field. A later spelling of the same
        field (ignoring case) replaces an earlier one.

        Args:
            data: Dictionary with entry type, key and fields.

        Returns:
            New Record instance.
        """
        data = dict(data)
        entry_type = data.pop("type", None)
        key = data.pop("key", None)
        nested = data.pop("fields", None) or {}
        data.update(nested)

        fields: dict[str, str] = {}
        for name, value in data.items():
            if value is None:
                continue
            fields[str(name).lower()] = str(value)

        return cls(
            key=key,
            type=entry_type.lower() if entry_type else None,
            fields=fields,
        )

    def get(self, field: str, default: str | None = None) -> str | None:
        """Get a field value, ignoring case of the field name."""
        name = field.lower()
        if name in self.fields:
            return self.fields[name]
        for existing, value in self.fields.items():
            if existing.lower() == name:
                return value
        return default

    def has(self, field: str) -> bool:
        """Check if a field is present with a non-blank value."""
        value = self.get(field)
        return value is not None and value.strip() != ""

    @property
    def crossref(self) -> str | None:
        """Key of the record this one inherits from."""
        value = self.get("crossref")
        if value is None:
            return None
        value = value.strip()
        return value or None

    def with_fields(self, **updates: str) -> "Record":
        """Return a copy with additional or replaced fields."""
        fields = dict(self.fields)
        fields.update({name.lower(): value for name, value in updates.items()})
        return msgspec.structs.replace(self, fields=fields)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat dictionary, excluding unset key and type."""
        data: dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type
        if self.key is not None:
            data["key"] = self.key
        data.update(self.fields)
        return data


class LinkResolver(Protocol):
    """Lookup of records by citation key, used for inheritance."""

    def resolve(self, key: str) -> Record | None:
        """Return the record with the given key, if any."""
        ...


class RecordCollection(msgspec.Struct, frozen=True, kw_only=True):
    """Records sharing one dialect.

    The dialect is a property of the whole collection, never of single
    records. The collection is also the default link resolver.
    """

    records: tuple[Record, ...] = ()
    dialect: Dialect = Dialect.EXTENDED

    @classmethod
    def of(
        cls,
        records: "list[Record] | tuple[Record, ...]",
        dialect: Dialect = Dialect.EXTENDED,
    ) -> "RecordCollection":
        """Create a collection from any sequence of records."""
        return cls(records=tuple(records), dialect=dialect)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def resolve(self, key: str) -> Record | None:
        """Find a record by citation key. The first match wins."""
        if not key:
            return None
        for record in self.records:
            if record.key == key:
                return record
        return None

    def with_dialect(self, dialect: Dialect) -> "RecordCollection":
        """Return the same records under another dialect."""
        return msgspec.structs.replace(self, dialect=dialect)
