"""Reading BibTeX and BibLaTeX files into records.

Field values are kept raw: LaTeX escapes and braces survive parsing so
that the citation pipeline can decode them for the requested output
encoding later on.

Key components:
- BibtexDecoder: Parses BibTeX text into Record objects
- detect_dialect: Reads the database type marker written by reference managers
"""

import re
from pathlib import Path

from .fields import Dialect
from .models import Record, RecordCollection


class BibtexDecoder:
    """Parse BibTeX format into records.

    Handles nested braces, comments and various field value formats
    (quoted strings, braced values, unquoted values). Supports up to 3
    levels of brace nesting for complex field values.
    """

    ENTRY_PATTERN = re.compile(
        r"@(\w+)\s*\{([^,{}]+),\s*((?:[^{}]|{(?:[^{}]|{(?:[^{}]|{(?:[^{}]|{[^{}]*})*})*})*})*)\s*\}",
        re.DOTALL | re.MULTILINE,
    )

    STRING_PATTERN = re.compile(
        r'@string\s*\{\s*(\w+)\s*=\s*(?:"([^"]*?)"|\{([^{}]*)\})\s*\}',
        re.IGNORECASE | re.MULTILINE,
    )

    FIELD_PATTERN = re.compile(
        r'([\w-]+)\s*=\s*(?:"([^"]*?)"|{((?:[^{}]|{(?:[^{}]|{(?:[^{}]|{[^{}]*})*})*})*)}|([^,}]+?))\s*(?:,|$)',
        re.MULTILINE,
    )

    DIALECT_PATTERN = re.compile(
        r"@comment\s*\{\s*jabref-meta:\s*databaseType:\s*(\w+)\s*;?\s*\}",
        re.IGNORECASE,
    )

    SKIPPED_TYPES = {"comment", "preamble", "string"}

    @classmethod
    def decode(cls, bibtex_str: str) -> list[Record]:
        """Decode BibTeX string to records.

        Comment lines are dropped, ``@string`` abbreviations are expanded
        where a field value is a bare abbreviation.

        Args:
            bibtex_str: BibTeX format string.

        Returns:
            Records in file order.
        """
        records = []

        bibtex_str = bibtex_str.replace(r"\%", "\x00PERCENT\x00")
        bibtex_str = re.sub(r"^\s*%.*$", "", bibtex_str, flags=re.MULTILINE)
        bibtex_str = bibtex_str.replace("\x00PERCENT\x00", r"\%")

        strings = {}
        for match in cls.STRING_PATTERN.finditer(bibtex_str):
            strings[match.group(1).lower()] = match.group(2) or match.group(3) or ""
        bibtex_str = cls.STRING_PATTERN.sub("", bibtex_str)

        for match in cls.ENTRY_PATTERN.finditer(bibtex_str):
            entry_type = match.group(1).lower()
            if entry_type in cls.SKIPPED_TYPES:
                continue

            entry_key = match.group(2).strip()
            fields_str = match.group(3)

            fields = {}
            for field_match in cls.FIELD_PATTERN.finditer(fields_str):
                field_name = field_match.group(1).lower()
                bare = field_match.group(4)
                if bare is not None:
                    bare = bare.strip()
                    value = strings.get(bare.lower(), bare)
                else:
                    value = field_match.group(2) or field_match.group(3) or ""
                fields[field_name] = value.strip()

            records.append(Record(key=entry_key, type=entry_type, fields=fields))

        return records

    @classmethod
    def detect_dialect(cls, bibtex_str: str) -> Dialect | None:
        """Read the database type marker, if the file carries one."""
        match = cls.DIALECT_PATTERN.search(bibtex_str)
        if not match:
            return None
        try:
            return Dialect.parse(match.group(1))
        except ValueError:
            return None


def load_collection(
    path: Path | str, dialect: Dialect | None = None
) -> RecordCollection:
    """Read a .bib file into a collection.

    Args:
        path: File to read.
        dialect: Dialect to use. Defaults to the file's own marker, then
            to the extended dialect.

    Returns:
        Collection of all records in the file.
    """
    text = Path(path).read_text(encoding="utf-8")
    records = BibtexDecoder.decode(text)
    if dialect is None:
        dialect = BibtexDecoder.detect_dialect(text) or Dialect.EXTENDED
    return RecordCollection.of(records, dialect)
