"""Normalization of records into style variables.

The normalizer turns one record into the flat mapping of CSL variable
names to display text that a style processor consumes. It applies
one-level crossref inheritance, collapses line breaks, decodes LaTeX
escapes for the target encoding and asks the fallback resolver which of
several overlapping fields to use.

A variable is either absent or a non-empty string. Maps are rebuilt on
every call since inheritance and dialect can change between calls.
"""

import logging

from bibcite.core.crossref import CrossRefResolver
from bibcite.core.fields import NAME_FIELDS, Dialect, csl_type
from bibcite.core.latex import LatexDecoder, collapse_line_breaks
from bibcite.core.models import Encoding, LinkResolver, Record, RecordCollection

from .fallback import FieldFallbackResolver

logger = logging.getLogger(__name__)

VariableMap = dict[str, str]

DOI_RESOLVER = "https://doi.org/"

# Fields with a single, unambiguous variable in both dialects
DIRECT_FIELDS = {
    "author": "author",
    "editor": "editor",
    "title": "title",
    "volume": "volume",
    "edition": "edition",
    "series": "collection-title",
    "chapter": "chapter-number",
    "note": "note",
    "type": "genre",
    "abstract": "abstract",
    "url": "URL",
    "isbn": "ISBN",
    "issn": "ISSN",
}

# Identifiers are published as written, without LaTeX decoding
VERBATIM_FIELDS = frozenset({"url", "isbn", "issn"})


class EntryNormalizer:
    """Build variable maps from records."""

    def __init__(self, resolver: FieldFallbackResolver | None = None):
        self.resolver = resolver or FieldFallbackResolver()

    def normalize(
        self,
        record: Record,
        dialect: Dialect,
        links: LinkResolver | None,
        encoding: Encoding,
    ) -> VariableMap:
        """Normalize one record.

        Args:
            record: Record to normalize. It is not modified.
            dialect: Dialect of the record's collection.
            links: Lookup used to find the crossref parent.
            encoding: Target output encoding for decoded text.

        Returns:
            Mapping of CSL variable names to non-empty text.
        """
        resolved = CrossRefResolver(links).resolve_entry(record)
        fields = {
            name: collapse_line_breaks(value)
            for name, value in resolved.fields.items()
            if value is not None
        }
        resolved = Record(key=resolved.key, type=resolved.type, fields=fields)

        decoder = LatexDecoder(encoding)
        variables: VariableMap = {"type": csl_type(resolved.type)}

        for field, variable in DIRECT_FIELDS.items():
            value = resolved.get(field)
            if value is None:
                continue
            if field in VERBATIM_FIELDS:
                self._put(variables, variable, value)
            else:
                text = decoder.decode(value, keep_braces=field in NAME_FIELDS)
                self._put(variables, variable, text)

        for variable, value in self.resolver.resolve(resolved, dialect).items():
            self._put(variables, variable, decoder.decode(value))

        doi = resolved.get("doi")
        if doi is not None and doi.strip():
            # Prefixed even when the value already holds a resolver URL
            variables["DOI"] = DOI_RESOLVER + doi

        return variables

    def normalize_all(
        self,
        records: list[Record],
        collection: RecordCollection,
        encoding: Encoding,
    ) -> list[VariableMap]:
        """Normalize records in order, using the collection for inheritance."""
        maps = [
            self.normalize(record, collection.dialect, collection, encoding)
            for record in records
        ]
        logger.debug(
            "Normalized %d records (%s dialect)", len(maps), collection.dialect.value
        )
        return maps

    @staticmethod
    def _put(variables: VariableMap, variable: str, text: str) -> None:
        text = text.strip()
        if text:
            variables[variable] = text


_default_normalizer = EntryNormalizer()


def normalize(
    record: Record,
    dialect: Dialect,
    links: LinkResolver | None,
    encoding: Encoding,
) -> VariableMap:
    """Normalize one record with the default fallback policy."""
    return _default_normalizer.normalize(record, dialect, links, encoding)
