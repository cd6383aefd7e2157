"""Core records, dialects and field decoding."""

# BibTeX decoding
from bibcite.core.bibtex import BibtexDecoder, load_collection
from bibcite.core.crossref import CrossRefResolver

# Fields and dialects
from bibcite.core.fields import (
    BIBLATEX_FIELDS,
    LINK_FIELDS,
    MODERN_FIELDS,
    NAME_FIELDS,
    STANDARD_FIELDS,
    Dialect,
    csl_type,
    is_valid_field,
)
from bibcite.core.latex import LatexDecoder, collapse_line_breaks

# Models
from bibcite.core.models import (
    Encoding,
    LinkResolver,
    Record,
    RecordCollection,
    RenderMode,
)
from bibcite.core.names import NameParser, ParsedName, split_names

__all__ = [
    # BibTeX
    "BibtexDecoder",
    "load_collection",
    # Fields
    "BIBLATEX_FIELDS",
    "LINK_FIELDS",
    "MODERN_FIELDS",
    "NAME_FIELDS",
    "STANDARD_FIELDS",
    "Dialect",
    "csl_type",
    "is_valid_field",
    # Decoding
    "CrossRefResolver",
    "LatexDecoder",
    "collapse_line_breaks",
    "NameParser",
    "ParsedName",
    "split_names",
    # Models
    "Encoding",
    "LinkResolver",
    "Record",
    "RecordCollection",
    "RenderMode",
]
