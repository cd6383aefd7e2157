"""Field vocabularies, dialects and entry type mapping."""

from enum import Enum, unique


@unique
class Dialect(Enum):
    """Field schema followed by a record collection."""

    LEGACY = "bibtex"
    EXTENDED = "biblatex"

    @classmethod
    def parse(cls, value: "str | Dialect") -> "Dialect":
        """Accept enum members, values or member names."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for dialect in cls:
            if text in (dialect.value, dialect.name.lower()):
                return dialect
        raise ValueError(f"Unknown dialect: {value}")


# Standard BibTeX fields from TameTheBeast manual
STANDARD_FIELDS = {
    "address",
    "author",
    "booktitle",
    "chapter",
    "crossref",
    "edition",
    "editor",
    "howpublished",
    "institution",
    "journal",
    "key",
    "month",
    "note",
    "number",
    "organization",
    "pages",
    "publisher",
    "school",
    "series",
    "title",
    "type",
    "volume",
    "year",
}

# De-facto extensions used in BibTeX files
MODERN_FIELDS = {
    "doi",
    "url",
    "isbn",
    "issn",
    "keywords",
    "abstract",
    "eprint",
    "archiveprefix",
    "primaryclass",
    "file",
    "urldate",
    "comment",
}

# Fields only defined by the BibLaTeX data model
BIBLATEX_FIELDS = {
    "date",
    "eid",
    "issue",
    "journaltitle",
    "location",
    "subtitle",
    "titleaddon",
    "eventtitle",
    "pagetotal",
    "pubstate",
    "xref",
    "ids",
}

LEGACY_FIELDS = STANDARD_FIELDS | MODERN_FIELDS
EXTENDED_FIELDS = LEGACY_FIELDS | BIBLATEX_FIELDS

DIALECT_FIELDS = {
    Dialect.LEGACY: frozenset(LEGACY_FIELDS),
    Dialect.EXTENDED: frozenset(EXTENDED_FIELDS),
}

# Fields describing the link itself; never copied from a parent record
LINK_FIELDS = frozenset({"crossref", "xref", "ids"})

# Fields holding BibTeX name lists
NAME_FIELDS = frozenset({"author", "editor"})


def is_valid_field(field: str, dialect: Dialect) -> bool:
    """Check whether a field belongs to the dialect's schema."""
    return field.lower() in DIALECT_FIELDS[dialect]


# Entry type -> CSL item type
CSL_TYPES = {
    "article": "article-journal",
    "book": "book",
    "mvbook": "book",
    "booklet": "pamphlet",
    "inbook": "chapter",
    "incollection": "chapter",
    "collection": "book",
    "inproceedings": "paper-conference",
    "conference": "paper-conference",
    "proceedings": "book",
    "manual": "book",
    "mastersthesis": "thesis",
    "phdthesis": "thesis",
    "thesis": "thesis",
    "techreport": "report",
    "report": "report",
    "unpublished": "manuscript",
    "online": "webpage",
    "electronic": "webpage",
    "www": "webpage",
    "patent": "patent",
    "software": "book",
    "dataset": "dataset",
    "periodical": "article-journal",
}

DEFAULT_CSL_TYPE = "article"


def csl_type(entry_type: str | None) -> str:
    """Map an entry type tag to a CSL item type."""
    if not entry_type:
        return DEFAULT_CSL_TYPE
    return CSL_TYPES.get(entry_type.strip().lower(), DEFAULT_CSL_TYPE)
