"""Selection between overlapping source fields.

BibTeX and BibLaTeX name some things twice: an issue can sit in
``number`` or ``issue``, a journal in ``journal`` or ``journaltitle``.
For every ambiguous CSL variable this module keeps an ordered list of
candidate fields per dialect. The first candidate present on the record
wins; values are never merged or concatenated.

The article identifier (``eid``) is special: when present it replaces the
page range altogether and is published as the CSL ``number`` variable,
always prefixed with ``"Article "``. A value that already starts with that
word gets it twice; existing rendered output depends on this.
"""

from bibcite.core.fields import Dialect, is_valid_field
from bibcite.core.models import Record

ARTICLE_PREFIX = "Article "

# variable -> dialect -> candidate fields in priority order
FIELD_CANDIDATES: dict[str, dict[Dialect, tuple[str, ...]]] = {
    "issue": {
        Dialect.LEGACY: ("number",),
        Dialect.EXTENDED: ("number", "issue"),
    },
    "container-title": {
        Dialect.LEGACY: ("journal", "booktitle"),
        Dialect.EXTENDED: ("journaltitle", "journal", "booktitle"),
    },
    "publisher": {
        Dialect.LEGACY: ("publisher", "organization", "institution", "school"),
        Dialect.EXTENDED: ("publisher", "organization", "institution", "school"),
    },
    "publisher-place": {
        Dialect.LEGACY: ("address",),
        Dialect.EXTENDED: ("location", "address"),
    },
    "issued": {
        Dialect.LEGACY: ("year",),
        Dialect.EXTENDED: ("date", "year"),
    },
}

# Fields holding an article identifier, per dialect
ARTICLE_ID_FIELDS: dict[Dialect, tuple[str, ...]] = {
    Dialect.LEGACY: (),
    Dialect.EXTENDED: ("eid",),
}

PAGE_FIELDS = ("pages",)

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


def parse_month(value: str | None) -> int | None:
    """Read a month given as number, abbreviation or full name."""
    if not value:
        return None
    text = value.strip().strip("{}").lower().rstrip(".")
    if text.isdigit():
        number = int(text)
        return number if 1 <= number <= 12 else None
    return MONTHS.get(text[:3]) if len(text) >= 3 else None


class FieldFallbackResolver:
    """Pick source fields for ambiguous style variables.

    The resolver works on one record at a time and returns raw field
    values; decoding is left to the caller.
    """

    def __init__(
        self,
        candidates: dict[str, dict[Dialect, tuple[str, ...]]] | None = None,
        article_id_fields: dict[Dialect, tuple[str, ...]] | None = None,
    ):
        self.candidates = candidates or FIELD_CANDIDATES
        self.article_id_fields = article_id_fields or ARTICLE_ID_FIELDS

    @staticmethod
    def first_present(
        record: Record, fields: tuple[str, ...], dialect: Dialect
    ) -> tuple[str, str] | None:
        """Return (field, value) for the first non-blank candidate.

        Candidates outside the dialect's field schema are skipped.
        """
        for field in fields:
            if is_valid_field(field, dialect) and record.has(field):
                return field, record.get(field)
        return None

    def resolve_variable(
        self, record: Record, variable: str, dialect: Dialect
    ) -> str | None:
        """Resolve one table-driven variable."""
        fields = self.candidates.get(variable, {}).get(dialect, ())
        found = self.first_present(record, fields, dialect)
        if found is None:
            return None

        field, value = found
        if variable == "issued" and field == "year":
            month = parse_month(record.get("month"))
            if month is not None:
                return f"{value.strip()}-{month:02d}"
        return value

    def resolve_pages(self, record: Record, dialect: Dialect) -> dict[str, str]:
        """Choose between article identifier and page range.

        Returns:
            Either ``{"number": "Article <eid>"}``, ``{"page": <pages>}``
            or an empty mapping.
        """
        article_id = self.first_present(
            record, self.article_id_fields[dialect], dialect
        )
        if article_id is not None:
            return {"number": ARTICLE_PREFIX + article_id[1]}

        pages = self.first_present(record, PAGE_FIELDS, dialect)
        if pages is not None:
            return {"page": pages[1]}
        return {}

    def resolve(self, record: Record, dialect: Dialect) -> dict[str, str]:
        """Resolve every ambiguous variable for a record.

        Args:
            record: Record, with inheritance already applied.
            dialect: Dialect of the record's collection.

        Returns:
            Raw values keyed by CSL variable name. Unresolved variables
            are absent.
        """
        values = {}
        for variable in self.candidates:
            value = self.resolve_variable(record, variable, dialect)
            if value is not None:
                values[variable] = value
        values.update(self.resolve_pages(record, dialect))
        return values
