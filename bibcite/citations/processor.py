"""Style processor interface and the citeproc-py adapter.

A style processor turns normalized variable maps plus a CSL style source
into raw markup. Failures are returned as values, never raised: the
generator decides what the user sees.
"""

from __future__ import annotations

import hashlib
import html
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

from citeproc import (
    Citation,
    CitationItem,
    CitationStylesBibliography,
    CitationStylesStyle,
)
from citeproc import formatter as citeproc_formatter
from citeproc.source.json import CiteProcJSON
from lxml import etree

from bibcite.core.fields import DEFAULT_CSL_TYPE, NAME_FIELDS
from bibcite.core.models import RenderMode
from bibcite.core.names import NameParser

from .exceptions import StyleParseError, StyleProcessingError, StyleRenderError
from .styles import CSL_NAMESPACE
from .variables import VariableMap

logger = logging.getLogger(__name__)

DATE_VARIABLES = frozenset({"issued", "accessed", "event-date", "original-date"})

_DATE_PARTS = re.compile(r"^(\d{1,4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?$")
_TEX_DASH = re.compile(r"\s*-{2,3}\s*")

# Private use code points standing in for markup characters of field text
_MASK = str.maketrans({"&": "\ue000", "<": "\ue001", ">": "\ue002"})
_UNMASK = str.maketrans({"\ue000": "&amp;", "\ue001": "&lt;", "\ue002": "&gt;"})


@dataclass
class RenderResult:
    """Outcome of one processor call.

    On success ``fragments`` holds one string for a citation, or one per
    record for a bibliography, in input order.
    """

    fragments: list[str] = field(default_factory=list)
    error: StyleProcessingError | None = None

    @property
    def success(self) -> bool:
        """Check if rendering succeeded."""
        return self.error is None

    @classmethod
    def ok(cls, fragments: list[str]) -> RenderResult:
        return cls(fragments=list(fragments))

    @classmethod
    def failed(cls, error: StyleProcessingError) -> RenderResult:
        return cls(error=error)


class StyleProcessor(Protocol):
    """Protocol for style processors."""

    def render(
        self,
        variable_maps: list[VariableMap],
        style_source: str,
        mode: RenderMode,
    ) -> RenderResult:
        """Render records with a style definition."""
        ...


def protect_markup(value: str) -> str:
    """Turn field text into Unicode with markup characters masked.

    citeproc applies case transforms and initials to field text, so it must
    see characters rather than entities. It does not escape field text
    either; masked characters come back escaped through
    :func:`restore_markup`.
    """
    return html.unescape(value).translate(_MASK)


def restore_markup(text: str) -> str:
    """Escape the markup characters masked by :func:`protect_markup`."""
    return text.translate(_UNMASK)


def unsorted_bibliography(style_source: str) -> bytes:
    """Drop the bibliography sort keys of a style.

    Raises:
        StyleParseError: If the source is not well-formed XML.
    """
    try:
        root = etree.fromstring(style_source.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        raise StyleParseError(str(e)) from e

    for sort in root.iterfind(
        "csl:bibliography/csl:sort", namespaces={"csl": CSL_NAMESPACE}
    ):
        sort.getparent().remove(sort)
    return etree.tostring(root, xml_declaration=True, encoding="utf-8")


def parse_date(value: str) -> dict:
    """Convert ``YYYY[-MM[-DD]]`` text to a CSL-JSON date."""
    match = _DATE_PARTS.match(value.strip())
    if not match:
        return {"literal": value}
    parts = [int(part) for part in match.groups() if part]
    return {"date-parts": [parts]}


def to_csl_item(item_id: str, variables: VariableMap) -> dict:
    """Convert a variable map into a CSL-JSON item.

    Values are handed over as Unicode text with markup characters masked.
    """
    item: dict = {"id": item_id, "type": variables.get("type", DEFAULT_CSL_TYPE)}
    for name, value in variables.items():
        if name == "type":
            continue
        value = protect_markup(value)
        if name in NAME_FIELDS:
            names = [parsed.to_csl() for parsed in NameParser.parse_list(value)]
            if names:
                item[name] = names
        elif name in DATE_VARIABLES:
            item[name] = parse_date(value)
        elif name == "page":
            # TeX spells a range with two or three hyphens
            item[name] = _TEX_DASH.sub("\u2013", value)
        else:
            item[name] = value
    return item


class CiteprocStyleProcessor:
    """Style processor backed by citeproc-py.

    Parsed styles are cached per instance, keyed by a digest of the style
    source. The caller owns the instance and with it the cache.
    """

    def __init__(self, locale: str | None = None, formatter=None):
        """Initialize processor.

        Args:
            locale: CSL locale such as ``en-US``. Defaults to the style's
                own default locale.
            formatter: citeproc output formatter. Defaults to HTML markup.
                Output is expected to be markup: masked characters from field
                text are restored as entities.
        """
        self.locale = locale
        self.formatter = formatter or citeproc_formatter.html
        self._styles: dict[str, CitationStylesStyle] = {}

    def parse(self, style_source: str) -> CitationStylesStyle:
        """Parse a style source, reusing an earlier parse when possible.

        Raises:
            StyleParseError: If the source is not a usable CSL style.
        """
        digest = hashlib.sha256(style_source.encode("utf-8")).hexdigest()
        if digest in self._styles:
            return self._styles[digest]

        # Entry n must stay record n, whatever the style sorts by
        source = unsorted_bibliography(style_source)
        try:
            style = CitationStylesStyle(
                io.BytesIO(source),
                locale=self.locale,
                validate=False,
            )
        except Exception as e:
            raise StyleParseError(str(e)) from e

        self._styles[digest] = style
        return style

    def clear_cache(self) -> None:
        """Forget all parsed styles."""
        self._styles.clear()

    def render(
        self,
        variable_maps: list[VariableMap],
        style_source: str,
        mode: RenderMode,
    ) -> RenderResult:
        """Render records with a CSL style.

        Records are registered in input order and the bibliography is
        never sorted, so entry n always belongs to record n.
        """
        try:
            style = self.parse(style_source)
        except StyleParseError as e:
            logger.warning("Could not parse citation style: %s", e)
            return RenderResult.failed(e)

        if not variable_maps:
            return RenderResult.ok([""] if mode is RenderMode.CITATION else [])

        ids = [f"item-{index}" for index in range(1, len(variable_maps) + 1)]
        try:
            source = CiteProcJSON(
                [to_csl_item(item_id, m) for item_id, m in zip(ids, variable_maps)]
            )
            bibliography = CitationStylesBibliography(style, source, self.formatter)
            citation = Citation([CitationItem(item_id) for item_id in ids])
            bibliography.register(citation)

            if mode is RenderMode.CITATION:
                return RenderResult.ok(
                    [restore_markup(str(bibliography.cite(citation, self._warn)))]
                )

            entries = [
                restore_markup(str(entry)) for entry in bibliography.bibliography()
            ]
        except Exception as e:
            logger.warning("Citation style failed while rendering: %s", e)
            return RenderResult.failed(StyleRenderError(str(e)))

        if len(entries) != len(variable_maps):
            return RenderResult.failed(
                StyleRenderError(
                    f"Expected {len(variable_maps)} entries, got {len(entries)}"
                )
            )
        return RenderResult.ok(entries)

    @staticmethod
    def _warn(citation_item) -> None:
        logger.warning("Reference with key %r not found", citation_item.key)
