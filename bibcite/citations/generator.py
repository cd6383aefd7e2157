"""Citation and bibliography generation entry points."""

import logging

from bibcite.core.models import Encoding, Record, RecordCollection, RenderMode
from bibcite.l10n import Localization, MessageCatalog

from .formatter import OutputFormatter
from .processor import CiteprocStyleProcessor, StyleProcessor
from .variables import EntryNormalizer

logger = logging.getLogger(__name__)


class CitationGenerator:
    """Run records through normalization, rendering and formatting.

    Style failures never raise out of the generator. They turn into the
    localized failure message instead.
    """

    def __init__(
        self,
        processor: StyleProcessor | None = None,
        formatter: OutputFormatter | None = None,
        localization: Localization | None = None,
        normalizer: EntryNormalizer | None = None,
    ):
        self.processor = processor or CiteprocStyleProcessor()
        self.localization = localization or MessageCatalog()
        self.formatter = formatter or OutputFormatter(self.localization)
        self.normalizer = normalizer or EntryNormalizer()

    def generate_citation(
        self,
        records: list[Record],
        style_source: str,
        encoding: Encoding,
        collection: RecordCollection | None = None,
    ) -> str:
        """Generate one in-text citation covering all records."""
        fragments = self._generate(
            records, style_source, encoding, collection, RenderMode.CITATION
        )
        return fragments[0] if fragments else ""

    def generate_bibliography(
        self,
        records: list[Record],
        style_source: str,
        encoding: Encoding,
        collection: RecordCollection | None = None,
    ) -> list[str]:
        """Generate one bibliography entry per record, in input order."""
        return self._generate(
            records, style_source, encoding, collection, RenderMode.BIBLIOGRAPHY
        )

    def _generate(
        self,
        records: list[Record],
        style_source: str,
        encoding: Encoding,
        collection: RecordCollection | None,
        mode: RenderMode,
    ) -> list[str]:
        records = list(records)
        if collection is None:
            collection = RecordCollection.of(records)

        maps = self.normalizer.normalize_all(records, collection, encoding)
        result = self.processor.render(maps, style_source, mode)
        if not result.success:
            logger.warning("Cannot render %s: %s", mode.value, result.error)
            return self.formatter.failure()

        return self.formatter.format_all(result.fragments, encoding, mode)


_default_generator: CitationGenerator | None = None


def _generator() -> CitationGenerator:
    global _default_generator
    if _default_generator is None:
        _default_generator = CitationGenerator()
    return _default_generator


def generate_citation(
    records: list[Record],
    style_source: str,
    encoding: Encoding,
    collection: RecordCollection | None = None,
) -> str:
    """Generate an in-text citation with the default generator."""
    return _generator().generate_citation(records, style_source, encoding, collection)


def generate_bibliography(
    records: list[Record],
    style_source: str,
    encoding: Encoding,
    collection: RecordCollection | None = None,
) -> list[str]:
    """Generate bibliography entries with the default generator."""
    return _generator().generate_bibliography(
        records, style_source, encoding, collection
    )
