"""Catalog of CSL citation styles."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

import msgspec
from lxml import etree

from .exceptions import StyleNotFoundError, StyleParseError

logger = logging.getLogger(__name__)

CSL_NAMESPACE = "http://purl.org/net/xbiblio/csl"
DEFAULT_STYLE = "ieee"

_NS = {"csl": CSL_NAMESPACE}


class CitationStyle(msgspec.Struct, frozen=True, kw_only=True):
    """A CSL style definition together with its metadata."""

    name: str
    title: str
    source: str
    numeric: bool = False
    path: str | None = None

    @classmethod
    def from_source(
        cls, name: str, source: str, path: str | None = None
    ) -> CitationStyle:
        """Read title and citation format from a CSL document.

        Raises:
            StyleParseError: If the source is not a CSL style document.
        """
        try:
            root = etree.fromstring(source.encode("utf-8"))
        except etree.XMLSyntaxError as e:
            raise StyleParseError(str(e), style=name) from e

        if root.tag != f"{{{CSL_NAMESPACE}}}style":
            raise StyleParseError("root element is not a CSL style", style=name)

        title = root.findtext("csl:info/csl:title", default="", namespaces=_NS)
        formats = root.xpath(
            "csl:info/csl:category/@citation-format", namespaces=_NS
        )
        return cls(
            name=name,
            title=title.strip() or name,
            source=source,
            numeric="numeric" in formats,
            path=path,
        )

    @classmethod
    def from_file(cls, path: Path | str) -> CitationStyle:
        """Load a style from a ``.csl`` file, named after the file stem."""
        path = Path(path)
        source = path.read_text(encoding="utf-8")
        return cls.from_source(path.stem.lower(), source, path=str(path))


class StyleCatalog:
    """Registry of available citation styles.

    The bundled styles are loaded on first use. Names are case-insensitive.
    """

    def __init__(self, include_bundled: bool = True):
        self._styles: dict[str, CitationStyle] = {}
        self._include_bundled = include_bundled
        self._bundled_loaded = False

    def _ensure_bundled(self) -> None:
        if self._bundled_loaded or not self._include_bundled:
            return
        self._bundled_loaded = True
        data = resources.files("bibcite.citations") / "data"
        for item in data.iterdir():
            if not item.name.endswith(".csl"):
                continue
            name = item.name[: -len(".csl")].lower()
            self._styles[name] = CitationStyle.from_source(
                name, item.read_text(encoding="utf-8")
            )

    def __contains__(self, name: str) -> bool:
        self._ensure_bundled()
        return name.lower() in self._styles

    def __len__(self) -> int:
        self._ensure_bundled()
        return len(self._styles)

    def get(self, name: str) -> CitationStyle:
        """Get style by name.

        Raises:
            StyleNotFoundError: If no style has that name.
        """
        self._ensure_bundled()
        try:
            return self._styles[name.lower()]
        except KeyError:
            raise StyleNotFoundError(name) from None

    def default(self) -> CitationStyle:
        """The style used when none is selected."""
        return self.get(DEFAULT_STYLE)

    def register(self, style: CitationStyle) -> None:
        """Register a style, replacing any style of the same name."""
        self._ensure_bundled()
        self._styles[style.name.lower()] = style

    def load_directory(self, path: Path | str) -> list[str]:
        """Load all CSL files from a directory.

        Files that are not CSL styles are skipped with a warning.

        Returns:
            Names of the styles that were loaded.
        """
        path = Path(path)
        loaded = []
        for csl_file in sorted(path.glob("*.csl")):
            try:
                style = CitationStyle.from_file(csl_file)
            except (OSError, UnicodeDecodeError, StyleParseError) as e:
                logger.warning("Skipping invalid style %s: %s", csl_file, e)
                continue
            self.register(style)
            loaded.append(style.name)
        logger.debug("Loaded %d styles from %s", len(loaded), path)
        return loaded

    def list_styles(self) -> list[CitationStyle]:
        """All styles, sorted by name."""
        self._ensure_bundled()
        return [self._styles[name] for name in sorted(self._styles)]

    def clear(self) -> None:
        """Remove every style, including the bundled ones."""
        self._styles.clear()
        self._bundled_loaded = True
