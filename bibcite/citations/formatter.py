"""Post-processing of rendered markup into the requested encoding."""

import html
import re

from bibcite.core.latex import encode_char
from bibcite.core.models import Encoding, RenderMode
from bibcite.l10n import Localization, MessageCatalog

FAILURE_MESSAGE = "Cannot generate bibliography based on selected citation style."

_TAG = re.compile(r"<[^>]+>")
_BLANKS = re.compile(r"[ \t]{2,}")
_WHITESPACE = re.compile(r"\s+")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")


class OutputFormatter:
    """Finalize raw style processor output.

    Rich output keeps the markup and carries non-ASCII characters as
    entities. Plain output loses all markup, has entities decoded and is
    folded onto one line per entry.
    """

    def __init__(self, localization: Localization | None = None):
        self.localization = localization or MessageCatalog()

    def format(
        self,
        raw: str,
        encoding: Encoding,
        mode: RenderMode = RenderMode.BIBLIOGRAPHY,
    ) -> str:
        """Format one rendered fragment.

        Args:
            raw: Markup produced by the style processor.
            encoding: Target encoding.
            mode: Bibliography entries in plain text end with a newline,
                citations do not.

        Returns:
            Final text.
        """
        if encoding is Encoding.RICH:
            return self.format_rich(raw)
        text = self.format_plain(raw)
        if mode is RenderMode.BIBLIOGRAPHY and text:
            return text + "\n"
        return text

    @staticmethod
    def format_rich(raw: str) -> str:
        """Tidy whitespace and write non-ASCII characters as entities."""
        text = _BLANKS.sub(" ", raw.strip())
        return _NON_ASCII.sub(lambda m: encode_char(m.group(), Encoding.RICH), text)

    @staticmethod
    def format_plain(raw: str) -> str:
        """Strip markup, decode entities and fold line breaks."""
        text = _TAG.sub("", raw)
        text = html.unescape(text)
        text = _WHITESPACE.sub(" ", text.replace("\u00a0", "\x00"))
        return text.strip().replace("\x00", "\u00a0")

    def format_all(
        self, fragments: list[str], encoding: Encoding, mode: RenderMode
    ) -> list[str]:
        """Format every fragment, keeping order."""
        return [self.format(fragment, encoding, mode) for fragment in fragments]

    def failure(self) -> list[str]:
        """Single-item result shown when the style cannot be used."""
        return [self.localization.lookup(FAILURE_MESSAGE)]
