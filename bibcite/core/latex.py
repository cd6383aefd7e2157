"""Decoding of LaTeX special-character escapes.

BibTeX files spell accented letters with TeX accent commands such as
``{\\"a}`` or ``\\c{c}``. Before field values reach a style processor
they are decoded for the requested output encoding: to HTML entities for
rich output and to Unicode characters for plain output.

Only recognised escapes are touched. Text that is already Unicode stays
as it is, and anything that looks like a broken escape is passed through
so that one bad record cannot spoil a whole bibliography.
"""

import html.entities
import logging
import re
import unicodedata

from .models import Encoding

logger = logging.getLogger(__name__)

# Accent command -> combining character
ACCENTS = {
    '"': "\u0308",
    "'": "\u0301",
    "`": "\u0300",
    "^": "\u0302",
    "~": "\u0303",
    "=": "\u0304",
    ".": "\u0307",
    "u": "\u0306",
    "v": "\u030c",
    "H": "\u030b",
    "c": "\u0327",
    "k": "\u0328",
    "r": "\u030a",
    "d": "\u0323",
    "b": "\u0331",
}

SYMBOLS = {
    "ss": "ß",
    "ae": "æ",
    "AE": "Æ",
    "oe": "œ",
    "OE": "Œ",
    "aa": "å",
    "AA": "Å",
    "o": "ø",
    "O": "Ø",
    "l": "ł",
    "L": "Ł",
    "i": "ı",
    "j": "ȷ",
    "dh": "ð",
    "DH": "Ð",
    "th": "þ",
    "TH": "Þ",
}

# Escaped characters that are literal in the output
SPECIALS = {"&", "%", "$", "#", "_", "{", "}"}

# Font commands whose argument is kept and the command dropped
FONT_COMMANDS = (
    "emph",
    "textit",
    "textbf",
    "textsc",
    "texttt",
    "textsf",
    "textrm",
    "textup",
    "textmd",
    "textsl",
)

_PUNCT_ACCENTS = re.escape("\"'`^~=.")
_LETTER_ACCENTS = "uvHckrdb"
_SYMBOL_NAMES = "|".join(sorted(SYMBOLS, key=len, reverse=True))

TOKEN_PATTERN = re.compile(
    r"""
    (?P<accent>
        (?P<aopen>\{)?
        \\(?:(?P<punct>[%s])|(?P<letter>[%s])(?=[\s{]))
        \s*
        (?:\{(?P<inner>\\?[A-Za-z])\}|(?P<bare>\\?[A-Za-z]))
        (?(aopen)\})
    )
    |(?P<symbol>
        (?P<sopen>\{)?
        \\(?P<name>%s)(?![A-Za-z])
        (?:\{\}|[ ](?=\S))?
        (?(sopen)\})
    )
    |(?P<font>\\(?:%s)\{(?P<body>[^{}]*)\})
    |(?P<special>\\(?P<char>[&%%$#_{}]))
    |(?P<tie>(?<!\\)~)
    |(?P<brace>(?<!\\)[{}])
    """
    % (_PUNCT_ACCENTS, _LETTER_ACCENTS, _SYMBOL_NAMES, "|".join(FONT_COMMANDS)),
    re.VERBOSE,
)

_LINE_BREAK = re.compile(r"[ \t]*(?:\r\n|\r|\n)+[ \t]*")


def collapse_line_breaks(text: str) -> str:
    """Replace line breaks (and blanks around them) with one space."""
    return _LINE_BREAK.sub(" ", text)


def encode_char(text: str, encoding: Encoding) -> str:
    """Render decoded characters for the target encoding."""
    if encoding is Encoding.PLAIN:
        return text
    parts = []
    for char in text:
        name = html.entities.codepoint2name.get(ord(char))
        parts.append(f"&{name};" if name else f"&#{ord(char)};")
    return "".join(parts)


def braces_balanced(text: str) -> bool:
    """Check that unescaped braces pair up."""
    depth = 0
    escaped = False
    for char in text:
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


class LatexDecoder:
    """Decode LaTeX escapes for one output encoding.

    Decoding is a pure function of the input text and the encoding.
    Grouping braces are removed when they are balanced; name fields can
    ask to keep them since braces there protect corporate names.
    """

    def __init__(self, encoding: Encoding):
        self.encoding = encoding

    def decode(self, text: str, keep_braces: bool = False) -> str:
        """Decode all recognised escapes in text.

        Args:
            text: Raw field value.
            keep_braces: Keep grouping braces instead of dropping them.

        Returns:
            Decoded text. Unknown or malformed escapes are left as written.
        """
        if not text or ("\\" not in text and "{" not in text and "~" not in text):
            return text

        strip_braces = not keep_braces and braces_balanced(text)
        if not keep_braces and not strip_braces:
            logger.debug("Unbalanced braces left in place: %r", text)

        def replace(match: re.Match) -> str:
            if match.group("accent"):
                return self._accent(match)
            if match.group("symbol"):
                return encode_char(SYMBOLS[match.group("name")], self.encoding)
            if match.group("font"):
                return self.decode(match.group("body"), keep_braces=keep_braces)
            if match.group("special"):
                char = match.group("char")
                if char == "&" and self.encoding is Encoding.RICH:
                    return "&amp;"
                return char
            if match.group("tie"):
                return encode_char("\u00a0", self.encoding)
            return "" if strip_braces else match.group("brace")

        return TOKEN_PATTERN.sub(replace, text)

    def _accent(self, match: re.Match) -> str:
        command = match.group("punct") or match.group("letter")
        base = match.group("inner") or match.group("bare")
        if base.startswith("\\"):
            # Dotless i and j take accents in old TeX sources
            base = base[1:]
        composed = unicodedata.normalize("NFC", base + ACCENTS[command])
        return encode_char(composed, self.encoding)


def decode(text: str, encoding: Encoding, keep_braces: bool = False) -> str:
    """Decode LaTeX escapes in text for the given encoding."""
    return LatexDecoder(encoding).decode(text, keep_braces=keep_braces)
