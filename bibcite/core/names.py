"""Author name parsing according to BibTeX rules."""

import re
from dataclasses import dataclass

_AND = re.compile(r"\s+and\s+")


def split_names(value: str) -> list[str]:
    """Split a BibTeX name list on ' and '.

    Escaped ampersands and ``and`` inside braces are not delimiters.
    """
    if not value:
        return []

    protected = []
    depth = 0
    for char in value.replace(r"\&", "\x00"):
        if char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        # Blank out spaces inside braces so the splitter skips them
        protected.append("\x01" if depth and char == " " else char)

    names = _AND.split("".join(protected))
    return [
        name.replace("\x01", " ").replace("\x00", r"\&").strip()
        for name in names
        if name.strip()
    ]


def _strip_braces(token: str) -> str:
    return token.replace("{", "").replace("}", "")


@dataclass
class ParsedName:
    """Parsed name components."""

    first: list[str]
    von: list[str]
    last: list[str]
    jr: list[str]

    def is_empty(self) -> bool:
        """Check if name is empty."""
        return not any([self.first, self.von, self.last, self.jr])

    def is_literal(self) -> bool:
        """A single fully braced token names an organization."""
        return (
            not self.first
            and not self.von
            and not self.jr
            and len(self.last) == 1
            and self.last[0].startswith("{")
            and self.last[0].endswith("}")
        )

    def to_csl(self) -> dict[str, str]:
        """Convert to a CSL-JSON name object."""
        if self.is_literal():
            return {"literal": _strip_braces(self.last[0])}

        name = {}
        if self.last:
            name["family"] = " ".join(_strip_braces(t) for t in self.last)
        if self.first:
            name["given"] = " ".join(_strip_braces(t) for t in self.first)
        if self.von:
            name["non-dropping-particle"] = " ".join(
                _strip_braces(t) for t in self.von
            )
        if self.jr:
            name["suffix"] = " ".join(_strip_braces(t) for t in self.jr)
        return name


class NameParser:
    """Parse author names according to BibTeX rules."""

    @staticmethod
    def parse(name: str) -> ParsedName:
        """
        Parse name according to BibTeX's three formats.

        Format determined by comma count:
        - 0 commas: "First von Last"
        - 1 comma: "von Last, First"
        - 2 commas: "von Last, Jr, First"
        """
        name = name.strip()
        if not name:
            return ParsedName([], [], [], [])

        comma_count = NameParser._count_commas(name)

        if comma_count == 0:
            return NameParser._parse_first_von_last(name)
        elif comma_count == 1:
            return NameParser._parse_von_last_first(name)
        else:
            return NameParser._parse_von_last_jr_first(name)

    @staticmethod
    def parse_list(value: str) -> list[ParsedName]:
        """Parse a whole ' and ' separated name list."""
        parsed = (NameParser.parse(name) for name in split_names(value))
        return [name for name in parsed if not name.is_empty()]

    @staticmethod
    def _count_commas(name: str) -> int:
        """Count commas at brace level zero."""
        depth = 0
        count = 0
        for char in name:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            elif char == "," and depth == 0:
                count += 1
        return count

    @staticmethod
    def _split_commas(name: str, limit: int) -> list[str]:
        """Split on top-level commas, at most limit times."""
        parts = []
        current = []
        depth = 0
        for char in name:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            if char == "," and depth == 0 and len(parts) < limit:
                parts.append("".join(current))
                current = []
            else:
                current.append(char)
        parts.append("".join(current))
        return parts

    @staticmethod
    def _tokenize(name: str) -> list[str]:
        """Split name into tokens, preserving braced groups."""
        tokens = []
        current = []
        brace_level = 0

        for char in name:
            if char == "{":
                brace_level += 1
                current.append(char)
            elif char == "}":
                brace_level -= 1
                current.append(char)
            elif char in " \t\n~\u00a0" and brace_level == 0:
                if current:
                    tokens.append("".join(current))
                    current = []
            else:
                current.append(char)

        if current:
            tokens.append("".join(current))

        return [token for token in tokens if token]

    @staticmethod
    def _starts_with_lowercase(word: str) -> bool:
        """
        Check if word starts with lowercase letter.

        BibTeX rules:
        - {X} at start means NOT lowercase (braced words are not von)
        - Special chars ignored
        - First real letter determines case
        """
        if word.startswith("{") and word.endswith("}"):
            return False

        for char in word:
            if char.isalpha():
                return char.islower()

        return False

    @staticmethod
    def _split_von_last(tokens: list[str]) -> tuple[list[str], list[str]]:
        """Split 'von Last' tokens; Last keeps at least one token."""
        von_end = -1
        for i in range(len(tokens) - 1):
            if NameParser._starts_with_lowercase(tokens[i]):
                von_end = i

        if von_end >= 0:
            return tokens[: von_end + 1], tokens[von_end + 1 :]
        return [], tokens

    @staticmethod
    def _parse_first_von_last(name: str) -> ParsedName:
        """Parse 'First von Last' format."""
        tokens = NameParser._tokenize(name)

        if not tokens:
            return ParsedName([], [], [], [])

        if len(tokens) == 1:
            return ParsedName([], [], tokens, [])

        # von is the first run of lowercase words, Last keeps the final word
        von_start = None
        von_end = None

        for i in range(len(tokens) - 1):
            if NameParser._starts_with_lowercase(tokens[i]):
                if von_start is None:
                    von_start = i
                von_end = i
            elif von_start is not None:
                break

        if von_start is not None and von_end is not None:
            first = tokens[:von_start]
            von = tokens[von_start : von_end + 1]
            last = tokens[von_end + 1 :]
        else:
            first = tokens[:-1]
            von = []
            last = tokens[-1:]

        return ParsedName(first, von, last, [])

    @staticmethod
    def _parse_von_last_first(name: str) -> ParsedName:
        """Parse 'von Last, First' format."""
        von_last, first = NameParser._split_commas(name, 1)

        tokens = NameParser._tokenize(von_last.strip())
        first_tokens = NameParser._tokenize(first.strip())

        if not tokens:
            return ParsedName(first_tokens, [], [], [])

        von, last = NameParser._split_von_last(tokens)
        return ParsedName(first_tokens, von, last, [])

    @staticmethod
    def _parse_von_last_jr_first(name: str) -> ParsedName:
        """Parse 'von Last, Jr, First' format.

        Anything after the second comma belongs to the first names.
        """
        von_last, jr, first = NameParser._split_commas(name, 2)

        tokens = NameParser._tokenize(von_last.strip())
        first_tokens = NameParser._tokenize(first.strip())
        jr_tokens = NameParser._tokenize(jr.strip())

        if not tokens:
            return ParsedName(first_tokens, [], [], jr_tokens)

        von, last = NameParser._split_von_last(tokens)
        return ParsedName(first_tokens, von, last, jr_tokens)
