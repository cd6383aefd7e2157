"""Localization of user-facing messages.

Messages are looked up by their English text. A catalog without a
translation for a key returns the key unchanged, so English needs no
catalog file at all.
"""

import logging
from pathlib import Path
from typing import Protocol

import yaml

logger = logging.getLogger(__name__)


class Localization(Protocol):
    """Protocol for message lookup."""

    def lookup(self, key: str) -> str:
        """Return the translated message for a key."""
        ...


class MessageCatalog:
    """In-memory message catalog with YAML loading."""

    def __init__(self, messages: dict[str, str] | None = None, language: str = "en"):
        self.language = language
        self.messages: dict[str, str] = dict(messages or {})

    @classmethod
    def from_file(cls, path: Path | str) -> "MessageCatalog":
        """Load a catalog from a YAML file.

        The file holds a mapping from English message to translation and
        may name its language under a top-level ``language`` key.

        Raises:
            ValueError: If the file is not valid YAML or not a mapping.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in message catalog: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Message catalog must be a mapping: {path}")

        language = str(data.pop("language", "en"))
        messages = {str(k): str(v) for k, v in data.items() if v is not None}
        logger.debug("Loaded %d messages for %s from %s", len(messages), language, path)
        return cls(messages, language=language)

    def lookup(self, key: str) -> str:
        """Return the translation, or the key itself."""
        return self.messages.get(key, key)

    def __contains__(self, key: str) -> bool:
        return key in self.messages
