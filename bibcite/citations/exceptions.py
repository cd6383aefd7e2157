"""Exception classes for citation generation."""


class CitationError(Exception):
    """Base exception for citation-related errors."""

    pass


class StyleProcessingError(CitationError):
    """Raised by a style processor that cannot produce output."""

    def __init__(self, message: str, style: str | None = None):
        """Initialize with message and an optional style name."""
        self.style = style
        super().__init__(message)


class StyleParseError(StyleProcessingError):
    """Raised when a style definition cannot be parsed."""

    def __init__(self, details: str = "", style: str | None = None):
        """Initialize with parser details."""
        message = "Cannot parse citation style"
        if details:
            message += f": {details}"
        super().__init__(message, style=style)


class StyleRenderError(StyleProcessingError):
    """Raised when a parsed style fails while rendering records."""

    pass


class StyleNotFoundError(CitationError, KeyError):
    """Raised when a style is not known to the catalog."""

    def __init__(self, name: str):
        """Initialize with style name."""
        self.name = name
        super().__init__(f"Citation style not found: {name}")

    def __str__(self) -> str:
        return self.args[0]


class ConfigError(CitationError, ValueError):
    """Raised when configuration values are invalid."""

    def __init__(self, field: str, message: str):
        """Initialize with field and message."""
        self.field = field
        super().__init__(f"Invalid configuration for {field}: {message}")
