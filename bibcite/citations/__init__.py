"""Citation and bibliography generation pipeline.

Records are normalized into CSL variables, rendered by citeproc-py with a
CSL style and finalized for HTML or plain text output.
"""

from bibcite.citations.exceptions import (
    CitationError,
    ConfigError,
    StyleNotFoundError,
    StyleParseError,
    StyleProcessingError,
    StyleRenderError,
)
from bibcite.citations.fallback import FieldFallbackResolver
from bibcite.citations.formatter import FAILURE_MESSAGE, OutputFormatter
from bibcite.citations.generator import (
    CitationGenerator,
    generate_bibliography,
    generate_citation,
)
from bibcite.citations.processor import (
    CiteprocStyleProcessor,
    RenderResult,
    StyleProcessor,
)
from bibcite.citations.styles import CitationStyle, StyleCatalog
from bibcite.citations.variables import EntryNormalizer, VariableMap, normalize

__all__ = [
    # Generation
    "CitationGenerator",
    "generate_citation",
    "generate_bibliography",
    # Pipeline
    "EntryNormalizer",
    "FieldFallbackResolver",
    "VariableMap",
    "normalize",
    "CiteprocStyleProcessor",
    "RenderResult",
    "StyleProcessor",
    "OutputFormatter",
    "FAILURE_MESSAGE",
    # Styles
    "CitationStyle",
    "StyleCatalog",
    # Errors
    "CitationError",
    "ConfigError",
    "StyleNotFoundError",
    "StyleParseError",
    "StyleProcessingError",
    "StyleRenderError",
]
