"""Citation and bibliography generation for BibTeX and BibLaTeX records."""

__version__ = "0.1.0"
