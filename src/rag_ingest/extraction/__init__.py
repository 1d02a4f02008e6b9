"""
Extraction — turn uploaded files into normalised text.

Public surface
--------------
- :class:`FormatExtractor` — extension-dispatched extraction.
- :class:`ExtractedDocument` — text plus page count and parser info.
- :func:`extract_text_from_file` — shortcut using a default extractor.
"""

from rag_ingest.extraction.extractor import (
    DEFAULT_STRATEGIES,
    FormatExtractor,
    extract_text_from_file,
    normalize_extension,
)
from rag_ingest.extraction.models import DOC_NOT_SUPPORTED_TEXT, ExtractedDocument

__all__ = [
    "DEFAULT_STRATEGIES",
    "DOC_NOT_SUPPORTED_TEXT",
    "ExtractedDocument",
    "FormatExtractor",
    "extract_text_from_file",
    "normalize_extension",
]
