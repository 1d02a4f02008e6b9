"""Value objects produced by format extraction."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

DOC_NOT_SUPPORTED_TEXT = "[Error: .doc format not supported, please convert to .docx]"


class ExtractedDocument(BaseModel):
    """Normalised text of one source file plus optional structural metadata.

    Attributes
    ----------
    text:
        Extracted text. Never ``None``; empty for unknown extensions and the
        fixed sentinel for legacy ``.doc`` files.
    page_count:
        Pages (PDF), sheets (spreadsheets) or ``1`` for single-flow formats.
        ``None`` when the format was not parsed.
    info:
        Parser-reported metadata, e.g. the PDF document-info dictionary.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    page_count: int | None = None
    info: dict[str, Any] | None = None

    @property
    def has_content(self) -> bool:
        """``False`` when there is nothing worth embedding."""
        return bool(self.text.strip()) and self.text != DOC_NOT_SUPPORTED_TEXT
