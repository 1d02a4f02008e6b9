"""Per-format extraction strategies.

Each strategy takes the path of an existing file and returns an
:class:`ExtractedDocument`. Strategies open files read-only and let parser
exceptions propagate; :class:`~rag_ingest.extraction.extractor.FormatExtractor`
turns those into :class:`~rag_ingest.errors.ExtractionIOError`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from rag_ingest.extraction.models import DOC_NOT_SUPPORTED_TEXT, ExtractedDocument

logger = logging.getLogger(__name__)


def load_pdf(path: Path) -> ExtractedDocument:
    """Extract the text layer of every page plus the document-info dictionary."""
    from pypdf import PdfReader

    with open(path, "rb") as fh:
        reader = PdfReader(fh)
        pages = [page.extract_text() or "" for page in reader.pages]
        raw_info = reader.metadata or {}
        info = {str(key).lstrip("/"): str(value) for key, value in raw_info.items()}

    return ExtractedDocument(text="\n".join(pages), page_count=len(pages), info=info)


def load_docx(path: Path) -> ExtractedDocument:
    """Extract raw text from paragraphs and tables of a Word document.

    Pagination needs a layout engine, so ``page_count`` is always 1.
    """
    from docx import Document

    doc = Document(str(path))
    lines = [paragraph.text for paragraph in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))

    return ExtractedDocument(text="\n".join(lines), page_count=1)


def load_legacy_doc(path: Path) -> ExtractedDocument:
    """Legacy binary Word files are not parsed."""
    logger.warning(
        "Skipping .doc file (binary format not supported, please convert to .docx): %s",
        path.name,
    )
    return ExtractedDocument(text=DOC_NOT_SUPPORTED_TEXT)


def load_xlsx(path: Path) -> ExtractedDocument:
    """Render every worksheet of an Office Open XML workbook."""
    import openpyxl

    workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        sheets = [(ws.title, list(ws.iter_rows(values_only=True))) for ws in workbook.worksheets]
    finally:
        workbook.close()
    return _render_workbook(sheets)


def load_xls(path: Path) -> ExtractedDocument:
    """Render every sheet of a legacy BIFF workbook."""
    import xlrd

    book = xlrd.open_workbook(str(path), on_demand=True)
    try:
        sheets = []
        for name in book.sheet_names():
            sheet = book.sheet_by_name(name)
            sheets.append((name, [sheet.row_values(i) for i in range(sheet.nrows)]))
    finally:
        book.release_resources()
    return _render_workbook(sheets)


def load_text(path: Path) -> ExtractedDocument:
    """Read a plain-text file (Markdown, text, CSV, JSON) as-is.

    Line endings are kept exactly as stored.
    """
    with open(path, encoding="utf-8", newline="") as fh:
        text = fh.read()
    return ExtractedDocument(text=text, page_count=1)


# -- spreadsheet helpers -------------------------------------------------------


def _render_workbook(sheets: list[tuple[str, list[Iterable[Any]]]]) -> ExtractedDocument:
    blocks = [f"Sheet: {name}\n{_sheet_to_text(rows)}" for name, rows in sheets]
    return ExtractedDocument(text="\n\n".join(blocks), page_count=len(sheets))


def _sheet_to_text(rows: list[Iterable[Any]]) -> str:
    """Flatten a grid into tab-separated lines, dropping blank rows."""
    lines: list[str] = []
    for row in rows:
        cells = [_cell_text(value) for value in row]
        while cells and not cells[-1]:
            cells.pop()
        if cells:
            lines.append("\t".join(cells))
    return "\n".join(lines)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
