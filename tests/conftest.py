"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def xlsx_two_sheets(tmp_path: Path) -> Path:
    """A workbook with two populated sheets named Sheet1 and Sheet2."""
    import openpyxl

    wb = openpyxl.Workbook()
    first = wb.active
    first.title = "Sheet1"
    first.append(["name", "score"])
    first.append(["alice", 90])
    first.append(["bob", 85])
    second = wb.create_sheet("Sheet2")
    second.append(["course", "credits"])
    second.append(["Signals", 3])

    path = tmp_path / "grades.xlsx"
    wb.save(path)
    return path


@pytest.fixture()
def docx_file(tmp_path: Path) -> Path:
    """A Word document with two paragraphs and a small table."""
    from docx import Document

    doc = Document()
    doc.add_paragraph("Admission policy")
    doc.add_paragraph("Applications close in June.")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Deadline"
    table.rows[0].cells[1].text = "June 30"

    path = tmp_path / "policy.docx"
    doc.save(str(path))
    return path


@pytest.fixture()
def pdf_file(tmp_path: Path) -> Path:
    """A three-page PDF (blank pages) carrying a document-info title."""
    from pypdf import PdfWriter

    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Title": "Student Handbook", "/Author": "Registrar"})

    path = tmp_path / "handbook.pdf"
    with open(path, "wb") as fh:
        writer.write(fh)
    return path
