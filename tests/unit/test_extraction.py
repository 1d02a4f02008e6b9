"""Unit tests for format-aware extraction."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from rag_ingest.errors import ExtractionIOError
from rag_ingest.extraction import (
    DOC_NOT_SUPPORTED_TEXT,
    ExtractedDocument,
    FormatExtractor,
    extract_text_from_file,
)


@pytest.fixture()
def extractor() -> FormatExtractor:
    return FormatExtractor()


# ── Plain-text formats ─────────────────────────────────────────────────


class TestTextFormats:
    @pytest.mark.parametrize("suffix", [".txt", ".md", ".csv", ".json"])
    def test_read_verbatim(self, extractor: FormatExtractor, tmp_path: Path, suffix: str) -> None:
        content = '# Title\nname,value\n{"k": 1}\n  indented  \n'
        path = tmp_path / f"sample{suffix}"
        path.write_text(content, encoding="utf-8")

        doc = extractor.extract(path)

        assert doc.text == content
        assert doc.page_count == 1
        assert doc.info is None

    @pytest.mark.parametrize("suffix", [".txt", ".csv"])
    def test_crlf_line_endings_kept(self, extractor: FormatExtractor, tmp_path: Path, suffix: str) -> None:
        path = tmp_path / f"export{suffix}"
        path.write_bytes(b"a,b\r\n1,2\r\n")

        assert extractor.extract(path).text == "a,b\r\n1,2\r\n"

    def test_unicode_preserved(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_text("信息与控制工程学院 — 2024", encoding="utf-8")
        assert extractor.extract(path).text == "信息与控制工程学院 — 2024"

    def test_original_filename_extension_wins(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        """Uploads stored under generated names dispatch on the original name."""
        path = tmp_path / "upload-3f2a"
        path.write_text("hello world", encoding="utf-8")

        doc = extractor.extract(path, "Notes.TXT")

        assert doc.text == "hello world"
        assert doc.page_count == 1

    def test_falls_back_to_path_extension(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        path = tmp_path / "README.MD"
        path.write_text("# readme", encoding="utf-8")
        assert extractor.extract(path, None).text == "# readme"

    def test_invalid_utf8_raises_extraction_error(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        path = tmp_path / "broken.txt"
        path.write_bytes(b"\xff\xfe\xfa not utf-8")
        with pytest.raises(ExtractionIOError):
            extractor.extract(path)


# ── Degraded formats ───────────────────────────────────────────────────


class TestUnsupportedFormats:
    def test_doc_returns_sentinel(
        self, extractor: FormatExtractor, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "legacy.doc"
        path.write_bytes(b"\xd0\xcf\x11\xe0 binary word")

        with caplog.at_level(logging.WARNING):
            doc = extractor.extract(path)

        assert doc.text == DOC_NOT_SUPPORTED_TEXT
        assert doc.text == "[Error: .doc format not supported, please convert to .docx]"
        assert "legacy.doc" in caplog.text

    def test_unknown_extension_returns_empty_text(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        path = tmp_path / "slides.pptx"
        path.write_bytes(b"PK\x03\x04")

        doc = extractor.extract(path)

        assert doc.text == ""
        assert doc.page_count is None
        assert doc.info is None

    def test_no_extension_returns_empty_text(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        path = tmp_path / "blob"
        path.write_text("data")
        assert extractor.extract(path).text == ""


# ── I/O failures ───────────────────────────────────────────────────────


class TestExtractionErrors:
    @pytest.mark.parametrize("name", ["missing.txt", "missing.pdf", "missing.doc", "missing.unknown"])
    def test_missing_file_raises(self, extractor: FormatExtractor, tmp_path: Path, name: str) -> None:
        with pytest.raises(ExtractionIOError) as exc_info:
            extractor.extract(tmp_path / name)
        assert exc_info.value.path == str(tmp_path / name)

    def test_directory_is_not_a_file(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        folder = tmp_path / "folder.txt"
        folder.mkdir()
        with pytest.raises(ExtractionIOError):
            extractor.extract(folder)

    @pytest.mark.parametrize("suffix", [".xlsx", ".docx"])
    def test_corrupt_file_raises_chained_error(
        self, extractor: FormatExtractor, tmp_path: Path, suffix: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / f"corrupt{suffix}"
        path.write_bytes(b"this is not a zip container")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ExtractionIOError) as exc_info:
                extractor.extract(path)

        assert exc_info.value.__cause__ is not None
        assert str(path) in caplog.text


# ── Rich formats ───────────────────────────────────────────────────────


class TestRichFormats:
    def test_docx_text_and_fixed_page_count(self, extractor: FormatExtractor, docx_file: Path) -> None:
        doc = extractor.extract(docx_file)

        assert "Admission policy" in doc.text
        assert "Applications close in June." in doc.text
        assert "Deadline\tJune 30" in doc.text
        assert doc.page_count == 1

    def test_xlsx_sheets_rendered(self, extractor: FormatExtractor, xlsx_two_sheets: Path) -> None:
        doc = extractor.extract(xlsx_two_sheets)

        assert doc.page_count == 2
        assert doc.text == (
            "Sheet: Sheet1\nname\tscore\nalice\t90\nbob\t85"
            "\n\n"
            "Sheet: Sheet2\ncourse\tcredits\nSignals\t3"
        )

    def test_xlsx_source_file_untouched(self, extractor: FormatExtractor, xlsx_two_sheets: Path) -> None:
        before = xlsx_two_sheets.read_bytes()
        mtime = xlsx_two_sheets.stat().st_mtime_ns

        extractor.extract(xlsx_two_sheets)

        assert xlsx_two_sheets.read_bytes() == before
        assert xlsx_two_sheets.stat().st_mtime_ns == mtime

    def test_xls_uses_legacy_reader(self, extractor: FormatExtractor, tmp_path: Path) -> None:
        path = tmp_path / "old.xls"
        path.write_bytes(b"\xd0\xcf\x11\xe0")

        sheets = {
            "Budget": [["item", "cost"], ["paper", 12.0], ["", ""]],
            "Notes": [["ok"]],
        }
        book = MagicMock()
        book.sheet_names.return_value = list(sheets)

        def sheet_by_name(name: str) -> MagicMock:
            rows = sheets[name]
            sheet = MagicMock(nrows=len(rows))
            sheet.row_values.side_effect = lambda i: rows[i]
            return sheet

        book.sheet_by_name.side_effect = sheet_by_name

        with patch("xlrd.open_workbook", return_value=book):
            doc = extractor.extract(path)

        assert doc.page_count == 2
        assert doc.text == "Sheet: Budget\nitem\tcost\npaper\t12\n\nSheet: Notes\nok"
        book.release_resources.assert_called_once()

    def test_pdf_page_count_and_info(self, extractor: FormatExtractor, pdf_file: Path) -> None:
        doc = extractor.extract(pdf_file)

        assert doc.page_count == 3
        assert isinstance(doc.text, str)
        assert doc.info is not None
        assert doc.info["Title"] == "Student Handbook"
        assert doc.info["Author"] == "Registrar"


# ── Dispatch table ─────────────────────────────────────────────────────


class TestDispatch:
    def test_register_new_format(self, tmp_path: Path) -> None:
        extractor = FormatExtractor()
        extractor.register("RTF", lambda path: ExtractedDocument(text="rtf!", page_count=1))
        path = tmp_path / "memo.rtf"
        path.write_text("{\\rtf1 memo}")

        assert ".rtf" in extractor.supported_extensions
        assert extractor.extract(path).text == "rtf!"

    def test_registration_is_per_instance(self) -> None:
        extractor = FormatExtractor()
        extractor.register(".rtf", lambda path: ExtractedDocument(text=""))
        assert ".rtf" not in FormatExtractor().supported_extensions

    def test_default_extensions(self) -> None:
        assert FormatExtractor().supported_extensions == {
            ".pdf", ".docx", ".doc", ".xlsx", ".xls", ".md", ".txt", ".csv", ".json",
        }

    def test_custom_strategy_exception_is_wrapped(self, tmp_path: Path) -> None:
        def explode(path: Path) -> ExtractedDocument:
            raise ValueError("bad structure")

        extractor = FormatExtractor({".txt": explode})
        path = tmp_path / "a.txt"
        path.write_text("x")

        with pytest.raises(ExtractionIOError, match="bad structure"):
            extractor.extract(path)

    def test_module_shortcut(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("shortcut")
        assert extract_text_from_file(path).text == "shortcut"


class TestExtractedDocument:
    def test_text_defaults_to_empty(self) -> None:
        assert ExtractedDocument().text == ""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("hello", True), ("", False), ("  \n\t", False), (DOC_NOT_SUPPORTED_TEXT, False)],
    )
    def test_has_content(self, text: str, expected: bool) -> None:
        assert ExtractedDocument(text=text).has_content is expected

    def test_is_immutable(self) -> None:
        doc = ExtractedDocument(text="a")
        with pytest.raises(Exception):
            doc.text = "b"  # type: ignore[misc]
