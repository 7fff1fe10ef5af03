"""Unit tests for the document filler and preview extractor."""

from unittest.mock import patch

import pytest
from docx import Document

from docfill.interfaces.template import TemplateReadError, TemplateWriteError
from docfill.strategies.template_engine.extractor import (
    ERROR_PREFIX,
    NO_TEXT_MESSAGE,
    DocxPreviewExtractor,
)
from docfill.strategies.template_engine.filler import DocxTemplateFiller, iter_paragraphs
from docfill.strategies.template_engine.models import StyleOverride

DATA = {"object_desc": "Bridge 7", "customer": "City Council", "sr_num_1": "SR-001"}


# =============================================================================
# Document Filler Tests
# =============================================================================


class TestDocxTemplateFiller:
    """Test suite for DocxTemplateFiller."""

    @pytest.fixture
    def filler(self):
        return DocxTemplateFiller()

    def test_supported_extensions(self, filler):
        """Test that only .docx files are supported."""
        assert filler.supported_extensions == {".docx"}
        assert filler.supports_file("Report.DOCX") is True
        assert filler.supports_file("notes.txt") is False

    def test_scenario(self, filler, tmp_path, make_docx, read_text):
        """Test the documented example end to end."""
        source = make_docx(tmp_path / "in.docx", "Project: {object_desc}, Code: {code}")
        target = tmp_path / "out.docx"

        result = filler.fill(source, target, {"object_desc": "Bridge 7"})

        assert result == target
        assert read_text(target) == "Project: Bridge 7, Code: {code}"

    def test_all_known_keys_resolved(self, filler, tmp_path, make_docx, read_text):
        """Test that no {key} remains for any key in the data map."""
        source = make_docx(
            tmp_path / "in.docx",
            "Object: {object_desc}",
            "Customer: { customer } / {customer}",
            table=[["No.", "{sr_num_1}"], ["Client", "{customer}"]],
        )
        target = tmp_path / "out.docx"

        filler.fill(source, target, DATA)

        text = read_text(target)
        for key in DATA:
            assert f"{{{key}}}" not in text
        assert "City Council / City Council" in text
        assert "SR-001" in text

    def test_missing_key_kept_literal(self, filler, tmp_path, make_docx, read_text):
        """Test that unknown keys remain in the output."""
        source = make_docx(tmp_path / "in.docx", "Signed by {director}", table=[["{director}"]])
        target = tmp_path / "out.docx"

        filler.fill(source, target, DATA)

        assert read_text(target).count("{director}") == 2

    def test_table_cells_are_filled(self, filler, tmp_path, make_docx):
        """Test that paragraphs inside table cells are processed."""
        source = make_docx(tmp_path / "in.docx", table=[["{object_desc}", "x"], ["y", "{customer}"]])
        target = tmp_path / "out.docx"

        filler.fill(source, target, DATA)

        table = Document(str(target)).tables[0]
        assert table.cell(0, 0).text == "Bridge 7"
        assert table.cell(1, 1).text == "City Council"
        assert table.cell(0, 1).text == "x"

    @pytest.mark.parametrize("shape, span", [((1, 2), (0, 1)), ((2, 1), (1, 0))])
    def test_merged_cell_is_filled_once(self, filler, tmp_path, shape, span):
        """Test that a merged cell is not substituted again with its own value."""
        source = tmp_path / "in.docx"
        document = Document()
        table = document.add_table(rows=shape[0], cols=shape[1])
        table.cell(0, 0).merge(table.cell(*span)).text = "{a}"
        document.save(str(source))
        target = tmp_path / "out.docx"

        filler.fill(source, target, {"a": "{b}", "b": "X"})

        assert Document(str(target)).tables[0].cell(0, 0).text == "{b}"
        assert filler.last_stats.paragraphs_rebuilt == 1
        assert filler.last_stats.placeholders_resolved == 1

    def test_input_is_not_modified(self, filler, tmp_path, make_docx):
        """Test that the template bytes stay the same."""
        source = make_docx(tmp_path / "in.docx", "{object_desc}")
        original = source.read_bytes()

        filler.fill(source, tmp_path / "out.docx", DATA)

        assert source.read_bytes() == original

    def test_overwrites_existing_output(self, filler, tmp_path, make_docx, read_text):
        """Test that an existing output file is replaced."""
        source = make_docx(tmp_path / "in.docx", "{customer}")
        target = make_docx(tmp_path / "out.docx", "stale content")

        filler.fill(source, target, DATA)

        assert read_text(target) == "City Council"

    def test_style_override_reaches_output(self, filler, tmp_path):
        """Test that the override is applied to values in the saved file."""
        source = tmp_path / "in.docx"
        document = Document()
        run = document.add_paragraph().add_run("Owner: {customer}")
        run.bold = True
        document.save(str(source))
        target = tmp_path / "out.docx"

        filler.fill(source, target, DATA, StyleOverride(bold=False, italic=True, font_family="Arial"))

        literal, value = Document(str(target)).paragraphs[0].runs
        assert literal.bold is True
        assert literal.italic is None
        assert value.bold is False
        assert value.italic is True
        assert value.font.name == "Arial"

    def test_last_stats(self, filler, tmp_path, make_docx):
        """Test the counters recorded for the last fill."""
        source = make_docx(tmp_path / "in.docx", "{customer}", "plain", "{object_desc} {nope}")

        filler.fill(source, tmp_path / "out.docx", DATA)

        assert filler.last_stats.paragraphs_rebuilt == 2
        assert filler.last_stats.placeholders_resolved == 2
        assert filler.last_stats.placeholders_unresolved == 1

    def test_missing_input_raises_read_error(self, filler, tmp_path):
        """Test that a missing template fails without writing output."""
        target = tmp_path / "out.docx"

        with pytest.raises(TemplateReadError) as exc_info:
            filler.fill(tmp_path / "missing.docx", target, DATA)

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert not target.exists()

    def test_corrupt_input_raises_read_error(self, filler, tmp_path):
        """Test that a file that is not a Word package fails cleanly."""
        source = tmp_path / "broken.docx"
        source.write_bytes(b"this is not a zip archive")
        target = tmp_path / "out.docx"

        with pytest.raises(TemplateReadError):
            filler.fill(source, target, DATA)

        assert not target.exists()

    def test_unwritable_output_raises_write_error(self, filler, tmp_path, make_docx):
        """Test that a missing output folder is reported as a write error."""
        source = make_docx(tmp_path / "in.docx", "{customer}")

        with pytest.raises(TemplateWriteError):
            filler.fill(source, tmp_path / "no" / "such" / "dir" / "out.docx", DATA)

    def test_failed_save_leaves_no_partial_file(self, filler, tmp_path, make_docx):
        """Test that the temporary file is removed when saving fails."""
        source = make_docx(tmp_path / "in.docx", "{customer}")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        with patch("docx.document.Document.save", side_effect=OSError("disk full")):
            with pytest.raises(TemplateWriteError, match="disk full"):
                filler.fill(source, out_dir / "out.docx", DATA)

        assert list(out_dir.iterdir()) == []

    def test_iter_paragraphs_order(self, make_docx, tmp_path):
        """Test body paragraphs first, then table cells row by row."""
        path = make_docx(tmp_path / "in.docx", "one", "two", table=[["a", "b"], ["c", "d"]])

        texts = [p.text for p in iter_paragraphs(Document(str(path)))]

        assert texts == ["one", "two", "a", "b", "c", "d"]

    def test_iter_paragraphs_merged_cell_once(self):
        """Test that a cell spanning two columns is yielded once."""
        document = Document()
        table = document.add_table(rows=1, cols=3)
        table.cell(0, 0).merge(table.cell(0, 1)).text = "wide"
        table.cell(0, 2).text = "narrow"

        assert [p.text for p in iter_paragraphs(document)] == ["wide", "narrow"]


# =============================================================================
# Preview Extractor Tests
# =============================================================================


class TestDocxPreviewExtractor:
    """Test suite for DocxPreviewExtractor."""

    @pytest.fixture
    def extractor(self):
        return DocxPreviewExtractor()

    def test_extracts_paragraphs_and_tables(self, extractor, tmp_path, make_docx):
        """Test paragraph and table text in document order."""
        path = make_docx(tmp_path / "doc.docx", "Title", "Body", table=[["a", "b"], ["c", "d"]])

        assert extractor.extract_text(path) == "Title\nBody\na\tb\nc\td"

    def test_merged_cell_text_once_per_row(self, extractor, tmp_path):
        """Test that a horizontally merged cell appears once in its row."""
        path = tmp_path / "merged.docx"
        document = Document()
        table = document.add_table(rows=1, cols=3)
        table.cell(0, 0).merge(table.cell(0, 1)).text = "Wide"
        table.cell(0, 2).text = "x"
        document.save(str(path))

        assert extractor.extract_text(path) == "Wide\tx"

    def test_empty_document(self, extractor, tmp_path, make_docx):
        """Test the message for a document without text."""
        path = make_docx(tmp_path / "empty.docx")
        assert extractor.extract_text(path) == NO_TEXT_MESSAGE

    def test_missing_file_returns_message(self, extractor, tmp_path):
        """Test that a missing file never raises."""
        result = extractor.extract_text(tmp_path / "missing.docx")
        assert result.startswith(ERROR_PREFIX)

    def test_corrupt_file_returns_message(self, extractor, tmp_path):
        """Test that a corrupt file never raises."""
        path = tmp_path / "broken.docx"
        path.write_bytes(b"garbage")

        assert extractor.extract_text(path).startswith(ERROR_PREFIX)
