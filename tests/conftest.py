"""Shared fixtures for building small Word documents."""

from pathlib import Path

import pytest
from docx import Document

from docfill.core.config import Settings
from docfill.core.factory import ComponentFactory


def write_docx(path: Path, *paragraphs: str, table: list[list[str]] | None = None) -> Path:
    """Create a .docx with one single-run paragraph per string and an optional table."""
    path.parent.mkdir(parents=True, exist_ok=True)
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        doc_table = document.add_table(rows=len(table), cols=len(table[0]))
        for row_idx, row in enumerate(table):
            for col_idx, value in enumerate(row):
                doc_table.cell(row_idx, col_idx).text = value
    document.save(str(path))
    return path


def document_text(path: Path) -> str:
    """Body and table paragraph text of a saved document, newline separated."""
    document = Document(str(path))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.extend(paragraph.text for paragraph in cell.paragraphs)
    return "\n".join(lines)


@pytest.fixture
def make_docx():
    """Factory fixture wrapping ``write_docx``."""
    return write_docx


@pytest.fixture
def read_text():
    """Factory fixture wrapping ``document_text``."""
    return document_text


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the user's home directory and environment."""
    return Settings(
        _env_file=None,
        preferences_file=tmp_path / "prefs" / "preferences.json",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def factory(settings):
    """Component factory bound to the isolated settings."""
    return ComponentFactory(settings)
