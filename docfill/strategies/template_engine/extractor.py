"""Plain-text preview of a filled document."""

import logging
from pathlib import Path

from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from docfill.interfaces.template import BasePreviewExtractor

logger = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No text found."
ERROR_PREFIX = "Error extracting document text"


class DocxPreviewExtractor(BasePreviewExtractor):
    """Flattens a .docx into text for the preview pane.

    Body paragraphs and tables are emitted in document order. Table cells
    are separated by tabs and rows by newlines.
    """

    def extract_text(self, file_path: str | Path) -> str:
        try:
            with open(file_path, "rb") as stream:
                document = Document(stream)

            lines: list[str] = []
            for child in document.element.body.iterchildren():
                if child.tag == qn("w:p"):
                    lines.append(Paragraph(child, document).text)
                elif child.tag == qn("w:tbl"):
                    table = Table(child, document)
                    for row in table.rows:
                        cells = []
                        for cell in row.cells:
                            # Horizontally merged cells repeat in row.cells.
                            if not cells or cells[-1]._tc is not cell._tc:
                                cells.append(cell)
                        lines.append("\t".join(cell.text for cell in cells))

            text = "\n".join(lines)
            return text if text.strip() else NO_TEXT_MESSAGE
        except Exception as e:
            logger.error(f"Error extracting text from document {file_path}: {e}", exc_info=True)
            return f"{ERROR_PREFIX}: {e}"
