"""Document filler strategy.

Opens a Word template, fills every body and table-cell paragraph and
saves the result under a new path. The template itself is never written.
"""

import logging
import os
import tempfile
from collections.abc import Iterator, Mapping
from pathlib import Path

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from docfill.interfaces.template import BaseTemplateFiller, TemplateReadError, TemplateWriteError
from docfill.strategies.template_engine.models import FillStats, StyleOverride
from docfill.strategies.template_engine.rebuilder import ParagraphRebuilder

logger = logging.getLogger(__name__)


def iter_paragraphs(document) -> Iterator:
    """Yield body paragraphs, then table-cell paragraphs.

    Table order is table, row, cell, paragraph. A merged cell is yielded
    once, although ``row.cells`` repeats it for every grid column and row
    it spans.
    """
    yield from document.paragraphs
    for table in document.tables:
        seen = set()
        for row in table.rows:
            for cell in row.cells:
                if cell._tc in seen:
                    continue
                seen.add(cell._tc)
                yield from cell.paragraphs


class DocxTemplateFiller(BaseTemplateFiller):
    """Fills ``{key}`` placeholders in .docx templates.

    Uses python-docx to rebuild only the paragraphs that contain
    placeholders, so everything else keeps its original formatting.
    """

    def __init__(self) -> None:
        self.last_stats = FillStats()

    def fill(
        self,
        input_path: str | Path,
        output_path: str | Path,
        data: Mapping[str, str],
        overrides: StyleOverride | None = None,
    ) -> Path:
        """Fill one template and write the result.

        Args:
            input_path: Path to the template.
            output_path: Where to save the filled document. Overwritten if
                it exists.
            data: Placeholder key to replacement value.
            overrides: Formatting forced onto substituted text.

        Returns:
            The output path.

        Raises:
            TemplateReadError: If the template is missing or not a valid
                Word document. Nothing is written in that case.
            TemplateWriteError: If the output cannot be saved.
        """
        source = Path(input_path)
        target = Path(output_path)
        logger.info(f"Filling template: {source} -> {target}")

        document = self._load(source)
        rebuilder = ParagraphRebuilder(data, overrides)
        for paragraph in iter_paragraphs(document):
            rebuilder.rebuild(paragraph)
        self.last_stats = rebuilder.stats

        self._save(document, target)

        stats = self.last_stats
        logger.info(
            f"Filled document saved: {target} ({stats.placeholders_resolved} replaced, "
            f"{stats.placeholders_unresolved} left as-is, "
            f"{stats.paragraphs_rebuilt} paragraphs rebuilt)"
        )
        return target

    def _load(self, source: Path):
        try:
            with open(source, "rb") as stream:
                return Document(stream)
        except FileNotFoundError as e:
            logger.error(f"Template file not found: {source}")
            raise TemplateReadError(f"Template file not found: {source}") from e
        except (PackageNotFoundError, KeyError, ValueError, OSError) as e:
            logger.error(f"Could not open template {source}: {e}", exc_info=True)
            raise TemplateReadError(f"Could not open template '{source.name}': {e}") from e
        except Exception as e:
            logger.error(f"Could not parse template {source}: {e}", exc_info=True)
            raise TemplateReadError(f"Could not parse template '{source.name}': {e}") from e

    def _save(self, document, target: Path) -> None:
        """Save through a temporary sibling so a failed write leaves no partial file."""
        temp_path: str | None = None
        try:
            fd, temp_path = tempfile.mkstemp(
                prefix=f".{target.stem}.", suffix=target.suffix, dir=target.parent
            )
            os.close(fd)
            document.save(temp_path)
            os.replace(temp_path, target)
            temp_path = None
        except Exception as e:
            logger.error(f"Error writing to output file: {target}", exc_info=True)
            raise TemplateWriteError(f"Error writing to '{target}': {e}") from e
        finally:
            if temp_path is not None:
                try:
                    os.remove(temp_path)
                except OSError as cleanup_error:
                    logger.error(f"Could not remove temporary file {temp_path}: {cleanup_error}")

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}
