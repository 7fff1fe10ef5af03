"""Template engine strategies.

Implements placeholder filling for Word documents and batch processing
of template folders.
"""

from docfill.strategies.template_engine.extractor import DocxPreviewExtractor
from docfill.strategies.template_engine.filler import DocxTemplateFiller
from docfill.strategies.template_engine.models import (
    BatchSummary,
    FileOutcome,
    StyleDescriptor,
    StyleOverride,
    TextSegment,
)
from docfill.strategies.template_engine.rebuilder import ParagraphRebuilder
from docfill.strategies.template_engine.scanner import contains_placeholder, scan_placeholders
from docfill.strategies.template_engine.walker import BatchDirectoryWalker

__all__ = [
    "BatchDirectoryWalker",
    "BatchSummary",
    "DocxPreviewExtractor",
    "DocxTemplateFiller",
    "FileOutcome",
    "ParagraphRebuilder",
    "StyleDescriptor",
    "StyleOverride",
    "TextSegment",
    "contains_placeholder",
    "scan_placeholders",
]
