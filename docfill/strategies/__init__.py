"""Concrete strategy implementations."""

from docfill.strategies.template_engine import (
    BatchDirectoryWalker,
    DocxPreviewExtractor,
    DocxTemplateFiller,
)

__all__ = [
    "BatchDirectoryWalker",
    "DocxPreviewExtractor",
    "DocxTemplateFiller",
]
