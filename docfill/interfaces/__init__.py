"""Abstract base classes for template processing strategies."""

from docfill.interfaces.template import (
    BasePreviewExtractor,
    BaseTemplateFiller,
    BatchConfigurationError,
    TemplateFillError,
    TemplateReadError,
    TemplateWriteError,
)

__all__ = [
    "BaseTemplateFiller",
    "BasePreviewExtractor",
    "TemplateFillError",
    "TemplateReadError",
    "TemplateWriteError",
    "BatchConfigurationError",
]
