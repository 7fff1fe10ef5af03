"""Template filling and preview interfaces.

Defines abstract base classes for the template-filling engine and the
exceptions it raises.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any


class BaseTemplateFiller(ABC):
    """Abstract base class for template filling strategies.

    Replaces ``{key}`` placeholders in a template with values from a
    data map and writes the result to a new file.
    """

    @abstractmethod
    def fill(
        self,
        input_path: str | Path,
        output_path: str | Path,
        data: Mapping[str, str],
        overrides: Any = None,
    ) -> Path:
        """Fill a single template.

        Args:
            input_path: Path to the template. Never modified.
            output_path: Where to write the filled document.
            data: Placeholder key to replacement value.
            overrides: Style applied to substituted text only.

        Returns:
            Path to the written document.

        Raises:
            TemplateReadError: If the template cannot be opened.
            TemplateWriteError: If the output cannot be written.
        """

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""

    def supports_file(self, file_path: str | Path) -> bool:
        """Check the file extension, ignoring case."""
        return Path(file_path).suffix.lower() in self.supported_extensions


class BasePreviewExtractor(ABC):
    """Abstract base class for plain-text preview extraction."""

    @abstractmethod
    def extract_text(self, file_path: str | Path) -> str:
        """Return the flattened text of a document.

        Implementations never raise; failures come back as a
        displayable message.
        """


class TemplateFillError(Exception):
    """Base exception for a template that could not be filled."""

    pass


class TemplateReadError(TemplateFillError):
    """Raised when a template cannot be opened or parsed."""

    pass


class TemplateWriteError(TemplateFillError):
    """Raised when a filled document cannot be saved."""

    pass


class BatchConfigurationError(Exception):
    """Raised when a batch cannot start (bad source or destination folder)."""

    pass
