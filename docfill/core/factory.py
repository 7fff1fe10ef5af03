"""Component Factory for strategy instantiation.

Builds the filler, walker, preview extractor and preference store from
settings so callers do not wire them by hand.
"""

import logging

from docfill.core.config import Settings, get_settings
from docfill.core.preferences import PreferenceStore
from docfill.interfaces.template import BasePreviewExtractor, BaseTemplateFiller
from docfill.strategies.template_engine import (
    BatchDirectoryWalker,
    DocxPreviewExtractor,
    DocxTemplateFiller,
)

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())
        walker = factory.get_walker()
        extractor = factory.get_extractor()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._filler_cache: BaseTemplateFiller | None = None
        self._walker_cache: BatchDirectoryWalker | None = None
        self._extractor_cache: BasePreviewExtractor | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_filler(self) -> BaseTemplateFiller:
        """Get the template filler.

        Raises:
            ValueError: If no filler supports the configured extension.
        """
        if self._filler_cache is None:
            filler = DocxTemplateFiller()
            extension = self._settings.template_extension
            if extension not in filler.supported_extensions:
                raise ValueError(
                    f"Unsupported template extension: {extension}. "
                    f"Valid options: {', '.join(sorted(filler.supported_extensions))}"
                )
            logger.info(f"Instantiating template filler for {extension}")
            self._filler_cache = filler
        return self._filler_cache

    def get_walker(self) -> BatchDirectoryWalker:
        """Get the batch directory walker."""
        if self._walker_cache is None:
            self._walker_cache = BatchDirectoryWalker(
                self.get_filler(),
                extension=self._settings.template_extension,
                lock_prefix=self._settings.lock_file_prefix,
            )
        return self._walker_cache

    def get_extractor(self) -> BasePreviewExtractor:
        """Get the preview text extractor."""
        if self._extractor_cache is None:
            self._extractor_cache = DocxPreviewExtractor()
        return self._extractor_cache

    def get_preference_store(self) -> PreferenceStore:
        """Get a store bound to the configured preferences file."""
        return PreferenceStore(self._settings.preferences_file)
