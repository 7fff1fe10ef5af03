"""User preference persistence.

Remembers the last used folders, output file name and style choices
between sessions in a small JSON file. The template engine never reads
this file; callers pass the values in explicitly.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from docfill.strategies.template_engine.models import StyleOverride

logger = logging.getLogger(__name__)


class Preferences(BaseModel):
    """Values restored when the application starts."""

    template_dir: str = Field(default="", description="Last template folder")
    output_dir: str = Field(default="", description="Last output folder")
    output_file_name: str = Field(default="", description="Last output file name")
    style: StyleOverride = Field(default_factory=StyleOverride)


class PreferenceStore:
    """Loads and saves ``Preferences`` as JSON."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Preferences:
        """Read preferences, falling back to defaults if the file is missing or invalid."""
        if not self._path.exists():
            return Preferences()
        try:
            return Preferences.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self._path}: {e}")
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        """Write preferences, creating the parent folder if needed.

        Raises:
            OSError: If the file cannot be written.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(preferences.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"Preferences saved to {self._path}")

    def update(self, **changes: Any) -> Preferences:
        """Merge ``changes`` into the stored preferences and save them."""
        current = self.load()
        updated = Preferences.model_validate({**current.model_dump(), **changes})
        self.save(updated)
        return updated
