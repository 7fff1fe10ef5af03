"""Template engine domain models.

Style snapshots, placeholder matches and text segments used while a
paragraph is rebuilt, plus the per-file and per-batch outcome records.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable

from docx.enum.text import WD_UNDERLINE
from docx.shared import Pt, RGBColor
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def first_present(*candidates: str | None) -> str | None:
    """Return the first candidate that is neither None nor blank."""
    for candidate in candidates:
        if candidate is not None and candidate.strip():
            return candidate
    return None


def _read_attribute(reader: Callable[[], Any], name: str) -> Any:
    try:
        return reader()
    except Exception as e:
        logger.debug(f"Could not read run attribute '{name}': {e}")
        return None


def _read_font_size(run) -> float | None:
    size = _read_attribute(lambda: run.font.size, "font.size")
    if size is None:
        return None
    points = _read_attribute(lambda: float(size.pt), "font.size.pt")
    if points is None or points <= 0:
        return None
    return points


def _read_color(run) -> str | None:
    rgb = _read_attribute(lambda: run.font.color.rgb, "font.color")
    return str(rgb) if rgb is not None else None


@dataclass(frozen=True)
class StyleDescriptor:
    """Snapshot of the direct formatting of one run.

    Attributes:
        bold: Bold flag; None means inherited from the paragraph style.
        italic: Italic flag; None means inherited.
        underline: python-docx underline value (None, bool or WD_UNDERLINE).
        strike: Strikethrough flag; None means inherited.
        font_family: Font name, if set on the run.
        font_size: Size in points, always strictly positive when present.
        color: Six-digit hex RGB color, e.g. "FF0000".
    """

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | WD_UNDERLINE | None = None
    strike: bool | None = None
    font_family: str | None = None
    font_size: float | None = None
    color: str | None = None

    def __post_init__(self) -> None:
        if self.font_size is not None and not self.font_size > 0:
            object.__setattr__(self, "font_size", None)

    @classmethod
    def from_run(cls, run) -> "StyleDescriptor":
        """Read the formatting off an existing run.

        Unreadable attributes fall back to None instead of raising.
        """
        return cls(
            bold=_read_attribute(lambda: run.bold, "bold"),
            italic=_read_attribute(lambda: run.italic, "italic"),
            underline=_read_attribute(lambda: run.underline, "underline"),
            strike=_read_attribute(lambda: run.font.strike, "font.strike"),
            font_family=_read_attribute(lambda: run.font.name, "font.name"),
            font_size=_read_font_size(run),
            color=_read_color(run),
        )

    def apply_to(self, run) -> None:
        """Stamp this style onto a freshly created run."""
        run.bold = self.bold
        run.italic = self.italic
        run.underline = self.underline
        run.font.strike = self.strike
        if self.font_family:
            run.font.name = self.font_family
        if self.font_size is not None and self.font_size > 0:
            run.font.size = Pt(self.font_size)
        if self.color:
            run.font.color.rgb = RGBColor.from_string(self.color)


DEFAULT_STYLE = StyleDescriptor()


class StyleOverride(BaseModel):
    """Caller-supplied formatting applied to substituted text only."""

    model_config = ConfigDict(frozen=True)

    bold: bool = Field(default=False, description="Force substituted text bold (or not bold)")
    italic: bool = Field(default=False, description="Force substituted text italic (or not italic)")
    font_family: str | None = Field(
        default=None,
        description="Preferred font for substituted text; blank keeps the original font",
    )

    @field_validator("font_family")
    @classmethod
    def blank_font_to_none(cls, v: str | None) -> str | None:
        """Treat an empty or whitespace-only font name as unset."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    def apply(self, style: StyleDescriptor) -> StyleDescriptor:
        """Resolve the style of a substitution segment.

        Bold and italic always come from the override. The font family is
        the override's if given, else the original run's. Size, color,
        underline and strike are left as they were.
        """
        return replace(
            style,
            bold=self.bold,
            italic=self.italic,
            font_family=first_present(self.font_family, style.font_family),
        )


@dataclass(frozen=True)
class PlaceholderMatch:
    """One ``{key}`` occurrence found in a string."""

    start: int
    end: int
    text: str
    key: str


@dataclass(frozen=True)
class TextSegment:
    """A piece of rebuilt paragraph text and the style it will carry."""

    text: str
    style: StyleDescriptor = DEFAULT_STYLE
    is_substitution: bool = False


@dataclass
class FillStats:
    """Counters collected while filling one document."""

    paragraphs_rebuilt: int = 0
    placeholders_resolved: int = 0
    placeholders_unresolved: int = 0


@dataclass(frozen=True)
class FileOutcome:
    """Result of filling one template during a batch."""

    source_path: Path
    output_path: Path | None
    relative_name: str
    success: bool
    error: str | None = None


@dataclass
class BatchSummary:
    """Aggregated result of one batch run."""

    success_count: int = 0
    failures: list[str] = field(default_factory=list)
    first_success_path: Path | None = None
    outcomes: list[FileOutcome] = field(default_factory=list)

    def record(self, outcome: FileOutcome) -> None:
        """Add a per-file outcome and update the counters."""
        self.outcomes.append(outcome)
        if outcome.success:
            self.success_count += 1
            if self.first_success_path is None:
                self.first_success_path = outcome.output_path
        else:
            self.failures.append(f"{outcome.relative_name}: {outcome.error}")

    def as_tuple(self) -> tuple[int, list[str], Path | None]:
        """Return ``(success_count, failures, first_success_path)``."""
        return self.success_count, list(self.failures), self.first_success_path
