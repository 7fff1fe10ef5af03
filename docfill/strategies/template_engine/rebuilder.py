"""Paragraph rebuilder.

Replaces placeholders inside one python-docx paragraph while keeping the
formatting of the text around them.

Word splits paragraph text into runs, and a placeholder the user typed as
``{object_name}`` can end up spread over several runs (``{object`` and
``_name}``) after spell-checking or partial edits. The rebuilder therefore
scans the concatenated run text, cuts it back into pieces along the
original run boundaries, and then replaces each run in place with the new
runs cut from it.
"""

import logging
from collections.abc import Mapping, Sequence

from docfill.strategies.template_engine.models import (
    DEFAULT_STYLE,
    FillStats,
    StyleDescriptor,
    StyleOverride,
    TextSegment,
)
from docfill.strategies.template_engine.scanner import contains_placeholder, scan_placeholders

logger = logging.getLogger(__name__)

RunSnapshot = tuple[str | None, StyleDescriptor]


def _run_text(run) -> str | None:
    try:
        return run.text
    except Exception as e:
        logger.debug(f"Skipping run with unreadable text: {e}")
        return None


class ParagraphRebuilder:
    """Fills placeholders in paragraphs using one data map and style override.

    One instance is used for a whole document; ``stats`` accumulates
    across every paragraph it rebuilds.
    """

    def __init__(
        self,
        data: Mapping[str, str],
        overrides: StyleOverride | None = None,
    ) -> None:
        """Initialize the rebuilder.

        Args:
            data: Placeholder key to replacement value.
            overrides: Formatting forced onto substituted text.
        """
        self._data = data
        self._overrides = overrides or StyleOverride()
        self.stats = FillStats()

    # =========================================================================
    # Segmentation
    # =========================================================================

    def build_segments(
        self,
        runs: Sequence[RunSnapshot],
        paragraph_text: str = "",
    ) -> list[TextSegment]:
        """Compute the new segment list for a paragraph.

        Args:
            runs: ``(text, style)`` for each existing run, in order. A None
                text marks an unreadable run, which is dropped.
            paragraph_text: Flattened paragraph text, used only when the
                paragraph has no runs.

        Returns:
            Segments whose texts concatenate to the filled paragraph text.
        """
        if not runs:
            return self._segments_from_text(paragraph_text)
        return [segment for group in self._segments_per_run(runs) for segment in group]

    def _segments_from_text(self, text: str) -> list[TextSegment]:
        segments: list[TextSegment] = []
        position = 0
        for match in scan_placeholders(text):
            if match.start > position:
                segments.append(TextSegment(text[position:match.start], DEFAULT_STYLE))
            if match.key in self._data:
                self.stats.placeholders_resolved += 1
                segments.append(TextSegment(self._data[match.key], DEFAULT_STYLE, True))
            else:
                self.stats.placeholders_unresolved += 1
                segments.append(TextSegment(match.text, DEFAULT_STYLE))
            position = match.end
        if position < len(text):
            segments.append(TextSegment(text[position:], DEFAULT_STYLE))
        return segments

    def _segments_per_run(self, runs: Sequence[RunSnapshot]) -> list[list[TextSegment]]:
        """Segment the runs, keeping one group per input run.

        An unreadable run gets an empty group.
        """
        full_text = "".join(text for text, _ in runs if text is not None)
        matches = list(scan_placeholders(full_text))

        for match in matches:
            if match.key in self._data:
                self.stats.placeholders_resolved += 1
            else:
                self.stats.placeholders_unresolved += 1

        groups: list[list[TextSegment]] = []
        match_index = 0
        run_start = 0
        for text, style in runs:
            segments: list[TextSegment] = []
            groups.append(segments)
            if text is None:
                continue
            run_end = run_start + len(text)
            if run_start == run_end:
                segments.append(TextSegment(text, style))
                continue

            position = run_start
            while position < run_end:
                match = matches[match_index] if match_index < len(matches) else None
                if match is None or match.start >= run_end:
                    segments.append(TextSegment(full_text[position:run_end], style))
                    position = run_end
                    break

                if match.start > position:
                    segments.append(TextSegment(full_text[position:match.start], style))
                    position = match.start

                piece_end = min(match.end, run_end)
                if match.key in self._data:
                    # The run holding the opening brace carries the value;
                    # later fragments of a split placeholder add nothing.
                    if match.start >= run_start:
                        segments.append(TextSegment(self._data[match.key], style, True))
                else:
                    segments.append(TextSegment(full_text[position:piece_end], style))
                position = piece_end

                if match.end <= run_end:
                    match_index += 1

            run_start = run_end

        return groups

    # =========================================================================
    # Paragraph mutation
    # =========================================================================

    def needs_rebuild(self, paragraph) -> bool:
        """Return True if the paragraph holds at least one placeholder."""
        runs = paragraph.runs
        if not runs:
            return contains_placeholder(paragraph.text)
        texts = [_run_text(run) for run in runs]
        if any(contains_placeholder(text) for text in texts):
            return True
        return contains_placeholder("".join(text for text in texts if text is not None))

    def resolve_style(self, segment: TextSegment) -> StyleDescriptor:
        """Return the style a new run for ``segment`` should get."""
        if segment.is_substitution:
            return self._overrides.apply(segment.style)
        return segment.style

    def rebuild(self, paragraph) -> bool:
        """Fill the placeholders of one paragraph in place.

        Paragraphs without placeholders are left untouched.

        Args:
            paragraph: A python-docx ``Paragraph``.

        Returns:
            True if the paragraph's runs were replaced.
        """
        if not self.needs_rebuild(paragraph):
            return False

        logger.debug(f"Rebuilding paragraph: {paragraph.text!r}")

        original_runs = list(paragraph.runs)
        if not original_runs:
            self._rebuild_flattened(paragraph)
        else:
            self._rebuild_runs(paragraph, original_runs)

        self.stats.paragraphs_rebuilt += 1
        return True

    def _add_run(self, paragraph, segment: TextSegment):
        new_run = paragraph.add_run(segment.text)
        self.resolve_style(segment).apply_to(new_run)
        return new_run

    def _rebuild_runs(self, paragraph, original_runs) -> None:
        snapshots = [(_run_text(run), StyleDescriptor.from_run(run)) for run in original_runs]
        groups = self._segments_per_run(snapshots)

        # Each run's replacements take its place, so hyperlinks and fields
        # between runs keep their position.
        for run, segments in zip(original_runs, groups):
            anchor = run._r
            for segment in segments:
                anchor.addprevious(self._add_run(paragraph, segment)._r)
            anchor.getparent().remove(anchor)

    def _rebuild_flattened(self, paragraph) -> None:
        segments = self._segments_from_text(paragraph.text)
        # Text without direct runs lives in hyperlinks; it is re-emitted as plain runs.
        for hyperlink in paragraph._p.xpath("./w:hyperlink"):
            paragraph._p.remove(hyperlink)
        for segment in segments:
            self._add_run(paragraph, segment)
