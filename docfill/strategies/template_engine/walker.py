"""Batch directory walker.

Mirrors a folder tree of templates into an output folder, filling every
template on the way. A failure in one file is recorded and the walk moves
on to the next entry.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from docfill.interfaces.template import BaseTemplateFiller, BatchConfigurationError
from docfill.strategies.template_engine.models import BatchSummary, FileOutcome, StyleOverride

logger = logging.getLogger(__name__)


@dataclass
class _BatchState:
    source_root: Path
    dest_root: Path
    data: Mapping[str, str]
    overrides: StyleOverride
    override_name: str
    override_applied: bool
    summary: BatchSummary


class BatchDirectoryWalker:
    """Walks a template tree depth-first and fills each matching file.

    Example:
        ```python
        walker = BatchDirectoryWalker(DocxTemplateFiller())
        summary = walker.run("templates", "out", {"object_desc": "Bridge 7"})
        ```
    """

    def __init__(
        self,
        filler: BaseTemplateFiller,
        extension: str = ".docx",
        lock_prefix: str = "~$",
    ) -> None:
        """Initialize the walker.

        Args:
            filler: Strategy used to fill each template.
            extension: Template extension, matched case-insensitively.
            lock_prefix: Name prefix of editor lock files to skip.
        """
        self._filler = filler
        self._extension = extension.lower()
        self._lock_prefix = lock_prefix

    def resolve_override_name(self, override_name: str | None) -> str:
        """Trim the override name and append the extension if it is missing."""
        name = (override_name or "").strip()
        if not name:
            return ""
        if not name.lower().endswith(self._extension):
            name = f"{name}{self._extension}"
        return name

    def run(
        self,
        source_root: str | Path,
        dest_root: str | Path,
        data: Mapping[str, str],
        overrides: StyleOverride | None = None,
        override_name: str | None = "",
    ) -> BatchSummary:
        """Fill every template under ``source_root`` into ``dest_root``.

        Args:
            source_root: Folder holding the templates.
            dest_root: Folder receiving the mirrored, filled tree.
            data: Placeholder key to replacement value.
            overrides: Formatting forced onto substituted text.
            override_name: Output name for the first template found directly
                in ``source_root``. Every other file keeps its own name.

        Returns:
            Counts, failure messages and the first produced file.

        Raises:
            BatchConfigurationError: If the source is not a folder or the
                destination cannot be used as one. No file is processed.
        """
        source = Path(source_root)
        dest = Path(dest_root)
        self._check_source(source)
        self._prepare_destination(dest)
        if source.resolve() == dest.resolve():
            raise BatchConfigurationError("Output folder must be different from the template folder.")

        state = _BatchState(
            source_root=source.resolve(),
            dest_root=dest.resolve(),
            data=data,
            overrides=overrides or StyleOverride(),
            override_name=self.resolve_override_name(override_name),
            override_applied=False,
            summary=BatchSummary(),
        )

        logger.info(
            f"Starting batch: {source} -> {dest} (override name: {state.override_name or '-'})"
        )
        self._walk(source, dest, state)

        summary = state.summary
        logger.info(
            f"Batch finished: {summary.success_count} filled, {len(summary.failures)} failed"
        )
        return summary

    # =========================================================================
    # Pre-flight checks
    # =========================================================================

    def _check_source(self, source: Path) -> None:
        if not source.exists():
            logger.error(f"Template directory does not exist: {source}")
            raise BatchConfigurationError(f"Template folder does not exist: {source}")
        if not source.is_dir():
            logger.error(f"Template path is not a directory: {source}")
            raise BatchConfigurationError(f"Template path is not a folder: {source}")

    def _prepare_destination(self, dest: Path) -> None:
        if dest.exists() and not dest.is_dir():
            logger.error(f"Output path is not a directory: {dest}")
            raise BatchConfigurationError(f"Output path is not a folder: {dest}")
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create output directory: {dest}", exc_info=True)
            raise BatchConfigurationError(f"Could not create output folder: {dest}") from e

    # =========================================================================
    # Traversal
    # =========================================================================

    def _relative_name(self, path: Path, state: _BatchState) -> str:
        try:
            return path.resolve().relative_to(state.source_root).as_posix()
        except ValueError:
            return path.name

    def _walk(self, current: Path, target: Path, state: _BatchState) -> None:
        try:
            with os.scandir(current) as iterator:
                entries = list(iterator)
        except OSError as e:
            logger.error(f"Could not list directory {current}: {e}", exc_info=True)
            state.summary.record(
                FileOutcome(current, None, self._relative_name(current, state), False, str(e))
            )
            return

        for entry in entries:
            if entry.name.startswith(self._lock_prefix):
                logger.info(f"Skipping temporary Office file: {entry.name}")
                continue

            path = Path(entry.path)
            if entry.is_symlink() and entry.is_dir():
                logger.info(f"Skipping symlinked directory: {path}")
                continue
            if entry.is_dir(follow_symlinks=False):
                if path.resolve() == state.dest_root:
                    logger.info(f"Skipping output directory inside template tree: {path}")
                    continue
                sub_target = target / entry.name
                try:
                    sub_target.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.error(f"Could not create output directory: {sub_target}", exc_info=True)
                    state.summary.record(
                        FileOutcome(path, None, self._relative_name(path, state), False, str(e))
                    )
                    continue
                self._walk(path, sub_target, state)
            elif entry.is_file() and self._is_template(path):
                self._process_file(path, target, state)

    def _is_template(self, path: Path) -> bool:
        return path.suffix.lower() == self._extension and self._filler.supports_file(path)

    def _output_name(self, path: Path, state: _BatchState) -> str:
        in_root = path.parent.resolve() == state.source_root
        if state.override_name and in_root and not state.override_applied:
            logger.debug(f"Applying output name '{state.override_name}' to '{path.name}'")
            state.override_applied = True
            return state.override_name
        return path.name

    def _process_file(self, path: Path, target: Path, state: _BatchState) -> None:
        relative = self._relative_name(path, state)
        output_path = target / self._output_name(path, state)
        try:
            written = self._filler.fill(path, output_path, state.data, state.overrides)
        except Exception as e:
            logger.error(f"Error processing file: {relative}", exc_info=True)
            state.summary.record(FileOutcome(path, output_path, relative, False, str(e)))
            return

        logger.info(f"Successfully processed file: {relative} -> {written}")
        state.summary.record(FileOutcome(path, Path(written), relative, True))
