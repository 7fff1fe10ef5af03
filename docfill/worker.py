"""Processing service and background runner.

Turns a filled-in form into a batch run, summarises the result for the
user and loads the preview text. Batches run one at a time on a single
background thread so a UI stays responsive.
"""

import enum
import logging
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from pydantic import BaseModel, Field

from docfill.core.factory import ComponentFactory
from docfill.interfaces.template import BatchConfigurationError
from docfill.schemas import ProcessingRequest
from docfill.strategies.template_engine import BatchSummary, StyleOverride

logger = logging.getLogger(__name__)

PREVIEW_PLACEHOLDER = (
    "The document preview will appear here.\n\n"
    "Choose the template and output folders, fill in the form, then press \"Fill documents\"."
)
NO_TEMPLATES_MESSAGE = "No .docx files found in the template folder."


class ProcessingError(Exception):
    """Raised when a request is rejected before any file is touched."""

    pass


class ProcessingStatus(str, enum.Enum):
    """State of the current fill request.

    IDLE -> PROCESSING -> SUCCESS
                    |
                    v
                  ERROR
    """

    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class ProcessingState(BaseModel):
    """What the UI shows after (or while) a batch runs."""

    status: ProcessingStatus = ProcessingStatus.IDLE
    message: str = ""
    preview_text: str = Field(default=PREVIEW_PLACEHOLDER)
    preview_path: str | None = None
    preview_file_name: str | None = None


# =============================================================================
# Collaborator entry points
# =============================================================================


def fill_batch(
    source_dir: str | Path,
    dest_dir: str | Path,
    override_file_name: str,
    data: Mapping[str, str],
    force_bold: bool = False,
    force_italic: bool = False,
    preferred_font_family: str | None = None,
    factory: ComponentFactory | None = None,
) -> tuple[int, list[str], Path | None]:
    """Fill every template under ``source_dir`` into ``dest_dir``.

    Returns:
        ``(success_count, failure_messages, first_success_path)``.

    Raises:
        BatchConfigurationError: If either folder is unusable.
    """
    factory = factory or ComponentFactory()
    overrides = StyleOverride(
        bold=force_bold,
        italic=force_italic,
        font_family=preferred_font_family,
    )
    summary = factory.get_walker().run(source_dir, dest_dir, data, overrides, override_file_name)
    return summary.as_tuple()


def extract_preview_text(path: str | Path, factory: ComponentFactory | None = None) -> str:
    """Return the plain text of a document, or an error message."""
    factory = factory or ComponentFactory()
    return factory.get_extractor().extract_text(path)


# =============================================================================
# Processing service
# =============================================================================


def _bullets(messages: list[str]) -> str:
    return "\n - ".join(messages)


class DocumentProcessor:
    """Validates a request, runs the batch and builds the resulting state."""

    def __init__(self, factory: ComponentFactory | None = None) -> None:
        self._factory = factory or ComponentFactory()

    def validate(self, request: ProcessingRequest) -> None:
        """Reject requests that cannot produce useful documents.

        Raises:
            ProcessingError: If a folder or an object instance is missing.
        """
        if not request.template_dir.strip() or not request.output_dir.strip():
            raise ProcessingError("Please choose both template and output folders.")

        missing = request.form.missing_instances()
        if missing:
            numbers = ", ".join(str(number) for number in missing)
            raise ProcessingError(
                f"Please fill in the name and project number for all "
                f"{len(request.form.instances)} objects (missing: {numbers})."
            )

    def process(self, request: ProcessingRequest) -> ProcessingState:
        """Fill the request's templates and summarise the outcome."""
        logger.debug(
            f"Processing request: template_dir='{request.template_dir}', "
            f"output_dir='{request.output_dir}', output_file_name='{request.output_file_name}', "
            f"style={request.style.model_dump()}"
        )

        try:
            self.validate(request)
        except ProcessingError as e:
            return ProcessingState(status=ProcessingStatus.ERROR, message=str(e))

        try:
            summary = self._factory.get_walker().run(
                request.template_path,
                request.output_path,
                request.form.to_data_map(),
                request.style,
                request.output_file_name,
            )
        except BatchConfigurationError as e:
            logger.error(f"Batch could not start: {e}")
            return ProcessingState(
                status=ProcessingStatus.ERROR,
                message=str(e),
                preview_text=f"An error occurred: {e}",
            )
        except Exception as e:
            logger.error("Error processing documents", exc_info=True)
            return ProcessingState(
                status=ProcessingStatus.ERROR,
                message=f"Unexpected error: {e}",
                preview_text=f"An error occurred: {e}",
            )

        return self.summarize(summary)

    def summarize(self, summary: BatchSummary) -> ProcessingState:
        """Build the user-facing state for a finished batch."""
        if summary.success_count > 0:
            message = f"{summary.success_count} document template(s) filled successfully."
            if summary.failures:
                message += f"\nErrors occurred in the following files:\n - {_bullets(summary.failures)}"

            preview_path = summary.first_success_path
            if preview_path is None:
                preview_text = "Documents were filled, but no file is available for preview."
            else:
                preview_text = self._factory.get_extractor().extract_text(preview_path)

            return ProcessingState(
                status=ProcessingStatus.SUCCESS,
                message=message,
                preview_text=preview_text,
                preview_path=str(preview_path) if preview_path else None,
                preview_file_name=preview_path.name if preview_path else None,
            )

        if not summary.failures:
            return ProcessingState(
                status=ProcessingStatus.ERROR,
                message=NO_TEMPLATES_MESSAGE,
                preview_text=NO_TEMPLATES_MESSAGE,
            )

        combined = f"Error while processing documents:\n - {_bullets(summary.failures)}"
        return ProcessingState(
            status=ProcessingStatus.ERROR,
            message=combined,
            preview_text=combined,
        )


class BackgroundRunner:
    """Runs processing requests one at a time off the caller's thread."""

    def __init__(self, processor: DocumentProcessor | None = None) -> None:
        self._processor = processor or DocumentProcessor()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docfill")
        self._current: Future | None = None

    @property
    def busy(self) -> bool:
        return self._current is not None and not self._current.done()

    def submit(self, request: ProcessingRequest) -> "Future[ProcessingState]":
        """Queue a request; the returned future resolves to its state."""
        logger.info(f"Queueing batch for {request.template_dir}")
        self._current = self._executor.submit(self._processor.process, request)
        return self._current

    def state(self) -> ProcessingState:
        """Current state: processing while a batch runs, else its result."""
        if self._current is None:
            return ProcessingState()
        if not self._current.done():
            return ProcessingState(
                status=ProcessingStatus.PROCESSING,
                message="Processing documents...",
                preview_text="Processing documents...",
            )
        return self._current.result()

    def shutdown(self) -> None:
        """Wait for the running batch and stop the worker thread."""
        self._executor.shutdown(wait=True)
