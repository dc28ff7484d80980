from collections.abc import Iterable, Mapping
from pathlib import PurePath

from narrative_audit.extraction.exceptions import ExtractionError
from narrative_audit.extraction.handlers import BaseFormatHandler
from narrative_audit.extraction.models import (
    ExtractedDocument,
    ExtractionBatch,
    ExtractionFailure,
    SourceFile,
)
from narrative_audit.logging.logger import Log


class TextExtractor:
    """Converts a batch of uploaded files to text, isolating per-file failures.

    Handlers are looked up by lower-cased filename extension. A file that
    fails never aborts the batch; it is reported as an ExtractionFailure.
    """

    def __init__(self, handlers: Mapping[str, BaseFormatHandler]) -> None:
        self._handlers = {ext.lower(): handler for ext, handler in handlers.items()}

    @property
    def supported_extensions(self) -> list[str]:
        return sorted(self._handlers)

    def extract_all(self, files: Iterable[SourceFile]) -> ExtractionBatch:
        batch = ExtractionBatch()
        for source in files:
            batch.total_files += 1
            result = self.extract_file(source)
            if isinstance(result, ExtractionFailure):
                Log.warning(f"Extraction failed for {source.filename}: {result.error}")
                batch.errors.append(result)
            else:
                batch.documents.append(result)

        Log.info(
            f"Extracted text from {batch.successful_extractions}/{batch.total_files} files",
            failed_files=len(batch.errors),
        )
        return batch

    def extract_file(self, source: SourceFile) -> ExtractedDocument | ExtractionFailure:
        extension = PurePath(source.filename).suffix.lower()
        handler = self._handlers.get(extension)
        if handler is None:
            return ExtractionFailure(
                filename=source.filename,
                error=f"Unsupported file type: {extension}",
            )

        try:
            text = handler.extract(source.raw_bytes)
        except ExtractionError as exc:
            return ExtractionFailure(filename=source.filename, error=str(exc))
        except Exception as exc:
            return ExtractionFailure(
                filename=source.filename,
                error=f"Extraction failed: {exc}",
            )

        return ExtractedDocument(
            filename=source.filename,
            text=text,
            file_type=handler.file_type,
            character_count=len(text),
            word_count=len(text.split()),
        )
