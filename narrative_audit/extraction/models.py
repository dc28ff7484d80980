from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceFile:
    """Raw bytes of one downloaded upload."""

    filename: str
    raw_bytes: bytes
    size: int | None = None


@dataclass(frozen=True)
class ExtractedDocument:
    """Plain text extracted from one file, with simple stats."""

    filename: str
    text: str
    file_type: str
    character_count: int
    word_count: int

    def stats(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "type": self.file_type,
            "characterCount": self.character_count,
            "wordCount": self.word_count,
        }


@dataclass(frozen=True)
class ExtractionFailure:
    """Per-file extraction error. Never fatal for the batch."""

    filename: str
    error: str


FILE_MARKER = "=== FILE: {filename} ==="


@dataclass
class ExtractionBatch:
    """Aggregate result of extracting a list of files."""

    documents: list[ExtractedDocument] = field(default_factory=list)
    errors: list[ExtractionFailure] = field(default_factory=list)
    total_files: int = 0

    @property
    def successful_extractions(self) -> int:
        return len(self.documents)

    @property
    def success(self) -> bool:
        return self.successful_extractions > 0

    @property
    def file_stats(self) -> list[dict[str, object]]:
        return [document.stats() for document in self.documents]

    @property
    def combined_text(self) -> str:
        """All extracted texts in input order, each under a FILE marker."""
        return "\n\n".join(
            f"{FILE_MARKER.format(filename=doc.filename)}\n\n{doc.text}"
            for doc in self.documents
        )
