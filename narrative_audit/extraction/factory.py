from typing import ClassVar

from narrative_audit.config.settings import Settings
from narrative_audit.extraction.extractor import TextExtractor
from narrative_audit.extraction.handlers import (
    BaseFormatHandler,
    DocxHandler,
    HtmlHandler,
    PdfPlumberHandler,
    PlainTextHandler,
    PptxHandler,
    PyMuPdfHandler,
)


class TextExtractorFactory:
    """Creates a TextExtractor with the configured PDF engine."""

    PDF_ENGINES: ClassVar[dict[str, type[BaseFormatHandler]]] = {
        "pdfplumber": PdfPlumberHandler,
        "pymupdf": PyMuPdfHandler,
    }

    @classmethod
    def create(cls, settings: Settings) -> TextExtractor:
        engine = settings.pdf_engine.lower()
        pdf_handler_cls = cls.PDF_ENGINES.get(engine)
        if pdf_handler_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ENGINES)}"
            )

        html = HtmlHandler()
        markdown = PlainTextHandler(file_type="Markdown")
        return TextExtractor(
            {
                ".pdf": pdf_handler_cls(),
                ".docx": DocxHandler(),
                ".pptx": PptxHandler(),
                ".html": html,
                ".htm": html,
                ".txt": PlainTextHandler(file_type="TXT"),
                ".md": markdown,
                ".markdown": markdown,
            }
        )
