"""Format handlers: one class per supported document format.

Every handler turns raw bytes into plain text and signals failure with
ExtractionError. The PPTX handler is the exception: it never fails and falls
back to a placeholder text instead.
"""

import io
import re
import zipfile
from abc import ABC, abstractmethod
from xml.etree import ElementTree as ET

import docx
import pdfplumber
import pymupdf
from bs4 import BeautifulSoup

from narrative_audit.extraction.exceptions import ExtractionError
from narrative_audit.logging.logger import Log

PPTX_PLACEHOLDER = "[PPTX content - text extraction limited]"

_DRAWING_NS = "{http://schemas.openxmlformats.org/drawingml/2006/main}"
_SLIDE_PATH = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


class BaseFormatHandler(ABC):
    """Contract for all text extraction handlers."""

    file_type: str = "Unknown"

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """Extract plain text from raw file bytes.

        Raises:
            ExtractionError: if the content cannot be decoded.
        """


class PdfPlumberHandler(BaseFormatHandler):
    """Extracts PDF text page by page using pdfplumber."""

    file_type = "PDF"

    def extract(self, data: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"PDF extraction error: {exc}") from exc
        return "\n".join(pages).strip()


class PyMuPdfHandler(BaseFormatHandler):
    """Extracts PDF text page by page using PyMuPDF."""

    file_type = "PDF"

    def extract(self, data: bytes) -> str:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise ExtractionError(f"PDF extraction error: {exc}") from exc
        return "\n".join(pages).strip()


class DocxHandler(BaseFormatHandler):
    """Body paragraphs, then table rows, one line each. Formatting ignored."""

    file_type = "DOCX"

    def extract(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as exc:
            raise ExtractionError(f"DOCX extraction error: {exc}") from exc

        lines = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                lines.append("\t".join(cell.text for cell in row.cells))
        return "\n".join(lines).strip()


class PptxHandler(BaseFormatHandler):
    """Best-effort slide text. Degrades to a placeholder instead of failing."""

    file_type = "PPTX"

    def extract(self, data: bytes) -> str:
        try:
            return self._extract_slides(data)
        except Exception as exc:
            Log.warning(f"PPTX extraction limited, using placeholder: {exc}")
            return PPTX_PLACEHOLDER

    @staticmethod
    def _extract_slides(data: bytes) -> str:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            numbered = []
            for name in archive.namelist():
                match = _SLIDE_PATH.match(name)
                if match:
                    numbered.append((int(match.group(1)), name))
            if not numbered:
                raise ExtractionError("no slides found in presentation")

            slides: list[str] = []
            for _number, name in sorted(numbered):
                root = ET.fromstring(archive.read(name))
                lines = []
                for paragraph in root.iter(f"{_DRAWING_NS}p"):
                    line = "".join(
                        node.text or "" for node in paragraph.iter(f"{_DRAWING_NS}t")
                    ).strip()
                    if line:
                        lines.append(line)
                if lines:
                    slides.append("\n".join(lines))
        return "\n\n".join(slides).strip()


class HtmlHandler(BaseFormatHandler):
    """Visible text of an HTML page with script/style removed."""

    file_type = "HTML"

    def extract(self, data: bytes) -> str:
        try:
            soup = BeautifulSoup(data.decode("utf-8", errors="replace"), "html.parser")
        except Exception as exc:
            raise ExtractionError(f"HTML extraction error: {exc}") from exc

        for tag in soup(["script", "style"]):
            tag.decompose()
        return normalize_whitespace(soup.get_text())


class PlainTextHandler(BaseFormatHandler):
    """UTF-8 text and markdown, passed through trimmed."""

    def __init__(self, file_type: str = "TXT") -> None:
        self.file_type = file_type

    def extract(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace").strip()


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space and blank-line runs to one blank line."""
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
