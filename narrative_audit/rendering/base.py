from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RenderedReport:
    """Rendered report document ready to be stored."""

    content: bytes
    content_type: str
    extension: str


class BaseReportRenderer(ABC):
    """Contract for all report renderers."""

    @abstractmethod
    def render(self, report_text: str, title: str) -> RenderedReport:
        """Render markdown-like report text into a complete document.

        Raises:
            RenderError: if the document cannot be produced.
        """
