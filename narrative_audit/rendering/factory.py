from typing import ClassVar

from narrative_audit.config.settings import Settings
from narrative_audit.logging.logger import Log
from narrative_audit.rendering.base import BaseReportRenderer, RenderedReport
from narrative_audit.rendering.exceptions import RenderError
from narrative_audit.rendering.html_renderer import HtmlReportRenderer
from narrative_audit.rendering.pdf_renderer import ReportLabPdfRenderer


class FallbackReportRenderer(BaseReportRenderer):
    """Tries the primary renderer and degrades to the fallback on RenderError."""

    def __init__(self, primary: BaseReportRenderer, fallback: BaseReportRenderer) -> None:
        self._primary = primary
        self._fallback = fallback

    def render(self, report_text: str, title: str) -> RenderedReport:
        try:
            return self._primary.render(report_text, title)
        except RenderError as exc:
            Log.warning(f"Primary renderer failed, falling back: {exc}")
            return self._fallback.render(report_text, title)


class ReportRendererFactory:
    """Creates the renderer for the configured report format."""

    FORMATS: ClassVar[tuple[str, ...]] = ("html", "pdf")

    @classmethod
    def create(cls, settings: Settings) -> BaseReportRenderer:
        report_format = settings.report_format.lower()
        if report_format == "html":
            return HtmlReportRenderer()
        if report_format == "pdf":
            return FallbackReportRenderer(
                primary=ReportLabPdfRenderer(),
                fallback=HtmlReportRenderer(),
            )
        raise ValueError(
            f"Unknown report format '{report_format}'. Choose from: {list(cls.FORMATS)}"
        )
