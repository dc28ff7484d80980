import io

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    HRFlowable,
    ListFlowable,
    ListItem,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
)
from reportlab.platypus.flowables import Flowable

from narrative_audit.rendering.base import BaseReportRenderer, RenderedReport
from narrative_audit.rendering.exceptions import RenderError
from narrative_audit.rendering.markdown import Block, InlineTags, parse_blocks, render_inline

PDF_CONTENT_TYPE = "application/pdf"

_PDF_TAGS = InlineTags(
    bold=("<b>", "</b>"),
    italic=("<i>", "</i>"),
    code=('<font face="Courier">', "</font>"),
    escape_quotes=False,
)


class ReportLabPdfRenderer(BaseReportRenderer):
    """Renders the report to PDF with reportlab's platypus layout engine."""

    def __init__(self) -> None:
        styles = getSampleStyleSheet()
        self._title_style = styles["Title"]
        self._headings = {level: styles[f"Heading{level}"] for level in range(1, 7)}
        self._body = styles["BodyText"]
        self._quote = ParagraphStyle(
            "ReportQuote",
            parent=styles["BodyText"],
            leftIndent=12 * mm,
            rightIndent=6 * mm,
            fontName="Helvetica-Oblique",
            textColor=HexColor("#444444"),
        )

    def render(self, report_text: str, title: str) -> RenderedReport:
        buffer = io.BytesIO()
        document = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=title,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
        )
        # Paragraph parses its markup on construction.
        try:
            story: list[Flowable] = [
                Paragraph(render_inline(title, _PDF_TAGS), self._title_style),
                Spacer(1, 6 * mm),
            ]
            story.extend(self._flowable(block) for block in parse_blocks(report_text))
            document.build(story)
        except Exception as exc:
            raise RenderError(f"PDF rendering error: {exc}") from exc

        return RenderedReport(
            content=buffer.getvalue(),
            content_type=PDF_CONTENT_TYPE,
            extension="pdf",
        )

    def _flowable(self, block: Block) -> Flowable:
        if block.kind == "heading":
            return Paragraph(render_inline(block.text, _PDF_TAGS), self._headings[block.level])
        if block.kind == "rule":
            return HRFlowable(
                width="100%",
                thickness=0.5,
                color=HexColor("#bbbbbb"),
                spaceBefore=6,
                spaceAfter=6,
            )
        if block.kind == "quote":
            return Paragraph(render_inline(block.text, _PDF_TAGS), self._quote)
        if block.kind == "list":
            return ListFlowable(
                [
                    ListItem(Paragraph(render_inline(item, _PDF_TAGS), self._body))
                    for item in block.items
                ],
                bulletType="1" if block.ordered else "bullet",
            )
        return Paragraph(render_inline(block.text, _PDF_TAGS), self._body)
