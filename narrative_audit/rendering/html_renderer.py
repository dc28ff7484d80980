import html

from narrative_audit.rendering.base import BaseReportRenderer, RenderedReport
from narrative_audit.rendering.markdown import Block, parse_blocks, render_inline

HTML_CONTENT_TYPE = "text/html; charset=utf-8"

_STYLE = """
body {
  margin: 0;
  padding: 0;
  background: #f6f5f2;
  color: #1f1f1f;
  font-family: Georgia, "Times New Roman", serif;
  line-height: 1.65;
}
main {
  max-width: 820px;
  margin: 0 auto;
  padding: 48px 40px 72px;
  background: #ffffff;
}
header.report-header {
  border-bottom: 2px solid #1f1f1f;
  margin-bottom: 32px;
  padding-bottom: 16px;
}
header.report-header p {
  margin: 0;
  color: #6b6b6b;
  font-size: 0.9em;
  letter-spacing: 0.08em;
  text-transform: uppercase;
}
h1, h2, h3, h4, h5, h6 {
  font-family: "Helvetica Neue", Arial, sans-serif;
  line-height: 1.3;
}
h2 { margin-top: 2.2em; border-bottom: 1px solid #e2e0da; padding-bottom: 6px; }
h3 { margin-top: 1.6em; }
blockquote {
  margin: 1.2em 0;
  padding: 0.6em 1.2em;
  border-left: 4px solid #b8a47e;
  background: #faf8f3;
  font-style: italic;
}
code {
  font-family: Menlo, Consolas, monospace;
  font-size: 0.9em;
  background: #f0eee9;
  padding: 1px 4px;
}
hr { border: none; border-top: 1px solid #e2e0da; margin: 2em 0; }
li { margin-bottom: 0.35em; }
""".strip()


def markdown_to_html(report_text: str) -> str:
    """Convert markdown-like report text to an HTML fragment."""
    return "\n".join(_render_block(block) for block in parse_blocks(report_text))


def _render_block(block: Block) -> str:
    if block.kind == "heading":
        return f"<h{block.level}>{render_inline(block.text)}</h{block.level}>"
    if block.kind == "rule":
        return "<hr>"
    if block.kind == "quote":
        return f"<blockquote><p>{render_inline(block.text)}</p></blockquote>"
    if block.kind == "list":
        tag = "ol" if block.ordered else "ul"
        items = "\n".join(f"  <li>{render_inline(item)}</li>" for item in block.items)
        return f"<{tag}>\n{items}\n</{tag}>"
    return f"<p>{render_inline(block.text)}</p>"


class HtmlReportRenderer(BaseReportRenderer):
    """Renders the report as a single self-contained, styled HTML page."""

    def render(self, report_text: str, title: str) -> RenderedReport:
        safe_title = html.escape(title)
        document = (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            "<head>\n"
            '<meta charset="utf-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
            f"<title>{safe_title}</title>\n"
            f"<style>\n{_STYLE}\n</style>\n"
            "</head>\n"
            "<body>\n"
            "<main>\n"
            f'<header class="report-header"><p>{safe_title}</p></header>\n'
            f"{markdown_to_html(report_text)}\n"
            "</main>\n"
            "</body>\n"
            "</html>\n"
        )
        return RenderedReport(
            content=document.encode("utf-8"),
            content_type=HTML_CONTENT_TYPE,
            extension="html",
        )
