"""Builders for DOCX and minimal PPTX archives used as extraction fixtures."""

import io
import zipfile

import docx

_DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
_PRESENTATION_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"


def build_docx(paragraphs: list[str], table: list[list[str]] | None = None) -> bytes:
    """Build a DOCX with python-docx holding the given paragraphs and optional table."""
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        grid = document.add_table(rows=len(table), cols=len(table[0]))
        for row, values in zip(grid.rows, table, strict=True):
            for cell, value in zip(row.cells, values, strict=True):
                cell.text = value
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def build_pptx(slides: list[list[str]]) -> bytes:
    """Build a minimal PPTX archive with one slide XML per entry."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for number, runs in enumerate(slides, start=1):
            paragraphs = "".join(f"<a:p><a:r><a:t>{text}</a:t></a:r></a:p>" for text in runs)
            slide = (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<p:sld xmlns:p="{_PRESENTATION_NS}" xmlns:a="{_DRAWING_NS}">'
                f"<p:cSld><p:spTree><p:sp><p:txBody>{paragraphs}</p:txBody></p:sp>"
                "</p:spTree></p:cSld></p:sld>"
            )
            archive.writestr(f"ppt/slides/slide{number}.xml", slide)
    return buf.getvalue()
