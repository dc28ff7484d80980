"""Minimal block/inline parser for the markdown the model produces.

Only the constructs reports actually use are recognised: ATX headings,
paragraphs, bullet and numbered lists, block quotes, horizontal rules and
bold/italic/code spans. Everything else is treated as paragraph text.
"""

import html
import re
from dataclasses import dataclass

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_RULE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")
_BULLET = re.compile(r"^\s*[-*+]\s+(.*)$")
_NUMBERED = re.compile(r"^\s*\d+[.)]\s+(.*)$")
_QUOTE = re.compile(r"^\s*>\s?(.*)$")

_CODE = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*(.+?)\*\*|__(.+?)__")
_ITALIC = re.compile(
    r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?!\*)|(?<![\w_])_(?!\s)(.+?)(?<!\s)_(?![\w_])"
)


@dataclass(frozen=True)
class Block:
    kind: str
    text: str = ""
    level: int = 0
    items: tuple[str, ...] = ()
    ordered: bool = False


@dataclass(frozen=True)
class InlineTags:
    """Markup emitted for inline spans by a particular output format."""

    bold: tuple[str, str] = ("<strong>", "</strong>")
    italic: tuple[str, str] = ("<em>", "</em>")
    code: tuple[str, str] = ("<code>", "</code>")
    escape_quotes: bool = True


HTML_TAGS = InlineTags()


class _BlockParser:
    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self._paragraph: list[str] = []
        self._quote: list[str] = []
        self._items: list[str] = []
        self._ordered = False

    def feed(self, line: str) -> None:
        if not line.strip():
            self.flush()
            return

        heading = _HEADING.match(line)
        if heading:
            self.flush()
            self.blocks.append(
                Block("heading", text=heading.group(2), level=len(heading.group(1)))
            )
            return

        if _RULE.match(line):
            self.flush()
            self.blocks.append(Block("rule"))
            return

        quote = _QUOTE.match(line)
        if quote:
            self._flush_paragraph()
            self._flush_list()
            self._quote.append(quote.group(1).strip())
            return

        bullet = _BULLET.match(line)
        numbered = None if bullet else _NUMBERED.match(line)
        if bullet or numbered:
            ordered = numbered is not None
            if self._items and ordered != self._ordered:
                self._flush_list()
            self._flush_paragraph()
            self._flush_quote()
            self._ordered = ordered
            self._items.append((bullet or numbered).group(1).strip())
            return

        if self._items and line[:1].isspace():
            self._items[-1] = f"{self._items[-1]} {line.strip()}"
            return

        self._flush_list()
        self._flush_quote()
        self._paragraph.append(line.strip())

    def flush(self) -> None:
        self._flush_paragraph()
        self._flush_quote()
        self._flush_list()

    def _flush_paragraph(self) -> None:
        if self._paragraph:
            self.blocks.append(Block("paragraph", text=" ".join(self._paragraph)))
            self._paragraph = []

    def _flush_quote(self) -> None:
        if self._quote:
            self.blocks.append(Block("quote", text=" ".join(self._quote)))
            self._quote = []

    def _flush_list(self) -> None:
        if self._items:
            self.blocks.append(
                Block("list", items=tuple(self._items), ordered=self._ordered)
            )
            self._items = []


def parse_blocks(text: str) -> list[Block]:
    parser = _BlockParser()
    for line in text.splitlines():
        parser.feed(line)
    parser.flush()
    return parser.blocks


def render_inline(text: str, tags: InlineTags = HTML_TAGS) -> str:
    """Escape text and convert code, bold and italic spans to markup."""
    parts: list[str] = []
    last = 0
    for match in _CODE.finditer(text):
        parts.append(_emphasis(text[last : match.start()], tags))
        code = html.escape(match.group(1), quote=tags.escape_quotes)
        parts.append(f"{tags.code[0]}{code}{tags.code[1]}")
        last = match.end()
    parts.append(_emphasis(text[last:], tags))
    return "".join(parts)


def _emphasis(segment: str, tags: InlineTags) -> str:
    escaped = html.escape(segment, quote=tags.escape_quotes)
    escaped = _BOLD.sub(
        lambda m: f"{tags.bold[0]}{m.group(1) or m.group(2)}{tags.bold[1]}", escaped
    )
    return _ITALIC.sub(
        lambda m: f"{tags.italic[0]}{m.group(1) or m.group(2)}{tags.italic[1]}", escaped
    )
