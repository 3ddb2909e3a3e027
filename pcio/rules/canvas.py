"""
Lay out a rules page on a fixed canvas and write it as SVG.

Page Layout (103 x 160 units):
  +-----------------------+
  | # Heading             |  <- content column, 4 units padding
  | Paragraph text that   |
  | wraps at word breaks  |
  | • list item with a    |
  |   hanging indent      |
  |                       |
  |      Page 1 of 3      |  <- footer, centered
  +-----------------------+

Text is emitted as <text> elements, not glyph paths, so the SVG names the
Verdana family and relies on the viewer for the glyphs.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field

from pcio.rules.fonts import FONT_FAMILY, FONT_SIZES, FONT_WEIGHTS, FontSet
from pcio.rules.markup import BULLET, SPACING, Block, Run, TextFlow

logger = logging.getLogger(__name__)

PAGE_WIDTH = 103
PAGE_HEIGHT = 160
PADDING = 4
FOOTER_PADDING_TOP = SPACING

BACKGROUND = "white"
INK = "black"

_WS_RE = re.compile(r"(\s+)")

# Slack for float error when a word exactly fills a line
_FIT_EPSILON = 1e-6


@dataclass
class Segment:
    """Text sharing one weight and slant within a line."""
    text: str
    bold: bool = False
    italic: bool = False


@dataclass
class Line:
    """One positioned line of text; y is the baseline."""
    x: float
    y: float
    size: float
    segments: list[Segment] = field(default_factory=list)


@dataclass
class _Word:
    text: str
    bold: bool
    italic: bool
    space_before: bool


def _words(runs: list[Run]) -> list[_Word | None]:
    """Split runs into words; None marks a forced line break."""
    words: list[_Word | None] = []
    pending_space = False
    for run in runs:
        if run.line_break:
            words.append(None)
            pending_space = False
            continue
        for piece in _WS_RE.split(run.text):
            if not piece:
                continue
            if piece.isspace():
                pending_space = True
                continue
            words.append(_Word(piece, run.bold, run.italic, pending_space))
            pending_space = False
    return words


def _groups(words: list[_Word | None]) -> list[list[_Word] | None]:
    """Join words with no space between them (e.g. **bold**text) into unbreakable groups."""
    groups: list[list[_Word] | None] = []
    for word in words:
        if word is None:
            groups.append(None)
        elif groups and groups[-1] is not None and not word.space_before:
            groups[-1].append(word)
        else:
            groups.append([word])
    return groups


def _append_text(segments: list[Segment], text: str, bold: bool, italic: bool) -> None:
    if segments and segments[-1].bold == bold and segments[-1].italic == italic:
        segments[-1].text += text
    else:
        segments.append(Segment(text, bold, italic))


def wrap_runs(runs: list[Run], size: float, width: float, fonts: FontSet) -> list[list[Segment]]:
    """
    Greedily wrap runs into lines no wider than width.

    A group wider than the whole line is placed on its own line and overflows.
    """
    lines: list[list[Segment]] = []
    current: list[Segment] = []
    current_width = 0.0

    for group in _groups(_words(runs)):
        if group is None:
            lines.append(current)
            current = []
            current_width = 0.0
            continue

        group_width = sum(fonts.measure(w.text, size, w.bold) for w in group)
        space_width = fonts.measure(" ", size, group[0].bold) if current else 0.0

        if current and current_width + space_width + group_width > width + _FIT_EPSILON:
            lines.append(current)
            current = []
            current_width = 0.0
            space_width = 0.0

        for i, word in enumerate(group):
            text = word.text
            if i == 0 and current:
                text = " " + text
            _append_text(current, text, word.bold, word.italic)
        current_width += space_width + group_width

    if current or not lines:
        lines.append(current)
    return lines


def _layout_flow(flow: TextFlow, block: Block, x: float, y: float, width: float,
                 fonts: FontSet, lines: list[Line]) -> float:
    size = FONT_SIZES[block.size]
    ascent = fonts.ascent(size)
    line_height = fonts.line_height(size)
    for segments in wrap_runs(flow.runs, size, width, fonts):
        lines.append(Line(x, y + ascent, size, segments))
        y += line_height
    return y


def _layout_items(block: Block, x: float, y: float, width: float,
                  fonts: FontSet, lines: list[Line]) -> float:
    for item in block.items:
        if isinstance(item, TextFlow):
            y = _layout_flow(item, block, x, y, width, fonts, lines)
        else:
            y = _layout_block(item, x, y, width, fonts, lines)
    return y


def _layout_block(block: Block, x: float, y: float, width: float,
                  fonts: FontSet, lines: list[Line]) -> float:
    """Lay out a block at (x, y); returns the y just below it, margin included."""
    if block.style.bullet:
        size = FONT_SIZES[block.size]
        bullet_width = fonts.measure(BULLET, size, block.bold)
        lines.append(Line(x, y + fonts.ascent(size), size, [Segment(BULLET.rstrip(), block.bold)]))
        end = _layout_items(block, x + bullet_width, y, width - bullet_width, fonts, lines)
        y = max(end, y + fonts.line_height(size))
    else:
        y = _layout_items(block, x, y, width, fonts, lines)
    return y + block.style.margin_bottom


def layout_page(content: Block, page: int, num_pages: int, fonts: FontSet) -> list[Line]:
    """Position the content column and the footer for one page."""
    lines: list[Line] = []

    footer_size = FONT_SIZES["base"]
    footer_text = f"Page {page} of {num_pages}"
    footer_top = PAGE_HEIGHT - PADDING - fonts.line_height(footer_size) - FOOTER_PADDING_TOP

    end = _layout_block(content, PADDING, PADDING, PAGE_WIDTH - 2 * PADDING, fonts, lines)
    if end > footer_top:
        logger.warning(f"Rules page {page} overflows the page by {end - footer_top:.1f} units")

    footer_width = fonts.measure(footer_text, footer_size)
    lines.append(Line(
        (PAGE_WIDTH - footer_width) / 2,
        footer_top + FOOTER_PADDING_TOP + fonts.ascent(footer_size),
        footer_size,
        [Segment(footer_text)],
    ))
    return lines


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _tspan(segment: Segment) -> str:
    attrs = f'font-weight="{FONT_WEIGHTS[segment.bold]}"'
    if segment.italic:
        attrs += ' font-style="italic"'
    return f"<tspan {attrs}>{html.escape(segment.text, quote=False)}</tspan>"


def to_svg(lines: list[Line]) -> str:
    """Serialize positioned lines as an SVG document."""
    parts = [
        f'<svg width="{PAGE_WIDTH}" height="{PAGE_HEIGHT}" viewBox="0 0 {PAGE_WIDTH} {PAGE_HEIGHT}" '
        f'xmlns="http://www.w3.org/2000/svg">',
        f'<rect x="0" y="0" width="{PAGE_WIDTH}" height="{PAGE_HEIGHT}" fill="{BACKGROUND}"/>',
    ]
    for line in lines:
        if not line.segments:
            continue
        spans = "".join(_tspan(s) for s in line.segments)
        parts.append(
            f'<text x="{_num(line.x)}" y="{_num(line.y)}" font-family="{FONT_FAMILY}" '
            f'font-size="{_num(line.size)}" fill="{INK}" xml:space="preserve">{spans}</text>'
        )
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def render_page(content: Block, page: int, num_pages: int, fonts: FontSet) -> str:
    """Render one parsed page to SVG markup."""
    return to_svg(layout_page(content, page, num_pages, fonts))
