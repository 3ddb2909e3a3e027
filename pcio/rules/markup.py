"""
Convert rules markdown into styled block markup.

Each page of rules.md is parsed with the `markdown` library and its element
tree is mapped onto Blocks through the STYLES table:

  h1   bold, xl size, bottom margin
  h3   bold, lg size, bottom margin
  h4   bold
  p    bottom margin
  ol   plain column
  li   bullet row, bottom margin

Anything else is laid out as an unstyled block that inherits size and weight.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union
from xml.etree import ElementTree

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from pcio.errors import PcioError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "---"

# Vertical gap below spaced blocks, in layout units
SPACING = 2

BULLET = "• "


class RenderError(PcioError):
    """Error while rendering rules pages."""
    pass


@dataclass(frozen=True)
class Style:
    """Presentation rule for one markdown element kind."""
    size: Optional[str] = None  # key into FONT_SIZES, None inherits
    bold: bool = False
    margin_bottom: float = 0
    bullet: bool = False


STYLES: dict[str, Style] = {
    "h1": Style(size="xl", bold=True, margin_bottom=SPACING),
    "h3": Style(size="lg", bold=True, margin_bottom=SPACING),
    "h4": Style(bold=True),
    "p": Style(margin_bottom=SPACING),
    "ol": Style(),
    "li": Style(margin_bottom=SPACING, bullet=True),
}

UNSTYLED = Style()

INLINE_TAGS = {"strong", "b", "em", "i", "code", "a", "span", "br"}
BOLD_TAGS = {"strong", "b"}
ITALIC_TAGS = {"em", "i"}
UNSUPPORTED_TAGS = {"img"}


@dataclass
class Run:
    """A piece of inline text with one style."""
    text: str
    bold: bool = False
    italic: bool = False
    line_break: bool = False


@dataclass
class TextFlow:
    """Inline runs wrapped together as one paragraph of lines."""
    runs: list[Run]


@dataclass
class Block:
    """A block-level element: text flows and nested blocks, top to bottom."""
    tag: str
    style: Style
    size: str = "base"
    bold: bool = False
    items: list[Union[TextFlow, "Block"]] = field(default_factory=list)


def split_pages(text: str) -> list[str]:
    """Split the rules document on every PAGE_SEPARATOR occurrence."""
    return text.split(PAGE_SEPARATOR)


# Escaped characters come through as STX<ord>ETX, stashed HTML as STX"wzxhzdk:<n>"ETX
_ESCAPED_RE = re.compile("\x02([0-9]+)\x03")
_STASHED_RE = re.compile("\x02wzxhzdk:([0-9]+)\x03")
_PLACEHOLDER_RE = re.compile("\x02[^\x03]*\x03")
_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")


def _clean_text(text: Optional[str], stash: list) -> str:
    """Resolve markdown placeholders: entities are decoded, raw HTML is dropped."""
    if not text:
        return ""
    text = _ESCAPED_RE.sub(lambda m: chr(int(m.group(1))), text)

    def resolve(m: re.Match) -> str:
        index = int(m.group(1))
        raw = stash[index] if index < len(stash) else None
        if isinstance(raw, str) and _ENTITY_RE.fullmatch(raw):
            return html.unescape(raw)
        logger.debug(f"Dropping raw HTML from rules: {raw!r}")
        return ""

    text = _STASHED_RE.sub(resolve, text)
    return _PLACEHOLDER_RE.sub("", text)


class _CaptureTree(Treeprocessor):
    def run(self, root):
        self.root = root


class _CaptureExtension(Extension):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.processor = None

    def extendMarkdown(self, md):
        self.processor = _CaptureTree(md)
        # Lowest priority: runs after inline parsing and unescaping
        md.treeprocessors.register(self.processor, "pcio_capture", -100)


def markdown_tree(text: str) -> tuple[ElementTree.Element, list]:
    """Parse markdown into its element tree and the stash of HTML it set aside."""
    capture = _CaptureExtension()
    md = markdown.Markdown(extensions=[capture])
    md.convert(text)
    stash = list(md.htmlStash.rawHtmlBlocks)
    root = getattr(capture.processor, "root", None)
    if root is None:
        return ElementTree.Element("div"), stash
    return root, stash


def _inline_runs(el: ElementTree.Element, bold: bool, italic: bool, stash: list) -> list[Run]:
    if el.tag in UNSUPPORTED_TAGS:
        raise RenderError(f"Unsupported element in rules: <{el.tag}>")
    if el.tag == "br":
        return [Run("", line_break=True)]

    bold = bold or el.tag in BOLD_TAGS
    italic = italic or el.tag in ITALIC_TAGS
    runs = []
    if el.text:
        text = _clean_text(el.text, stash)
        if el.tag == "code":
            # code spans keep their entity escapes in the tree
            text = html.unescape(text)
        runs.append(Run(text, bold, italic))
    for child in el:
        runs.extend(_inline_runs(child, bold, italic, stash))
        if child.tail:
            runs.append(Run(_clean_text(child.tail, stash), bold, italic))
    return runs


def _has_text(runs: list[Run]) -> bool:
    return any(run.line_break or run.text.strip() for run in runs)


def _to_block(el: ElementTree.Element, size: str, bold: bool, stash: list) -> Block:
    if el.tag in UNSUPPORTED_TAGS:
        raise RenderError(f"Unsupported element in rules: <{el.tag}>")

    style = STYLES.get(el.tag, UNSTYLED)
    block = Block(
        tag=el.tag,
        style=style,
        size=style.size or size,
        bold=bold or style.bold,
    )

    pending: list[Run] = []

    def flush():
        if _has_text(pending):
            block.items.append(TextFlow(list(pending)))
        pending.clear()

    if el.text:
        pending.append(Run(_clean_text(el.text, stash), block.bold))
    for child in el:
        if child.tag in INLINE_TAGS or child.tag in UNSUPPORTED_TAGS:
            pending.extend(_inline_runs(child, block.bold, False, stash))
        else:
            flush()
            block.items.append(_to_block(child, block.size, block.bold, stash))
        if child.tail:
            pending.append(Run(_clean_text(child.tail, stash), block.bold))
    flush()

    return block


def parse_page(text: str) -> Block:
    """Convert one page of markdown into a Block tree rooted at the content column."""
    root, stash = markdown_tree(text)
    content = _to_block(root, "base", False, stash)
    content.tag = "content"
    content.style = UNSTYLED
    return content
