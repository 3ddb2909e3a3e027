"""Font resources for rules pages."""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import ImageFont

from pcio.rules.markup import RenderError

logger = logging.getLogger(__name__)

FONT_FAMILY = "Verdana"

# Font sizes in layout units
FONT_SIZES = {
    "base": 4.5,
    "lg": 5.5,
    "xl": 6,
}

FONT_WEIGHTS = {
    False: 400,
    True: 800,
}

# Fonts are opened at this pixel size and measurements scaled down
MEASURE_SIZE = 200


def _open_font(path: Path) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(str(path), MEASURE_SIZE)


def load_font(path: Path) -> ImageFont.FreeTypeFont:
    """Load a font file for measuring. Raises RenderError if missing or unreadable."""
    if not path.is_file():
        raise RenderError(f"Font not found: {path}")
    try:
        return _open_font(path)
    except OSError as e:
        raise RenderError(f"Cannot load font {path}: {e}") from e


@dataclass
class FontSet:
    """Regular and bold faces of the rules font."""
    regular: ImageFont.FreeTypeFont
    bold: ImageFont.FreeTypeFont

    @classmethod
    def from_files(cls, regular_path: Path, bold_path: Path) -> "FontSet":
        logger.debug(f"Loading fonts: {regular_path}, {bold_path}")
        return cls(regular=load_font(regular_path), bold=load_font(bold_path))

    def _face(self, bold: bool) -> ImageFont.FreeTypeFont:
        return self.bold if bold else self.regular

    def measure(self, text: str, size: float, bold: bool = False) -> float:
        """Advance width of text at the given size, in layout units."""
        if not text:
            return 0.0
        return self._face(bold).getlength(text) * size / MEASURE_SIZE

    def ascent(self, size: float, bold: bool = False) -> float:
        ascent, _ = self._face(bold).getmetrics()
        return ascent * size / MEASURE_SIZE

    def line_height(self, size: float, bold: bool = False) -> float:
        ascent, descent = self._face(bold).getmetrics()
        return (ascent + descent) * size / MEASURE_SIZE
