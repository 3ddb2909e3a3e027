#!/usr/bin/env python3
"""
Render rules.md into one SVG image per page.

Pages are separated by the literal token `---`. Every occurrence splits, so
a markdown horizontal rule inside a page also starts a new page.

Output: <images>/rules_1.svg, rules_2.svg, ... (1-based), each with a
"Page i of N" footer. The files land in the images directory so the
packager picks them up as ordinary assets.

Usage:
  python -m pcio.rules.renderer
  python -m pcio.rules.renderer --rules rules.md --out-dir images
"""

import argparse
import logging
from pathlib import Path

from pcio.config import BuildConfig
from pcio.rules.canvas import render_page
from pcio.rules.fonts import FontSet
from pcio.rules.markup import RenderError, parse_page, split_pages

logger = logging.getLogger(__name__)


def rules_filename(page: int) -> str:
    return f"rules_{page}.svg"


def render_rules(rules_path: Path, out_dir: Path, fonts: FontSet) -> list[Path]:
    """
    Render every page of rules_path into out_dir.

    Args:
        rules_path: UTF-8 markdown source
        out_dir: Existing directory for the SVG files
        fonts: Loaded regular and bold faces used for measuring

    Returns:
        Written paths, in page order
    """
    try:
        with open(rules_path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError as e:
        raise RenderError(f"Rules file not found: {rules_path}") from e
    except UnicodeDecodeError as e:
        raise RenderError(f"Rules file is not valid UTF-8: {rules_path}: {e}") from e

    if not out_dir.is_dir():
        raise RenderError(f"Output directory not found: {out_dir}")

    pages = split_pages(text)
    logger.info(f"Rendering {len(pages)} rules page(s) from {rules_path}")

    written = []
    for index, page_text in enumerate(pages, 1):
        svg = render_page(parse_page(page_text), index, len(pages), fonts)
        out_path = out_dir / rules_filename(index)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(svg)
        logger.info(f"  {out_path.name}")
        written.append(out_path)

    return written


def render_rules_for_config(config: BuildConfig) -> list[Path]:
    """Load the configured fonts and render the configured rules file."""
    fonts = FontSet.from_files(config.font_regular, config.font_bold)
    return render_rules(config.rules, config.images_dir, fonts)


def main() -> int:
    parser = argparse.ArgumentParser(description="Render rules.md into per-page SVG images")
    parser.add_argument("--rules", default="rules.md", help="Markdown rules source")
    parser.add_argument("--out-dir", default="images", help="Directory for rules_<n>.svg")
    parser.add_argument("--font", default="fonts/verdana.woff", help="Regular weight font")
    parser.add_argument("--font-bold", default="fonts/verdana-bold.woff", help="Bold weight font")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        fonts = FontSet.from_files(Path(args.font), Path(args.font_bold))
        render_rules(Path(args.rules), Path(args.out_dir), fonts)
    except RenderError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
