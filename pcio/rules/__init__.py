"""Rules document rendering for pcio.

Exports are lazily loaded to avoid import conflicts when running
submodules directly with `python -m pcio.rules.<module>`.
"""

__all__ = [
    # markup.py
    "split_pages",
    "parse_page",
    "STYLES",
    "PAGE_SEPARATOR",
    "RenderError",
    # fonts.py
    "FontSet",
    "FONT_SIZES",
    # canvas.py
    "render_page",
    "PAGE_WIDTH",
    "PAGE_HEIGHT",
    # renderer.py
    "render_rules",
    "render_rules_for_config",
    "rules_filename",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("split_pages", "parse_page", "STYLES", "PAGE_SEPARATOR", "RenderError"):
        from pcio.rules import markup
        return getattr(markup, name)
    elif name in ("FontSet", "FONT_SIZES"):
        from pcio.rules import fonts
        return getattr(fonts, name)
    elif name in ("render_page", "PAGE_WIDTH", "PAGE_HEIGHT"):
        from pcio.rules import canvas
        return getattr(canvas, name)
    elif name in ("render_rules", "render_rules_for_config", "rules_filename"):
        from pcio.rules import renderer
        return getattr(renderer, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
