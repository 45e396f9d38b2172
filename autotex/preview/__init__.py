"""LaTeX preview rendering."""

from autotex.preview.mathjax import build_preview_html
from autotex.preview.renderer import RULES, RenderRule, render

__all__ = [
    "RULES",
    "RenderRule",
    "build_preview_html",
    "render",
]
