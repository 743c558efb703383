"""Output layer: input preview and conversation rendering."""

from .preview import to_latex, preview_latex
from .render import MathMarkdownRenderer

__all__ = ["to_latex", "preview_latex", "MathMarkdownRenderer"]
