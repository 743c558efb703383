"""
Live preview of typed input.

Best-effort transliteration of Unicode math symbols into LaTeX so the
input can be typeset while the user types. Not a parser: it never fails,
and MathJax shows anything it cannot typeset in red.
"""

import re
from typing import Optional, Tuple


# Applied in order; '√(' must come before the bare '√'
SYMBOL_REPLACEMENTS: Tuple[Tuple[str, str], ...] = (
    ("∫", "\\int "),
    ("∑", "\\sum "),
    ("∏", "\\prod "),
    ("∂", "\\partial "),
    ("∞", "\\infty "),
    ("π", "\\pi "),
    ("θ", "\\theta "),
    ("√(", "\\sqrt{("),
    ("√", "\\sqrt{}"),
    ("→", "\\to "),
    ("×", "\\times "),
    ("÷", "\\div "),
)

_MATHY = re.compile(r"[\\^_{}=∫∑∂∞πθ√+*/\-]|[0-9]")
_LATEX_HINT = re.compile(r"[\\^_{}=]")


def to_latex(text: str) -> str:
    """Replace Unicode math symbols with their LaTeX commands."""
    latex = text
    for symbol, command in SYMBOL_REPLACEMENTS:
        latex = latex.replace(symbol, command)
    return latex


def preview_latex(text: str) -> Optional[str]:
    """
    LaTeX for the preview pane.

    Returns:
        None for blank input, otherwise the transliterated text with any
        ``$$`` display delimiters removed.
    """
    if not text.strip():
        return None
    return to_latex(text).replace("$$", "")


def is_mathy(text: str) -> bool:
    """
    True if the text has operators, digits or math symbols.

    Not used by the GUI, which highlights on ``looks_like_latex``. Kept as the
    broader check for callers that want to tell math from prose.
    """
    return bool(_MATHY.search(text))


def looks_like_latex(text: str) -> bool:
    """True if the text contains LaTeX syntax (used to highlight the input box)."""
    return bool(_LATEX_HINT.search(text))
