"""
Math symbol keypad layout and caret editing.

The layout is data only; the Qt widget in ``gui.keypad_widget`` builds
buttons from it. Caret editing works on plain strings and indices so it
can be reused by any text widget.
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Key:
    """A keypad button: what it shows and what it inserts."""

    label: str
    value: str
    is_operator: bool = False


@dataclass(frozen=True)
class KeySection:
    label: str
    keys: Tuple[Key, ...]


SYMBOL_SECTIONS: Tuple[KeySection, ...] = (
    KeySection(
        "Calculus",
        (
            Key("∫", "∫ "),
            Key("d/dx", "d/dx "),
            Key("∂", "∂ "),
            Key("lim", "lim_{x→∞} "),
            Key("∑", "∑ "),
            Key("∞", "∞"),
        ),
    ),
    KeySection(
        "Functions",
        (
            Key("sin", "sin("),
            Key("cos", "cos("),
            Key("tan", "tan("),
            Key("ln", "ln("),
            Key("e^x", "e^"),
            Key("log", "log("),
        ),
    ),
    KeySection(
        "Algebra",
        (
            Key("x²", "^2"),
            Key("xⁿ", "^"),
            Key("√", "√("),
            Key("a/b", "/"),
            Key("π", "π"),
            Key("θ", "θ"),
        ),
    ),
)

# Row above the digits: brackets and the two common variables
BRACKET_KEYS: Tuple[Key, ...] = (
    Key("(", "("),
    Key(")", ")"),
    Key("x", "x"),
    Key("y", "y"),
)

# Display glyph -> inserted text for operators that differ
OPERATOR_VALUES = {"÷": "/", "×": "*"}
OPERATORS = {"÷", "×", "-", "+"}

NUMPAD_LABELS = (
    "7", "8", "9", "÷",
    "4", "5", "6", "×",
    "1", "2", "3", "-",
    "0", ".", "=", "+",
)


def numpad_keys() -> List[Key]:
    """Number pad keys in grid order. '=' is not offered."""
    keys = []
    for label in NUMPAD_LABELS:
        if label == "=":
            continue
        keys.append(
            Key(
                label=label,
                value=OPERATOR_VALUES.get(label, label),
                is_operator=label in OPERATORS,
            )
        )
    return keys


def insert_at_cursor(value: str, text: str, start: int, end: int) -> Tuple[str, int]:
    """
    Replace the selection ``[start, end)`` of ``value`` with ``text``.

    Args:
        value: Current contents of the input
        text: Text to insert
        start: Selection start (caret position if nothing is selected)
        end: Selection end

    Returns:
        Tuple of (new value, new caret position). The caret lands after
        the insertion, or inside the pair when ``text`` ends with
        ``()`` or ``{}``.
    """
    start, end = _clamp_selection(value, start, end)
    new_value = value[:start] + text + value[end:]
    caret = start + len(text)
    if text.endswith("()") or text.endswith("{}"):
        caret -= 1
    return new_value, caret


def backspace(value: str, start: int, end: int) -> Tuple[str, int]:
    """
    Delete the selection, or the character before a collapsed caret.

    Returns:
        Tuple of (new value, new caret position). A collapsed caret at
        position 0 leaves the value untouched.
    """
    start, end = _clamp_selection(value, start, end)
    if start == end:
        if start == 0:
            return value, 0
        return value[: start - 1] + value[end:], start - 1
    return value[:start] + value[end:], start


def _clamp_selection(value: str, start: int, end: int) -> Tuple[int, int]:
    """Order the selection bounds and keep them inside the string."""
    if start > end:
        start, end = end, start
    length = len(value)
    return max(0, min(start, length)), max(0, min(end, length))
