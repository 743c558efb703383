"""
Tests for the symbol keypad layout and caret editing.
"""

import pytest

from lapbom.input.keypad import (
    BRACKET_KEYS,
    SYMBOL_SECTIONS,
    backspace,
    insert_at_cursor,
    numpad_keys,
)


class TestLayout:
    """Test the keypad layout data."""

    def test_section_order(self):
        assert [s.label for s in SYMBOL_SECTIONS] == ["Calculus", "Functions", "Algebra"]

    def test_each_section_has_six_keys(self):
        for section in SYMBOL_SECTIONS:
            assert len(section.keys) == 6

    def test_calculus_values(self):
        calculus = {k.label: k.value for k in SYMBOL_SECTIONS[0].keys}

        assert calculus["∫"] == "∫ "
        assert calculus["lim"] == "lim_{x→∞} "
        assert calculus["∞"] == "∞"

    def test_algebra_values(self):
        algebra = {k.label: k.value for k in SYMBOL_SECTIONS[2].keys}

        assert algebra["x²"] == "^2"
        assert algebra["√"] == "√("
        assert algebra["a/b"] == "/"

    def test_numpad_maps_operators(self):
        keys = {k.label: k for k in numpad_keys()}

        assert keys["÷"].value == "/"
        assert keys["×"].value == "*"
        assert keys["÷"].is_operator
        assert not keys["7"].is_operator

    def test_numpad_has_no_equals(self):
        labels = [k.label for k in numpad_keys()]

        assert "=" not in labels
        assert len(labels) == 15
        assert labels[:4] == ["7", "8", "9", "÷"]

    def test_bracket_row(self):
        assert [k.value for k in BRACKET_KEYS] == ["(", ")", "x", "y"]


class TestInsertAtCursor:
    """Test inserting keypad text at the caret."""

    def test_insert_at_end(self):
        assert insert_at_cursor("2x", "^2", 2, 2) == ("2x^2", 4)

    def test_insert_in_middle(self):
        assert insert_at_cursor("ab", "∫ ", 1, 1) == ("a∫ b", 3)

    def test_replaces_selection(self):
        assert insert_at_cursor("sin(x)", "cos", 0, 3) == ("cos(x)", 3)

    def test_caret_inside_parens_pair(self):
        value, caret = insert_at_cursor("", "sin()", 0, 0)

        assert value == "sin()"
        assert caret == 4

    def test_caret_inside_braces_pair(self):
        value, caret = insert_at_cursor("x", "^{}", 1, 1)

        assert value == "x^{}"
        assert caret == 3

    def test_open_sqrt_keeps_caret_after(self):
        assert insert_at_cursor("", "√(", 0, 0) == ("√(", 2)

    def test_reversed_selection(self):
        assert insert_at_cursor("abcd", "X", 3, 1) == ("aXd", 2)

    def test_out_of_range_is_clamped(self):
        assert insert_at_cursor("ab", "c", 10, 10) == ("abc", 3)


class TestBackspace:
    """Test keypad backspace."""

    def test_at_start_is_noop(self):
        assert backspace("abc", 0, 0) == ("abc", 0)

    def test_deletes_previous_char(self):
        assert backspace("abc", 2, 2) == ("ac", 1)

    def test_deletes_selection(self):
        assert backspace("abcdef", 1, 4) == ("aef", 1)

    def test_empty_value(self):
        assert backspace("", 0, 0) == ("", 0)

    @pytest.mark.parametrize("symbol", ["∫", "π", "√"])
    def test_unicode_symbol_removed_whole(self, symbol):
        assert backspace(f"x{symbol}", 2, 2) == ("x", 1)
