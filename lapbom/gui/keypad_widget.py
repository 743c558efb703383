"""
On-screen math keypad.
"""

from PyQt6.QtWidgets import (
    QWidget,
    QGridLayout,
    QHBoxLayout,
    QVBoxLayout,
    QLabel,
    QPushButton,
    QFrame,
)
from PyQt6.QtCore import pyqtSignal

from ..input.keypad import BRACKET_KEYS, SYMBOL_SECTIONS, Key, numpad_keys


KEY_STYLE = (
    "QPushButton { background: #0f172a; color: #cbd5e1; border: 1px solid #1e293b;"
    " border-radius: 8px; padding: 10px; font-size: 14px; }"
    "QPushButton:hover { color: #a5b4fc; border-color: #6366f1; }"
)
OPERATOR_STYLE = (
    "QPushButton { background: #4f46e5; color: white; border-radius: 8px;"
    " padding: 10px; font-size: 16px; font-weight: bold; }"
    "QPushButton:hover { background: #6366f1; }"
)
DELETE_STYLE = (
    "QPushButton { background: #2a0f14; color: #f87171; border: 1px solid #7f1d1d;"
    " border-radius: 8px; padding: 10px; font-size: 16px; }"
)
SECTION_COLUMNS = 6
NUMPAD_COLUMNS = 4


class MathKeypad(QFrame):
    """
    Symbol sections on the left, number pad on the right.

    Signals:
        insertRequested: Text to insert at the caret
        deleteRequested: Backspace pressed
    """

    insertRequested = pyqtSignal(str)
    deleteRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("MathKeypad { background: #020617; border-top: 1px solid #1e293b; }")
        self._init_ui()

    def _init_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(16)

        # Symbol pad
        symbols = QVBoxLayout()
        for section in SYMBOL_SECTIONS:
            title = QLabel(section.label.upper())
            title.setStyleSheet("color: #64748b; font-size: 11px; font-weight: bold;")
            symbols.addWidget(title)

            grid = QGridLayout()
            grid.setSpacing(6)
            for i, key in enumerate(section.keys):
                grid.addWidget(self._key_button(key), i // SECTION_COLUMNS, i % SECTION_COLUMNS)
            symbols.addLayout(grid)
        layout.addLayout(symbols, stretch=1)

        # Number pad
        numpad = QGridLayout()
        numpad.setSpacing(6)
        keys = list(BRACKET_KEYS) + numpad_keys()
        for i, key in enumerate(keys):
            numpad.addWidget(self._key_button(key), i // NUMPAD_COLUMNS, i % NUMPAD_COLUMNS)

        delete_btn = QPushButton("⌫")
        delete_btn.setStyleSheet(DELETE_STYLE)
        delete_btn.setToolTip("Backspace")
        delete_btn.clicked.connect(self.deleteRequested)
        numpad.addWidget(delete_btn, len(keys) // NUMPAD_COLUMNS, len(keys) % NUMPAD_COLUMNS)
        layout.addLayout(numpad, stretch=1)

    def _key_button(self, key: Key) -> QPushButton:
        button = QPushButton(key.label)
        button.setStyleSheet(OPERATOR_STYLE if key.is_operator else KEY_STYLE)
        button.clicked.connect(lambda _checked=False, value=key.value: self.insertRequested.emit(value))
        return button
