"""
Landing screen shown before the chat.
"""

from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QFrame,
)
from PyQt6.QtCore import Qt, pyqtSignal


FEATURES = (
    ("📷", "Snap & Solve", "Take a photo of a handwritten or printed problem."),
    ("⌨", "Symbolic Keypad", "Type integrals, limits and sums without LaTeX."),
    ("⚡", "Instant Answers", "Clean, typeset derivations in seconds."),
)

STYLE = """
QWidget#landing { background: #020617; }
QLabel { color: #e2e8f0; }
QLabel#brand { font-size: 20px; font-weight: bold; }
QLabel#headline { font-size: 44px; font-weight: 800; }
QLabel#subline { font-size: 44px; font-weight: 800; color: #818cf8; }
QLabel#pitch { font-size: 16px; color: #94a3b8; }
QPushButton#start {
    background: #4f46e5; color: white; font-size: 18px; font-weight: bold;
    padding: 14px 32px; border-radius: 14px;
}
QPushButton#start:hover { background: #6366f1; }
QFrame#card {
    background: #0f172a; border: 1px solid #1e293b; border-radius: 14px;
}
QLabel#cardTitle { font-size: 15px; font-weight: bold; }
QLabel#cardText { color: #94a3b8; }
"""


class LandingPage(QWidget):
    """
    Static marketing screen.

    Signals:
        startRequested: Emitted when the user clicks "Begin Now"
    """

    startRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("landing")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(STYLE)
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)

        brand = QLabel("🧠 Lap Bom")
        brand.setObjectName("brand")
        layout.addWidget(brand)

        layout.addStretch()

        for text, name in (("Calculus Solved.", "headline"), ("Instantly.", "subline")):
            label = QLabel(text)
            label.setObjectName(name)
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            layout.addWidget(label)

        pitch = QLabel(
            "Lap Bom is the ultimate AI math companion. Snap a photo or type complex "
            "symbolic equations and get step-by-step solutions in milliseconds."
        )
        pitch.setObjectName("pitch")
        pitch.setWordWrap(True)
        pitch.setAlignment(Qt.AlignmentFlag.AlignCenter)
        pitch.setMaximumWidth(640)
        layout.addWidget(pitch, alignment=Qt.AlignmentFlag.AlignHCenter)

        self.start_btn = QPushButton("Begin Now  →")
        self.start_btn.setObjectName("start")
        self.start_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.start_btn.clicked.connect(self.startRequested)
        layout.addSpacing(24)
        layout.addWidget(self.start_btn, alignment=Qt.AlignmentFlag.AlignHCenter)

        layout.addSpacing(48)
        cards = QHBoxLayout()
        cards.setSpacing(16)
        for icon, title, text in FEATURES:
            cards.addWidget(self._feature_card(icon, title, text))
        layout.addLayout(cards)

        layout.addStretch()

    def _feature_card(self, icon: str, title: str, text: str) -> QFrame:
        card = QFrame()
        card.setObjectName("card")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(16, 16, 16, 16)

        heading = QLabel(f"{icon}  {title}")
        heading.setObjectName("cardTitle")
        card_layout.addWidget(heading)

        body = QLabel(text)
        body.setObjectName("cardText")
        body.setWordWrap(True)
        card_layout.addWidget(body)
        return card
