"""
MathJax rendering widgets for PyQt6.

Shows pages built by ``MathMarkdownRenderer`` in QtWebEngine.
Falls back to a plain rich-text label if WebEngine is not available.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

# Try to import PyQt6 WebEngine
try:
    from PyQt6.QtWebEngineCore import QWebEnginePage
    from PyQt6.QtWebEngineWidgets import QWebEngineView

    WEBENGINE_AVAILABLE = True
except ImportError:
    WEBENGINE_AVAILABLE = False
    QWebEngineView = None
    QWebEnginePage = None

from PyQt6.QtWidgets import QApplication, QWidget, QVBoxLayout, QLabel, QScrollArea, QFrame
from PyQt6.QtCore import Qt, QUrl, pyqtSignal
from PyQt6.QtGui import QFont

from .render import MathMarkdownRenderer, parse_action_url


logger = logging.getLogger(__name__)

# Base URL so relative CDN loads and data: images are allowed
BASE_URL = "https://lapbom.local/"
SETHTML_LIMIT = 2 * 1024 * 1024 - 64 * 1024


if WEBENGINE_AVAILABLE:

    class ActionPage(QWebEnginePage):
        """Page that turns ``lapbom://action/id`` link clicks into a signal."""

        actionRequested = pyqtSignal(str, str)  # action, message id

        def acceptNavigationRequest(self, url, nav_type, is_main_frame):
            action = parse_action_url(url.toString())
            if action is not None:
                self.actionRequested.emit(*action)
                return False
            return super().acceptNavigationRequest(url, nav_type, is_main_frame)


class PageFile:
    """
    Temp file for pages too large for ``setHtml()``.

    Created on first write and deleted by ``remove()``, which runs when the
    application quits.
    """

    def __init__(self):
        self.path: Optional[Path] = None

    def write(self, html_content: str) -> str:
        """Write the page and return its path."""
        if self.path is None:
            handle = tempfile.NamedTemporaryFile(prefix="lapbom_", suffix=".html", delete=False)
            handle.close()
            self.path = Path(handle.name)
            app = QApplication.instance()
            if app is not None:
                app.aboutToQuit.connect(self.remove)
        self.path.write_text(html_content, encoding="utf-8")
        return str(self.path)

    def remove(self):
        """Delete the file. Safe to call more than once."""
        if self.path is not None:
            self.path.unlink(missing_ok=True)
            logger.debug("Removed page file %s", self.path)
            self.path = None


class MathJaxWidget(QWidget):
    """
    Widget for displaying MathJax-rendered HTML.

    Uses QWebEngineView if available, falls back to plain text.
    """

    # Emitted for in-page action links (e.g. "copy", "ask")
    actionRequested = pyqtSignal(str, str)

    def __init__(self, parent=None, dark_mode: bool = True):
        super().__init__(parent)

        self.renderer = MathMarkdownRenderer(dark_mode=dark_mode)
        self._use_webengine = WEBENGINE_AVAILABLE
        self._page_file = PageFile()
        self.destroyed.connect(self._page_file.remove)

        self._init_ui()

    def _init_ui(self):
        """Initialize the UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        if self._use_webengine:
            self.web_view = QWebEngineView()
            page = ActionPage(self.web_view)
            page.actionRequested.connect(self.actionRequested)
            page.setBackgroundColor(Qt.GlobalColor.transparent)
            self.web_view.setPage(page)
            layout.addWidget(self.web_view)
        else:
            logger.warning("QtWebEngine not available; math will not be typeset")
            scroll = QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setFrameShape(QFrame.Shape.NoFrame)

            self.fallback_label = QLabel()
            self.fallback_label.setWordWrap(True)
            self.fallback_label.setTextFormat(Qt.TextFormat.RichText)
            self.fallback_label.setFont(QFont("Monospace", 11))
            self.fallback_label.setAlignment(Qt.AlignmentFlag.AlignTop)
            self.fallback_label.linkActivated.connect(self._on_fallback_link)

            scroll.setWidget(self.fallback_label)
            layout.addWidget(scroll)

    def display_html(self, html_content: str):
        """Display a complete HTML page."""
        if not self._use_webengine:
            self.fallback_label.setText(html_content)
            return

        # setHtml() silently drops pages over 2 MB (inline photos add up)
        if len(html_content.encode("utf-8")) < SETHTML_LIMIT:
            self.web_view.setHtml(html_content, QUrl(BASE_URL))
            return

        self.web_view.load(QUrl.fromLocalFile(self._page_file.write(html_content)))

    def run_javascript(self, script: str):
        """Run a script in the page (no-op without WebEngine)."""
        if self._use_webengine:
            self.web_view.page().runJavaScript(script)

    def _on_fallback_link(self, link: str):
        action = parse_action_url(link)
        if action is not None:
            self.actionRequested.emit(*action)


class PreviewWidget(MathJaxWidget):
    """
    Live "Formatted Preview" strip above the input box.

    Hidden while the input is blank.
    """

    def __init__(self, parent=None, dark_mode: bool = True):
        super().__init__(parent, dark_mode=dark_mode)
        self.setFixedHeight(84)
        self._latex: Optional[str] = None
        self.hide()

    def set_latex(self, latex: Optional[str]):
        """Show ``latex`` in display mode, or hide for None."""
        if latex == self._latex:
            return
        self._latex = latex
        if latex is None:
            self.hide()
            return
        self.display_html(self.renderer.render_preview(latex))
        self.show()
