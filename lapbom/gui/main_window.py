"""
Main application window for Lap Bom.

PyQt6-based GUI: a landing screen and the chat view with camera, upload,
symbol keypad and live preview.
"""

import logging
import sys
from typing import Optional

from PyQt6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLabel,
    QPlainTextEdit,
    QStackedWidget,
    QMessageBox,
    QApplication,
    QFileDialog,
    QFrame,
    QScrollArea,
)
from PyQt6.QtCore import Qt, QThread, pyqtSignal, QTimer, QByteArray
from PyQt6.QtGui import QFont, QPixmap, QTextCursor

from ..input.keypad import backspace, insert_at_cursor
from ..models import Role
from ..output.mathjax_widget import MathJaxWidget, PreviewWidget
from ..output.preview import preview_latex
from ..session import ChatSession, PendingRequest
from ..utils.config import Settings, load_settings
from ..utils.errors import (
    LapBomError,
    format_error_for_dialog,
    format_error_for_user,
)
from .keypad_widget import MathKeypad
from .landing import LandingPage


logger = logging.getLogger(__name__)

PREVIEW_DELAY_MS = 150
COPIED_RESET_MS = 2000
THUMBNAIL_SIZE = 64

INPUT_STYLE = (
    "QPlainTextEdit {{ background: #0f172a; color: #f1f5f9; border: 1px solid {border};"
    " border-radius: 10px; padding: 8px; font-family: monospace; font-size: 13px; }}"
)
BUTTON_STYLE = (
    "QPushButton { background: #0f172a; color: #94a3b8; border: 1px solid #1e293b;"
    " border-radius: 10px; padding: 10px; font-size: 16px; }"
    "QPushButton:hover { color: #a5b4fc; }"
    "QPushButton:checked { color: #a5b4fc; border-color: #6366f1; }"
)
SEND_STYLE = (
    "QPushButton { background: #4f46e5; color: white; border-radius: 10px;"
    " padding: 12px 16px; font-size: 18px; }"
    "QPushButton:disabled { background: #1e293b; color: #475569; }"
)


class SolveWorker(QThread):
    """Background thread for the solver request."""

    finished = pyqtSignal(str)  # reply text
    error = pyqtSignal(object)  # exception

    def __init__(self, client, pending: PendingRequest):
        super().__init__()
        self.client = client
        self.pending = pending

    def run(self):
        try:
            reply = self.client.send_message(
                self.pending.history,
                self.pending.prompt,
                self.pending.images,
                self.pending.context,
            )
            self.finished.emit(reply)
        except Exception as e:
            logger.exception("Solver worker failed")
            self.error.emit(e)


class InputBox(QPlainTextEdit):
    """Problem input: Enter sends, Shift+Enter starts a new line."""

    submitRequested = pyqtSignal()

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter) and not (
            event.modifiers() & Qt.KeyboardModifier.ShiftModifier
        ):
            self.submitRequested.emit()
            return
        super().keyPressEvent(event)

    def selection(self):
        cursor = self.textCursor()
        return cursor.selectionStart(), cursor.selectionEnd()

    def set_text_and_caret(self, text: str, caret: int):
        self.setPlainText(text)
        cursor = self.textCursor()
        cursor.setPosition(caret)
        self.setTextCursor(cursor)
        self.setFocus()


class ChatView(QWidget):
    """
    Chat screen.

    Layout:
    - Header: brand (back to landing) and Clear History
    - Conversation: MathJax-rendered messages
    - Reply banner, attachment thumbnails
    - Input row: camera/upload/keypad buttons, preview + input, send
    - Keypad (toggle)
    """

    backRequested = pyqtSignal()
    statusMessage = pyqtSignal(str)

    def __init__(self, settings: Settings, client=None, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.session = ChatSession()
        self._client = client
        self._worker: Optional[SolveWorker] = None
        self._pending: Optional[PendingRequest] = None

        self._preview_timer = QTimer(self)
        self._preview_timer.setSingleShot(True)
        self._preview_timer.timeout.connect(self._update_preview)

        self.setStyleSheet("ChatView { background: #020617; } QLabel { color: #e2e8f0; }")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._init_ui()
        self._refresh_conversation()
        self._refresh_input_state()

    # === UI construction ===

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        layout.addWidget(self._create_header())

        self.conversation_view = MathJaxWidget(dark_mode=True)
        self.conversation_view.actionRequested.connect(self._on_message_action)
        layout.addWidget(self.conversation_view, stretch=1)

        layout.addWidget(self._create_reply_banner())
        layout.addWidget(self._create_attachments_strip())
        layout.addLayout(self._create_input_row())

        self.keypad = MathKeypad()
        self.keypad.insertRequested.connect(self._on_keypad_insert)
        self.keypad.deleteRequested.connect(self._on_keypad_delete)
        self.keypad.hide()
        layout.addWidget(self.keypad)

    def _create_header(self) -> QWidget:
        header = QFrame()
        header.setStyleSheet("QFrame { background: #0f172a; border-bottom: 1px solid #1e293b; }")
        row = QHBoxLayout(header)
        row.setContentsMargins(20, 12, 20, 12)

        brand = QPushButton("🧠  Lap Bom   CALCULUS SOLVER")
        brand.setFlat(True)
        brand.setStyleSheet("color: #f8fafc; font-size: 16px; font-weight: bold; border: none;")
        brand.setCursor(Qt.CursorShape.PointingHandCursor)
        brand.clicked.connect(self.backRequested)
        row.addWidget(brand)

        row.addStretch()

        clear_btn = QPushButton("🗑")
        clear_btn.setToolTip("Clear History")
        clear_btn.setStyleSheet(BUTTON_STYLE)
        clear_btn.clicked.connect(self._on_clear_clicked)
        row.addWidget(clear_btn)
        return header

    def _create_reply_banner(self) -> QWidget:
        self.reply_banner = QFrame()
        self.reply_banner.setStyleSheet("QFrame { background: #0f172a; }")
        row = QHBoxLayout(self.reply_banner)
        row.setContentsMargins(16, 6, 16, 6)

        label = QLabel("↳  Asking about solution...")
        label.setStyleSheet("color: #94a3b8;")
        row.addWidget(label)
        row.addStretch()

        cancel_btn = QPushButton("✕")
        cancel_btn.setFlat(True)
        cancel_btn.setStyleSheet("color: #64748b; border: none;")
        cancel_btn.clicked.connect(self._on_cancel_reply)
        row.addWidget(cancel_btn)

        self.reply_banner.hide()
        return self.reply_banner

    def _create_attachments_strip(self) -> QWidget:
        self.attachments_area = QScrollArea()
        self.attachments_area.setWidgetResizable(True)
        self.attachments_area.setFixedHeight(THUMBNAIL_SIZE + 24)
        self.attachments_area.setFrameShape(QFrame.Shape.NoFrame)
        self.attachments_area.setStyleSheet("background: #020617;")

        container = QWidget()
        self.attachments_layout = QHBoxLayout(container)
        self.attachments_layout.setContentsMargins(16, 4, 16, 4)
        self.attachments_layout.addStretch()
        self.attachments_area.setWidget(container)

        self.attachments_area.hide()
        return self.attachments_area

    def _create_input_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setContentsMargins(16, 12, 16, 12)
        row.setSpacing(10)

        media = QVBoxLayout()
        camera_btn = QPushButton("📷")
        camera_btn.setToolTip("Camera")
        camera_btn.clicked.connect(self._on_camera_clicked)
        upload_btn = QPushButton("🖼")
        upload_btn.setToolTip("Upload")
        upload_btn.clicked.connect(self._on_upload_clicked)
        self.keypad_btn = QPushButton("⌨")
        self.keypad_btn.setToolTip("Math Keyboard")
        self.keypad_btn.setCheckable(True)
        self.keypad_btn.clicked.connect(self._on_keypad_toggled)
        for button in (camera_btn, upload_btn, self.keypad_btn):
            button.setStyleSheet(BUTTON_STYLE)
            media.addWidget(button)
        row.addLayout(media)

        editor = QVBoxLayout()
        editor.setSpacing(0)
        self.preview = PreviewWidget(dark_mode=True)
        editor.addWidget(self.preview)

        self.input_box = InputBox()
        self.input_box.setFont(QFont("Monospace", 11))
        self.input_box.setMinimumHeight(60)
        self.input_box.setMaximumHeight(160)
        self.input_box.textChanged.connect(self._on_input_changed)
        self.input_box.submitRequested.connect(self._on_send_clicked)
        editor.addWidget(self.input_box)
        row.addLayout(editor, stretch=1)

        self.send_btn = QPushButton("➤")
        self.send_btn.setStyleSheet(SEND_STYLE)
        self.send_btn.clicked.connect(self._on_send_clicked)
        row.addWidget(self.send_btn, alignment=Qt.AlignmentFlag.AlignBottom)
        return row

    # === Component Lazy Loading ===

    def _get_client(self):
        """Lazy-load the solver client (raises ConfigError without an API key)."""
        if self._client is None:
            from ..client.gemini import GeminiClient

            self._client = GeminiClient(self.settings)
        return self._client

    # === Error Handling ===

    def _show_error(self, exc: Exception, context: str = "") -> None:
        """Show a rich error dialog with suggestions."""
        error_info = format_error_for_dialog(exc, context)

        msg_box = QMessageBox(self)
        msg_box.setWindowTitle(error_info["title"])
        msg_box.setText(error_info["text"])
        msg_box.setIcon(error_info["icon"])

        if error_info["detailed_text"]:
            msg_box.setDetailedText(error_info["detailed_text"])

        msg_box.exec()

        self.statusMessage.emit(format_error_for_user(exc, context))

    # === Rendering ===

    def _refresh_conversation(self):
        page = self.conversation_view.renderer.render_conversation(
            self.session.messages, is_loading=self.session.is_loading
        )
        self.conversation_view.display_html(page)

    def _refresh_input_state(self):
        text = self.input_box.toPlainText()
        self.input_box.setPlaceholderText(self.session.placeholder())
        border = "#6366f1" if self.session.highlight_input(text) else "#1e293b"
        self.input_box.setStyleSheet(INPUT_STYLE.format(border=border))
        self.send_btn.setEnabled(self.session.can_send(text))
        self.send_btn.setText("…" if self.session.is_loading else "➤")
        self.reply_banner.setVisible(self.session.reply_to is not None)
        self.keypad.setVisible(self.session.show_keypad)
        self.keypad_btn.setChecked(self.session.show_keypad)

    def _refresh_attachments(self):
        # Drop old thumbnails, keep the trailing stretch
        while self.attachments_layout.count() > 1:
            item = self.attachments_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        for index, b64 in enumerate(self.session.attached_images):
            self.attachments_layout.insertWidget(index, self._thumbnail(index, b64))

        self.attachments_area.setVisible(bool(self.session.attached_images))
        self._refresh_input_state()

    def _thumbnail(self, index: int, b64: str) -> QWidget:
        box = QWidget()
        box_layout = QHBoxLayout(box)
        box_layout.setContentsMargins(0, 0, 0, 0)
        box_layout.setSpacing(0)

        pixmap = QPixmap()
        pixmap.loadFromData(QByteArray.fromBase64(b64.encode("ascii")))
        image = QLabel()
        image.setPixmap(
            pixmap.scaled(
                THUMBNAIL_SIZE,
                THUMBNAIL_SIZE,
                Qt.AspectRatioMode.KeepAspectRatioByExpanding,
                Qt.TransformationMode.SmoothTransformation,
            )
        )
        image.setFixedSize(THUMBNAIL_SIZE, THUMBNAIL_SIZE)
        box_layout.addWidget(image)

        remove_btn = QPushButton("✕")
        remove_btn.setFixedSize(20, 20)
        remove_btn.setStyleSheet("background: #ef4444; color: white; border-radius: 10px;")
        remove_btn.clicked.connect(lambda _checked=False, i=index: self._on_remove_image(i))
        box_layout.addWidget(remove_btn, alignment=Qt.AlignmentFlag.AlignTop)
        return box

    # === Event Handlers ===

    def _on_input_changed(self):
        self._refresh_input_state()
        self._preview_timer.start(PREVIEW_DELAY_MS)

    def _update_preview(self):
        self.preview.set_latex(preview_latex(self.input_box.toPlainText()))

    def _on_send_clicked(self):
        """Handle send button / Enter."""
        text = self.input_box.toPlainText()
        if not self.session.can_send(text):
            return

        try:
            client = self._get_client()
        except LapBomError as e:
            self._show_error(e, "starting the solver client")
            return

        pending = self.session.begin_submit(text)
        if pending is None:
            return
        self._pending = pending

        self.input_box.clear()
        self._refresh_attachments()
        self._refresh_conversation()
        self.statusMessage.emit("Solving...")

        self._worker = SolveWorker(client, pending)
        self._worker.finished.connect(self._on_solve_finished)
        self._worker.error.connect(self._on_solve_error)
        self._worker.start()

    def _on_solve_finished(self, reply: str):
        self.session.complete(reply, self._pending)
        self._pending = None
        self._refresh_conversation()
        self._refresh_input_state()
        self.statusMessage.emit("Ready")

    def _on_solve_error(self, exc: Exception):
        self.session.fail()
        self._pending = None
        self._refresh_conversation()
        self._refresh_input_state()
        self._show_error(exc, "solving the problem")

    def _on_clear_clicked(self):
        self.session.clear_history()
        self._refresh_conversation()
        self._refresh_input_state()
        self.statusMessage.emit("History cleared")

    def _on_camera_clicked(self):
        from .camera_dialog import CameraDialog

        dialog = CameraDialog(parent=self)
        dialog.captured.connect(self._on_image_ready)
        dialog.exec()

    def _on_upload_clicked(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Upload Problem", "", "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"
        )
        if not path:
            return

        from ..input.images import load_image_file

        try:
            b64 = load_image_file(path, max_size=self.settings.image_max_size)
        except LapBomError as e:
            logger.error("Image processing failed: %s", e)
            self._show_error(e, "loading the image")
            return
        self._on_image_ready(b64)

    def _on_image_ready(self, b64: str):
        self.session.attach_image(b64)
        self._refresh_attachments()
        self.statusMessage.emit("Image attached")

    def _on_remove_image(self, index: int):
        self.session.remove_image(index)
        self._refresh_attachments()

    def _on_keypad_toggled(self):
        self.session.toggle_keypad()
        self._refresh_input_state()

    def _on_keypad_insert(self, text: str):
        start, end = self.input_box.selection()
        value, caret = insert_at_cursor(self.input_box.toPlainText(), text, start, end)
        self.input_box.set_text_and_caret(value, caret)

    def _on_keypad_delete(self):
        start, end = self.input_box.selection()
        current = self.input_box.toPlainText()
        value, caret = backspace(current, start, end)
        if value != current:
            self.input_box.set_text_and_caret(value, caret)

    def _on_message_action(self, action: str, message_id: str):
        message = self.session.conversation.find(message_id)
        if message is None or message.role != Role.MODEL:
            return

        if action == "copy":
            QApplication.clipboard().setText(message.content)
            self.conversation_view.run_javascript(f"markCopied('{message_id}', true);")
            QTimer.singleShot(
                COPIED_RESET_MS,
                lambda: self.conversation_view.run_javascript(
                    f"markCopied('{message_id}', false);"
                ),
            )
            self.statusMessage.emit("Copied to clipboard")
        elif action == "ask":
            self.session.set_reply_to(message)
            self._refresh_input_state()
            self.conversation_view.run_javascript("scrollToBottom();")
            self.input_box.setFocus()
            self.input_box.moveCursor(QTextCursor.MoveOperation.End)

    def _on_cancel_reply(self):
        self.session.cancel_reply()
        self._refresh_input_state()


class MainWindow(QMainWindow):
    """Top-level window switching between the landing screen and the chat."""

    def __init__(self, settings: Optional[Settings] = None, client=None):
        super().__init__()

        self.setWindowTitle("Lap Bom")
        self.setGeometry(100, 100, 1000, 760)
        self.setMinimumSize(640, 480)

        self.settings = settings or load_settings()

        self.stack = QStackedWidget()
        self.landing = LandingPage()
        self.chat = ChatView(self.settings, client=client)
        self.stack.addWidget(self.landing)
        self.stack.addWidget(self.chat)
        self.setCentralWidget(self.stack)

        self.landing.startRequested.connect(self.show_chat)
        self.chat.backRequested.connect(self.show_landing)
        self.chat.statusMessage.connect(self.statusBar().showMessage)

        self.show_landing()

    def show_landing(self):
        self.stack.setCurrentWidget(self.landing)
        self.statusBar().hide()

    def show_chat(self):
        self.stack.setCurrentWidget(self.chat)
        self.statusBar().show()
        self.statusBar().showMessage("Ready. Enter problem.")
        self.chat.input_box.setFocus()


def run_app(settings: Optional[Settings] = None):
    """Run the Lap Bom application."""
    app = QApplication(sys.argv)
    app.setApplicationName("Lap Bom")

    window = MainWindow(settings)
    window.show()

    sys.exit(app.exec())
