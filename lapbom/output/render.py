"""
HTML rendering of the conversation and the input preview.

Message text is Markdown with ``$...$`` / ``$$...$$`` math. Math spans are
lifted out before the Markdown pass (so ``_`` and ``*`` inside formulas are
not read as emphasis) and put back verbatim for MathJax to typeset.
"""

import html
import re
from typing import Iterable, List, Optional

from markdown_it import MarkdownIt

from ..input.images import to_data_url
from ..models import Message, Role


# URL scheme used by in-page action links; intercepted by the Qt page
ACTION_SCHEME = "lapbom"
THINKING_ID = "thinking"

PAGE_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        html, body {{
            margin: 0;
            padding: 0;
        }}
        body {{
            font-family: 'Segoe UI', Arial, sans-serif;
            font-size: 15px;
            background: {bg_color};
            color: {text_color};
        }}
        .chat {{
            padding: 16px 20px 24px 20px;
        }}
        .row {{
            display: flex;
            margin-bottom: 34px;
        }}
        .row.user {{
            justify-content: flex-end;
        }}
        .row.model {{
            justify-content: flex-start;
        }}
        .column {{
            max-width: 80%;
            display: flex;
            flex-direction: column;
        }}
        .row.user .column {{
            align-items: flex-end;
        }}
        .attachments img {{
            height: 128px;
            margin: 0 0 8px 8px;
            border-radius: 8px;
            border: 1px solid {border_color};
        }}
        .bubble {{
            position: relative;
            padding: 14px 18px;
            border-radius: 16px;
            overflow-x: auto;
        }}
        .row.user .bubble {{
            background: {user_bg};
            color: #ffffff;
            border-top-right-radius: 4px;
        }}
        .row.model .bubble {{
            background: {model_bg};
            border: 1px solid {border_color};
            border-top-left-radius: 4px;
        }}
        .bubble p {{
            margin: 0 0 12px 0;
            line-height: 1.6;
        }}
        .bubble p:last-child {{
            margin-bottom: 0;
        }}
        .bubble code {{
            background: {code_bg};
            color: {code_color};
            border-radius: 4px;
            padding: 1px 4px;
            font-family: monospace;
            font-size: 0.9em;
        }}
        .actions {{
            margin-top: 6px;
            visibility: hidden;
        }}
        .row:hover .actions {{
            visibility: visible;
        }}
        .actions a {{
            display: inline-block;
            margin-right: 6px;
            padding: 3px 12px;
            border-radius: 12px;
            border: 1px solid {border_color};
            background: {model_bg};
            color: {accent_color};
            font-size: 12px;
            text-decoration: none;
        }}
        .thinking {{
            color: {muted_color};
            font-style: italic;
        }}
        .preview {{
            padding: 6px 12px;
        }}
        .preview .caption {{
            font-size: 10px;
            font-weight: bold;
            letter-spacing: 2px;
            color: {muted_color};
            margin-bottom: 4px;
        }}
        .preview .formula {{
            font-size: 20px;
            white-space: nowrap;
            overflow-x: auto;
        }}
        mjx-container {{
            margin: 0.4em 0 !important;
        }}
        mjx-merror {{
            color: {error_color};
            background: transparent;
        }}
    </style>
    <script>
        MathJax = {{
            tex: {{
                inlineMath: [['$', '$'], ['\\\\(', '\\\\)']],
                displayMath: [['$$', '$$'], ['\\\\[', '\\\\]']],
                processEscapes: true
            }},
            svg: {{
                fontCache: 'global'
            }},
            options: {{
                renderActions: {{
                    addMenu: []
                }}
            }},
            startup: {{
                pageReady: function () {{
                    return MathJax.startup.defaultPageReady().then(scrollToBottom);
                }}
            }}
        }};
    </script>
    <script id="MathJax-script" async
        src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-svg.js">
    </script>
</head>
<body>
    {content}
    <div id="end"></div>
    <script>
        function scrollToBottom() {{
            var end = document.getElementById('end');
            if (end) {{
                end.scrollIntoView({{behavior: 'smooth'}});
            }}
        }}

        function markCopied(messageId, copied) {{
            var link = document.getElementById('copy-' + messageId);
            if (link) {{
                link.textContent = copied ? '\\u2713 Copied' : 'Copy';
            }}
        }}

        scrollToBottom();
    </script>
</body>
</html>
"""

DARK_THEME = {
    "bg_color": "#020617",
    "text_color": "#e2e8f0",
    "muted_color": "#64748b",
    "user_bg": "#4f46e5",
    "model_bg": "#0f172a",
    "border_color": "#1e293b",
    "accent_color": "#a5b4fc",
    "code_bg": "#1f2937",
    "code_color": "#fde047",
    "error_color": "#ef4444",
}

LIGHT_THEME = {
    "bg_color": "#ffffff",
    "text_color": "#1e293b",
    "muted_color": "#64748b",
    "user_bg": "#4f46e5",
    "model_bg": "#f8fafc",
    "border_color": "#e2e8f0",
    "accent_color": "#4f46e5",
    "code_bg": "#f1f5f9",
    "code_color": "#a16207",
    "error_color": "#ef4444",
}

# Display math first so '$$' is never read as two inline '$'
_MATH_PATTERN = re.compile(
    r"\$\$.+?\$\$"
    r"|\\\[.+?\\\]"
    r"|\\\(.+?\\\)"
    r"|(?<![\\$])\$(?!\s)[^$\n]+?(?<!\s)\$",
    re.DOTALL,
)
_PLACEHOLDER = "MATHSPAN{}X"
_PLACEHOLDER_PATTERN = re.compile(r"MATHSPAN(\d+)X")


def protect_math(text: str) -> tuple:
    """
    Replace math spans with placeholders.

    Returns:
        Tuple of (text with placeholders, list of extracted spans).
    """
    spans: List[str] = []

    def _stash(match: re.Match) -> str:
        spans.append(match.group(0))
        return _PLACEHOLDER.format(len(spans) - 1)

    return _MATH_PATTERN.sub(_stash, text), spans


def restore_math(rendered: str, spans: List[str]) -> str:
    """Put HTML-escaped math spans back in place of their placeholders."""

    def _unstash(match: re.Match) -> str:
        index = int(match.group(1))
        if index >= len(spans):
            return match.group(0)
        return html.escape(spans[index])

    return _PLACEHOLDER_PATTERN.sub(_unstash, rendered)


class MathMarkdownRenderer:
    """
    Renders chat content to HTML with MathJax.

    Usage:
        renderer = MathMarkdownRenderer(dark_mode=True)
        page = renderer.render_conversation(messages, is_loading=False)
    """

    def __init__(self, dark_mode: bool = True):
        """Initialize renderer with theme."""
        self.theme = DARK_THEME if dark_mode else LIGHT_THEME
        # Raw HTML from the model is escaped, never injected
        self._md = MarkdownIt("commonmark", {"html": False}).enable("table")

    def markdown_to_html(self, content: str) -> str:
        """Render Markdown with embedded math to an HTML fragment."""
        protected, spans = protect_math(content)
        rendered = self._md.render(protected)
        return restore_math(rendered, spans)

    def render_message(self, message: Message) -> str:
        """Render one message row: attachments, bubble and actions."""
        role = "user" if message.role == Role.USER else "model"
        message_id = html.escape(message.id, quote=True)
        parts = [f'<div class="row {role}" id="msg-{message_id}">', '<div class="column">']

        if message.is_thinking:
            parts.append('<div class="bubble thinking">Solving&hellip;</div></div></div>')
            return "\n".join(parts)

        if message.images:
            parts.append('<div class="attachments">')
            for image in message.images:
                parts.append(f'<img src="{to_data_url(image)}" alt="User attachment">')
            parts.append("</div>")

        parts.append(f'<div class="bubble">{self.markdown_to_html(message.content)}</div>')

        if message.role == Role.MODEL:
            parts.append(
                '<div class="actions">'
                f'<a id="copy-{message_id}" href="{ACTION_SCHEME}://copy/{message_id}">Copy</a>'
                f'<a href="{ACTION_SCHEME}://ask/{message_id}">Ask Doubt</a>'
                "</div>"
            )

        parts.append("</div></div>")
        return "\n".join(parts)

    def render_conversation(
        self, messages: Iterable[Message], is_loading: bool = False
    ) -> str:
        """
        Render the whole conversation as a page.

        Args:
            messages: Messages in display order
            is_loading: Append a placeholder bubble for the pending reply

        Returns:
            Complete HTML document with MathJax
        """
        rows = [self.render_message(m) for m in messages]
        if is_loading:
            rows.append(
                self.render_message(
                    Message(id=THINKING_ID, role=Role.MODEL, content="", is_thinking=True)
                )
            )
        content = '<div class="chat">' + "\n".join(rows) + "</div>"
        return PAGE_TEMPLATE.format(content=content, **self.theme)

    def render_preview(self, latex: Optional[str]) -> str:
        """
        Render the live input preview in display mode.

        Args:
            latex: Output of ``preview_latex``; None renders an empty page.
        """
        if latex is None:
            return PAGE_TEMPLATE.format(content="", **self.theme)

        formula = html.escape(latex, quote=False)
        content = (
            '<div class="preview">'
            '<div class="caption">FORMATTED PREVIEW</div>'
            f'<div class="formula">\\[{formula}\\]</div>'
            "</div>"
        )
        return PAGE_TEMPLATE.format(content=content, **self.theme)

    def set_dark_mode(self, enabled: bool):
        """Toggle dark mode theme."""
        self.theme = DARK_THEME if enabled else LIGHT_THEME


def parse_action_url(url: str) -> Optional[tuple]:
    """
    Split an in-page action link into (action, message id).

    Returns None for links that are not ``lapbom://<action>/<id>``.
    """
    prefix = f"{ACTION_SCHEME}://"
    if not url.startswith(prefix):
        return None
    action, _, message_id = url[len(prefix):].partition("/")
    if not action or not message_id:
        return None
    return action, message_id.rstrip("/")
