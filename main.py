#!/usr/bin/env python3
"""
Lap Bom - calculus solver backed by a remote language model.

Entry point for the application with CLI support.

Usage:
    lapbom                            # Launch GUI
    lapbom "∫ 2x dx"                  # Solve in terminal
    lapbom -i photo.jpg               # Solve a photographed problem
    lapbom --preview "√(x) + π"       # Show the LaTeX preview only
"""

import sys
import os
import argparse
import json
import logging

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from lapbom import __version__


logger = logging.getLogger("lapbom")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lapbom",
        description="Calculus solver: type or photograph a problem, get LaTeX back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lapbom                                  Launch the GUI
  lapbom "∫ 2x dx"                        Solve and print the LaTeX answer
  lapbom -i homework.jpg                  Solve the problem in a photo
  lapbom -c "$$x^2/2 + C$$" "Why /2?"     Ask about an earlier answer
  lapbom -f json "lim_{x→0} sin(x)/x"     Output as JSON
  lapbom --preview "∑ 1/n^2"              Print the preview LaTeX (offline)
        """,
    )

    # Positional: problem text
    parser.add_argument(
        "problem",
        nargs="?",
        help="Problem to solve (Unicode symbols or LaTeX)",
    )

    # Attached images
    parser.add_argument(
        "-i",
        "--image",
        metavar="PATH",
        action="append",
        help="Attach an image of the problem (repeatable)",
    )

    # Follow-up context
    parser.add_argument(
        "-c",
        "--context",
        metavar="TEXT",
        help="Earlier answer the question refers to",
    )

    # Output format
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # Model override
    parser.add_argument(
        "-m",
        "--model",
        help="Model name (default: from LAPBOM_MODEL or gemini-2.5-flash)",
    )

    # Clipboard input
    parser.add_argument(
        "--from-clipboard",
        action="store_true",
        help="Read the problem from the clipboard",
    )

    # Preview only
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Print the LaTeX preview of the problem and exit",
    )

    # GUI mode (explicit)
    parser.add_argument(
        "--gui",
        action="store_true",
        help="Launch GUI mode (default if no problem given)",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Verbose
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output",
    )

    return parser


def solve_problem_cli(
    problem: str,
    image_paths: list,
    context: str | None,
    output_format: str,
    settings,
    client=None,
) -> int:
    """Send one problem and print the answer."""
    from lapbom.input.images import load_image_file
    from lapbom.models import Message, Role
    from lapbom.session import ChatSession
    from lapbom.utils.errors import LapBomError, format_error_for_user

    session = ChatSession()

    try:
        for path in image_paths:
            session.attach_image(load_image_file(path, max_size=settings.image_max_size))

        if context:
            session.set_reply_to(Message(id="context", role=Role.MODEL, content=context))

        pending = session.begin_submit(problem)
        if pending is None:
            print("Error: Nothing to solve. Give a problem or an image.", file=sys.stderr)
            return 1

        if client is None:
            from lapbom.client.gemini import GeminiClient

            client = GeminiClient(settings)

        logger.info("Sending problem to %s", settings.model)
        reply = client.request(
            pending.history, pending.prompt, pending.images, pending.context
        )
    except LapBomError as e:
        print(f"Error: {format_error_for_user(e)}", file=sys.stderr)
        return 1

    session.complete(reply, pending)

    if output_format == "json":
        output = {
            "problem": problem,
            "prompt": pending.prompt,
            "images": len(pending.images),
            "model": settings.model,
            "reply": reply,
        }
        if context:
            output["context"] = context
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(reply)

    return 0


def preview_cli(problem: str) -> int:
    """Print the preview LaTeX for a problem."""
    from lapbom.output.preview import preview_latex

    latex = preview_latex(problem)
    if latex is None:
        print("Error: Nothing to preview", file=sys.stderr)
        return 1
    print(latex)
    return 0


def get_clipboard_text() -> str | None:
    """Get text from system clipboard."""
    try:
        # Try PyQt6 first (most reliable)
        from PyQt6.QtWidgets import QApplication

        app = QApplication.instance() or QApplication([])
        clipboard = app.clipboard()
        return clipboard.text()
    except ImportError:
        pass

    import subprocess

    for cmd in (
        ["xclip", "-selection", "clipboard", "-o"],
        ["xsel", "--clipboard", "--output"],
    ):
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            continue
        if result.returncode == 0:
            return result.stdout

    return None


def main(argv=None, client=None):
    """Main entry point."""
    from lapbom.utils.config import configure_logging, load_settings
    from lapbom.utils.errors import LapBomError

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except LapBomError as e:
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    configure_logging("INFO" if args.verbose else settings.log_level)
    if args.model:
        settings.model = args.model

    # Get problem from clipboard if requested
    problem = args.problem
    if args.from_clipboard:
        problem = get_clipboard_text()
        if not problem:
            print("Error: Could not read from clipboard", file=sys.stderr)
            return 1
        problem = problem.strip()
        if not problem:
            print("Error: Clipboard is empty", file=sys.stderr)
            return 1

    if args.preview:
        return preview_cli(problem or "")

    image_paths = args.image or []

    # GUI mode
    if args.gui or (not problem and not image_paths):
        from lapbom.gui.main_window import run_app

        run_app(settings)
        return 0

    # CLI solve mode
    return solve_problem_cli(
        problem=problem or "",
        image_paths=image_paths,
        context=args.context,
        output_format=args.format,
        settings=settings,
        client=client,
    )


if __name__ == "__main__":
    sys.exit(main() or 0)
