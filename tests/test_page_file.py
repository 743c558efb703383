"""
Tests for the temp file used for oversized conversation pages.
"""

from pathlib import Path

import pytest

pytest.importorskip("PyQt6.QtWidgets")


class TestPageFile:
    """Test writing and cleaning up the page file."""

    def test_write_creates_file(self):
        from lapbom.output.mathjax_widget import PageFile

        page_file = PageFile()
        try:
            path = Path(page_file.write("<html>big</html>"))

            assert path.exists()
            assert path.read_text(encoding="utf-8") == "<html>big</html>"
            assert path.name.startswith("lapbom_")
        finally:
            page_file.remove()

    def test_rewrite_reuses_file(self):
        from lapbom.output.mathjax_widget import PageFile

        page_file = PageFile()
        try:
            first = page_file.write("one")
            second = page_file.write("two")

            assert first == second
            assert Path(second).read_text(encoding="utf-8") == "two"
        finally:
            page_file.remove()

    def test_remove_deletes_file(self):
        from lapbom.output.mathjax_widget import PageFile

        page_file = PageFile()
        path = Path(page_file.write("<html>photos</html>"))
        page_file.remove()

        assert not path.exists()
        assert page_file.path is None

    def test_remove_twice(self):
        from lapbom.output.mathjax_widget import PageFile

        page_file = PageFile()
        page_file.remove()
        page_file.write("x")
        page_file.remove()
        page_file.remove()
