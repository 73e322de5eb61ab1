"""
Unit tests for page loading.
"""

import logging
from pathlib import Path

from hddp.pages import (
    FALLBACK_BODY,
    load_page,
    load_default_page,
    load_not_found_page,
)


class TestLoadPage:
    """Tests for load_page."""

    def test_reads_file(self, tmp_path: Path):
        """Test reading an existing page."""
        page = tmp_path / "page.html"
        page.write_text("<h1>Reçu</h1>", encoding="utf-8")

        assert load_page(page) == "<h1>Reçu</h1>"

    def test_missing_file_falls_back(self, tmp_path: Path, caplog):
        """Test that a missing page yields the literal fallback and logs."""
        with caplog.at_level(logging.ERROR, logger="hddp.pages"):
            body = load_page(tmp_path / "missing.html")

        assert body == FALLBACK_BODY == "404"
        assert "missing.html" in caplog.text

    def test_directory_falls_back(self, tmp_path: Path):
        """Test that an unreadable path yields the fallback."""
        assert load_page(tmp_path) == "404"

    def test_invalid_utf8_falls_back(self, tmp_path: Path):
        """Test that a page that isn't UTF-8 yields the fallback."""
        page = tmp_path / "latin1.html"
        page.write_bytes(b"caf\xe9")

        assert load_page(page) == "404"

    def test_custom_fallback(self, tmp_path: Path):
        """Test overriding the fallback text."""
        assert load_page(tmp_path / "missing.html", fallback="gone") == "gone"


class TestPagesDir:
    """Tests for the default and not-found page helpers."""

    def test_loads_both_pages(self, pages_dir: Path):
        """Test reading the pages from a pages directory."""
        assert load_default_page(pages_dir) == "<h1>Welcome</h1>"
        assert load_not_found_page(pages_dir) == "<h1>Not here</h1>"

    def test_empty_dir_falls_back(self, tmp_path: Path):
        """Test a pages directory with nothing in it."""
        assert load_default_page(tmp_path) == "404"
        assert load_not_found_page(str(tmp_path)) == "404"
