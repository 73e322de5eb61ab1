"""
Page bodies read from disk at startup.

The server ships two pages:

    <pages_dir>/default/index.html   served at GET /
    <pages_dir>/404/index.html       body of the not-found response

A missing or unreadable page never stops the server from starting; the
literal fallback "404" is served in its place.
"""

import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)

FALLBACK_BODY = "404"

DEFAULT_PAGE = Path("default") / "index.html"
NOT_FOUND_PAGE = Path("404") / "index.html"


def load_page(path: Union[str, Path], fallback: str = FALLBACK_BODY) -> str:
    """
    Read a page as UTF-8 text.

    Args:
        path: File to read.
        fallback: Text returned when the file can't be read.

    Returns:
        The file contents, or fallback.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read page {path}: {e}")
        return fallback


def load_default_page(pages_dir: Union[str, Path]) -> str:
    return load_page(Path(pages_dir) / DEFAULT_PAGE)


def load_not_found_page(pages_dir: Union[str, Path]) -> str:
    return load_page(Path(pages_dir) / NOT_FOUND_PAGE)
