"""Filename helper for output paths."""

from __future__ import annotations

import re

FORBIDDEN_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
WHITESPACE_RE = re.compile(r"\s+")


def safe_filename(name: str) -> str:
    """Lowercase *name*, drop characters filesystems reject, collapse spaces."""
    name = FORBIDDEN_RE.sub("", name.lower())
    name = WHITESPACE_RE.sub(" ", name).strip(" .")
    return name or "untitled"


def numbered_name(index: int, title: str) -> str:
    """``"03 - guard retention"`` style prefix used for folders and files."""
    return f"{index:02d} - {safe_filename(title)}"
