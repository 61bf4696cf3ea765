"""Helpers shared by the frontend and backend parsers."""

from __future__ import annotations

import re
from pathlib import Path

from coderules.core.types import CommentInfo

__all__ = ["read_source", "split_lines", "line_of_offset", "parse_comments"]

_LINE_COMMENT_RE = re.compile(r"(?<!:)//(.*)$")
_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_BLOCK_DELIMS_RE = re.compile(r"^/\*+\s*|\s*\*/$")
_STAR_PREFIX_RE = re.compile(r"^\s*\*\s?", re.MULTILINE)


def read_source(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def split_lines(content: str) -> list[str]:
    return content.split("\n")


def line_of_offset(content: str, offset: int) -> int:
    """1-based line number of the character at *offset*."""
    return content.count("\n", 0, offset) + 1


def parse_comments(content: str, lines: list[str], strip_stars: bool = False) -> list[CommentInfo]:
    """Collect ``//`` comments line by line, then ``/* */`` blocks over the whole text."""
    comments: list[CommentInfo] = []
    for idx, line in enumerate(lines, start=1):
        m = _LINE_COMMENT_RE.search(line)
        if m:
            comments.append(CommentInfo(content=m.group(1).strip(), line=idx, end_line=idx, is_block=False))

    for m in _BLOCK_COMMENT_RE.finditer(content):
        body = _BLOCK_DELIMS_RE.sub("", m.group(0))
        if strip_stars:
            body = _STAR_PREFIX_RE.sub("", body)
        comments.append(CommentInfo(
            content=body.strip(),
            line=line_of_offset(content, m.start()),
            end_line=line_of_offset(content, m.end()),
            is_block=True,
        ))
    return comments
