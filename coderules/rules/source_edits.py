"""Line helpers shared by rules that emit insertion-style fixes."""

from __future__ import annotations

from coderules.core.types import ParsedFile

__all__ = ["is_comment_line", "indent_of", "insert_before", "insert_after", "import_anchor", "import_fix"]


def is_comment_line(line: str) -> bool:
    return line.lstrip().startswith(("//", "*", "/*"))


def indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def insert_before(file: ParsedFile, line: int, new_lines: list[str]) -> str:
    """Fix code that replaces *line* with *new_lines* followed by the untouched original line."""
    original = file.lines[line - 1]
    indent = indent_of(original)
    return "\n".join([indent + text for text in new_lines] + [original])


def insert_after(file: ParsedFile, line: int, new_lines: list[str]) -> str:
    original = file.lines[line - 1]
    indent = indent_of(original)
    return "\n".join([original] + [indent + text for text in new_lines])


def import_anchor(file: ParsedFile) -> tuple[int, bool]:
    """Line to anchor a new import on, and whether to insert after it.

    Imports go above the first existing import; otherwise just below a leading
    ``use client``/``use server`` directive; otherwise at the top of the file.
    """
    if file.imports:
        return min(imp.line for imp in file.imports), False
    if file.has_use_client or file.has_use_server:
        for idx, line in enumerate(file.lines[:10], start=1):
            if "use client" in line or "use server" in line:
                return idx, True
    return 1, False


def import_fix(file: ParsedFile, statement: str) -> tuple[int, str]:
    line, after = import_anchor(file)
    if after:
        return line, insert_after(file, line, [statement])
    return line, insert_before(file, line, [statement])
