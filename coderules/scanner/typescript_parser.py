"""Line-oriented structural parser for TypeScript, TSX and JSX sources.

Only single-line ``import`` statements are recognised; an import spread over
several lines is not reported.
"""

from __future__ import annotations

import re

from coderules.core.types import ExportInfo, FileInfo, ImportInfo, ParsedFile
from coderules.scanner.source_text import parse_comments, read_source, split_lines

__all__ = ["parse_typescript_file", "parse_typescript_source", "has_directive"]

_SIDE_EFFECT_IMPORT_RE = re.compile(r"""^import\s+['"]([^'"]+)['"]""")
_IMPORT_RE = re.compile(
    r"""^import\s+(?:type\s+)?(?:(\w+)\s*,?\s*)?(?:\{\s*([^}]+)\s*\})?(?:\*\s+as\s+(\w+))?\s*from\s*['"]([^'"]+)['"]"""
)
_DEFAULT_EXPORT_RE = re.compile(r"export\s+default\s+(?:async\s+)?(?:function\s+|class\s+)?(\w+)?")
_NAMED_EXPORT_RE = re.compile(
    r"^export\s+(?:async\s+)?(?:const|let|var|function|class|interface|type|enum)\s+(\w+)"
)
_DIRECTIVE_SCAN_LINES = 10


def _parse_imports(lines: list[str]) -> list[ImportInfo]:
    imports: list[ImportInfo] = []
    for idx, raw in enumerate(lines, start=1):
        line = raw.strip()
        m = _SIDE_EFFECT_IMPORT_RE.match(line)
        if m:
            imports.append(ImportInfo(source=m.group(1), line=idx))
            continue
        m = _IMPORT_RE.match(line)
        if not m:
            continue
        default, named, namespace, source = m.groups()
        names = [n.strip().split(" as ")[0].strip() for n in named.split(",")] if named else []
        imports.append(ImportInfo(
            source=source,
            named_imports=[n for n in names if n],
            default_import=default or None,
            namespace_import=namespace or None,
            line=idx,
        ))
    return imports


def _parse_exports(lines: list[str]) -> list[ExportInfo]:
    exports: list[ExportInfo] = []
    for idx, raw in enumerate(lines, start=1):
        line = raw.strip()
        if line.startswith("export default"):
            m = _DEFAULT_EXPORT_RE.match(line)
            exports.append(ExportInfo(name=(m.group(1) if m else None) or "default", is_default=True, line=idx))
            continue
        m = _NAMED_EXPORT_RE.match(line)
        if m:
            exports.append(ExportInfo(name=m.group(1), is_default=False, line=idx))
    return exports


def has_directive(lines: list[str], directive: str) -> bool:
    """True when *directive* is the first statement within the leading lines."""
    accepted = {f"'{directive}'", f'"{directive}"', f"'{directive}';", f'"{directive}";'}
    for raw in lines[:_DIRECTIVE_SCAN_LINES]:
        line = raw.strip()
        if line in accepted:
            return True
        if line and not line.startswith(("//", "/*", "*")):
            return False
    return False


def parse_typescript_source(file: FileInfo, content: str) -> ParsedFile:
    lines = split_lines(content)
    return ParsedFile(
        file=file,
        content=content,
        lines=lines,
        imports=_parse_imports(lines),
        exports=_parse_exports(lines),
        comments=parse_comments(content, lines),
        has_use_client=has_directive(lines, "use client"),
        has_use_server=has_directive(lines, "use server"),
    )


def parse_typescript_file(file: FileInfo) -> ParsedFile:
    return parse_typescript_source(file, read_source(file.path))
