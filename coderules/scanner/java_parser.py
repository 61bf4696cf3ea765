"""Regex-driven structural parser for Java (Spring style) sources.

Recognises the package, the first top-level class or interface, annotations,
methods and class-level fields. Anything that does not match simply yields
empty results.
"""

from __future__ import annotations

import re

from coderules.core.types import (
    Annotation,
    BackendField,
    BackendMethod,
    FileInfo,
    ImportInfo,
    ParsedBackendFile,
)
from coderules.scanner.source_text import parse_comments, read_source, split_lines

__all__ = [
    "parse_java_file",
    "parse_java_source",
    "parse_annotations_in_line",
    "collect_annotations",
    "find_block_end",
]

_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;")
_IMPORT_RE = re.compile(r"^\s*import\s+(static\s+)?([\w.]+(?:\.\*)?)\s*;")
_CLASS_RE = re.compile(
    r"\bclass\s+(\w+)(?:<[^>{]*>)?(?:\s+extends\s+([\w.]+)(?:<[^>{]*>)?)?(?:\s+implements\s+([\w.,\s<>]+?))?\s*(?:\{|$)"
)
_INTERFACE_RE = re.compile(r"\binterface\s+(\w+)(?:<[^>{]*>)?(?:\s+extends\s+([\w.,\s<>]+?))?\s*(?:\{|$)")
_TYPE_PATTERN = r"[\w.]+(?:<[\w,\s<>?.\[\]]+>)?(?:\[\])*"
_METHOD_RE = re.compile(
    r"^\s*(public|private|protected)?\s*(?:static\s+)?(?:final\s+)?(?:abstract\s+)?(?:synchronized\s+)?"
    r"(?:default\s+)?(?:<[\w,\s]+>\s+)?(" + _TYPE_PATTERN + r")\s+(\w+)\s*\("
)
_FIELD_RE = re.compile(
    r"^\s*(public|private|protected)?\s*(?:static\s+)?(?:final\s+)?(?:transient\s+)?(?:volatile\s+)?"
    r"(" + _TYPE_PATTERN + r")\s+(\w+)\s*[;=]"
)
_ANNOTATION_START_RE = re.compile(r"@(\w+)")
_STRING_LITERAL_RE = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'')
_KEYWORDS = frozenset({
    "if", "for", "while", "switch", "catch", "return", "new", "else", "throw",
    "try", "do", "case", "synchronized", "class", "interface", "enum", "record",
    "package", "import", "assert", "yield",
})


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _split_top_level(text: str, sep: str = ",") -> list[str]:
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    buf: list[str] = []
    for ch in text:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "({[":
            depth += 1
        elif ch in ")}]":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    parts.append("".join(buf))
    return [p.strip() for p in parts if p.strip()]


def _read_balanced(text: str, open_idx: int) -> tuple[str, int]:
    """Return the text between the paren at *open_idx* and its match, plus the end index."""
    depth = 0
    quote: str | None = None
    for i in range(open_idx, len(text)):
        ch = text[i]
        if quote:
            if ch == quote and text[i - 1] != "\\":
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[open_idx + 1:i], i + 1
    return text[open_idx + 1:], len(text)


def _parse_parameters(args: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for part in _split_top_level(args):
        key, eq, value = part.partition("=")
        if eq and re.fullmatch(r"\s*\w+\s*", key) and not value.startswith("="):
            params[key.strip()] = _strip_quotes(value)
        else:
            params["value"] = _strip_quotes(part)
    return params


def parse_annotations_in_line(line: str, line_no: int) -> list[Annotation]:
    annotations: list[Annotation] = []
    pos = 0
    while True:
        m = _ANNOTATION_START_RE.search(line, pos)
        if not m:
            return annotations
        pos = m.end()
        params: dict[str, str] = {}
        rest = line[pos:]
        stripped = rest.lstrip()
        if stripped.startswith("("):
            open_idx = pos + (len(rest) - len(stripped))
            args, pos = _read_balanced(line, open_idx)
            params = _parse_parameters(args)
        annotations.append(Annotation(name=m.group(1), parameters=params, line=line_no))


def collect_annotations(lines: list[str], decl_index: int) -> list[Annotation]:
    """Annotations written directly above the declaration at 0-based *decl_index*.

    Walks upward over annotation and blank lines; any other line ends the walk.
    """
    start = decl_index
    i = decl_index - 1
    while i >= 0:
        stripped = lines[i].strip()
        if stripped.startswith("@"):
            start = i
        elif stripped:
            break
        i -= 1
    annotations: list[Annotation] = []
    for idx in range(start, decl_index):
        if lines[idx].strip().startswith("@"):
            annotations.extend(parse_annotations_in_line(lines[idx], idx + 1))
    return annotations


def _code_only(line: str) -> str:
    line = _STRING_LITERAL_RE.sub('""', line)
    cut = line.find("//")
    return line[:cut] if cut >= 0 else line


def find_block_end(lines: list[str], start_index: int) -> int:
    """0-based index of the line closing the brace block that opens at or after *start_index*.

    A declaration terminated by ``;`` before any ``{`` ends on that line.
    """
    depth = 0
    opened = False
    for j in range(start_index, len(lines)):
        for ch in _code_only(lines[j]):
            if ch == "{":
                depth += 1
                opened = True
            elif ch == "}":
                depth -= 1
            elif ch == ";" and not opened:
                return j
        if opened and depth <= 0:
            return j
    return start_index


def _parse_declaration(lines: list[str]) -> tuple[str, str | None, list[str], int, bool]:
    for idx, line in enumerate(lines):
        code = _code_only(line)
        if code.lstrip().startswith(("*", "/*", "@")):
            continue
        m = _CLASS_RE.search(code)
        if m:
            implements = [s.strip() for s in _split_top_level(m.group(3) or "")]
            return m.group(1), m.group(2), implements, idx, False
        m = _INTERFACE_RE.search(code)
        if m:
            extends = [s.strip() for s in _split_top_level(m.group(2) or "")]
            return m.group(1), None, extends, idx, True
    return "", None, [], 0, False


def _parse_package(lines: list[str]) -> str:
    for line in lines:
        m = _PACKAGE_RE.match(line)
        if m:
            return m.group(1)
    return ""


def _parse_imports(lines: list[str]) -> list[ImportInfo]:
    imports: list[ImportInfo] = []
    for idx, line in enumerate(lines, start=1):
        m = _IMPORT_RE.match(line)
        if m:
            source = m.group(2)
            imports.append(ImportInfo(source=source, named_imports=[source.rsplit(".", 1)[-1]], line=idx))
    return imports


def _parse_methods(lines: list[str]) -> list[BackendMethod]:
    methods: list[BackendMethod] = []
    for idx, line in enumerate(lines):
        m = _METHOD_RE.match(_code_only(line))
        if not m:
            continue
        modifier, return_type, name = m.groups()
        if return_type == name or return_type in _KEYWORDS or name in _KEYWORDS:
            continue
        methods.append(BackendMethod(
            name=name,
            return_type=return_type,
            annotations=collect_annotations(lines, idx),
            line=idx + 1,
            end_line=find_block_end(lines, idx) + 1,
            modifier=modifier or "default",
        ))
    return methods


def _parse_fields(lines: list[str], class_index: int) -> list[BackendField]:
    fields: list[BackendField] = []
    depth = 0
    for idx, line in enumerate(lines):
        code = _code_only(line)
        at_member_level = depth == 1 and idx > class_index
        depth += code.count("{") - code.count("}")
        if not at_member_level or "(" in code:
            continue
        m = _FIELD_RE.match(code)
        if not m or m.group(2) in _KEYWORDS:
            continue
        fields.append(BackendField(
            name=m.group(3),
            type=m.group(2),
            annotations=collect_annotations(lines, idx),
            line=idx + 1,
        ))
    return fields


def parse_java_source(file: FileInfo, content: str) -> ParsedBackendFile:
    lines = split_lines(content)
    class_name, extends, implements, class_index, is_interface = _parse_declaration(lines)
    return ParsedBackendFile(
        file=file,
        content=content,
        lines=lines,
        imports=_parse_imports(lines),
        comments=parse_comments(content, lines, strip_stars=True),
        class_name=class_name,
        package_name=_parse_package(lines),
        class_line=class_index + 1,
        is_interface=is_interface,
        class_annotations=collect_annotations(lines, class_index) if class_name else [],
        methods=_parse_methods(lines),
        fields=_parse_fields(lines, class_index),
        extends_class=extends,
        implements_interfaces=implements,
    )


def parse_java_file(file: FileInfo) -> ParsedBackendFile:
    return parse_java_source(file, read_source(file.path))
