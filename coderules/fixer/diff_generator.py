"""Diff previews for auto-fixable violations, plus console/markdown/unified renderings."""

from __future__ import annotations

import difflib

from rich.markup import escape

from coderules.core.types import DiffPreview, LineChange, Violation

__all__ = [
    "compute_fixed_line",
    "replacement_lines",
    "generate_diff",
    "format_diff_for_console",
    "format_diff_for_markdown",
    "generate_unified_diff",
]


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def compute_fixed_line(original: str, violation: Violation) -> str:
    """Rewrite one line: swap the snippet in place when possible, else replace the whole line."""
    fix = violation.fix_code or ""
    snippet = violation.code_snippet.strip()
    if snippet and "\n" not in fix and snippet in original:
        return original.replace(snippet, fix.strip(), 1)
    if fix and not fix[0].isspace():
        indent = _indent_of(original)
        return "\n".join(indent + part if part.strip() else part for part in fix.split("\n"))
    return fix


def replacement_lines(lines: list[str], violation: Violation) -> tuple[int, int, list[str]] | None:
    """0-based ``[start, end)`` range and the lines to splice in, or None when out of range."""
    start = violation.line
    end = violation.end_line if violation.end_line and violation.end_line > start else start
    if start < 1 or end > len(lines):
        return None
    if end > start:
        new_text = violation.fix_code or ""
        if new_text and not new_text[0].isspace():
            indent = _indent_of(lines[start - 1])
            new_text = "\n".join(indent + p if p.strip() else p for p in new_text.split("\n"))
        return start - 1, end, new_text.split("\n")
    return start - 1, end, compute_fixed_line(lines[start - 1], violation).split("\n")


def generate_diff(original_text: str, violation: Violation) -> DiffPreview:
    """Preview *violation*'s fix against *original_text*.

    Non-fixable violations and lines outside the file produce an empty preview
    whose ``before`` and ``after`` are identical.
    """
    if not violation.can_auto_fix or not violation.fix_code:
        return DiffPreview(file=violation.file, before=original_text, after=original_text)
    lines = original_text.split("\n")
    splice = replacement_lines(lines, violation)
    if splice is None:
        return DiffPreview(file=violation.file, before=original_text, after=original_text)

    start, end, new_lines = splice
    old_lines = lines[start:end]
    changes: list[LineChange] = []
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        for offset in range(max(i2 - i1, j2 - j1)):
            old = old_lines[i1 + offset] if i1 + offset < i2 else ""
            new = new_lines[j1 + offset] if j1 + offset < j2 else ""
            line = start + (j1 + offset if j1 + offset < j2 else i1 + offset) + 1
            changes.append(LineChange(line=line, old_content=old, new_content=new))
    after = "\n".join(lines[:start] + new_lines + lines[end:])
    return DiffPreview(file=violation.file, before=original_text, after=after, line_changes=changes)


def format_diff_for_console(diff: DiffPreview, use_colors: bool = True) -> str:
    """Rich-markup (or plain) rendering of a preview."""
    if diff.is_empty:
        return ""
    out = [f"[bold]{escape(diff.file)}[/bold]" if use_colors else diff.file]
    for change in diff.line_changes:
        if use_colors:
            out.append(f"[cyan]@@ Line {change.line} @@[/cyan]")
            out.append(f"[red]- {escape(change.old_content)}[/red]")
            out.append(f"[green]+ {escape(change.new_content)}[/green]")
        else:
            out.append(f"@@ Line {change.line} @@")
            out.append(f"- {change.old_content}")
            out.append(f"+ {change.new_content}")
    return "\n".join(out)


def format_diff_for_markdown(diff: DiffPreview) -> str:
    if diff.is_empty:
        return ""
    out = [f"**File:** `{diff.file}`", "", "```diff"]
    for change in diff.line_changes:
        out.append(f"@@ Line {change.line} @@")
        out.append(f"- {change.old_content}")
        out.append(f"+ {change.new_content}")
    out.append("```")
    return "\n".join(out)


def generate_unified_diff(diff: DiffPreview, context_lines: int = 3) -> str:
    return "".join(difflib.unified_diff(
        diff.before.splitlines(keepends=True),
        diff.after.splitlines(keepends=True),
        fromfile=f"a/{diff.file}",
        tofile=f"b/{diff.file}",
        n=context_lines,
    ))
