"""Apply fix code to files on disk through a per-file edit buffer."""

from __future__ import annotations

import logging
import shutil
from collections import defaultdict
from pathlib import Path

from coderules.core.types import DiffPreview, FixResult, Violation
from coderules.fixer.diff_generator import generate_diff, replacement_lines

__all__ = ["EditBuffer", "FixApplier", "FixConflictError", "backup_file", "restore_from_backup", "BACKUP_SUFFIX"]

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


class FixConflictError(Exception):
    def __init__(self, line: int) -> None:
        self.line = line
        super().__init__(f"Fix conflicts with another fix on line {line}")


class EditBuffer:
    """Ordered line-range replacements for one file.

    Edits must arrive bottom-up (descending start line) so that every range is
    still expressed in the original file's coordinates when it is applied.
    A snippet swap may land on a line that an earlier one-line edit already
    rewrote; any other overlap is a conflict.
    Windows line endings are normalised while editing and restored by ``text``.
    """

    def __init__(self, text: str) -> None:
        self.newline = "\r\n" if "\r\n" in text else "\n"
        self.lines = text.replace("\r\n", "\n").split("\n")
        self._applied: list[tuple[int, int, int]] = []

    def replace(self, start: int, end: int, new_lines: list[str], inline: bool = False) -> None:
        """Replace 0-based ``lines[start:end]`` with *new_lines*.

        With *inline*, a one-line edit of a line that was itself rewritten in
        place by an earlier one-line edit is applied on top of it.
        """
        stacked = inline and end == start + 1 and len(new_lines) == 1
        for other_start, other_end, produced in self._applied:
            if stacked and other_start == start and other_end == end and produced == 1:
                continue
            if start == other_start or end > other_start:
                raise FixConflictError(other_start + 1)
        self.lines[start:end] = new_lines
        self._applied.append((start, end, len(new_lines)))

    @property
    def text(self) -> str:
        return self.newline.join(self.lines)


def backup_file(path: Path) -> Path:
    """Copy *path* to ``<path>.backup`` and return the backup location."""
    path = Path(path)
    backup = path.with_name(path.name + BACKUP_SUFFIX)
    shutil.copy2(path, backup)
    return backup


def restore_from_backup(path: Path) -> bool:
    """Move ``<path>.backup`` back over *path*; False when there is no backup."""
    path = Path(path)
    backup = path.with_name(path.name + BACKUP_SUFFIX)
    if not backup.is_file():
        return False
    shutil.move(str(backup), str(path))
    return True


def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def _write(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)


def _is_snippet_swap(violation: Violation, current: str) -> bool:
    """True when the fix swaps a snippet that is still present in *current*."""
    snippet = violation.code_snippet.strip()
    single_line = not (violation.end_line and violation.end_line > violation.line)
    return single_line and bool(snippet) and "\n" not in (violation.fix_code or "") and snippet in current


class FixApplier:
    """Writes fixes for auto-fixable violations back to their source files."""

    def __init__(self, root_dir: Path | None = None, backup: bool = False) -> None:
        self.root_dir = Path(root_dir) if root_dir is not None else None
        self.backup = backup

    def resolve_path(self, violation: Violation) -> Path:
        if violation.source_path is not None:
            return Path(violation.source_path)
        if self.root_dir is not None:
            return self.root_dir / violation.file
        return Path(violation.file)

    def apply_fix(self, violation: Violation) -> FixResult:
        return self.apply_multiple_fixes([violation])[0]

    def apply_multiple_fixes(self, violations: list[Violation]) -> list[FixResult]:
        """Apply every fixable violation, one buffer and one write per file.

        Results come back in input order; non-fixable violations get a failed
        result without touching the disk.
        """
        results: dict[int, FixResult] = {}
        by_file: dict[Path, list[tuple[int, Violation]]] = defaultdict(list)
        for idx, v in enumerate(violations):
            if not v.can_auto_fix or not v.fix_code:
                results[idx] = FixResult(success=False, file=v.file, violation=v, error="Violation cannot be auto-fixed")
            else:
                by_file[self.resolve_path(v)].append((idx, v))

        for path, items in by_file.items():
            results.update(self._apply_to_file(path, items))
        return [results[i] for i in range(len(violations))]

    def _apply_to_file(self, path: Path, items: list[tuple[int, Violation]]) -> dict[int, FixResult]:
        results: dict[int, FixResult] = {}
        try:
            buffer = EditBuffer(_read(path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return {idx: FixResult(success=False, file=v.file, violation=v, error=str(exc)) for idx, v in items}

        applied: list[int] = []
        for idx, v in sorted(items, key=lambda item: (item[1].line, item[1].end_line or 0), reverse=True):
            splice = replacement_lines(buffer.lines, v)
            if splice is None:
                results[idx] = FixResult(success=False, file=v.file, violation=v, error=f"Invalid line number: {v.line}")
                continue
            try:
                buffer.replace(*splice, inline=_is_snippet_swap(v, buffer.lines[v.line - 1]))
            except FixConflictError as exc:
                results[idx] = FixResult(success=False, file=v.file, violation=v, error=str(exc))
                continue
            applied.append(idx)

        if applied:
            try:
                if self.backup:
                    backup_file(path)
                _write(path, buffer.text)
            except OSError as exc:
                logger.warning("Cannot write %s: %s", path, exc)
                for idx, v in items:
                    if idx in applied:
                        results[idx] = FixResult(success=False, file=v.file, violation=v, error=str(exc))
                return results
            logger.debug("Applied %d fix(es) to %s", len(applied), path)
        for idx, v in items:
            if idx in applied:
                results[idx] = FixResult(success=True, file=v.file, violation=v)
        return results

    def preview_fix(self, violation: Violation) -> DiffPreview:
        try:
            original = _read(self.resolve_path(violation)).replace("\r\n", "\n")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot preview fix for %s: %s", violation.file, exc)
            return DiffPreview(file=violation.file, before="", after="")
        return generate_diff(original, violation)

    def preview_multiple_fixes(self, violations: list[Violation]) -> list[DiffPreview]:
        previews = (self.preview_fix(v) for v in violations if v.can_auto_fix and v.fix_code)
        return [p for p in previews if not p.is_empty]
