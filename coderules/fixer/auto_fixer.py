"""Facade over diff previews and fix application used by the engine and the CLI."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from coderules.core.types import DiffPreview, FixResult, Violation
from coderules.fixer import diff_generator
from coderules.fixer.fix_applier import FixApplier

__all__ = ["AutoFixer", "get_fixable_violations", "print_fix_results"]


def get_fixable_violations(violations: list[Violation]) -> list[Violation]:
    return [v for v in violations if v.can_auto_fix and v.fix_code]


def print_fix_results(results: list[FixResult], console: Console) -> None:
    """Print one line per fix and a success/failure tally."""
    if not results:
        console.print("[dim]No fixes to apply.[/dim]")
        return
    succeeded = 0
    for result in results:
        where = escape(f"{result.file}:{result.violation.line}")
        rule = escape(f"[{result.violation.rule_id}]")
        if result.success:
            succeeded += 1
            console.print(f"[green]✔[/green] {where} {rule}")
        else:
            console.print(f"[red]✖[/red] {where} {rule} {escape(result.error or '')}")
    failed = len(results) - succeeded
    console.print(f"\nFixed {succeeded} of {len(results)} violation(s)" + (f", {failed} failed" if failed else ""))


class AutoFixer:
    def __init__(self, root_dir: Path | None = None, backup: bool = False, use_colors: bool = True) -> None:
        self.applier = FixApplier(root_dir=root_dir, backup=backup)
        self.use_colors = use_colors

    def get_fixable_violations(self, violations: list[Violation]) -> list[Violation]:
        return get_fixable_violations(violations)

    def get_fixable_count(self, violations: list[Violation]) -> int:
        return len(get_fixable_violations(violations))

    def apply_all_fixes(self, violations: list[Violation]) -> list[FixResult]:
        return self.applier.apply_multiple_fixes(get_fixable_violations(violations))

    def preview_fix(self, violation: Violation) -> DiffPreview:
        return self.applier.preview_fix(violation)

    def preview_all_fixes(self, violations: list[Violation]) -> list[DiffPreview]:
        return self.applier.preview_multiple_fixes(violations)

    def format_diff_for_console(self, diff: DiffPreview) -> str:
        return diff_generator.format_diff_for_console(diff, use_colors=self.use_colors)

    def format_diff_for_markdown(self, diff: DiffPreview) -> str:
        return diff_generator.format_diff_for_markdown(diff)

    def print_fix_results(self, results: list[FixResult], console: Console) -> None:
        print_fix_results(results, console)
