"""Rich console rendering of violations grouped by file."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from coderules.core.types import ReportSummary, Severity, Violation
from coderules.reporter.summary import generate_summary, group_by_file

__all__ = ["ConsoleReporter", "SNIPPET_MAX_CHARS"]

SNIPPET_MAX_CHARS = 80

_SEVERITY_STYLE = {Severity.ERROR: "bold red", Severity.WARNING: "bold yellow", Severity.INFO: "bold cyan"}
_SEVERITY_ICON = {Severity.ERROR: "✖", Severity.WARNING: "⚠", Severity.INFO: "ℹ"}
_SEPARATOR = "─" * 60


def _truncate(snippet: str) -> str:
    snippet = snippet.strip()
    if len(snippet) > SNIPPET_MAX_CHARS:
        return snippet[:SNIPPET_MAX_CHARS] + "..."
    return snippet


class ConsoleReporter:
    """Prints a violation report; colours can be switched off for plain logs."""

    def __init__(self, console: Console | None = None, use_colors: bool = True) -> None:
        self.use_colors = use_colors
        self.console = console or Console(no_color=not use_colors, highlight=False)

    def _s(self, text: str, style: str) -> str:
        """Escape *text* and wrap it in *style* when colours are on."""
        text = escape(text)
        return f"[{style}]{text}[/{style}]" if self.use_colors else text

    def _print(self, text: str = "") -> None:
        self.console.print(text, highlight=False)

    def format_violation(self, v: Violation) -> list[str]:
        icon = _SEVERITY_ICON[v.severity]
        out = [
            self._s(f"{v.file}:{v.line}:{v.column}", "dim"),
            "  " + self._s(f"{icon} {v.severity.value.upper()}", _SEVERITY_STYLE[v.severity])
            + " " + self._s(f"[{v.rule_id}]", "dim") + " " + escape(v.message),
        ]
        if v.code_snippet:
            out.append("  " + self._s(f"> {_truncate(v.code_snippet)}", "dim"))
        if v.suggestion:
            out.append("  " + self._s(f"→ {v.suggestion}", "green"))
        if v.can_auto_fix:
            out.append("  " + self._s("[auto-fix available]", "blue"))
        return out

    def generate_console_report(self, violations: list[Violation]) -> None:
        if not violations:
            self._print(self._s("✔ No violations found!", "bold green"))
            return
        self._print()
        self._print(self._s("Code Rules Checker Report", "bold"))
        self._print(self._s(_SEPARATOR, "dim"))
        for file, items in group_by_file(violations).items():
            self._print()
            self._print(self._s(file, "bold") + f" ({len(items)} violations)")
            for v in items:
                self._print()
                for line in self.format_violation(v):
                    self._print(line)
        self.print_summary(generate_summary(violations))

    def print_summary(self, summary: ReportSummary) -> None:
        self._print()
        self._print(self._s(_SEPARATOR, "dim"))
        self._print(self._s("Summary", "bold"))
        self._print()
        self._print(f"Total: {self._s(str(summary.total_violations), 'bold')} violations")
        self._print("  " + self._s(f"✖ Errors: {summary.by_severity['error']}", "red"))
        self._print("  " + self._s(f"⚠ Warnings: {summary.by_severity['warning']}", "yellow"))
        self._print("  " + self._s(f"ℹ Info: {summary.by_severity['info']}", "cyan"))
        self._print()
        self._print("By Project:")
        self._print(f"  Frontend: {summary.by_project.get('frontend', 0)}")
        self._print(f"  Backend: {summary.by_project.get('backend', 0)}")
        if summary.auto_fixable > 0:
            self._print()
            self._print(self._s(f"Auto-fixable: {summary.auto_fixable}", "green"))
            self._print(self._s("Run with --fix to auto-fix violations", "dim"))
