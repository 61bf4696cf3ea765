"""Markdown report: summary tables followed by per-project, per-file violation sections."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from coderules.core.types import ProjectType, Severity, Violation
from coderules.reporter.summary import generate_summary, group_by_file

__all__ = ["MarkdownReporter", "format_category", "write_markdown_report"]

logger = logging.getLogger(__name__)

_SEVERITY_EMOJI = {Severity.ERROR: "🔴", Severity.WARNING: "🟡", Severity.INFO: "🔵"}


def format_category(category: str) -> str:
    """``exception-handling`` -> ``Exception Handling``."""
    return " ".join(word[:1].upper() + word[1:] for word in category.split("-"))


class MarkdownReporter:
    def generate_markdown_report(self, violations: list[Violation], generated_at: datetime | None = None) -> str:
        summary = generate_summary(violations)
        timestamp = (generated_at or datetime.now(timezone.utc)).isoformat()
        lines = [
            "# Code Rules Checker Report",
            "",
            f"Generated: {timestamp}",
            "",
            "## Summary",
            "",
            "| Metric | Count |",
            "|--------|-------|",
            f"| Total Violations | {summary.total_violations} |",
            f"| 🔴 Errors | {summary.by_severity['error']} |",
            f"| 🟡 Warnings | {summary.by_severity['warning']} |",
            f"| 🔵 Info | {summary.by_severity['info']} |",
            f"| 🔧 Auto-fixable | {summary.auto_fixable} |",
            "",
            "### By Project",
            "",
            "| Project | Count |",
            "|---------|-------|",
            f"| Frontend | {summary.by_project.get('frontend', 0)} |",
            f"| Backend | {summary.by_project.get('backend', 0)} |",
            "",
            "### By Category",
            "",
            "| Category | Count |",
            "|----------|-------|",
        ]
        lines.extend(f"| {format_category(cat)} | {count} |" for cat, count in summary.by_category.items())
        lines.append("")

        for project, title in ((ProjectType.FRONTEND, "Frontend"), (ProjectType.BACKEND, "Backend")):
            subset = [v for v in violations if v.project_type is project]
            if subset:
                lines.extend([f"## {title} Violations", ""])
                lines.extend(self._violations_section(subset))

        if not violations:
            lines.extend([
                "## ✅ No Violations Found",
                "",
                "Great job! Your code follows all the coding rules.",
            ])
        return "\n".join(lines)

    def _violations_section(self, violations: list[Violation]) -> list[str]:
        lines: list[str] = []
        for file, items in group_by_file(violations).items():
            lines.extend([f"### 📁 {file}", ""])
            for v in sorted(items, key=lambda item: item.line):
                auto_fix = " `[auto-fix]`" if v.can_auto_fix else ""
                lines.extend([
                    f"#### {_SEVERITY_EMOJI[v.severity]} Line {v.line}: {v.rule_id}{auto_fix}",
                    "",
                    f"**{v.rule_name}** - {v.message}",
                    "",
                ])
                if v.code_snippet:
                    lines.extend(["```", v.code_snippet.strip(), "```", ""])
                if v.suggestion:
                    lines.extend([f"💡 **Suggestion:** {v.suggestion}", ""])
                if v.fix_code:
                    lines.extend(["**Suggested fix:**", "```", v.fix_code.strip(), "```", ""])
        return lines


def write_markdown_report(violations: list[Violation], path: Path) -> Path:
    """Render the markdown report and write it to *path*, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(MarkdownReporter().generate_markdown_report(violations), encoding="utf-8")
    logger.debug("Markdown report written to %s", path)
    return path
