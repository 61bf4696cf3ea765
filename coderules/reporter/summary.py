"""Summary counts shared by the console and markdown reporters."""

from __future__ import annotations

from coderules.core.types import ReportSummary, Violation

__all__ = ["generate_summary", "group_by_file"]


def generate_summary(violations: list[Violation]) -> ReportSummary:
    summary = ReportSummary(total_violations=len(violations))
    for v in violations:
        summary.by_project[v.project_type.value] = summary.by_project.get(v.project_type.value, 0) + 1
        summary.by_severity[v.severity.value] += 1
        summary.by_category[v.category.value] = summary.by_category.get(v.category.value, 0) + 1
        summary.by_file[v.file] = summary.by_file.get(v.file, 0) + 1
        if v.can_auto_fix and v.fix_code:
            summary.auto_fixable += 1
    return summary


def group_by_file(violations: list[Violation]) -> dict[str, list[Violation]]:
    """Violations keyed by file, in order of each file's first occurrence."""
    grouped: dict[str, list[Violation]] = {}
    for v in violations:
        grouped.setdefault(v.file, []).append(v)
    return grouped
