"""Tests for the summary model and the console / markdown reporters."""
from __future__ import annotations
import io
from datetime import datetime, timezone
from rich.console import Console
from coderules.core.types import ProjectType, RuleCategory, Severity
from coderules.reporter.console_reporter import SNIPPET_MAX_CHARS, ConsoleReporter
from coderules.reporter.markdown_reporter import MarkdownReporter, format_category, write_markdown_report
from coderules.reporter.summary import generate_summary, group_by_file
from tests.conftest import make_violation


def _mixed():
    return [
        make_violation(5, "window.location.href", "router.push('/')", file="app/a.tsx", severity=Severity.ERROR),
        make_violation(9, "any", None, file="app/b.tsx", category=RuleCategory.TYPES, rule_id="FE-TYPE-001"),
        make_violation(3, "x", None, file="app/a.tsx", severity=Severity.INFO, category=RuleCategory.COMMENTS,
                       rule_id="FE-CMT-001"),
        make_violation(20, "catch", None, file="service/UserServiceImpl.java", project_type=ProjectType.BACKEND,
                       category=RuleCategory.EXCEPTION_HANDLING, rule_id="BE-EXC-001", severity=Severity.ERROR),
    ]


def _capture(use_colors: bool = False) -> tuple[ConsoleReporter, io.StringIO]:
    out = io.StringIO()
    return ConsoleReporter(Console(file=out, width=200, no_color=True), use_colors=use_colors), out


class TestSummary:
    def test_counts(self) -> None:
        summary = generate_summary(_mixed())
        assert summary.total_violations == 4
        assert summary.by_severity == {"error": 2, "warning": 1, "info": 1}
        assert summary.by_project == {"frontend": 3, "backend": 1}
        assert summary.by_file == {"app/a.tsx": 2, "app/b.tsx": 1, "service/UserServiceImpl.java": 1}
        assert summary.auto_fixable == 1

    def test_totals_agree(self) -> None:
        summary = generate_summary(_mixed())
        assert summary.total_violations == sum(summary.by_severity.values()) == sum(summary.by_category.values())

    def test_empty(self) -> None:
        summary = generate_summary([])
        assert summary.total_violations == 0 and summary.by_category == {} and summary.auto_fixable == 0

    def test_group_by_file_keeps_first_seen_order(self) -> None:
        grouped = group_by_file(_mixed())
        assert list(grouped) == ["app/a.tsx", "app/b.tsx", "service/UserServiceImpl.java"]
        assert [v.line for v in grouped["app/a.tsx"]] == [5, 3]


class TestConsoleReporter:
    def test_no_violations_prints_one_line(self) -> None:
        reporter, out = _capture()
        reporter.generate_console_report([])
        assert out.getvalue().splitlines() == ["✔ No violations found!"]

    def test_report_sections(self) -> None:
        reporter, out = _capture()
        reporter.generate_console_report(_mixed())
        text = out.getvalue()
        assert "Code Rules Checker Report" in text
        assert "app/a.tsx (2 violations)" in text
        assert "Total: 4 violations" in text and "✖ Errors: 2" in text and "ℹ Info: 1" in text
        assert "Frontend: 3" in text and "Backend: 1" in text
        assert "Auto-fixable: 1" in text and "Run with --fix to auto-fix violations" in text

    def test_no_fix_hint_without_fixable(self) -> None:
        reporter, out = _capture()
        reporter.generate_console_report(_mixed()[1:])
        assert "Run with --fix" not in out.getvalue()

    def test_format_violation_plain(self) -> None:
        lines = ConsoleReporter(use_colors=False).format_violation(_mixed()[0])
        assert lines[0] == "app/a.tsx:5:1"
        assert lines[1] == "  ✖ ERROR \\[FE-NAV-001] sample message"
        assert lines[3] == "  → sample suggestion"
        assert lines[-1] == "  \\[auto-fix available]"

    def test_brackets_survive_printing(self) -> None:
        reporter, out = _capture()
        reporter.generate_console_report(_mixed()[:1])
        assert "[FE-NAV-001]" in out.getvalue() and "[auto-fix available]" in out.getvalue()

    def test_snippet_truncated(self) -> None:
        v = make_violation(1, "x" * (SNIPPET_MAX_CHARS + 20), None)
        lines = ConsoleReporter(use_colors=False).format_violation(v)
        assert lines[2] == "  > " + "x" * SNIPPET_MAX_CHARS + "..."

    def test_colour_markup(self) -> None:
        lines = ConsoleReporter(use_colors=True).format_violation(_mixed()[0])
        assert lines[1].startswith("  [bold red]") and "\\[FE-NAV-001]" in lines[1]


class TestMarkdownReporter:
    def test_sections(self) -> None:
        stamp = datetime(2024, 1, 2, tzinfo=timezone.utc)
        md = MarkdownReporter().generate_markdown_report(_mixed(), generated_at=stamp)
        assert md.startswith("# Code Rules Checker Report")
        assert f"Generated: {stamp.isoformat()}" in md
        assert "| Total Violations | 4 |" in md and "| 🔴 Errors | 2 |" in md and "| 🔧 Auto-fixable | 1 |" in md
        assert "| Exception Handling | 1 |" in md
        assert md.index("## Frontend Violations") < md.index("## Backend Violations")
        assert "### 📁 app/a.tsx" in md
        assert "#### 🔴 Line 5: FE-NAV-001 `[auto-fix]`" in md
        assert "**Suggested fix:**" in md and "No Violations Found" not in md

    def test_lines_sorted_within_file(self) -> None:
        md = MarkdownReporter().generate_markdown_report(_mixed())
        assert md.index("Line 3: FE-CMT-001") < md.index("Line 5: FE-NAV-001")

    def test_backend_only(self) -> None:
        md = MarkdownReporter().generate_markdown_report(_mixed()[3:])
        assert "## Backend Violations" in md and "## Frontend Violations" not in md

    def test_empty_report(self) -> None:
        md = MarkdownReporter().generate_markdown_report([])
        assert "## ✅ No Violations Found" in md and "| Total Violations | 0 |" in md

    def test_write_creates_directories(self, tmp_path) -> None:
        target = tmp_path / "reports" / "nested" / "report.md"
        assert write_markdown_report(_mixed(), target) == target
        assert target.read_text(encoding="utf-8").startswith("# Code Rules Checker Report")

    def test_format_category(self) -> None:
        assert format_category("exception-handling") == "Exception Handling"
        assert format_category("i18n") == "I18n"
