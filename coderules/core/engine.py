"""Orchestration engine: discovery, parsing, rules, fixes and reports in one pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from coderules.config.settings import CodeRulesSettings
from coderules.core.errors import CodeRulesError, ProjectRootNotFoundError
from coderules.core.types import (
    FileInfo,
    FileType,
    FixResult,
    ParsedFile,
    ProjectType,
    ReportSummary,
    RuleContext,
    ScanOptions,
    Severity,
    Violation,
)
from coderules.fixer.auto_fixer import AutoFixer
from coderules.reporter.markdown_reporter import write_markdown_report
from coderules.reporter.summary import generate_summary
from coderules.rules.base_rule import BaseRule
from coderules.rules.catalog import build_default_registry
from coderules.rules.registry import RuleRegistry
from coderules.scanner.file_discovery import discover_files
from coderules.scanner.import_graph import build_import_graph
from coderules.scanner.java_parser import parse_java_file
from coderules.scanner.typescript_parser import parse_typescript_file

__all__ = [
    "CodeRulesEngine",
    "ScanResult",
    "RuleFailure",
    "CodeRulesError",
    "ProjectRootNotFoundError",
    "parse_file",
    "run_rules",
    "sort_violations",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleFailure:
    rule_id: str
    file: str
    error: str


class ScanResult:
    def __init__(
        self,
        violations: list[Violation],
        rule_failures: list[RuleFailure],
        files_scanned: int,
        fix_results: list[FixResult] | None = None,
    ) -> None:
        self.violations = violations
        self.rule_failures = rule_failures
        self.files_scanned = files_scanned
        self.fix_results = fix_results or []

    @property
    def has_errors(self) -> bool:
        return any(v.severity is Severity.ERROR for v in self.violations)

    @property
    def exit_code(self) -> int:
        return 1 if self.has_errors else 0


def parse_file(info: FileInfo) -> ParsedFile | None:
    """Parse one discovered file; unreadable files are logged and skipped."""
    try:
        if info.type is FileType.JAVA:
            return parse_java_file(info)
        return parse_typescript_file(info)
    except OSError as exc:
        logger.warning("Cannot read %s: %s", info.path, exc)
        return None


def run_rules(
    parsed_files: list[ParsedFile],
    rules: list[BaseRule],
    context: RuleContext,
) -> tuple[list[Violation], list[RuleFailure]]:
    """Run every applicable rule over every file; a failing rule does not stop the others."""
    violations: list[Violation] = []
    failures: list[RuleFailure] = []
    for pf in parsed_files:
        project = pf.file.project_type
        for rule in rules:
            if not rule.applies_to(project):
                continue
            try:
                violations.extend(rule.check(pf, context))
            except Exception as exc:
                logger.warning("Rule %s failed on %s", rule.rule_id, pf.file.relative_path, exc_info=True)
                failures.append(RuleFailure(rule_id=rule.rule_id, file=pf.file.relative_path, error=str(exc)))
    return violations, failures


def sort_violations(violations: list[Violation]) -> list[Violation]:
    """Files keep first-seen order; within a file, order by line, column, rule id."""
    order: dict[str, int] = {}
    for v in violations:
        order.setdefault(v.file, len(order))
    return sorted(violations, key=lambda v: (order[v.file], v.line, v.column, v.rule_id))


class CodeRulesEngine:
    """Central orchestrator for a CodeRules run."""

    def __init__(
        self,
        settings: CodeRulesSettings,
        frontend_root: Path | None = None,
        backend_root: Path | None = None,
        registry: RuleRegistry | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry if registry is not None else build_default_registry(settings)
        frontend = frontend_root or settings.frontend_path
        backend = backend_root or settings.backend_path
        fallback = frontend or backend or Path.cwd()
        self.frontend_root = Path(frontend or fallback).resolve()
        self.backend_root = Path(backend or fallback).resolve()
        self.last_result: ScanResult | None = None
        for project, root in self._targets():
            if not root.is_dir():
                raise ProjectRootNotFoundError(project.value.capitalize(), root)

    def _targets(self) -> list[tuple[ProjectType, Path]]:
        wanted = self.settings.project_type
        targets: list[tuple[ProjectType, Path]] = []
        if wanted in (ProjectType.FRONTEND, ProjectType.BOTH):
            targets.append((ProjectType.FRONTEND, self.frontend_root))
        if wanted in (ProjectType.BACKEND, ProjectType.BOTH):
            targets.append((ProjectType.BACKEND, self.backend_root))
        return targets

    def _options_for(self, project: ProjectType) -> ScanOptions:
        cfg = self.settings.frontend if project is ProjectType.FRONTEND else self.settings.backend
        return cfg.to_options(project)

    def scan(self) -> ScanResult:
        violations: list[Violation] = []
        failures: list[RuleFailure] = []
        files_scanned = 0
        for project, root in self._targets():
            infos = discover_files(root, self._options_for(project))
            parsed = [pf for pf in (parse_file(info) for info in infos) if pf is not None]
            files_scanned += len(parsed)
            context = RuleContext(project_root=root, all_files=infos, import_graph=build_import_graph(parsed))
            rules = self.registry.get_by_project_type(project)
            logger.debug("Running %d %s rule(s) over %d file(s)", len(rules), project.value, len(parsed))
            found, failed = run_rules(parsed, rules, context)
            violations.extend(found)
            failures.extend(failed)
        result = ScanResult(sort_violations(violations), failures, files_scanned)
        self.last_result = result
        return result

    def apply_fixes(self, violations: list[Violation], backup: bool = False) -> list[FixResult]:
        fixer = AutoFixer(backup=backup, use_colors=self.settings.use_colors)
        return fixer.apply_all_fixes(violations)

    def write_report(self, violations: list[Violation], path: Path) -> Path:
        return write_markdown_report(violations, path)

    def run(self, fix: bool = False, report_path: Path | None = None) -> list[Violation]:
        """Scan, optionally fix and write a markdown report; returns the violations found."""
        result = self.scan()
        if fix:
            result.fix_results = self.apply_fixes(result.violations)
        target = report_path or self.settings.report_path
        if target is not None:
            self.write_report(result.violations, target)
        return result.violations

    def get_summary(self, violations: list[Violation]) -> ReportSummary:
        return generate_summary(violations)
