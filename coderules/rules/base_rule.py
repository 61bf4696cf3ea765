"""Base rule interface shared by every frontend and backend check."""

from __future__ import annotations

from abc import ABC, abstractmethod

from coderules.core.types import (
    FixResult,
    ParsedBackendFile,
    ParsedFile,
    ProjectType,
    RuleCategory,
    RuleContext,
    Severity,
    Violation,
)
from coderules.fixer.diff_generator import generate_diff

__all__ = ["BaseRule", "BackendRule"]


class BaseRule(ABC):
    rule_id: str = "base"
    name: str = ""
    category: RuleCategory = RuleCategory.COMPONENTS
    severity: Severity = Severity.WARNING
    project_type: ProjectType = ProjectType.FRONTEND
    description: str = ""
    can_auto_fix: bool = False

    @abstractmethod
    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        """Inspect a parsed file and return any violations found."""

    def applies_to(self, project_type: ProjectType) -> bool:
        return self.project_type is ProjectType.BOTH or self.project_type is project_type

    def fix(self, file: ParsedFile, violation: Violation) -> FixResult:
        """Compute the fixed file text in memory; the file on disk is untouched."""
        if not violation.can_auto_fix or not violation.fix_code:
            return FixResult(success=False, file=file.file.relative_path, violation=violation, error="No fix code available")
        diff = generate_diff(file.content, violation)
        if diff.is_empty:
            return FixResult(success=False, file=file.file.relative_path, violation=violation, error=f"Invalid line number: {violation.line}")
        return FixResult(success=True, file=file.file.relative_path, violation=violation, content=diff.after)

    def create_violation(
        self,
        file: ParsedFile,
        line: int,
        message: str,
        suggestion: str,
        code_snippet: str,
        column: int = 1,
        fix_code: str | None = None,
        end_line: int | None = None,
        end_column: int | None = None,
    ) -> Violation:
        rel = file.file.relative_path
        return Violation(
            id=f"{self.rule_id}-{rel}-{line}",
            rule_id=self.rule_id,
            rule_name=self.name,
            category=self.category,
            severity=self.severity,
            project_type=file.file.project_type if self.project_type is ProjectType.BOTH else self.project_type,
            file=rel,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
            message=message,
            suggestion=suggestion,
            code_snippet=code_snippet,
            can_auto_fix=self.can_auto_fix and bool(fix_code),
            fix_code=fix_code if self.can_auto_fix else None,
            source_path=file.file.path,
        )


class BackendRule(BaseRule):
    """Rules over Java sources; non-Java snapshots are ignored."""

    project_type = ProjectType.BACKEND

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not isinstance(file, ParsedBackendFile):
            return []
        return self.check_backend(file, context)

    @abstractmethod
    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        """Inspect a parsed Java file."""
