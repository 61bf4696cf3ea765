"""Rules: comment language and leftovers from planning documents."""
from __future__ import annotations
import re
from coderules.core.types import ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule

__all__ = ["VietnameseCommentsRule", "NoRequirementCommentsRule", "NoLabelAnnotationRule"]

_VIETNAMESE_RE = re.compile(
    r"[àáạảãâầấậẩẫăằắặẳẵèéẹẻẽêềếệểễìíịỉĩòóọỏõôồốộổỗơờớợởỡùúụủũưừứựửữỳýỵỷỹđ]", re.IGNORECASE
)
_ENGLISH_ONLY_RE = re.compile(r"^[a-zA-Z0-9\s.,;:!?\-_'\"(){}\[\]@#$%^&*+=<>/\\|`~]+$")
_JAVADOC_TAGS = ("@param", "@return", "@throws", "@see", "@author", "@version", "@since", "@deprecated")
_MARKERS = ("TODO", "FIXME", "NOTE", "HACK", "XXX")
_REQUIREMENT_PATTERNS = [
    re.compile(r"Requirements?\s*:", re.IGNORECASE),
    re.compile(r"Validates?\s*:\s*Requirements?", re.IGNORECASE),
    re.compile(r"\*\*\s*Validates?\s*:", re.IGNORECASE),
]
_LABEL_RE = re.compile(r"@Label\s*\(")
_LABEL_FULL_RE = re.compile(r"@Label\s*\([^)]*\)\s*")


def _preview(text: str, limit: int = 50) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class VietnameseCommentsRule(BackendRule):
    rule_id = "BE-CMT-001"
    name = "Vietnamese comments"
    category = RuleCategory.COMMENTS
    severity = Severity.INFO
    description = "Comments MUST be written in Vietnamese"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for comment in file.comments:
            content = comment.content.strip()
            if len(content) <= 30 or content.startswith(_JAVADOC_TAGS) or content.upper().startswith(_MARKERS):
                continue
            if _ENGLISH_ONLY_RE.match(content) and not _VIETNAMESE_RE.search(content):
                violations.append(self.create_violation(
                    file, comment.line, "Comment appears to be written in English",
                    "Write comments in Vietnamese to ensure consistency", _preview(content),
                ))
        return violations


class NoRequirementCommentsRule(BackendRule):
    """Comment removal can span partial lines, so the violation is report-only."""

    rule_id = "BE-CMT-002"
    name = "No requirement comments"
    category = RuleCategory.COMMENTS
    severity = Severity.WARNING
    description = 'Do NOT comment "Requirements" or "Validates: Requirements" in code'

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        return [
            self.create_violation(
                file, comment.line,
                message='Comment contains "Requirements" or "Validates: Requirements"',
                suggestion="Remove requirement comments from code",
                code_snippet=_preview(comment.content),
                end_line=comment.end_line if comment.end_line > comment.line else None,
            )
            for comment in file.comments
            if any(p.search(comment.content) for p in _REQUIREMENT_PATTERNS)
        ]


class NoLabelAnnotationRule(BackendRule):
    rule_id = "BE-CMT-003"
    name = "No @Label annotation"
    category = RuleCategory.COMMENTS
    severity = Severity.WARNING
    description = "Do NOT use @Label annotation in property tests"
    can_auto_fix = True

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if "test" not in file.file.relative_path.lower():
            return []
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            m = _LABEL_RE.search(line)
            if not m:
                continue
            fixed = _LABEL_FULL_RE.sub("", line, count=1)
            violations.append(self.create_violation(
                file, idx, "Using @Label annotation in property test", "Remove @Label annotation",
                line.strip(), column=m.start() + 1,
                fix_code=fixed.strip() or None,
            ))
        return violations
