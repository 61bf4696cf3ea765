"""Rules: service methods declare their transaction boundary."""
from __future__ import annotations
import re
from coderules.core.types import BackendMethod, ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule
from coderules.rules.source_edits import insert_before

__all__ = ["TransactionalWriteRule", "TransactionalReadRule", "WRITE_METHOD_PATTERNS", "READ_METHOD_PATTERNS",
           "is_write_method", "is_read_method"]

WRITE_METHOD_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (r"^create", r"^save", r"^add", r"^insert", r"^update", r"^modify",
              r"^edit", r"^delete", r"^remove", r"^soft[Dd]elete")
)
READ_METHOD_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (r"^get", r"^find", r"^fetch", r"^load", r"^search", r"^list", r"^count", r"^exists")
) + (re.compile(r"^is[A-Z]"), re.compile(r"^has[A-Z]"))

READ_ONLY_TRANSACTIONAL = "@Transactional(readOnly = true)"
_BARE_TRANSACTIONAL_RE = re.compile(r"@Transactional\b(?!\s*\()")


def is_write_method(name: str) -> bool:
    return any(p.match(name) for p in WRITE_METHOD_PATTERNS)


def is_read_method(name: str) -> bool:
    return any(p.match(name) for p in READ_METHOD_PATTERNS) and not is_write_method(name)


def _service_methods(file: ParsedBackendFile) -> list[BackendMethod]:
    # Transaction boundaries belong on the implementation, not the interface.
    if not file.file.is_service or file.is_interface:
        return []
    return file.methods


class TransactionalWriteRule(BackendRule):
    rule_id = "BE-TXN-001"
    name = "@Transactional for write ops"
    category = RuleCategory.TRANSACTION
    severity = Severity.WARNING
    description = "Write operations (create, update, delete) MUST have @Transactional annotation"
    can_auto_fix = True

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for method in _service_methods(file):
            if not is_write_method(method.name):
                continue
            ann = method.get_annotation("Transactional")
            if ann is None:
                violations.append(self.create_violation(
                    file, method.line, f"Write method {method.name} missing @Transactional annotation",
                    "Add @Transactional annotation to ensure data integrity",
                    f"{method.return_type} {method.name}(...)",
                    fix_code=insert_before(file, method.line, ["@Transactional"]),
                ))
            elif ann.parameters.get("readOnly") == "true":
                violations.append(self.create_violation(
                    file, method.line, f"Write method {method.name} has @Transactional(readOnly = true)",
                    "Remove readOnly = true for write operations", READ_ONLY_TRANSACTIONAL,
                ))
        return violations


class TransactionalReadRule(BackendRule):
    rule_id = "BE-TXN-002"
    name = "@Transactional(readOnly) for read ops"
    category = RuleCategory.TRANSACTION
    severity = Severity.WARNING
    description = "Read operations MUST have @Transactional(readOnly = true) annotation"
    can_auto_fix = True

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for method in _service_methods(file):
            if not is_read_method(method.name):
                continue
            ann = method.get_annotation("Transactional")
            if ann is None:
                violations.append(self.create_violation(
                    file, method.line,
                    f"Read method {method.name} missing @Transactional(readOnly = true) annotation",
                    "Add @Transactional(readOnly = true) to optimize performance",
                    f"{method.return_type} {method.name}(...)",
                    fix_code=insert_before(file, method.line, [READ_ONLY_TRANSACTIONAL]),
                ))
            elif ann.parameters.get("readOnly") != "true":
                # Only a bare annotation can be rewritten in place.
                bare = not ann.parameters and bool(_BARE_TRANSACTIONAL_RE.search(file.lines[ann.line - 1]))
                violations.append(self.create_violation(
                    file, ann.line,
                    f"Read method {method.name} has @Transactional but missing readOnly = true",
                    "Add readOnly = true to optimize performance",
                    "@Transactional" if bare else file.lines[ann.line - 1].strip(),
                    fix_code=READ_ONLY_TRANSACTIONAL if bare else None,
                ))
        return violations
