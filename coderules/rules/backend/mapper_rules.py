"""Rules: mapper methods guard against null input and cover the standard conversions."""
from __future__ import annotations
import re
from coderules.core.types import BackendMethod, ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule

__all__ = ["MapperNullCheckRule", "RequiredMapperMethodsRule", "MAPPER_METHOD_PREFIXES", "REQUIRED_MAPPER_METHODS",
           "is_mapper_method"]

MAPPER_METHOD_PREFIXES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^to[A-Z]"),
    re.compile(r"^map[A-Z]"),
    re.compile(r"^convert[A-Z]"),
    re.compile(r"^update[A-Z]"),
)
REQUIRED_MAPPER_METHODS: tuple[str, ...] = ("toEntity", "toResponse", "updateEntity")


def is_mapper_method(name: str) -> bool:
    return any(p.match(name) for p in MAPPER_METHOD_PREFIXES)


def _is_null_check(text: str) -> bool:
    return "if (" in text and ("== null" in text or "= null" in text)


def _first_statement(file: ParsedBackendFile, method: BackendMethod) -> str:
    start = method.line - 1
    end = method.end_line - 1
    for i in range(start, end + 1):
        if "{" not in file.lines[i]:
            continue
        tail = file.lines[i].split("{", 1)[1].strip()
        if tail and not tail.startswith("//"):
            return tail
        for j in range(i + 1, end + 1):
            text = file.lines[j].strip()
            if text and not text.startswith(("//", "/*", "*")):
                return text
        return ""
    return ""


class MapperNullCheckRule(BackendRule):
    rule_id = "BE-MAP-001"
    name = "Null check in mapper"
    category = RuleCategory.MAPPER
    severity = Severity.WARNING
    description = "Mapper methods MUST have null check at the beginning"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_mapper:
            return []
        violations: list[Violation] = []
        for method in file.methods:
            if not is_mapper_method(method.name) or method.end_line <= method.line:
                continue
            body = "\n".join(file.lines[method.line - 1: method.end_line])
            snippet = f"{method.return_type} {method.name}(...)"
            if not _is_null_check(body):
                violations.append(self.create_violation(
                    file, method.line, f"Mapper method {method.name} missing null check",
                    "Add null check at the beginning of method: if (param == null) return null;", snippet,
                ))
            elif not _is_null_check(_first_statement(file, method)):
                violations.append(self.create_violation(
                    file, method.line, f"Mapper method {method.name} has null check but not at the beginning of method",
                    "Move null check to the beginning of method", snippet,
                ))
        return violations


class RequiredMapperMethodsRule(BackendRule):
    rule_id = "BE-MAP-002"
    name = "Required mapper methods"
    category = RuleCategory.MAPPER
    severity = Severity.WARNING
    description = "Mapper classes MUST have methods: toEntity(), toResponse(), updateEntity()"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_mapper or not file.class_name:
            return []
        names = [m.name for m in file.methods]
        return [
            self.create_violation(
                file, file.class_line,
                message=f"Mapper class {file.class_name} missing method {required}()",
                suggestion=f"Add method {required}() to Mapper class",
                code_snippet=f"class {file.class_name}",
            )
            for required in REQUIRED_MAPPER_METHODS
            if not any(name.startswith(required) for name in names)
        ]
