"""Rules: exceptions carry ErrorCode values and come from the project's exception types."""
from __future__ import annotations
import re
from coderules.core.types import ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule

__all__ = ["ErrorCodeEnumRule", "CustomExceptionRule", "ExceptionFactoryMethodRule",
           "GENERIC_EXCEPTIONS", "CUSTOM_EXCEPTIONS"]

GENERIC_EXCEPTIONS: tuple[str, ...] = (
    "RuntimeException", "Exception", "IllegalArgumentException", "IllegalStateException",
)
CUSTOM_EXCEPTIONS: tuple[str, ...] = (
    "BadRequestException", "NotFoundException", "UnauthorizedException",
    "ForbiddenException", "ConflictException", "InternalServerException",
)
ERROR_CODE_ENUM = "com.tamabee.api_hr.enums.ErrorCode"

_HARDCODED_CODE_RE = re.compile(r"""throw\s+new\s+\w+Exception\s*\(\s*["']([A-Z_]+)["']""")
_GENERIC_RE = re.compile(r"throw\s+new\s+(%s)\s*\(" % "|".join(GENERIC_EXCEPTIONS))
_CUSTOM_CTOR_RE = re.compile(r"throw\s+new\s+(%s)\s*\(" % "|".join(CUSTOM_EXCEPTIONS))


def _scan(rule: BackendRule, file: ParsedBackendFile, pattern: re.Pattern[str], message, suggestion) -> list[Violation]:
    violations: list[Violation] = []
    for idx, line in enumerate(file.lines, start=1):
        for m in pattern.finditer(line):
            violations.append(rule.create_violation(
                file, idx, message(m.group(1)), suggestion(m.group(1)), line.strip(), column=m.start() + 1,
            ))
    return violations


class ErrorCodeEnumRule(BackendRule):
    rule_id = "BE-EXC-001"
    name = "Use ErrorCode enum"
    category = RuleCategory.EXCEPTION_HANDLING
    severity = Severity.ERROR
    description = "Use ErrorCode enum instead of hardcoded error code strings"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        return _scan(
            self, file, _HARDCODED_CODE_RE,
            lambda code: f'Hardcoded error code "{code}" in exception',
            lambda code: f"Use ErrorCode.{code} from {ERROR_CODE_ENUM}",
        )


class CustomExceptionRule(BackendRule):
    rule_id = "BE-EXC-002"
    name = "Use custom exceptions"
    category = RuleCategory.EXCEPTION_HANDLING
    severity = Severity.WARNING
    description = "Use custom exceptions instead of generic exceptions"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        return _scan(
            self, file, _GENERIC_RE,
            lambda exc: f"Using generic exception {exc}",
            lambda exc: f"Use custom exceptions: {', '.join(CUSTOM_EXCEPTIONS)}",
        )


class ExceptionFactoryMethodRule(BackendRule):
    rule_id = "BE-EXC-003"
    name = "Use factory methods"
    category = RuleCategory.EXCEPTION_HANDLING
    severity = Severity.INFO
    description = "Prefer using static factory methods for exceptions"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        return _scan(
            self, file, _CUSTOM_CTOR_RE,
            lambda exc: f"Using constructor instead of factory method for {exc}",
            lambda exc: f"Prefer using factory methods: {exc}.user(id), {exc}.emailExists(email), etc.",
        )
