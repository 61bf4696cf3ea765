"""Rules: no ``any``, and shared enums come from ``types/enums``."""
from __future__ import annotations
import re
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule
from coderules.rules.source_edits import import_fix, is_comment_line

__all__ = ["AnyTypeRule", "EnumImportRule", "KNOWN_ENUMS", "HARDCODED_ENUM_VALUES"]

_ANY_PATTERNS = [
    re.compile(r":\s*any(?![a-zA-Z])"),
    re.compile(r"<any>(?![a-zA-Z])"),
    re.compile(r"<any,"),
    re.compile(r",\s*any>(?![a-zA-Z])"),
    re.compile(r"\bas\s+any(?![a-zA-Z])"),
    re.compile(r"(?<![a-zA-Z])any\[\]"),
]
_STRING_LITERAL_RE = re.compile(r"""(['"`])(?:\\.|(?!\1).)*\1""")

KNOWN_ENUMS: tuple[str, ...] = (
    "UserRole", "UserStatus", "TransactionType", "DepositStatus", "PlanType", "PaymentStatus",
)
ENUMS_MODULE = "@/types/enums"

# literal value -> enum it belongs to
HARDCODED_ENUM_VALUES: dict[str, str] = {
    "ADMIN_TAMABEE": "UserRole",
    "ADMIN_COMPANY": "UserRole",
    "MANAGER_COMPANY": "UserRole",
    "EMPLOYEE_COMPANY": "UserRole",
    "ACTIVE": "UserStatus",
    "INACTIVE": "UserStatus",
    "PENDING": "DepositStatus/UserStatus",
    "APPROVED": "DepositStatus",
    "REJECTED": "DepositStatus",
}
_HARDCODED_RE = re.compile(r"""['"](%s)['"]""" % "|".join(HARDCODED_ENUM_VALUES))


class AnyTypeRule(BaseRule):
    rule_id = "FE-TYPE-001"
    name = "No any type"
    category = RuleCategory.TYPES
    severity = Severity.ERROR
    description = "Do not use any type, define proper types in types/ directory"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line):
                continue
            code = _STRING_LITERAL_RE.sub(lambda m: " " * len(m.group(0)), line.split("//", 1)[0])
            for pattern in _ANY_PATTERNS:
                for m in pattern.finditer(code):
                    violations.append(self.create_violation(
                        file, idx, f"Using 'any' type: {m.group(0).strip()}",
                        "Define proper type in types/ directory", line.strip(), column=m.start() + 1,
                    ))
        return violations


class EnumImportRule(BaseRule):
    """Enums used in a file must be imported from the shared enums module.

    Enums that are not imported at all are fixed together: the first one gets a
    single combined import statement, the rest are reported where they are used.
    """

    rule_id = "FE-TYPE-002"
    name = "Import enums from types/enums.ts"
    category = RuleCategory.TYPES
    severity = Severity.WARNING
    description = "Enums must be imported from types/enums.ts"
    can_auto_fix = True

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if "enums.ts" in file.file.relative_path:
            return []
        violations: list[Violation] = []
        unimported: list[tuple[str, int]] = []

        for enum_name in KNOWN_ENUMS:
            pattern = re.compile(rf"\b{enum_name}\b")
            if not pattern.search(file.content):
                continue
            if any("types/enums" in imp.source and enum_name in imp.named_imports for imp in file.imports):
                continue
            wrong = next((imp for imp in file.imports if enum_name in imp.named_imports), None)
            if wrong is not None:
                violations.append(self.create_violation(
                    file, wrong.line, f"Enum '{enum_name}' not imported from types/enums.ts",
                    f"Import {enum_name} from '{ENUMS_MODULE}' instead of '{wrong.source}'",
                    file.lines[wrong.line - 1].strip(),
                ))
                continue
            used = next(
                (i for i, line in enumerate(file.lines, start=1) if pattern.search(line) and "import" not in line),
                None,
            )
            if used is not None:
                unimported.append((enum_name, used))

        if unimported:
            names = ", ".join(name for name, _ in unimported)
            anchor, fix_code = import_fix(file, f"import {{ {names} }} from '{ENUMS_MODULE}';")
            first_name, first_line = unimported[0]
            violations.append(self.create_violation(
                file, anchor, f"Enum '{first_name}' not imported from types/enums.ts (used on line {first_line})",
                f"Add import {{ {names} }} from '{ENUMS_MODULE}'", file.lines[first_line - 1].strip(),
                fix_code=fix_code,
            ))
            for enum_name, used in unimported[1:]:
                violations.append(self.create_violation(
                    file, used, f"Enum '{enum_name}' not imported from types/enums.ts",
                    f"Add import {{ {enum_name} }} from '{ENUMS_MODULE}'", file.lines[used - 1].strip(),
                ))

        violations.extend(self._hardcoded_values(file))
        return violations

    def _hardcoded_values(self, file: ParsedFile) -> list[Violation]:
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line) or "import" in line:
                continue
            for m in _HARDCODED_RE.finditer(line):
                before = line[: m.start()]
                if before.endswith(":") or "type " in before:
                    continue
                violations.append(self.create_violation(
                    file, idx, f"Hardcoded enum value: {m.group(0)}",
                    f"Use constant from {HARDCODED_ENUM_VALUES[m.group(1)]} enum in types/enums.ts",
                    line.strip(), column=m.start() + 1,
                ))
        return violations
