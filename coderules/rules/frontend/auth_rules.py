"""Rules: user and token access goes through the auth helpers."""
from __future__ import annotations
import re
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule
from coderules.rules.source_edits import is_comment_line

__all__ = ["UseAuthHookRule", "DirectLocalStorageRule"]

_USER_ACCESS_PATTERNS = [
    re.compile(r"\buser\s*\.\s*(id|email|name|role|companyId)\b"),
    re.compile(r"\bcurrentUser\s*\.\s*(id|email|name|role)\b"),
    re.compile(r"\bsession\s*\.\s*user\b"),
]
_AUTH_KEYS = r"(token|accessToken|refreshToken|user|auth|session)"
_AUTH_STORAGE_PATTERNS = [
    re.compile(r"localStorage\s*\.\s*getItem\s*\(\s*['\"`]" + _AUTH_KEYS + r"['\"`]\s*\)", re.IGNORECASE),
    re.compile(r"localStorage\s*\.\s*setItem\s*\(\s*['\"`]" + _AUTH_KEYS + r"['\"`]", re.IGNORECASE),
    re.compile(r"localStorage\s*\.\s*removeItem\s*\(\s*['\"`]" + _AUTH_KEYS + r"['\"`]\s*\)", re.IGNORECASE),
    re.compile(r"sessionStorage\s*\.\s*getItem\s*\(\s*['\"`]" + _AUTH_KEYS + r"['\"`]\s*\)", re.IGNORECASE),
]


class UseAuthHookRule(BaseRule):
    rule_id = "FE-AUTH-001"
    name = "Use useAuth hook"
    category = RuleCategory.AUTHENTICATION
    severity = Severity.WARNING
    description = "Use useAuth() hook to access user information"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.has_use_client:
            return []
        imports_hook = any("useAuth" in imp.named_imports or "/auth" in imp.source for imp in file.imports)
        if imports_hook and "useAuth(" in file.content:
            return []
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line):
                continue
            for pattern in _USER_ACCESS_PATTERNS:
                for m in pattern.finditer(line):
                    violations.append(self.create_violation(
                        file, idx, "Accessing user info without useAuth() hook",
                        "Use const { user } = useAuth() from @/lib/auth", line.strip(), column=m.start() + 1,
                    ))
        return violations


class DirectLocalStorageRule(BaseRule):
    rule_id = "FE-AUTH-002"
    name = "No direct localStorage for auth"
    category = RuleCategory.AUTHENTICATION
    severity = Severity.WARNING
    description = "Do not access localStorage directly for auth data, use functions from @/lib/auth"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        rel = "/" + file.file.relative_path
        if "/auth/" in rel or "/lib/auth" in rel:
            return []
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line):
                continue
            for pattern in _AUTH_STORAGE_PATTERNS:
                for m in pattern.finditer(line):
                    violations.append(self.create_violation(
                        file, idx,
                        f"Accessing localStorage/sessionStorage directly for auth data: {m.group(0)}",
                        "Use functions from @/lib/auth like getToken(), setToken(), removeToken()",
                        line.strip(), column=m.start() + 1,
                    ))
        return violations
