"""Rules: HTTP calls go through the shared fetch wrappers; pagination uses named constants."""
from __future__ import annotations
import re
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule
from coderules.rules.source_edits import insert_after, insert_before, is_comment_line

__all__ = ["ApiClientRule", "ApiServerRule", "DirectFetchRule", "PaginationConstantsRule"]

_FETCH_RE = re.compile(r"\bfetch\s*\(")
_FETCH_LITERAL_RE = re.compile(r"""\bfetch\s*\(\s*['"`]""")
_AXIOS_RE = re.compile(r"\baxios\s*\.\s*(get|post|put|delete|patch)\s*\(", re.IGNORECASE)
_PAGINATION_RE = re.compile(r"\b(page|limit|pageSize|perPage)\s*[=:]", re.IGNORECASE)


def _imports_wrapper(file: ParsedFile, module: str, name: str) -> bool:
    return any(
        module in imp.source and (name in imp.named_imports or imp.default_import == name)
        for imp in file.imports
    )


class ApiClientRule(BaseRule):
    rule_id = "FE-API-001"
    name = "Use apiClient in client components"
    category = RuleCategory.API_CALLS
    severity = Severity.WARNING
    description = "Client components must use apiClient from @/lib/utils/fetch-client"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.has_use_client:
            return []
        has_client = _imports_wrapper(file, "fetch-client", "apiClient")
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line):
                continue
            if not (has_client and "apiClient" in line):
                for m in _FETCH_RE.finditer(line):
                    violations.append(self.create_violation(
                        file, idx, "Using fetch() directly in client component",
                        "Use apiClient from @/lib/utils/fetch-client", line.strip(), column=m.start() + 1,
                    ))
            for m in _AXIOS_RE.finditer(line):
                violations.append(self.create_violation(
                    file, idx, "Using axios directly in client component",
                    "Use apiClient from @/lib/utils/fetch-client", line.strip(), column=m.start() + 1,
                ))
        return violations


class ApiServerRule(BaseRule):
    rule_id = "FE-API-002"
    name = "Use apiServer in server components"
    category = RuleCategory.API_CALLS
    severity = Severity.WARNING
    description = "Server components must use apiServer from @/lib/utils/fetch-server"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if file.has_use_client or not (file.file.is_page or file.file.is_component):
            return []
        has_server = _imports_wrapper(file, "fetch-server", "apiServer")
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line) or (has_server and "apiServer" in line):
                continue
            for m in _FETCH_RE.finditer(line):
                violations.append(self.create_violation(
                    file, idx, "Using fetch() directly in server component",
                    "Use apiServer from @/lib/utils/fetch-server", line.strip(), column=m.start() + 1,
                ))
        return violations


class DirectFetchRule(BaseRule):
    rule_id = "FE-API-003"
    name = "No direct fetch calls"
    category = RuleCategory.API_CALLS
    severity = Severity.WARNING
    description = "Do not use fetch() directly, use apiClient or apiServer"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        rel = file.file.relative_path
        if "fetch-client" in rel or "fetch-server" in rel:
            return []
        if any("fetch-client" in imp.source or "fetch-server" in imp.source for imp in file.imports):
            return []
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line):
                continue
            for m in _FETCH_LITERAL_RE.finditer(line):
                violations.append(self.create_violation(
                    file, idx, "Using fetch() directly",
                    "Use apiClient (client) or apiServer (server) from @/lib/utils/",
                    line.strip(), column=m.start() + 1,
                ))
        return violations


class PaginationConstantsRule(BaseRule):
    rule_id = "FE-API-004"
    name = "Declare pagination constants"
    category = RuleCategory.API_CALLS
    severity = Severity.WARNING
    description = "Declare DEFAULT_PAGE and DEFAULT_LIMIT constants for paginated API calls"
    can_auto_fix = True

    _DECLARATIONS = {"DEFAULT_PAGE": "const DEFAULT_PAGE = 0;", "DEFAULT_LIMIT": "const DEFAULT_LIMIT = 10;"}

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        first_use = next((i for i, line in enumerate(file.lines, start=1) if _PAGINATION_RE.search(line)), None)
        if first_use is None:
            return []
        missing: list[str] = []
        if "DEFAULT_PAGE" not in file.content.replace("DEFAULT_PAGE_SIZE", ""):
            missing.append("DEFAULT_PAGE")
        if "DEFAULT_LIMIT" not in file.content and "DEFAULT_PAGE_SIZE" not in file.content:
            missing.append("DEFAULT_LIMIT")
        if not missing:
            return []

        line, fix_code = self._insertion(file, [self._DECLARATIONS[name] for name in missing])
        return [self.create_violation(
            file, line,
            message=f"Missing constants declaration: {', '.join(missing)} (pagination used on line {first_use})",
            suggestion="Add const DEFAULT_PAGE = 0; const DEFAULT_LIMIT = 10; at the top of the file",
            code_snippet=file.lines[first_use - 1].strip(),
            fix_code=fix_code,
        )]

    @staticmethod
    def _insertion(file: ParsedFile, declarations: list[str]) -> tuple[int, str]:
        """Constants go right below the import block (or the directive, or at the top)."""
        anchor = max((imp.line for imp in file.imports), default=0)
        if anchor == 0 and (file.has_use_client or file.has_use_server):
            anchor = next(
                (i for i, line in enumerate(file.lines[:10], start=1) if "use client" in line or "use server" in line),
                0,
            )
        if anchor == 0:
            return 1, insert_before(file, 1, declarations)
        if anchor < file.line_count:
            return anchor + 1, insert_before(file, anchor + 1, declarations)
        return anchor, insert_after(file, anchor, declarations)
