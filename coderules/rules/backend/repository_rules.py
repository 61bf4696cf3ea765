"""Rules: repository queries filter soft-deleted rows and follow Spring Data naming."""
from __future__ import annotations
import re
from coderules.core.types import ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule

__all__ = ["DeletedCheckFirstRule", "SpringDataJpaNamingRule", "JPA_QUERY_PREFIXES", "JPA_DEFAULT_METHODS"]

_QUERY_RE = re.compile(r"""@Query\s*\(\s*(?:value\s*=\s*)?["']([^"']+)["']""")
_DELETED_FIRST_RE = re.compile(r"^(?:\w+\.)?deleted\s*=\s*false")

JPA_QUERY_PREFIXES: tuple[str, ...] = (
    "findBy", "findAllBy", "findFirstBy", "findTopBy", "existsBy", "countBy",
    "deleteBy", "removeBy", "readBy", "queryBy", "getBy", "streamBy",
)
JPA_DEFAULT_METHODS = frozenset({
    "save", "saveAll", "findById", "findAll", "findAllById", "existsById", "count",
    "deleteById", "delete", "deleteAll", "deleteAllById", "flush", "saveAndFlush",
    "saveAllAndFlush", "deleteAllInBatch", "deleteAllByIdInBatch", "getReferenceById", "getById",
})


class DeletedCheckFirstRule(BackendRule):
    rule_id = "BE-REPO-001"
    name = "deleted=false check first"
    category = RuleCategory.REPOSITORY
    severity = Severity.ERROR
    description = "Query MUST have deleted = false check FIRST in WHERE clause"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_repository:
            return []
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            for m in _QUERY_RE.finditer(line):
                query = m.group(1).lower()
                where = query.find("where")
                if where < 0:
                    continue
                after_where = query[where + len("where"):].strip()
                if "deleted = false" not in query and "deleted=false" not in query:
                    message = "Query missing deleted = false check"
                    suggestion = "Add deleted = false at the beginning of WHERE clause"
                elif not _DELETED_FIRST_RE.match(after_where):
                    message = "deleted = false check is not at the beginning of WHERE clause"
                    suggestion = "Move deleted = false to the beginning of WHERE clause"
                else:
                    continue
                violations.append(self.create_violation(
                    file, idx, message, suggestion, line.strip(), column=m.start() + 1,
                ))
        return violations


class SpringDataJpaNamingRule(BackendRule):
    rule_id = "BE-REPO-002"
    name = "Spring Data JPA naming"
    category = RuleCategory.REPOSITORY
    severity = Severity.WARNING
    description = "Use Spring Data JPA naming conventions: findBy..., existsBy..., countBy..."

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_repository:
            return []
        violations: list[Violation] = []
        for method in file.methods:
            if method.has_annotation("Query") or method.name in JPA_DEFAULT_METHODS:
                continue
            # Interface methods are implicitly public.
            is_public = method.modifier == "public" or (file.is_interface and method.modifier == "default")
            if is_public and not method.name.startswith(JPA_QUERY_PREFIXES):
                violations.append(self.create_violation(
                    file, method.line,
                    message=f"Repository method {method.name} does not follow Spring Data JPA naming convention",
                    suggestion="Rename method to follow convention: findBy..., existsBy..., countBy..., or use @Query annotation",
                    code_snippet=f"{method.return_type} {method.name}(...)",
                ))
        return violations
