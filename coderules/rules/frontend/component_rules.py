"""Rules: component size, server-only pages, and internal component naming."""
from __future__ import annotations
import posixpath
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule

__all__ = ["ComponentSizeRule", "PageUseClientRule", "InternalComponentPrefixRule", "MAX_COMPONENT_LINES"]

MAX_COMPONENT_LINES = 250


class ComponentSizeRule(BaseRule):
    rule_id = "FE-COMP-001"
    name = "Max 250 lines per component"
    category = RuleCategory.COMPONENTS
    severity = Severity.WARNING
    description = "Component should not exceed 250 lines, consider splitting"

    def __init__(self, max_lines: int = MAX_COMPONENT_LINES) -> None:
        self.max_lines = max_lines

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not (file.file.is_component or file.file.is_page) or file.line_count <= self.max_lines:
            return []
        return [self.create_violation(
            file, 1,
            message=f"Component has {file.line_count} lines, exceeds limit of {self.max_lines} lines",
            suggestion="Split component into smaller sub-components or extract logic into custom hooks",
            code_snippet=f"// File has {file.line_count} lines",
        )]


class PageUseClientRule(BaseRule):
    rule_id = "FE-COMP-002"
    name = "No 'use client' in page.tsx"
    category = RuleCategory.COMPONENTS
    severity = Severity.ERROR
    description = "page.tsx must be a Server Component, must not have 'use client'"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_page or not file.has_use_client:
            return []
        line = next(
            (i for i, text in enumerate(file.lines, start=1) if text.strip().rstrip(";") in ("'use client'", '"use client"')),
            1,
        )
        return [self.create_violation(
            file, line,
            message="page.tsx contains 'use client' directive",
            suggestion="Extract interactive logic into internal component with '_' prefix (e.g., _page-content.tsx)",
            code_snippet="'use client'",
        )]


class InternalComponentPrefixRule(BaseRule):
    """Flags components nobody outside their own folder imports.

    Renaming a file is outside what a line edit can express, so the violation
    only carries the suggested name.
    """

    rule_id = "FE-COMP-003"
    name = "Internal components prefix underscore"
    category = RuleCategory.COMPONENTS
    severity = Severity.WARNING
    description = "Internal components must have underscore prefix (_component-name.tsx)"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_component:
            return []
        rel = file.file.relative_path
        name = file.file.name
        directory = posixpath.dirname(rel)
        if name.startswith("_") or "/ui/" in f"/{directory}/" or "/_components" in f"/{directory}":
            return []
        external = [p for p in context.import_graph.importers_of(rel) if posixpath.dirname(p) != directory]
        if external:
            return []
        return [self.create_violation(
            file, 1,
            message=f'Internal component "{name}" does not have underscore prefix',
            suggestion=f'Rename to "_{name}" to mark as internal component',
            code_snippet=name,
        )]
