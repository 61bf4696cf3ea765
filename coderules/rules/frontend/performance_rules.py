"""Rules: optimised images, Suspense boundaries and lazy-loaded heavy widgets."""
from __future__ import annotations
import re
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule
from coderules.rules.source_edits import is_comment_line

__all__ = ["NextImageRule", "SuspenseBoundaryRule"]

_IMG_RE = re.compile(r"<img\s+[^>]*src\s*=", re.IGNORECASE)
_IMG_TAG_RE = re.compile(r"<img\b")
_HEAVY_COMPONENT_RE = re.compile(r"Chart|Editor|Calendar|DataGrid|RichText|Map", re.IGNORECASE)


class NextImageRule(BaseRule):
    rule_id = "FE-PERF-001"
    name = "Use next/image"
    category = RuleCategory.PERFORMANCE
    severity = Severity.WARNING
    description = "Use next/image to optimize images"
    can_auto_fix = True

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line) or "<Image" in line:
                continue
            m = _IMG_RE.search(line)
            if not m:
                continue
            snippet = line.strip()
            violations.append(self.create_violation(
                file, idx, "Using <img> tag instead of next/image",
                "Use <Image> component from 'next/image' to optimize",
                snippet, column=m.start() + 1, fix_code=_IMG_TAG_RE.sub("<Image", snippet),
            ))
        return violations


class SuspenseBoundaryRule(BaseRule):
    rule_id = "FE-PERF-002"
    name = "Use Suspense boundaries"
    category = RuleCategory.PERFORMANCE
    severity = Severity.INFO
    description = "Use Suspense boundaries with skeleton loaders"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_page:
            return []
        content = file.content
        if not ("await " in content or "async function" in content or "async (" in content):
            return []
        violations: list[Violation] = []
        has_suspense = "<Suspense" in content or "Suspense>" in content
        imports_suspense = any(imp.source == "react" and "Suspense" in imp.named_imports for imp in file.imports)
        if not has_suspense and not imports_suspense:
            violations.append(self.create_violation(
                file, 1,
                message="Page has async data fetching but no Suspense boundary",
                suggestion="Wrap async components with <Suspense fallback={<Loading />}> to improve UX",
                code_snippet="// Page without Suspense",
            ))
        for imp in file.imports:
            line = file.lines[imp.line - 1]
            names = " ".join(filter(None, [imp.default_import, *imp.named_imports]))
            if imp.source == "next/dynamic" or not _HEAVY_COMPONENT_RE.search(f"{names} {imp.source}"):
                continue
            violations.append(self.create_violation(
                file, imp.line,
                message="Heavy component import does not use dynamic()",
                suggestion="Use dynamic() from 'next/dynamic' to lazy load heavy components",
                code_snippet=line.strip(),
            ))
        return violations
