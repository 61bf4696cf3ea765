"""Rules: client-side navigation must go through the Next.js router or ``<Link>``."""
from __future__ import annotations
import re
from coderules.core.types import FixResult, ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule

__all__ = ["NavigationHrefRule", "NavigationAnchorRule"]

_HREF_ASSIGN_RE = re.compile(r"window\.location\.href\s*=")
_HREF_ASSIGN_URL_RE = re.compile(r"""window\.location\.href\s*=\s*(['"`])([^'"`]+)\1""")
_ANCHOR_RE = re.compile(r"""<a\s+[^>]*href\s*=\s*['"]([^'"]+)['"]""", re.IGNORECASE)
_ANCHOR_TAG_RE = re.compile(r"<a(\s)", re.IGNORECASE)
_ANCHOR_CLOSE = "</a>"
_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:", "#", "//")


class NavigationHrefRule(BaseRule):
    rule_id = "FE-NAV-001"
    name = "No window.location.href"
    category = RuleCategory.NAVIGATION
    severity = Severity.ERROR
    description = "Do not use window.location.href for page navigation"
    can_auto_fix = True

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            match = _HREF_ASSIGN_RE.search(line)
            if not match:
                continue
            url_match = _HREF_ASSIGN_URL_RE.search(line)
            url = url_match.group(2) if url_match else ""
            violations.append(self.create_violation(
                file, idx,
                message="Using window.location.href for page navigation",
                suggestion=f"Use router.push('{url}') from next/navigation or <Link href=\"{url}\"> from next/link",
                code_snippet=url_match.group(0) if url_match else line.strip(),
                column=match.start() + 1,
                fix_code=f"router.push('{url}')" if url else None,
            ))
        return violations

    def fix(self, file: ParsedFile, violation: Violation) -> FixResult:
        rel = file.file.relative_path
        if not violation.fix_code:
            return FixResult(success=False, file=rel, violation=violation, error="No fix code available")
        if not 1 <= violation.line <= file.line_count:
            return FixResult(success=False, file=rel, violation=violation, error=f"Invalid line number: {violation.line}")
        lines = list(file.lines)
        lines[violation.line - 1] = _HREF_ASSIGN_URL_RE.sub(lambda _m: violation.fix_code, lines[violation.line - 1], count=1)
        return FixResult(success=True, file=rel, violation=violation, content="\n".join(lines))


class NavigationAnchorRule(BaseRule):
    rule_id = "FE-NAV-002"
    name = "No anchor tags for internal links"
    category = RuleCategory.NAVIGATION
    severity = Severity.WARNING
    description = "Do not use <a href> for internal links, use <Link> from next/link"
    can_auto_fix = True

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            for match in _ANCHOR_RE.finditer(line):
                href = match.group(1)
                if href.startswith(_EXTERNAL_PREFIXES):
                    continue
                snippet = match.group(0)
                fix = _ANCHOR_TAG_RE.sub(r"<Link\1", snippet, count=1)
                # Take the closing tag along when the whole element sits on this line.
                close = line.find(_ANCHOR_CLOSE, match.end())
                if close != -1 and "<a" not in line[match.end():close]:
                    body = line[match.end():close]
                    snippet = f"{snippet}{body}{_ANCHOR_CLOSE}"
                    fix = f"{fix}{body}</Link>"
                violations.append(self.create_violation(
                    file, idx,
                    message=f'Using <a href="{href}"> for internal link',
                    suggestion=f'Use <Link href="{href}"> from next/link',
                    code_snippet=snippet,
                    column=match.start() + 1,
                    fix_code=fix,
                ))
        return violations

    def fix(self, file: ParsedFile, violation: Violation) -> FixResult:
        rel = file.file.relative_path
        if not violation.fix_code:
            return FixResult(success=False, file=rel, violation=violation, error="No fix code available")
        if not 1 <= violation.line <= file.line_count:
            return FixResult(success=False, file=rel, violation=violation, error=f"Invalid line number: {violation.line}")
        lines = list(file.lines)
        lines[violation.line - 1] = lines[violation.line - 1].replace(violation.code_snippet, violation.fix_code, 1)
        return FixResult(success=True, file=rel, violation=violation, content="\n".join(lines))
