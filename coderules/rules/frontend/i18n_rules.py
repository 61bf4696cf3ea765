"""Rules: visible UI text comes from translations."""
from __future__ import annotations
import re
from coderules.core.types import FileType, ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule
from coderules.rules.source_edits import is_comment_line

__all__ = ["HardcodedStringRule", "UseTranslationsRule"]

_VIETNAMESE_RE = re.compile(
    r"[àáạảãâầấậẩẫăằắặẳẵèéẹẻẽêềếệểễìíịỉĩòóọỏõôồốộổỗơờớợởỡùúụủũưừứựửữỳýỵỷỹđ]", re.IGNORECASE
)
_JAPANESE_RE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
_COMMON_UI_WORDS_RE = re.compile(
    r"^(Submit|Cancel|Save|Delete|Edit|Add|Create|Update|Search|Filter|Loading|Error|Success|Warning"
    r"|Confirm|Close|Open|Back|Next|Previous)$",
    re.IGNORECASE,
)
_JSX_TEXT_RE = re.compile(r">\s*([^<>{}\n]+)\s*<")
_NUMERIC_ONLY_RE = re.compile(r"^[\d\s.,\-+%$¥€£:/]+$")
_WORD_RE = re.compile(r"[a-zA-Z]{3,}")
# Lines carrying these are attribute or module plumbing, not rendered text.
_SKIP_LINE_RE = re.compile(
    r"\b(className|style|href|src|alt|type|name|id|key|role|placeholder)\s*="
    r"|data-|aria-|console\.|\bimport\b|\bexport\b|\bfrom\b|\brequire\s*\("
)
_TECHNICAL_TERMS = frozenset({"null", "undefined", "true", "false", "px", "rem", "em", "vh", "vw"})


def _needs_translation(text: str) -> bool:
    if _VIETNAMESE_RE.search(text) or _JAPANESE_RE.search(text) or _COMMON_UI_WORDS_RE.match(text):
        return True
    return len(text) > 3 and bool(_WORD_RE.search(text)) and text.lower() not in _TECHNICAL_TERMS


def _uses_translations(content: str) -> bool:
    return "useTranslations" in content or "getTranslations" in content or re.search(r"\bt\(|\bt`", content) is not None


class HardcodedStringRule(BaseRule):
    rule_id = "FE-I18N-001"
    name = "No hardcoded strings"
    category = RuleCategory.I18N
    severity = Severity.WARNING
    description = "Do not hardcode text strings in UI, use translations"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not (file.file.is_component or file.file.is_page) or file.file.type is not FileType.TSX:
            return []
        if _uses_translations(file.content):
            return []
        violations: list[Violation] = []
        for idx, line in enumerate(file.lines, start=1):
            if is_comment_line(line) or _SKIP_LINE_RE.search(line):
                continue
            for m in _JSX_TEXT_RE.finditer(line):
                text = m.group(1).strip()
                if not text or _NUMERIC_ONLY_RE.match(text) or not _needs_translation(text):
                    continue
                shown = text[:50] + ("..." if len(text) > 50 else "")
                violations.append(self.create_violation(
                    file, idx, f'Hardcoded text: "{shown}"',
                    "Use useTranslations() hook and translation keys", line.strip(), column=m.start() + 1,
                ))
        return violations


class UseTranslationsRule(BaseRule):
    rule_id = "FE-I18N-002"
    name = "Use useTranslations"
    category = RuleCategory.I18N
    severity = Severity.WARNING
    description = "Use useTranslations() hook for translations"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.has_use_client or not (file.file.is_component or file.file.is_page):
            return []
        imports_hook = any(
            "next-intl" in imp.source and "useTranslations" in imp.named_imports for imp in file.imports
        )
        if imports_hook or "useTranslations(" in file.content:
            return []
        if not (_VIETNAMESE_RE.search(file.content) or _JAPANESE_RE.search(file.content)):
            return []
        return [self.create_violation(
            file, 1,
            message="Component has text content but does not use useTranslations()",
            suggestion="Import and use useTranslations() from 'next-intl'",
            code_snippet="// Component without useTranslations",
        )]
