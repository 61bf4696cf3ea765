"""Rules: data tables show a row-number column and use the shared BaseTable."""
from __future__ import annotations
import re
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule
from coderules.rules.source_edits import import_fix

__all__ = ["TableSttColumnRule", "BaseTableImportRule", "BASE_TABLE_MODULE"]

BASE_TABLE_MODULE = "@/app/[locale]/_components/_base/base-table"
_BASE_TABLE_IMPORT = f"import {{ BaseTable }} from '{BASE_TABLE_MODULE}';"
_BASE_TABLE_RELATIVE_RE = re.compile(r"^(\.\./)+_components/_base/base-table$|^\./_base/base-table$")

_TABLE_PATTERNS = [
    re.compile(r"columns\s*[=:]\s*\["),
    re.compile(r"<Table"),
    re.compile(r"<BaseTable"),
    re.compile(r"DataTable"),
]
_STT_PATTERNS = [
    re.compile(r"['\"]STT['\"]", re.IGNORECASE),
    re.compile(r"['\"]#['\"]"),
    re.compile(r"header:\s*['\"]STT['\"]", re.IGNORECASE),
    re.compile(r"header:\s*['\"]#['\"]"),
    re.compile(r"accessorKey:\s*['\"]stt['\"]", re.IGNORECASE),
    re.compile(r"id:\s*['\"]stt['\"]", re.IGNORECASE),
    re.compile(r"key:\s*['\"]stt['\"]", re.IGNORECASE),
]
_STT_FORMULA_PATTERNS = [
    re.compile(r"page\s*\*\s*pageSize\s*\+\s*index\s*\+\s*1"),
    re.compile(r"page\s*\*\s*limit\s*\+\s*index\s*\+\s*1"),
    re.compile(r"\(page\s*-\s*1\)\s*\*\s*pageSize\s*\+\s*index\s*\+\s*1"),
    re.compile(r"currentPage\s*\*\s*pageSize\s*\+\s*index\s*\+\s*1"),
]


class TableSttColumnRule(BaseRule):
    rule_id = "FE-TABLE-001"
    name = "STT column required"
    category = RuleCategory.TABLES
    severity = Severity.WARNING
    description = "Table must have STT (row number) column as first column"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        table_line = next(
            (i for i, line in enumerate(file.lines, start=1) if any(p.search(line) for p in _TABLE_PATTERNS)),
            None,
        )
        if table_line is None:
            return []
        if not any(p.search(file.content) for p in _STT_PATTERNS):
            return [self.create_violation(
                file, table_line, "Table does not have STT (row number) column",
                'Add STT column as first column with header "STT" or "#"', file.lines[table_line - 1].strip(),
            )]
        if any(p.search(file.content) for p in _STT_FORMULA_PATTERNS):
            return []
        return [
            self.create_violation(
                file, idx, "STT column does not have correct calculation formula",
                "Use formula: page * pageSize + index + 1", line.strip(),
            )
            for idx, line in enumerate(file.lines, start=1)
            if any(p.search(line) for p in _STT_PATTERNS)
        ]


class BaseTableImportRule(BaseRule):
    rule_id = "FE-TABLE-002"
    name = "Correct BaseTable import"
    category = RuleCategory.TABLES
    severity = Severity.WARNING
    description = f"BaseTable must be imported from {BASE_TABLE_MODULE}"
    can_auto_fix = True

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if "BaseTable" not in file.content or "base-table" in file.file.relative_path:
            return []
        imp = next(
            (i for i in file.imports if "BaseTable" in i.named_imports or i.default_import == "BaseTable"),
            None,
        )
        if imp is None:
            used = next((i for i, line in enumerate(file.lines, start=1) if "BaseTable" in line), 1)
            line, fix_code = import_fix(file, _BASE_TABLE_IMPORT)
            return [self.create_violation(
                file, line,
                message=f"BaseTable is used on line {used} but not imported",
                suggestion=f"Add import {{ BaseTable }} from '{BASE_TABLE_MODULE}'",
                code_snippet=file.lines[used - 1].strip(),
                fix_code=fix_code,
            )]
        if imp.source == BASE_TABLE_MODULE or _BASE_TABLE_RELATIVE_RE.match(imp.source):
            return []
        only_base_table = imp.named_imports == ["BaseTable"] and imp.default_import is None
        return [self.create_violation(
            file, imp.line,
            message=f"BaseTable imported from incorrect path: {imp.source}",
            suggestion=f"Import from '{BASE_TABLE_MODULE}'",
            code_snippet=file.lines[imp.line - 1].strip(),
            fix_code=_BASE_TABLE_IMPORT if only_base_table else None,
        )]
