"""Rules: statistics cards stay icon-free and use the approved value colours."""
from __future__ import annotations
import re
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule

__all__ = ["StatisticsCardIconRule", "StatisticsCardColorRule", "is_statistics_card_file", "ALLOWED_VALUE_COLORS"]

_STATS_CARD_PATTERNS = [
    re.compile(r"statistics", re.IGNORECASE),
    re.compile(r"stats-card", re.IGNORECASE),
    re.compile(r"stat-card", re.IGNORECASE),
    re.compile(r"dashboard.*card", re.IGNORECASE),
    re.compile(r"summary.*card", re.IGNORECASE),
]
_ICON_PATTERNS = [
    re.compile(r"<[A-Z][a-zA-Z]*Icon"),
    re.compile(r"Icon\s*/>"),
    re.compile(r"lucide-react"),
    re.compile(r"@heroicons"),
    re.compile(r"react-icons"),
    re.compile(r"Icon\s*className"),
]
_COLOR_CLASS_RE = re.compile(r"text-[a-z]+-\d+")

ALLOWED_VALUE_COLORS: tuple[str, ...] = (
    "text-green-600", "text-yellow-600", "text-blue-600", "text-red-600",
    "text-green-500", "text-yellow-500", "text-blue-500", "text-red-500",
)


def is_statistics_card_file(file: ParsedFile) -> bool:
    return any(p.search(file.file.relative_path) or p.search(file.content) for p in _STATS_CARD_PATTERNS)


def _card_lines(file: ParsedFile):
    """Yield ``(line_no, line)`` for lines between an opening ``<Card`` and its ``</Card>``."""
    in_card = False
    for idx, line in enumerate(file.lines, start=1):
        if "<Card" in line and "</Card>" not in line:
            in_card = True
        if "</Card>" in line:
            in_card = False
        if in_card:
            yield idx, line


class StatisticsCardIconRule(BaseRule):
    rule_id = "FE-CARD-001"
    name = "No icons in statistics cards"
    category = RuleCategory.STATISTICS_CARDS
    severity = Severity.WARNING
    description = "Do not use icons in statistics cards to keep the interface clean"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not is_statistics_card_file(file):
            return []
        violations: list[Violation] = []
        for idx, line in _card_lines(file):
            for pattern in _ICON_PATTERNS:
                for m in pattern.finditer(line):
                    violations.append(self.create_violation(
                        file, idx, f"Icon used in statistics card: {m.group(0)}",
                        'Remove icon to keep interface clean, avoid "AI-generated" look',
                        line.strip(), column=m.start() + 1,
                    ))
        return violations


class StatisticsCardColorRule(BaseRule):
    rule_id = "FE-CARD-002"
    name = "Proper color classes"
    category = RuleCategory.STATISTICS_CARDS
    severity = Severity.INFO
    description = (
        "Statistics cards must use proper color classes "
        "(text-green-600, text-yellow-600, text-blue-600, text-red-600)"
    )

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not is_statistics_card_file(file):
            return []
        violations: list[Violation] = []
        for idx, line in _card_lines(file):
            if "text-2xl" not in line or "font-bold" not in line:
                continue
            if any(color in line for color in ALLOWED_VALUE_COLORS):
                continue
            invalid = [c for c in _COLOR_CLASS_RE.findall(line) if c not in ALLOWED_VALUE_COLORS]
            if invalid:
                violations.append(self.create_violation(
                    file, idx, f"Statistics card value uses non-standard color: {', '.join(invalid)}",
                    f"Use one of these colors: {', '.join(ALLOWED_VALUE_COLORS)}", line.strip(),
                ))
        return violations
