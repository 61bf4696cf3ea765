"""Shared data model for the scanner, rules, fixer and reporters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    "ProjectType",
    "Severity",
    "RuleCategory",
    "FileType",
    "FileInfo",
    "ImportInfo",
    "ExportInfo",
    "CommentInfo",
    "ParsedFile",
    "Annotation",
    "BackendMethod",
    "BackendField",
    "ParsedBackendFile",
    "ImportGraph",
    "RuleContext",
    "Violation",
    "LineChange",
    "DiffPreview",
    "FixResult",
    "ReportSummary",
    "ScanOptions",
]


class ProjectType(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    BOTH = "both"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class RuleCategory(str, Enum):
    NAVIGATION = "navigation"
    API_CALLS = "api-calls"
    AUTHENTICATION = "authentication"
    COMPONENTS = "components"
    COMPONENT_PLACEMENT = "component-placement"
    TYPES = "types"
    TABLES = "tables"
    STATISTICS_CARDS = "statistics-cards"
    PERFORMANCE = "performance"
    I18N = "i18n"
    COMMENTS = "comments"
    ARCHITECTURE = "architecture"
    EXCEPTION_HANDLING = "exception-handling"
    RESPONSE = "response"
    TRANSACTION = "transaction"
    REPOSITORY = "repository"
    SECURITY = "security"
    ENTITY = "entity"
    MAPPER = "mapper"


class FileType(str, Enum):
    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JSX = "jsx"
    JAVA = "java"


@dataclass(frozen=True)
class FileInfo:
    path: Path
    relative_path: str
    type: FileType
    is_page: bool = False
    is_component: bool = False
    is_service: bool = False
    is_controller: bool = False
    is_mapper: bool = False
    is_entity: bool = False
    is_repository: bool = False

    @property
    def project_type(self) -> ProjectType:
        return ProjectType.BACKEND if self.type is FileType.JAVA else ProjectType.FRONTEND

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ImportInfo:
    source: str
    named_imports: list[str] = field(default_factory=list)
    default_import: str | None = None
    namespace_import: str | None = None
    line: int = 1


@dataclass(frozen=True)
class ExportInfo:
    name: str
    is_default: bool
    line: int


@dataclass(frozen=True)
class CommentInfo:
    content: str
    line: int
    end_line: int
    is_block: bool


@dataclass(frozen=True)
class ParsedFile:
    """Immutable snapshot of one source file after structural parsing."""

    file: FileInfo
    content: str
    lines: list[str] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[ExportInfo] = field(default_factory=list)
    comments: list[CommentInfo] = field(default_factory=list)
    has_use_client: bool = False
    has_use_server: bool = False

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Annotation:
    name: str
    parameters: dict[str, str] = field(default_factory=dict)
    line: int = 1


@dataclass(frozen=True)
class BackendMethod:
    name: str
    return_type: str
    annotations: list[Annotation]
    line: int
    end_line: int
    modifier: str = "default"

    def has_annotation(self, name: str) -> bool:
        return any(a.name == name for a in self.annotations)

    def get_annotation(self, name: str) -> Annotation | None:
        return next((a for a in self.annotations if a.name == name), None)


@dataclass(frozen=True)
class BackendField:
    name: str
    type: str
    annotations: list[Annotation]
    line: int


@dataclass(frozen=True)
class ParsedBackendFile(ParsedFile):
    class_name: str = ""
    package_name: str = ""
    class_line: int = 1
    is_interface: bool = False
    class_annotations: list[Annotation] = field(default_factory=list)
    methods: list[BackendMethod] = field(default_factory=list)
    fields: list[BackendField] = field(default_factory=list)
    extends_class: str | None = None
    implements_interfaces: list[str] = field(default_factory=list)

    def has_class_annotation(self, name: str) -> bool:
        return any(a.name == name for a in self.class_annotations)


@dataclass
class ImportGraph:
    """Project-local import edges keyed by normalised relative path."""

    imports: dict[str, list[str]] = field(default_factory=dict)
    imported_by: dict[str, list[str]] = field(default_factory=dict)

    def importers_of(self, relative_path: str) -> list[str]:
        return self.imported_by.get(relative_path, [])

    def imports_of(self, relative_path: str) -> list[str]:
        return self.imports.get(relative_path, [])


@dataclass(frozen=True)
class RuleContext:
    project_root: Path
    all_files: list[FileInfo] = field(default_factory=list)
    import_graph: ImportGraph = field(default_factory=ImportGraph)


@dataclass(frozen=True)
class Violation:
    id: str
    rule_id: str
    rule_name: str
    category: RuleCategory
    severity: Severity
    project_type: ProjectType
    file: str
    line: int
    column: int
    message: str
    suggestion: str
    code_snippet: str
    can_auto_fix: bool = False
    fix_code: str | None = None
    end_line: int | None = None
    end_column: int | None = None
    source_path: Path | None = None

    def __post_init__(self) -> None:
        if self.can_auto_fix and not self.fix_code:
            raise ValueError(f"Violation {self.id} claims an auto-fix but carries no fix code")


@dataclass(frozen=True)
class LineChange:
    line: int
    old_content: str
    new_content: str


@dataclass(frozen=True)
class DiffPreview:
    file: str
    before: str
    after: str
    line_changes: list[LineChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.line_changes


@dataclass(frozen=True)
class FixResult:
    success: bool
    file: str
    violation: Violation
    error: str | None = None
    content: str | None = None


@dataclass
class ReportSummary:
    total_violations: int = 0
    by_project: dict[str, int] = field(default_factory=lambda: {"frontend": 0, "backend": 0})
    by_severity: dict[str, int] = field(default_factory=lambda: {"error": 0, "warning": 0, "info": 0})
    by_category: dict[str, int] = field(default_factory=dict)
    by_file: dict[str, int] = field(default_factory=dict)
    auto_fixable: int = 0


@dataclass(frozen=True)
class ScanOptions:
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    project_type: ProjectType = ProjectType.BOTH
