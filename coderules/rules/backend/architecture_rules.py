"""Rules: layered architecture conventions for services, mappers and packages."""
from __future__ import annotations
import re
from coderules.core.types import ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule
from coderules.rules.source_edits import insert_before

__all__ = ["ServiceInterfacePatternRule", "MapperComponentAnnotationRule", "DomainBasedPackageRule", "VALID_DOMAINS"]

_INTERFACE_NAME_RE = re.compile(r"^I[A-Z]")

VALID_DOMAINS: tuple[str, ...] = (
    "admin", "company", "core", "mapper", "entity", "repository", "dto", "enums", "exception", "config", "util",
)


class ServiceInterfacePatternRule(BackendRule):
    rule_id = "BE-ARCH-001"
    name = "Service interface pattern"
    category = RuleCategory.ARCHITECTURE
    severity = Severity.ERROR
    description = "Service MUST follow Interface + Implementation pattern: I{Entity}Service + {Entity}ServiceImpl"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        cls = file.class_name
        if not file.file.is_service or not cls or file.is_interface:
            return []
        if cls.endswith("ServiceImpl"):
            expected = "I" + cls[: -len("Impl")]
            if expected in file.implements_interfaces:
                return []
            return [self.create_violation(
                file, file.class_line,
                message=f"Service class {cls} does not implement interface {expected}",
                suggestion=f"Create interface {expected} and implement it in {cls}",
                code_snippet=f"class {cls}",
            )]
        if cls.endswith("Service") and not _INTERFACE_NAME_RE.match(cls):
            return [self.create_violation(
                file, file.class_line,
                message=f"Service class {cls} does not follow naming convention",
                suggestion=f"Rename to {cls}Impl and create interface I{cls}",
                code_snippet=f"class {cls}",
            )]
        return []


class MapperComponentAnnotationRule(BackendRule):
    rule_id = "BE-ARCH-002"
    name = "Mapper @Component annotation"
    category = RuleCategory.ARCHITECTURE
    severity = Severity.ERROR
    description = "Mapper class MUST have @Component annotation"
    can_auto_fix = True

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_mapper or not file.class_name or file.is_interface:
            return []
        if file.has_class_annotation("Component"):
            return []
        return [self.create_violation(
            file, file.class_line,
            message=f"Mapper class {file.class_name} missing @Component annotation",
            suggestion="Add @Component annotation before class declaration",
            code_snippet=f"class {file.class_name}",
            fix_code=insert_before(file, file.class_line, ["@Component"]),
        )]


class DomainBasedPackageRule(BackendRule):
    rule_id = "BE-ARCH-003"
    name = "Domain-based package structure"
    category = RuleCategory.ARCHITECTURE
    severity = Severity.WARNING
    description = "Package structure MUST follow domain: admin/, company/, core/"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not (file.file.is_service or file.file.is_controller):
            return []
        segments = file.package_name.split(".")[1:]
        if any(domain in segments for domain in VALID_DOMAINS):
            return []
        return [self.create_violation(
            file, 1,
            message=f"Package {file.package_name} does not follow domain-based structure",
            suggestion="Organize package by domain: admin/, company/, core/",
            code_snippet=f"package {file.package_name};",
        )]
