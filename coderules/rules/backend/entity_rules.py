"""Rules: JPA entities extend BaseEntity and reference other rows by id."""
from __future__ import annotations
from coderules.core.types import ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule

__all__ = ["ExtendBaseEntityRule", "NoRelationshipAnnotationsRule", "LongTypeForForeignKeyRule"]

_RELATIONSHIP_ANNOTATIONS = frozenset({"ManyToOne", "OneToMany", "ManyToMany", "OneToOne"})


class ExtendBaseEntityRule(BackendRule):
    rule_id = "BE-ENT-001"
    name = "Extend BaseEntity"
    category = RuleCategory.ENTITY
    severity = Severity.ERROR
    description = "Entity classes MUST extend BaseEntity"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_entity or not file.has_class_annotation("Entity"):
            return []
        if file.extends_class == "BaseEntity":
            return []
        extends = f" extends {file.extends_class}" if file.extends_class else ""
        return [self.create_violation(
            file, file.class_line,
            message=f"Entity class {file.class_name} does not extend BaseEntity",
            suggestion="Add extends BaseEntity to class declaration",
            code_snippet=f"class {file.class_name}{extends}",
        )]


class NoRelationshipAnnotationsRule(BackendRule):
    rule_id = "BE-ENT-002"
    name = "No @ManyToOne/@OneToMany"
    category = RuleCategory.ENTITY
    severity = Severity.ERROR
    description = "Entity MUST NOT use @ManyToOne, @OneToMany - use Long for foreign key fields"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_entity:
            return []
        return [
            self.create_violation(
                file, ann.line,
                message=f"Field {fld.name} uses @{ann.name} annotation",
                suggestion=f"Replace with Long type for foreign key: Long {fld.name}Id",
                code_snippet=f"@{ann.name}",
            )
            for fld in file.fields
            for ann in fld.annotations
            if ann.name in _RELATIONSHIP_ANNOTATIONS
        ]


class LongTypeForForeignKeyRule(BackendRule):
    rule_id = "BE-ENT-003"
    name = "Long type for foreign keys"
    category = RuleCategory.ENTITY
    severity = Severity.WARNING
    description = "Foreign key fields MUST use Long type instead of entity references"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_entity:
            return []
        violations: list[Violation] = []
        for fld in file.fields:
            is_collection = "List<" in fld.type or "Set<" in fld.type
            if fld.type.endswith("Entity") and not is_collection:
                violations.append(self.create_violation(
                    file, fld.line,
                    message=f"Field {fld.name} uses entity reference {fld.type}",
                    suggestion=f"Replace with Long type: Long {fld.name}Id",
                    code_snippet=f"{fld.type} {fld.name}",
                ))
            elif is_collection and "Entity" in fld.type:
                violations.append(self.create_violation(
                    file, fld.line,
                    message=f"Field {fld.name} uses collection of entity references",
                    suggestion="Do not use collection relationships in Entity. Use separate queries in Service layer",
                    code_snippet=f"{fld.type} {fld.name}",
                ))
        return violations
