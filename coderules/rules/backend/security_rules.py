"""Rules: endpoint authorization and per-package role restrictions."""
from __future__ import annotations
from coderules.core.types import ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.backend.response_rules import is_endpoint
from coderules.rules.base_rule import BackendRule

__all__ = ["PreAuthorizeRequiredRule", "AdminPackageRolesRule", "CompanyPackageRolesRule",
           "ADMIN_ROLE", "COMPANY_ROLES"]

ADMIN_ROLE = "ADMIN_TAMABEE"
COMPANY_ROLES: tuple[str, ...] = ("ADMIN_COMPANY", "MANAGER_COMPANY", "EMPLOYEE_COMPANY")


def _is_public_controller(file: ParsedBackendFile) -> bool:
    cls = file.class_name.lower()
    return ".core." in file.package_name or "auth" in cls or "public" in cls


def _pre_authorize_values(file: ParsedBackendFile):
    for method in file.methods:
        ann = method.get_annotation("PreAuthorize")
        if ann is not None:
            yield method, ann.parameters.get("value", "")


class PreAuthorizeRequiredRule(BackendRule):
    rule_id = "BE-SEC-001"
    name = "@PreAuthorize required"
    category = RuleCategory.SECURITY
    severity = Severity.ERROR
    description = "Controller methods MUST have @PreAuthorize annotation (except public endpoints)"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_controller or _is_public_controller(file):
            return []
        # A class-level @PreAuthorize covers every endpoint.
        if file.has_class_annotation("PreAuthorize"):
            return []
        return [
            self.create_violation(
                file, method.line,
                message=f"Controller method {method.name} missing @PreAuthorize annotation",
                suggestion="Add @PreAuthorize annotation to check access permissions",
                code_snippet=f"{method.return_type} {method.name}(...)",
            )
            for method in file.methods
            if is_endpoint(method) and not method.has_annotation("PreAuthorize")
        ]


class AdminPackageRolesRule(BackendRule):
    rule_id = "BE-SEC-002"
    name = "Admin package roles"
    category = RuleCategory.SECURITY
    severity = Severity.ERROR
    description = "Admin package APIs only allow ADMIN_TAMABEE role"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_controller or ".admin." not in file.package_name:
            return []
        violations: list[Violation] = []
        for method, value in _pre_authorize_values(file):
            if ADMIN_ROLE not in value or any(role in value for role in COMPANY_ROLES):
                violations.append(self.create_violation(
                    file, method.line, f"Admin API {method.name} has invalid role",
                    "Admin package APIs only allow ADMIN_TAMABEE role", f"@PreAuthorize({value})",
                ))
        return violations


class CompanyPackageRolesRule(BackendRule):
    rule_id = "BE-SEC-003"
    name = "Company package roles"
    category = RuleCategory.SECURITY
    severity = Severity.ERROR
    description = "Company package APIs allow ADMIN_COMPANY or MANAGER_COMPANY roles"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_controller or ".company." not in file.package_name:
            return []
        violations: list[Violation] = []
        for method, value in _pre_authorize_values(file):
            snippet = f"@PreAuthorize({value})"
            if "ADMIN_COMPANY" not in value and "MANAGER_COMPANY" not in value:
                violations.append(self.create_violation(
                    file, method.line, f"Company API {method.name} missing ADMIN_COMPANY or MANAGER_COMPANY role",
                    "Company package APIs must allow ADMIN_COMPANY or MANAGER_COMPANY roles", snippet,
                ))
            if "TAMABEE" in value:
                violations.append(self.create_violation(
                    file, method.line, f"Company API {method.name} has invalid TAMABEE role",
                    "Company package APIs should not have TAMABEE roles", snippet,
                ))
        return violations
