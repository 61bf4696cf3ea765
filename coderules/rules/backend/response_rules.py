"""Rules: controller endpoints answer with ResponseEntity<BaseResponse<T>> and paginate lists."""
from __future__ import annotations
import re
from coderules.core.types import BackendMethod, ParsedBackendFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BackendRule

__all__ = ["ResponseEntityRule", "BaseResponseMethodsRule", "PageableParameterRule", "HTTP_MAPPINGS",
           "is_endpoint", "method_signature"]

HTTP_MAPPINGS = frozenset({
    "GetMapping", "PostMapping", "PutMapping", "DeleteMapping", "PatchMapping", "RequestMapping",
})
_LIST_RETURN_MARKERS = ("List", "Page", "Collection")
_NEW_BASE_RESPONSE_RE = re.compile(r"new\s+BaseResponse\s*[<(]")


def is_endpoint(method: BackendMethod) -> bool:
    return any(ann.name in HTTP_MAPPINGS for ann in method.annotations)


def method_signature(file: ParsedBackendFile, method: BackendMethod) -> str:
    """Signature text from the declaration line up to the opening brace."""
    parts: list[str] = []
    for line in file.lines[method.line - 1: method.end_line]:
        head, brace, _ = line.partition("{")
        parts.append(head.strip())
        if brace or head.rstrip().endswith(";"):
            break
    return " ".join(p for p in parts if p)


class ResponseEntityRule(BackendRule):
    rule_id = "BE-RESP-001"
    name = "Return ResponseEntity<BaseResponse>"
    category = RuleCategory.RESPONSE
    severity = Severity.ERROR
    description = "Controller methods MUST return ResponseEntity<BaseResponse<T>>"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_controller:
            return []
        violations: list[Violation] = []
        for method in file.methods:
            if not is_endpoint(method):
                continue
            rt = method.return_type
            snippet = f"{rt} {method.name}(...)"
            if "ResponseEntity" not in rt:
                violations.append(self.create_violation(
                    file, method.line, f"Method {method.name} does not return ResponseEntity",
                    f"Change return type to ResponseEntity<BaseResponse<{rt}>>", snippet,
                ))
            elif "BaseResponse" not in rt:
                violations.append(self.create_violation(
                    file, method.line, f"Method {method.name} returns ResponseEntity but not wrapped in BaseResponse",
                    "Use ResponseEntity<BaseResponse<T>> to ensure consistent API response format", snippet,
                ))
        return violations


class BaseResponseMethodsRule(BackendRule):
    rule_id = "BE-RESP-002"
    name = "Use BaseResponse methods"
    category = RuleCategory.RESPONSE
    severity = Severity.WARNING
    description = "Use BaseResponse.success(), BaseResponse.created(), BaseResponse.error()"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_controller:
            return []
        return [
            self.create_violation(
                file, idx,
                message="Using constructor instead of static methods for BaseResponse",
                suggestion="Use BaseResponse.success(data), BaseResponse.created(data), or BaseResponse.error(errorCode, message)",
                code_snippet=line.strip(),
                column=m.start() + 1,
            )
            for idx, line in enumerate(file.lines, start=1)
            for m in _NEW_BASE_RESPONSE_RE.finditer(line)
        ]


class PageableParameterRule(BackendRule):
    rule_id = "BE-RESP-003"
    name = "Pageable for list APIs"
    category = RuleCategory.RESPONSE
    severity = Severity.WARNING
    description = "List APIs MUST have Pageable parameter"

    def check_backend(self, file: ParsedBackendFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_controller:
            return []
        violations: list[Violation] = []
        for method in file.methods:
            request = method.get_annotation("RequestMapping")
            is_get = method.has_annotation("GetMapping") or (
                request is not None and "GET" in request.parameters.get("method", "")
            )
            if not is_get or not any(marker in method.return_type for marker in _LIST_RETURN_MARKERS):
                continue
            signature = method_signature(file, method)
            if "Pageable" not in signature:
                violations.append(self.create_violation(
                    file, method.line, f"List API {method.name} missing Pageable parameter",
                    "Add Pageable pageable parameter to support pagination", signature,
                ))
        return violations
