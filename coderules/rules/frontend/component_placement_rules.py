"""Rule: a component lives at the folder level implied by who imports it."""
from __future__ import annotations
import posixpath
from coderules.core.types import ParsedFile, RuleCategory, RuleContext, Severity, Violation
from coderules.rules.base_rule import BaseRule

__all__ = ["ComponentPlacementRule", "find_common_parent", "find_suggested_dir"]


def find_common_parent(dirs: list[str]) -> str:
    """Longest shared leading path of *dirs*, segment by segment."""
    if not dirs:
        return ""
    if len(dirs) == 1:
        return dirs[0]
    split = [d.split("/") for d in dirs]
    common: list[str] = []
    for parts in zip(*split):
        if all(p == parts[0] for p in parts):
            common.append(parts[0])
        else:
            break
    return "/".join(common)


def find_suggested_dir(importer_dir: str) -> str:
    """Nearest enclosing route-group folder such as ``(admin)``; else the importer's own folder."""
    parts = importer_dir.split("/")
    for i in range(len(parts) - 1, -1, -1):
        if parts[i].startswith("(") and parts[i].endswith(")"):
            return "/".join(parts[: i + 1])
    return importer_dir


def _is_within(path: str, parent: str) -> bool:
    return parent == "" or path == parent or path.startswith(parent + "/")


def _owner_dir(component_dir: str) -> str:
    """Folder a component serves: its directory minus trailing ``_components``/``_shared`` segments."""
    parts = component_dir.split("/") if component_dir else []
    while parts and parts[-1] in ("_components", "_shared"):
        parts.pop()
    return "/".join(parts)


class ComponentPlacementRule(BaseRule):
    rule_id = "FE-PLACE-001"
    name = "Component placement check"
    category = RuleCategory.COMPONENT_PLACEMENT
    severity = Severity.WARNING
    description = "Component must be placed at correct folder level based on usage count"

    def check(self, file: ParsedFile, context: RuleContext) -> list[Violation]:
        if not file.file.is_component:
            return []
        rel = file.file.relative_path
        if "/ui/" in "/" + rel:
            return []
        importers = context.import_graph.importers_of(rel)
        if not importers:
            return []

        importer_dirs = [posixpath.dirname(p) for p in importers]
        component_dir = posixpath.dirname(rel)
        shared = "/_shared/" in "/" + rel or "/_components/" in "/" + rel

        if len(importers) == 1:
            importer_dir = importer_dirs[0]
            if shared and not _is_within(importer_dir, component_dir):
                return [self.create_violation(
                    file, 1,
                    message="Component is only used in 1 place but placed in shared folder",
                    suggestion=f"Move component to {find_suggested_dir(importer_dir)}/_components/ or same folder as the file using it",
                    code_snippet=rel,
                )]
            return []

        common = find_common_parent(importer_dirs)
        owner = _owner_dir(component_dir)
        if common and owner != common and _is_within(owner, common):
            return [self.create_violation(
                file, 1,
                message=f"Component is used in {len(importers)} places but placed in child folder",
                suggestion=f"Move component up to {common}/_components/",
                code_snippet=rel,
            )]
        return []
