"""Bidirectional graph of project-local imports between frontend files."""

from __future__ import annotations

import posixpath

from coderules.core.types import ImportGraph, ParsedFile

__all__ = ["build_import_graph", "resolve_import", "is_local_import"]

_RESOLVE_SUFFIXES: tuple[str, ...] = ("", ".ts", ".tsx", ".jsx", "/index.ts", "/index.tsx", "/index.jsx")
_ALIAS_PREFIX = "@/"
_ALIAS_ROOTS: tuple[str, ...] = ("src", "")


def is_local_import(source: str) -> bool:
    return source.startswith(("./", "../", _ALIAS_PREFIX))


def _candidates(importer: str, source: str) -> list[str]:
    if source.startswith(_ALIAS_PREFIX):
        bare = source[len(_ALIAS_PREFIX):]
        bases = [posixpath.join(root, bare) if root else bare for root in _ALIAS_ROOTS]
    else:
        bases = [posixpath.join(posixpath.dirname(importer), source)]
    return [posixpath.normpath(base) + suffix for base in bases for suffix in _RESOLVE_SUFFIXES]


def resolve_import(importer: str, source: str, known: set[str]) -> str | None:
    """Resolve *source* imported from *importer* to a known relative path, if any."""
    if not is_local_import(source):
        return None
    for candidate in _candidates(importer, source):
        if candidate in known:
            return candidate
    return None


def build_import_graph(parsed_files: list[ParsedFile]) -> ImportGraph:
    """Build forward and reverse import maps; unresolvable imports are dropped."""
    known = {pf.file.relative_path for pf in parsed_files}
    graph = ImportGraph()
    for pf in parsed_files:
        importer = pf.file.relative_path
        targets: list[str] = []
        for imp in pf.imports:
            target = resolve_import(importer, imp.source, known)
            if target is None or target == importer or target in targets:
                continue
            targets.append(target)
            graph.imported_by.setdefault(target, []).append(importer)
        graph.imports[importer] = targets
    return graph
