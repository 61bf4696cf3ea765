"""Recursive source discovery with glob filtering and role classification."""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Callable

from coderules.core.types import FileInfo, FileType, ProjectType, ScanOptions

__all__ = [
    "EXCLUDED_DIR_NAMES",
    "ROLE_TABLE",
    "DEFAULT_FRONTEND_OPTIONS",
    "DEFAULT_BACKEND_OPTIONS",
    "match_glob",
    "get_file_type",
    "classify",
    "discover_files",
    "default_options_for",
]

logger = logging.getLogger(__name__)

EXCLUDED_DIR_NAMES: frozenset[str] = frozenset({
    "node_modules", ".git", ".next", "target", ".kiro",
    "dist", "build", "__pycache__", ".turbo", ".cache",
})

_EXTENSIONS: dict[str, FileType] = {
    ".ts": FileType.TYPESCRIPT,
    ".tsx": FileType.TSX,
    ".jsx": FileType.JSX,
    ".java": FileType.JAVA,
}


def _java_role(suffixes: tuple[str, ...], segment: str) -> Callable[[str, str, FileType], bool]:
    def check(name: str, rel: str, ftype: FileType) -> bool:
        return ftype is FileType.JAVA and (name.endswith(suffixes) or f"/{segment}/" in f"/{rel}")
    return check


def _is_page(name: str, rel: str, ftype: FileType) -> bool:
    return name in ("page.tsx", "page.ts")


def _is_component(name: str, rel: str, ftype: FileType) -> bool:
    return (
        ftype in (FileType.TSX, FileType.JSX)
        and not _is_page(name, rel, ftype)
        and ".test." not in name
        and ".spec." not in name
    )


# flag name -> predicate(file name, relative path, file type)
ROLE_TABLE: dict[str, Callable[[str, str, FileType], bool]] = {
    "is_page": _is_page,
    "is_component": _is_component,
    "is_service": _java_role(("Service.java", "ServiceImpl.java"), "service"),
    "is_controller": _java_role(("Controller.java",), "controller"),
    "is_mapper": _java_role(("Mapper.java",), "mapper"),
    "is_entity": _java_role(("Entity.java",), "entity"),
    "is_repository": _java_role(("Repository.java",), "repository"),
}

DEFAULT_FRONTEND_OPTIONS = ScanOptions(
    include=["**/*.ts", "**/*.tsx"],
    exclude=[
        "**/*.test.ts", "**/*.test.tsx", "**/*.spec.ts", "**/*.spec.tsx",
        "**/node_modules/**", "**/.next/**", "**/dist/**", "**/__tests__/**",
        "**/vitest.config.ts", "**/next.config.ts", "**/code-checker/**",
    ],
    project_type=ProjectType.FRONTEND,
)

DEFAULT_BACKEND_OPTIONS = ScanOptions(
    include=["**/*.java"],
    exclude=[
        "**/target/**", "**/build/**", "**/test/**",
        "**/*Test.java", "**/*Tests.java", "**/*Spec.java",
    ],
    project_type=ProjectType.BACKEND,
)


@lru_cache(maxsize=256)
def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out))


def match_glob(relative_path: str, pattern: str) -> bool:
    """Anchored glob match against a ``/``-separated relative path."""
    return _glob_to_regex(pattern).fullmatch(relative_path.replace("\\", "/")) is not None


def get_file_type(name: str) -> FileType | None:
    return _EXTENSIONS.get(os.path.splitext(name)[1].lower())


def classify(path: Path, relative_path: str, file_type: FileType) -> FileInfo:
    name = relative_path.rsplit("/", 1)[-1]
    flags = {flag: check(name, relative_path, file_type) for flag, check in ROLE_TABLE.items()}
    return FileInfo(path=path, relative_path=relative_path, type=file_type, **flags)


def _accepts(file_type: FileType, relative_path: str, options: ScanOptions) -> bool:
    if options.project_type is ProjectType.FRONTEND and file_type is FileType.JAVA:
        return False
    if options.project_type is ProjectType.BACKEND and file_type is not FileType.JAVA:
        return False
    if any(match_glob(relative_path, p) for p in options.exclude):
        return False
    if options.include and not any(match_glob(relative_path, p) for p in options.include):
        return False
    return True


def _walk(directory: Path, root: Path, options: ScanOptions, results: list[FileInfo]) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return

    for entry in entries:
        if entry.name in EXCLUDED_DIR_NAMES:
            continue
        full = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            _walk(full, root, options, results)
            continue
        if not entry.is_file():
            continue
        file_type = get_file_type(entry.name)
        if file_type is None:
            continue
        rel = full.relative_to(root).as_posix()
        if _accepts(file_type, rel, options):
            results.append(classify(full, rel, file_type))


def discover_files(root: Path, options: ScanOptions) -> list[FileInfo]:
    """Walk *root* depth-first and return every source file accepted by *options*."""
    root = Path(root).resolve()
    results: list[FileInfo] = []
    _walk(root, root, options, results)
    logger.debug("Discovered %d file(s) under %s", len(results), root)
    return results


def default_options_for(project_type: ProjectType) -> ScanOptions:
    if project_type is ProjectType.BACKEND:
        return DEFAULT_BACKEND_OPTIONS
    return DEFAULT_FRONTEND_OPTIONS
