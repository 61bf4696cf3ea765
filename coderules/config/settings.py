"""Pydantic-based configuration model and YAML loader for CodeRules."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from coderules.core.types import ProjectType, ScanOptions
from coderules.scanner.file_discovery import DEFAULT_BACKEND_OPTIONS, DEFAULT_FRONTEND_OPTIONS


__all__ = ["ScanConfig", "RulesConfig", "CodeRulesSettings", "load_settings"]

_CONFIG_FILE_NAMES: list[str] = [
    "coderules.yaml",
    "coderules.yml",
    ".coderules.yaml",
    ".coderules.yml",
]


class ScanConfig(BaseModel):
    """Include/exclude globs for one project."""

    include: list[str] = Field(
        default_factory=list,
        description="Globs a relative path must match; empty allows everything.",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Globs that remove a relative path; evaluated before include.",
    )

    def to_options(self, project_type: ProjectType) -> ScanOptions:
        return ScanOptions(include=list(self.include), exclude=list(self.exclude), project_type=project_type)


class RulesConfig(BaseModel):
    """Rule selection."""

    disabled: list[str] = Field(
        default_factory=list,
        description="Rule ids that are never run (e.g. FE-I18N-001).",
    )


class CodeRulesSettings(BaseModel):
    """Top-level CodeRules configuration."""

    project_type: ProjectType = Field(
        default=ProjectType.BOTH,
        description="Which projects to scan: 'frontend', 'backend' or 'both'.",
    )
    frontend_path: Optional[Path] = Field(
        default=None,
        description="Root of the TypeScript/TSX project.",
    )
    backend_path: Optional[Path] = Field(
        default=None,
        description="Root of the Java project.",
    )
    use_colors: bool = Field(
        default=True,
        description="Colourise console output.",
    )
    report_path: Optional[Path] = Field(
        default=None,
        description="Write a markdown report to this file after each run.",
    )
    frontend: ScanConfig = Field(
        default_factory=lambda: ScanConfig(
            include=list(DEFAULT_FRONTEND_OPTIONS.include),
            exclude=list(DEFAULT_FRONTEND_OPTIONS.exclude),
        ),
        description="Frontend include/exclude globs.",
    )
    backend: ScanConfig = Field(
        default_factory=lambda: ScanConfig(
            include=list(DEFAULT_BACKEND_OPTIONS.include),
            exclude=list(DEFAULT_BACKEND_OPTIONS.exclude),
        ),
        description="Backend include/exclude globs.",
    )
    rules: RulesConfig = Field(
        default_factory=RulesConfig,
        description="Per-rule configuration.",
    )


def _find_config_file(search_dir: Path) -> Path | None:
    """Walk up from *search_dir* looking for a config file."""
    current = search_dir.resolve()
    while True:
        for name in _CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _resolve_paths(raw: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    """Relative paths in a config file are taken relative to that file."""
    for key in ("frontend_path", "backend_path", "report_path"):
        value = raw.get(key)
        if value and not Path(value).is_absolute():
            raw[key] = base_dir / value
    return raw


def load_settings(
    config_path: Path | None = None,
    search_dir: Path | None = None,
) -> CodeRulesSettings:
    """Load settings from a YAML file, falling back to defaults."""
    raw: dict[str, Any] = {}

    if config_path is not None:
        resolved = Path(config_path).resolve()
        if resolved.is_file():
            raw = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
            raw = _resolve_paths(raw, resolved.parent)
    else:
        found = _find_config_file(search_dir or Path.cwd())
        if found is not None:
            raw = yaml.safe_load(found.read_text(encoding="utf-8")) or {}
            raw = _resolve_paths(raw, found.parent)

    return CodeRulesSettings(**raw)
