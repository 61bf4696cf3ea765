"""Exceptions raised before a scan can start."""

from __future__ import annotations

from pathlib import Path

__all__ = ["CodeRulesError", "ProjectRootNotFoundError"]


class CodeRulesError(Exception):
    pass


class ProjectRootNotFoundError(CodeRulesError):
    def __init__(self, project: str, path: Path) -> None:
        self.project = project
        self.path = path
        super().__init__(f"{project} project root not found: {path}")
