"""CodeRules CLI – Typer multi-command application."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from coderules.config.settings import CodeRulesSettings, load_settings
from coderules.core.engine import CodeRulesEngine, ScanResult
from coderules.core.errors import CodeRulesError
from coderules.core.types import ProjectType
from coderules.fixer.auto_fixer import AutoFixer, print_fix_results
from coderules.reporter.console_reporter import ConsoleReporter
from coderules.rules.catalog import build_default_registry
from coderules.utils.logger import (
    console, create_table, print_error, print_info, print_success, print_warning, setup_logging,
)

__all__ = ["app", "detect_project_paths"]

app = typer.Typer(
    name="coderules",
    help="Check a Next.js frontend and a Spring backend against the team's coding rules.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_SEVERITY_COLOR = {"error": "red", "warning": "yellow", "info": "cyan"}


def _banner() -> None:
    console.print(Panel(
        Text("CodeRules", style="bold magenta", justify="center"),
        subtitle="Coding rules checker",
        border_style="magenta", expand=False, padding=(0, 4),
    ))
    console.print()


def detect_project_paths(workspace: Path) -> tuple[Path | None, Path | None]:
    """``<workspace>/src`` as the frontend and a sibling ``../api-hr/src`` as the backend, when present."""
    frontend = workspace / "src"
    backend = workspace.parent / "api-hr" / "src"
    return (frontend if frontend.is_dir() else None), (backend if backend.is_dir() else None)


def _resolve_settings(
    config: Path | None,
    frontend: Path | None,
    backend: Path | None,
    frontend_only: bool,
    backend_only: bool,
    no_color: bool,
) -> CodeRulesSettings:
    cwd = Path.cwd()
    settings = load_settings(config_path=config, search_dir=cwd)
    if frontend is not None:
        settings.frontend_path = frontend
    if backend is not None:
        settings.backend_path = backend
    if no_color:
        settings.use_colors = False

    if settings.frontend_path is None and settings.backend_path is None:
        settings.frontend_path, settings.backend_path = detect_project_paths(cwd)
        if settings.frontend_path is None and settings.backend_path is None:
            raise CodeRulesError("No project paths specified. Use --frontend or --backend options.")

    if frontend_only:
        settings.project_type = ProjectType.FRONTEND
    elif backend_only:
        settings.project_type = ProjectType.BACKEND
    elif settings.project_type is ProjectType.BOTH:
        if settings.backend_path is None:
            settings.project_type = ProjectType.FRONTEND
        elif settings.frontend_path is None:
            settings.project_type = ProjectType.BACKEND
    return settings


def _print_rule_failures(result: ScanResult) -> None:
    if not result.rule_failures:
        return
    rows = [[f.rule_id, escape(f.file), escape(f.error)] for f in result.rule_failures]
    console.print(create_table(
        "⚠️  Rule failures",
        [("Rule", "bold"), ("File", "dim"), ("Error", "red")],
        rows,
    ))
    print_warning(f"{len(result.rule_failures)} rule run(s) failed; their files were only partly checked.")


@app.command()
def check(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to coderules.yaml"),
    frontend: Optional[Path] = typer.Option(None, "--frontend", "-f", help="Frontend project root"),
    backend: Optional[Path] = typer.Option(None, "--backend", "-b", help="Backend project root"),
    frontend_only: bool = typer.Option(False, "--frontend-only", help="Scan the frontend only"),
    backend_only: bool = typer.Option(False, "--backend-only", help="Scan the backend only"),
    fix: bool = typer.Option(False, "--fix", help="Apply auto-fixes to the files on disk"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the diffs --fix would apply without writing"),
    backup: bool = typer.Option(False, "--backup", help="Keep a .backup copy of every fixed file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write a markdown report to this file"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable coloured output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Scan the projects, report violations and optionally fix them."""
    setup_logging(verbose)
    _banner()
    try:
        settings = _resolve_settings(config, frontend, backend, frontend_only, backend_only, no_color)
        engine = CodeRulesEngine(settings=settings)
    except CodeRulesError as exc:
        print_error(escape(str(exc)))
        raise typer.Exit(code=2)

    with console.status("[bold cyan]Scanning source files…"):
        result = engine.scan()
    print_info(f"Scanned {result.files_scanned} file(s) with {len(engine.registry)} rule(s).")

    ConsoleReporter(console=console, use_colors=settings.use_colors).generate_console_report(result.violations)
    _print_rule_failures(result)

    report_path = output or settings.report_path
    if report_path is not None:
        engine.write_report(result.violations, report_path)
        print_info(f"Report saved to: {escape(str(report_path))}")

    fixer = AutoFixer(backup=backup, use_colors=settings.use_colors)
    fixable = fixer.get_fixable_violations(result.violations)
    if dry_run:
        previews = fixer.preview_all_fixes(fixable)
        if not previews:
            print_info("No auto-fixable violations found.")
        for diff in previews:
            console.print(fixer.format_diff_for_console(diff), highlight=False)
            console.print()
    elif fix:
        if not fixable:
            print_info("No auto-fixable violations found.")
        else:
            print_info(f"Applying {len(fixable)} auto-fix(es)…")
            result.fix_results = engine.apply_fixes(fixable, backup=backup)
            print_fix_results(result.fix_results, console)

    if result.has_errors:
        print_error("Error-level violations found.")
    elif result.violations:
        print_warning("Violations found, none at error level.")
    else:
        print_success("All files follow the coding rules.")
    raise typer.Exit(code=result.exit_code)


@app.command()
def rules(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to coderules.yaml"),
    project_type: Optional[ProjectType] = typer.Option(None, "--project-type", "-t", help="frontend|backend|both"),
) -> None:
    """List the registered rules."""
    settings = load_settings(config_path=config, search_dir=Path.cwd())
    registry = build_default_registry(settings)
    if project_type is None or project_type is ProjectType.BOTH:
        selected = registry.get_all()
    else:
        selected = registry.get_by_project_type(project_type)
    rows = [
        [
            rule.rule_id,
            escape(rule.name),
            f"[{_SEVERITY_COLOR[rule.severity.value]}]{rule.severity.value}[/{_SEVERITY_COLOR[rule.severity.value]}]",
            rule.category.value,
            "yes" if rule.can_auto_fix else "",
        ]
        for rule in selected
    ]
    console.print(create_table(
        f"📋 Rules ({len(rows)})",
        [("ID", "bold"), ("Name", ""), ("Severity", ""), ("Category", "dim"), ("Auto-fix", "green")],
        rows,
    ))
    disabled = settings.rules.disabled
    if disabled:
        print_info(f"Disabled by configuration: {', '.join(disabled)}")


if __name__ == "__main__":
    app()
