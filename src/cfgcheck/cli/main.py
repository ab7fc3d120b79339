"""
Main CLI entry point for cfgcheck.

Usage:
    cfgcheck validate
    cfgcheck validate dev.yaml prod.yaml --format json
    cfgcheck audit .env.yaml --standard GDPR
    cfgcheck rules
    cfgcheck init
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from cfgcheck import __version__
from cfgcheck.domain.models import ComplianceStandard

app = typer.Typer(
    name="cfgcheck",
    help="cfgcheck: consistency, schema and security checks for configuration files",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

STARTER_CONFIG = """\
# cfgcheck project file

# Documents compared key by key (or use `environments`)
files:
  - config/development.yaml
  - config/production.yaml

# environments:
#   dev: config/development.yaml
#   prod: config/production.yaml

# Keys skipped by the equality check: exact keys, branches or wildcards
ignore_keys:
  - debug.*

required_keys:
  - database.host

forbidden_keys: []

# Key path to regex the value must match
patterns: {}

# schema:
#   type: object
#   required: [database]

security:
  enabled: true
  use_default_rules: true
  compliance: []

# When false, errors are reported as warnings and never fail the run
strict: true
"""


class OutputFormat(str, Enum):
    """Output format options."""

    terminal = "terminal"
    json = "json"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cfgcheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """
    cfgcheck: consistency, schema and security checks for configuration files

    Compare environment files key by key, validate them against a schema and
    pattern rules, and scan them for secrets and insecure settings.

    Examples:

        cfgcheck validate --config cfgcheck.yaml

        cfgcheck validate dev.yaml prod.yaml --format json --output report.json

        cfgcheck audit secrets.yaml --standard PCI-DSS
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def validate(
    files: Annotated[
        Optional[list[Path]],
        typer.Argument(
            help="Documents to validate (default: those listed in the project file).",
        ),
    ] = None,
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to the project file.",
        ),
    ] = Path("cfgcheck.yaml"),
    env: Annotated[
        Optional[str],
        typer.Option(
            "--env",
            "-e",
            help="Validate only this environment's document.",
        ),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
        ),
    ] = OutputFormat.terminal,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file path (default: stdout).",
        ),
    ] = None,
    strict: Annotated[
        Optional[bool],
        typer.Option(
            "--strict/--no-strict",
            help="Fail on errors (default: the project file's setting).",
        ),
    ] = None,
    create_missing: Annotated[
        bool,
        typer.Option(
            "--create-missing",
            help="Create listed documents that do not exist, with every value empty.",
        ),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option(
            "--no-color",
            help="Disable colored output.",
        ),
    ] = False,
) -> None:
    """
    Validate configuration files.

    Runs key equality analysis across the documents, the project's
    document rules and, when enabled, the security scan.

    Examples:

        cfgcheck validate

        cfgcheck validate --env prod

        cfgcheck validate dev.yaml prod.yaml --no-strict

        cfgcheck validate --create-missing
    """
    from cfgcheck.adapters.fs import FileSystemAdapter
    from cfgcheck.domain.config import ProjectConfig
    from cfgcheck.domain.exceptions import ConfigError, DocumentLoadError
    from cfgcheck.engine.runner import create_missing_documents, run_validation

    if config.exists():
        try:
            project = ProjectConfig.from_file(config)
        except ConfigError as e:
            console.print(f"[red]Error loading {config}: {e.message}[/red]")
            raise typer.Exit(1)
        base_path = Path.cwd() if files else config.resolve().parent
    elif files:
        project = ProjectConfig()
        base_path = Path.cwd()
    else:
        console.print(
            f"[red]No files given and no project file found at {config}[/red]\n"
            f"Run 'cfgcheck init' to create one."
        )
        raise typer.Exit(1)

    adapter = FileSystemAdapter(base_path)

    if create_missing:
        try:
            created = create_missing_documents(project, files=files, adapter=adapter)
        except (ConfigError, DocumentLoadError) as e:
            console.print(f"[red]Could not create missing documents: {e.message}[/red]")
            raise typer.Exit(1)
        for path in created:
            console.print(f"[green]✓ Created {path}[/green]")

    result = run_validation(
        project,
        files=files,
        environment=env,
        strict=strict,
        adapter=adapter,
    )

    _emit(result, format, output, no_color, "Configuration Validation")

    if not result.success:
        raise typer.Exit(1)


@app.command()
def audit(
    files: Annotated[
        Optional[list[Path]],
        typer.Argument(
            help="Files to scan (default: YAML and JSON files in the current directory).",
        ),
    ] = None,
    standard: Annotated[
        Optional[list[ComplianceStandard]],
        typer.Option(
            "--standard",
            "-s",
            help="Compliance standard to check (repeatable).",
        ),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
        ),
    ] = OutputFormat.terminal,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file path (default: stdout).",
        ),
    ] = None,
    no_color: Annotated[
        bool,
        typer.Option(
            "--no-color",
            help="Disable colored output.",
        ),
    ] = False,
) -> None:
    """
    Scan files for secrets, insecure settings and loose permissions.

    Uses the built-in rule catalog; compliance standards add their
    requirement checks.

    Examples:

        cfgcheck audit

        cfgcheck audit app.yaml --standard GDPR --standard HIPAA
    """
    from cfgcheck.adapters.fs import FileSystemAdapter
    from cfgcheck.engine.runner import run_audit

    adapter = FileSystemAdapter()
    paths = list(files) if files else adapter.find_documents()

    if not paths:
        console.print("[yellow]No configuration files found.[/yellow]")
        raise typer.Exit(0)

    result = run_audit(paths, standards=standard or [], adapter=adapter)

    _emit(result, format, output, no_color, "Security Audit")

    if format == OutputFormat.terminal and result.metadata.get("documents"):
        _print_compliance(result.metadata["documents"])

    if not result.success:
        raise typer.Exit(1)


@app.command()
def init(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory to create the cfgcheck.yaml project file in.",
        ),
    ] = Path("."),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing project file.",
        ),
    ] = False,
) -> None:
    """
    Initialize a cfgcheck project file.

    Examples:

        cfgcheck init

        cfgcheck init ./service --force
    """
    from cfgcheck.domain.config import DEFAULT_CONFIG_FILE

    config_path = path / DEFAULT_CONFIG_FILE

    if config_path.exists() and not force:
        console.print(
            f"[yellow]Project file already exists: {config_path}[/yellow]\n"
            f"Use --force to overwrite."
        )
        raise typer.Exit(1)

    config_path.write_text(STARTER_CONFIG, encoding="utf-8")
    console.print(f"[green]✓ Created {config_path}[/green]")
    console.print("\nEdit this file to list your documents and rules.")


@app.command()
def rules() -> None:
    """
    List the built-in security rules.

    Shows rule IDs, names, rule types and severity levels.
    """
    from rich.table import Table

    from cfgcheck.rules import DEFAULT_SECURITY_RULES

    table = Table(title="cfgcheck Security Rules")
    table.add_column("Rule ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Type")
    table.add_column("Severity", style="bold")

    severity_styles = {
        "critical": "red bold",
        "high": "red",
        "medium": "yellow",
        "low": "blue",
    }

    for rule in DEFAULT_SECURITY_RULES:
        style = severity_styles.get(rule.severity.value, "white")
        table.add_row(
            rule.id,
            rule.name,
            rule.type,
            f"[{style}]{rule.severity.value.upper()}[/]",
        )

    console.print(table)
    console.print(f"\nTotal: {len(DEFAULT_SECURITY_RULES)} rules")


def _emit(result, format: OutputFormat, output: Path | None, no_color: bool, title: str) -> None:
    from cfgcheck.renderers.json_renderer import JsonRenderer
    from cfgcheck.renderers.terminal import TerminalRenderer

    match format:
        case OutputFormat.terminal:
            if output:
                with output.open("w", encoding="utf-8") as handle:
                    report_console = Console(file=handle, no_color=True, width=120)
                    TerminalRenderer(console=report_console).render(result, title=title)
                console.print(f"[green]Report written to {output}[/green]")
            else:
                renderer = TerminalRenderer(console=Console(no_color=no_color))
                renderer.render(result, title=title)

        case OutputFormat.json:
            json_output = JsonRenderer().render(result)

            if output:
                output.write_text(json_output, encoding="utf-8")
                console.print(f"[green]Report written to {output}[/green]")
            else:
                typer.echo(json_output)


def _print_compliance(documents: list[dict]) -> None:
    for entry in documents:
        for status in entry.get("compliance", []):
            if status["passed"]:
                console.print(f"[green]✓ {entry['file']}: {status['standard']} passed[/green]")
            else:
                failed = ", ".join(status["failed_requirements"])
                console.print(
                    f"[red]✗ {entry['file']}: {status['standard']} failed ({failed})[/red]"
                )


if __name__ == "__main__":
    app()
