"""
Terminal renderer using Rich.

Prints validation results grouped by severity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cfgcheck.domain.models import Severity

if TYPE_CHECKING:
    from cfgcheck.domain.models import Finding
    from cfgcheck.domain.report import ValidationResult


class TerminalRenderer:
    """
    Renders validation results to the terminal using Rich.

    Errors, warnings and info findings get their own colored section,
    followed by a summary table and a PASSED/FAILED status line.
    """

    SEVERITY_COLORS = {
        Severity.ERROR: "red bold",
        Severity.WARNING: "yellow",
        Severity.INFO: "dim",
    }

    SEVERITY_ICONS = {
        Severity.ERROR: "✗",
        Severity.WARNING: "!",
        Severity.INFO: "i",
    }

    SECTION_TITLES = {
        Severity.ERROR: "Errors",
        Severity.WARNING: "Warnings",
        Severity.INFO: "Info",
    }

    def __init__(
        self,
        console: Console | None = None,
        show_context: bool = False,
        show_info: bool = True,
    ) -> None:
        """
        Initialize the terminal renderer.

        Args:
            console: Rich console to use (creates new one if None).
            show_context: Whether to print each finding's context.
            show_info: Whether to print info findings.
        """
        self.console = console or Console()
        self.show_context = show_context
        self.show_info = show_info

    def render(self, result: ValidationResult, title: str = "Configuration Validation") -> None:
        """
        Render a validation result to the terminal.

        Args:
            result: The result to render.
            title: Header text.
        """
        self._render_header(result, title)

        sections = [
            (Severity.ERROR, result.errors),
            (Severity.WARNING, result.warnings),
        ]
        if self.show_info:
            sections.append((Severity.INFO, result.info))

        printed = False
        for severity, findings in sections:
            if findings:
                self._render_section(severity, findings)
                printed = True

        if not printed:
            self.console.print("\n[green]✓ No issues found![/green]\n")

        self._render_summary(result)
        self._render_footer(result)

    def _render_header(self, result: ValidationResult, title: str) -> None:
        files = result.metadata.get("files") or []
        body = f"[bold]{title}[/bold]"
        if files:
            body += "\nFiles: " + ", ".join(f"[cyan]{f}[/cyan]" for f in files)

        self.console.print()
        self.console.print(Panel(body, title="cfgcheck", border_style="blue"))

    def _render_section(self, severity: Severity, findings: list[Finding]) -> None:
        color = self.SEVERITY_COLORS[severity]
        self.console.print()
        self.console.print(f"[{color}]{self.SECTION_TITLES[severity]} ({len(findings)}):[/]")

        for finding in findings:
            self._render_finding(finding)

    def _render_finding(self, finding: Finding) -> None:
        color = self.SEVERITY_COLORS[finding.severity]
        icon = self.SEVERITY_ICONS[finding.severity]

        line = f"  [{color}]{icon}[/] [cyan]{finding.code}[/cyan] {finding.message}"
        if finding.path:
            line += f" [dim]({finding.path})[/dim]"
        self.console.print(line)

        if self.show_context and finding.context:
            for key, value in finding.context.items():
                value_str = str(value)
                if len(value_str) > 80:
                    value_str = value_str[:77] + "..."
                self.console.print(f"      {key}: [dim]{value_str}[/dim]")

    def _render_summary(self, result: ValidationResult) -> None:
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Severity", style="bold")
        table.add_column("Count", justify="right")

        table.add_row(Text("ERRORS", style="red bold"), Text(str(len(result.errors))))
        table.add_row(Text("WARNINGS", style="yellow"), Text(str(len(result.warnings))))
        table.add_row(Text("INFO", style="dim"), Text(str(len(result.info))))

        self.console.print()
        self.console.print(table)

    def _render_footer(self, result: ValidationResult) -> None:
        if result.success:
            status = "[green]✓ PASSED[/green]"
        else:
            status = "[red]✗ FAILED[/red]"

        duration = result.metadata.get("duration_ms", 0.0)
        self.console.print()
        self.console.print(f"Status: {status} | Duration: {duration:.1f}ms")
        self.console.print()


def render_result(result: ValidationResult, **kwargs) -> None:
    """
    Convenience function to render a result to the terminal.

    Args:
        result: The result to render.
        **kwargs: Options passed to TerminalRenderer.
    """
    renderer = TerminalRenderer(**kwargs)
    renderer.render(result)
