"""Rich output formatting helpers for the ciseed CLI.

Everything user-facing goes through the shared ``console``; log records
go to stderr through the handler installed by ``setup_logging``.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ciseed.models.scan_result import ScanResult
from ciseed.scanners.registry import ScannerRegistry

console = Console()
error_console = Console(stderr=True)


def print_scan_summary(result: ScanResult) -> None:
    """Print the detected platforms and any detection warnings.

    Args:
        result: Scan result returned by ``ScannerRegistry.scan()``.
    """
    table = Table(title="Detected Platforms", show_header=True, header_style="bold")
    table.add_column("Platform", style="bold")
    table.add_column("Configs", justify="right")
    table.add_column("Warnings", justify="right")
    for name in result.platforms:
        warnings = result.platform_warnings.get(name, [])
        table.add_row(
            name,
            str(len(result.platform_templates.get(name, {}))),
            Text(str(len(warnings)), style="yellow" if warnings else "dim"),
        )
    console.print(table)
    print_warnings(result)


def print_warnings(result: ScanResult) -> None:
    """Print warnings grouped by platform, including undetected ones."""
    for name, warnings in result.platform_warnings.items():
        if not warnings:
            continue
        console.print(f"[bold yellow]{name}[/bold yellow] warnings:")
        for warning in warnings:
            console.print(f"  [yellow]- {escape(warning)}[/yellow]")


def print_platforms(registry: ScannerRegistry) -> None:
    """Print the registered scanners in scan order."""
    table = Table(title="Supported Platforms", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Platform", style="bold")
    table.add_column("Excludes", style="dim")
    table.add_column("Default Configs")
    for number, scanner in enumerate(registry.scanners, start=1):
        table.add_row(
            str(number),
            scanner.name,
            ", ".join(scanner.excluded_platforms()) or "-",
            ", ".join(sorted(scanner.default_configs())),
        )
    fallback = registry.fallback
    table.add_row(
        "-",
        f"{fallback.name} (fallback)",
        "-",
        ", ".join(sorted(fallback.default_configs())),
    )
    console.print(table)


def print_written(kind: str, path: Path) -> None:
    console.print(f"[green]{kind} written to[/green] {path}")


def print_error(message: str) -> None:
    error_console.print(Panel(Text(message, style="bold red"), title="Error"))
