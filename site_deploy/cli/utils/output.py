# site_deploy/cli/utils/output.py
"""Output formatting utilities"""

from typing import Any, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...models import DeployHistoryEntry, DeployResult, PlatformInfo, SavedDeployConfig
from ...utils.formatting import format_duration

console = Console()

STATUS_STYLES = {
    "success": "green",
    "failed": "red",
    "cancelled": "yellow",
}


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    if result.success:
        lines = [
            "[green]✓[/green] Deployment completed successfully!",
            "",
        ]
        if result.url:
            lines.append(f"[bold]URL:[/bold] {result.url}")
        if result.preview_url and result.preview_url != result.url:
            lines.append(f"[bold]Preview:[/bold] {result.preview_url}")
        if result.deploy_id:
            lines.append(f"[bold]Deploy ID:[/bold] {result.deploy_id}")
        if result.duration is not None:
            lines.append(f"[bold]Duration:[/bold] {format_duration(result.duration)}")

        for key, value in result.platform_info.items():
            lines.append(f"[bold]{key.replace('_', ' ').capitalize()}:[/bold] {value}")

        panel = Panel(
            "\n".join(lines),
            title="Deploy Result",
            border_style="green"
        )
        console.print(panel)

    elif result.cancelled:
        console.print(Panel(
            "[yellow]Deployment cancelled[/yellow]",
            title="Deploy Cancelled",
            border_style="yellow"
        ))

    else:
        lines = [f"[red]✗ Deploy failed:[/red] {result.error}"]
        files_failed = result.platform_info.get("files_failed")
        if files_failed:
            lines.append("")
            lines.append(f"[yellow]{files_failed} files failed to upload[/yellow]")

        panel = Panel(
            "\n".join(lines),
            title="Deploy Error",
            border_style="red"
        )
        console.print(panel)


def format_platform_list(platforms: List[PlatformInfo]) -> None:
    """Format and display supported platforms"""
    table = Table(title="Deploy Platforms", box=box.ROUNDED)
    table.add_column("Platform", style="cyan")
    table.add_column("Name")
    table.add_column("Auth")
    table.add_column("Preview")
    table.add_column("Custom domain")
    table.add_column("Required fields", style="dim")

    for info in platforms:
        table.add_row(
            info.id,
            f"{info.icon} {info.name}",
            info.auth_type or ("yes" if info.requires_auth else "-"),
            "✓" if info.supports_preview else "-",
            "✓" if info.supports_custom_domain else "-",
            ", ".join(info.required_fields),
        )

    console.print(table)


def format_history(entries: List[DeployHistoryEntry]) -> None:
    """Format and display deploy history"""
    if not entries:
        console.print("[yellow]No deployments recorded[/yellow]")
        return

    table = Table(title="Deploy History", box=box.SIMPLE)
    table.add_column("ID", style="dim")
    table.add_column("Platform", style="cyan")
    table.add_column("Status")
    table.add_column("URL / Error")
    table.add_column("Duration", justify="right")
    table.add_column("Started", style="dim")

    for entry in entries:
        style = STATUS_STYLES.get(entry.status.value, "white")
        result = entry.result
        if result and result.success:
            detail = result.url or "-"
        else:
            detail = (result.error if result else None) or "-"

        table.add_row(
            entry.id,
            entry.platform,
            f"[{style}]{entry.status.value}[/{style}]",
            detail,
            format_duration(result.duration) if result and result.duration is not None else "-",
            entry.start_time.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


def format_saved_configs(configs: List[SavedDeployConfig]) -> None:
    """Format and display saved deploy configs"""
    if not configs:
        console.print("[yellow]No saved deploy configs[/yellow]")
        return

    table = Table(title="Saved Deploy Configs", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Platform", style="yellow")
    table.add_column("Default")
    table.add_column("Updated", style="dim")
    table.add_column("Last deploy", style="dim")

    for saved in configs:
        table.add_row(
            saved.name,
            saved.platform,
            "[green]✓[/green]" if saved.is_default else "",
            saved.updated_at.strftime("%Y-%m-%d %H:%M"),
            saved.last_deploy_at.strftime("%Y-%m-%d %H:%M") if saved.last_deploy_at else "never",
        )

    console.print(table)


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    import json

    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=title, border_style="blue"))
    else:
        console.print(syntax)


def format_yaml(data: Any, title: Optional[str] = None) -> None:
    """Format and display YAML data with syntax highlighting"""
    import yaml

    yaml_str = yaml.dump(data, default_flow_style=False, sort_keys=False)
    syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=title, border_style="blue"))
    else:
        console.print(syntax)


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
