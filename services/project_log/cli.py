#!/usr/bin/env python3
"""
Project Log CLI Tool
Part of the Project Log Service

This CLI tool triggers log generation and checks project status. It
communicates with the Project Log Service via HTTP API calls; the ``scan``
command runs the scanner locally instead.
"""

import asyncio
import json
import sys
from datetime import date, datetime
from typing import Dict, Any, Optional

import click
import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.progress import Progress, SpinnerColumn, TextColumn

from config.settings import Settings

# Initialize Rich console for beautiful output
console = Console()


class ProjectLogCLI:
    """CLI interface for the Project Log Service."""

    def __init__(self, base_url: Optional[str] = None):
        self.settings = Settings()
        self.base_url = base_url or f"http://localhost:{self.settings.service.port}"
        self.client = httpx.AsyncClient(timeout=float(self.settings.service.request_timeout))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.ConnectError:
            raise Exception("Could not connect to Project Log Service. Is it running?")

        if response.status_code == 200:
            return response.json()

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        raise Exception(f"API Error ({response.status_code}): {error_data.get('error', 'Unknown error')}")

    async def generate_logs(self, today: Optional[str] = None) -> Dict[str, Any]:
        """Ask the service to generate log entries."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Scanning projects...", total=None)
            payload = {"today": today} if today else {}
            result = await self._request("POST", "/api/auto-generate-log", json=payload)
            progress.update(task, completed=True)
            return result

    async def get_project_status(self) -> Dict[str, Any]:
        """Get today's per-project status."""
        return await self._request("GET", "/api/project-status")

    async def get_health(self) -> Dict[str, Any]:
        """Check service liveness."""
        return await self._request("GET", "/api/health")


def display_log_entries(result: Dict[str, Any]):
    """Display generated log entries."""
    logs = result.get("logs", [])

    if not logs:
        console.print(Panel("No commits found in the scan window.", title="📋 Project Log"))
        return

    console.print(f"\n[bold green]✅ Generated {result.get('count', len(logs))} log entries[/bold green]")

    for entry in logs:
        title = Text(entry.get("title", "N/A"), style="bold")
        body = "\n".join(entry.get("items", []))
        subtitle = f"{entry.get('date', 'N/A')} · {entry.get('datetime', 'N/A')}"
        console.print(Panel(body, title=title, subtitle=subtitle, border_style="blue"))


def display_project_status(status_data: Dict[str, Any]):
    """Display per-project status in a table format."""
    table = Table(
        title=f"📊 Project Status ({status_data.get('today', 'N/A')})",
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Project", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Changes", style="yellow")
    table.add_column("Commits", style="green", justify="right")
    table.add_column("Files", style="green", justify="right")

    for project_id, info in status_data.get("status", {}).items():
        table.add_row(
            project_id,
            info.get("name", "N/A"),
            "✅" if info.get("hasChanges") else "-",
            str(info.get("commits", 0)),
            str(info.get("files", 0)),
        )

    console.print(table)


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Project Log CLI - Generate project-log entries from recent git commits."""
    pass


@cli.command()
@click.option('--today', '-t', help='Last day of the scan window (YYYY-MM-DD, default: server date)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def generate(today: Optional[str], verbose: bool):
    """Generate log entries for projects with recent commits."""
    async def run():
        try:
            async with ProjectLogCLI() as cli_tool:
                result = await cli_tool.generate_logs(today)
                display_log_entries(result)

                if verbose:
                    console.print(f"\n[dim]Raw data: {json.dumps(result, indent=2, ensure_ascii=False)}[/dim]")

        except Exception as e:
            console.print(f"[red]❌ Error: {str(e)}[/red]")
            sys.exit(1)

    asyncio.run(run())


@cli.command()
def status():
    """Display today's change status for every project."""
    async def run():
        try:
            async with ProjectLogCLI() as cli_tool:
                status_data = await cli_tool.get_project_status()
                display_project_status(status_data)

        except Exception as e:
            console.print(f"[red]❌ Error: {str(e)}[/red]")
            sys.exit(1)

    asyncio.run(run())


@cli.command()
def health():
    """Check the status of the Project Log Service."""
    async def run():
        try:
            async with ProjectLogCLI() as cli_tool:
                health_data = await cli_tool.get_health()
                console.print("[green]✅ Project Log Service is running[/green]")
                console.print(f"[dim]Projects: {health_data.get('projects', 'unknown')}[/dim]")

        except Exception as e:
            console.print(f"[red]❌ Error: {str(e)}[/red]")
            sys.exit(1)

    asyncio.run(run())


@cli.command()
@click.option('--today', '-t', type=click.DateTime(formats=["%Y-%m-%d"]), help='Last day of the scan window')
def scan(today: Optional[datetime]):
    """Scan the configured projects locally, without the service."""
    from services.project_log.main import ProjectLogService

    target = today.date() if today else date.today()
    service = ProjectLogService()
    result = asyncio.run(service.project_status(target))
    display_project_status(result.model_dump(mode="json", by_alias=True))


if __name__ == "__main__":
    cli()
