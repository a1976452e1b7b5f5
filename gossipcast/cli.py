"""Command-line entry point: run the broadcaster and inspect a running instance."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from gossipcast import __version__

console = Console()

DEFAULT_URL = "http://localhost:3000"

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@click.group()
@click.version_option(version=__version__)
def main():
    """gossipcast, the anonymous ephemeral message broadcaster.

    Accepted messages are shown one at a time to every connected client for
    a few seconds, then discarded.
    """


# ── Serve ────────────────────────────────────────────────────────────


@main.command()
@click.option("--host", default=None, help="Bind address (default: GOSSIPCAST_HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port (default: PORT or 3000)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP + WebSocket server."""
    import uvicorn
    from dotenv import load_dotenv

    from gossipcast.config import load_settings
    from gossipcast.logging_config import configure_logging

    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)

    host = host or settings.host
    port = port or settings.port
    console.print(f"\n[bold blue]gossipcast[/] {__version__} listening on http://{host}:{port}\n")

    # The web backend is not part of the wheel; it is served from the checkout.
    uvicorn.run(
        "web.backend.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
        app_dir=str(PROJECT_ROOT),
    )


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("content")
@click.option("--policy", "-p", "policy_file", default=None, help="YAML content policy to use instead of the built-in one")
def check(content: str, policy_file: str | None):
    """Evaluate CONTENT against the content policy without submitting it."""
    from gossipcast.moderation.content_policy import default_content_policy, load_content_policy

    policy = load_content_policy(policy_file) if policy_file else default_content_policy()
    decision = policy.evaluate(content.strip())

    if decision.allowed:
        console.print(f"  [green]v[/] Allowed by policy [cyan]{policy.name}[/]")
        return

    console.print(f"  [red]x[/] Rejected by rule [cyan]{decision.rule}[/] ({decision.violation_type})")
    console.print(f"    {decision.reason}")
    sys.exit(1)


# ── Status ───────────────────────────────────────────────────────────


def _fetch(url: str) -> dict:
    import httpx

    try:
        response = httpx.get(url, timeout=5.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        console.print(f"[red]Request to {url} failed:[/] {e}")
        sys.exit(1)
    return response.json()


@main.command()
@click.option("--url", default=DEFAULT_URL, show_default=True, help="Server base URL")
def status(url: str):
    """Show a running server's live status."""
    data = _fetch(f"{url.rstrip('/')}/")

    current = data.get("currentGossip")
    now_showing = f"[bold]{escape(current['content'])}[/]" if current else "[dim](nothing on display)[/]"
    body = "\n".join(
        [
            f"Now showing:   {now_showing}",
            f"Queue length:  {data.get('queueLength', 0)}",
            f"Active users:  {data.get('activeUsers', 0)}",
            f"Reports:       {data.get('totalReports', 0)}",
            f"Banned:        {data.get('bannedUsersCount', 0)}",
        ]
    )
    console.print(Panel(body, title=data.get("message", "gossipcast")))


# ── Reports ──────────────────────────────────────────────────────────


@main.command()
@click.option("--url", default=DEFAULT_URL, show_default=True, help="Server base URL")
@click.option("--limit", "-n", default=50, show_default=True, help="Number of recent reports")
def reports(url: str, limit: int):
    """List the most recent reports on a running server."""
    data = _fetch(f"{url.rstrip('/')}/api/admin/reports?limit={limit}")
    entries = data.get("reports", [])

    if not entries:
        console.print("[yellow]No reports.[/]")
        return

    table = Table(
        title=(
            f"Reports ({data.get('totalCount', 0)} total, "
            f"{data.get('pendingCount', 0)} pending, "
            f"{data.get('bannedUsersCount', 0)} banned devices)"
        )
    )
    table.add_column("Reported", style="dim")
    table.add_column("Status", justify="center")
    table.add_column("Reason", style="cyan")
    table.add_column("Content")

    for entry in entries:
        status_label = "[yellow]pending[/]" if entry.get("status") == "pending" else "[green]reviewed[/]"
        table.add_row(
            entry.get("reportedAt", "")[:19],
            status_label,
            escape(entry.get("reason", "")),
            escape(entry.get("content", "")[:50]),
        )

    console.print(table)


if __name__ == "__main__":
    main()
