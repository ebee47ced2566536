"""Status refresh command implementations."""

import logging
import threading
from datetime import time
from typing import Optional

import typer
from rich.console import Console

from rtotrack.cli.commands.records import parse_as_of
from rtotrack.cli.session import cli_errors, open_context
from rtotrack.cli.ui import info_panel, refresh_summary_panel
from rtotrack.core.refresh import StatusRefreshJob
from rtotrack.core.scheduler import DailyScheduler

logger = logging.getLogger(__name__)
console = Console()


def parse_time_of_day(value: str) -> time:
    """Parse ``HH:MM`` into a time."""
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        raise typer.BadParameter(f"Expected HH:MM, got '{value}'", param_hint="--at")


def run_refresh(as_of: Optional[str] = None, kinds: Optional[list[str]] = None) -> None:
    """Recompute statuses once and report what changed."""
    with open_context() as ctx, cli_errors():
        names = [ctx.config.policy_for(k).name for k in kinds] if kinds else None
        reference = parse_as_of(as_of)
        job = StatusRefreshJob(ctx.database, ctx.config)
        with console.status("[bold blue]Refreshing statuses...", spinner="dots"):
            summary = job.run(reference_date=reference, kinds=names)

    console.print()
    console.print(refresh_summary_panel(summary))


def run_watch(at: Optional[str] = None) -> None:
    """Refresh now, then every day at the configured time until interrupted."""
    with open_context() as ctx:
        run_at = parse_time_of_day(at) if at else ctx.config.refresh_time
        job = StatusRefreshJob(ctx.database, ctx.config)
        scheduler = DailyScheduler(job.run, at=run_at)
        stop = threading.Event()

        console.print()
        console.print(
            info_panel(
                f"Refreshing statuses daily at {run_at:%H:%M}.\n[dim]Press Ctrl+C to stop.[/dim]",
                title="Status Refresh",
            )
        )
        logger.info("Starting refresh scheduler at %s", run_at.isoformat(timespec="minutes"))

        try:
            scheduler.run_forever(stop)
        except KeyboardInterrupt:
            stop.set()
            console.print()
            console.print("[dim]  Stopped.[/dim]")

    console.print(f"[dim]  {scheduler.runs} run(s), {scheduler.failures} failed.[/dim]")
