"""Main CLI application."""

from typing import Optional

import typer
from rich.console import Console

from rtotrack import __version__
from rtotrack.logging import setup_logging

app = typer.Typer(
    name="rtotrack",
    help="Track vehicle certificates, permits and their renewals.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

AS_OF_HELP = "Treat this date (DD-MM-YYYY) as today"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
    ),
) -> None:
    """rtotrack - RTO back-office record tracking."""
    if version:
        console.print(f"rtotrack v{__version__}")
        raise typer.Exit()
    setup_logging()


@app.command()
def kinds() -> None:
    """List record kinds and their expiry windows."""
    from rtotrack.cli.commands.records import run_kinds

    run_kinds()


@app.command()
def add(
    kind: str = typer.Argument(..., help="Record kind, e.g. fitness"),
    vehicle: str = typer.Argument(..., help="Vehicle number"),
    valid_from: str = typer.Option(..., "--from", help="Start date (DD-MM-YYYY)"),
    valid_to: Optional[str] = typer.Option(
        None, "--to", help="End date; defaults to one term after --from"
    ),
    total_fee: Optional[str] = typer.Option(None, "--fee", help="Total fee"),
    paid: Optional[str] = typer.Option(None, "--paid", help="Amount paid"),
    balance: Optional[str] = typer.Option(
        None, "--balance", help="Balance; defaults to fee minus paid"
    ),
    holder: Optional[str] = typer.Option(None, "--holder", help="Holder name"),
    mobile: Optional[str] = typer.Option(None, "--mobile", help="Mobile number"),
    reference: Optional[str] = typer.Option(None, "--ref", help="Certificate or policy number"),
    items: Optional[list[str]] = typer.Option(
        None, "--item", help="Fee line as 'description=amount' (repeatable)"
    ),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
) -> None:
    """Add a record. Any current record of the same kind for the vehicle is retired."""
    from rtotrack.cli.commands.records import run_add

    run_add(
        kind,
        vehicle,
        valid_from,
        valid_to=valid_to,
        total_fee=total_fee,
        paid=paid,
        balance=balance,
        holder=holder,
        mobile=mobile,
        reference=reference,
        items=items,
        as_of=as_of,
    )


app.command(name="renew", help="Alias for 'add'.")(add)


@app.command()
def show(
    record_id: str = typer.Argument(..., help="Record ID"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
) -> None:
    """Show a record in detail."""
    from rtotrack.cli.commands.records import run_show

    run_show(record_id, as_of=as_of)


@app.command()
def update(
    record_id: str = typer.Argument(..., help="Record ID"),
    valid_from: Optional[str] = typer.Option(None, "--from", help="New start date"),
    valid_to: Optional[str] = typer.Option(None, "--to", help="New end date"),
    total_fee: Optional[str] = typer.Option(None, "--fee", help="New total fee"),
    paid: Optional[str] = typer.Option(None, "--paid", help="New amount paid"),
    holder: Optional[str] = typer.Option(None, "--holder", help="Holder name"),
    mobile: Optional[str] = typer.Option(None, "--mobile", help="Mobile number"),
    reference: Optional[str] = typer.Option(None, "--ref", help="Certificate or policy number"),
    items: Optional[list[str]] = typer.Option(
        None, "--item", help="Replace fee breakup with 'description=amount' lines"
    ),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
) -> None:
    """Edit a record. The balance is recomputed from fee and paid."""
    from rtotrack.cli.commands.records import run_update

    run_update(
        record_id,
        valid_from=valid_from,
        valid_to=valid_to,
        total_fee=total_fee,
        paid=paid,
        holder=holder,
        mobile=mobile,
        reference=reference,
        items=items,
        as_of=as_of,
    )


@app.command()
def pay(record_id: str = typer.Argument(..., help="Record ID")) -> None:
    """Mark a record's outstanding balance as paid."""
    from rtotrack.cli.commands.records import run_pay

    run_pay(record_id)


@app.command()
def delete(
    record_id: str = typer.Argument(..., help="Record ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a record."""
    from rtotrack.cli.commands.records import run_delete

    run_delete(record_id, yes=yes)


@app.command()
def history(
    kind: str = typer.Argument(..., help="Record kind"),
    vehicle: str = typer.Argument(..., help="Vehicle number"),
) -> None:
    """Show every record for a vehicle, oldest first."""
    from rtotrack.cli.commands.records import run_history

    run_history(kind, vehicle)


@app.command(name="list")
def list_records(
    kind: str = typer.Argument(..., help="Record kind"),
    status: Optional[str] = typer.Option(
        None, "--status", help="active, expiring_soon or expired"
    ),
    pending: bool = typer.Option(False, "--pending", help="Only records with a balance owed"),
) -> None:
    """List current records of a kind."""
    from rtotrack.cli.commands.records import run_list

    run_list(kind, status=status, pending=pending)


@app.command()
def stats(
    kind: Optional[str] = typer.Argument(None, help="Record kind (default: all)"),
) -> None:
    """Show status counts and pending payments."""
    from rtotrack.cli.commands.records import run_stats

    run_stats(kind)


@app.command()
def refresh(
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    kind: Optional[list[str]] = typer.Option(
        None, "--kind", "-k", help="Only refresh this kind (repeatable)"
    ),
) -> None:
    """Recompute statuses for all records now."""
    from rtotrack.cli.commands.refresh import run_refresh

    run_refresh(as_of=as_of, kinds=kind)


@app.command()
def watch(
    at: Optional[str] = typer.Option(None, "--at", help="Daily run time (HH:MM)"),
) -> None:
    """Refresh statuses now and then daily until stopped."""
    from rtotrack.cli.commands.refresh import run_watch

    run_watch(at=at)


if __name__ == "__main__":
    app()
