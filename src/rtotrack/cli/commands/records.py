"""Record management command implementations."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Confirm

from rtotrack.cli.session import cli_errors, open_context
from rtotrack.cli.ui import (
    create_fee_table,
    create_kinds_table,
    create_record_table,
    create_stats_table,
    info_panel,
    record_panel,
    success_panel,
    warning_panel,
)
from rtotrack.core.dates import default_valid_to, expand_short_year, parse_date
from rtotrack.core.records import RecordService
from rtotrack.core.renewal import RenewalChain
from rtotrack.kinds import get_kind, list_kinds
from rtotrack.models import FeeItem, RecordCreate, RecordUpdate, StatusType

logger = logging.getLogger(__name__)
console = Console()


def parse_as_of(value: Optional[str]) -> Optional[date]:
    """Parse an --as-of option, accepting two-digit years."""
    if value is None:
        return None
    return parse_date(expand_short_year(value), "as_of")


def parse_fee_items(items: Optional[list[str]]) -> list[FeeItem]:
    """Parse ``description=amount`` pairs into fee items."""
    parsed = []
    for item in items or []:
        description, sep, amount = item.rpartition("=")
        if not sep or not description.strip():
            raise typer.BadParameter(
                f"Expected 'description=amount', got '{item}'", param_hint="--item"
            )
        try:
            parsed.append(FeeItem(description=description.strip(), amount=Decimal(amount.strip())))
        except InvalidOperation:
            raise typer.BadParameter(f"Invalid amount in '{item}'", param_hint="--item")
    return parsed


def _derive_balance(total_fee: Optional[str], paid: Optional[str]) -> Optional[str]:
    """total_fee - paid when both are given and numeric."""
    if total_fee is None or paid is None:
        return None
    try:
        return str(Decimal(total_fee) - Decimal(paid))
    except InvalidOperation:
        return None


def _expand(value: Optional[str]) -> Optional[str]:
    return expand_short_year(value) if value is not None else None


def run_kinds() -> None:
    """List the record kinds and their windows."""
    with open_context() as ctx:
        policies = [ctx.config.policy_for(name) for name in list_kinds()]
    console.print()
    console.print(create_kinds_table(policies))


def run_add(
    kind: str,
    vehicle: str,
    valid_from: str,
    valid_to: Optional[str] = None,
    total_fee: Optional[str] = None,
    paid: Optional[str] = None,
    balance: Optional[str] = None,
    holder: Optional[str] = None,
    mobile: Optional[str] = None,
    reference: Optional[str] = None,
    items: Optional[list[str]] = None,
    as_of: Optional[str] = None,
) -> None:
    """Create a record, retiring the vehicle's previous one of that kind."""
    fee_items = parse_fee_items(items)

    with open_context() as ctx, cli_errors():
        policy = ctx.config.policy_for(kind)
        valid_from = expand_short_year(valid_from)
        if valid_to is None:
            if policy.term_years is None:
                raise typer.BadParameter(
                    f"{policy.label} has no default term; pass --to.", param_hint="--to"
                )
            valid_to = default_valid_to(valid_from, policy.term_years)
            console.print(f"[dim]  Valid to defaulted to {valid_to}[/dim]")
        else:
            valid_to = expand_short_year(valid_to)

        if balance is None:
            balance = _derive_balance(total_fee, paid)

        fields = RecordCreate(
            valid_from=valid_from,
            valid_to=valid_to,
            total_fee=total_fee,
            paid=paid,
            balance=balance,
            holder_name=holder,
            mobile_number=mobile,
            reference_number=reference,
            fee_breakup=fee_items,
        )
        record = RenewalChain(ctx.database, ctx.config).renew(
            policy.name, vehicle, fields, reference_date=parse_as_of(as_of)
        )

    console.print()
    console.print(
        success_panel(f"{policy.label} for {record.owner_identifier} saved ({record.status_display}).")
    )
    console.print(f"[dim]  ID: {record.id}[/dim]")
    if record.has_pending_payment:
        console.print(f"[yellow]  Balance pending: ₹{record.balance:,.2f}[/yellow]")


def run_show(record_id: str, as_of: Optional[str] = None) -> None:
    """Show one record in detail."""
    with open_context() as ctx, cli_errors():
        record = RecordService(ctx.database, ctx.config).get(record_id)
        label = get_kind(record.kind).label
        reference = parse_as_of(as_of)

    console.print()
    console.print(record_panel(record, label, reference))
    if record.fee_breakup:
        console.print()
        console.print("[bold]  Fee breakup[/bold]")
        console.print(create_fee_table(record.fee_breakup))


def run_update(
    record_id: str,
    valid_from: Optional[str] = None,
    valid_to: Optional[str] = None,
    total_fee: Optional[str] = None,
    paid: Optional[str] = None,
    holder: Optional[str] = None,
    mobile: Optional[str] = None,
    reference: Optional[str] = None,
    items: Optional[list[str]] = None,
    as_of: Optional[str] = None,
) -> None:
    """Edit a record's dates, fees or details."""
    values = {
        "valid_from": _expand(valid_from),
        "valid_to": _expand(valid_to),
        "total_fee": total_fee,
        "paid": paid,
        "holder_name": holder,
        "mobile_number": mobile,
        "reference_number": reference,
    }
    if items is not None:
        values["fee_breakup"] = parse_fee_items(items)

    with open_context() as ctx, cli_errors():
        changes = RecordUpdate(**{k: v for k, v in values.items() if v is not None})
        if changes.is_empty:
            console.print()
            console.print(warning_panel("Nothing to update."))
            return
        record = RecordService(ctx.database, ctx.config).update(
            record_id, changes, reference_date=parse_as_of(as_of)
        )

    console.print()
    console.print(success_panel(f"Record {record.id} updated ({record.status_display})."))


def run_pay(record_id: str) -> None:
    """Mark a record's outstanding balance as paid."""
    with open_context() as ctx, cli_errors():
        record = RecordService(ctx.database, ctx.config).mark_as_paid(record_id)

    console.print()
    console.print(
        success_panel(
            f"Payment recorded for {record.owner_identifier}: ₹{record.paid:,.2f} paid in full."
        )
    )


def run_delete(record_id: str, yes: bool = False) -> None:
    """Delete a record after confirmation."""
    with open_context() as ctx, cli_errors():
        service = RecordService(ctx.database, ctx.config)
        record = service.get(record_id)

        if not yes:
            console.print()
            if not Confirm.ask(
                f"  Delete {get_kind(record.kind).label.lower()} record"
                f" [bold]{record.owner_identifier}[/bold] ({record.valid_from} to {record.valid_to})?",
                default=False,
            ):
                console.print("[dim]  Cancelled.[/dim]")
                return

        service.delete(record_id)

    console.print()
    console.print(success_panel(f"Record {record_id} deleted."))
    if record.is_current:
        console.print(
            f"[dim]  {record.owner_identifier} has no current {record.kind} record until it is renewed.[/dim]"
        )


def run_history(kind: str, vehicle: str) -> None:
    """Show every record in a vehicle's chain, oldest first."""
    with open_context() as ctx, cli_errors():
        policy = ctx.config.policy_for(kind)
        service = RecordService(ctx.database, ctx.config)
        records = service.history(policy.name, vehicle)
        head = service.head(policy.name, vehicle)

    console.print()
    if not records:
        console.print(info_panel(f"No {policy.label.lower()} records for {vehicle.strip().upper()}."))
        return
    console.print(create_record_table(records, title=f"{policy.label} history"))
    if head is None:
        console.print(warning_panel("This chain has no current record. Renew to start a new one."))
    else:
        console.print(f"[dim]Current record: {head.id}[/dim]")


def run_list(kind: str, status: Optional[str] = None, pending: bool = False) -> None:
    """List current records of a kind."""
    with open_context() as ctx, cli_errors():
        policy = ctx.config.policy_for(kind)
        service = RecordService(ctx.database, ctx.config)
        if pending:
            records = service.pending_payments(policy.name)
            title = f"{policy.label}: pending payments"
        else:
            wanted = _parse_status(status)
            records = service.current(policy.name, wanted)
            title = policy.label if wanted is None else f"{policy.label}: {wanted.value.replace('_', ' ')}"

    console.print()
    if not records:
        console.print(info_panel("No matching records."))
        return
    console.print(create_record_table(records, title=title))
    console.print(f"[dim]  {len(records)} record(s).[/dim]")


def _parse_status(value: Optional[str]) -> Optional[StatusType]:
    if value is None:
        return None
    try:
        return StatusType(value.strip().lower().replace("-", "_"))
    except ValueError:
        choices = ", ".join(s.value for s in StatusType)
        raise typer.BadParameter(f"Expected one of: {choices}", param_hint="--status")


def run_stats(kind: Optional[str] = None) -> None:
    """Show status counts and pending totals per kind."""
    with open_context() as ctx, cli_errors():
        names = [ctx.config.policy_for(kind).name] if kind else list_kinds()
        service = RecordService(ctx.database, ctx.config)
        stats = [service.statistics(name) for name in names]

    console.print()
    console.print(create_stats_table(stats))
