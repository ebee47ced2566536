"""Rich console UI helpers."""

from datetime import date
from decimal import Decimal
from typing import Optional

from rich.panel import Panel
from rich.table import Table

from rtotrack.kinds import KindPolicy
from rtotrack.models import FeeItem, RecordStatistics, RefreshSummary, StatusType, TimeBoundedRecord

STATUS_STYLES = {
    StatusType.ACTIVE: ("green", "✓"),
    StatusType.EXPIRING_SOON: ("yellow", "⚠"),
    StatusType.EXPIRED: ("red", "✗"),
}


def success_panel(message: str) -> Panel:
    """Create a success message panel."""
    return Panel(
        f"[green]✓[/green] {message}",
        border_style="green",
        padding=(0, 1),
    )


def error_panel(message: str, details: str | None = None) -> Panel:
    """Create an error message panel."""
    content = f"[red]✗[/red] {message}"
    if details:
        content += f"\n\n[dim]{details}[/dim]"
    return Panel(
        content,
        title="Error",
        border_style="red",
        padding=(0, 1),
    )


def warning_panel(message: str) -> Panel:
    """Create a warning message panel."""
    return Panel(
        f"[yellow]⚠[/yellow] {message}",
        border_style="yellow",
        padding=(0, 1),
    )


def info_panel(message: str, title: str | None = None) -> Panel:
    """Create an info message panel."""
    return Panel(
        message,
        title=title,
        border_style="blue",
        padding=(1, 2),
    )


def format_amount(amount: Decimal) -> str:
    """Format rupees with two decimals and thousands separators."""
    return f"₹{amount:,.2f}"


def format_phone(digits: str) -> str:
    """Format a 10-digit mobile number as 5+5 digits."""
    if len(digits) == 10 and digits.isdigit():
        return f"{digits[:5]} {digits[5:]}"
    return digits


def status_markup(record: TimeBoundedRecord) -> str:
    """Coloured status label; renewed records show as dim."""
    if record.is_renewed:
        return "[dim]Renewed[/dim]"
    color, icon = STATUS_STYLES.get(record.status, ("white", "?"))
    return f"[{color}]{icon} {record.status_display}[/{color}]"


def create_record_table(
    records: list[TimeBoundedRecord],
    title: Optional[str] = None,
) -> Table:
    """Create a table listing records."""
    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Vehicle", style="bold")
    table.add_column("Valid From")
    table.add_column("Valid To")
    table.add_column("Status")
    table.add_column("Total", justify="right")
    table.add_column("Balance", justify="right")

    for record in records:
        balance = format_amount(record.balance)
        if record.has_pending_payment:
            balance = f"[yellow]{balance}[/yellow]"
        table.add_row(
            record.id,
            record.owner_identifier,
            record.valid_from,
            record.valid_to,
            status_markup(record),
            format_amount(record.total_fee),
            balance,
        )
    return table


def create_fee_table(items: list[FeeItem]) -> Table:
    """Create a table displaying a fee breakup."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Description", style="white")
    table.add_column("Amount", style="white", justify="right")

    for item in items:
        table.add_row(item.description, format_amount(item.amount))

    return table


def record_panel(
    record: TimeBoundedRecord,
    label: str,
    reference_date: Optional[date] = None,
) -> Panel:
    """Detailed view of one record."""
    color = "dim" if record.is_renewed else STATUS_STYLES.get(record.status, ("white", ""))[0]
    lines = [
        f"[bold]{label}[/bold]",
        f"Vehicle:    {record.owner_identifier}",
        "",
        f"Status:     {status_markup(record)}",
        f"Valid:      {record.valid_from} to {record.valid_to}",
    ]

    days = record.days_until_expiry(reference_date)
    if days is not None and not record.is_renewed:
        if days > 0:
            lines.append(f"Days left:  {days}")
        elif days == 0:
            lines.append("Days left:  [red]TODAY[/red]")
        else:
            lines.append(f"Overdue:    [red]{abs(days)} days[/red]")

    lines += [
        "",
        f"Total fee:  {format_amount(record.total_fee)}",
        f"Paid:       {format_amount(record.paid)}",
        f"Balance:    {format_amount(record.balance)}",
    ]
    if record.holder_name:
        lines.append(f"Holder:     {record.holder_name}")
    if record.mobile_number:
        lines.append(f"Mobile:     {format_phone(record.mobile_number)}")
    if record.reference_number:
        lines.append(f"Reference:  {record.reference_number}")
    lines.append(f"\n[dim]{record.id} · created {record.created_at:%d-%m-%Y %H:%M}[/dim]")

    return Panel("\n".join(lines), title="Record", border_style=color, padding=(1, 2))


def create_stats_table(stats: list[RecordStatistics]) -> Table:
    """Create a table of per-kind statistics."""
    table = Table(title="Record Statistics")
    table.add_column("Kind", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Active", justify="right", style="green")
    table.add_column("Expiring Soon", justify="right", style="yellow")
    table.add_column("Expired", justify="right", style="red")
    table.add_column("Pending", justify="right")
    table.add_column("Pending Amount", justify="right")

    for s in stats:
        table.add_row(
            s.kind,
            str(s.total),
            str(s.active),
            str(s.expiring_soon),
            str(s.expired),
            str(s.pending_payment_count),
            format_amount(s.pending_payment_amount),
        )
    return table


def create_kinds_table(policies: list[KindPolicy]) -> Table:
    """Create a table of record kinds and their windows."""
    table = Table(title="Record Kinds")
    table.add_column("Kind", style="bold")
    table.add_column("Label")
    table.add_column("Expiring Soon", justify="right")
    table.add_column("Refresh Window", justify="right")
    table.add_column("Term", justify="right")

    for p in policies:
        table.add_row(
            p.name,
            p.label,
            f"{p.expiring_soon_days} days",
            f"{p.refresh_window_days} days",
            f"{p.term_years} yr" if p.term_years else "-",
        )
    return table


def refresh_summary_panel(summary: RefreshSummary) -> Panel:
    """Summary of a status refresh run."""
    content = (
        f"Scanned:    {summary.total_scanned}\n"
        f"Updated:    {summary.updated_count}\n"
        f"Unchanged:  {summary.skipped_count}"
    )
    if summary.unparseable_count:
        content += f"\n[yellow]Unreadable dates: {summary.unparseable_count}[/yellow]"
    if summary.by_kind:
        per_kind = ", ".join(f"{k}: {v}" for k, v in sorted(summary.by_kind.items()))
        content += f"\n\n[dim]{per_kind}[/dim]"
    return Panel(content, title="Status Refresh", border_style="blue", padding=(1, 2))
