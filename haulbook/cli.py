"""haulbook CLI - record loads and expenses, view profit and settlement figures."""

import datetime as dt
import json
from decimal import Decimal
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from haulbook import __version__
from haulbook.core.config import get_config
from haulbook.core.errors import HaulbookError
from haulbook.core.logging import configure_logging
from haulbook.data.models.expense import ExpenseCategory
from haulbook.data.models.period import PeriodKind
from haulbook.data.store import RecordStore
from haulbook.engine.dashboard import HistoryFilter
from haulbook.engine.pay import calculate_pay, effective_rate
from haulbook.engine.profit_loss import ProfitLossReport
from haulbook.tracker import Tracker

DATE = click.DateTime(formats=["%Y-%m-%d"])
NAMED_PERIODS = [kind.value for kind in PeriodKind if kind is not PeriodKind.CUSTOM]


def format_money(value: Decimal) -> str:
    """Two-decimal USD."""
    return f"${value:,.2f}"


def format_rate(value: Decimal) -> str:
    """Three-decimal per-mile rate."""
    return f"${value:.3f}"


def _validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"])
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


def _tracker(ctx: click.Context) -> Tracker:
    return ctx.obj["tracker"]


def _now(ctx: click.Context) -> dt.datetime:
    return ctx.obj["now"] or dt.datetime.now()


@click.group()
@click.version_option(version=__version__, prog_name="haulbook")
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Record file (default: HAULBOOK_DATA_FILE or ~/.haulbook/records.json)",
)
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]),
    help="Evaluate time windows as of this instant instead of now.",
)
@click.option("--log-level", default=None, help="Log level (default: HAULBOOK_LOG_LEVEL)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines.")
@click.pass_context
def cli(
    ctx: click.Context,
    data_file: Optional[Path],
    as_of: Optional[dt.datetime],
    log_level: Optional[str],
    json_logs: bool,
) -> None:
    """haulbook - owner-operator load, expense and profit tracking.

    Loads are paid by mileage bracket; settlements run Wednesday through
    Tuesday; monthly incentive tiers unlock at 4,000, 6,000 and 8,000 miles.
    """
    config = get_config()
    configure_logging(log_level or config.env.log_level, json_output=json_logs)
    store = RecordStore(data_file) if data_file else None
    ctx.obj = {"tracker": Tracker(store=store, config_manager=config), "now": as_of}


@cli.command()
@click.argument("miles", type=click.IntRange(min=0))
def pay(miles: int) -> None:
    """Preview pay for a trip of MILES."""
    click.echo(f"Pay: {format_money(calculate_pay(miles))}")
    click.echo(f"Rate: {format_rate(effective_rate(miles))}/mile")


# -- loads ---------------------------------------------------------------


@cli.group()
def load() -> None:
    """Add, edit and delete loads."""


@load.command("add")
@click.option("--date", "load_date", type=DATE, default=None, help="Load date (default: today)")
@click.option("--miles", type=int, required=True, help="Trip miles")
@click.option("--number", "load_number", default="", help="Load or dispatch number")
@click.option("--origin", default="", help="Starting location")
@click.option("--destination", default="", help="Ending location")
@click.option("--notes", default="", help="Additional details")
@click.pass_context
def load_add(
    ctx: click.Context,
    load_date: Optional[dt.datetime],
    miles: int,
    load_number: str,
    origin: str,
    destination: str,
    notes: str,
) -> None:
    """Record a load. Revenue is calculated from miles."""
    day = load_date.date() if load_date else _now(ctx).date()
    try:
        added = _tracker(ctx).record_load(
            date=day,
            miles=miles,
            load_number=load_number,
            origin=origin,
            destination=destination,
            notes=notes,
        )
    except ValidationError as e:
        raise click.BadParameter(_validation_message(e)) from e
    click.echo(
        f"Load {added.id} added: {added.miles} miles, {format_money(added.revenue)} "
        f"({format_rate(added.rate_per_mile)}/mile)"
    )


@load.command("edit")
@click.argument("load_id", type=int)
@click.option("--date", "load_date", type=DATE, default=None)
@click.option("--miles", type=int, default=None)
@click.option("--number", "load_number", default=None)
@click.option("--origin", default=None)
@click.option("--destination", default=None)
@click.option("--notes", default=None)
@click.pass_context
def load_edit(
    ctx: click.Context,
    load_id: int,
    load_date: Optional[dt.datetime],
    miles: Optional[int],
    load_number: Optional[str],
    origin: Optional[str],
    destination: Optional[str],
    notes: Optional[str],
) -> None:
    """Edit load LOAD_ID. Changing miles re-prices the load."""
    changes = {
        "date": load_date.date() if load_date else None,
        "miles": miles,
        "load_number": load_number,
        "origin": origin,
        "destination": destination,
        "notes": notes,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    try:
        updated = _tracker(ctx).edit_load(load_id, **changes)
    except ValidationError as e:
        raise click.BadParameter(_validation_message(e)) from e
    except HaulbookError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Load {updated.id} saved: {updated.miles} miles, {format_money(updated.revenue)}")


@load.command("rm")
@click.argument("load_id", type=int)
@click.confirmation_option(prompt="Are you sure you want to delete this load?")
@click.pass_context
def load_rm(ctx: click.Context, load_id: int) -> None:
    """Delete load LOAD_ID."""
    try:
        _tracker(ctx).remove_load(load_id)
    except HaulbookError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Load {load_id} deleted")


# -- expenses ------------------------------------------------------------


@cli.group()
def expense() -> None:
    """Add, edit and delete expenses."""


@expense.command("add")
@click.option("--date", "expense_date", type=DATE, default=None, help="Expense date (default: today)")
@click.option(
    "--category",
    type=click.Choice([category.value for category in ExpenseCategory]),
    required=True,
)
@click.option("--amount", type=str, required=True, help="Amount in USD")
@click.option("--miles", type=int, default=None, help="Miles, for per-mile expenses")
@click.option("--notes", default="", help="Description")
@click.pass_context
def expense_add(
    ctx: click.Context,
    expense_date: Optional[dt.datetime],
    category: str,
    amount: str,
    miles: Optional[int],
    notes: str,
) -> None:
    """Record an expense."""
    day = expense_date.date() if expense_date else _now(ctx).date()
    try:
        added = _tracker(ctx).record_expense(
            date=day, category=category, amount=amount, miles=miles, notes=notes
        )
    except ValidationError as e:
        raise click.BadParameter(_validation_message(e)) from e
    click.echo(
        f"Expense {added.id} added: {added.category.label} {format_money(added.amount)}"
    )


@expense.command("edit")
@click.argument("expense_id", type=int)
@click.option("--date", "expense_date", type=DATE, default=None)
@click.option("--category", type=click.Choice([category.value for category in ExpenseCategory]))
@click.option("--amount", type=str, default=None)
@click.option("--miles", type=int, default=None)
@click.option("--notes", default=None)
@click.pass_context
def expense_edit(
    ctx: click.Context,
    expense_id: int,
    expense_date: Optional[dt.datetime],
    category: Optional[str],
    amount: Optional[str],
    miles: Optional[int],
    notes: Optional[str],
) -> None:
    """Edit expense EXPENSE_ID."""
    changes = {
        "date": expense_date.date() if expense_date else None,
        "category": category,
        "amount": amount,
        "miles": miles,
        "notes": notes,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    try:
        updated = _tracker(ctx).edit_expense(expense_id, **changes)
    except ValidationError as e:
        raise click.BadParameter(_validation_message(e)) from e
    except HaulbookError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Expense {updated.id} saved: {updated.category.label} {format_money(updated.amount)}")


@expense.command("rm")
@click.argument("expense_id", type=int)
@click.confirmation_option(prompt="Are you sure you want to delete this expense?")
@click.pass_context
def expense_rm(ctx: click.Context, expense_id: int) -> None:
    """Delete expense EXPENSE_ID."""
    try:
        _tracker(ctx).remove_expense(expense_id)
    except HaulbookError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Expense {expense_id} deleted")


# -- reports -------------------------------------------------------------


def _render_report(report: ProfitLossReport) -> None:
    rows = [
        ("Load Revenue", format_money(report.load_revenue)),
        ("Incentive Pay", format_money(report.incentive_pay)),
        ("Total Revenue", format_money(report.total_revenue)),
        ("Total Miles", f"{report.total_miles:,}"),
        ("Variable Costs", format_money(report.variable_costs)),
        ("Gross Profit", format_money(report.gross_profit)),
        ("Fixed Costs", format_money(report.fixed_costs)),
        ("Truck Payment", format_money(report.truck_payment)),
        ("Manual Expenses", format_money(report.manual_expenses)),
        ("Net Profit", format_money(report.net_profit)),
        ("Profit/Mile", format_rate(report.profit_per_mile)),
        ("Profit Margin", f"{report.profit_margin_pct:.1f}%"),
        ("Revenue/Mile", format_rate(report.revenue_per_mile)),
        ("Cost/Mile", format_rate(report.cost_per_mile)),
    ]
    click.echo(report.period.title)
    click.echo("=" * 40)
    for label, value in rows:
        click.echo(f"{label:<20}{value:>20}")


@cli.command()
@click.option("--period", type=click.Choice(NAMED_PERIODS), default=PeriodKind.CURRENT_MONTH.value)
@click.option("--from", "start", type=DATE, default=None, help="Custom range start")
@click.option(
    "--to",
    "end",
    type=DATE,
    default=None,
    help="Custom range end (inclusive for records; fixed costs are charged for TO minus FROM days)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def pnl(
    ctx: click.Context,
    period: str,
    start: Optional[dt.datetime],
    end: Optional[dt.datetime],
    as_json: bool,
) -> None:
    """Profit and loss for a period or a --from/--to date range."""
    tracker = _tracker(ctx)
    now = _now(ctx)
    if start or end:
        if not (start and end):
            raise click.UsageError("--from and --to must be given together")
        try:
            report = tracker.profit_and_loss_for_range(start.date(), end.date(), now=now)
        except HaulbookError as e:
            raise click.ClickException(str(e)) from e
    else:
        report = tracker.profit_and_loss(period, now=now)

    if as_json:
        click.echo(json.dumps(report.model_dump(mode="json"), indent=2))
    else:
        _render_report(report)


@cli.command()
@click.option("--lease/--no-lease", default=None, help="Include the weekly truck payment.")
@click.pass_context
def week(ctx: click.Context, lease: Optional[bool]) -> None:
    """Current settlement week: gauge, prorated costs and pay cycle preview."""
    tracker = _tracker(ctx)
    now = _now(ctx)
    gauge = tracker.weekly(include_lease=lease, now=now)
    preview = tracker.pay_cycles(now=now)

    click.echo(f"Settlement {gauge.cycle}")
    click.echo(f"  Revenue:        {format_money(gauge.revenue)}")
    click.echo(
        f"  Fixed Costs:    {format_money(gauge.fixed_costs.prorated)} of "
        f"{format_money(gauge.fixed_costs.full)} ({gauge.fixed_costs.progress * 100:.0f}% of cycle)"
    )
    click.echo(f"  Total Costs:    {format_money(gauge.total_costs)}")
    click.echo(f"  Profit:         {format_money(gauge.profit)}")
    click.echo(f"  Gauge:          {gauge.gauge_value:.0f}/100")
    click.echo()
    for label, totals in (("This cycle", preview.current), ("Next cycle", preview.next)):
        click.echo(
            f"{label} ({totals.cycle}): {format_money(totals.revenue)} revenue, "
            f"{totals.miles:,} miles, {format_money(totals.variable_costs)} variable, "
            f"{format_money(totals.profit)} profit"
        )


@cli.command()
@click.pass_context
def incentive(ctx: click.Context) -> None:
    """Month-to-date incentive tier."""
    status = _tracker(ctx).incentive(now=_now(ctx))
    click.echo(f"Month Miles:        {status.month_to_date_miles:,}")
    click.echo(f"Incentive Rate:     ${status.rate:.2f}")
    click.echo(f"Miles to Next Tier: {status.miles_to_next_tier:,}")
    click.echo(f"Incentive Pay:      {format_money(status.total_incentive_pay)}")


@cli.command()
@click.option("--lease/--no-lease", default=None, help="Include the weekly truck payment.")
@click.pass_context
def summary(ctx: click.Context, lease: Optional[bool]) -> None:
    """All-time totals."""
    totals = _tracker(ctx).summary(include_lease=lease)
    click.echo(f"Total Revenue:   {format_money(totals.total_revenue)}")
    click.echo(f"Total Costs:     {format_money(totals.total_costs)}")
    click.echo(f"Net Profit:      {format_money(totals.net_profit)}")
    click.echo(f"Total Miles:     {totals.total_miles:,}")
    click.echo(f"Total Loads:     {totals.total_loads}")
    click.echo(f"Avg Cost/Mile:   {format_rate(totals.avg_cost_per_mile)}")
    click.echo(f"Avg Profit/Mile: {format_rate(totals.avg_profit_per_mile)}")


@cli.command()
@click.option(
    "--type",
    "record_filter",
    type=click.Choice([item.value for item in HistoryFilter]),
    default=HistoryFilter.ALL.value,
)
@click.pass_context
def history(ctx: click.Context, record_filter: str) -> None:
    """List records, newest first."""
    entries = _tracker(ctx).history(record_filter)
    if not entries:
        click.echo("No records found. Add some loads and expenses!")
        return

    for entry in entries:
        record = entry.record
        if entry.is_load:
            number = f" #{record.load_number}" if record.load_number else ""
            click.echo(
                f"{record.date}  Load{number} [{record.id}]  {record.miles} mi  "
                f"{format_money(record.revenue)}  rev/mi {format_rate(entry.revenue_per_mile)}  "
                f"profit/mi {format_rate(entry.profit_per_mile)}"
            )
            if record.route:
                click.echo(f"    Route: {record.route}")
        else:
            line = (
                f"{record.date}  Expense [{record.id}]  {record.category.label}  "
                f"{format_money(record.amount)}"
            )
            if record.miles:
                line += f"  {record.miles} mi  {format_rate(entry.cost_per_mile)}/mi"
            click.echo(line)
        if record.notes:
            click.echo(f"    Notes: {record.notes}")


# -- data ----------------------------------------------------------------


@cli.command("export")
@click.argument(
    "destination", type=click.Path(path_type=Path), default=Path("."), required=False
)
@click.pass_context
def export_cmd(ctx: click.Context, destination: Path) -> None:
    """Back up all records to DESTINATION (file or directory)."""
    written = _tracker(ctx).store.export(destination, _now(ctx))
    click.echo(f"Exported to {written}")


@cli.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.confirmation_option(prompt="This will replace all existing data. Continue?")
@click.pass_context
def import_cmd(ctx: click.Context, source: Path) -> None:
    """Replace all records with an export file."""
    try:
        records = _tracker(ctx).store.import_file(source)
    except HaulbookError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Imported {len(records.loads)} loads and {len(records.expenses)} expenses")


@cli.command()
@click.confirmation_option(prompt="Delete ALL loads and expenses? This cannot be undone.")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete every load and expense."""
    _tracker(ctx).store.clear()
    click.echo("All data cleared")


@cli.command("backup-check")
@click.option("--snooze", is_flag=True, help="Remind again in 7 days.")
@click.pass_context
def backup_check(ctx: click.Context, snooze: bool) -> None:
    """Check whether a backup export is due."""
    store = _tracker(ctx).store
    now = _now(ctx)
    if snooze:
        store.snooze_backup_reminder(now)
        click.echo("Backup reminder snoozed for 7 days")
        return
    if store.needs_backup_reminder(now):
        click.echo("It's been 30+ days since your last export. Run 'haulbook export' to back up.")
    else:
        click.echo("Backup is up to date")


def main(argv: Optional[list[str]] = None) -> None:
    """Console script entry point."""
    cli.main(args=argv, prog_name="haulbook")


if __name__ == "__main__":
    main()
