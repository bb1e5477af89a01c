import typer
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from finance_dashboard.aggregation import ALL, MonthPeriod
from finance_dashboard.config.settings import DashboardSettings
from finance_dashboard.database.connection import DatabaseConfig, DatabaseManager
from finance_dashboard.domain.dates import NOT_AVAILABLE, format_date, normalize_date
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import NewTransaction, PublicNewTransaction, parse_amount
from finance_dashboard.logging_setup import configure_logging
from finance_dashboard.parsers.factory import ParserFactory
from finance_dashboard.repositories.sqlite_transaction_repository import (
    SQLiteSettingsRepository,
    SQLiteTransactionRepository,
)
from finance_dashboard.services.exceptions import AuthenticationError
from finance_dashboard.services.sample_data import sample_transactions
from finance_dashboard.services.transaction_service import TransactionService

app = typer.Typer(
    name="finance-dashboard",
    help="Track studio income and expenses",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    service: Optional[TransactionService] = None
    settings: Optional[DashboardSettings] = None


state = State()

SCOPES = {"all": ALL, "business": True, "personal": False}

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        envvar="FINANCE_DASHBOARD_DB",
        help="Path to the SQLite database",
    ),
):
    """
    Finance Dashboard - Record, confirm and summarize studio transactions.
    """
    configure_logging("DEBUG" if verbose else None)

    if state.settings is None:
        state.settings = DashboardSettings.from_config()

    if state.service is None:
        ParserFactory.load_parsers_from_config()
        db_manager = DatabaseManager(DatabaseConfig(db_path or state.settings.database_path))
        db_manager.initialize()
        state.service = TransactionService(
            SQLiteTransactionRepository(db_manager),
            SQLiteSettingsRepository(db_manager),
            tz=state.settings.tz,
        )
        state.service.ensure_pin(state.settings.default_pin)

    state.verbose = verbose


def _fail(error: Exception) -> None:
    if isinstance(error, AuthenticationError):
        console.print(f"[bold red]Access denied:[/bold red] {error}")
    else:
        console.print(f"[bold red]Error:[/bold red] {error}")
    if state.verbose:
        console.print_exception()
    raise typer.Exit(code=1)


def _period(month: Optional[int], year: Optional[int]) -> MonthPeriod:
    current = MonthPeriod.current(state.settings.tz)
    return MonthPeriod(year or current.year, month or current.month)


def _user_filter(user: str):
    if user.lower() == "all":
        return ALL
    if user.lower() == "none":
        return None
    return user


def _money(amount) -> str:
    return state.settings.format_amount(amount)


def _pin_option():
    return typer.Option(
        ...,
        "--pin", "-p",
        envvar="FINANCE_DASHBOARD_PIN",
        prompt=True,
        hide_input=True,
        help="Management PIN",
    )


def _month_option():
    return typer.Option(None, "--month", "-m", help="Month (1-12)", min=1, max=12)


def _year_option():
    return typer.Option(None, "--year", "-y", help="Year")


def _user_option():
    return typer.Option("all", "--user", "-u", help="User name, 'all', or 'none' for rows without a user")


def _scope_option():
    return typer.Option("all", "--scope", "-s", help="all, business or personal")


def _scope(scope: str):
    key = scope.lower()
    if key not in SCOPES:
        raise typer.BadParameter(f"Scope must be one of: {', '.join(SCOPES)}")
    return SCOPES[key]


@app.command(name="init-db")
def init_db(
    with_sample_data: bool = typer.Option(
        False,
        "--with-sample-data",
        help="Add demo transactions for this month and the previous one",
    ),
):
    """
    Create the database and store the default PIN.
    """
    try:
        if with_sample_data:
            saved = state.service.add_sample_data(sample_transactions(tz=state.settings.tz))
            console.print(f"[green]✓[/green] Added {len(saved)} sample transactions")
        console.print("[bold green]✓ Database ready[/bold green]")
    except Exception as e:
        _fail(e)


@app.command(name="summary")
def summary(
    month: Optional[int] = _month_option(),
    year: Optional[int] = _year_option(),
):
    """
    Show the public monthly summary.

    Examples:
        finance-dashboard summary
        finance-dashboard summary --month 3 --year 2024
    """
    try:
        result = state.service.get_public_summary(_period(month, year))

        net_color = "green" if result.net_balance >= 0 else "red"
        console.print(Panel(
            f"[bold {net_color}]Net Balance:[/bold {net_color}] {_money(result.net_balance)}\n"
            f"[green]Total Income (Confirmed + Pending):[/green] {_money(result.total_income)}\n"
            f"[red]Total Expenditure (Confirmed + Pending):[/red] {_money(result.total_expense)}",
            title=f"[bold]{result.period.label}[/bold]",
            border_style="cyan",
            padding=(1, 2),
        ))

        chart = Table(title="Income vs Expenditure", show_header=True)
        chart.add_column("", style="cyan")
        chart.add_column("Confirmed", justify="right", style="green")
        chart.add_column("Pending", justify="right", style="yellow")
        for row in result.chart_rows:
            chart.add_row(row["name"], _money(row["Confirmed"]), _money(row["Pending"]))
        console.print(chart)

    except Exception as e:
        _fail(e)


@app.command(name="add")
def add_public(
    category: str = typer.Argument(..., help="Category, e.g. 'Studio Income'"),
    amount: str = typer.Argument(..., help="Amount"),
    transaction_type: TransactionType = typer.Option(
        TransactionType.INCOME, "--type", "-t", help="income or expense",
    ),
    status: TransactionStatus = typer.Option(
        TransactionStatus.CONFIRMED, "--status", help="confirmed or pending",
    ),
    details: Optional[str] = typer.Option(None, "--details", "-d", help="Description"),
):
    """
    Add a business transaction from the public view.
    """
    try:
        new_id = state.service.add_public_transaction(PublicNewTransaction(
            category=category,
            amount=parse_amount(amount),
            type=transaction_type,
            status=status,
            details=details,
        ))
        console.print(f"[bold green]✓ Transaction added successfully![/bold green] [dim]{new_id}[/dim]")
    except Exception as e:
        _fail(e)


@app.command(name="transactions")
def list_transactions(
    pin: str = _pin_option(),
    month: Optional[int] = _month_option(),
    year: Optional[int] = _year_option(),
    user: str = _user_option(),
    scope: str = _scope_option(),
):
    """
    Show the management view: totals and the filtered transaction list.

    Examples:
        finance-dashboard transactions --pin 1234
        finance-dashboard transactions --pin 1234 --user Kelvin --scope personal
    """
    try:
        dashboard = state.service.get_management_dashboard(
            pin,
            _period(month, year),
            user=_user_filter(user),
            business=_scope(scope),
        )
        totals = dashboard.summary

        console.print(f"\n[bold cyan]Management Report: {dashboard.period.label}[/bold cyan]")
        console.print(Panel(
            f"[green]Confirmed Income:[/green]  {_money(totals.confirmed_income)}\n"
            f"[yellow]Pending Income:[/yellow]    {_money(totals.pending_income)}\n"
            f"[red]Confirmed Expense:[/red] {_money(totals.confirmed_expense)}\n"
            f"[orange3]Pending Expense:[/orange3]   {_money(totals.pending_expense)}",
            title="[bold]Summary[/bold]",
            border_style="cyan",
        ))

        if not dashboard.transactions:
            console.print(Panel(
                "[yellow]No transactions found for this month[/yellow]",
                title="Empty Report",
                border_style="yellow"
            ))
            return

        txn_table = Table(show_header=True, padding=(0, 1))
        txn_table.add_column("ID", style="dim")
        txn_table.add_column("Date", style="cyan")
        txn_table.add_column("Category", style="white")
        txn_table.add_column("Details", max_width=30)
        txn_table.add_column("Amount", justify="right")
        txn_table.add_column("Status", justify="center")
        txn_table.add_column("User/Business")
        txn_table.add_column("Due Date")

        tz = state.settings.tz
        for txn in dashboard.transactions:
            color = "green" if txn.type == TransactionType.INCOME else "red"
            status_style = "green" if txn.is_confirmed else "yellow"
            txn_table.add_row(
                txn.id,
                format_date(txn.date, tz=tz),
                txn.category,
                txn.details or "",
                f"[{color}]{_money(txn.amount)}[/{color}]",
                f"[{status_style}]{txn.status.value}[/{status_style}]",
                txn.owner,
                format_date(txn.due_date, placeholder=NOT_AVAILABLE, tz=tz),
            )

        console.print(txn_table)

        if dashboard.pending:
            console.print(f"\n[dim]{len(dashboard.pending)} pending - confirm with: finance-dashboard confirm <ID>[/dim]")

    except Exception as e:
        _fail(e)


@app.command(name="add-entry")
def add_entry(
    pin: str = _pin_option(),
    category: str = typer.Option(..., "--category", "-c", help="Category"),
    amount: str = typer.Option(..., "--amount", "-a", help="Amount"),
    transaction_type: TransactionType = typer.Option(
        TransactionType.INCOME, "--type", "-t", help="income or expense",
    ),
    status: TransactionStatus = typer.Option(
        TransactionStatus.CONFIRMED, "--status", help="confirmed or pending",
    ),
    on: Optional[str] = typer.Option(None, "--date", help="Transaction date (default: today)"),
    due: Optional[str] = typer.Option(None, "--due-date", help="Expected settlement date"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Owner of a personal transaction"),
    business: bool = typer.Option(True, "--business/--personal", help="Business or personal"),
    details: Optional[str] = typer.Option(None, "--details", "-d", help="Description"),
):
    """
    Add a transaction from the management view.
    """
    tz = state.settings.tz
    try:
        new_id = state.service.add_transaction(pin, NewTransaction(
            type=transaction_type,
            category=category,
            amount=parse_amount(amount),
            date=normalize_date(on or datetime.now(tz).date(), tz=tz),
            status=status,
            is_business=business,
            user=user,
            details=details,
            due_date=normalize_date(due, tz=tz),
        ))
        console.print(f"[bold green]✓ Added transaction[/bold green] {new_id}")
    except Exception as e:
        _fail(e)


@app.command(name="confirm")
def confirm(
    transaction_id: str = typer.Argument(..., help="ID of the pending transaction"),
    pin: str = _pin_option(),
):
    """
    Confirm a pending transaction.
    """
    try:
        state.service.confirm_transaction(pin, transaction_id)
        console.print(f"[bold green]✓ Confirmed[/bold green] {transaction_id}")
    except Exception as e:
        _fail(e)


@app.command(name="daily")
def daily(
    pin: str = _pin_option(),
    month: Optional[int] = _month_option(),
    year: Optional[int] = _year_option(),
    user: str = _user_option(),
    scope: str = _scope_option(),
):
    """
    Show confirmed income and expense for every day of the month.
    """
    try:
        dashboard = state.service.get_management_dashboard(
            pin,
            _period(month, year),
            user=_user_filter(user),
            business=_scope(scope),
        )

        table = Table(title=f"Daily Overview - {dashboard.period.label}", show_header=True)
        table.add_column("Day", justify="right", style="cyan")
        table.add_column("Income", justify="right", style="green")
        table.add_column("Expense", justify="right", style="red")
        for bucket in dashboard.daily:
            table.add_row(bucket.name, _money(bucket.income), _money(bucket.expense))
        console.print(table)

    except Exception as e:
        _fail(e)


@app.command(name="sources")
def sources(
    pin: str = _pin_option(),
    month: Optional[int] = _month_option(),
    year: Optional[int] = _year_option(),
    user: str = _user_option(),
    scope: str = _scope_option(),
):
    """
    Compare studio and outdoor event income.
    """
    try:
        dashboard = state.service.get_management_dashboard(
            pin,
            _period(month, year),
            user=_user_filter(user),
            business=_scope(scope),
        )

        table = Table(title=f"Income Sources - {dashboard.period.label}", show_header=True)
        table.add_column("Source", style="cyan")
        table.add_column("Confirmed", justify="right", style="green")
        table.add_column("Pending", justify="right", style="yellow")
        for row in dashboard.income_sources:
            table.add_row(row.name, _money(row.confirmed), _money(row.pending))
        console.print(table)

    except Exception as e:
        _fail(e)


@app.command(name="export")
def export(
    filepath: Path = typer.Argument(..., help="Destination .csv or .xlsx file"),
    pin: str = _pin_option(),
    month: Optional[int] = _month_option(),
    year: Optional[int] = _year_option(),
    user: str = _user_option(),
    scope: str = _scope_option(),
):
    """
    Export the filtered month to CSV or Excel.

    Examples:
        finance-dashboard export report.xlsx --pin 1234 --month 3
    """
    try:
        count = state.service.export_report(
            pin,
            filepath,
            _period(month, year),
            user=_user_filter(user),
            business=_scope(scope),
        )
        console.print(f"[bold green]✓ Exported {count} transactions to {filepath}[/bold green]")
    except Exception as e:
        _fail(e)


@app.command(name="import")
def import_transactions(
    filepath: Path = typer.Argument(
        ...,
        help="Path to a JSON dump or CSV report",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    pin: str = _pin_option(),
    file_format: str = typer.Option(
        "json",
        "--format", "-f",
        help="File format (json, csv)"
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Preview without saving to database",
    ),
):
    """
    Import transactions from a file.

    Examples:
        finance-dashboard import transactions.json --pin 1234
        finance-dashboard import report.csv --format csv --dry-run --pin 1234
    """
    try:
        result = state.service.import_file(pin, filepath, file_format, dry_run=dry_run)

        console.print(f"\n[bold]Found {result.total_parsed} transactions[/bold]")
        if dry_run:
            console.print("[yellow]DRY RUN - No changes made[/yellow]")
            console.print(f"[green]✓[/green] Would import: {result.new_transactions}")
            console.print(f"[yellow]⏭️[/yellow]  Would skip: {result.duplicates_skipped}")
        else:
            console.print(f"[bold green]✓ Imported {result.new_transactions} new transactions[/bold green]")
            if result.duplicates_skipped > 0:
                console.print(f"[yellow]⏭️  Skipped {result.duplicates_skipped} duplicates[/yellow]")

    except Exception as e:
        _fail(e)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
