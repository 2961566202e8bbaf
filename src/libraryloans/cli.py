"""Command-line interface for libraryloans.

Built with Typer for commands and Rich for beautiful output.
"""

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db import get_db
from .db.schemas import Loan, LoanStatus
from .lending import (
    IntegrityChecker,
    LendingError,
    LoanLifecycleManager,
    LoanQuery,
    filter_loans,
    search as search_loans,
)
from .lending.manager import crosses_returned
from .lending.notices import compose_reminder, format_date, project, reminder_link
from .lending.overdue import days_overdue, effective_status

# Create the main app
app = typer.Typer(
    name="libraryloans",
    help="Lend library books and keep inventory in step with loans.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def setup_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_manager() -> LoanLifecycleManager:
    """Create a lifecycle manager on the configured database."""
    config = get_config()
    return LoanLifecycleManager(get_db(), renewal_days=config.renewal_days)


def parse_date(value: Optional[str], option: str) -> Optional[date]:
    """Parse a YYYY-MM-DD option, exiting with an error if malformed."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print_error(f"Invalid date for {option}: {value} (expected YYYY-MM-DD)")
        raise typer.Exit(1)


def format_status(loan: Loan, today: date) -> str:
    """Render the effective status with colour."""
    status = effective_status(loan, today)
    if status == LoanStatus.OVERDUE:
        return f"[bold red]overdue ({days_overdue(loan, today)}d)[/bold red]"
    if status == LoanStatus.RETURNED:
        return "[dim]returned[/dim]"
    return f"[green]{status.value}[/green]"


def format_loan_table(loans: list[Loan], today: date, title: str = "Loans") -> Table:
    """Create a rich table for displaying loans."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", max_width=8)
    table.add_column("Borrower", style="green")
    table.add_column("Book", style="cyan", max_width=40)
    table.add_column("Loaned")
    table.add_column("Due")
    table.add_column("Status")

    for loan in loans:
        table.add_row(
            loan.id[:8],
            loan.user_name,
            loan.book_title,
            format_date(loan.loan_date),
            format_date(loan.due_date),
            format_status(loan, today),
        )

    return table


def build_query(
    text: Optional[str],
    status: Optional[LoanStatus],
    due_from: Optional[str],
    due_to: Optional[str],
    page: int = 1,
    page_size: Optional[int] = None,
) -> LoanQuery:
    """Assemble listing parameters from command options."""
    try:
        return LoanQuery(
            text=text or "",
            status=status,
            due_from=parse_date(due_from, "--from"),
            due_to=parse_date(due_to, "--to"),
            page=page,
            page_size=page_size or get_config().page_size,
        )
    except ValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show lifecycle log messages"),
) -> None:
    """Lend library books and keep inventory in step with loans."""
    setup_logging("INFO" if verbose else get_config().log_level)


# ============================================================================
# Lifecycle Commands
# ============================================================================


@app.command()
def lend(
    user_id: str = typer.Argument(..., help="Borrower ID"),
    item_id: str = typer.Argument(..., help="Book ID to lend"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    days: Optional[int] = typer.Option(None, "--days", help="Loan period in days"),
    loan_date: Optional[str] = typer.Option(None, "--loan-date", help="Loan date (YYYY-MM-DD, default today)"),
) -> None:
    """Lend a book to a borrower."""
    manager = get_manager()

    start = parse_date(loan_date, "--loan-date") or manager.clock.today()
    due_date = parse_date(due, "--due")
    if due_date is None:
        due_date = start + timedelta(days=days if days is not None else manager.renewal_days)

    try:
        loan = manager.create(user_id, item_id, start, due_date)
    except (LendingError, ValidationError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f'"{loan.book_title}" lent to {loan.user_name}')
    console.print(f"[dim]Loan ID: {loan.id}[/dim]")
    console.print(f"[dim]Due: {format_date(loan.due_date)}[/dim]")


@app.command("return")
def return_loan(
    loan_id: str = typer.Argument(..., help="Loan ID to return"),
) -> None:
    """Mark a loan as returned."""
    manager = get_manager()

    try:
        loan = manager.mark_returned(loan_id)
    except LendingError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f'"{loan.book_title}" returned by {loan.user_name}')


@app.command()
def renew(
    loan_id: str = typer.Argument(..., help="Loan ID to renew"),
    days: Optional[int] = typer.Option(None, "--days", help="Days from today (default from config)"),
) -> None:
    """Renew a loan from today, clearing any overdue status."""
    manager = get_manager()

    try:
        loan = manager.renew(loan_id, days)
    except LendingError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f'"{loan.book_title}" renewed until {format_date(loan.due_date)}')


@app.command()
def edit(
    loan_id: str = typer.Argument(..., help="Loan ID to edit"),
    loan_date: Optional[str] = typer.Option(None, "--loan-date", help="New loan date (YYYY-MM-DD)"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="New due date (YYYY-MM-DD)"),
    status: Optional[LoanStatus] = typer.Option(None, "--status", "-s", help="New stored status"),
) -> None:
    """Overwrite loan dates or status (administrative, no inventory change)."""
    manager = get_manager()

    new_loan_date = parse_date(loan_date, "--loan-date")
    new_due = parse_date(due, "--due")

    try:
        loan, previous = manager.edit_fields_tracked(loan_id, new_loan_date, new_due, status)
    except LendingError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Loan {loan.id[:8]} updated")
    if crosses_returned(previous, loan.status):
        print_warning(
            "Status changed without adjusting inventory. "
            "Available copies for this book may now be wrong."
        )


@app.command()
def delete(
    loan_id: str = typer.Argument(..., help="Loan ID to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a loan record, restoring the copy if it was never returned."""
    manager = get_manager()

    if not yes:
        typer.confirm(
            "Delete this loan record? If the book was not returned, the copy is put back.",
            abort=True,
        )

    try:
        loan = manager.delete(loan_id)
    except LendingError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f'Loan of "{loan.book_title}" deleted')


# ============================================================================
# Listing Commands
# ============================================================================


@app.command("list")
def list_loans(
    text: Optional[str] = typer.Option(None, "--search", "-q", help="Match borrower or book title"),
    status: Optional[LoanStatus] = typer.Option(None, "--status", "-s", help="Filter by displayed status"),
    due_from: Optional[str] = typer.Option(None, "--from", help="Due on or after (YYYY-MM-DD)"),
    due_to: Optional[str] = typer.Option(None, "--to", help="Due on or before (YYYY-MM-DD)"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", help="Loans per page"),
) -> None:
    """List loans with filters and paging."""
    manager = get_manager()
    query = build_query(text, status, due_from, due_to, page, page_size)
    today = manager.clock.today()

    result = search_loans(manager.list_loans(), query, today)

    if not result.items:
        console.print("[dim]No loans found[/dim]")
    else:
        console.print(format_loan_table(result.items, today))

    console.print(
        f"[dim]Page {result.page} of {result.total_pages} ({result.total} loans)[/dim]"
    )


@app.command()
def report(
    text: Optional[str] = typer.Option(None, "--search", "-q", help="Match borrower or book title"),
    status: Optional[LoanStatus] = typer.Option(None, "--status", "-s", help="Filter by displayed status"),
    due_from: Optional[str] = typer.Option(None, "--from", help="Due on or after (YYYY-MM-DD)"),
    due_to: Optional[str] = typer.Option(None, "--to", help="Due on or before (YYYY-MM-DD)"),
) -> None:
    """Print every matching loan as a report."""
    config = get_config()
    manager = get_manager()
    query = build_query(text, status, due_from, due_to)
    today = manager.clock.today()

    loans = filter_loans(manager.list_loans(), query, today)

    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]\n"
        f"Loan report - generated {format_date(today)}",
        style="blue",
    ))
    console.print(format_loan_table(loans, today, title=f"{len(loans)} loans"))


@app.command()
def notify(
    loan_id: str = typer.Argument(..., help="Loan ID to remind the borrower about"),
) -> None:
    """Compose a reminder for a borrower and the link to send it."""
    config = get_config()
    manager = get_manager()

    try:
        loan = manager.get(loan_id)
        borrower = manager.get_borrower(loan.user_id)
        notice = project(loan, manager.clock.today())
        message = compose_reminder(notice, config.institution_name)
        link = reminder_link(borrower.phone, message)
    except LendingError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        print_error(f"Invalid phone number for {loan.user_name}: {e}")
        raise typer.Exit(1)

    console.print(Panel(message, title=f"Reminder for {notice.user_name}"))
    console.print(link, soft_wrap=True)


# ============================================================================
# Maintenance Commands
# ============================================================================


@app.command()
def check() -> None:
    """Check that loans and inventory agree."""
    checker = IntegrityChecker(get_db())
    result = checker.check_database()

    console.print(
        f"[dim]Checked {result.loan_count} loans and {result.item_count} books[/dim]"
    )
    for issue in result.issues:
        console.print(str(issue), markup=False)

    if not result.passed:
        print_error(f"{result.error_count} consistency error(s) found")
        raise typer.Exit(1)

    print_success("Loans and inventory are consistent")


@app.command("import")
def import_data(
    path: Path = typer.Argument(..., help="JSON file mapping collection names to arrays"),
) -> None:
    """Load collections (books, users, loans) from a JSON file."""
    if not path.exists():
        print_error(f"File not found: {path}")
        raise typer.Exit(1)

    try:
        counts = get_db().import_collections(path)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    for name, count in counts.items():
        console.print(f"  {name}: {count}")
    print_success(f"Imported {len(counts)} collection(s) from {path}")


@app.command("export")
def export_data(
    path: Path = typer.Argument(..., help="Output JSON file"),
) -> None:
    """Write all collections to a JSON file."""
    counts = get_db().export_collections(path)

    for name, count in counts.items():
        console.print(f"  {name}: {count}")
    print_success(f"Exported {len(counts)} collection(s) to {path}")


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"libraryloans version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
