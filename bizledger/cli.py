"""CLI entry point for bizledger."""

import typer

from bizledger.commands.admin import backup_command, init_command
from bizledger.commands.common import fail
from bizledger.commands.monthly import close_command, history_command, set_totals_command, totals_command
from bizledger.commands.transactions import add_command, delete_command, edit_command, list_command
from bizledger.config import load_settings
from bizledger.log import configure_logging

app = typer.Typer(
    name="bizledger",
    help="Monthly income and expense tracking for three business lines",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    owner: str = typer.Option(None, "--owner", help="Owner id (overrides BIZLEDGER_OWNER and config)"),
    log_level: str = typer.Option(None, "--log-level", help="Log level (overrides config)"),
) -> None:
    """Monthly income and expense tracking for three business lines."""
    try:
        settings = load_settings()
        configure_logging(log_level or settings["log_level"])
    except ValueError as e:
        fail(f"Configuration error: {e}")
    ctx.obj = {"settings": settings, "owner": owner}


@app.command(name="init")
def init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize the database and configuration."""
    init_command(ctx.obj["settings"], force, ctx.obj["owner"])


@app.command(name="backup")
def backup(
    ctx: typer.Context,
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.bizledger/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(ctx.obj["settings"], output_dir)


@app.command()
def totals(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print JSON with amounts as decimal strings"),
) -> None:
    """Show this month's expenses and gains per category."""
    totals_command(ctx.obj["settings"], ctx.obj["owner"], as_json)


@app.command(name="set-totals")
def set_totals(
    ctx: typer.Context,
    category: str,
    expenses: str = typer.Option(..., "--expenses", help="Total expenses (e.g. 150.00)"),
    gains: str = typer.Option(..., "--gains", help="Total gains (e.g. 420.50)"),
) -> None:
    """Overwrite a category's totals for this month."""
    set_totals_command(ctx.obj["settings"], ctx.obj["owner"], category, expenses, gains)


@app.command()
def close(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Close this month: archive totals into history and reset them."""
    close_command(ctx.obj["settings"], ctx.obj["owner"], yes)


@app.command()
def history(
    ctx: typer.Context,
    limit: int = typer.Option(12, "--limit", "-n", help="Maximum months to show"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON with amounts as decimal strings"),
) -> None:
    """Show closed months, most recent first."""
    history_command(ctx.obj["settings"], ctx.obj["owner"], limit, as_json)


@app.command(name="list")
def list_transactions(
    ctx: typer.Context,
    category: str,
    as_json: bool = typer.Option(False, "--json", help="Print JSON with amounts as decimal strings"),
) -> None:
    """List this month's transactions in a category."""
    list_command(ctx.obj["settings"], ctx.obj["owner"], category, as_json)


@app.command()
def add(
    ctx: typer.Context,
    category: str,
    kind: str,
    description: str,
    amount: str,
    date: str = typer.Option(None, "--date", help="When it happened (default: now)"),
) -> None:
    """Add an expense or gain to a category."""
    add_command(ctx.obj["settings"], ctx.obj["owner"], category, kind, description, amount, date)


@app.command()
def edit(
    ctx: typer.Context,
    txn_id: str,
    category: str = typer.Option(None, "--category", help="New category"),
    kind: str = typer.Option(None, "--kind", help="New kind (expense or gain)"),
    description: str = typer.Option(None, "--description", help="New description"),
    amount: str = typer.Option(None, "--amount", help="New amount"),
    date: str = typer.Option(None, "--date", help="New date"),
) -> None:
    """Edit a transaction."""
    edit_command(ctx.obj["settings"], ctx.obj["owner"], txn_id, category, kind, description, amount, date)


@app.command()
def delete(ctx: typer.Context, txn_id: str) -> None:
    """Delete a transaction."""
    delete_command(ctx.obj["settings"], ctx.obj["owner"], txn_id)


if __name__ == "__main__":
    app()
