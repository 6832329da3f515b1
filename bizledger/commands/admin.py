"""Admin commands for init and backup."""

import shutil
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from bizledger.commands.common import console, fail, settings_db_path
from bizledger.config import create_default_config, get_config_path
from bizledger.store.schema import init_database


def run_full_init(db_path: Path, config_path: Path, owner: str | None) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path, owner=owner)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(settings: dict[str, Any], force: bool = False, owner: str | None = None) -> None:
    """Initialize bizledger database and configuration."""
    db_path = settings_db_path(settings)
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            fail("Use 'bizledger init --force' to overwrite")

        if force and db_exists:
            db_path.unlink()

        run_full_init(db_path, config_path, owner)

    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Filesystem error: {e}")


def backup_command(settings: dict[str, Any], output_dir: str | None = None) -> None:
    """Backup database and configuration files."""
    db_path = settings_db_path(settings)
    config_path = get_config_path()

    if not db_path.exists():
        fail("Database not found. Run 'bizledger init' first.")

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".bizledger" / "backups"

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"bizledger_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)

        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")
        else:
            console.print("[dim]No config file to back up[/dim]")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        fail(f"Backup failed: {e}")
