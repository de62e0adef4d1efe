# Overview: Flask CLI command groups for bootstrap, backups and reports.

# backend/sigef/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system check-db
#   Run SELECT 1 against the configured database.
#
# Backups:
# - python -m flask data export --out backup.json
#   Write products, sales and debts as a JSON document (stdout if --out is omitted).
# - python -m flask data import backup.json
#   Replace all products, sales and debts with the document's contents.
#
# Reports:
# - python -m flask reports summary
#   Print the dashboard report as JSON.

import json

import click
from flask.cli import with_appcontext

from .extensions import db
from .routes.system import check_database_connection
from .services.backup_service import BackupError, export_json, import_json
from .services.reporting_service import summary_report


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@system_group.command('check-db')
@with_appcontext
def check_db():
    """Exit with status 1 when the database is unreachable."""
    if check_database_connection():
        click.echo("PASS Database connection OK.")
        return
    click.echo("FAIL Could not connect to the database.", err=True)
    raise SystemExit(1)


@click.group('data')
def data_group():
    """Backup export and import."""


@data_group.command('export')
@click.option('--out', 'out_path', type=click.Path(dir_okay=False, writable=True), default=None,
              help='Output file (defaults to stdout)')
@with_appcontext
def export_cmd(out_path):
    raw = export_json()
    if out_path is None:
        click.echo(raw)
        return
    with open(out_path, "w", encoding="utf-8") as fh:
        fh.write(raw)
    click.echo(f"PASS Exported data to {out_path}")


@data_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def import_cmd(path, yes):
    """Replace ALL current data with the contents of PATH."""
    if not yes:
        click.confirm("WARN This will REPLACE ALL DATA. Are you sure?", abort=True)

    with open(path, "r", encoding="utf-8") as fh:
        raw = fh.read()

    try:
        counts = import_json(raw)
    except BackupError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"PASS Imported {counts['products']} products, {counts['sales']} sales, "
        f"{counts['debts']} debts"
    )


@click.group('reports')
def reports_group():
    """Read-only reports."""


@reports_group.command('summary')
@with_appcontext
def summary_cmd():
    click.echo(json.dumps(summary_report(), indent=2, ensure_ascii=False))


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(data_group)
    app.cli.add_command(reports_group)
