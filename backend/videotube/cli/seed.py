"""``flask seed``: demo channels, videos, subscriptions and watch history."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from videotube.core.extensions import db
from videotube.seeds import seed_data

LOGGER = logging.getLogger(__name__)

TABLE_CHOICE = click.Choice(list(seed_data.SEEDERS), case_sensitive=False)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(seed_data.__name__).setLevel(level)
    LOGGER.setLevel(level)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Print created/existing counters per table, in foreign-key order."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    tables = [name for name in seed_data.SEEDERS if name in summary]
    width = max(len(name) for name in tables)
    for table in tables:
        counters = summary[table]
        click.echo(
            f"  {table.ljust(width)}  created={counters['created']:>2}"
            f"  existing={counters['existing']:>2}"
        )
    created = sum(c["created"] for c in summary.values())
    existing = sum(c["existing"] for c in summary.values())
    click.echo(f"  {'total'.ljust(width)}  created={created:>2}  existing={existing:>2}")


def _ensure_non_production() -> None:
    config = current_app.config
    if str(config.get("APP_ENV", "")).lower() == "production" and not config.get("TESTING"):
        raise click.UsageError(
            "Refusing to drop the VideoTube schema in production (APP_ENV=production)."
        )


def _seed(verbose: bool, only: tuple[str, ...]) -> dict[str, dict[str, int]]:
    tables = seed_data.resolve_tables(only)
    if only:
        click.echo(f"Seeding {', '.join(tables)}")
    try:
        return seed_data.run_all(db, verbose=verbose, only=tables)
    except Exception as exc:  # pragma: no cover - CLI safeguard
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log every seeding step.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Demo data for local VideoTube databases."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@seed_cli.command("run")
@click.option(
    "--only",
    "only",
    multiple=True,
    type=TABLE_CHOICE,
    help="Seed this table (repeatable); prerequisite tables are seeded too.",
)
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context, only: tuple[str, ...]) -> None:
    """Insert demo accounts and their channel activity (idempotent)."""
    _echo_summary(_seed(bool(ctx.obj.get("verbose", False)), only))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop and recreate every table, then seed all demo data."""
    _ensure_non_production()
    if not yes:
        click.confirm(
            "This will DROP users, videos, subscriptions and watch history. Continue?",
            abort=True,
        )
    LOGGER.info("Dropping database schema...")
    db.session.remove()
    db.drop_all()
    LOGGER.info("Recreating database schema...")
    db.create_all()
    _echo_summary(_seed(bool(ctx.obj.get("verbose", False)), ()))


@seed_cli.command("status")
@with_appcontext
def status_command() -> None:
    """Show row counts and which demo accounts exist."""
    counts = seed_data.table_counts(db)
    width = max(len(name) for name in counts)
    for table, count in counts.items():
        click.echo(f"  {table.ljust(width)}  rows={count:>3}")
    present = seed_data.demo_usernames(db)
    missing = [f["username"] for f in seed_data.USER_FIXTURES if f["username"] not in present]
    click.echo(f"Demo accounts: {len(present)}/{len(seed_data.USER_FIXTURES)}")
    if missing:
        click.echo(f"Missing: {', '.join(missing)}")
    db.session.rollback()
