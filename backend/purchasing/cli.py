# Overview: Flask CLI command groups for bootstrap, inspection, and demo data.

# backend/purchasing/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables that do not exist yet (use `flask db upgrade` for migrations).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system timezone
#   Show the configured display timezone, its offset and the current local time.
#
# Demo data:
# - python -m flask seed demo
#   Insert a few items, one user and one purchase order.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import Item
from .services import item_service, purchase_order_service, user_service
from .services.purchase_order_service import DetailRequest
from .time_utils import get_timezone, utcnow


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create missing tables."""
    db.create_all()
    click.echo("PASS Tables created.")


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


@system_group.command('timezone')
@with_appcontext
def show_timezone():
    """Show the display timezone used for purchase order datetimes."""
    tz = get_timezone()
    click.echo(f"Zone:       {tz.name}")
    click.echo(f"Display:    {tz.display_name()}")
    click.echo(f"Offset:     {tz.zone_offset()}")
    click.echo(f"Local now:  {tz.format(utcnow())}")


@click.group('seed')
def seed_group():
    """Demo data for manual testing."""


@seed_group.command('demo')
@with_appcontext
def seed_demo():
    """Insert demo items, a user and one purchase order."""
    actor = current_app.config.get("DEFAULT_ACTOR") or "SYSTEM"

    if db.session.query(Item).count():
        click.echo("SKIP Items already present, not seeding.")
        return

    pencil = item_service.create_item(
        patch={"name": "Pencil", "description": "HB pencil", "price": 3000, "cost": 2000},
        actor=actor,
    )
    paper = item_service.create_item(
        patch={"name": "A4 Paper", "description": "Ream of 500 sheets", "price": 55000, "cost": 48000},
        actor=actor,
    )
    user_service.create_user(
        patch={"first_name": "Demo", "last_name": "Buyer", "email": "buyer@example.com", "phone": None},
        actor=actor,
    )

    local_now = get_timezone().to_local(utcnow()).replace(microsecond=0)
    po = purchase_order_service.create_purchase_order(
        order_datetime=local_now,
        description="Demo stationery order",
        details=[
            DetailRequest(item_id=pencil.id, quantity=10),
            DetailRequest(item_id=paper.id, quantity=2),
        ],
        actor=actor,
    )
    click.echo(f"PASS Seeded items {pencil.id}, {paper.id} and purchase order {po.id}.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(seed_group)
