# Overview: Flask CLI command groups for bootstrap, seeding, and inventory maintenance.

# backend/pizzeria/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP (export FLASK_APP="pizzeria:create_app").
# - Use: python -m flask <group> <command> [options]
#
# Store bootstrap:
# - python -m flask storefront init-db
#   Create all tables (use `flask db upgrade` when running migrations instead).
# - python -m flask storefront seed [--reset] [--valid-days 365]
#   Load the starter menu and the MEGA50/WELCOME50/SUPER50/FLAT250 coupons.
#   --reset removes existing products and coupons first.
#
# Inventory:
# - python -m flask inventory show
#   Print on-hand stock against max for every product.
# - python -m flask inventory reset
#   Run the end-of-day reset now (same job the scheduler runs).

import click
from datetime import timedelta
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import Product, Coupon, CartItem, OrderItem
from .seed_data import PRODUCTS, COUPONS
from .services import inventory_service
from .time_utils import utcnow


@click.group('storefront')
def storefront_group():
    """Store bootstrap commands."""


@storefront_group.command('init-db')
@with_appcontext
def init_db():
    """Create every table that does not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@storefront_group.command('seed')
@click.option('--reset', is_flag=True, help='Delete existing products and coupons first')
@click.option('--valid-days', type=int, default=365, show_default=True, help='Coupon validity from today')
@with_appcontext
def seed(reset, valid_days):
    """
    Load the starter menu (32 items across four categories) and four coupons.

    Products and coupons that already exist by name/code are skipped, so the
    command is safe to re-run.
    """
    if reset:
        if db.session.query(OrderItem.id).first() is not None:
            raise click.ClickException("Orders exist; refusing to delete products. Drop --reset.")
        db.session.query(CartItem).delete()
        db.session.query(Product).delete()
        db.session.query(Coupon).delete()
        db.session.commit()
        click.echo("PASS Cleared existing products and coupons")

    default_max = current_app.config["DEFAULT_MAX_INVENTORY"]
    created_products = 0
    for name, description, category, price_cents, image, is_veg in PRODUCTS:
        if db.session.query(Product).filter_by(name=name).first():
            continue
        db.session.add(Product(
            name=name,
            description=description,
            category=category,
            price_cents=price_cents,
            image=image,
            is_veg=is_veg,
            is_available=True,
            inventory=default_max,
            max_inventory=default_max,
        ))
        created_products += 1

    valid_from = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    valid_until = valid_from + timedelta(days=valid_days)
    created_coupons = 0
    for code, description, discount_type, value, min_order, max_discount in COUPONS:
        if db.session.query(Coupon).filter_by(code=code).first():
            continue
        db.session.add(Coupon(
            code=code,
            description=description,
            discount_type=discount_type,
            discount_value=value,
            min_order_amount_cents=min_order,
            max_discount_cents=max_discount,
            valid_from=valid_from,
            valid_until=valid_until,
            is_active=True,
        ))
        created_coupons += 1

    db.session.commit()
    click.echo(f"PASS {created_products} products seeded")
    click.echo(f"PASS {created_coupons} coupons seeded (valid until {valid_until.date().isoformat()})")


@click.group('inventory')
def inventory_group():
    """Inventory inspection and maintenance."""


@inventory_group.command('show')
@with_appcontext
def show_inventory():
    rows = inventory_service.inventory_snapshot()
    if not rows:
        click.echo("No products found")
        return

    click.echo(f"{'ID':<5} {'Name':<32} {'Stock':>7} {'Max':>7}")
    click.echo("-" * 54)
    for row in rows:
        flag = "" if row["inventory"] == row["max_inventory"] else "  *"
        click.echo(f"{row['id']:<5} {row['name'][:32]:<32} {row['inventory']:>7} {row['max_inventory']:>7}{flag}")


@inventory_group.command('reset')
@with_appcontext
def reset_inventory():
    """Restore every product to its max inventory now."""
    modified = inventory_service.reset_all_to_max()
    click.echo(f"PASS Inventory reset completed. {modified} products updated.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(storefront_group)
    app.cli.add_command(inventory_group)
