# Overview: Flask CLI command groups for bootstrap, seeding, and sale inspection.

# backend/cafecito/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to cafecito (PowerShell: $env:FLASK_APP="cafecito").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables that do not exist yet (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Catalog seeding:
# - python -m flask catalog add --name "Latte" --price 45.50 --stock 20
#   Create an active product.
# - python -m flask catalog list [--all]
#   List products with price and stock.
#
# Customer seeding:
# - python -m flask customers add --name "Ana" --contact ana@example.com
# - python -m flask customers list
#
# Sales:
# - python -m flask sales show CF-20260213-0042
#   Print a sale as a ticket.
# - python -m flask sales cancel CF-20260213-0042 --reason "wrong order"
#   Cancel a sale and restore its stock.

from decimal import Decimal, InvalidOperation

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .errors import SaleError, ValidationFailed
from .models import Product, Customer
from .services import lifecycle_service, sales_service
from .services.pricing_service import format_money, round_cents
from .services.ticket_service import build_ticket
from .validation import normalize_cancel_reason


def _parse_price_cents(value: str) -> int:
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        raise click.BadParameter(f"'{value}' is not a decimal amount")
    cents = round_cents(amount * 100)
    if cents <= 0:
        raise click.BadParameter("price must be greater than 0")
    return cents


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create missing tables."""
    db.create_all()
    click.echo("PASS Database schema ready.")


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


@click.group('catalog')
def catalog_group():
    """Product seeding and inspection."""


@catalog_group.command('add')
@click.option('--name', required=True, help='Product name (2-100 chars)')
@click.option('--price', required=True, help='Unit price, e.g. 45.50')
@click.option('--stock', default=0, type=click.IntRange(min=0), help='Initial stock')
@with_appcontext
def add_product(name, price, stock):
    """Create an active product."""
    name = name.strip()
    if not 2 <= len(name) <= 100:
        raise click.BadParameter("name must be 2-100 characters", param_hint="--name")

    product = Product(name=name, price_cents=_parse_price_cents(price), stock=stock, is_active=True)
    db.session.add(product)
    db.session.commit()

    click.echo(f"PASS Created product {product.id}: {product.name} ${format_money(product.price_cents)} (stock {product.stock})")


@catalog_group.command('list')
@click.option('--all', 'show_all', is_flag=True, help='Include inactive products')
@with_appcontext
def list_products(show_all):
    """List products."""
    query = db.session.query(Product).order_by(Product.id)
    if not show_all:
        query = query.filter(Product.is_active.is_(True))
    products = query.all()

    if not products:
        click.echo("No products found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Name':<35} {'Price':>10} {'Stock':>7} {'Active':>8}")
    click.echo("="*70)

    for product in products:
        active_str = "Yes" if product.is_active else "No"
        click.echo(
            f"{product.id:<5} {product.name:<35} {format_money(product.price_cents):>10} "
            f"{product.stock:>7} {active_str:>8}"
        )

    click.echo("="*70 + "\n")


@click.group('customers')
def customers_group():
    """Customer seeding and inspection."""


@customers_group.command('add')
@click.option('--name', required=True, help='Customer name (2-80 chars)')
@click.option('--contact', required=True, help='Phone number or e-mail')
@with_appcontext
def add_customer(name, contact):
    """Create a customer with no purchases."""
    name = name.strip()
    if not 2 <= len(name) <= 80:
        raise click.BadParameter("name must be 2-80 characters", param_hint="--name")

    customer = Customer(name=name, contact=contact.strip().lower(), purchases_count=0)
    db.session.add(customer)
    db.session.commit()

    click.echo(f"PASS Created customer {customer.id}: {customer.name} <{customer.contact}>")


@customers_group.command('list')
@with_appcontext
def list_customers():
    """List customers with their purchase counts."""
    customers = db.session.query(Customer).order_by(Customer.id).all()

    if not customers:
        click.echo("No customers found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Name':<25} {'Contact':<30} {'Purchases':>9}")
    click.echo("="*70)

    for customer in customers:
        click.echo(f"{customer.id:<5} {customer.name:<25} {customer.contact:<30} {customer.purchases_count:>9}")

    click.echo("="*70 + "\n")


@click.group('sales')
def sales_group():
    """Sale inspection and cancellation."""


@sales_group.command('show')
@click.argument('sale_id')
@with_appcontext
def show_sale(sale_id):
    """Print a sale as a ticket."""
    try:
        sale = sales_service.get_sale(sale_id)
    except SaleError as e:
        raise click.ClickException(e.message)

    ticket = build_ticket(sale, store_name=current_app.config["STORE_NAME"])

    click.echo(ticket["store_name"])
    click.echo(f"{ticket['sale_id']}  {ticket['timestamp']}  [{sale.status}]")
    click.echo("-"*50)
    for item in ticket["items"]:
        click.echo(f"{item['qty']:>3} x {item['name']:<25} {item['line_total']:>12}")
    click.echo("-"*50)
    click.echo(f"{'Subtotal':<30} {ticket['subtotal']:>18}")
    click.echo(f"{'Discount':<30} {ticket['discount']:>18}")
    click.echo(f"{'Total':<30} {ticket['total']:>18}")
    click.echo(f"Paid by {ticket['payment_method']}")


@sales_group.command('cancel')
@click.argument('sale_id')
@click.option('--reason', default='', help='Cancellation reason')
@with_appcontext
def cancel_sale(sale_id, reason):
    """Cancel a sale and restore its stock."""
    try:
        reason = normalize_cancel_reason(reason)
    except ValidationFailed as e:
        raise click.BadParameter(e.violations[0]["message"], param_hint="--reason")

    try:
        outcome = lifecycle_service.cancel_sale(sale_id, reason)
    except SaleError as e:
        raise click.ClickException(e.message)

    if outcome.restoration == lifecycle_service.RESTORATION_COMPLETE:
        click.echo(f"PASS Sale {sale_id} canceled and stock restored.")
    else:
        click.echo(f"WARN Sale {sale_id} canceled; stock was only partially restored.")
    for warning in outcome.warnings:
        click.echo(f"WARN {warning}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(customers_group)
    app.cli.add_command(sales_group)
