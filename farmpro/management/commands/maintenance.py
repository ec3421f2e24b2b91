"""
Management commands: seeding, ledger reconciliation and Telegram webhook setup.
"""

import asyncio
from typing import Dict, List

import click

from farmpro.core.config import settings
from farmpro.db.session import create_tables
from farmpro.db.uow import unit_of_work
from farmpro.schemas.transaction import SLedgerReconciliation
from farmpro.services.admin import AdminService
from farmpro.services.seed import seed_defaults
from farmpro.utils import telegram_api
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


@click.command()
def seed():
    """
    Fill the catalog with the default tasks, boosts and settings.

    Existing rows are left untouched, running it twice is harmless.
    """
    logger.info("Seeding default catalog and settings...")
    try:
        created = asyncio.run(_seed_async())
    except Exception as e:
        logger.error(f"❌ Error during seeding: {e}")
        raise click.ClickException(str(e))

    click.echo(
        f"✅ Seeded {created['tasks']} task(s), {created['boosts']} boost(s), {created['settings']} setting(s)"
    )


async def _seed_async() -> Dict[str, int]:
    if settings.STORAGE_BACKEND != "memory":
        await create_tables()
    async with unit_of_work() as uow:
        return await seed_defaults(uow)


@click.command()
def reconcile():
    """Compare every balance with the sum of its journal; exit code 1 on any mismatch."""
    logger.info("Reconciling ledger...")
    mismatches = asyncio.run(_reconcile_async())

    if not mismatches:
        click.echo("✅ Ledger is consistent")
        return

    for report in mismatches:
        click.echo(
            f"❌ account={report.account_id} balance={report.balance} journal={report.journal_total}",
            err=True,
        )
    raise click.ClickException(f"{len(mismatches)} account(s) out of balance")


async def _reconcile_async() -> List[SLedgerReconciliation]:
    async with unit_of_work() as uow:
        return await AdminService(uow).reconcile_all()


@click.command("set-webhook")
@click.argument("url", required=False)
def set_webhook(url: str):
    """Register URL (default: WEBAPP_URL + /api/telegram/webhook) as the bot webhook."""
    if not settings.TELEGRAM_BOT_TOKEN:
        raise click.ClickException("TELEGRAM_BOT_TOKEN is not set")

    url = url or f"{settings.WEBAPP_URL.rstrip('/')}/{settings.API_PREFIX}/telegram/webhook"
    result = telegram_api.set_webhook(url)
    if not result or not result.get("ok"):
        description = (result or {}).get("description", "no response")
        raise click.ClickException(f"Telegram refused the webhook: {description}")

    click.echo(f"✅ Webhook set to {url}")
