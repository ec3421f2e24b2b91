"""
Telegram bot commands.

Replies are built here and sent through the Bot API from a worker thread.
"""

import asyncio
from decimal import Decimal
from typing import Any, Dict, Optional
from urllib.parse import quote

from farmpro.core.config import settings
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Account
from farmpro.schemas.referral import SReferralStats
from farmpro.schemas.telegram import TelegramUpdate
from farmpro.services.accounts import AccountService
from farmpro.services.referrals import ReferralService, referral_link
from farmpro.services.settings_store import SettingsService
from farmpro.utils import telegram_api
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

START_FIRST = "❌ Please start the bot first with /start"
SOMETHING_WRONG = "❌ Something went wrong. Please try again later."

HELP_TEXT = (
    "🆘 <b>Farming Pro Help</b>\n\n"
    "<b>Commands:</b>\n"
    "/start - Start the bot and open app\n"
    "/farm - Farming dashboard\n"
    "/balance - Check your balance\n"
    "/referral - View referral stats\n"
    "/help - Show this help message\n\n"
    "<b>Features:</b>\n"
    "🌱 Farm USDT every 4 hours\n"
    "📋 Complete social tasks for rewards\n"
    "👥 3-level referral system\n"
    "🚀 Boost system for faster farming\n"
    "💰 Deposit and withdrawal system\n\n"
    "<b>Withdrawal Requirements:</b>\n"
    "• Minimum withdrawal: $12\n"
    "• First deposit: $5 (to enable withdrawals)\n"
    "• Deposit $3 for each withdrawal\n\n"
    "Click /start to begin farming!"
)


def money(value: Decimal) -> str:
    return f"{value:,.2f}"


def open_app_keyboard() -> Dict[str, Any]:
    return {"inline_keyboard": [[{"text": "🚀 Open Farming Pro", "web_app": {"url": settings.WEBAPP_URL}}]]}


def parse_start_referrer(text: str) -> Optional[int]:
    """`/start ref_42` -> 42; anything else -> None."""
    parts = text.split()
    if len(parts) < 2 or not parts[1].startswith("ref_"):
        return None
    try:
        return int(parts[1][len("ref_"):])
    except ValueError:
        return None


def welcome_text(account: Account, created: bool) -> str:
    if created:
        return (
            "🌱 <b>Welcome to Farming Pro!</b>\n\n"
            "Start earning USDT by farming, completing tasks, and referring friends.\n\n"
            f"💰 <b>Starting balance:</b> {money(account.balance)} USDT\n"
            f"⏰ <b>Farming rate:</b> {money(account.farming_rate)} USDT/hour\n"
            "🔗 <b>3-level referral system</b>\n\n"
            "Click the button below to open the app:"
        )
    return (
        "🌱 <b>Welcome back to Farming Pro!</b>\n\n"
        f"💰 <b>Current balance:</b> {money(account.balance)} USDT\n"
        f"📊 <b>Total earned:</b> {money(account.total_earned)} USDT\n\n"
        "Click the button below to continue farming:"
    )


def farm_text(account: Account) -> str:
    return (
        "🌱 <b>Farming Pro Dashboard</b>\n\n"
        f"💰 <b>Balance:</b> {money(account.balance)} USDT\n"
        f"⏰ <b>Farming Rate:</b> {money(account.farming_rate)} USDT/hour\n"
        f"🚀 <b>Boost:</b> {account.boost_multiplier}x\n\n"
        "Click the button below to open the farming app:"
    )


def balance_text(account: Account) -> str:
    return (
        "💰 <b>Your Balance</b>\n\n"
        f"💵 <b>Current:</b> {money(account.balance)} USDT\n"
        f"📈 <b>Total Earned:</b> {money(account.total_earned)} USDT\n"
        f"👥 <b>Referral Earnings:</b> {money(account.referral_earnings)} USDT\n"
        f"💎 <b>Total Deposited:</b> {money(account.total_deposited)} USDT\n"
        f"📤 <b>Total Withdrawn:</b> {money(account.total_withdrawn)} USDT"
    )


def referral_text(account: Account, stats: SReferralStats, commissions: Dict[int, Decimal]) -> str:
    return (
        "👥 <b>Your Referral Program</b>\n\n"
        f"🔗 <b>Your referral link:</b>\n{referral_link(account.id)}\n\n"
        "📊 <b>Referral Stats:</b>\n"
        f"• Level 1: {stats.level1} users ({commissions[1].normalize():f}%)\n"
        f"• Level 2: {stats.level2} users ({commissions[2].normalize():f}%)\n"
        f"• Level 3: {stats.level3} users ({commissions[3].normalize():f}%)\n\n"
        f"💰 <b>Total referral earnings:</b> {money(account.referral_earnings)} USDT"
    )


def share_keyboard(account: Account) -> Dict[str, Any]:
    link = referral_link(account.id)
    share_url = (
        f"https://t.me/share/url?url={quote(link, safe='')}"
        f"&text={quote('Join me on Farming Pro and start earning USDT!', safe='')}"
    )
    return {"inline_keyboard": [[{"text": "📤 Share Referral Link", "url": share_url}]]}


class TelegramBotService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.accounts = AccountService(uow)

    async def reply(self, chat_id: int, text: str, keyboard: Optional[Dict[str, Any]] = None) -> None:
        await asyncio.to_thread(telegram_api.send_message, chat_id, text, keyboard)

    async def handle_update(self, update: TelegramUpdate) -> None:
        if update.message is None:
            return

        message = update.message
        chat_id = message.chat.id
        try:
            await self._dispatch(chat_id, message.from_user, (message.text or "").strip())
        except Exception as e:
            # the webhook still answers 200
            logger.exception(f"Error handling telegram update {update.update_id}: {e}")
            await self.reply(chat_id, SOMETHING_WRONG)

    async def _dispatch(self, chat_id: int, user, text: str) -> None:
        command = text.split(" ", 1)[0].split("@", 1)[0] if text else ""
        telegram_id = str(user.id)

        if command == "/start":
            account, created = await self.accounts.get_or_create(
                telegram_id, user.username or user.first_name, parse_start_referrer(text)
            )
            await self.reply(chat_id, welcome_text(account, created), open_app_keyboard())
            return

        if command == "/help":
            await self.reply(chat_id, HELP_TEXT)
            return

        if command not in ("/farm", "/balance", "/referral"):
            await self.reply(
                chat_id,
                "🤖 I don't understand that command.\n\n"
                "Use /help to see available commands or click below to open the app:",
                open_app_keyboard(),
            )
            return

        account = await self.uow.accounts.first(telegram_id=telegram_id)
        if account is None:
            await self.reply(chat_id, START_FIRST)
        elif command == "/farm":
            await self.reply(chat_id, farm_text(account), open_app_keyboard())
        elif command == "/balance":
            await self.reply(chat_id, balance_text(account))
        else:
            stats = await ReferralService(self.uow).get_stats(account.id)
            store = SettingsService(self.uow)
            commissions = {
                level: await store.get_decimal(f"referral_level{level}_commission") for level in (1, 2, 3)
            }
            await self.reply(chat_id, referral_text(account, stats, commissions), share_keyboard(account))
