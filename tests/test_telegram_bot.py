from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from farmpro.core.config import settings
from farmpro.repositories.memory import MemoryUnitOfWork
from farmpro.schemas.telegram import TelegramUpdate
from farmpro.services.telegram_bot import (
    HELP_TEXT,
    SOMETHING_WRONG,
    START_FIRST,
    TelegramBotService,
    money,
    parse_start_referrer,
)
from farmpro.utils import telegram_api

SEND = "farmpro.services.telegram_bot.telegram_api.send_message"


def update(text, user_id=5550001, username="alice"):
    return TelegramUpdate.model_validate(
        {
            "update_id": 1,
            "message": {
                "message_id": 10,
                "from": {"id": user_id, "first_name": "Alice", "username": username},
                "chat": {"id": user_id},
                "date": 1700000000,
                "text": text,
            },
        }
    )


def sent_text(send_message: MagicMock) -> str:
    return send_message.call_args.args[1]


class TestParseStartReferrer:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("/start ref_42", 42),
            ("/start", None),
            ("/start ref_", None),
            ("/start ref_abc", None),
            ("/start promo_42", None),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_start_referrer(text) == expected

    def test_money(self):
        assert money(Decimal("5000")) == "5,000.00"


class TestTelegramBotService:
    """Команды бота поверх хранилища в памяти"""

    @pytest.mark.asyncio
    async def test_start_creates_then_welcomes_back(self, store):
        with patch(SEND) as send_message:
            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/start"))
            assert "Welcome to Farming Pro!" in sent_text(send_message)
            assert "5,000.00 USDT" in sent_text(send_message)

            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/start"))
            assert "Welcome back to Farming Pro!" in sent_text(send_message)

        account = await MemoryUnitOfWork(store).accounts.get(telegram_id="5550001")
        assert account.username == "alice"

    @pytest.mark.asyncio
    async def test_start_with_referral(self, store, make_account):
        referrer = await make_account("1")
        with patch(SEND):
            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update(f"/start ref_{referrer.id}"))

        account = await MemoryUnitOfWork(store).accounts.get(telegram_id="5550001")
        assert account.referrer_id == referrer.id

    @pytest.mark.asyncio
    async def test_commands_require_account(self, store):
        with patch(SEND) as send_message:
            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/balance"))
        assert sent_text(send_message) == START_FIRST

    @pytest.mark.asyncio
    async def test_balance_farm_referral_help(self, store, make_account):
        await make_account("5550001")
        with patch(SEND) as send_message:
            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/balance"))
            assert "<b>Current:</b> 5,000.00 USDT" in sent_text(send_message)

            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/farm@usdtm1nerr_bot"))
            assert "Farming Pro Dashboard" in sent_text(send_message)

            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/referral"))
            assert "Level 1: 0 users (10%)" in sent_text(send_message)
            assert "Level 3: 0 users (2%)" in sent_text(send_message)

            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("/help"))
            assert sent_text(send_message) == HELP_TEXT

            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(update("hello"))
            assert "I don't understand that command" in sent_text(send_message)

    @pytest.mark.asyncio
    async def test_error_is_answered(self, store):
        service = TelegramBotService(MemoryUnitOfWork(store))
        with patch(SEND) as send_message, \
                patch.object(service.accounts, "get_or_create", side_effect=RuntimeError("boom")):
            await service.handle_update(update("/start"))
        assert sent_text(send_message) == SOMETHING_WRONG

    @pytest.mark.asyncio
    async def test_update_without_message(self, store):
        with patch(SEND) as send_message:
            await TelegramBotService(MemoryUnitOfWork(store)).handle_update(TelegramUpdate(update_id=2))
        send_message.assert_not_called()


class TestTelegramApi:
    def test_skips_without_token(self):
        with patch.object(settings, "TELEGRAM_BOT_TOKEN", ""), patch("requests.post") as post:
            assert telegram_api.send_message(1, "hi") is None
        post.assert_not_called()

    def test_send_message_payload(self):
        response = MagicMock()
        response.json.return_value = {"ok": True, "result": {}}
        with patch.object(settings, "TELEGRAM_BOT_TOKEN", "123:abc"), \
                patch("farmpro.utils.telegram_api.requests.post", return_value=response) as post:
            result = telegram_api.send_message(1, "hi", {"inline_keyboard": []})

        assert result == {"ok": True, "result": {}}
        url = post.call_args.args[0]
        assert url == f"{settings.TELEGRAM_API_URL}/bot123:abc/sendMessage"
        assert post.call_args.kwargs["json"] == {
            "chat_id": 1,
            "text": "hi",
            "parse_mode": "HTML",
            "reply_markup": {"inline_keyboard": []},
        }

    def test_network_error(self):
        with patch.object(settings, "TELEGRAM_BOT_TOKEN", "123:abc"), \
                patch("farmpro.utils.telegram_api.requests.post", side_effect=requests.exceptions.ConnectionError()):
            assert telegram_api.set_webhook("https://hook.example.com") is None
