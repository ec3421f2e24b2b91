from typing import Any, Dict, Optional

import requests

from farmpro.core.config import settings
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

TIMEOUT = 10


def _method_url(method: str) -> str:
    return f"{settings.TELEGRAM_API_URL}/bot{settings.TELEGRAM_BOT_TOKEN}/{method}"


def _post(method: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.warning(f"TELEGRAM_BOT_TOKEN is not set, skipping {method}")
        return None
    try:
        response = requests.post(_method_url(method), json=payload, timeout=TIMEOUT)
        data = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Telegram {method} failed: {e}")
        return None

    if not data.get("ok"):
        logger.error(f"Telegram {method} error: {data.get('description')}")
    return data


def send_message(chat_id: int, text: str, keyboard: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    payload: Dict[str, Any] = {"chat_id": chat_id, "text": text, "parse_mode": "HTML"}
    if keyboard is not None:
        payload["reply_markup"] = keyboard
    return _post("sendMessage", payload)


def set_webhook(webhook_url: str) -> Optional[Dict[str, Any]]:
    return _post("setWebhook", {"url": webhook_url, "allowed_updates": ["message"]})
