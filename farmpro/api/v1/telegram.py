from fastapi import APIRouter, Depends

from farmpro.api.deps import get_uow
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.telegram import TelegramUpdate
from farmpro.services.telegram_bot import TelegramBotService

router = APIRouter()


@router.post("/webhook", summary="Telegram bot webhook")
async def telegram_webhook(
        update: TelegramUpdate,
        uow: IUnitOfWork = Depends(get_uow),
):
    await TelegramBotService(uow).handle_update(update)
    return {"ok": True}
