from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse, Response

from farmpro.api.v1 import accounts, admin, boosts, farming, referrals, settings, tasks, telegram, wallet

home_router = APIRouter()


@home_router.get("/", response_description="Homepage", include_in_schema=False)
async def home() -> Response:
    return PlainTextResponse("Farming Pro API", status_code=status.HTTP_200_OK)


api_router = APIRouter()
api_router.include_router(accounts.router, tags=["Accounts"], prefix="/accounts")
api_router.include_router(referrals.router, tags=["Referrals"], prefix="/accounts")
api_router.include_router(farming.router, tags=["Farming"])
api_router.include_router(tasks.router, tags=["Tasks"])
api_router.include_router(boosts.router, tags=["Boosts"])
api_router.include_router(wallet.router, tags=["Wallet"])
api_router.include_router(admin.router, tags=["Admin"], prefix="/admin")
api_router.include_router(settings.router, tags=["Settings"], prefix="/settings")
api_router.include_router(telegram.router, tags=["Telegram"], prefix="/telegram")
