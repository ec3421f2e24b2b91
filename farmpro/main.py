import sentry_sdk
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from starlette.responses import JSONResponse

from farmpro.api import routes
from farmpro.api.deps import get_redis_client
from farmpro.core.config import settings
from farmpro.utils.logger import init_logger, get_logger

# Инициализация loguru логирования
init_logger()
logger = get_logger(__name__)

if settings.SENTRY_DSN:
    # loguru integration stays off, loguru already writes its own sinks
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        auto_enabling_integrations=False,
        integrations=[
            FastApiIntegration(),
            AsyncioIntegration(),
        ],
    )
    logger.success("Sentry initialized")
else:
    logger.info("SENTRY_DSN is not set, running without Sentry")

app = FastAPI(
    title="Farming Pro API",
    description="Backend of the Farming Pro Telegram Mini App",
    version=settings.VERSION,
    openapi_url=f"/{settings.API_PREFIX}/openapi.json",
)


async def on_startup() -> None:
    if settings.REDIS_URL:
        redis_client = await get_redis_client()
        FastAPICache.init(RedisBackend(redis_client), prefix="fastapi-cache")
    else:
        FastAPICache.init(InMemoryBackend(), prefix="fastapi-cache")
    logger.info(f"FastAPI app running with {settings.STORAGE_BACKEND} storage...")


list_of_domens = [
    # "http://localhost:5173",
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list_of_domens,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_event_handler("startup", on_startup)

app.include_router(routes.home_router)
app.include_router(routes.api_router, prefix=f"/{settings.API_PREFIX}")


# Error handler
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "message": exc.detail
        }
    )


if __name__ == "__main__":
    uvicorn.run("farmpro.main:app", reload=True)
