import os
import sys

from loguru import logger

from farmpro.core.config import settings

_initialized = False


def init_logger():
    """
    Инициализация логера: консоль + файлы с ротацией и сжатием.
    Повторный вызов ничего не делает, файловые sink'и отключаются через LOG_TO_FILE.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    # Консольный вывод с цветами
    logger.remove()
    logger.add(
        sink=sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.LOG_LEVEL,
        colorize=True,
    )

    if not settings.LOG_TO_FILE:
        logger.info("File logging disabled")
        return

    os.makedirs("logs", exist_ok=True)

    # Общий лог файл для всех сообщений
    logger.add(
        sink="logs/app.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}",
        rotation="30 days",
        retention="90 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
        enqueue=True,
        level="DEBUG",
    )

    # Отдельный файл для ошибок
    logger.add(
        sink="logs/errors.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}",
        rotation="30 days",
        retention="90 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
        enqueue=True,
        level="ERROR",
    )

    # Все изменения балансов (ledger)
    logger.add(
        sink="logs/ledger.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        rotation="7 days",
        retention="180 days",
        compression="zip",
        enqueue=True,
        level="INFO",
        filter=lambda record: record["extra"].get("name", "").endswith("ledger"),
    )

    # API запросы
    logger.add(
        sink="logs/api.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}",
        rotation="7 days",
        retention="30 days",
        compression="zip",
        enqueue=True,
        level="INFO",
        filter=lambda record: record["name"].startswith("farmpro.api"),
    )

    logger.success("Logger initialized successfully")


def get_logger(name: str = None):
    """
    Получить логер для конкретного модуля.

    Args:
        name: Имя модуля для логера

    Returns:
        logger: Настроенный логер
    """
    if name:
        return logger.bind(name=name)
    return logger
