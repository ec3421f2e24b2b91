from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Setting
from farmpro.utils.clock import utcnow
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SETTINGS: Dict[str, str] = {
    "referral_level1_commission": "10",
    "referral_level2_commission": "5",
    "referral_level3_commission": "2",
    "deposit_enabled": "true",
    "withdrawal_enabled": "true",
}

TRUTHY = {"1", "true", "yes", "on"}


class SettingsService:
    """Flat key/value configuration with upsert semantics."""

    def __init__(self, uow: IUnitOfWork):
        self.uow = uow

    async def get(self, key: str) -> Optional[Setting]:
        return await self.uow.settings.first(key=key)

    async def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = await self.get(key)
        if setting is None:
            return default if default is not None else DEFAULT_SETTINGS.get(key)
        return setting.value

    async def get_decimal(self, key: str, default: Decimal = Decimal("0")) -> Decimal:
        value = await self.get_value(key)
        if value is None:
            return default
        try:
            return Decimal(value)
        except InvalidOperation:
            logger.warning(f"Setting {key}={value!r} is not a number, using {default}")
            return default

    async def get_bool(self, key: str) -> bool:
        value = await self.get_value(key)
        return (value or "").strip().lower() in TRUTHY

    async def set(self, key: str, value: str) -> Setting:
        setting = await self.uow.settings.first(key=key)
        if setting is None:
            setting = await self.uow.settings.add(Setting(key=key, value=value))
        else:
            setting.value = value
            setting.updated_at = utcnow()
        await self.uow.commit()
        logger.info(f"Setting {key} set to {value!r}")
        return setting

    async def list_settings(self) -> List[Setting]:
        return await self.uow.settings.all()

    async def seed_defaults(self) -> int:
        """Insert missing default settings, never overwrite existing ones."""
        created = 0
        for key, value in DEFAULT_SETTINGS.items():
            if await self.uow.settings.first(key=key) is None:
                await self.uow.settings.add(Setting(key=key, value=value))
                created += 1
        await self.uow.commit()
        return created
