from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field

from farmpro.models.base_model import BaseModel

MONEY = {"max_digits": 18, "decimal_places": 2}


class Account(BaseModel, table=True):
    """
    Модель аккаунта для таблицы `accounts`.

    Таблица:
    - id                 int [pk, increment] - Уникальный идентификатор
    - telegram_id        varchar(64) [unique] - Внешний идентификатор (Telegram ID)
    - username           varchar(255) - Имя пользователя Telegram (опционально)
    - balance            numeric(18, 2) - Текущий баланс USDT
    - total_earned       numeric(18, 2) - Заработано фармингом
    - referral_earnings  numeric(18, 2) - Реферальные начисления
    - total_deposited    numeric(18, 2) - Сумма всех депозитов
    - total_withdrawn    numeric(18, 2) - Сумма всех выводов
    - has_first_deposit  boolean - Первый депозит >= $5 сделан (вывод разрешён)
    - referrer_id        int [ref: > accounts.id] - Кто пригласил (задаётся один раз)
    - farming_start_time datetime - Начало текущей сессии фарминга
    - farming_end_time   datetime - Конец текущей сессии фарминга
    - farming_rate       numeric(18, 2) - USDT в час
    - boost_multiplier   numeric(6, 2) - Множитель последнего купленного буста
    - boost_end_time     datetime - Окончание действия буста
    - is_active          boolean
    """

    __tablename__ = "accounts"

    telegram_id: str = Field(max_length=64, unique=True, description="Telegram ID")
    username: Optional[str] = Field(default=None, description="Telegram username")
    balance: Decimal = Field(default=Decimal("0.00"), **MONEY, description="Balance in USDT")
    total_earned: Decimal = Field(default=Decimal("0.00"), **MONEY)
    referral_earnings: Decimal = Field(default=Decimal("0.00"), **MONEY)
    total_deposited: Decimal = Field(default=Decimal("0.00"), **MONEY)
    total_withdrawn: Decimal = Field(default=Decimal("0.00"), **MONEY)
    has_first_deposit: bool = Field(default=False)
    referrer_id: Optional[int] = Field(default=None, foreign_key="accounts.id", description="Referrer account ID")
    farming_start_time: Optional[datetime] = Field(default=None)
    farming_end_time: Optional[datetime] = Field(default=None)
    farming_rate: Decimal = Field(default=Decimal("120.00"), **MONEY, description="USDT per hour")
    boost_multiplier: Decimal = Field(default=Decimal("1.00"), max_digits=6, decimal_places=2)
    boost_end_time: Optional[datetime] = Field(default=None)
    is_active: bool = Field(default=True)

    __table_args__ = (Index("ix_accounts_referrer_id", "referrer_id"),)

    def __repr__(self):
        return f"<Account id={self.id} telegram_id={self.telegram_id} balance={self.balance}>"

    def __str__(self):
        return f"{self.username or self.telegram_id}"
