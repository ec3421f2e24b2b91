from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from farmpro.models.base_model import BaseModel


class Referral(BaseModel, table=True):
    """
    Модель для таблицы `referrals`.

    Таблица:
    - id           int [pk, increment]
    - referrer_id  int [ref: > accounts.id] - Кто получает комиссию
    - referred_id  int [ref: > accounts.id] - Новый аккаунт
    - level        int - 1 = прямой реферал, 2 и 3 = вышестоящие
    - commission   numeric(6, 2) - Процент комиссии на момент создания
    """

    __tablename__ = "referrals"

    referrer_id: int = Field(foreign_key="accounts.id", index=True)
    referred_id: int = Field(foreign_key="accounts.id", index=True)
    level: int = Field(..., ge=1, le=3, index=True)
    commission: Decimal = Field(default=Decimal("0"), max_digits=6, decimal_places=2, description="Percent")

    __table_args__ = (
        UniqueConstraint("referrer_id", "referred_id", "level", name="uq_referrals_referrer_referred_level"),
    )

    def __repr__(self):
        return (
            f"<Referral referrer_id={self.referrer_id} referred_id={self.referred_id} "
            f"level={self.level} commission={self.commission}>"
        )
