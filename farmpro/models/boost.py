from datetime import datetime
from decimal import Decimal

from sqlmodel import Field

from farmpro.models.base_model import BaseModel
from farmpro.utils.clock import utcnow


class Boost(BaseModel, table=True):
    """Purchasable farming multiplier."""

    __tablename__ = "boosts"

    name: str = Field(max_length=255)
    description: str = Field(default="")
    multiplier: Decimal = Field(..., max_digits=6, decimal_places=2)
    duration_hours: int = Field(..., gt=0)
    price: Decimal = Field(..., max_digits=18, decimal_places=2)
    is_active: bool = Field(default=True)

    def __repr__(self):
        return f"<Boost id={self.id} name={self.name!r} x{self.multiplier} {self.duration_hours}h>"


class BoostPurchase(BaseModel, table=True):
    __tablename__ = "boost_purchases"

    account_id: int = Field(foreign_key="accounts.id", index=True)
    boost_id: int = Field(foreign_key="boosts.id", index=True)
    purchased_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime = Field(..., index=True)

    def __repr__(self):
        return f"<BoostPurchase account_id={self.account_id} boost_id={self.boost_id} expires_at={self.expires_at}>"
