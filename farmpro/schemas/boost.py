from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class SBoostBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("")
    multiplier: Decimal = Field(..., gt=0, max_digits=6, decimal_places=2, description="Farming multiplier")
    duration_hours: int = Field(..., gt=0, description="How long the boost lasts")
    price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2, description="Price in USDT")


class SBoostCreate(SBoostBase):
    pass


class SBoostUpdate(BaseModel):
    is_active: bool


class SBoostRead(SBoostBase):
    id: int
    is_active: bool = True

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Speed Boost",
                "description": "Double your farming speed for 24 hours",
                "multiplier": "2.00",
                "duration_hours": 24,
                "price": "100.00",
                "is_active": True,
            }
        }


class SBoostPurchaseRead(BaseModel):
    id: int
    account_id: int
    boost_id: int
    purchased_at: datetime
    expires_at: datetime

    class Config:
        from_attributes = True
