from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from farmpro.schemas.boost import SBoostPurchaseRead
from farmpro.schemas.farming import SFarmingStatus
from farmpro.schemas.referral import SReferralStats


class SAccountCreate(BaseModel):
    telegram_id: str = Field(..., min_length=1, max_length=64, description="Telegram ID")
    username: Optional[str] = Field(None, description="Telegram username")
    referrer_id: Optional[int] = Field(None, description="ID of the inviting account")

    @field_validator("telegram_id", mode="before")
    def telegram_id_to_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class SAccountRead(BaseModel):
    id: int = Field(..., description="Unique account ID")
    telegram_id: str = Field(..., description="Telegram ID")
    username: Optional[str] = Field(None, description="Telegram username")
    balance: Decimal = Field(..., description="Balance in USDT")
    total_earned: Decimal = Field(..., description="Earned by farming")
    referral_earnings: Decimal = Field(...)
    total_deposited: Decimal = Field(...)
    total_withdrawn: Decimal = Field(...)
    has_first_deposit: bool = Field(False, description="Withdrawals unlocked by a first deposit of $5")
    referrer_id: Optional[int] = Field(None, description="ID of the referrer")
    farming_start_time: Optional[datetime] = None
    farming_end_time: Optional[datetime] = None
    farming_rate: Decimal = Field(..., description="USDT per hour")
    boost_multiplier: Decimal = Field(...)
    boost_end_time: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime = Field(..., description="Timestamp of the account creation")
    updated_at: Optional[datetime] = Field(None, description="Timestamp of the account update")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "telegram_id": "123456789",
                "username": "demo_user",
                "balance": "5000.00",
                "total_earned": "0.00",
                "referral_earnings": "0.00",
                "total_deposited": "0.00",
                "total_withdrawn": "0.00",
                "has_first_deposit": False,
                "referrer_id": None,
                "farming_start_time": None,
                "farming_end_time": None,
                "farming_rate": "120.00",
                "boost_multiplier": "1.00",
                "boost_end_time": None,
                "is_active": True,
                "created_at": "2024-01-01T00:00:00",
                "updated_at": "2024-01-01T00:00:00",
            }
        }


class SAccountSummary(BaseModel):
    account: SAccountRead
    farming: SFarmingStatus
    active_boost: Optional[SBoostPurchaseRead] = None
    referral_stats: SReferralStats
    referral_link: str = Field(..., description="Telegram referral link")
