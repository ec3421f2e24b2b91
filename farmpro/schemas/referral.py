from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class SReferralRead(BaseModel):
    id: int
    referrer_id: int = Field(..., description="Account that invited")
    referred_id: int = Field(..., description="Account that joined")
    level: int = Field(..., description="1 = direct referral, 2 and 3 = upstream")
    commission: Decimal = Field(..., description="Commission percent recorded at creation")
    created_at: datetime

    class Config:
        from_attributes = True


class SReferralStats(BaseModel):
    level1: int = 0
    level2: int = 0
    level3: int = 0
