from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class SWithdrawalCheck(BaseModel):
    can_withdraw: bool = Field(..., description="All withdrawal requirements are met")
    reason: Optional[str] = Field(None, description="First failed requirement")

    class Config:
        json_schema_extra = {
            "example": {
                "can_withdraw": False,
                "reason": "Minimum withdrawal is $12",
            }
        }


class SAdminStats(BaseModel):
    total_users: int
    total_balance: Decimal = Field(..., description="Sum of all balances in USDT")
    active_farmers: int = Field(..., description="Accounts with an open farming window")
    pending_withdrawals: int
