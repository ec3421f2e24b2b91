from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FarmingState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    CLAIMABLE = "claimable"


class SFarmingRequest(BaseModel):
    account_id: int = Field(..., description="ID of the account")


class SFarmingStatus(BaseModel):
    state: FarmingState
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    seconds_remaining: int = Field(0, description="Seconds until the session can be claimed")
    farming_rate: Decimal = Field(..., description="USDT per hour")
    multiplier: Decimal = Field(..., description="Boost multiplier that a claim would use now")
    projected_reward: Optional[Decimal] = Field(None, description="Reward of the open session")

    class Config:
        json_schema_extra = {
            "example": {
                "state": "running",
                "start_time": "2024-01-01T00:00:00",
                "end_time": "2024-01-01T04:00:00",
                "seconds_remaining": 3600,
                "farming_rate": "120.00",
                "multiplier": "2.00",
                "projected_reward": "960.00",
            }
        }
