from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class STaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: str = Field("", description="Task description")
    reward: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, description="Reward in USDT")
    category: str = Field("telegram", max_length=32, description="telegram, instagram, youtube, ...")
    url: Optional[str] = Field(None, description="External link")
    icon: Optional[str] = Field(None, description="Icon name for the UI")


class STaskCreate(STaskBase):
    pass


class STaskUpdate(BaseModel):
    is_active: bool = Field(..., description="Show or hide the task")


class STaskRead(STaskBase):
    id: int = Field(..., description="Unique task ID")
    is_active: bool = Field(True)
    created_at: datetime

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "title": "Follow our Telegram",
                "description": "Join our official Telegram channel for updates",
                "reward": "50.00",
                "category": "telegram",
                "url": "https://t.me/farmingpro_official",
                "icon": "MessageCircle",
                "is_active": True,
                "created_at": "2024-01-01T00:00:00",
            }
        }


class STaskCompletionRead(BaseModel):
    id: int
    account_id: int
    task_id: int
    completed_at: datetime

    class Config:
        from_attributes = True
