from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SSettingRead(BaseModel):
    key: str
    value: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SSettingUpdate(BaseModel):
    value: str = Field(..., max_length=1024)
