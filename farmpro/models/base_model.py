from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from farmpro.utils.clock import utcnow


class BaseModel(SQLModel):
    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        index=True
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
    )
