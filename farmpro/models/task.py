from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from farmpro.models.base_model import BaseModel
from farmpro.utils.clock import utcnow


class Task(BaseModel, table=True):
    """Social task from the catalog, rewarded once per account."""

    __tablename__ = "tasks"

    title: str = Field(max_length=255)
    description: str = Field(default="")
    reward: Decimal = Field(..., max_digits=18, decimal_places=2)
    category: str = Field(default="telegram", max_length=32, description="telegram, instagram, youtube, ...")
    url: Optional[str] = Field(default=None)
    icon: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)

    def __repr__(self):
        return f"<Task id={self.id} title={self.title!r} reward={self.reward}>"


class TaskCompletion(BaseModel, table=True):
    """At most one row per (account, task)."""

    __tablename__ = "task_completions"

    account_id: int = Field(foreign_key="accounts.id", index=True)
    task_id: int = Field(foreign_key="tasks.id", index=True)
    completed_at: datetime = Field(default_factory=utcnow)

    __table_args__ = (UniqueConstraint("account_id", "task_id", name="uq_task_completions_account_task"),)

    def __repr__(self):
        return f"<TaskCompletion account_id={self.account_id} task_id={self.task_id}>"
