from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from farmpro.utils.clock import utcnow

T = TypeVar("T")


class IResponseBase(BaseModel, Generic[T]):
    message: str = ""
    meta: Optional[Dict[str, Any]] = {}
    query_time: datetime = Field(default_factory=utcnow)
    data: Optional[T] = None


class IGetResponseBase(IResponseBase[T], Generic[T]):
    message: str = "Success"
    data: Optional[T] = None


class IPostResponseBase(IResponseBase[T], Generic[T]):
    message: str = "Created successfully"
