from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from farmpro.models import TransactionStatus


class STransactionRead(BaseModel):
    id: int = Field(..., description="Unique transaction ID")
    account_id: int = Field(..., description="ID of the account associated with the transaction")
    kind: str = Field(..., description="deposit, withdrawal, farming, task, referral, boost, bonus")
    amount: Decimal = Field(..., description="Signed amount, debits are negative")
    description: str = Field("", description="Human readable description")
    status: str = Field(..., description="Status of the transaction (pending, completed, failed)")
    created_at: datetime = Field(..., description="Timestamp of the transaction")
    updated_at: Optional[datetime] = Field(None, description="Timestamp of the last status change")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "account_id": 1,
                "kind": "farming",
                "amount": "480.00",
                "description": "Farming completed: 4h × 120.00 USDT/h × 1.00x",
                "status": "completed",
                "created_at": "2024-01-01T00:00:00",
                "updated_at": "2024-01-01T00:00:00",
            }
        }


class STransactionStatusUpdate(BaseModel):
    status: TransactionStatus = Field(..., description="New status (completed or failed)")


class SAmountRequest(BaseModel):
    account_id: int = Field(..., description="ID of the account")
    amount: str = Field(..., description="Amount as a decimal string, e.g. \"12.50\"")

    @field_validator("amount", mode="before")
    def amount_to_str(cls, v: Any) -> Any:
        # numbers from JSON are kept as text, parsing to Decimal is done by the ledger
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v


class SLedgerReconciliation(BaseModel):
    account_id: int
    balance: Decimal
    journal_total: Decimal
    consistent: bool
