from decimal import Decimal
from enum import Enum

from sqlmodel import Field

from farmpro.models.base_model import BaseModel


class TransactionKind(str, Enum):
    """
    BONUS is the welcome grant of a new account. It is journaled like any
    other credit, so balance equals the journal sum from the first entry.
    """

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    FARMING = "farming"
    TASK = "task"
    REFERRAL = "referral"
    BOOST = "boost"
    BONUS = "bonus"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Transaction(BaseModel, table=True):
    """
    Модель для таблицы `transactions` (журнал, только добавление).

    Таблица:
    - id          int [pk, increment] - Уникальный идентификатор
    - account_id  int [ref: > accounts.id] - Аккаунт, баланс которого изменён
    - kind        enum('deposit', 'withdrawal', 'farming', 'task', 'referral', 'boost', 'bonus')
    - amount      numeric(18, 2) - Сумма со знаком (списания отрицательные)
    - description text - Описание операции
    - status      enum('pending', 'completed', 'failed') - Статус транзакции
    """

    __tablename__ = "transactions"

    account_id: int = Field(foreign_key="accounts.id", index=True, description="ID of the account")
    kind: str = Field(
        ...,
        max_length=16,
        index=True,
        description="Kind of the transaction (deposit, withdrawal, farming, task, referral, boost, bonus)",
    )
    amount: Decimal = Field(..., max_digits=18, decimal_places=2, description="Signed amount")
    description: str = Field(default="", description="Human readable description")
    status: str = Field(
        default=TransactionStatus.COMPLETED.value,
        max_length=16,
        index=True,
        description="Status of the transaction (pending, completed, failed)",
    )

    def __repr__(self):
        return (
            f"<Transaction id={self.id} account_id={self.account_id} amount={self.amount} "
            f"kind={self.kind} status={self.status}>"
        )
