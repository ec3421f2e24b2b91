from .account import Account
from .boost import Boost, BoostPurchase
from .referral import Referral
from .setting import Setting
from .task import Task, TaskCompletion
from .transaction import Transaction, TransactionKind, TransactionStatus

__all__ = [
    "Account",
    "Boost",
    "BoostPurchase",
    "Referral",
    "Setting",
    "Task",
    "TaskCompletion",
    "Transaction",
    "TransactionKind",
    "TransactionStatus",
]
