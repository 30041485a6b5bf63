"""Collaborator contracts and the in-memory storage backend."""

from .memory import InMemoryStorage
from .storage import (
    CreditCard,
    Goal,
    MonthlyBalance,
    ScheduledExpense,
    Storage,
    StorageError,
    Transaction,
    TransactionType,
)
from .transcription import Transcriber

__all__ = [
    "CreditCard",
    "Goal",
    "InMemoryStorage",
    "MonthlyBalance",
    "ScheduledExpense",
    "Storage",
    "StorageError",
    "Transaction",
    "TransactionType",
    "Transcriber",
]
