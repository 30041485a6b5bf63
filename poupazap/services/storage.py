"""Storage collaborator contract used by the dialogue handlers.

The dialogue layer never talks to a database directly. It depends on the
:class:`Storage` protocol below; any backend that implements these coroutines
can be plugged into :class:`poupazap.dialogue.machine.DialogueMachine`.
Implementations must raise :class:`StorageError` for any failure so handlers
can turn it into a user-facing apology.
"""

from __future__ import annotations

import datetime as dt
import enum
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol


def utcnow() -> dt.datetime:
    """Return current UTC datetime without timezone info."""

    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class StorageError(RuntimeError):
    """Raised by storage backends when an operation cannot be completed."""


class TransactionType(str, enum.Enum):
    """Direction of a money movement."""

    EXPENSE = "expense"
    INCOME = "income"


@dataclass(slots=True)
class CreditCard:
    """A credit card registered by the user under a nickname."""

    id: int
    nickname: str


@dataclass(slots=True)
class Transaction:
    """A single income or expense entry."""

    id: int
    user_id: int
    type: TransactionType
    amount: Decimal
    category: str
    description: str | None = None
    card_id: int | None = None
    card_name: str | None = None
    is_voice: bool = False
    created_at: dt.datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class MonthlyBalance:
    """Income and expense totals for the current month."""

    income: Decimal
    expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


@dataclass(slots=True)
class Goal:
    """A savings goal split into equal monthly targets."""

    id: int
    user_id: int
    name: str
    target_value: Decimal
    months: int
    monthly_target: Decimal
    created_at: dt.datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class ScheduledExpense:
    """An expense expected every month on a given day."""

    id: int
    user_id: int
    amount: Decimal
    category: str
    day_of_month: int


class Storage(Protocol):
    """Asynchronous persistence operations the dialogue relies on."""

    async def add_transaction(
        self,
        user_id: int,
        *,
        type: TransactionType,
        amount: Decimal,
        category: str,
        description: str | None,
        card_id: int | None = None,
        is_voice: bool = False,
    ) -> Transaction:
        ...

    async def get_recent_transactions(self, user_id: int, *, limit: int) -> list[Transaction]:
        ...

    async def get_monthly_balance(self, user_id: int) -> MonthlyBalance:
        ...

    async def get_category_expenses(
        self, user_id: int, categories: Sequence[str]
    ) -> dict[str, Decimal]:
        ...

    async def get_credit_cards(self, user_id: int) -> list[CreditCard]:
        ...

    async def add_credit_card(self, user_id: int, *, nickname: str) -> CreditCard:
        ...

    async def remove_credit_card(self, user_id: int, *, card_id: int) -> None:
        ...

    async def set_monthly_budget(self, user_id: int, amount: Decimal) -> None:
        ...

    async def create_goal(
        self,
        user_id: int,
        *,
        name: str,
        target_value: Decimal,
        months: int,
        monthly_target: Decimal,
    ) -> Goal:
        ...

    async def add_scheduled_expense(
        self,
        user_id: int,
        *,
        amount: Decimal,
        category: str,
        day_of_month: int,
    ) -> ScheduledExpense:
        ...


__all__ = [
    "CreditCard",
    "Goal",
    "MonthlyBalance",
    "ScheduledExpense",
    "Storage",
    "StorageError",
    "Transaction",
    "TransactionType",
    "utcnow",
]
