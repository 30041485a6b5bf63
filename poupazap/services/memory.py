"""In-process implementation of the :class:`~poupazap.services.storage.Storage` contract.

Data lives only as long as the process. It backs local runs of the bot and the
test-suite; production deployments provide their own backend.
"""

from __future__ import annotations

import datetime as dt
import itertools
import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import Decimal

from poupazap.services.storage import (
    CreditCard,
    Goal,
    MonthlyBalance,
    ScheduledExpense,
    StorageError,
    Transaction,
    TransactionType,
    utcnow,
)

logger = logging.getLogger(__name__)


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    """Return the total amount across the iterable of transactions."""

    return sum((transaction.amount for transaction in transactions), Decimal(0))


def _month_bounds(now: dt.datetime) -> tuple[dt.datetime, dt.datetime]:
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    next_month = (start + dt.timedelta(days=32)).replace(day=1)
    return start, next_month


class InMemoryStorage:
    """Dictionary backed storage keyed by user id."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.transactions: dict[int, list[Transaction]] = defaultdict(list)
        self.cards: dict[int, list[CreditCard]] = defaultdict(list)
        self.goals: dict[int, list[Goal]] = defaultdict(list)
        self.scheduled_expenses: dict[int, list[ScheduledExpense]] = defaultdict(list)
        self.budgets: dict[int, Decimal] = {}

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
        card_name = None
        if card_id is not None:
            card = self._find_card(user_id, card_id)
            if card is None:
                raise StorageError(f"Card {card_id} does not belong to user {user_id}")
            card_name = card.nickname

        transaction = Transaction(
            id=next(self._ids),
            user_id=user_id,
            type=TransactionType(type),
            amount=amount,
            category=category,
            description=description or None,
            card_id=card_id,
            card_name=card_name,
            is_voice=is_voice,
        )
        self.transactions[user_id].append(transaction)
        logger.debug("Stored %s of %s for user %s", transaction.type.value, amount, user_id)
        return transaction

    async def get_recent_transactions(self, user_id: int, *, limit: int) -> list[Transaction]:
        ordered = sorted(
            self.transactions.get(user_id, []),
            key=lambda item: (item.created_at, item.id),
            reverse=True,
        )
        return ordered[:limit]

    async def get_monthly_balance(self, user_id: int) -> MonthlyBalance:
        current = self._current_month(user_id)
        return MonthlyBalance(
            income=sum_amounts(t for t in current if t.type is TransactionType.INCOME),
            expenses=sum_amounts(t for t in current if t.type is TransactionType.EXPENSE),
        )

    async def get_category_expenses(
        self, user_id: int, categories: Sequence[str]
    ) -> dict[str, Decimal]:
        totals = {category: Decimal(0) for category in categories}
        for transaction in self._current_month(user_id):
            if transaction.type is TransactionType.EXPENSE and transaction.category in totals:
                totals[transaction.category] += transaction.amount
        return totals

    async def get_credit_cards(self, user_id: int) -> list[CreditCard]:
        return list(self.cards.get(user_id, []))

    async def add_credit_card(self, user_id: int, *, nickname: str) -> CreditCard:
        card = CreditCard(id=next(self._ids), nickname=nickname)
        self.cards[user_id].append(card)
        return card

    async def remove_credit_card(self, user_id: int, *, card_id: int) -> None:
        card = self._find_card(user_id, card_id)
        if card is None:
            raise StorageError(f"Card {card_id} does not belong to user {user_id}")
        self.cards[user_id].remove(card)

    async def set_monthly_budget(self, user_id: int, amount: Decimal) -> None:
        self.budgets[user_id] = amount

    async def create_goal(
        self,
        user_id: int,
        *,
        name: str,
        target_value: Decimal,
        months: int,
        monthly_target: Decimal,
    ) -> Goal:
        goal = Goal(
            id=next(self._ids),
            user_id=user_id,
            name=name,
            target_value=target_value,
            months=months,
            monthly_target=monthly_target,
        )
        self.goals[user_id].append(goal)
        return goal

    async def add_scheduled_expense(
        self,
        user_id: int,
        *,
        amount: Decimal,
        category: str,
        day_of_month: int,
    ) -> ScheduledExpense:
        scheduled = ScheduledExpense(
            id=next(self._ids),
            user_id=user_id,
            amount=amount,
            category=category,
            day_of_month=day_of_month,
        )
        self.scheduled_expenses[user_id].append(scheduled)
        return scheduled

    def _find_card(self, user_id: int, card_id: int) -> CreditCard | None:
        for card in self.cards.get(user_id, []):
            if card.id == card_id:
                return card
        return None

    def _current_month(self, user_id: int) -> list[Transaction]:
        start, end = _month_bounds(utcnow())
        return [
            transaction
            for transaction in self.transactions.get(user_id, [])
            if start <= transaction.created_at < end
        ]


__all__ = ["InMemoryStorage", "sum_amounts"]
