"""Per-user conversational context."""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from poupazap.dialogue.states import INITIAL_STATE, DialogueState


@dataclass(slots=True)
class Session:
    """State, scratch data and profile fields of one user.

    ``current_state`` is kept as the raw persisted name so that sessions saved
    by an older release with a state that no longer exists still load; the
    dialogue machine recovers them on the next message.
    """

    id: int
    current_state: str = INITIAL_STATE.value
    temp_data: dict[str, Any] = field(default_factory=dict)
    categories: list[str] = field(default_factory=list)
    monthly_budget: Decimal = Decimal(0)

    def transition(self, state: DialogueState) -> None:
        self.current_state = state.value

    def reset(self) -> None:
        """Return to the main menu and forget any half-finished entry."""

        self.current_state = INITIAL_STATE.value
        self.temp_data = {}

    def snapshot(self) -> "Session":
        return copy.deepcopy(self)

    def restore(self, snapshot: "Session") -> None:
        self.current_state = snapshot.current_state
        self.temp_data = snapshot.temp_data
        self.categories = snapshot.categories
        self.monthly_budget = snapshot.monthly_budget

    def temp_decimal(self, key: str) -> Decimal | None:
        """Return an amount stored in ``temp_data`` as a Decimal."""

        raw = self.temp_data.get(key)
        if raw is None:
            return None
        try:
            return Decimal(str(raw))
        except InvalidOperation:
            return None

    def to_data(self) -> dict[str, Any]:
        """Return a plain mapping suitable for an FSM storage backend."""

        return {
            "temp": dict(self.temp_data),
            "categories": list(self.categories),
            "monthly_budget": str(self.monthly_budget),
        }

    @classmethod
    def from_data(
        cls,
        session_id: int,
        *,
        state: str | None,
        data: Mapping[str, Any],
        default_categories: Sequence[str],
    ) -> "Session":
        """Rebuild a session from stored state and data; seed new users."""

        categories = data.get("categories")
        try:
            budget = Decimal(str(data.get("monthly_budget", "0")))
        except InvalidOperation:
            budget = Decimal(0)
        return cls(
            id=session_id,
            current_state=state or INITIAL_STATE.value,
            temp_data=dict(data.get("temp") or {}),
            categories=list(categories) if categories else list(default_categories),
            monthly_budget=budget,
        )


__all__ = ["Session"]
