"""Shared fixtures for PoupaZap tests."""

import asyncio

import pytest

from poupazap.config import DEFAULT_CATEGORIES
from poupazap.dialogue import DialogueMachine, Session
from poupazap.services import InMemoryStorage, StorageError


class FailingWritesStorage(InMemoryStorage):
    """Storage whose writes always fail."""

    async def add_transaction(self, user_id, **kwargs):
        raise StorageError("database is down")

    async def set_monthly_budget(self, user_id, amount):
        raise StorageError("database is down")

    async def create_goal(self, user_id, **kwargs):
        raise StorageError("database is down")


class SlowStorage(InMemoryStorage):
    """Storage that yields to the event loop on every card lookup."""

    async def get_credit_cards(self, user_id):
        await asyncio.sleep(0.01)
        return await super().get_credit_cards(user_id)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def machine(storage):
    return DialogueMachine(storage)


@pytest.fixture
def session():
    return Session(id=7, categories=list(DEFAULT_CATEGORIES))


@pytest.fixture
def send(machine, session):
    """Feed messages to the machine one by one and return the last reply."""

    def _send(*messages):
        reply = ""
        for message in messages:
            reply = asyncio.run(machine.process_command(session, message))
        return reply

    return _send
