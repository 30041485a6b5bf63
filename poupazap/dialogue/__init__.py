"""Dialogue state machine and the session model it drives."""

from .assistant import Assistant
from .machine import DialogueMachine
from .session import Session
from .states import INITIAL_STATE, MAIN_MENU_SENTINEL, DialogueState

__all__ = [
    "Assistant",
    "DialogueMachine",
    "DialogueState",
    "INITIAL_STATE",
    "MAIN_MENU_SENTINEL",
    "Session",
]
