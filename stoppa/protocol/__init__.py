"""Protocol module for driver <-> table message handling."""
from .messages import (
    ClientMessage,
    HandResultMessage,
    ActionMessage,
    GameStateMessage,
    parse_client_message,
    parse_command,
)
from .handlers import MessageHandler

__all__ = [
    "ClientMessage",
    "HandResultMessage",
    "ActionMessage",
    "GameStateMessage",
    "parse_client_message",
    "parse_command",
    "MessageHandler",
]
