"""Pydantic message schemas exchanged between a driver and a table."""
from typing import Optional, Literal, Union
from pydantic import BaseModel, Field


# ============= Driver -> Table Messages =============

class StartRoundMessage(BaseModel):
    """Start a new round (antes, shuffle, new dealer)."""
    type: Literal["start_round"] = "start_round"


class DealChoiceMessage(BaseModel):
    """Dealer's initial split."""
    type: Literal["deal_choice"] = "deal_choice"
    choice: int = 3


class ActionMessage(BaseModel):
    """Betting action (fold, call, raise)."""
    type: Literal["action"] = "action"
    action: Literal["fold", "call", "raise"]
    amount: int = 0


class DeclareMessage(BaseModel):
    """Declared score while talking or declaring."""
    type: Literal["declare"] = "declare"
    score: int = Field(default=0, description="Declared primiera score")


class GetStateMessage(BaseModel):
    """Request the current state without acting."""
    type: Literal["get_state"] = "get_state"


ClientMessage = Union[
    StartRoundMessage,
    DealChoiceMessage,
    ActionMessage,
    DeclareMessage,
    GetStateMessage,
]


# ============= Table -> Driver Messages =============

class ErrorMessage(BaseModel):
    """Error response."""
    type: Literal["error"] = "error"
    message: str
    code: Optional[str] = None


class HandResultMessage(BaseModel):
    """Outcome of the last resolved hand."""
    type: Literal["hand_result"] = "hand_result"
    phase: int
    winner: int
    winner_name: str
    amount: int
    reason: str
    score: int
    revealed: list[str]


class GameStateMessage(BaseModel):
    """Full table state from one seat's perspective."""
    type: Literal["game_state"] = "game_state"
    state: str
    round_number: int
    phase: int
    dealer_seat: int
    current_seat: int
    deal_choice: int
    pot: int
    hand_pot: int
    current_bet: int
    last_raiser: Optional[int]
    players: list[dict]
    valid_actions: list[str]
    call_amount: int
    min_raise: int
    message: str
    last_result: Optional[HandResultMessage] = None


def parse_client_message(data: dict) -> ClientMessage:
    """Parse a driver message from a dict.
    
    Args:
        data: Message data dictionary.
        
    Returns:
        Parsed message.
        
    Raises:
        ValueError: If message type is unknown or invalid.
    """
    msg_type = data.get("type")
    
    type_map = {
        "start_round": StartRoundMessage,
        "deal_choice": DealChoiceMessage,
        "action": ActionMessage,
        "declare": DeclareMessage,
        "get_state": GetStateMessage,
    }
    
    if msg_type not in type_map:
        raise ValueError(f"Unknown message type: {msg_type}")
    
    return type_map[msg_type](**data)


def parse_command(line: str) -> dict:
    """Turn a typed command such as ``raise 5`` into a message dict.
    
    Raises:
        ValueError: If the command is not recognised.
    """
    parts = line.strip().lower().split()
    if not parts:
        raise ValueError("Empty command")
    
    command, args = parts[0], parts[1:]
    
    def _int_arg(default: int) -> int:
        if not args:
            return default
        try:
            return int(args[0])
        except ValueError:
            raise ValueError(f"Expected a number, got {args[0]!r}")
    
    if command in ("fold", "call", "check"):
        return {"type": "action", "action": "call" if command == "check" else command}
    if command == "raise":
        return {"type": "action", "action": "raise", "amount": _int_arg(0)}
    if command == "deal":
        return {"type": "deal_choice", "choice": _int_arg(3)}
    if command == "declare":
        return {"type": "declare", "score": _int_arg(0)}
    if command in ("start", "next"):
        return {"type": "start_round"}
    if command == "state":
        return {"type": "get_state"}
    raise ValueError(f"Unknown command: {command}")
