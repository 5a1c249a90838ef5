"""Message handlers binding a driver seat to a table."""
from typing import Optional

from pydantic import ValidationError

from stoppa.protocol.messages import (
    parse_client_message,
    ClientMessage,
    StartRoundMessage,
    DealChoiceMessage,
    ActionMessage,
    DeclareMessage,
    GetStateMessage,
    ErrorMessage,
    GameStateMessage,
)
from stoppa.game.table import Table
from stoppa.utils.logger import get_logger

logger = get_logger(__name__)


class MessageHandler:
    """Validates driver messages and applies them for one seat."""
    
    def __init__(self, table: Table, seat: Optional[int] = None):
        """Initialize handler.
        
        Args:
            table: The table to drive.
            seat: The human seat this handler speaks for; None for a spectator.
        """
        self.table = table
        self.seat = seat
    
    async def handle(self, data: dict) -> dict:
        """Handle a raw message.
        
        Args:
            data: Message dictionary.
            
        Returns:
            Response dictionary (game state or error).
        """
        try:
            message = parse_client_message(data)
        except (ValueError, ValidationError) as e:
            logger.debug(f"Rejected message {data!r}: {e}")
            return ErrorMessage(message=str(e), code="INVALID_MESSAGE").model_dump()
        
        return await self.dispatch(message)
    
    async def dispatch(self, message: ClientMessage) -> dict:
        """Apply a parsed message to the table."""
        if isinstance(message, GetStateMessage):
            return self.state()
        
        if isinstance(message, StartRoundMessage):
            accepted = await self.table.start_round()
        elif isinstance(message, DealChoiceMessage):
            accepted = await self.table.set_deal_choice(message.choice, seat=self.seat)
        elif isinstance(message, ActionMessage):
            accepted = await self.table.step(message.action, message.amount, seat=self.seat)
        elif isinstance(message, DeclareMessage):
            accepted = self.seat is not None and await self.table.declare(self.seat, message.score)
        else:
            return ErrorMessage(message=f"Unhandled message {message.type}", code="INVALID_MESSAGE").model_dump()
        
        if not accepted:
            return ErrorMessage(
                message=f"Cannot {message.type.replace('_', ' ')} now ({self.table.state.value})",
                code="NOT_YOUR_TURN",
            ).model_dump()
        
        return self.state()
    
    def state(self) -> dict:
        """Current state from this seat's perspective."""
        return GameStateMessage(**self.table.get_state_for_player(self.seat)).model_dump()
