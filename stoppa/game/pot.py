"""Carry-over pot and current-hand pot."""
from dataclasses import dataclass

from stoppa.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Pot:
    """Chips in the middle of the table.
    
    ``carry`` holds the round's antes and survives across phases; ``hand``
    collects the bets of the current betting cycle and goes to its winner.
    """
    
    carry: int = 0
    hand: int = 0
    
    def add_ante(self, amount: int) -> None:
        """Add an ante to the carry-over pot."""
        self.carry += amount
    
    def add_bet(self, amount: int) -> None:
        """Add chips actually paid to the current-hand pot."""
        if amount <= 0:
            return
        self.hand += amount
    
    def reset_hand(self) -> None:
        """Start a new betting cycle."""
        self.hand = 0
    
    def payout(self, final: bool) -> int:
        """Empty the hand pot for the winner.
        
        Before the final phase the winner also takes a single chip of the
        carry-over pot; in the final phase the whole carry-over pot.
        
        Args:
            final: Whether this is the last phase of the round.
            
        Returns:
            Chips won.
        """
        amount = self.hand
        if final:
            amount += self.carry
            self.carry = 0
        elif self.carry > 0:
            amount += 1
            self.carry -= 1
        
        logger.debug(f"Payout {amount} (carry left {self.carry})")
        self.reset_hand()
        return amount
    
    def get_total(self) -> int:
        """Get total chips in the middle."""
        return self.carry + self.hand
    
    def to_dict(self) -> dict:
        """Convert to the state view's pot fields."""
        return {
            "pot": self.carry,
            "hand_pot": self.hand,
        }
