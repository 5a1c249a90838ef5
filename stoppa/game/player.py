"""Player model."""
from dataclasses import dataclass, field
from typing import Optional

from stoppa.config import config
from stoppa.game.deck import Card

# Stored bet of a player who folded in the current betting cycle
FOLDED = -1


@dataclass
class Player:
    """A seat at the Stoppa table."""
    
    index: int
    name: str
    is_human: bool = False
    profile: Optional[str] = None  # Risk-profile tag for agents
    fiches: int = field(default_factory=lambda: config.starting_fiches)
    cards: list[Card] = field(default_factory=list)
    previous_cards: list[Card] = field(default_factory=list)
    current_bet: int = 0
    folded: bool = False
    declaration: Optional[int] = None
    
    def reset_for_new_round(self) -> None:
        """Clear everything scoped to a round. Chips and identity persist."""
        self.cards = []
        self.previous_cards = []
        self.reset_for_new_cycle()
    
    def reset_for_new_cycle(self) -> None:
        """Clear the book-keeping of a single betting cycle."""
        self.current_bet = 0
        self.folded = False
        self.declaration = None
    
    def pay(self, amount: int) -> int:
        """Move chips into the current bet, never more than the balance.
        
        Args:
            amount: Requested amount.
            
        Returns:
            Actual amount paid (less than requested when going all-in).
        """
        actual = max(0, min(amount, self.fiches))
        self.fiches -= actual
        self.current_bet += actual
        return actual
    
    def fold(self) -> None:
        """Fold for the rest of the betting cycle."""
        self.folded = True
        self.current_bet = FOLDED
    
    def receive_cards(self, cards: list[Card]) -> None:
        """Add dealt cards to the current-phase hand."""
        self.cards.extend(cards)
    
    def collect_cards(self) -> None:
        """Move the current-phase cards into the accumulated set."""
        self.previous_cards.extend(self.cards)
        self.cards = []
    
    def win_pot(self, amount: int) -> None:
        """Win chips from the pot."""
        self.fiches += amount
    
    @property
    def is_agent(self) -> bool:
        return not self.is_human
    
    @property
    def is_active(self) -> bool:
        """Check if player is still in the current betting cycle."""
        return not self.folded
    
    @property
    def is_all_in(self) -> bool:
        return self.is_active and self.fiches == 0
    
    def to_dict(self, hide_cards: bool = True) -> dict:
        """Convert to dictionary for serialization.
        
        Args:
            hide_cards: If True, only revealed cards are included.
            
        Returns:
            Player state dictionary.
        """
        def _cards(cards: list[Card]) -> list[dict]:
            return [c.to_dict() for c in cards if c.visible or not hide_cards]
        
        return {
            "index": self.index,
            "name": self.name,
            "is_human": self.is_human,
            "profile": self.profile,
            "fiches": self.fiches,
            "current_bet": self.current_bet,
            "folded": self.folded,
            "declaration": self.declaration,
            "card_count": len(self.cards),
            "cards": _cards(self.cards),
            "previous_cards": _cards(self.previous_cards),
        }
