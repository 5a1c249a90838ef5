"""Italian 40-card deck."""
import random
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class Suit(str, Enum):
    """Card suits, in scoring iteration order."""
    SPADE = "spade"
    BASTONI = "bastoni"
    COPPE = "coppe"
    DENARI = "denari"
    
    @property
    def initial(self) -> str:
        return self.value[0]
    
    def __str__(self) -> str:
        return self.value


RANKS = range(1, 11)

# Primiera point value of each rank
POINTS: dict[int, int] = {1: 16, 2: 12, 3: 13, 4: 14, 5: 15, 6: 18, 7: 21, 8: 10, 9: 10, 10: 10}


@dataclass(eq=False)
class Card:
    """A playing card.
    
    Suit and rank are fixed at creation; only ``visible`` changes, when the
    card is revealed at showdown.
    """
    suit: Suit
    rank: int
    visible: bool = field(default=False)
    
    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank {self.rank}")
        object.__setattr__(self, "suit", Suit(self.suit))
    
    def __setattr__(self, name: str, value) -> None:
        if name in ("suit", "rank") and name in self.__dict__:
            raise AttributeError(f"Card.{name} is read-only")
        super().__setattr__(name, value)
    
    @property
    def points(self) -> int:
        return POINTS[self.rank]
    
    @property
    def key(self) -> tuple[Suit, int]:
        """Identity of the card within a deck."""
        return (self.suit, self.rank)
    
    def __str__(self) -> str:
        return f"{self.rank}{self.suit.initial}"
    
    def __repr__(self) -> str:
        return str(self)
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "suit": self.suit.value,
            "rank": self.rank,
            "points": self.points,
            "visible": self.visible,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """Create from dictionary."""
        return cls(
            suit=Suit(data["suit"]),
            rank=data["rank"],
            visible=data.get("visible", False),
        )
    
    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like '7c', '10d', '1s'.
        
        Args:
            s: Card string (rank + suit initial).
            
        Returns:
            Card instance.
        """
        initial = s[-1].lower()
        for suit in Suit:
            if suit.initial == initial:
                return cls(suit=suit, rank=int(s[:-1]))
        raise ValueError(f"Unknown suit in card {s!r}")


class Deck:
    """A shuffled 40-card deck (4 suits x ranks 1-10)."""
    
    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize and shuffle a new deck.
        
        Args:
            rng: Random source used for shuffling; seed it for reproducible deals.
        """
        self._rng = rng or random.Random()
        self._cards: list[Card] = []
        self.reset()
    
    def reset(self) -> None:
        """Rebuild all 40 cards and shuffle."""
        self._cards = [
            Card(suit=suit, rank=rank)
            for suit in Suit
            for rank in RANKS
        ]
        self.shuffle()
    
    def shuffle(self) -> None:
        """Shuffle the deck."""
        self._rng.shuffle(self._cards)
    
    def deal(self, count: int = 1) -> list[Card]:
        """Deal cards from the top of the deck.
        
        Args:
            count: Number of cards to deal.
            
        Returns:
            List of dealt cards.
            
        Raises:
            ValueError: If not enough cards remain.
        """
        if count > len(self._cards):
            raise ValueError(f"Cannot deal {count} cards, only {len(self._cards)} remain")
        
        dealt = self._cards[:count]
        self._cards = self._cards[count:]
        return dealt
    
    def deal_one(self) -> Card:
        """Deal a single card."""
        return self.deal(1)[0]
    
    @property
    def cards(self) -> list[Card]:
        """Remaining cards, top first."""
        return list(self._cards)
    
    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)
    
    def __len__(self) -> int:
        return len(self._cards)
