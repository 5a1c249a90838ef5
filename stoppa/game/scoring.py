"""Primiera-style hand scoring."""
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from stoppa.game.deck import Card, Suit
from stoppa.game.player import Player

FINAL_PHASE = 3
PRIMIERA_CAP = 3  # Cards per suit that count in the final phase
MAX_SCORE = 55    # 7 + 6 + ace of one suit: 21 + 18 + 16


@dataclass(frozen=True)
class ScoreResult:
    """Result of scoring a hand."""
    value: int
    best_cards: tuple[Card, ...] = ()
    suit: Optional[Suit] = None
    
    @property
    def description(self) -> str:
        if self.suit is None:
            return "no cards"
        cards = " ".join(str(c) for c in self.best_cards)
        return f"{self.value} in {self.suit} ({cards})"


def scoring_cards(player: Player, phase: int) -> list[Card]:
    """Cards that count for ``phase``: the current hand, plus history at the end."""
    if phase >= FINAL_PHASE:
        return [*player.cards, *player.previous_cards]
    return list(player.cards)


def score_cards(cards: Iterable[Card], capped: bool = False) -> ScoreResult:
    """Score a set of cards by their best suit.
    
    Args:
        cards: Cards to score.
        capped: Count only the top ``PRIMIERA_CAP`` cards of each suit.
        
    Returns:
        The best suit's total. Ties keep the earlier suit in ``Suit`` order.
    """
    cards = list(cards)
    best = ScoreResult(value=0)
    
    for suit in Suit:
        suit_cards = [c for c in cards if c.suit == suit]
        if capped:
            suit_cards = sorted(suit_cards, key=lambda c: c.points, reverse=True)[:PRIMIERA_CAP]
        total = sum(c.points for c in suit_cards)
        if total > best.value:
            best = ScoreResult(value=total, best_cards=tuple(suit_cards), suit=suit)
    
    return best


def score(player: Player, phase: int) -> ScoreResult:
    """Score a player's hand for the given phase. Has no side effects."""
    return score_cards(scoring_cards(player, phase), capped=phase >= FINAL_PHASE)


def best_player(players: Iterable[Player], phase: int) -> Optional[Player]:
    """Player with the highest true score.
    
    Ties go to the lowest seat index. Returns None for an empty group.
    """
    winner: Optional[Player] = None
    winner_value = -1
    for player in sorted(players, key=lambda p: p.index):
        value = score(player, phase).value
        if value > winner_value:
            winner, winner_value = player, value
    return winner


def longest_suit(cards: Iterable[Card]) -> int:
    """Number of cards in the most populated suit."""
    counts = Counter(c.suit for c in cards)
    return max(counts.values(), default=0)
