"""Game engine module."""
from .deck import Deck, Card, Suit
from .player import Player, FOLDED
from .scoring import score, score_cards, best_player, ScoreResult
from .pot import Pot
from .betting import BettingRound, Action, ActionType, MAX_BET
from .table import Table, TableState, HandResult

__all__ = [
    "Deck",
    "Card",
    "Suit",
    "Player",
    "FOLDED",
    "score",
    "score_cards",
    "best_player",
    "ScoreResult",
    "Pot",
    "BettingRound",
    "Action",
    "ActionType",
    "MAX_BET",
    "Table",
    "TableState",
    "HandResult",
]
