"""Agent interface and the table view handed to agents."""
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stoppa.game.betting import Action, ActionType
    from stoppa.game.player import Player


@dataclass(frozen=True)
class Observation:
    """What an agent may see of the table when asked to decide."""
    phase: int
    current_bet: int
    carry_pot: int
    hand_pot: int
    last_raiser: int
    dealer_seat: int
    valid_actions: tuple["ActionType", ...]
    seats: int = 5

    def to_call(self, player: "Player") -> int:
        """Chips a call would cost, capped at the player's balance."""
        owed = self.current_bet - max(player.current_bet, 0)
        return max(0, min(owed, player.fiches))


class Agent:
    """Base class for non-human decision makers.

    Agents are pure functions of the player they control and an
    ``Observation``; the table applies whatever they return.
    """

    def choose_deal_split(self, player: "Player", obs: Observation) -> int:
        """Cards (2 or 3) to deal in the first phase when dealing."""
        raise NotImplementedError

    def decide_bet(self, player: "Player", obs: Observation) -> "Action":
        """Pick a betting action."""
        raise NotImplementedError

    def decide_declaration(self, player: "Player", obs: Observation) -> int:
        """Pick the score to declare when talking."""
        raise NotImplementedError
