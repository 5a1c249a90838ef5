"""Betting cycle logic."""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from stoppa.utils.logger import get_logger

if TYPE_CHECKING:
    from stoppa.game.player import Player

logger = get_logger(__name__)

MAX_BET = 20


class ActionType(str, Enum):
    """Player action types."""
    FOLD = "fold"
    CALL = "call"
    RAISE = "raise"


@dataclass
class Action:
    """A player's action."""
    type: ActionType
    amount: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "amount": self.amount,
        }


class BettingRound:
    """Manages a single betting cycle around the whole table.

    Actions are never rejected: out-of-range amounts are coerced to the
    nearest legal value. The cycle closes when every active player has
    acted, all active bets match the table bet (or the player is all-in)
    and action is back on the last raiser.
    """

    def __init__(self, players: list["Player"], first_seat: int):
        """Initialize betting cycle.

        Args:
            players: All players, indexed by seat.
            first_seat: Seat that acts first; also the initial closure anchor.
        """
        self.players = players
        self.current_bet = 0
        self.last_raiser: int = first_seat
        self.winner_by_default: Optional["Player"] = None
        self._action_on: int = first_seat
        self._acted: set[int] = set()
        self._round_complete = False

    @property
    def seats(self) -> int:
        return len(self.players)

    @property
    def action_on(self) -> int:
        """Seat whose turn it is."""
        return self._action_on

    def get_current_player(self) -> Optional["Player"]:
        """Get the player whose turn it is.

        Returns:
            Current player or None if the cycle is complete.
        """
        if self._round_complete:
            return None
        return self.players[self._action_on]

    def get_active_players(self) -> list["Player"]:
        return [p for p in self.players if not p.folded]

    def get_valid_actions(self, player: "Player") -> list[ActionType]:
        """Get valid actions for a player.

        Calling with nothing to call is a check. Raising is offered only when
        it can end strictly above the table bet.
        """
        actions = [ActionType.FOLD, ActionType.CALL]
        if self.current_bet < MAX_BET and player.current_bet + player.fiches > self.current_bet:
            actions.append(ActionType.RAISE)
        return actions

    def get_call_amount(self, player: "Player") -> int:
        """Chips needed to call, capped at the player's balance."""
        to_call = self.current_bet - max(player.current_bet, 0)
        return max(0, min(to_call, player.fiches))

    def get_min_raise(self) -> int:
        """Get the minimum raise (total bet, not increment)."""
        return self.current_bet + 1

    def coerce_raise(self, player: "Player", amount: int) -> int:
        """Bring a requested raise to the nearest legal total bet.

        Below the minimum becomes the minimum, above ``MAX_BET`` becomes
        ``MAX_BET``, and anything the player cannot cover becomes all-in.
        """
        legal = max(amount, self.get_min_raise())
        legal = min(legal, MAX_BET)
        legal = min(legal, player.current_bet + player.fiches)
        if legal != amount:
            logger.debug(f"{player.name} raise {amount} coerced to {legal}")
        return legal

    def process_action(self, player: "Player", action: Action) -> Action:
        """Apply the current player's action and advance the turn.

        Args:
            player: The acting player.
            action: The requested action.

        Returns:
            The action actually applied; ``amount`` is the chips moved into
            the pot.
        """
        if action.type == ActionType.FOLD:
            player.fold()
            if self.last_raiser == player.index:
                self.last_raiser = self._next_active_seat(player.index)
            applied = Action(type=ActionType.FOLD)
            logger.info(f"{player.name} folds")

        elif action.type == ActionType.RAISE and self.coerce_raise(player, action.amount) > self.current_bet:
            target = self.coerce_raise(player, action.amount)
            paid = player.pay(target - player.current_bet)
            self.current_bet = player.current_bet
            self.last_raiser = player.index
            applied = Action(type=ActionType.RAISE, amount=paid)
            logger.info(f"{player.name} raises to {self.current_bet}")

        else:
            # Calls, and raises that cannot go above the table bet
            paid = player.pay(self.get_call_amount(player))
            applied = Action(type=ActionType.CALL, amount=paid)
            logger.info(f"{player.name} calls {paid}")

        self._acted.add(player.index)
        self._advance()
        return applied

    def _next_active_seat(self, seat: int) -> int:
        """First non-folded seat after ``seat`` in turn order."""
        for step in range(1, self.seats + 1):
            candidate = (seat + step) % self.seats
            if not self.players[candidate].folded:
                return candidate
        return seat

    def _is_matched(self, player: "Player") -> bool:
        return player.current_bet == self.current_bet or player.fiches == 0

    def _advance(self) -> None:
        """Move to the next active seat and check whether the cycle closed."""
        for _ in range(self.seats):
            self._action_on = (self._action_on + 1) % self.seats
            if not self.players[self._action_on].folded:
                break

        active = self.get_active_players()
        if len(active) == 1:
            self.winner_by_default = active[0]
            self._round_complete = True
            return

        # The closure anchor must always be a live seat
        if self.players[self.last_raiser].folded:
            self.last_raiser = self._next_active_seat(self.last_raiser)

        all_matched = all(self._is_matched(p) for p in active)
        all_acted = all(p.index in self._acted for p in active)
        if all_matched and all_acted and self._action_on == self.last_raiser:
            self._round_complete = True

    @property
    def is_complete(self) -> bool:
        """Check if the betting cycle is complete."""
        return self._round_complete
