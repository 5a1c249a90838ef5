"""Table state machine for Stoppa."""
import asyncio
import random
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Callable, Any, Awaitable, Union

from stoppa.agents.base import Agent, Observation
from stoppa.config import config
from stoppa.game.deck import Deck
from stoppa.game.player import Player
from stoppa.game.pot import Pot
from stoppa.game.betting import BettingRound, Action, ActionType
from stoppa.game.scoring import FINAL_PHASE, best_player, score
from stoppa.utils.logger import get_logger

logger = get_logger(__name__)

SEATS = 5
ANTE = 1


class TableState(str, Enum):
    """Table states."""
    WAITING = "waiting"                            # No round played yet
    AWAITING_DEAL_CHOICE = "awaiting_deal_choice"  # Dealer picks 2 or 3
    BETTING = "betting"                            # Betting cycle in progress
    TALKING = "talking"                            # Last raiser declares
    DECLARING = "declaring"                        # Everyone declares, no bet was made
    ROUND_OVER = "round_over"                      # All four phases resolved


@dataclass
class HandResult:
    """Result of a resolved hand (one phase)."""
    phase: int
    winner: int
    winner_name: str
    amount: int
    reason: str  # "uncontested", "declaration", "stopped", "showdown"
    score: int = 0
    revealed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "phase": self.phase,
            "winner": self.winner,
            "winner_name": self.winner_name,
            "amount": self.amount,
            "reason": self.reason,
            "score": self.score,
            "revealed": self.revealed,
        }


class Table:
    """A five-seat Stoppa table.

    Owns all game state. External callers mutate it only through
    ``start_round``, ``set_deal_choice``, ``step`` and ``declare``; agent
    turns are played automatically until a human is to move.
    """

    def __init__(
        self,
        players: list[Player],
        agents: Optional[dict[int, Agent]] = None,
        rng: Optional[random.Random] = None,
        agent_delay: Optional[float] = None,
    ):
        """Initialize a table.

        Args:
            players: Exactly five players, ``players[i].index == i``.
            agents: Seat -> agent for every non-human seat.
            rng: Random source for shuffling.
            agent_delay: Seconds awaited before each agent decision.
        """
        if len(players) != SEATS:
            raise ValueError(f"Stoppa needs exactly {SEATS} players")
        self.players = players
        self.agents = agents or {}
        missing = [p.index for p in players if p.is_agent and p.index not in self.agents]
        if missing:
            raise ValueError(f"No agent for seats {missing}")

        self.rng = rng or random.Random()
        self.agent_delay = config.agent_delay_seconds if agent_delay is None else agent_delay

        self.state = TableState.WAITING
        self.deck = Deck(self.rng)
        self.pot = Pot()
        self.dealer_seat: int = 0
        self.current_seat: int = 1
        self.phase: int = 0
        self.deal_choice: int = 3
        self.round_number: int = 0
        self.current_betting_round: Optional[BettingRound] = None
        self.last_result: Optional[HandResult] = None
        self.message = "Welcome to Stoppa!"

        # Callback for broadcasting events
        self._event_callback: Optional[Callable[[str, Any], Awaitable[None]]] = None

    @classmethod
    def create(
        cls,
        human_players: Optional[int] = None,
        rng: Optional[random.Random] = None,
        competence: Optional[float] = None,
        agent_delay: Optional[float] = None,
    ) -> "Table":
        """Build a table with humans in the first seats and heuristic agents after.

        Agents cycle through the built-in risk profiles and share ``rng``.
        """
        from stoppa.agents.heuristic import HeuristicAgent, PROFILES

        humans = config.human_players if human_players is None else human_players
        humans = max(0, min(SEATS, humans))
        if rng is None:
            rng = random.Random(config.random_seed)

        profiles = list(PROFILES.values())
        players: list[Player] = []
        agents: dict[int, Agent] = {}
        for i in range(SEATS):
            if i < humans:
                players.append(Player(index=i, name=f"Player {i + 1}", is_human=True))
                continue
            profile = profiles[(i - humans) % len(profiles)]
            players.append(Player(index=i, name=f"Agent {i + 1}", profile=profile.name))
            agents[i] = HeuristicAgent(profile=profile, competence=competence, rng=rng)

        return cls(players, agents, rng=rng, agent_delay=agent_delay)

    def set_event_callback(self, callback: Callable[[str, Any], Awaitable[None]]) -> None:
        """Set callback for state-change notifications.

        Args:
            callback: Async function(event_type, data); re-read the table on each call.
        """
        self._event_callback = callback

    async def _emit(self, event_type: str, data: Any = None) -> None:
        """Emit an event via callback."""
        if self._event_callback:
            await self._event_callback(event_type, data or {})

    def _log(self, message: str) -> None:
        """Record the status message shown to the external layer."""
        self.message = message
        logger.info(message)

    # Queries

    def get_player(self, seat: int) -> Optional[Player]:
        if 0 <= seat < SEATS:
            return self.players[seat]
        return None

    def get_active_players(self) -> list[Player]:
        """Players still in the current betting cycle, in seat order."""
        return [p for p in self.players if p.is_active]

    @property
    def current_player(self) -> Player:
        return self.players[self.current_seat]

    @property
    def current_bet(self) -> int:
        if self.current_betting_round:
            return self.current_betting_round.current_bet
        return 0

    @property
    def last_raiser(self) -> Optional[int]:
        if self.current_betting_round:
            return self.current_betting_round.last_raiser
        return None

    def observe(self) -> Observation:
        """Build the read-only view handed to agents."""
        betting = self.current_betting_round
        valid: tuple[ActionType, ...] = ()
        if betting and self.state == TableState.BETTING:
            valid = tuple(betting.get_valid_actions(self.current_player))
        return Observation(
            phase=self.phase,
            current_bet=self.current_bet,
            carry_pot=self.pot.carry,
            hand_pot=self.pot.hand,
            last_raiser=self.last_raiser if self.last_raiser is not None else self.current_seat,
            dealer_seat=self.dealer_seat,
            valid_actions=valid,
            seats=SEATS,
        )

    def awaiting_human(self) -> bool:
        """Whether the table is suspended on a human decision."""
        if self.state == TableState.AWAITING_DEAL_CHOICE:
            return self.players[self.dealer_seat].is_human
        if self.state in (TableState.BETTING, TableState.TALKING):
            return self.current_player.is_human
        if self.state == TableState.DECLARING:
            return bool(self._pending_declarations())
        return False

    def _pending_declarations(self) -> list[Player]:
        return [p for p in self.players if p.is_human and p.is_active and p.declaration is None]

    # Game flow

    async def start_round(self) -> bool:
        """Collect antes, shuffle, rotate the dealer and ask for the deal split.

        Returns:
            True if a round started.
        """
        if self.state not in (TableState.WAITING, TableState.ROUND_OVER):
            return False

        self.round_number += 1
        self._collect_antes()

        self.deck.reset()
        self.phase = 0
        self.dealer_seat = (self.dealer_seat + 1) % SEATS
        self.current_seat = self.dealer_seat
        self.current_betting_round = None
        self.last_result = None
        self.pot.reset_hand()
        for player in self.players:
            player.reset_for_new_round()

        self.state = TableState.AWAITING_DEAL_CHOICE
        self._log(f"{self.players[self.dealer_seat].name} is the dealer.")

        await self._emit("round_started", {
            "round_number": self.round_number,
            "dealer_seat": self.dealer_seat,
            "pot": self.pot.carry,
        })
        await self._run_agents()
        return True

    def _collect_antes(self) -> None:
        """Every player with chips pays the ante into the carry-over pot."""
        for player in self.players:
            if player.fiches > 0:
                player.fiches -= ANTE
                self.pot.add_ante(ANTE)

    async def set_deal_choice(self, choice: int, seat: Optional[int] = None) -> bool:
        """Human dealer's choice of initial split (2 or 3 cards).

        Args:
            choice: Cards to deal now; coerced to 2 or 3.
            seat: Submitting seat, checked against the dealer when given.

        Returns:
            True if the choice was applied.
        """
        if self.state != TableState.AWAITING_DEAL_CHOICE:
            return False
        dealer = self.players[self.dealer_seat]
        if not dealer.is_human or (seat is not None and seat != self.dealer_seat):
            return False

        await self._apply_deal_choice(choice)
        await self._run_agents()
        return True

    async def _apply_deal_choice(self, choice: int) -> None:
        self.deal_choice = 2 if choice <= 2 else 3
        self._log(f"{self.players[self.dealer_seat].name} deals {self.deal_choice} cards.")
        await self._emit("deal_choice", {"dealer_seat": self.dealer_seat, "choice": self.deal_choice})
        await self._deal()

    def _cards_for_phase(self) -> int:
        if self.phase == 0:
            return self.deal_choice
        if self.phase == 1:
            return 3
        if self.phase == 2:
            return 5 - self.deal_choice
        return 0

    async def _deal(self) -> None:
        """Deal this phase's cards and open a betting cycle."""
        count = self._cards_for_phase()
        first_seat = (self.dealer_seat + 1) % SEATS
        if count > 0:
            for i in range(SEATS):
                self.players[(first_seat + i) % SEATS].receive_cards(self.deck.deal(count))

        for player in self.players:
            player.reset_for_new_cycle()
        self.pot.reset_hand()

        self.current_betting_round = BettingRound(self.players, first_seat)
        self.current_seat = first_seat
        self.state = TableState.BETTING
        self._log(f"Phase {self.phase + 1}: betting started.")

        await self._emit("betting_started", {
            "phase": self.phase,
            "cards_dealt": count,
            "current_seat": self.current_seat,
        })

    async def step(
        self,
        action: Union[ActionType, str],
        amount: int = 0,
        seat: Optional[int] = None,
    ) -> bool:
        """Submit a human betting action.

        Args:
            action: fold, call or raise.
            amount: Total bet to raise to; coerced to a legal value.
            seat: Submitting seat, checked against the actor-to-move when given.

        Returns:
            False (and nothing changes) if it is not this human's turn.
        """
        if self.state != TableState.BETTING or not self.current_betting_round:
            return False
        player = self.current_player
        if not player.is_human or (seat is not None and seat != player.index):
            return False
        try:
            action_type = ActionType(action)
        except ValueError:
            return False

        await self._apply_action(player, Action(type=action_type, amount=amount))
        await self._run_agents()
        return True

    async def _apply_action(self, player: Player, action: Action) -> None:
        betting = self.current_betting_round
        applied = betting.process_action(player, action)
        self.pot.add_bet(applied.amount)

        if applied.type == ActionType.FOLD:
            self._log(f"{player.name} folded.")
        elif applied.type == ActionType.RAISE:
            self._log(f"{player.name} raised to {player.current_bet}.")
        elif applied.amount == 0 and betting.current_bet == 0:
            self._log(f"{player.name} checked.")
        else:
            self._log(f"{player.name} called.")

        await self._emit("player_action", {
            "seat": player.index,
            "name": player.name,
            "action": applied.to_dict(),
        })

        if betting.winner_by_default:
            await self._end_hand(betting.winner_by_default, reason="uncontested")
        elif betting.is_complete:
            await self._end_betting_round()
        else:
            self.current_seat = betting.action_on

    async def _end_betting_round(self) -> None:
        """Closed cycle: talking after a bet, silent declaration otherwise."""
        betting = self.current_betting_round
        if betting.current_bet > 0:
            self.state = TableState.TALKING
            self.current_seat = betting.last_raiser
            self._log(f"{self.current_player.name} is talking.")
            await self._emit("talking", {"seat": self.current_seat})
        else:
            await self._start_declaration()

    async def _start_declaration(self) -> None:
        self.state = TableState.DECLARING
        self._log("Declaration phase.")

        for player in self.get_active_players():
            if player.is_agent:
                player.declaration = score(player, self.phase).value

        await self._emit("declaring", {
            "pending": [p.index for p in self._pending_declarations()],
        })
        await self._check_showdown_ready()

    async def _check_showdown_ready(self) -> None:
        if not self._pending_declarations():
            await self._resolve_showdown()

    async def declare(self, seat: int, value: int) -> bool:
        """Submit a human's declared score.

        While talking only the talking seat may declare; while declaring any
        active human who has not declared yet.

        Returns:
            True if the declaration was accepted.
        """
        player = self.get_player(seat)
        if player is None or not player.is_human or not player.is_active:
            return False
        value = max(0, value)

        if self.state == TableState.TALKING:
            if seat != self.current_seat:
                return False
            await self._resolve_declaration(seat, value)
            await self._run_agents()
            return True

        if self.state == TableState.DECLARING:
            if player.declaration is not None:
                return False
            player.declaration = value
            self._log(f"{player.name} declares {value}.")
            await self._emit("declaration", {"seat": seat, "value": value})
            await self._check_showdown_ready()
            await self._run_agents()
            return True

        return False

    async def _resolve_declaration(self, declarer_seat: int, declared: int) -> None:
        """Settle a talking declaration against the best opponent.

        The declaration can never be below the declarer's true score. The
        strongest active opponent stops the declarer by beating it.
        """
        declarer = self.players[declarer_seat]
        actual = score(declarer, self.phase).value
        declared = max(declared, actual)
        declarer.declaration = declared
        self._log(f"{declarer.name} declares {declared}.")

        opponents = [p for p in self.get_active_players() if p.index != declarer_seat]
        best_opp = best_player(opponents, self.phase)
        opp_score = score(best_opp, self.phase).value if best_opp else -1
        if opp_score > declared:
            self._log(f"{declarer.name} stopped by {best_opp.name} ({opp_score})!")
            await self._reveal_winner(best_opp, reason="stopped")
        else:
            self._log(f"{declarer.name} wins declaration ({declared})!")
            await self._reveal_winner(declarer, reason="declaration")

    async def _resolve_showdown(self) -> None:
        """Highest true score among active players wins."""
        winner = best_player(self.get_active_players(), self.phase)
        if winner is None:
            logger.warning("Showdown with no active players")
            return
        self._log(f"{winner.name} wins showdown!")
        await self._reveal_winner(winner, reason="showdown")

    async def _reveal_winner(self, winner: Player, reason: str) -> None:
        result = score(winner, self.phase)
        for card in result.best_cards:
            card.visible = True
        await self._end_hand(winner, reason=reason)

    async def _end_hand(self, winner: Player, reason: str) -> None:
        """Pay the winner, bank the phase's cards and move on."""
        result = score(winner, self.phase)
        amount = self.pot.payout(final=self.phase == FINAL_PHASE)
        winner.win_pot(amount)

        self.last_result = HandResult(
            phase=self.phase,
            winner=winner.index,
            winner_name=winner.name,
            amount=amount,
            reason=reason,
            score=result.value,
            revealed=[str(c) for c in result.best_cards if c.visible],
        )
        logger.info(f"Phase {self.phase + 1} won by {winner.name}: {amount} fiches ({reason})")
        await self._emit("hand_result", self.last_result.to_dict())

        for player in self.players:
            player.collect_cards()

        self.phase += 1
        if self.phase > FINAL_PHASE:
            self.state = TableState.ROUND_OVER
            self.current_betting_round = None
            self._log(f"Round over. {winner.name} won!")
            await self._emit("round_over", {"round_number": self.round_number})
        else:
            await self._deal()

    # Agent turns

    def _pending_agent(self) -> Optional[tuple[Player, Agent]]:
        """Agent that must move next, if any."""
        if self.state == TableState.AWAITING_DEAL_CHOICE:
            player = self.players[self.dealer_seat]
        elif self.state in (TableState.BETTING, TableState.TALKING):
            player = self.current_player
        else:
            return None
        if player.is_human:
            return None
        return player, self.agents[player.index]

    async def _run_agents(self) -> None:
        """Play agent turns until a human must act or the round is over."""
        while True:
            pending = self._pending_agent()
            if pending is None:
                break
            player, agent = pending
            if self.agent_delay > 0:
                await asyncio.sleep(self.agent_delay)

            obs = self.observe()
            if self.state == TableState.AWAITING_DEAL_CHOICE:
                await self._apply_deal_choice(agent.choose_deal_split(player, obs))
            elif self.state == TableState.BETTING:
                await self._apply_action(player, agent.decide_bet(player, obs))
            else:
                await self._resolve_declaration(player.index, agent.decide_declaration(player, obs))

        if self.awaiting_human():
            if self.state == TableState.DECLARING:
                seats = [p.index for p in self._pending_declarations()]
            else:
                seats = [self.current_seat]
            await self._emit("awaiting_human", {"state": self.state.value, "seats": seats})

    # State serialization

    def get_state_for_player(self, seat: Optional[int] = None) -> dict:
        """Get table state from a seat's perspective.

        Args:
            seat: The viewing seat; None for a spectator.

        Returns:
            State dictionary; other players' cards appear only once revealed.
        """
        players_data = []
        for player in self.players:
            player_data = player.to_dict(hide_cards=player.index != seat)
            player_data["is_you"] = player.index == seat
            players_data.append(player_data)

        valid_actions: list[str] = []
        call_amount = 0
        min_raise = 0
        betting = self.current_betting_round
        if betting and self.state == TableState.BETTING and self.current_seat == seat:
            current = self.current_player
            valid_actions = [a.value for a in betting.get_valid_actions(current)]
            call_amount = betting.get_call_amount(current)
            min_raise = betting.get_min_raise()

        return {
            "state": self.state.value,
            "round_number": self.round_number,
            "phase": self.phase,
            "dealer_seat": self.dealer_seat,
            "current_seat": self.current_seat,
            "deal_choice": self.deal_choice,
            **self.pot.to_dict(),
            "current_bet": self.current_bet,
            "last_raiser": self.last_raiser,
            "players": players_data,
            "valid_actions": valid_actions,
            "call_amount": call_amount,
            "min_raise": min_raise,
            "message": self.message,
            "last_result": self.last_result.to_dict() if self.last_result else None,
        }
