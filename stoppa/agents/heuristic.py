"""Heuristic Stoppa agent with risk profiles and a skill level."""
import random
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from stoppa.agents.base import Agent, Observation
from stoppa.config import config
from stoppa.game.betting import Action, ActionType, MAX_BET
from stoppa.game.scoring import FINAL_PHASE, MAX_SCORE, longest_suit, score, scoring_cards
from stoppa.utils.logger import get_logger

if TYPE_CHECKING:
    from stoppa.game.player import Player

logger = get_logger(__name__)


@dataclass(frozen=True)
class RiskProfile:
    """Betting temperament of an agent."""
    name: str
    fold_bias: float
    raise_bias: float
    bluff_probability: float
    aggressiveness: float  # Where in the legal raise range sizing centres (0..1)
    bluff_range: tuple[int, int]  # Points added to a bluffed declaration

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "fold_bias": self.fold_bias,
            "raise_bias": self.raise_bias,
            "bluff_probability": self.bluff_probability,
            "aggressiveness": self.aggressiveness,
            "bluff_range": list(self.bluff_range),
        }


CAUTIOUS = RiskProfile("cautious", fold_bias=0.6, raise_bias=0.2,
                       bluff_probability=0.05, aggressiveness=0.25, bluff_range=(1, 3))
BALANCED = RiskProfile("balanced", fold_bias=0.4, raise_bias=0.4,
                       bluff_probability=0.12, aggressiveness=0.5, bluff_range=(2, 6))
AGGRESSIVE = RiskProfile("aggressive", fold_bias=0.2, raise_bias=0.7,
                         bluff_probability=0.25, aggressiveness=0.8, bluff_range=(4, 12))

PROFILES: dict[str, RiskProfile] = {p.name: p for p in (CAUTIOUS, BALANCED, AGGRESSIVE)}


def get_profile(tag: Optional[str]) -> RiskProfile:
    """Look up a profile by tag, defaulting to balanced."""
    return PROFILES.get(tag or "", BALANCED)


class HeuristicAgent(Agent):
    """Rule-of-thumb agent.

    With probability ``1 - competence`` a betting decision is a uniformly
    random legal action; otherwise it is driven by hand strength, pot odds
    and the risk profile.
    """

    def __init__(
        self,
        profile: RiskProfile = BALANCED,
        competence: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize agent.

        Args:
            profile: Risk profile.
            competence: Probability of reasoning rather than acting at random.
            rng: Random source; seed it for reproducible play.
        """
        self.profile = profile
        self.competence = config.agent_competence if competence is None else competence
        self.competence = min(1.0, max(0.0, self.competence))
        self.rng = rng or random.Random()

    # Evaluation

    def hand_strength(self, player: "Player", phase: int) -> float:
        """Normalized hand strength in [0, 1]."""
        strength = min(score(player, phase).value / MAX_SCORE, 1.0)
        if longest_suit(scoring_cards(player, phase)) >= 3:
            strength += 0.1
        if phase == 0:
            strength *= 0.9
        elif phase == FINAL_PHASE:
            strength *= 1.1
        return min(strength, 1.0)

    @staticmethod
    def pot_odds(to_call: int, obs: Observation) -> float:
        """Share of the final pot the call would represent."""
        if to_call <= 0:
            return 1.0
        return to_call / (obs.carry_pot + obs.hand_pot + to_call)

    def expected_value(self, player: "Player", obs: Observation, strength: float) -> float:
        """Rough expected-value proxy for continuing in the hand."""
        ev = (
            strength
            - self.pot_odds(obs.to_call(player), obs)
            - self.profile.fold_bias * 0.1
            + self.profile.raise_bias * 0.1
        )
        # Acting right behind the aggressor
        if (player.index - obs.last_raiser) % obs.seats in (1, 2):
            ev -= 0.05
        return ev

    def raise_amount(self, player: "Player", obs: Observation) -> int:
        """Total bet to raise to, centred on the profile's aggressiveness."""
        low = obs.current_bet + 1
        high = min(MAX_BET, player.fiches + max(player.current_bet, 0))
        if high <= low:
            return low
        mode = low + (high - low) * self.profile.aggressiveness
        return min(high, max(low, round(self.rng.triangular(low, high, mode))))

    # Decisions

    def choose_deal_split(self, player: "Player", obs: Observation) -> int:
        return self.rng.choice((2, 3))

    def decide_bet(self, player: "Player", obs: Observation) -> Action:
        """Pick a betting action.

        Args:
            player: The player this agent controls.
            obs: Current table view.

        Returns:
            Requested action; the table coerces amounts to legal values.
        """
        if self.rng.random() >= self.competence:
            choice = self.rng.choice(obs.valid_actions)
            amount = obs.current_bet + 1 if choice == ActionType.RAISE else 0
            logger.debug(f"{player.name} acts at random: {choice.value}")
            return Action(type=choice, amount=amount)

        can_raise = ActionType.RAISE in obs.valid_actions
        strength = self.hand_strength(player, obs.phase)
        to_call = obs.to_call(player)

        if obs.current_bet == 0:
            if can_raise and strength > 0.4 + self.profile.raise_bias * 0.2:
                return Action(type=ActionType.RAISE, amount=self.raise_amount(player, obs))
            if can_raise and self.rng.random() < self.profile.bluff_probability:
                return Action(type=ActionType.RAISE, amount=obs.current_bet + 1)
            return Action(type=ActionType.FOLD)

        if to_call == 0:
            # All-in or already matched: staying in is free
            return Action(type=ActionType.CALL)

        ev = self.expected_value(player, obs, strength)

        if ev > 0.2:
            wants_raise = strength > 0.6 and self.rng.random() < 0.3 + self.profile.raise_bias * 0.5
            if can_raise and wants_raise:
                return Action(type=ActionType.RAISE, amount=self.raise_amount(player, obs))
            return Action(type=ActionType.CALL)

        if ev > -0.1 and (to_call <= 2 or strength > 0.35):
            return Action(type=ActionType.CALL)

        if can_raise and self.rng.random() < self.profile.bluff_probability * 0.5:
            return Action(type=ActionType.RAISE, amount=obs.current_bet + 1)
        return Action(type=ActionType.FOLD)

    def decide_declaration(self, player: "Player", obs: Observation) -> int:
        """Declare the true score, or a bluffed one above it."""
        true_score = score(player, obs.phase).value
        if self.rng.random() < self.profile.bluff_probability:
            return true_score + self.rng.randint(*self.profile.bluff_range)
        return true_score
