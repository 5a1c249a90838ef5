"""Tests for the heuristic decision engine."""
import random

import pytest
from stoppa.agents.base import Observation
from stoppa.agents.heuristic import (
    HeuristicAgent,
    RiskProfile,
    PROFILES,
    BALANCED,
    get_profile,
)
from stoppa.game.betting import ActionType, MAX_BET
from stoppa.game.deck import Card
from stoppa.game.player import Player

ALL_ACTIONS = (ActionType.FOLD, ActionType.CALL, ActionType.RAISE)

NO_BLUFF = RiskProfile("test", fold_bias=0.4, raise_bias=0.4,
                       bluff_probability=0.0, aggressiveness=0.5, bluff_range=(1, 3))
ALWAYS_BLUFF = RiskProfile("bluffer", fold_bias=0.1, raise_bias=0.9,
                           bluff_probability=1.0, aggressiveness=0.9, bluff_range=(4, 6))


def make_player(*card_names: str, index: int = 3, fiches: int = 20, current_bet: int = 0) -> Player:
    """Create a test player holding the given cards."""
    return Player(
        index=index,
        name=f"agent_{index}",
        fiches=fiches,
        current_bet=current_bet,
        cards=[Card.from_string(n) for n in card_names],
    )


def make_obs(current_bet: int = 0, phase: int = 0, carry: int = 5, hand: int = 0,
             last_raiser: int = 1, valid=ALL_ACTIONS) -> Observation:
    """Create a table view."""
    return Observation(
        phase=phase,
        current_bet=current_bet,
        carry_pot=carry,
        hand_pot=hand,
        last_raiser=last_raiser,
        dealer_seat=0,
        valid_actions=tuple(valid),
    )


def make_agent(profile: RiskProfile = NO_BLUFF, competence: float = 1.0, seed: int = 0) -> HeuristicAgent:
    return HeuristicAgent(profile=profile, competence=competence, rng=random.Random(seed))


class TestProfiles:
    """Test risk profile lookup."""

    def test_builtin_profiles(self):
        """Test the three profiles are registered."""
        assert set(PROFILES) == {"cautious", "balanced", "aggressive"}
        assert PROFILES["aggressive"].bluff_probability > PROFILES["cautious"].bluff_probability

    def test_unknown_profile_defaults(self):
        """Test unknown tags fall back to balanced."""
        assert get_profile("reckless") is BALANCED
        assert get_profile(None) is BALANCED

    def test_competence_clamped(self):
        """Test competence stays within [0, 1]."""
        assert HeuristicAgent(competence=1.7).competence == 1.0
        assert HeuristicAgent(competence=-1).competence == 0.0


class TestEvaluation:
    """Test hand strength, pot odds and the EV proxy."""

    def test_hand_strength_max_hand(self):
        """Test a maximal three-card suit in the first phase."""
        agent = make_agent()
        player = make_player("7c", "6c", "1c")

        # (55/55 + 0.1 suit bonus) * 0.9 early-phase damping
        assert agent.hand_strength(player, 0) == pytest.approx(0.99)

    def test_hand_strength_middle_phase(self):
        """Test no damping or boost in the middle phases."""
        agent = make_agent()
        player = make_player("7c", "2s")

        assert agent.hand_strength(player, 1) == pytest.approx(21 / 55)

    def test_hand_strength_final_boost_capped(self):
        """Test the final-phase boost never exceeds 1."""
        agent = make_agent()
        player = make_player("7c", "6c", "1c")

        assert agent.hand_strength(player, 3) == 1.0

    def test_pot_odds(self):
        """Test pot odds with and without a bet to call."""
        assert HeuristicAgent.pot_odds(0, make_obs()) == 1.0
        assert HeuristicAgent.pot_odds(5, make_obs(carry=5, hand=10)) == pytest.approx(0.25)

    def test_ev_penalty_behind_raiser(self):
        """Test acting just after the last raiser costs a little EV."""
        agent = make_agent()
        obs = make_obs(current_bet=2, last_raiser=1)

        near = agent.expected_value(make_player("7c", index=2), obs, 0.5)
        far = agent.expected_value(make_player("7c", index=4), obs, 0.5)

        assert near == pytest.approx(far - 0.05)

    def test_raise_amount_bounds(self):
        """Test sizing stays within the legal range."""
        for seed in range(20):
            agent = make_agent(profile=PROFILES["aggressive"], seed=seed)
            player = make_player("7c", fiches=12)
            amount = agent.raise_amount(player, make_obs(current_bet=4))
            assert 5 <= amount <= 12

    def test_raise_amount_respects_ceiling(self):
        """Test sizing never exceeds the table maximum."""
        agent = make_agent(profile=PROFILES["aggressive"])
        player = make_player("7c", fiches=60)

        for _ in range(20):
            assert agent.raise_amount(player, make_obs(current_bet=2)) <= MAX_BET

    def test_aggressive_sizes_larger(self):
        """Test aggressiveness shifts raises up on average."""
        cautious = make_agent(profile=PROFILES["cautious"], seed=5)
        aggressive = make_agent(profile=PROFILES["aggressive"], seed=5)
        player = make_player("7c", fiches=20)
        obs = make_obs(current_bet=0)

        low = sum(cautious.raise_amount(player, obs) for _ in range(200))
        high = sum(aggressive.raise_amount(player, obs) for _ in range(200))

        assert high > low


class TestBettingDecision:
    """Test betting choices."""

    def test_strong_hand_opens(self):
        """Test a strong hand raises when nobody has bet."""
        agent = make_agent()
        action = agent.decide_bet(make_player("7c", "6c", "1c"), make_obs())

        assert action.type == ActionType.RAISE
        assert 1 <= action.amount <= MAX_BET

    def test_weak_hand_folds_unopened(self):
        """Test a weak hand without bluffing folds."""
        agent = make_agent()
        action = agent.decide_bet(make_player("8s", "9b"), make_obs())

        assert action.type == ActionType.FOLD

    def test_bluff_open(self):
        """Test a bluffer opens weak hands for one chip."""
        agent = make_agent(profile=ALWAYS_BLUFF)
        action = agent.decide_bet(make_player("8s", "9b"), make_obs())

        assert action.type == ActionType.RAISE
        assert action.amount == 1

    def test_strong_hand_continues_against_bet(self):
        """Test a strong hand never folds to a small bet."""
        for seed in range(10):
            agent = make_agent(seed=seed)
            obs = make_obs(current_bet=2, phase=1, hand=6)
            action = agent.decide_bet(make_player("7c", "6c", "1c"), obs)
            assert action.type in (ActionType.CALL, ActionType.RAISE)

    def test_weak_hand_folds_to_big_bet(self):
        """Test a weak hand gives up against a large bet."""
        agent = make_agent()
        obs = make_obs(current_bet=15, phase=1, carry=2, hand=15)
        action = agent.decide_bet(make_player("8s", "9b"), obs)

        assert action.type == ActionType.FOLD

    def test_cheap_call_with_marginal_hand(self):
        """Test a marginal hand calls a cheap bet."""
        agent = make_agent()
        obs = make_obs(current_bet=1, phase=1, carry=5, hand=30, last_raiser=0)
        action = agent.decide_bet(make_player("5s", "8d", index=4), obs)

        assert action.type == ActionType.CALL

    def test_call_cost_capped_at_balance(self):
        """Test the observed cost to call never exceeds the chips left."""
        obs = make_obs(current_bet=15)

        assert obs.to_call(make_player("7c", fiches=3, current_bet=5)) == 3
        assert obs.to_call(make_player("7c", fiches=0, current_bet=5)) == 0
        assert obs.to_call(make_player("7c", fiches=20, current_bet=5)) == 10

    def test_all_in_agent_calls_reraise(self):
        """Test an all-in agent keeps its stake when the bet goes up."""
        agent = make_agent()
        obs = make_obs(current_bet=15, phase=1, carry=4, hand=25,
                       valid=(ActionType.FOLD, ActionType.CALL))
        player = make_player("8s", "9b", fiches=0, current_bet=5)

        action = agent.decide_bet(player, obs)

        assert action.type == ActionType.CALL

    def test_no_raise_when_not_valid(self):
        """Test a strong hand calls when raising is unavailable."""
        agent = make_agent()
        obs = make_obs(valid=(ActionType.FOLD, ActionType.CALL))
        action = agent.decide_bet(make_player("7c", "6c", "1c"), obs)

        assert action.type != ActionType.RAISE

    def test_incompetent_agent_picks_legal_actions(self):
        """Test random mistakes still come from the legal set."""
        agent = make_agent(competence=0.0, seed=9)
        valid = (ActionType.FOLD, ActionType.CALL)
        seen = set()
        for _ in range(50):
            action = agent.decide_bet(make_player("7c"), make_obs(current_bet=3, valid=valid))
            seen.add(action.type)
        assert seen <= set(valid)
        assert seen == set(valid)

    def test_random_raise_is_minimum(self):
        """Test a random raise asks for one over the table bet."""
        agent = make_agent(competence=0.0, seed=2)
        obs = make_obs(current_bet=4, valid=(ActionType.RAISE,))

        action = agent.decide_bet(make_player("7c"), obs)

        assert action.type == ActionType.RAISE
        assert action.amount == 5


class TestDeclaration:
    """Test declared scores."""

    def test_truthful_declaration(self):
        """Test a non-bluffer declares the true score."""
        agent = make_agent()
        assert agent.decide_declaration(make_player("7c", "6c"), make_obs()) == 39

    def test_bluffed_declaration(self):
        """Test a bluffer adds points within its range."""
        agent = make_agent(profile=ALWAYS_BLUFF)
        for _ in range(20):
            declared = agent.decide_declaration(make_player("7c", "6c"), make_obs())
            assert 43 <= declared <= 45

    def test_deal_split(self):
        """Test the dealer split is always 2 or 3."""
        agent = make_agent(seed=4)
        splits = {agent.choose_deal_split(make_player(), make_obs()) for _ in range(30)}
        assert splits == {2, 3}
