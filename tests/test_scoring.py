"""Tests for primiera scoring."""
from stoppa.game.deck import Card, Suit
from stoppa.game.player import Player
from stoppa.game.scoring import score, score_cards, best_player, longest_suit, MAX_SCORE


def cards(*names: str) -> list[Card]:
    return [Card.from_string(n) for n in names]


def make_player(index: int = 0, current: tuple = (), previous: tuple = ()) -> Player:
    """Create a test player holding the given cards."""
    return Player(
        index=index,
        name=f"player_{index}",
        cards=cards(*current),
        previous_cards=cards(*previous),
    )


class TestScore:
    """Test best-suit scoring."""
    
    def test_two_coppe(self):
        """Test 7 and 6 of coppe score 21 + 18."""
        player = make_player(current=("7c", "6c"))
        result = score(player, 0)
        
        assert result.value == 39
        assert result.suit == Suit.COPPE
        assert [str(c) for c in result.best_cards] == ["7c", "6c"]
    
    def test_empty_hand(self):
        """Test a hand without cards scores zero."""
        result = score(make_player(), 0)
        
        assert result.value == 0
        assert result.best_cards == ()
        assert result.suit is None
    
    def test_best_suit_wins(self):
        """Test the highest suit total is chosen."""
        player = make_player(current=("1s", "8d", "9d"))
        result = score(player, 1)
        
        assert result.value == 20
        assert result.suit == Suit.DENARI
    
    def test_suit_tie_keeps_first_suit(self):
        """Test equal suit totals go to the earlier suit."""
        player = make_player(current=("7c", "7s"))
        result = score(player, 0)
        
        assert result.value == 21
        assert result.suit == Suit.SPADE
    
    def test_early_phase_ignores_previous_cards(self):
        """Test phases before the last score only the current hand."""
        player = make_player(current=("2b",), previous=("7b", "6b", "1b"))
        
        assert score(player, 2).value == 12
    
    def test_final_phase_uses_all_cards(self):
        """Test the final phase scores current and previous cards together."""
        player = make_player(current=(), previous=("7b", "6b", "3d"))
        
        assert score(player, 3).value == 39
    
    def test_final_phase_caps_three_per_suit(self):
        """Test only the top three cards of a suit count at the end."""
        player = make_player(previous=("7c", "6c", "1c", "2c", "10c"))
        result = score(player, 3)
        
        assert result.value == 21 + 18 + 16
        assert result.value == MAX_SCORE
        assert sorted(c.rank for c in result.best_cards) == [1, 6, 7]
    
    def test_uncapped_before_final(self):
        """Test no cap applies in earlier phases."""
        assert score_cards(cards("7c", "6c", "1c", "2c")).value == 67
        assert score_cards(cards("7c", "6c", "1c", "2c"), capped=True).value == 55
    
    def test_score_is_pure(self):
        """Test scoring twice gives the same result and leaves cards alone."""
        player = make_player(current=("7c", "5c", "4s"))
        
        first = score(player, 0)
        second = score(player, 0)
        
        assert first == second
        assert [str(c) for c in player.cards] == ["7c", "5c", "4s"]
        assert not any(c.visible for c in player.cards)
    
    def test_description(self):
        """Test readable description."""
        assert score(make_player(current=("7c",)), 0).description == "21 in coppe (7c)"


class TestBestPlayer:
    """Test winner selection."""
    
    def test_highest_score_wins(self):
        """Test the best true score is picked."""
        low = make_player(0, current=("2s",))
        high = make_player(1, current=("7d", "1d"))
        
        assert best_player([low, high], 0) is high
    
    def test_tie_goes_to_lowest_seat(self):
        """Test ties are won by the first-seated player."""
        a = make_player(3, current=("7s",))
        b = make_player(1, current=("7b",))
        
        assert best_player([a, b], 0) is b
    
    def test_empty_group(self):
        """Test no players means no winner."""
        assert best_player([], 0) is None


class TestLongestSuit:
    """Test suit counting."""
    
    def test_counts(self):
        assert longest_suit(cards("1c", "2c", "3c", "4s")) == 3
        assert longest_suit([]) == 0
