from datetime import datetime, timedelta, timezone

import pytest

from rewardforge.domain.exceptions import InvalidGameDefinition
from rewardforge.domain.games import RewardSlot, RewardType, ensure_utc
from rewardforge.domain.plays import GrantedReward, PlayHistoryPage
from rewardforge.validators import validate_game

from conftest import NOW, make_game


def _slot(reward_id: str, probability: float, **kwargs) -> RewardSlot:
    return RewardSlot(
        reward_id=reward_id,
        reward_type=RewardType.POINTS,
        value=10,
        probability=probability,
        **kwargs,
    )


def test_probabilities_must_sum_to_hundred():
    with pytest.raises(InvalidGameDefinition) as excinfo:
        make_game(rewards=(_slot("a", 60), _slot("b", 30)))
    assert "sum to 90" in str(excinfo.value)


def test_probability_sum_allows_small_tolerance():
    game = make_game(rewards=(_slot("a", 33.33), _slot("b", 33.33), _slot("c", 33.335)))
    assert game.probability_total() == pytest.approx(99.995)


def test_probability_sum_rejects_more_than_tolerance():
    with pytest.raises(InvalidGameDefinition):
        make_game(rewards=(_slot("a", 50), _slot("b", 50.02)))


def test_naive_dates_are_treated_as_utc():
    game = make_game(start=datetime(2026, 3, 1), end=datetime(2026, 4, 1))
    assert game.start_date.tzinfo == timezone.utc
    assert ensure_utc(datetime(2026, 3, 1, 5)) == datetime(2026, 3, 1, 5, tzinfo=timezone.utc)


def test_play_window_is_inclusive_but_listing_window_is_half_open():
    game = make_game(start=NOW - timedelta(hours=1), end=NOW)
    assert game.in_play_window(NOW)
    assert not game.is_running(NOW)
    assert game.is_running(NOW - timedelta(minutes=1))
    assert not game.in_play_window(NOW + timedelta(seconds=1))


def test_slot_exhaustion_flags():
    assert not _slot("a", 100).is_exhausted
    assert _slot("a", 100).remaining is None
    assert _slot("a", 100, limit=2, awarded=2).is_exhausted
    assert _slot("a", 100, limit=5, awarded=2).remaining == 3


def test_snapshot_detaches_slots():
    game = make_game()
    copy = game.snapshot()
    copy.rewards[0].awarded = 99
    assert game.rewards[0].awarded == 0


def test_granted_reward_description_marks_discount_percent():
    assert GrantedReward(reward_type=RewardType.DISCOUNT, value=15).describe() == "15% discount"
    assert GrantedReward(reward_type=RewardType.POINTS, value=50).describe() == "50 points"


def test_history_page_counts_pages():
    page = PlayHistoryPage.build([], total_count=41, page=3, page_size=20)
    assert page.total_pages == 3
    assert PlayHistoryPage.build([], total_count=0, page=1, page_size=20).total_pages == 0


def test_validate_game_reports_configuration_errors():
    game = make_game(
        rewards=(
            _slot("a", 50, limit=-1),
            _slot("a", 50, limit=1, awarded=3),
        ),
        start=NOW,
        end=NOW - timedelta(days=1),
    )
    errors = validate_game(game)
    assert any("start before it ends" in err for err in errors)
    assert any("duplicate reward id 'a'" in err for err in errors)
    assert any("negative limit" in err for err in errors)
    assert any("above its limit" in err for err in errors)


def test_validate_game_accepts_valid_definition():
    assert validate_game(make_game()) == []
