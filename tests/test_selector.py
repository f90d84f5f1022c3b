from random import Random

from rewardforge.domain.games import RewardSlot, RewardType
from rewardforge.domain.selector import RewardDraw, next_open_slot, select_reward


def _pool(points_awarded: int = 0):
    return (
        RewardSlot(
            reward_id="discount",
            reward_type=RewardType.DISCOUNT,
            value=10,
            probability=70,
        ),
        RewardSlot(
            reward_id="points",
            reward_type=RewardType.POINTS,
            value=50,
            probability=30,
            limit=1,
            awarded=points_awarded,
        ),
    )


def test_select_reward_uses_cumulative_windows():
    pool = _pool()
    assert select_reward(pool, 0.0).reward_id == "discount"
    assert select_reward(pool, 69.99).reward_id == "discount"
    assert select_reward(pool, 85).reward_id == "points"


def test_select_reward_boundary_belongs_to_next_slot():
    assert select_reward(_pool(), 70.0).reward_id == "points"


def test_select_reward_is_deterministic():
    pool = _pool()
    assert {select_reward(pool, 42.5).reward_id for _ in range(50)} == {"discount"}


def test_exhausted_trailing_slot_wraps_to_first_open_slot():
    pool = _pool(points_awarded=1)
    slot = select_reward(pool, 85)
    assert slot is not None
    assert slot.reward_id == "discount"
    assert pool[1].awarded == 1


def test_fully_exhausted_pool_yields_none():
    pool = (
        RewardSlot(reward_id="a", reward_type=RewardType.POINTS, value=5, probability=40, limit=2, awarded=2),
        RewardSlot(reward_id="b", reward_type=RewardType.FREE_ITEM, value=1, probability=60, limit=1, awarded=1),
    )
    assert select_reward(pool, 10) is None
    assert select_reward(pool, 90) is None


def test_exhausted_slot_mass_moves_to_later_slot():
    pool = (
        RewardSlot(reward_id="points", reward_type=RewardType.POINTS, value=50, probability=30, limit=1, awarded=1),
        RewardSlot(reward_id="discount", reward_type=RewardType.DISCOUNT, value=10, probability=70),
    )
    slot = select_reward(pool, 10)
    assert slot is not None
    assert slot.reward_id == "discount"
    assert pool[0].awarded == 1


def test_exhausted_slot_is_never_selected_when_draw_falls_in_open_window():
    slot = select_reward(_pool(points_awarded=1), 12)
    assert slot.reward_id == "discount"


def test_zero_probability_slot_is_never_selected():
    pool = (
        RewardSlot(reward_id="ghost", reward_type=RewardType.FREE_ITEM, value=1, probability=0),
        RewardSlot(reward_id="all", reward_type=RewardType.FREE_DELIVERY, value=1, probability=100),
    )
    assert select_reward(pool, 0.0).reward_id == "all"


def test_empty_pool_returns_none():
    assert select_reward((), 50) is None


def test_reward_draw_stays_within_range():
    draw = RewardDraw(Random(7))
    values = [draw() for _ in range(1000)]
    assert all(0 <= value < 100 for value in values)


def test_next_open_slot_follows_walk_then_wraps():
    pool = (
        RewardSlot(reward_id="a", reward_type=RewardType.POINTS, value=5, probability=20),
        RewardSlot(reward_id="b", reward_type=RewardType.FREE_ITEM, value=1, probability=30, limit=1),
        RewardSlot(reward_id="c", reward_type=RewardType.DISCOUNT, value=5, probability=50, limit=3),
    )
    assert next_open_slot(pool, 1).reward_id == "c"
    assert next_open_slot(pool, 2).reward_id == "a"
