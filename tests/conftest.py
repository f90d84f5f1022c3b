from datetime import datetime, timedelta, timezone
from random import Random

import pytest

from rewardforge.domain.games import GameDefinition, RewardSlot, RewardType
from rewardforge.testing import app_fixture

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class FixedRandom(Random):
    """Random source whose ``random()`` always returns the configured value."""

    def __init__(self, value: float) -> None:
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


def make_game(
    *,
    game_id: str = "wheel",
    rewards=None,
    daily_play_limit: int = 0,
    total_play_limit: int = 0,
    is_active: bool = True,
    start: datetime | None = None,
    end: datetime | None = None,
) -> GameDefinition:
    if rewards is None:
        rewards = (
            RewardSlot(
                reward_id="discount",
                reward_type=RewardType.DISCOUNT,
                value=10,
                code="SPIN10",
                probability=70,
            ),
            RewardSlot(
                reward_id="points",
                reward_type=RewardType.POINTS,
                value=50,
                probability=30,
                limit=1,
            ),
        )
    return GameDefinition(
        game_id=game_id,
        name="Spin the wheel",
        start_date=start or NOW - timedelta(days=1),
        end_date=end or NOW + timedelta(days=1),
        rewards=rewards,
        is_active=is_active,
        daily_play_limit=daily_play_limit,
        total_play_limit=total_play_limit,
    )


@pytest.fixture()
def app():
    return app_fixture(clock=lambda: NOW, rng=FixedRandom(0.5))
