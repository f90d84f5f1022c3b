"""Game definitions and their reward pools."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Sequence

from .exceptions import InvalidGameDefinition

PROBABILITY_TOTAL = 100.0
PROBABILITY_TOLERANCE = 0.01


class RewardType(str, Enum):
    DISCOUNT = "discount"
    POINTS = "points"
    FREE_ITEM = "free_item"
    FREE_DELIVERY = "free_delivery"


class GameType(str, Enum):
    SPIN_WHEEL = "spin_wheel"
    SCRATCH_CARD = "scratch_card"
    MEMORY_MATCH = "memory_match"
    QUIZ = "quiz"


def ensure_utc(value: datetime) -> datetime:
    """Normalize a timestamp to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(slots=True)
class RewardSlot:
    """One configured reward option with its weight and optional award cap."""

    reward_id: str
    reward_type: RewardType
    value: float
    probability: float
    code: str | None = None
    limit: int = 0
    awarded: int = 0

    @property
    def is_unlimited(self) -> bool:
        return self.limit == 0

    @property
    def is_exhausted(self) -> bool:
        return self.limit > 0 and self.awarded >= self.limit

    @property
    def remaining(self) -> int | None:
        if self.is_unlimited:
            return None
        return max(0, self.limit - self.awarded)


@dataclass(slots=True)
class GameDefinition:
    """A time-boxed mini-game with a weighted reward pool.

    The probabilities of all slots must add up to 100 (within 0.01);
    construction fails with :class:`InvalidGameDefinition` otherwise.
    """

    game_id: str
    name: str
    start_date: datetime
    end_date: datetime
    rewards: Sequence[RewardSlot]
    description: str = ""
    game_type: GameType = GameType.SPIN_WHEEL
    is_active: bool = True
    daily_play_limit: int = 1
    total_play_limit: int = 0
    created_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.rewards = tuple(self.rewards)
        self.start_date = ensure_utc(self.start_date)
        self.end_date = ensure_utc(self.end_date)
        total = self.probability_total()
        if abs(total - PROBABILITY_TOTAL) > PROBABILITY_TOLERANCE:
            raise InvalidGameDefinition(
                [f"Game '{self.game_id}' reward probabilities sum to {total:g}, expected 100"]
            )

    def probability_total(self) -> float:
        return sum(slot.probability for slot in self.rewards)

    def in_play_window(self, now: datetime) -> bool:
        """Window used by eligibility: both ends inclusive."""
        now = ensure_utc(now)
        return self.start_date <= now <= self.end_date

    def is_running(self, now: datetime) -> bool:
        """Window used for listings: active and ``start <= now < end``."""
        now = ensure_utc(now)
        return self.is_active and self.start_date <= now < self.end_date

    def get_slot(self, reward_id: str) -> RewardSlot:
        for slot in self.rewards:
            if slot.reward_id == reward_id:
                return slot
        raise KeyError(f"Reward {reward_id} not found in game {self.game_id}")

    def snapshot(self) -> "GameDefinition":
        """Return a copy whose slots can be mutated without touching this one."""
        return replace(self, rewards=tuple(replace(slot) for slot in self.rewards))

