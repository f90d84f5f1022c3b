"""Play ledger entries."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from .games import RewardSlot, RewardType


@dataclass(slots=True)
class GrantedReward:
    """Snapshot of the reward slot at the moment it was won."""

    reward_type: RewardType
    value: float
    code: str | None = None
    used: bool = False
    used_at: datetime | None = None

    @classmethod
    def from_slot(cls, slot: RewardSlot) -> "GrantedReward":
        return cls(reward_type=slot.reward_type, value=slot.value, code=slot.code)

    def describe(self) -> str:
        suffix = "%" if self.reward_type is RewardType.DISCOUNT else ""
        return f"{self.value:g}{suffix} {self.reward_type.value}"


@dataclass(slots=True)
class Play:
    user_id: int
    game_id: str
    play_date: datetime
    reward: GrantedReward | None = None
    play_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(slots=True)
class PlayHistoryPage:
    plays: Sequence[Play]
    total_count: int
    current_page: int
    total_pages: int

    @classmethod
    def build(
        cls, plays: Sequence[Play], *, total_count: int, page: int, page_size: int
    ) -> "PlayHistoryPage":
        return cls(
            plays=list(plays),
            total_count=total_count,
            current_page=page,
            total_pages=math.ceil(total_count / page_size),
        )
