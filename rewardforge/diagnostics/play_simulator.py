"""Monte-Carlo estimation of effective reward distribution."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Dict

from ..domain.games import GameDefinition
from ..domain.selector import RewardDraw, select_reward


@dataclass(slots=True)
class SimulationResult:
    plays: int
    awarded: Dict[str, int] = field(default_factory=dict)
    configured: Dict[str, float] = field(default_factory=dict)
    no_reward: int = 0

    def share(self, reward_id: str) -> float:
        """Observed share of plays (percent) that granted ``reward_id``."""
        if not self.plays:
            return 0.0
        return self.awarded.get(reward_id, 0) * 100.0 / self.plays


class PlaySimulator:
    """Replay the selector against a private copy of a game's pool.

    Caps are honoured, so the result shows how probability mass moves once
    capped slots run out.
    """

    def __init__(self, *, rng: Random | None = None) -> None:
        self._draw = RewardDraw(rng or Random())

    def simulate(self, game: GameDefinition, *, plays: int = 1000) -> SimulationResult:
        if plays <= 0:
            raise ValueError("Plays must be positive")
        pool = game.snapshot()
        result = SimulationResult(
            plays=plays,
            awarded={slot.reward_id: 0 for slot in pool.rewards},
            configured={slot.reward_id: slot.probability for slot in pool.rewards},
        )
        for _ in range(plays):
            slot = select_reward(pool.rewards, self._draw())
            if slot is None:
                result.no_reward += 1
                continue
            slot.awarded += 1
            result.awarded[slot.reward_id] += 1
        return result
