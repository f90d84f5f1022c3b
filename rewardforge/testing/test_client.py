"""Scenario client that drives plays without an HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ..domain.exceptions import RewardForgeError
from ..domain.orchestrator import PlayService


@dataclass(slots=True)
class PlayAttempt:
    __test__ = False

    user_id: int
    game_id: str
    ok: bool
    metadata: Dict[str, Any]


class TestClient:
    """Record play outcomes, including typed failures, for scenario assertions."""

    __test__ = False

    def __init__(self, play_service: PlayService) -> None:
        self._plays = play_service
        self._log: List[PlayAttempt] = []

    async def play(self, user_id: int, game_id: str) -> PlayAttempt:
        try:
            play = await self._plays.play(user_id, game_id)
        except RewardForgeError as exc:
            attempt = PlayAttempt(
                user_id=user_id,
                game_id=game_id,
                ok=False,
                metadata={"error": type(exc).__name__, "detail": str(exc)},
            )
        else:
            reward = play.reward
            attempt = PlayAttempt(
                user_id=user_id,
                game_id=game_id,
                ok=True,
                metadata={
                    "play_id": play.play_id,
                    "reward_type": reward.reward_type.value if reward else None,
                    "reward_value": reward.value if reward else None,
                    "reward_code": reward.code if reward else None,
                },
            )
        self._log.append(attempt)
        return attempt

    def history(self) -> List[PlayAttempt]:
        return list(self._log)
