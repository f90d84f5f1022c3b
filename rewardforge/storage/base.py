"""Storage abstractions used by the RewardForge services.

The protocols below are the only seam between the play engine and
persistence. Award counters are mutated exclusively through
``conditional_increment_award`` / ``decrement_award``; implementations must
make each of those a single atomic operation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..domain.games import GameDefinition
from ..domain.plays import Play


class GameStore(Protocol):
    async def find_game(self, game_id: str) -> GameDefinition | None:
        """Return a detached snapshot of the game, or ``None``."""
        ...

    async def list_active_games(self, now: datetime) -> Sequence[GameDefinition]:
        ...

    async def conditional_increment_award(
        self, game_id: str, reward_id: str, expected_limit: int
    ) -> bool:
        """Increment ``awarded`` by one if ``expected_limit == 0`` or ``awarded < expected_limit``.

        Returns ``False`` when nothing was updated.
        """
        ...

    async def decrement_award(self, game_id: str, reward_id: str) -> bool:
        """Undo one award; never takes the counter below zero."""
        ...

    async def save_game(self, game: GameDefinition) -> None:
        ...

    async def set_active(self, game_id: str, active: bool) -> bool:
        ...


class PlayLedger(Protocol):
    async def count_plays(
        self, user_id: int, game_id: str, since: datetime | None = None
    ) -> int:
        ...

    async def insert_play(self, play: Play) -> None:
        ...

    async def history_for_user(
        self, user_id: int, *, offset: int = 0, limit: int = 20
    ) -> Sequence[Play]:
        """Plays of a user, newest first."""
        ...

    async def count_for_user(self, user_id: int) -> int:
        ...


class AuditStore(Protocol):
    async def add_entry(self, action: str, payload: dict) -> None:
        ...
