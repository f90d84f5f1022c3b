"""In-memory storage backend for RewardForge."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import replace
from datetime import datetime, timezone
from typing import Deque, Sequence

from ..domain.games import GameDefinition, ensure_utc
from ..domain.plays import Play
from .base import AuditStore, GameStore, PlayLedger


class InMemoryGameStore(GameStore):
    def __init__(self) -> None:
        self._games: dict[str, GameDefinition] = {}
        # Guards every counter mutation so check-and-increment stays atomic across threads.
        self._lock = threading.Lock()

    async def find_game(self, game_id: str) -> GameDefinition | None:
        with self._lock:
            game = self._games.get(game_id)
            return game.snapshot() if game else None

    async def list_active_games(self, now: datetime) -> Sequence[GameDefinition]:
        with self._lock:
            return [game.snapshot() for game in self._games.values() if game.is_running(now)]

    async def conditional_increment_award(
        self, game_id: str, reward_id: str, expected_limit: int
    ) -> bool:
        with self._lock:
            slot = self._find_slot(game_id, reward_id)
            if slot is None:
                return False
            if expected_limit > 0 and slot.awarded >= expected_limit:
                return False
            slot.awarded += 1
            return True

    async def decrement_award(self, game_id: str, reward_id: str) -> bool:
        with self._lock:
            slot = self._find_slot(game_id, reward_id)
            if slot is None or slot.awarded <= 0:
                return False
            slot.awarded -= 1
            return True

    async def save_game(self, game: GameDefinition) -> None:
        with self._lock:
            self._games[game.game_id] = game.snapshot()

    async def set_active(self, game_id: str, active: bool) -> bool:
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return False
            self._games[game_id] = replace(game, is_active=active)
            return True

    def _find_slot(self, game_id: str, reward_id: str):
        game = self._games.get(game_id)
        if game is None:
            return None
        try:
            return game.get_slot(reward_id)
        except KeyError:
            return None


class InMemoryPlayLedger(PlayLedger):
    def __init__(self) -> None:
        self._plays: list[Play] = []

    async def count_plays(
        self, user_id: int, game_id: str, since: datetime | None = None
    ) -> int:
        since_utc = ensure_utc(since) if since else None
        return sum(
            1
            for play in self._plays
            if play.user_id == user_id
            and play.game_id == game_id
            and (since_utc is None or ensure_utc(play.play_date) >= since_utc)
        )

    async def insert_play(self, play: Play) -> None:
        self._plays.append(replace(play))

    async def history_for_user(
        self, user_id: int, *, offset: int = 0, limit: int = 20
    ) -> Sequence[Play]:
        filtered = sorted(
            (play for play in self._plays if play.user_id == user_id),
            key=lambda play: ensure_utc(play.play_date),
            reverse=True,
        )
        return filtered[offset : offset + limit]

    async def count_for_user(self, user_id: int) -> int:
        return sum(1 for play in self._plays if play.user_id == user_id)


class InMemoryAuditStore(AuditStore):
    def __init__(self, *, maxlen: int = 1000) -> None:
        self._entries: Deque[tuple[datetime, str, dict]] = deque(maxlen=maxlen)

    async def add_entry(self, action: str, payload: dict) -> None:
        self._entries.append((datetime.now(timezone.utc), action, payload))

    def dump(self) -> list[tuple[datetime, str, dict]]:
        return list(self._entries)
