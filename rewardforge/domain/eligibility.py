"""Play eligibility rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable

from ..storage.base import GameStore, PlayLedger

Clock = Callable[[], datetime]

GAME_NOT_FOUND = "game not found"
GAME_NOT_ACTIVE = "game not active"
OUTSIDE_ACTIVE_WINDOW = "outside active window"
DAILY_LIMIT_REACHED = "daily limit reached"
TOTAL_LIMIT_REACHED = "total limit reached"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class EligibilityResult:
    allowed: bool
    reason: str | None = None

    @classmethod
    def deny(cls, reason: str) -> "EligibilityResult":
        return cls(allowed=False, reason=reason)


class EligibilityChecker:
    """Decide whether a user may play a game right now.

    Read-only: quota counts may lag behind plays that are still in flight.
    """

    def __init__(
        self,
        games: GameStore,
        ledger: PlayLedger,
        *,
        day_boundary: tzinfo | None = timezone.utc,
        clock: Clock = utc_now,
    ) -> None:
        self._games = games
        self._ledger = ledger
        self._day_boundary = day_boundary
        self._clock = clock

    async def can_play(self, user_id: int, game_id: str) -> EligibilityResult:
        game = await self._games.find_game(game_id)
        if game is None:
            return EligibilityResult.deny(GAME_NOT_FOUND)
        if not game.is_active:
            return EligibilityResult.deny(GAME_NOT_ACTIVE)

        now = self._clock()
        if not game.in_play_window(now):
            return EligibilityResult.deny(OUTSIDE_ACTIVE_WINDOW)

        if game.daily_play_limit > 0:
            plays_today = await self._ledger.count_plays(
                user_id, game_id, since=self.start_of_day(now)
            )
            if plays_today >= game.daily_play_limit:
                return EligibilityResult.deny(DAILY_LIMIT_REACHED)

        if game.total_play_limit > 0:
            total_plays = await self._ledger.count_plays(user_id, game_id)
            if total_plays >= game.total_play_limit:
                return EligibilityResult.deny(TOTAL_LIMIT_REACHED)

        return EligibilityResult(allowed=True)

    def start_of_day(self, now: datetime) -> datetime:
        """Midnight of the calendar day containing ``now`` in the day-boundary zone.

        With no zone set the host zone is consulted on every call, so the
        offset at midnight is used even when a DST change happened since.
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if self._day_boundary is None:
            midnight = now.astimezone().replace(
                hour=0, minute=0, second=0, microsecond=0, tzinfo=None
            )
            return midnight.astimezone()
        local = now.astimezone(self._day_boundary)
        return local.replace(hour=0, minute=0, second=0, microsecond=0)
