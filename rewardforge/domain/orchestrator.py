"""Play orchestration: eligibility, draw, award claim, ledger write, notification."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from .eligibility import GAME_NOT_FOUND, Clock, EligibilityChecker, EligibilityResult, utc_now
from .exceptions import ConcurrentConflict, NoRewardAvailable, NotEligible
from .games import GameDefinition, RewardSlot
from .plays import GrantedReward, Play, PlayHistoryPage
from .selector import RewardDraw, select_reward
from ..config import NotificationConfig, PlayConfig
from ..notifications import (
    Notification,
    NotificationDispatcher,
    RelatedEntity,
    format_reward_message,
)
from ..storage.base import GameStore, PlayLedger

logger = logging.getLogger(__name__)


class PlayService:
    """Run plays and expose the read operations around them.

    ``play`` claims a reward unit with a conditional increment before the play
    is written to the ledger. The two writes are not one transaction: when the
    ledger insert fails, or the caller is cancelled at any point after the
    increment was issued, the claimed unit is given back with a compensating
    decrement before the error propagates.
    """

    def __init__(
        self,
        games: GameStore,
        ledger: PlayLedger,
        eligibility: EligibilityChecker,
        dispatcher: NotificationDispatcher,
        play_config: PlayConfig,
        notification_config: NotificationConfig,
        *,
        draw: Callable[[], float] | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._games = games
        self._ledger = ledger
        self._eligibility = eligibility
        self._dispatcher = dispatcher
        self._play = play_config
        self._notifications = notification_config
        self._draw = draw or RewardDraw()
        self._clock = clock

    async def list_active_games(self) -> Sequence[GameDefinition]:
        return await self._games.list_active_games(self._clock())

    async def check_eligibility(self, user_id: int, game_id: str) -> EligibilityResult:
        return await self._eligibility.can_play(user_id, game_id)

    async def play(self, user_id: int, game_id: str) -> Play:
        eligibility = await self._eligibility.can_play(user_id, game_id)
        if not eligibility.allowed:
            raise NotEligible(eligibility.reason or "not eligible")

        slot = await self._claim_reward(game_id)
        reward = GrantedReward.from_slot(slot)
        play = Play(
            user_id=user_id,
            game_id=game_id,
            play_date=self._clock(),
            reward=reward,
        )

        try:
            await self._ledger.insert_play(play)
        except (Exception, asyncio.CancelledError):
            await self._compensate(game_id, slot.reward_id)
            raise

        logger.debug(
            "User %s won %s in game %s (play %s).",
            user_id,
            reward.describe(),
            game_id,
            play.play_id,
        )
        if self._notifications.enabled:
            self._dispatcher.dispatch(self._build_notification(play, reward))
        return play

    async def get_play_history(
        self, user_id: int, page: int = 1, page_size: int = 20
    ) -> PlayHistoryPage:
        if page < 1:
            raise ValueError("Page must be positive")
        if page_size < 1:
            raise ValueError("Page size must be positive")
        total = await self._ledger.count_for_user(user_id)
        plays = await self._ledger.history_for_user(
            user_id, offset=(page - 1) * page_size, limit=page_size
        )
        return PlayHistoryPage.build(plays, total_count=total, page=page, page_size=page_size)

    async def drain_notifications(self) -> None:
        await self._dispatcher.drain()

    async def _claim_reward(self, game_id: str) -> RewardSlot:
        attempts = self._play.max_conflict_retries + 1
        for attempt in range(1, attempts + 1):
            game = await self._games.find_game(game_id)
            if game is None:
                raise NotEligible(GAME_NOT_FOUND)

            slot = select_reward(game.rewards, self._draw())
            if slot is None:
                raise NoRewardAvailable(f"No available rewards in game {game_id}")

            if await self._claim_unit(game_id, slot):
                return slot

            logger.info(
                "Reward %s in game %s was claimed concurrently (attempt %s/%s).",
                slot.reward_id,
                game_id,
                attempt,
                attempts,
            )
        raise ConcurrentConflict(game_id, attempts)

    async def _claim_unit(self, game_id: str, slot: RewardSlot) -> bool:
        """Conditional increment that survives cancellation of the caller.

        The increment runs as its own task. If the caller is cancelled while it
        is pending, the task is allowed to finish and a committed unit is given
        back before the cancellation propagates.
        """
        claim = asyncio.ensure_future(
            self._games.conditional_increment_award(game_id, slot.reward_id, slot.limit)
        )
        try:
            return await asyncio.shield(claim)
        except asyncio.CancelledError:
            await asyncio.shield(self._release_abandoned_claim(claim, game_id, slot.reward_id))
            raise

    async def _release_abandoned_claim(
        self, claim: asyncio.Future[bool], game_id: str, reward_id: str
    ) -> None:
        try:
            claimed = await claim
        except Exception:
            logger.warning(
                "Award claim for reward %s in game %s failed after the play was cancelled.",
                reward_id,
                game_id,
                exc_info=True,
            )
            return
        if claimed:
            await self._compensate(game_id, reward_id)

    async def _compensate(self, game_id: str, reward_id: str) -> None:
        logger.warning(
            "Play aborted after claiming reward %s; returning it to game %s.", reward_id, game_id
        )
        try:
            await asyncio.shield(self._games.decrement_award(game_id, reward_id))
        except (Exception, asyncio.CancelledError):
            logger.exception(
                "Compensation failed for reward %s in game %s; award counter is one too high.",
                reward_id,
                game_id,
            )

    def _build_notification(self, play: Play, reward: GrantedReward) -> Notification:
        return Notification(
            user_id=play.user_id,
            title=self._notifications.title,
            message=format_reward_message(reward),
            category=self._notifications.category,
            related_entity=RelatedEntity(kind="game", entity_id=play.game_id),
            channels=tuple(self._notifications.channels),
        )
