"""Reward notifications sent after a successful play."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Protocol, Sequence

from .domain.plays import GrantedReward

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RelatedEntity:
    kind: str
    entity_id: str


@dataclass(slots=True)
class Notification:
    user_id: int
    title: str
    message: str
    category: str
    related_entity: RelatedEntity | None = None
    channels: Sequence[str] = field(default_factory=tuple)


class Notifier(Protocol):
    async def notify(self, notification: Notification) -> None:
        ...


def format_reward_message(reward: GrantedReward) -> str:
    return f"Congratulations! You won {reward.describe()}!"


class LoggingNotifier(Notifier):
    """Default notifier: writes the notification to the log."""

    async def notify(self, notification: Notification) -> None:
        logger.info(
            "Notify user %s [%s] %s: %s",
            notification.user_id,
            notification.category,
            notification.title,
            notification.message,
        )


class InMemoryNotifier(Notifier):
    def __init__(self, *, maxlen: int = 1000) -> None:
        self._sent: Deque[Notification] = deque(maxlen=maxlen)

    async def notify(self, notification: Notification) -> None:
        self._sent.append(notification)

    def dump(self) -> list[Notification]:
        return list(self._sent)


class NotificationDispatcher:
    """Fire-and-forget delivery: failures are logged, never raised to the caller."""

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._pending: set[asyncio.Task[None]] = set()

    def dispatch(self, notification: Notification) -> asyncio.Task[None]:
        task = asyncio.create_task(self._deliver(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every notification dispatched so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def _deliver(self, notification: Notification) -> None:
        try:
            await self._notifier.notify(notification)
        except Exception:
            logger.exception("Failed to notify user %s.", notification.user_id)
