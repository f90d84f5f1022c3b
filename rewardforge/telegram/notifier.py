"""Deliver reward notifications to Telegram chats."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot
from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramRetryAfter,
)

from ..notifications import Notification, Notifier

logger = logging.getLogger(__name__)


def format_notification(notification: Notification) -> str:
    return f"🎁 {notification.title}\n{notification.message}"


class TelegramNotifier(Notifier):
    """Send notifications as bot messages; the user id doubles as the chat id.

    Rate limits are retried up to ``retries`` times. Blocked chats and bad
    requests are logged and dropped since delivery is best-effort.
    """

    def __init__(self, bot: Bot, *, retries: int = 3) -> None:
        self._bot = bot
        self._retries = retries

    @classmethod
    def from_token(cls, token: str, *, retries: int = 3) -> "TelegramNotifier":
        if not token:
            raise ValueError("Telegram notifier requires a bot token")
        return cls(Bot(token), retries=retries)

    async def close(self) -> None:
        await self._bot.session.close()

    async def notify(self, notification: Notification) -> None:
        await self.send(notification.user_id, format_notification(notification))

    async def send(self, chat_id: int, text: str) -> bool:
        """Send a message and report whether Telegram accepted it."""
        attempt = 0
        while True:
            try:
                await self._bot.send_message(chat_id, text)
                return True
            except TelegramRetryAfter as exc:
                attempt += 1
                if attempt >= self._retries:
                    logger.warning(
                        "Notification to chat %s exceeded retry limit (%s attempts, retry_after=%s).",
                        chat_id,
                        attempt,
                        getattr(exc, "retry_after", None),
                    )
                    return False
                delay = float(getattr(exc, "retry_after", 0) or 1.0)
                logger.info(
                    "Notification to chat %s hit rate limit; sleeping for %.1f s (attempt %s/%s).",
                    chat_id,
                    delay,
                    attempt,
                    self._retries,
                )
                await asyncio.sleep(delay)
            except TelegramForbiddenError:
                logger.info("Chat %s blocked the bot; notification dropped.", chat_id)
                return False
            except TelegramBadRequest as exc:
                logger.warning("Notification to chat %s rejected: %s", chat_id, exc)
                return False
            except TelegramAPIError as exc:
                logger.error("Notification to chat %s failed: %s", chat_id, exc, exc_info=True)
                return False
