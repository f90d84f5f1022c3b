"""Telegram integration for RewardForge notifications."""

from .notifier import TelegramNotifier, format_notification

__all__ = ["TelegramNotifier", "format_notification"]
