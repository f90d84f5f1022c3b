"""Configuration models for RewardForge."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Literal, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


StorageBackend = Literal["memory", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure where games and plays are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./rewardforge.db"
        return None


@dataclass(slots=True)
class PlayConfig:
    """Rules applied to every play attempt."""

    max_conflict_retries: int = 3
    # IANA zone name used to find "today" for daily quotas; None means host local time.
    day_boundary_tz: str | None = None

    def resolve_timezone(self) -> tzinfo | None:
        """Zone for daily quotas; ``None`` defers to the host zone at each check."""
        if not self.day_boundary_tz:
            return None
        if self.day_boundary_tz.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(self.day_boundary_tz)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone {self.day_boundary_tz!r}") from exc


@dataclass(slots=True)
class NotificationConfig:
    """Controls the post-play reward notification."""

    enabled: bool = True
    title: str = "You won a reward!"
    category: str = "system"
    channels: Sequence[str] = ("in_app",)


@dataclass(slots=True)
class TelegramConfig:
    bot_token: str = ""


@dataclass(slots=True)
class AdminConfig:
    """Feature switches for admin tooling."""

    enable_audit_logs: bool = True


@dataclass(slots=True)
class RewardForgeConfig:
    """Top-level configuration container."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    play: PlayConfig = field(default_factory=PlayConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "RewardForgeConfig":
        """Create config from environment variables prefixed with REWARDFORGE_."""
        prefix = "REWARDFORGE_"
        storage_backend = os.getenv(f"{prefix}STORAGE_BACKEND", "memory")
        if storage_backend not in ("memory", "sqlalchemy"):
            raise ValueError(f"Unsupported {prefix}STORAGE_BACKEND {storage_backend!r}")

        retries = int(os.getenv(f"{prefix}PLAY_MAX_CONFLICT_RETRIES", "3"))
        if retries < 0:
            raise ValueError(f"{prefix}PLAY_MAX_CONFLICT_RETRIES cannot be negative")

        channels = tuple(
            channel.strip()
            for channel in os.getenv(f"{prefix}NOTIFY_CHANNELS", "in_app").split(",")
            if channel.strip()
        )

        return cls(
            storage=StorageConfig(
                backend=storage_backend,
                dsn=os.getenv(f"{prefix}STORAGE_DSN"),
                echo_sql=os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY,
            ),
            play=PlayConfig(
                max_conflict_retries=retries,
                day_boundary_tz=os.getenv(f"{prefix}PLAY_DAY_BOUNDARY_TZ") or None,
            ),
            notifications=NotificationConfig(
                enabled=os.getenv(f"{prefix}NOTIFY_ENABLED", "true").lower() in _TRUTHY,
                title=os.getenv(f"{prefix}NOTIFY_TITLE", "You won a reward!"),
                category=os.getenv(f"{prefix}NOTIFY_CATEGORY", "system"),
                channels=channels or ("in_app",),
            ),
            telegram=TelegramConfig(bot_token=os.getenv(f"{prefix}TELEGRAM_BOT_TOKEN", "")),
            admin=AdminConfig(
                enable_audit_logs=os.getenv(f"{prefix}ADMIN_ENABLE_AUDIT_LOGS", "true").lower()
                in _TRUTHY,
            ),
            rng_seed=(
                int(os.getenv(f"{prefix}RNG_SEED")) if os.getenv(f"{prefix}RNG_SEED") else None
            ),
        )
