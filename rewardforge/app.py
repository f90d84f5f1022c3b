"""Top level application object for RewardForge."""

from __future__ import annotations

from random import Random
from typing import Any

from .admin.service import AdminService
from .config import RewardForgeConfig
from .domain.eligibility import Clock, EligibilityChecker, utc_now
from .domain.orchestrator import PlayService
from .domain.selector import RewardDraw
from .notifications import LoggingNotifier, NotificationDispatcher, Notifier
from .storage.base import AuditStore, GameStore, PlayLedger
from .storage.memory import InMemoryAuditStore, InMemoryGameStore, InMemoryPlayLedger
from .storage.sqlalchemy import AsyncSQLAlchemyStorage
from .telegram.notifier import TelegramNotifier


class RewardApp:
    """Central dependency container used by services and integrations."""

    def __init__(
        self,
        config: RewardForgeConfig,
        *,
        game_store: GameStore | None = None,
        play_ledger: PlayLedger | None = None,
        audit_store: AuditStore | None = None,
        notifier: Notifier | None = None,
        rng: Random | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config
        self.clock = clock
        self._rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else Random())

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        (
            self.game_store,
            self.play_ledger,
            self.audit_store,
        ) = self._wire_storage(game_store, play_ledger, audit_store)

        self.notifier = notifier or self._default_notifier()
        self.dispatcher = NotificationDispatcher(self.notifier)

        self.eligibility = EligibilityChecker(
            self.game_store,
            self.play_ledger,
            day_boundary=self.config.play.resolve_timezone(),
            clock=clock,
        )
        self.play_service = PlayService(
            games=self.game_store,
            ledger=self.play_ledger,
            eligibility=self.eligibility,
            dispatcher=self.dispatcher,
            play_config=self.config.play,
            notification_config=self.config.notifications,
            draw=RewardDraw(self._rng),
            clock=clock,
        )
        self.admin_service = AdminService(
            self.game_store,
            self.audit_store,
            enable_audit_logs=self.config.admin.enable_audit_logs,
        )

    def _default_notifier(self) -> Notifier:
        token = self.config.telegram.bot_token
        if token:
            return TelegramNotifier.from_token(token)
        return LoggingNotifier()

    def _wire_storage(
        self,
        game_store: GameStore | None,
        play_ledger: PlayLedger | None,
        audit_store: AuditStore | None,
    ) -> tuple[GameStore, PlayLedger, AuditStore]:
        if game_store and play_ledger and audit_store:
            return game_store, play_ledger, audit_store

        backend = self.config.storage.backend
        if backend == "memory":
            return (
                game_store or InMemoryGameStore(),
                play_ledger or InMemoryPlayLedger(),
                audit_store or InMemoryAuditStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return (
                game_store or storage.game_store(),
                play_ledger or storage.play_ledger(),
                audit_store or storage.audit_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "notifier": type(self.notifier).__name__,
            "max_conflict_retries": self.config.play.max_conflict_retries,
            "day_boundary_tz": self.config.play.day_boundary_tz or "local",
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def shutdown(self) -> None:
        """Flush pending notifications and release storage resources."""
        await self.dispatcher.drain()
        if isinstance(self.notifier, TelegramNotifier):
            await self.notifier.close()
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
