"""Storage backends for RewardForge."""

from .base import AuditStore, GameStore, PlayLedger
from .memory import InMemoryAuditStore, InMemoryGameStore, InMemoryPlayLedger
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "AuditStore",
    "GameStore",
    "PlayLedger",
    "InMemoryAuditStore",
    "InMemoryGameStore",
    "InMemoryPlayLedger",
    "AsyncSQLAlchemyStorage",
]
