"""SQLAlchemy storage backend for RewardForge."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    delete,
    func,
    select,
    update,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.games import GameDefinition, GameType, RewardSlot, RewardType, ensure_utc
from ..domain.plays import GrantedReward, Play
from .base import AuditStore, GameStore, PlayLedger


class Base(DeclarativeBase):
    pass


class GameTable(Base):
    __tablename__ = "rewardforge_games"

    game_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    game_type: Mapped[str] = mapped_column(String(32))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    daily_play_limit: Mapped[int] = mapped_column(Integer, default=1)
    total_play_limit: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    __table_args__ = (Index("ix_rewardforge_games_window", "start_date", "end_date"),)


class RewardSlotTable(Base):
    __tablename__ = "rewardforge_reward_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("rewardforge_games.game_id", ondelete="CASCADE"), index=True
    )
    reward_id: Mapped[str] = mapped_column(String(64))
    position: Mapped[int] = mapped_column(Integer)
    reward_type: Mapped[str] = mapped_column(String(32))
    value: Mapped[float] = mapped_column(Float)
    code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    probability: Mapped[float] = mapped_column(Float)
    award_limit: Mapped[int] = mapped_column(Integer, default=0)
    awarded: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (UniqueConstraint("game_id", "reward_id", name="uq_rewardforge_slot"),)


class PlayTable(Base):
    __tablename__ = "rewardforge_plays"

    play_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    game_id: Mapped[str] = mapped_column(String(64))
    play_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    reward_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    reward_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    reward_code: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    reward_used: Mapped[bool] = mapped_column(Boolean, default=False)
    reward_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_rewardforge_plays_quota", "user_id", "game_id", "play_date"),
    )


class AuditTable(Base):
    __tablename__ = "rewardforge_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    action: Mapped[str] = mapped_column(String(128))
    payload: Mapped[dict] = mapped_column(JSON)


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def game_store(self) -> "AsyncSQLAlchemyGameStore":
        return AsyncSQLAlchemyGameStore(self._session_factory)

    def play_ledger(self) -> "AsyncSQLAlchemyPlayLedger":
        return AsyncSQLAlchemyPlayLedger(self._session_factory)

    def audit_store(self) -> "AsyncSQLAlchemyAuditStore":
        return AsyncSQLAlchemyAuditStore(self._session_factory)


class AsyncSQLAlchemyGameStore(GameStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_game(self, game_id: str) -> GameDefinition | None:
        async with self._session_factory() as session:
            row = await session.get(GameTable, game_id)
            if row is None:
                return None
            slots = await self._load_slots(session, [game_id])
            return _to_game(row, slots.get(game_id, []))

    async def list_active_games(self, now: datetime) -> Sequence[GameDefinition]:
        now = ensure_utc(now)
        async with self._session_factory() as session:
            stmt = (
                select(GameTable)
                .where(
                    GameTable.is_active.is_(True),
                    GameTable.start_date <= now,
                    GameTable.end_date > now,
                )
                .order_by(GameTable.start_date)
            )
            rows = (await session.execute(stmt)).scalars().all()
            slots = await self._load_slots(session, [row.game_id for row in rows])
            return [_to_game(row, slots.get(row.game_id, [])) for row in rows]

    async def conditional_increment_award(
        self, game_id: str, reward_id: str, expected_limit: int
    ) -> bool:
        async with self._session_factory() as session:
            stmt = update(RewardSlotTable).where(
                RewardSlotTable.game_id == game_id,
                RewardSlotTable.reward_id == reward_id,
            )
            if expected_limit > 0:
                stmt = stmt.where(RewardSlotTable.awarded < expected_limit)
            stmt = stmt.values(awarded=RewardSlotTable.awarded + 1).execution_options(
                synchronize_session=False
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount == 1

    async def decrement_award(self, game_id: str, reward_id: str) -> bool:
        async with self._session_factory() as session:
            stmt = (
                update(RewardSlotTable)
                .where(
                    RewardSlotTable.game_id == game_id,
                    RewardSlotTable.reward_id == reward_id,
                    RewardSlotTable.awarded > 0,
                )
                .values(awarded=RewardSlotTable.awarded - 1)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount == 1

    async def save_game(self, game: GameDefinition) -> None:
        async with self._session_factory() as session:
            await session.merge(
                GameTable(
                    game_id=game.game_id,
                    name=game.name,
                    description=game.description,
                    game_type=game.game_type.value,
                    is_active=game.is_active,
                    start_date=game.start_date,
                    end_date=game.end_date,
                    daily_play_limit=game.daily_play_limit,
                    total_play_limit=game.total_play_limit,
                    created_at=ensure_utc(game.created_at or datetime.now(timezone.utc)),
                )
            )
            await session.execute(
                delete(RewardSlotTable).where(RewardSlotTable.game_id == game.game_id)
            )
            session.add_all(
                RewardSlotTable(
                    game_id=game.game_id,
                    reward_id=slot.reward_id,
                    position=position,
                    reward_type=slot.reward_type.value,
                    value=slot.value,
                    code=slot.code,
                    probability=slot.probability,
                    award_limit=slot.limit,
                    awarded=slot.awarded,
                )
                for position, slot in enumerate(game.rewards)
            )
            await session.commit()

    async def set_active(self, game_id: str, active: bool) -> bool:
        async with self._session_factory() as session:
            stmt = update(GameTable).where(GameTable.game_id == game_id).values(is_active=active)
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount == 1

    async def _load_slots(
        self, session: AsyncSession, game_ids: Sequence[str]
    ) -> dict[str, list[RewardSlotTable]]:
        if not game_ids:
            return {}
        stmt = (
            select(RewardSlotTable)
            .where(RewardSlotTable.game_id.in_(game_ids))
            .order_by(RewardSlotTable.game_id, RewardSlotTable.position)
        )
        grouped: dict[str, list[RewardSlotTable]] = {}
        for row in (await session.execute(stmt)).scalars():
            grouped.setdefault(row.game_id, []).append(row)
        return grouped


class AsyncSQLAlchemyPlayLedger(PlayLedger):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count_plays(
        self, user_id: int, game_id: str, since: datetime | None = None
    ) -> int:
        async with self._session_factory() as session:
            stmt = (
                select(func.count())
                .select_from(PlayTable)
                .where(PlayTable.user_id == user_id, PlayTable.game_id == game_id)
            )
            if since is not None:
                stmt = stmt.where(PlayTable.play_date >= ensure_utc(since))
            return int((await session.execute(stmt)).scalar_one())

    async def insert_play(self, play: Play) -> None:
        reward = play.reward
        async with self._session_factory() as session:
            session.add(
                PlayTable(
                    play_id=play.play_id,
                    user_id=play.user_id,
                    game_id=play.game_id,
                    play_date=ensure_utc(play.play_date),
                    reward_type=reward.reward_type.value if reward else None,
                    reward_value=reward.value if reward else None,
                    reward_code=reward.code if reward else None,
                    reward_used=reward.used if reward else False,
                    reward_used_at=reward.used_at if reward else None,
                )
            )
            await session.commit()

    async def history_for_user(
        self, user_id: int, *, offset: int = 0, limit: int = 20
    ) -> Sequence[Play]:
        async with self._session_factory() as session:
            stmt = (
                select(PlayTable)
                .where(PlayTable.user_id == user_id)
                .order_by(PlayTable.play_date.desc())
                .offset(offset)
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [_to_play(row) for row in rows]

    async def count_for_user(self, user_id: int) -> int:
        async with self._session_factory() as session:
            stmt = select(func.count()).select_from(PlayTable).where(PlayTable.user_id == user_id)
            return int((await session.execute(stmt)).scalar_one())


class AsyncSQLAlchemyAuditStore(AuditStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_entry(self, action: str, payload: dict) -> None:
        async with self._session_factory() as session:
            session.add(
                AuditTable(
                    created_at=datetime.now(timezone.utc),
                    action=action,
                    payload=dict(payload),
                )
            )
            await session.commit()


def _to_game(row: GameTable, slots: Sequence[RewardSlotTable]) -> GameDefinition:
    return GameDefinition(
        game_id=row.game_id,
        name=row.name,
        description=row.description or "",
        game_type=GameType(row.game_type),
        is_active=row.is_active,
        start_date=ensure_utc(row.start_date),
        end_date=ensure_utc(row.end_date),
        daily_play_limit=row.daily_play_limit,
        total_play_limit=row.total_play_limit,
        created_at=ensure_utc(row.created_at) if row.created_at else None,
        rewards=tuple(
            RewardSlot(
                reward_id=slot.reward_id,
                reward_type=RewardType(slot.reward_type),
                value=slot.value,
                code=slot.code,
                probability=slot.probability,
                limit=slot.award_limit,
                awarded=slot.awarded,
            )
            for slot in slots
        ),
    )


def _to_play(row: PlayTable) -> Play:
    reward = None
    if row.reward_type is not None:
        reward = GrantedReward(
            reward_type=RewardType(row.reward_type),
            value=row.reward_value or 0.0,
            code=row.reward_code,
            used=row.reward_used,
            used_at=ensure_utc(row.reward_used_at) if row.reward_used_at else None,
        )
    return Play(
        play_id=row.play_id,
        user_id=row.user_id,
        game_id=row.game_id,
        play_date=ensure_utc(row.play_date),
        reward=reward,
    )
