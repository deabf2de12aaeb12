"""
Database configuration and session management with SQLAlchemy.

Uses async SQLAlchemy for non-blocking database operations.

Design Decisions:
- AsyncSession for non-blocking operations
- Explicit Database handle owned by the application (no module globals)
- Lazy engine creation, explicit teardown via close()
- Session-per-request pattern
- Transfer -> Company is a one-way foreign key; no ORM back-collection
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator

from sqlalchemy import DateTime, ForeignKey, Numeric, String, event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from empresas.config import Settings
from empresas.domain.models import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    NAME_MAX_LENGTH,
    TAX_ID_LENGTH,
)

logger = logging.getLogger(__name__)

_CENT = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)


class Money(TypeDecorator):
    """
    Exact monetary amount.

    NUMERIC(18, 2) where the database has a real decimal type. SQLite
    stores NUMERIC as a float, so there the value is kept as decimal text.
    Values are quantized to cents on the way in.
    """
    impl = Numeric(AMOUNT_MAX_DIGITS, AMOUNT_DECIMAL_PLACES)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(AMOUNT_MAX_DIGITS + 2))
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = Decimal(value).quantize(_CENT)
        return str(amount) if dialect.name == "sqlite" else amount

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).quantize(_CENT)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class CompanyRecord(Base):
    """Persisted company (empresa). The CUIT is the primary key."""
    __tablename__ = "empresas"

    tax_id: Mapped[str] = mapped_column("cuit", String(TAX_ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column("nombre", String(NAME_MAX_LENGTH))
    category: Mapped[str] = mapped_column("tipo", String(16), index=True)
    joined_at: Mapped[datetime] = mapped_column(
        "fecha_adhesion",
        DateTime(timezone=True),
        index=True,
    )


class TransferRecord(Base):
    """Persisted transfer (transferencia)."""
    __tablename__ = "transferencias"

    id: Mapped[str] = mapped_column("id_transferencia", String(36), primary_key=True)
    company_tax_id: Mapped[str] = mapped_column(
        "cuit_empresa",
        String(TAX_ID_LENGTH),
        ForeignKey("empresas.cuit", ondelete="CASCADE"),
        index=True,
    )
    occurred_at: Mapped[datetime] = mapped_column(
        "fecha_transferencia",
        DateTime(timezone=True),
        index=True,
    )
    amount: Mapped[Decimal | None] = mapped_column("monto", Money())


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores foreign keys unless enabled per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Process-wide database handle.

    Created once by the application lifespan and passed to whoever needs
    it. The engine is built lazily on first use and disposed by close().

    Usage:
        database = Database(settings)
        await database.init()
        async with database.session() as session:
            ...
        await database.close()
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the async database engine."""
        if self._engine is None:
            options: dict = {"echo": self.settings.database_echo}
            if self.settings.is_sqlite:
                engine = create_async_engine(self.settings.database_url, **options)
                event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            else:
                engine = create_async_engine(
                    self.settings.database_url,
                    pool_size=self.settings.database_pool_size,
                    max_overflow=self.settings.database_max_overflow,
                    pool_timeout=self.settings.database_pool_timeout,
                    pool_pre_ping=True,
                    **options,
                )
            self._engine = engine
            logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get the session factory for creating database sessions."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session for a request.

        Usage:
            async with database.session() as session:
                session.add(record)
                await session.commit()
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def init(self) -> None:
        """
        Initialize database tables.

        Call this on application startup to ensure tables exist.
        In production, use Alembic migrations instead.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized")

    async def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True

    async def close(self) -> None:
        """Close database connections on shutdown."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
        logger.info("Database connections closed")
