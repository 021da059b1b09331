"""Database engine, sessions and migrations."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import AsyncGenerator
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import create_engine, inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from iiifdims.config import config


logger = logging.getLogger(__name__)

_LOCK_TIMEOUT_SECONDS = 30.0
_LOCK_RETRY_INTERVAL = 0.1

_ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgresql": "postgresql+asyncpg",
}


def to_async_url(url: str) -> str:
    """Swap a plain database URL onto its async driver."""
    scheme, sep, rest = url.partition(":")
    if not sep or "+" in scheme:
        return url
    driver = _ASYNC_DRIVERS.get(scheme)
    if driver is None:
        return url
    return f"{driver}:{rest}"


def to_sync_url(url: str) -> str:
    """Swap an async database URL back onto the default sync driver."""
    scheme, sep, rest = url.partition(":")
    if sep and "+" in scheme:
        base = scheme.split("+", 1)[0]
        if base in _ASYNC_DRIVERS:
            url = f"{base}:{rest}"

    if url.startswith("sqlite:///"):
        db_path = Path(url.replace("sqlite:///", "", 1)).expanduser().resolve()
        return f"sqlite:///{db_path}"

    return url


engine = create_async_engine(to_async_url(config.DATABASE_URL), echo=config.DEBUG)
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Get database session."""
    async with AsyncSessionLocal() as session:
        yield session


def _alembic_config(sync_url: str) -> AlembicConfig:
    package_dir = Path(__file__).resolve().parent
    alembic_cfg = AlembicConfig()
    alembic_cfg.set_main_option("script_location", str(package_dir / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", sync_url)
    return alembic_cfg


async def init_db() -> None:
    """Bring the schema up to the latest Alembic revision."""

    def _run_upgrade() -> None:
        sync_url = to_sync_url(config.DATABASE_URL)
        alembic_cfg = _alembic_config(sync_url)
        config.ensure_state_dir()
        lock_path = config.STATE_DIR / ".migrations.lock"

        lock_fd = _acquire_lock(lock_path)
        try:
            sync_engine = create_engine(sync_url)
            try:
                with sync_engine.connect() as connection:
                    inspector = inspect(connection)
                    has_version_table = inspector.has_table("alembic_version")
                    existing_tables = [
                        name
                        for name in inspector.get_table_names()
                        if name != "alembic_version"
                    ]
            finally:
                sync_engine.dispose()

            if not has_version_table and existing_tables:
                logger.info("Stamping existing database with current Alembic head")
                command.stamp(alembic_cfg, "head")
            else:
                command.upgrade(alembic_cfg, "head")
        finally:
            _release_lock(lock_fd, lock_path)

    await asyncio.to_thread(_run_upgrade)


def _acquire_lock(lock_path: Path) -> int:
    """Take an exclusive lock file, waiting up to the lock timeout."""

    deadline = time.monotonic() + _LOCK_TIMEOUT_SECONDS
    while True:
        try:
            return os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
        except FileExistsError:
            if time.monotonic() > deadline:
                logger.error("Timed out waiting for migration lock %s", lock_path)
                raise TimeoutError("Timed out waiting for migration lock")
            time.sleep(_LOCK_RETRY_INTERVAL)


def _release_lock(fd: int, lock_path: Path) -> None:
    os.close(fd)
    try:
        lock_path.unlink()
    except FileNotFoundError:
        pass
