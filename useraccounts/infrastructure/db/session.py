# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from useraccounts.shared.config.settings import DatabaseConfig
from useraccounts.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def _create_engine(config: DatabaseConfig) -> Engine:
    if config.url.startswith("sqlite"):
        connect_args: dict[str, object] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        if _is_memory_sqlite(config.url):
            # One shared connection, otherwise every checkout sees an empty database
            return create_engine(
                config.url,
                echo=False,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        return create_engine(config.url, echo=False, connect_args=connect_args)

    return create_engine(
        config.url,
        echo=False,
        pool_pre_ping=True,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
    )


class Database:
    """Owns the engine and session factory for the process lifetime."""

    def __init__(self, config: DatabaseConfig) -> None:
        self._url = config.url
        self.engine: Engine = _create_engine(config)
        if config.url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
        self.session_factory = scoped_session(
            sessionmaker(
                bind=self.engine,
                autoflush=False,
                autocommit=False,
                expire_on_commit=False,
            )
        )

    def create_all(self) -> None:
        # Models register themselves on Base.metadata when imported
        from useraccounts.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.session_factory.remove()
        self.engine.dispose()
        logger.info("db: engine disposed")


def _set_sqlite_pragmas(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA busy_timeout=30000;")
    finally:
        cur.close()


def init_db(database: Database) -> None:
    database.create_all()
