from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ContextManager, Iterator, Optional, Protocol

import mysql.connector
from mysql.connector import errorcode, errors

from ..core.exceptions import ConflictError, UnavailableError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


@dataclass
class Transaction:
    """One open connection + cursor shared by every write of a unit of work."""

    conn: Any
    cur: Any


class TransactionManager(Protocol):
    def transaction(self) -> ContextManager[Transaction]:
        raise NotImplementedError


@contextmanager
def translate_errors() -> Iterator[None]:
    """Map driver errors onto the engine's error taxonomy."""
    try:
        yield
    except errors.Error as exc:
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError("Record already exists") from exc
        # Two writers racing on the same unique key: InnoDB aborts one of them.
        if exc.errno == errorcode.ER_LOCK_DEADLOCK:
            raise ConflictError("Record was changed concurrently") from exc
        if isinstance(exc, (errors.OperationalError, errors.InterfaceError)):
            raise UnavailableError("Database is unavailable") from exc
        raise


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Opened once at process start and shared by all repositories. Every
    operation gets its own short-lived connection; multi-write operations
    share one through ``transaction()``.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        with translate_errors():
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                autocommit=False,
            )

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        conn = self.connect()
        try:
            cur = conn.cursor(dictionary=True)
            try:
                with translate_errors():
                    yield Transaction(conn=conn, cur=cur)
                    conn.commit()
            finally:
                cur.close()
        except Exception:
            try:
                conn.rollback()
            except errors.Error:
                logger.warning("Rollback failed on a broken connection", exc_info=True)
            raise
        finally:
            conn.close()
