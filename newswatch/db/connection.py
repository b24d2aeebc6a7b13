"""Database connection management."""

import os
import threading
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.dsn = config.get("dsn")
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "newswatch")
        self.user = config.get("user", "newswatch")
        self.pool_max_size = config.get("pool_max_size", 10)

        # Handle password from environment variable if specified
        password_env = config.get("password_env")
        if password_env and not config.get("password"):
            self.password = os.environ.get(password_env, "")
        else:
            self.password = config.get("password") or ""

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        if self.dsn:
            return self.dsn
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


_connection_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create connection pool."""
    global _connection_pool
    # API worker threads and crawl worker threads may race on first use
    with _pool_lock:
        if _connection_pool is None:
            db_config = DatabaseConfig(config)
            _connection_pool = ConnectionPool(
                db_config.connection_string,
                min_size=1,
                max_size=db_config.pool_max_size,
                kwargs={"row_factory": dict_row},
                open=True,
            )
        return _connection_pool


def close_connection_pool() -> None:
    """Close the shared pool, if one was opened."""
    global _connection_pool
    with _pool_lock:
        if _connection_pool is not None:
            _connection_pool.close()
            _connection_pool = None


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """Get a database connection from the pool.

    The transaction commits when the block exits normally and rolls back when
    it raises.
    """
    pool = get_connection_pool(config)
    with pool.connection() as conn:
        yield conn
