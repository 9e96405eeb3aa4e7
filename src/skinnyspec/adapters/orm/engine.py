"""Database engine factory and helpers.

This module centralizes creation of SQLAlchemy Engines for the bundled
ActiveRecord models and applies backend-specific tuning:

- **SQLite**: adds connection PRAGMAs to enforce foreign keys and tune
  durability/temporary storage.
- **Other backends**: no tuning applied here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}

#: Shared metadata with a naming convention so constraint names are stable.
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite.

    Args:
        url: A database URL string or SQLAlchemy :class:`URL`.

    Returns:
        bool: True if the backend is SQLite, otherwise False.
    """
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    If the backend is SQLite, applies PRAGMAs suited to test databases:
        - ``foreign_keys=ON`` (enforce referential integrity)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``temp_store=MEMORY`` (reduce temp file I/O)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    engine = create_engine(url, echo=echo)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.close()

    return engine
