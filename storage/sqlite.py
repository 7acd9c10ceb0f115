"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from config.settings import settings

from .migrate import apply_schema


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection on ``settings.DB_PATH``.

    The data directory and schema are created on demand, so a fresh
    deployment needs no separate migration step. Rows come back as
    :class:`sqlite3.Row`.
    """

    directory = os.path.dirname(settings.DB_PATH) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(settings.DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        apply_schema(conn)
        yield conn
        conn.commit()
    finally:
        conn.close()
