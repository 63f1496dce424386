"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

SCHEMA_SQL = """
-- Sequences for auto-increment IDs
CREATE SEQUENCE IF NOT EXISTS trade_seq START 1;

-- Market snapshots (one row per named market, replaced on every state change)
CREATE TABLE IF NOT EXISTS markets (
    name            VARCHAR PRIMARY KEY,
    outcomes        JSON NOT NULL,
    shares          JSON NOT NULL,
    liquidity       DOUBLE NOT NULL,
    resolved        VARCHAR,
    market_volume   DOUBLE NOT NULL,
    created_at      BIGINT NOT NULL,
    updated_at      BIGINT NOT NULL
);

-- Trade ledger (append-only)
CREATE TABLE IF NOT EXISTS trades (
    id              BIGINT PRIMARY KEY DEFAULT nextval('trade_seq'),
    market_name     VARCHAR NOT NULL,
    side            VARCHAR NOT NULL,
    outcome         VARCHAR NOT NULL,
    amount          BIGINT NOT NULL,
    value           DOUBLE NOT NULL,
    created_at      BIGINT NOT NULL
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager."""
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables and sequences if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise
