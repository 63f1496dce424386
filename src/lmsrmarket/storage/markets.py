"""Market snapshot persistence."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

from lmsrmarket.market.lmsr import LmsrMarket
from lmsrmarket.market.outcomes import OutcomeSet
from lmsrmarket.market.snapshot import restore_market, snapshot_market
from lmsrmarket.models import MarketSnapshot
from lmsrmarket.storage.trades import clear_trades

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_COLUMNS = ["name", "outcomes", "shares", "liquidity", "resolved", "market_volume", "created_at", "updated_at"]


def save_market(conn: DuckDBPyConnection, name: str, market: LmsrMarket[Any]) -> None:
    """Insert or replace the snapshot of a named market. Outcomes are stored by label."""
    snap = snapshot_market(market)
    now_ms = int(time.time() * 1000)
    conn.execute(
        """
        INSERT INTO markets (name, outcomes, shares, liquidity, resolved, market_volume, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT (name) DO UPDATE SET
            outcomes = excluded.outcomes,
            shares = excluded.shares,
            liquidity = excluded.liquidity,
            resolved = excluded.resolved,
            market_volume = excluded.market_volume,
            updated_at = excluded.updated_at
        """,
        [
            name,
            json.dumps(market.outcomes.labels),
            json.dumps(snap.shares),
            snap.liquidity,
            snap.resolved,
            snap.market_volume,
            now_ms,
            now_ms,
        ],
    )


def load_market(conn: DuckDBPyConnection, name: str) -> LmsrMarket[str] | None:
    """Load a named market, or None if it does not exist. Outcomes come back as their string labels."""
    row = conn.execute(
        "SELECT outcomes, shares, liquidity, resolved, market_volume FROM markets WHERE name = ?",
        [name],
    ).fetchone()
    if not row:
        return None
    snap = MarketSnapshot(
        shares=json.loads(row[1]),
        liquidity=row[2],
        resolved=row[3],
        market_volume=row[4],
    )
    return restore_market(snap, OutcomeSet(json.loads(row[0])))


def market_exists(conn: DuckDBPyConnection, name: str) -> bool:
    row = conn.execute("SELECT COUNT(*) FROM markets WHERE name = ?", [name]).fetchone()
    return bool(row and row[0])


def list_markets(conn: DuckDBPyConnection) -> list[dict]:
    """List stored markets as list of dicts, oldest first."""
    rows = conn.execute(
        f"SELECT {', '.join(_COLUMNS)} FROM markets ORDER BY created_at, name"
    ).fetchall()
    result = []
    for r in rows:
        d = dict(zip(_COLUMNS, r))
        d["outcomes"] = json.loads(d["outcomes"])
        d["shares"] = json.loads(d["shares"])
        result.append(d)
    return result


def delete_market(conn: DuckDBPyConnection, name: str) -> bool:
    """Delete a market and its trades. Returns False if it did not exist."""
    if not market_exists(conn, name):
        return False
    clear_trades(conn, name)
    conn.execute("DELETE FROM markets WHERE name = ?", [name])
    return True
